"""Tests for the zone and budget CSV loaders and writers."""

import pytest

from citybudget.core.exceptions import DataValidationError
from citybudget.core.contracts import Zone
from citybudget.ingestion import (
    BudgetLoader,
    ZoneLoader,
    default_zones,
    load_budget,
    load_zones,
    parse_zone_row,
    save_budget,
    save_zones,
)
from citybudget.ingestion.loaders import ZONE_HEADER, format_number

ZONE_CSV_HEADER = ",".join(ZONE_HEADER)


def _zone_key(zone: Zone):
    return (zone.name, zone.position, zone.type, zone.cost, tuple(zone.top_impacts(3)))


class TestParseZoneRow:
    """Test single-row zone parsing."""

    def test_full_row(self):
        """Name, position, type, cost and every impact pair are read."""
        zone = parse_zone_row("A,1,2,Park,10,Env,5,Rec,3")

        assert zone.name == "A"
        assert zone.position == (1.0, 2.0)
        assert zone.type == "Park"
        assert zone.cost == pytest.approx(10)
        assert zone.impacts == {"Env": 5.0, "Rec": 3.0}

    def test_blank_pairs_ignored(self):
        """Padding pairs left empty by the writer are not impacts."""
        zone = parse_zone_row("A,1,2,Park,10,Env,5,,,,")

        assert zone.impacts == {"Env": 5.0}

    def test_dangling_impact_name_ignored(self):
        zone = parse_zone_row("A,1,2,Park,10,Env,5,Rec")

        assert zone.impacts == {"Env": 5.0}

    def test_whitespace_trimmed(self):
        zone = parse_zone_row(" A , 1 , 2 , Park , 10 , Env , 5 ")

        assert zone.name == "A"
        assert zone.type == "Park"
        assert zone.impacts == {"Env": 5.0}

    def test_non_numeric_position_raises(self):
        with pytest.raises(DataValidationError) as exc:
            parse_zone_row("A,x,2,Park,10,Env,5", line=7)

        assert exc.value.line == 7
        assert exc.value.field == "X"

    def test_too_few_tokens_raises(self):
        with pytest.raises(DataValidationError):
            parse_zone_row("A,1,2,Park,10")


class TestZoneLoader:
    """Test loading whole zone files."""

    def test_header_skipped_and_short_rows_dropped(self):
        """Rows with fewer than six tokens are skipped silently."""
        result = ZoneLoader().parse_lines([
            ZONE_CSV_HEADER,
            "A,1,2,Park,10,Env,5",
            "B,1,2,Park,10",
            "",
            "C,3,4,Residential,20,Housing,2",
        ])

        assert [z.name for z in result.records] == ["A", "C"]
        assert result.ok

    def test_malformed_row_recorded_and_skipped(self):
        """One bad row does not lose the rest of the file."""
        result = ZoneLoader().parse_lines([
            ZONE_CSV_HEADER,
            "A,1,2,Park,10,Env,5",
            "B,oops,2,Park,10,Env,5",
            "C,3,4,Residential,20,Housing,x",
            "D,5,6,Commercial,30,Economy,1",
        ])

        assert [z.name for z in result.records] == ["A", "D"]
        assert [e.line for e in result.errors] == [3, 4]
        assert result.errors[0].text == "B,oops,2,Park,10,Env,5"
        assert not result.ok

    def test_strict_mode_raises(self):
        loader = ZoneLoader(strict=True)

        with pytest.raises(DataValidationError):
            loader.parse_lines([ZONE_CSV_HEADER, "B,oops,2,Park,10,Env,5"])

    def test_strict_mode_wraps_model_errors(self):
        """A blank name fails model validation; strict mode reports it as a data error."""
        loader = ZoneLoader(strict=True)

        with pytest.raises(DataValidationError) as exc:
            loader.parse_lines([ZONE_CSV_HEADER, " ,1,2,Park,10,Env,5"])

        assert exc.value.line == 2

    def test_missing_file_uses_defaults(self, tmp_path):
        result = load_zones(tmp_path / "missing.csv")

        assert result.used_default
        assert [z.name for z in result.records] == [
            "Downtown", "Residential District", "Central Park", "Industrial Area",
        ]

    def test_header_only_file_is_empty(self, tmp_path):
        path = tmp_path / "zones.csv"
        path.write_text(ZONE_CSV_HEADER + "\n")

        result = load_zones(path)

        assert result.records == []
        assert not result.used_default

    def test_byte_order_mark_stripped(self, tmp_path):
        path = tmp_path / "zones.csv"
        path.write_text(ZONE_CSV_HEADER + "\nA,1,2,Park,10,Env,5\n", encoding="utf-8-sig")

        result = load_zones(path)

        assert [z.name for z in result.records] == ["A"]


class TestBudgetLoader:
    """Test loading budget files."""

    def test_parse_rows(self):
        result = BudgetLoader().parse_lines([
            "Name,Allocated,Spent,Category",
            "Public Safety,500,450,Safety",
            "Parks,200",
            "Education,450,430,Education",
        ])

        assert [b.name for b in result.records] == ["Public Safety", "Education"]
        assert result.records[0].allocated == pytest.approx(500)
        assert result.records[0].remaining == pytest.approx(50)

    def test_missing_file_uses_defaults(self, tmp_path):
        result = load_budget(tmp_path / "missing.csv")

        assert result.used_default
        assert len(result.records) == 6
        assert sum(b.allocated for b in result.records) == pytest.approx(2200)


class TestSave:
    """Test the save format."""

    def test_round_trip_keeps_first_three_impacts(self, tmp_path):
        zones = default_zones() + [
            Zone(
                name="Mixed Use",
                position=(12.5, -40),
                type="Commercial",
                cost=75,
                impacts={"Economy": 2, "Housing": 1.5, "Traffic": -1, "Jobs": 3},
            )
        ]
        path = save_zones(zones, tmp_path / "out" / "zones.csv")

        reloaded = load_zones(path)

        assert reloaded.ok
        assert {_zone_key(z) for z in reloaded.records} == {_zone_key(z) for z in zones}
        assert "Jobs" not in reloaded.records[-1].impacts

    def test_blank_padding(self, tmp_path):
        """Zones with fewer than three impacts are padded with empty fields."""
        path = save_zones(
            [Zone(name="A", position=(1, 2), type="Park", cost=10, impacts={"Env": 5})],
            tmp_path / "zones.csv",
        )

        lines = path.read_text().splitlines()

        assert lines[0] == ZONE_CSV_HEADER
        assert lines[1] == "A,1,2,Park,10,Env,5,,,,"

    def test_comma_in_name_refused(self, tmp_path):
        with pytest.raises(DataValidationError):
            save_zones([Zone(name="Smith, Jones", cost=1)], tmp_path / "zones.csv")

    @pytest.mark.parametrize("name", ['The "Hub"', "Two\nLines", "Carriage\rReturn"])
    def test_unreadable_characters_refused(self, tmp_path, name):
        """Quotes and line breaks would not survive a reload, so saving fails."""
        path = tmp_path / "zones.csv"

        with pytest.raises(DataValidationError) as exc:
            save_zones([Zone(name=name, position=(1, 2), type="Park", cost=10)], path)

        assert exc.value.field == "Name"
        assert not path.exists()

    def test_quote_in_type_refused(self, tmp_path):
        with pytest.raises(DataValidationError):
            save_zones([Zone(name="A", type='Park "B"', cost=1)], tmp_path / "zones.csv")

    def test_budget_round_trip(self, tmp_path):
        items = load_budget(tmp_path / "missing.csv").records
        path = save_budget(items, tmp_path / "budget.csv")

        reloaded = load_budget(path)

        assert [(b.name, b.allocated, b.spent, b.category) for b in reloaded.records] == [
            (b.name, b.allocated, b.spent, b.category) for b in items
        ]

    @pytest.mark.parametrize("value, text", [(10.0, "10"), (-3, "-3"), (2.5, "2.5")])
    def test_format_number(self, value, text):
        assert format_number(value) == text
