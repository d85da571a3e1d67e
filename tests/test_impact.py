"""Tests for impact projection and reports."""

import pytest

from citybudget.core.contracts import Zone
from citybudget.core.exceptions import InputValidationError, ZeroCostError
from citybudget.core.stores import BudgetStore
from citybudget.ingestion import default_budget
from citybudget.simulation import (
    budget_summary,
    format_budget_summary,
    format_projection,
    impact_options,
    impact_schedule,
    project_impact,
    project_zone_impact,
    simulate_impact,
    top_impact_categories,
    zone_summary,
)
from citybudget.simulation.impact import INVALID_BUDGET_MSG, INVALID_YEARS_MSG


class TestProjectImpact:
    """Test the linear projection."""

    def test_central_park_environment(self, central_park):
        """Double the zone cost for three years: 10 per year, 30 total."""
        projection = project_zone_impact(central_park, "Environment", 100, 3)

        assert projection.yearly_impact == pytest.approx(10.0)
        assert projection.total_impact == pytest.approx(30.0)
        assert projection.effect == "positive"

    def test_negative_impact(self):
        yearly, total = project_impact(-2, 75, 150, 4)

        assert yearly == pytest.approx(-1.0)
        assert total == pytest.approx(-4.0)

    def test_zero_years(self):
        assert project_impact(5, 100, 50, 0) == (10.0, 0.0)

    def test_zero_cost_raises(self):
        zone = Zone(name="Free Lot", type="Park", cost=0, impacts={"Environment": 1})

        with pytest.raises(ZeroCostError) as exc:
            project_zone_impact(zone, "Environment", 100, 3)

        assert "Free Lot" in str(exc.value)
        assert exc.value.code == "ZERO_COST"

    def test_unknown_impact_is_zero(self, central_park):
        projection = project_zone_impact(central_park, "Traffic", 100, 3)

        assert projection.base_impact == 0
        assert projection.total_impact == 0
        assert projection.effect == "none"


class TestSimulateImpact:
    """Test form-field validation."""

    def test_parses_text(self, central_park):
        projection = simulate_impact(central_park, "Environment", " 100 ", "3")

        assert projection.proposed_budget == pytest.approx(100)
        assert projection.years == 3

    @pytest.mark.parametrize("budget_text", ["", "abc", "nan", "inf"])
    def test_invalid_budget(self, central_park, budget_text):
        with pytest.raises(InputValidationError) as exc:
            simulate_impact(central_park, "Environment", budget_text, "3")

        assert str(exc.value) == INVALID_BUDGET_MSG

    @pytest.mark.parametrize("years_text", ["", "two", "2.5", "-1"])
    def test_invalid_years(self, central_park, years_text):
        with pytest.raises(InputValidationError) as exc:
            simulate_impact(central_park, "Environment", "100", years_text)

        assert str(exc.value) == INVALID_YEARS_MSG

    def test_format_projection(self, central_park):
        text = format_projection(project_zone_impact(central_park, "Environment", 100, 3))

        assert text.splitlines() == [
            "Simulation Results:",
            "",
            "Base Impact: 5.0",
            "Yearly Impact: 10.0",
            "Total Impact over 3 years: 30.0",
            "",
            "This investment will have a positive effect on Environment",
        ]

    def test_schedule(self, central_park):
        schedule = impact_schedule(project_zone_impact(central_park, "Environment", 100, 3))

        assert list(schedule["year"]) == [1, 2, 3]
        assert list(schedule["cumulative_impact"]) == pytest.approx([10.0, 20.0, 30.0])


class TestReports:
    """Test budget and zone panel text."""

    def test_budget_text(self):
        text = format_budget_summary(BudgetStore(default_budget()))
        lines = text.splitlines()

        assert lines[0] == "San Jose City Budget"
        assert lines[2] == "Total: $2,200 million"
        assert "Public Safety" not in text
        assert "Safety: $500 million" in lines

    def test_budget_summary_frame(self):
        frame = budget_summary(BudgetStore(default_budget()))

        assert list(frame["category"])[:2] == ["Safety", "Recreation"]
        assert frame["remaining"].sum() == pytest.approx(2200 - 2020)

    def test_empty_budget_summary(self):
        assert budget_summary(BudgetStore()).empty

    def test_zone_summary(self, central_park):
        assert zone_summary(None) == "No zone selected"
        assert zone_summary(central_park).splitlines() == [
            "Selected: Central Park",
            "Type: Park",
            "Cost: $50 million",
            "",
            "Impacts:",
            "Environment: 5.0",
            "Recreation: 4.0",
        ]

    def test_top_impact_categories(self, zones):
        """Economy 9, Jobs 5, then Housing ahead of Recreation on a tie."""
        assert top_impact_categories(zones, 3) == ["Economy", "Jobs", "Housing"]

    def test_impact_options(self, zones, central_park):
        assert impact_options(central_park, zones) == ["Environment", "Recreation"]
        assert impact_options(central_park, zones, city_wide=True, n=1) == ["Economy"]
