"""
CSV loaders and writers for zone and budget data.

Both formats are line oriented: one record per line, tokens separated by
commas, first line a header.  Parsing is per row: a malformed row is
recorded as a :class:`RowError` and skipped, so one bad line does not
throw away the rest of the file.  Pass ``strict=True`` to fail the whole
file on the first bad row instead.

A missing file is not an error: the loader logs a warning and returns
the built-in default dataset.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pandas as pd
from loguru import logger
from pydantic import ValidationError

from citybudget.core.contracts import BudgetItem, Zone
from citybudget.core.exceptions import DataValidationError
from citybudget.ingestion.defaults import default_budget, default_zones

ZONE_HEADER = [
    "Name", "X", "Y", "Type", "Cost",
    "Impact1", "Value1", "Impact2", "Value2", "Impact3", "Value3",
]
BUDGET_HEADER = ["Name", "Allocated", "Spent", "Category"]

MAX_SAVED_IMPACTS = 3


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass
class RowError:
    """A row that could not be turned into a record."""

    line: int
    text: str
    message: str


@dataclass
class LoadResult:
    """
    Outcome of loading one CSV file.

    ``records`` holds every row that parsed; ``errors`` every row that
    did not.  ``used_default`` is set when the file was missing and the
    built-in dataset was substituted.
    """

    records: list[Any] = field(default_factory=list)
    errors: list[RowError] = field(default_factory=list)
    source: Path | None = None
    used_default: bool = False

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        return {
            "source": str(self.source) if self.source else None,
            "records": len(self.records),
            "errors": [e.__dict__ for e in self.errors],
            "used_default": self.used_default,
        }


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------

def _parse_float(token: str, field_name: str, line: int) -> float:
    try:
        value = float(token)
    except ValueError:
        raise DataValidationError(
            f"Line {line}: {field_name} is not a number: {token.strip()!r}",
            field=field_name,
            line=line,
        ) from None
    if not math.isfinite(value):
        raise DataValidationError(
            f"Line {line}: {field_name} must be finite, got {token.strip()!r}",
            field=field_name,
            line=line,
        )
    return value


def format_number(value: float) -> str:
    """Shortest text for a number: ``10`` rather than ``10.0``."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


# ---------------------------------------------------------------------------
# Loaders
# ---------------------------------------------------------------------------

class BaseCSVLoader(ABC):
    """
    Shared line-oriented CSV loading.

    Subclasses define the minimum token count, how one row of tokens
    becomes a record, and the dataset to fall back to.
    """

    min_tokens: int = 1
    kind: str = "records"

    def __init__(self, strict: bool = False):
        self.strict = strict

    @abstractmethod
    def parse_tokens(self, tokens: list[str], line: int) -> Any:
        """Turn the tokens of one data row into a record."""
        ...

    @abstractmethod
    def defaults(self) -> list[Any]:
        """Dataset used when the source file is missing."""
        ...

    def parse_lines(self, lines: Iterable[str]) -> LoadResult:
        """Parse CSV text lines; the first line is the header and is skipped."""
        result = LoadResult()
        for line_no, raw in enumerate(lines, start=1):
            if line_no == 1 or not raw.strip():
                continue
            tokens = raw.split(",")
            if len(tokens) < self.min_tokens:
                logger.debug(f"Line {line_no}: {len(tokens)} tokens, need {self.min_tokens}; skipped")
                continue
            try:
                result.records.append(self.parse_tokens(tokens, line_no))
            except (DataValidationError, ValidationError) as e:
                if self.strict:
                    if isinstance(e, DataValidationError):
                        raise
                    raise DataValidationError(f"Line {line_no}: {e}", line=line_no) from e
                logger.warning(f"Skipping malformed {self.kind} row: {e}")
                result.errors.append(RowError(line=line_no, text=raw.rstrip("\r\n"), message=str(e)))
        return result

    def load(self, source: str | Path) -> LoadResult:
        """Load *source*, or the default dataset when it does not exist."""
        path = Path(source)
        if not path.exists():
            logger.warning(f"{self.kind.capitalize()} file not found: {path}. Using default data.")
            return LoadResult(records=self.defaults(), source=path, used_default=True)

        logger.info(f"Loading {self.kind} from {path}")
        try:
            text = path.read_text(encoding="utf-8-sig")
        except OSError as e:
            logger.error(f"Error reading {path}: {e}. Using default data.")
            return LoadResult(records=self.defaults(), source=path, used_default=True)

        result = self.parse_lines(text.splitlines())
        result.source = path
        logger.info(
            f"Loaded {len(result.records)} {self.kind} from {path}"
            + (f" ({len(result.errors)} rows skipped)" if result.errors else "")
        )
        return result


class ZoneLoader(BaseCSVLoader):
    """``Name,X,Y,Type,Cost`` followed by repeated impact name/value pairs."""

    min_tokens = 6
    kind = "zones"

    def parse_tokens(self, tokens: list[str], line: int) -> Zone:
        impacts: dict[str, float] = {}
        # pairs start at token 5 and run while both halves are present
        for j in range(5, len(tokens) - 1, 2):
            name, value = tokens[j].strip(), tokens[j + 1].strip()
            if name and value:
                impacts[name] = _parse_float(value, f"impact '{name}'", line)

        return Zone(
            name=tokens[0],
            position=(
                _parse_float(tokens[1], "X", line),
                _parse_float(tokens[2], "Y", line),
            ),
            type=tokens[3],
            cost=_parse_float(tokens[4], "Cost", line),
            impacts=impacts,
        )

    def defaults(self) -> list[Zone]:
        return default_zones()


class BudgetLoader(BaseCSVLoader):
    """``Name,Allocated,Spent,Category``."""

    min_tokens = 4
    kind = "budget items"

    def parse_tokens(self, tokens: list[str], line: int) -> BudgetItem:
        return BudgetItem(
            name=tokens[0],
            allocated=_parse_float(tokens[1], "Allocated", line),
            spent=_parse_float(tokens[2], "Spent", line),
            category=tokens[3],
        )

    def defaults(self) -> list[BudgetItem]:
        return default_budget()


# ---------------------------------------------------------------------------
# Writers
# ---------------------------------------------------------------------------

def zones_to_frame(zones: Iterable[Zone]) -> pd.DataFrame:
    """
    Zones in save format: first three impacts, blank-padded.

    Every cell is text so that numbers keep their shortest form and
    missing impacts stay empty rather than becoming NaN.
    """
    records = []
    for zone in zones:
        record = {
            "Name": zone.name,
            "X": format_number(zone.x),
            "Y": format_number(zone.y),
            "Type": zone.type,
            "Cost": format_number(zone.cost),
        }
        pairs = zone.top_impacts(MAX_SAVED_IMPACTS)
        for i in range(MAX_SAVED_IMPACTS):
            name, value = pairs[i] if i < len(pairs) else ("", None)
            record[f"Impact{i + 1}"] = name
            record[f"Value{i + 1}"] = format_number(value) if value is not None else ""
        records.append(record)
    return pd.DataFrame(records, columns=ZONE_HEADER, dtype=str)


def budget_to_frame(items: Iterable[BudgetItem]) -> pd.DataFrame:
    records = [
        {
            "Name": item.name,
            "Allocated": format_number(item.allocated),
            "Spent": format_number(item.spent),
            "Category": item.category,
        }
        for item in items
    ]
    return pd.DataFrame(records, columns=BUDGET_HEADER, dtype=str)


# characters the line-oriented reader cannot read back
UNSAVEABLE_CHARS = {",": "a comma", '"': "a double quote", "\n": "a line break", "\r": "a line break"}


def _check_saveable(frame: pd.DataFrame, kind: str) -> None:
    for col in frame.columns:
        values = frame[col].astype(str)
        for char, label in UNSAVEABLE_CHARS.items():
            bad = values.str.contains(char, regex=False)
            if bad.any():
                value = values[bad].iloc[0]
                raise DataValidationError(
                    f"Cannot save {kind}: {col} value {value!r} contains {label}", field=col
                )


def _write_frame(frame: pd.DataFrame, dest: str | Path, kind: str) -> Path:
    _check_saveable(frame, kind)
    path = Path(dest)
    path.parent.mkdir(parents=True, exist_ok=True)
    frame.to_csv(path, index=False, lineterminator="\n")
    logger.info(f"Saved {len(frame)} {kind} to {path}")
    return path


def save_zones(zones: Iterable[Zone], dest: str | Path) -> Path:
    """Write zones in the zone CSV schema (at most three impacts each)."""
    return _write_frame(zones_to_frame(zones), dest, "zones")


def save_budget(items: Iterable[BudgetItem], dest: str | Path) -> Path:
    return _write_frame(budget_to_frame(items), dest, "budget items")


# =============================================================================
# Convenience Functions
# =============================================================================

def load_zones(source: str | Path, strict: bool = False) -> LoadResult:
    return ZoneLoader(strict=strict).load(source)


def load_budget(source: str | Path, strict: bool = False) -> LoadResult:
    return BudgetLoader(strict=strict).load(source)


def parse_zone_row(row: str, line: int = 2) -> Zone:
    """Parse a single zone data row (no header)."""
    tokens = row.split(",")
    if len(tokens) < ZoneLoader.min_tokens:
        raise DataValidationError(
            f"Line {line}: zone rows need at least {ZoneLoader.min_tokens} tokens", line=line
        )
    return ZoneLoader().parse_tokens(tokens, line)
