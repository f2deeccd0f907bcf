"""Spreadsheet cell, row and sheet values as seen by the importer."""

import math
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any, Iterable, Iterator, List, Optional, Sequence, Tuple

DATE_TYPES = (datetime, date, time, timedelta)

# Day 0 of the 1900 date system; serials from 60 on skip the phantom 1900-02-29
EXCEL_EPOCH = datetime(1899, 12, 31)
EXCEL_LEAP_BUG_EPOCH = datetime(1899, 12, 30)


class CellKind(str, Enum):
    """Native kind of a spreadsheet cell."""

    BOOLEAN = "boolean"
    NUMERIC = "numeric"
    TEXT = "text"


@dataclass(frozen=True)
class CellValue:
    """
    Raw value of one cell, tagged with its kind.

    Date-formatted numeric cells carry the decoded date/time as value and
    ``is_date=True``.
    """

    kind: CellKind
    value: Any
    is_date: bool = False

    @classmethod
    def of(cls, value: Any) -> Optional["CellValue"]:
        """
        Build a CellValue from a plain Python value.

        Args:
            value: bool, number, date/time or anything else (text)

        Returns:
            CellValue, or None for a missing cell (value is None)
        """
        if value is None:
            return None
        if isinstance(value, CellValue):
            return value
        # bool first: it is an int subclass
        if isinstance(value, bool):
            return cls(CellKind.BOOLEAN, value)
        if isinstance(value, DATE_TYPES):
            return cls(CellKind.NUMERIC, value, is_date=True)
        if isinstance(value, (int, float)):
            return cls(CellKind.NUMERIC, value)
        return cls(CellKind.TEXT, str(value))

    @property
    def text(self) -> str:
        """Cell content as trimmed text."""
        if self.kind == CellKind.TEXT:
            return str(self.value).strip()
        if self.kind == CellKind.BOOLEAN:
            return "true" if self.value else "false"
        if self.is_date:
            formatted = format_date(self.value)
            return formatted if formatted is not None else str(self.value)
        return format_number(self.value) or str(self.value)


def format_date(value: Any) -> Optional[str]:
    """Format a date cell value as ``YYYY-MM-DD HH:MM``, None if impossible."""
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M")
    if isinstance(value, date):
        return datetime.combine(value, time.min).strftime("%Y-%m-%d %H:%M")
    if isinstance(value, time):
        return datetime.combine(EXCEL_EPOCH.date(), value).strftime("%Y-%m-%d %H:%M")
    if isinstance(value, timedelta):
        epoch = EXCEL_LEAP_BUG_EPOCH if value >= timedelta(days=60) else EXCEL_EPOCH
        return (epoch + value).strftime("%Y-%m-%d %H:%M")
    return None


def format_number(value: Any) -> Optional[str]:
    """Format a numeric cell value as SQL literal text, None if not finite."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return repr(value)
    return None


@dataclass(frozen=True)
class SheetRow:
    """One physical row: its 0-based row number and ordinal-aligned cells."""

    index: int
    cells: Tuple[Optional[CellValue], ...] = ()

    @classmethod
    def of(cls, index: int, values: Sequence[Any]) -> "SheetRow":
        """Build a row from plain Python values (None marks a missing cell)."""
        return cls(index, tuple(CellValue.of(v) for v in values))

    def cell(self, ordinal: int) -> Optional[CellValue]:
        """Cell at ordinal, None when the row has no cell there."""
        if 0 <= ordinal < len(self.cells):
            return self.cells[ordinal]
        return None

    def __len__(self) -> int:
        return len(self.cells)

    @property
    def is_empty(self) -> bool:
        return all(c is None for c in self.cells)


@dataclass
class Sheet:
    """A named sheet with its physical rows in order."""

    name: str
    rows: Iterable[SheetRow] = field(default_factory=list)

    @classmethod
    def from_values(cls, name: str, rows: Iterable[Sequence[Any]]) -> "Sheet":
        """
        Build an in-memory sheet from lists of plain values.

        Fully empty rows are dropped, like rows a workbook never stored.
        """
        built: List[SheetRow] = []
        for index, values in enumerate(rows):
            row = SheetRow.of(index, values)
            if not row.is_empty:
                built.append(row)
        return cls(name, built)

    def iter_rows(self) -> Iterator[SheetRow]:
        return iter(self.rows)
