"""Column name resolution and type inference for one sheet."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence, Set, Tuple

from shared.logger import get_logger

from .cells import CellKind, CellValue, SheetRow
from .exceptions import SchemaInferenceError

logger = get_logger(__name__)


class ColumnType(str, Enum):
    """Relational column types inferred from sample cells."""

    DATE = "Date"
    NUMERIC = "Numeric"
    BOOLEAN = "Boolean"
    STRING = "String"

    @property
    def mysql_type(self) -> str:
        """MySQL type name used in CREATE TABLE."""
        return _MYSQL_TYPES[self]


_MYSQL_TYPES = {
    ColumnType.DATE: "DATETIME",
    ColumnType.NUMERIC: "DOUBLE",
    ColumnType.BOOLEAN: "BOOLEAN",
    ColumnType.STRING: "TEXT",
}


@dataclass(frozen=True)
class ColumnSpec:
    """A resolved column: unique name, inferred type and cell ordinal."""

    name: str
    type: Optional[ColumnType]
    ordinal: int


@dataclass(frozen=True)
class TableSpec:
    """
    Schema of one imported sheet.

    ``columns`` holds one slot per header cell; rejected cells stay as
    ``None`` so each slot keeps the ordinal of its sheet column.
    """

    name: str
    columns: Tuple[Optional[ColumnSpec], ...]

    @property
    def primary_key(self) -> str:
        return f"{self.name}ID"

    def usable_columns(self) -> List[ColumnSpec]:
        """Columns that take part in DDL/DML, in ordinal order."""
        return [c for c in self.columns if is_usable(c)]


def is_usable(column: Optional[ColumnSpec]) -> bool:
    """A column is usable when present and typed."""
    return column is not None and bool(column.name) and column.type is not None


_UNSAFE_CHARS = re.compile(r"[^\w \-]")
_SPACES = re.compile(r" {2,}")


def clean_identifier(text: Any) -> str:
    """
    Normalize raw header or sheet text into an identifier-safe name.

    Newlines become spaces, anything but letters, digits, underscore,
    space and hyphen is dropped, and runs of spaces collapse.
    """
    if text is None:
        return ""
    cleaned = str(text).replace("\r\n", " ").replace("\n", " ").replace("\r", " ")
    cleaned = _UNSAFE_CHARS.sub("", cleaned)
    return _SPACES.sub(" ", cleaned).strip()


def resolve_column_names(
    header: Sequence[Optional[CellValue]],
    accept: Callable[[str], bool],
    normalizer: Callable[[Any], str] = clean_identifier,
) -> List[Optional[str]]:
    """
    Turn header cells into unique column names, index-aligned with the cells.

    Args:
        header: Header row cells (None for a missing cell)
        accept: Column-level inclusion predicate
        normalizer: Identifier normalization

    Returns:
        One entry per header cell: the column name, or None when excluded
    """
    names: List[Optional[str]] = []
    used: Set[str] = set()

    for ordinal, cell in enumerate(header):
        name = normalizer(cell.text) if cell is not None else ""

        if not name:
            logger.debug(f"Header cell {ordinal} is empty, column skipped")
            names.append(None)
            continue

        if not accept(name):
            logger.debug(f"Column '{name}' rejected by filter")
            names.append(None)
            continue

        if name in used:
            suffix = 1
            while f"{name}{suffix}" in used:
                suffix += 1
            logger.debug(f"Duplicate column '{name}' renamed to '{name}{suffix}'")
            name = f"{name}{suffix}"

        used.add(name)
        names.append(name)

    return names


def infer_type(cell: Optional[CellValue]) -> Optional[ColumnType]:
    """Infer the column type from a single sample cell."""
    if cell is None:
        return None
    if cell.kind == CellKind.BOOLEAN:
        return ColumnType.BOOLEAN
    if cell.kind == CellKind.NUMERIC:
        return ColumnType.DATE if cell.is_date else ColumnType.NUMERIC
    return ColumnType.STRING


def infer_column_types(
    names: Sequence[Optional[str]],
    sample: Optional[SheetRow],
    sheet_name: Optional[str] = None,
) -> Tuple[Tuple[Optional[ColumnSpec], ...], List[SchemaInferenceError]]:
    """
    Type each resolved column from the sample row.

    Args:
        names: Resolved column names (None for absent slots)
        sample: Second physical row of the sheet, if any
        sheet_name: Sheet name, for diagnostics

    Returns:
        Tuple of (column slots, inference issues for columns left untyped)
    """
    columns: List[Optional[ColumnSpec]] = []
    issues: List[SchemaInferenceError] = []

    for ordinal, name in enumerate(names):
        if name is None:
            columns.append(None)
            continue

        cell = sample.cell(ordinal) if sample is not None else None
        column_type = infer_type(cell)
        if column_type is None:
            issue = SchemaInferenceError(name, ordinal, sheet_name)
            logger.warning(str(issue))
            issues.append(issue)

        columns.append(ColumnSpec(name=name, type=column_type, ordinal=ordinal))

    return tuple(columns), issues
