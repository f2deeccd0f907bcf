"""Read .xlsx workbooks with openpyxl."""

from pathlib import Path
from typing import Any, Iterator, List, Optional, Union

from openpyxl import load_workbook

from shared.logger import get_logger

from .cells import CellKind, CellValue, Sheet, SheetRow

logger = get_logger(__name__)


def cell_value(cell: Any) -> Optional[CellValue]:
    """
    Convert an openpyxl cell into a CellValue.

    Formulas are read as their cached results, so a formula cell is
    inspected by the kind of its evaluated value.
    """
    value = getattr(cell, "value", None)
    if value is None:
        return None
    converted = CellValue.of(value)
    # Numbers stored with a date format but not decoded by openpyxl
    if converted.kind == CellKind.NUMERIC and not converted.is_date and getattr(cell, "is_date", False):
        return CellValue(CellKind.NUMERIC, value, is_date=True)
    return converted


def _iter_rows(worksheet: Any) -> Iterator[SheetRow]:
    for index, cells in enumerate(worksheet.iter_rows()):
        row = SheetRow(index, tuple(cell_value(c) for c in cells))
        if not row.is_empty:
            yield row


class ExcelWorkbook:
    """
    Sheets of an .xlsx workbook, loaded read-only with evaluated values.

    Use as a context manager, or call close() when done.
    """

    def __init__(self, filepath: Union[str, Path]):
        self.filepath = Path(filepath)
        if not self.filepath.exists():
            raise FileNotFoundError(f"File not found: {self.filepath}")

        logger.info(f"Loading workbook {self.filepath}")
        self._workbook = load_workbook(self.filepath, read_only=True, data_only=True)

    @property
    def sheet_names(self) -> List[str]:
        return list(self._workbook.sheetnames)

    @property
    def sheet_count(self) -> int:
        return len(self._workbook.sheetnames)

    def sheet(self, index: int) -> Sheet:
        """Sheet at index; rows are read lazily."""
        worksheet = self._workbook.worksheets[index]
        return Sheet(worksheet.title, _iter_rows(worksheet))

    def __iter__(self) -> Iterator[Sheet]:
        for index in range(self.sheet_count):
            yield self.sheet(index)

    def close(self) -> None:
        self._workbook.close()

    def __enter__(self) -> "ExcelWorkbook":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


def open_workbook(filepath: Union[str, Path]) -> ExcelWorkbook:
    """Open an .xlsx workbook for import."""
    return ExcelWorkbook(filepath)
