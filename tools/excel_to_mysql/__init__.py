"""Excel to MySQL - Generate MySQL tables and rows from spreadsheets."""

from .cells import CellKind, CellValue, Sheet, SheetRow
from .converter import ExcelToMySQL, ImportReport, SheetReport
from .exceptions import (
    ConfigError,
    ExcelToSQLError,
    SchemaInferenceError,
    StatementExecutionError,
    ValueConversionError,
)
from .executors import ConnectionExecutor, StatementCollector, StreamExecutor
from .filters import SheetPathFilter
from .reader import ExcelWorkbook, open_workbook
from .schema import ColumnSpec, ColumnType, TableSpec, clean_identifier
from .statements import StatementSynthesizer

__all__ = [
    "CellKind",
    "CellValue",
    "ColumnSpec",
    "ColumnType",
    "ConfigError",
    "ConnectionExecutor",
    "ExcelToMySQL",
    "ExcelToSQLError",
    "ExcelWorkbook",
    "ImportReport",
    "SchemaInferenceError",
    "Sheet",
    "SheetPathFilter",
    "SheetReport",
    "SheetRow",
    "StatementCollector",
    "StatementExecutionError",
    "StatementSynthesizer",
    "StreamExecutor",
    "TableSpec",
    "ValueConversionError",
    "clean_identifier",
    "open_workbook",
]
