"""Errors raised while importing spreadsheets."""

from typing import Any, Optional


class ExcelToSQLError(Exception):
    """Base class for all import errors."""


class ConfigError(ExcelToSQLError):
    """Configuration file is missing, unreadable or invalid."""


class SchemaInferenceError(ExcelToSQLError):
    """
    A column has no usable sample value.

    Never fatal: the column is left untyped and skipped.
    """

    def __init__(self, column: str, ordinal: int, sheet: Optional[str] = None):
        self.column = column
        self.ordinal = ordinal
        self.sheet = sheet
        where = f" in sheet '{sheet}'" if sheet else ""
        super().__init__(
            f"No sample value for column '{column}' (ordinal {ordinal}){where}, column skipped"
        )


class ValueConversionError(ExcelToSQLError):
    """A data cell does not match the type inferred for its column."""

    def __init__(
        self,
        column: str,
        ordinal: int,
        row: int,
        expected: Any,
        value: Any = None,
        reason: Optional[str] = None,
    ):
        self.column = column
        self.ordinal = ordinal
        self.row = row
        self.expected = expected
        self.value = value
        self.reason = reason

        expected_name = getattr(expected, "value", expected)
        message = (
            f"Failed to process cell value {value!r} of column '{column}' "
            f"(column:row {ordinal}:{row}), expecting type: {expected_name}"
        )
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class StatementExecutionError(ExcelToSQLError):
    """The statement executor failed. Never suppressed."""

    def __init__(self, statement: str, message: str):
        self.statement = statement
        super().__init__(f"{message} while executing: {statement.strip()}")
