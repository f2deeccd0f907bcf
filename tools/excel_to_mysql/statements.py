"""DDL and DML synthesis for MySQL."""

from dataclasses import dataclass, field
from typing import List, Optional

from shared.logger import get_logger

from .cells import CellKind, CellValue, SheetRow, format_date, format_number
from .exceptions import ValueConversionError
from .schema import ColumnSpec, ColumnType, TableSpec

logger = get_logger(__name__)


@dataclass(frozen=True)
class ConversionResult:
    """
    Outcome of converting one cell into a SQL literal.

    Exactly one of ``literal`` / ``reason`` is set, or neither when the
    cell holds no value.
    """

    literal: Optional[str] = None
    reason: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.reason is not None


@dataclass
class InsertOutcome:
    """INSERT generated for one row and the conversion issues skipped over."""

    statement: Optional[str] = None
    issues: List[ValueConversionError] = field(default_factory=list)


def quote_identifier(name: str) -> str:
    """Delimit an identifier with backticks. Names must not contain backticks."""
    return f"`{name}`"


def escape_string(text: str) -> str:
    """Backslash-escape backslashes and single quotes for a MySQL literal."""
    return text.replace("\\", "\\\\").replace("'", "\\'")


def convert_cell(cell: CellValue, column_type: ColumnType) -> ConversionResult:
    """
    Convert a cell into the SQL literal for a column of the given type.

    Args:
        cell: Cell value
        column_type: Inferred column type

    Returns:
        ConversionResult with the literal, a failure reason, or nothing
    """
    if column_type == ColumnType.DATE:
        if cell.kind != CellKind.NUMERIC or not cell.is_date:
            return ConversionResult(reason=f"{cell.kind.value} cell is not a date")
        formatted = format_date(cell.value)
        if formatted is None:
            return ConversionResult(reason=f"cannot format {type(cell.value).__name__} as a date")
        return ConversionResult(literal=f"'{formatted}'")

    if column_type == ColumnType.NUMERIC:
        if cell.kind != CellKind.NUMERIC or cell.is_date:
            kind = "date" if cell.is_date else cell.kind.value
            return ConversionResult(reason=f"{kind} cell is not a number")
        number = format_number(cell.value)
        if number is None:
            return ConversionResult(reason="number is not finite")
        return ConversionResult(literal=number)

    if column_type == ColumnType.BOOLEAN:
        if cell.kind != CellKind.BOOLEAN:
            return ConversionResult(reason=f"{cell.kind.value} cell is not a boolean")
        return ConversionResult(literal="true" if cell.value else "false")

    text = escape_string(cell.text)
    if not text:
        return ConversionResult()
    return ConversionResult(literal=f"'{text}'")


class StatementSynthesizer:
    """
    Render MySQL statements for a TableSpec.

    In strict mode the first conversion failure of a row raises
    ValueConversionError. In lenient mode the offending column is left out
    of the INSERT and the failure is reported in the outcome.
    """

    def __init__(self, strict: bool = True):
        self.strict = strict

    def drop_table(self, table: TableSpec) -> str:
        """Generate DROP TABLE statement."""
        return f"DROP TABLE IF EXISTS {quote_identifier(table.name)};"

    def create_table(self, table: TableSpec) -> str:
        """Generate CREATE TABLE statement with an auto-increment primary key."""
        lines = [f"CREATE TABLE IF NOT EXISTS {quote_identifier(table.name)} (\n"]
        lines.append(f"\t{quote_identifier(table.primary_key)} int(11) NOT NULL AUTO_INCREMENT, \n")

        for col in table.usable_columns():
            lines.append(f"\t{quote_identifier(col.name)} {col.type.mysql_type} DEFAULT NULL, \n")

        lines.append(f"\tPRIMARY KEY ({quote_identifier(table.primary_key)})\n")
        lines.append(");\n")
        return "".join(lines)

    def ddl(self, table: TableSpec) -> List[str]:
        """DROP then CREATE for a table."""
        return [self.drop_table(table), self.create_table(table)]

    def insert(self, table: TableSpec, row: SheetRow) -> InsertOutcome:
        """
        Generate the INSERT statement for one data row.

        Args:
            table: Table schema
            row: Data row

        Returns:
            InsertOutcome; its statement is None when no column has a value

        Raises:
            ValueConversionError: On a cell/type mismatch in strict mode
        """
        outcome = InsertOutcome()
        columns: List[str] = []
        values: List[str] = []

        for col in table.usable_columns():
            cell = row.cell(col.ordinal)
            if cell is None:
                continue

            result = convert_cell(cell, col.type)
            if result.failed:
                issue = self._conversion_error(col, row, cell, result.reason)
                if self.strict:
                    raise issue
                logger.warning(str(issue))
                outcome.issues.append(issue)
                continue

            if result.literal is None:
                continue

            columns.append(quote_identifier(col.name))
            values.append(result.literal)

        if columns:
            outcome.statement = (
                f"INSERT INTO {quote_identifier(table.name)} "
                f"({','.join(columns)}) VALUES ({','.join(values)});"
            )

        return outcome

    @staticmethod
    def _conversion_error(
        col: ColumnSpec, row: SheetRow, cell: CellValue, reason: Optional[str]
    ) -> ValueConversionError:
        return ValueConversionError(
            column=col.name,
            ordinal=col.ordinal,
            row=row.index,
            expected=col.type,
            value=cell.value,
            reason=reason,
        )
