"""Core Excel to MySQL import logic."""

from contextlib import ExitStack
from dataclasses import dataclass, field
from itertools import chain
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, Tuple

from shared.logger import get_logger

from .cells import Sheet, SheetRow
from .exceptions import SchemaInferenceError, ValueConversionError
from .executors import StatementCollector, StreamExecutor
from .filters import SheetPathFilter
from .reader import open_workbook
from .schema import TableSpec, clean_identifier, infer_column_types, resolve_column_names
from .statements import StatementSynthesizer

logger = get_logger(__name__)

Executor = Callable[[str], Any]


@dataclass
class SheetReport:
    """What happened while importing one sheet."""

    sheet: str
    table: Optional[str] = None
    rows: int = 0
    inserts: int = 0
    issues: List[ValueConversionError] = field(default_factory=list)
    inference_issues: List[SchemaInferenceError] = field(default_factory=list)
    skipped: bool = False


@dataclass
class ImportReport:
    """Summary of a workbook import."""

    sheets: List[SheetReport] = field(default_factory=list)

    @property
    def imported(self) -> List[SheetReport]:
        return [s for s in self.sheets if not s.skipped]

    @property
    def skipped(self) -> List[SheetReport]:
        return [s for s in self.sheets if s.skipped]

    @property
    def total_inserts(self) -> int:
        return sum(s.inserts for s in self.sheets)

    @property
    def issues(self) -> List[ValueConversionError]:
        return [issue for s in self.sheets for issue in s.issues]


class ExcelToMySQL:
    """
    Import spreadsheet sheets into MySQL tables.

    Each accepted sheet becomes one table: row 0 names the columns, row 1
    decides their types, and every row after the header (row 1 included)
    becomes an INSERT. Statements are handed to the executor one by one, as
    soon as they are generated.
    """

    def __init__(
        self,
        filter: Optional[Any] = None,
        strict: bool = True,
        normalizer: Callable[[Any], str] = clean_identifier,
    ):
        """
        Initialize importer.

        Args:
            filter: Object with accept_sheet/accept_column (accept all if None)
            strict: Abort on the first value that does not match its column type
            normalizer: Identifier normalization for sheet and header names
        """
        self.filter = filter if filter is not None else SheetPathFilter()
        self.normalizer = normalizer
        self.strict = strict
        logger.debug(f"Initialized ExcelToMySQL (strict={strict})")

    def set_strict(self, strict: bool) -> None:
        self.strict = strict

    def build_table_spec(
        self,
        sheet: Sheet,
        header: SheetRow,
        sample: Optional[SheetRow],
        issues: Optional[List[SchemaInferenceError]] = None,
    ) -> TableSpec:
        """
        Build the table schema from the header and sample rows.

        Args:
            sheet: Sheet being imported
            header: First physical row
            sample: Second physical row, if any
            issues: List collecting columns left untyped

        Returns:
            TableSpec
        """
        names = resolve_column_names(
            header.cells,
            accept=lambda name: self.filter.accept_column(sheet, name),
            normalizer=self.normalizer,
        )
        columns, inference_issues = infer_column_types(names, sample, sheet.name)
        if issues is not None:
            issues.extend(inference_issues)

        return TableSpec(name=self.normalizer(sheet.name), columns=columns)

    def add_table_from_sheet(self, sheet: Sheet, execute: Executor) -> SheetReport:
        """
        Import one sheet: DROP, CREATE, then one INSERT per data row.

        Args:
            sheet: Sheet to import
            execute: Statement executor

        Returns:
            SheetReport

        Raises:
            ValueConversionError: In strict mode, on the first bad value
        """
        report = SheetReport(sheet=sheet.name)

        if not self.normalizer(sheet.name):
            logger.warning(f"Sheet name '{sheet.name}' is not a usable table name, skipped")
            report.skipped = True
            return report

        rows = sheet.iter_rows()

        header = next(rows, None)
        if header is None:
            logger.warning(f"Sheet '{sheet.name}' is empty, skipped")
            report.skipped = True
            return report

        sample = next(rows, None)
        table = self.build_table_spec(sheet, header, sample, report.inference_issues)
        report.table = table.name

        logger.info(
            f"Importing sheet '{sheet.name}' into `{table.name}` "
            f"({len(table.usable_columns())} columns)"
        )

        synthesizer = StatementSynthesizer(strict=self.strict)
        for statement in synthesizer.ddl(table):
            self._execute(execute, statement)

        # The sample row is data too
        data_rows: Iterable[SheetRow] = chain([sample], rows) if sample is not None else rows
        for row in data_rows:
            report.rows += 1
            outcome = synthesizer.insert(table, row)
            report.issues.extend(outcome.issues)
            if outcome.statement is None:
                logger.debug(f"Row {row.index} of '{sheet.name}' has no values, skipped")
                continue
            self._execute(execute, outcome.statement)
            report.inserts += 1

        logger.info(f"Sheet '{sheet.name}': {report.inserts} of {report.rows} rows inserted")
        if report.issues:
            logger.warning(f"Sheet '{sheet.name}': {len(report.issues)} values skipped")

        return report

    def add_workbook(self, workbook: Iterable[Sheet], execute: Executor) -> ImportReport:
        """
        Import every sheet accepted by the filter.

        Args:
            workbook: Iterable of sheets (e.g. ExcelWorkbook)
            execute: Statement executor

        Returns:
            ImportReport
        """
        report = ImportReport()

        for sheet in workbook:
            if not self.filter.accept_sheet(sheet):
                logger.info(f"Sheet '{sheet.name}' not accepted, skipped")
                report.sheets.append(SheetReport(sheet=sheet.name, skipped=True))
                continue
            report.sheets.append(self.add_table_from_sheet(sheet, execute))

        return report

    def convert(self, workbook_path: Path, output_path: Optional[Path] = None) -> str:
        """
        Convert a workbook file to a SQL script.

        Args:
            workbook_path: Path to .xlsx file
            output_path: Output SQL file path (optional)

        Returns:
            Generated SQL
        """
        sql, _ = self.convert_with_report(workbook_path, output_path)
        return sql

    def convert_with_report(
        self, workbook_path: Path, output_path: Optional[Path] = None
    ) -> Tuple[str, ImportReport]:
        """
        Like convert(), also returning the ImportReport.

        The output file receives each statement as it is generated, so after a
        strict-mode abort it holds everything emitted before the failure.
        """
        collector = StatementCollector()

        with ExitStack() as stack:
            workbook = stack.enter_context(open_workbook(workbook_path))
            targets: List[Executor] = [collector]
            if output_path:
                stream = stack.enter_context(open(output_path, "w", encoding="utf-8"))
                targets.append(StreamExecutor(stream))

            def execute(statement: str) -> None:
                for target in targets:
                    target(statement)

            report = self.add_workbook(workbook, execute)

        if output_path:
            logger.info(f"Wrote SQL to {output_path}")

        return collector.sql(), report

    @staticmethod
    def _execute(execute: Executor, statement: str) -> None:
        logger.debug(statement.rstrip("\n"))
        execute(statement)
