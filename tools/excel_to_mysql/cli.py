"""CLI interface for Excel to MySQL."""

import sys
from pathlib import Path
from typing import Optional, Tuple

import click

from shared.cli import create_table, error, handle_errors, info, print_table, success, warning
from shared.logger import setup_logger

from .config import ImportConfig, load_config
from .converter import ExcelToMySQL, ImportReport
from .exceptions import ExcelToSQLError
from .filters import SheetPathFilter


def display_summary(report: ImportReport) -> None:
    """Print a per-sheet summary table."""
    table = create_table(title="Import Summary")
    table.add_column("Sheet", style="bold")
    table.add_column("Table", style="cyan")
    table.add_column("Rows", justify="right")
    table.add_column("Inserts", justify="right", style="green")
    table.add_column("Skipped values", justify="right", style="yellow")

    for sheet in report.sheets:
        if sheet.skipped:
            table.add_row(sheet.sheet, "[dim]skipped[/dim]", "-", "-", "-")
            continue
        table.add_row(
            sheet.sheet,
            sheet.table or "",
            str(sheet.rows),
            str(sheet.inserts),
            str(len(sheet.issues)),
        )

    print_table(table)


@click.command()
@click.argument("workbook", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output SQL file (print to stdout if not specified)",
)
@click.option(
    "--mode",
    "-m",
    type=click.Choice(["strict", "lenient"], case_sensitive=False),
    help="strict aborts on values that do not match their column type, lenient skips them (default: strict)",
)
@click.option(
    "--include",
    "-i",
    multiple=True,
    help="Sheet or Sheet/Column path to import (may repeat, wildcards allowed)",
)
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="TOML config file with an [excel2mysql] table",
)
@click.option("--summary", is_flag=True, help="Show a per-sheet summary")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@handle_errors
def main(
    workbook: Path,
    output: Optional[Path],
    mode: Optional[str],
    include: Tuple[str, ...],
    config_file: Optional[Path],
    summary: bool,
    verbose: bool,
):
    """
    Excel to MySQL - Generate MySQL tables and rows from spreadsheets.

    Each sheet becomes a table: the first row names the columns, the second
    row decides their types.

    Examples:

        \b
        # Print SQL for every sheet
        excel2mysql patents.xlsx

        \b
        # Save to file
        excel2mysql patents.xlsx --output patents.sql

        \b
        # Skip values that do not match their column type
        excel2mysql patents.xlsx --mode lenient --summary

        \b
        # Only some sheets and columns
        excel2mysql patents.xlsx -i Patents/Title -i Patents/Filed -i Inventors
    """
    # Setup logging
    log_level = "DEBUG" if verbose else "INFO"
    setup_logger(__name__, level=log_level)

    try:
        config = load_config(config_file) if config_file else ImportConfig()
        config = config.merge(
            strict=None if mode is None else mode.lower() == "strict",
            include=list(include),
            output=output,
        )

        converter = ExcelToMySQL(
            filter=SheetPathFilter(*config.include),
            strict=config.strict,
        )

        mode = "strict" if config.strict else "lenient"
        info(f"Converting {workbook} ({mode} mode)")

        sql, report = converter.convert_with_report(workbook, config.output)

        # Print to stdout if no output file
        if not config.output:
            click.echo(sql, nl=False)

        if summary:
            display_summary(report)

        if report.issues:
            warning(f"{len(report.issues)} value(s) did not match their column type and were skipped")

        success(f"Converted {len(report.imported)} sheet(s), {report.total_inserts} row(s)")

        if config.output:
            info(f"SQL written to: {config.output}")

        sys.exit(0)

    except ExcelToSQLError as e:
        error(f"Conversion failed: {e}")
        if verbose:
            raise
        sys.exit(1)


if __name__ == "__main__":
    main()
