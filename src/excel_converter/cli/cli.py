#!/usr/bin/env python3
"""
excel_converter.cli.cli

Typer-based CLI for batch-converting spreadsheets through Microsoft Excel.

Every command drives a locally installed Excel over COM, so it only works on
Windows with Excel and pywin32 installed. Run ``excel-convert doctor`` to check.

Examples
--------
Convert every CSV in the current directory:

    excel-convert csv-to-xlsx --source . --destination out

Export a folder of workbooks to PDF without prompting:

    excel-convert xlsx-to-pdf reports --batch --on-existing overwrite
"""

from __future__ import annotations

import logging
import sys
import traceback
from enum import Enum
from pathlib import Path

import typer

from excel_converter import __version__
from excel_converter.adapters.excel import ExcelSessionLauncher, is_excel_available
from excel_converter.adapters.prompts import OnExisting, confirmation_for
from excel_converter.application.ports import SessionLauncher
from excel_converter.application.results import BatchSummary
from excel_converter.errors import ExcelConverterError
from excel_converter.reporting import ConsoleReporter, print_summary

app = typer.Typer(
    name="excel-convert",
    help="Batch-convert spreadsheets (CSV / XLS / XLSX) through Microsoft Excel.",
    no_args_is_help=True,
)

DELETE_ORIGINAL_HELP = "Delete each source file after it converted successfully."
DESTINATION_HELP = "Directory for converted files (default: the source directory)."
ON_EXISTING_HELP = "What to do when the output file already exists."
SOURCE_HELP = "Directory containing the files to convert (default: current directory)."


class PdfQualityChoice(str, Enum):
    """PDF quality accepted by ``--quality``."""

    STANDARD = "standard"
    MINIMUM = "minimum"


# -----------------------------
# Utilities
# -----------------------------
def _launcher() -> SessionLauncher:
    """Build the session launcher used by every command."""
    return ExcelSessionLauncher()


def _print_error(exc: Exception, debug: bool) -> int:
    """Print a user-friendly fatal error.

    Parameters
    ----------
    exc : Exception
        Exception that aborted the run.
    debug : bool
        Whether to include traceback details.

    Returns
    -------
    int
        Process exit code.
    """
    typer.secho(f"✗ {type(exc).__name__}: {exc}", fg=typer.colors.RED, err=True)
    if debug:
        typer.echo("\nTraceback:", err=True)
        typer.echo("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)), err=True)
    code = getattr(exc, "exit_code", None)
    if isinstance(code, int) and code > 0:
        return code
    return 1


def _prompt_path(label: str, value: Path | None, default: Path) -> Path:
    """Return ``value`` or ask for a path on the terminal."""
    if value is not None:
        return value
    answer = typer.prompt(label, default=str(default))
    return Path(answer.strip().strip('"'))


def _finish(summary: BatchSummary, *, require_success: bool = False) -> None:
    print_summary(summary)
    raise typer.Exit(code=summary.exit_code(require_success=require_success))


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


# -----------------------------
# Global options
# -----------------------------
@app.callback()
def _main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False, "--debug", help="Show full tracebacks and debug logging on error."
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Print the version and exit.",
    ),
) -> None:
    """Initialize logging and shared CLI state.

    Parameters
    ----------
    ctx : typer.Context
        Typer context object used to store shared state.
    debug : bool, default=False
        Whether to enable debug output.
    """
    del version
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = {"debug": debug}


# -----------------------------
# Commands
# -----------------------------
@app.command("csv-to-xlsx")
def csv_to_xlsx_cmd(
    ctx: typer.Context,
    source: Path | None = typer.Option(None, "--source", "-s", help=SOURCE_HELP),
    destination: Path | None = typer.Option(
        None, "--destination", "-d", help=DESTINATION_HELP
    ),
    delete_original: bool = typer.Option(
        False, "--delete-original", help=DELETE_ORIGINAL_HELP
    ),
) -> None:
    """Convert every CSV file in a directory to XLSX.

    Files whose XLSX already exists are skipped, so re-running is safe.
    Missing directories are asked for interactively.
    """
    debug: bool = bool(ctx.obj.get("debug", False))
    source = _prompt_path("Source directory", source, Path.cwd())
    destination = _prompt_path("Destination directory", destination, source)

    try:
        from excel_converter.application.use_cases import convert_csv_directory

        summary = convert_csv_directory(
            source_dir=source,
            destination_dir=destination,
            delete_original=delete_original,
            launcher=_launcher(),
            reporter=ConsoleReporter(),
        )
    except ExcelConverterError as exc:
        raise typer.Exit(code=_print_error(exc, debug))
    _finish(summary)


@app.command("xls-to-xlsx")
def xls_to_xlsx_cmd(
    ctx: typer.Context,
    source: Path | None = typer.Option(None, "--source", "-s", help=SOURCE_HELP),
    destination: Path | None = typer.Option(
        None, "--destination", "-d", help=DESTINATION_HELP
    ),
    recursive: bool = typer.Option(
        False, "--recursive", "-r", help="Also convert files in sub-directories."
    ),
    delete_original: bool = typer.Option(
        False, "--delete-original", help=DELETE_ORIGINAL_HELP
    ),
    on_existing: OnExisting = typer.Option(
        OnExisting.ASK, "--on-existing", case_sensitive=False, help=ON_EXISTING_HELP
    ),
) -> None:
    """Convert legacy XLS workbooks to XLSX.

    Missing directories are asked for interactively.
    """
    debug: bool = bool(ctx.obj.get("debug", False))
    source = _prompt_path("Source directory", source, Path.cwd())
    destination = _prompt_path("Destination directory", destination, source)

    try:
        from excel_converter.application.use_cases import convert_xls_directory

        summary = convert_xls_directory(
            source_dir=source,
            destination_dir=destination,
            recursive=recursive,
            delete_original=delete_original,
            confirmation=confirmation_for(on_existing),
            launcher=_launcher(),
            reporter=ConsoleReporter(),
        )
    except ExcelConverterError as exc:
        raise typer.Exit(code=_print_error(exc, debug))
    _finish(summary)


@app.command("xlsx-to-pdf")
def xlsx_to_pdf_cmd(
    ctx: typer.Context,
    input_path: Path = typer.Argument(
        ..., help="An .xlsx workbook, or a directory of them together with --batch."
    ),
    output_dir: Path | None = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory for the PDFs (default: next to the input).",
    ),
    batch: bool = typer.Option(
        False, "--batch", help="Treat INPUT_PATH as a directory of workbooks."
    ),
    on_existing: OnExisting = typer.Option(
        OnExisting.ASK, "--on-existing", case_sensitive=False, help=ON_EXISTING_HELP
    ),
    settle_delay: float = typer.Option(
        1.0, "--settle-delay", min=0.0, help="Seconds to wait after opening a workbook."
    ),
    cooldown: float = typer.Option(
        0.5, "--cooldown", min=0.0, help="Seconds to wait between workbooks."
    ),
    ignore_print_areas: bool = typer.Option(
        False, "--ignore-print-areas", help="Export whole sheets instead of print areas."
    ),
    quality: PdfQualityChoice = typer.Option(
        PdfQualityChoice.STANDARD,
        "--quality",
        case_sensitive=False,
        help="PDF quality: standard (print) or minimum (smaller files).",
    ),
) -> None:
    """Export XLSX workbooks to PDF.

    Exits with status 1 when no workbook could be exported.
    """
    debug: bool = bool(ctx.obj.get("debug", False))

    try:
        from excel_converter.application.options import PdfExportOptions
        from excel_converter.application.use_cases import export_xlsx_to_pdf

        summary = export_xlsx_to_pdf(
            input_path=input_path,
            output_dir=output_dir,
            batch=batch,
            open_settle_seconds=settle_delay,
            cooldown_seconds=cooldown,
            export_options=PdfExportOptions(
                quality=quality.value, ignore_print_areas=ignore_print_areas
            ),
            confirmation=confirmation_for(on_existing),
            launcher=_launcher(),
            reporter=ConsoleReporter(),
        )
    except ExcelConverterError as exc:
        raise typer.Exit(code=_print_error(exc, debug))
    _finish(summary, require_success=True)


@app.command("doctor")
def doctor_cmd() -> None:
    """Print installed toolchain versions and whether Excel is reachable."""
    import importlib.metadata as metadata

    typer.echo(f"Python: {sys.version.split()[0]}")
    typer.echo(f"Platform: {sys.platform}")
    for distribution in ("pywin32", "typer", "pydantic"):
        try:
            typer.echo(f"{distribution}: {metadata.version(distribution)}")
        except metadata.PackageNotFoundError:
            typer.echo(f"{distribution}: <not installed>")

    if is_excel_available(_launcher()):
        typer.echo("Excel: available")
    else:
        typer.echo("Excel: <unavailable>")


if __name__ == "__main__":
    app()
