"""Application-layer use-cases and option objects."""

from __future__ import annotations

from pathlib import Path

from excel_converter.application.options import BatchOptions, PdfExportOptions
from excel_converter.application.ports import (
    ConfirmationProvider,
    ResultReporter,
    SessionLauncher,
)
from excel_converter.application.results import (
    BatchSummary,
    ConversionJob,
    ConversionResult,
)


def convert_csv_directory(
    *,
    source_dir: Path | None,
    destination_dir: Path | None,
    delete_original: bool = False,
    launcher: SessionLauncher | None = None,
    reporter: ResultReporter | None = None,
) -> BatchSummary:
    """Convert CSV files to XLSX via lazy use-case import."""
    from excel_converter.application.use_cases import convert_csv_directory as _impl

    return _impl(
        source_dir=source_dir,
        destination_dir=destination_dir,
        delete_original=delete_original,
        launcher=launcher,
        reporter=reporter,
    )


def convert_xls_directory(
    *,
    source_dir: Path | None,
    destination_dir: Path | None,
    recursive: bool = False,
    delete_original: bool = False,
    confirmation: ConfirmationProvider | None = None,
    launcher: SessionLauncher | None = None,
    reporter: ResultReporter | None = None,
) -> BatchSummary:
    """Convert XLS files to XLSX via lazy use-case import."""
    from excel_converter.application.use_cases import convert_xls_directory as _impl

    return _impl(
        source_dir=source_dir,
        destination_dir=destination_dir,
        recursive=recursive,
        delete_original=delete_original,
        confirmation=confirmation,
        launcher=launcher,
        reporter=reporter,
    )


def export_xlsx_to_pdf(
    *,
    input_path: Path,
    output_dir: Path | None = None,
    batch: bool = False,
    open_settle_seconds: float = 1.0,
    cooldown_seconds: float = 0.5,
    export_options: PdfExportOptions | None = None,
    confirmation: ConfirmationProvider | None = None,
    launcher: SessionLauncher | None = None,
    reporter: ResultReporter | None = None,
) -> BatchSummary:
    """Export XLSX workbooks to PDF via lazy use-case import."""
    from excel_converter.application.use_cases import export_xlsx_to_pdf as _impl

    return _impl(
        input_path=input_path,
        output_dir=output_dir,
        batch=batch,
        open_settle_seconds=open_settle_seconds,
        cooldown_seconds=cooldown_seconds,
        export_options=export_options,
        confirmation=confirmation,
        launcher=launcher,
        reporter=reporter,
    )


__all__ = [
    "BatchOptions",
    "BatchSummary",
    "ConversionJob",
    "ConversionResult",
    "PdfExportOptions",
    "convert_csv_directory",
    "convert_xls_directory",
    "export_xlsx_to_pdf",
]
