"""Batch spreadsheet conversion through Microsoft Excel automation."""

from __future__ import annotations

from excel_converter.application import (
    BatchSummary,
    ConversionJob,
    ConversionResult,
    PdfExportOptions,
    convert_csv_directory,
    convert_xls_directory,
    export_xlsx_to_pdf,
)
from excel_converter.errors import (
    CleanupError,
    ConversionError,
    DependencyUnavailableError,
    ExcelConverterError,
    ExportError,
    InvalidArgumentError,
    InvalidPathError,
)

__version__ = "0.1.0"

__all__ = [
    "BatchSummary",
    "CleanupError",
    "ConversionError",
    "ConversionJob",
    "ConversionResult",
    "DependencyUnavailableError",
    "ExcelConverterError",
    "ExportError",
    "InvalidArgumentError",
    "InvalidPathError",
    "PdfExportOptions",
    "__version__",
    "convert_csv_directory",
    "convert_xls_directory",
    "export_xlsx_to_pdf",
]
