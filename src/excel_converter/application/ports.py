"""Application ports for clean architecture boundaries."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from excel_converter.application.options import PdfExportOptions
from excel_converter.application.results import ConversionResult
from excel_converter.types import TargetFormat


class Workbook(Protocol):
    """An open spreadsheet document inside an automation session."""

    def save_as(self, destination: Path, target_format: TargetFormat) -> None:
        """Save a copy of the workbook in ``target_format``."""

    def export_fixed_format(
        self, destination: Path, options: PdfExportOptions
    ) -> None:
        """Export the workbook as a paginated PDF."""

    def close(self) -> None:
        """Close the workbook without saving further changes."""


class AutomationSession(Protocol):
    """A running spreadsheet application controlled programmatically."""

    def open_workbook(
        self,
        path: Path,
        *,
        read_only: bool = False,
        ignore_read_only_recommended: bool = False,
    ) -> Workbook:
        """Open a workbook file."""

    def open_text(self, path: Path) -> Workbook:
        """Open a delimited UTF-8 text file as a workbook."""

    def quit(self) -> None:
        """Quit the application and release the automation handle."""


class SessionLauncher(Protocol):
    """Start automation sessions and report whether that is possible."""

    def check_available(self) -> None:
        """Raise ``DependencyUnavailableError`` if no session can be started."""

    def start(self) -> AutomationSession:
        """Start a new, non-interactive session."""


class ConfirmationProvider(Protocol):
    """Decide whether an existing destination may be replaced."""

    def confirm_overwrite(self, destination: Path) -> bool:
        """Return ``True`` to overwrite ``destination``."""


class ResultReporter(Protocol):
    """Receive each job result as soon as it is known."""

    def report(self, result: ConversionResult) -> None:
        """Render or record a single result."""
