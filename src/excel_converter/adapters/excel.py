"""Excel COM automation adapter implementing the session and workbook ports."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from excel_converter.application.options import PdfExportOptions
from excel_converter.application.ports import SessionLauncher
from excel_converter.errors import (
    CleanupError,
    ConversionError,
    DependencyUnavailableError,
    ExportError,
)
from excel_converter.types import ExportFailureKind, PdfQuality, TargetFormat

logger = logging.getLogger(__name__)

EXCEL_PROG_ID = "Excel.Application"

# XlFileFormat
XL_OPENXML_WORKBOOK = 51
XL_PDF = 57
# XlFixedFormatType / XlFixedFormatQuality
XL_TYPE_PDF = 0
XL_QUALITY_STANDARD = 0
XL_QUALITY_MINIMUM = 1
# Workbooks.OpenText
XL_DELIMITED = 1
XL_TEXT_QUALIFIER_DOUBLE_QUOTE = 1
MSO_ENCODING_UTF8 = 65001
# Workbooks.Open UpdateLinks
XL_UPDATE_LINKS_NEVER = 0

_SAVE_FORMATS: dict[TargetFormat, int] = {
    "xlsx": XL_OPENXML_WORKBOOK,
    "pdf": XL_PDF,
}
_QUALITY: dict[PdfQuality, int] = {
    "standard": XL_QUALITY_STANDARD,
    "minimum": XL_QUALITY_MINIMUM,
}

# Localized Excel export errors naming the print range, matched on lower-cased text.
_PRINT_RANGE_PATTERN = re.compile(
    r"\bprint\s?areas?\b"
    r"|\bnothing to print\b"
    r"|\brange\b"
    r"|印刷範囲"
    r"|\bdruckbereichs?\b"
    r"|\bzone d'impression\b"
    r"|\bобласть печати\b"
)
_ACCESS_DENIED_MARKERS = (
    "access denied",
    "permission",
    "being used by another",
    "read-only",
    "cannot access",
)


def com_error_message(exc: BaseException) -> str:
    """Extract the most specific description from a COM error.

    ``pywintypes.com_error`` carries ``(hresult, strerror, excepinfo,
    argerror)``; ``excepinfo[2]`` holds the application's own description.
    """
    excepinfo = getattr(exc, "excepinfo", None)
    if isinstance(excepinfo, tuple) and len(excepinfo) > 2 and excepinfo[2]:
        return str(excepinfo[2]).strip()
    strerror = getattr(exc, "strerror", None)
    if strerror:
        return str(strerror).strip()
    return str(exc).strip() or type(exc).__name__


def classify_export_failure(message: str) -> ExportFailureKind:
    """Map an export error description onto a failure category."""
    lowered = message.lower()
    if any(marker in lowered for marker in _ACCESS_DENIED_MARKERS):
        return "access_denied"
    if _PRINT_RANGE_PATTERN.search(lowered):
        return "print_range"
    return "unknown"


@dataclass(frozen=True)
class ComRuntime:
    """Entry points of the pywin32 COM bindings used by the adapter."""

    initialize: Callable[[], None]
    uninitialize: Callable[[], None]
    dispatch: Callable[[str], Any]
    resolve_prog_id: Callable[[str], object]


def load_com_runtime() -> ComRuntime:
    """Import pywin32 and bundle the COM entry points.

    Raises
    ------
    DependencyUnavailableError
        If pywin32 is not installed (e.g. not on Windows).
    """
    try:
        import pythoncom
        import pywintypes
        import win32com.client
    except ImportError as exc:
        raise DependencyUnavailableError(
            "Excel automation requires Windows with pywin32 installed "
            "(pip install pywin32)."
        ) from exc
    return ComRuntime(
        initialize=pythoncom.CoInitialize,
        uninitialize=pythoncom.CoUninitialize,
        dispatch=win32com.client.DispatchEx,
        resolve_prog_id=pywintypes.IID,
    )


class ExcelWorkbook:
    """Workbook port backed by a COM ``Workbook`` object."""

    def __init__(self, workbook: Any, source: Path) -> None:
        self._workbook = workbook
        self._source = source

    def save_as(self, destination: Path, target_format: TargetFormat) -> None:
        """Save a copy via ``Workbook.SaveAs``.

        Raises
        ------
        ConversionError
            If Excel rejects the save.
        """
        try:
            if target_format == "xlsx":
                self._workbook.CheckCompatibility = False
            self._workbook.SaveAs(
                str(destination), FileFormat=_SAVE_FORMATS[target_format]
            )
        except Exception as exc:
            raise ConversionError(
                f"Could not save {destination.name}: {com_error_message(exc)}"
            ) from exc

    def export_fixed_format(
        self, destination: Path, options: PdfExportOptions
    ) -> None:
        """Export via ``Workbook.ExportAsFixedFormat``.

        Raises
        ------
        ExportError
            With the failure classified by :func:`classify_export_failure`.
        """
        try:
            self._workbook.ExportAsFixedFormat(
                Type=XL_TYPE_PDF,
                Filename=str(destination),
                Quality=_QUALITY[options.quality],
                IncludeDocProperties=options.include_doc_properties,
                IgnorePrintAreas=options.ignore_print_areas,
                OpenAfterPublish=False,
            )
        except Exception as exc:
            message = com_error_message(exc)
            raise ExportError(
                f"Could not export {destination.name}: {message}",
                kind=classify_export_failure(message),
            ) from exc

    def close(self) -> None:
        """Close without saving; failures surface as ``CleanupError``."""
        try:
            self._workbook.Close(SaveChanges=False)
        except Exception as exc:
            raise CleanupError(
                f"Could not close {self._source.name}: {com_error_message(exc)}"
            ) from exc
        finally:
            self._workbook = None


class ExcelSession:
    """Automation session port backed by a COM ``Application`` object."""

    def __init__(self, application: Any, *, uninitialize: Callable[[], None]) -> None:
        self._application = application
        self._uninitialize = uninitialize
        self._released = False

    def open_workbook(
        self,
        path: Path,
        *,
        read_only: bool = False,
        ignore_read_only_recommended: bool = False,
    ) -> ExcelWorkbook:
        """Open ``path`` via ``Workbooks.Open`` without updating links."""
        try:
            workbook = self._application.Workbooks.Open(
                str(path),
                UpdateLinks=XL_UPDATE_LINKS_NEVER,
                ReadOnly=read_only,
                IgnoreReadOnlyRecommended=ignore_read_only_recommended,
            )
        except Exception as exc:
            raise ConversionError(
                f"Could not open {path.name}: {com_error_message(exc)}"
            ) from exc
        return ExcelWorkbook(workbook, path)

    def open_text(self, path: Path) -> ExcelWorkbook:
        """Open a comma-delimited UTF-8 file via ``Workbooks.OpenText``."""
        try:
            self._application.Workbooks.OpenText(
                str(path),
                Origin=MSO_ENCODING_UTF8,
                DataType=XL_DELIMITED,
                TextQualifier=XL_TEXT_QUALIFIER_DOUBLE_QUOTE,
                Comma=True,
            )
            workbook = self._application.ActiveWorkbook
        except Exception as exc:
            raise ConversionError(
                f"Could not open {path.name} as UTF-8 text: {com_error_message(exc)}"
            ) from exc
        if workbook is None:
            raise ConversionError(f"Excel opened no workbook for {path.name}")
        return ExcelWorkbook(workbook, path)

    def quit(self) -> None:
        """Quit Excel and uninitialize COM, once.

        Both steps are attempted even if the first one fails.

        Raises
        ------
        CleanupError
            If either step failed.
        """
        if self._released:
            return
        self._released = True

        problems: list[str] = []
        try:
            self._application.Quit()
        except Exception as exc:
            problems.append(f"Quit failed: {com_error_message(exc)}")
        finally:
            self._application = None
        try:
            self._uninitialize()
        except Exception as exc:
            problems.append(f"COM release failed: {exc}")
        if problems:
            raise CleanupError("; ".join(problems))


class ExcelSessionLauncher:
    """Start non-interactive Excel sessions over COM.

    Parameters
    ----------
    runtime : ComRuntime | None, default=None
        COM entry points; loaded from pywin32 on first use when ``None``.
    prog_id : str, default="Excel.Application"
        ProgID dispatched for each session.
    """

    def __init__(
        self, runtime: ComRuntime | None = None, prog_id: str = EXCEL_PROG_ID
    ) -> None:
        self._runtime = runtime
        self._prog_id = prog_id

    def _com(self) -> ComRuntime:
        if self._runtime is None:
            self._runtime = load_com_runtime()
        return self._runtime

    def check_available(self) -> None:
        """Verify pywin32 imports and the Excel ProgID is registered.

        Raises
        ------
        DependencyUnavailableError
            If either check fails.
        """
        com = self._com()
        try:
            com.resolve_prog_id(self._prog_id)
        except Exception as exc:
            raise DependencyUnavailableError(
                f"{self._prog_id} is not registered; is Microsoft Excel installed?"
            ) from exc

    def start(self) -> ExcelSession:
        """Dispatch a new Excel process and make it non-interactive.

        Raises
        ------
        DependencyUnavailableError
            If Excel cannot be started.
        """
        com = self._com()
        com.initialize()
        application = None
        try:
            application = com.dispatch(self._prog_id)
            application.Visible = False
            application.DisplayAlerts = False
            application.ScreenUpdating = False
            application.AskToUpdateLinks = False
            application.EnableEvents = False
        except Exception as exc:
            if application is not None:
                try:
                    application.Quit()
                except Exception as quit_exc:
                    logger.warning("could not quit half-started Excel: %s", quit_exc)
            com.uninitialize()
            raise DependencyUnavailableError(
                f"Could not start Excel: {com_error_message(exc)}"
            ) from exc
        logger.debug("dispatched %s", self._prog_id)
        return ExcelSession(application, uninitialize=com.uninitialize)


def is_excel_available(launcher: SessionLauncher | None = None) -> bool:
    """Return ``True`` when the Excel pre-flight check passes."""
    try:
        (launcher or ExcelSessionLauncher()).check_available()
    except DependencyUnavailableError:
        return False
    return True
