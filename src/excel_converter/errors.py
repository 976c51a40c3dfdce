"""Exception hierarchy for spreadsheet batch conversion."""

from __future__ import annotations

from excel_converter.types import ExportFailureKind


class ExcelConverterError(Exception):
    """Base error for all conversion failures.

    Parameters
    ----------
    message : str
        Human-readable error message.
    """

    exit_code: int = 1


class InvalidPathError(ExcelConverterError):
    """Source or destination path is missing or has the wrong type."""


class InvalidArgumentError(ExcelConverterError):
    """Command arguments are inconsistent (e.g. directory without ``--batch``)."""


class DependencyUnavailableError(ExcelConverterError):
    """Excel or its COM bindings are not installed or not reachable."""


class ConversionError(ExcelConverterError):
    """Opening, saving or exporting a single workbook failed."""


class ExportError(ConversionError):
    """Fixed-format export failed with a classified failure kind."""

    def __init__(self, message: str, kind: ExportFailureKind = "unknown") -> None:
        super().__init__(message)
        self.kind: ExportFailureKind = kind

    @property
    def recoverable(self) -> bool:
        """Whether the secondary save-as-PDF path is worth trying."""
        return self.kind == "print_range"


class CleanupError(ExcelConverterError):
    """Closing a workbook or releasing the Excel process failed."""


def describe_error(exc: BaseException) -> str:
    """Render an error message followed by the chain of underlying causes.

    Parameters
    ----------
    exc : BaseException
        Outermost exception.

    Returns
    -------
    str
        ``"outer: cause: root cause"`` with duplicate fragments dropped.
    """
    parts: list[str] = []
    current: BaseException | None = exc
    seen: set[int] = set()
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        text = str(current).strip() or type(current).__name__
        if not any(text in part for part in parts):
            parts.append(text)
        current = current.__cause__
    return ": ".join(parts)
