"""Scoped ownership of automation sessions and open workbooks."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path

from excel_converter.application.ports import (
    AutomationSession,
    SessionLauncher,
    Workbook,
)
from excel_converter.errors import CleanupError, ConversionError, ExcelConverterError

logger = logging.getLogger(__name__)


@contextmanager
def open_session(launcher: SessionLauncher) -> Iterator[AutomationSession]:
    """Start a session and quit it exactly once on exit.

    Parameters
    ----------
    launcher : SessionLauncher
        Factory for new sessions.

    Yields
    ------
    AutomationSession
        Started, non-interactive session.

    Raises
    ------
    DependencyUnavailableError
        If the launcher cannot start the application.
    """
    session = launcher.start()
    logger.debug("automation session started")
    try:
        yield session
    finally:
        try:
            session.quit()
            logger.debug("automation session released")
        except Exception as exc:
            logger.warning("%s", _as_cleanup_error("releasing the session", exc))


@contextmanager
def opened_workbook(
    source: Path, opener: Callable[[], Workbook]
) -> Iterator[Workbook]:
    """Open a workbook via ``opener`` and close it exactly once on exit.

    Parameters
    ----------
    source : Path
        File being opened, used in error messages.
    opener : Callable[[], Workbook]
        Zero-argument callable performing the actual open.

    Yields
    ------
    Workbook
        Open workbook handle.

    Raises
    ------
    ConversionError
        If the workbook cannot be opened.
    """
    try:
        workbook = opener()
    except ConversionError:
        raise
    except Exception as exc:
        raise ConversionError(f"Could not open {source.name}") from exc
    try:
        yield workbook
    finally:
        try:
            workbook.close()
        except Exception as exc:
            logger.warning("%s", _as_cleanup_error(f"closing {source.name}", exc))


def _as_cleanup_error(action: str, exc: Exception) -> CleanupError:
    if isinstance(exc, CleanupError):
        return exc
    detail = str(exc) if isinstance(exc, ExcelConverterError) else repr(exc)
    error = CleanupError(f"Cleanup failed while {action}: {detail}")
    error.__cause__ = exc
    return error
