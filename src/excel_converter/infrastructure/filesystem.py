"""Path resolution and source file enumeration."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from excel_converter.errors import InvalidArgumentError, InvalidPathError
from excel_converter.types import TARGET_EXTENSIONS, TargetFormat

logger = logging.getLogger(__name__)

LOCK_FILE_PREFIX = "~$"


@dataclass(frozen=True)
class PdfInput:
    """Resolved XLSX to PDF input."""

    files: list[Path]
    output_dir: Path


def _absolute(path: Path) -> Path:
    return path.expanduser().resolve()


def resolve_source_dir(path: Path | None) -> Path:
    """Resolve the source directory, defaulting to the working directory.

    Parameters
    ----------
    path : Path | None
        User-supplied directory.

    Returns
    -------
    Path
        Absolute source directory.

    Raises
    ------
    InvalidPathError
        If the path does not exist or is not a directory.
    """
    source = _absolute(path if path is not None else Path.cwd())
    if not source.exists():
        raise InvalidPathError(f"Source directory does not exist: {source}")
    if not source.is_dir():
        raise InvalidPathError(f"Source path is not a directory: {source}")
    return source


def ensure_destination_dir(path: Path | None, default: Path) -> Path:
    """Resolve the destination directory and create it when missing.

    Parameters
    ----------
    path : Path | None
        User-supplied directory; ``default`` is used when ``None``.
    default : Path
        Fallback directory, usually the source directory.

    Returns
    -------
    Path
        Absolute, existing destination directory.

    Raises
    ------
    InvalidPathError
        If the path exists but is not a directory, or cannot be created.
    """
    destination = _absolute(path if path is not None else default)
    if destination.exists():
        if not destination.is_dir():
            raise InvalidPathError(f"Destination is not a directory: {destination}")
        return destination
    try:
        destination.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise InvalidPathError(
            f"Could not create destination directory {destination}: {exc}"
        ) from exc
    logger.info("created destination directory %s", destination)
    return destination


def iter_matching_files(
    directory: Path, extension: str, *, recursive: bool = False
) -> Iterator[Path]:
    """Yield regular files below ``directory`` whose suffix is ``extension``.

    The comparison ignores case and Excel lock files (``~$name.xlsx``).
    Files are yielded sorted by path.
    """
    wanted = extension.lower()
    candidates = directory.rglob("*") if recursive else directory.iterdir()
    matches = (
        path
        for path in candidates
        if path.suffix.lower() == wanted
        and not path.name.startswith(LOCK_FILE_PREFIX)
        and path.is_file()
    )
    yield from sorted(matches)


def destination_for(
    source: Path,
    *,
    source_root: Path,
    destination_root: Path,
    target_format: TargetFormat,
) -> Path:
    """Map a source file to its converted path below ``destination_root``.

    The sub-directory of ``source`` relative to ``source_root`` is kept.
    """
    relative = source.relative_to(source_root)
    return destination_root / relative.with_suffix(TARGET_EXTENSIONS[target_format])


def resolve_pdf_input(
    input_path: Path, output_dir: Path | None, *, batch: bool
) -> PdfInput:
    """Resolve a single workbook or a batch directory for PDF export.

    Parameters
    ----------
    input_path : Path
        A ``.xlsx`` file, or a directory when ``batch`` is set.
    output_dir : Path | None
        Where PDFs are written; defaults to the input's directory.
    batch : bool
        Whether a directory input is allowed.

    Returns
    -------
    PdfInput
        Files to export and the existing output directory.

    Raises
    ------
    InvalidPathError
        If ``input_path`` does not exist.
    InvalidArgumentError
        If a directory is given without ``batch`` or a file is not ``.xlsx``.
    """
    resolved = _absolute(input_path)
    if not resolved.exists():
        raise InvalidPathError(f"Input path does not exist: {resolved}")

    if resolved.is_dir():
        if not batch:
            raise InvalidArgumentError(
                f"{resolved} is a directory; pass --batch to convert every .xlsx in it."
            )
        destination = ensure_destination_dir(output_dir, resolved)
        return PdfInput(
            files=list(iter_matching_files(resolved, ".xlsx")),
            output_dir=destination,
        )

    if resolved.suffix.lower() != ".xlsx":
        raise InvalidArgumentError(f"Expected an .xlsx file, got: {resolved.name}")
    destination = ensure_destination_dir(output_dir, resolved.parent)
    return PdfInput(files=[resolved], output_dir=destination)


def remove_source(path: Path) -> str | None:
    """Delete a converted source file.

    Returns
    -------
    str | None
        Warning text if deletion failed, otherwise ``None``.
    """
    try:
        path.unlink()
    except OSError as exc:
        logger.warning("could not delete %s: %s", path, exc)
        return f"Could not delete original {path.name}: {exc}"
    logger.info("deleted original %s", path)
    return None
