"""Unit tests for path resolution and file enumeration."""

from __future__ import annotations

from pathlib import Path

import pytest

from excel_converter.errors import InvalidArgumentError, InvalidPathError
from excel_converter.infrastructure.filesystem import (
    destination_for,
    ensure_destination_dir,
    iter_matching_files,
    remove_source,
    resolve_pdf_input,
    resolve_source_dir,
)


def test_resolve_source_dir_defaults_to_cwd(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Without a path the working directory is used."""
    monkeypatch.chdir(tmp_path)
    assert resolve_source_dir(None) == tmp_path.resolve()


def test_resolve_source_dir_rejects_files_and_missing(tmp_path: Path) -> None:
    """Only existing directories are valid sources."""
    file_path = tmp_path / "a.csv"
    file_path.write_text("x")

    with pytest.raises(InvalidPathError, match="does not exist"):
        resolve_source_dir(tmp_path / "missing")
    with pytest.raises(InvalidPathError, match="not a directory"):
        resolve_source_dir(file_path)


def test_ensure_destination_dir_creates_parents(tmp_path: Path) -> None:
    """Missing destination directories are created with their parents."""
    target = tmp_path / "a" / "b" / "c"

    assert ensure_destination_dir(target, tmp_path) == target.resolve()
    assert target.is_dir()


def test_ensure_destination_dir_defaults_to_source(tmp_path: Path) -> None:
    """The fallback directory is used when no destination is given."""
    assert ensure_destination_dir(None, tmp_path) == tmp_path.resolve()


def test_ensure_destination_dir_rejects_files(tmp_path: Path) -> None:
    """A destination that is a file is invalid."""
    file_path = tmp_path / "out"
    file_path.write_text("x")

    with pytest.raises(InvalidPathError):
        ensure_destination_dir(file_path, tmp_path)


def test_iter_matching_files_filters_and_sorts(tmp_path: Path) -> None:
    """Matching ignores case, directories, lock files and longer suffixes."""
    for name in ("b.xls", "A.XLS", "c.xlsx", "~$b.xls", "notes.txt"):
        (tmp_path / name).write_text("x")
    (tmp_path / "folder.xls").mkdir()
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "deep.xls").write_text("x")

    flat = [p.name for p in iter_matching_files(tmp_path, ".xls")]
    deep = [p.name for p in iter_matching_files(tmp_path, ".xls", recursive=True)]

    assert flat == ["A.XLS", "b.xls"]
    assert deep == ["A.XLS", "b.xls", "deep.xls"]


def test_destination_for_keeps_relative_folders(tmp_path: Path) -> None:
    """Nested sources map to the same relative folder in the destination."""
    source = tmp_path / "in" / "2024" / "jan.xls"

    mapped = destination_for(
        source,
        source_root=tmp_path / "in",
        destination_root=tmp_path / "out",
        target_format="xlsx",
    )

    assert mapped == tmp_path / "out" / "2024" / "jan.xlsx"


def test_resolve_pdf_input_single_file(tmp_path: Path) -> None:
    """A single workbook exports next to itself by default."""
    workbook = tmp_path / "Report.XLSX"
    workbook.write_text("x")

    resolved = resolve_pdf_input(workbook, None, batch=False)

    assert resolved.files == [workbook.resolve()]
    assert resolved.output_dir == tmp_path.resolve()


def test_resolve_pdf_input_errors(tmp_path: Path) -> None:
    """Missing paths, bare directories and wrong extensions are rejected."""
    other = tmp_path / "data.csv"
    other.write_text("x")

    with pytest.raises(InvalidPathError):
        resolve_pdf_input(tmp_path / "missing.xlsx", None, batch=False)
    with pytest.raises(InvalidArgumentError):
        resolve_pdf_input(tmp_path, None, batch=False)
    with pytest.raises(InvalidArgumentError):
        resolve_pdf_input(other, None, batch=False)


def test_resolve_pdf_input_batch_creates_output_dir(tmp_path: Path) -> None:
    """Batch mode lists workbooks and creates the output directory."""
    (tmp_path / "a.xlsx").write_text("x")
    output = tmp_path / "pdf"

    resolved = resolve_pdf_input(tmp_path, output, batch=True)

    assert [p.name for p in resolved.files] == ["a.xlsx"]
    assert output.is_dir()


def test_remove_source_reports_failures(tmp_path: Path) -> None:
    """Deleting a missing file yields a warning instead of raising."""
    existing = tmp_path / "a.csv"
    existing.write_text("x")

    assert remove_source(existing) is None
    assert not existing.exists()
    warning = remove_source(existing)
    assert warning is not None
    assert "a.csv" in warning
