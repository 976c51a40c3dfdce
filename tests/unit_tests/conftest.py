"""In-memory stand-ins for an Excel automation session."""

from __future__ import annotations

from pathlib import Path

import pytest

from excel_converter.application.options import PdfExportOptions
from excel_converter.errors import ConversionError, DependencyUnavailableError, ExportError
from excel_converter.types import ExportFailureKind, TargetFormat


class FakeWorkbook:
    def __init__(self, launcher: FakeLauncher, source: Path) -> None:
        self.launcher = launcher
        self.source = source

    def save_as(self, destination: Path, target_format: TargetFormat) -> None:
        self.launcher.calls.append(("save_as", self.source.name, target_format))
        if self.source.name in self.launcher.fail_save:
            raise ConversionError(f"Could not save {destination.name}: disk full")
        destination.write_text(f"{target_format}:{self.source.name}")

    def export_fixed_format(
        self, destination: Path, options: PdfExportOptions
    ) -> None:
        self.launcher.calls.append(("export", self.source.name, options))
        kind = self.launcher.export_failures.get(self.source.name)
        if kind is not None:
            raise ExportError(f"Could not export {destination.name}: {kind}", kind=kind)
        destination.write_text(f"pdf:{self.source.name}")

    def close(self) -> None:
        self.launcher.calls.append(("close", self.source.name))
        self.launcher.open_workbooks -= 1
        if self.source.name in self.launcher.fail_close:
            raise RuntimeError("close exploded")


class FakeSession:
    def __init__(self, launcher: FakeLauncher) -> None:
        self.launcher = launcher

    def open_workbook(
        self,
        path: Path,
        *,
        read_only: bool = False,
        ignore_read_only_recommended: bool = False,
    ) -> FakeWorkbook:
        self.launcher.calls.append(
            ("open", path.name, read_only, ignore_read_only_recommended)
        )
        if path.name in self.launcher.fail_open:
            raise ConversionError(f"Could not open {path.name}: bad encoding")
        self.launcher.open_workbooks += 1
        return FakeWorkbook(self.launcher, path)

    def open_text(self, path: Path) -> FakeWorkbook:
        self.launcher.calls.append(("open_text", path.name))
        if path.name in self.launcher.fail_open_text:
            raise ConversionError(f"Could not open {path.name} as UTF-8 text: corrupt")
        self.launcher.open_workbooks += 1
        return FakeWorkbook(self.launcher, path)

    def quit(self) -> None:
        self.launcher.quits += 1
        if self.launcher.fail_quit:
            raise RuntimeError("quit exploded")


class FakeLauncher:
    """Records every interaction.

    File failure sets are keyed by file name; ``fail_start`` by 1-based start count.
    """

    def __init__(self) -> None:
        self.available = True
        self.checks = 0
        self.starts = 0
        self.quits = 0
        self.open_workbooks = 0
        self.calls: list[tuple[object, ...]] = []
        self.fail_open: set[str] = set()
        self.fail_open_text: set[str] = set()
        self.fail_save: set[str] = set()
        self.fail_close: set[str] = set()
        self.fail_quit = False
        self.fail_start: set[int] = set()
        self.export_failures: dict[str, ExportFailureKind] = {}

    def check_available(self) -> None:
        self.checks += 1
        if not self.available:
            raise DependencyUnavailableError(
                "Excel.Application is not registered; is Microsoft Excel installed?"
            )

    def start(self) -> FakeSession:
        self.starts += 1
        if self.starts in self.fail_start:
            raise DependencyUnavailableError("Could not start Excel: server busy")
        return FakeSession(self)

    def call_names(self) -> list[object]:
        return [call[0] for call in self.calls]


class RecordingReporter:
    def __init__(self) -> None:
        self.results: list[object] = []

    def report(self, result: object) -> None:
        self.results.append(result)


class ScriptedConfirmation:
    def __init__(self, answer: bool) -> None:
        self.answer = answer
        self.asked: list[Path] = []

    def confirm_overwrite(self, destination: Path) -> bool:
        self.asked.append(destination)
        return self.answer


@pytest.fixture
def fake_launcher() -> FakeLauncher:
    """Launcher whose sessions never touch a real Excel."""
    return FakeLauncher()


@pytest.fixture
def reporter() -> RecordingReporter:
    """Reporter collecting results in order."""
    return RecordingReporter()


@pytest.fixture
def confirm_yes() -> ScriptedConfirmation:
    """Confirmation provider that always accepts."""
    return ScriptedConfirmation(True)


@pytest.fixture
def confirm_no() -> ScriptedConfirmation:
    """Confirmation provider that always declines."""
    return ScriptedConfirmation(False)
