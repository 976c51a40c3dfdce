"""Application-layer job and result objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from excel_converter.types import JobOutcome, TargetFormat


@dataclass(frozen=True)
class ConversionJob:
    """One source file and where its converted copy goes."""

    source: Path
    destination: Path
    target_format: TargetFormat


@dataclass(frozen=True)
class ConversionResult:
    """Structured outcome of a single job."""

    job: ConversionJob
    outcome: JobOutcome
    error: str | None = None
    reason: str | None = None
    warning: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.outcome == "succeeded"


@dataclass
class BatchSummary:
    """Accumulated results of one run."""

    results: list[ConversionResult] = field(default_factory=list)

    def add(self, result: ConversionResult) -> None:
        self.results.append(result)

    def _count(self, outcome: JobOutcome) -> int:
        return sum(1 for result in self.results if result.outcome == outcome)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def converted(self) -> int:
        return sum(1 for result in self.results if result.succeeded)

    @property
    def skipped(self) -> int:
        return self._count("skipped")

    @property
    def failed(self) -> int:
        return self._count("failed")

    def exit_code(self, *, require_success: bool = False) -> int:
        """Process exit code for this run.

        Parameters
        ----------
        require_success : bool, default=False
            Treat a non-empty run without a single success as a failure.

        Returns
        -------
        int
            ``0`` or ``1``.
        """
        if require_success and self.total and not self.converted:
            return 1
        return 0
