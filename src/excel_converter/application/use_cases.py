"""Application use-cases orchestrating batch conversion runs."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from contextlib import ExitStack
from functools import partial
from pathlib import Path

from pydantic import ValidationError

from excel_converter.adapters.excel import ExcelSessionLauncher
from excel_converter.application.options import BatchOptions, PdfExportOptions
from excel_converter.application.ports import (
    AutomationSession,
    ConfirmationProvider,
    ResultReporter,
    SessionLauncher,
    Workbook,
)
from excel_converter.application.results import (
    BatchSummary,
    ConversionJob,
    ConversionResult,
)
from excel_converter.application.session import open_session, opened_workbook
from excel_converter.errors import (
    ConversionError,
    ExportError,
    InvalidArgumentError,
    describe_error,
)
from excel_converter.infrastructure.filesystem import (
    destination_for,
    ensure_destination_dir,
    iter_matching_files,
    remove_source,
    resolve_pdf_input,
    resolve_source_dir,
)
from excel_converter.schemas import DirectoryBatchConfig, PdfExportConfig
from excel_converter.types import TargetFormat

logger = logging.getLogger(__name__)

type JobConverter = Callable[[AutomationSession, ConversionJob], None]


def save_csv_as_xlsx(session: AutomationSession, job: ConversionJob) -> None:
    """Open a CSV file and save it as an XLSX workbook.

    A CSV that Excel refuses to open with its locale defaults is retried as
    UTF-8 delimited text.
    """

    def _open() -> Workbook:
        try:
            return session.open_workbook(job.source)
        except ConversionError as exc:
            logger.info(
                "default open of %s failed (%s); retrying as UTF-8 text",
                job.source.name,
                exc,
            )
            return session.open_text(job.source)

    with opened_workbook(job.source, _open) as workbook:
        workbook.save_as(job.destination, job.target_format)


def save_xls_as_xlsx(session: AutomationSession, job: ConversionJob) -> None:
    """Open a legacy XLS workbook and save it as XLSX."""
    opener = partial(session.open_workbook, job.source)
    with opened_workbook(job.source, opener) as workbook:
        workbook.save_as(job.destination, job.target_format)


def export_xlsx_as_pdf(
    session: AutomationSession,
    job: ConversionJob,
    *,
    export_options: PdfExportOptions,
    settle_seconds: float = 0.0,
) -> None:
    """Export a workbook to PDF, falling back to save-as PDF on range failures.

    Parameters
    ----------
    session : AutomationSession
        Running session.
    job : ConversionJob
        Source workbook and destination PDF.
    export_options : PdfExportOptions
        Fixed-format export settings.
    settle_seconds : float, default=0.0
        Wait after opening before exporting.

    Raises
    ------
    ConversionError
        If the workbook cannot be opened or neither export path succeeds.
    """
    opener = partial(
        session.open_workbook,
        job.source,
        read_only=True,
        ignore_read_only_recommended=True,
    )
    with opened_workbook(job.source, opener) as workbook:
        if settle_seconds > 0:
            time.sleep(settle_seconds)
        try:
            workbook.export_fixed_format(job.destination, export_options)
        except ExportError as exc:
            if not exc.recoverable:
                raise
            logger.info(
                "fixed-format export of %s failed (%s); retrying via save-as PDF",
                job.source.name,
                exc.kind,
            )
            try:
                workbook.save_as(job.destination, "pdf")
            except ConversionError as fallback_exc:
                raise ConversionError(
                    f"PDF export and save-as fallback both failed for {job.source.name}"
                ) from fallback_exc


def run_jobs(
    jobs: Iterable[ConversionJob],
    *,
    launcher: SessionLauncher,
    converter: JobConverter,
    options: BatchOptions,
    confirmation: ConfirmationProvider | None = None,
    reporter: ResultReporter | None = None,
    session_per_job: bool = False,
) -> BatchSummary:
    """Run ``converter`` over every job, one at a time.

    The session is started lazily, so a run that skips every job never
    launches the application. A job's failure is recorded and the run moves
    on to the next job.

    Parameters
    ----------
    jobs : Iterable[ConversionJob]
        Jobs in processing order.
    launcher : SessionLauncher
        Source of automation sessions.
    converter : JobConverter
        Format-specific open/save/close routine.
    options : BatchOptions
        Skip, delete and delay behaviour.
    confirmation : ConfirmationProvider | None, default=None
        Asked before replacing an existing destination. ``None`` declines.
    reporter : ResultReporter | None, default=None
        Receives each result as it is produced.
    session_per_job : bool, default=False
        Start and quit a fresh session for every job.

    Returns
    -------
    BatchSummary
        All results in processing order.
    """
    summary = BatchSummary()
    with ExitStack() as stack:
        shared: AutomationSession | None = None
        attempted = 0
        for job in jobs:
            skip_reason = _skip_reason(job, options, confirmation)
            if skip_reason is not None:
                result = ConversionResult(job=job, outcome="skipped", reason=skip_reason)
            else:
                if attempted and options.cooldown_seconds > 0:
                    time.sleep(options.cooldown_seconds)
                attempted += 1
                if session_per_job:
                    with ExitStack() as job_stack:
                        session, result = _start_session(job_stack, launcher, job)
                        if session is not None:
                            result = _attempt(converter, session, job, options)
                else:
                    if shared is None:
                        shared, result = _start_session(stack, launcher, job)
                    if shared is not None:
                        result = _attempt(converter, shared, job, options)
            summary.add(result)
            if reporter is not None:
                reporter.report(result)
    logger.info(
        "run finished: %d converted, %d skipped, %d failed",
        summary.converted,
        summary.skipped,
        summary.failed,
    )
    return summary


def _skip_reason(
    job: ConversionJob,
    options: BatchOptions,
    confirmation: ConfirmationProvider | None,
) -> str | None:
    if not job.destination.exists():
        return None
    if options.skip_existing:
        return "destination already exists"
    if confirmation is not None and confirmation.confirm_overwrite(job.destination):
        logger.debug("overwriting %s", job.destination)
        return None
    return "overwrite declined"


def _start_session(
    stack: ExitStack, launcher: SessionLauncher, job: ConversionJob
) -> tuple[AutomationSession | None, ConversionResult | None]:
    """Enter a session on ``stack``; a start failure becomes ``job``'s result."""
    try:
        return stack.enter_context(open_session(launcher)), None
    except Exception as exc:
        logger.debug("could not start a session for %s", job.source, exc_info=True)
        wrapped = ConversionError(f"Could not start Excel for {job.source.name}")
        wrapped.__cause__ = exc
        return None, _failed(job, wrapped)


def _failed(job: ConversionJob, exc: ConversionError) -> ConversionResult:
    return ConversionResult(job=job, outcome="failed", error=describe_error(exc))


def _attempt(
    converter: JobConverter,
    session: AutomationSession,
    job: ConversionJob,
    options: BatchOptions,
) -> ConversionResult:
    try:
        job.destination.parent.mkdir(parents=True, exist_ok=True)
        converter(session, job)
    except ConversionError as exc:
        logger.debug("conversion of %s failed", job.source, exc_info=True)
        return _failed(job, exc)
    except Exception as exc:
        logger.debug("unexpected error converting %s", job.source, exc_info=True)
        wrapped = ConversionError(f"Unexpected error converting {job.source.name}")
        wrapped.__cause__ = exc
        return _failed(job, wrapped)

    warning = remove_source(job.source) if options.delete_original else None
    return ConversionResult(job=job, outcome="succeeded", warning=warning)


def _directory_jobs(
    config: DirectoryBatchConfig, target_format: TargetFormat
) -> list[ConversionJob]:
    source_dir = resolve_source_dir(config.source_dir)
    destination_dir = ensure_destination_dir(config.destination_dir, source_dir)
    return [
        ConversionJob(
            source=source,
            destination=destination_for(
                source,
                source_root=source_dir,
                destination_root=destination_dir,
                target_format=target_format,
            ),
            target_format=target_format,
        )
        for source in iter_matching_files(
            source_dir, config.extension, recursive=config.recursive
        )
    ]


def _validated_directory_config(**params: object) -> DirectoryBatchConfig:
    try:
        return DirectoryBatchConfig.model_validate(params)
    except ValidationError as exc:
        raise InvalidArgumentError(f"Invalid conversion parameters: {exc}") from exc


def convert_csv_directory(
    *,
    source_dir: Path | None,
    destination_dir: Path | None,
    delete_original: bool = False,
    launcher: SessionLauncher | None = None,
    reporter: ResultReporter | None = None,
) -> BatchSummary:
    """Use-case: convert every CSV in a directory into an XLSX workbook.

    Existing destinations are skipped without asking, and each file gets its
    own session.
    """
    launcher = launcher or ExcelSessionLauncher()
    launcher.check_available()

    config = _validated_directory_config(
        source_dir=source_dir,
        destination_dir=destination_dir,
        extension=".csv",
        delete_original=delete_original,
    )
    jobs = _directory_jobs(config, "xlsx")
    if not jobs:
        logger.info("no .csv files found")
    return run_jobs(
        jobs,
        launcher=launcher,
        converter=save_csv_as_xlsx,
        options=BatchOptions(delete_original=config.delete_original, skip_existing=True),
        reporter=reporter,
        session_per_job=True,
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
    """Use-case: convert every XLS in a directory (tree) into XLSX."""
    launcher = launcher or ExcelSessionLauncher()
    launcher.check_available()

    config = _validated_directory_config(
        source_dir=source_dir,
        destination_dir=destination_dir,
        extension=".xls",
        recursive=recursive,
        delete_original=delete_original,
    )
    jobs = _directory_jobs(config, "xlsx")
    if not jobs:
        logger.info("no .xls files found")
    return run_jobs(
        jobs,
        launcher=launcher,
        converter=save_xls_as_xlsx,
        options=BatchOptions(delete_original=config.delete_original),
        confirmation=confirmation,
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
    """Use-case: export one workbook, or a directory of them, to PDF."""
    launcher = launcher or ExcelSessionLauncher()
    launcher.check_available()

    try:
        config = PdfExportConfig(
            input_path=input_path,
            output_dir=output_dir,
            batch=batch,
            open_settle_seconds=open_settle_seconds,
            cooldown_seconds=cooldown_seconds,
        )
    except ValidationError as exc:
        raise InvalidArgumentError(f"Invalid PDF export parameters: {exc}") from exc

    resolved = resolve_pdf_input(config.input_path, config.output_dir, batch=config.batch)
    jobs = [
        ConversionJob(
            source=source,
            destination=resolved.output_dir / f"{source.stem}.pdf",
            target_format="pdf",
        )
        for source in resolved.files
    ]
    if not jobs:
        logger.info("no .xlsx files found")
    converter = partial(
        export_xlsx_as_pdf,
        export_options=export_options or PdfExportOptions(),
        settle_seconds=config.open_settle_seconds,
    )
    return run_jobs(
        jobs,
        launcher=launcher,
        converter=converter,
        options=BatchOptions(cooldown_seconds=config.cooldown_seconds),
        confirmation=confirmation,
        reporter=reporter,
    )
