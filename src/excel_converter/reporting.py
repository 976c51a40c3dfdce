"""Console rendering of per-file results and the run summary."""

from __future__ import annotations

import typer

from excel_converter.application.results import BatchSummary, ConversionResult


def _display(result: ConversionResult) -> str:
    return f"{result.job.source.name} -> {result.job.destination.name}"


class ConsoleReporter:
    """Print one tagged, coloured line per job result."""

    def report(self, result: ConversionResult) -> None:
        if result.outcome == "succeeded":
            typer.secho(f"[OK] {_display(result)}", fg=typer.colors.GREEN)
        elif result.outcome == "skipped":
            reason = f" ({result.reason})" if result.reason else ""
            typer.secho(
                f"[SKIP] {result.job.source.name}{reason}", fg=typer.colors.YELLOW
            )
        else:
            typer.secho(
                f"[FAIL] {result.job.source.name}: {result.error}",
                fg=typer.colors.RED,
                err=True,
            )
        if result.warning:
            typer.secho(f"[WARN] {result.warning}", fg=typer.colors.YELLOW, err=True)


def print_summary(summary: BatchSummary) -> None:
    """Print the final tally of a run."""
    if not summary.total:
        typer.echo("No matching files found.")
        return
    typer.echo("")
    typer.secho(
        f"Successfully converted: {summary.converted} files", fg=typer.colors.GREEN
    )
    typer.echo(f"Skipped: {summary.skipped} files")
    typer.secho(
        f"Failed: {summary.failed} files",
        fg=typer.colors.RED if summary.failed else None,
    )
