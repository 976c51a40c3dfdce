"""Typed option objects shared across conversion use-cases."""

from __future__ import annotations

from dataclasses import dataclass

from excel_converter.types import PdfQuality


@dataclass(frozen=True)
class PdfExportOptions:
    """Fixed-format export configuration."""

    quality: PdfQuality = "standard"
    include_doc_properties: bool = True
    ignore_print_areas: bool = False


@dataclass(frozen=True)
class BatchOptions:
    """Per-run behaviour shared by the conversion drivers.

    Parameters
    ----------
    delete_original : bool, default=False
        Remove the source file after a successful conversion.
    skip_existing : bool, default=False
        Skip jobs whose destination exists instead of asking for confirmation.
    cooldown_seconds : float, default=0.0
        Wait between successive conversions.
    """

    delete_original: bool = False
    skip_existing: bool = False
    cooldown_seconds: float = 0.0
