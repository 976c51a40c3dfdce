"""Shared type aliases for conversion modules."""

from __future__ import annotations

from typing import Literal

type TargetFormat = Literal["xlsx", "pdf"]
type JobOutcome = Literal["succeeded", "failed", "skipped"]
type ExportFailureKind = Literal["print_range", "access_denied", "unknown"]
type PdfQuality = Literal["standard", "minimum"]

TARGET_EXTENSIONS: dict[TargetFormat, str] = {
    "xlsx": ".xlsx",
    "pdf": ".pdf",
}
