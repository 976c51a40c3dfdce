"""Pydantic schemas for runtime validation of command inputs."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DirectoryBatchConfig(BaseModel):
    """Validated input for directory-based conversions."""

    model_config = ConfigDict(extra="forbid")

    source_dir: Path | None = None
    destination_dir: Path | None = None
    extension: str
    recursive: bool = False
    delete_original: bool = False

    @field_validator("extension")
    @classmethod
    def _normalize_extension(cls, value: str) -> str:
        value = value.strip().lower()
        if not value:
            raise ValueError("extension cannot be empty.")
        if not value.startswith("."):
            value = f".{value}"
        return value


class PdfExportConfig(BaseModel):
    """Validated input for the XLSX to PDF export."""

    model_config = ConfigDict(extra="forbid")

    input_path: Path
    output_dir: Path | None = None
    batch: bool = False
    open_settle_seconds: float = Field(default=1.0, ge=0.0)
    cooldown_seconds: float = Field(default=0.5, ge=0.0)
