"""Confirmation providers for replacing existing destination files."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import typer

from excel_converter.application.ports import ConfirmationProvider


class OnExisting(str, Enum):
    """What to do when a destination file already exists."""

    ASK = "ask"
    OVERWRITE = "overwrite"
    SKIP = "skip"


class InteractiveConfirmation:
    """Ask on the terminal; the default answer is no."""

    def confirm_overwrite(self, destination: Path) -> bool:
        return typer.confirm(f"{destination} already exists. Overwrite?", default=False)


class FixedConfirmation:
    """Answer every overwrite question the same way."""

    def __init__(self, answer: bool) -> None:
        self.answer = answer

    def confirm_overwrite(self, destination: Path) -> bool:
        del destination
        return self.answer


def confirmation_for(policy: OnExisting) -> ConfirmationProvider:
    """Build the confirmation provider for an ``--on-existing`` policy."""
    if policy is OnExisting.OVERWRITE:
        return FixedConfirmation(True)
    if policy is OnExisting.SKIP:
        return FixedConfirmation(False)
    return InteractiveConfirmation()
