"""Status-line signal emitted by the session and the reader."""

from __future__ import annotations

from dataclasses import dataclass

from .constants import Severity, StatusCode


@dataclass(frozen=True, slots=True)
class Status:
    """One status-line update.

    Attributes:
        code: Machine-readable reason.
        text: Human-readable message (without the ``status:`` prefix).
        severity: Styling hint for views.
    """

    code: StatusCode
    text: str
    severity: Severity = Severity.INFO

    def __str__(self) -> str:
        return f"status: {self.text}"
