"""
Non-fatal issue records.

Degraded parses (unknown color syntax, a malformed token skipped during
registry initialization, a style value that fails its shape check) are
reported as ``Diagnostic`` entries returned alongside the primary results,
so callers can surface, log, or ignore them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class DiagnosticSeverity(str, Enum):
    """How much a diagnostic matters to the caller."""

    INFO = "info"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """A single non-fatal issue."""

    source: str
    message: str
    value: str | None = None
    severity: DiagnosticSeverity = DiagnosticSeverity.WARNING

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "source": self.source,
            "message": self.message,
            "value": self.value,
            "severity": self.severity.value,
        }

    def __str__(self) -> str:
        suffix = f" ({self.value!r})" if self.value is not None else ""
        return f"[{self.severity.value}] {self.source}: {self.message}{suffix}"
