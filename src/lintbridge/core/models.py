from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from lintbridge.core.errors import LintBridgeError


class Severity(str, Enum):
    """Severity of a single diagnostic as understood by the editor host."""

    ERROR = "error"
    WARNING = "warning"
    OTHER = "other"

    @classmethod
    def from_label(cls, label: str) -> "Severity":
        """Map a linter severity label ("Error", "Warning", ...) to a Severity.

        Matching is exact; anything unrecognised becomes OTHER.
        """
        if label == "Error":
            return cls.ERROR
        if label == "Warning":
            return cls.WARNING
        return cls.OTHER

    @property
    def problem_type(self) -> str:
        """Problem type string expected by the editor host."""
        return PROBLEM_TYPES[self]

    @property
    def tag(self) -> str:
        """Uppercase prefix added in front of the diagnostic message."""
        return MESSAGE_TAGS[self]


PROBLEM_TYPES: Dict[Severity, str] = {
    Severity.ERROR: "problem_type_error",
    Severity.WARNING: "problem_type_warning",
    Severity.OTHER: "problem_type_meta",
}

MESSAGE_TAGS: Dict[Severity, str] = {
    Severity.ERROR: "ERROR: ",
    Severity.WARNING: "WARNING: ",
    Severity.OTHER: "UNKNOWN: ",
}


@dataclass(frozen=True)
class Diagnostic:
    """A single problem reported by the linter.

    ``line`` and ``column`` are kept exactly as the tool reported them
    (1-based). The zero-based editor position is exposed through ``pos``.
    """

    severity: Severity
    line: int
    column: int
    message: str

    @property
    def pos(self) -> Dict[str, int]:
        return {"line": max(self.line - 1, 0), "ch": max(self.column - 1, 0)}

    @property
    def display_message(self) -> str:
        return f"{self.severity.tag}{self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.severity.problem_type,
            "message": self.display_message,
            "pos": self.pos,
        }


@dataclass
class Report:
    """Ordered diagnostics for one file, in the order the tool emitted them.

    An empty report means the tool ran and found nothing.
    """

    diagnostics: List[Diagnostic] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.diagnostics)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.diagnostics)

    def count(self, severity: Severity) -> int:
        return sum(1 for d in self.diagnostics if d.severity is severity)

    def to_dict(self) -> Dict[str, Any]:
        """Render the report in the shape the editor host consumes."""
        return {"errors": [d.to_dict() for d in self.diagnostics]}


class LintStatus(str, Enum):
    """How a lint or fix request ended."""

    OK = "ok"
    TOOL_FAILED = "tool_failed"
    CONTEXT_UNRESOLVED = "context_unresolved"


@dataclass
class LintOutcome:
    """Result of a lint request.

    ``report`` is always present; it is empty when the tool did not run.
    """

    status: LintStatus
    report: Report = field(default_factory=Report)
    error: Optional[LintBridgeError] = None

    @property
    def ok(self) -> bool:
        return self.status is LintStatus.OK


@dataclass
class FixOutcome:
    """Result of a fix request."""

    status: LintStatus
    returncode: Optional[int] = None
    error: Optional[LintBridgeError] = None

    @property
    def ok(self) -> bool:
        return self.status is LintStatus.OK
