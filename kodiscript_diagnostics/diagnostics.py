"""
kodiscript_diagnostics/diagnostics.py
═════════════════════════════════════

Diagnostic model shared by every pass.

A :class:`Diagnostic` is an immutable value with a 1-based position, a
message and a :class:`Severity`.  Its wire shape (``to_dict``) is stable and
JSON-serializable so it can cross a process boundary, e.g. an out-of-process
language service::

    {"line": 2, "column": 7, "message": "Undefined variable 'y'",
     "severity": "warning"}
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping


class Severity(Enum):
    """Diagnostic severity levels."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


# Non-wire identifiers of the two diagnostic kinds the core produces.
SYNTAX_ERROR_ID = "syntaxError"
UNDEFINED_VARIABLE_ID = "undefinedVariable"


@dataclass(frozen=True)
class Diagnostic:
    """
    A single reported issue.

    Attributes
    ----------
    line      : 1-based line number
    column    : 1-based column number
    message   : Human-readable description
    severity  : Severity
    error_id  : Identifier of the diagnostic kind (not part of the wire shape)
    """
    line: int
    column: int
    message: str
    severity: Severity
    error_id: str = ""

    def __post_init__(self) -> None:
        if self.line < 1 or self.column < 1:
            raise ValueError(
                f"diagnostic position must be 1-based, got "
                f"{self.line}:{self.column}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the wire shape."""
        return {
            "line": self.line,
            "column": self.column,
            "message": self.message,
            "severity": self.severity.value,
        }

    def to_json(self) -> str:
        """Single-line JSON string of the wire shape."""
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Diagnostic:
        """Rebuild a diagnostic from its wire shape."""
        return cls(
            line=int(data["line"]),
            column=int(data["column"]),
            message=str(data["message"]),
            severity=Severity(data["severity"]),
        )


def dedupe(diagnostics: Iterable[Diagnostic]) -> List[Diagnostic]:
    """Drop exact duplicates, keeping the first occurrence and the order."""
    seen = set()
    result: List[Diagnostic] = []
    for diag in diagnostics:
        if diag in seen:
            continue
        seen.add(diag)
        result.append(diag)
    return result
