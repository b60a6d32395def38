"""
Error location recovery.

The Script Engine only promises human-readable failure text.  ``locate``
turns that text into a positioned :class:`Diagnostic` using ordered pattern
matches (first match wins):

  1. ``[at] line N, column M`` or ``line N:M``  → (N, M), location removed
     from the message
  2. ``line N``                                → (N, 1), message unchanged
  3. nothing                                   → (1, 1), message unchanged

It never raises, whatever the input looks like.
"""

from __future__ import annotations

import re
from typing import Any

from kodiscript_diagnostics.diagnostics import (
    SYNTAX_ERROR_ID,
    Diagnostic,
    Severity,
)

# Matches: at line 3, column 14  /  line 3 column 14  /  line 3:14
_LINE_COLUMN_RE = re.compile(
    r"(?:at\s+)?line\s+(\d+)(?:,?\s*column\s+|\s*:\s*)(\d+)",
    re.IGNORECASE | re.ASCII,
)

# Matches: line 3
_LINE_RE = re.compile(r"line\s+(\d+)", re.IGNORECASE | re.ASCII)


def _position(raw: str) -> int:
    try:
        return max(1, int(raw))
    except ValueError:
        # digit runs beyond the int conversion limit
        return 1


def locate(error: Any) -> Diagnostic:
    """Convert a Script Engine failure into one ERROR diagnostic."""
    message = str(error)

    match = _LINE_COLUMN_RE.search(message)
    if match:
        remainder = message.replace(match.group(0), "", 1).strip()
        return Diagnostic(
            line=_position(match.group(1)),
            column=_position(match.group(2)),
            message=remainder or message,
            severity=Severity.ERROR,
            error_id=SYNTAX_ERROR_ID,
        )

    match = _LINE_RE.search(message)
    if match:
        return Diagnostic(
            line=_position(match.group(1)),
            column=1,
            message=message,
            severity=Severity.ERROR,
            error_id=SYNTAX_ERROR_ID,
        )

    return Diagnostic(
        line=1,
        column=1,
        message=message,
        severity=Severity.ERROR,
        error_id=SYNTAX_ERROR_ID,
    )
