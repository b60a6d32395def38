# kodiscript_diagnostics/errors.py
"""
KodiScript diagnostics error types.

Error Hierarchy
───────────────
  KodiScriptError (base)
  ├── ScriptSyntaxError        - engine-side syntax failures
  │   ├── LexicalError         - tokenization failures
  │   └── UnexpectedTokenError - parse-time grammar violations
  ├── EngineUnavailableError   - the Script Engine could not be loaded
  └── ConfigError              - unreadable or malformed configuration

Only ``EngineUnavailableError`` and ``ConfigError`` are raised by the
diagnostics core itself.  ``ScriptSyntaxError`` and its subclasses belong to
the reference engine in :mod:`kodiscript_diagnostics.engine`; the core never
lets them escape ``produce_diagnostics``.
"""

from __future__ import annotations

from typing import Optional, Sequence


class KodiScriptError(Exception):
    """Base exception for all KodiScript diagnostics errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# ───────────────────────────────────────────────────────────────────────────
# SYNTAX ERRORS (raised by the Script Engine)
# ───────────────────────────────────────────────────────────────────────────

class ScriptSyntaxError(KodiScriptError):
    """
    Syntax failure reported by the Script Engine.

    The location, when known, is embedded in the message text as
    ``at line N, column M``.  ``line``/``column`` are kept as attributes for
    engine-side callers, but the diagnostics core only reads the text.
    """

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        if line is not None and column is not None:
            text = f"{message} at line {line}, column {column}"
        elif line is not None:
            text = f"{message} at line {line}"
        else:
            text = message
        super().__init__(text)
        self.reason = message
        self.line = line
        self.column = column


class LexicalError(ScriptSyntaxError):
    """Error during tokenization."""


class UnexpectedTokenError(ScriptSyntaxError):
    """Unexpected token encountered during parsing."""

    def __init__(
        self,
        got: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        expected: Optional[Sequence[str]] = None,
    ) -> None:
        self.got = got
        self.expected = list(expected) if expected else []
        if len(self.expected) == 1:
            message = f"Expected {self.expected[0]} but found {got}"
        elif self.expected:
            message = f"Expected one of {', '.join(self.expected)} but found {got}"
        else:
            message = f"Unexpected {got}"
        super().__init__(message, line, column)


# ───────────────────────────────────────────────────────────────────────────
# INFRASTRUCTURE ERRORS
# ───────────────────────────────────────────────────────────────────────────

class EngineUnavailableError(KodiScriptError):
    """The Script Engine failed to import or does not expose tokenize/parse."""

    def __init__(
        self,
        module_name: str,
        cause: Optional[BaseException] = None,
    ) -> None:
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Script engine '{module_name}' is unavailable{detail}")
        self.module_name = module_name
        self.cause = cause


class ConfigError(KodiScriptError):
    """Configuration could not be read or has the wrong shape."""
