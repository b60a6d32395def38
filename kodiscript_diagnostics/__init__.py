"""
kodiscript_diagnostics — live diagnostics for KodiScript source text.

Two passes run on every call:

  * **syntax**: the Script Engine tokenizes and parses the text; its first
    failure is located and reported as an error;
  * **undefined-variable**: a line-oriented scan warns about identifiers
    that are used but never declared with ``let`` or as ``fn`` parameters.

Quick start
───────────
    >>> from kodiscript_diagnostics import produce_diagnostics
    >>> [d.to_dict() for d in produce_diagnostics("let x = 1\\nprint(y)")]
    [{'line': 2, 'column': 7, 'message': "Undefined variable 'y'", 'severity': 'warning'}]
"""

from __future__ import annotations

from kodiscript_diagnostics.checkers import (
    Checker,
    CheckerContext,
    CheckerRegistry,
    SyntaxChecker,
    UndefinedVariableChecker,
    default_registry,
)
from kodiscript_diagnostics.config import DiagnosticsConfig
from kodiscript_diagnostics.declarations import collect_declarations
from kodiscript_diagnostics.diagnostics import Diagnostic, Severity, dedupe
from kodiscript_diagnostics.engine_loader import EngineLoader, LoadState, ScriptEngine
from kodiscript_diagnostics.errors import (
    ConfigError,
    EngineUnavailableError,
    KodiScriptError,
    LexicalError,
    ScriptSyntaxError,
    UnexpectedTokenError,
)
from kodiscript_diagnostics.locator import locate
from kodiscript_diagnostics.orchestrator import DiagnosticsEngine, produce_diagnostics
from kodiscript_diagnostics.scrubber import is_comment_line, scrub
from kodiscript_diagnostics.service import (
    DiagnosticsService,
    Marker,
    MarkerSeverity,
    MarkerStore,
)
from kodiscript_diagnostics.usages import scan_usages

__version__ = "0.1.0"

__all__ = [
    # entry points
    "produce_diagnostics",
    "DiagnosticsEngine",
    "DiagnosticsService",
    # model
    "Diagnostic",
    "Severity",
    "dedupe",
    "Marker",
    "MarkerSeverity",
    "MarkerStore",
    # passes
    "scrub",
    "is_comment_line",
    "collect_declarations",
    "scan_usages",
    "locate",
    # checkers
    "Checker",
    "CheckerContext",
    "CheckerRegistry",
    "SyntaxChecker",
    "UndefinedVariableChecker",
    "default_registry",
    # engine + config
    "EngineLoader",
    "LoadState",
    "ScriptEngine",
    "DiagnosticsConfig",
    # errors
    "KodiScriptError",
    "ScriptSyntaxError",
    "LexicalError",
    "UnexpectedTokenError",
    "EngineUnavailableError",
    "ConfigError",
]
