"""
kodiscript_diagnostics/checkers.py
══════════════════════════════════

Checker framework and the two built-in KodiScript checkers.

Every pass of the diagnostics engine is a :class:`Checker` driven through
the same four-phase lifecycle by the orchestrator::

    configure(ctx) → collect_evidence(ctx) → diagnose(ctx) → report(ctx)

Built-in checkers
─────────────────
  syntax              SyntaxChecker             tokenize + parse, locate failure
  undefined-variable  UndefinedVariableChecker  declarations + usage scan

Checkers run in registration order, so syntax diagnostics always precede
semantic ones in the merged result.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, FrozenSet, List, Optional, Set, Type

from kodiscript_diagnostics.config import DiagnosticsConfig
from kodiscript_diagnostics.declarations import collect_declarations
from kodiscript_diagnostics.diagnostics import (
    SYNTAX_ERROR_ID,
    UNDEFINED_VARIABLE_ID,
    Diagnostic,
    Severity,
)
from kodiscript_diagnostics.engine_loader import ScriptEngine
from kodiscript_diagnostics.language import KEYWORDS, NATIVE_FUNCTIONS
from kodiscript_diagnostics.locator import locate
from kodiscript_diagnostics.usages import scan_usages

logger = logging.getLogger(__name__)


# ═════════════════════════════════════════════════════════════════════════
#  PART 1: CHECKER CONTEXT
# ═════════════════════════════════════════════════════════════════════════

@dataclass
class CheckerContext:
    """
    Shared context passed to every checker during one validation call.

    Attributes
    ----------
    source   : the full buffer text
    lines    : ``source`` split on ``"\\n"``
    engine   : the loaded Script Engine
    config   : DiagnosticsConfig
    analyses : results shared between checkers (keyed by name)
    """
    source: str
    lines: List[str]
    engine: ScriptEngine
    config: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)
    analyses: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def for_source(
        cls,
        source: str,
        engine: ScriptEngine,
        config: Optional[DiagnosticsConfig] = None,
    ) -> CheckerContext:
        return cls(
            source=source,
            lines=source.split("\n"),
            engine=engine,
            config=config or DiagnosticsConfig(),
        )

    def get_analysis(self, name: str) -> Any:
        return self.analyses.get(name)

    def set_analysis(self, name: str, result: Any) -> None:
        self.analyses[name] = result


# ═════════════════════════════════════════════════════════════════════════
#  PART 2: CHECKER BASE CLASS
# ═════════════════════════════════════════════════════════════════════════

class Checker(ABC):
    """
    Abstract base class for all checkers.

    Lifecycle
    ─────────
      1. ``configure(ctx)``        — read configuration
      2. ``collect_evidence(ctx)`` — gather facts about the source
      3. ``diagnose(ctx)``         — turn evidence into diagnostics
      4. ``report(ctx)``           — return final diagnostics

    Subclass Contract
    ─────────────────
      - Override ``name``, ``description``, ``error_ids``
      - Implement ``collect_evidence()`` and ``diagnose()``
    """

    name: ClassVar[str] = "base-checker"
    description: ClassVar[str] = ""
    error_ids: ClassVar[FrozenSet[str]] = frozenset()
    default_severity: ClassVar[Severity] = Severity.WARNING

    def __init__(self) -> None:
        self._diagnostics: List[Diagnostic] = []

    def configure(self, ctx: CheckerContext) -> None:
        """Called before evidence collection.  Default does nothing."""
        pass

    @abstractmethod
    def collect_evidence(self, ctx: CheckerContext) -> None:
        ...

    @abstractmethod
    def diagnose(self, ctx: CheckerContext) -> None:
        """Append diagnostics to ``self._diagnostics``."""
        ...

    def report(self, ctx: CheckerContext) -> List[Diagnostic]:
        return list(self._diagnostics)

    def _emit(
        self,
        error_id: str,
        message: str,
        line: int,
        column: int = 1,
        severity: Optional[Severity] = None,
    ) -> None:
        """Helper to create and store a diagnostic."""
        self._diagnostics.append(Diagnostic(
            line=line,
            column=column,
            message=message,
            severity=severity or self.default_severity,
            error_id=error_id,
        ))

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} '{self.name}'>"


# ═════════════════════════════════════════════════════════════════════════
#  PART 3: BUILT-IN CHECKERS
# ═════════════════════════════════════════════════════════════════════════

class SyntaxChecker(Checker):
    """Runs the Script Engine and reports its first failure, if any."""

    name = "syntax"
    description = "Syntax errors reported by the Script Engine"
    error_ids = frozenset({SYNTAX_ERROR_ID})
    default_severity = Severity.ERROR

    def __init__(self) -> None:
        super().__init__()
        self._failure: Optional[Exception] = None

    def collect_evidence(self, ctx: CheckerContext) -> None:
        try:
            tokens = ctx.engine.tokenize(ctx.source)
            ctx.set_analysis("ast", ctx.engine.parse(tokens))
        except Exception as exc:
            logger.debug("script engine rejected source: %s", exc)
            self._failure = exc

    def diagnose(self, ctx: CheckerContext) -> None:
        if self._failure is None:
            return
        located = locate(self._failure)
        self._emit(
            SYNTAX_ERROR_ID,
            located.message,
            located.line,
            located.column,
            located.severity,
        )


class UndefinedVariableChecker(Checker):
    """
    Flags plain uses of identifiers that are never declared in the file.

    Names in ``config.predefined_names`` count as declared; names in
    ``config.extra_natives`` count as native functions.
    """

    name = "undefined-variable"
    description = "Identifiers used but never declared with let or as fn parameters"
    error_ids = frozenset({UNDEFINED_VARIABLE_ID})
    default_severity = Severity.WARNING

    def __init__(self) -> None:
        super().__init__()
        self._natives: FrozenSet[str] = NATIVE_FUNCTIONS
        self._declared: Set[str] = set()

    def configure(self, ctx: CheckerContext) -> None:
        self._natives = NATIVE_FUNCTIONS | ctx.config.extra_natives

    def collect_evidence(self, ctx: CheckerContext) -> None:
        self._declared = collect_declarations(ctx.lines) | ctx.config.predefined_names
        ctx.set_analysis("declarations", self._declared)

    def diagnose(self, ctx: CheckerContext) -> None:
        self._diagnostics.extend(scan_usages(
            ctx.lines,
            self._declared,
            keywords=KEYWORDS,
            natives=self._natives,
        ))


# ═════════════════════════════════════════════════════════════════════════
#  PART 4: CHECKER REGISTRY
# ═════════════════════════════════════════════════════════════════════════

class CheckerRegistry:
    """
    Ordered registry of checker classes.

    >>> registry = CheckerRegistry()
    >>> registry.register(SyntaxChecker)
    >>> registry.names
    ['syntax']
    """

    def __init__(self) -> None:
        self._checkers: Dict[str, Type[Checker]] = {}
        self._disabled: Set[str] = set()

    def register(self, checker_cls: Type[Checker]) -> None:
        """Register a checker class.  Re-registering a name keeps its slot."""
        self._checkers[checker_cls.name] = checker_cls

    def unregister(self, name: str) -> None:
        self._checkers.pop(name, None)

    def disable(self, name: str) -> None:
        self._disabled.add(name)

    def enable(self, name: str) -> None:
        self._disabled.discard(name)

    def get_enabled(self) -> List[Type[Checker]]:
        """Enabled checker classes, in registration order."""
        return [
            cls for name, cls in self._checkers.items()
            if name not in self._disabled
        ]

    @property
    def names(self) -> List[str]:
        return list(self._checkers.keys())


def default_registry() -> CheckerRegistry:
    """A fresh registry holding the built-in checkers in run order."""
    registry = CheckerRegistry()
    registry.register(SyntaxChecker)
    registry.register(UndefinedVariableChecker)
    return registry
