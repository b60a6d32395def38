"""
kodiscript_diagnostics/orchestrator.py — one validation call, end to end.

``produce_diagnostics(text)`` is the editor-facing entry point.  It loads
the Script Engine (once), runs every enabled checker over the text and
returns the merged list::

    [syntax diagnostic (0 or 1)..., undefined-variable warnings...]

The returned list is the complete state for that text; callers replace any
previously shown diagnostics with it.  Nothing raises past this module: an
engine that cannot be loaded yields ``[]``.
"""

from __future__ import annotations

import logging
import threading
from typing import List, Optional

from kodiscript_diagnostics.checkers import (
    CheckerContext,
    CheckerRegistry,
    default_registry,
)
from kodiscript_diagnostics.config import DiagnosticsConfig
from kodiscript_diagnostics.diagnostics import Diagnostic, dedupe
from kodiscript_diagnostics.engine_loader import EngineLoader
from kodiscript_diagnostics.errors import EngineUnavailableError

logger = logging.getLogger(__name__)


class DiagnosticsEngine:
    """
    Runs the checker suite against script text.

    Parameters
    ----------
    config   : DiagnosticsConfig (defaults apply when omitted)
    loader   : EngineLoader; built from ``config.engine_module`` when omitted
    registry : CheckerRegistry; :func:`default_registry` when omitted
    """

    def __init__(
        self,
        config: Optional[DiagnosticsConfig] = None,
        loader: Optional[EngineLoader] = None,
        registry: Optional[CheckerRegistry] = None,
    ) -> None:
        self.config = config or DiagnosticsConfig()
        self.loader = loader or EngineLoader(self.config.engine_module)
        self.registry = registry or default_registry()
        for name in self.config.disabled_checkers:
            self.registry.disable(name)

    def produce_diagnostics(self, text: str) -> List[Diagnostic]:
        try:
            engine = self.loader.get()
        except EngineUnavailableError as exc:
            logger.warning("diagnostics skipped: %s", exc.message)
            return []

        ctx = CheckerContext.for_source(text, engine, self.config)
        diagnostics: List[Diagnostic] = []
        for cls in self.registry.get_enabled():
            checker = cls()
            checker.configure(ctx)
            checker.collect_evidence(ctx)
            checker.diagnose(ctx)
            diagnostics.extend(checker.report(ctx))

        result = dedupe(diagnostics)
        logger.debug(
            "produced %d diagnostics for %d lines", len(result), len(ctx.lines)
        )
        return result


_default_engine: Optional[DiagnosticsEngine] = None
_default_lock = threading.Lock()


def get_default_engine() -> DiagnosticsEngine:
    """The process-wide engine used by :func:`produce_diagnostics`."""
    global _default_engine
    with _default_lock:
        if _default_engine is None:
            _default_engine = DiagnosticsEngine(DiagnosticsConfig.from_env())
        return _default_engine


def produce_diagnostics(text: str) -> List[Diagnostic]:
    """Diagnose ``text`` with the shared default engine."""
    return get_default_engine().produce_diagnostics(text)
