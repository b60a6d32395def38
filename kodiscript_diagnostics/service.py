"""
Editor-facing diagnostics service.

Adapts :class:`~kodiscript_diagnostics.orchestrator.DiagnosticsEngine` to an
editor that shows squiggles as *markers*: each validation replaces the
markers a model holds for the service's owner id.

The editor itself is abstracted behind two small protocols, so any host can
plug in (a language server, a test double, the in-memory
:class:`MarkerStore`).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

from kodiscript_diagnostics.config import DiagnosticsConfig
from kodiscript_diagnostics.diagnostics import Diagnostic, Severity
from kodiscript_diagnostics.orchestrator import DiagnosticsEngine

logger = logging.getLogger(__name__)


class TextModel(Protocol):
    def get_value(self) -> str: ...


class MarkerSink(Protocol):
    def set_model_markers(
        self, model: Any, owner: str, markers: Sequence[Marker]
    ) -> None: ...


class MarkerSeverity(IntEnum):
    HINT = 1
    INFO = 2
    WARNING = 4
    ERROR = 8

    @classmethod
    def from_severity(cls, severity: Severity) -> MarkerSeverity:
        return _SEVERITY_MAP[severity]


_SEVERITY_MAP: Dict[Severity, MarkerSeverity] = {
    Severity.ERROR: MarkerSeverity.ERROR,
    Severity.WARNING: MarkerSeverity.WARNING,
    Severity.INFO: MarkerSeverity.INFO,
}


@dataclass(frozen=True)
class Marker:
    """A diagnostic as displayed: a single-line range plus its message."""
    start_line: int
    start_column: int
    end_line: int
    end_column: int
    message: str
    severity: MarkerSeverity
    source: str = "KodiScript"
    code: str = ""

    @classmethod
    def from_diagnostic(
        cls,
        diagnostic: Diagnostic,
        span: int = 10,
        source: str = "KodiScript",
    ) -> Marker:
        # The end column is a display approximation, not a token length.
        return cls(
            start_line=diagnostic.line,
            start_column=diagnostic.column,
            end_line=diagnostic.line,
            end_column=diagnostic.column + span,
            message=diagnostic.message,
            severity=MarkerSeverity.from_severity(diagnostic.severity),
            source=source,
            code=diagnostic.error_id,
        )


class MarkerStore:
    """In-memory :class:`MarkerSink`, one marker list per (model, owner)."""

    def __init__(self) -> None:
        self._markers: Dict[Tuple[int, str], List[Marker]] = {}

    def set_model_markers(
        self, model: Any, owner: str, markers: Sequence[Marker]
    ) -> None:
        self._markers[(id(model), owner)] = list(markers)

    def get_model_markers(self, model: Any, owner: str) -> List[Marker]:
        return list(self._markers.get((id(model), owner), []))


class DiagnosticsService:
    """
    Validates text models and publishes the result as markers.

    Parameters
    ----------
    sink   : where markers are published
    engine : DiagnosticsEngine; one is built from ``config`` when omitted
    config : DiagnosticsConfig for owner id, marker source and span
    """

    def __init__(
        self,
        sink: MarkerSink,
        engine: Optional[DiagnosticsEngine] = None,
        config: Optional[DiagnosticsConfig] = None,
    ) -> None:
        self.sink = sink
        if config is None:
            config = engine.config if engine is not None else DiagnosticsConfig()
        self.config = config
        self.engine = engine or DiagnosticsEngine(config)

    @property
    def owner(self) -> str:
        return self.config.owner

    def validate(self, model: TextModel) -> List[Diagnostic]:
        """Diagnose the model's text and replace its markers."""
        diagnostics = self.engine.produce_diagnostics(model.get_value())
        markers = [
            Marker.from_diagnostic(d, self.config.marker_span, self.config.marker_source)
            for d in diagnostics
        ]
        self.sink.set_model_markers(model, self.owner, markers)
        logger.debug("published %d markers for owner %s", len(markers), self.owner)
        return diagnostics

    def clear_diagnostics(self, model: Any) -> None:
        """Remove every marker this service owns on ``model``."""
        self.sink.set_model_markers(model, self.owner, [])
