# tests/test_service.py
"""
Tests for the marker-publishing DiagnosticsService.
"""

import types
from unittest.mock import MagicMock

import pytest

from kodiscript_diagnostics.config import DiagnosticsConfig
from kodiscript_diagnostics.diagnostics import Diagnostic, Severity
from kodiscript_diagnostics.orchestrator import DiagnosticsEngine
from kodiscript_diagnostics.service import (
    DiagnosticsService,
    Marker,
    MarkerSeverity,
    MarkerStore,
)


def _model(text):
    return types.SimpleNamespace(get_value=lambda: text)


class TestMarker:

    def test_from_diagnostic(self):
        diag = Diagnostic(2, 7, "Undefined variable 'y'", Severity.WARNING, "undefinedVariable")
        marker = Marker.from_diagnostic(diag)
        assert marker == Marker(
            start_line=2,
            start_column=7,
            end_line=2,
            end_column=17,
            message="Undefined variable 'y'",
            severity=MarkerSeverity.WARNING,
            source="KodiScript",
            code="undefinedVariable",
        )

    def test_custom_span_and_source(self):
        diag = Diagnostic(1, 1, "m", Severity.ERROR)
        marker = Marker.from_diagnostic(diag, span=3, source="Lint")
        assert (marker.end_column, marker.source) == (4, "Lint")

    @pytest.mark.parametrize("severity,expected", [
        (Severity.ERROR, MarkerSeverity.ERROR),
        (Severity.WARNING, MarkerSeverity.WARNING),
        (Severity.INFO, MarkerSeverity.INFO),
    ])
    def test_severity_mapping(self, severity, expected):
        assert MarkerSeverity.from_severity(severity) is expected

    def test_marker_severity_values(self):
        assert [int(s) for s in MarkerSeverity] == [1, 2, 4, 8]


class TestMarkerStore:

    def test_replace_per_model_and_owner(self):
        store = MarkerStore()
        a, b = _model(""), _model("")
        marker = Marker(1, 1, 1, 2, "m", MarkerSeverity.ERROR)
        store.set_model_markers(a, "kodiscript", [marker])
        store.set_model_markers(b, "other", [marker, marker])
        assert store.get_model_markers(a, "kodiscript") == [marker]
        assert store.get_model_markers(a, "other") == []
        store.set_model_markers(a, "kodiscript", [])
        assert store.get_model_markers(a, "kodiscript") == []


class TestDiagnosticsService:

    def test_validate_publishes_markers(self):
        store = MarkerStore()
        service = DiagnosticsService(store)
        model = _model("let x = 1\nprint(y)")
        diags = service.validate(model)
        assert [d.message for d in diags] == ["Undefined variable 'y'"]
        (marker,) = store.get_model_markers(model, "kodiscript")
        assert (marker.start_line, marker.start_column, marker.end_column) == (2, 7, 17)
        assert marker.severity is MarkerSeverity.WARNING

    def test_validate_replaces_previous_markers(self):
        store = MarkerStore()
        service = DiagnosticsService(store)
        model = types.SimpleNamespace(text="print(y)")
        model.get_value = lambda: model.text
        service.validate(model)
        model.text = "let y = 1\nprint(y)"
        service.validate(model)
        assert store.get_model_markers(model, "kodiscript") == []

    def test_clear_diagnostics(self):
        sink = MagicMock()
        service = DiagnosticsService(sink)
        model = _model("x")
        service.clear_diagnostics(model)
        sink.set_model_markers.assert_called_once_with(model, "kodiscript", [])

    def test_config_controls_owner_and_span(self):
        sink = MagicMock()
        config = DiagnosticsConfig(owner="lint", marker_span=2, marker_source="KS")
        service = DiagnosticsService(sink, config=config)
        service.validate(_model("q"))
        model, owner, markers = sink.set_model_markers.call_args.args
        assert owner == "lint"
        assert (markers[0].end_column, markers[0].source) == (3, "KS")

    def test_uses_engine_config_when_not_given(self):
        engine = DiagnosticsEngine(DiagnosticsConfig(owner="shared"))
        service = DiagnosticsService(MarkerStore(), engine=engine)
        assert service.owner == "shared"
        assert service.engine is engine

    def test_engine_unavailable_clears_markers(self, failing_loader):
        store = MarkerStore()
        model = _model("print(y)")
        store.set_model_markers(model, "kodiscript", [Marker(1, 1, 1, 2, "old", MarkerSeverity.ERROR)])
        service = DiagnosticsService(store, engine=DiagnosticsEngine(loader=failing_loader))
        assert service.validate(model) == []
        assert store.get_model_markers(model, "kodiscript") == []
