# tests/test_orchestrator.py
"""
End-to-end tests for produce_diagnostics: the behaviour an editor relies on
when it re-validates a buffer on every change.
"""

import logging

import pytest

from kodiscript_diagnostics import orchestrator
from kodiscript_diagnostics.checkers import Checker, CheckerRegistry, UndefinedVariableChecker
from kodiscript_diagnostics.config import DiagnosticsConfig
from kodiscript_diagnostics.diagnostics import Severity
from kodiscript_diagnostics.orchestrator import DiagnosticsEngine, produce_diagnostics


def _dicts(diags):
    return [d.to_dict() for d in diags]


class TestScenarios:

    def test_undefined_variable(self, diagnostics_engine):
        diags = diagnostics_engine.produce_diagnostics("let x = 1\nprint(y)")
        assert _dicts(diags) == [{
            "line": 2,
            "column": 7,
            "message": "Undefined variable 'y'",
            "severity": "warning",
        }]

    def test_unterminated_expression_single_error(self, diagnostics_engine):
        diags = diagnostics_engine.produce_diagnostics("let x = (1 + ")
        assert len(diags) == 1
        (diag,) = diags
        assert diag.severity is Severity.ERROR
        assert (diag.line, diag.column) == (1, 14)
        assert diag.message == "Expected expression but found end of input"

    def test_comment_marker_inside_string(self, diagnostics_engine):
        source = 'let s = "// not a comment" + t // real comment undefinedThing'
        diags = diagnostics_engine.produce_diagnostics(source)
        assert _dicts(diags) == [{
            "line": 1,
            "column": 30,
            "message": "Undefined variable 't'",
            "severity": "warning",
        }]

    def test_engine_failure_returns_empty(self, failing_loader):
        engine = DiagnosticsEngine(loader=failing_loader)
        assert engine.produce_diagnostics("print(y)") == []

    def test_engine_failure_logged(self, failing_loader, caplog):
        engine = DiagnosticsEngine(loader=failing_loader)
        with caplog.at_level(logging.WARNING, logger="kodiscript_diagnostics"):
            engine.produce_diagnostics("x")
        assert "diagnostics skipped" in caplog.text


class TestProperties:

    def test_valid_source_only_warnings(self, diagnostics_engine):
        source = "let a = fn(n) { return n + m }\nif a(1) > k { print(a) }"
        diags = diagnostics_engine.produce_diagnostics(source)
        assert [d.message for d in diags] == [
            "Undefined variable 'm'",
            "Undefined variable 'k'",
        ]
        assert all(d.severity is Severity.WARNING for d in diags)

    def test_idempotent(self, diagnostics_engine):
        source = "let x = (1 +\nprint(zz)"
        first = diagnostics_engine.produce_diagnostics(source)
        assert diagnostics_engine.produce_diagnostics(source) == first

    def test_syntax_error_precedes_warnings(self, diagnostics_engine):
        diags = diagnostics_engine.produce_diagnostics("let x = (1 +\nprint(zz)")
        assert [(d.line, d.column, d.severity) for d in diags] == [
            (2, 10, Severity.ERROR),
            (2, 7, Severity.WARNING),
        ]
        assert diags[0].message == "Expected ')' but found end of input"

    def test_one_warning_per_name(self, diagnostics_engine):
        diags = diagnostics_engine.produce_diagnostics("a\na\nb")
        assert [(d.line, d.message) for d in diags] == [
            (1, "Undefined variable 'a'"),
            (3, "Undefined variable 'b'"),
        ]

    def test_declaration_anywhere(self, diagnostics_engine):
        assert diagnostics_engine.produce_diagnostics("print(total)\nlet total = 1") == []

    def test_property_and_call_positions(self, diagnostics_engine):
        source = "let o = 1\nprint(o.foo)\nbar()"
        assert diagnostics_engine.produce_diagnostics(source) == []

    def test_empty_text(self, diagnostics_engine):
        assert diagnostics_engine.produce_diagnostics("") == []

    @pytest.mark.parametrize("source", [
        "let a = 1\nlet b = a > 0 ? 1 : 2",
        "let a = null\nlet b = a ?? 3",
        "let a = 1\nlet b = a ?: 0",
    ])
    def test_conditional_operators_are_valid(self, diagnostics_engine, source):
        assert diagnostics_engine.produce_diagnostics(source) == []


class TestConfiguration:

    def test_disabled_checker_skipped(self):
        config = DiagnosticsConfig(disabled_checkers=frozenset({"undefined-variable"}))
        engine = DiagnosticsEngine(config)
        assert engine.produce_diagnostics("print(y)") == []

    def test_disabled_checkers_applied_to_registry(self):
        config = DiagnosticsConfig(disabled_checkers=frozenset({"syntax"}))
        engine = DiagnosticsEngine(config)
        assert engine.registry.get_enabled() == [UndefinedVariableChecker]
        assert _dicts(engine.produce_diagnostics("let = y")) == [
            {"line": 1, "column": 7, "message": "Undefined variable 'y'", "severity": "warning"}
        ]

    def test_custom_registry_results_deduplicated(self):
        class EchoChecker(Checker):
            name = "echo"

            def collect_evidence(self, ctx):
                pass

            def diagnose(self, ctx):
                self._emit("echo", "same", 1)
                self._emit("echo", "same", 1)

        registry = CheckerRegistry()
        registry.register(EchoChecker)
        engine = DiagnosticsEngine(registry=registry)
        assert len(engine.produce_diagnostics("x")) == 1

    def test_loader_built_from_config(self):
        engine = DiagnosticsEngine(DiagnosticsConfig(engine_module="json"))
        assert engine.loader.module_name == "json"
        assert engine.produce_diagnostics("x") == []


class TestModuleLevelEntryPoint:

    @pytest.fixture(autouse=True)
    def fresh_default(self, monkeypatch):
        monkeypatch.setattr(orchestrator, "_default_engine", None)
        monkeypatch.delenv("KODISCRIPT_ENGINE", raising=False)

    def test_produce_diagnostics(self):
        diags = produce_diagnostics("let x = 1\nprint(y)")
        assert [d.message for d in diags] == ["Undefined variable 'y'"]

    def test_default_engine_shared(self):
        assert orchestrator.get_default_engine() is orchestrator.get_default_engine()

    def test_environment_selects_engine(self, monkeypatch):
        monkeypatch.setenv("KODISCRIPT_ENGINE", "no.such.engine")
        assert produce_diagnostics("print(y)") == []
        assert orchestrator.get_default_engine().loader.module_name == "no.such.engine"

    def test_never_raises_on_odd_input(self):
        for text in ["\x00", "'", "}}}", "let let let", "fn(" * 50]:
            produce_diagnostics(text)
