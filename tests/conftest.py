# tests/conftest.py
"""Shared fixtures for the kodiscript_diagnostics test suite."""

import types

import pytest

from kodiscript_diagnostics.engine_loader import EngineLoader
from kodiscript_diagnostics.orchestrator import DiagnosticsEngine


def _missing_engine(module_name):
    raise ImportError(f"No module named {module_name!r}")


@pytest.fixture
def reference_engine():
    """The bundled reference Script Engine, freshly loaded."""
    return EngineLoader().get()


@pytest.fixture
def failing_loader():
    """A loader whose engine module cannot be imported."""
    return EngineLoader("missing.engine", factory=_missing_engine)


@pytest.fixture
def diagnostics_engine():
    return DiagnosticsEngine()


@pytest.fixture
def fake_engine_module():
    """Build a module-like object exposing tokenize/parse."""
    def _make(tokenize=None, parse=None):
        return types.SimpleNamespace(
            tokenize=tokenize or (lambda source: [source]),
            parse=parse or (lambda tokens: tokens),
        )
    return _make
