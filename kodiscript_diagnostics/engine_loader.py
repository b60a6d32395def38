"""
kodiscript_diagnostics/engine_loader.py — lazy, single-flight engine loading.

The Script Engine is imported on first use, not at package import time, so
an editor can start without it and a broken engine never prevents the
diagnostics module itself from loading.

State machine
─────────────
  NOT_STARTED ──get()──▶ IN_FLIGHT ──ok──▶ READY
                                   └─err─▶ FAILED

Concurrent ``get()`` calls during IN_FLIGHT wait for the one load in
progress and share its outcome.  READY and FAILED are both terminal: a
failed load is not retried until :meth:`EngineLoader.reset` is called.
"""

from __future__ import annotations

import importlib
import logging
import threading
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Optional

from kodiscript_diagnostics.config import DEFAULT_ENGINE_MODULE
from kodiscript_diagnostics.errors import EngineUnavailableError

logger = logging.getLogger(__name__)


class LoadState(Enum):
    NOT_STARTED = auto()
    IN_FLIGHT = auto()
    READY = auto()
    FAILED = auto()


@dataclass(frozen=True)
class ScriptEngine:
    """The two entry points the diagnostics core needs from an engine."""
    name: str
    tokenize: Callable[[str], Any]
    parse: Callable[[Any], Any]

    @classmethod
    def from_module(cls, name: str, module: Any) -> ScriptEngine:
        tokenize = getattr(module, "tokenize", None)
        parse = getattr(module, "parse", None)
        if not callable(tokenize) or not callable(parse):
            raise TypeError(f"module '{name}' must expose callable tokenize and parse")
        return cls(name=name, tokenize=tokenize, parse=parse)


class EngineLoader:
    """
    Resolves the Script Engine at most once per loader.

    Parameters
    ----------
    module_name : dotted path of the engine module
    factory     : callable ``(module_name) -> module``; defaults to
                  :func:`importlib.import_module`
    """

    def __init__(
        self,
        module_name: str = DEFAULT_ENGINE_MODULE,
        factory: Optional[Callable[[str], Any]] = None,
    ) -> None:
        self.module_name = module_name
        self._factory = factory or importlib.import_module
        self._lock = threading.Lock()
        self._state = LoadState.NOT_STARTED
        self._engine: Optional[ScriptEngine] = None
        self._error: Optional[EngineUnavailableError] = None

    @property
    def state(self) -> LoadState:
        return self._state

    def get(self) -> ScriptEngine:
        """
        Return the engine, loading it on the first call.

        Raises
        ------
        EngineUnavailableError
            If the engine failed to load, now or on an earlier call.
        """
        # Fast path once settled.
        engine = self._engine
        if engine is not None:
            return engine

        with self._lock:
            if self._state is LoadState.NOT_STARTED:
                self._load()
            if self._state is LoadState.FAILED:
                assert self._error is not None
                raise self._error
            assert self._engine is not None
            return self._engine

    def _load(self) -> None:
        self._state = LoadState.IN_FLIGHT
        logger.debug("loading script engine %s", self.module_name)
        try:
            module = self._factory(self.module_name)
            engine = ScriptEngine.from_module(self.module_name, module)
        except Exception as exc:
            self._error = EngineUnavailableError(self.module_name, exc)
            self._state = LoadState.FAILED
            logger.warning("%s", self._error.message)
            return
        self._engine = engine
        self._state = LoadState.READY
        logger.info("script engine %s loaded", self.module_name)

    def reset(self) -> None:
        """Forget any loaded engine or failure so the next get() reloads."""
        with self._lock:
            self._state = LoadState.NOT_STARTED
            self._engine = None
            self._error = None
