"""
Tuning knobs for the diagnostics engine and the editor-facing service.

>>> cfg = DiagnosticsConfig.from_mapping({"predefined_names": ["request"]})
>>> "request" in cfg.predefined_names
True
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Union

from kodiscript_diagnostics.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_ENGINE_MODULE = "kodiscript_diagnostics.engine"
ENGINE_ENV_VAR = "KODISCRIPT_ENGINE"


@dataclass(frozen=True)
class DiagnosticsConfig:
    """Configuration for :class:`~kodiscript_diagnostics.orchestrator.DiagnosticsEngine`."""
    engine_module: str = DEFAULT_ENGINE_MODULE
    owner: str = "kodiscript"
    marker_source: str = "KodiScript"
    marker_span: int = 10
    predefined_names: FrozenSet[str] = frozenset()
    extra_natives: FrozenSet[str] = frozenset()
    disabled_checkers: FrozenSet[str] = frozenset()

    def validate(self) -> List[str]:
        """Return a list of validation warnings (empty if valid)."""
        warnings: List[str] = []
        if not self.engine_module:
            warnings.append("engine_module must not be empty")
        if not self.owner:
            warnings.append("owner must not be empty")
        if self.marker_span < 0:
            warnings.append("marker_span must be non-negative")
        return warnings

    # ── constructors ─────────────────────────────────────────────────

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> DiagnosticsConfig:
        """Build a config from a plain mapping.

        Unknown keys are logged and ignored; values of the wrong type raise
        :class:`ConfigError`.
        """
        known = {f.name: f for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                logger.warning("ignoring unknown config key %r", key)
                continue
            default = known[key].default
            if isinstance(default, frozenset):
                if isinstance(value, (str, bytes)) or not hasattr(value, "__iter__"):
                    raise ConfigError(f"config key {key!r} expects a list of names")
                kwargs[key] = frozenset(str(v) for v in value)
            elif isinstance(value, bool) or not isinstance(value, type(default)):
                raise ConfigError(
                    f"config key {key!r} expects {type(default).__name__}, "
                    f"got {type(value).__name__}"
                )
            else:
                kwargs[key] = value
        config = cls(**kwargs)
        for warning in config.validate():
            logger.warning("config: %s", warning)
        return config

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> DiagnosticsConfig:
        """Load a JSON config file."""
        p = Path(path).expanduser()
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
        except OSError as exc:
            raise ConfigError(f"cannot read config file {p}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise ConfigError(f"invalid JSON in config file {p}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"config file {p} must contain a JSON object")
        return cls.from_mapping(data)

    @classmethod
    def from_env(
        cls,
        base: Optional[DiagnosticsConfig] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> DiagnosticsConfig:
        """Apply environment overrides (``KODISCRIPT_ENGINE``) to ``base``."""
        config = base or cls()
        env = os.environ if environ is None else environ
        engine = env.get(ENGINE_ENV_VAR)
        if engine:
            logger.debug("engine module overridden from environment: %s", engine)
            config = replace(config, engine_module=engine)
        return config
