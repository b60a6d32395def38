# tests/test_config.py
"""Tests for DiagnosticsConfig construction and validation."""

import json
import logging

import pytest

from kodiscript_diagnostics.config import DEFAULT_ENGINE_MODULE, DiagnosticsConfig
from kodiscript_diagnostics.errors import ConfigError


class TestDefaults:

    def test_values(self):
        cfg = DiagnosticsConfig()
        assert cfg.engine_module == DEFAULT_ENGINE_MODULE
        assert cfg.owner == "kodiscript"
        assert cfg.marker_source == "KodiScript"
        assert cfg.marker_span == 10
        assert cfg.predefined_names == frozenset()

    def test_valid(self):
        assert DiagnosticsConfig().validate() == []

    def test_validate_reports_problems(self):
        cfg = DiagnosticsConfig(engine_module="", owner="", marker_span=-1)
        assert len(cfg.validate()) == 3


class TestFromMapping:

    def test_name_lists_become_frozensets(self):
        cfg = DiagnosticsConfig.from_mapping({
            "predefined_names": ["request", "env"],
            "disabled_checkers": ("syntax",),
        })
        assert cfg.predefined_names == frozenset({"request", "env"})
        assert cfg.disabled_checkers == frozenset({"syntax"})

    def test_scalars(self):
        cfg = DiagnosticsConfig.from_mapping({"owner": "lint", "marker_span": 4})
        assert (cfg.owner, cfg.marker_span) == ("lint", 4)

    def test_unknown_key_ignored_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="kodiscript_diagnostics.config"):
            cfg = DiagnosticsConfig.from_mapping({"colour": "blue"})
        assert cfg == DiagnosticsConfig()
        assert "colour" in caplog.text

    @pytest.mark.parametrize("data", [
        {"marker_span": "10"},
        {"marker_span": True},
        {"owner": 3},
        {"predefined_names": "request"},
        {"extra_natives": 5},
    ])
    def test_wrong_types_rejected(self, data):
        with pytest.raises(ConfigError):
            DiagnosticsConfig.from_mapping(data)


class TestFromFile:

    def test_json_file(self, tmp_path):
        path = tmp_path / "kodiscript.json"
        path.write_text(json.dumps({"extra_natives": ["httpGet"]}), encoding="utf-8")
        cfg = DiagnosticsConfig.from_file(path)
        assert cfg.extra_natives == frozenset({"httpGet"})

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="cannot read"):
            DiagnosticsConfig.from_file(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="invalid JSON"):
            DiagnosticsConfig.from_file(path)

    def test_top_level_must_be_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(ConfigError, match="JSON object"):
            DiagnosticsConfig.from_file(str(path))


class TestFromEnv:

    def test_override(self):
        base = DiagnosticsConfig(owner="lint")
        cfg = DiagnosticsConfig.from_env(base, environ={"KODISCRIPT_ENGINE": "my.engine"})
        assert (cfg.engine_module, cfg.owner) == ("my.engine", "lint")

    def test_unset_keeps_base(self):
        assert DiagnosticsConfig.from_env(environ={}) == DiagnosticsConfig()

    def test_empty_value_ignored(self):
        cfg = DiagnosticsConfig.from_env(environ={"KODISCRIPT_ENGINE": ""})
        assert cfg.engine_module == DEFAULT_ENGINE_MODULE
