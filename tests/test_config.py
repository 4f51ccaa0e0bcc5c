"""Tests for configuration loading and weight tables."""

from __future__ import annotations

import json

import pytest

from flogjs.config import (
    CONFIG_FILENAME,
    DEFAULT_EXCLUDE,
    ConfigError,
    Settings,
    load_config,
    load_modes,
    merge_config,
)
from flogjs.modes.lang import LangMode
from flogjs.weights import WeightTable, get_weights, list_weights


class TestMergeConfig:
    def test_defaults(self):
        settings = merge_config()
        assert settings == Settings()
        assert settings.exclude == list(DEFAULT_EXCLUDE)
        assert settings.threshold == 60

    def test_file_keys(self):
        settings = merge_config({
            "methodsOnly": True,
            "weights": {"if": 2},
            "plugins": "my_pkg.modes:VueMode",
            "exclude": "**/*.gen.js",
        })
        assert settings.methods_only is True
        assert settings.weights == {"if": 2.0}
        assert settings.modes == ["my_pkg.modes:VueMode"]
        assert settings.exclude == ["**/*.gen.js"]

    def test_unknown_keys_ignored(self):
        settings = merge_config({"maxPerFunction": 10, "detect": {}})
        assert settings == Settings()

    def test_bad_weights(self):
        with pytest.raises(ConfigError, match="weights"):
            merge_config({"weights": {"if": "heavy"}})
        with pytest.raises(ConfigError):
            merge_config({"weights": [1, 2]})


class TestLoadConfig:
    def test_missing_file(self, tmp_path):
        assert load_config(tmp_path) == Settings()

    def test_reads_file(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text(json.dumps({
            "methodsOnly": True,
            "threshold": "score:5",
            "mode": "react",
        }))
        settings = load_config(tmp_path)
        assert settings.methods_only
        assert settings.threshold == "score:5"
        assert settings.mode == "react"

    def test_invalid_json(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text("{not json")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_config(tmp_path)

    def test_not_an_object(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text("[1, 2]")
        with pytest.raises(ConfigError, match="JSON object"):
            load_config(tmp_path)


class TestSettings:
    def test_merged_ignores_none(self):
        base = Settings(methods_only=True, threshold=30)
        merged = base.merged(methods_only=None, threshold="score:4")
        assert merged.methods_only is True
        assert merged.threshold == "score:4"
        assert base.threshold == 30


class TestLoadModes:
    @pytest.mark.parametrize("path", ["flogjs.modes.lang:LangMode", "flogjs.modes.lang.LangMode"])
    def test_imports_mode_class(self, path):
        (mode,) = load_modes([path])
        assert isinstance(mode, LangMode)

    def test_not_a_mode(self):
        with pytest.raises(ConfigError, match="not a Mode"):
            load_modes(["json:dumps"])

    def test_missing_module(self):
        with pytest.raises(ConfigError, match="Cannot import"):
            load_modes(["flogjs_missing_module_xyz:Mode"])

    def test_missing_attribute(self):
        with pytest.raises(ConfigError, match="no attribute"):
            load_modes(["flogjs.modes.lang:NoSuchMode"])

    def test_malformed_path(self):
        with pytest.raises(ConfigError):
            load_modes(["LangMode"])


class TestWeightTables:
    def test_builtin_tables(self):
        assert set(list_weights()) >= {"lang", "react"}
        lang = get_weights("lang")
        assert lang["dynamic_call"] == 4.0
        assert lang["deep_member"] == 0.2
        assert lang["logical_assign"] == 0.4
        assert get_weights("react")["use_effect_dep"] == 0.15

    def test_unknown_table(self):
        with pytest.raises(KeyError, match="Available"):
            get_weights("vue")

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            get_weights("lang").weights["if"] = 9.0

    def test_overrides_return_new_table(self):
        lang = get_weights("lang")
        heavier = lang.with_overrides({"if": 3, "custom": 1.5})
        assert heavier["if"] == 3.0
        assert heavier["custom"] == 1.5
        assert lang["if"] == 1.0
        assert "custom" not in lang
        assert lang.with_overrides({}) is lang

    def test_negative_weight_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            WeightTable(mode="x", description="x", weights={"if": -1.0})

    def test_missing_pattern_defaults_to_zero(self):
        assert get_weights("lang").get("jsx_ternary") == 0.0
