"""
Tests for YAML configuration loading and environment overrides.
"""

import logging

import pytest

from ediroute import config as config_module
from ediroute.config import DEFAULT_CONFIG, EdiRouteConfig


@pytest.fixture(autouse=True)
def no_home_config(monkeypatch, tmp_path):
    """Keep the developer's ~/.ediroute out of the tests."""
    monkeypatch.setattr(config_module, "CONFIG_SEARCH_PATHS", [tmp_path / "absent.yaml"])


class TestDefaults:

    def test_defaults(self):
        config = EdiRouteConfig(environ={})
        assert config.config_path is None
        assert config.log_level == "WARNING"
        assert config.json_indent is None
        assert config.log_format == DEFAULT_CONFIG["log_format"]


class TestYamlFile:

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "ediroute.yaml"
        path.write_text("log_level: debug\njson_indent: 4\n", encoding="utf-8")
        config = EdiRouteConfig(path, environ={})
        assert config.config_path == path
        assert config.log_level == "DEBUG"
        assert config.json_indent == 4

    def test_env_config_path(self, tmp_path):
        path = tmp_path / "from_env.yaml"
        path.write_text("json_indent: 1\n", encoding="utf-8")
        config = EdiRouteConfig(environ={"EDIROUTE_CONFIG": str(path)})
        assert config.config_path == path
        assert config.json_indent == 1

    def test_invalid_yaml_falls_back(self, tmp_path, caplog):
        path = tmp_path / "broken.yaml"
        path.write_text("json_indent: [1, 2\n", encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="ediroute"):
            config = EdiRouteConfig(path, environ={})
        assert config.config_path is None
        assert config.json_indent is None
        assert "Failed to load config" in caplog.text

    def test_non_mapping_ignored(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        assert EdiRouteConfig(path, environ={}).config_path is None

    def test_unknown_keys_ignored(self, tmp_path, caplog):
        path = tmp_path / "extra.yaml"
        path.write_text("json_indent: 2\nsegment_colour: blue\n", encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="ediroute"):
            config = EdiRouteConfig(path, environ={})
        assert config.json_indent == 2
        assert "segment_colour" in caplog.text
        assert "segment_colour" not in config.to_dict()

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        config = EdiRouteConfig(path, environ={})
        assert config.config_path == path
        assert config.log_level == "WARNING"


class TestEnvironmentOverrides:

    def test_env_beats_file(self, tmp_path):
        path = tmp_path / "ediroute.yaml"
        path.write_text("log_level: INFO\njson_indent: 4\n", encoding="utf-8")
        config = EdiRouteConfig(path, environ={"EDIROUTE_LOG_LEVEL": "error", "EDIROUTE_JSON_INDENT": "2"})
        assert config.log_level == "ERROR"
        assert config.json_indent == 2

    @pytest.mark.parametrize("raw", ["wide", "-1", ""])
    def test_bad_indent_means_compact(self, raw):
        assert EdiRouteConfig(environ={"EDIROUTE_JSON_INDENT": raw}).json_indent is None

    def test_bad_log_level(self):
        assert EdiRouteConfig(environ={"EDIROUTE_LOG_LEVEL": "chatty"}).log_level == "WARNING"
