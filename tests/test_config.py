"""
Config System (config.py)

Tests ModelSettings and SettingsLoader.
"""

import json

import pytest

from appmodel.config import ModelSettings, SettingsLoader
from appmodel.faults import ConfigInvalidFault


# ============================================================================
# Defaults
# ============================================================================

class TestDefaults:

    def test_defaults(self):
        settings = SettingsLoader.load(environ={})
        assert settings == ModelSettings()
        assert settings.strict_descriptors is False
        assert settings.verify_integrity is True
        assert settings.json_indent == 2
        assert settings.log_level == "WARNING"

    def test_frozen(self):
        with pytest.raises(AttributeError):
            ModelSettings().json_indent = 4


# ============================================================================
# Files
# ============================================================================

class TestFiles:

    def test_yaml_section(self, tmp_path):
        path = tmp_path / "appmodel.yaml"
        path.write_text("appmodel:\n  strict_descriptors: true\n  json_indent: 4\n")
        settings = SettingsLoader.load(path, environ={})
        assert settings.strict_descriptors is True
        assert settings.json_indent == 4

    def test_yaml_top_level(self, tmp_path):
        path = tmp_path / "settings.yml"
        path.write_text("log_level: debug\n")
        assert SettingsLoader.load(path, environ={}).log_level == "DEBUG"

    def test_json(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"verify_integrity": False}))
        assert SettingsLoader.load(path, environ={}).verify_integrity is False

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert SettingsLoader.load(path, environ={}) == ModelSettings()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigInvalidFault):
            SettingsLoader.load(tmp_path / "nope.yaml", environ={})

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "settings.ini"
        path.write_text("[appmodel]\n")
        with pytest.raises(ConfigInvalidFault, match="unsupported"):
            SettingsLoader.load(path, environ={})


# ============================================================================
# Environment and precedence
# ============================================================================

class TestPrecedence:

    def test_env_variables(self):
        settings = SettingsLoader.load(environ={
            "APPMODEL_STRICT_DESCRIPTORS": "yes",
            "APPMODEL_JSON_INDENT": "0",
            "UNRELATED": "1",
        })
        assert settings.strict_descriptors is True
        assert settings.json_indent == 0

    def test_unknown_env_keys_ignored(self):
        assert SettingsLoader.load(environ={"APPMODEL_COLOR": "red"}) == ModelSettings()

    def test_env_overrides_file(self, tmp_path):
        path = tmp_path / "s.yaml"
        path.write_text("json_indent: 8\n")
        settings = SettingsLoader.load(path, environ={"APPMODEL_JSON_INDENT": "3"})
        assert settings.json_indent == 3

    def test_overrides_win(self):
        settings = SettingsLoader.load(
            environ={"APPMODEL_LOG_LEVEL": "info"},
            overrides={"log_level": "error"},
        )
        assert settings.log_level == "ERROR"

    def test_custom_prefix(self):
        settings = SettingsLoader.load(env_prefix="AM_", environ={"AM_VERIFY_INTEGRITY": "false"})
        assert settings.verify_integrity is False


# ============================================================================
# Validation
# ============================================================================

class TestValidation:

    @pytest.mark.parametrize(
        "overrides",
        [
            {"strict_descriptors": "maybe"},
            {"json_indent": "wide"},
            {"json_indent": -1},
            {"log_level": "loud"},
            {"colour": True},
        ],
    )
    def test_invalid(self, overrides):
        with pytest.raises(ConfigInvalidFault) as exc_info:
            SettingsLoader.load(environ={}, overrides=overrides)
        assert exc_info.value.code == "CONFIG_INVALID"
