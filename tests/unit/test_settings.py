"""Test Settings loading from defaults, TOML and the environment."""

import pytest

from unitkit.core.config import Settings, load_settings
from unitkit.core.enums import MaterializationMode


class TestSettingsDefaults:
    def test_default_settings(self):
        settings = Settings()
        assert settings.materialization.default_mode == MaterializationMode.STANDARD
        assert settings.materialization.typed_compile_yield is True
        assert settings.validation.strict_mode is False

    def test_observability_defaults(self):
        settings = Settings()
        assert settings.observability.log_level == "INFO"
        assert settings.observability.log_format == "json"

    def test_invalid_mode_rejected(self):
        with pytest.raises(ValueError):
            Settings(materialization={"default_mode": "turbo"})


class TestEnvironmentOverrides:
    def test_nested_env_var(self, monkeypatch):
        monkeypatch.setenv("UNITKIT_VALIDATION__STRICT_MODE", "true")
        assert Settings().validation.strict_mode is True

    def test_mode_from_env(self, monkeypatch):
        monkeypatch.setenv("UNITKIT_MATERIALIZATION__DEFAULT_MODE", "secure")
        assert Settings().materialization.default_mode == MaterializationMode.SECURE


class TestLoadSettings:
    def test_missing_file_uses_defaults(self, tmp_path):
        settings = load_settings(tmp_path / "absent.toml")
        assert settings.materialization.default_mode == MaterializationMode.STANDARD

    def test_toml_file(self, tmp_path):
        path = tmp_path / "unitkit.toml"
        path.write_text(
            '[materialization]\n'
            'default_mode = "typed"\n'
            'extra_builtins = ["complex"]\n'
            '\n'
            '[observability]\n'
            'log_format = "console"\n'
        )
        settings = load_settings(path)
        assert settings.materialization.default_mode == MaterializationMode.TYPED
        assert settings.materialization.extra_builtins == ["complex"]
        assert settings.observability.log_format == "console"

    def test_overrides_applied_last(self, tmp_path):
        path = tmp_path / "unitkit.toml"
        path.write_text('[validation]\nstrict_mode = false\n')
        settings = load_settings(path, overrides={"validation": {"strict_mode": True}})
        assert settings.validation.strict_mode is True
