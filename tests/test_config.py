"""Tests for settings loading."""

from pathlib import Path

import pytest

from forgotten_files.config import DEFAULT_URL_SECRET, Settings, load_settings
from forgotten_files.core.exceptions import ConfigurationError


class TestSettings:
    """Tests for the Settings model."""

    def test_defaults(self) -> None:
        """Defaults match the conversion pipeline's conventions."""
        settings = Settings()
        assert settings.storage_root == Path("var/forgotten")
        assert settings.artifact_name == "output"
        assert settings.public_base_url is None
        assert settings.url_secret == DEFAULT_URL_SECRET
        assert settings.url_expiry_seconds == 300
        assert settings.log_level == "INFO"

    def test_base_url_normalized(self) -> None:
        """Trailing slashes are stripped from the public base URL."""
        assert Settings(public_base_url="https://docs.example.com/").public_base_url == (
            "https://docs.example.com"
        )

    @pytest.mark.parametrize("field,value", [
        ("public_base_url", "docs.example.com"),
        ("artifact_name", "out/put"),
        ("artifact_name", ""),
        ("url_expiry_seconds", 0),
        ("resolver_workers", 0),
        ("log_level", "LOUD"),
    ])
    def test_invalid_values(self, field: str, value) -> None:
        """Invalid values are rejected."""
        with pytest.raises(ValueError):
            Settings(**{field: value})

    def test_unknown_field_rejected(self) -> None:
        """Typos in configuration are not silently ignored."""
        with pytest.raises(ValueError):
            Settings(storage_rot="x")


class TestLoadSettings:
    """Tests for load_settings."""

    def test_environment(self, temp_dir: Path) -> None:
        """FF_* variables override defaults."""
        settings = load_settings(environ={
            "FF_STORAGE_ROOT": str(temp_dir),
            "FF_ARTIFACT_NAME": "result",
            "FF_URL_EXPIRY_SECONDS": "60",
            "FF_LOG_LEVEL": "debug",
        })
        assert settings.storage_root == temp_dir
        assert settings.artifact_name == "result"
        assert settings.url_expiry_seconds == 60
        assert settings.log_level == "DEBUG"

    def test_yaml_file(self, temp_dir: Path) -> None:
        """Values are read from a YAML file."""
        config = temp_dir / "forgotten.yaml"
        config.write_text("artifact_name: result\nresolver_workers: 2\n")

        settings = load_settings(config_path=config, environ={})

        assert settings.artifact_name == "result"
        assert settings.resolver_workers == 2

    def test_yaml_from_env_and_env_precedence(self, temp_dir: Path) -> None:
        """FF_CONFIG names the file; FF_* variables win over it."""
        config = temp_dir / "forgotten.yaml"
        config.write_text("artifact_name: result\nurl_expiry_seconds: 10\n")

        settings = load_settings(environ={
            "FF_CONFIG": str(config),
            "FF_URL_EXPIRY_SECONDS": "20",
        })

        assert settings.artifact_name == "result"
        assert settings.url_expiry_seconds == 20

    def test_empty_yaml(self, temp_dir: Path) -> None:
        """An empty file means defaults."""
        config = temp_dir / "empty.yaml"
        config.write_text("")
        assert load_settings(config_path=config, environ={}) == Settings()

    def test_missing_file(self, temp_dir: Path) -> None:
        """An unreadable file is a configuration error."""
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(config_path=temp_dir / "missing.yaml", environ={})
        assert exc_info.value.source == str(temp_dir / "missing.yaml")

    @pytest.mark.parametrize("content", ["- a\n- b\n", "key: [unclosed\n"])
    def test_bad_yaml(self, temp_dir: Path, content: str) -> None:
        """Non-mapping or malformed YAML is a configuration error."""
        config = temp_dir / "bad.yaml"
        config.write_text(content)
        with pytest.raises(ConfigurationError):
            load_settings(config_path=config, environ={})

    def test_invalid_value(self) -> None:
        """Validation failures are wrapped in ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(environ={"FF_URL_EXPIRY_SECONDS": "soon"})
        assert exc_info.value.source == "environment"

    def test_default_secret_warns(self, caplog) -> None:
        """Running with the development secret logs a warning."""
        with caplog.at_level("WARNING", logger="forgotten_files.config"):
            load_settings(environ={})
        assert "FF_URL_SECRET not set" in caplog.text
