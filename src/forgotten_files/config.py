"""
Service configuration.

Settings are resolved from defaults, an optional YAML file named by the
``FF_CONFIG`` environment variable, and ``FF_*`` environment variables,
in increasing order of precedence.
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from forgotten_files.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_URL_SECRET = "change-this-secret-in-production"

# Environment variable -> settings field
ENV_VARS = {
    "FF_STORAGE_ROOT": "storage_root",
    "FF_ARTIFACT_NAME": "artifact_name",
    "FF_PUBLIC_BASE_URL": "public_base_url",
    "FF_URL_SECRET": "url_secret",
    "FF_URL_EXPIRY_SECONDS": "url_expiry_seconds",
    "FF_RESOLVER_WORKERS": "resolver_workers",
    "FF_LOG_LEVEL": "log_level",
}


class Settings(BaseModel):
    """Runtime settings for the forgotten files service."""

    storage_root: Path = Field(
        default=Path("var/forgotten"),
        description="Root directory of the forgotten-files storage namespace",
    )
    artifact_name: str = Field(
        default="output",
        min_length=1,
        description="File name stem the conversion pipeline stores artifacts under",
    )
    public_base_url: str | None = Field(
        default=None,
        description="Scheme and host used in issued URLs (derived from the request if unset)",
    )
    url_secret: str = Field(
        default=DEFAULT_URL_SECRET,
        min_length=1,
        description="Secret key for signing download URLs",
    )
    url_expiry_seconds: int = Field(
        default=300,
        ge=1,
        description="Lifetime of issued download URLs",
    )
    resolver_workers: int = Field(
        default=8,
        ge=1,
        le=64,
        description="Maximum concurrent existence checks per batch",
    )
    log_level: str = Field(default="INFO", description="Root log level")

    model_config = {"extra": "forbid"}

    @field_validator("public_base_url")
    @classmethod
    def strip_trailing_slash(cls, v):
        """Normalize the base URL so paths can be appended directly."""
        if v is None:
            return v
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError("public_base_url must start with http:// or https://")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log_level names a standard logging level."""
        level = str(v).upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("artifact_name")
    @classmethod
    def validate_artifact_name(cls, v):
        """Artifact name must be a plain file name stem."""
        if "/" in v or "\\" in v or v in (".", ".."):
            raise ValueError("artifact_name must not contain path separators")
        return v


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load settings overrides from a YAML file."""
    try:
        data = yaml.safe_load(path.read_text())
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file: {e}", source=str(path))
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file: {e}", source=str(path))

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError("Config file must contain a mapping", source=str(path))
    return data


def load_settings(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """
    Build Settings from defaults, YAML file and environment.

    Args:
        config_path: YAML file to read (default: $FF_CONFIG if set)
        environ: Environment mapping (default: os.environ)

    Returns:
        Validated Settings

    Raises:
        ConfigurationError: If the file is unreadable or a value is invalid
    """
    environ = os.environ if environ is None else environ

    values: dict[str, Any] = {}
    if config_path is None and environ.get("FF_CONFIG"):
        config_path = Path(environ["FF_CONFIG"])
    if config_path is not None:
        values.update(_load_yaml(config_path))
        logger.debug(f"Loaded configuration from {config_path}")

    for env_name, field_name in ENV_VARS.items():
        if environ.get(env_name):
            values[field_name] = environ[env_name]

    try:
        settings = Settings(**values)
    except ValidationError as e:
        source = str(config_path) if config_path else "environment"
        raise ConfigurationError(f"Invalid configuration: {e}", source=source)

    if settings.url_secret == DEFAULT_URL_SECRET:
        logger.warning(
            "FF_URL_SECRET not set. "
            "Using default signing secret (INSECURE - set FF_URL_SECRET in production!)"
        )
    return settings
