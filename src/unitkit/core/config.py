"""Configuration management.

Loads from TOML config files + environment variables.
Uses pydantic-settings for validation and env var overriding.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from .enums import MaterializationMode


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class MaterializationConfig(BaseModel):
    default_mode: MaterializationMode = MaterializationMode.STANDARD
    typed_compile_yield: bool = True  # Yield to the event loop before compiling
    extra_builtins: list[str] = Field(default_factory=list)  # Standard mode only
    log_source_digest: bool = True


class ValidationConfig(BaseModel):
    strict_mode: bool = False


class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: str = "json"  # "json" or "console"


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Top-level runtime settings.

    Loaded from TOML config files, overridden by environment variables.
    """

    materialization: MaterializationConfig = Field(default_factory=MaterializationConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = {"env_prefix": "UNITKIT_", "env_nested_delimiter": "__"}


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional).
        overrides: Dict of overrides to apply on top.
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            import tomli

            with open(path, "rb") as f:
                data = tomli.load(f)

    if overrides:
        data.update(overrides)

    return Settings(**data)
