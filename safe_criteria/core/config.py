"""
Configuration management for Safe Criteria.

Loads settings from environment variables, a .env file, and an optional
YAML config file. Uses pydantic for validation.

Priority order for each flag:
1. Environment variables (SAFE_CRITERIA_*)
2. .env file
3. YAML config file
4. Built-in default (guard enabled)
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from safe_criteria.core.constants import (
    DEFAULT_BYPASS_FLAG,
    ENTITY_OVERRIDE_ATTR,
    GUARDED_OPERATIONS,
    KNOWN_DIRECTIVE_KEYS,
)
from safe_criteria.core.exceptions import ConfigurationError
from safe_criteria.core.types import GuardConfig


logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    """Configure logging."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


class Settings(BaseSettings):
    """
    Guard settings loaded from environment variables.

    Flags left unset (None) fall through to the YAML file, then to the
    built-in default.
    """

    model_config = SettingsConfigDict(
        env_prefix="SAFE_CRITERIA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Global override (models-level setting)
    reject_undefined_where: bool | None = Field(
        default=None,
        description="Reject unsafe criteria on every model unless a model opts out",
    )

    # Hook-level setting, consulted when no global override is set
    enabled: bool | None = Field(
        default=None,
        description="Enable the guard",
    )

    config_file: Path | None = Field(
        default=None,
        description="Optional YAML file with guard configuration",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    @field_validator("config_file", mode="before")
    @classmethod
    def resolve_path(cls, v: str | Path | None) -> Path | None:
        """Convert string to Path and resolve."""
        if v is None or v == "":
            return None
        return Path(v).resolve()

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: str) -> str:
        """Ensure log level is uppercase."""
        return v.upper()


class GuardFileConfig:
    """Guard configuration loaded from a YAML file."""

    def __init__(self, config_path: Path):
        self._config = self._load_yaml(config_path)

    @staticmethod
    def _load_yaml(path: Path) -> dict[str, Any]:
        """Load and parse YAML file."""
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}", setting="config_file")

        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in config file: {path}", setting="config_file"
            ) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file must contain a mapping: {path}", setting="config_file"
            )
        return data

    @property
    def _guard_section(self) -> dict[str, Any]:
        return self._config.get("safe_criteria") or {}

    @property
    def reject_undefined_where(self) -> Any:
        """Global override from the `models` section."""
        return (self._config.get("models") or {}).get(ENTITY_OVERRIDE_ATTR)

    @property
    def enabled(self) -> Any:
        """Hook-level setting."""
        return self._guard_section.get("enabled")

    @property
    def operations(self) -> tuple[str, ...]:
        """Guarded operation names."""
        operations = self._guard_section.get("operations")
        if operations is None:
            return GUARDED_OPERATIONS
        if not isinstance(operations, list) or not all(isinstance(op, str) for op in operations):
            raise ConfigurationError(
                "operations must be a list of names",
                setting="operations",
                value=operations,
            )
        return tuple(operations)

    @property
    def bypass_flag(self) -> str:
        """Name of the bypass flag inside `meta`."""
        flag = self._guard_section.get("bypass_flag", DEFAULT_BYPASS_FLAG)
        if not isinstance(flag, str) or not flag:
            raise ConfigurationError(
                "bypass_flag must be a non-empty string",
                setting="bypass_flag",
                value=flag,
            )
        return flag

    @property
    def entities(self) -> dict[str, bool]:
        """Per-entity overrides."""
        entities = self._guard_section.get("entities") or {}
        if not isinstance(entities, dict):
            raise ConfigurationError(
                "entities must be a mapping of entity name to boolean",
                setting="entities",
                value=entities,
            )
        for name, flag in entities.items():
            if not isinstance(flag, bool):
                raise ConfigurationError(
                    f"Override for entity `{name}` must be a boolean",
                    setting=f"entities.{name}",
                    value=flag,
                )
        return dict(entities)


def resolve_global_flag(global_override: Any, hook_setting: Any) -> bool:
    """
    Resolve whether the guard is enabled by default.

    Non-boolean values at a level are ignored, not coerced.

    Args:
        global_override: Models-level `reject_undefined_where`
        hook_setting: Hook-level `enabled`

    Returns:
        global_override if boolean, else hook_setting if boolean, else True
    """
    if isinstance(global_override, bool):
        return global_override
    if isinstance(hook_setting, bool):
        return hook_setting
    return True


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached guard settings."""
    return Settings()


def load_guard_config(settings: Settings | None = None) -> GuardConfig:
    """
    Resolve layered configuration into an immutable GuardConfig.

    Args:
        settings: Settings to resolve (defaults to cached environment settings)

    Returns:
        GuardConfig to pass into every wrap call
    """
    settings = settings or get_settings()
    file_config = GuardFileConfig(settings.config_file) if settings.config_file else None

    global_override = settings.reject_undefined_where
    hook_setting = settings.enabled
    operations = GUARDED_OPERATIONS
    bypass_flag = DEFAULT_BYPASS_FLAG
    entity_overrides: dict[str, bool] = {}

    if file_config is not None:
        if global_override is None:
            global_override = file_config.reject_undefined_where
        if hook_setting is None:
            hook_setting = file_config.enabled
        operations = file_config.operations
        bypass_flag = file_config.bypass_flag
        entity_overrides = file_config.entities

    config = GuardConfig(
        enabled=resolve_global_flag(global_override, hook_setting),
        guarded_operations=operations,
        directive_keys=KNOWN_DIRECTIVE_KEYS,
        bypass_flag=bypass_flag,
        entity_overrides=entity_overrides,
    )
    logger.debug(f"Resolved guard config: {config.to_dict()}")
    return config
