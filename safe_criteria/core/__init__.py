"""Core module containing types, configuration, and shared utilities."""

from safe_criteria.core.types import (
    UNDEFINED,
    Undefined,
    CriteriaKind,
    GuardConfig,
)
from safe_criteria.core.config import (
    Settings,
    get_settings,
    load_guard_config,
    resolve_global_flag,
    setup_logging,
)
from safe_criteria.core.exceptions import (
    SafeCriteriaError,
    ConfigurationError,
    UndefinedWhereError,
)

__all__ = [
    # Types
    "UNDEFINED",
    "Undefined",
    "CriteriaKind",
    "GuardConfig",
    # Config
    "Settings",
    "get_settings",
    "load_guard_config",
    "resolve_global_flag",
    "setup_logging",
    # Exceptions
    "SafeCriteriaError",
    "ConfigurationError",
    "UndefinedWhereError",
]
