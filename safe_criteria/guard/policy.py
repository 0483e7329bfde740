"""
Setup-time guard policy.

Decides, once per entity, whether its operations get wrapped.
Per-entity override > global default.
"""

from typing import Any

from safe_criteria.core.constants import ENTITY_NAME_ATTRS, ENTITY_OVERRIDE_ATTR
from safe_criteria.core.types import GuardConfig


def entity_name_of(entity: Any, fallback: str | None = None) -> str:
    """
    Name used for an entity in error messages.

    Checks `identity`, then `global_id`, then the fallback (usually the
    registry key), then the class name.
    """
    for attr in ENTITY_NAME_ATTRS:
        name = getattr(entity, attr, None)
        if isinstance(name, str) and name:
            return name
    if fallback:
        return fallback
    return type(entity).__name__


def resolve_entity_flag(entity: Any, name: str, config: GuardConfig) -> bool | None:
    """
    Per-entity override, if one is declared.

    The entity's own `reject_undefined_where` attribute wins over an
    override from configuration. Non-boolean values are ignored.

    Returns:
        True/False when overridden, None to fall through to the global default
    """
    declared = getattr(entity, ENTITY_OVERRIDE_ATTR, None)
    if isinstance(declared, bool):
        return declared

    configured = config.override_for(name)
    if isinstance(configured, bool):
        return configured

    return None


def should_wrap(entity: Any, name: str, config: GuardConfig) -> bool:
    """Whether the entity's guarded operations should be wrapped."""
    flag = resolve_entity_flag(entity, name, config)
    if flag is not None:
        return flag
    return config.enabled
