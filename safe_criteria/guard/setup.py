"""
Guard installation.

Runs once, after the host has loaded its models and before any guarded
call is made.
"""

import logging
from collections.abc import Mapping
from typing import Any

from safe_criteria.core.config import load_guard_config
from safe_criteria.core.types import GuardConfig
from safe_criteria.guard.policy import entity_name_of, should_wrap
from safe_criteria.guard.wrapper import wrap_entity


logger = logging.getLogger(__name__)


def install_guards(
    models: Mapping[str, Any],
    config: GuardConfig | None = None,
) -> dict[str, Any]:
    """
    Build a registry where every entity that should be guarded is wrapped.

    The input registry and its entities are left untouched.

    Args:
        models: Host registry of entity name -> entity
        config: Guard configuration (resolved from settings when omitted)

    Returns:
        New registry with GuardedEntity proxies substituted
    """
    config = config or load_guard_config()

    registry: dict[str, Any] = {}
    guarded: list[str] = []
    untouched: list[str] = []

    for key, entity in models.items():
        name = entity_name_of(entity, key)
        if should_wrap(entity, name, config):
            registry[key] = wrap_entity(entity, config, name)
            guarded.append(name)
        else:
            registry[key] = entity
            untouched.append(name)

    logger.info(
        f"Criteria guard installed: {len(guarded)} guarded, {len(untouched)} untouched"
    )
    if untouched:
        logger.debug(f"Unguarded entities: {', '.join(untouched)}")

    return registry
