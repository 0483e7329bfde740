"""
Operation wrapping.

Builds guarded callables around an entity's data-access operations.
The entity itself is never modified: callers receive a GuardedEntity proxy
and substitute it in their own registry.
"""

import functools
import logging
from typing import Any, Callable

from safe_criteria.core.constants import METADATA_ATTACH_METHOD
from safe_criteria.core.types import UNDEFINED, GuardConfig
from safe_criteria.criteria.classifier import is_bypass_requested, split_directive_metadata
from safe_criteria.guard.check import DEFAULT_CONFIG, check
from safe_criteria.guard.policy import entity_name_of


logger = logging.getLogger(__name__)


def wrap_operation(
    entity_name: str,
    operation_name: str,
    original: Callable[..., Any],
    config: GuardConfig | None = None,
) -> Callable[..., Any]:
    """
    Wrap one operation with the criteria guard.

    The returned callable:
    - derives bypass from the raw criteria
    - strips `meta` into a shallow copy (input is never mutated)
    - runs the check, raising before the original is called
    - delegates with the copy and all other arguments unchanged
    - re-attaches `meta` on the result when it supports `.meta()`

    Args:
        entity_name: Name used in error messages
        operation_name: Operation being wrapped
        original: The operation to delegate to
        config: Guard configuration

    Returns:
        Guarded callable
    """
    config = config or DEFAULT_CONFIG

    @functools.wraps(original)
    def guarded(criteria: Any = UNDEFINED, *args: Any, **kwargs: Any) -> Any:
        bypass = is_bypass_requested(criteria, config.bypass_flag)
        criteria, meta = split_directive_metadata(criteria)

        check(entity_name, operation_name, criteria, bypass, config=config)

        result = original(criteria, *args, **kwargs)
        if meta is not None:
            attach = getattr(result, METADATA_ATTACH_METHOD, None)
            if callable(attach):
                return attach(meta)
        return result

    guarded.__guarded_operation__ = operation_name  # type: ignore[attr-defined]
    return guarded


def is_guarded(operation: Callable[..., Any]) -> bool:
    """Whether an operation was produced by wrap_operation."""
    return hasattr(operation, "__guarded_operation__")


class GuardedEntity:
    """
    Proxy exposing guarded versions of an entity's operations.

    Guarded operations the entity does not implement are skipped.
    Every other attribute is read from the wrapped entity.
    """

    def __init__(
        self,
        entity: Any,
        config: GuardConfig | None = None,
        name: str | None = None,
    ) -> None:
        self._entity = entity
        self._config = config or DEFAULT_CONFIG
        self.entity_name = entity_name_of(entity, name)
        self._operations: dict[str, Callable[..., Any]] = {}

        for operation_name in self._config.guarded_operations:
            original = getattr(entity, operation_name, None)
            if not callable(original):
                continue
            if is_guarded(original):
                logger.debug(f"{self.entity_name}.{operation_name} already guarded, skipping")
                self._operations[operation_name] = original
                continue
            self._operations[operation_name] = wrap_operation(
                self.entity_name, operation_name, original, self._config
            )
            logger.debug(f"Wrapped {self.entity_name}.{operation_name}")

    def __getattr__(self, attr: str) -> Any:
        # Only reached when normal lookup fails
        operations = self.__dict__.get("_operations", {})
        if attr in operations:
            return operations[attr]
        if "_entity" not in self.__dict__:
            raise AttributeError(attr)
        return getattr(self.__dict__["_entity"], attr)

    @property
    def wrapped(self) -> Any:
        """The underlying, unguarded entity."""
        return self._entity

    @property
    def guarded_operations(self) -> tuple[str, ...]:
        """Names of the operations this proxy guards."""
        return tuple(self._operations)

    def __repr__(self) -> str:
        return f"GuardedEntity({self.entity_name!r}, operations={list(self._operations)})"


def wrap_entity(
    entity: Any,
    config: GuardConfig | None = None,
    name: str | None = None,
) -> GuardedEntity:
    """
    Wrap every guarded operation an entity implements.

    Args:
        entity: Entity handle exposing data-access operations
        config: Guard configuration
        name: Fallback name when the entity has no identity

    Returns:
        GuardedEntity proxy
    """
    if isinstance(entity, GuardedEntity):
        return entity
    return GuardedEntity(entity, config, name)
