"""
Core type definitions for Safe Criteria.

Defines the UNDEFINED sentinel, the criteria variant enum, and the
immutable guard configuration.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from safe_criteria.core.constants import (
    DEFAULT_BYPASS_FLAG,
    GUARDED_OPERATIONS,
    KNOWN_DIRECTIVE_KEYS,
)


class Undefined:
    """
    Marker for "no value provided".

    Distinct from None: None is a concrete value (null), UNDEFINED is the
    value a programmatically built filter ends up holding when a variable
    was never set. Permissive ORMs drop such predicates entirely.
    """

    _instance: "Undefined | None" = None

    def __new__(cls) -> "Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> "Undefined":
        return self

    def __deepcopy__(self, memo: dict) -> "Undefined":
        return self

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED = Undefined()


class CriteriaKind(str, Enum):
    """
    Shape of the criteria argument passed to a guarded operation.

    Classified once, before any field access.
    """

    IMPLICIT_CALLBACK = "implicit_callback"  # find(cb): no criteria at all
    ABSENT = "absent"  # UNDEFINED, explicit or omitted
    PRIMARY_KEY_SHORTHAND = "primary_key_shorthand"  # 7, "abc", [1, 2], None
    STRUCTURED = "structured"  # mapping of directives / bare predicates

    @property
    def is_inherently_safe(self) -> bool:
        """Whether this shape can never match an unbounded set."""
        return self in (CriteriaKind.IMPLICIT_CALLBACK, CriteriaKind.PRIMARY_KEY_SHORTHAND)


@dataclass(frozen=True)
class GuardConfig:
    """
    Resolved guard configuration.

    Computed once at setup time and passed into every wrap call.
    """

    enabled: bool = True
    guarded_operations: tuple[str, ...] = GUARDED_OPERATIONS
    directive_keys: frozenset[str] = KNOWN_DIRECTIVE_KEYS
    bypass_flag: str = DEFAULT_BYPASS_FLAG
    entity_overrides: Mapping[str, bool] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        # Freeze the overrides so the config stays immutable after setup
        if not isinstance(self.entity_overrides, MappingProxyType):
            object.__setattr__(
                self, "entity_overrides", MappingProxyType(dict(self.entity_overrides))
            )
        object.__setattr__(self, "guarded_operations", tuple(self.guarded_operations))
        object.__setattr__(self, "directive_keys", frozenset(self.directive_keys))

    def override_for(self, entity_name: str) -> bool | None:
        """Configured per-entity override, if any."""
        return self.entity_overrides.get(entity_name)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "enabled": self.enabled,
            "guarded_operations": list(self.guarded_operations),
            "directive_keys": sorted(self.directive_keys),
            "bypass_flag": self.bypass_flag,
            "entity_overrides": dict(self.entity_overrides),
        }
