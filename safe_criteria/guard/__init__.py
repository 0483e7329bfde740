"""
Criteria guard.

Rejects data-access calls whose criteria would match every record:
- criteria left UNDEFINED
- criteria with no filter at all
- UNDEFINED anywhere inside the filter clause (unless bypassed)
"""

from safe_criteria.guard.check import check
from safe_criteria.guard.policy import (
    entity_name_of,
    resolve_entity_flag,
    should_wrap,
)
from safe_criteria.guard.wrapper import (
    GuardedEntity,
    is_guarded,
    wrap_entity,
    wrap_operation,
)
from safe_criteria.guard.setup import install_guards

__all__ = [
    # Check
    "check",
    # Policy
    "entity_name_of",
    "resolve_entity_flag",
    "should_wrap",
    # Wrapping
    "GuardedEntity",
    "is_guarded",
    "wrap_entity",
    "wrap_operation",
    "install_guards",
]
