"""
Criteria guard.

Decides PASS / REJECT for one call to a guarded operation.
"""

import logging
from typing import Any

from safe_criteria.core.constants import META_KEY
from safe_criteria.core.exceptions import UndefinedWhereError
from safe_criteria.core.types import CriteriaKind, GuardConfig
from safe_criteria.criteria.classifier import (
    classify_criteria,
    extract_filter_clause,
    has_explicit_filtering,
    is_bypass_requested,
)
from safe_criteria.detection.absence import contains_absence


logger = logging.getLogger(__name__)

DEFAULT_CONFIG = GuardConfig()


def _reject(message: str, entity_name: str, operation_name: str) -> UndefinedWhereError:
    logger.warning(f"Rejected {operation_name} on {entity_name}: {message}")
    return UndefinedWhereError(message, entity=entity_name, operation=operation_name)


def check(
    entity_name: str,
    operation_name: str,
    criteria: Any,
    bypass: bool | None = None,
    *,
    config: GuardConfig | None = None,
) -> None:
    """
    Check criteria for one guarded call.

    Rules, in order:
    1. Callback in place of criteria: pass
    2. UNDEFINED criteria: reject
    3. Primary-key shorthand (scalar, None, list): pass
    4. No filter at all: reject, even when bypassed
    5. UNDEFINED inside the filter clause: reject unless bypassed

    Args:
        entity_name: Name used in error messages
        operation_name: Operation being called
        criteria: Raw criteria argument
        bypass: Skip the absence check. None derives it from `meta`.
        config: Guard configuration (defaults apply when omitted)

    Raises:
        UndefinedWhereError: If criteria could match every record
    """
    config = config or DEFAULT_CONFIG
    verb = operation_name.upper()
    kind = classify_criteria(criteria)

    if kind.is_inherently_safe:
        return

    if kind is CriteriaKind.ABSENT:
        raise _reject(
            f"Unsafe {verb} on `{entity_name}` would hit every record. "
            "Pass an explicit `where` or include "
            f"`{META_KEY}={{'{config.bypass_flag}': True}}` to bypass intentionally.",
            entity_name,
            operation_name,
        )

    if bypass is None:
        bypass = is_bypass_requested(criteria, config.bypass_flag)

    if not has_explicit_filtering(criteria, config.directive_keys):
        raise _reject(
            f"Unsafe {verb} on `{entity_name}` would match every record. "
            "Include a `where` clause or use explicit filters.",
            entity_name,
            operation_name,
        )

    where = extract_filter_clause(criteria, config.directive_keys)
    if where is None or not contains_absence(where):
        return

    if bypass:
        logger.debug(f"Bypass requested for {operation_name} on {entity_name}, skipping absence check")
        return

    raise _reject(
        f"Unsafe {verb} on `{entity_name}` detected UNDEFINED inside WHERE clause. "
        "UNDEFINED values cause predicates to be dropped and match everything. "
        f"Scrub the criteria first, or bypass with `{META_KEY}={{'{config.bypass_flag}': True}}`.",
        entity_name,
        operation_name,
    )
