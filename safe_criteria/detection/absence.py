"""
Absence detection.

Structural scan for UNDEFINED anywhere inside a value.
"""

from collections.abc import Mapping
from datetime import date, time
from typing import Any

from safe_criteria.core.types import UNDEFINED


# Structurally composite but atomic for detection purposes.
# datetime is a subclass of date.
OPAQUE_LEAF_TYPES = (date, time, bytes, bytearray, memoryview)

SEQUENCE_TYPES = (list, tuple, set, frozenset)


def is_absent(value: Any) -> bool:
    """Whether value is the UNDEFINED marker itself."""
    return value is UNDEFINED


def contains_absence(value: Any) -> bool:
    """
    Check whether value, or anything reachable from it, is UNDEFINED.

    Descends into mappings (values only) and sequences. Strings, dates,
    times and binary buffers are leaves. Key names are never inspected,
    so `{"or": [...]}` and `{"name": ...}` are treated alike.

    Args:
        value: Arbitrary value, typically a filter clause

    Returns:
        True if UNDEFINED appears at any depth
    """
    if value is UNDEFINED:
        return True

    if isinstance(value, OPAQUE_LEAF_TYPES):
        return False

    if isinstance(value, Mapping):
        return any(contains_absence(v) for v in value.values())

    if isinstance(value, SEQUENCE_TYPES):
        return any(contains_absence(item) for item in value)

    return False
