"""
Criteria classification.

Splits a criteria payload into its filter clause and its non-filter
directives (pagination, sorting, projections, metadata).
"""

from collections.abc import Mapping
from numbers import Number
from typing import Any

from safe_criteria.core.constants import (
    DEFAULT_BYPASS_FLAG,
    KNOWN_DIRECTIVE_KEYS,
    META_KEY,
    WHERE_KEY,
)
from safe_criteria.core.types import UNDEFINED, CriteriaKind


# `where` holding one of these counts as a filter clause, even when empty
CLAUSE_TYPES = (Mapping, list, tuple)


def classify_criteria(criteria: Any) -> CriteriaKind:
    """
    Classify the raw criteria argument.

    Args:
        criteria: First argument passed to a guarded operation

    Returns:
        CriteriaKind for the argument
    """
    if criteria is UNDEFINED:
        return CriteriaKind.ABSENT

    if callable(criteria) and not isinstance(criteria, Mapping):
        return CriteriaKind.IMPLICIT_CALLBACK

    # bool is a Number subclass but is not a primary key
    if criteria is None or isinstance(criteria, (str, list, tuple)):
        return CriteriaKind.PRIMARY_KEY_SHORTHAND
    if isinstance(criteria, Number) and not isinstance(criteria, bool):
        return CriteriaKind.PRIMARY_KEY_SHORTHAND

    return CriteriaKind.STRUCTURED


def bare_filter_keys(
    criteria: Any,
    directive_keys: frozenset[str] = KNOWN_DIRECTIVE_KEYS,
) -> list[Any]:
    """Top-level keys that are legacy bare filter predicates."""
    if not isinstance(criteria, Mapping):
        return []
    return [key for key in criteria if key not in directive_keys]


def extract_filter_clause(
    criteria: Any,
    directive_keys: frozenset[str] = KNOWN_DIRECTIVE_KEYS,
) -> Mapping | list | tuple | None:
    """
    Extract the filter clause from criteria.

    `where` wins when it holds a mapping or sequence. Otherwise every
    non-directive top-level key is collected into a bare clause.

    Args:
        criteria: Criteria payload
        directive_keys: Keys that are not filter predicates

    Returns:
        Filter clause, or None if criteria carries no filter
    """
    if not isinstance(criteria, Mapping):
        return None

    where = criteria.get(WHERE_KEY)
    if isinstance(where, CLAUSE_TYPES):
        return where

    bare = {key: criteria[key] for key in bare_filter_keys(criteria, directive_keys)}
    return bare or None


def has_explicit_filtering(
    criteria: Any,
    directive_keys: frozenset[str] = KNOWN_DIRECTIVE_KEYS,
) -> bool:
    """
    Whether criteria expresses any filter at all.

    True when a clause can be extracted, or any top-level key is a bare
    predicate. Directive-only criteria (limit, sort, meta...) are False.
    """
    if extract_filter_clause(criteria, directive_keys) is not None:
        return True
    return bool(bare_filter_keys(criteria, directive_keys))


def is_bypass_requested(criteria: Any, bypass_flag: str = DEFAULT_BYPASS_FLAG) -> bool:
    """Whether criteria carries `meta` with the bypass flag set."""
    if not isinstance(criteria, Mapping):
        return False
    meta = criteria.get(META_KEY)
    if not isinstance(meta, Mapping):
        return False
    return bool(meta.get(bypass_flag))


def split_directive_metadata(criteria: Any) -> tuple[Any, Any]:
    """
    Separate `meta` from criteria without mutating the input.

    Args:
        criteria: Raw criteria argument

    Returns:
        Tuple of (criteria without meta, meta). When `meta` is missing or is
        not a mapping the original object is returned unchanged with meta None.
    """
    if not isinstance(criteria, Mapping):
        return criteria, None

    meta = criteria.get(META_KEY)
    # An empty mapping still counts as metadata
    if not isinstance(meta, Mapping):
        return criteria, None

    stripped = {key: value for key, value in criteria.items() if key != META_KEY}
    return stripped, meta
