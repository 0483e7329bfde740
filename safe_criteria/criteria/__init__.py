"""Criteria classification: filter clause vs. directives."""

from safe_criteria.criteria.classifier import (
    classify_criteria,
    bare_filter_keys,
    extract_filter_clause,
    has_explicit_filtering,
    is_bypass_requested,
    split_directive_metadata,
)

__all__ = [
    "classify_criteria",
    "bare_filter_keys",
    "extract_filter_clause",
    "has_explicit_filtering",
    "is_bypass_requested",
    "split_directive_metadata",
]
