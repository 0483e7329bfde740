"""Absence detection for filter clauses."""

from safe_criteria.detection.absence import contains_absence, is_absent

__all__ = [
    "contains_absence",
    "is_absent",
]
