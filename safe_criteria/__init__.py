"""
Safe Criteria - Guard for unbounded data-access criteria

Rejects find / update / destroy / aggregate calls whose criteria would
silently match every record:
- criteria left UNDEFINED
- criteria carrying no filter at all
- UNDEFINED hidden anywhere inside the WHERE clause

Bypass the last check per call with `meta={"allow_undefined_where": True}`.
"""

__version__ = "0.1.0"
__author__ = "Safe Criteria Team"

from safe_criteria.core.types import UNDEFINED, CriteriaKind, GuardConfig
from safe_criteria.core.exceptions import UndefinedWhereError
from safe_criteria.detection.absence import contains_absence
from safe_criteria.guard import check, install_guards, wrap_entity

__all__ = [
    "UNDEFINED",
    "CriteriaKind",
    "GuardConfig",
    "UndefinedWhereError",
    "contains_absence",
    "check",
    "install_guards",
    "wrap_entity",
]
