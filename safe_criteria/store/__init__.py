"""In-memory reference store for guarded entities."""

from safe_criteria.store.memory import MemoryEntity, Query, matches

__all__ = [
    "MemoryEntity",
    "Query",
    "matches",
]
