"""
In-memory model store.

A deliberately permissive entity: like many ORMs it silently drops any
predicate whose value is UNDEFINED. Used as a reference host for the guard
and to demonstrate the hazard it protects against:

    widgets.destroy({"where": {"name": UNDEFINED}}).execute()  # removes everything

Operations take criteria as first argument and return a Query handle,
executed with `.execute()`.
"""

import copy
import logging
from collections.abc import Mapping
from numbers import Number
from typing import Any, Callable

from safe_criteria.core.constants import KNOWN_DIRECTIVE_KEYS, WHERE_KEY
from safe_criteria.core.types import UNDEFINED


logger = logging.getLogger(__name__)

Record = dict[str, Any]


class Query:
    """
    Deferred result of a store operation.

    Nothing runs until execute() is called.
    """

    def __init__(self, runner: Callable[["Query"], Any]):
        self._runner = runner
        self.metadata: dict[str, Any] = {}
        self.fetch_records = False

    def meta(self, metadata: Mapping[str, Any]) -> "Query":
        """Attach request-level metadata."""
        self.metadata.update(metadata)
        return self

    def fetch(self) -> "Query":
        """Return affected records from destroy/update."""
        self.fetch_records = True
        return self

    def execute(self) -> Any:
        """Run the operation."""
        return self._runner(self)


# ============================================================
# MATCHING
# ============================================================

def _compare(op: str, actual: Any, expected: Any) -> bool:
    """Apply a single comparison operator."""
    if op == "in":
        return actual in [v for v in expected if v is not UNDEFINED]
    if op == "nin":
        return actual not in [v for v in expected if v is not UNDEFINED]
    if op == "contains":
        return isinstance(actual, str) and str(expected) in actual
    if op == "startsWith":
        return isinstance(actual, str) and actual.startswith(str(expected))
    if op == "endsWith":
        return isinstance(actual, str) and actual.endswith(str(expected))
    if op == "!=":
        return actual != expected

    if actual is None:
        return False
    if op == "<":
        return actual < expected
    if op == "<=":
        return actual <= expected
    if op == ">":
        return actual > expected
    if op == ">=":
        return actual >= expected

    raise ValueError(f"Unknown operator: {op}")


def matches(record: Record, clause: Mapping[str, Any]) -> bool:
    """
    Check a record against a filter clause.

    UNDEFINED predicates are dropped rather than rejected.
    """
    for key, condition in clause.items():
        if condition is UNDEFINED:
            continue

        if key in ("or", "and"):
            subclauses = [c for c in condition if c is not UNDEFINED]
            if not subclauses:
                continue
            results = (matches(record, sub) for sub in subclauses)
            if key == "or" and not any(results):
                return False
            if key == "and" and not all(results):
                return False
            continue

        actual = record.get(key)

        if isinstance(condition, Mapping):
            for op, expected in condition.items():
                if expected is UNDEFINED:
                    continue
                if not _compare(op, actual, expected):
                    return False
            continue

        if isinstance(condition, (list, tuple)):
            if actual not in [v for v in condition if v is not UNDEFINED]:
                return False
            continue

        if actual != condition:
            return False

    return True


def _sort_key(sort: Any) -> list[tuple[str, bool]]:
    """Normalize `sort` into (attribute, descending) pairs."""
    if not sort:
        return []
    if isinstance(sort, str):
        sort = [sort]
    if isinstance(sort, Mapping):
        return [(attr, str(d).upper() == "DESC") for attr, d in sort.items()]

    pairs = []
    for item in sort:
        if isinstance(item, Mapping):
            pairs.extend(_sort_key(item))
            continue
        parts = str(item).split()
        descending = len(parts) > 1 and parts[1].upper() == "DESC"
        pairs.append((parts[0], descending))
    return pairs


# ============================================================
# ENTITY
# ============================================================

class MemoryEntity:
    """
    In-memory collection of records exposing data-access operations.

    Args:
        identity: Entity name
        primary_key: Primary key attribute
        reject_undefined_where: Optional per-entity guard override
    """

    def __init__(
        self,
        identity: str,
        primary_key: str = "id",
        reject_undefined_where: bool | None = None,
    ) -> None:
        self.identity = identity
        self.primary_key = primary_key
        if reject_undefined_where is not None:
            self.reject_undefined_where = reject_undefined_where
        self._records: list[Record] = []
        self._next_id = 1

    def __len__(self) -> int:
        return len(self._records)

    # --------------------------------------------------------
    # Criteria handling
    # --------------------------------------------------------

    def _primary_keys_clause(self, keys: list | tuple) -> dict[str, Any]:
        return {self.primary_key: {"in": list(keys)}}

    def _normalize(self, criteria: Any) -> dict[str, Any]:
        """Turn any criteria form into {where, limit, skip, sort}."""
        if criteria is UNDEFINED or callable(criteria) and not isinstance(criteria, Mapping):
            return {WHERE_KEY: {}}

        if criteria is None or isinstance(criteria, str):
            return {WHERE_KEY: {self.primary_key: criteria}}
        if isinstance(criteria, Number) and not isinstance(criteria, bool):
            return {WHERE_KEY: {self.primary_key: criteria}}

        if isinstance(criteria, (list, tuple)):
            return {WHERE_KEY: self._primary_keys_clause(criteria)}

        if not isinstance(criteria, Mapping):
            raise TypeError(f"Unsupported criteria: {criteria!r}")

        where = criteria.get(WHERE_KEY)
        if isinstance(where, (list, tuple)):
            where = self._primary_keys_clause(where)
        elif not isinstance(where, Mapping):
            where = {k: v for k, v in criteria.items() if k not in KNOWN_DIRECTIVE_KEYS}

        return {
            WHERE_KEY: where,
            "limit": criteria.get("limit"),
            "skip": criteria.get("skip") or 0,
            "sort": criteria.get("sort"),
        }

    def _select(self, criteria: Any) -> list[Record]:
        normalized = self._normalize(criteria)
        selected = [r for r in self._records if matches(r, normalized[WHERE_KEY])]

        for attr, descending in reversed(_sort_key(normalized.get("sort"))):
            selected.sort(key=lambda r: (r.get(attr) is None, r.get(attr)), reverse=descending)

        skip = normalized.get("skip") or 0
        limit = normalized.get("limit")
        end = skip + limit if isinstance(limit, int) else None
        return selected[skip:end]

    # --------------------------------------------------------
    # Writes
    # --------------------------------------------------------

    def create(self, values: Mapping[str, Any]) -> Record:
        """Insert one record, assigning a primary key if missing."""
        record = dict(values)
        if record.get(self.primary_key) is None:
            record[self.primary_key] = self._next_id
            self._next_id += 1
        self._records.append(record)
        return copy.deepcopy(record)

    def create_each(self, values: list[Mapping[str, Any]]) -> list[Record]:
        """Insert several records."""
        return [self.create(v) for v in values]

    def destroy(self, criteria: Any = UNDEFINED) -> Query:
        """Delete every matching record."""

        def run(query: Query) -> list[Record] | None:
            doomed = self._select(criteria)
            doomed_ids = {id(r) for r in doomed}
            self._records = [r for r in self._records if id(r) not in doomed_ids]
            logger.debug(f"{self.identity}: destroyed {len(doomed)} record(s)")
            return copy.deepcopy(doomed) if query.fetch_records else None

        return Query(run)

    def destroy_one(self, criteria: Any = UNDEFINED) -> Query:
        """Delete the single matching record."""

        def run(query: Query) -> Record | None:
            doomed = self._select(criteria)
            if len(doomed) > 1:
                raise ValueError(f"{self.identity}: destroy_one matched {len(doomed)} records")
            if not doomed:
                return None
            self._records = [r for r in self._records if r is not doomed[0]]
            return copy.deepcopy(doomed[0]) if query.fetch_records else None

        return Query(run)

    def update(self, criteria: Any = UNDEFINED, values: Mapping[str, Any] | None = None) -> Query:
        """Apply values to every matching record."""

        def run(query: Query) -> list[Record] | None:
            updated = self._select(criteria)
            for record in updated:
                record.update(values or {})
            logger.debug(f"{self.identity}: updated {len(updated)} record(s)")
            return copy.deepcopy(updated) if query.fetch_records else None

        return Query(run)

    def update_one(self, criteria: Any = UNDEFINED, values: Mapping[str, Any] | None = None) -> Query:
        """Apply values to the single matching record."""

        def run(query: Query) -> Record | None:
            updated = self._select(criteria)
            if len(updated) > 1:
                raise ValueError(f"{self.identity}: update_one matched {len(updated)} records")
            if not updated:
                return None
            updated[0].update(values or {})
            return copy.deepcopy(updated[0])

        return Query(run)

    # --------------------------------------------------------
    # Reads
    # --------------------------------------------------------

    def find(self, criteria: Any = UNDEFINED) -> Query:
        """Return every matching record."""
        return Query(lambda query: copy.deepcopy(self._select(criteria)))

    def find_one(self, criteria: Any = UNDEFINED) -> Query:
        """Return the single matching record, or None."""

        def run(query: Query) -> Record | None:
            found = self._select(criteria)
            if len(found) > 1:
                raise ValueError(f"{self.identity}: find_one matched {len(found)} records")
            return copy.deepcopy(found[0]) if found else None

        return Query(run)

    def count(self, criteria: Any = UNDEFINED) -> Query:
        """Count matching records."""
        return Query(lambda query: len(self._select(criteria)))

    def sum(self, criteria: Any = UNDEFINED, attribute: str = "") -> Query:
        """Sum a numeric attribute over matching records."""
        return Query(
            lambda query: sum(r.get(attribute) or 0 for r in self._select(criteria))
        )

    def avg(self, criteria: Any = UNDEFINED, attribute: str = "") -> Query:
        """Average a numeric attribute over matching records."""

        def run(query: Query) -> float:
            values = [r[attribute] for r in self._select(criteria) if r.get(attribute) is not None]
            return sum(values) / len(values) if values else 0.0

        return Query(run)

    def __repr__(self) -> str:
        return f"MemoryEntity({self.identity!r}, records={len(self._records)})"
