"""
Pytest configuration and fixtures.
"""

from unittest.mock import MagicMock

import pytest

from safe_criteria.core.types import GuardConfig
from safe_criteria.store.memory import MemoryEntity, Query


@pytest.fixture
def config() -> GuardConfig:
    """Default guard configuration (guard enabled)."""
    return GuardConfig()


@pytest.fixture
def widgets() -> MemoryEntity:
    """Widget store seeded with three records."""
    entity = MemoryEntity("widget")
    entity.create_each([
        {"name": "alpha", "status": "active", "price": 10, "tags": ["a", "b"]},
        {"name": "beta", "status": "active", "price": 20, "tags": ["b"]},
        {"name": "gamma", "status": "retired", "price": 30, "tags": []},
    ])
    return entity


@pytest.fixture
def deferred() -> MagicMock:
    """Query-like handle whose meta() returns itself."""
    handle = MagicMock(spec=Query)
    handle.meta.return_value = handle
    return handle


@pytest.fixture
def delegate(deferred: MagicMock) -> MagicMock:
    """Stand-in operation returning the deferred handle."""
    return MagicMock(return_value=deferred)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep SAFE_CRITERIA_* variables from the shell out of tests."""
    for name in (
        "SAFE_CRITERIA_REJECT_UNDEFINED_WHERE",
        "SAFE_CRITERIA_ENABLED",
        "SAFE_CRITERIA_CONFIG_FILE",
        "SAFE_CRITERIA_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
