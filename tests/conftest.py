"""
Pytest configuration and fixtures for cashtag tracker tests.
Provides shared fixtures for records, stores and fake agents.
"""

from pathlib import Path

import pytest
from prometheus_client import CollectorRegistry

from src.cashtags.agent import FetchResult
from src.cashtags.clock import FixedClock
from src.cashtags.records import Record
from src.cashtags.store import JsonRecordStore


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")


class StubSource:
    """Record source that returns queued FetchResults in order."""

    def __init__(self, *results: FetchResult):
        self.results = list(results)
        self.calls = 0

    def fetch(self) -> FetchResult:
        self.calls += 1
        if not self.results:
            return FetchResult.succeeded([])
        return self.results.pop(0)


@pytest.fixture
def project_root() -> Path:
    """Get project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def registry() -> CollectorRegistry:
    """Isolated Prometheus registry."""
    return CollectorRegistry()


@pytest.fixture
def fixed_clock() -> FixedClock:
    return FixedClock("10/16/2026, 12:00:00")


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "cashtag_results.json"


@pytest.fixture
def store(store_path: Path) -> JsonRecordStore:
    return JsonRecordStore(store_path)


@pytest.fixture
def foo() -> Record:
    return Record("$FOO", "0xAAA")


@pytest.fixture
def bar() -> Record:
    return Record("$BAR", "0xBBB")


@pytest.fixture
def stub_source():
    """Factory for StubSource instances."""
    return StubSource
