"""Load test configuration.

Load Test Marker:
    @pytest.mark.load - Deselect with:
        pytest -m "not load"

Environment Variables:
    GOVPROOF_LOAD_TEST_REQUESTS: Requests per burst (default: 200)
    GOVPROOF_LOAD_TEST_CONCURRENCY: Concurrent pipeline runs (default: 25)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

import pytest


@dataclass
class LoadTestConfig:
    """Configuration for governance load tests.

    Attributes:
        request_count: Total requests submitted in a burst.
        concurrency: Pipeline runs in flight at once.
    """

    request_count: int
    concurrency: int


@pytest.fixture
def load_test_config() -> LoadTestConfig:
    """Create load test configuration from environment."""
    return LoadTestConfig(
        request_count=int(os.environ.get("GOVPROOF_LOAD_TEST_REQUESTS", "200")),
        concurrency=int(os.environ.get("GOVPROOF_LOAD_TEST_CONCURRENCY", "25")),
    )


def pytest_configure(config: pytest.Config) -> None:
    """Register load test marker."""
    config.addinivalue_line(
        "markers",
        "load: sustained throughput test (deselect with -m 'not load')",
    )
