"""
PyTest configuration and shared fixtures for the hash ring tests.

This file provides common test utilities and fixtures that can be used
across all test modules.
"""

import pytest
import sys
import os
from typing import List

# Add src directory to Python path for all tests
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

# Import after path setup
from consistent_hash import ConsistentHashCluster, ConsistentHashRing
from ring_config import RingConfiguration


class StubHashFunction:
    """Hashes a numeric string to its own value, so tests choose positions."""

    def compute(self, value: str) -> int:
        return int(value)

    def __repr__(self) -> str:
        return "StubHashFunction"


@pytest.fixture
def stub_hash_function() -> StubHashFunction:
    return StubHashFunction()


@pytest.fixture
def stub_configuration(stub_hash_function) -> RingConfiguration:
    """Configuration placing node "N" (and key "N") at position N."""
    return RingConfiguration.builder().hash_function(stub_hash_function).build()


@pytest.fixture(params=[ConsistentHashRing, ConsistentHashCluster], ids=["ring", "cluster"])
def ring_class(request):
    """Run a test against both ring flavours."""
    return request.param


@pytest.fixture
def server_names() -> List[str]:
    """Standard set of node names for testing."""
    return ["192.168.1.1", "192.168.1.2", "192.168.1.3", "192.168.1.4"]


@pytest.fixture
def sample_keys() -> List[str]:
    """Keys for distribution and disruption tests."""
    return [f"key_{i:04d}" for i in range(1000)]


# Pytest markers for organizing tests
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "slow: Slow running tests"
    )


# Custom test utilities
class TestUtils:
    """Utility functions for tests."""

    __test__ = False

    @staticmethod
    def owners(ring, keys):
        """Map each key to the name of the node owning it."""
        return {key: ring.find_node(key).name for key in keys}

    @staticmethod
    def moved_keys(before, after):
        return [key for key in before if before[key] != after[key]]


@pytest.fixture
def test_utils() -> TestUtils:
    """Provide test utilities."""
    return TestUtils()
