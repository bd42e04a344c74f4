"""Pytest configuration and shared fixtures."""

from unittest.mock import Mock

import pytest

from optimization_detective.domain.extensions import (
    SchemaExtensionRegistry,
    register_external_background_image_extension,
)
from optimization_detective.domain.group_collection import URLMetricGroupCollection
from optimization_detective.domain.schema import URLMetricSchema
from optimization_detective.infrastructure.config import URLMetricsConfig
from optimization_detective.infrastructure.in_memory_url_metric_store import (
    InMemoryURLMetricStore,
)
from optimization_detective.ports.logger import LoggerPort
from tests.builders import CURRENT_ETAG, NOW, FrozenClock


@pytest.fixture
def clock():
    """Create a clock frozen at a known time."""
    return FrozenClock(NOW)


@pytest.fixture
def time_source(clock):
    """Create a time source callable backed by the frozen clock."""
    return clock.time


@pytest.fixture
def registry():
    """Create a registry with the built-in extensions registered."""
    registry = SchemaExtensionRegistry()
    register_external_background_image_extension(registry)
    return registry


@pytest.fixture
def schema(registry):
    """Create the validation boundary with default aspect ratio bounds."""
    return URLMetricSchema(registry)


@pytest.fixture
def config():
    """Create the default configuration."""
    return URLMetricsConfig()


@pytest.fixture
def store():
    """Create an empty in-memory store."""
    return InMemoryURLMetricStore()


@pytest.fixture
def mock_logger():
    """Create a mock logger for testing."""
    return Mock(spec=LoggerPort)


@pytest.fixture
def make_collection(time_source):
    """Create a factory building collections with the default breakpoints."""

    def _make(url_metrics=(), breakpoints=(480, 600, 782), sample_size=3, freshness_ttl=86400):
        return URLMetricGroupCollection(
            list(url_metrics),
            CURRENT_ETAG,
            list(breakpoints),
            sample_size,
            freshness_ttl,
            time_source=time_source,
        )

    return _make
