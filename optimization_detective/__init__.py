"""Optimization Detective - URL Metric collection and grouping engine."""

from .application.use_cases import (
    GetURLMetricGroupStatusesUseCase,
    StoreURLMetricUseCase,
    URLMetricGroupCollectionFactory,
)
from .domain.group_collection import URLMetricGroupCollection
from .domain.schema import URLMetricSchema
from .infrastructure.config import URLMetricsConfig

__all__ = [
    "GetURLMetricGroupStatusesUseCase",
    "StoreURLMetricUseCase",
    "URLMetricGroupCollection",
    "URLMetricGroupCollectionFactory",
    "URLMetricSchema",
    "URLMetricsConfig",
]
__version__ = "0.1.0"
