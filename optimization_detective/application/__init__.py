"""Application layer - Use cases orchestrating the domain and ports."""

from .use_cases import (
    GetURLMetricGroupStatusesUseCase,
    StoreURLMetricRequest,
    StoreURLMetricResponse,
    StoreURLMetricUseCase,
    URLMetricGroupCollectionFactory,
    URLMetricGroupStatusesResponse,
    URLMetricStoreRequestContext,
)

__all__ = [
    "GetURLMetricGroupStatusesUseCase",
    "StoreURLMetricRequest",
    "StoreURLMetricResponse",
    "StoreURLMetricUseCase",
    "URLMetricGroupCollectionFactory",
    "URLMetricGroupStatusesResponse",
    "URLMetricStoreRequestContext",
]
