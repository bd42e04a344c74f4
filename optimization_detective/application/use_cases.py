"""Application use cases following hexagonal architecture principles.

This module contains application services that orchestrate use cases by
coordinating between the domain and the store, clock and logger ports. The
REST boundary that receives URL Metrics from the client delegates to these.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field

from ..domain.exceptions import GroupCompleteError, URLMetricsError, ValidationError
from ..domain.group import URLMetricGroup
from ..domain.group_collection import URLMetricGroupCollection
from ..domain.models import ETAG_PATTERN, URLMetric, URLMetricGroupSnapshot
from ..domain.schema import URLMetricSchema
from ..infrastructure.config import LogContext, URLMetricsConfig
from ..ports.clock import ClockPort
from ..ports.logger import LoggerPort
from ..ports.url_metric_store import URLMetricStorePort


class UseCase(Protocol):
    """Protocol for use case implementations."""

    def execute(self, *args: Any, **kwargs: Any) -> Any:
        """Execute the use case with given parameters."""
        ...


class URLMetricGroupCollectionFactory:
    """Builds the group collection for a page from the records in the store.

    A collection is never reused between operations; every call reads the
    store again so completeness reflects the current time and records.
    """

    def __init__(
        self,
        config: URLMetricsConfig,
        store: URLMetricStorePort,
        clock: ClockPort,
        schema: URLMetricSchema,
        logger: LoggerPort,
    ):
        self._config = config
        self._store = store
        self._clock = clock
        self._schema = schema
        self._logger = logger

    def create(self, slug: str, current_etag: str) -> URLMetricGroupCollection:
        """Create the collection for a page.

        Stored records which no longer validate are skipped and logged.
        """
        url_metrics = []
        for index, data in enumerate(self._store.get(slug)):
            try:
                url_metrics.append(self._schema.parse_stored(data))
            except ValidationError as e:
                context = LogContext(
                    slug=slug, operation="load_url_metrics", component="collection_factory"
                ).with_error(e)
                self._logger.warning(
                    f"Skipping stored URL Metric {index}: {e.message}", **context.to_dict()
                )

        return URLMetricGroupCollection(
            url_metrics,
            current_etag,
            self._config.breakpoint_max_widths,
            self._config.sample_size,
            self._config.freshness_ttl,
            time_source=self._clock.timestamp,
        )


class StoreURLMetricRequest(BaseModel):
    """Request model for storing one URL Metric submitted by a client."""

    slug: str = Field(..., min_length=1, description="Page key the URL Metric is for")
    current_etag: str = Field(
        ..., pattern=ETAG_PATTERN, description="ETag of the page when the client loaded it"
    )
    url_metric: dict[str, Any] = Field(
        ..., description="URL Metric data in wire format, without uuid/timestamp/etag"
    )


class StoreURLMetricResponse(BaseModel):
    """Response model for a stored URL Metric."""

    success: bool = Field(default=True)
    slug: str
    uuid: str = Field(..., description="Server-generated UUID of the stored URL Metric")
    group: URLMetricGroupSnapshot = Field(..., description="Group after the URL Metric was added")


class URLMetricStoreRequestContext(BaseModel):
    """Context passed to listeners after a URL Metric has been stored."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    slug: str
    current_etag: str
    url_metric: URLMetric
    url_metric_group: URLMetricGroup
    url_metric_group_collection: URLMetricGroupCollection


StoredListener = Callable[[URLMetricStoreRequestContext], None]


class StoreURLMetricUseCase:
    """Use case for storing a URL Metric submitted by the client.

    Business Rules:
    - The target group is resolved from the viewport width before validation
    - A URL Metric for a complete group is rejected with GroupCompleteError
    - The server sets uuid, timestamp and etag, overriding client values
    - The page's stored records are replaced by the grouped ones, so storage
      holds at most sample_size records per group
    - Listeners are notified only after the URL Metric was persisted
    """

    def __init__(
        self,
        collection_factory: URLMetricGroupCollectionFactory,
        store: URLMetricStorePort,
        clock: ClockPort,
        schema: URLMetricSchema,
        logger: LoggerPort,
    ):
        """Initialize the use case with required dependencies."""
        self._collection_factory = collection_factory
        self._store = store
        self._clock = clock
        self._schema = schema
        self._logger = logger
        self._listeners: list[StoredListener] = []

    def on_stored(self, listener: StoredListener) -> None:
        """Register a listener called after each successfully stored URL Metric."""
        self._listeners.append(listener)

    def execute(self, request: StoreURLMetricRequest) -> StoreURLMetricResponse:
        """Validate a URL Metric, add it to its group and persist the page's records.

        Raises:
            InvalidArgumentError: If the viewport width is negative
            GroupCompleteError: If the group for the viewport width is complete
            ValidationError: If the URL Metric does not satisfy the schema
            StorageError: If the store cannot write the records
        """
        context = LogContext(
            slug=request.slug, operation="store_url_metric", component="store_use_case"
        )
        try:
            collection = self._collection_factory.create(request.slug, request.current_etag)

            viewport_width = _get_viewport_width(request.url_metric)
            context = context.model_copy(update={"viewport_width": viewport_width})
            group = collection.get_group_for_viewport_width(viewport_width)
            if group.is_complete():
                raise GroupCompleteError(
                    group.get_minimum_viewport_width(), group.get_maximum_viewport_width()
                )

            url_metric = self._schema.parse(
                {
                    **request.url_metric,
                    "uuid": str(uuid.uuid4()),
                    "timestamp": self._clock.timestamp(),
                    "etag": request.current_etag,
                },
                strict=True,
            )

            group = collection.add_url_metric(url_metric)
            # Rewriting the whole page drops records evicted from their group.
            self._store.put(
                request.slug,
                [stored.to_dict() for stored in collection.get_flattened_url_metrics()],
            )
        except URLMetricsError as e:
            self._logger.warning(
                f"Rejected URL Metric: {e.message}", **context.with_error(e).to_dict()
            )
            raise

        self._logger.info(f"Stored URL Metric {url_metric.uuid}", **context.to_dict())

        stored_context = URLMetricStoreRequestContext(
            slug=request.slug,
            current_etag=request.current_etag,
            url_metric=url_metric,
            url_metric_group=group,
            url_metric_group_collection=collection,
        )
        for listener in self._listeners:
            try:
                listener(stored_context)
            except Exception as e:
                self._logger.exception(
                    "URL Metric stored listener failed", exc_info=e, **context.to_dict()
                )

        return StoreURLMetricResponse(
            slug=request.slug,
            uuid=url_metric.uuid,
            group=group.to_snapshot(),
        )


def _get_viewport_width(data: dict[str, Any]) -> int:
    """Read the viewport width needed to pick a group before full validation."""
    viewport = data.get("viewport")
    width = viewport.get("width") if isinstance(viewport, dict) else None
    if not isinstance(width, int) or isinstance(width, bool):
        error = {"loc": "viewport.width", "msg": "Input should be a valid integer"}
        raise ValidationError(
            f"Failed to validate URL Metric: {error['loc']}: {error['msg']}", errors=[error]
        )
    return width


class URLMetricGroupStatusesResponse(BaseModel):
    """Response model for the group statuses of a page."""

    slug: str
    every_group_complete: bool
    groups: list[dict[str, Any]] = Field(
        ..., description="minimumViewportWidth and complete flag for each group"
    )


class GetURLMetricGroupStatusesUseCase:
    """Use case for reporting which groups of a page still need URL Metrics.

    The client-side detection uses this to decide whether to collect at all.
    """

    def __init__(self, collection_factory: URLMetricGroupCollectionFactory, logger: LoggerPort):
        self._collection_factory = collection_factory
        self._logger = logger

    def execute(self, slug: str, current_etag: str) -> URLMetricGroupStatusesResponse:
        collection = self._collection_factory.create(slug, current_etag)
        response = URLMetricGroupStatusesResponse(
            slug=slug,
            every_group_complete=collection.is_every_group_complete(),
            groups=collection.get_group_statuses(),
        )
        self._logger.debug(
            "Computed URL Metric group statuses",
            **LogContext(slug=slug, operation="get_group_statuses").to_dict(),
        )
        return response
