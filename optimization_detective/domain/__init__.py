"""Domain layer - URL Metric records, grouping and consensus."""

from .breakpoints import (
    DEFAULT_BREAKPOINT_MAX_WIDTHS,
    MAX_VIEWPORT_WIDTH,
    normalize_breakpoints,
    partition_breakpoints,
)
from .exceptions import (
    CapacityError,
    ConfigurationError,
    GroupCompleteError,
    InvalidArgumentError,
    OutOfRangeError,
    RequiredPropertyError,
    StorageError,
    URLMetricsError,
    ValidationError,
)
from .extensions import SchemaExtensionRegistry, register_external_background_image_extension
from .freshness import DEFAULT_FRESHNESS_TTL, FreshnessPolicy, is_url_metric_valid
from .group import URLMetricGroup
from .group_collection import URLMetricGroupCollection
from .models import (
    DOMRect,
    Element,
    ExternalBackgroundImage,
    LCPElement,
    URLMetric,
    URLMetricGroupSnapshot,
    Viewport,
)
from .schema import URLMetricSchema
from .services import MediaQueryService, URLMetricsKeyService

__all__ = [
    "DEFAULT_BREAKPOINT_MAX_WIDTHS",
    "DEFAULT_FRESHNESS_TTL",
    "MAX_VIEWPORT_WIDTH",
    # Exceptions
    "CapacityError",
    "ConfigurationError",
    # Models
    "DOMRect",
    "Element",
    "ExternalBackgroundImage",
    "FreshnessPolicy",
    "GroupCompleteError",
    "InvalidArgumentError",
    "LCPElement",
    "MediaQueryService",
    "OutOfRangeError",
    "RequiredPropertyError",
    "SchemaExtensionRegistry",
    "StorageError",
    "URLMetric",
    "URLMetricGroup",
    "URLMetricGroupCollection",
    "URLMetricGroupSnapshot",
    "URLMetricSchema",
    "URLMetricsError",
    "URLMetricsKeyService",
    "ValidationError",
    "Viewport",
    "is_url_metric_valid",
    "normalize_breakpoints",
    "partition_breakpoints",
    "register_external_background_image_extension",
]
