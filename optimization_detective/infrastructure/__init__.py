"""Infrastructure layer - Concrete implementations of ports."""

from .config import LogContext, URLMetricsConfig
from .in_memory_url_metric_store import InMemoryURLMetricStore
from .simple_logger import ContextFormatter, SimpleLogger
from .system_clock import SystemClock

__all__ = [
    "ContextFormatter",
    "InMemoryURLMetricStore",
    "LogContext",
    "SimpleLogger",
    "SystemClock",
    "URLMetricsConfig",
]
