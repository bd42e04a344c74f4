"""Ports layer - Interfaces for external communication."""

from .clock import ClockPort
from .logger import LoggerPort
from .url_metric_store import URLMetricStorePort

__all__ = [
    "ClockPort",
    "LoggerPort",
    "URLMetricStorePort",
]
