"""Freshness and ETag policy for stored URL Metrics."""

from .exceptions import ConfigurationError
from .models import URLMetric

DEFAULT_FRESHNESS_TTL = 86400  # One day


class FreshnessPolicy:
    """Decides whether a stored URL Metric still counts toward its group.

    A URL Metric is valid when its ETag equals the current ETag and its age
    does not exceed the freshness TTL. A missing ETag is never valid.
    """

    def __init__(self, current_etag: str, freshness_ttl: float):
        if not current_etag:
            raise ConfigurationError("Current ETag cannot be empty", parameter="current_etag")
        if freshness_ttl < 0:
            raise ConfigurationError(
                f"Freshness TTL must be at least zero, but saw {freshness_ttl}",
                parameter="freshness_ttl",
            )
        self.current_etag = current_etag
        self.freshness_ttl = freshness_ttl

    def is_etag_match(self, url_metric: URLMetric) -> bool:
        return url_metric.etag is not None and url_metric.etag == self.current_etag

    def is_fresh(self, url_metric: URLMetric, now: float) -> bool:
        return now - url_metric.timestamp <= self.freshness_ttl

    def is_valid(self, url_metric: URLMetric, now: float) -> bool:
        return self.is_etag_match(url_metric) and self.is_fresh(url_metric, now)


def is_url_metric_valid(
    url_metric: URLMetric, current_etag: str, now: float, freshness_ttl: float
) -> bool:
    """Check a single URL Metric without holding on to a policy."""
    return FreshnessPolicy(current_etag, freshness_ttl).is_valid(url_metric, now)
