"""URL Metric group: a bounded bucket of observations for one viewport range."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable, Iterator
from typing import TYPE_CHECKING

from .breakpoints import MAX_VIEWPORT_WIDTH
from .exceptions import ConfigurationError, OutOfRangeError
from .freshness import FreshnessPolicy
from .models import ExternalBackgroundImage, LCPElement, URLMetric, URLMetricGroupSnapshot

if TYPE_CHECKING:
    from .group_collection import URLMetricGroupCollection


class URLMetricGroup:
    """URL Metrics whose viewport width falls in ``[minimum, maximum]``.

    Groups are normally only constructed by ``URLMetricGroupCollection``.

    Business Rules:
    - A group is complete once at least ``sample_size`` of its URL Metrics are
      fresh and match the current ETag
    - At most ``sample_size`` URL Metrics are retained; the oldest ones
      are evicted first
    - The LCP element is the XPath reported as LCP by more than half of the
      valid URL Metrics
    """

    def __init__(
        self,
        url_metrics: Iterable[URLMetric],
        minimum_viewport_width: int,
        maximum_viewport_width: int,
        sample_size: int,
        freshness_ttl: float,
        current_etag: str,
        *,
        time_source: Callable[[], float] = time.time,
        collection: URLMetricGroupCollection | None = None,
    ):
        if minimum_viewport_width < 0:
            raise ConfigurationError(
                "The minimum viewport width must be at least zero.",
                parameter="minimum_viewport_width",
            )
        if maximum_viewport_width < minimum_viewport_width:
            raise ConfigurationError(
                "The maximum viewport width must be greater than or equal to the minimum "
                "viewport width.",
                parameter="maximum_viewport_width",
            )
        if sample_size <= 0:
            raise ConfigurationError(
                "Sample size must be greater than zero.", parameter="sample_size"
            )
        self._minimum_viewport_width = minimum_viewport_width
        self._maximum_viewport_width = maximum_viewport_width
        self._sample_size = sample_size
        self._policy = FreshnessPolicy(current_etag, freshness_ttl)
        self._time_source = time_source
        self._collection = collection
        self._url_metrics: list[URLMetric] = []
        self._lcp_element_cache: tuple[LCPElement | None] | None = None

        for url_metric in url_metrics:
            self.add_url_metric(url_metric)

    def get_minimum_viewport_width(self) -> int:
        return self._minimum_viewport_width

    def get_maximum_viewport_width(self) -> int:
        return self._maximum_viewport_width

    def get_sample_size(self) -> int:
        return self._sample_size

    def get_freshness_ttl(self) -> float:
        return self._policy.freshness_ttl

    def get_current_etag(self) -> str:
        return self._policy.current_etag

    @property
    def has_upper_bound(self) -> bool:
        return self._maximum_viewport_width != MAX_VIEWPORT_WIDTH

    @property
    def collection(self) -> URLMetricGroupCollection | None:
        return self._collection

    def is_viewport_width_in_range(self, viewport_width: int) -> bool:
        """Check whether the width lies within the group's inclusive bounds."""
        if viewport_width < self._minimum_viewport_width:
            return False
        return not self.has_upper_bound or viewport_width <= self._maximum_viewport_width

    def check_viewport_width(self, viewport_width: int) -> None:
        """Raise OutOfRangeError if the width is not in the group's range."""
        if not self.is_viewport_width_in_range(viewport_width):
            raise OutOfRangeError(
                viewport_width, self._minimum_viewport_width, self._maximum_viewport_width
            )

    def add_url_metric(self, url_metric: URLMetric) -> None:
        """Add a URL Metric, evicting the oldest ones beyond the sample size.

        Completeness is not checked here; see
        ``URLMetricGroupCollection.add_url_metric()``.

        Raises:
            OutOfRangeError: If the viewport width is not in the group's range
        """
        url_metric.set_group(self)
        self._url_metrics.append(url_metric)

        if len(self._url_metrics) > self._sample_size:
            # Stable sort keeps insertion order among equal timestamps.
            self._url_metrics.sort(key=lambda metric: metric.timestamp, reverse=True)
            self._url_metrics = self._url_metrics[: self._sample_size]

        self.clear_cache()

    def is_url_metric_valid(self, url_metric: URLMetric) -> bool:
        """Check whether a URL Metric is fresh and matches the current ETag."""
        return self._policy.is_valid(url_metric, self._time_source())

    def get_valid_url_metrics(self) -> list[URLMetric]:
        now = self._time_source()
        return [metric for metric in self._url_metrics if self._policy.is_valid(metric, now)]

    def is_complete(self) -> bool:
        """Check whether enough valid URL Metrics have been collected.

        Evaluated against the current time on every call, so a complete group
        becomes incomplete again once its URL Metrics go stale.
        """
        if not self._url_metrics:
            return False
        return len(self.get_valid_url_metrics()) >= self._sample_size

    def count(self) -> int:
        """Total URL Metrics held, including stale and ETag-mismatched ones."""
        return len(self._url_metrics)

    def get_lcp_element(self) -> LCPElement | None:
        """Get the LCP element agreed on by a majority of valid URL Metrics."""
        if self._lcp_element_cache is None:
            self._lcp_element_cache = (self._compute_lcp_element(),)
        return self._lcp_element_cache[0]

    def _compute_lcp_element(self) -> LCPElement | None:
        valid_url_metrics = self.get_valid_url_metrics()
        if not valid_url_metrics:
            return None
        majority = len(valid_url_metrics) / 2

        # Dicts preserve first-seen order which breaks ties deterministically.
        xpath_votes: dict[str, int] = {}
        background_image_votes: dict[ExternalBackgroundImage, int] = {}
        for url_metric in valid_url_metrics:
            element = url_metric.get_lcp_element()
            if element is not None:
                xpath_votes[element.xpath] = xpath_votes.get(element.xpath, 0) + 1
            background_image = url_metric.get_external_background_image()
            if background_image is not None:
                background_image_votes[background_image] = (
                    background_image_votes.get(background_image, 0) + 1
                )

        xpath = _most_common(xpath_votes)
        if xpath is not None and xpath_votes[xpath] > majority:
            return LCPElement(xpath=xpath)

        background_image = _most_common(background_image_votes)
        if background_image is not None and background_image_votes[background_image] > majority:
            return LCPElement(external_background_image=background_image)

        return None

    def clear_cache(self) -> None:
        """Invalidate derived results after a URL Metric changed."""
        self._lcp_element_cache = None
        if self._collection is not None:
            self._collection.clear_cache()

    def __iter__(self) -> Iterator[URLMetric]:
        return iter(list(self._url_metrics))

    def __len__(self) -> int:
        return len(self._url_metrics)

    def __repr__(self) -> str:
        maximum = self._maximum_viewport_width if self.has_upper_bound else "inf"
        return (
            f"URLMetricGroup([{self._minimum_viewport_width}, {maximum}], "
            f"count={len(self)}, sample_size={self._sample_size})"
        )

    def to_snapshot(self, include_url_metrics: bool = False) -> URLMetricGroupSnapshot:
        lcp_element = self.get_lcp_element()
        return URLMetricGroupSnapshot(
            minimum_viewport_width=self._minimum_viewport_width,
            maximum_viewport_width=self._maximum_viewport_width if self.has_upper_bound else None,
            sample_size=self._sample_size,
            freshness_ttl=self._policy.freshness_ttl,
            lcp_element=lcp_element.xpath if lcp_element is not None else None,
            complete=self.is_complete(),
            record_count=len(self),
            url_metrics=(
                [url_metric.to_dict() for url_metric in self._url_metrics]
                if include_url_metrics
                else None
            ),
        )

    def to_dict(self, include_url_metrics: bool = False) -> dict:
        return self.to_snapshot(include_url_metrics).to_dict()


def _most_common(votes: dict) -> object | None:
    """Get the key with the most votes; the first seen wins a tie."""
    best = None
    best_count = 0
    for key, count in votes.items():
        if count > best_count:
            best, best_count = key, count
    return best
