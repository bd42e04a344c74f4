"""Collection of URL Metric groups for one page.

The collection is rebuilt from stored URL Metrics for every request and
discarded afterwards. Nothing here is cached across requests.
"""

from __future__ import annotations

import bisect
import time
from collections.abc import Callable, Iterable, Iterator
from typing import Any

from .breakpoints import is_normalized, partition_breakpoints
from .exceptions import ConfigurationError, GroupCompleteError, InvalidArgumentError
from .freshness import FreshnessPolicy
from .group import URLMetricGroup
from .models import LCPElement, URLMetric


class URLMetricGroupCollection:
    """All viewport groups for a page, partitioned by breakpoints.

    With ``N`` breakpoints there are ``N + 1`` groups covering every viewport
    width from zero upward, in ascending order.
    """

    def __init__(
        self,
        url_metrics: Iterable[URLMetric],
        current_etag: str,
        breakpoints: list[int],
        sample_size: int,
        freshness_ttl: float,
        *,
        time_source: Callable[[], float] = time.time,
    ):
        breakpoints = list(breakpoints)
        if not is_normalized(breakpoints):
            raise ConfigurationError(
                "Breakpoints must be unique integers sorted in ascending order, each greater "
                f"than zero and less than the maximum viewport width, but saw {breakpoints}",
                parameter="breakpoints",
            )
        if sample_size <= 0:
            raise ConfigurationError(
                "Sample size must be greater than zero.", parameter="sample_size"
            )
        FreshnessPolicy(current_etag, freshness_ttl)  # Validates the etag and TTL.

        self._current_etag = current_etag
        self._breakpoints = breakpoints
        self._sample_size = sample_size
        self._freshness_ttl = freshness_ttl
        self._time_source = time_source
        self._cache: dict[str, Any] = {}

        self._groups = [
            URLMetricGroup(
                [],
                minimum,
                maximum,
                sample_size,
                freshness_ttl,
                current_etag,
                time_source=time_source,
                collection=self,
            )
            for minimum, maximum in partition_breakpoints(breakpoints)
        ]
        self._minimum_widths = [group.get_minimum_viewport_width() for group in self._groups]

        # Stored URL Metrics are placed without a completeness check; an
        # over-full group from concurrent writes is trimmed by eviction.
        for url_metric in url_metrics:
            self.get_group_for_viewport_width(url_metric.viewport_width).add_url_metric(url_metric)

    def get_current_etag(self) -> str:
        return self._current_etag

    def get_breakpoints(self) -> list[int]:
        return list(self._breakpoints)

    def get_sample_size(self) -> int:
        return self._sample_size

    def get_freshness_ttl(self) -> float:
        return self._freshness_ttl

    def clear_cache(self) -> None:
        self._cache.clear()

    def _cached(self, key: str, compute: Callable[[], Any]) -> Any:
        if key not in self._cache:
            self._cache[key] = compute()
        return self._cache[key]

    def get_group_for_viewport_width(self, viewport_width: int) -> URLMetricGroup:
        """Get the group whose range contains the viewport width.

        Raises:
            InvalidArgumentError: If the viewport width is negative
        """
        if viewport_width < 0:
            raise InvalidArgumentError(
                f"Viewport width must be at least zero, but saw {viewport_width}",
                details={"viewport_width": viewport_width},
            )
        index = bisect.bisect_right(self._minimum_widths, viewport_width) - 1
        return self._groups[index]

    def add_url_metric(self, url_metric: URLMetric) -> URLMetricGroup:
        """Add a new URL Metric to the group for its viewport width.

        Returns:
            The group the URL Metric was added to

        Raises:
            GroupCompleteError: If the target group is already complete
        """
        group = self.get_group_for_viewport_width(url_metric.viewport_width)
        if group.is_complete():
            raise GroupCompleteError(
                group.get_minimum_viewport_width(), group.get_maximum_viewport_width()
            )
        group.add_url_metric(url_metric)
        return group

    def get_first_group(self) -> URLMetricGroup:
        return self._groups[0]

    def get_last_group(self) -> URLMetricGroup:
        return self._groups[-1]

    def all_groups(self) -> list[URLMetricGroup]:
        return list(self._groups)

    def __iter__(self) -> Iterator[URLMetricGroup]:
        return iter(self._groups)

    def __len__(self) -> int:
        return len(self._groups)

    def get_groups_by_lcp_element(self, xpath: str) -> list[URLMetricGroup]:
        """Get every group whose LCP element has the given XPath."""
        return [
            group
            for group in self._groups
            if (lcp_element := group.get_lcp_element()) is not None and lcp_element.xpath == xpath
        ]

    def get_common_lcp_element(self) -> LCPElement | None:
        """Get the LCP element shared by every populated group, if there is one.

        Returns:
            The shared element, which always has an XPath; None when the groups
            disagree, any populated group has no LCP element, or the groups only
            agree on an external background image
        """
        return self._cached("common_lcp_element", self._compute_common_lcp_element)

    def _compute_common_lcp_element(self) -> LCPElement | None:
        common: LCPElement | None = None
        for group in self._groups:
            if len(group) == 0:
                continue
            lcp_element = group.get_lcp_element()
            if lcp_element is None:
                return None
            if common is None:
                common = lcp_element
            elif common != lcp_element:
                return None
        if common is None or common.xpath is None:
            return None
        return common

    def is_any_group_populated(self) -> bool:
        return any(len(group) > 0 for group in self._groups)

    def is_every_group_populated(self) -> bool:
        return all(len(group) > 0 for group in self._groups)

    def is_every_group_complete(self) -> bool:
        return all(group.is_complete() for group in self._groups)

    def get_flattened_url_metrics(self) -> list[URLMetric]:
        return [url_metric for group in self._groups for url_metric in group]

    def _get_max_intersection_ratios(self) -> dict[str, float]:
        def compute() -> dict[str, float]:
            ratios: dict[str, float] = {}
            for group in self._groups:
                for url_metric in group.get_valid_url_metrics():
                    for element in url_metric.elements:
                        ratios[element.xpath] = max(
                            ratios.get(element.xpath, 0.0), element.intersection_ratio
                        )
            return ratios

        return self._cached("max_intersection_ratios", compute)

    def get_element_max_intersection_ratio(self, xpath: str) -> float | None:
        """Get the largest intersection ratio observed for an element.

        Returns:
            The maximum ratio across valid URL Metrics, or None if the element
            was never observed
        """
        return self._get_max_intersection_ratios().get(xpath)

    def is_element_positioned_in_any_initial_viewport(self, xpath: str) -> bool | None:
        """Check whether the element was visible in any initial viewport.

        Returns:
            None if the element was never observed
        """
        ratio = self.get_element_max_intersection_ratio(xpath)
        if ratio is None:
            return None
        return ratio > 0

    def get_group_statuses(self) -> list[dict[str, Any]]:
        """Statuses the client-side detection uses to decide whether to collect."""
        return [
            {
                "minimumViewportWidth": group.get_minimum_viewport_width(),
                "complete": group.is_complete(),
            }
            for group in self._groups
        ]

    def to_dict(self, include_url_metrics: bool = False) -> dict[str, Any]:
        return {
            "current_etag": self._current_etag,
            "breakpoints": self.get_breakpoints(),
            "freshness_ttl": self._freshness_ttl,
            "sample_size": self._sample_size,
            "every_group_complete": self.is_every_group_complete(),
            "every_group_populated": self.is_every_group_populated(),
            "groups": [group.to_dict(include_url_metrics) for group in self._groups],
        }
