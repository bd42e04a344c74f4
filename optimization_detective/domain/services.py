"""Domain services for page identity and responsive hints.

Following Domain-Driven Design principles, these services encapsulate logic
that doesn't naturally belong to a single entity or value object.
"""

import hashlib
import json
from collections.abc import Iterable
from typing import Any

from .breakpoints import MAX_VIEWPORT_WIDTH


def _md5_json(data: Any) -> str:
    encoded = json.dumps(data, separators=(",", ":"), sort_keys=True, default=str)
    return hashlib.md5(encoded.encode("utf-8")).hexdigest()


class URLMetricsKeyService:
    """Domain service for the keys URL Metrics are stored and invalidated by."""

    @staticmethod
    def compute_slug(query_vars: dict[str, Any]) -> str:
        """Compute the page key from normalized query vars.

        Args:
            query_vars: Normalized query vars identifying the page

        Returns:
            MD5 hex digest of the query vars
        """
        return _md5_json(query_vars)

    @staticmethod
    def compute_current_etag(
        tag_visitor_ids: Iterable[str], extra_data: dict[str, Any] | None = None
    ) -> str:
        """Compute the ETag fingerprinting what is optimizable on the page.

        When the set of registered tag visitors changes, previously collected
        URL Metrics no longer match and stop counting toward completeness.

        Args:
            tag_visitor_ids: IDs of the registered tag visitors
            extra_data: Additional data which should invalidate URL Metrics

        Returns:
            MD5 hex digest
        """
        data: dict[str, Any] = {"tag_visitors": list(tag_visitor_ids)}
        if extra_data:
            data.update(extra_data)
        return _md5_json(data)


class MediaQueryService:
    """Domain service for media queries targeting a viewport group."""

    @staticmethod
    def generate(
        minimum_viewport_width: int | None, maximum_viewport_width: int | None
    ) -> str | None:
        """Generate a media query for a viewport width range.

        Returns:
            The media query, or None if neither bound applies or the bounds
            are inverted
        """
        if (
            minimum_viewport_width is not None
            and maximum_viewport_width is not None
            and minimum_viewport_width > maximum_viewport_width
        ):
            return None
        conditions = []
        if minimum_viewport_width is not None and minimum_viewport_width > 0:
            conditions.append(f"(min-width: {minimum_viewport_width}px)")
        if maximum_viewport_width is not None and maximum_viewport_width != MAX_VIEWPORT_WIDTH:
            conditions.append(f"(max-width: {maximum_viewport_width}px)")
        if not conditions:
            return None
        return " and ".join(conditions)
