"""In-memory implementation of the URL Metric store.

This is an infrastructure adapter that implements the store port for
testing and development purposes.
"""

import json
import threading
from typing import Any

from ..domain.exceptions import StorageError
from ..ports.url_metric_store import URLMetricStorePort


class InMemoryURLMetricStore(URLMetricStorePort):
    """In-memory record store keyed by page slug.

    Records are kept serialized as JSON, like a post content column, so
    callers never share mutable dicts with the store.
    """

    def __init__(self, max_records_per_slug: int | None = None) -> None:
        """Initialize the in-memory storage.

        Args:
            max_records_per_slug: Records kept per page; the oldest are dropped
                beyond it. None keeps every record.
        """
        if max_records_per_slug is not None and max_records_per_slug <= 0:
            raise StorageError("max_records_per_slug must be greater than zero")
        self._max_records_per_slug = max_records_per_slug
        self._storage: dict[str, list[str]] = {}
        self._lock = threading.Lock()

    def get(self, slug: str) -> list[dict[str, Any]]:
        with self._lock:
            return [json.loads(record) for record in self._storage.get(slug, [])]

    def append(self, slug: str, data: dict[str, Any]) -> None:
        record = self._serialize(slug, data, "append")
        with self._lock:
            records = self._storage.setdefault(slug, [])
            records.append(record)
            if self._max_records_per_slug is not None:
                del records[: -self._max_records_per_slug]

    def put(self, slug: str, records: list[dict[str, Any]]) -> None:
        if not slug:
            raise StorageError("Slug cannot be empty", operation="put")
        serialized = [self._serialize(slug, data, "put") for data in records]
        with self._lock:
            self._storage[slug] = serialized

    @staticmethod
    def _serialize(slug: str, data: dict[str, Any], operation: str) -> str:
        if not slug:
            raise StorageError("Slug cannot be empty", operation=operation)
        try:
            return json.dumps(data, separators=(",", ":"))
        except (TypeError, ValueError) as e:
            raise StorageError(
                f"URL Metric is not JSON serializable: {e}", slug=slug, operation=operation
            ) from e

    def delete(self, slug: str) -> bool:
        with self._lock:
            return self._storage.pop(slug, None) is not None

    def put_raw(self, slug: str, records: list[Any]) -> None:
        """Replace the records of a page without validation (useful for testing)."""
        with self._lock:
            self._storage[slug] = [json.dumps(record) for record in records]

    def count(self, slug: str) -> int:
        with self._lock:
            return len(self._storage.get(slug, []))

    def clear(self) -> None:
        """Clear all stored records (useful for testing)."""
        with self._lock:
            self._storage.clear()
