"""URL Metric store interface - Port definition for durable record storage."""

from abc import ABC, abstractmethod
from typing import Any


class URLMetricStorePort(ABC):
    """Abstract interface for storing raw URL Metric records by page slug.

    The store is the only state shared between requests. It holds plain
    dicts in wire format; validation happens when a collection is built from
    them, so a store never needs to know the schema.
    """

    @abstractmethod
    def get(self, slug: str) -> list[dict[str, Any]]:
        """Read every record stored for a page.

        Args:
            slug: The page key

        Returns:
            The stored records, oldest first; empty if none are stored
        """
        ...

    @abstractmethod
    def append(self, slug: str, data: dict[str, Any]) -> None:
        """Atomically append one record for a page.

        Implementations may bound the number of records kept per page by
        dropping the oldest ones.

        Raises:
            StorageError: If the record cannot be written
        """
        ...

    @abstractmethod
    def put(self, slug: str, records: list[dict[str, Any]]) -> None:
        """Atomically replace every record stored for a page.

        Used to persist a collection after grouping, so records evicted from
        their group are dropped from storage too.

        Raises:
            StorageError: If any record cannot be written; the stored
                records are then left unchanged
        """
        ...

    @abstractmethod
    def delete(self, slug: str) -> bool:
        """Delete every record stored for a page.

        Returns:
            True if records were deleted, False if none were stored
        """
        ...
