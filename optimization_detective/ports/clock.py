"""Clock port abstraction for time handling.

Freshness depends on the current time, so domain logic receives time through
this port instead of reading the system clock.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class ClockPort(ABC):
    """Abstract clock interface for time operations."""

    @abstractmethod
    def now(self) -> datetime:
        """Get the current time as a timezone-aware datetime.

        Note:
            Implementations MUST return timezone-aware datetimes.
        """
        ...

    def timestamp(self) -> float:
        """Get the current time in seconds since the epoch."""
        return self.now().timestamp()
