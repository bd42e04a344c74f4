"""Wall clock used to stamp URL Metrics and judge their freshness."""

import time
from datetime import UTC, datetime

from ..ports.clock import ClockPort


class SystemClock(ClockPort):
    """Clock reading the system time."""

    def now(self) -> datetime:
        return datetime.now(UTC)

    def timestamp(self) -> float:
        """Seconds since the epoch, as stored in a URL Metric's ``timestamp``."""
        return time.time()
