"""Logger port used by the use cases to report stored and rejected URL Metrics."""

from abc import ABC, abstractmethod
from typing import Any


class LoggerPort(ABC):
    """Abstract interface for structured logging.

    Keyword arguments are structured context, normally produced by
    ``LogContext.to_dict()``: the page slug, the operation, the viewport
    width and, for rejections, the error code.
    """

    @abstractmethod
    def debug(self, message: str, **kwargs: Any) -> None:
        ...

    @abstractmethod
    def info(self, message: str, **kwargs: Any) -> None:
        """Log a URL Metric that was stored."""
        ...

    @abstractmethod
    def warning(self, message: str, **kwargs: Any) -> None:
        """Log a rejected URL Metric or a stored record that could not be read."""
        ...

    @abstractmethod
    def error(self, message: str, **kwargs: Any) -> None:
        ...

    @abstractmethod
    def exception(self, message: str, exc_info: Exception | None = None, **kwargs: Any) -> None:
        """Log a failure with its traceback, such as a stored listener raising.

        Args:
            exc_info: The exception to report; the one being handled if None
        """
        ...
