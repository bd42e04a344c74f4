"""Logger adapter writing structured context through standard logging."""

import logging
from typing import Any

from ..ports.logger import LoggerPort

# Attributes every LogRecord carries; context keys must not overwrite them.
_RECORD_ATTRIBUTES = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
}


class ContextFormatter(logging.Formatter):
    """Formatter appending structured context as sorted ``key=value`` pairs.

    ``Rejected URL Metric [error_code=url_metric_group_complete slug=abc]``
    """

    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        context = {
            key: value for key, value in vars(record).items() if key not in _RECORD_ATTRIBUTES
        }
        if not context:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in sorted(context.items()))
        return f"{line} [{pairs}]"


def _to_extra(context: dict[str, Any]) -> dict[str, Any]:
    """Prefix context keys that collide with LogRecord attributes."""
    return {
        (f"context_{key}" if key in _RECORD_ATTRIBUTES else key): value
        for key, value in context.items()
    }


class SimpleLogger(LoggerPort):
    """Logger adapter on top of Python's standard logging.

    Structured keyword arguments, usually ``LogContext.to_dict()``, are
    attached to each record as attributes and rendered by the console
    handler's ``ContextFormatter``.
    """

    def __init__(self, name: str = "optimization_detective", level: int = logging.INFO):
        self._logger = logging.getLogger(name)
        self._logger.setLevel(level)

        if not self._logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(
                ContextFormatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
            )
            self._logger.addHandler(handler)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logger.debug(message, extra=_to_extra(kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.info(message, extra=_to_extra(kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.warning(message, extra=_to_extra(kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        self._logger.error(message, extra=_to_extra(kwargs))

    def exception(self, message: str, exc_info: Exception | None = None, **kwargs: Any) -> None:
        self._logger.exception(message, exc_info=exc_info or True, extra=_to_extra(kwargs))
