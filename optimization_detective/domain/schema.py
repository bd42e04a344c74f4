"""Validation boundary turning raw payloads into URL Metrics."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConfigurationError, ValidationError
from .extensions import SchemaExtensionRegistry
from .models import URLMetric

DEFAULT_MINIMUM_VIEWPORT_ASPECT_RATIO = 0.4
DEFAULT_MAXIMUM_VIEWPORT_ASPECT_RATIO = 2.5


class URLMetricSchema:
    """Parses URL Metric payloads against the core schema plus extensions.

    Strict parsing is for client submissions: properties that are neither core
    nor registered extensions are rejected. Lenient parsing is for records
    read back from storage: unknown properties are tolerated and kept.
    """

    def __init__(
        self,
        extensions: SchemaExtensionRegistry | None = None,
        minimum_viewport_aspect_ratio: float = DEFAULT_MINIMUM_VIEWPORT_ASPECT_RATIO,
        maximum_viewport_aspect_ratio: float = DEFAULT_MAXIMUM_VIEWPORT_ASPECT_RATIO,
    ):
        if minimum_viewport_aspect_ratio <= 0:
            raise ConfigurationError(
                "Minimum viewport aspect ratio must be greater than zero",
                parameter="minimum_viewport_aspect_ratio",
            )
        if minimum_viewport_aspect_ratio > maximum_viewport_aspect_ratio:
            raise ConfigurationError(
                "Minimum viewport aspect ratio cannot exceed the maximum",
                parameter="maximum_viewport_aspect_ratio",
            )
        self.extensions = extensions or SchemaExtensionRegistry()
        self.minimum_viewport_aspect_ratio = minimum_viewport_aspect_ratio
        self.maximum_viewport_aspect_ratio = maximum_viewport_aspect_ratio

    def parse(self, data: Any, strict: bool = True) -> URLMetric:
        """Validate data and build a URL Metric.

        Raises:
            ValidationError: If the data does not satisfy the schema
        """
        if not isinstance(data, dict):
            raise ValidationError("URL Metric data must be an object")
        context = {
            "extensions": self.extensions,
            "strict": strict,
            "viewport_aspect_ratio_bounds": (
                self.minimum_viewport_aspect_ratio,
                self.maximum_viewport_aspect_ratio,
            ),
        }
        try:
            return URLMetric.model_validate(data, context=context)
        except PydanticValidationError as e:
            errors = [
                {"loc": ".".join(str(part) for part in error["loc"]), "msg": error["msg"]}
                for error in e.errors()
            ]
            first = errors[0]
            location = f"{first['loc']}: " if first["loc"] else ""
            raise ValidationError(
                f"Failed to validate URL Metric: {location}{first['msg']}", errors=errors
            ) from e

    def parse_stored(self, data: Any) -> URLMetric:
        """Validate a record read back from storage."""
        return self.parse(data, strict=False)
