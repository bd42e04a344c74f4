"""Configuration objects for infrastructure layer following DDD principles."""

from __future__ import annotations

import logging
import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from ..domain.breakpoints import (
    DEFAULT_BREAKPOINT_MAX_WIDTHS,
    clamp_breakpoint,
    normalize_breakpoints,
)
from ..domain.exceptions import ConfigurationError
from ..domain.extensions import SchemaExtensionRegistry
from ..domain.freshness import DEFAULT_FRESHNESS_TTL
from ..domain.schema import (
    DEFAULT_MAXIMUM_VIEWPORT_ASPECT_RATIO,
    DEFAULT_MINIMUM_VIEWPORT_ASPECT_RATIO,
    URLMetricSchema,
)

logger = logging.getLogger(__name__)


class URLMetricsConfig(BaseModel):
    """Strongly-typed configuration for URL Metric collection.

    Built once at startup and passed explicitly to factories and use cases.
    Invalid values raise ``ConfigurationError``.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
    )

    breakpoint_max_widths: list[int] = Field(
        default_factory=lambda: list(DEFAULT_BREAKPOINT_MAX_WIDTHS),
        description="Inclusive maximum viewport widths of every group but the last",
    )
    sample_size: int = Field(
        default=3,
        description="Number of valid URL Metrics needed for a group to be complete",
    )
    freshness_ttl: int = Field(
        default=DEFAULT_FRESHNESS_TTL,
        description="Seconds a URL Metric stays fresh",
    )
    minimum_viewport_aspect_ratio: float = Field(
        default=DEFAULT_MINIMUM_VIEWPORT_ASPECT_RATIO,
        description="Smallest accepted viewport width/height ratio",
    )
    maximum_viewport_aspect_ratio: float = Field(
        default=DEFAULT_MAXIMUM_VIEWPORT_ASPECT_RATIO,
        description="Largest accepted viewport width/height ratio",
    )

    @model_validator(mode="wrap")
    @classmethod
    def raise_configuration_error(cls, data: Any, handler: Any) -> URLMetricsConfig:
        """Report type and unknown-key errors as ``ConfigurationError``."""
        try:
            return handler(data)
        except PydanticValidationError as e:
            error = e.errors()[0]
            parameter = ".".join(str(part) for part in error["loc"]) or None
            location = f"{parameter}: " if parameter else ""
            raise ConfigurationError(
                f"Invalid configuration: {location}{error['msg']}", parameter=parameter
            ) from e

    @field_validator("breakpoint_max_widths")
    @classmethod
    def normalize_breakpoint_max_widths(cls, v: list[int]) -> list[int]:
        """Clamp, de-duplicate and sort the breakpoints."""
        for breakpoint in v:
            clamped = clamp_breakpoint(breakpoint)
            if clamped != breakpoint:
                logger.warning(
                    "Breakpoint %s is out of range and was clamped to %s", breakpoint, clamped
                )
        return normalize_breakpoints(v)

    @model_validator(mode="after")
    def validate_ranges(self) -> URLMetricsConfig:
        if self.sample_size <= 0:
            raise ConfigurationError(
                f"Sample size must be greater than zero, but saw {self.sample_size}",
                parameter="sample_size",
            )
        if self.freshness_ttl < 0:
            raise ConfigurationError(
                f"Freshness TTL must be at least zero, but saw {self.freshness_ttl}",
                parameter="freshness_ttl",
            )
        if self.minimum_viewport_aspect_ratio <= 0:
            raise ConfigurationError(
                "Minimum viewport aspect ratio must be greater than zero",
                parameter="minimum_viewport_aspect_ratio",
            )
        if self.minimum_viewport_aspect_ratio > self.maximum_viewport_aspect_ratio:
            raise ConfigurationError(
                "Minimum viewport aspect ratio cannot exceed the maximum",
                parameter="maximum_viewport_aspect_ratio",
            )
        return self

    @classmethod
    def from_env(cls) -> URLMetricsConfig:
        """Build the configuration from ``OD_*`` environment variables.

        Unset variables fall back to the defaults.
        """
        values: dict[str, Any] = {}
        raw_breakpoints = os.getenv("OD_BREAKPOINT_MAX_WIDTHS")
        if raw_breakpoints is not None:
            values["breakpoint_max_widths"] = [
                _parse(int, "OD_BREAKPOINT_MAX_WIDTHS", part)
                for part in raw_breakpoints.split(",")
                if part.strip()
            ]
        for name, field, parser in (
            ("OD_SAMPLE_SIZE", "sample_size", int),
            ("OD_FRESHNESS_TTL", "freshness_ttl", int),
            ("OD_MIN_VIEWPORT_ASPECT_RATIO", "minimum_viewport_aspect_ratio", float),
            ("OD_MAX_VIEWPORT_ASPECT_RATIO", "maximum_viewport_aspect_ratio", float),
        ):
            raw = os.getenv(name)
            if raw is not None:
                values[field] = _parse(parser, name, raw)
        return cls(**values)

    def create_schema(self, extensions: SchemaExtensionRegistry | None = None) -> URLMetricSchema:
        """Create the validation boundary using the configured aspect ratio bounds."""
        return URLMetricSchema(
            extensions,
            minimum_viewport_aspect_ratio=self.minimum_viewport_aspect_ratio,
            maximum_viewport_aspect_ratio=self.maximum_viewport_aspect_ratio,
        )


def _parse(parser: type, name: str, raw: str) -> Any:
    try:
        return parser(raw.strip())
    except ValueError as e:
        raise ConfigurationError(f"Invalid value for {name}: {raw!r}", parameter=name) from e


class LogContext(BaseModel):
    """Strongly-typed context for structured logging.

    Provides a consistent way to pass context information to loggers,
    ensuring all relevant metadata is captured for debugging.
    """

    model_config = ConfigDict(
        extra="allow",  # Allow additional fields for flexibility
        str_strip_whitespace=True,
        validate_assignment=True,
    )

    slug: str | None = Field(
        default=None,
        description="Page key the operation concerns",
    )

    # Operation context
    operation: str | None = Field(
        default=None,
        description="Current operation being performed",
    )
    component: str | None = Field(
        default=None,
        description="Component or module generating the log",
    )
    viewport_width: int | None = Field(
        default=None,
        description="Viewport width of the URL Metric being handled",
    )

    # Error context
    error_code: str | None = Field(
        default=None,
        description="Structured error code",
    )
    error_type: str | None = Field(
        default=None,
        description="Type of error encountered",
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging frameworks."""
        return {k: v for k, v in self.model_dump().items() if v is not None}

    def with_error(self, error: Exception) -> LogContext:
        """Create a new context with error information."""
        return LogContext(
            **{
                **self.model_dump(),
                "error_code": getattr(error, "code", error.__class__.__name__),
                "error_type": type(error).__module__ + "." + type(error).__name__,
            }
        )

    def with_operation(self, operation: str, component: str | None = None) -> LogContext:
        """Create a new context with operation information."""
        return LogContext(
            **{
                **self.model_dump(),
                "operation": operation,
                "component": component or self.component,
            }
        )
