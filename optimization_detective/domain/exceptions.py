"""Domain-specific exceptions for URL Metric collection and grouping."""


class URLMetricsError(Exception):
    """Base exception for all Optimization Detective errors.

    ``code`` is a stable machine-readable identifier and ``http_status`` is the
    status an outer REST layer should answer with.
    """

    code = "url_metrics_error"
    http_status = 500

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(URLMetricsError):
    """Malformed URL Metric data rejected at the schema boundary."""

    code = "rest_invalid_param"
    http_status = 400

    def __init__(self, message: str, errors: list[dict] | None = None):
        super().__init__(message)
        self.errors = errors or []
        if errors:
            self.details["errors"] = errors


class RequiredPropertyError(ValidationError):
    """Raised when attempting to unset a property required by the schema."""

    def __init__(self, key: str, owner: str):
        super().__init__(f"The {key} key is required for {owner}.")
        self.key = key
        self.details["key"] = key


class InvalidArgumentError(URLMetricsError):
    """Invalid argument passed to a query or mutation."""

    code = "invalid_argument"
    http_status = 400


class OutOfRangeError(InvalidArgumentError):
    """Viewport width does not belong to the targeted group."""

    code = "invalid_viewport_width"

    def __init__(self, viewport_width: int, minimum_width: int, maximum_width: int):
        super().__init__(
            f"URL Metric viewport width {viewport_width} is not within the group range "
            f"[{minimum_width}, {maximum_width}]",
            details={
                "viewport_width": viewport_width,
                "minimum_viewport_width": minimum_width,
                "maximum_viewport_width": maximum_width,
            },
        )
        self.viewport_width = viewport_width


class GroupCompleteError(URLMetricsError):
    """Raised when a URL Metric targets a group which is already complete."""

    code = "url_metric_group_complete"
    http_status = 403

    def __init__(self, minimum_width: int, maximum_width: int):
        super().__init__(
            "The URL Metric group for the provided viewport is already complete.",
            details={
                "minimum_viewport_width": minimum_width,
                "maximum_viewport_width": maximum_width,
            },
        )


CapacityError = GroupCompleteError


class ConfigurationError(URLMetricsError):
    """Invalid construction parameters; not recoverable per call."""

    code = "invalid_configuration"

    def __init__(self, message: str, parameter: str | None = None):
        super().__init__(message)
        self.parameter = parameter
        if parameter:
            self.details["parameter"] = parameter


class StorageError(URLMetricsError):
    """Base exception for URL Metric store operations."""

    code = "url_metric_storage_error"

    def __init__(self, message: str, slug: str | None = None, operation: str | None = None):
        super().__init__(message)
        self.slug = slug
        self.operation = operation
        if slug:
            self.details["slug"] = slug
        if operation:
            self.details["operation"] = operation
