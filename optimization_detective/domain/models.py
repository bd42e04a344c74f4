"""Domain models for URL Metrics using Pydantic for validation.

A URL Metric is one real-user observation of a page load at one viewport
size. It is validated once at the boundary and then treated as immutable,
except for removing optional extension properties via ``unset()``.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    StrictBool,
    ValidationInfo,
    model_validator,
)

from .exceptions import RequiredPropertyError

if TYPE_CHECKING:
    from .group import URLMetricGroup

XPATH_PATTERN = r"^(/\*\[\d+\]\[self::.+?\])+$"
ETAG_PATTERN = r"^[0-9a-f]{32}$"
UUID_PATTERN = r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$"

EXTERNAL_BACKGROUND_IMAGE_PROPERTY = "lcpElementExternalBackgroundImage"


def _context_value(info: ValidationInfo, key: str, default: Any = None) -> Any:
    """Read a value from the validation context, if any was supplied."""
    if not info.context:
        return default
    return info.context.get(key, default)


def core_keys(model: type[BaseModel]) -> set[str]:
    """Get both the attribute names and the wire aliases of a model's fields."""
    keys = set(model.model_fields)
    keys.update(field.alias for field in model.model_fields.values() if field.alias)
    return keys


class DOMRect(BaseModel):
    """Geometry reported by the browser for an element (DOMRectReadOnly)."""

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    width: float = Field(..., ge=0)
    height: float = Field(..., ge=0)
    x: float
    y: float
    top: float
    right: float
    bottom: float
    left: float


class Viewport(BaseModel):
    """Viewport dimensions at observation time."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    width: int = Field(..., ge=1, description="Viewport width in CSS pixels")
    height: int = Field(..., ge=1, description="Viewport height in CSS pixels")

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


class ExternalBackgroundImage(BaseModel):
    """LCP background image applied from a stylesheet rather than a DOM attribute.

    The element is identified by its tag, id and class since it has no XPath
    in the observed elements.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    url: str = Field(..., max_length=500, pattern=r"^https?://")
    tag: str = Field(..., max_length=100, pattern=r"^[a-zA-Z0-9\-]+$")
    id: str | None = Field(default=None, max_length=100)
    class_: str | None = Field(default=None, max_length=500, alias="class")


class Element(BaseModel):
    """Observation of a single element within a URL Metric."""

    model_config = ConfigDict(
        extra="allow",  # Extension properties, checked against the registry
        frozen=True,
        populate_by_name=True,
        allow_inf_nan=False,
    )

    xpath: str = Field(..., min_length=1, pattern=XPATH_PATTERN)
    is_lcp: StrictBool = Field(..., alias="isLCP")
    is_lcp_candidate: StrictBool = Field(..., alias="isLCPCandidate")
    intersection_ratio: float = Field(..., ge=0, le=1, alias="intersectionRatio")
    intersection_rect: DOMRect = Field(..., alias="intersectionRect")
    bounding_client_rect: DOMRect = Field(..., alias="boundingClientRect")

    _url_metric: URLMetric | None = PrivateAttr(default=None)

    @model_validator(mode="after")
    def validate_extension_properties(self, info: ValidationInfo) -> Element:
        """Validate properties which are not part of the core element schema."""
        registry = _context_value(info, "extensions")
        strict = _context_value(info, "strict", False)
        extra = self.__pydantic_extra__ or {}
        for key in list(extra):
            if registry is not None and registry.has_element_property(key):
                extra[key] = registry.validate_element_property(key, extra[key])
            elif strict:
                raise ValueError(f"Unknown property '{key}' for an item of elements")
        return self

    @property
    def url_metric(self) -> URLMetric | None:
        """The URL Metric this element was observed in."""
        return self._url_metric

    @property
    def group(self) -> URLMetricGroup | None:
        """The group of the owning URL Metric, if it has been grouped."""
        return self._url_metric.group if self._url_metric is not None else None

    def get(self, key: str) -> Any:
        """Get a property by wire name, attribute name, or extension name."""
        for name, field in type(self).model_fields.items():
            if key in (name, field.alias):
                return getattr(self, name)
        return (self.__pydantic_extra__ or {}).get(key)

    def unset(self, key: str) -> None:
        """Remove an optional property and invalidate cached group results.

        Raises:
            RequiredPropertyError: If the property is required by the schema
        """
        if key in core_keys(type(self)):
            raise RequiredPropertyError(key, "an item of elements in a URL Metric")
        extra = self.__pydantic_extra__ or {}
        if key not in extra:
            return
        del extra[key]
        group = self.group
        if group is not None:
            group.clear_cache()

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the wire (camelCase) keys."""
        return self.model_dump(by_alias=True, mode="json")


class URLMetric(BaseModel):
    """One validated observation of a page load at one viewport size."""

    model_config = ConfigDict(
        extra="allow",
        frozen=True,
        populate_by_name=True,
        allow_inf_nan=False,
        json_schema_extra={
            "example": {
                "uuid": "0f3d0e52-6a43-4b9f-9d39-0e1d4e63c2a1",
                "url": "https://example.com/",
                "etag": "d41d8cd98f00b204e9800998ecf8427e",
                "viewport": {"width": 480, "height": 800},
                "timestamp": 1735689600.0,
                "elements": [],
            }
        },
    )

    uuid: str = Field(default_factory=lambda: str(uuid.uuid4()), pattern=UUID_PATTERN)
    url: str = Field(..., min_length=1, max_length=2048, pattern=r"^https?://")
    etag: str | None = Field(default=None, pattern=ETAG_PATTERN)
    viewport: Viewport
    timestamp: float = Field(..., ge=0, description="Seconds since epoch, set by the server")
    elements: list[Element] = Field(default_factory=list)

    _group: URLMetricGroup | None = PrivateAttr(default=None)

    def model_post_init(self, __context: Any) -> None:
        for element in self.elements:
            element._url_metric = self

    @model_validator(mode="after")
    def validate_url_metric(self, info: ValidationInfo) -> URLMetric:
        """Check cross-field invariants and registered root extension properties."""
        lcp_count = sum(1 for element in self.elements if element.is_lcp)
        if lcp_count > 1:
            raise ValueError(f"At most one element may be the LCP element, but saw {lcp_count}")

        bounds = _context_value(info, "viewport_aspect_ratio_bounds")
        if bounds is not None:
            minimum, maximum = bounds
            ratio = self.viewport.aspect_ratio
            if not minimum <= ratio <= maximum:
                raise ValueError(
                    f"Viewport aspect ratio ({ratio}) is not in the accepted range of "
                    f"{minimum} to {maximum}"
                )

        registry = _context_value(info, "extensions")
        strict = _context_value(info, "strict", False)
        extra = self.__pydantic_extra__ or {}
        for key in list(extra):
            if registry is not None and registry.has_root_property(key):
                extra[key] = registry.validate_root_property(key, extra[key])
            elif strict:
                raise ValueError(f"Unknown property '{key}' for a URL Metric")
        return self

    @property
    def viewport_width(self) -> int:
        return self.viewport.width

    @property
    def group(self) -> URLMetricGroup | None:
        """The group this URL Metric has been added to."""
        return self._group

    def set_group(self, group: URLMetricGroup) -> None:
        """Associate the URL Metric with the group that holds it.

        Raises:
            OutOfRangeError: If the viewport width is not in the group's range
        """
        group.check_viewport_width(self.viewport_width)
        self._group = group

    def get(self, key: str) -> Any:
        """Get a property by wire name, attribute name, or extension name."""
        if key in type(self).model_fields:
            return getattr(self, key)
        return (self.__pydantic_extra__ or {}).get(key)

    def unset(self, key: str) -> None:
        """Remove an optional property and invalidate cached group results.

        Raises:
            RequiredPropertyError: If the property is required by the schema
        """
        extra = self.__pydantic_extra__ or {}
        if key == "etag":
            # Fields are frozen, so bypass the model's __setattr__.
            object.__setattr__(self, "etag", None)
        elif key in core_keys(type(self)):
            raise RequiredPropertyError(key, "a URL Metric")
        elif key in extra:
            del extra[key]
        else:
            return
        if self._group is not None:
            self._group.clear_cache()

    def get_lcp_element(self) -> Element | None:
        """Get the element reported as LCP, if any."""
        for element in self.elements:
            if element.is_lcp:
                return element
        return None

    def get_element(self, xpath: str) -> Element | None:
        for element in self.elements:
            if element.xpath == xpath:
                return element
        return None

    def get_external_background_image(self) -> ExternalBackgroundImage | None:
        """Get the extension-supplied LCP background image, if well-formed."""
        value = self.get(EXTERNAL_BACKGROUND_IMAGE_PROPERTY)
        if isinstance(value, ExternalBackgroundImage):
            return value
        if isinstance(value, dict):
            # Records loaded without the extension registered carry the raw value.
            try:
                return ExternalBackgroundImage.model_validate(value)
            except ValueError:
                return None
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the wire (camelCase) keys, omitting a missing ETag."""
        data = self.model_dump(by_alias=True, mode="json")
        if data.get("etag") is None:
            data.pop("etag", None)
        return data


class LCPElement(BaseModel):
    """Consensus LCP element of a group.

    Either ``xpath`` is set (an observed element), or the LCP is a background
    image applied from an external stylesheet and ``xpath`` is None.
    """

    model_config = ConfigDict(frozen=True)

    xpath: str | None = None
    external_background_image: ExternalBackgroundImage | None = None


class URLMetricGroupSnapshot(BaseModel):
    """Serializable summary of one viewport group."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    minimum_viewport_width: int = Field(..., ge=0)
    maximum_viewport_width: int | None = Field(
        ..., description="Inclusive upper bound; None when the group is unbounded"
    )
    sample_size: int = Field(..., gt=0)
    freshness_ttl: float = Field(..., ge=0)
    lcp_element: str | None = Field(default=None, description="XPath of the LCP element")
    complete: bool
    record_count: int = Field(..., ge=0)
    url_metrics: list[dict[str, Any]] | None = None

    def to_dict(self) -> dict[str, Any]:
        data = self.model_dump()
        if self.url_metrics is None:
            del data["url_metrics"]
        return data
