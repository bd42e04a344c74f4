"""Schema extension registry for additional URL Metric properties.

Extensions register typed properties for the URL Metric root or for each
item of ``elements`` at startup. Registered properties are always optional
and are validated whenever present. Unregistered properties are rejected by
strict parsing and carried through untouched by lenient parsing.
"""

from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConfigurationError
from .models import (
    EXTERNAL_BACKGROUND_IMAGE_PROPERTY,
    Element,
    ExternalBackgroundImage,
    URLMetric,
    core_keys,
)


class SchemaExtensionRegistry:
    """Typed map of extension property name to validator."""

    def __init__(self) -> None:
        self._root: dict[str, TypeAdapter] = {}
        self._element: dict[str, TypeAdapter] = {}

    def register_root_property(self, name: str, annotation: Any) -> None:
        """Register an optional property on the URL Metric root.

        Raises:
            ConfigurationError: If the name is a core key or already registered
        """
        self._register(self._root, core_keys(URLMetric), name, annotation)

    def register_element_property(self, name: str, annotation: Any) -> None:
        """Register an optional property on each item of elements.

        Raises:
            ConfigurationError: If the name is a core key or already registered
        """
        self._register(self._element, core_keys(Element), name, annotation)

    @staticmethod
    def _register(
        target: dict[str, TypeAdapter], reserved: set[str], name: str, annotation: Any
    ) -> None:
        if not name:
            raise ConfigurationError("Extension property name cannot be empty", parameter="name")
        if name in reserved:
            raise ConfigurationError(
                f"Extension property '{name}' cannot override a core property", parameter=name
            )
        if name in target:
            raise ConfigurationError(
                f"Extension property '{name}' is already registered", parameter=name
            )
        target[name] = TypeAdapter(annotation)

    def has_root_property(self, name: str) -> bool:
        return name in self._root

    def has_element_property(self, name: str) -> bool:
        return name in self._element

    @property
    def root_properties(self) -> list[str]:
        return list(self._root)

    @property
    def element_properties(self) -> list[str]:
        return list(self._element)

    def validate_root_property(self, name: str, value: Any) -> Any:
        return self._validate(self._root[name], name, value)

    def validate_element_property(self, name: str, value: Any) -> Any:
        return self._validate(self._element[name], name, value)

    @staticmethod
    def _validate(adapter: TypeAdapter, name: str, value: Any) -> Any:
        try:
            return adapter.validate_python(value)
        except PydanticValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in (name, *first["loc"]))
            raise ValueError(f"{location}: {first['msg']}") from e


def register_external_background_image_extension(registry: SchemaExtensionRegistry) -> None:
    """Register the root property reporting an LCP background image from CSS."""
    registry.register_root_property(EXTERNAL_BACKGROUND_IMAGE_PROPERTY, ExternalBackgroundImage)
