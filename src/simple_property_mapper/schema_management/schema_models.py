"""Schema management entities."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from simple_property_mapper.field_conversion.converter_contracts import FieldConverter


@dataclass(frozen=True)
class FieldAccessor:
    """Explicit getter/setter pair for one field of an instance."""

    getter: Callable[[Any], Any]
    setter: Callable[[Any, Any], None]

    @classmethod
    def for_attribute(cls, attribute: str) -> FieldAccessor:
        """Read and write the named instance attribute."""

        def _get(instance: Any) -> Any:
            return getattr(instance, attribute)

        def _set(instance: Any, value: Any) -> None:
            setattr(instance, attribute, value)

        return cls(getter=_get, setter=_set)


@dataclass(frozen=True)
class FieldRegistration:
    """Caller-supplied participation settings for one field."""

    name: str
    key: str | None = None
    converter: type | None = None
    value_type: Any = None
    accessor: FieldAccessor | None = None


@dataclass(frozen=True)
class TypeRegistration:
    """Caller-supplied participation settings for one type."""

    type_: type
    fields: tuple[FieldRegistration, ...]
    root: str | None = None
    factory: Callable[[], Any] | None = None


@dataclass(frozen=True)
class FieldSchema:
    """Resolved mapping of one external key to an accessor and converter."""

    name: str
    external_key: str
    value_type: Any
    accessor: FieldAccessor
    converter: FieldConverter[Any] | None


@dataclass(frozen=True)
class TypeSchema:
    """Resolved root name and field definitions of a registered type."""

    type_: type
    root_name: str
    fields: tuple[FieldSchema, ...]
    factory: Callable[[], Any]
    by_key: Mapping[str, FieldSchema] = field(repr=False, compare=False)

    def field_for(self, external_key: str) -> FieldSchema | None:
        return self.by_key.get(external_key)
