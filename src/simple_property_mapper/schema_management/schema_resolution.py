"""Schema resolution service."""

from __future__ import annotations

import logging
import threading
import types
import typing
from collections.abc import Iterable
from types import MappingProxyType
from typing import Any

from simple_property_mapper.field_conversion.converter_contracts import ConverterCache
from simple_property_mapper.mapping_errors import (
    DuplicateFieldDefinitionError,
    RegistrationError,
    UnregisteredTypeError,
)

from .schema_models import (
    FieldAccessor,
    FieldRegistration,
    FieldSchema,
    TypeRegistration,
    TypeSchema,
)
from .type_registration import attached_registration

_LOGGER = logging.getLogger(__name__)


class SchemaResolver:
    """Resolves and caches type schemas for one marshaller or unmarshaller session."""

    def __init__(
        self,
        registrations: Iterable[TypeRegistration] = (),
        *,
        converters: ConverterCache | None = None,
    ) -> None:
        self._registrations: dict[type, TypeRegistration] = {}
        for registration in registrations:
            if registration.type_ in self._registrations:
                raise RegistrationError(
                    f"Type {registration.type_.__qualname__} is registered more than once.",
                    owner=registration.type_,
                )
            self._registrations[registration.type_] = registration
        self._converters = converters if converters is not None else ConverterCache()
        self._schemas: dict[type, TypeSchema] = {}
        self._lock = threading.Lock()

    @property
    def registered_types(self) -> tuple[type, ...]:
        return tuple(self._registrations)

    def registration_for(self, type_: type) -> TypeRegistration:
        registration = self._registrations.get(type_)
        if registration is None:
            registration = attached_registration(type_)
        if registration is None:
            raise UnregisteredTypeError(type_)
        return registration

    def resolve(self, type_: type) -> TypeSchema:
        """Return the cached schema of ``type_``, building it on first use."""
        cached = self._schemas.get(type_)
        if cached is not None:
            return cached
        schema = build_type_schema(self.registration_for(type_), self._converters)
        with self._lock:
            stored = self._schemas.setdefault(type_, schema)
        if stored is schema:
            _LOGGER.debug(
                "resolved schema for %s: root=%s keys=%s",
                type_.__qualname__,
                schema.root_name,
                [field.external_key for field in schema.fields],
            )
        return stored

    def clear(self) -> None:
        """Drop every cached schema and converter."""
        with self._lock:
            self._schemas.clear()
        self._converters.clear()


def build_type_schema(registration: TypeRegistration, converters: ConverterCache) -> TypeSchema:
    """Derive the immutable schema of a registered type."""
    owner = registration.type_
    hints = _LazyTypeHints(owner)
    fields: list[FieldSchema] = []
    seen_keys: dict[str, FieldSchema] = {}
    for field_registration in registration.fields:
        field = _resolve_field(field_registration, owner, hints, converters)
        _register_field(field, owner, fields, seen_keys)

    return TypeSchema(
        type_=owner,
        root_name=_non_blank(registration.root) or owner.__name__,
        fields=tuple(fields),
        factory=registration.factory or owner,
        by_key=MappingProxyType(seen_keys),
    )


def _resolve_field(
    registration: FieldRegistration,
    owner: type,
    hints: _LazyTypeHints,
    converters: ConverterCache,
) -> FieldSchema:
    if not registration.name:
        raise RegistrationError("Field registrations require a name.", owner=owner)
    converter = None
    value_type = registration.value_type
    if registration.converter is not None:
        converter = converters.get(registration.converter)
        if value_type is None:
            value_type = object
    elif value_type is None:
        value_type = _unwrap_optional(hints.get(registration.name, str))
    if converter is None and not _is_plain_class(value_type):
        raise RegistrationError(
            f"Field {registration.name} of {owner.__qualname__} has value type "
            f"{value_type!r}, which needs a converter.",
            owner=owner,
        )
    return FieldSchema(
        name=registration.name,
        external_key=_non_blank(registration.key) or registration.name,
        value_type=value_type,
        accessor=registration.accessor or FieldAccessor.for_attribute(registration.name),
        converter=converter,
    )


def _register_field(
    field: FieldSchema,
    owner: type,
    fields: list[FieldSchema],
    seen_keys: dict[str, FieldSchema],
) -> None:
    if field.external_key in seen_keys:
        raise DuplicateFieldDefinitionError(field.external_key, owner)
    seen_keys[field.external_key] = field
    fields.append(field)


class _LazyTypeHints:
    """Evaluates the annotations of a type only when a field needs them."""

    def __init__(self, owner: type) -> None:
        self._owner = owner
        self._hints: dict[str, Any] | None = None

    def get(self, name: str, default: Any) -> Any:
        if self._hints is None:
            try:
                self._hints = typing.get_type_hints(self._owner)
            except (NameError, TypeError) as exc:
                raise RegistrationError(
                    f"Cannot evaluate annotations of {self._owner.__qualname__}: {exc}",
                    owner=self._owner,
                ) from exc
        return self._hints.get(name, default)


def _unwrap_optional(annotation: Any) -> Any:
    if typing.get_origin(annotation) in (typing.Union, types.UnionType):
        members = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(members) == 1:
            return members[0]
    return annotation


def _is_plain_class(value_type: Any) -> bool:
    return isinstance(value_type, type) and typing.get_origin(value_type) is None


def _non_blank(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value
