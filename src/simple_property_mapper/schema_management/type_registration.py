"""Class decorator and field helper for registering dataclasses."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar, overload

from simple_property_mapper.mapping_errors import RegistrationError

from .schema_models import FieldRegistration, TypeRegistration

REGISTRATION_ATTRIBUTE = "__property_registration__"
_FIELD_METADATA_KEY = "simple_property_mapper.property"

C = TypeVar("C", bound=type)


@dataclass(frozen=True)
class _PropertyMarker:
    key: str | None
    converter: type | None


def property_field(
    *,
    key: str | None = None,
    converter: type | None = None,
    default: Any = dataclasses.MISSING,
    default_factory: Any = dataclasses.MISSING,
    **field_kwargs: Any,
) -> Any:
    """Declare a dataclass field that takes part in property mapping.

    Args:
      key: External key override. Blank values fall back to the field name.
      converter: Converter class used instead of the default text conversion.
      default: Passed through to :func:`dataclasses.field`.
      default_factory: Passed through to :func:`dataclasses.field`.
      **field_kwargs: Any other :func:`dataclasses.field` argument.
    """
    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata[_FIELD_METADATA_KEY] = _PropertyMarker(key=key, converter=converter)
    return dataclasses.field(
        default=default, default_factory=default_factory, metadata=metadata, **field_kwargs
    )


def registration_from_dataclass(
    cls: type, *, root: str | None = None, factory: Callable[[], Any] | None = None
) -> TypeRegistration:
    """Build a registration from the ``property_field`` declarations of ``cls``."""
    if not dataclasses.is_dataclass(cls):
        raise RegistrationError(f"{cls.__qualname__} is not a dataclass.", owner=cls)
    fields = []
    for declared in dataclasses.fields(cls):
        marker = declared.metadata.get(_FIELD_METADATA_KEY)
        if marker is None:
            continue
        fields.append(
            FieldRegistration(name=declared.name, key=marker.key, converter=marker.converter)
        )
    return TypeRegistration(type_=cls, fields=tuple(fields), root=root, factory=factory)


@overload
def property_type(cls: C, /) -> C: ...


@overload
def property_type(
    *, root: str | None = None, factory: Callable[[], Any] | None = None
) -> Callable[[C], C]: ...


def property_type(
    cls: C | None = None,
    /,
    *,
    root: str | None = None,
    factory: Callable[[], Any] | None = None,
) -> C | Callable[[C], C]:
    """Attach a property registration to a dataclass.

    Apply it above ``@dataclass`` so the dataclass fields already exist::

        @property_type(root="Customer")
        @dataclass
        class Client:
            name: str = property_field(default="")
    """

    def wrap(target: C) -> C:
        registration = registration_from_dataclass(target, root=root, factory=factory)
        setattr(target, REGISTRATION_ATTRIBUTE, registration)
        return target

    if cls is None:
        return wrap
    return wrap(cls)


def attached_registration(cls: type) -> TypeRegistration | None:
    """Return the registration declared directly on ``cls``, ignoring base classes."""
    registration = vars(cls).get(REGISTRATION_ATTRIBUTE)
    if isinstance(registration, TypeRegistration):
        return registration
    return None
