"""Properties to object unmarshalling service."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from types import TracebackType
from typing import IO, Any, TypeVar

from simple_property_mapper.configuration.runtime_settings import RecordFormatSettings
from simple_property_mapper.field_conversion.builtin_converters import parse_boolean
from simple_property_mapper.key_parsing.key_grammar import in_namespace, parse_key
from simple_property_mapper.mapping_errors import ConversionError, NoSuchFieldError
from simple_property_mapper.record_storage.properties_codec import read_records
from simple_property_mapper.schema_management.schema_models import (
    FieldSchema,
    TypeRegistration,
    TypeSchema,
)
from simple_property_mapper.schema_management.schema_resolution import SchemaResolver

from .property_objects import PropertyObject

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class PropertyUnmarshaller:
    """Rebuilds instances of registered types from a flat record set."""

    def __init__(
        self,
        records: Mapping[str, str],
        *,
        registrations: Iterable[TypeRegistration] = (),
        resolver: SchemaResolver | None = None,
    ) -> None:
        self._records = dict(records)
        self._resolver = resolver if resolver is not None else SchemaResolver(registrations)

    @classmethod
    def from_stream(
        cls,
        source: IO[Any],
        *,
        registrations: Iterable[TypeRegistration] = (),
    ) -> PropertyUnmarshaller:
        return cls(read_records(source), registrations=registrations)

    @classmethod
    def open(
        cls,
        path: Path | str,
        *,
        registrations: Iterable[TypeRegistration] = (),
        record_format: RecordFormatSettings | None = None,
    ) -> PropertyUnmarshaller:
        settings = record_format or RecordFormatSettings()
        with Path(path).open(encoding=settings.encoding) as source:
            return cls.from_stream(source, registrations=registrations)

    @property
    def resolver(self) -> SchemaResolver:
        return self._resolver

    @property
    def records(self) -> Mapping[str, str]:
        return self._records

    def unmarshal(self, type_: type[T]) -> dict[str, T]:
        """Return every instance of ``type_`` found in the records, keyed by instance name.

        Raises:
          MissingInstanceNameError: If an in-namespace key has no instance segment.
          MissingFieldNameError: If an in-namespace key has no field segment.
          NoSuchFieldError: If a key names a field ``type_`` does not declare.
          ConversionError: If an instance cannot be created or a value cannot be decoded.
        """
        schema = self._resolver.resolve(type_)
        instances: dict[str, T] = {}
        for key, text in self._records.items():
            if not in_namespace(key, schema.root_name):
                continue
            parsed = parse_key(key, schema.root_name, owner=type_)
            field = schema.field_for(parsed.field)
            if field is None:
                raise NoSuchFieldError(key, type_)
            instance = instances.get(parsed.instance)
            if instance is None:
                instance = _create_instance(schema, key)
                instances[parsed.instance] = instance
            _assign_field_value(field, instance, text, key=key, owner=type_)

        _LOGGER.debug("unmarshalled %d %s instances", len(instances), schema.root_name)
        return instances

    def unmarshal_all(self, *types: type) -> set[PropertyObject]:
        """Unmarshal each type in turn; the first failing type aborts the call."""
        tagged: set[PropertyObject] = set()
        for type_ in types:
            for instance_name, obj in self.unmarshal(type_).items():
                tagged.add(PropertyObject(type_=type_, instance_name=instance_name, obj=obj))
        return tagged

    def close(self) -> None:
        self._resolver.clear()

    def __enter__(self) -> PropertyUnmarshaller:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()


def decode_field_value(field: FieldSchema, text: str, *, key: str, owner: type) -> Any:
    try:
        if field.converter is not None:
            return field.converter.deserialize(text)
        if field.value_type is str:
            return text
        if field.value_type is bool:
            return parse_boolean(text)
        return field.value_type(text)
    except Exception as exc:  # pylint: disable=broad-exception-caught
        raise ConversionError(
            f"Cannot convert {text!r} for {key} of {owner.__qualname__}: {exc}",
            key=key,
            owner=owner,
        ) from exc


def _assign_field_value(
    field: FieldSchema, instance: Any, text: str, *, key: str, owner: type
) -> None:
    value = decode_field_value(field, text, key=key, owner=owner)
    try:
        field.accessor.setter(instance, value)
    except Exception as exc:  # pylint: disable=broad-exception-caught
        raise ConversionError(
            f"Cannot set field {field.name} of {owner.__qualname__} for {key}: {exc}",
            key=key,
            owner=owner,
        ) from exc


def _create_instance(schema: TypeSchema, key: str) -> Any:
    try:
        return schema.factory()
    except Exception as exc:  # pylint: disable=broad-exception-caught
        raise ConversionError(
            f"Cannot create an instance of {schema.type_.__qualname__} for {key}: {exc}",
            key=key,
            owner=schema.type_,
        ) from exc
