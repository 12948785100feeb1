"""Object to properties marshalling service."""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Iterable, Mapping
from pathlib import Path
from types import TracebackType
from typing import IO, Any

from simple_property_mapper.configuration.runtime_settings import RecordFormatSettings
from simple_property_mapper.key_parsing.key_grammar import build_key, validate_instance_name
from simple_property_mapper.mapping_errors import ConversionError
from simple_property_mapper.record_storage.properties_codec import write_records
from simple_property_mapper.schema_management.schema_models import (
    FieldSchema,
    TypeRegistration,
    TypeSchema,
)
from simple_property_mapper.schema_management.schema_resolution import SchemaResolver

_LOGGER = logging.getLogger(__name__)


class PropertyMarshaller:
    """Writes named instances of registered types as ``root.instance.field`` records."""

    def __init__(
        self,
        sink: IO[str],
        *,
        registrations: Iterable[TypeRegistration] = (),
        record_format: RecordFormatSettings | None = None,
        resolver: SchemaResolver | None = None,
    ) -> None:
        self._sink = sink
        self._owns_sink = False
        self._record_format = record_format or RecordFormatSettings()
        self._resolver = resolver if resolver is not None else SchemaResolver(registrations)
        self._instance_ids = itertools.count()
        self._instance_ids_lock = threading.Lock()

    @classmethod
    def open(
        cls,
        path: Path | str,
        *,
        registrations: Iterable[TypeRegistration] = (),
        record_format: RecordFormatSettings | None = None,
    ) -> PropertyMarshaller:
        """Create a marshaller writing to ``path``; the file is closed with the marshaller."""
        settings = record_format or RecordFormatSettings()
        sink = Path(path).open("w", encoding=settings.encoding, newline="")
        marshaller = cls(sink, registrations=registrations, record_format=settings)
        marshaller._owns_sink = True
        return marshaller

    @property
    def resolver(self) -> SchemaResolver:
        return self._resolver

    def next_instance_name(self) -> str:
        """Return a session-unique generated instance name."""
        with self._instance_ids_lock:
            return str(next(self._instance_ids))

    def marshal(
        self, objects: Mapping[str, Any], comment: str | None = None
    ) -> PropertyMarshaller:
        """Write one record per instance and set field, or nothing for an empty mapping.

        All values must share one registered type; the schema comes from the first.
        Records are built in memory first, so a failure leaves the sink untouched.
        """
        if not objects:
            return self
        schema = self._resolver.resolve(type(next(iter(objects.values()))))
        records = build_records(objects, schema)
        write_records(
            records,
            self._sink,
            comment=self._record_format.comment if comment is None else comment,
            record_format=self._record_format,
        )
        _LOGGER.debug(
            "marshalled %d %s instances into %d records",
            len(objects),
            schema.root_name,
            len(records),
        )
        return self

    def marshal_one(
        self, instance_name: str, obj: Any, comment: str | None = None
    ) -> PropertyMarshaller:
        return self.marshal({instance_name: obj}, comment)

    def marshal_anonymous(
        self, objects: Iterable[Any], comment: str | None = None
    ) -> PropertyMarshaller:
        """Marshal ``objects`` under generated sequential instance names."""
        return self.marshal({self.next_instance_name(): obj for obj in objects}, comment)

    def close(self) -> None:
        self._resolver.clear()
        if self._owns_sink:
            self._sink.close()

    def __enter__(self) -> PropertyMarshaller:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()


def build_records(objects: Mapping[str, Any], schema: TypeSchema) -> dict[str, str]:
    """Return the flat record set of ``objects`` without touching any stream.

    Every object must be an instance of ``schema.type_``. Fields holding ``None``
    produce no record, so unmarshalling leaves the factory default in place.
    """
    records: dict[str, str] = {}
    for instance_name, obj in objects.items():
        validate_instance_name(instance_name)
        if not isinstance(obj, schema.type_):
            raise ConversionError(
                f"Instance {instance_name} is a {type(obj).__qualname__}, "
                f"not a {schema.type_.__qualname__}",
                key=None,
                owner=schema.type_,
            )
        for field in schema.fields:
            key = build_key(schema.root_name, instance_name, field.external_key)
            text = encode_field_value(field, obj, key=key, owner=schema.type_)
            if text is not None:
                records[key] = text
    return records


def encode_field_value(field: FieldSchema, obj: Any, *, key: str, owner: type) -> str | None:
    """Return the text form of one field, or None when the field holds no value."""
    try:
        value = field.accessor.getter(obj)
    except Exception as exc:  # pylint: disable=broad-exception-caught
        raise ConversionError(
            f"Cannot read field {field.name} of {owner.__qualname__} for {key}: {exc}",
            key=key,
            owner=owner,
        ) from exc

    if value is None:
        return None

    if field.converter is not None:
        try:
            return field.converter.serialize(value)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            raise ConversionError(
                f"Converter {type(field.converter).__qualname__} rejected {value!r} for {key}: "
                f"{exc}",
                key=key,
                owner=owner,
            ) from exc
    return str(value)
