"""Configuration loader service."""

from __future__ import annotations

import importlib
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from simple_property_mapper.mapping_errors import RegistrationError
from simple_property_mapper.schema_management.schema_models import (
    FieldRegistration,
    TypeRegistration,
)
from simple_property_mapper.schema_management.schema_resolution import SchemaResolver
from simple_property_mapper.schema_management.type_registration import attached_registration

from .runtime_settings import (
    DEFAULT_COMMENT,
    DEFAULT_ENCODING,
    MapperConfiguration,
    RecordFormatSettings,
)


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> MapperConfiguration:
    """Load and validate the configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    record_format = _parse_record_format_section(parsed.get("record_format"))
    registrations = _parse_types_section(parsed.get("types"))
    _resolve_registrations(registrations)

    return MapperConfiguration(
        path=path,
        record_format=record_format,
        registrations=registrations,
    )


def _parse_record_format_section(value: Any) -> RecordFormatSettings:
    if value is None:
        return RecordFormatSettings()
    section = _require_mapping(value, "record_format")
    comment = section.get("comment", DEFAULT_COMMENT)
    if comment is not None and not isinstance(comment, str):
        raise ConfigurationError("record_format.comment must be a string.")
    encoding = _require_non_empty_string(
        section.get("encoding", DEFAULT_ENCODING), "record_format.encoding"
    )
    return RecordFormatSettings(
        comment=comment or None,
        timestamp=_require_bool(section.get("timestamp", True), "record_format.timestamp"),
        sort_keys=_require_bool(section.get("sort_keys", False), "record_format.sort_keys"),
        encoding=encoding,
    )


def _parse_types_section(value: Any) -> tuple[TypeRegistration, ...]:
    if not isinstance(value, Sequence) or isinstance(value, str) or not value:
        raise ConfigurationError("Configuration section 'types' must list at least one type.")

    registrations: list[TypeRegistration] = []
    seen_types: set[type] = set()
    for index, entry in enumerate(value):
        label = f"types[{index}]"
        registration = _parse_type_entry(_require_mapping(entry, label), label)
        if registration.type_ in seen_types:
            raise ConfigurationError(
                f"{label}: type {registration.type_.__qualname__} is configured more than once."
            )
        seen_types.add(registration.type_)
        registrations.append(registration)
    return tuple(registrations)


def _parse_type_entry(section: Mapping[str, Any], label: str) -> TypeRegistration:
    target = _import_object(_require_non_empty_string(section.get("type"), f"{label}.type"))
    if not isinstance(target, type):
        raise ConfigurationError(f"{label}.type must reference a class.")
    root = _optional_string(section.get("root"), f"{label}.root")

    raw_fields = section.get("fields")
    if raw_fields is None:
        declared = attached_registration(target)
        if declared is None:
            raise ConfigurationError(
                f"{label}.fields is required because {target.__qualname__} "
                "has no property_type registration."
            )
        return TypeRegistration(
            type_=target,
            fields=declared.fields,
            root=root or declared.root,
            factory=declared.factory,
        )

    if not isinstance(raw_fields, Sequence) or isinstance(raw_fields, str) or not raw_fields:
        raise ConfigurationError(f"{label}.fields must list at least one field.")
    fields = tuple(
        _parse_field_entry(
            _require_mapping(raw_field, f"{label}.fields[{field_index}]"),
            f"{label}.fields[{field_index}]",
        )
        for field_index, raw_field in enumerate(raw_fields)
    )
    return TypeRegistration(type_=target, fields=fields, root=root)


def _parse_field_entry(section: Mapping[str, Any], label: str) -> FieldRegistration:
    name = _require_non_empty_string(section.get("name"), f"{label}.name")
    key = _optional_string(section.get("key"), f"{label}.key")
    converter_path = _optional_string(section.get("converter"), f"{label}.converter")
    converter = None
    if converter_path is not None:
        converter = _import_object(converter_path)
        if not isinstance(converter, type):
            raise ConfigurationError(f"{label}.converter must reference a class.")
    return FieldRegistration(name=name, key=key, converter=converter)


def _import_object(reference: str) -> Any:
    module_name, separator, attribute_path = reference.partition(":")
    if not separator or not module_name or not attribute_path:
        raise ConfigurationError(
            f"Import reference '{reference}' must have the form 'package.module:Name'."
        )
    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError(f"Cannot import module '{module_name}': {exc}") from exc
    for attribute in attribute_path.split("."):
        try:
            target = getattr(target, attribute)
        except AttributeError as exc:
            raise ConfigurationError(
                f"Module '{module_name}' has no attribute '{attribute_path}'."
            ) from exc
    return target


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' is required.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None


def _require_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be true or false.")
    return value


def _resolve_registrations(registrations: tuple[TypeRegistration, ...]) -> None:
    resolver = SchemaResolver(registrations)
    try:
        for registration in registrations:
            resolver.resolve(registration.type_)
    except RegistrationError as exc:
        raise ConfigurationError(str(exc)) from exc
