"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from simple_property_mapper.schema_management.schema_models import TypeRegistration

DEFAULT_COMMENT = "Properties serialized by simple-property-mapper"
DEFAULT_ENCODING = "iso-8859-1"


@dataclass(frozen=True)
class RecordFormatSettings:
    """How record sets are written to and read from properties files."""

    comment: str | None = DEFAULT_COMMENT
    timestamp: bool = True
    sort_keys: bool = False
    encoding: str = DEFAULT_ENCODING


@dataclass(frozen=True)
class MapperConfiguration:
    """Top-level configuration aggregate."""

    path: Path
    record_format: RecordFormatSettings
    registrations: tuple[TypeRegistration, ...]
