"""Ready-made converters for common value types."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any

_TRUE_TEXT = "true"
_FALSE_TEXT = "false"


class BooleanConverter:
    """Booleans as lower-case ``true``/``false`` text."""

    def serialize(self, value: bool) -> str:
        return _TRUE_TEXT if value else _FALSE_TEXT

    def deserialize(self, text: str) -> bool:
        return parse_boolean(text)


class IsoDateConverter:
    """Dates in ISO 8601 ``YYYY-MM-DD`` form."""

    def serialize(self, value: date) -> str:
        return value.isoformat()

    def deserialize(self, text: str) -> date:
        return date.fromisoformat(text.strip())


class IsoDateTimeConverter:
    """Datetimes in ISO 8601 form, keeping any UTC offset."""

    def serialize(self, value: datetime) -> str:
        return value.isoformat()

    def deserialize(self, text: str) -> datetime:
        return datetime.fromisoformat(text.strip())


def parse_boolean(text: str) -> bool:
    """Parse ``true``/``false`` in any letter case."""
    normalized = text.strip().lower()
    if normalized == _TRUE_TEXT:
        return True
    if normalized == _FALSE_TEXT:
        return False
    raise ValueError(f"Expected 'true' or 'false', got {text!r}")


def enum_converter(enum_type: type[Enum]) -> type:
    """Build a converter class storing members of ``enum_type`` by name.

    The returned class takes no constructor arguments, so it can be attached to
    a field like any other converter class.
    """

    def serialize(self: Any, value: Enum) -> str:
        return value.name

    def deserialize(self: Any, text: str) -> Enum:
        name = text.strip()
        try:
            return enum_type[name]
        except KeyError as exc:
            raise ValueError(f"{name!r} is not a member of {enum_type.__qualname__}") from exc

    return type(
        f"{enum_type.__name__}Converter",
        (),
        {"serialize": serialize, "deserialize": deserialize, "enum_type": enum_type},
    )
