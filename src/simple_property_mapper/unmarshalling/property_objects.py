"""Unmarshalling domain entities."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class PropertyObject:
    """An unmarshalled instance tagged with its type and instance name.

    Equality and hashing only consider ``type_`` and ``instance_name``.
    """

    type_: type
    instance_name: str
    obj: Any = field(compare=False)

    @staticmethod
    def from_mapping(objects: Mapping[str, Any]) -> set[PropertyObject]:
        return {
            PropertyObject(type_=type(obj), instance_name=name, obj=obj)
            for name, obj in objects.items()
        }

    @staticmethod
    def to_mapping(objects: Iterable[PropertyObject]) -> dict[str, Any]:
        return {tagged.instance_name: tagged.obj for tagged in objects}
