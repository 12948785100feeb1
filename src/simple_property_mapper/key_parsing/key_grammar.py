"""Three-segment ``root.instance.field`` key grammar."""

from __future__ import annotations

from dataclasses import dataclass

from simple_property_mapper.mapping_errors import (
    InvalidInstanceNameError,
    MissingFieldNameError,
    MissingInstanceNameError,
)

KEY_DELIMITER = "."


@dataclass(frozen=True)
class ParsedKey:
    """Instance and field segments of an in-namespace key."""

    instance: str
    field: str


def build_key(root_name: str, instance_name: str, field_key: str) -> str:
    return KEY_DELIMITER.join((root_name, instance_name, field_key))


def in_namespace(key: str, root_name: str) -> bool:
    """Return True when ``key`` starts with ``root_name`` followed by the delimiter."""
    return key.startswith(root_name + KEY_DELIMITER)


def parse_key(key: str, root_name: str, owner: type | None = None) -> ParsedKey:
    """Split an in-namespace key into its instance and field segments.

    Only the first delimiter after the root is significant; the field segment is
    kept verbatim even when it contains further delimiters.

    Raises:
      ValueError: If ``key`` is not in the namespace of ``root_name``.
      MissingInstanceNameError: If no non-empty instance segment can be found.
      MissingFieldNameError: If nothing follows the instance segment.
    """
    if not in_namespace(key, root_name):
        raise ValueError(f"Key {key!r} is outside the {root_name!r} namespace.")
    remainder = key[len(root_name) + len(KEY_DELIMITER) :]
    instance, delimiter, field = remainder.partition(KEY_DELIMITER)
    if not delimiter or not instance:
        raise MissingInstanceNameError(key, owner)
    if not field:
        raise MissingFieldNameError(key, owner)
    return ParsedKey(instance=instance, field=field)


def validate_instance_name(instance_name: object) -> str:
    """Return ``instance_name`` if it can be embedded in a parseable key."""
    if (
        not isinstance(instance_name, str)
        or not instance_name
        or KEY_DELIMITER in instance_name
    ):
        raise InvalidInstanceNameError(instance_name)
    return instance_name
