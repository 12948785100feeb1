"""Error taxonomy shared by marshalling and unmarshalling."""

from __future__ import annotations


def _type_label(owner: type | None) -> str:
    return owner.__qualname__ if owner is not None else "<unknown type>"


class MappingError(Exception):
    """Base class for every mapping failure."""


class RegistrationError(MappingError):
    """Raised when a type registration cannot be turned into a schema."""

    def __init__(self, message: str, *, owner: type | None = None) -> None:
        super().__init__(message)
        self.owner = owner


class UnregisteredTypeError(RegistrationError):
    """Raised when no registration is known for a type."""

    def __init__(self, owner: type) -> None:
        super().__init__(
            f"No property registration found for class {_type_label(owner)}", owner=owner
        )


class DuplicateFieldDefinitionError(RegistrationError):
    """Raised when two fields of one type resolve to the same external key."""

    def __init__(self, key: str, owner: type) -> None:
        super().__init__(
            f"Multiple definitions for property {key} in {_type_label(owner)}", owner=owner
        )
        self.key = key


class KeyFormatError(MappingError):
    """Raised when a key does not follow the root.instance.field grammar."""

    def __init__(self, message: str, *, key: str, owner: type | None) -> None:
        super().__init__(message)
        self.key = key
        self.owner = owner


class MissingInstanceNameError(KeyFormatError):
    def __init__(self, key: str, owner: type | None = None) -> None:
        super().__init__(
            f"Cannot extract instance name from {key} for class {_type_label(owner)}",
            key=key,
            owner=owner,
        )


class MissingFieldNameError(KeyFormatError):
    def __init__(self, key: str, owner: type | None = None) -> None:
        super().__init__(
            f"Cannot extract property name from {key} for class {_type_label(owner)}",
            key=key,
            owner=owner,
        )


class InvalidInstanceNameError(MappingError):
    """Raised when an instance name would produce an unparseable key."""

    def __init__(self, instance_name: object) -> None:
        super().__init__(
            f"Instance name {instance_name!r} must be a non-empty string without '.'"
        )
        self.instance_name = instance_name


class NoSuchFieldError(MappingError):
    """Raised when an in-namespace key names a field the type does not declare."""

    def __init__(self, key: str, owner: type) -> None:
        super().__init__(f"No field found for property {key} in class {_type_label(owner)}")
        self.key = key
        self.owner = owner


class ConversionError(MappingError):
    """Raised when an accessor, factory or converter call fails."""

    def __init__(self, message: str, *, key: str | None, owner: type | None) -> None:
        super().__init__(message)
        self.key = key
        self.owner = owner
