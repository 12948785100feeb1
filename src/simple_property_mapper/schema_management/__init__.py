"""Schema management exports."""

from .schema_models import (
    FieldAccessor,
    FieldRegistration,
    FieldSchema,
    TypeRegistration,
    TypeSchema,
)
from .schema_resolution import SchemaResolver, build_type_schema
from .type_registration import (
    attached_registration,
    property_field,
    property_type,
    registration_from_dataclass,
)

__all__ = [
    "FieldAccessor",
    "FieldRegistration",
    "FieldSchema",
    "TypeRegistration",
    "TypeSchema",
    "SchemaResolver",
    "build_type_schema",
    "attached_registration",
    "property_field",
    "property_type",
    "registration_from_dataclass",
]
