"""Field conversion exports."""

from .builtin_converters import (
    BooleanConverter,
    IsoDateConverter,
    IsoDateTimeConverter,
    enum_converter,
    parse_boolean,
)
from .converter_contracts import ConverterCache, FieldConverter

__all__ = [
    "FieldConverter",
    "ConverterCache",
    "BooleanConverter",
    "IsoDateConverter",
    "IsoDateTimeConverter",
    "enum_converter",
    "parse_boolean",
]
