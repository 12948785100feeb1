"""Unmarshalling exports."""

from .property_objects import PropertyObject
from .property_unmarshaller import PropertyUnmarshaller, decode_field_value

__all__ = ["PropertyObject", "PropertyUnmarshaller", "decode_field_value"]
