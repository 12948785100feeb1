"""Marshalling exports."""

from .property_marshaller import PropertyMarshaller, build_records, encode_field_value

__all__ = ["PropertyMarshaller", "build_records", "encode_field_value"]
