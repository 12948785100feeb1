"""Record storage exports."""

from .properties_codec import read_records, write_records

__all__ = ["read_records", "write_records"]
