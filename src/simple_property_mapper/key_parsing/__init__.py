"""Key parsing exports."""

from .key_grammar import (
    KEY_DELIMITER,
    ParsedKey,
    build_key,
    in_namespace,
    parse_key,
    validate_instance_name,
)

__all__ = [
    "KEY_DELIMITER",
    "ParsedKey",
    "build_key",
    "in_namespace",
    "parse_key",
    "validate_instance_name",
]
