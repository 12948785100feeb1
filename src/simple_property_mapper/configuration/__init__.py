"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .loader import ConfigurationError, load_configuration
from .runtime_settings import (
    DEFAULT_COMMENT,
    DEFAULT_ENCODING,
    MapperConfiguration,
    RecordFormatSettings,
)

__all__ = [
    "MapperConfiguration",
    "RecordFormatSettings",
    "DEFAULT_COMMENT",
    "DEFAULT_ENCODING",
    "ConfigurationError",
    "load_configuration",
    "DEFAULT_CONFIG_FILENAME",
    "build_placeholder_configuration",
    "write_placeholder_configuration",
]
