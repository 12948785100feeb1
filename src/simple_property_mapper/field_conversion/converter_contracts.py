"""Field converter protocol and the per-session converter cache."""

from __future__ import annotations

import logging
import threading
from typing import Any, Protocol, TypeVar

from simple_property_mapper.mapping_errors import RegistrationError

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class FieldConverter(Protocol[T]):
    """Stateless bidirectional transform between a value and its text form.

    Implementations must satisfy ``deserialize(serialize(value)) == value`` for
    every value the application produces, and must be constructible without
    arguments so one instance can be shared per session.
    """

    def serialize(self, value: T) -> str: ...

    def deserialize(self, text: str) -> T: ...


class ConverterCache:
    """Converter instances keyed by converter class, one per class."""

    def __init__(self) -> None:
        self._instances: dict[type, FieldConverter[Any]] = {}
        self._lock = threading.Lock()

    def get(self, converter_type: type) -> FieldConverter[Any]:
        """Return the shared converter instance, creating it on first use."""
        with self._lock:
            converter = self._instances.get(converter_type)
            if converter is None:
                try:
                    converter = converter_type()
                except Exception as exc:  # pylint: disable=broad-exception-caught
                    raise RegistrationError(
                        f"Cannot instantiate converter {converter_type.__qualname__}: {exc}"
                    ) from exc
                _LOGGER.debug("created converter %s", converter_type.__qualname__)
                self._instances[converter_type] = converter
            return converter

    def clear(self) -> None:
        with self._lock:
            self._instances.clear()

    def __len__(self) -> int:
        return len(self._instances)
