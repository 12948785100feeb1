"""Record set exchange with the ``javaproperties`` text codec."""

from __future__ import annotations

from collections.abc import Mapping
from typing import IO, Any

import javaproperties

from simple_property_mapper.configuration.runtime_settings import RecordFormatSettings


def read_records(source: IO[Any]) -> dict[str, str]:
    """Parse every ``key=value`` record of a text or byte stream.

    Byte streams are decoded as ISO-8859-1 by the codec. A key that occurs more
    than once keeps its last value.
    """
    return dict(javaproperties.load(source))


def write_records(
    records: Mapping[str, str],
    sink: IO[str],
    *,
    comment: str | None,
    record_format: RecordFormatSettings,
) -> None:
    """Write ``records`` plus a leading comment to a text stream in one call."""
    javaproperties.dump(
        records,
        sink,
        comments=comment or None,
        timestamp=record_format.timestamp,
        sort_keys=record_format.sort_keys,
    )
