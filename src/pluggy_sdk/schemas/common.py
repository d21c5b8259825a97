"""
Parsing helpers shared by the API schemas.

The API speaks camelCase JSON with ISO-8601 timestamps. These helpers keep the
`from_dict` constructors short and tolerant of missing or unknown values.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import TypeVar

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


def parse_datetime(value: object) -> datetime | None:
    """Parse an ISO-8601 timestamp, accepting a trailing 'Z'.

    Anything that is not a string (null, epoch numbers) yields None.
    """
    if not value:
        return None
    if not isinstance(value, str):
        logger.debug("Non-string timestamp from API: %r", value)
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unparseable timestamp from API: %r", value)
        return None


def parse_enum(enum_cls: type[E], value: object) -> E | None:
    """Map a raw API value onto an enum member.

    Unknown values map to None instead of raising, so a new value added
    server-side does not break deserialization of the whole payload.
    """
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        logger.debug("Unknown %s value from API: %r", enum_cls.__name__, value)
        return None


def parse_float(value: object) -> float | None:
    """Coerce a numeric API field to float, keeping None."""
    if value is None or value == "":
        return None
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        logger.debug("Non-numeric value from API: %r", value)
        return None
