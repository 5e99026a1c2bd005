"""Conversion of locale formatted location/date strings into timestamps."""
from __future__ import annotations

from datetime import datetime
import logging
import re
from typing import Optional

LOGGER = logging.getLogger(__name__)

LOCATION_SEPARATOR = " - "
TODAY_MARKER = "Dzisiaj"
REFRESHED_MARKER = "Odświeżono"

# Genitive month names as printed on listing cards ("3 lipca 2020").
POLISH_MONTHS = (
    "stycznia",
    "lutego",
    "marca",
    "kwietnia",
    "maja",
    "czerwca",
    "lipca",
    "sierpnia",
    "września",
    "października",
    "listopada",
    "grudnia",
)
_MONTH_LOOKUP = {name: index for index, name in enumerate(POLISH_MONTHS)}

_TIME_PATTERN = re.compile(r"(\d{2}):(\d{2})")
_DATE_PATTERN = re.compile(r"(\d{1,2}) (\w+) (\d{4})")


def month_index(name: str) -> int:
    """Return the zero based month for a Polish month name.

    Unknown names map to ``0`` (January) instead of failing.
    """

    index = _MONTH_LOOKUP.get(name.lower())
    if index is None:
        LOGGER.debug("Unrecognised month name %r, assuming %s", name, POLISH_MONTHS[0])
        return 0
    return index


def _date_expression(location: str) -> str:
    _, separator, tail = location.rpartition(LOCATION_SEPARATOR)
    return tail if separator else location


def _parse_today(expression: str, reference_now: datetime) -> datetime:
    match = _TIME_PATTERN.search(expression)
    if not match:
        return reference_now
    try:
        return reference_now.replace(
            hour=int(match.group(1)),
            minute=int(match.group(2)),
            second=0,
            microsecond=0,
        )
    except ValueError:
        LOGGER.debug("Invalid time of day in %r", expression)
        return reference_now


def _parse_absolute(expression: str, reference_now: datetime) -> datetime:
    match = _DATE_PATTERN.search(expression)
    if not match:
        return reference_now
    day, month_name, year = match.groups()
    try:
        return datetime(int(year, 10), month_index(month_name) + 1, int(day, 10))
    except ValueError:
        LOGGER.debug("Invalid calendar date in %r", expression)
        return reference_now


def parse_date_from_location(
    location: Optional[str], reference_now: Optional[datetime] = None
) -> datetime:
    """Recover the listing timestamp from a ``"<place> - <date>"`` string.

    Never raises: anything that cannot be understood yields ``reference_now``.
    """

    now = reference_now if reference_now is not None else datetime.now()
    if not isinstance(location, str) or not location:
        return now

    expression = _date_expression(location)
    if TODAY_MARKER in expression:
        return _parse_today(expression, now)
    # Refreshed listings carry the same absolute date format as regular ones.
    return _parse_absolute(expression, now)
