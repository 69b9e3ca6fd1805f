"""Strict parsers for SGS series payloads.

The SGS API returns JSON arrays of ``{"data": "DD/MM/YYYY", "valor": "<decimal>"}``.
Dates are parsed with the exact DD/MM/YYYY format only and values with an
invariant (non-locale) decimal grammar, for every indicator.
"""

import math
import re
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from breconomy.exceptions import (
    EmptySeriesError,
    InvalidDateError,
    InvalidValueError,
    PayloadError,
)
from breconomy.models import SeriesPoint

DATE_FORMAT = "%d/%m/%Y"

_DATE_RE = re.compile(r"^\d{2}/\d{2}/\d{4}$", re.ASCII)
_DECIMAL_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$", re.ASCII)


def parse_reference_date(raw: str) -> datetime:
    """Parse a DD/MM/YYYY string into a UTC-midnight datetime.

    Raises InvalidDateError for anything that is not exactly two-digit day,
    two-digit month, four-digit year forming a real calendar date
    (29/02 is only accepted in leap years).
    """
    if not isinstance(raw, str) or not _DATE_RE.match(raw):
        raise InvalidDateError(f"invalid reference date: {raw!r}")
    try:
        parsed = datetime.strptime(raw, DATE_FORMAT)
    except ValueError as exc:
        raise InvalidDateError(f"invalid reference date: {raw!r}") from exc
    return parsed.replace(tzinfo=timezone.utc)


def format_reference_date(value: datetime) -> str:
    """Format a reference date back into the source's DD/MM/YYYY form."""
    return value.strftime(DATE_FORMAT)


def parse_decimal(raw: Any) -> Decimal:
    """Parse an invariant-format decimal string ("11.25", "-0.5", "1e-3").

    Thousands separators, decimal commas, non-ASCII digits, NaN and Infinity
    are rejected, as are magnitudes a double cannot hold ("1e400"), since
    the read API serves values as JSON numbers.
    """
    if not isinstance(raw, str):
        raise InvalidValueError(f"invalid value: {raw!r}")
    text = raw.strip()
    if not _DECIMAL_RE.match(text):
        raise InvalidValueError(f"invalid value: {raw!r}")
    try:
        value = Decimal(text)
    except InvalidOperation as exc:
        raise InvalidValueError(f"invalid value: {raw!r}") from exc
    if not math.isfinite(float(value)):
        raise InvalidValueError(f"value out of range: {raw!r}")
    return value


def parse_latest_point(payload: Any) -> SeriesPoint:
    """Validate an SGS payload and return its first point.

    Args:
        payload: Decoded JSON body of a ``dados/ultimos/1`` request.

    Raises:
        EmptySeriesError: payload is null, not a list, or an empty list.
        PayloadError: the first element is not an object.
        InvalidValueError: ``valor`` is missing or not a decimal.
        InvalidDateError: ``data`` is missing or not DD/MM/YYYY.
    """
    if not isinstance(payload, list) or not payload:
        raise EmptySeriesError("series payload is empty or absent")

    first = payload[0]
    if not isinstance(first, dict):
        raise PayloadError(f"unexpected series element: {first!r}")

    value = parse_decimal(first.get("valor"))
    raw_date = first.get("data")
    reference_date = parse_reference_date(raw_date)
    return SeriesPoint(value=value, reference_date=reference_date, raw_date=raw_date)
