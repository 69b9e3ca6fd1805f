"""JSON codec for cache snapshots.

Wire form: ``{"value": 11.25, "date": "27/01/2026", "lastVerifiedAt": "<ISO UTC>"}``.
Numbers are decoded straight into Decimal, so a value never passes through
float on the way back.
"""

import json
from datetime import datetime
from decimal import Decimal

from breconomy.exceptions import PayloadError
from breconomy.models import CacheSnapshot
from breconomy.parsing import format_reference_date, parse_reference_date


def encode_snapshot(snapshot: CacheSnapshot) -> bytes:
    # SGS values carry at most a few decimal places, well inside float's
    # shortest round-trip repr
    return json.dumps(
        {
            "value": float(snapshot.value),
            "date": format_reference_date(snapshot.reference_date),
            "lastVerifiedAt": snapshot.last_verified_at.isoformat(),
        }
    ).encode("utf-8")


def decode_snapshot(raw: bytes) -> CacheSnapshot:
    """Decode a cached snapshot; raises PayloadError when it is malformed."""
    try:
        data = json.loads(raw, parse_float=Decimal, parse_int=Decimal)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise PayloadError(f"cached snapshot is not JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise PayloadError("cached snapshot is not an object")

    value = data.get("value")
    if not isinstance(value, Decimal) or not value.is_finite():
        raise PayloadError(f"cached snapshot has no numeric value: {value!r}")

    try:
        last_verified_at = datetime.fromisoformat(data["lastVerifiedAt"])
    except (KeyError, TypeError, ValueError) as exc:
        raise PayloadError("cached snapshot has no valid lastVerifiedAt") from exc

    return CacheSnapshot(
        value=value,
        reference_date=parse_reference_date(data.get("date")),
        last_verified_at=last_verified_at,
    )
