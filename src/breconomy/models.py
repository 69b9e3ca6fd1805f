"""Shared data models for the indicators service.

CRITICAL: indicator values use Decimal. Never use float for a stored reading;
conversion to a JSON number happens only at the HTTP boundary.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum


class DataSource(str, Enum):
    """Where a served reading came from."""

    CACHE = "cache"
    DATABASE = "database"


@dataclass
class IndicatorRecord:
    """Latest persisted reading of one indicator (one row per name)."""

    id: str
    name: str
    value: Decimal
    reference_date: datetime  # UTC midnight of the date reported upstream
    last_updated: datetime  # UTC time of the last successful write


@dataclass(frozen=True)
class SeriesPoint:
    """A single validated point of an SGS series."""

    value: Decimal
    reference_date: datetime
    raw_date: str  # DD/MM/YYYY as sent by the source


@dataclass(frozen=True)
class CacheSnapshot:
    """Serialized view of an indicator kept in the result cache."""

    value: Decimal
    reference_date: datetime
    last_verified_at: datetime


@dataclass(frozen=True)
class IndicatorReading:
    """Result of the read path for one indicator."""

    value: Decimal
    reference_date: datetime
    source: DataSource
