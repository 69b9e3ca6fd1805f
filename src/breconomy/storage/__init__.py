"""Indicator persistence layer -- SQLite database management and typed store."""

from breconomy.storage.database import IndicatorDatabase
from breconomy.storage.store import IndicatorStore

__all__ = ["IndicatorDatabase", "IndicatorStore"]
