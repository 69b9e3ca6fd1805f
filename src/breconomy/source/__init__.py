"""Upstream source layer -- Banco Central SGS API integration via httpx."""

from breconomy.source.bcb_client import BcbClient
from breconomy.source.client import SeriesClient

__all__ = ["BcbClient", "SeriesClient"]
