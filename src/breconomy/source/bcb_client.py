"""Banco Central do Brasil SGS client implementation via httpx.

Every request is bounded by the configured timeout. The client is shared by
all refresh jobs; httpx.AsyncClient is safe for concurrent use.
"""

import json
from typing import Any

import httpx

from breconomy.config import UpstreamSettings
from breconomy.exceptions import PayloadError, UpstreamError
from breconomy.logging import get_logger
from breconomy.source.client import SeriesClient

logger = get_logger(__name__)


class BcbClient(SeriesClient):
    """Concrete SGS client using a single httpx.AsyncClient."""

    def __init__(
        self,
        settings: UpstreamSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Access the underlying httpx client.

        Raises RuntimeError if not connected.
        """
        if self._client is None:
            raise RuntimeError("BcbClient not connected. Call connect() first.")
        return self._client

    async def connect(self) -> None:
        if self._client is not None:
            return
        self._client = httpx.AsyncClient(
            base_url=self._settings.base_url,
            timeout=self._settings.timeout_seconds,
            headers={"Accept": "application/json"},
            transport=self._transport,
        )
        logger.info(
            "bcb_client_connected",
            base_url=self._settings.base_url,
            timeout_seconds=self._settings.timeout_seconds,
        )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("bcb_client_closed")

    async def fetch_series(self, path: str) -> Any:
        try:
            response = await self.client.get(path)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise UpstreamError(
                f"timeout after {self._settings.timeout_seconds}s fetching {path}"
            ) from exc
        except httpx.HTTPStatusError as exc:
            raise UpstreamError(
                f"upstream returned status {exc.response.status_code} for {path}"
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(f"network error fetching {path}: {exc}") from exc

        try:
            return response.json()
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise PayloadError(f"upstream body for {path} is not valid JSON") from exc

    async def probe(self, path: str) -> int:
        try:
            response = await self.client.get(path)
        except httpx.TimeoutException as exc:
            raise UpstreamError(
                f"timeout after {self._settings.timeout_seconds}s probing {path}"
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(f"network error probing {path}: {exc}") from exc
        return response.status_code
