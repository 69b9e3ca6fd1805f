"""Abstract upstream series client interface.

Refresh jobs and the health check depend only on this interface, keeping
the Banco Central specifics isolated in the concrete implementation.
"""

from abc import ABC, abstractmethod
from typing import Any


class SeriesClient(ABC):
    """Abstract base class for time-series data providers."""

    @abstractmethod
    async def connect(self) -> None:
        """Initialize the underlying HTTP resources."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying HTTP resources."""
        ...

    @abstractmethod
    async def fetch_series(self, path: str) -> Any:
        """GET a series endpoint and return the decoded JSON body.

        Raises UpstreamError on transport failure, timeout or non-2xx status,
        and PayloadError when the body is not JSON.
        """
        ...

    @abstractmethod
    async def probe(self, path: str) -> int:
        """GET ``path`` and return the HTTP status code (for health checks)."""
        ...
