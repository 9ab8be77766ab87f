"""Backend contract: where raw releases and asset bytes come from."""

from abc import ABC, abstractmethod
from typing import Any, AsyncIterator

from acorn.models.release import RawRelease
from acorn.models.version import Asset


class Backend(ABC):
    """Source of releases for the catalog.

    Implementations are asynchronous; none of them is expected to cache
    release lists, the catalog fetches on every listing.
    """

    async def init(self) -> None:
        """One-time setup, run by the service before first use."""
        return None

    @abstractmethod
    async def releases(self) -> list[RawRelease]:
        """Fetch every release, newest or oldest first."""

    @abstractmethod
    async def read_asset(self, asset: Asset) -> bytes:
        """Read the full content of an asset."""

    async def serve_asset(self, asset: Asset, request: Any = None) -> AsyncIterator[bytes]:
        """Stream an asset's bytes to a response.

        The default reads the whole asset; backends able to stream override it.
        """
        yield await self.read_asset(asset)

    async def aclose(self) -> None:
        return None
