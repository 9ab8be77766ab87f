"""The acorn service: backend, catalog and resolver wired from configuration."""

import asyncio
import logging
from typing import Any, AsyncIterator, Awaitable, Callable

from acorn.core.backends import Backend
from acorn.core.catalog import VersionCatalog
from acorn.core.config import AcornConfig, get_config
from acorn.core.github import GitHubBackend
from acorn.core.resolver import UpdateResolver
from acorn.errors import ConfigError
from acorn.models.version import Asset, Version

logger = logging.getLogger(__name__)

BACKENDS = {
    "github": GitHubBackend,
}

DownloadHook = Callable[[Version, Asset, Any], Awaitable[None]]


def create_backend(config: AcornConfig) -> Backend:
    """Instantiate the backend named in the configuration."""
    backend_class = BACKENDS.get(config.backend)
    if backend_class is None:
        raise ConfigError(f"Unknown backend: {config.backend}")
    if not config.repository:
        raise ConfigError("No repository configured (set ACORN_REPOSITORY or --repo)")

    try:
        return backend_class(config.repository, token=config.token, endpoint=config.endpoint)
    except ValueError as e:
        raise ConfigError(str(e)) from e


class Acorn:
    """Entry point for the HTTP layer and the CLI.

    Use as an async context manager to close the backend afterwards.
    """

    def __init__(self, config: AcornConfig | None = None, backend: Backend | None = None):
        self.config = config or get_config()
        self.backend = backend or create_backend(self.config)
        self.versions = VersionCatalog(self.backend, self.config.tag_filter)
        self.resolver = UpdateResolver(self.versions, self.backend)
        self._download_hooks: list[DownloadHook] = []
        self._init_future: asyncio.Future | None = None

    async def __aenter__(self) -> "Acorn":
        return self

    async def __aexit__(self, *args) -> None:
        await self.backend.aclose()

    async def init(self) -> None:
        """Initialize the backend, exactly once.

        Concurrent callers all wait on the same initialization; a failure
        is reported to every caller and is not retried.
        """
        if self._init_future is None:
            self._init_future = asyncio.ensure_future(self._init())
        await asyncio.shield(self._init_future)

    async def _init(self) -> None:
        await self.backend.init()
        if self.config.pre_fetch:
            versions = await self.versions.list()
            logger.info("Pre-fetched %d versions", len(versions))

    def on_download(self, hook: DownloadHook) -> DownloadHook:
        """Register a coroutine called before every served download."""
        self._download_hooks.append(hook)
        return hook

    async def serve_asset(self, version: Version, asset: Asset, request: Any = None) -> AsyncIterator[bytes]:
        """Stream an asset after running the download hooks."""
        await self.init()
        for hook in self._download_hooks:
            await hook(version, asset, request)

        logger.info("Serving %s from version %s (%s)", asset.filename, version.tag, asset.type)
        async for chunk in self.backend.serve_asset(asset, request):
            yield chunk
