"""GitHub Releases backend."""

import logging
import re
from typing import Any, AsyncIterator

import httpx

from acorn.core.backends import Backend
from acorn.errors import AcornError
from acorn.models.release import RawRelease
from acorn.models.version import Asset

logger = logging.getLogger(__name__)

GITHUB_API_BASE = "https://api.github.com"
RELEASES_PER_PAGE = 100


class GitHubError(AcornError):
    """Error from GitHub API."""

    pass


def parse_repo_spec(spec: str) -> tuple[str, str]:
    """Parse a repo spec into (owner, repo).

    Accepts:
    - owner/repo
    - https://github.com/owner/repo
    - github.com/owner/repo
    """
    # Handle full URLs
    url_pattern = r"(?:https?://)?github\.com/([^/]+)/([^/]+?)(?:\.git)?/?$"
    match = re.match(url_pattern, spec)
    if match:
        return match.group(1), match.group(2)

    # Handle owner/repo format
    if "/" in spec:
        parts = spec.split("/")
        if len(parts) == 2 and all(parts):
            return parts[0], parts[1]

    raise ValueError(f"Invalid repo spec: {spec}. Use 'owner/repo' or GitHub URL.")


class GitHubBackend(Backend):
    """Releases and assets of one GitHub repository."""

    def __init__(
        self,
        repository: str,
        token: str | None = None,
        endpoint: str = GITHUB_API_BASE,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.owner, self.repo = parse_repo_spec(repository)

        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self.client = httpx.AsyncClient(
            base_url=endpoint,
            headers=headers,
            timeout=30.0,
            follow_redirects=True,
            transport=transport,
        )

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    def _check(self, response: httpx.Response, resource: str | None = None) -> None:
        if response.status_code == 404:
            raise GitHubError(f"{resource or 'Repository ' + self.full_name} not found")
        if response.status_code == 403:
            raise GitHubError("GitHub API rate limit exceeded")
        response.raise_for_status()

    async def init(self) -> None:
        """Check that the repository exists and is reachable."""
        response = await self.client.get(f"/repos/{self.full_name}")
        self._check(response)
        logger.info("Using releases of %s", self.full_name)

    async def releases(self) -> list[RawRelease]:
        """Get every release of the repository, following pagination."""
        releases = []
        url = f"/repos/{self.full_name}/releases"
        params: dict | None = {"per_page": RELEASES_PER_PAGE}

        while url:
            response = await self.client.get(url, params=params)
            self._check(response)
            releases.extend(RawRelease.from_api_response(data) for data in response.json())

            # The next link already carries the query string
            url = response.links.get("next", {}).get("url")
            params = None

        logger.debug("Fetched %d releases from %s", len(releases), self.full_name)
        return releases

    def _asset_request(self, asset: Asset) -> tuple[str, dict]:
        if asset.raw.url:
            return asset.raw.url, {"Accept": "application/octet-stream"}
        return asset.raw.download_url, {}

    async def read_asset(self, asset: Asset) -> bytes:
        """Download an asset's content."""
        url, headers = self._asset_request(asset)
        response = await self.client.get(url, headers=headers)
        self._check(response, f"Asset {asset.filename}")
        return response.content

    async def serve_asset(self, asset: Asset, request: Any = None) -> AsyncIterator[bytes]:
        """Stream an asset's content in chunks."""
        url, headers = self._asset_request(asset)
        async with self.client.stream("GET", url, headers=headers) as response:
            self._check(response, f"Asset {asset.filename}")
            async for chunk in response.aiter_bytes(chunk_size=8192):
                yield chunk

    async def aclose(self) -> None:
        await self.client.aclose()
