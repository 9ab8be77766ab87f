"""Update responses for Squirrel.Mac, Squirrel.Windows and electron-updater clients.

URLs handed to clients are built relative to the URL of the incoming request,
so the service keeps working behind any proxy path prefix.
"""

import logging
from dataclasses import dataclass
from urllib.parse import urlencode, urlsplit, urlunsplit

from acorn.core import releases_file, semver
from acorn.core.backends import Backend
from acorn.core.catalog import ANY_CHANNEL, LATEST, VersionCatalog
from acorn.core.notes import merge_notes
from acorn.core.platform import (
    Platform,
    detect_from_user_agent,
    file_extension,
    parse_platform,
    resolve as resolve_asset,
)
from acorn.errors import AssetNotFound, PlatformUndetected, VersionNotFound
from acorn.models.version import Asset, Version

logger = logging.getLogger(__name__)

RELEASES_FILENAME = "RELEASES"
ELECTRON_SERVED_EXTENSIONS = (".exe", ".zip", ".blockmap")


def proxy_url(request_url: str, depth: int, path: str, query: dict | None = None) -> str:
    """Join `path` onto the request URL after dropping its last `depth` path segments.

    proxy_url("https://h/app/update/osx/1.0.0", 3, "/download/x") -> "https://h/app/download/x"
    """
    parts = urlsplit(request_url)
    segments = parts.path.rstrip("/").split("/")
    prefix = "/".join(segments[: max(len(segments) - depth, 1)])
    return urlunsplit(
        (parts.scheme, parts.netloc, prefix + path, urlencode(query) if query else "", "")
    )


@dataclass
class UpdateManifest:
    """Squirrel.Mac style update description."""

    url: str
    name: str
    notes: str
    channel: str
    pub_date: str

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "name": self.name,
            "notes": self.notes,
            "channel": self.channel,
            "pub_date": self.pub_date,
        }


@dataclass
class ReleasesDocument:
    """A regenerated RELEASES file ready to send."""

    content: bytes
    filename: str = RELEASES_FILENAME
    media_type: str = "application/octet-stream"

    @property
    def content_length(self) -> int:
        return len(self.content)


@dataclass
class ElectronUpdate:
    """What to answer to an electron-updater request.

    Exactly one of `data` (JSON manifest), `text` (yml file content) or
    `asset` (file to stream) is set.
    """

    version: Version
    data: dict | None = None
    text: str | None = None
    asset: Asset | None = None


@dataclass
class ReleaseNotes:
    notes: str
    text: str
    pub_date: str

    def to_dict(self) -> dict:
        return {"notes": self.notes, "pub_date": self.pub_date}


class UpdateResolver:
    """Builds per-protocol update responses from catalog queries."""

    def __init__(self, catalog: VersionCatalog, backend: Backend):
        self.catalog = catalog
        self.backend = backend

    async def check_update(
        self,
        platform: str,
        version: str,
        request_url: str,
        channel: str | None = None,
        filetype: str = "zip",
    ) -> UpdateManifest | None:
        """Squirrel.Mac update check, for /update[/channel/<channel>]/<platform>/<version>.

        Returns None when the client already runs the newest version.
        """
        channel = channel or ANY_CHANNEL
        current = version.split("-")[0]
        requested = self._platform(platform)

        versions = await self.catalog.filter(tag=">=" + current, platform=requested, channel=channel)
        if not versions or versions[0].tag == current:
            logger.debug("No update for %s %s (channel %s)", requested, version, channel)
            return None

        latest = versions[0]
        newer = [v for v in versions if semver.gt(v.tag, current)]
        depth = 3 if channel == ANY_CHANNEL else 5
        return UpdateManifest(
            url=proxy_url(
                request_url,
                depth,
                f"/download/channel/{channel}/{requested.value}",
                {"filetype": filetype},
            ),
            name=latest.tag,
            notes=merge_notes(newer, include_tag=False),
            channel=channel,
            pub_date=latest.published_at.isoformat(),
        )

    async def windows_releases(
        self, version: str, request_url: str, channel: str | None = None
    ) -> ReleasesDocument:
        """Squirrel.Windows RELEASES of the newest version, with package URLs sent through the download proxy."""
        channel = channel or ANY_CHANNEL
        current = version.split("-")[0]

        versions = await self.catalog.filter(
            tag=">=" + current, platform=Platform.WINDOWS_32, channel=channel
        )
        if not versions:
            raise VersionNotFound(">=" + current, channel=channel, platform=Platform.WINDOWS_32.value)

        latest = versions[0]
        asset = latest.find_asset(RELEASES_FILENAME)
        if asset is None:
            raise AssetNotFound(latest.tag, filename=RELEASES_FILENAME)

        content = await self.backend.read_asset(asset)
        entries = releases_file.parse(content.decode("utf-8"))

        depth = 4 if channel == ANY_CHANNEL else 6
        for entry in entries:
            # packages without a version in their name belong to the latest version
            tag = entry.semver or latest.version
            entry.filename = proxy_url(request_url, depth, f"/download/{tag}/{entry.filename}")

        return ReleasesDocument(content=releases_file.generate(entries).encode("utf-8"))

    async def electron_updater(
        self,
        channel: str,
        platform: str,
        filename: str,
        request_url: str,
        filetype: str = "zip",
    ) -> ElectronUpdate | None:
        """electron-updater request, for /electron-updater/<channel>/<platform>/<filename>.

        Returns None when there is nothing to serve for the filename.
        """
        channel = channel or ANY_CHANNEL
        requested = self._platform(platform)
        latest = await self.catalog.resolve(platform=requested, channel=channel)

        extension = file_extension(filename)
        if extension == ".json":
            url = proxy_url(
                request_url,
                4,
                f"/download/channel/{channel}/{requested.value}",
                {"filetype": filetype},
            )
            return ElectronUpdate(
                version=latest,
                data={
                    "version": latest.version,
                    "releaseDate": latest.published_at.isoformat(),
                    "url": url,
                },
            )

        asset = latest.find_asset(filename)
        if asset is None:
            return None

        if extension in (".yml", ".yaml"):
            content = await self.backend.read_asset(asset)
            return ElectronUpdate(version=latest, text=content.decode("utf-8"))
        if extension in ELECTRON_SERVED_EXTENSIONS:
            return ElectronUpdate(version=latest, asset=asset)
        return None

    async def download(
        self,
        channel: str | None = None,
        platform: str | None = None,
        tag: str | None = None,
        filename: str | None = None,
        filetype: str | None = None,
        user_agent: str | None = None,
    ) -> tuple[Version, Asset]:
        """Pick the version and asset for a download request."""
        tag = tag or LATEST
        requested = None

        # When serving a specific file, platform is not required
        if not filename:
            requested = parse_platform(platform) if platform else detect_from_user_agent(user_agent)
            if requested is None:
                raise PlatformUndetected(platform or user_agent)

        # A specific version is looked up in every channel
        if tag != LATEST:
            channel = ANY_CHANNEL

        version = await self.catalog.resolve(tag=tag, platform=requested, channel=channel)

        if filename:
            asset = version.find_asset(filename)
        else:
            asset = resolve_asset(version, requested, wanted="." + filetype if filetype else None)

        if asset is None:
            raise AssetNotFound(version.tag, filename=filename, platform=str(requested))
        return version, asset

    async def release_notes(self, version: str | None = None) -> ReleaseNotes:
        """Merged notes of every version since `version` (all versions when omitted)."""
        versions = await self.catalog.filter(
            tag=">=" + version if version else "*", channel=ANY_CHANNEL
        )
        if not versions:
            raise VersionNotFound(version or "*", channel=ANY_CHANNEL)

        return ReleaseNotes(
            notes=merge_notes(versions, include_tag=False),
            text=merge_notes(versions),
            pub_date=versions[0].published_at.isoformat(),
        )

    def _platform(self, value: str) -> Platform:
        requested = parse_platform(value)
        if requested is None:
            raise PlatformUndetected(value)
        return requested
