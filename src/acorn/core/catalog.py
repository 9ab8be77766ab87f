"""Version catalog built from backend releases."""

from __future__ import annotations

import logging
from datetime import timezone

from acorn.core import semver
from acorn.core.backends import Backend
from acorn.core.platform import Platform, detect, parse_platform, satisfies
from acorn.core.tags import STABLE_CHANNEL, TagFilter, extract_channel, normalize_tag
from acorn.errors import PlatformUndetected, VersionNotFound
from acorn.models.release import RawRelease
from acorn.models.version import EPOCH, Asset, ChannelSummary, Version

logger = logging.getLogger(__name__)

LATEST = "latest"
ANY_CHANNEL = "*"


def normalize_version(release: RawRelease, tag_filter: TagFilter | None = None) -> Version | None:
    """Normalize a release to a version.

    Drafts, and releases whose tag the filter does not match, give None.
    Assets with no recognizable platform are left out.
    """
    if release.draft:
        return None

    if tag_filter is not None and tag_filter.extract(release.tag_name) is None:
        return None

    download_count = 0
    assets = []
    for raw in release.assets:
        platform = detect(raw.name)
        if platform is None:
            continue

        download_count += raw.download_count
        assets.append(
            Asset(
                id=raw.id,
                type=platform,
                filename=raw.name,
                size=raw.size,
                content_type=raw.content_type,
                raw=raw,
            )
        )

    published_at = release.published_at or EPOCH
    if published_at.tzinfo is None:
        published_at = published_at.replace(tzinfo=timezone.utc)

    version = normalize_tag(release.tag_name, tag_filter)
    return Version(
        version=version,
        tag=version.split("-")[0],
        channel=extract_channel(release.tag_name, tag_filter),
        notes=release.body or "",
        published_at=published_at,
        platforms=tuple(assets),
        download_count=download_count,
    )


def compare_versions(a: Version, b: Version) -> int:
    """Order versions newest first: -1 when `a` has the greater tag."""
    return -semver.compare(a.tag, b.tag)


def sort_versions(versions: list[Version]) -> list[Version]:
    """Sort newest first by tag. Equal tags keep their relative order."""
    return sorted(versions, key=lambda v: semver.parse_version(v.tag), reverse=True)


class VersionCatalog:
    """Queryable list of normalized versions.

    Nothing is cached: every query lists releases from the backend again.
    """

    def __init__(self, backend: Backend, tag_filter: TagFilter | None = None):
        self.backend = backend
        self.tag_filter = tag_filter

    async def list(self) -> list[Version]:
        """List versions, newest first."""
        releases = await self.backend.releases()
        versions = []
        for release in releases:
            version = normalize_version(release, self.tag_filter)
            if version is not None:
                versions.append(version)

        logger.debug("Normalized %d versions from %d releases", len(versions), len(releases))
        return sort_versions(versions)

    async def get(self, tag: str) -> Version:
        """Get a specific version by its tag."""
        return await self.resolve(tag=tag)

    async def filter(
        self,
        tag: str | None = None,
        platform: "str | Platform | None" = None,
        channel: str | None = None,
    ) -> list[Version]:
        """Versions matching a tag range, platform and channel, newest first.

        Defaults: tag "latest" (no range restriction), any platform,
        channel "stable". Channel "*" matches every channel.
        An exact pre-release tag ("1.2.0-beta.1") is matched against the full
        version instead of the tag.
        """
        tag = tag or LATEST
        channel = channel or STABLE_CHANNEL

        # Download URLs name pre-releases in full, e.g. /download/1.2.0-beta.1/...
        pinned = semver.exact_version(tag) if tag != LATEST else None
        if pinned is not None and not pinned.prerelease:
            pinned = None

        requested = None
        if platform:
            requested = parse_platform(platform)
            if requested is None:
                raise PlatformUndetected(str(platform))

        result = []
        for version in await self.list():
            # Check channel
            if channel != ANY_CHANNEL and version.channel != channel:
                continue

            # Not available for requested platform
            if requested is not None and not satisfies(requested, [asset.type for asset in version.platforms]):
                continue

            # Check tag satisfies requested version
            if pinned is not None:
                if semver.parse_version(version.version) != pinned:
                    continue
            elif tag != LATEST and not semver.satisfies(version.tag, tag):
                continue

            result.append(version)
        return result

    async def resolve(
        self,
        tag: str | None = None,
        platform: "str | Platform | None" = None,
        channel: str | None = None,
    ) -> Version:
        """The newest version matching the criteria."""
        versions = await self.filter(tag=tag, platform=platform, channel=channel)
        if not versions:
            raise VersionNotFound(tag or LATEST, channel=channel, platform=str(platform) if platform else None)
        return versions[0]

    async def channels(self) -> dict[str, ChannelSummary]:
        """Summaries of every channel present in the releases."""
        channels: dict[str, ChannelSummary] = {}
        for version in await self.list():
            summary = channels.setdefault(version.channel, ChannelSummary())
            summary.versions_count += 1
            if summary.latest is None or summary.published_at < version.published_at:
                summary.latest = version.tag
                summary.published_at = version.published_at
        return channels
