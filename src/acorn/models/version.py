"""Normalized version data models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from acorn.core.platform import Platform
from acorn.models.release import RawAsset

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class Asset:
    """A downloadable file of a version, classified to a platform."""

    id: str
    type: Platform
    filename: str
    size: int
    content_type: str
    raw: RawAsset = field(repr=False, compare=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type.value,
            "filename": self.filename,
            "size": self.size,
            "content_type": self.content_type,
        }


@dataclass(frozen=True)
class Version:
    """A release normalized for update queries."""

    version: str  # full normalized string, e.g. 2.0.0-beta.1
    tag: str  # version without pre-release suffix, e.g. 2.0.0
    channel: str
    notes: str
    published_at: datetime
    platforms: tuple[Asset, ...] = ()
    download_count: int = 0

    def find_asset(self, filename: str) -> Asset | None:
        """Find an asset by exact filename."""
        for asset in self.platforms:
            if asset.filename == filename:
                return asset
        return None

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "tag": self.tag,
            "channel": self.channel,
            "notes": self.notes,
            "published_at": self.published_at.isoformat(),
            "platforms": [asset.to_dict() for asset in self.platforms],
            "download_count": self.download_count,
        }


@dataclass
class ChannelSummary:
    """Latest version and version count of a release channel."""

    latest: str | None = None
    versions_count: int = 0
    published_at: datetime = EPOCH

    def to_dict(self) -> dict:
        return {
            "latest": self.latest,
            "versions_count": self.versions_count,
            "published_at": self.published_at.isoformat(),
        }
