"""Raw release data as returned by a backend."""

from dataclasses import dataclass
from datetime import datetime


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp as sent by the GitHub API."""
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@dataclass(frozen=True)
class RawAsset:
    """A file attached to a release, exactly as the backend knows it."""

    id: str
    name: str
    size: int
    content_type: str
    download_count: int = 0
    url: str = ""  # API url, serves bytes with Accept: application/octet-stream
    download_url: str = ""

    @classmethod
    def from_api_response(cls, data: dict) -> "RawAsset":
        """Create RawAsset from GitHub API response."""
        return cls(
            id=str(data["id"]),
            name=data["name"],
            size=data.get("size", 0),
            content_type=data.get("content_type", "application/octet-stream"),
            download_count=data.get("download_count", 0),
            url=data.get("url", ""),
            download_url=data.get("browser_download_url", ""),
        )


@dataclass(frozen=True)
class RawRelease:
    """A release as published on the hosting provider."""

    tag_name: str
    draft: bool = False
    published_at: datetime | None = None
    body: str = ""
    assets: tuple[RawAsset, ...] = ()
    prerelease: bool = False

    @classmethod
    def from_api_response(cls, data: dict) -> "RawRelease":
        """Create RawRelease from GitHub API response."""
        return cls(
            tag_name=data["tag_name"],
            draft=data.get("draft", False),
            published_at=parse_timestamp(data.get("published_at")),
            body=data.get("body") or "",
            assets=tuple(RawAsset.from_api_response(a) for a in data.get("assets", [])),
            prerelease=data.get("prerelease", False),
        )
