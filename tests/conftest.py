"""Shared test configuration and fixtures for the acorn test suite."""

import asyncio
from datetime import datetime, timezone

import pytest

from acorn.core.backends import Backend
from acorn.core.config import AcornConfig, set_config
from acorn.models.release import RawAsset, RawRelease


def make_release(tag, assets=(), draft=False, body="", published_at=None, download_count=0):
    """Build a RawRelease with assets named after `assets`."""
    raw_assets = tuple(
        RawAsset(
            id=str(index),
            name=name,
            size=1024,
            content_type="application/octet-stream",
            download_count=download_count,
            url=f"https://api.example.com/assets/{tag}/{name}",
        )
        for index, name in enumerate(assets)
    )
    return RawRelease(
        tag_name=tag,
        draft=draft,
        published_at=published_at,
        body=body,
        assets=raw_assets,
    )


def at(day: int) -> datetime:
    return datetime(2024, 1, day, tzinfo=timezone.utc)


class FakeBackend(Backend):
    """In-memory backend recording how it is used."""

    def __init__(self, releases=(), contents=None, init_delay=0.0):
        self._releases = list(releases)
        self.contents = contents or {}
        self.init_delay = init_delay
        self.init_calls = 0
        self.release_calls = 0
        self.closed = False

    async def init(self):
        self.init_calls += 1
        await asyncio.sleep(self.init_delay)

    async def releases(self):
        self.release_calls += 1
        return list(self._releases)

    async def read_asset(self, asset):
        return self.contents[asset.filename]

    async def aclose(self):
        self.closed = True


@pytest.fixture
def releases():
    return [
        make_release(
            "v1.0.0",
            ["app-darwin.dmg", "app-1.0.0-osx.zip", "RELEASES", "app-1.0.0-full.nupkg", "notes.txt"],
            body="First release",
            published_at=at(1),
        ),
        make_release(
            "v1.1.0",
            ["app-darwin.dmg", "app-1.1.0-osx.zip", "RELEASES", "app-1.1.0-full.nupkg", "latest-mac.yml"],
            body="Bug fixes",
            published_at=at(5),
        ),
        make_release(
            "v2.0.0-beta.1",
            ["app-darwin.dmg", "app-linux-x64.tar.gz"],
            body="Beta",
            published_at=at(10),
        ),
        make_release("v3.0.0", ["app-darwin.dmg"], draft=True),
    ]


@pytest.fixture
def backend(releases):
    return FakeBackend(
        releases,
        contents={
            "RELEASES": (
                b"ABCD1234 app-1.0.0-full.nupkg 1048576\n"
                b"EF567890 app-1.1.0-delta.nupkg 2048\n"
                b"1234ABCD app-1.1.0-full.nupkg 1049600"
            ),
            "latest-mac.yml": b"version: 1.1.0\npath: app-1.1.0-osx.zip\n",
        },
    )


@pytest.fixture(autouse=True)
def reset_config():
    set_config(AcornConfig(repository="owner/app", pre_fetch=False))
    yield
    set_config(None)
