"""Tests for the GitHub Releases backend, against a mocked API."""

import httpx
import pytest

from acorn.core.github import GitHubBackend, GitHubError, parse_repo_spec
from acorn.core.platform import Platform
from acorn.models.release import RawAsset
from acorn.models.version import Asset

API = "https://api.github.com"


def release_json(tag, assets=()):
    return {
        "tag_name": tag,
        "draft": False,
        "prerelease": False,
        "published_at": "2024-01-01T12:00:00Z",
        "body": f"Notes for {tag}",
        "assets": [
            {
                "id": index,
                "name": name,
                "size": 100,
                "content_type": "application/octet-stream",
                "download_count": 3,
                "url": f"{API}/repos/owner/app/releases/assets/{index}",
                "browser_download_url": f"https://github.com/owner/app/releases/download/{tag}/{name}",
            }
            for index, name in enumerate(assets)
        ],
    }


def make_backend(handler, **kwargs):
    return GitHubBackend("owner/app", transport=httpx.MockTransport(handler), **kwargs)


def make_asset(url=f"{API}/repos/owner/app/releases/assets/7", download_url=""):
    raw = RawAsset(
        id="7",
        name="app-osx.zip",
        size=11,
        content_type="application/zip",
        url=url,
        download_url=download_url,
    )
    return Asset(
        id="7",
        type=Platform.OSX_64,
        filename="app-osx.zip",
        size=11,
        content_type="application/zip",
        raw=raw,
    )


class TestParseRepoSpec:
    def test_owner_repo(self):
        assert parse_repo_spec("owner/app") == ("owner", "app")

    def test_url(self):
        assert parse_repo_spec("https://github.com/owner/app.git") == ("owner", "app")
        assert parse_repo_spec("github.com/owner/app/") == ("owner", "app")

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_repo_spec("owner/app/extra")


class TestGitHubBackend:
    @pytest.mark.asyncio
    async def test_init_checks_repository(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"full_name": "owner/app"})

        backend = make_backend(handler, token="secret")
        await backend.init()
        await backend.aclose()

        assert seen[0].url.path == "/repos/owner/app"
        assert seen[0].headers["authorization"] == "Bearer secret"

    @pytest.mark.asyncio
    async def test_repository_not_found(self):
        backend = make_backend(lambda request: httpx.Response(404))
        with pytest.raises(GitHubError, match="Repository owner/app not found"):
            await backend.init()

    @pytest.mark.asyncio
    async def test_rate_limited(self):
        backend = make_backend(lambda request: httpx.Response(403))
        with pytest.raises(GitHubError, match="rate limit"):
            await backend.releases()

    @pytest.mark.asyncio
    async def test_server_error(self):
        backend = make_backend(lambda request: httpx.Response(502))
        with pytest.raises(httpx.HTTPStatusError):
            await backend.releases()

    @pytest.mark.asyncio
    async def test_releases_follow_pagination(self):
        next_url = f"{API}/repositories/1/releases?per_page=100&page=2"
        requests = []

        def handler(request):
            requests.append(request)
            if request.url.params.get("page") == "2":
                return httpx.Response(200, json=[release_json("v1.0.0")])
            return httpx.Response(
                200,
                json=[release_json("v1.1.0", ["app-osx.zip"])],
                headers={"Link": f'<{next_url}>; rel="next"'},
            )

        backend = make_backend(handler)
        releases = await backend.releases()

        assert [release.tag_name for release in releases] == ["v1.1.0", "v1.0.0"]
        assert requests[0].url.params["per_page"] == "100"
        assert str(requests[1].url) == next_url

        asset = releases[0].assets[0]
        assert asset.id == "0"
        assert asset.name == "app-osx.zip"
        assert asset.download_count == 3
        assert releases[0].published_at.year == 2024
        assert releases[0].body == "Notes for v1.1.0"

    @pytest.mark.asyncio
    async def test_read_asset_requests_octet_stream(self):
        def handler(request):
            assert request.url.path == "/repos/owner/app/releases/assets/7"
            assert request.headers["accept"] == "application/octet-stream"
            return httpx.Response(200, content=b"zip content")

        backend = make_backend(handler)
        assert await backend.read_asset(make_asset()) == b"zip content"

    @pytest.mark.asyncio
    async def test_read_asset_falls_back_to_download_url(self):
        def handler(request):
            assert request.url.host == "github.com"
            return httpx.Response(200, content=b"zip content")

        backend = make_backend(handler)
        asset = make_asset(url="", download_url="https://github.com/owner/app/releases/download/v1/app-osx.zip")
        assert await backend.read_asset(asset) == b"zip content"

    @pytest.mark.asyncio
    async def test_missing_asset(self):
        backend = make_backend(lambda request: httpx.Response(404))
        with pytest.raises(GitHubError, match="Asset app-osx.zip not found"):
            await backend.read_asset(make_asset())

    @pytest.mark.asyncio
    async def test_serve_asset_streams(self):
        content = b"x" * 20000
        backend = make_backend(lambda request: httpx.Response(200, content=content))

        chunks = [chunk async for chunk in backend.serve_asset(make_asset())]

        assert b"".join(chunks) == content
        assert len(chunks) > 1
