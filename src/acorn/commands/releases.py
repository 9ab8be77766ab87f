"""Releases command implementation."""

import asyncio

import click
import httpx
from rich.console import Console

from acorn.core.resolver import ReleasesDocument
from acorn.core.service import Acorn
from acorn.errors import AcornError

console = Console()


async def _releases(version: str, channel: str | None, base_url: str) -> ReleasesDocument:
    base_url = base_url.rstrip("/")
    if channel:
        request_url = f"{base_url}/update/channel/{channel}/win32/{version}/RELEASES"
    else:
        request_url = f"{base_url}/update/win32/{version}/RELEASES"

    async with Acorn() as service:
        await service.init()
        return await service.resolver.windows_releases(version, request_url, channel=channel)


@click.command()
@click.argument("version")
@click.option("--channel", "-c", help="Only consider this channel (default: all)")
@click.option("--base-url", default="http://localhost:5000", show_default=True, help="Public URL of the update server")
def releases(version: str, channel: str | None, base_url: str):
    """Print the Squirrel.Windows RELEASES file served to clients on VERSION."""
    try:
        document = asyncio.run(_releases(version, channel, base_url))
    except (AcornError, httpx.HTTPError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    click.echo(document.content.decode("utf-8"))
