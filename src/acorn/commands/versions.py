"""Versions command implementation."""

import asyncio

import click
import httpx
from rich.console import Console
from rich.table import Table

from acorn.core.service import Acorn
from acorn.errors import AcornError
from acorn.models.version import Version

console = Console()


async def _filter_versions(tag: str, platform: str | None, channel: str) -> list[Version]:
    async with Acorn() as service:
        await service.init()
        return await service.versions.filter(tag=tag, platform=platform, channel=channel)


@click.command()
@click.option("--channel", "-c", default="*", show_default=True, help="Channel, or * for all")
@click.option("--platform", "-p", help="Only versions with a download for this platform")
@click.option("--tag", "-t", default="latest", show_default=True, help="Version range, e.g. '>=1.2.0'")
def versions(channel: str, platform: str | None, tag: str):
    """List versions, newest first."""
    try:
        result = asyncio.run(_filter_versions(tag, platform, channel))
    except (AcornError, httpx.HTTPError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    if not result:
        console.print("No versions found")
        raise SystemExit(0)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Version")
    table.add_column("Tag")
    table.add_column("Channel")
    table.add_column("Published")
    table.add_column("Platforms")

    for version in result:
        platforms = sorted({asset.type.value for asset in version.platforms})
        table.add_row(
            version.version,
            version.tag,
            version.channel,
            version.published_at.strftime("%Y-%m-%d %H:%M"),
            ", ".join(platforms),
        )

    console.print(table)
