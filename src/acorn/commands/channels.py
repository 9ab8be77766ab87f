"""Channels command implementation."""

import asyncio

import click
import httpx
from rich.console import Console
from rich.table import Table

from acorn.core.service import Acorn
from acorn.errors import AcornError
from acorn.models.version import ChannelSummary

console = Console()


async def _channels() -> dict[str, ChannelSummary]:
    async with Acorn() as service:
        await service.init()
        return await service.versions.channels()


@click.command()
def channels():
    """List release channels with their latest version."""
    try:
        summaries = asyncio.run(_channels())
    except (AcornError, httpx.HTTPError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    if not summaries:
        console.print("No channels found")
        raise SystemExit(0)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Channel")
    table.add_column("Latest")
    table.add_column("Versions")
    table.add_column("Published")

    for name, summary in sorted(summaries.items()):
        table.add_row(
            name,
            summary.latest or "",
            str(summary.versions_count),
            summary.published_at.strftime("%Y-%m-%d %H:%M"),
        )

    console.print(table)
