"""Resolve command implementation."""

import asyncio

import click
import httpx
from rich.console import Console
from rich.panel import Panel

from acorn.core.service import Acorn
from acorn.errors import AcornError
from acorn.models.version import Version

console = Console()


async def _resolve(tag: str, platform: str | None, channel: str) -> Version:
    async with Acorn() as service:
        await service.init()
        return await service.versions.resolve(tag=tag, platform=platform, channel=channel)


@click.command()
@click.option("--tag", "-t", default="latest", show_default=True, help="Version range, e.g. '^1.2.0'")
@click.option("--platform", "-p", help="Platform the version must support")
@click.option("--channel", "-c", default="stable", show_default=True, help="Channel, or * for all")
def resolve(tag: str, platform: str | None, channel: str):
    """Show the version a client would get."""
    try:
        version = asyncio.run(_resolve(tag, platform, channel))
    except (AcornError, httpx.HTTPError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    lines = [
        f"[bold]Version:[/bold] {version.version}",
        f"[bold]Tag:[/bold] {version.tag}",
        f"[bold]Channel:[/bold] {version.channel}",
        f"[bold]Published:[/bold] {version.published_at.strftime('%Y-%m-%d %H:%M')}",
        f"[bold]Downloads:[/bold] {version.download_count}",
    ]
    if version.platforms:
        lines.append("[bold]Assets:[/bold]")
        for asset in version.platforms:
            lines.append(f"  • {asset.filename} [dim]({asset.type}, {asset.size} bytes)[/dim]")

    console.print(Panel("\n".join(lines), title=f"[green]{version.tag}[/green]"))
