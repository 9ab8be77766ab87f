"""Check command implementation."""

import asyncio
import json

import click
import httpx
import yaml
from rich.console import Console

from acorn.core.resolver import UpdateManifest
from acorn.core.service import Acorn
from acorn.errors import AcornError

console = Console()


def update_url(base_url: str, platform: str, version: str, channel: str | None) -> str:
    """URL a Squirrel.Mac client would request for an update check."""
    base_url = base_url.rstrip("/")
    if channel:
        return f"{base_url}/update/channel/{channel}/{platform}/{version}"
    return f"{base_url}/update/{platform}/{version}"


async def _check(
    platform: str, version: str, channel: str | None, filetype: str, base_url: str
) -> UpdateManifest | None:
    async with Acorn() as service:
        await service.init()
        return await service.resolver.check_update(
            platform,
            version,
            update_url(base_url, platform, version, channel),
            channel=channel,
            filetype=filetype,
        )


@click.command()
@click.argument("platform")
@click.argument("version")
@click.option("--channel", "-c", help="Only consider this channel (default: all)")
@click.option("--filetype", default="zip", show_default=True, help="File type of the download URL")
@click.option("--base-url", default="http://localhost:5000", show_default=True, help="Public URL of the update server")
@click.option("--format", "output_format", type=click.Choice(["json", "yaml"]), default="json", show_default=True)
def check(platform: str, version: str, channel: str | None, filetype: str, base_url: str, output_format: str):
    """Show the update manifest for a client on PLATFORM running VERSION."""
    try:
        manifest = asyncio.run(_check(platform, version, channel, filetype, base_url))
    except (AcornError, httpx.HTTPError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    if manifest is None:
        console.print("[green]No updates[/green]")
        raise SystemExit(0)

    if output_format == "yaml":
        click.echo(yaml.safe_dump(manifest.to_dict(), default_flow_style=False, sort_keys=False), nl=False)
    else:
        click.echo(json.dumps(manifest.to_dict(), indent=2))
