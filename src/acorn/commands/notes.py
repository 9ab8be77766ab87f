"""Notes command implementation."""

import asyncio
import json

import click
import httpx
from rich.console import Console

from acorn.core.resolver import ReleaseNotes
from acorn.core.service import Acorn
from acorn.errors import AcornError

console = Console()


async def _notes(version: str | None) -> ReleaseNotes:
    async with Acorn() as service:
        await service.init()
        return await service.resolver.release_notes(version)


@click.command()
@click.argument("version", required=False)
@click.option("--json", "as_json", is_flag=True, help="Print notes and publish date as JSON")
def notes(version: str | None, as_json: bool):
    """Show merged release notes of every version since VERSION."""
    try:
        result = asyncio.run(_notes(version))
    except (AcornError, httpx.HTTPError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        click.echo(result.text, nl=False)
