"""Download command implementation."""

import asyncio
from pathlib import Path

import click
import httpx
from rich.console import Console
from rich.progress import (
    Progress,
    BarColumn,
    DownloadColumn,
    TransferSpeedColumn,
    TimeRemainingColumn,
)

from acorn.core.platform import current_platform
from acorn.core.service import Acorn
from acorn.errors import AcornError

console = Console()


async def _download(
    dest: Path,
    channel: str | None,
    platform: str | None,
    tag: str,
    filename: str | None,
    filetype: str | None,
    show_progress: bool,
) -> Path:
    async with Acorn() as service:
        await service.init()
        version, asset = await service.resolver.download(
            channel=channel,
            platform=platform,
            tag=tag,
            filename=filename,
            filetype=filetype,
        )

        dest.mkdir(parents=True, exist_ok=True)
        file_path = dest / asset.filename

        with Progress(
            "[progress.description]{task.description}",
            BarColumn(),
            DownloadColumn(),
            TransferSpeedColumn(),
            TimeRemainingColumn(),
            console=console,
            disable=not show_progress,
        ) as progress:
            task = progress.add_task(f"Downloading {asset.filename}", total=asset.size or None)

            # Only a complete download is moved to its final name
            partial_path = file_path.with_name(file_path.name + ".part")
            try:
                with open(partial_path, "wb") as f:
                    async for chunk in service.serve_asset(version, asset):
                        f.write(chunk)
                        progress.update(task, advance=len(chunk))
            except Exception:
                partial_path.unlink(missing_ok=True)
                raise
            partial_path.replace(file_path)

        return file_path


@click.command()
@click.option("--platform", "-p", help="Platform to download for")
@click.option("--tag", "-t", default="latest", show_default=True, help="Version or range to download")
@click.option("--channel", "-c", help="Channel (default: stable)")
@click.option("--filename", "-f", help="Exact asset filename; ignores --platform")
@click.option("--filetype", help="Preferred file type, e.g. zip or dmg")
@click.option(
    "--dest",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Directory to save into",
)
@click.option("--quiet", "-q", is_flag=True, help="Hide the progress bar")
def download(
    platform: str | None,
    tag: str,
    channel: str | None,
    filename: str | None,
    filetype: str | None,
    dest: Path,
    quiet: bool,
):
    """Download the installer a client would receive."""
    if not platform and not filename:
        platform = current_platform()

    try:
        file_path = asyncio.run(
            _download(dest, channel, platform, tag, filename, filetype, not quiet)
        )
    except (AcornError, httpx.HTTPError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    console.print(f"[green]✓[/green] Saved {file_path}")
