"""CLI entry point for acorn."""

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from acorn import __version__
from acorn.commands import channels, check, download, notes, releases, resolve, versions
from acorn.core.config import AcornConfig, set_config
from acorn.errors import AcornError

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="acorn")
@click.option("--repo", "-r", help="GitHub repository (owner/repo) to read releases from")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML configuration file",
)
@click.option("--tag-filter", help="Regex with a named 'version' group selecting release tags")
@click.option("--token", help="GitHub token (defaults to $GITHUB_TOKEN)")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def main(repo, config_path, tag_filter, token, verbose):
    """Acorn - release metadata for desktop auto-updaters.

    Reads the releases of a GitHub repository and answers the questions
    Squirrel.Mac, Squirrel.Windows and electron-updater clients ask.

    Examples:

        acorn -r owner/app versions

        acorn -r owner/app check osx 1.2.0

        acorn -r owner/app releases 1.2.0 --channel beta
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )

    try:
        config = AcornConfig.from_file(config_path) if config_path else AcornConfig.default()
        # one-shot commands list versions themselves
        config = config.replace(repository=repo, token=token, tag_filter=tag_filter, pre_fetch=False)
    except AcornError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    set_config(config)


# Register commands
main.add_command(versions.versions)
main.add_command(channels.channels)
main.add_command(resolve.resolve)
main.add_command(check.check)
main.add_command(releases.releases)
main.add_command(notes.notes)
main.add_command(download.download)


if __name__ == "__main__":
    main()
