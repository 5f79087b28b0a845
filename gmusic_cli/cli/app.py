"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, TypeVar

import typer
from rich.console import Console
from rich.logging import RichHandler

from gmusic_cli import __version__
from gmusic_cli.api.client import MusicAPIClient
from gmusic_cli.api.deserializer import JsonDeserializer
from gmusic_cli.api.transport import AiohttpTransport
from gmusic_cli.exceptions import GMusicError
from gmusic_cli.models.music import Song
from gmusic_cli.storage.config_manager import ConfigManager

from .formatters import (
    format_error_with_suggestions,
    print_config,
    print_playlists_table,
    print_search_results,
    print_songs_table,
    print_validation_table,
)

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("gmusic_cli")

app = typer.Typer(
    name="gmusic-cli",
    help=(
        "Manage playlists and download songs from Google Music. Use 'gmusic-cli"
        " <command> --help' for more info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)

T = TypeVar("T")


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "gmusic-cli"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


def _run_with_client(
    action: Callable[[MusicAPIClient], Awaitable[T]],
    cli_options: dict[str, Any] | None = None,
) -> T:
    """Loads the config, logs in and runs ``action`` against a fresh client."""

    async def _run_async() -> T:
        config = ConfigManager(CONFIG_FILE).load_config(cli_options)
        async with MusicAPIClient(
            AiohttpTransport(timeout=config.request_timeout),
            JsonDeserializer(),
            Path(config.storage_directory).expanduser(),
        ) as client:
            await client.login(config.email, config.password)
            return await action(client)

    try:
        return asyncio.run(_run_async())
    except GMusicError as e:
        console.print(format_error_with_suggestions(e))
        log.debug("Full traceback:", exc_info=True)
        raise typer.Exit(code=1) from e


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the current configuration."
    ),
):
    """Google Music CLI"""
    if version:
        console.print(f"[bold]gmusic-cli[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("gmusic_cli").setLevel(log_level)

    if show_config:
        if not CONFIG_FILE.is_file():
            console.print(
                "[red]✗ Config file not found.[/] Run [cyan]gmusic-cli init[/cyan]"
                " first."
            )
            raise typer.Exit(code=1)
        config_manager = ConfigManager(CONFIG_FILE)
        try:
            config_manager.load_config()
        except GMusicError as e:
            console.print(f"[red]✗ Configuration is invalid: {e}[/red]")
            raise typer.Exit(code=1) from e
        print_config(CONFIG_FILE, config_manager.get_config_as_dict())
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    email: str = typer.Argument(..., help="Account email address."),
    password: str = typer.Argument(..., help="Account password."),
    storage_directory: str = typer.Option(
        ".", "--storage", "-d", help="Directory where songs are downloaded."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite existing credentials without asking."
    ),
):
    """Initialize configuration with account credentials."""
    if (
        CONFIG_FILE.exists()
        and not force
        and not typer.confirm(
            "Configuration file already exists. Overwrite the credentials?"
        )
    ):
        raise typer.Abort()

    try:
        ConfigManager(CONFIG_FILE).save_new_config(
            {
                "email": email,
                "password": password,
                "storage_directory": storage_directory,
            }
        )
    except GMusicError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1) from e
    console.print(
        f"\n[bold green]✓ Configuration saved to '{CONFIG_FILE}'[/bold green]"
    )
    console.print("Try: [cyan]gmusic-cli playlists[/cyan]")


@app.command()
def validate():
    """Validate the current configuration."""
    try:
        config = ConfigManager(CONFIG_FILE).load_config()
        print_validation_table(config)
    except GMusicError as e:
        console.print(f"[red]✗ Configuration is invalid: {e}[/red]")
        raise typer.Exit(code=1) from e


@app.command()
def playlists():
    """List all playlists of the account."""
    result = _run_with_client(lambda client: client.get_all_playlists())
    print_playlists_table(result)


@app.command()
def playlist(playlist_id: str = typer.Argument(..., help="Playlist ID.")):
    """Show the songs of one playlist."""
    result = _run_with_client(lambda client: client.get_playlist(playlist_id))
    print_songs_table(result.playlist, title=result.title or playlist_id)


@app.command()
def songs():
    """List every song in the library."""
    result = _run_with_client(lambda client: client.get_all_songs())
    print_songs_table(result, title=f"Library ({len(result)} songs)")


@app.command()
def search(query: str = typer.Argument(..., help="Search terms.")):
    """Search the catalogue."""
    result = _run_with_client(lambda client: client.search(query))
    print_search_results(query, result)


@app.command(name="add-playlist")
def add_playlist(name: str = typer.Argument(..., help="Title of the new playlist.")):
    """Create a playlist."""
    result = _run_with_client(lambda client: client.add_playlist(name))
    console.print(
        f"[green]✓ Created playlist '{name}'[/green] [dim]({result.id})[/dim]"
    )


@app.command(name="delete-playlist")
def delete_playlist(playlist_id: str = typer.Argument(..., help="Playlist ID.")):
    """Delete a playlist."""
    result = _run_with_client(lambda client: client.delete_playlist(playlist_id))
    console.print(
        f"[green]✓ Deleted playlist[/green] [dim]({result.delete_id})[/dim]"
    )


@app.command(name="download")
def download_command(
    song_ids: list[str] | None = typer.Argument(  # noqa: B008
        None, help="IDs of the songs to download."
    ),
    download_all: bool = typer.Option(
        False, "--all", help="Download every song in the library."
    ),
    storage_directory: str | None = typer.Option(
        None,
        "--storage",
        "-d",
        help="Directory where songs are downloaded (overrides the config).",
    ),
):
    """Download songs to the storage directory."""
    if not song_ids and not download_all:
        console.print(
            "[red]✗ No songs given.[/red] "
            "Use: [cyan]gmusic-cli download <ID>...[/cyan] or [cyan]--all[/cyan]"
        )
        raise typer.Exit(code=1)

    cli_options = {}
    if storage_directory is not None:
        cli_options["storage_directory"] = storage_directory

    async def _download(client: MusicAPIClient) -> list[Path]:
        client.storage_directory.mkdir(parents=True, exist_ok=True)
        if download_all:
            targets = await client.get_all_songs()
        else:
            targets = [Song(id=song_id) for song_id in song_ids]
        console.print(
            f"[bold cyan]🎵 Downloading {len(targets)} songs...[/bold cyan]"
        )
        return await client.download_songs(targets)

    paths = _run_with_client(_download, cli_options)
    for path in paths:
        console.print(f"[green]✓[/green] {path}")
