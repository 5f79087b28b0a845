"""
Functions for formatting and displaying data in the console using Rich.
"""

from collections.abc import Iterable
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from gmusic_cli.models.config import ClientConfig
from gmusic_cli.models.music import Playlists, QueryResponse, Song


def format_duration(millis: int) -> str:
    seconds = max(millis, 0) // 1000
    return f"{seconds // 60}:{seconds % 60:02d}"


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "InvalidCredentialsError": [
            "• Verify the email and password in the configuration file.",
            "• Run `gmusic-cli init --force` to store new credentials.",
        ],
        "InvalidArgumentError": [
            "• Check the arguments passed to the command.",
        ],
        "ConfigurationError": [
            "• Run `gmusic-cli init` to create a configuration file.",
            "• Run `gmusic-cli validate` to see which setting is rejected.",
        ],
        "TransportError": [
            "• A network connection issue occurred.",
            "• The music service might be temporarily unavailable.",
            "• Please try again in a few minutes.",
        ],
        "FormatError": [
            "• The service returned an unexpected response.",
            "• Run the command with -vv to see the raw response.",
        ],
        "URIFormatError": [
            "• The service returned an unusable stream URL for this song.",
        ],
        "StorageError": [
            "• Check that the storage directory exists and is writable.",
            "• Check the free disk space.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(Text("\n".join(suggestions)))

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_config(config_path: Path, config_data: dict[str, Any]):
    """Displays the current configuration, hiding sensitive data."""
    console = Console()
    content = ""
    for key, value in config_data.items():
        if key == "password":
            value = "[hidden]"
        content += f"{key} = {value}\n"

    console.print(
        Panel(
            content.strip(),
            title=f"Configuration ([dim]{config_path}[/dim])",
            border_style="cyan",
        )
    )


def print_validation_table(config: ClientConfig):
    """Displays a summary of the current settings."""
    console = Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()

    table.add_row("Account:", f"[green]{config.email}[/green]")
    table.add_row("Storage Directory:", f"[dim]{config.storage_directory}[/dim]")
    table.add_row("Request Timeout:", f"{config.request_timeout}s")

    console.print(
        Panel(
            table,
            title="[bold green]✓ Validated Settings[/bold green]",
            border_style="green",
        )
    )


def print_songs_table(songs: Iterable[Song], title: str = "Songs"):
    console = Console()
    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Artist")
    table.add_column("Album")
    table.add_column("Length", justify="right", style="green")
    for song in songs:
        table.add_row(
            song.id,
            song.title,
            song.artist,
            song.album,
            format_duration(song.duration_millis),
        )
    console.print(table)


def print_playlists_table(playlists: Playlists):
    console = Console()
    table = Table(title="Playlists")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Songs", justify="right", style="green")
    table.add_column("Kind")
    for kind, entries in (
        ("user", playlists.playlists),
        ("auto", playlists.magic_playlists),
    ):
        for playlist in entries:
            table.add_row(
                playlist.playlist_id, playlist.title, str(len(playlist.playlist)), kind
            )
    console.print(table)


def print_search_results(query: str, response: QueryResponse):
    """Displays the songs, albums and artists matching a search."""
    console = Console()
    results = response.results
    if not (results.songs or results.albums or results.artists):
        console.print(f"[yellow]No results for '{query}'.[/yellow]")
        return

    if results.songs:
        print_songs_table(results.songs, title=f"Songs matching '{query}'")
    for label, entries in (("Albums", results.albums), ("Artists", results.artists)):
        if entries:
            names = [
                str(e.get("title") or e.get("name") or e.get("artist", "?"))
                for e in entries
            ]
            console.print(f"[bold]{label}:[/bold] " + ", ".join(names))
