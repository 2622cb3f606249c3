"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from braker_cli.models.config import ExtractionConfig
from braker_cli.models.track import BatchResult, TrackDescriptor
from braker_cli.utils.formatting import format_duration, format_runtime


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "InvalidSourceError": [
            "• Point the command at the disc folder itself, the one containing VIDEO_TS.",
            "• Check that the disc is mounted or fully copied.",
        ],
        "InventoryError": [
            "• Check that --engine points to a working HandBrakeCLI binary.",
            "• Run the engine by hand with '-i <source> -t 0' to see its output.",
        ],
        "ParseError": [
            "• The engine's scan report contained an unexpected duration line.",
            "• Run `braker scan` with -vv to inspect the report.",
        ],
        "BatchError": [
            "• Tracks that converted successfully were kept.",
            "• Run the same command again to retry only the failed tracks.",
            "• Check that the preset name is valid for your engine version.",
        ],
        "ConfigurationError": [
            "• Check the values in your configuration file.",
            "• Run `braker init --force` to write a fresh one.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    suggestion_text = Text("\n".join(suggestions))

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(suggestion_text)

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
    """Displays the current configuration."""
    console = Console()
    content = ""
    for key, value in config_data.items():
        content += f"{key} = {value}\n"

    console.print(
        Panel(
            content.strip() or "[dim](empty)[/dim]",
            title=f"Configuration ([dim]{config_path}[/dim])",
            border_style="cyan",
        )
    )


def print_validation_table(config: ExtractionConfig):
    """Displays a summary of the current settings."""
    console = Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()

    table.add_row("Engine:", f"[green]{config.engine_path}[/green]")
    table.add_row("Profile:", config.profile)
    table.add_row("Output Dir:", f"[dim]{config.output_dir}[/dim]")
    table.add_row("Container:", config.container)
    table.add_row(
        "Max Parallel:",
        str(config.max_parallel) if config.max_parallel else "unbounded",
    )
    table.add_row("Min Runtime:", f"{config.min_minutes} min")
    table.add_row("JSON Logs:", config.log_dir or "✗ Disabled")

    console.print(
        Panel(
            table,
            title="[bold green]✓ Validated Settings[/bold green]",
            border_style="green",
        )
    )


def print_track_table(source_path: Path, tracks: list[TrackDescriptor]):
    """Displays the tracks found on a disc."""
    console = Console()
    if not tracks:
        console.print(f"[yellow]No tracks found in {source_path}.[/yellow]")
        return

    table = Table(title=f"Tracks in [cyan]{source_path}[/cyan]", box=box.ROUNDED)
    table.add_column("Track", style="bold magenta", justify="right")
    table.add_column("Runtime", justify="right")
    table.add_column("Minutes", justify="right", style="dim")
    for track in tracks:
        table.add_row(
            track.id, format_runtime(track.runtime_minutes), str(track.runtime_minutes)
        )
    console.print(table)


def print_summary_panel(result: BatchResult, duration_s: float):
    """Displays the final summary of an extraction batch."""
    console = Console()

    stats_table = Table(show_header=False, box=None, padding=(0, 2))
    stats_table.add_column(style="bold cyan", justify="right", width=16)
    stats_table.add_column(style="white", justify="left")

    if result.dry_run:
        stats_table.add_row(
            "→ Would convert:", f"[bold cyan]{len(result.planned)}[/bold cyan]"
        )
    else:
        stats_table.add_row(
            "✓ Converted:", f"[bold green]{len(result.converted)}[/bold green]"
        )

    if result.skipped:
        stats_table.add_row(
            "○ Skipped:", f"[yellow]{len(result.skipped)} (exists)[/yellow]"
        )

    if result.failures:
        stats_table.add_row(
            "✗ Failed:", f"[bold red]{len(result.failures)}[/bold red]"
        )

    stats_table.add_row("", "")  # Spacer
    stats_table.add_row("Time Elapsed:", f"[blue]{format_duration(duration_s)}[/blue]")

    if result.dry_run:
        title = "🔍 [bold]Dry Run Summary[/bold]"
        border_color = "yellow"
    elif result.failures:
        title = "💿 [bold]Extraction Finished With Errors[/bold]"
        border_color = "red"
    else:
        title = "💿 [bold]Extraction Complete![/bold]"
        border_color = "green"

    console.print()
    console.print(
        Panel(
            stats_table,
            title=title,
            border_style=border_color,
            box=box.DOUBLE,
            expand=False,
            padding=(1, 2),
        )
    )
    console.print()
