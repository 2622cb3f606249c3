"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
import time
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from braker_cli import __version__
from braker_cli.core.extraction_manager import ExtractionManager
from braker_cli.core.inventory import get_track_info, select_tracks
from braker_cli.exceptions import BrakerError
from braker_cli.models.config import ExtractionConfig
from braker_cli.storage.config_manager import ConfigManager
from braker_cli.utils.path import validate_source
from braker_cli.utils.structured_logger import create_structured_logger

from .formatters import (
    format_error_with_suggestions,
    print_config,
    print_summary_panel,
    print_track_table,
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
log = logging.getLogger("braker_cli")

app = typer.Typer(
    name="braker",
    help=(
        "Convert every track of a DVD folder concurrently with HandBrakeCLI. Use"
        " 'braker <command> --help' for more info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "braker"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


def _load_config(cli_options: dict | None = None) -> ExtractionConfig:
    return ConfigManager(CONFIG_FILE).load_config(cli_options)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-v for info, -vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the current configuration."
    ),
):
    """Disc track extraction CLI"""
    if version:
        console.print(f"[bold]braker[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "WARNING"
    if verbose == 1:
        log_level = "INFO"
    elif verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("braker_cli").setLevel(log_level)

    if show_config:
        if not CONFIG_FILE.is_file():
            console.print(
                "[red]✗ Config file not found.[/] Run [cyan]braker init[/cyan]"
                " first."
            )
            raise typer.Exit(code=1)
        print_config(CONFIG_FILE, ConfigManager(CONFIG_FILE).get_config_as_dict())
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    engine: str | None = typer.Option(
        None, "--engine", "-e", help="Path to the HandBrakeCLI binary."
    ),
    profile: str | None = typer.Option(
        None, "--profile", "-p", help="Default engine preset name."
    ),
    output_dir: str | None = typer.Option(
        None, "--output-dir", "-o", help="Where converted tracks are written."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing configuration file."
    ),
):
    """Write a configuration file with default settings."""
    if (
        CONFIG_FILE.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    settings = {
        key: value
        for key, value in {
            "engine_path": engine,
            "profile": profile,
            "output_dir": output_dir,
        }.items()
        if value is not None
    }
    try:
        ExtractionConfig(**settings)
        ConfigManager(CONFIG_FILE).save_new_config(settings)
    except (BrakerError, ValueError) as e:
        console.print(f"[red]✗ Could not write configuration: {e}[/red]")
        raise typer.Exit(code=1) from e

    console.print(f"\n[bold green]✓ Configuration saved to '{CONFIG_FILE}'[/bold green]")
    console.print("Ready to go! Try: [cyan]braker extract <DVD folder>[/cyan]")


@app.command()
def scan(
    source: Path = typer.Argument(  # noqa: B008
        ..., help="Disc folder containing VIDEO_TS."
    ),
    engine: str | None = typer.Option(
        None, "--engine", "-e", help="Path to the HandBrakeCLI binary."
    ),
):
    """List the tracks on a disc and their runtimes."""
    cli_options = {"engine_path": engine} if engine else {}

    async def _scan_async():
        config = _load_config(cli_options)
        validate_source(source)
        return await get_track_info(config.engine_path, source)

    try:
        tracks = asyncio.run(_scan_async())
    except BrakerError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e

    print_track_table(source, tracks)


@app.command(name="extract")
def extract_command(
    source: Path = typer.Argument(  # noqa: B008
        ..., help="Disc folder containing VIDEO_TS."
    ),
    engine: str | None = typer.Option(
        None, "--engine", "-e", help="Path to the HandBrakeCLI binary."
    ),
    profile: str | None = typer.Option(
        None, "--profile", "-p", help="Engine preset, e.g. 'High Profile'."
    ),
    output_dir: str | None = typer.Option(
        None, "--output-dir", "-o", help="Where converted tracks are written."
    ),
    container: str | None = typer.Option(
        None, "--container", "-c", help="Output file extension: mp4, m4v or mkv."
    ),
    tracks: list[str] | None = typer.Option(  # noqa: B008
        None,
        "--track",
        "-t",
        help="Only convert this track id. Repeat for several tracks.",
    ),
    min_minutes: int | None = typer.Option(
        None, "--min-minutes", help="Skip tracks shorter than this many minutes."
    ),
    max_parallel: int | None = typer.Option(
        None,
        "--max-parallel",
        help="Limit simultaneous engine processes (0 runs every track at once).",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Show what would be converted without running the engine.",
    ),
    log_json: bool = typer.Option(
        False, "--log-json", help="Also write JSON event logs to the log directory."
    ),
):
    """Convert every track of a disc concurrently."""
    cli_options = {
        key: value
        for key, value in {
            "engine_path": engine,
            "profile": profile,
            "output_dir": output_dir,
            "container": container,
            "track_ids": tracks,
            "min_minutes": min_minutes,
            "max_parallel": max_parallel,
        }.items()
        if value is not None
    }
    cli_options["dry_run"] = dry_run

    async def _extract_async():
        config = _load_config(cli_options)
        validate_source(source)

        all_tracks = await get_track_info(config.engine_path, source)
        selected = select_tracks(all_tracks, config.track_ids, config.min_minutes)
        print_track_table(source, selected)

        log_dir = None
        if log_json:
            log_dir = (
                Path(config.log_dir).expanduser()
                if config.log_dir
                else CONFIG_DIR / "logs"
            )

        base_logger, events, session_events = create_structured_logger(
            log_dir, enable_json=log_json
        )
        with base_logger:
            base_logger.set_session_context(source_path=str(source))
            manager = ExtractionManager.from_config(
                config, source, events=events, session_events=session_events
            )
            if config.dry_run:
                console.print("[bold cyan]💿 Starting dry run...[/bold cyan]")
            else:
                console.print("[bold cyan]💿 Starting extraction...[/bold cyan]")

            start_time = time.monotonic()
            result = await manager.execute(selected)
            duration = time.monotonic() - start_time

        print_summary_panel(result, duration)
        result.raise_for_failures()

    try:
        asyncio.run(_extract_async())
    except BrakerError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e

    log.info("Conversion done")


@app.command()
def validate():
    """Validate the current configuration."""
    try:
        config = _load_config()
        print_validation_table(config)
    except BrakerError as e:
        console.print(f"[red]✗ Configuration is invalid: {e}[/red]")
        raise typer.Exit(code=1) from e
