"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from uuid2asset import __version__
from uuid2asset.core.session import FetchSession
from uuid2asset.exceptions import Uuid2AssetError
from uuid2asset.storage.config_manager import ConfigManager

from .formatters import print_config, print_summary_panel
from .progress_manager import ProgressManager

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
log = logging.getLogger("uuid2asset")

app = typer.Typer(
    name="uuid2asset",
    help=(
        "Bulk-download the assets of UUID-addressed asset bundles into one zip"
        " archive per bundle manifest."
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
    return base_dir.expanduser() / "uuid2asset"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


def _version_callback(value: bool):
    if value:
        console.print(f"[bold]uuid2asset[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()


def _show_config_callback(value: bool):
    if value:
        try:
            config_data = ConfigManager(CONFIG_FILE).read_file_settings()
        except Uuid2AssetError as e:
            console.print(f"[red]✗ {e}[/red]")
            raise typer.Exit(code=1) from e
        print_config(CONFIG_FILE, config_data)
        raise typer.Exit()


@app.command()
def fetch(
    server_url: str = typer.Argument(
        ...,
        help="Base URL of the game's asset server, e.g. https://example.com/game/v1/",
        metavar="SERVER_URL",
    ),
    manifests: list[Path] = typer.Argument(  # noqa: B008
        ...,
        help="One or more bundle manifest files (config.XXXX.json).",
        metavar="MANIFEST...",
    ),
    # --- Retrieval Options ---
    workers: int | None = typer.Option(
        None,
        "-w",
        "--workers",
        help="Number of simultaneous requests (default 400).",
    ),
    progress_interval: int | None = typer.Option(
        None,
        "--progress-interval",
        help="Report progress every N completed requests (default 50).",
    ),
    timeout: float | None = typer.Option(
        None, "--timeout", help="Seconds before a single request attempt is abandoned."
    ),
    retry_delay: float | None = typer.Option(
        None, "--retry-delay", help="Seconds to wait before retrying a failed request."
    ),
    max_attempts: int | None = typer.Option(
        None,
        "--max-attempts",
        help="Give up after this many attempts per file (default: retry forever).",
    ),
    extensions: list[str] | None = typer.Option(  # noqa: B008
        None,
        "-e",
        "--ext",
        help="File extension to try (repeatable). Replaces the default set.",
    ),
    # --- Output Options ---
    output_dir: Path | None = typer.Option(  # noqa: B008
        None, "-o", "--output-dir", help="Directory the bundle archives are written to."
    ),
    no_progress: bool = typer.Option(
        False, "--no-progress", help="Print plain progress lines instead of a bar."
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
        is_eager=True,
        callback=_version_callback,
    ),
    show_config: bool = typer.Option(
        False,
        "--show-config",
        help="Display the settings from the config file and exit.",
        is_eager=True,
        callback=_show_config_callback,
    ),
):
    """Download every asset referenced by the given bundle manifests."""
    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("uuid2asset").setLevel(log_level)

    cli_options = {
        key: value
        for key, value in {
            "server_url": server_url,
            "manifest_paths": [str(p) for p in manifests],
            "max_workers": workers,
            "progress_interval": progress_interval,
            "timeout": timeout,
            "retry_delay": retry_delay,
            "max_attempts": max_attempts,
            "extensions": extensions or None,
            "output_dir": str(output_dir) if output_dir else None,
        }.items()
        if value is not None
    }

    try:
        config = ConfigManager(CONFIG_FILE).load_config(cli_options)
    except Uuid2AssetError as e:
        console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(code=1) from e

    async def _fetch_async() -> FetchSession:
        show_bar = False if no_progress else None
        async with ProgressManager(console, show_bar=show_bar) as progress_manager:
            session = FetchSession(config, progress_manager)
            console.print("[bold cyan]📦 UUID2Asset started[/bold cyan]")
            await session.run()
        return session

    try:
        session = asyncio.run(_fetch_async())
    except KeyboardInterrupt:
        console.print("\n[yellow]⚠️  Operation cancelled by user.[/yellow]")
        raise typer.Exit(code=130) from None

    print_summary_panel(session.reports, session.duration)
    raise typer.Exit(code=session.exit_code)
