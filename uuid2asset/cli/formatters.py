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

from uuid2asset.models.config import FetchConfig
from uuid2asset.models.report import BundleReport, BundleStatus
from uuid2asset.utils.formatting import format_duration, format_size

_STATUS_STYLES = {
    BundleStatus.COMPLETED: ("✓ Completed", "green"),
    BundleStatus.NO_FILES_FOUND: ("○ No files found", "yellow"),
    BundleStatus.MANIFEST_INVALID: ("✗ Invalid manifest", "red"),
    BundleStatus.FAILED: ("✗ Failed", "red"),
}


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "ConfigurationError": [
            "• Check the values passed on the command line.",
            "• Review the config file shown by `uuid2asset --show-config`.",
        ],
        "ManifestError": [
            "• Make sure the file is the bundle's config JSON (e.g. config.XXXX.json).",
            "• The file must contain 'name', 'uuids' and 'versions'.",
        ],
        "RetryExhaustedError": [
            "• The server kept failing for at least one file.",
            "• Raise --max-attempts, or omit it to retry forever.",
            "• Try reducing the number of `--workers`.",
        ],
        "ClientResponseError": [
            "• A network connection issue occurred.",
            "• The asset server might be temporarily unavailable.",
            "• Please try again in a few minutes.",
        ],
        "TimeoutError": [
            "• A download timed out, which may indicate network throttling.",
            "• Try raising --timeout or reducing `--workers`.",
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
    """Displays the settings loaded from the config file, merged over the defaults."""
    console = Console()
    defaults = FetchConfig.model_construct()
    content = ""
    for key in sorted(FetchConfig.get_ini_keys()):
        value = config_data.get(key, getattr(defaults, key, None))
        if isinstance(value, list):
            value = ", ".join(value)
        elif value is None:
            value = "unlimited"
        source = "" if key in config_data else " [dim](default)[/dim]"
        content += f"{key} = {value}{source}\n"

    console.print(
        Panel(
            content.strip(),
            title=f"Configuration ([dim]{config_path}[/dim])",
            border_style="cyan",
        )
    )


def print_summary_panel(reports: list[BundleReport], duration_s: float):
    """Displays the final summary of the session, one row per bundle."""
    console = Console()

    table = Table(box=box.SIMPLE_HEAD, padding=(0, 1))
    table.add_column("Bundle", style="bold cyan")
    table.add_column("Status")
    table.add_column("Files", justify="right", style="green")
    table.add_column("Requests", justify="right")
    table.add_column("Retries", justify="right", style="yellow")
    table.add_column("Archive", style="dim")

    for report in reports:
        label, color = _STATUS_STYLES[report.status]
        archive = ""
        if report.archive_path:
            archive = f"{report.archive_path} ({format_size(report.archive_size)})"
        table.add_row(
            report.name,
            f"[{color}]{label}[/{color}]",
            str(report.files_found),
            str(report.tasks_total),
            str(report.retries),
            archive,
        )

    completed = sum(1 for r in reports if r.succeeded)
    footer = Text.from_markup(
        f"[bold]{completed}/{len(reports)}[/bold] bundles completed in "
        f"[blue]{format_duration(duration_s)}[/blue]"
    )

    content = Table.grid(padding=(1, 0))
    content.add_row(table)
    content.add_row(footer)

    all_ok = bool(reports) and completed == len(reports)
    console.print()
    console.print(
        Panel(
            content,
            title=(
                "📦 [bold]Fetch Complete![/bold]"
                if all_ok
                else "📦 [bold]Fetch Finished with Problems[/bold]"
            ),
            border_style="green" if all_ok else "yellow",
            box=box.DOUBLE,
            expand=False,
            padding=(1, 2),
        )
    )
    console.print()
