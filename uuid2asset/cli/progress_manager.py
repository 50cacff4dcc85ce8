"""
Manages the live progress display for retrieval passes.

On a terminal a Rich progress bar is shown (it refreshes on its own timer);
otherwise plain '> Progress: N/M (P%)' lines are printed at every report.
"""

import asyncio
import logging

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from uuid2asset.models.stats import RetrievalStats
from uuid2asset.utils.formatting import format_percentage

log = logging.getLogger("uuid2asset")


class ProgressManager:
    """Shows progress for one retrieval pass at a time."""

    def __init__(self, console: Console, show_bar: bool | None = None):
        self.console = console
        self.show_bar = console.is_terminal if show_bar is None else show_bar

        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}", justify="left"),
            BarColumn(bar_width=40),
            MofNCompleteColumn(),
            "[progress.percentage]{task.percentage:>3.0f}%",
            "•",
            TextColumn("[green]{task.fields[found]} found[/green]"),
            "•",
            TextColumn("[magenta]{task.fields[rate]:.1f} req/s[/magenta]"),
            "•",
            TimeElapsedColumn(),
            console=console,
            transient=False,
        )
        self._started = False
        self._task_id: TaskID | None = None
        self._description = ""

    def log_message(self, message: str, level: str = "info"):
        """Routes a message through the application logger."""
        getattr(log, level, log.info)(message)

    def start_pass(self, description: str, total: int) -> None:
        """Begins tracking a new retrieval pass of `total` items."""
        self.finish_pass()
        self._description = description
        if self.show_bar:
            self._task_id = self.progress.add_task(
                escape(description), total=total, found=0, rate=0.0
            )
        else:
            self.console.print(
                f"> Starting {escape(description)}: {total} items...",
                highlight=False,
            )

    def update(self, stats: RetrievalStats) -> None:
        """Progress callback for the retrieval engine."""
        if self.show_bar:
            if self._task_id is not None:
                self.progress.update(
                    self._task_id,
                    completed=stats.processed,
                    total=stats.total,
                    found=stats.succeeded,
                    rate=stats.items_per_second,
                )
            return

        self.console.print(
            f"> Progress: {stats.processed}/{stats.total} "
            f"({format_percentage(stats.processed, stats.total)}) "
            f"- {stats.succeeded} found, {stats.items_per_second:.1f} req/s",
            highlight=False,
        )

    def finish_pass(self) -> None:
        """Freezes the current pass's bar so the next one starts on a new line."""
        if self._task_id is not None:
            self.progress.stop_task(self._task_id)
            self._task_id = None

    async def __aenter__(self):
        if self.show_bar:
            self.progress.start()
            self._started = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.finish_pass()
        if self._started:
            await asyncio.sleep(0.1)
            self.progress.stop()
            self._started = False
