"""
Drives the retrieval of one bundle: both base passes, aggregation of the found
files, and creation of the bundle archive.
"""

import logging
import time
from pathlib import Path
from typing import Optional, Protocol

from rich.markup import escape

from uuid2asset.cli.progress_manager import ProgressManager
from uuid2asset.models.config import FetchConfig
from uuid2asset.models.manifest import Manifest
from uuid2asset.models.report import BundleReport, BundleStatus
from uuid2asset.models.task import BaseType, DownloadTask, RetrievalOutcome
from uuid2asset.storage.bundle_archive import BundleArchive
from uuid2asset.utils.formatting import format_size
from uuid2asset.utils.retry import RetryPolicy

from .retrieval_engine import RetrievalEngine
from .task_generator import generate_tasks

log = logging.getLogger(__name__)

NO_FILES_MESSAGE = (
    "No files were found! This probably happened because the asset bundle "
    "structure is not compatible with the tool."
)


class Fetcher(Protocol):
    async def fetch(self, url: str) -> Optional[bytes]: ...


class BundleProcessor:
    """Turns a manifest into a zip archive of every asset the server has."""

    def __init__(
        self,
        config: FetchConfig,
        downloader: Fetcher,
        progress_manager: Optional[ProgressManager] = None,
    ):
        self.config = config
        self.downloader = downloader
        self.progress_manager = progress_manager
        self.policy = RetryPolicy(
            max_attempts=config.max_attempts,
            delay=config.retry_delay,
            timeout=config.timeout,
        )

    async def _fetch_task(self, task: DownloadTask) -> RetrievalOutcome:
        data = await self.downloader.fetch(task.url)
        if data is None:
            return RetrievalOutcome.not_found(task)
        return RetrievalOutcome.found(task, data)

    def _make_engine(self) -> RetrievalEngine[DownloadTask, RetrievalOutcome]:
        return RetrievalEngine(
            max_workers=self.config.max_workers,
            progress_interval=self.config.progress_interval,
            policy=self.policy,
            progress_callback=(
                self.progress_manager.update if self.progress_manager else None
            ),
            is_success=lambda outcome: outcome.is_found,
            describe=lambda task: task.url,
        )

    async def _process_base(
        self,
        manifest: Manifest,
        base_type: BaseType,
        archive: BundleArchive,
        report: BundleReport,
    ) -> int:
        """Runs one base pass and adds its found files to the archive."""
        tasks = generate_tasks(
            manifest, self.config.server_url, base_type, self.config.extensions
        )
        if not tasks:
            return 0

        log.info(
            f"[bold cyan]▶ Processing {base_type.value} base[/] "
            f"({len(tasks)} download tasks)"
        )
        if self.progress_manager:
            self.progress_manager.start_pass(
                f"{manifest.name} / {base_type.value}", len(tasks)
            )

        engine = self._make_engine()
        try:
            outcomes = await engine.run(tasks, self._fetch_task)
        finally:
            if self.progress_manager:
                self.progress_manager.finish_pass()
        report.base_stats[base_type.value] = engine.stats

        found = 0
        for outcome in outcomes:
            if outcome.is_found:
                archive.add(outcome.task.destination_path, outcome.data)
                found += 1

        log.info(
            f"  [green]✓ {base_type.value}: {found} files found[/green] "
            f"[dim]({engine.stats.failed} missing, {engine.stats.retries} retries)[/dim]"
        )
        return found

    async def collect(
        self, manifest: Manifest, report: Optional[BundleReport] = None
    ) -> Optional[BundleArchive]:
        """
        Downloads every available file of a manifest into a BundleArchive.

        Returns:
            The (possibly empty) archive, or None when the manifest lacks the
            `uuids` or `versions` tables.
        """
        report = report or BundleReport(name=manifest.name)

        if manifest.uuids is None or manifest.versions is None:
            report.status = BundleStatus.MANIFEST_INVALID
            report.message = "Bundle data is missing required fields (uuids or versions)"
            log.error(f"[red]✗ {report.message}[/red]")
            return None

        log.info(f"\n[bold magenta]📦 Bundle:[/] {escape(manifest.name)}")
        log.info(f"  [dim]Total UUIDs: {len(manifest.uuids)}[/dim]")

        archive = BundleArchive(manifest.name)
        for base_type in BaseType:
            report.files_found += await self._process_base(
                manifest, base_type, archive, report
            )
        return archive

    async def process_bundle(self, manifest: Manifest) -> BundleReport:
        """
        Collects a bundle and writes `<name>-bundle.zip` to the output directory.

        Manifest problems and empty results are reported through the returned
        BundleReport rather than raised.
        """
        start_time = time.monotonic()
        report = BundleReport(name=manifest.name)

        archive = await self.collect(manifest, report)
        if archive is not None:
            if len(archive) == 0:
                report.status = BundleStatus.NO_FILES_FOUND
                report.message = NO_FILES_MESSAGE
                log.warning(f"[yellow]⚠ {NO_FILES_MESSAGE}[/yellow]")
            else:
                log.info("Operation completed, creating bundle...")
                report.archive_path = await archive.save(Path(self.config.output_dir))
                report.archive_size = report.archive_path.stat().st_size
                report.status = BundleStatus.COMPLETED
                log.info(
                    f"[bold green]✓ Bundle created:[/] {escape(str(report.archive_path))} "
                    f"[dim]({len(archive)} files, {format_size(report.archive_size)})[/dim]"
                )

        report.duration_s = time.monotonic() - start_time
        return report
