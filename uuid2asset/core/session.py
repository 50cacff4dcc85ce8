"""
The top-level driver: processes each manifest file in turn and keeps track of
which bundles succeeded.
"""

import logging
import time
from pathlib import Path
from typing import Optional, Sequence

from rich.markup import escape

from uuid2asset.cli.progress_manager import ProgressManager
from uuid2asset.exceptions import ManifestError
from uuid2asset.models.config import FetchConfig
from uuid2asset.models.manifest import load_manifest
from uuid2asset.models.report import BundleReport, BundleStatus
from uuid2asset.net.downloader import AssetDownloader

from .bundle_processor import BundleProcessor

log = logging.getLogger(__name__)


class FetchSession:
    """Runs a whole invocation: one BundleProcessor pass per manifest file."""

    def __init__(
        self,
        config: FetchConfig,
        progress_manager: Optional[ProgressManager] = None,
        downloader: Optional[AssetDownloader] = None,
    ):
        self.config = config
        self.progress_manager = progress_manager
        self.downloader = downloader or AssetDownloader(
            max_connections=config.max_workers
        )
        self.processor = BundleProcessor(config, self.downloader, progress_manager)
        self.reports: list[BundleReport] = []
        self.start_time = time.monotonic()

    @property
    def duration(self) -> float:
        return time.monotonic() - self.start_time

    @property
    def exit_code(self) -> int:
        """0 when every bundle produced an archive, 1 otherwise."""
        if self.reports and all(r.succeeded for r in self.reports):
            return 0
        return 1

    async def _process_file(self, path: Path) -> BundleReport:
        try:
            manifest = await load_manifest(path)
        except ManifestError as e:
            log.error(f"[red]✗ {escape(str(e))}[/red]")
            return BundleReport(
                name=path.name, status=BundleStatus.MANIFEST_INVALID, message=str(e)
            )

        try:
            return await self.processor.process_bundle(manifest)
        except Exception as e:
            log.error(
                f"[red]✗ Error processing bundle '{escape(manifest.name)}': "
                f"{escape(str(e))}[/red]",
                exc_info=log.getEffectiveLevel() == logging.DEBUG,
            )
            return BundleReport(
                name=manifest.name, status=BundleStatus.FAILED, message=str(e)
            )

    async def run(
        self, manifest_paths: Optional[Sequence[Path]] = None
    ) -> list[BundleReport]:
        """
        Processes the given manifest files (default: the configured ones)
        sequentially.
        """
        paths = [Path(p) for p in (manifest_paths or self.config.manifest_paths)]
        if not paths:
            log.info("No manifest files provided. Nothing to do.")
            return self.reports

        log.info(f"Target server: [cyan]{escape(self.config.server_url)}[/cyan]")
        log.info(f"Bundles: {escape(', '.join(str(p) for p in paths))}")

        try:
            for path in paths:
                self.reports.append(await self._process_file(path))
        finally:
            await self.downloader.close()

        return self.reports
