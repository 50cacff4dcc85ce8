"""
Collects downloaded files in memory and writes them out as a zip archive.
"""

import asyncio
import io
import logging
import zipfile
from pathlib import Path

import aiofiles
from pathvalidate import sanitize_filename

log = logging.getLogger(__name__)


def archive_filename(bundle_name: str) -> str:
    """Returns the file name of the archive for a bundle: '<name>-bundle.zip'."""
    return sanitize_filename(f"{bundle_name}-bundle.zip", platform="auto")


class BundleArchive:
    """
    An ordered mapping of archive entry path to file contents.

    Only the bundle processor writes to it, and only after a retrieval pass
    has finished, so it needs no locking.
    """

    def __init__(self, bundle_name: str):
        self.bundle_name = bundle_name
        self._entries: dict[str, bytes] = {}

    def add(self, path: str, data: bytes) -> None:
        if path in self._entries:
            log.debug(f"Replacing duplicate archive entry '{path}'")
        self._entries[path] = data

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    @property
    def paths(self) -> list[str]:
        return list(self._entries)

    @property
    def total_size(self) -> int:
        return sum(len(data) for data in self._entries.values())

    def to_bytes(self) -> bytes:
        """Builds the zip archive in memory."""
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for path, data in self._entries.items():
                zf.writestr(path, data)
        return buffer.getvalue()

    async def save(self, output_dir: Path) -> Path:
        """
        Writes the archive to `<output_dir>/<bundle_name>-bundle.zip`.

        Returns:
            The path of the written archive.
        """
        output_dir = Path(output_dir)
        await asyncio.to_thread(output_dir.mkdir, parents=True, exist_ok=True)
        destination = output_dir / archive_filename(self.bundle_name)

        payload = await asyncio.to_thread(self.to_bytes)
        async with aiofiles.open(destination, "wb") as f:
            await f.write(payload)

        log.debug(f"Wrote {len(payload)} bytes to {destination}")
        return destination
