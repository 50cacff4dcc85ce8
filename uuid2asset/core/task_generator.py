"""
Expands a manifest's version tables into download tasks.

Every (entry, hash) pair is combined with every candidate file extension,
because the real extension of an asset is not recorded in the manifest.
"""

import logging
from typing import Iterator, Optional, Sequence

from uuid2asset.exceptions import InvalidIdentifierError
from uuid2asset.models.manifest import Manifest, VersionEntry
from uuid2asset.models.task import BaseType, DownloadTask
from uuid2asset.utils.uuid_decoder import decode_uuid

log = logging.getLogger(__name__)


def _resolve_identifier(manifest: Manifest, entry: VersionEntry) -> Optional[str]:
    """Turns a version entry into the identifier used in asset paths."""
    # bool is an int subclass but never a valid index
    if isinstance(entry, bool):
        log.warning(f"Skipping unsupported version entry {entry!r}.")
        return None

    if isinstance(entry, int):
        uuids = manifest.uuids or []
        if not 0 <= entry < len(uuids):
            log.warning(
                f"Skipping entry {entry}: index outside the {len(uuids)} known UUIDs."
            )
            return None
        try:
            return decode_uuid(uuids[entry])
        except InvalidIdentifierError as e:
            log.warning(f"Skipping entry {entry}: {e}")
            return None

    if isinstance(entry, str) and entry:
        return entry

    log.warning(f"Skipping unsupported version entry {entry!r}.")
    return None


def iter_tasks(
    manifest: Manifest,
    server_url: str,
    base_type: BaseType,
    extensions: Sequence[str],
) -> Iterator[DownloadTask]:
    """
    Lazily yields the download tasks for one base type of a manifest.

    Yields nothing (after logging why) when the base path or its version list
    is missing, empty, or malformed.
    """
    base = manifest.base_path_for(base_type)
    if not base:
        log.info(f"{base_type.value} base not found in bundle data.")
        return

    versions = manifest.versions_for(base_type)
    if not versions:
        log.info(f"No versions found for {base_type.value} base.")
        return

    if len(versions) % 2:
        log.warning(
            f"[yellow]Skipping {base_type.value} base: version list has odd length "
            f"({len(versions)}), expected entry/hash pairs.[/yellow]"
        )
        return

    root = server_url.rstrip("/")
    prefix = f"{manifest.name}/{base}"

    for i in range(0, len(versions), 2):
        entry, file_hash = versions[i], versions[i + 1]
        identifier = _resolve_identifier(manifest, entry)
        if identifier is None:
            continue

        shard = identifier[:2]
        stem = f"{shard}/{identifier}.{file_hash}"
        for ext in extensions:
            relative = f"{prefix}/{stem}{ext}"
            yield DownloadTask(
                url=f"{root}/assets/{relative}",
                destination_path=relative,
                base_type=base_type,
            )


def generate_tasks(
    manifest: Manifest,
    server_url: str,
    base_type: BaseType,
    extensions: Sequence[str],
) -> list[DownloadTask]:
    """Materializes `iter_tasks` into a list."""
    return list(iter_tasks(manifest, server_url, base_type, extensions))
