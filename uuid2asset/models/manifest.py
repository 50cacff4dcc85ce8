"""
Pydantic model for the bundle manifest (the `config.*.json` file shipped with
an asset bundle) and a loader that reads it from disk.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Union

import aiofiles
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from uuid2asset.exceptions import ManifestError

from .task import BaseType

log = logging.getLogger(__name__)

VersionEntry = Union[int, str]


class Manifest(BaseModel):
    """
    The subset of a bundle manifest needed to locate its files.

    `uuids` and `versions` are optional at parse time; the bundle processor
    decides what to do when they are missing.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    name: str = Field(min_length=1)
    uuids: Optional[list[str]] = None
    versions: Optional[dict[str, list[VersionEntry]]] = None
    import_base: Optional[str] = Field(default=None, alias="importBase")
    native_base: Optional[str] = Field(default=None, alias="nativeBase")

    def base_path_for(self, base_type: BaseType) -> Optional[str]:
        """Returns the path segment for a base type, e.g. 'import' or 'native'."""
        if base_type is BaseType.IMPORT:
            return self.import_base
        return self.native_base

    def versions_for(self, base_type: BaseType) -> list[VersionEntry]:
        """Returns the flat entry/hash list for a base type (empty if absent)."""
        return list((self.versions or {}).get(base_type.value) or [])


def parse_manifest(raw: str, source: str = "<manifest>") -> Manifest:
    """
    Parses manifest JSON text into a Manifest.

    Raises:
        ManifestError: If the text is not JSON or lacks a usable `name`.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ManifestError(f"'{source}' is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ManifestError(f"'{source}' must contain a JSON object.")

    try:
        return Manifest.model_validate(data)
    except ValidationError as e:
        raise ManifestError(f"'{source}' failed validation:\n{e}") from e


async def load_manifest(path: Path) -> Manifest:
    """Reads and parses a manifest file."""
    try:
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            raw = await f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(f"Could not read manifest '{path}': {e}") from e

    manifest = parse_manifest(raw, source=str(path))
    log.debug(f"Loaded manifest '{manifest.name}' from {path}")
    return manifest
