"""Content-hash manifest for cache-busting asset URLs.

The manifest maps asset paths, relative to the manifest's own directory, to
the same path with a short content fingerprint appended as a query string::

    {
      "scripts/app.bundle.js": "scripts/app.bundle.js?abc123",
      "styles/app.css": "styles/app.css?def456"
    }
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Dict, List, Tuple

from pydantic import RootModel, field_validator
from wcmatch import glob as wcglob

from .utils import compute_fingerprint, relative_posix, write_json

logger = logging.getLogger(__name__)

DEFAULT_PATTERN = "build/**/*.{css,js,map}"
DEFAULT_MANIFEST_PATH = Path("build/manifest.json")

_GLOB_FLAGS = wcglob.GLOBSTAR | wcglob.BRACE


class AssetManifest(RootModel[Dict[str, str]]):
    """Validated manifest payload."""

    @field_validator("root")
    @classmethod
    def _values_reference_keys(cls, value: Dict[str, str]) -> Dict[str, str]:
        for key, url in value.items():
            path, _, fingerprint = url.partition("?")
            if path != key or not fingerprint:
                raise ValueError(f"Manifest entry '{key}' must map to '{key}?<fingerprint>' (got '{url}')")
        return value


def match_files(pattern: str) -> List[Path]:
    """Files matching a minimatch-style pattern, evaluated now."""

    return sorted(Path(match) for match in wcglob.glob(pattern, flags=_GLOB_FLAGS) if Path(match).is_file())


async def generate_manifest(
    pattern: str = DEFAULT_PATTERN,
    manifest_path: Path | str = DEFAULT_MANIFEST_PATH,
) -> Dict[str, str]:
    """Generate and write a manifest that maps asset paths to cache-busted URLs.

    Returns the data that was written to the manifest.
    """

    manifest_file = Path(manifest_path)
    manifest_dir = manifest_file.parent

    entries = await asyncio.gather(*(_manifest_entry(file, manifest_dir) for file in match_files(pattern)))
    manifest = dict(sorted(entries))
    write_json(manifest, manifest_file)
    logger.info(f"Wrote {len(manifest)} entries to {manifest_file}")
    return manifest


async def _manifest_entry(file: Path, manifest_dir: Path) -> Tuple[str, str]:
    relative_path = relative_posix(file, manifest_dir)
    # Fingerprints are computed in worker threads.
    fingerprint = await asyncio.to_thread(compute_fingerprint, file)
    return relative_path, f"{relative_path}?{fingerprint}"


def load_manifest(path: Path | str) -> Dict[str, str]:
    """Load and validate a manifest from JSON."""

    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    return AssetManifest.model_validate(payload).root


__all__ = [
    "AssetManifest",
    "DEFAULT_MANIFEST_PATH",
    "DEFAULT_PATTERN",
    "generate_manifest",
    "load_manifest",
    "match_files",
]
