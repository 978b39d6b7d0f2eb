"""Shared helpers used by the asset pipelines."""

from __future__ import annotations

import hashlib
import json
import os
from pathlib import Path
from typing import Any, Optional

FINGERPRINT_LENGTH = 6


def compute_fingerprint(path: Path, *, length: int = FINGERPRINT_LENGTH) -> str:
    """Return the short SHA-1 fingerprint of a file's bytes."""

    digest = hashlib.sha1()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(1024 * 1024), b""):
            digest.update(chunk)
    return digest.hexdigest()[:length]


def relative_posix(path: Path, start: Path) -> str:
    """Path of ``path`` relative to directory ``start`` using forward slashes."""

    return Path(os.path.relpath(path.resolve(), start.resolve())).as_posix()


def write_json(payload: Any, path: Path) -> None:
    """Write JSON payload to disk with canonical formatting."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def write_text(path: Path, content: str, *, newline: Optional[str] = None) -> None:
    """Write text to file ensuring parent directories exist."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8", newline=newline)


def write_text_atomic(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(path.name + ".tmp")
    tmp_path.write_text(content, encoding="utf-8")
    tmp_path.replace(path)


__all__ = [
    "FINGERPRINT_LENGTH",
    "compute_fingerprint",
    "relative_posix",
    "write_json",
    "write_text",
    "write_text_atomic",
]
