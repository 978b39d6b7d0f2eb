from __future__ import annotations

import json
from pathlib import Path

import pytest

from aware_assets.settings import BuildSettings


@pytest.fixture()
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An empty project directory used as the working directory."""

    root = tmp_path / "project"
    root.mkdir()
    monkeypatch.chdir(root)
    return root


@pytest.fixture()
def settings(workspace: Path) -> BuildSettings:
    return BuildSettings(
        workspace_root=workspace,
        build_root=Path("build"),
        dependency_dir=Path("node_modules"),
    )


@pytest.fixture()
def bundle_config(workspace: Path) -> Path:
    path = workspace / "rollup.json"
    payload = [
        {"input": "src/app.js", "output": {"file": "build/scripts/app.bundle.js", "format": "iife"}},
        {"input": "src/admin.js", "output": {"file": "build/scripts/admin.bundle.js"}},
    ]
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path
