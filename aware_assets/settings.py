"""Build settings threaded explicitly through every pipeline call."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field

PRODUCTION_MODE = "production"


class BuildSettings(BaseModel):
    """Process-wide build configuration, read once at the start of a call."""

    production: bool = Field(default=False, description="Minify style and script output.")
    workspace_root: Path = Field(default=Path("."), description="Directory external tools run from.")
    build_root: Path = Path("build")
    dependency_dir: Path = Field(default=Path("node_modules"), description="Shared dependency directory.")
    node: str = Field(default="node", description="Node.js executable used by the bridges.")
    interrupt_grace_period: float = Field(default=5.0, ge=0)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def styles_dir(self) -> Path:
        return self.build_root / "styles"

    @property
    def scripts_dir(self) -> Path:
        return self.build_root / "scripts"

    @property
    def manifest_path(self) -> Path:
        return self.build_root / "manifest.json"

    @property
    def mode(self) -> str:
        return PRODUCTION_MODE if self.production else "development"

    def node_environment(self, base: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """Environment for spawned Node processes.

        Only the production signal is forced; any other NODE_ENV the caller set is
        left untouched.
        """

        env = dict(os.environ if base is None else base)
        if self.production:
            env["NODE_ENV"] = PRODUCTION_MODE
        return env

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        *,
        env_file: Optional[Path | str] = None,
        **overrides: Any,
    ) -> "BuildSettings":
        """Build settings from the environment, layered over an optional .env file."""

        values: Dict[str, Optional[str]] = {}
        if env_file is not None and Path(env_file).exists():
            values.update(dotenv_values(env_file))
        values.update(os.environ if environ is None else environ)

        payload: Dict[str, Any] = {"production": values.get("NODE_ENV") == PRODUCTION_MODE}
        if values.get("AWARE_ASSETS_BUILD_ROOT"):
            payload["build_root"] = Path(str(values["AWARE_ASSETS_BUILD_ROOT"]))
        if values.get("AWARE_ASSETS_NODE"):
            payload["node"] = str(values["AWARE_ASSETS_NODE"])
        payload.update({key: value for key, value in overrides.items() if value is not None})
        return cls.model_validate(payload)


__all__ = ["BuildSettings", "PRODUCTION_MODE"]
