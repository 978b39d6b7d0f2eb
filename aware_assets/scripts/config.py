"""Bundle configuration files."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import ConfigurationError


class PluginSpec(BaseModel):
    """A bundler plugin, named by the module that provides it."""

    name: str
    options: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(extra="forbid")


class OutputOptions(BaseModel):
    file: Optional[str] = None
    dir: Optional[str] = None
    format: str = "es"
    sourcemap: Union[bool, str] = True

    model_config = ConfigDict(extra="allow")


class BuildConfig(BaseModel):
    """One bundle: an entry, its output target(s), and engine-specific options."""

    input: Union[str, List[str], Dict[str, str]]
    output: Union[OutputOptions, List[OutputOptions]]
    plugins: List[PluginSpec] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow")

    @property
    def outputs(self) -> List[OutputOptions]:
        return self.output if isinstance(self.output, list) else [self.output]

    def to_engine_payload(self, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        payload = self.model_dump(mode="json", exclude_none=True)
        payload.update(overrides or {})
        return payload


def load_build_configs(path: Path | str) -> List[BuildConfig]:
    """Load a YAML or JSON config file holding one config or a list of them."""

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Bundle config not found: {config_path}")
    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid bundle config {config_path}: {exc}") from exc

    entries = raw if isinstance(raw, list) else [raw]
    if not entries or any(not isinstance(entry, dict) for entry in entries):
        raise ConfigurationError(f"Bundle config {config_path} must contain a mapping or a list of mappings")
    try:
        return [BuildConfig.model_validate(entry) for entry in entries]
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid bundle config {config_path}: {exc}") from exc


__all__ = ["BuildConfig", "OutputOptions", "PluginSpec", "load_build_configs"]
