"""Style pipeline options and transform-chain selection."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

V3_PLUGIN = "tailwindcss"
V4_PLUGIN = "@tailwindcss/postcss"
VENDOR_PREFIX_PLUGIN = "autoprefixer"


class UtilityFramework(str, Enum):
    V3_CONFIG = "v3-config"
    V4_ENABLED = "v4-enabled"
    AUTO_DETECT = "auto-detect"


@dataclass(frozen=True)
class CssPlugin:
    """A CSS transform plugin, named by the module that provides it."""

    name: str
    options: Optional[Mapping[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "options": dict(self.options) if self.options is not None else None}


class StyleOptions(BaseModel):
    enable_vendor_prefixing: bool = True
    utility_framework: Optional[UtilityFramework] = None
    framework_config: Optional[Dict[str, Any]] = Field(
        default=None, description="Utility framework configuration object (v3 only)."
    )

    model_config = ConfigDict(extra="forbid")

    def resolve_framework(self, dependency_dir: Path) -> Optional[UtilityFramework]:
        """Return the single active framework variant, rejecting conflicts."""

        framework = self.utility_framework
        has_config = self.framework_config is not None

        if framework is UtilityFramework.V4_ENABLED and has_config:
            raise ConfigurationError(
                "Only one of utility_framework='v4-enabled' or framework_config (for v3) should be set"
            )
        if framework is UtilityFramework.V3_CONFIG and not has_config:
            raise ConfigurationError("utility_framework='v3-config' requires framework_config")
        if framework is None:
            return UtilityFramework.V3_CONFIG if has_config else None
        if framework is UtilityFramework.AUTO_DETECT:
            return _detect_framework(dependency_dir, has_config=has_config)
        return framework


def _detect_framework(dependency_dir: Path, *, has_config: bool) -> Optional[UtilityFramework]:
    if has_config:
        detected = UtilityFramework.V3_CONFIG if (dependency_dir / V3_PLUGIN).is_dir() else None
    elif (dependency_dir / V4_PLUGIN).is_dir():
        detected = UtilityFramework.V4_ENABLED
    else:
        detected = None
    logger.debug(f"Utility framework auto-detect in {dependency_dir}: {detected.value if detected else 'none'}")
    return detected


def build_plugin_chain(options: StyleOptions, framework: Optional[UtilityFramework]) -> List[CssPlugin]:
    """Framework plugin first, vendor prefixing last."""

    plugins: List[CssPlugin] = []
    if framework is UtilityFramework.V3_CONFIG:
        plugins.append(CssPlugin(V3_PLUGIN, options.framework_config))
    elif framework is UtilityFramework.V4_ENABLED:
        plugins.append(CssPlugin(V4_PLUGIN))
    if options.enable_vendor_prefixing:
        plugins.append(CssPlugin(VENDOR_PREFIX_PLUGIN))
    return plugins


__all__ = [
    "CssPlugin",
    "StyleOptions",
    "UtilityFramework",
    "V3_PLUGIN",
    "V4_PLUGIN",
    "VENDOR_PREFIX_PLUGIN",
    "build_plugin_chain",
]
