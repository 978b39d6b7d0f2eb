"""CSS transform chain execution."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Sequence

from ..node import POSTCSS_BRIDGE, run_bridge
from ..settings import BuildSettings
from .options import CssPlugin


@dataclass(slots=True)
class TransformResult:
    css: str
    source_map: Optional[str] = None


class CssTransformer(Protocol):
    async def transform(
        self,
        css: str,
        plugins: Sequence[CssPlugin],
        *,
        source: Path,
        target: Path,
        prev_map: Optional[str],
    ) -> TransformResult:  # pragma: no cover - interface
        ...


class PostcssTransformer:
    """Run the plugin chain through PostCSS from the host project's dependencies."""

    def __init__(self, settings: BuildSettings) -> None:
        self.settings = settings

    async def transform(
        self,
        css: str,
        plugins: Sequence[CssPlugin],
        *,
        source: Path,
        target: Path,
        prev_map: Optional[str],
    ) -> TransformResult:
        payload = {
            "css": css,
            "from": str(source),
            "to": str(target),
            "map": prev_map is not None,
            "prevMap": prev_map,
            "plugins": [plugin.to_dict() for plugin in plugins],
        }
        reply = await run_bridge(self.settings, POSTCSS_BRIDGE, payload, source=source)
        return TransformResult(css=reply["css"], source_map=reply.get("map"))


__all__ = ["CssTransformer", "PostcssTransformer", "TransformResult"]
