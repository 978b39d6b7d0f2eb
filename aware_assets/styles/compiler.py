"""Style-language compilation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Sequence

from ..errors import CompileError

STYLE_LANGUAGE_SUFFIXES = (".scss", ".sass")


@dataclass(slots=True)
class CompiledStyle:
    """CSS produced for one entry point, with its source map if any."""

    css: str
    source_map: Optional[str] = None


class StyleCompiler(Protocol):
    def compile(
        self,
        source: Path,
        *,
        include_paths: Sequence[Path],
        minify: bool,
        map_path: Path,
    ) -> CompiledStyle:  # pragma: no cover - interface
        ...


def is_style_language(path: Path) -> bool:
    return path.suffix.lower() in STYLE_LANGUAGE_SUFFIXES


class SassCompiler:
    """Compile Sass/SCSS entry points with libsass."""

    def compile(
        self,
        source: Path,
        *,
        include_paths: Sequence[Path],
        minify: bool,
        map_path: Path,
    ) -> CompiledStyle:
        import sass

        try:
            css, source_map = sass.compile(
                filename=str(source),
                include_paths=[str(path) for path in include_paths],
                output_style="compressed" if minify else "expanded",
                source_map_filename=str(map_path),
                output_filename_hint=str(map_path.with_suffix("")),
                source_map_contents=True,
                # The pipeline appends its own annotation after the transform chain.
                omit_source_map_url=True,
            )
        except sass.CompileError as exc:
            raise CompileError(str(exc), source=source) from exc
        return CompiledStyle(css=css, source_map=source_map)


__all__ = ["CompiledStyle", "SassCompiler", "StyleCompiler", "STYLE_LANGUAGE_SUFFIXES", "is_style_language"]
