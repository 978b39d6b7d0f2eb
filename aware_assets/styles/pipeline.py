"""Build CSS bundles from Sass or plain CSS entry points."""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from pathlib import Path
from typing import List, Optional, Sequence

from ..errors import ConfigurationError
from ..settings import BuildSettings
from ..utils import relative_posix, write_text_atomic
from .compiler import CompiledStyle, SassCompiler, StyleCompiler, is_style_language
from .options import CssPlugin, StyleOptions, build_plugin_chain
from .transform import CssTransformer, PostcssTransformer

logger = logging.getLogger(__name__)


def output_path_for(source: Path, out_dir: Path) -> Path:
    return out_dir / f"{source.stem}.css"


def source_map_path_for(output: Path) -> Path:
    return output.with_name(output.name + ".map")


async def build_styles(
    inputs: Sequence[Path | str],
    options: Optional[StyleOptions] = None,
    *,
    settings: Optional[BuildSettings] = None,
    compiler: Optional[StyleCompiler] = None,
    transformer: Optional[CssTransformer] = None,
) -> List[Path]:
    """Build one CSS bundle per input.

    Each input is written to ``<build_root>/styles/<name>.css`` where ``<name>``
    is the input's basename without extension, together with a ``.map`` file
    when a source map is available. Inputs are processed concurrently; the first
    failure propagates once every started input has settled.

    Returns the CSS output paths in input order.
    """

    settings = settings or BuildSettings.from_env()
    options = options or StyleOptions()
    sources = [Path(value) for value in inputs]

    framework = options.resolve_framework(settings.dependency_dir)
    plugins = build_plugin_chain(options, framework)
    out_dir = settings.styles_dir
    _check_unique_outputs(sources, out_dir)

    out_dir.mkdir(parents=True, exist_ok=True)
    compiler = compiler or SassCompiler()
    transformer = transformer or PostcssTransformer(settings)

    results = await asyncio.gather(
        *(
            _build_one(
                source,
                out_dir=out_dir,
                include_dir=settings.dependency_dir,
                minify=settings.production,
                plugins=plugins,
                compiler=compiler,
                transformer=transformer,
            )
            for source in sources
        ),
        return_exceptions=True,
    )
    outputs: List[Path] = []
    for result in results:
        if isinstance(result, BaseException):
            raise result
        outputs.append(result)
    return outputs


def _check_unique_outputs(sources: Sequence[Path], out_dir: Path) -> None:
    counts = Counter(output_path_for(source, out_dir).name for source in sources)
    duplicates = sorted(name for name, count in counts.items() if count > 1)
    if duplicates:
        raise ConfigurationError(f"Style inputs map to the same output file: {', '.join(duplicates)}")


async def _build_one(
    source: Path,
    *,
    out_dir: Path,
    include_dir: Path,
    minify: bool,
    plugins: Sequence[CssPlugin],
    compiler: StyleCompiler,
    transformer: CssTransformer,
) -> Path:
    output = output_path_for(source, out_dir)
    map_path = source_map_path_for(output)

    if is_style_language(source):
        compiled = await asyncio.to_thread(
            compiler.compile,
            source,
            include_paths=[source.parent, include_dir],
            minify=minify,
            map_path=map_path,
        )
    else:
        compiled = CompiledStyle(css=await asyncio.to_thread(source.read_text, encoding="utf-8"))

    css, source_map = compiled.css, compiled.source_map
    if plugins:
        result = await transformer.transform(
            css,
            plugins,
            source=source,
            target=output,
            prev_map=source_map,
        )
        css = result.css
        source_map = result.source_map if source_map is not None else None

    write_style_output(output, css, map_path, source_map)
    logger.debug(f"Wrote {output}" + (f" and {map_path.name}" if source_map is not None else ""))
    return output


def write_style_output(output: Path, css: str, map_path: Path, source_map: Optional[str]) -> None:
    """Write a CSS file and its source map as a pair.

    The style compiler does not annotate its output, so the ``sourceMappingURL``
    comment is appended here, relative to the CSS file's directory. Without a
    map no comment is written and any stale map is removed.
    """

    if source_map is None:
        write_text_atomic(output, css)
        map_path.unlink(missing_ok=True)
        return

    # URI-encoding the reference would be required for names outside [0-9a-zA-Z-_.].
    source_mapping_url = relative_posix(map_path, output.parent)
    write_text_atomic(map_path, source_map)
    write_text_atomic(output, f"{css.rstrip()}\n/*# sourceMappingURL={source_mapping_url} */\n")


__all__ = ["build_styles", "output_path_for", "source_map_path_for", "write_style_output"]
