"""Style pipeline: compile, transform, and write CSS bundles."""

from .compiler import CompiledStyle, SassCompiler, StyleCompiler, is_style_language
from .options import CssPlugin, StyleOptions, UtilityFramework, build_plugin_chain
from .pipeline import build_styles
from .transform import CssTransformer, PostcssTransformer, TransformResult

__all__ = [
    "CompiledStyle",
    "CssPlugin",
    "CssTransformer",
    "PostcssTransformer",
    "SassCompiler",
    "StyleCompiler",
    "StyleOptions",
    "TransformResult",
    "UtilityFramework",
    "build_plugin_chain",
    "build_styles",
    "is_style_language",
]
