"""Front-end asset build helpers: styles, scripts, manifests, and test bundles."""

__version__ = "0.1.0"
from .errors import AssetBuildError, CompileError, ConfigurationError, TestRunFailure, WatchCycleError
from .manifest import generate_manifest, load_manifest
from .scripts import BuildConfig, build_scripts, load_build_configs, watch_scripts
from .settings import BuildSettings
from .styles import StyleOptions, UtilityFramework, build_styles
from .testing import RunnerFlags, parse_runner_flags, run_tests

__all__ = [
    "__version__",
    "AssetBuildError",
    "BuildConfig",
    "BuildSettings",
    "CompileError",
    "ConfigurationError",
    "RunnerFlags",
    "StyleOptions",
    "TestRunFailure",
    "UtilityFramework",
    "WatchCycleError",
    "build_scripts",
    "build_styles",
    "generate_manifest",
    "load_build_configs",
    "load_manifest",
    "parse_runner_flags",
    "run_tests",
    "watch_scripts",
]
