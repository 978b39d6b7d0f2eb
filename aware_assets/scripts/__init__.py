"""Script pipeline: one-shot builds and watch sessions."""

from .config import BuildConfig, OutputOptions, PluginSpec, load_build_configs
from .engine import BundleWarning, BundlingEngine, RollupEngine, WatchEvent, WatchEventKind
from .pipeline import WatchSession, WatchState, build_scripts, log_bundle_warning, watch_scripts

__all__ = [
    "BuildConfig",
    "BundleWarning",
    "BundlingEngine",
    "OutputOptions",
    "PluginSpec",
    "RollupEngine",
    "WatchEvent",
    "WatchEventKind",
    "WatchSession",
    "WatchState",
    "build_scripts",
    "load_build_configs",
    "log_bundle_warning",
    "watch_scripts",
]
