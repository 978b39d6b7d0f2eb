"""One-shot and watch-mode script bundling."""

from __future__ import annotations

import asyncio
import inspect
import logging
from enum import Enum
from pathlib import Path
from typing import Any, AsyncIterator, Dict, Mapping, Optional, Set

from ..errors import WatchCycleError
from ..settings import BuildSettings
from .config import load_build_configs
from .engine import BundleHandle, BundleWarning, BundlingEngine, RollupEngine, WatchEvent, WatchEventKind

logger = logging.getLogger(__name__)

# Sessions run for the life of the process; holding them here keeps their tasks alive.
_active_sessions: Set["WatchSession"] = set()


def log_bundle_warning(warning: BundleWarning) -> None:
    logger.info(f"Bundler warning: {warning.message} ({warning.url})")


def _engine_options(options: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    merged: Dict[str, Any] = {"on_warning": log_bundle_warning}
    merged.update(options or {})
    return merged


async def build_scripts(
    config_path: Path | str,
    options: Optional[Mapping[str, Any]] = None,
    *,
    settings: Optional[BuildSettings] = None,
    engine: Optional[BundlingEngine] = None,
) -> None:
    """Build every bundle described by a config file once.

    ``options`` are passed to the engine over a default ``on_warning`` handler;
    caller entries win.
    """

    settings = settings or BuildSettings.from_env()
    configs = load_build_configs(config_path)
    engine = engine or RollupEngine(settings)
    merged = _engine_options(options)
    await asyncio.gather(*(engine.build(config, **merged) for config in configs))


async def watch_scripts(
    config_path: Path | str,
    options: Optional[Mapping[str, Any]] = None,
    *,
    settings: Optional[BuildSettings] = None,
    engine: Optional[BundlingEngine] = None,
) -> None:
    """Build bundles and keep rebuilding them when sources change.

    Returns once the initial build completes. Later rebuilds run in the
    background for the life of the process.
    """

    settings = settings or BuildSettings.from_env()
    configs = load_build_configs(config_path)
    engine = engine or RollupEngine(settings)
    events = engine.watch(configs, **_engine_options(options))
    session = WatchSession(events)
    session.start()
    await session.ready


class WatchState(str, Enum):
    STARTING = "starting"
    BUILDING = "building"
    ERROR = "error"
    BUNDLE_READY = "bundle-ready"
    TERMINATED = "terminated"


class WatchSession:
    """Consume a watcher's event stream.

    ``ready`` settles once, on the first completed cycle. The stream keeps being
    consumed afterwards so that handles are released and lifecycle messages
    logged.
    """

    def __init__(self, events: AsyncIterator[WatchEvent]) -> None:
        self._events = events
        self._task: Optional[asyncio.Task[None]] = None
        self.state = WatchState.STARTING
        self.completed_cycles = 0
        self.ready: asyncio.Future[None] = asyncio.get_running_loop().create_future()

    def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.ensure_future(self._consume())
        _active_sessions.add(self)

    async def _consume(self) -> None:
        try:
            async for event in self._events:
                await self._handle(event)
        except Exception as exc:
            if not self.ready.done():
                self.ready.set_exception(exc)
            else:
                logger.exception("JS watch session failed")
        finally:
            self.state = WatchState.TERMINATED
            _active_sessions.discard(self)
            if not self.ready.done():
                self.ready.set_exception(WatchCycleError("JS watch session ended before the first build completed"))

    async def _handle(self, event: WatchEvent) -> None:
        if event.kind is WatchEventKind.CYCLE_START:
            self.state = WatchState.BUILDING
            logger.info("JS build starting...")
        elif event.kind is WatchEventKind.BUNDLE_GENERATED:
            self.state = WatchState.BUNDLE_READY
            if event.result is not None:
                try:
                    await _release(event.result)
                except Exception as exc:
                    logger.error(f"JS bundle release failed: {exc!r}")
        elif event.kind is WatchEventKind.BUILD_ERROR:
            self.state = WatchState.ERROR
            error = WatchCycleError(str(event.error))
            logger.error(f"JS build error: {error}")
        elif event.kind is WatchEventKind.CYCLE_END:
            self.completed_cycles += 1
            logger.info("JS build completed.")
            if not self.ready.done():
                self.ready.set_result(None)


async def _release(handle: BundleHandle) -> None:
    result = handle.close()
    if inspect.isawaitable(result):
        await result


__all__ = ["WatchSession", "WatchState", "build_scripts", "log_bundle_warning", "watch_scripts"]
