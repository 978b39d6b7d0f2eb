"""Bundling engine contract and the Rollup-backed implementation."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Optional, Protocol, Sequence, Tuple

from ..errors import CompileError
from ..node import ROLLUP_BRIDGE, decode_message, encode_message, spawn_bridge
from ..settings import BuildSettings
from .config import BuildConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BundleWarning:
    message: str
    code: Optional[str] = None
    url: Optional[str] = None

    def __str__(self) -> str:
        return self.message


WarningHandler = Callable[[BundleWarning], None]


class WatchEventKind(str, Enum):
    CYCLE_START = "cycle-start"
    BUNDLE_GENERATED = "bundle-generated"
    BUILD_ERROR = "build-error"
    CYCLE_END = "cycle-end"


class BundleHandle(Protocol):
    """Resources held by a generated bundle; must be released once seen."""

    def close(self) -> Optional[Awaitable[None]]:  # pragma: no cover - interface
        ...


@dataclass
class WatchEvent:
    kind: WatchEventKind
    result: Optional[BundleHandle] = None
    error: Optional[BaseException] = None
    details: Dict[str, Any] = field(default_factory=dict)


class BundlingEngine(Protocol):
    async def build(
        self, config: BuildConfig, *, on_warning: WarningHandler, **options: Any
    ) -> None:  # pragma: no cover - interface
        ...

    def watch(
        self, configs: Sequence[BuildConfig], *, on_warning: WarningHandler, **options: Any
    ) -> AsyncIterator[WatchEvent]:  # pragma: no cover - interface
        ...


def parse_watch_event(message: Dict[str, Any], stdin: Optional[asyncio.StreamWriter] = None) -> Optional[WatchEvent]:
    """Translate one bridge message into a watch event.

    Returns None for messages that are not lifecycle events.
    """

    name = message.get("event")
    if name == WatchEventKind.CYCLE_START.value:
        return WatchEvent(kind=WatchEventKind.CYCLE_START)
    if name == WatchEventKind.CYCLE_END.value:
        return WatchEvent(kind=WatchEventKind.CYCLE_END)
    if name == WatchEventKind.BUNDLE_GENERATED.value:
        details = {key: value for key, value in message.items() if key != "event"}
        handle = _BridgeBundleHandle(int(message["id"]), stdin) if stdin is not None else None
        return WatchEvent(kind=WatchEventKind.BUNDLE_GENERATED, result=handle, details=details)
    if name == WatchEventKind.BUILD_ERROR.value:
        error = CompileError(str(message.get("message") or "unknown error"), source=message.get("id"))
        details = {"frame": message.get("frame")} if message.get("frame") else {}
        return WatchEvent(kind=WatchEventKind.BUILD_ERROR, error=error, details=details)
    return None


def parse_warning(message: Dict[str, Any]) -> Optional[BundleWarning]:
    if message.get("event") != "warning":
        return None
    return BundleWarning(
        message=str(message.get("message", "")),
        code=message.get("code"),
        url=message.get("url"),
    )


class _BridgeBundleHandle:
    """Releases a bundle held by the bridge process."""

    def __init__(self, bundle_id: int, stdin: asyncio.StreamWriter) -> None:
        self.bundle_id = bundle_id
        self._stdin = stdin

    async def close(self) -> None:
        if self._stdin.is_closing():
            return
        self._stdin.write(encode_message({"close": self.bundle_id}))
        await self._stdin.drain()


class RollupEngine:
    """Drive Rollup through the bundled Node bridge."""

    def __init__(self, settings: BuildSettings) -> None:
        self.settings = settings

    async def build(self, config: BuildConfig, *, on_warning: WarningHandler, **options: Any) -> None:
        process = await spawn_bridge(self.settings, ROLLUP_BRIDGE, "build")
        stdin, stdout, stderr_stream = _pipes(process)
        stdin.write(encode_message({"configs": [config.to_engine_payload(options)]}))
        await stdin.drain()
        stdin.close()

        error: Optional[str] = None
        stderr_task = asyncio.ensure_future(stderr_stream.read())
        async for line in stdout:
            message = decode_message(line)
            if message is None:
                continue
            warning = parse_warning(message)
            if warning is not None:
                on_warning(warning)
            elif message.get("event") == "error":
                error = str(message.get("message"))
        stderr = (await stderr_task).decode("utf-8", errors="replace").strip()
        returncode = await process.wait()
        if returncode != 0:
            raise CompileError(error or stderr or f"Bundler exited with status {returncode}")

    async def watch(
        self, configs: Sequence[BuildConfig], *, on_warning: WarningHandler, **options: Any
    ) -> AsyncIterator[WatchEvent]:
        process = await spawn_bridge(self.settings, ROLLUP_BRIDGE, "watch")
        stdin, stdout, stderr_stream = _pipes(process)
        stdin.write(encode_message({"configs": [config.to_engine_payload(options) for config in configs]}))
        await stdin.drain()
        stderr_task = asyncio.ensure_future(_forward_stderr(stderr_stream))

        try:
            async for line in stdout:
                message = decode_message(line)
                if message is None:
                    continue
                warning = parse_warning(message)
                if warning is not None:
                    on_warning(warning)
                    continue
                event = parse_watch_event(message, stdin)
                if event is not None:
                    yield event
                elif message.get("event") == "error":
                    logger.error(f"Bundler watch process failed: {message.get('message')}")
            returncode = await process.wait()
            logger.info(f"Bundler watch process exited with status {returncode}")
        finally:
            stderr_task.cancel()
            if process.returncode is None:
                process.terminate()


def _pipes(
    process: asyncio.subprocess.Process,
) -> Tuple[asyncio.StreamWriter, asyncio.StreamReader, asyncio.StreamReader]:
    if process.stdin is None or process.stdout is None or process.stderr is None:
        raise CompileError("Bundler bridge started without piped stdio")
    return process.stdin, process.stdout, process.stderr


async def _forward_stderr(stream: asyncio.StreamReader) -> None:
    async for line in stream:
        text = line.decode("utf-8", errors="replace").rstrip()
        if text:
            logger.warning(f"bundler: {text}")


__all__ = [
    "BundleHandle",
    "BundleWarning",
    "BundlingEngine",
    "RollupEngine",
    "WarningHandler",
    "WatchEvent",
    "WatchEventKind",
    "parse_warning",
    "parse_watch_event",
]
