"""Helpers for driving the bundled Node.js bridge scripts."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ..errors import CompileError
from ..settings import BuildSettings

logger = logging.getLogger(__name__)

BRIDGE_DIR = Path(__file__).resolve().parent
POSTCSS_BRIDGE = "postcss_bridge.mjs"
ROLLUP_BRIDGE = "rollup_bridge.mjs"
# Reply lines carry whole stylesheets and error frames.
STREAM_LIMIT = 16 * 1024 * 1024


def bridge_script(name: str) -> Path:
    """Return the path of a bundled bridge script."""

    path = BRIDGE_DIR / name
    if not path.exists():
        raise FileNotFoundError(f"Bridge script not found: {path}")
    return path


def encode_message(payload: Mapping[str, Any]) -> bytes:
    return (json.dumps(payload) + "\n").encode("utf-8")


def decode_message(line: bytes | str) -> Optional[Dict[str, Any]]:
    """Parse one newline-delimited JSON message.

    Returns None for lines that are not JSON objects (stray console output from
    plugins shares the bridge's stdout).
    """

    text = line.decode("utf-8", errors="replace") if isinstance(line, bytes) else line
    text = text.strip()
    if not text:
        return None
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        logger.debug(f"node: {text}")
        return None
    return payload if isinstance(payload, dict) else None


async def spawn_bridge(settings: BuildSettings, script: str, *args: str) -> asyncio.subprocess.Process:
    """Start a bridge script with piped stdio in the workspace root."""

    command = [settings.node, str(bridge_script(script)), *args]
    logger.debug(f"Spawning {' '.join(command)}")
    try:
        return await asyncio.create_subprocess_exec(
            *command,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(settings.workspace_root),
            env=settings.node_environment(),
            limit=STREAM_LIMIT,
        )
    except FileNotFoundError as exc:
        raise CompileError(f"Node.js executable '{settings.node}' not found") from exc


async def run_bridge(
    settings: BuildSettings,
    script: str,
    payload: Mapping[str, Any],
    *,
    source: Optional[Path] = None,
) -> Dict[str, Any]:
    """Run a request/reply bridge and return its JSON reply."""

    process = await spawn_bridge(settings, script)
    stdout_b, stderr_b = await process.communicate(encode_message(payload))
    stderr = stderr_b.decode("utf-8", errors="replace").strip() if stderr_b else ""
    if process.returncode != 0:
        raise CompileError(stderr or f"{script} exited with status {process.returncode}", source=source)

    reply: Optional[Dict[str, Any]] = None
    for line in (stdout_b or b"").splitlines():
        message = decode_message(line)
        if message is not None:
            reply = message
    if reply is None:
        raise CompileError(f"{script} produced no reply", source=source)
    return reply


__all__ = [
    "BRIDGE_DIR",
    "POSTCSS_BRIDGE",
    "ROLLUP_BRIDGE",
    "bridge_script",
    "decode_message",
    "encode_message",
    "run_bridge",
    "spawn_bridge",
]
