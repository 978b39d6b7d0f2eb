from __future__ import annotations

import asyncio
import logging
import os
import signal
import sys
from pathlib import Path

import pytest

from aware_assets.errors import ConfigurationError, TestRunFailure
from aware_assets.settings import BuildSettings
from aware_assets.testing.backends import INTERRUPTED_STATUS, KarmaBackend, VitestBackend, build_backend, supervise


def test_karma_command(settings: BuildSettings, workspace: Path) -> None:
    backend = KarmaBackend("karma.conf.js", settings)

    command = backend.command(single_run=True)

    assert command[0] == str(Path("node_modules/.bin/karma"))
    assert command[1:] == ["start", str(workspace.resolve() / "karma.conf.js"), "--single-run"]
    assert backend.arguments(single_run=False)[-1] == "--no-single-run"


def test_vitest_command(settings: BuildSettings) -> None:
    backend = VitestBackend("vitest.config.mjs", settings)

    assert backend.arguments(single_run=True)[:2] == ["run", "--config"]
    assert backend.arguments(single_run=False)[0] == "watch"


def test_karma_wins_when_both_configs_given(settings: BuildSettings, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="aware_assets.testing.backends"):
        backend = build_backend(settings=settings, karma_config="karma.conf.js", vitest_config="vitest.config.mjs")

    assert isinstance(backend, KarmaBackend)
    assert "using Karma" in caplog.text


def test_vitest_selected_alone(settings: BuildSettings) -> None:
    assert isinstance(build_backend(settings=settings, vitest_config="vitest.config.mjs"), VitestBackend)


def test_no_runner_config(settings: BuildSettings) -> None:
    with pytest.raises(ConfigurationError):
        build_backend(settings=settings)


def test_missing_runner_binary(settings: BuildSettings) -> None:
    backend = KarmaBackend("karma.conf.js", settings)

    with pytest.raises(ConfigurationError, match="karma is not installed"):
        asyncio.run(backend.run(single_run=True))


def test_supervise_returns_exit_status() -> None:
    async def scenario() -> int:
        process = await asyncio.create_subprocess_exec(sys.executable, "-c", "raise SystemExit(4)")
        return await supervise(process, grace_period=5)

    assert asyncio.run(scenario()) == 4


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals")
def test_supervise_kills_runner_that_ignores_interrupt() -> None:
    script = (
        "import signal, sys, time\n"
        "signal.signal(signal.SIGINT, signal.SIG_IGN)\n"
        "print('ready', flush=True)\n"
        "time.sleep(30)\n"
    )

    async def scenario() -> None:
        process = await asyncio.create_subprocess_exec(
            sys.executable, "-c", script, stdout=asyncio.subprocess.PIPE
        )
        assert process.stdout is not None
        await process.stdout.readline()
        asyncio.get_running_loop().call_soon(os.kill, os.getpid(), signal.SIGINT)
        try:
            await supervise(process, grace_period=0.3)
        finally:
            assert process.returncode is not None

    with pytest.raises(TestRunFailure) as excinfo:
        asyncio.run(scenario())

    assert excinfo.value.status == INTERRUPTED_STATUS
