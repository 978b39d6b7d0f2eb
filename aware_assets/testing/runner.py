"""Build a bundle of tests and run it."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from ..errors import ConfigurationError, TestRunFailure
from ..scripts.engine import BundlingEngine
from ..scripts.pipeline import build_scripts, watch_scripts
from ..settings import BuildSettings
from .backends import ExecutionBackend, build_backend
from .entry import collect_test_files, write_test_entry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunnerFlags:
    grep: Optional[str] = None
    live: bool = False

    @property
    def single_run(self) -> bool:
        return not self.live


def parse_runner_flags(argv: Optional[Sequence[str]] = None) -> RunnerFlags:
    """Parse ``--grep`` and ``--live`` from command-line arguments.

    Unrecognized arguments belong to the host script and are ignored.
    """

    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument("--grep", help="Run only tests where filename matches a regex pattern")
    parser.add_argument(
        "--live",
        "--watch",
        dest="live",
        action="store_true",
        help="Continuously rebuild and run tests (default: false)",
    )
    args, _ = parser.parse_known_args(sys.argv[1:] if argv is None else list(argv))
    return RunnerFlags(grep=args.grep, live=args.live)


async def run_tests(
    *,
    bootstrap_file: str,
    bundle_config: Path | str,
    tests_pattern: str,
    output_dir: Optional[Path | str] = None,
    karma_config: Optional[Path | str] = None,
    vitest_config: Optional[Path | str] = None,
    flags: Optional[RunnerFlags] = None,
    settings: Optional[BuildSettings] = None,
    engine: Optional[BundlingEngine] = None,
    backend: Optional[ExecutionBackend] = None,
) -> None:
    """Build a bundle of tests and run it with Karma or Vitest.

    Args:
        bootstrap_file: Entry point that initializes the test environment; imported first.
        bundle_config: Bundle config that builds the test bundle from
            ``<output_dir>/test-inputs.js``.
        tests_pattern: Glob pattern selecting the test files to load.
        output_dir: Directory for the generated entry module. Defaults to
            ``<build_root>/scripts``.
        karma_config: Karma config file. Takes precedence over ``vitest_config``.
        vitest_config: Vitest config file.
        flags: ``--grep``/``--live`` values; parsed from ``sys.argv`` when omitted.

    Raises:
        TestRunFailure: The backend finished with a non-zero status.
    """

    if not bootstrap_file or not bundle_config or not tests_pattern:
        raise ConfigurationError("bootstrap_file, bundle_config and tests_pattern are required")
    settings = settings or BuildSettings.from_env()
    flags = flags or parse_runner_flags()
    backend = backend or build_backend(settings=settings, karma_config=karma_config, vitest_config=vitest_config)
    target_dir = Path(output_dir) if output_dir is not None else settings.scripts_dir

    test_files = collect_test_files(bootstrap_file, tests_pattern, grep=flags.grep)
    write_test_entry(target_dir, test_files)

    logger.info(f"Building test bundle... ({len(test_files)} files)")
    if flags.single_run:
        await build_scripts(bundle_config, settings=settings, engine=engine)
    else:
        await watch_scripts(bundle_config, settings=settings, engine=engine)

    logger.info(f"Starting {backend.name}...")
    status = await backend.run(single_run=flags.single_run)
    if status != 0:
        raise TestRunFailure(status, f"{backend.name} run failed with status {status}")


__all__ = ["RunnerFlags", "parse_runner_flags", "run_tests"]
