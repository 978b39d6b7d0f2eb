"""Test bundle assembly and execution."""

from .backends import ExecutionBackend, KarmaBackend, VitestBackend, build_backend
from .entry import TEST_ENTRY_FILENAME, collect_test_files, discover_test_files, render_test_entry, write_test_entry
from .runner import RunnerFlags, parse_runner_flags, run_tests

__all__ = [
    "ExecutionBackend",
    "KarmaBackend",
    "RunnerFlags",
    "TEST_ENTRY_FILENAME",
    "VitestBackend",
    "build_backend",
    "collect_test_files",
    "discover_test_files",
    "parse_runner_flags",
    "render_test_entry",
    "run_tests",
    "write_test_entry",
]
