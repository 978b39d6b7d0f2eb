"""Synthesized entry module for the test bundle."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional, Sequence

from ..manifest import match_files
from ..utils import write_text

TEST_ENTRY_FILENAME = "test-inputs.js"


def discover_test_files(tests_pattern: str, *, grep: Optional[str] = None) -> List[str]:
    """Test files matching ``tests_pattern``, filtered by regex, in lexicographic order."""

    paths = [path.as_posix() for path in match_files(tests_pattern)]
    if grep:
        expression = re.compile(grep)
        paths = [path for path in paths if expression.search(path)]
    return sorted(paths)


def collect_test_files(bootstrap_file: str, tests_pattern: str, *, grep: Optional[str] = None) -> List[str]:
    """The bootstrap file followed by the discovered test files."""

    return [bootstrap_file, *discover_test_files(tests_pattern, grep=grep)]


def render_test_entry(files: Sequence[str]) -> str:
    # Imports resolve from <output_dir>, two levels below the project root.
    return "\n".join(f'import "../../{path}";' for path in files)


def write_test_entry(output_dir: Path, files: Sequence[str]) -> Path:
    entry_path = Path(output_dir) / TEST_ENTRY_FILENAME
    write_text(entry_path, render_test_entry(files))
    return entry_path


__all__ = [
    "TEST_ENTRY_FILENAME",
    "collect_test_files",
    "discover_test_files",
    "render_test_entry",
    "write_test_entry",
]
