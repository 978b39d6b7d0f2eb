"""Error taxonomy shared by the asset pipelines."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class AssetBuildError(RuntimeError):
    """Base class for failures raised by aware-assets."""


class ConfigurationError(AssetBuildError):
    """Raised when options are missing or mutually exclusive."""


class CompileError(AssetBuildError):
    """Raised when an external engine fails to compile an input."""

    def __init__(self, message: str, *, source: Optional[Path | str] = None) -> None:
        self.source = Path(source) if source is not None else None
        if self.source is not None:
            message = f"{self.source}: {message}"
        super().__init__(message)


class WatchCycleError(AssetBuildError):
    """A failure within a single watch cycle.

    The watch session logs these and keeps running; they only surface to callers
    when the session ends before its first build completed.
    """


class TestRunFailure(AssetBuildError):
    """Raised when the test-execution backend exits with a non-zero status."""

    __test__ = False

    def __init__(self, status: int, message: Optional[str] = None) -> None:
        self.status = status
        super().__init__(message or f"Test run failed with status {status}")


__all__ = [
    "AssetBuildError",
    "CompileError",
    "ConfigurationError",
    "TestRunFailure",
    "WatchCycleError",
]
