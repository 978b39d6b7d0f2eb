"""Command-line entry point for asset builds."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import yaml

from .errors import AssetBuildError, TestRunFailure
from .manifest import DEFAULT_PATTERN, generate_manifest
from .scripts import build_scripts, watch_scripts
from .settings import BuildSettings
from .styles import StyleOptions, UtilityFramework, build_styles
from .testing import RunnerFlags, run_tests

logger = logging.getLogger(__name__)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = BuildSettings.from_env(
        env_file=args.env_file,
        production=args.production,
        build_root=Path(args.build_root) if args.build_root else None,
    )

    handlers = {
        "styles": _handle_styles,
        "scripts": _handle_scripts,
        "manifest": _handle_manifest,
        "test": _handle_test,
    }
    try:
        return asyncio.run(handlers[args.command](args, settings))
    except TestRunFailure as exc:
        print(str(exc), file=sys.stderr)
        return exc.status
    except AssetBuildError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="aware-assets", description="Front-end asset build helpers.")
    parser.add_argument("--env-file", default=".env")
    parser.add_argument("--production", action=argparse.BooleanOptionalAction, default=None)
    parser.add_argument("--build-root")
    parser.add_argument("--log-level", default="info", choices=["debug", "info", "warning", "error"])
    subparsers = parser.add_subparsers(dest="command", required=True)

    styles = subparsers.add_parser("styles", help="Build CSS bundles from Sass or CSS inputs.")
    styles.add_argument("inputs", nargs="+")
    styles.add_argument("--no-autoprefixer", dest="autoprefixer", action="store_false")
    styles.add_argument("--tailwind", choices=[item.value for item in UtilityFramework])
    styles.add_argument("--tailwind-config", help="YAML or JSON file with a Tailwind v3 config object.")

    scripts = subparsers.add_parser("scripts", help="Build JS bundles from a bundle config.")
    scripts.add_argument("config")
    scripts.add_argument("--watch", action="store_true", help="Rebuild when sources change.")

    manifest = subparsers.add_parser("manifest", help="Generate the cache-busting manifest.")
    manifest.add_argument("--pattern", default=DEFAULT_PATTERN)
    manifest.add_argument("--output")

    test = subparsers.add_parser("test", help="Build the test bundle and run it.")
    test.add_argument("--bootstrap", required=True)
    test.add_argument("--bundle-config", required=True)
    test.add_argument("--tests-pattern", required=True)
    test.add_argument("--output-dir")
    test.add_argument("--karma-config")
    test.add_argument("--vitest-config")
    test.add_argument("--grep")
    test.add_argument("--live", "--watch", dest="live", action="store_true")

    return parser


async def _handle_styles(args: argparse.Namespace, settings: BuildSettings) -> int:
    framework_config = _read_mapping(args.tailwind_config) if args.tailwind_config else None
    options = StyleOptions(
        enable_vendor_prefixing=args.autoprefixer,
        utility_framework=args.tailwind,
        framework_config=framework_config,
    )
    outputs = await build_styles(args.inputs, options, settings=settings)
    _print_json({"mode": settings.mode, "outputs": [str(path) for path in outputs]})
    return 0


async def _handle_scripts(args: argparse.Namespace, settings: BuildSettings) -> int:
    if not args.watch:
        await build_scripts(args.config, settings=settings)
        _print_json({"mode": settings.mode, "config": args.config, "status": "built"})
        return 0

    await watch_scripts(args.config, settings=settings)
    logger.info("Watching for changes. Press Ctrl+C to stop.")
    await asyncio.Event().wait()
    return 0


async def _handle_manifest(args: argparse.Namespace, settings: BuildSettings) -> int:
    manifest_path = Path(args.output) if args.output else settings.manifest_path
    manifest = await generate_manifest(args.pattern, manifest_path)
    _print_json({"manifest_path": str(manifest_path), "manifest": manifest})
    return 0


async def _handle_test(args: argparse.Namespace, settings: BuildSettings) -> int:
    await run_tests(
        bootstrap_file=args.bootstrap,
        bundle_config=args.bundle_config,
        tests_pattern=args.tests_pattern,
        output_dir=args.output_dir,
        karma_config=args.karma_config,
        vitest_config=args.vitest_config,
        flags=RunnerFlags(grep=args.grep, live=args.live),
        settings=settings,
    )
    return 0


def _read_mapping(path: str) -> Dict[str, Any]:
    payload = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise AssetBuildError(f"{path} must contain a mapping")
    return payload


def _print_json(payload: Dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2))


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
