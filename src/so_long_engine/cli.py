"""``so-long-check``: report the override decision for files on disk."""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence, TextIO

from so_long_engine.buffer import Buffer
from so_long_engine.engine import ConfigurationError, Settings
from so_long_engine.runtime import telemetry
from so_long_engine.session import create_default_session


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Show which files would open in the long-line fallback mode."
    )
    parser.add_argument("paths", nargs="+", help="Files to inspect")
    parser.add_argument("--threshold", type=int, help="Maximum permitted line length")
    parser.add_argument(
        "--max-lines", type=int, help="Number of lines inspected after comments"
    )
    parser.add_argument(
        "--target-mode",
        action="append",
        dest="target_modes",
        help="Mode eligible for override (repeatable; replaces the defaults)",
    )
    parser.add_argument(
        "--disabled", action="store_true", help="Run with the engine switched off"
    )
    parser.add_argument(
        "--log-preset",
        choices=("development", "production", "performance"),
        help="Telemetry preset",
    )
    return parser.parse_args(argv)


def _settings_from_args(args: argparse.Namespace) -> Settings:
    settings = Settings.from_env()
    changes: dict[str, object] = {}
    if args.threshold is not None:
        changes["threshold"] = args.threshold
    if args.max_lines is not None:
        changes["max_lines"] = args.max_lines
    if args.target_modes:
        changes["target_modes"] = args.target_modes
    if args.disabled:
        changes["enabled"] = False
    if changes:
        settings.update(**changes)
    return settings


def describe(buffer: Buffer) -> str:
    view = buffer.snapshot()
    label = buffer.file_name or view.name
    if view.original_mode:
        return f"{label}: {view.original_mode} -> {view.major_mode} ({view.phase.value})"
    return f"{label}: {view.major_mode} ({view.phase.value})"


def main(argv: Optional[Sequence[str]] = None, *, out: TextIO | None = None) -> int:
    args = _parse_args(argv)
    stream = out or sys.stdout
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)
    try:
        settings = _settings_from_args(args)
    except ConfigurationError as exc:
        print(f"so-long-check: {exc}", file=sys.stderr)
        return 2

    session = create_default_session(settings)
    status = 0
    for path in args.paths:
        try:
            buffer = session.open_file(path)
        except OSError as exc:
            print(f"{path}: {exc.strerror or exc}", file=sys.stderr)
            status = 1
            continue
        print(describe(buffer), file=stream)
    return status


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
