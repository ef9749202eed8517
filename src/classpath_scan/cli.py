"""Command-line entrypoint that scans classpath roots and reports deliveries."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import TextIO

from classpath_scan.config import CliOverrides, load_effective_config
from classpath_scan.errors import ClasspathScanError
from classpath_scan.observers import GlobObserver
from classpath_scan.scanner import ClasspathScanner


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for scan configuration."""
    parser = argparse.ArgumentParser(prog="classpath-scan")
    parser.add_argument("roots", nargs="+", help="Directories or archives to scan.")
    parser.add_argument("--config-dir", required=False, default=".")
    parser.add_argument("--batch-size", type=int, required=False, default=None)
    parser.add_argument("--log-path", required=False, default=None)
    parser.add_argument(
        "--offset",
        nargs=3,
        action="append",
        default=[],
        metavar=("SOURCE", "OFFSET", "URL"),
        help="Register a mount offset inside an archive root.",
    )
    parser.add_argument("--glob", action="append", default=None)
    parser.add_argument("--include-directories", action="store_true")
    parser.add_argument("--include-tests", action="store_true")
    return parser


def run(argv: list[str] | None = None, out_stream: TextIO | None = None) -> int:
    """Scan the requested roots and write JSON lines to ``out_stream``."""
    out = out_stream or sys.stdout
    args = build_arg_parser().parse_args(argv)
    overrides = CliOverrides(
        batch_size=args.batch_size,
        log_path=Path(args.log_path) if args.log_path is not None else None,
    )
    config = load_effective_config(Path(args.config_dir), overrides)
    scanner = ClasspathScanner(config=config)

    root_ids: dict[Path, str] = {}
    for raw in args.roots:
        source = Path(raw).resolve()
        if source in root_ids:
            continue
        root_ids[source] = scanner.register_root(source.as_uri(), source)
    for raw_source, offset, url in args.offset:
        source = Path(raw_source).resolve()
        if source not in root_ids:
            message = f"--offset source is not a scanned root: {raw_source}"
            error = {"code": "INVALID_ARGUMENTS", "url": raw_source, "message": message}
            _write(out, {"error": error})
            return 1
        scanner.register_offset(root_ids[source], offset, url)

    observer = GlobObserver(
        patterns=tuple(args.glob or ("*",)),
        include_directories=args.include_directories,
        on_delivery=lambda delivery: _write(out, asdict(delivery)),
    )
    try:
        reports = scanner.scan_all([observer], include_tests=args.include_tests)
    except ClasspathScanError as exc:
        _write(out, {"error": {"code": exc.code, "url": exc.url, "message": exc.message}})
        return 1
    for report in reports:
        _write(out, {"report": asdict(report)})
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the classpath-scan process."""
    return run(argv)


def _write(out: TextIO, payload: dict[str, object]) -> None:
    out.write(json.dumps(payload, sort_keys=True))
    out.write("\n")


if __name__ == "__main__":
    raise SystemExit(main())
