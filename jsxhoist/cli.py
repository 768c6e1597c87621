"""CLI entry point: reads files (or stdin), drives the engine, reports to stdout."""

import argparse
import sys

from .config import load_config
from .engine import process_source, run_engine
from .errors import JsxHoistAPIError
from .mapping.framework_mapper import SUPPORTED_FRAMEWORKS
from .stats import RunStats


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jsxhoist",
        description="Hoist repeated JSX subtrees into reusable function components",
    )
    parser.add_argument(
        "paths",
        nargs="*",
        help="TSX/JSX files to process (reads stdin, writes stdout when omitted)",
    )
    parser.add_argument("--output-dir", default=None, help="Write results here instead of in place")
    parser.add_argument("--force", action="store_true", help="Overwrite existing files in --output-dir")
    parser.add_argument("--min-repeats", type=int, default=None, help="Minimum occurrences to extract (>= 2)")
    parser.add_argument("--name-base", default=None, help="Prefix for generated component names")
    parser.add_argument(
        "--framework",
        choices=SUPPORTED_FRAMEWORKS,
        default=None,
        help="UI kit to relabel the output onto",
    )
    parser.add_argument("--tailwind-config", default=None, help="tailwind.config.js used for color mapping")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress progress output on stderr")
    return parser


def main(argv=None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    config = load_config()
    if args.min_repeats is not None:
        config.min_repeats = args.min_repeats
    if args.name_base is not None:
        config.component_name_base = args.name_base
    if args.framework is not None:
        config.framework = args.framework
    if args.tailwind_config is not None:
        config.tailwind_config = args.tailwind_config
    if config.framework not in SUPPORTED_FRAMEWORKS:
        parser.error(f"unknown framework {config.framework!r}")
    try:
        config.to_extractor_options()
    except ValueError as exc:
        parser.error(str(exc))

    verbose = not args.quiet
    run_stats = RunStats()

    if not args.paths:
        source = sys.stdin.read()
        if not source.strip():
            print("jsxhoist: no input provided on stdin", file=sys.stderr)
            sys.exit(1)
        try:
            result = process_source(source, "<stdin>", config, run_stats, verbose)
        except JsxHoistAPIError as exc:
            print(f"jsxhoist: {exc}", file=sys.stderr)
            sys.exit(1)
        for message in result.msgs:
            print(message, file=sys.stderr)
        sys.stdout.write(result.source)
        if result.failed:
            sys.exit(1)
        return

    try:
        for message in run_engine(
            args.paths,
            config=config,
            stats=run_stats,
            output_dir=args.output_dir,
            force=args.force,
            verbose=verbose,
        ):
            print(message)
    except JsxHoistAPIError as exc:
        print(f"jsxhoist: {exc}", file=sys.stderr)
        sys.exit(1)
    for line in run_stats.format_summary():
        print(line)
