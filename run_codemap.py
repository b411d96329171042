#!/usr/bin/env python3
"""
Command-line runner printing the public surface of a Rust source tree.

Walks the given path, renders the visible items of every selected ``.rs``
file and prints them inside a ``<codemap>`` envelope. Logs go to stderr.

Usage:
    python run_codemap.py ./src
    python run_codemap.py ./crates/core --output out/codemap.txt
    python run_codemap.py . --no-gitignore --run-report-dir output/run_reports
"""

import argparse
import logging
import os
import sys
from dataclasses import replace
from typing import List, Optional

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_FILES_FAILED = 2


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Rust public surface mapper",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python run_codemap.py ./src\n"
            "  python run_codemap.py ./src --output out/codemap.txt --fail-fast\n"
        )
    )

    parser.add_argument(
        "path",
        nargs="?",
        default="./",
        help="Rust file or directory to map. Default: ./"
    )
    parser.add_argument(
        "--config",
        default=None,
        help="YAML config file. Default: codemap.yml in PATH when present."
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Write the report to this file instead of stdout."
    )
    parser.add_argument(
        "--no-gitignore",
        action="store_true",
        default=False,
        help="Do not honour .gitignore files while walking."
    )
    parser.add_argument(
        "--allow-parse-errors",
        action="store_true",
        default=False,
        help="Render files containing syntax errors instead of marking them errored."
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        default=False,
        help="Abort the run on the first file that cannot be mapped."
    )
    parser.add_argument(
        "--strict-exit",
        action="store_true",
        default=False,
        help="Exit with status 2 when any file errored."
    )
    parser.add_argument(
        "--run-report-dir",
        default=None,
        help="Write a JSON run summary into this directory."
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level. Overrides the config file and CODEMAP_LOG_LEVEL."
    )

    return parser.parse_args(argv)


def _apply_cli_overrides(config, args: argparse.Namespace):
    overrides = {}
    if args.no_gitignore:
        overrides["respect_gitignore"] = False
    if args.allow_parse_errors:
        overrides["allow_parse_errors"] = True
    if args.fail_fast:
        overrides["continue_on_error"] = False
    if args.log_level:
        overrides["log_level"] = args.log_level
    return replace(config, **overrides)


def _write_output(report: str, output_file: Optional[str]) -> None:
    if output_file is None:
        sys.stdout.write(report)
        sys.stdout.flush()
        return

    directory = os.path.dirname(os.path.abspath(output_file))
    os.makedirs(directory, exist_ok=True)
    with open(output_file, "w", encoding="utf-8") as f:
        f.write(report)
    logger.info(f"Wrote report to {output_file}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the runner."""
    from codemap.extractor import map_directory
    from codemap.errors import CodemapError
    from codemap.report import render_report
    from core.run_artifacts import build_run_report, write_run_report
    from core.startup_config import (
        ConfigValidationError,
        load_startup_config,
        resolve_log_level,
    )
    from core.structured_logging import configure_structured_logging, set_run_id

    args = parse_args(argv)
    configure_structured_logging(logging.INFO)
    run_id = set_run_id()

    try:
        config = load_startup_config(args.path, config_path=args.config)
    except ConfigValidationError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_FAILURE

    config = _apply_cli_overrides(config, args)
    log_level = args.log_level or resolve_log_level(config)
    logging.getLogger().setLevel(log_level)

    try:
        results, stats = map_directory(args.path, config)
        _write_output(render_report(results), args.output)

    except FileNotFoundError as e:
        logger.error(f"File error: {e}")
        return EXIT_FAILURE
    except (CodemapError, OSError, UnicodeDecodeError) as e:
        logger.error(f"Mapping aborted: {e}")
        return EXIT_FAILURE

    if args.run_report_dir:
        failures = [result.to_dict() for result in results if result.failed]
        report_path = write_run_report(
            build_run_report(args.path, stats.to_dict(), failures),
            run_id=run_id,
            output_dir=args.run_report_dir,
        )
        logger.info(f"Run report written to {report_path}")

    logger.info(f"Finished run {run_id}: {stats}")

    if args.strict_exit and stats.files_failed:
        return EXIT_FILES_FAILED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
