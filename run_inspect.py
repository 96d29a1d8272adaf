#!/usr/bin/env python3
"""
Command-line front end for Go package inspection.

Inspects a Go file or source tree and writes the package registry as JSON,
or prints an interface or function report.

Usage:
    python run_inspect.py --source /usr/local/go/src --funcs exported --drop-package main
    python run_inspect.py --source ./pkg --format interfaces
    python run_inspect.py --source ./server.go --format funcs --funcs both
"""

import argparse
import logging
import sys
from typing import Dict, Optional

from dotenv import load_dotenv

from core.inspect_config import (
    ConfigValidationError,
    InspectConfig,
    load_inspect_config,
    resolve_strict_config_validation,
)
from core.run_artifacts import write_run_report
from core.structured_logging import configure_structured_logging, set_run_id
from inspection.encoding import format_functions, format_interfaces, write_packages_json
from inspection.errors import InspectError, TraversalError
from inspection.extractor import ExtractionStats, inspect_path
from inspection.models import FuncOption, Package

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Go package inspection: functions, imports and interfaces",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python run_inspect.py --source ./src --output packages.json\n"
            "  python run_inspect.py --source ./src --format interfaces\n"
        ),
    )

    parser.add_argument(
        "--source",
        required=True,
        help="Go file or directory tree to inspect.",
    )
    parser.add_argument(
        "--format",
        choices=("json", "interfaces", "funcs"),
        default="json",
        help="Output format. Default: json",
    )
    parser.add_argument(
        "--output",
        default="-",
        help="Output path, '-' for stdout. Default: -",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="YAML config file with inspection policy.",
    )
    parser.add_argument(
        "--funcs",
        choices=("exported", "unexported", "both"),
        default=None,
        help="Which functions to keep. Overrides the config file.",
    )
    parser.add_argument(
        "--include-tests",
        action="store_true",
        default=False,
        help="Also inspect *_test.go files.",
    )
    parser.add_argument(
        "--reserved-subtree",
        default=None,
        help="Subdirectory of the source root to skip. Use '' to skip nothing.",
    )
    parser.add_argument(
        "--drop-package",
        action="append",
        default=[],
        help="Package name removed from the result (repeatable), e.g. main.",
    )
    parser.add_argument(
        "--non-strict",
        action="store_true",
        default=False,
        help="Log syntax errors instead of aborting.",
    )
    parser.add_argument(
        "--allow-partial",
        action="store_true",
        default=False,
        help="Still write the packages collected before a traversal error.",
    )
    parser.add_argument(
        "--report-dir",
        default=None,
        help="Write a JSON run report into this directory.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug logging.",
    )

    return parser.parse_args(argv)


def resolve_config(args: argparse.Namespace) -> InspectConfig:
    """Merge config file values with command-line overrides."""
    config = load_inspect_config(args.config, strict=resolve_strict_config_validation())

    reserved = config.reserved_subtree
    if args.reserved_subtree is not None:
        reserved = args.reserved_subtree or None

    return InspectConfig(
        ignore_tests=config.ignore_tests and not args.include_tests,
        func_option=args.funcs or config.func_option,
        reserved_subtree=reserved,
        exclude_dirs=list(config.exclude_dirs),
        strict_parse=config.strict_parse and not args.non_strict,
        drop_packages=list(config.drop_packages) + list(args.drop_package),
        log_level="DEBUG" if args.verbose else config.log_level,
    )


def emit(packages: Dict[str, Package], output_format: str, output: str) -> None:
    """Write the registry in the requested format."""
    if output_format == "json":
        write_packages_json(packages, sys.stdout if output == "-" else output)
        return

    text = format_interfaces(packages) if output_format == "interfaces" else format_functions(packages)
    if output == "-":
        sys.stdout.write(text + "\n")
    else:
        with open(output, "w", encoding="utf-8") as f:
            f.write(text + "\n")


def main(argv: Optional[list] = None) -> int:
    """Main entry point for the inspector."""
    load_dotenv()
    args = parse_args(argv)

    try:
        config = resolve_config(args)
    except ConfigValidationError as e:
        configure_structured_logging(logging.INFO)
        logger.error("Config error: %s", e)
        return 1

    configure_structured_logging(config.log_level)
    run_id = set_run_id()
    stats = ExtractionStats()
    error: Optional[str] = None
    packages: Dict[str, Package] = {}

    logger.info("Inspecting %s", args.source)

    try:
        packages = inspect_path(
            args.source,
            ignore_tests=config.ignore_tests,
            func_option=FuncOption.from_name(config.func_option),
            reserved_subtree=config.reserved_subtree,
            strict=config.strict_parse,
            exclude_dirs=config.exclude_dirs,
            stats=stats,
        )
    except TraversalError as e:
        error = f"{e}: {e.__cause__}"
        logger.error("Traversal stopped: %s", error)
        if args.allow_partial:
            packages = e.packages
    except (InspectError, OSError) as e:
        error = str(e)
        logger.error("Inspection failed: %s", e)

    if args.report_dir:
        path = write_run_report(stats.to_dict(), run_id, args.source, args.report_dir, error)
        logger.info("Run report written to %s", path)

    if error and not (args.allow_partial and packages):
        return 1

    for name in config.drop_packages:
        packages.pop(name, None)

    emit(packages, args.format, args.output)
    logger.info("Done: %s", stats)
    return 1 if error else 0


if __name__ == "__main__":
    sys.exit(main())
