"""
Command-line demo: bind ServiceConfig from the process environment.

    python -m envcfg.cli                  # print the config as YAML
    python -m envcfg.cli --format json
    python -m envcfg.cli --strict         # every variable must be defined
    python -m envcfg.cli --describe       # print the resolved schema
    python -m envcfg.cli --clear          # blank the variables afterwards

Exits with status 1 on any envcfg error.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from envcfg.binder import Binder, clear
from envcfg.errors import EnvcfgError
from envcfg.examples import ServiceConfig
from envcfg.schema import resolve
from envcfg.serialization import (
    record_to_json,
    record_to_yaml,
    schema_to_json,
    schema_to_yaml,
)

logger = logging.getLogger(__name__)


def setup_logging(level: str = "WARNING") -> logging.Logger:
    """Send log records to stderr."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    return root_logger


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Bind the example service config from environment variables."
    )
    parser.add_argument("--format", choices=["yaml", "json"], default="yaml",
                        help="Output format.")
    parser.add_argument("--strict", action="store_true",
                        help="Fail if a variable is not defined.")
    parser.add_argument("--describe", action="store_true",
                        help="Print the resolved field schema instead of values.")
    parser.add_argument("--clear", action="store_true",
                        help="Blank the bound variables after binding.")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level for diagnostics on stderr.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_argument_parser().parse_args(argv)
    setup_logging(args.log_level)

    binder = Binder()
    if args.strict:
        binder = binder.fail_on_undefined_variables()

    try:
        if args.describe:
            schema = resolve(ServiceConfig)
            if args.format == "json":
                print(schema_to_json(schema))
            else:
                print(schema_to_yaml(schema), end="")
            return 0

        config = binder.bind(ServiceConfig)
        if args.clear:
            clear(config)
    except EnvcfgError as e:
        logger.debug("Binding ServiceConfig failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.format == "json":
        print(record_to_json(config))
    else:
        print(record_to_yaml(config), end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
