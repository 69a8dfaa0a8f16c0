from __future__ import annotations

import argparse
import importlib
import json
import logging
import sys
from typing import Optional, Sequence, Type

import yaml

from layered_config.errors import ConfigError
from layered_config.loader import get_config
from layered_config.logging import init_logging
from layered_config.models import LayeredModel, LoggingSettings

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="layered-config", description="Load layered configuration")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: WARNING)",
    )
    parser.add_argument(
        "--dotenv",
        default=None,
        help="Load this .env file before reading environment variables",
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to run")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--schema", required=True, help="Schema class as 'package.module:ClassName'")
    common.add_argument(
        "--search-depth",
        type=int,
        default=0,
        help="Parent directories to search for each path (default: 0)",
    )
    common.add_argument("paths", nargs="+", help="Config paths, highest precedence first")

    # Command: show
    show_parser = subparsers.add_parser("show", parents=[common], help="Print the merged configuration")
    show_parser.add_argument("--format", choices=["yaml", "json"], default="yaml", help="Output format")

    # Command: check
    subparsers.add_parser("check", parents=[common], help="Exit non-zero if the configuration is invalid")

    return parser


def _import_schema(spec: str) -> Type[LayeredModel]:
    module_name, sep, attr = spec.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Schema must look like 'package.module:ClassName', got: {spec}")
    schema = getattr(importlib.import_module(module_name), attr)
    if not isinstance(schema, type) or not issubclass(schema, LayeredModel):
        raise ValueError(f"{spec} is not a LayeredModel subclass")
    return schema


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    init_logging(LoggingSettings(level=args.log_level))

    try:
        schema = _import_schema(args.schema)
    except (ImportError, AttributeError, ValueError) as exc:
        parser.error(str(exc))

    try:
        config = get_config(schema, args.paths, args.search_depth, dotenv_path=args.dotenv)
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.command == "show":
        payload = config.model_dump(mode="json", by_alias=True)
        if args.format == "json":
            print(json.dumps(payload, indent=2))
        else:
            print(yaml.safe_dump(payload, sort_keys=False), end="")
    elif args.command == "check":
        logger.info("Configuration is valid. schema=%s", args.schema)
        print("ok")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
