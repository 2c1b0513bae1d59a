#!/usr/bin/env python3
"""
Command-line interface for schema_core.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from . import codec
from .api import SchemaSerializer, SchemaValidator
from .cache import SchemaCache
from .errors import SchemaError, SerializationError, ValidationFailed
from .version import __version__

logger = logging.getLogger("schema_core")


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="schema-core",
        description="Validate JSON data against a JSON-encoded schema description."
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    validate_parser = commands.add_parser("validate", help="Validate a data file")
    dump_parser = commands.add_parser("dump", help="Validate a data file and print its JSON serialization")
    for sub in (validate_parser, dump_parser):
        sub.add_argument(
            "data_file",
            type=str,
            help="Path to the JSON data file to validate"
        )
        sub.add_argument(
            "schema_file",
            type=str,
            help="Path to the JSON schema description"
        )
        sub.add_argument(
            "--strict",
            action="store_true",
            help="Validate every node in strict mode"
        )
        sub.add_argument(
            "--fail-fast",
            action="store_true",
            help="Stop containers at their first error"
        )
        sub.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Enable verbose output"
        )

    dump_parser.add_argument(
        "--exclude-defaults",
        action="store_true",
        help="Omit fields equal to their default"
    )
    dump_parser.add_argument(
        "--exclude-none",
        action="store_true",
        help="Omit fields holding null"
    )
    dump_parser.add_argument(
        "--round-trip",
        action="store_true",
        help="Produce output that validates back to the same value"
    )
    dump_parser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="Indent the JSON output by this many spaces"
    )

    return parser.parse_args(args)


def load_json(filepath: str) -> Any:
    """
    Load and parse a JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValidationFailed: If the file contains invalid JSON
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    return codec.decode(path.read_bytes())


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the script."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        schema = load_json(args.schema_file)
        data = Path(args.data_file).read_bytes()
    except (FileNotFoundError, ValidationFailed) as exc:
        logger.error(str(exc))
        return 2

    cache = SchemaCache()
    try:
        validator = SchemaValidator(schema, cache=cache)
    except SchemaError as exc:
        logger.error(str(exc))
        return 2

    strict = True if args.strict else None
    try:
        value = validator.validate_json(data, strict=strict, fail_fast=args.fail_fast)
    except ValidationFailed as exc:
        logger.error("Validation failed:")
        for error in exc.errors:
            logger.error(f"  - {error}")
        return 1

    if args.command == "validate":
        logger.info("Validation successful!")
        return 0

    serializer = SchemaSerializer(schema, cache=cache)
    try:
        output = serializer.to_json(
            value,
            indent=args.indent,
            exclude_defaults=args.exclude_defaults,
            exclude_none=args.exclude_none,
            round_trip=args.round_trip,
        )
    except SerializationError as exc:
        logger.error(f"Serialization failed: {exc}")
        return 1

    sys.stdout.write(output.decode("utf-8") + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
