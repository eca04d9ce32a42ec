"""Command line interface for phenogrid."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .export import DEFAULT_CONFIG_PATH, FORMATS, run_export
from .sections import SECTIONS


def build_arg_parser() -> argparse.ArgumentParser:
    """Build and return the top-level CLI argument parser."""
    parser = argparse.ArgumentParser(prog="phenogrid")
    parser.add_argument("--verbose", "-v", action="store_true")
    sub = parser.add_subparsers(dest="command")

    export = sub.add_parser("export")
    export.add_argument("--config", default=DEFAULT_CONFIG_PATH)
    export.add_argument("--records", default=None)
    export.add_argument("--output", default=None)
    export.add_argument("--format", choices=FORMATS, default=None)
    export.add_argument("--field", action="append", default=[], dest="fields")

    sub.add_parser("fields")

    return parser


def print_fields() -> int:
    for section in SECTIONS:
        print(f"{section.title} ({section.name}):")
        for field_id in section.field_ids:
            print(f"  {field_id}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "fields":
        return print_fields()

    if args.command == "export":
        try:
            return run_export(
                args.config,
                records_path=args.records,
                output_path=args.output,
                fmt=args.format,
                extra_fields=args.fields,
            )
        except RuntimeError as exc:
            print(f"export failed: {exc}", file=sys.stderr)
            return 1

    parser.print_help()
    return 2


if __name__ == "__main__":
    sys.exit(main())
