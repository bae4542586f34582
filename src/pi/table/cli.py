"""CLI entry point: render a JSON table file to stdout."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import asdict

from pi.table.config import RenderOptions
from pi.table.errors import TableJSONError
from pi.table.styles import STYLES
from pi.table.table import Table


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    defaults = RenderOptions.from_env()

    parser = argparse.ArgumentParser(
        prog="pi-table",
        description="Render a JSON table as box-drawn text",
    )
    parser.add_argument("source", help="JSON file to render ('-' for stdin)")
    parser.add_argument("--vanilla", action="store_true", help="Input is an array of objects")
    parser.add_argument(
        "--style",
        default=defaults.style,
        help=f"Border style ({', '.join(sorted(STYLES))}; default: {defaults.style})",
    )
    parser.add_argument("--center", action="store_true", default=defaults.centered, help="Center in the terminal")
    parser.add_argument("--raw", action="store_true", help="Print raw values instead of transformed ones")
    parser.add_argument(
        "--measure-transformed",
        action="store_true",
        help="Measure widths using transformed values",
    )
    parser.add_argument("--columns", help="Comma-separated header names to render")
    parser.add_argument("--missing", default="", help="Value for keys missing from vanilla objects")
    parser.add_argument("--log-level", default="warning", choices=["debug", "info", "warning", "error"])
    return parser.parse_args(argv)


def _load(args: argparse.Namespace) -> Table:
    if args.source == "-":
        data = sys.stdin.read()
    else:
        with open(args.source, encoding="utf-8") as f:
            data = f.read()

    if args.vanilla:
        return Table.from_vanilla_json(data, missing_value=args.missing)
    return Table.from_rich_json(data)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        table = _load(args)
    except OSError as e:
        print(f"Error: cannot read {args.source}: {e}", file=sys.stderr)
        return 1
    except TableJSONError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    options = RenderOptions(
        measure_transformed=args.measure_transformed,
        print_transformed=not args.raw,
        centered=args.center,
        style=args.style,
        columns=[c.strip() for c in args.columns.split(",") if c.strip()] if args.columns else [],
    )
    table.render(sys.stdout, **asdict(options))
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
