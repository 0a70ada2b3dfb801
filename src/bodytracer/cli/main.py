"""Command line interface for bodytracer."""

from __future__ import annotations

import argparse
from pathlib import Path

from .preview_cmd import run_config, run_preview


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bodytracer")
    subparsers = parser.add_subparsers(dest="command", required=True)

    preview_parser = subparsers.add_parser(
        "preview", help="Show the span attributes a request body would produce"
    )
    preview_parser.add_argument("body_file", type=Path, help="Path to a raw request body")
    preview_parser.add_argument(
        "--content-type",
        default="application/json",
        help="Content-Type header of the request",
    )
    preview_parser.add_argument(
        "--method",
        default="POST",
        help="HTTP method of the request; only POST, PUT and PATCH are captured",
    )
    preview_parser.add_argument(
        "--max-body-size",
        type=int,
        default=None,
        help="Override the capture budget in bytes",
    )
    preview_parser.add_argument(
        "--sensitive-field",
        action="append",
        default=[],
        help="Extra sensitive field substring (repeatable)",
    )
    preview_parser.add_argument(
        "--json",
        action="store_true",
        help="Emit the span attributes as JSON instead of text output",
    )

    subparsers.add_parser("config", help="Show the configuration resolved from the environment")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "preview":
        return run_preview(
            args.body_file,
            args.content_type,
            method=args.method,
            max_body_size=args.max_body_size,
            extra_fields=args.sensitive_field,
            as_json=args.json,
        )
    if args.command == "config":
        return run_config()

    parser.error("Unknown command")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
