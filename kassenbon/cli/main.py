#!/usr/bin/env python3

import argparse
import logging
from collections.abc import Callable, Sequence

from kassenbon.runtime import set_log_level


def _coerce_exit_code(code: object) -> int:
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    return 1


def _run_command(command: Callable[[argparse.Namespace], None], args: argparse.Namespace) -> int:
    """
    Normalize command handlers that call sys.exit().

    This keeps process termination centralized in this module's entrypoint.
    """
    try:
        command(args)
    except SystemExit as exc:
        return _coerce_exit_code(exc.code)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Netto receipt email utilities",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  parse <file> [--json]      Parse a saved receipt email body (HTML)
  ingest                     Store all unread receipt emails from the Maildir
  serve [--port]             Start the receipt parsing server
  list-stores                List stored stores
  list-purchases             List stored purchases

Notes:
  data/stores.csv, data/purchases.csv, data/price_log.csv hold the tables
""",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parse_parser = subparsers.add_parser("parse", help="Parse a saved receipt email body")
    parse_parser.add_argument("file", help="Path to the HTML email body")
    parse_parser.add_argument("--json", action="store_true", help="Print the extraction as JSON")

    ingest_parser = subparsers.add_parser("ingest", help="Store unread receipt emails")
    ingest_parser.add_argument("--maildir", default=None, help="Maildir path (default: mail/kassenbons)")
    ingest_parser.add_argument("--data-dir", default=None, help="Table directory (default: data/)")
    ingest_parser.add_argument("--config", default=None, help="mail_sources.toml path")

    serve_parser = subparsers.add_parser("serve", help="Start the receipt parsing server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=8080, help="Port to bind to (default: 8080)")

    list_stores_parser = subparsers.add_parser("list-stores", help="List stored stores")
    list_stores_parser.add_argument("--data-dir", default=None, help="Table directory (default: data/)")
    list_purchases_parser = subparsers.add_parser("list-purchases", help="List stored purchases")
    list_purchases_parser.add_argument("--data-dir", default=None, help="Table directory (default: data/)")

    args = parser.parse_args(argv)

    if args.verbose:
        set_log_level(logging.DEBUG)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "parse":
        from kassenbon.cli.receipt import cmd_parse

        return _run_command(cmd_parse, args)
    elif args.command == "ingest":
        from kassenbon.cli.receipt import cmd_ingest

        return _run_command(cmd_ingest, args)
    elif args.command == "serve":
        from kassenbon.cli.receipt import cmd_serve

        return _run_command(cmd_serve, args)
    elif args.command == "list-stores":
        from kassenbon.cli.receipt import cmd_list_stores

        return _run_command(cmd_list_stores, args)
    elif args.command == "list-purchases":
        from kassenbon.cli.receipt import cmd_list_purchases

        return _run_command(cmd_list_purchases, args)

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
