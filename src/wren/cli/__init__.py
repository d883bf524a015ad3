"""Wren CLI: serve a site and inspect its route tables.

Entry point registered as ``wren`` in ``pyproject.toml``::

    [project.scripts]
    wren = "wren.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``wren`` command."""
    parser = argparse.ArgumentParser(
        prog="wren",
        description="Wren, a tiny flat-file content server.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- wren serve -------------------------------------------------------
    serve_parser = subparsers.add_parser("serve", help="Serve a site directory")
    serve_parser.add_argument("root", nargs="?", default=None, help="Site root directory")
    serve_parser.add_argument("--host", default=None, help="Bind host address")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    serve_parser.add_argument(
        "--debug",
        action="store_true",
        help="Debug logging and reload on source changes",
    )

    # -- wren routes ------------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="Print the post and redirect tables")
    routes_parser.add_argument("root", nargs="?", default=None, help="Site root directory")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "serve":
        from wren.cli._serve import run_serve

        run_serve(args)
    elif args.command == "routes":
        from wren.cli._routes import run_routes

        run_routes(args)
