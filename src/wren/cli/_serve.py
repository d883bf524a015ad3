"""``wren serve``: run a site on the pounce ASGI server."""

import argparse
import logging
import sys
from typing import Any

from wren.config import AppConfig
from wren.errors import ConfigurationError


def config_from_args(args: argparse.Namespace) -> AppConfig:
    """Environment config with command-line flags layered on top."""
    overrides: dict[str, Any] = {}
    if args.root is not None:
        overrides["root"] = args.root
    if args.host is not None:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = args.port
    if args.debug:
        overrides["debug"] = True
        overrides["log_level"] = "debug"
    return AppConfig.from_env(**overrides)


def run_serve(args: argparse.Namespace) -> None:
    try:
        config = config_from_args(args)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from wren.site import create_app

    create_app(config).run()
