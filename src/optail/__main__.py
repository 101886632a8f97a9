"""Main entry point for optail."""

import argparse
import sys
from typing import List, Optional

from . import __version__
from .config.config_manager import ConfigurationManager, debug_from_env
from .core.app import main as run_app
from .core.reporter import ErrorReporter
from .utils.error_utils import ConfigurationError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="optail",
        description="Stream new MongoDB oplog entries to stdout"
    )
    parser.add_argument(
        "--host",
        help="Host to connect to (default: localhost)",
        default=None
    )
    parser.add_argument(
        "--port",
        help="Port to connect to (default: 27017)",
        type=int,
        default=None
    )
    parser.add_argument(
        "--debug",
        help="Print debug information",
        action="store_true",
        default=None
    )
    parser.add_argument(
        "--config",
        help="Path to configuration file",
        default=None
    )
    parser.add_argument(
        "--no-color",
        help="Do not highlight output",
        dest="color",
        action="store_false",
        default=None
    )
    parser.add_argument(
        "-v", "--version",
        action="version",
        version=f"optail v{__version__}"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    overrides = {
        "mongodb": {"host": args.host, "port": args.port},
        "tail": {"color": args.color},
        "debug": args.debug,
    }
    try:
        config = ConfigurationManager(args.config, overrides).get_config()
    except ConfigurationError as e:
        verbose = args.debug if args.debug is not None else debug_from_env()
        return ErrorReporter(verbose=verbose).report(e)

    return run_app(config)


if __name__ == "__main__":
    sys.exit(main())
