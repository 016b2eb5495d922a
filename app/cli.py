"""Command line entry point — `bestsub` / `python -m app`.

Invariants:
    - --port overrides the config file's server.port
    - --version prints the banner and exits without touching the config file
"""

import argparse
import logging
import sys

import uvicorn

from app import __version__
from app.config import DEFAULT_CONFIG_PATH, load_settings
from app.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)

BANNER = rf"""
 ____            _   ____        _
| __ )  ___  ___| |_/ ___| _   _| |__
|  _ \ / _ \/ __| __\___ \| | | | '_ \
| |_) |  __/\__ \ |_ ___) | |_| | |_) |
|____/ \___||___/\__|____/ \__,_|_.__/
                              v{__version__}
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bestsub", description="BestSub subscription management server",
    )
    parser.add_argument(
        "-f", "--config",
        default=str(DEFAULT_CONFIG_PATH),
        help="path to the JSON config file (created if missing)",
    )
    parser.add_argument(
        "--port", type=int, default=None,
        help="port to listen on (overrides server.port)",
    )
    parser.add_argument(
        "--version", action="store_true", help="print version and exit",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    print(BANNER)
    if args.version:
        return 0

    settings = load_settings(args.config)
    if args.port is not None:
        settings.server.port = args.port
    setup_logging(settings.log_level, settings.log_format)

    # deferred: app.main builds a default app at import time
    from app.main import create_app

    app = create_app(settings)
    logger.info(
        f"Starting BestSub on {settings.server.host}:{settings.server.port}",
    )
    uvicorn.run(
        app,
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
