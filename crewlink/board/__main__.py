"""Command-line entry point: ``crewlink-board`` / ``python -m crewlink.board``."""

from __future__ import annotations

import argparse
import logging
import sys

import uvicorn

from .core.config import load_settings
from .core.exceptions import ConfigurationError
from .server import create_app

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crewlink-board",
        description="Serve contractor jobs, materials and timesheets from Monday.com boards.",
    )
    parser.add_argument("--host", default="0.0.0.0", help="Bind address (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=None, help="Port (default: $PORT or 4000)")
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["debug", "info", "warning", "error"],
        help="Log level (default: info)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        logger.error("configuration_error", extra={"setting": exc.setting})
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    port = args.port or settings.port
    logger.info("server_starting", extra={"host": args.host, "port": port})
    uvicorn.run(create_app(settings=settings), host=args.host, port=port, log_level=args.log_level)
    return 0


if __name__ == "__main__":
    sys.exit(main())
