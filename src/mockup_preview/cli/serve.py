from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Callable, Optional, Sequence

import uvicorn

from ..api.app import create_app
from ..config import Settings, parse_log_level, parse_timeout

logger = logging.getLogger(__name__)


def _argument_type(parse: Callable[[str], object]) -> Callable[[str], object]:
    def convert(value: str) -> object:
        try:
            return parse(value)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from exc

    return convert


def parse_args(settings: Settings, argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve product mockup previews over HTTP")
    parser.add_argument("--host", default=settings.host, help="Address to bind (env: HOST)")
    parser.add_argument("--port", type=int, default=settings.port, help="Port to listen on (env: PORT)")
    parser.add_argument(
        "--products",
        type=Path,
        default=settings.products_file,
        help="Optional JSON file replacing the built-in product table (env: MOCKUP_PRODUCTS_FILE)",
    )
    parser.add_argument(
        "--fetch-timeout",
        type=_argument_type(parse_timeout),
        default=settings.fetch_timeout,
        help="Seconds to wait for a remote image; 0 waits indefinitely (env: MOCKUP_FETCH_TIMEOUT)",
    )
    parser.add_argument(
        "--log-level",
        type=_argument_type(parse_log_level),
        default=settings.log_level,
        help="Logging level (env: LOG_LEVEL)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    try:
        settings = Settings.from_env()
    except ValueError as exc:
        logging.basicConfig(level=logging.INFO)
        logger.error("Invalid configuration: %s", exc)
        raise SystemExit(1) from exc

    args = parse_args(settings, argv)
    settings.host = args.host
    settings.port = args.port
    settings.products_file = args.products
    settings.fetch_timeout = args.fetch_timeout
    settings.log_level = args.log_level

    logging.basicConfig(level=settings.log_level)
    try:
        app = create_app(settings=settings)
    except (ValueError, OSError) as exc:
        logger.error("Unable to load product mockups: %s", exc)
        raise SystemExit(1) from exc

    logger.info("Server listening on port %s", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
