"""Entry point for the order desk Textual app."""

from __future__ import annotations

import argparse
import logging
import sqlite3

from order_desk import config
from order_desk.api import OrdersClient
from order_desk.order_desk_app import OrderDeskApp
from order_desk.persistence import bootstrap_schema, load_last_location

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Browse orders and settle unpaid ones in cash.")
    parser.add_argument("--api-url", default=config.API_BASE_URL, help="Base URL of the orders API")
    parser.add_argument(
        "--location",
        help=f"Starting location, e.g. '{config.PAGE_PATH}?status=OPEN' (default: last visited)",
    )
    parser.add_argument(
        "--forget",
        action="store_true",
        help="Neither restore nor remember the last visited location",
    )
    return parser.parse_args(argv)


def configure_logging() -> None:
    # Textual owns the terminal.
    logging.basicConfig(
        filename=config.LOG_PATH,
        level=getattr(logging, config.LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def resolve_start_location(args: argparse.Namespace) -> str:
    if args.location:
        return args.location
    if args.forget:
        return config.PAGE_PATH
    try:
        bootstrap_schema()
        return load_last_location() or config.PAGE_PATH
    except (sqlite3.Error, OSError) as exc:
        logger.warning("location_restore_failed error=%r", exc)
        return config.PAGE_PATH


def main(argv: list[str] | None = None) -> None:
    """Run the Textual application."""
    args = parse_args(argv)
    configure_logging()
    location = resolve_start_location(args)
    logger.info("app_start api_url=%s location=%s", args.api_url, location)
    app = OrderDeskApp(
        OrdersClient(args.api_url),
        location=location,
        remember_location=not args.forget,
    )
    app.run()


if __name__ == "__main__":
    main()
