"""Protean Engine runner for the stockroom domain.

In production events are processed asynchronously: the Engine's outbox
processor publishes ``StockMoved`` and registry events from the outbox table
to Redis Streams, where downstream services consume them.

Usage:
    PROTEAN_ENV=production python src/server.py
    PROTEAN_ENV=production python src/server.py --test-mode   # drain once and exit
"""

import argparse
import asyncio

from protean.server.engine import Engine
from stockroom.domain import stockroom
from stockroom.utils.logging import configure_logging


def main():
    parser = argparse.ArgumentParser(description="Stockroom Engine runner")
    parser.add_argument(
        "--test-mode",
        action="store_true",
        help="Process pending messages once and exit",
    )
    args = parser.parse_args()

    configure_logging()
    stockroom.init()

    engine = Engine(stockroom, test_mode=args.test_mode)
    asyncio.run(engine.run())


if __name__ == "__main__":
    main()
