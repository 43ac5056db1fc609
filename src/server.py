"""Protean Engine runner for the Ordering domain.

Starts Engine workers that process events asynchronously:
- OutboxProcessor: polls the outbox table, publishes order and split events
- StreamSubscriptions: reads the broker and invokes the split notifier

Usage:
    PROTEAN_ENV=production python src/server.py
    python src/server.py --test-mode     # Drain pending messages and exit
"""

import argparse
import asyncio

from protean.server.engine import Engine

from ordering.utils.logging import configure_logging


def build_engine(test_mode: bool = False) -> Engine:
    from ordering.domain import ordering

    ordering.init()
    return Engine(ordering, test_mode=test_mode)


async def run(test_mode: bool = False):
    engine = build_engine(test_mode=test_mode)
    await engine.run()


def main():
    parser = argparse.ArgumentParser(description="Ordering Engine runner")
    parser.add_argument(
        "--test-mode",
        action="store_true",
        help="Process pending messages once and exit",
    )
    args = parser.parse_args()

    configure_logging()
    asyncio.run(run(test_mode=args.test_mode))


if __name__ == "__main__":
    main()
