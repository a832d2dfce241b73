"""Command-line entry point for the webhook handlers.

Runs one handler per invocation so the same code path serves a
function runtime, a cron job, or a manual replay of a stored webhook
body.

Usage::

    python -m src.webhooks publish payload.json
    python -m src.webhooks unpublish - < payload.json
    python -m src.webhooks reindex
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from config import settings
from src.webhooks.errors import WebhookResponse
from src.webhooks.handlers import (
    handle_post_published,
    handle_post_unpublished,
    handle_reindex_all,
)

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Send log records to stderr; stdout is reserved for the response body."""
    root = logging.getLogger()
    root.setLevel(settings.log_level.upper())
    if root.handlers:
        return  # host or a previous main() call owns the handlers
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root.addHandler(handler)


def _read_payload(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as handle:
        return handle.read()


async def _dispatch(args: argparse.Namespace) -> WebhookResponse:
    if args.command == "publish":
        return await handle_post_published(_read_payload(args.payload))
    if args.command == "unpublish":
        return await handle_post_unpublished(_read_payload(args.payload))
    return await handle_reindex_all()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Ghost to Algolia search sync")
    commands = parser.add_subparsers(dest="command", required=True)

    publish = commands.add_parser("publish", help="Index one post from a webhook body")
    publish.add_argument("payload", help="Path to the JSON body, or - for stdin")

    unpublish = commands.add_parser("unpublish", help="Delete one post from a webhook body")
    unpublish.add_argument("payload", help="Path to the JSON body, or - for stdin")

    commands.add_parser("reindex", help="Clear the index and reindex every post")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging()

    logger.info("Running %s", args.command)
    response = asyncio.run(_dispatch(args))
    print(response.body)
    return 0 if response.ok else 1


if __name__ == "__main__":
    sys.exit(main())
