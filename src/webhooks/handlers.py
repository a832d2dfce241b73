"""Webhook handlers for ``post_published``, ``post_unpublished``, ``reindex_all``.

Three entry points mirror the CMS integration:

  ``handle_post_published``  : resolve the post from the webhook body,
                               build its records, apply settings, save.
  ``handle_post_unpublished``: resolve the slug from the current or
                               previous state and delete its records.
  ``handle_reindex_all``     : fetch every post, rebuild every record,
                               clear the index and save the full batch.

Handlers take the decoded request body and return a ``WebhookResponse``.
HTTP method checks and webhook-key authorization belong to whatever
platform adapter calls these.

Error handling:
  Handlers never raise.  Malformed payloads and items with nothing to
  index become 200 responses via ``errors.skipped``; upstream and
  budget failures are logged with traceback and returned as 500s via
  ``errors.failure`` so the platform can retry the whole invocation.
"""

from __future__ import annotations

import logging
from typing import Any

from config import settings
from src.indexing.indexer import publish_item, reindex_all, remove_item
from src.indexing.models import RecordLimits, SyncStatus
from src.ingestion.ghost_client import GhostClient
from src.ingestion.service import resolve_deletion, resolve_item
from src.publishing.algolia_client import AlgoliaClient, IndexSettings
from src.webhooks import errors
from src.webhooks.errors import WebhookResponse

logger = logging.getLogger(__name__)


# ── Helpers ───────────────────────────────────────────────────


def build_publisher() -> AlgoliaClient:
    logger.info("Using Algolia settings: %s", settings.algolia_safe_settings())
    return AlgoliaClient(
        app_id=settings.algolia_app_id,
        api_key=settings.algolia_admin_api_key,
        index_name=settings.algolia_index_name,
        batch_size=settings.algolia_batch_size,
        timeout=settings.http_timeout_seconds,
    )


def build_source() -> GhostClient:
    return GhostClient(
        base_url=settings.ghost_url,
        content_key=settings.ghost_content_key,
        page_size=settings.ghost_page_size,
        timeout=settings.http_timeout_seconds,
    )


# ── post_published ────────────────────────────────────────────


async def handle_post_published(
    body: Any,
    *,
    publisher: AlgoliaClient | None = None,
    limits: RecordLimits | None = None,
    index_settings: IndexSettings | None = None,
) -> WebhookResponse:
    if not settings.algolia_active:
        return errors.not_activated()

    item = resolve_item(body)
    if item is None:
        logger.info("post_published: no valid post in request body")
        return errors.skipped("No valid request body detected")

    logger.info("post_published: indexing post %s (%r)", item.id, item.title)
    try:
        outcome = await publish_item(
            item,
            publisher or build_publisher(),
            limits or settings.record_limits(),
            index_settings,
        )
    except Exception as exc:
        logger.error("post_published failed: %r", exc, exc_info=True)
        return errors.failure(exc, "indexing")

    if outcome.status is SyncStatus.SKIPPED:
        return errors.skipped(outcome.message)
    return errors.success(outcome.message)


# ── post_unpublished ──────────────────────────────────────────


async def handle_post_unpublished(
    body: Any,
    *,
    publisher: AlgoliaClient | None = None,
) -> WebhookResponse:
    if not settings.algolia_active:
        return errors.not_activated()

    target = resolve_deletion(body)
    if target is None:
        logger.info("post_unpublished: no valid slug found in post data")
        return errors.skipped("No valid request body detected")

    try:
        outcome = await remove_item(target, publisher or build_publisher())
    except Exception as exc:
        logger.error("post_unpublished failed: %r", exc, exc_info=True)
        return errors.failure(exc, "deletion")

    return errors.success(outcome.message)


# ── reindex_all ───────────────────────────────────────────────


async def handle_reindex_all(
    *,
    source: GhostClient | None = None,
    publisher: AlgoliaClient | None = None,
    limits: RecordLimits | None = None,
    index_settings: IndexSettings | None = None,
) -> WebhookResponse:
    if not settings.algolia_active:
        return errors.not_activated()

    logger.info("reindex_all: starting full reindex")
    try:
        outcome = await reindex_all(
            source or build_source(),
            publisher or build_publisher(),
            limits or settings.record_limits(),
            index_settings,
        )
    except Exception as exc:
        logger.error("reindex_all failed: %r", exc, exc_info=True)
        return errors.failure(exc, "reindex")

    return errors.success(outcome.message)
