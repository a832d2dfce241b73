from __future__ import annotations

# ────────────────────────────────────────────────────────────────
# indexer.py - entry point for the indexing layer
#
# Public interface:
#   publish_item(item, publisher, limits)  : index one published post
#   remove_item(target, publisher)         : delete all records of a post
#   reindex_all(source, publisher, limits) : rebuild the whole index
#   build_batch(items, limits)             : records for many posts
#
# Pipeline phases (per invocation):
#   Phase 1, record preparation (pure, synchronous):
#       For each item: normalize text, chunk it by bytes, flatten
#       tags/authors, build one record per chunk and run each through
#       the size budget enforcer.  Items with nothing to index
#       contribute no records.  Output order is item order, then
#       chunk order, so identical input yields an identical batch.
#
#   Phase 2, publishing (async network calls, sequential):
#       Only after Phase 1 has produced the complete batch.  The
#       publish path applies settings, deletes the post's previous
#       records by postId, then saves; the reindex path clears the
#       index, applies settings, then saves.
#
# Failure handling:
#   Phase 1 raises RecordBudgetError only for misconfigured limits;
#   no network call has happened yet, so nothing is published.
#   Phase 2 raises UpstreamError on any publisher failure.  Clear and
#   save are not atomic: a failure between them leaves the index empty
#   until the caller retries the reindex.
# ────────────────────────────────────────────────────────────────

import logging
import time
from typing import TYPE_CHECKING

from src.indexing.models import (
    ContentItem,
    RecordLimits,
    SearchRecord,
    SyncOutcome,
    SyncStatus,
)
from src.indexing.records import prepare_item_records
from src.ingestion.service import fetch_all_items

if TYPE_CHECKING:
    from src.ingestion.ghost_client import GhostClient
    from src.ingestion.service import DeletionTarget
    from src.publishing.algolia_client import AlgoliaClient, IndexSettings


logger = logging.getLogger(__name__)


def build_batch(items: list[ContentItem], limits: RecordLimits) -> list[SearchRecord]:
    records: list[SearchRecord] = []
    for item in items:
        records.extend(prepare_item_records(item, limits))
    return records


async def publish_item(
    item: ContentItem,
    publisher: AlgoliaClient,
    limits: RecordLimits,
    index_settings: IndexSettings | None = None,
) -> SyncOutcome:
    records = prepare_item_records(item, limits)
    if not records:
        return SyncOutcome(
            status=SyncStatus.SKIPPED,
            message=f'Post "{item.title}" did not generate any records for indexing.',
        )

    await publisher.set_settings(index_settings)
    # a shorter republish must not leave the old tail chunks behind
    await publisher.delete_item(item_id=item.id)
    saved = await publisher.save(records)
    return SyncOutcome(
        status=SyncStatus.INDEXED,
        message=f'Post "{item.title}" has been added to the index.',
        record_count=saved,
    )


async def remove_item(target: DeletionTarget, publisher: AlgoliaClient) -> SyncOutcome:
    logger.info(
        "indexer: deleting records for post %s, slug %r (title: %r)",
        target.item_id, target.slug, target.title,
    )
    await publisher.delete_item(slug=target.slug, item_id=target.item_id)
    return SyncOutcome(
        status=SyncStatus.DELETED,
        message=f'Post "{target.slug}" has been removed from the index.',
    )


async def reindex_all(
    source: GhostClient,
    publisher: AlgoliaClient,
    limits: RecordLimits,
    index_settings: IndexSettings | None = None,
) -> SyncOutcome:
    started = time.perf_counter()
    items = await fetch_all_items(source)
    records = build_batch(items, limits)
    logger.info(
        "indexer: prepared %d record(s) from %d post(s) in %.1fs",
        len(records), len(items), time.perf_counter() - started,
    )

    await publisher.clear()
    await publisher.set_settings(index_settings)
    saved = await publisher.save(records)

    logger.info(
        "indexer: reindex complete, %d record(s) saved in %.1fs",
        saved, time.perf_counter() - started,
    )
    return SyncOutcome(
        status=SyncStatus.REINDEXED,
        message=f"Reindexed {saved} records",
        record_count=saved,
    )
