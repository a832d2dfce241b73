from __future__ import annotations

import logging

from src.indexing.budget import enforce_budget
from src.indexing.byte_budget import clamp_bytes
from src.indexing.chunker import build_chunks
from src.indexing.metadata import flatten_metadata
from src.indexing.models import (
    BudgetState,
    Chunk,
    ContentItem,
    FlatMetadata,
    RecordLimits,
    SearchRecord,
)
from src.indexing.normalizer import normalize_text

logger = logging.getLogger(__name__)

RECORD_ID_SEPARATOR = "_"


def record_id(item_id: str, chunk_index: int) -> str:
    return f"{item_id}{RECORD_ID_SEPARATOR}{chunk_index}"


def _optional_text(value: str | None, max_bytes: int) -> str | None:
    if not isinstance(value, str) or not value.strip():
        return None
    return clamp_bytes(value.strip(), max_bytes)


def build_records(
    item: ContentItem,
    chunks: list[Chunk],
    metadata: FlatMetadata,
    limits: RecordLimits,
) -> list[SearchRecord]:
    """One budget-enforced record per chunk, in chunk order.

    Every record of *item* shares the same metadata; only ``chunk_index``
    and ``plaintext`` differ before enforcement.
    """
    if not item.id:
        raise ValueError("ContentItem.id is required to build search records.")

    excerpt = _optional_text(item.excerpt, limits.excerpt_max_bytes)
    feature_image = item.feature_image or None

    records: list[SearchRecord] = []
    forced = 0
    for chunk in chunks:
        draft = SearchRecord(
            object_id=record_id(item.id, chunk.index),
            post_id=item.id,
            title=item.title or "",
            slug=item.slug or "",
            url=item.url or "",
            published_at=item.published_at,
            primary_tag=metadata.primary_tag,
            tags=metadata.tags,
            authors=metadata.authors,
            chunk_index=chunk.index,
            plaintext=chunk.text,
            excerpt=excerpt,
            feature_image=feature_image,
        )
        result = enforce_budget(draft, limits)
        if result.state is BudgetState.FORCED:
            forced += 1
        records.append(result.record)

    if forced:
        logger.warning("records: post %s had %d force-clamped record(s)", item.id, forced)
    return records


# normalize -> chunk -> flatten -> build, for one item
def prepare_item_records(item: ContentItem, limits: RecordLimits) -> list[SearchRecord]:
    text = normalize_text(item)
    if not text:
        logger.info("records: post %s has no indexable text, skipping", item.id)
        return []

    chunks = build_chunks(text, limits)
    metadata = flatten_metadata(item, limits)
    records = build_records(item, chunks, metadata, limits)
    logger.info(
        "records: post %s -> %d chunk(s), %d record(s)", item.id, len(chunks), len(records)
    )
    return records
