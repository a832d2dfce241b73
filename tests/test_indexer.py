from __future__ import annotations

import pytest

from src.indexing.errors import UpstreamError
from src.indexing.indexer import build_batch, publish_item, reindex_all, remove_item
from src.indexing.models import ContentItem, RecordLimits, SyncStatus
from src.ingestion.service import DeletionTarget, item_from_post
from tests.factories import FakePublisher, FakeSource, make_post


def test_build_batch_keeps_item_then_chunk_order():
    limits = RecordLimits(chunk_bytes=10)
    items = [
        ContentItem(id="a", plaintext="x" * 25),
        ContentItem(id="empty"),
        ContentItem(id="b", plaintext="short"),
    ]
    records = build_batch(items, limits)
    assert [r.object_id for r in records] == ["a_0", "a_1", "a_2", "b_0"]


@pytest.mark.asyncio
async def test_publish_item_saves_complete_batch(publisher, limits):
    item = item_from_post(make_post(plaintext="Hi!"))

    outcome = await publish_item(item, publisher, limits)

    assert outcome.status is SyncStatus.INDEXED
    assert outcome.record_count == 1
    assert publisher.calls == ["set_settings", "delete_item", "save"]
    assert publisher.deleted == [{"slug": None, "item_id": item.id}]
    assert publisher.saved[0].plaintext == "Hi!"
    assert publisher.saved[0].chunk_index == 0


@pytest.mark.asyncio
async def test_publish_item_with_nothing_to_index_is_skipped(publisher, limits):
    item = ContentItem(id="p1", title="", html="<p></p>")

    outcome = await publish_item(item, publisher, limits)

    assert outcome.status is SyncStatus.SKIPPED
    assert publisher.calls == []


@pytest.mark.asyncio
async def test_publish_failure_propagates(limits):
    publisher = FakePublisher(fail_on="save")
    with pytest.raises(UpstreamError):
        await publish_item(item_from_post(make_post()), publisher, limits)


@pytest.mark.asyncio
async def test_remove_item_passes_post_id_and_slug(publisher):
    outcome = await remove_item(DeletionTarget(slug="gone", item_id="p1", title="Gone"), publisher)
    assert outcome.status is SyncStatus.DELETED
    assert publisher.deleted == [{"slug": "gone", "item_id": "p1"}]


@pytest.mark.asyncio
async def test_remove_item_without_post_id_uses_slug(publisher):
    await remove_item(DeletionTarget(slug="gone", item_id=None, title=""), publisher)
    assert publisher.deleted == [{"slug": "gone", "item_id": None}]


@pytest.mark.asyncio
async def test_reindex_clears_then_saves_everything(publisher):
    limits = RecordLimits(chunk_bytes=6000)
    source = FakeSource(
        [
            make_post(id="a", plaintext="a" * 20_000),
            make_post(id="b", plaintext="", html="", excerpt="", custom_excerpt=None, title=""),
            make_post(id="c"),
        ]
    )

    outcome = await reindex_all(source, publisher, limits)

    assert outcome.status is SyncStatus.REINDEXED
    assert outcome.record_count == 5
    assert publisher.calls == ["clear", "set_settings", "save"]
    assert [r.object_id for r in publisher.saved] == ["a_0", "a_1", "a_2", "a_3", "c_0"]


@pytest.mark.asyncio
async def test_reindex_failure_before_save_leaves_nothing_saved(limits):
    publisher = FakePublisher(fail_on="set_settings")
    with pytest.raises(UpstreamError):
        await reindex_all(FakeSource([make_post()]), publisher, limits)
    assert publisher.calls == ["clear", "set_settings"]
    assert publisher.saved == []


@pytest.mark.asyncio
async def test_shorter_republish_drops_old_chunks():
    limits = RecordLimits(chunk_bytes=6000)
    publisher = FakePublisher()

    await publish_item(ContentItem(id="p", plaintext="a" * 20_000), publisher, limits)
    await publish_item(ContentItem(id="p", plaintext="a" * 100), publisher, limits)

    assert publisher.calls == [
        "set_settings", "delete_item", "save",
        "set_settings", "delete_item", "save",
    ]
    assert publisher.deleted == [{"slug": None, "item_id": "p"}] * 2
    assert {oid: r.plaintext for oid, r in publisher.index.items()} == {"p_0": "a" * 100}


@pytest.mark.asyncio
async def test_reindex_save_failure_after_clear_propagates(limits):
    publisher = FakePublisher(fail_on="save")
    with pytest.raises(UpstreamError):
        await reindex_all(FakeSource([make_post()]), publisher, limits)
    assert publisher.calls == ["clear", "set_settings", "save"]
