"""Synthetic Ghost posts and in-memory collaborators shared by the tests."""

from __future__ import annotations

from typing import Any

from src.indexing.errors import UpstreamError
from src.indexing.models import SearchRecord


def make_post(**overrides: Any) -> dict[str, Any]:
    """A Ghost post object as the Content API / webhooks deliver it."""
    post: dict[str, Any] = {
        "id": "5f1a2b3c4d5e6f7a8b9c0d1e",
        "title": "Hello World",
        "slug": "hello-world",
        "url": "https://blog.example.com/hello-world/",
        "published_at": "2024-03-01T10:00:00.000Z",
        "html": "<p>Hello from the post body.</p>",
        "plaintext": "Hello from the post body.",
        "custom_excerpt": None,
        "excerpt": "Hello from the post body.",
        "feature_image": None,
        "primary_tag": {"id": "t1", "name": "News", "slug": "news"},
        "tags": [
            {"id": "t1", "name": "News", "slug": "news"},
            {"id": "t2", "name": "Updates", "slug": "updates"},
        ],
        "authors": [{"id": "a1", "name": "Sam Writer", "slug": "sam"}],
    }
    post.update(overrides)
    return post


class FakePublisher:
    """In-memory stand-in for AlgoliaClient that records every call."""

    def __init__(self, fail_on: str | None = None):
        self.calls: list[str] = []
        self.saved: list[SearchRecord] = []
        self.deleted: list[dict[str, str | None]] = []
        # objectID -> record, as the index would hold them
        self.index: dict[str, SearchRecord] = {}
        self.fail_on = fail_on

    def _maybe_fail(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_on == name:
            raise UpstreamError("algolia", f"{name} failed", status_code=503)

    async def set_settings(self, index_settings=None) -> None:
        self._maybe_fail("set_settings")

    async def save(self, records: list[SearchRecord]) -> int:
        self._maybe_fail("save")
        self.saved.extend(records)
        self.index.update((record.object_id, record) for record in records)
        return len(records)

    async def delete_item(self, *, slug: str | None = None, item_id: str | None = None) -> None:
        self._maybe_fail("delete_item")
        self.deleted.append({"slug": slug, "item_id": item_id})
        self.index = {
            object_id: record
            for object_id, record in self.index.items()
            if not (record.post_id == item_id if item_id else record.slug == slug)
        }

    async def clear(self) -> None:
        self._maybe_fail("clear")
        self.index = {}


class FakeSource:
    def __init__(self, posts: list[dict[str, Any]]):
        self.posts = posts

    async def fetch_all_posts(self) -> list[dict[str, Any]]:
        return list(self.posts)
