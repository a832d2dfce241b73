from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from typing import Any

from src.indexing.models import ContentItem, TaxonomyRef
from src.ingestion.ghost_client import GhostClient

logger = logging.getLogger(__name__)


@dataclass
class DeletionTarget:
    slug: str
    item_id: str | None
    title: str | None


# webhooks deliver either raw JSON text or an already-decoded mapping
def _as_dict(value: Any) -> dict[str, Any] | None:
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8", errors="replace")
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            logger.info("service: payload is not valid JSON")
            return None
    if isinstance(value, dict):
        return value
    return None


def _non_empty_dict(value: Any) -> dict[str, Any] | None:
    if isinstance(value, dict) and value:
        return value
    return None


def _string(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _taxonomy_ref(value: Any) -> TaxonomyRef | None:
    if isinstance(value, str):
        return TaxonomyRef(name=value)
    if not isinstance(value, dict):
        return None
    return TaxonomyRef(
        name=_string(value.get("name")),
        slug=_string(value.get("slug")),
        id=_string(value.get("id")),
    )


def _taxonomy_list(value: Any) -> list[TaxonomyRef]:
    if not isinstance(value, list):
        return []
    refs = [_taxonomy_ref(entry) for entry in value]
    return [ref for ref in refs if ref is not None]


def item_from_post(post: dict[str, Any]) -> ContentItem | None:
    """Map one Ghost post object onto a ContentItem; ``None`` without an id."""
    item_id = _string(post.get("id"))
    if not item_id or not item_id.strip():
        return None

    # custom_excerpt is author-written; excerpt is Ghost's generated fallback
    excerpt = _string(post.get("custom_excerpt")) or _string(post.get("excerpt"))

    return ContentItem(
        id=item_id.strip(),
        title=_string(post.get("title")) or "",
        slug=_string(post.get("slug")) or "",
        url=_string(post.get("url")) or "",
        published_at=_string(post.get("published_at")),
        html=_string(post.get("html")),
        plaintext=_string(post.get("plaintext")),
        excerpt=excerpt,
        primary_tag=_taxonomy_ref(post.get("primary_tag")),
        tags=_taxonomy_list(post.get("tags")),
        authors=_taxonomy_list(post.get("authors")),
        feature_image=_string(post.get("feature_image")),
    )


# Ghost webhooks wrap the post as {"post": {"current": {...}, "previous": {...}}};
# other senders post the item directly or a {"posts": [...]} collection
def _resolve_post(data: dict[str, Any]) -> dict[str, Any] | None:
    wrapper = data.get("post", data)
    if isinstance(wrapper, dict):
        current = _non_empty_dict(wrapper.get("current"))
        if current is not None:
            return current
        if "current" not in wrapper and "previous" not in wrapper and wrapper.get("id"):
            return wrapper

    posts = data.get("posts")
    if isinstance(posts, list) and posts:
        return _non_empty_dict(posts[0])
    return None


def resolve_item(payload: Any) -> ContentItem | None:
    """Resolve the published item from a webhook payload; ``None`` if malformed."""
    data = _as_dict(payload)
    if data is None:
        return None
    post = _resolve_post(data)
    if post is None:
        logger.info("service: no post found in payload")
        return None
    item = item_from_post(post)
    if item is None:
        logger.info("service: post in payload has no id")
    return item


def resolve_deletion(payload: Any) -> DeletionTarget | None:
    """Resolve the slug to delete, from the current or the previous (deleted) state."""
    data = _as_dict(payload)
    if data is None:
        return None

    wrapper = data.get("post")
    if not isinstance(wrapper, dict):
        return None

    post_data = _non_empty_dict(wrapper.get("current")) or _non_empty_dict(
        wrapper.get("previous")
    )
    if post_data is None:
        return None

    slug = _string(post_data.get("slug"))
    if not slug or not slug.strip():
        return None

    return DeletionTarget(
        slug=slug.strip(),
        item_id=_string(post_data.get("id")),
        title=_string(post_data.get("title")),
    )


async def fetch_all_items(client: GhostClient) -> list[ContentItem]:
    posts = await client.fetch_all_posts()
    items: list[ContentItem] = []
    for post in posts:
        item = item_from_post(post)
        if item is None:
            logger.info("service: skipping post without id (slug=%r)", post.get("slug"))
            continue
        items.append(item)
    return items
