# models.py defines in-memory data structures the indexing layer uses while building records
# does not touch the network or any logic beyond validation - just shape definitions

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# one tag or author as Ghost returns it; any of the three identifiers may be missing
@dataclass(frozen=True)
class TaxonomyRef:
    name: str | None = None
    slug: str | None = None
    id: str | None = None


# a post resolved from a webhook payload or a Content API page
# body arrives in up to three forms; the normalizer picks one
@dataclass
class ContentItem:
    id: str
    title: str = ""
    slug: str = ""
    url: str = ""
    published_at: str | None = None
    html: str | None = None
    plaintext: str | None = None
    excerpt: str | None = None
    primary_tag: TaxonomyRef | None = None
    tags: list[TaxonomyRef] = field(default_factory=list)
    authors: list[TaxonomyRef] = field(default_factory=list)
    feature_image: str | None = None


# one contiguous, size-bounded slice of an item's normalized body text
@dataclass(frozen=True)
class Chunk:
    index: int
    text: str


# flattened taxonomy shared by every record of one item
@dataclass(frozen=True)
class FlatMetadata:
    primary_tag: str | None = None
    tags: tuple[str, ...] = ()
    authors: tuple[str, ...] = ()


# one publishable unit: one chunk plus the item's shared metadata.
# frozen so degradation steps return new records instead of mutating shared state
@dataclass(frozen=True)
class SearchRecord:
    object_id: str
    post_id: str
    title: str
    slug: str
    url: str
    published_at: str | None
    primary_tag: str | None
    tags: tuple[str, ...]
    authors: tuple[str, ...]
    chunk_index: int
    plaintext: str
    excerpt: str | None = None
    feature_image: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Algolia object shape.  Key order is fixed so serialization is stable."""
        payload: dict[str, Any] = {
            "objectID": self.object_id,
            "postId": self.post_id,
            "title": self.title,
            "slug": self.slug,
            "url": self.url,
            "published_at": self.published_at,
            "primary_tag": self.primary_tag,
            "tags": list(self.tags),
            "authors": list(self.authors),
            "chunkIndex": self.chunk_index,
            "plaintext": self.plaintext,
        }
        if self.excerpt is not None:
            payload["excerpt"] = self.excerpt
        if self.feature_image is not None:
            payload["feature_image"] = self.feature_image
        return payload


class BudgetState(str, Enum):
    ACCEPTED = "accepted"
    FORCED = "forced"


@dataclass(frozen=True)
class EnforcementResult:
    record: SearchRecord
    state: BudgetState
    size_bytes: int
    applied_steps: tuple[str, ...] = ()


# every byte threshold the record pipeline works with, passed in explicitly
# so the core never reads process environment
@dataclass(frozen=True)
class RecordLimits:
    chunk_bytes: int = 5500
    soft_limit_bytes: int = 9500
    hard_limit_bytes: int = 10000
    shrink_step_bytes: int = 500
    min_text_bytes: int = 1000
    hard_margin_bytes: int = 200
    absolute_min_text_bytes: int = 0
    excerpt_max_bytes: int = 600
    max_authors: int = 5
    max_tags: int = 10

    def __post_init__(self) -> None:
        if self.chunk_bytes < 1:
            raise ValueError("chunk_bytes must be at least 1.")
        if self.shrink_step_bytes < 1:
            raise ValueError("shrink_step_bytes must be at least 1.")
        if self.soft_limit_bytes > self.hard_limit_bytes:
            raise ValueError(
                f"soft_limit_bytes ({self.soft_limit_bytes}) must not exceed "
                f"hard_limit_bytes ({self.hard_limit_bytes})."
            )
        if self.hard_margin_bytes < 0 or self.absolute_min_text_bytes < 0:
            raise ValueError("hard_margin_bytes and absolute_min_text_bytes must be >= 0.")
        if self.max_authors < 0 or self.max_tags < 0:
            raise ValueError("max_authors and max_tags must be >= 0.")


class SyncStatus(str, Enum):
    INDEXED = "indexed"
    DELETED = "deleted"
    REINDEXED = "reindexed"
    SKIPPED = "skipped"


# what one invocation did; skipped outcomes are informational, not failures
@dataclass(frozen=True)
class SyncOutcome:
    status: SyncStatus
    message: str
    record_count: int = 0
