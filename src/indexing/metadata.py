from __future__ import annotations

from typing import Any

from src.indexing.models import ContentItem, FlatMetadata, RecordLimits, TaxonomyRef


# name beats slug beats id; the first non-blank one is the display value
def flatten_ref(ref: TaxonomyRef | None) -> str | None:
    if ref is None:
        return None
    for candidate in (ref.name, ref.slug, ref.id):
        if isinstance(candidate, str) and candidate.strip():
            return candidate.strip()
    return None


def _flatten_list(refs: Any, limit: int) -> list[str]:
    if not isinstance(refs, (list, tuple)):
        return []
    values: list[str] = []
    for ref in refs:
        if len(values) >= limit:
            break
        value = flatten_ref(ref) if isinstance(ref, TaxonomyRef) else None
        if value:
            values.append(value)
    return values


def flatten_contributors(authors: Any, limit: int = 5) -> list[str]:
    return _flatten_list(authors, limit)


def flatten_categories(tags: Any, limit: int = 10) -> list[str]:
    return _flatten_list(tags, limit)


def flatten_primary(primary: TaxonomyRef | None) -> str | None:
    return flatten_ref(primary)


def flatten_metadata(item: ContentItem, limits: RecordLimits) -> FlatMetadata:
    return FlatMetadata(
        primary_tag=flatten_primary(item.primary_tag),
        tags=tuple(flatten_categories(item.tags, limits.max_tags)),
        authors=tuple(flatten_contributors(item.authors, limits.max_authors)),
    )
