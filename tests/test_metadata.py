from __future__ import annotations

from src.indexing.metadata import (
    flatten_categories,
    flatten_contributors,
    flatten_metadata,
    flatten_primary,
    flatten_ref,
)
from src.indexing.models import ContentItem, RecordLimits, TaxonomyRef


def test_name_then_slug_then_id():
    assert flatten_ref(TaxonomyRef(name="Name", slug="slug", id="id")) == "Name"
    assert flatten_ref(TaxonomyRef(name="  ", slug="slug", id="id")) == "slug"
    assert flatten_ref(TaxonomyRef(id="id")) == "id"
    assert flatten_ref(TaxonomyRef()) is None
    assert flatten_ref(None) is None


def test_contributors_capped_at_five_in_order():
    authors = [TaxonomyRef(name=f"Author {i}") for i in range(12)]
    assert flatten_contributors(authors) == [f"Author {i}" for i in range(5)]


def test_categories_capped_at_ten():
    tags = [TaxonomyRef(slug=f"tag-{i}") for i in range(15)]
    assert flatten_categories(tags) == [f"tag-{i}" for i in range(10)]


def test_unusable_entries_dropped_before_truncation():
    authors = [TaxonomyRef(), TaxonomyRef(name="")] + [
        TaxonomyRef(name=f"A{i}") for i in range(6)
    ]
    assert flatten_contributors(authors) == ["A0", "A1", "A2", "A3", "A4"]


def test_non_list_input():
    assert flatten_categories(None) == []
    assert flatten_contributors("not a list") == []


def test_primary_category():
    assert flatten_primary(TaxonomyRef(slug="news")) == "news"
    assert flatten_primary(None) is None


def test_flatten_metadata_honours_limits():
    item = ContentItem(
        id="1",
        primary_tag=TaxonomyRef(name="News"),
        tags=[TaxonomyRef(name=f"t{i}") for i in range(4)],
        authors=[TaxonomyRef(name=f"a{i}") for i in range(4)],
    )
    metadata = flatten_metadata(item, RecordLimits(max_tags=2, max_authors=3))
    assert metadata.primary_tag == "News"
    assert metadata.tags == ("t0", "t1")
    assert metadata.authors == ("a0", "a1", "a2")
