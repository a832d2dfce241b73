from __future__ import annotations

import logging
import re

from bs4 import BeautifulSoup

from src.indexing.models import ContentItem

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")

# script/style bodies are code, not prose; they are removed with their contents
_NON_TEXT_TAGS = ("script", "style")


def _soup_from_html(text: str) -> BeautifulSoup:
    try:
        return BeautifulSoup(text, "lxml")
    except Exception:
        return BeautifulSoup(text, "html.parser")


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def strip_html(html: str | None) -> str:
    """Plain text of *html*: script/style dropped, tags become spaces, whitespace collapsed."""
    if not html:
        return ""
    soup = _soup_from_html(html)
    for tag in soup.find_all(_NON_TEXT_TAGS):
        tag.decompose()
    return collapse_whitespace(soup.get_text(" "))


def _clean(value: str | None) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip()


def normalize_text(item: ContentItem) -> str:
    """Resolve the single plain-text body to index for *item*.

    Priority: plaintext, stripped html, excerpt, title.  Returns ``""``
    when every source is blank, meaning the item has nothing to index.
    """
    plaintext = _clean(item.plaintext)
    if plaintext:
        return plaintext

    stripped = strip_html(item.html)
    if stripped:
        logger.debug("normalize: post %s has no plaintext, using stripped html", item.id)
        return stripped

    excerpt = _clean(item.excerpt)
    if excerpt:
        logger.info("normalize: post %s has no body text, using excerpt", item.id)
        return excerpt

    title = _clean(item.title)
    if title:
        logger.info("normalize: post %s has no body or excerpt, using title", item.id)
        return title

    return ""
