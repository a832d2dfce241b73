"""Algolia index publisher over the REST API.

Exposes the four operations the sync needs: apply index settings, save
a finished record batch, delete every record of one post, and clear the
index.  Uses ``httpx.AsyncClient`` directly instead of the Algolia SDK so
the publisher has the same dependency surface as the content-source
client.

Failure semantics:
  Any non-2xx response or transport error raises ``UpstreamError``.
  ``save`` sends its batches sequentially; an error on batch N leaves
  batches < N applied.  Callers that need all-or-nothing semantics must
  retry the whole invocation (records are idempotent by objectID).
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any
from urllib.parse import quote, urlencode

import httpx

from src.indexing.errors import ConfigurationError, UpstreamError
from src.indexing.models import SearchRecord

logger = logging.getLogger(__name__)


@dataclass
class IndexSettings:
    searchable_attributes: list[str] = field(
        default_factory=lambda: ["title", "unordered(plaintext)", "tags", "authors"]
    )
    attributes_for_faceting: list[str] = field(
        default_factory=lambda: [
            "filterOnly(slug)",
            "filterOnly(postId)",
            "searchable(tags)",
            "searchable(authors)",
            "primary_tag",
        ]
    )
    custom_ranking: list[str] = field(default_factory=lambda: ["desc(published_at)"])
    distinct: bool = True
    attribute_for_distinct: str = "postId"
    attributes_to_snippet: list[str] = field(default_factory=lambda: ["plaintext:30"])
    attributes_to_highlight: list[str] = field(default_factory=lambda: ["title", "plaintext"])
    snippet_ellipsis_text: str = "…"
    restrict_highlight_and_snippet_arrays: bool = True

    def to_payload(self) -> dict[str, Any]:
        return {
            "searchableAttributes": self.searchable_attributes,
            "attributesForFaceting": self.attributes_for_faceting,
            "customRanking": self.custom_ranking,
            "distinct": self.distinct,
            "attributeForDistinct": self.attribute_for_distinct,
            "attributesToSnippet": self.attributes_to_snippet,
            "attributesToHighlight": self.attributes_to_highlight,
            "snippetEllipsisText": self.snippet_ellipsis_text,
            "restrictHighlightAndSnippetArrays": self.restrict_highlight_and_snippet_arrays,
        }


def _filter_value(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class AlgoliaClient:
    """Thin async wrapper around one Algolia index."""

    def __init__(
        self,
        app_id: str,
        api_key: str | None,
        index_name: str,
        batch_size: int = 1000,
        timeout: float = 30.0,
        base_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        if not app_id or not api_key or not index_name:
            raise ConfigurationError(
                "Missing ALGOLIA_APP_ID, ALGOLIA_ADMIN_API_KEY or ALGOLIA_INDEX_NAME."
            )
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1.")
        self._app_id = app_id
        self._api_key = api_key
        self._index_name = index_name
        self._batch_size = batch_size
        self._timeout = timeout
        self._base_url = (base_url or f"https://{app_id}.algolia.net").rstrip("/")
        self._http_client = http_client

    def _headers(self) -> dict[str, str]:
        return {
            "X-Algolia-Application-Id": self._app_id,
            "X-Algolia-API-Key": self._api_key,
            "Content-Type": "application/json",
        }

    def _index_url(self, suffix: str = "") -> str:
        return f"{self._base_url}/1/indexes/{quote(self._index_name, safe='')}{suffix}"

    async def _send(self, method: str, url: str, payload: dict[str, Any] | None) -> Any:
        try:
            if self._http_client is not None:
                resp = await self._http_client.request(
                    method, url, json=payload, headers=self._headers()
                )
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    resp = await client.request(method, url, json=payload, headers=self._headers())
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise UpstreamError(
                "algolia",
                f"{method} {exc.request.url.path} failed with {status}: {exc.response.text[:200]}",
                status_code=status,
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamError("algolia", f"{method} request failed: {exc!r}") from exc

        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError:
            return {}

    # ── Public interface ──────────────────────────────────────

    async def set_settings(self, index_settings: IndexSettings | None = None) -> None:
        index_settings = index_settings or IndexSettings()
        await self._send("PUT", self._index_url("/settings"), index_settings.to_payload())
        logger.info("algolia: settings applied to index %r", self._index_name)

    async def save(self, records: list[SearchRecord]) -> int:
        """Upsert *records* by objectID; returns how many were sent."""
        if not records:
            return 0
        for start in range(0, len(records), self._batch_size):
            batch = records[start : start + self._batch_size]
            payload = {
                "requests": [
                    {"action": "updateObject", "body": record.to_payload()}
                    for record in batch
                ]
            }
            await self._send("POST", self._index_url("/batch"), payload)
            logger.debug(
                "algolia: saved batch %d-%d of %d",
                start, start + len(batch), len(records),
            )
        logger.info("algolia: saved %d record(s) to %r", len(records), self._index_name)
        return len(records)

    async def delete_item(self, *, slug: str | None = None, item_id: str | None = None) -> None:
        """Delete every record of one post, matched by post id or else by slug."""
        if item_id:
            filters = f"postId:{_filter_value(item_id)}"
        elif slug:
            filters = f"slug:{_filter_value(slug)}"
        else:
            raise ValueError("delete_item requires a slug or an item_id.")

        payload = {"params": urlencode({"filters": filters})}
        await self._send("POST", self._index_url("/deleteByQuery"), payload)
        logger.info("algolia: deleted records matching %s", filters)

    async def clear(self) -> None:
        await self._send("POST", self._index_url("/clear"), None)
        logger.info("algolia: cleared index %r", self._index_name)
