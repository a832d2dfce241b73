# client handles only Content API access and exposes paginated post retrieval
# normalization into ContentItem lives in service.py

from __future__ import annotations

import logging
from typing import Any

import httpx

from src.indexing.errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

POSTS_PATH = "/ghost/api/content/posts/"

DEFAULT_POST_PARAMS: dict[str, Any] = {
    "include": "authors,tags",
    "formats": "html,plaintext",
}


# pages come back as {"posts": [...], "meta": {"pagination": {"next": N | None}}}
def _extract_page(data: Any) -> tuple[list[dict[str, Any]], int | None]:
    if not isinstance(data, dict):
        raise UpstreamError("ghost", "Unexpected response shape from Content API posts endpoint.")

    posts = data.get("posts")
    if not isinstance(posts, list):
        raise UpstreamError("ghost", "Content API response is missing a 'posts' list.")

    pagination = (data.get("meta") or {}).get("pagination") or {}
    next_page = pagination.get("next")
    if not isinstance(next_page, int):
        next_page = None
    return [post for post in posts if isinstance(post, dict)], next_page


class GhostClient:
    """Read-only Ghost Content API access using a content key."""

    def __init__(
        self,
        base_url: str,
        content_key: str | None,
        page_size: int = 100,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        if not base_url or not content_key:
            raise ConfigurationError("Missing GHOST_URL or GHOST_CONTENT_KEY.")
        self._base_url = base_url.rstrip("/")
        self._content_key = content_key
        self._page_size = page_size
        self._timeout = timeout
        self._http_client = http_client

    async def _get(self, client: httpx.AsyncClient, params: dict[str, Any]) -> Any:
        try:
            resp = await client.get(f"{self._base_url}{POSTS_PATH}", params=params)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as exc:
            raise UpstreamError(
                "ghost",
                f"Content API error {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamError("ghost", f"Content API request failed: {exc!r}") from exc
        except ValueError as exc:
            raise UpstreamError("ghost", "Content API returned invalid JSON.") from exc

    async def fetch_page(
        self, page: int, client: httpx.AsyncClient | None = None
    ) -> tuple[list[dict[str, Any]], int | None]:
        params = {
            **DEFAULT_POST_PARAMS,
            "key": self._content_key,
            "limit": self._page_size,
            "page": page,
        }
        if client is not None:
            return _extract_page(await self._get(client, params))
        if self._http_client is not None:
            return _extract_page(await self._get(self._http_client, params))
        async with httpx.AsyncClient(timeout=self._timeout) as owned:
            return _extract_page(await self._get(owned, params))

    async def fetch_all_posts(self) -> list[dict[str, Any]]:
        """Walk every page until Ghost reports no next page or returns nothing."""
        if self._http_client is not None:
            return await self._fetch_all(self._http_client)
        async with httpx.AsyncClient(timeout=self._timeout) as owned:
            return await self._fetch_all(owned)

    async def _fetch_all(self, client: httpx.AsyncClient) -> list[dict[str, Any]]:
        posts: list[dict[str, Any]] = []
        page: int | None = 1
        while page is not None:
            batch, next_page = await self.fetch_page(page, client=client)
            logger.info("ghost: page %d returned %d post(s)", page, len(batch))
            if not batch:
                break
            posts.extend(batch)
            page = next_page
        logger.info("ghost: fetched %d post(s) in total", len(posts))
        return posts
