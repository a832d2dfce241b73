from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.indexing.models import RecordLimits

# .env lives at the project root; function runtimes start in another cwd.
_ENV_FILE = Path(__file__).resolve().parent / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=str(_ENV_FILE), case_sensitive=False)

    # ── Content source (Ghost Content API) ───────────────────────
    ghost_url: str = Field(default="", validation_alias="GHOST_URL")
    ghost_content_key: str | None = Field(default=None, validation_alias="GHOST_CONTENT_KEY")
    # Posts requested per page during a full reindex.  Ghost caps this at
    # 100 for most installs; "all" is not used so pagination stays bounded.
    ghost_page_size: int = Field(default=100, validation_alias="GHOST_PAGE_SIZE")

    # ── Search index (Algolia) ───────────────────────────────────
    # Feature flag: when false, webhooks return a benign no-op response.
    algolia_active: bool = Field(default=False, validation_alias="ALGOLIA_ACTIVE")
    algolia_app_id: str = Field(default="", validation_alias="ALGOLIA_APP_ID")
    algolia_admin_api_key: str | None = Field(
        default=None, validation_alias="ALGOLIA_ADMIN_API_KEY"
    )
    algolia_index_name: str = Field(default="", validation_alias="ALGOLIA_INDEX_NAME")
    # Records per batch request.  Algolia recommends ~1000 objects or
    # ~10MB per call, whichever comes first.
    algolia_batch_size: int = Field(default=1000, validation_alias="ALGOLIA_BATCH_SIZE")

    http_timeout_seconds: float = Field(default=30.0, validation_alias="HTTP_TIMEOUT_SECONDS")

    # ── Record size budget ───────────────────────────────────────
    # Body text is split into chunks of at most this many UTF-8 bytes.
    record_chunk_bytes: int = Field(default=5500, validation_alias="RECORD_CHUNK_BYTES")
    # Target serialized record size; the enforcer degrades records above it.
    record_soft_limit_bytes: int = Field(
        default=9500, validation_alias="RECORD_SOFT_LIMIT_BYTES"
    )
    # Algolia's per-record limit on the free/build plans.  Never exceeded.
    record_hard_limit_bytes: int = Field(
        default=10000, validation_alias="RECORD_HARD_LIMIT_BYTES"
    )
    record_shrink_step_bytes: int = Field(
        default=500, validation_alias="RECORD_SHRINK_STEP_BYTES"
    )
    # Graceful text shrinking stops here; only the forced clamp goes lower.
    record_min_text_bytes: int = Field(default=1000, validation_alias="RECORD_MIN_TEXT_BYTES")
    record_hard_margin_bytes: int = Field(
        default=200, validation_alias="RECORD_HARD_MARGIN_BYTES"
    )
    record_absolute_min_text_bytes: int = Field(
        default=0, validation_alias="RECORD_ABSOLUTE_MIN_TEXT_BYTES"
    )
    record_excerpt_max_bytes: int = Field(
        default=600, validation_alias="RECORD_EXCERPT_MAX_BYTES"
    )
    record_max_authors: int = Field(default=5, validation_alias="RECORD_MAX_AUTHORS")
    record_max_tags: int = Field(default=10, validation_alias="RECORD_MAX_TAGS")

    # Logging verbosity for the CLI / function process (DEBUG, INFO, WARNING).
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    def record_limits(self) -> RecordLimits:
        """Build the explicit budget handed to the record pipeline."""
        return RecordLimits(
            chunk_bytes=self.record_chunk_bytes,
            soft_limit_bytes=self.record_soft_limit_bytes,
            hard_limit_bytes=self.record_hard_limit_bytes,
            shrink_step_bytes=self.record_shrink_step_bytes,
            min_text_bytes=self.record_min_text_bytes,
            hard_margin_bytes=self.record_hard_margin_bytes,
            absolute_min_text_bytes=self.record_absolute_min_text_bytes,
            excerpt_max_bytes=self.record_excerpt_max_bytes,
            max_authors=self.record_max_authors,
            max_tags=self.record_max_tags,
        )

    def algolia_safe_settings(self) -> dict[str, Any]:
        # Connection details minus the admin key, safe to log.
        return {
            "appId": self.algolia_app_id,
            "index": self.algolia_index_name,
        }


settings = Settings()
