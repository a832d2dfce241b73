"""Response templates for webhook invocations.

Each function returns a ready ``WebhookResponse``.  Benign outcomes
(nothing to index, malformed payload, integration switched off) are
200s with an explanatory body so the CMS does not retry them.  Real
failures are 500s carrying the exception class and message so the
caller's retry logs show what broke; credentials never appear here.
"""

from __future__ import annotations

from dataclasses import dataclass
import json


@dataclass(frozen=True)
class WebhookResponse:
    status_code: int
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def success(message: str) -> WebhookResponse:
    return WebhookResponse(status_code=200, body=message)


def skipped(reason: str) -> WebhookResponse:
    """Nothing was indexed or deleted, and that is not an error."""
    return WebhookResponse(status_code=200, body=reason)


def not_activated() -> WebhookResponse:
    return WebhookResponse(status_code=200, body="Algolia is not activated")


def failure(exc: BaseException, action: str) -> WebhookResponse:
    """Format an upstream or budget failure as a retryable 500."""
    return WebhookResponse(
        status_code=500,
        body=json.dumps(
            {
                "msg": f"An error occurred during {action}.",
                "error": f"{type(exc).__name__}: {exc}",
            }
        ),
    )
