"""Primitives that forward invalidations to a remote revalidation endpoint."""

from __future__ import annotations

import logging
from typing import Any

from tagscope.context import record_tags
from tagscope.errors import PrimitiveError
from tagscope.types import StalenessProfile

logger = logging.getLogger(__name__)


class WebhookPrimitives:
    """Sync primitives posting invalidations over HTTP.

    Each invalidation is a POST of ``{"tag": ..., "mode": "stale", "profile":
    "max"}`` or ``{"tag": ..., "mode": "expire"}`` to ``url``. Tag
    registration stays local and feeds the active ``collect_tags()`` block.
    """

    def __init__(
        self,
        url: str,
        *,
        token: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        import httpx

        if timeout <= 0:
            raise ValueError("timeout must be positive")

        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._url = url
        self._client = httpx.Client(headers=headers, timeout=timeout)

    def _request(self, body: dict[str, Any]) -> None:
        """POST one invalidation, raising PrimitiveError on failure."""
        response = self._client.post(self._url, json=body)
        if not response.is_success:
            try:
                error = response.json().get("error", "Request failed")
            except Exception:
                error = f"HTTP {response.status_code}"
            raise PrimitiveError(f"Invalidation of {body['tag']!r} failed: {error}")
        logger.debug("Posted %s invalidation for %s", body["mode"], body["tag"])

    def register_tags(self, tags: list[str]) -> None:
        if not record_tags(tags):
            logger.debug("register_tags outside collect_tags(): %s", tags)

    def invalidate_stale(self, tag: str, profile: StalenessProfile) -> None:
        self._request({"tag": tag, "mode": "stale", "profile": profile})

    def invalidate_immediate(self, tag: str) -> None:
        self._request({"tag": tag, "mode": "expire"})

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()
