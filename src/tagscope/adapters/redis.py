"""Redis-backed primitives."""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Iterable
from typing import Any

from tagscope.context import record_tags
from tagscope.duration import parse_duration
from tagscope.tags import tag_prefixes
from tagscope.types import Duration, Invalidation, InvalidationMode, StalenessProfile

logger = logging.getLogger(__name__)


def _serialize_invalidation(invalidation: Invalidation) -> str:
    """Serialize an invalidation marker to JSON."""
    return json.dumps({"mode": invalidation.mode, "at": invalidation.at})


def _deserialize_invalidation(tag: str, data: bytes | str) -> Invalidation:
    """Deserialize JSON to an invalidation marker."""
    if isinstance(data, bytes):
        data = data.decode("utf-8")
    obj = json.loads(data)
    return Invalidation(tag=tag, mode=obj["mode"], at=obj["at"])


class RedisPrimitives:
    """Sync Redis primitives.

    Each invalidation is stored under ``{prefix}:tag:{tag}`` and kept for
    ``retention`` so readers comparing against entry creation times can
    still see it.
    """

    def __init__(
        self,
        client: Any,  # redis.Redis
        *,
        prefix: str = "tagscope",
        retention: Duration = "1d",
    ) -> None:
        if not prefix:
            raise ValueError("prefix must not be empty")
        self._client = client
        self._prefix = prefix
        self._retention = parse_duration(retention)
        if self._retention <= 0:
            raise ValueError("retention must be positive")

    def _tag_key(self, tag: str) -> str:
        """Generate full Redis key for a tag's invalidation marker."""
        return f"{self._prefix}:tag:{tag}"

    def register_tags(self, tags: list[str]) -> None:
        if not record_tags(tags):
            logger.debug("register_tags outside collect_tags(): %s", tags)

    def invalidate_stale(self, tag: str, profile: StalenessProfile) -> None:
        self._invalidate(tag, "stale")

    def invalidate_immediate(self, tag: str) -> None:
        self._invalidate(tag, "expire")

    def get_invalidation(self, tag: str) -> Invalidation | None:
        """The invalidation recorded for exactly ``tag``, if any."""
        data = self._client.get(self._tag_key(tag))
        if data is None:
            return None
        return _deserialize_invalidation(tag, data)

    def latest_invalidation(self, tags: Iterable[str]) -> Invalidation | None:
        """Most recent invalidation covering any of ``tags``."""
        candidates = list(dict.fromkeys(p for tag in tags for p in tag_prefixes(tag)))
        if not candidates:
            return None

        values = self._client.mget([self._tag_key(tag) for tag in candidates])
        latest: Invalidation | None = None
        for tag, data in zip(candidates, values):
            if data is None:
                continue
            hit = _deserialize_invalidation(tag, data)
            if latest is None or hit.at >= latest.at:
                latest = hit
        return latest

    def clear(self) -> None:
        """Delete every invalidation marker under the prefix."""
        cursor = 0
        pattern = f"{self._prefix}:tag:*"
        while True:
            cursor, keys = self._client.scan(cursor, match=pattern, count=100)
            if keys:
                self._client.delete(*keys)
            if cursor == 0:
                break

    def disconnect(self) -> None:
        """Close the Redis connection."""
        self._client.close()

    def _invalidate(self, tag: str, mode: InvalidationMode) -> None:
        invalidation = Invalidation(tag=tag, mode=mode, at=int(time.time() * 1000))
        self._client.set(
            self._tag_key(tag),
            _serialize_invalidation(invalidation),
            px=self._retention,
        )
        logger.debug("Stored %s invalidation for %s", mode, tag)
