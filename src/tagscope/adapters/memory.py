"""In-process primitives that keep an invalidation log."""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Iterable

from tagscope.context import record_tags
from tagscope.duration import parse_duration
from tagscope.tags import tag_prefixes
from tagscope.types import Duration, Invalidation, InvalidationMode, StalenessProfile

logger = logging.getLogger(__name__)


class MemoryPrimitives:
    """Primitives backed by a dict of tag -> latest invalidation.

    register_tags() feeds the active ``collect_tags()`` block. Invalidations
    are remembered per tag for ``retention``; ``latest_invalidation()``
    answers which of a set of registered tags was hit last, matching on ``/``
    and ``:`` boundaries so ``users/byId`` covers ``users/byId:123``.
    """

    def __init__(self, *, retention: Duration = "1d") -> None:
        self._retention = parse_duration(retention)
        if self._retention <= 0:
            raise ValueError("retention must be positive")
        # Oldest first; every write moves its tag to the end
        self._invalidations: OrderedDict[str, Invalidation] = OrderedDict()
        self._lock = threading.Lock()

    def register_tags(self, tags: list[str]) -> None:
        if not record_tags(tags):
            logger.debug("register_tags outside collect_tags(): %s", tags)

    def invalidate_stale(self, tag: str, profile: StalenessProfile) -> None:
        self._invalidate(tag, "stale")

    def invalidate_immediate(self, tag: str) -> None:
        self._invalidate(tag, "expire")

    def get_invalidation(self, tag: str) -> Invalidation | None:
        """The invalidation recorded for exactly ``tag``, if any."""
        cutoff = self._cutoff()
        with self._lock:
            hit = self._invalidations.get(tag)
        if hit is None or hit.at <= cutoff:
            return None
        return hit

    def latest_invalidation(self, tags: Iterable[str]) -> Invalidation | None:
        """Most recent invalidation covering any of ``tags``."""
        cutoff = self._cutoff()
        latest: Invalidation | None = None
        with self._lock:
            for tag in tags:
                for prefix in tag_prefixes(tag):
                    hit = self._invalidations.get(prefix)
                    if hit is None or hit.at <= cutoff:
                        continue
                    if latest is None or hit.at >= latest.at:
                        latest = hit
        return latest

    def clear(self) -> None:
        """Forget every recorded invalidation."""
        with self._lock:
            self._invalidations.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._invalidations)

    def _cutoff(self) -> int:
        return int(time.time() * 1000) - self._retention

    def _invalidate(self, tag: str, mode: InvalidationMode) -> None:
        now = int(time.time() * 1000)
        invalidation = Invalidation(tag=tag, mode=mode, at=now)
        with self._lock:
            self._invalidations[tag] = invalidation
            self._invalidations.move_to_end(tag)
            pruned = self._prune(now - self._retention)
        logger.debug("Recorded %s invalidation for %s", mode, tag)
        if pruned:
            logger.debug("Pruned %d invalidations older than retention", pruned)

    def _prune(self, cutoff: int) -> int:
        pruned = 0
        while self._invalidations:
            oldest = next(iter(self._invalidations.values()))
            if oldest.at > cutoff:
                break
            self._invalidations.popitem(last=False)
            pruned += 1
        return pruned
