"""Collecting the tags registered while a cached computation runs.

Primitives that have no backend-side notion of "the current computation"
forward ``register_tags`` calls here. A caller wraps its computation in
``collect_tags()`` and reads the collected tags afterwards:

    with collect_tags() as tags:
        cache.admin.users.byId.cache_tag(id="123")
    store(value, tags=tags)

Collection is tracked in a ``ContextVar`` so threads and asyncio tasks each
see their own collector. Nested collectors also feed every enclosing one.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar

_COLLECTORS: ContextVar[tuple[list[str], ...]] = ContextVar(
    "_tagscope_collectors", default=()
)


@contextmanager
def collect_tags() -> Iterator[list[str]]:
    """Collect every tag registered inside the block, in order, deduplicated."""
    collected: list[str] = []
    token = _COLLECTORS.set((*_COLLECTORS.get(), collected))
    try:
        yield collected
    finally:
        _COLLECTORS.reset(token)


def record_tags(tags: Iterable[str]) -> bool:
    """Add tags to the active collectors. Returns False when none is active."""
    collectors = _COLLECTORS.get()
    if not collectors:
        return False
    tags = list(tags)
    for collected in collectors:
        for tag in tags:
            if tag not in collected:
                collected.append(tag)
    return True


def is_collecting() -> bool:
    """True inside a ``collect_tags()`` block."""
    return bool(_COLLECTORS.get())


__all__ = ["collect_tags", "is_collecting", "record_tags"]
