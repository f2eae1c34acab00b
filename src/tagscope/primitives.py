"""The three cache primitives a tag tree drives.

A cache tree never touches storage itself. Every node operation ends in one
of three calls on an injected ``CachePrimitives`` implementation:

- register_tags(): the running cached computation depends on these tags
- invalidate_stale(): serve stale while revalidating in the background
- invalidate_immediate(): expire now, the next read recomputes
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from tagscope.types import StalenessProfile


@runtime_checkable
class CachePrimitives(Protocol):
    """Capability set injected into ``create_cache``."""

    def register_tags(self, tags: list[str]) -> None:
        """Declare that the current cached computation depends on ``tags``."""
        ...

    def invalidate_stale(self, tag: str, profile: StalenessProfile) -> None:
        """Mark results under ``tag`` stale; keep serving them while refreshing."""
        ...

    def invalidate_immediate(self, tag: str) -> None:
        """Expire results under ``tag``; the next read must recompute."""
        ...


class NoopPrimitives:
    """Primitives that do nothing. For wiring trees where no cache exists."""

    def register_tags(self, tags: list[str]) -> None:
        pass

    def invalidate_stale(self, tag: str, profile: StalenessProfile) -> None:
        pass

    def invalidate_immediate(self, tag: str) -> None:
        pass


@dataclass
class RecordingPrimitives:
    """Test double that records every primitive call in order."""

    registered: list[list[str]] = field(default_factory=list)
    stale: list[tuple[str, StalenessProfile]] = field(default_factory=list)
    expired: list[str] = field(default_factory=list)
    calls: list[tuple[str, tuple[object, ...]]] = field(default_factory=list)

    def register_tags(self, tags: list[str]) -> None:
        self.registered.append(list(tags))
        self.calls.append(("register_tags", (list(tags),)))

    def invalidate_stale(self, tag: str, profile: StalenessProfile) -> None:
        self.stale.append((tag, profile))
        self.calls.append(("invalidate_stale", (tag, profile)))

    def invalidate_immediate(self, tag: str) -> None:
        self.expired.append(tag)
        self.calls.append(("invalidate_immediate", (tag,)))

    def reset(self) -> None:
        """Forget all recorded calls."""
        self.registered.clear()
        self.stale.clear()
        self.expired.clear()
        self.calls.clear()


@dataclass(frozen=True, slots=True)
class CallablePrimitives:
    """Primitives backed by three plain functions."""

    _register_tags: Callable[[list[str]], object]
    _invalidate_stale: Callable[[str, StalenessProfile], object]
    _invalidate_immediate: Callable[[str], object]

    def register_tags(self, tags: list[str]) -> None:
        self._register_tags(tags)

    def invalidate_stale(self, tag: str, profile: StalenessProfile) -> None:
        self._invalidate_stale(tag, profile)

    def invalidate_immediate(self, tag: str) -> None:
        self._invalidate_immediate(tag)


def create_primitives(
    *,
    register_tags: Callable[[list[str]], object],
    invalidate_stale: Callable[[str, StalenessProfile], object],
    invalidate_immediate: Callable[[str], object],
) -> CallablePrimitives:
    """Wrap three functions as a primitives implementation.

    Args:
        register_tags: Called with the ordered tag list from ``cache_tag``
        invalidate_stale: Called with a tag and the ``"max"`` profile
        invalidate_immediate: Called with a tag

    Returns:
        CallablePrimitives ready to pass to ``create_cache``
    """
    for name, fn in (
        ("register_tags", register_tags),
        ("invalidate_stale", invalidate_stale),
        ("invalidate_immediate", invalidate_immediate),
    ):
        if not callable(fn):
            raise TypeError(f"{name} must be callable, got {type(fn).__name__}")

    return CallablePrimitives(
        _register_tags=register_tags,
        _invalidate_stale=invalidate_stale,
        _invalidate_immediate=invalidate_immediate,
    )


__all__ = [
    "CachePrimitives",
    "CallablePrimitives",
    "NoopPrimitives",
    "RecordingPrimitives",
    "create_primitives",
]
