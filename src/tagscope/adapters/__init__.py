"""Bundled primitives implementations for tagscope."""

from contextlib import suppress

from tagscope.adapters.memory import MemoryPrimitives

# Optional adapters - only available when dependencies are installed
with suppress(ImportError):
    from tagscope.adapters.redis import RedisPrimitives

with suppress(ImportError):
    from tagscope.adapters.webhook import WebhookPrimitives

__all__ = [
    "MemoryPrimitives",
    "RedisPrimitives",
    "WebhookPrimitives",
]
