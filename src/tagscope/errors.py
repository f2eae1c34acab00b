"""Exceptions raised by tagscope."""

from __future__ import annotations

from collections.abc import Iterable

from tagscope.types import SchemaDiagnostic


class TagScopeError(Exception):
    """Base class for all tagscope errors."""


class SchemaError(TagScopeError, ValueError):
    """A schema produced diagnostics while building a strict cache."""

    def __init__(self, diagnostics: Iterable[SchemaDiagnostic]) -> None:
        self.diagnostics = tuple(diagnostics)
        lines = "\n".join(f"  {d}" for d in self.diagnostics)
        super().__init__(f"Schema has {len(self.diagnostics)} problem(s):\n{lines}")


class ParamsError(TagScopeError, ValueError):
    """Parameter values passed to a node don't fit its declared params."""

    reason = "Invalid params"

    def __init__(self, path: str, names: Iterable[str]) -> None:
        self.path = path
        self.names = tuple(names)
        super().__init__(f"{self.reason} for {path or '<root>'}: {', '.join(self.names)}")


class MissingParamsError(ParamsError):
    """cache_tag() was called without a value for every accumulated param."""

    reason = "Missing params"


class UnknownParamsError(ParamsError):
    """Values were supplied for names not declared along the node's path."""

    reason = "Unknown params"


class SkippedParamsError(ParamsError):
    """An invalidation supplied values after leaving out an earlier param.

    Values only render on their own segment, so a gap would turn a later
    value into a prefix of some other instance. Supply a leading run of the
    node's params instead.
    """

    reason = "Earlier params left out"


class PrimitiveError(TagScopeError, RuntimeError):
    """An adapter failed to deliver a tag operation to its backend."""
