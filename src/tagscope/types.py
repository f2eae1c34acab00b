"""Core types for the tagscope library."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Literal

# Reserved schema key holding a node's parameter names
PARAMS_KEY = "_params"

# Segment index -> parameter names introduced at that segment
ParamsBySegment = Mapping[int, tuple[str, ...]]

# Parameter name -> value; None means "not supplied"
ParamValues = Mapping[str, object]

TagFormat = Literal["embedded", "flat"]
TAG_FORMATS: tuple[str, ...] = ("embedded", "flat")

# The only staleness profile nodes ever request
StalenessProfile = Literal["max"]
MAX_STALENESS: StalenessProfile = "max"

# Tag a branch renders when its path is empty (the unscoped root)
ROOT_TAG = "root"

InvalidationMode = Literal["stale", "expire"]

# Duration type alias
Duration = str | int | timedelta  # "30s", "5m", "2h", "1d", "1w", ms or timedelta


@dataclass(frozen=True, slots=True)
class SchemaDiagnostic:
    """Something the schema walker defaulted instead of failing on."""

    path: tuple[str, ...]
    code: str
    message: str

    def __str__(self) -> str:
        where = "/".join(self.path) or "<root>"
        return f"{where}: [{self.code}] {self.message}"


@dataclass(frozen=True, slots=True)
class Invalidation:
    """An invalidation recorded by one of the bundled adapters."""

    tag: str
    mode: InvalidationMode
    at: int  # Unix timestamp ms
