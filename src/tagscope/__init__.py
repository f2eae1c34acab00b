"""tagscope - Hierarchical, scope-aware cache tags from a declarative schema."""

from contextlib import suppress

# Adapters
from tagscope.adapters import MemoryPrimitives

# Facade
from tagscope.cache import Cache, create_cache

# Tag collection
from tagscope.context import collect_tags, record_tags

# Duration parsing
from tagscope.duration import parse_duration

# Errors
from tagscope.errors import (
    MissingParamsError,
    ParamsError,
    PrimitiveError,
    SchemaError,
    SkippedParamsError,
    TagScopeError,
    UnknownParamsError,
)
from tagscope.nodes import BranchNode, LeafNode, build_tree

# Primitives API
from tagscope.primitives import (
    CachePrimitives,
    NoopPrimitives,
    RecordingPrimitives,
    create_primitives,
)
from tagscope.schema import child_keys, extract_params, is_leaf, validate_schema

# Tag rendering
from tagscope.tags import (
    build_all_tags,
    build_all_tags_with_embedded_params,
    build_ancestor_tags,
    build_ancestor_tags_with_embedded_params,
    build_scoped_tag,
    build_tag,
    build_tag_with_embedded_params,
    build_unscoped_tags,
    build_unscoped_tags_with_embedded_params,
)

# Core types
from tagscope.types import (
    PARAMS_KEY,
    Duration,
    Invalidation,
    SchemaDiagnostic,
    TagFormat,
)

# Optional adapter imports - only available when dependencies are installed
with suppress(ImportError):
    from tagscope.adapters import RedisPrimitives

with suppress(ImportError):
    from tagscope.adapters import WebhookPrimitives

__version__ = "0.1.0"

__all__ = [
    "PARAMS_KEY",
    "BranchNode",
    "Cache",
    "CachePrimitives",
    "Duration",
    "Invalidation",
    "LeafNode",
    "MemoryPrimitives",
    "MissingParamsError",
    "NoopPrimitives",
    "ParamsError",
    "PrimitiveError",
    "RecordingPrimitives",
    "RedisPrimitives",
    "SchemaDiagnostic",
    "SchemaError",
    "SkippedParamsError",
    "TagFormat",
    "TagScopeError",
    "UnknownParamsError",
    "WebhookPrimitives",
    "build_all_tags",
    "build_all_tags_with_embedded_params",
    "build_ancestor_tags",
    "build_ancestor_tags_with_embedded_params",
    "build_scoped_tag",
    "build_tag",
    "build_tag_with_embedded_params",
    "build_tree",
    "build_unscoped_tags",
    "build_unscoped_tags_with_embedded_params",
    "child_keys",
    "collect_tags",
    "create_cache",
    "create_primitives",
    "extract_params",
    "is_leaf",
    "parse_duration",
    "record_tags",
    "validate_schema",
]
