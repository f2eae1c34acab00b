"""create_cache - scope-aware cache tag trees from a schema.

Usage:
    schema = {
        "users": {
            "list": {},
            "byId": {"_params": ["id"]},
        },
    }
    cache = create_cache(schema, ["admin", "public"], primitives)

    # Inside a cached computation
    cache.admin.users.byId.cache_tag(id="123")

    # After a write
    cache.admin.users.byId.revalidate_tag(id="123")
    cache.admin.users.update_tag()

    # Cross-scope
    cache.users.byId.revalidate_tag(id="123")
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, cast

from tagscope.errors import SchemaError
from tagscope.nodes import BranchNode, LeafNode, NodeBinding, build_tree
from tagscope.primitives import CachePrimitives
from tagscope.schema import RESERVED_NAMES, child_keys, validate_schema
from tagscope.types import ROOT_TAG, SchemaDiagnostic, TagFormat

logger = logging.getLogger(__name__)


class Cache(BranchNode):
    """The assembled cache: cross-scope tree at the root, one child per scope."""

    __slots__ = ("_diagnostics", "_scopes")

    def __init__(
        self,
        binding: NodeBinding,
        primitives: CachePrimitives,
        children: Mapping[str, LeafNode | BranchNode],
        *,
        scopes: Sequence[str],
        diagnostics: Iterable[SchemaDiagnostic] = (),
    ) -> None:
        super().__init__(binding, primitives, children)
        self._scopes = tuple(scopes)
        self._diagnostics = tuple(diagnostics)

    @property
    def scopes(self) -> tuple[str, ...]:
        """Scope names in declaration order."""
        return self._scopes

    @property
    def diagnostics(self) -> tuple[SchemaDiagnostic, ...]:
        """Problems found in the schema and scopes while building."""
        return self._diagnostics

    def scope(self, name: str) -> BranchNode:
        """The scoped tree for ``name``, even if a resource shares the name."""
        if name not in self._scopes:
            raise KeyError(f"Unknown scope {name!r}")
        return cast(BranchNode, self._children[name])


def check_scopes(schema: Any, scopes: Sequence[str]) -> list[SchemaDiagnostic]:
    """Report scope names that collide or would produce ambiguous tags."""
    diagnostics: list[SchemaDiagnostic] = []
    resources = set(child_keys(schema))
    seen: set[str] = set()

    for scope in scopes:
        path = (scope,)
        if not scope:
            diagnostics.append(
                SchemaDiagnostic(path, "empty-scope", "empty scope name renders empty segments")
            )
        if "/" in scope:
            diagnostics.append(
                SchemaDiagnostic(path, "scope-separator", "scope name contains '/'")
            )
        if scope in seen:
            diagnostics.append(
                SchemaDiagnostic(path, "duplicate-scope", "scope is declared more than once")
            )
        if scope in resources:
            diagnostics.append(
                SchemaDiagnostic(
                    path,
                    "scope-collision",
                    "scope shadows the top-level resource of the same name",
                )
            )
        if scope in RESERVED_NAMES or scope.startswith("_"):
            diagnostics.append(
                SchemaDiagnostic(
                    path,
                    "reserved-name",
                    "name shadows a node attribute; use cache.scope(name)",
                )
            )
        if scope == ROOT_TAG:
            diagnostics.append(
                SchemaDiagnostic(
                    path,
                    "root-collision",
                    f"the root invalidates as {ROOT_TAG!r}, which only hits this scope",
                )
            )
        seen.add(scope)

    for diagnostic in diagnostics:
        logger.warning("Scope problem at %s", diagnostic)
    return diagnostics


def create_cache(
    schema: Mapping[str, Any],
    scopes: Sequence[str],
    primitives: CachePrimitives,
    *,
    tag_format: TagFormat = "embedded",
    strict: bool = False,
) -> Cache:
    """Create a cache tag tree from a schema and scopes.

    Args:
        schema: Nested mapping of resources; ``_params`` declares parameters
        scopes: Scope names, e.g. ``["admin", "public"]``
        primitives: The register/invalidate capability set nodes call into
        tag_format: "embedded" (default) or the legacy "flat" format
        strict: Raise SchemaError instead of only reporting diagnostics

    Returns:
        Cache whose root holds the cross-scope tree plus one tree per scope
    """
    if isinstance(scopes, str):
        raise TypeError("scopes must be a sequence of names, not a string")
    if not isinstance(primitives, CachePrimitives):
        raise TypeError(
            "primitives must provide register_tags, invalidate_stale and "
            f"invalidate_immediate, got {type(primitives).__name__}"
        )

    diagnostics = [*validate_schema(schema), *check_scopes(schema, scopes)]
    if strict and diagnostics:
        raise SchemaError(diagnostics)

    unscoped = build_tree(schema, primitives, tag_format=tag_format)
    children: dict[str, LeafNode | BranchNode] = dict(unscoped.children)
    for scope in scopes:
        children[scope] = build_tree(
            schema, primitives, scope=scope, tag_format=tag_format
        )

    logger.debug(
        "Built cache with %d resources and %d scopes (%s format)",
        len(unscoped.children),
        len(scopes),
        tag_format,
    )
    return Cache(
        unscoped._binding,
        primitives,
        children,
        scopes=scopes,
        diagnostics=diagnostics,
    )


__all__ = ["Cache", "check_scopes", "create_cache"]
