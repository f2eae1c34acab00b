"""Cache tree nodes and the recursive tree builder.

``build_tree`` walks a schema once and mirrors it as a tree of nodes:

- LeafNode: cache_tag(), revalidate_tag(), update_tag()
- BranchNode: revalidate_tag(), update_tag() and its children as attributes

Every node is bound to its resource path, its scope prefix and the params
accumulated from the root, and is immutable once built.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from tagscope.errors import MissingParamsError, SkippedParamsError, UnknownParamsError
from tagscope.params import accumulate_params, param_names, shift_params
from tagscope.primitives import CachePrimitives
from tagscope.schema import child_keys, extract_params, is_leaf
from tagscope.tags import (
    build_all_tags,
    build_all_tags_with_embedded_params,
    build_tag,
    build_tag_with_embedded_params,
    build_unscoped_tags,
    build_unscoped_tags_with_embedded_params,
)
from tagscope.types import (
    MAX_STALENESS,
    ROOT_TAG,
    TAG_FORMATS,
    ParamsBySegment,
    ParamValues,
    TagFormat,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class NodeBinding:
    """Where a node sits: resource path, scope prefix and its params.

    ``params_by_segment`` is indexed against ``resource_path``.
    """

    resource_path: tuple[str, ...]
    scope_path: tuple[str, ...]
    params_by_segment: ParamsBySegment
    tag_format: TagFormat = "embedded"

    @property
    def full_path(self) -> tuple[str, ...]:
        return (*self.scope_path, *self.resource_path)

    @property
    def scoped_params_by_segment(self) -> dict[int, tuple[str, ...]]:
        return shift_params(self.params_by_segment, len(self.scope_path))

    @property
    def param_names(self) -> tuple[str, ...]:
        return param_names(self.params_by_segment)

    @property
    def path(self) -> str:
        return "/".join(self.full_path)


class _Node:
    """Behaviour shared by leaves and branches."""

    __slots__ = ("_binding", "_primitives")

    def __init__(self, binding: NodeBinding, primitives: CachePrimitives) -> None:
        self._binding = binding
        self._primitives = primitives

    @property
    def path(self) -> str:
        """Scope-prefixed resource path, for debugging."""
        return self._binding.path

    @property
    def params(self) -> tuple[str, ...]:
        """Parameter names accumulated from the root to this node."""
        return self._binding.param_names

    def tag(self, params: ParamValues | None = None, /, **kwargs: Any) -> str:
        """The tag revalidate_tag()/update_tag() would invalidate.

        Supplied values must be a leading run of ``params``; a value after a
        left-out param raises SkippedParamsError.
        """
        values = self._resolve(params, kwargs)
        names = self._binding.param_names
        last = max((i for i, name in enumerate(names) if name in values), default=-1)
        skipped = [name for name in names[:last] if name not in values]
        if skipped:
            raise SkippedParamsError(self.path, skipped)
        return self._render(values)

    def revalidate_tag(self, params: ParamValues | None = None, /, **kwargs: Any) -> None:
        """Stale-while-revalidate invalidation.

        Params are optional: leaving some out widens the invalidation.
        """
        tag = self.tag(params, **kwargs)
        logger.debug("invalidate_stale %s", tag)
        self._primitives.invalidate_stale(tag, MAX_STALENESS)

    def update_tag(self, params: ParamValues | None = None, /, **kwargs: Any) -> None:
        """Expire immediately. Params are optional, as for revalidate_tag()."""
        tag = self.tag(params, **kwargs)
        logger.debug("invalidate_immediate %s", tag)
        self._primitives.invalidate_immediate(tag)

    def _resolve(self, params: ParamValues | None, kwargs: Mapping[str, Any]) -> dict[str, object]:
        """Merge params, reject unknown names and order by declaration."""
        values = {**(params or {}), **kwargs}
        names = self._binding.param_names
        unknown = [name for name in values if name not in names]
        if unknown:
            raise UnknownParamsError(self.path, unknown)
        return {name: values[name] for name in names if values.get(name) is not None}

    def _render(self, values: ParamValues) -> str:
        binding = self._binding
        if binding.tag_format == "flat":
            return build_tag(binding.full_path, values)
        return build_tag_with_embedded_params(
            binding.full_path, binding.scoped_params_by_segment, values
        )


class LeafNode(_Node):
    """A terminal resource: can be read (cache_tag) and invalidated."""

    __slots__ = ()

    def tags(self, params: ParamValues | None = None, /, **kwargs: Any) -> list[str]:
        """The full, ordered tag set cache_tag() would register.

        Every accumulated param needs a value.
        """
        values = self._resolve(params, kwargs)
        missing = [name for name in self.params if name not in values]
        if missing:
            raise MissingParamsError(self.path, missing)

        binding = self._binding
        if binding.tag_format == "flat":
            if binding.scope_path:
                return build_all_tags(binding.resource_path, binding.scope_path, values)
            return build_unscoped_tags(binding.resource_path, values)

        if binding.scope_path:
            return build_all_tags_with_embedded_params(
                binding.resource_path,
                binding.scope_path,
                binding.params_by_segment,
                values,
            )
        return build_unscoped_tags_with_embedded_params(
            binding.resource_path, binding.params_by_segment, values
        )

    def cache_tag(self, params: ParamValues | None = None, /, **kwargs: Any) -> None:
        """Register this resource's tags for the running cached computation."""
        tags = self.tags(params, **kwargs)
        logger.debug("register_tags %s", tags)
        self._primitives.register_tags(tags)

    def __repr__(self) -> str:
        return f"LeafNode({self.path!r}, params={self.params!r})"


class BranchNode(_Node):
    """A node with children: invalidates its whole subtree."""

    __slots__ = ("_children",)

    def __init__(
        self,
        binding: NodeBinding,
        primitives: CachePrimitives,
        children: Mapping[str, LeafNode | BranchNode],
    ) -> None:
        super().__init__(binding, primitives)
        self._children = MappingProxyType(dict(children))

    @property
    def children(self) -> Mapping[str, LeafNode | BranchNode]:
        """Read-only view of child nodes by name."""
        return self._children

    def _render(self, values: ParamValues) -> str:
        return super()._render(values) or ROOT_TAG

    def __getattr__(self, name: str) -> LeafNode | BranchNode:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._children[name]
        except KeyError:
            raise AttributeError(
                f"{type(self).__name__} {self.path or '<root>'!r} has no child {name!r}"
            ) from None

    def __getitem__(self, name: str) -> LeafNode | BranchNode:
        return self._children[name]

    def __contains__(self, name: object) -> bool:
        return name in self._children

    def __iter__(self) -> Iterator[str]:
        return iter(self._children)

    def __len__(self) -> int:
        return len(self._children)

    def __dir__(self) -> list[str]:
        names = {name for name in self._children if name.isidentifier()}
        return sorted(set(super().__dir__()) | names)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.path!r}, params={self.params!r}, "
            f"children={list(self._children)!r})"
        )


def build_tree(
    schema: Any,
    primitives: CachePrimitives,
    *,
    scope: str | None = None,
    tag_format: TagFormat = "embedded",
) -> BranchNode:
    """Mirror a schema as a tree of cache nodes.

    Args:
        schema: Nested mapping describing the resources
        primitives: Where node operations end up
        scope: Scope name prefixed to every tag, or None for cross-scope tags
        tag_format: "embedded" (default) or the legacy "flat" format

    Returns:
        The root BranchNode
    """
    if tag_format not in TAG_FORMATS:
        raise ValueError(
            f"tag_format must be one of {', '.join(TAG_FORMATS)}, got {tag_format!r}"
        )
    scope_path = () if scope is None else (scope,)
    return _build_branch(schema, (), scope_path, {}, primitives, tag_format)


def _build_branch(
    node: Any,
    resource_path: tuple[str, ...],
    scope_path: tuple[str, ...],
    inherited: ParamsBySegment,
    primitives: CachePrimitives,
    tag_format: TagFormat,
) -> BranchNode:
    bound = accumulate_params(inherited, resource_path, extract_params(node))
    children: dict[str, LeafNode | BranchNode] = {}

    for key in child_keys(node):
        child = node[key]
        child_path = (*resource_path, key)
        if is_leaf(child):
            binding = NodeBinding(
                child_path,
                scope_path,
                accumulate_params(bound, child_path, extract_params(child)),
                tag_format,
            )
            children[key] = LeafNode(binding, primitives)
        else:
            children[key] = _build_branch(
                child, child_path, scope_path, bound, primitives, tag_format
            )

    binding = NodeBinding(resource_path, scope_path, bound, tag_format)
    return BranchNode(binding, primitives, children)


__all__ = ["BranchNode", "LeafNode", "NodeBinding", "build_tree"]
