"""Pure functions for building cache tag strings.

Wire format: path segments joined by ``/``; a segment carrying parameter
values is followed by ``:`` and the values joined by ``:``. Nothing is
escaped, so values containing ``/`` or ``:`` produce embedded separators.

Two rendering families exist:

- flat (legacy): every value is appended once to the end of the path,
  ``users/byId:123``
- embedded: each value is rendered on the segment that declared it,
  ``userPrivateData:u1/myWorkspaces/byWorkspaceId:w1``
"""

from collections.abc import Sequence

from tagscope.params import shift_params
from tagscope.types import ParamsBySegment, ParamValues


def _values(params: ParamValues, names: Sequence[str] | None = None) -> list[str]:
    """Supplied values as strings, skipping names whose value is None."""
    keys = params.keys() if names is None else names
    return [str(params[key]) for key in keys if params.get(key) is not None]


# =============================================================================
# Flat format
# =============================================================================


def build_tag(path: Sequence[str], params: ParamValues) -> str:
    """Build a tag from a resource path and optional param values.

    Examples:
        build_tag(["users", "byId"], {"id": "123"})  # 'users/byId:123'
        build_tag(["users", "list"], {})             # 'users/list'
    """
    if any(not segment for segment in path):
        raise ValueError(f"Empty path segment in {list(path)!r}")

    base = "/".join(path)
    values = _values(params)
    if not values:
        return base
    return f"{base}:{':'.join(values)}"


def build_ancestor_tags(path: Sequence[str]) -> list[str]:
    """Tags for every strict non-empty prefix of the path, root first.

    Example:
        build_ancestor_tags(["feedback", "threads", "byId"])
        # ['feedback', 'feedback/threads']
    """
    return ["/".join(path[:i]) for i in range(1, len(path))]


def build_scoped_tag(scope: str, tag: str) -> str:
    """Prefix a tag with a scope: ``admin`` + ``users`` -> ``admin/users``."""
    return f"{scope}/{tag}"


def build_all_tags(
    resource_path: Sequence[str],
    scope_path: Sequence[str],
    params: ParamValues,
) -> list[str]:
    """Full registration set for a scoped leaf.

    For scope ``admin``, path ``users/byId`` and ``{"id": "123"}``:
    ``admin/users/byId:123``, ``admin/users``, ``admin``,
    ``users/byId:123``, ``users``.
    """
    full_path = [*scope_path, *resource_path]
    return [
        build_tag(full_path, params),
        *reversed(build_ancestor_tags(full_path)),
        *build_unscoped_tags(resource_path, params),
    ]


def build_unscoped_tags(resource_path: Sequence[str], params: ParamValues) -> list[str]:
    """Registration set for a cross-scope leaf, most specific first."""
    return [
        build_tag(resource_path, params),
        *reversed(build_ancestor_tags(resource_path)),
    ]


# =============================================================================
# Embedded format
# =============================================================================


def build_tag_with_embedded_params(
    path: Sequence[str],
    params_by_segment: ParamsBySegment,
    params: ParamValues,
) -> str:
    """Build a tag with values rendered on the segment that declared them.

    Segments whose params have no supplied value render bare, so a partial
    set of values yields a broader tag:

        build_tag_with_embedded_params(
            ["userPrivateData", "myWorkspaces", "byId"],
            {0: ("userId",), 2: ("workspaceId",)},
            {"userId": "u1"},
        )
        # 'userPrivateData:u1/myWorkspaces/byId'
    """
    rendered = []
    for i, segment in enumerate(path):
        values = _values(params, params_by_segment.get(i, ()))
        rendered.append(f"{segment}:{':'.join(values)}" if values else segment)
    return "/".join(rendered)


def build_ancestor_tags_with_embedded_params(
    path: Sequence[str],
    params_by_segment: ParamsBySegment,
    params: ParamValues,
) -> list[str]:
    """Embedded-format tags for every strict non-empty prefix, root first."""
    return [
        build_tag_with_embedded_params(path[:i], params_by_segment, params)
        for i in range(1, len(path))
    ]


def build_all_tags_with_embedded_params(
    resource_path: Sequence[str],
    scope_path: Sequence[str],
    params_by_segment: ParamsBySegment,
    params: ParamValues,
) -> list[str]:
    """Full embedded-format registration set for a scoped leaf.

    ``params_by_segment`` is indexed against ``resource_path``; the scoped
    half shifts it past the scope prefix.
    """
    full_path = [*scope_path, *resource_path]
    scoped_params = shift_params(params_by_segment, len(scope_path))
    return [
        build_tag_with_embedded_params(full_path, scoped_params, params),
        *reversed(
            build_ancestor_tags_with_embedded_params(full_path, scoped_params, params)
        ),
        *build_unscoped_tags_with_embedded_params(
            resource_path, params_by_segment, params
        ),
    ]


def build_unscoped_tags_with_embedded_params(
    resource_path: Sequence[str],
    params_by_segment: ParamsBySegment,
    params: ParamValues,
) -> list[str]:
    """Embedded-format registration set for a cross-scope leaf."""
    return [
        build_tag_with_embedded_params(resource_path, params_by_segment, params),
        *reversed(
            build_ancestor_tags_with_embedded_params(
                resource_path, params_by_segment, params
            )
        ),
    ]


# =============================================================================
# Matching
# =============================================================================


def tag_prefixes(tag: str) -> list[str]:
    """Every prefix of a tag ending on a ``/`` or ``:`` boundary, then the tag.

    An invalidation of any of these tags covers ``tag``:

        tag_prefixes("users/byId:123")  # ['users', 'users/byId', 'users/byId:123']
    """
    prefixes = [tag[:i] for i, char in enumerate(tag) if char in "/:" and i > 0]
    prefixes.append(tag)
    return prefixes


__all__ = [
    "build_all_tags",
    "build_all_tags_with_embedded_params",
    "build_ancestor_tags",
    "build_ancestor_tags_with_embedded_params",
    "build_scoped_tag",
    "build_tag",
    "build_tag_with_embedded_params",
    "build_unscoped_tags",
    "build_unscoped_tags_with_embedded_params",
    "tag_prefixes",
]
