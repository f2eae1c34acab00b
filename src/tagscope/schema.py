"""Schema classification for declarative resource trees.

A schema is a plain nested mapping:

    schema = {
        "users": {
            "list": {},
            "byId": {"_params": ["id"]},
        },
        "workspaces": {
            "_params": ["workspaceId"],
            "members": {"_params": ["memberId"]},
        },
        "config": {},
    }

- A mapping with no keys other than ``_params`` is a leaf.
- A mapping with other keys is a branch; its ``_params`` (if any) are
  inherited by every descendant.
- Anything that is not a mapping is treated as an empty leaf.

Classification never raises. ``validate_schema`` reports every place where
the walker had to fall back to a default so integrators can spot malformed
schemas without the build failing.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from tagscope.params import accumulate_params, param_names
from tagscope.types import PARAMS_KEY, ROOT_TAG, ParamsBySegment, SchemaDiagnostic

logger = logging.getLogger(__name__)

# Node attributes that shadow same-named children on attribute access
RESERVED_NAMES = frozenset(
    {
        "cache_tag",
        "children",
        "diagnostics",
        "params",
        "path",
        "revalidate_tag",
        "scope",
        "scopes",
        "tag",
        "tags",
        "update_tag",
    }
)


def is_leaf(node: Any) -> bool:
    """True iff the node has no child keys besides its param declaration."""
    return not child_keys(node)


def extract_params(node: Any) -> tuple[str, ...]:
    """Declared parameter names of a node, or an empty tuple."""
    if not isinstance(node, Mapping):
        return ()
    declared = node.get(PARAMS_KEY)
    if not _is_param_list(declared):
        return ()
    return tuple(declared)


def child_keys(node: Any) -> tuple[str, ...]:
    """Child resource names in declaration order."""
    if not isinstance(node, Mapping):
        return ()
    return tuple(
        key for key in node if key != PARAMS_KEY and isinstance(key, str) and key
    )


def _is_param_list(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and all(
        isinstance(name, str) for name in value
    )


def validate_schema(schema: Any) -> list[SchemaDiagnostic]:
    """Walk the schema once and report every silently-defaulted node."""
    diagnostics: list[SchemaDiagnostic] = []

    def report(path: tuple[str, ...], code: str, message: str) -> None:
        diagnostic = SchemaDiagnostic(path, code, message)
        logger.warning("Schema problem at %s", diagnostic)
        diagnostics.append(diagnostic)

    def walk(node: Any, path: tuple[str, ...], inherited: ParamsBySegment) -> None:
        if not isinstance(node, Mapping):
            report(
                path,
                "not-a-mapping",
                f"expected a mapping, got {type(node).__name__}; treated as empty leaf",
            )
            return

        if PARAMS_KEY in node:
            declared = node[PARAMS_KEY]
            if not _is_param_list(declared):
                report(
                    path,
                    "invalid-params",
                    f"{PARAMS_KEY} must be a list of strings, got {declared!r}; ignored",
                )
            elif not path and declared:
                report(
                    path,
                    "root-params",
                    "params declared on the schema root have no segment to bind to; ignored",
                )
            else:
                seen = set(param_names(inherited))
                for name in declared:
                    if name in seen:
                        report(
                            path,
                            "duplicate-param",
                            f"param {name!r} is already bound on this path; ignored",
                        )
                    seen.add(name)

        bound = accumulate_params(inherited, path, extract_params(node))

        for key in node:
            if key == PARAMS_KEY:
                continue
            if not isinstance(key, str) or not key:
                report(path, "invalid-key", f"child key {key!r} is not a name; skipped")
                continue
            if key in RESERVED_NAMES or key.startswith("_"):
                report(
                    (*path, key),
                    "reserved-name",
                    "name shadows a node attribute; reach it with node[name]",
                )
            if not path and key == ROOT_TAG:
                report(
                    (key,),
                    "root-collision",
                    f"the root invalidates as {ROOT_TAG!r}, which only hits this resource",
                )
            walk(node[key], (*path, key), bound)

    walk(schema, (), {})
    return diagnostics


__all__ = [
    "RESERVED_NAMES",
    "child_keys",
    "extract_params",
    "is_leaf",
    "validate_schema",
]
