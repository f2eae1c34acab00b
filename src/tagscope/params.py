"""Parameter accumulation along a schema path."""

from collections.abc import Iterable, Sequence

from tagscope.types import ParamsBySegment


def accumulate_params(
    inherited: ParamsBySegment,
    path: Sequence[str],
    declared: Iterable[str],
) -> dict[int, tuple[str, ...]]:
    """Bind a node's declared params to its own (last) path segment.

    Returns a new mapping; ``inherited`` is never modified. Names already
    bound on the path are skipped so a name never moves to another segment.
    With an empty path there is no segment to bind to and the inherited
    mapping is returned as-is.
    """
    result = dict(inherited)
    if not path:
        return result

    seen = set(param_names(inherited))
    own: list[str] = []
    for name in declared:
        if name not in seen:
            seen.add(name)
            own.append(name)

    if own:
        result[len(path) - 1] = tuple(own)
    return result


def param_names(params_by_segment: ParamsBySegment) -> tuple[str, ...]:
    """All accumulated names, ancestors first, in declaration order."""
    return tuple(
        name
        for index in sorted(params_by_segment)
        for name in params_by_segment[index]
    )


def shift_params(
    params_by_segment: ParamsBySegment, offset: int
) -> dict[int, tuple[str, ...]]:
    """Re-index segment bindings for a path prefixed by ``offset`` segments."""
    return {index + offset: names for index, names in params_by_segment.items()}


__all__ = ["accumulate_params", "param_names", "shift_params"]
