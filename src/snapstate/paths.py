"""Path resolver — dotted-path reads and copy-on-write writes over a snapshot.

A path is either a dot-delimited string ("ui.calendarView.currentMonth") or a
sequence of segments. Reads never raise; writes never mutate their input.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Sequence

Path = str | Sequence[str]


class _Missing:
    """Sentinel for "no value at this path". Distinct from a stored None."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return "MISSING"


MISSING: Any = _Missing()


def split_path(path: Path) -> tuple[str, ...]:
    if isinstance(path, str):
        return tuple(path.split("."))
    return tuple(str(segment) for segment in path)


def _index(container: Sequence, segment: str) -> int | None:
    """Decimal segment -> valid index into container, else None."""
    if not segment.isdigit():
        return None
    index = int(segment)
    return index if index < len(container) else None


def _is_sequence(value: object) -> bool:
    return isinstance(value, (list, tuple))


def get_path(snapshot: Any, path: Path, default: Any = MISSING) -> Any:
    """Read the value at path, or default the moment a segment can't be followed."""
    current = snapshot
    for segment in split_path(path):
        if isinstance(current, Mapping):
            if segment not in current:
                return default
            current = current[segment]
        elif _is_sequence(current):
            index = _index(current, segment)
            if index is None:
                return default
            current = current[index]
        else:
            return default
    return current


def _copy_step(node: Any, segment: str) -> tuple[Any, Any]:
    """Shallow-copy node for a write through segment.

    Returns (copy, child) where child is the existing value under segment or
    MISSING. Non-traversable nodes become a fresh dict.
    """
    if isinstance(node, Mapping):
        return dict(node), node.get(segment, MISSING)
    if _is_sequence(node):
        index = _index(node, segment)
        if index is not None:
            return list(node), node[index]
    return {}, MISSING


def _assign(node: Any, segment: str, value: Any) -> None:
    if isinstance(node, list):
        node[int(segment)] = value
    else:
        node[segment] = value


def _freeze(copied: Any, original: Any) -> Any:
    # Tuples were copied into lists for assignment; give them their type back.
    if isinstance(original, tuple) and isinstance(copied, list):
        return tuple(copied)
    return copied


def set_path(snapshot: Any, path: Path, value: Any) -> dict:
    """Return a new snapshot with value written at path.

    Only the containers on the path are copied; every sibling branch keeps its
    identity. Missing or non-traversable intermediates become fresh dicts.
    Raises ValueError for a path with no segments.
    """
    segments = split_path(path)
    if not segments:
        raise ValueError("cannot write to an empty path")
    root = snapshot if isinstance(snapshot, Mapping) else {}

    # Walk down copying each container on the path, then rebuild upward.
    copies: list[tuple[Any, Any, str]] = []
    node = root
    for segment in segments[:-1]:
        copied, child = _copy_step(node, segment)
        copies.append((copied, node, segment))
        node = child

    leaf_copy, _ = _copy_step(node, segments[-1])
    _assign(leaf_copy, segments[-1], value)
    result = _freeze(leaf_copy, node)

    for copied, original, segment in reversed(copies):
        _assign(copied, segment, result)
        result = _freeze(copied, original)
    return result
