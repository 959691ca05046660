"""Change detection between snapshots.

has_changed() compares whole trees structurally, so a write three levels deep
still counts. compute_changes() is deliberately shallow: it reports which
top-level keys moved, and leaves deeper differences to path-filtered
subscribers.
"""

from __future__ import annotations

from collections.abc import Mapping
from numbers import Number
from typing import Any, NamedTuple

from snapstate.paths import MISSING

_SCALARS = (str, bytes, Number, type(None))


class Change(NamedTuple):
    prev: Any
    new: Any


ChangeSet = dict[str, Change]


def deep_equal(a: Any, b: Any) -> bool:
    """Structural equality over mappings, sequences, sets and scalars.

    Anything else compares by identity. Safe on self-referencing structures.
    """
    return _deep_equal(a, b, set())


def _deep_equal(a: Any, b: Any, seen: set[tuple[int, int]]) -> bool:
    if a is b:
        return True

    if isinstance(a, Mapping) and isinstance(b, Mapping):
        pair = (id(a), id(b))
        if pair in seen:
            return True
        seen.add(pair)
        if a.keys() != b.keys():
            return False
        return all(_deep_equal(a[k], b[k], seen) for k in a)

    if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
        pair = (id(a), id(b))
        if pair in seen:
            return True
        seen.add(pair)
        if len(a) != len(b):
            return False
        return all(_deep_equal(x, y, seen) for x, y in zip(a, b))

    if isinstance(a, (set, frozenset)) and isinstance(b, (set, frozenset)):
        return a == b

    if isinstance(a, _SCALARS) and isinstance(b, _SCALARS):
        # True == 1 in Python; as state values they are different things.
        if isinstance(a, bool) != isinstance(b, bool):
            return False
        return a == b

    return False


def differs(a: Any, b: Any) -> bool:
    return a is not b and not deep_equal(a, b)


def has_changed(prev: Mapping, new: Mapping) -> bool:
    return not deep_equal(prev, new)


def compute_changes(prev: Mapping, new: Mapping) -> ChangeSet:
    """Top-level keys whose values differ, in prev-then-new key order."""
    changes: ChangeSet = {}
    for key in (*prev, *(k for k in new if k not in prev)):
        before = prev.get(key, MISSING)
        after = new.get(key, MISSING)
        if differs(before, after):
            changes[key] = Change(before, after)
    return changes
