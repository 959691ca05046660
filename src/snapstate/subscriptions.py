"""Subscription registry — path-scoped observers of a store.

A subscriber is a callback plus an optional filter: one dotted path string,
or a list of dotted path strings ("a.b" is one path; ("a", "b") is two). It is
keyed by an opaque token rather than by the callback, so the same function
may subscribe several times with different filters.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Callable, Mapping, Sequence

from snapstate.diff import ChangeSet, differs
from snapstate.paths import get_path

logger = logging.getLogger("snapstate.subscriptions")

Callback = Callable[[dict, ChangeSet], Any]
PathFilter = str | Sequence[str]
Unsubscribe = Callable[[], None]


class Subscriber:
    __slots__ = ("callback", "paths")

    def __init__(self, callback: Callback, paths: tuple[str, ...]) -> None:
        self.callback = callback
        self.paths = paths

    def wants(self, prev_state: Mapping, new_state: Mapping) -> bool:
        """Unfiltered subscribers always want a pass; filtered ones need a watched path to move."""
        if not self.paths:
            return True
        return any(
            differs(get_path(prev_state, path), get_path(new_state, path))
            for path in self.paths
        )

    def __repr__(self) -> str:
        name = getattr(self.callback, "__name__", repr(self.callback))
        return f"Subscriber({name}, paths={list(self.paths)!r})"


def _normalize_paths(paths: PathFilter | None) -> tuple[str, ...]:
    if not paths:
        return ()
    if isinstance(paths, str):
        return (paths,)
    return tuple(paths)


class SubscriptionRegistry:
    """Ordered subscribers with per-callback failure isolation."""

    def __init__(self) -> None:
        self._subscribers: dict[int, Subscriber] = {}
        self._tokens = itertools.count(1)

    def subscribe(
        self,
        callback: Callback,
        paths: PathFilter | None,
        current_state: Mapping,
    ) -> Unsubscribe:
        """Register callback and call it once right away with current_state.

        Returns an idempotent function that removes this registration.
        """
        token = next(self._tokens)
        subscriber = Subscriber(callback, _normalize_paths(paths))
        self._subscribers[token] = subscriber
        self._deliver(subscriber, dict(current_state), {})

        def _unsubscribe() -> None:
            self._subscribers.pop(token, None)

        return _unsubscribe

    def notify(self, prev_state: Mapping, new_state: Mapping, changes: ChangeSet) -> int:
        """Run every interested subscriber in registration order.

        Works on a snapshot of the registry: subscribe/unsubscribe calls made
        by a callback take effect from the next pass. Returns the number of
        subscribers called.
        """
        called = 0
        for subscriber in list(self._subscribers.values()):
            if subscriber.wants(prev_state, new_state):
                self._deliver(subscriber, new_state, changes)
                called += 1
        return called

    def _deliver(self, subscriber: Subscriber, state: Mapping, changes: ChangeSet) -> None:
        try:
            subscriber.callback(state, changes)
        except Exception:
            logger.exception("Store subscriber %r failed", subscriber)

    def clear(self) -> None:
        self._subscribers.clear()

    def __len__(self) -> int:
        return len(self._subscribers)
