"""Push-based stream of "state changed" events.

Every accepted mutation emits one StateChange on its store's ChangeStream.
This is the event-listener flavored surface; path-scoped subscribe() remains
the primary one. Operators return child streams, and dispose() tears down
the whole chain below a stream.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, NamedTuple

from snapstate.diff import ChangeSet, differs
from snapstate.paths import Path, get_path

logger = logging.getLogger("snapstate.events")

Listener = Callable[[Any], Any]
Disposer = Callable[[], None]


class StateChange(NamedTuple):
    prev_state: dict
    new_state: dict
    changes: ChangeSet


class ChangeStream:
    """Ordered listeners; a failing listener is logged and skipped."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []
        self._children: list[ChangeStream] = []
        self._disposed = False
        self._parent_disposer: Disposer | None = None

    @property
    def disposed(self) -> bool:
        return self._disposed

    def emit(self, event) -> None:
        if self._disposed:
            return
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Change listener %r failed", listener)

    def subscribe(self, listener: Listener) -> Disposer:
        """Register a listener. Returns a function that removes it."""
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass  # already removed

    def map(self, fn: Callable[[Any], Any]) -> ChangeStream:
        """Transform events through fn."""
        return self._spawn(lambda child: lambda event: child.emit(fn(event)))

    def filter(self, predicate: Callable[[Any], bool]) -> ChangeStream:
        """Only pass events where predicate returns True."""
        return self._spawn(
            lambda child: lambda event: child.emit(event) if predicate(event) else None
        )

    def watching(self, *paths: Path) -> ChangeStream:
        """Only StateChange events where at least one of paths moved."""
        def _touches(event: StateChange) -> bool:
            return any(
                differs(get_path(event.prev_state, p), get_path(event.new_state, p))
                for p in paths
            )

        return self.filter(_touches)

    def dispose(self) -> None:
        """Tear down this stream and all downstream children."""
        self._disposed = True
        self._listeners.clear()
        for child in list(self._children):
            child.dispose()
        self._children.clear()
        if self._parent_disposer is not None:
            self._parent_disposer()
            self._parent_disposer = None

    def _spawn(self, forwarder: Callable[[ChangeStream], Listener]) -> ChangeStream:
        """Create a child fed by forwarder(child); disposing it detaches both."""
        child = ChangeStream()
        self._children.append(child)
        unsubscribe = self.subscribe(forwarder(child))

        def _detach() -> None:
            unsubscribe()
            try:
                self._children.remove(child)
            except ValueError:
                pass

        child._parent_disposer = _detach
        return child

    def __len__(self) -> int:
        return len(self._listeners)
