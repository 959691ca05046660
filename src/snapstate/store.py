"""Store — an immutable state snapshot with path-scoped subscribers and undo.

Every write entry point (set_state, set, batch) funnels into one pipeline:

    candidate -> has_changed? -> history push -> pointer swap
              -> notify subscribers -> emit StateChange

A candidate equal to the current snapshot is a silent no-op. Everything runs
synchronously; a subscriber that writes back into the store gets its own,
independent pass on top of the already-swapped snapshot.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from contextlib import contextmanager
from typing import Any, Callable, Iterator

from snapstate.diff import compute_changes, has_changed
from snapstate.events import ChangeStream, Listener, StateChange
from snapstate.history import DEFAULT_MAX_HISTORY, History
from snapstate.paths import MISSING, Path, get_path, set_path, split_path
from snapstate.subscriptions import Callback, PathFilter, SubscriptionRegistry, Unsubscribe

logger = logging.getLogger("snapstate.store")

Updates = Mapping[str, Any] | Callable[[dict], Mapping[str, Any]]


class BatchWriter:
    """Accumulator handed to Store.batch(); call it to queue a path write.

    Usage:
        def move(write):
            write("ui.page", "wallets")
            write("ui.loading", write.get("ui.page") != "wallets")

        store.batch(move)
    """

    __slots__ = ("state", "_writes")

    def __init__(self, state: dict) -> None:
        self.state = state
        self._writes: list[tuple[Path, Any]] = []

    def __call__(self, path: Path, value: Any) -> None:
        if not split_path(path):
            logger.warning("Ignoring batched write to an empty path")
            return
        self._writes.append((path, value))

    set = __call__

    def get(self, path: Path, default: Any = None) -> Any:
        """Read through the writes queued so far."""
        value = get_path(self.apply(self.state), path)
        return default if value is MISSING else value

    def apply(self, snapshot: dict) -> dict:
        for path, value in self._writes:
            snapshot = set_path(snapshot, path, value)
        return snapshot

    def __len__(self) -> int:
        return len(self._writes)


class Store:
    """Reactive state container.

    Usage:
        store = Store({"count": 0})
        unsubscribe = store.subscribe(render, ["count"])
        store.set("count", 1)          # render(state, {"count": Change(0, 1)})
        store.set("other", True)       # render not called
        store.undo()                   # back to count == 0
    """

    def __init__(
        self,
        initial_state: Mapping[str, Any] | None = None,
        *,
        max_history: int = DEFAULT_MAX_HISTORY,
    ) -> None:
        self._state: dict = dict(initial_state) if initial_state else {}
        self._history = History(max_history)
        self._history.push(self._state)
        self._subscriptions = SubscriptionRegistry()
        self.changes = ChangeStream()

    # --- Read ---

    def get_state(self) -> dict:
        """Shallow copy of the current snapshot. Do not mutate nested values."""
        return dict(self._state)

    def get(self, path: Path, default: Any = None) -> Any:
        value = get_path(self._state, path)
        return default if value is MISSING else value

    # --- Write ---

    def set_state(self, updates: Updates) -> bool:
        """Merge a partial mapping, or apply an updater fn(prev) -> next.

        Returns True if the store accepted a change.
        """
        if callable(updates):
            candidate = updates(self.get_state())
        else:
            candidate = updates

        if not isinstance(candidate, Mapping):
            logger.warning("Ignoring state update of type %s", type(candidate).__name__)
            return False
        if not callable(updates):
            candidate = {**self._state, **candidate}
        return self._commit(dict(candidate))

    def set(self, path: Path, value: Any) -> bool:
        if not split_path(path):
            logger.warning("Ignoring write to an empty path")
            return False
        return self.set_state(lambda _prev: set_path(self._state, path, value))

    def batch(self, updater: Callable[[BatchWriter], Any]) -> Any:
        """Queue several path writes and apply them as one mutation.

        If updater raises, nothing is applied. Returns updater's result.
        """
        writer = BatchWriter(self.get_state())
        result = updater(writer)
        if writer:
            self.set_state(lambda _prev: writer.apply(self._state))
        return result

    @contextmanager
    def transaction(self) -> Iterator[BatchWriter]:
        """Context-manager form of batch().

        Usage:
            with store.transaction() as write:
                write("filters.chain", "eth")
                write("pagination.page", 1)
            # one notification pass here
        """
        writer = BatchWriter(self.get_state())
        yield writer
        if writer:
            self.set_state(lambda _prev: writer.apply(self._state))

    def _commit(self, candidate: dict) -> bool:
        prev = self._state
        if not has_changed(prev, candidate):
            logger.debug("No-op update, snapshot unchanged")
            return False
        if self._history.cursor < 0:
            # History was dropped by clear(); keep the empty state undoable.
            self._history.push(prev)
        self._history.push(candidate)
        self._swap(candidate)
        return True

    def _swap(self, new_state: dict) -> None:
        """Make new_state current and run the notification stages."""
        prev = self._state
        self._state = new_state
        changes = compute_changes(prev, new_state)
        logger.debug("State changed: %s", list(changes))
        self._subscriptions.notify(prev, new_state, changes)
        self.changes.emit(StateChange(prev, new_state, changes))

    # --- Observe ---

    def subscribe(
        self,
        callback: Callback,
        paths: PathFilter | None = None,
    ) -> Unsubscribe:
        """Call callback(state, changes) now and after every relevant mutation.

        paths is one dotted path or a list of dotted paths; with it, only
        mutations that move one of those paths are relevant.
        """
        return self._subscriptions.subscribe(callback, paths, self._state)

    def add_change_listener(self, listener: Listener) -> Callable[[], None]:
        """listener(StateChange) after every accepted mutation."""
        return self.changes.subscribe(listener)

    def remove_change_listener(self, listener: Listener) -> None:
        self.changes.unsubscribe(listener)

    # --- History & lifecycle ---

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    def undo(self) -> bool:
        snapshot = self._history.undo()
        if snapshot is MISSING:
            return False
        self._swap(snapshot)
        return True

    def redo(self) -> bool:
        snapshot = self._history.redo()
        if snapshot is MISSING:
            return False
        self._swap(snapshot)
        return True

    def reset(self) -> None:
        """Restore the earliest recorded snapshot and forget the rest."""
        earliest = self._history.earliest
        if earliest is MISSING:
            return
        self._history.truncate_to_earliest()
        if has_changed(self._state, earliest):
            self._swap(earliest)

    def clear(self) -> None:
        """Drop state, history and subscribers."""
        prev = self._state
        self._state = {}
        self._history.clear()
        self._subscriptions.clear()
        self.changes.emit(StateChange({}, {}, {}))
        logger.debug("Store cleared (%d top-level keys dropped)", len(prev))

    def __repr__(self) -> str:
        return f"Store(keys={list(self._state)!r}, {self._history!r})"
