"""Bounded linear undo/redo log of snapshots."""

from __future__ import annotations

from typing import Any

from snapstate.paths import MISSING

DEFAULT_MAX_HISTORY = 50


class History:
    """Ordered snapshots plus a cursor at the current one.

    max_size bounds the undo depth: at most max_size prior snapshots are kept
    alongside the current one, so the log holds up to max_size + 1 entries.
    Entries past the cursor are the redo branch; a push while the cursor is
    not at the tip discards them.
    """

    __slots__ = ("_entries", "_cursor", "_max_size")

    def __init__(self, max_size: int = DEFAULT_MAX_HISTORY) -> None:
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")
        self._entries: list = []
        self._cursor = -1
        self._max_size = max_size

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._entries) - 1

    @property
    def earliest(self) -> Any:
        return self._entries[0] if self._entries else MISSING

    def push(self, snapshot) -> None:
        del self._entries[self._cursor + 1:]
        self._entries.append(snapshot)
        self._cursor = len(self._entries) - 1
        while len(self._entries) > self._max_size + 1:
            del self._entries[0]
            self._cursor -= 1

    def undo(self) -> Any:
        """Step back one entry. Returns it, or MISSING at the earliest entry."""
        if not self.can_undo:
            return MISSING
        self._cursor -= 1
        return self._entries[self._cursor]

    def redo(self) -> Any:
        """Step forward one entry. Returns it, or MISSING at the tip."""
        if not self.can_redo:
            return MISSING
        self._cursor += 1
        return self._entries[self._cursor]

    def truncate_to_earliest(self) -> None:
        del self._entries[1:]
        self._cursor = len(self._entries) - 1

    def clear(self) -> None:
        self._entries.clear()
        self._cursor = -1

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"History({self._cursor + 1}/{len(self._entries)}, max={self._max_size})"
