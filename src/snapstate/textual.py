"""Textual integration for SnapState. Opt-in — requires textual.

Store callbacks that touch widgets go through a guard: they are skipped while
the app is paused or not running, NoMatches from widget queries is swallowed,
and calls arriving on a background thread are marshaled with
call_from_thread. Core SnapState stays toolkit-agnostic.
"""

import threading
from contextlib import contextmanager

from textual.css.query import NoMatches

# id(app) -> open pause() count. Nested pauses hold store updates until the
# outermost one exits.
_holds: dict[int, int] = {}


@contextmanager
def pause(app):
    """Hold store-driven widget updates while app rebuilds its screens.

    Mutations made meanwhile still land in the store; guarded callbacks just
    skip them, so re-read store state once the new widgets are mounted.
    """
    key = id(app)
    _holds[key] = _holds.get(key, 0) + 1
    try:
        yield
    finally:
        remaining = _holds.pop(key) - 1
        if remaining:
            _holds[key] = remaining


def is_safe(app) -> bool:
    """True when app is running and no pause() is open for it."""
    return bool(app.is_running) and id(app) not in _holds


def _guard(app, fn):
    main = threading.get_ident()

    def _safe(*args):
        try:
            fn(*args)
        except NoMatches:
            pass

    def _guarded(*args):
        if not is_safe(app):
            return
        if threading.get_ident() != main:
            app.call_from_thread(_safe, *args)
        else:
            _safe(*args)

    return _guarded


def subscribe(app, store, callback, paths=None):
    """store.subscribe() whose callback safely touches Textual widgets.

    Returns the unsubscribe function.
    """
    return store.subscribe(_guard(app, callback), paths)


def on_change(app, store, listener):
    """store.add_change_listener() with the same widget-safety guard.

    Returns a function that removes the listener.
    """
    return store.add_change_listener(_guard(app, listener))
