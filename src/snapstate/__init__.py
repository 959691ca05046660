"""SnapState: immutable-snapshot state container with path-scoped subscribers."""

from importlib.metadata import version as _version

__version__ = _version("snapstate")

from snapstate.paths import MISSING, get_path, set_path, split_path
from snapstate.diff import Change, compute_changes, deep_equal, differs, has_changed
from snapstate.history import History
from snapstate.subscriptions import SubscriptionRegistry
from snapstate.events import ChangeStream, StateChange
from snapstate.store import BatchWriter, Store
# textual NOT auto-imported — opt-in only

__all__ = [
    "MISSING",
    "get_path",
    "set_path",
    "split_path",
    "Change",
    "compute_changes",
    "deep_equal",
    "differs",
    "has_changed",
    "History",
    "SubscriptionRegistry",
    "ChangeStream",
    "StateChange",
    "BatchWriter",
    "Store",
]
