"""AppStore — application-shell state: auth, settings, navigation, notices.

Constructed explicitly by the application's composition root and handed to
the feature modules that need it. Persisting settings is delegated to the
optional save_settings callback.
"""

from __future__ import annotations

import itertools
import logging
import time
from typing import Any, Callable, Mapping

from snapstate.store import Store

logger = logging.getLogger("snapstate.stores.app")

DEFAULT_SYNC_THRESHOLD = 3600.0  # seconds


def default_state(version: str = "0.0.0") -> dict:
    return {
        "auth": {"isUnlocked": False, "isFirstTime": False, "lockTime": None},
        "settings": {
            "language": "en",
            "theme": "auto",
            "notifications": True,
            "autoLockTimeout": 60,
            "rpcUrl": "",
            "defaultProxyGroup": "none",
        },
        "ui": {
            "currentPage": "dashboard",
            "sidebarCollapsed": False,
            "activeModal": None,
            "loading": False,
            "loadingMessage": "",
        },
        "notifications": (),
        "version": {"current": version, "latest": None, "hasUpdate": False, "updateInfo": None},
        "system": {"platform": None, "isOnline": True, "lastSync": None},
    }


class AppStore(Store):
    """Store preloaded with the application-shell layout."""

    def __init__(
        self,
        initial_state: Mapping[str, Any] | None = None,
        *,
        clock: Callable[[], float] = time.time,
        save_settings: Callable[[dict], Any] | None = None,
        max_history: int = 50,
    ) -> None:
        super().__init__(initial_state or default_state(), max_history=max_history)
        self._clock = clock
        self._notification_ids = itertools.count(1)
        if save_settings is not None:
            self.subscribe(self._settings_saver(save_settings), ["settings"])

    @staticmethod
    def _settings_saver(save_settings):
        def _save(state, changes):
            if not changes:
                return  # the immediate call made by subscribe()
            save_settings(state["settings"])

        return _save

    def _merge(self, branch: str, values: Mapping[str, Any]) -> bool:
        return self.set_state({branch: {**self.get(branch, {}), **values}})

    def set_auth_status(self, is_unlocked: bool) -> None:
        self._merge("auth", {
            "isUnlocked": is_unlocked,
            "lockTime": None if is_unlocked else self._clock(),
        })

    def update_settings(self, settings: Mapping[str, Any]) -> None:
        self._merge("settings", settings)

    def navigate_to(self, page: str) -> None:
        self.set("ui.currentPage", page)

    def set_loading(self, show: bool, message: str = "") -> None:
        self._merge("ui", {"loading": show, "loadingMessage": message})

    def add_notification(self, message: str, kind: str = "info", **extra: Any) -> str:
        """Append a notification and return its id."""
        notification_id = f"notif_{next(self._notification_ids)}"
        notification = {
            "id": notification_id,
            "timestamp": self._clock(),
            "type": kind,
            "message": message,
            **extra,
        }
        self.set_state(lambda prev: {
            **prev,
            "notifications": (*prev.get("notifications", ()), notification),
        })
        return notification_id

    def remove_notification(self, notification_id: str) -> None:
        remaining = tuple(n for n in self.get("notifications", ()) if n["id"] != notification_id)
        self.set("notifications", remaining)

    def clear_notifications(self) -> None:
        self.set("notifications", ())

    def set_version_info(self, **info: Any) -> None:
        self._merge("version", info)

    def show_modal(self, modal_id: str, data: Mapping[str, Any] | None = None) -> None:
        self.set("ui.activeModal", {"id": modal_id, "data": dict(data or {})})

    def hide_modal(self) -> None:
        self.set("ui.activeModal", None)

    def toggle_sidebar(self) -> None:
        self.set("ui.sidebarCollapsed", not self.get("ui.sidebarCollapsed", False))

    def set_online(self, online: bool) -> None:
        self.set("system.isOnline", online)

    def record_last_sync(self) -> None:
        self.set("system.lastSync", self._clock())

    def needs_sync(self, threshold: float = DEFAULT_SYNC_THRESHOLD) -> bool:
        last_sync = self.get("system.lastSync")
        if not last_sync:
            return True
        return self._clock() - last_sync > threshold
