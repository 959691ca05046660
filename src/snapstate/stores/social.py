"""SocialStore — social account table with filters, paging, selection and stats."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from snapstate.store import Store
from snapstate.stores.listing import as_ids, count_by, matches_search, merge_by_id, paginate, sort_records

SEARCH_FIELDS = ("username", "email", "phone", "notes")


def default_state() -> dict:
    return {
        "accounts": (),
        "filters": {"search": "", "platform": "all", "status": "all", "tags": ()},
        "pagination": {"currentPage": 1, "pageSize": 20, "total": 0},
        "ui": {
            "loading": False,
            "selectedAccounts": frozenset(),
            "sortBy": "createdAt",
            "sortOrder": "desc",
            "viewMode": "table",
        },
        "stats": {"totalAccounts": 0, "platformCounts": {}, "statusCounts": {}},
    }


class SocialStore(Store):
    def __init__(self, initial_state: Mapping[str, Any] | None = None, *, max_history: int = 50) -> None:
        super().__init__(initial_state or default_state(), max_history=max_history)

    def set_accounts(self, accounts: Iterable[Mapping]) -> None:
        """Replace the account list; totals and per-platform/status counts follow in the same pass."""
        accounts = tuple(accounts)
        self.batch(lambda write: self._write_accounts(write, accounts))

    @staticmethod
    def _write_accounts(write, accounts: tuple) -> None:
        write("accounts", accounts)
        write("pagination.total", len(accounts))
        write("stats.totalAccounts", len(accounts))
        write("stats.platformCounts", count_by(accounts, "platform"))
        write("stats.statusCounts", count_by(accounts, "status"))

    def add_account(self, account: Mapping) -> None:
        self.set_accounts((*self.get("accounts", ()), dict(account)))

    def update_account(self, account_id, updates: Mapping) -> None:
        self.set_accounts(merge_by_id(self.get("accounts", ()), account_id, updates))

    def delete_accounts(self, account_ids) -> None:
        ids = set(as_ids(account_ids))
        with self.transaction() as write:
            self._write_accounts(
                write, tuple(a for a in self.get("accounts", ()) if a.get("id") not in ids)
            )
            write("ui.selectedAccounts", self.get("ui.selectedAccounts", frozenset()) - ids)

    def set_filters(self, **filters: Any) -> None:
        with self.transaction() as write:
            write("filters", {**self.get("filters", {}), **filters})
            write("pagination.currentPage", 1)

    def set_pagination(self, **pagination: Any) -> None:
        self.set_state({"pagination": {**self.get("pagination", {}), **pagination}})

    def toggle_account_selection(self, account_id) -> None:
        selected = self.get("ui.selectedAccounts", frozenset())
        self.set("ui.selectedAccounts", selected ^ {account_id})

    def select_all(self, selected: bool = True) -> None:
        """Select every account that passes the current filters, or none."""
        ids = frozenset(a["id"] for a in self.get_filtered_accounts()) if selected else frozenset()
        self.set("ui.selectedAccounts", ids)

    def get_filtered_accounts(self) -> list:
        filters = self.get("filters", {})
        accounts = list(self.get("accounts", ()))

        search = filters.get("search")
        if search:
            accounts = [a for a in accounts if matches_search(a, search, SEARCH_FIELDS)]
        platform = filters.get("platform")
        if platform and platform != "all":
            accounts = [a for a in accounts if a.get("platform") == platform]
        status = filters.get("status")
        if status and status != "all":
            accounts = [a for a in accounts if a.get("status") == status]
        tags = filters.get("tags")
        if tags:
            accounts = [a for a in accounts if set(tags) & set(a.get("tags", ()))]

        return sort_records(accounts, self.get("ui.sortBy", "createdAt"), self.get("ui.sortOrder", "desc"))

    def get_paginated_accounts(self) -> list:
        pagination = self.get("pagination", {})
        return paginate(self.get_filtered_accounts(), pagination.get("currentPage", 1),
                        pagination.get("pageSize", 20))

    def batch_update_status(self, account_ids, status: str) -> None:
        ids = set(as_ids(account_ids))
        self.set_accounts(
            {**a, "status": status} if a.get("id") in ids else a
            for a in self.get("accounts", ())
        )

    def batch_add_tags(self, account_ids, tags) -> None:
        """Add tags to each account, keeping existing tags first and dropping duplicates."""
        ids = set(as_ids(account_ids))
        self.set_accounts(
            {**a, "tags": tuple(dict.fromkeys((*a.get("tags", ()), *tags)))}
            if a.get("id") in ids else a
            for a in self.get("accounts", ())
        )
