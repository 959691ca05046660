"""WalletStore — wallet table state: selection, filters, paging, balance cache."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Mapping

from snapstate.store import Store
from snapstate.stores.listing import as_ids, matches_search, merge_by_id, paginate, sort_records

logger = logging.getLogger("snapstate.stores.wallets")

BALANCE_MAX_AGE = 300.0  # seconds
SEARCH_FIELDS = ("address", "name", "notes")


def default_state() -> dict:
    return {
        "wallets": (),
        "groups": (),
        "selectedWalletIds": (),
        "filters": {"search": "", "groupId": None, "sortBy": "createdAt", "sortOrder": "desc"},
        "pagination": {"page": 1, "pageSize": 50, "total": 0},
        "ui": {
            "loading": False,
            "refreshing": False,
            "selectedTab": "all",
            "expandedGroups": (),
            "viewMode": "table",
        },
        "balances": {},
        "batchOperation": {
            "isProcessing": False,
            "currentOperation": None,
            "progress": 0,
            "results": (),
        },
    }


class WalletStore(Store):
    """Wallet list state.

    Balances are cached per wallet id as {"balance", "lastUpdated"} and aged
    out by clean_expired_balances(); the host decides how often to call it.
    """

    def __init__(
        self,
        initial_state: Mapping[str, Any] | None = None,
        *,
        clock: Callable[[], float] = time.time,
        max_history: int = 50,
    ) -> None:
        super().__init__(initial_state or default_state(), max_history=max_history)
        self._clock = clock

    # --- Wallets & groups ---

    def set_wallets(self, wallets) -> None:
        wallets = tuple(wallets)

        def _write(write):
            write("wallets", wallets)
            write("pagination.total", len(wallets))

        self.batch(_write)

    def add_wallet(self, wallet: Mapping) -> None:
        self.set_wallets((*self.get("wallets", ()), dict(wallet)))

    def update_wallet(self, wallet_id, updates: Mapping) -> None:
        self.set("wallets", merge_by_id(self.get("wallets", ()), wallet_id, updates))

    def remove_wallets(self, wallet_ids) -> None:
        """Drop wallets along with their selection and cached balances, in one pass."""
        ids = set(as_ids(wallet_ids))
        wallets = tuple(w for w in self.get("wallets", ()) if w.get("id") not in ids)

        def _write(write):
            write("wallets", wallets)
            write("pagination.total", len(wallets))
            write("selectedWalletIds",
                  tuple(i for i in self.get("selectedWalletIds", ()) if i not in ids))
            write("balances",
                  {k: v for k, v in self.get("balances", {}).items() if k not in ids})

        self.batch(_write)

    def set_groups(self, groups) -> None:
        self.set("groups", tuple(groups))

    # --- Selection ---

    def select_wallets(self, wallet_ids, append: bool = False) -> None:
        ids = as_ids(wallet_ids)
        if append:
            ids = tuple(dict.fromkeys((*self.get("selectedWalletIds", ()), *ids)))
        self.set("selectedWalletIds", ids)

    def deselect_wallets(self, wallet_ids=None) -> None:
        """Deselect the given ids, or everything when called without ids."""
        if wallet_ids is None:
            self.set("selectedWalletIds", ())
            return
        drop = set(as_ids(wallet_ids))
        self.set("selectedWalletIds",
                 tuple(i for i in self.get("selectedWalletIds", ()) if i not in drop))

    def toggle_wallet_selection(self, wallet_id) -> None:
        if wallet_id in self.get("selectedWalletIds", ()):
            self.deselect_wallets(wallet_id)
        else:
            self.select_wallets(wallet_id, append=True)

    def select_all(self, select: bool = True) -> None:
        ids = tuple(w["id"] for w in self.get("wallets", ())) if select else ()
        self.set("selectedWalletIds", ids)

    # --- Filters & paging ---

    def set_filters(self, **filters: Any) -> None:
        """Merge filters and go back to the first page."""
        self.set_state({
            "filters": {**self.get("filters", {}), **filters},
            "pagination": {**self.get("pagination", {}), "page": 1},
        })

    def set_pagination(self, **pagination: Any) -> None:
        self.set_state({"pagination": {**self.get("pagination", {}), **pagination}})

    def get_filtered_wallets(self) -> list:
        filters = self.get("filters", {})
        wallets = list(self.get("wallets", ()))

        search = filters.get("search")
        if search:
            wallets = [w for w in wallets if matches_search(w, search, SEARCH_FIELDS)]

        group_id = filters.get("groupId")
        if group_id is not None:
            wallets = [w for w in wallets if w.get("groupId") == group_id]

        sort_by = filters.get("sortBy")
        if sort_by:
            wallets = sort_records(wallets, sort_by, filters.get("sortOrder", "desc"))
        return wallets

    def get_paginated_wallets(self) -> list:
        pagination = self.get("pagination", {})
        return paginate(self.get_filtered_wallets(), pagination.get("page", 1),
                        pagination.get("pageSize", 50))

    # --- Balances ---

    def set_wallet_balance(self, wallet_id, balance) -> None:
        self.set_bulk_balances({wallet_id: balance})

    def set_bulk_balances(self, balances: Mapping) -> None:
        now = self._clock()
        fresh = {wallet_id: {"balance": balance, "lastUpdated": now}
                 for wallet_id, balance in balances.items()}
        self.set_state({"balances": {**self.get("balances", {}), **fresh}})

    def clean_expired_balances(self, max_age: float = BALANCE_MAX_AGE) -> int:
        """Drop cached balances older than max_age seconds. Returns how many went."""
        now = self._clock()
        balances = self.get("balances", {})
        kept = {k: v for k, v in balances.items() if now - v["lastUpdated"] < max_age}
        expired = len(balances) - len(kept)
        if expired:
            logger.debug("Dropping %d expired wallet balances", expired)
            self.set("balances", kept)
        return expired

    # --- UI ---

    def set_batch_operation_status(self, **status: Any) -> None:
        self.set_state({"batchOperation": {**self.get("batchOperation", {}), **status}})

    def toggle_group_expansion(self, group_id) -> None:
        expanded = self.get("ui.expandedGroups", ())
        if group_id in expanded:
            expanded = tuple(g for g in expanded if g != group_id)
        else:
            expanded = (*expanded, group_id)
        self.set("ui.expandedGroups", expanded)

    def set_view_mode(self, mode: str) -> None:
        self.set("ui.viewMode", mode)
