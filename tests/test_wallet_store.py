"""Tests for WalletStore."""

from snapstate.stores import WalletStore


class _Clock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


WALLETS = (
    {"id": 1, "address": "0xAAA", "name": "Main", "groupId": 10, "createdAt": 3},
    {"id": 2, "address": "0xBBB", "name": "Airdrop", "groupId": 20, "createdAt": 1},
    {"id": 3, "address": "0xCCC", "notes": "cold storage", "groupId": 10, "createdAt": 2},
)


def _store(**kwargs):
    s = WalletStore(**kwargs)
    s.set_wallets(WALLETS)
    return s


class TestWallets:
    def test_set_wallets_updates_total_in_one_pass(self):
        s = WalletStore()
        log = []
        s.subscribe(lambda st, c: log.append(set(c)), ["wallets", "pagination.total"])
        log.clear()
        s.set_wallets(WALLETS)
        assert log == [{"wallets", "pagination"}]
        assert s.get("pagination.total") == 3

    def test_add_and_update(self):
        s = _store()
        s.add_wallet({"id": 4, "address": "0xDDD"})
        assert s.get("pagination.total") == 4
        s.update_wallet(4, {"name": "New"})
        assert s.get("wallets")[-1] == {"id": 4, "address": "0xDDD", "name": "New"}
        assert s.get("wallets")[0] is WALLETS[0]

    def test_remove_clears_selection_and_balances(self):
        s = _store()
        s.select_wallets([1, 2])
        s.set_bulk_balances({1: "0.5", 3: "2.0"})
        log = []
        s.subscribe(lambda st, c: log.append(1))
        log.clear()

        s.remove_wallets(1)
        assert [w["id"] for w in s.get("wallets")] == [2, 3]
        assert s.get("selectedWalletIds") == (2,)
        assert set(s.get("balances")) == {3}
        assert s.get("pagination.total") == 2
        assert log == [1]


class TestSelection:
    def test_select_replace_and_append(self):
        s = _store()
        s.select_wallets(1)
        assert s.get("selectedWalletIds") == (1,)
        s.select_wallets([2, 1], append=True)
        assert s.get("selectedWalletIds") == (1, 2)
        s.select_wallets(3)
        assert s.get("selectedWalletIds") == (3,)

    def test_deselect(self):
        s = _store()
        s.select_wallets([1, 2, 3])
        s.deselect_wallets(2)
        assert s.get("selectedWalletIds") == (1, 3)
        s.deselect_wallets()
        assert s.get("selectedWalletIds") == ()

    def test_toggle(self):
        s = _store()
        s.toggle_wallet_selection(2)
        assert s.get("selectedWalletIds") == (2,)
        s.toggle_wallet_selection(2)
        assert s.get("selectedWalletIds") == ()

    def test_select_all(self):
        s = _store()
        s.select_all()
        assert s.get("selectedWalletIds") == (1, 2, 3)
        s.select_all(False)
        assert s.get("selectedWalletIds") == ()


class TestFiltersAndPaging:
    def test_filters_reset_page(self):
        s = _store()
        s.set_pagination(page=3)
        s.set_filters(search="main")
        assert s.get("pagination.page") == 1
        assert s.get("filters.search") == "main"
        assert s.get("filters.sortBy") == "createdAt"

    def test_search_matches_address_name_notes(self):
        s = _store()
        s.set_filters(search="COLD")
        assert [w["id"] for w in s.get_filtered_wallets()] == [3]
        s.set_filters(search="0xb")
        assert [w["id"] for w in s.get_filtered_wallets()] == [2]

    def test_group_filter_and_sort(self):
        s = _store()
        s.set_filters(groupId=10)
        assert [w["id"] for w in s.get_filtered_wallets()] == [1, 3]
        s.set_filters(groupId=None, sortOrder="asc")
        assert [w["id"] for w in s.get_filtered_wallets()] == [2, 3, 1]

    def test_pagination(self):
        s = _store()
        s.set_pagination(pageSize=2)
        assert [w["id"] for w in s.get_paginated_wallets()] == [1, 3]
        s.set_pagination(page=2)
        assert [w["id"] for w in s.get_paginated_wallets()] == [2]

    def test_filter_does_not_touch_state(self):
        s = _store()
        s.set_filters(sortOrder="asc")
        s.get_filtered_wallets()
        assert s.get("wallets") == WALLETS


class TestBalances:
    def test_bulk_balances_stamped_with_clock(self):
        clock = _Clock(100.0)
        s = _store(clock=clock)
        s.set_bulk_balances({1: "1.5", 2: "0"})
        assert s.get("balances")[1] == {"balance": "1.5", "lastUpdated": 100.0}
        clock.now = 200.0
        s.set_wallet_balance(2, "3")
        assert s.get("balances")[2] == {"balance": "3", "lastUpdated": 200.0}
        assert s.get("balances")[1]["lastUpdated"] == 100.0

    def test_clean_expired(self):
        clock = _Clock(0.0)
        s = _store(clock=clock)
        s.set_wallet_balance(1, "1")
        clock.now = 250.0
        s.set_wallet_balance(2, "2")
        clock.now = 350.0
        assert s.clean_expired_balances() == 1
        assert set(s.get("balances")) == {2}

    def test_clean_with_nothing_expired_is_silent(self):
        clock = _Clock(0.0)
        s = _store(clock=clock)
        s.set_wallet_balance(1, "1")
        log = []
        s.subscribe(lambda st, c: log.append(1))
        log.clear()
        assert s.clean_expired_balances() == 0
        assert log == []


class TestUi:
    def test_group_expansion(self):
        s = _store()
        s.toggle_group_expansion(10)
        s.toggle_group_expansion(20)
        assert s.get("ui.expandedGroups") == (10, 20)
        s.toggle_group_expansion(10)
        assert s.get("ui.expandedGroups") == (20,)

    def test_view_mode_and_batch_status(self):
        s = _store()
        s.set_view_mode("grid")
        s.set_batch_operation_status(isProcessing=True, progress=40)
        assert s.get("ui.viewMode") == "grid"
        assert s.get("batchOperation.progress") == 40
        assert s.get("batchOperation.currentOperation") is None
