"""Tests for SocialStore."""

from snapstate.stores import SocialStore

ACCOUNTS = (
    {"id": 1, "platform": "twitter", "status": "active", "username": "alice",
     "tags": ("airdrop",), "createdAt": 1},
    {"id": 2, "platform": "discord", "status": "banned", "username": "bob",
     "email": "bob@example.com", "tags": (), "createdAt": 3},
    {"id": 3, "platform": "twitter", "status": "active", "username": "carol",
     "notes": "main account", "tags": ("vip", "airdrop"), "createdAt": 2},
)


def _store():
    s = SocialStore()
    s.set_accounts(ACCOUNTS)
    return s


class TestAccounts:
    def test_stats_follow_accounts(self):
        s = _store()
        assert s.get("pagination.total") == 3
        assert s.get("stats") == {
            "totalAccounts": 3,
            "platformCounts": {"twitter": 2, "discord": 1},
            "statusCounts": {"active": 2, "banned": 1},
        }

    def test_set_accounts_notifies_once(self):
        s = SocialStore()
        log = []
        s.subscribe(lambda st, c: log.append(sorted(c)))
        log.clear()
        s.set_accounts(ACCOUNTS)
        assert log == [["accounts", "pagination", "stats"]]

    def test_add_and_update(self):
        s = _store()
        s.add_account({"id": 4, "platform": "telegram", "status": "active"})
        assert s.get("stats.platformCounts")["telegram"] == 1
        s.update_account(2, {"status": "active"})
        assert s.get("stats.statusCounts") == {"active": 4}
        assert s.get("accounts")[1]["email"] == "bob@example.com"

    def test_delete_drops_selection(self):
        s = _store()
        s.toggle_account_selection(1)
        s.toggle_account_selection(2)
        log = []
        s.subscribe(lambda st, c: log.append(1))
        log.clear()

        s.delete_accounts([1, 3])
        assert [a["id"] for a in s.get("accounts")] == [2]
        assert s.get("ui.selectedAccounts") == frozenset({2})
        assert s.get("stats.totalAccounts") == 1
        assert log == [1]


class TestFilters:
    def test_set_filters_resets_page(self):
        s = _store()
        s.set_pagination(currentPage=4)
        s.set_filters(platform="twitter")
        assert s.get("pagination.currentPage") == 1
        assert s.get("filters.status") == "all"

    def test_platform_and_status(self):
        s = _store()
        s.set_filters(platform="twitter")
        assert [a["id"] for a in s.get_filtered_accounts()] == [3, 1]
        s.set_filters(platform="all", status="banned")
        assert [a["id"] for a in s.get_filtered_accounts()] == [2]

    def test_search(self):
        s = _store()
        s.set_filters(search="EXAMPLE.com")
        assert [a["id"] for a in s.get_filtered_accounts()] == [2]
        s.set_filters(search="main")
        assert [a["id"] for a in s.get_filtered_accounts()] == [3]

    def test_tags_match_any(self):
        s = _store()
        s.set_filters(tags=("vip", "nope"))
        assert [a["id"] for a in s.get_filtered_accounts()] == [3]
        s.set_filters(tags=("airdrop",))
        assert [a["id"] for a in s.get_filtered_accounts()] == [3, 1]

    def test_paginated(self):
        s = _store()
        s.set_pagination(pageSize=2)
        assert [a["id"] for a in s.get_paginated_accounts()] == [2, 3]
        s.set_pagination(currentPage=2)
        assert [a["id"] for a in s.get_paginated_accounts()] == [1]


class TestSelection:
    def test_toggle(self):
        s = _store()
        s.toggle_account_selection(3)
        assert s.get("ui.selectedAccounts") == frozenset({3})
        s.toggle_account_selection(3)
        assert s.get("ui.selectedAccounts") == frozenset()

    def test_select_all_respects_filters(self):
        s = _store()
        s.set_filters(status="active")
        s.select_all()
        assert s.get("ui.selectedAccounts") == frozenset({1, 3})
        s.select_all(False)
        assert s.get("ui.selectedAccounts") == frozenset()


class TestBulk:
    def test_batch_update_status(self):
        s = _store()
        s.batch_update_status([1, 2], "suspended")
        assert [a["status"] for a in s.get("accounts")] == ["suspended", "suspended", "active"]
        assert s.get("stats.statusCounts") == {"suspended": 2, "active": 1}

    def test_batch_add_tags_dedups(self):
        s = _store()
        s.batch_add_tags([1, 3], ["airdrop", "new"])
        tags = [a["tags"] for a in s.get("accounts")]
        assert tags == [("airdrop", "new"), (), ("vip", "airdrop", "new")]

    def test_bulk_change_is_undoable(self):
        s = _store()
        s.batch_update_status(1, "banned")
        s.undo()
        assert s.get("accounts")[0]["status"] == "active"
        assert s.get("stats.statusCounts") == {"active": 2, "banned": 1}
