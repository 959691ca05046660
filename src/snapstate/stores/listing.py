"""Helpers shared by the table-backed stores: ids, search, sort, paging."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence


def as_ids(ids: Any) -> tuple:
    """One id or an iterable of ids -> tuple of ids."""
    if isinstance(ids, (list, tuple, set, frozenset)):
        return tuple(ids)
    return (ids,)


def matches_search(record: Mapping, needle: str, fields: Iterable[str]) -> bool:
    """Case-insensitive substring match over the string-valued fields."""
    needle = needle.lower()
    for field in fields:
        value = record.get(field)
        if isinstance(value, str) and needle in value.lower():
            return True
    return False


def sort_records(records: Sequence[Mapping], key: str, order: str = "desc") -> list:
    """Sort by record[key]; records missing the key go last in either order."""
    present = [r for r in records if r.get(key) is not None]
    absent = [r for r in records if r.get(key) is None]
    present.sort(key=lambda r: r[key], reverse=(order != "asc"))
    return present + absent


def paginate(records: Sequence, page: int, page_size: int) -> list:
    """1-based page slice."""
    start = max(page - 1, 0) * page_size
    return list(records[start:start + page_size])


def merge_by_id(records: Sequence[Mapping], record_id: Any, updates: Mapping) -> tuple:
    return tuple(
        {**r, **updates} if r.get("id") == record_id else r
        for r in records
    )


def count_by(records: Iterable[Mapping], field: str) -> dict:
    counts: dict = {}
    for record in records:
        value = record.get(field)
        if value is not None:
            counts[value] = counts.get(value, 0) + 1
    return counts
