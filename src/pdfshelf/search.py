from __future__ import annotations

from typing import Iterable

from .search_index import IndexEntry

SEARCH_RESULT_LIMIT = 200


def normalize_query(query: str | None) -> str:
    return (query or "").strip().lower()


def search(
    query: str | None,
    index: Iterable[IndexEntry],
    limit: int = SEARCH_RESULT_LIMIT,
) -> list[IndexEntry]:
    """Return index entries whose tokens or name contain ``query``.

    Matches keep index (pre-order) order and stop after ``limit``. A blank
    query matches nothing here; callers restore the active route instead.
    """
    needle = normalize_query(query)
    if not needle:
        return []
    results: list[IndexEntry] = []
    for entry in index:
        if needle in entry.tokens or needle in entry.name.lower():
            results.append(entry)
            if len(results) >= limit:
                break
    return results


__all__ = ["SEARCH_RESULT_LIMIT", "normalize_query", "search"]
