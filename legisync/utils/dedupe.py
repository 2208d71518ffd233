"""
Utility helpers for dropping repeated records within one sync run.

Upstream pages occasionally repeat an item (GovTrack re-lists amended
bills, Open States can return the same bill under two jurisdictions).
Writing both copies is harmless thanks to the upsert, but it inflates the
synced count, so adapters collapse them first.

Responsibility: Drop duplicate records by a key function and count them
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Tuple, TypeVar

T = TypeVar("T")
K = TypeVar("K")


def dedupe_by_key(
    records: Iterable[T],
    key_fn: Callable[[T], Optional[K]],
) -> Tuple[List[T], int]:
    """
    Keep the first record seen for each key, preserving input order.

    Records whose key is None are dropped without being counted.

    Args:
        records: Iterable of records to deduplicate.
        key_fn: Function used to compute the deduplication key.

    Returns:
        Tuple of (unique_records, duplicate_count).
    """
    seen: dict[K, T] = {}
    duplicates = 0

    for record in records:
        key = key_fn(record)
        if key is None:
            continue
        if key in seen:
            duplicates += 1
            continue
        seen[key] = record

    return list(seen.values()), duplicates
