"""In-memory deduplication index keyed by catalog item id."""

from __future__ import annotations

from typing import Any, Hashable, Iterable, Iterator, Mapping

from .transformer import item_id as record_id


class DeduplicationIndex:
    """Set of ids already present in a target document.

    One index belongs to one target reconciliation and is threaded through
    every paginator call for that target, so later pages and later sources
    see ids discovered earlier in the run.
    """

    def __init__(self, ids: Iterable[Hashable] = ()) -> None:
        self._ids: set[Hashable] = set(ids)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "DeduplicationIndex":
        return cls(
            identifier
            for identifier in (record_id(record) for record in records)
            if identifier is not None
        )

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._ids)

    def add(self, item_id: Hashable) -> None:
        self._ids.add(item_id)

    def check_and_store(self, item_id: Hashable) -> bool:
        """Return ``True`` if ``item_id`` was already known, otherwise record it."""

        if item_id in self._ids:
            return True
        self._ids.add(item_id)
        return False


__all__ = ["DeduplicationIndex"]
