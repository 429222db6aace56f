"""
Ordered record collection keyed by id.

The owning collection of a view: records keep their insertion order (the
"natural" order used when no sort is selected) and are replaced by id
rather than mutated in place.
"""

from __future__ import annotations

from typing import Dict, Generic, Iterable, Iterator, Optional, Tuple, TypeVar

from pydantic import BaseModel

from schooney.errors import RecordCollectionError

R = TypeVar("R", bound=BaseModel)


class RecordCollection(Generic[R]):
    """
    Insertion-ordered mapping of record id to immutable record.
    """

    def __init__(self, records: Iterable[R] = ()) -> None:
        self._records: Dict[str, R] = {}
        for record in records:
            self.append(record)

    def records(self) -> Tuple[R, ...]:
        return tuple(self._records.values())

    def get(self, record_id: str) -> Optional[R]:
        return self._records.get(record_id)

    def append(self, record: R) -> None:
        record_id = record.id  # type: ignore[attr-defined]
        if record_id in self._records:
            raise RecordCollectionError(f"Duplicate record id '{record_id}'")
        self._records[record_id] = record

    def replace(self, record: R) -> R:
        """Swap the stored record with the same id; returns the previous one."""
        record_id = record.id  # type: ignore[attr-defined]
        if record_id not in self._records:
            raise RecordCollectionError(f"Unknown record id '{record_id}'")
        previous = self._records[record_id]
        self._records[record_id] = record
        return previous

    def replace_many(self, records: Iterable[R]) -> None:
        for record in records:
            self.replace(record)

    def remove(self, record_id: str) -> R:
        try:
            return self._records.pop(record_id)
        except KeyError:
            raise RecordCollectionError(f"Unknown record id '{record_id}'") from None

    def next_id(self) -> str:
        """Next numeric id as a string (ids are generated as 1, 2, 3, ...)."""
        numeric = [int(key) for key in self._records if key.isdigit()]
        return str(max(numeric, default=0) + 1)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def __iter__(self) -> Iterator[R]:
        return iter(self._records.values())

    def __len__(self) -> int:
        return len(self._records)


__all__ = ["RecordCollection"]
