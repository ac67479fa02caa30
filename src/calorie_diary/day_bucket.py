"""Lista ordenada de actividades de un mismo día."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date

from calorie_diary.errors import IndexOutOfRangeError
from calorie_diary.model import ActivityRecord


class DayBucket:
    """Activities recorded for one calendar date, in insertion order."""

    def __init__(self, day: date) -> None:
        self.day = day
        self._records: list[ActivityRecord] = []

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ActivityRecord]:
        return iter(self._records)

    def __getitem__(self, index: int) -> ActivityRecord:
        self._check_index(index)
        return self._records[index]

    def __repr__(self) -> str:
        return f"DayBucket({self.day.isoformat()}, {len(self._records)} records)"

    @property
    def size(self) -> int:
        return len(self._records)

    @property
    def records(self) -> tuple[ActivityRecord, ...]:
        return tuple(self._records)

    def append(self, record: ActivityRecord) -> None:
        self._records.append(record)

    def remove_at(self, index: int) -> ActivityRecord:
        """Remove and return the record at ``index``.

        Raises:
            IndexOutOfRangeError: If ``index`` is not in ``[0, size)``.
        """
        self._check_index(index)
        return self._records.pop(index)

    def insert_at(self, index: int, record: ActivityRecord) -> ActivityRecord:
        """Replace the record at ``index`` and return the previous one."""
        self._check_index(index)
        previous = self._records[index]
        self._records[index] = record
        return previous

    def move_to(self, from_index: int, to_index: int) -> None:
        """Move a record so that it ends up at ``to_index``.

        Both indices are checked against the current size before anything
        changes.

        Raises:
            IndexOutOfRangeError: If either index is out of range.
        """
        self._check_index(from_index)
        self._check_index(to_index)
        record = self._records.pop(from_index)
        self._records.insert(to_index, record)

    def net_calorie(self) -> int:
        return sum(record.calorie_delta for record in self._records)

    def index_of_entry(self, entry_id: int) -> int:
        """Position of the record carrying ``entry_id`` (-1 if absent)."""
        for i, record in enumerate(self._records):
            if record.entry_id == entry_id:
                return i
        return -1

    def index_of(self, record: ActivityRecord) -> int:
        """Position of the first value-equal record (-1 if absent)."""
        for i, candidate in enumerate(self._records):
            if candidate == record:
                return i
        return -1

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._records):
            raise IndexOutOfRangeError(index, len(self._records))
