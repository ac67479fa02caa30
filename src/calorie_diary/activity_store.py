"""Almacén de actividades por fecha, búsquedas y conjunto de resultados."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable, Sequence
from dataclasses import replace
from datetime import date

from calorie_diary.day_bucket import DayBucket
from calorie_diary.errors import (
    EmptyResultSetError,
    IndexOutOfRangeError,
    MissingDateError,
    NoMatchError,
)
from calorie_diary.model import ActivityRecord

logger = logging.getLogger(__name__)


def split_tags(text: str) -> list[str]:
    """Split slash-delimited tags, e.g. ``"/fruit/ apple "`` -> ``["fruit", "apple"]``.

    Text between each pair of consecutive ``/`` becomes a tag until a single
    ``/`` is left; the remainder after it is the last tag. Input without any
    ``/`` is returned as one trimmed tag.
    """
    tags: list[str] = []
    while text.find("/") != text.rfind("/"):
        first = text.find("/")
        second = text.find("/", first + 1)
        tags.append(text[first + 1 : second].strip())
        text = text[second:]
    tags.append(text[text.find("/") + 1 :].strip())
    return tags


class ActivityStore:
    """Date-keyed activity buckets plus the last staged result set.

    Every search or listing replaces the result set; edit, delete and move
    address records by their position in it.
    """

    def __init__(self) -> None:
        self._buckets: dict[date, DayBucket] = {}
        self._results: list[ActivityRecord] = []
        self._entry_ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self._buckets)

    def __contains__(self, day: object) -> bool:
        return day in self._buckets

    @property
    def result_set(self) -> tuple[ActivityRecord, ...]:
        return tuple(self._results)

    def result_at(self, index: int) -> ActivityRecord:
        self._check_result_index(index)
        return self._results[index]

    def dates(self) -> list[date]:
        """Recorded dates, ascending."""
        return sorted(self._buckets)

    def add_activity(self, day: date, record: ActivityRecord) -> ActivityRecord:
        """Append ``record`` under ``day``, creating the bucket on demand.

        Returns:
            The stored record, carrying its identity handle.
        """
        if record.day != day:
            record = record.with_day(day)
        stored = record.with_entry_id(next(self._entry_ids))
        bucket = self._buckets.get(day)
        if bucket is None:
            bucket = DayBucket(day)
            self._buckets[day] = bucket
        bucket.append(stored)
        logger.debug("Added %s on %s", stored.text, day.isoformat())
        return stored

    def get_bucket(self, day: date) -> DayBucket | None:
        return self._buckets.get(day)

    def net_calorie(self, day: date) -> int:
        """Net calories recorded for ``day``.

        Raises:
            MissingDateError: If nothing is recorded for ``day``.
        """
        bucket = self._buckets.get(day)
        if bucket is None:
            raise MissingDateError(day)
        return bucket.net_calorie()

    def list_day(self, day: date) -> tuple[ActivityRecord, ...]:
        """Stage the activities of ``day`` as the result set."""
        bucket = self._buckets.get(day)
        self._results = list(bucket) if bucket is not None else []
        if not self._results:
            raise NoMatchError(f"No activities recorded for {day.isoformat()}")
        return self.result_set

    def insert_record_at(self, index: int, record: ActivityRecord) -> None:
        """Replace the result set entry at ``index`` (the store is untouched)."""
        self._check_result_index(index)
        self._results[index] = record

    def edit_record(
        self,
        index: int,
        *,
        description: str | None = None,
        calories: int | None = None,
    ) -> ActivityRecord:
        """Replace a staged record in both its bucket and the result set."""
        self._check_result_index(index)
        current = self._results[index]
        changes: dict[str, object] = {}
        if description is not None:
            changes["description"] = description
        if calories is not None:
            changes["calories"] = calories
        updated = replace(current, **changes)

        bucket = self._buckets.get(current.day)
        position = self._locate(bucket, current) if bucket is not None else -1
        if bucket is None or position < 0:
            raise NoMatchError(f"{current.text} is no longer in the diary")
        bucket.insert_at(position, updated)
        self.insert_record_at(index, updated)
        return updated

    def delete_from_result_set(self, index: int) -> ActivityRecord:
        """Remove the staged record at ``index`` from the result set and store.

        The stored record is found through its identity handle; staged records
        without one fall back to the first value-equal record, dates ascending.
        A bucket left empty is dropped.

        Raises:
            EmptyResultSetError: If nothing is staged.
            IndexOutOfRangeError: If ``index`` is out of range.
        """
        if not self._results:
            raise EmptyResultSetError("No activities listed; search or list first")
        self._check_result_index(index)
        removed = self._results.pop(index)

        for day in self.dates():
            bucket = self._buckets[day]
            position = self._locate(bucket, removed)
            if position < 0:
                continue
            bucket.remove_at(position)
            if not len(bucket):
                del self._buckets[day]
            logger.debug("Deleted %s from %s", removed.text, day.isoformat())
            return removed

        logger.warning("Deleted %s from results only; not found in store", removed.text)
        return removed

    def move_within_result_set(self, from_index: int, to_index: int) -> None:
        """Reorder the result set so the record at ``from_index`` lands at ``to_index``.

        Raises:
            EmptyResultSetError: If nothing is staged.
            IndexOutOfRangeError: If either index is out of range.
        """
        if not self._results:
            raise EmptyResultSetError("No activities listed; search or list first")
        self._check_result_index(from_index)
        self._check_result_index(to_index)
        record = self._results.pop(from_index)
        self._results.insert(to_index, record)

    def find_by_description(self, text: str) -> tuple[ActivityRecord, ...]:
        return self._stage(lambda record: text in record.description, text)

    def find_by_calorie(self, value: int | str) -> tuple[ActivityRecord, ...]:
        wanted = str(value).strip()
        return self._stage(lambda record: str(record.calories) == wanted, wanted)

    def find_matching_all(
        self, tags: str | Sequence[str]
    ) -> tuple[ActivityRecord, ...]:
        """Stage records whose textual form contains every tag."""
        words = _as_tags(tags)
        return self._stage(
            lambda record: all(word in record.text for word in words), "/".join(words)
        )

    def find_matching_any(
        self, tags: str | Sequence[str]
    ) -> tuple[ActivityRecord, ...]:
        """Stage records whose textual form contains at least one tag."""
        words = _as_tags(tags)
        return self._stage(
            lambda record: any(word in record.text for word in words), "/".join(words)
        )

    def _stage(
        self, predicate: Callable[[ActivityRecord], bool], query: str
    ) -> tuple[ActivityRecord, ...]:
        self._results = [
            record
            for day in self.dates()
            for record in self._buckets[day]
            if predicate(record)
        ]
        logger.debug("Search %r matched %d activities", query, len(self._results))
        if not self._results:
            raise NoMatchError(f"No activity matches {query!r}")
        return self.result_set

    def _check_result_index(self, index: int) -> None:
        if not 0 <= index < len(self._results):
            raise IndexOutOfRangeError(index, len(self._results))

    @staticmethod
    def _locate(bucket: DayBucket, record: ActivityRecord) -> int:
        if record.entry_id is not None:
            return bucket.index_of_entry(record.entry_id)
        return bucket.index_of(record)


def _as_tags(tags: str | Sequence[str]) -> list[str]:
    if isinstance(tags, str):
        return split_tags(tags)
    return list(tags)
