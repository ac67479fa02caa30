"""Errores del diario de calorías."""

from __future__ import annotations


class DiaryError(Exception):
    """Base class for recoverable diary errors."""


class NoMatchError(DiaryError, LookupError):
    """A search or listing found no activity."""


class IndexOutOfRangeError(DiaryError, IndexError):
    """Position outside the result set or bucket."""

    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"Index {index} is outside the range [0, {size})")
        self.index = index
        self.size = size


class EmptyResultSetError(DiaryError):
    """Move/delete attempted with no staged result set."""


class MissingDateError(DiaryError, LookupError):
    """No activities recorded for the requested date."""

    def __init__(self, day: object) -> None:
        super().__init__(f"No activities recorded for {day}")
        self.day = day
