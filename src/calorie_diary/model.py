"""Modelos tipados para actividades diarias (comida y ejercicio)."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum


class ActivityKind(Enum):
    """Kind of activity; the value is the tag used in the textual form."""

    FOOD = "F"
    EXERCISE = "E"


@dataclass(frozen=True)
class ActivityRecord:
    """One food or exercise entry for a calendar date.

    ``calories`` is the magnitude the user typed; the sign convention lives in
    :attr:`calorie_delta` (food adds, exercise subtracts). ``entry_id`` is the
    identity handle issued by the store and takes no part in equality.
    """

    description: str
    calories: int
    day: date
    kind: ActivityKind = ActivityKind.FOOD
    entry_id: int | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        description = self.description.strip()
        if not description:
            raise ValueError("Activity description must not be empty")
        if "|" in description:
            raise ValueError("Activity description must not contain '|'")
        if isinstance(self.calories, bool) or not isinstance(self.calories, int):
            raise ValueError(f"Calories must be a whole number: {self.calories!r}")
        if self.calories < 0:
            raise ValueError(f"Calories must not be negative: {self.calories}")
        object.__setattr__(self, "description", description)

    @property
    def calorie_delta(self) -> int:
        """Signed effect on the day's net calories."""
        if self.kind is ActivityKind.EXERCISE:
            return -self.calories
        return self.calories

    @property
    def text(self) -> str:
        """Textual form, e.g. ``[F] | apple | 50``."""
        return f"[{self.kind.value}] | {self.description} | {self.calories}"

    def with_entry_id(self, entry_id: int) -> ActivityRecord:
        return replace(self, entry_id=entry_id)

    def with_day(self, day: date) -> ActivityRecord:
        return replace(self, day=day)


def food(description: str, calories: int, day: date) -> ActivityRecord:
    """Build a food record."""
    return ActivityRecord(description, calories, day, ActivityKind.FOOD)


def exercise(description: str, calories: int, day: date) -> ActivityRecord:
    """Build an exercise record."""
    return ActivityRecord(description, calories, day, ActivityKind.EXERCISE)
