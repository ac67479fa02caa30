"""Gráfico de barras ASCII de calorías netas por día contra un objetivo."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from calorie_diary.activity_store import ActivityStore

ROWS = 11
MAX_DAYS = 7
DIVISOR = 10

EMPTY = 0
BAR_BODY = 1
TARGET = 2
TARGET_AND_BODY = 3
BAR_TOP = 4

_DATE_FORMAT = "%d/%m"
_CELL_WIDTH = 6
_GLYPHS: dict[int, str] = {
    EMPTY: "      ",
    BAR_BODY: "  ||  ",
    TARGET: "------",
    TARGET_AND_BODY: "--||--",
    BAR_TOP: "  __  ",
}


@dataclass(frozen=True)
class GraphMatrix:
    """Quantized chart: ``rows[0]`` is the bottom row."""

    rows: tuple[tuple[int, ...], ...]
    dates: tuple[date, ...]
    series: tuple[int, ...]
    target_calories: int
    target_row: int
    min_calories: int
    max_calories: int
    interval: int

    @property
    def columns(self) -> int:
        return len(self.dates)

    @property
    def date_labels(self) -> str:
        """Dates as ``dd/mm``, space-separated, in column order."""
        return " ".join(day.strftime(_DATE_FORMAT) for day in self.dates)

    def cell(self, row: int, column: int) -> int:
        return self.rows[row][column]


class GraphRenderer:
    """Builds a :class:`GraphMatrix` from the most recent days of a store."""

    def __init__(
        self, store: ActivityStore, target_calories: int, max_days: int = MAX_DAYS
    ) -> None:
        self._store = store
        self._target = target_calories
        self._max_days = max_days

    def render(self) -> GraphMatrix:
        """Compute the matrix for the current store contents.

        The store must hold at least one date; callers check this first.
        """
        dates = self._select_dates()
        series = [self._store.net_calorie(day) for day in dates]
        min_cal, max_cal = _bounds(series, self._target)
        interval = (max_cal - min_cal) // DIVISOR
        assert interval != 0, "graph interval collapsed to zero"

        def row_of(calories: int) -> int:
            return (calories - min_cal) // interval

        target_row = row_of(self._target)
        bar_rows = [row_of(value) for value in series]
        table = [[EMPTY] * len(dates) for _ in range(ROWS)]
        for row in range(ROWS - 1, -1, -1):
            for col, bar_row in enumerate(bar_rows):
                if bar_row == row:
                    table[row][col] = BAR_TOP
                elif target_row == row:
                    table[row][col] = TARGET
                if bar_row > row:
                    table[row][col] += 1

        return GraphMatrix(
            rows=tuple(tuple(row) for row in table),
            dates=tuple(dates),
            series=tuple(series),
            target_calories=self._target,
            target_row=target_row,
            min_calories=min_cal,
            max_calories=max_cal,
            interval=interval,
        )

    def _select_dates(self) -> list[date]:
        dates = self._store.dates()
        assert dates, "graph requires at least one recorded date"
        return dates[-min(len(dates), self._max_days) :]


def _bounds(series: list[int], target: int) -> tuple[int, int]:
    """Min/max seeded at the target, padded when the span is under DIVISOR."""
    min_cal = min([target, *series])
    max_cal = max([target, *series])
    if max_cal - min_cal < DIVISOR:
        min_cal -= DIVISOR // 2
        max_cal += DIVISOR // 2
    return min_cal, max_cal


def draw(matrix: GraphMatrix) -> str:
    """Render the matrix as text, top row first, with the date labels below."""
    label_width = max(len(str(matrix.max_calories)), len(str(matrix.min_calories)))
    lines: list[str] = []
    for row in range(ROWS - 1, -1, -1):
        value = matrix.min_calories + row * matrix.interval
        prefix = str(value).rjust(label_width) + " |"
        cells = "".join(_GLYPHS[code] for code in matrix.rows[row])
        lines.append((prefix + cells).rstrip())
    axis = " " * label_width + " +" + "-" * (_CELL_WIDTH * matrix.columns)
    lines.append(axis)
    labels = "".join(
        day.strftime(_DATE_FORMAT).center(_CELL_WIDTH) for day in matrix.dates
    )
    lines.append(" " * (label_width + 2) + labels)
    lines.append(f"Target: {matrix.target_calories} kcal")
    return "\n".join(lines)
