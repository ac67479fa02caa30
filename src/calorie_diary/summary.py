"""Resumen diario de calorías (comida, ejercicio, neto vs objetivo)."""

from __future__ import annotations

import pandas as pd

from calorie_diary.activity_store import ActivityStore
from calorie_diary.model import ActivityKind

RECORD_COLUMNS = ["date", "kind", "description", "calories", "calorie_delta"]
SUMMARY_COLUMNS = [
    "date",
    "activities",
    "food_kcal",
    "exercise_kcal",
    "net_kcal",
    "target_kcal",
    "diff_kcal",
]


def records_to_frame(store: ActivityStore) -> pd.DataFrame:
    """One row per stored activity, dates ascending, bucket order kept."""
    rows = [
        {
            "date": day,
            "kind": record.kind.value,
            "description": record.description,
            "calories": record.calories,
            "calorie_delta": record.calorie_delta,
        }
        for day in store.dates()
        for record in store.get_bucket(day) or ()
    ]
    if not rows:
        return pd.DataFrame(columns=RECORD_COLUMNS)
    return pd.DataFrame(rows, columns=RECORD_COLUMNS)


def daily_summary(store: ActivityStore, target_calories: int) -> pd.DataFrame:
    """Aggregate activities by day.

    Args:
        store: Activity store to read.
        target_calories: Daily goal used for ``target_kcal``/``diff_kcal``.

    Returns:
        DataFrame with :data:`SUMMARY_COLUMNS`, one row per recorded date.
    """
    records = records_to_frame(store)
    if records.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    records = records.assign(
        food_kcal=records["calories"].where(
            records["kind"] == ActivityKind.FOOD.value, 0
        ),
        exercise_kcal=records["calories"].where(
            records["kind"] == ActivityKind.EXERCISE.value, 0
        ),
    )
    out = records.groupby("date", as_index=False, sort=True).agg(
        activities=("description", "count"),
        food_kcal=("food_kcal", "sum"),
        exercise_kcal=("exercise_kcal", "sum"),
        net_kcal=("calorie_delta", "sum"),
    )
    out["target_kcal"] = int(target_calories)
    out["diff_kcal"] = out["net_kcal"] - out["target_kcal"]
    for col in SUMMARY_COLUMNS[1:]:
        out[col] = out[col].astype("int64")
    return out[SUMMARY_COLUMNS].reset_index(drop=True)


def last_days(summary: pd.DataFrame, days: int) -> pd.DataFrame:
    """Keep the ``days`` most recent rows of a daily summary."""
    if summary.empty or days <= 0:
        return summary.iloc[0:0].copy()
    return summary.sort_values("date").tail(days).reset_index(drop=True)
