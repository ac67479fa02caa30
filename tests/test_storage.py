from __future__ import annotations

import logging
import sqlite3
from datetime import date
from pathlib import Path

import pytest

from calorie_diary.activity_store import ActivityStore
from calorie_diary.model import exercise, food
from calorie_diary.storage import (
    DEFAULT_TARGET_CALORIES,
    ActivityFile,
    AppConfig,
    ConfigStore,
)


def test_config_defaults_and_round_trip(tmp_path: Path) -> None:
    store = ConfigStore(tmp_path / "nested" / "app.sqlite3")
    assert store.load_config() == AppConfig()

    config = AppConfig(target_calories=1800, data_file="/d/a.txt", export_dir="/d/out")
    store.save_config(config)
    assert store.load_config() == config

    store.save_config(AppConfig(target_calories=2100))
    assert store.load_config().target_calories == 2100


def test_config_bad_target_falls_back_to_default(tmp_path: Path) -> None:
    db = tmp_path / "app.sqlite3"
    store = ConfigStore(db)
    with sqlite3.connect(db) as conn:
        conn.execute(
            "INSERT INTO app_config(key, value) VALUES('target_calories', 'lots')"
        )
        conn.commit()
    assert store.load_config().target_calories == DEFAULT_TARGET_CALORIES


def test_activity_file_save_and_load(tmp_path: Path) -> None:
    d1, d2 = date(2020, 10, 11), date(2020, 10, 12)
    store = ActivityStore()
    store.add_activity(d2, food("apple pie", 400, d2))
    store.add_activity(d1, food("apple", 50, d1))
    store.add_activity(d1, exercise("jogging", 60, d1))

    path = tmp_path / "data" / "activities.txt"
    assert ActivityFile(path).save(store) == 3
    assert path.read_text(encoding="utf-8").splitlines() == [
        "[F] | apple | 50 | 2020-10-11",
        "[E] | jogging | 60 | 2020-10-11",
        "[F] | apple pie | 400 | 2020-10-12",
    ]

    loaded = ActivityStore()
    assert ActivityFile(path).load(loaded) == 3
    assert loaded.dates() == [d1, d2]
    assert loaded.net_calorie(d1) == -10
    bucket = loaded.get_bucket(d1)
    assert bucket is not None
    assert [r.description for r in bucket] == ["apple", "jogging"]


def test_activity_file_skips_malformed_lines(tmp_path: Path) -> None:
    path = tmp_path / "activities.txt"
    path.write_text(
        "\n".join(
            [
                "[F] | apple | 50 | 2020-10-11",
                "[X] | mystery | 10 | 2020-10-11",
                "[F] | toast | many | 2020-10-11",
                "[F] | soup | 120 | not-a-date",
                "[F] | half line",
                "",
                '[E] | "quoted" run | 30 | 2020-10-11',
            ]
        )
        + "\n",
        encoding="utf-8",
    )
    store = ActivityStore()
    assert ActivityFile(path).load(store) == 2
    bucket = store.get_bucket(date(2020, 10, 11))
    assert bucket is not None
    assert [r.description for r in bucket] == ["apple", '"quoted" run']


def test_activity_file_missing_or_empty(tmp_path: Path) -> None:
    store = ActivityStore()
    assert ActivityFile(tmp_path / "missing.txt").load(store) == 0
    empty = tmp_path / "empty.txt"
    empty.write_text("\n", encoding="utf-8")
    assert ActivityFile(empty).load(store) == 0
    assert len(store) == 0
    assert ActivityFile(empty).save(store) == 0
    assert empty.read_text(encoding="utf-8") == ""


def test_activity_file_keeps_na_like_descriptions(tmp_path: Path) -> None:
    day = date(2020, 10, 11)
    names = ["NA", "null", "None", "n/a", "NaN", "apple"]
    store = ActivityStore()
    for name in names:
        store.add_activity(day, food(name, 10, day))
    path = tmp_path / "activities.txt"
    ActivityFile(path).save(store)

    loaded = ActivityStore()
    assert ActivityFile(path).load(loaded) == len(names)
    bucket = loaded.get_bucket(day)
    assert bucket is not None
    assert [r.description for r in bucket] == names


def test_activity_file_warns_with_file_line_numbers(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    path = tmp_path / "activities.txt"
    path.write_text(
        "\n".join(
            [
                "[F] | apple | 50 | 2020-10-11",
                "",
                "[F] | too | many | 10 | 2020-10-11",
                "[F] | toast | many | 2020-10-11",
                "[F] | soup | 120 | 2020-10-11",
            ]
        )
        + "\n",
        encoding="utf-8",
    )
    store = ActivityStore()
    with caplog.at_level(logging.WARNING, logger="calorie_diary.storage"):
        assert ActivityFile(path).load(store) == 2

    warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 2
    assert warnings[0].startswith("Skipping malformed line 3 ")
    assert warnings[1].startswith("Skipping malformed line 4 ")
