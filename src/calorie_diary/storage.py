"""Persistencia: configuración en SQLite y actividades en texto plano."""

from __future__ import annotations

import csv
import io
import logging
import sqlite3
from dataclasses import dataclass
from datetime import date
from pathlib import Path

import pandas as pd

from calorie_diary.activity_store import ActivityStore
from calorie_diary.model import ActivityKind, ActivityRecord

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS app_config (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""

DEFAULT_TARGET_CALORIES = 2000
_FILE_COLUMNS = ["kind", "description", "calories", "date"]
_LINE_NO = "line_no"


@dataclass(frozen=True)
class AppConfig:
    """Configuracion persistida de la app."""

    target_calories: int = DEFAULT_TARGET_CALORIES
    data_file: str = ""
    export_dir: str = ""


class ConfigStore:
    """Key/value settings table in SQLite."""

    def __init__(self, db_path: Path) -> None:
        """Create store and ensure schema exists."""
        self._db_path = db_path
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        with self._connect() as conn:
            conn.executescript(SCHEMA_SQL)
            conn.commit()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def load_config(self) -> AppConfig:
        """Devuelve configuracion guardada o defaults."""
        with self._connect() as conn:
            rows = conn.execute("SELECT key, value FROM app_config").fetchall()
        values = {row["key"]: row["value"] for row in rows}
        return AppConfig(
            target_calories=_parse_int(
                values.get("target_calories"), DEFAULT_TARGET_CALORIES
            ),
            data_file=values.get("data_file", ""),
            export_dir=values.get("export_dir", ""),
        )

    def save_config(self, config: AppConfig) -> None:
        """Guarda la configuracion en tabla key/value."""
        payload = {
            "target_calories": str(config.target_calories),
            "data_file": config.data_file,
            "export_dir": config.export_dir,
        }
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO app_config(key, value) VALUES(?, ?)
                ON CONFLICT(key) DO UPDATE SET value=excluded.value
                """,
                payload.items(),
            )
            conn.commit()


class ActivityFile:
    """Flat text file, one activity per line: ``[F] | apple | 50 | 2020-10-11``."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self, store: ActivityStore) -> int:
        """Add every valid line to ``store``.

        Returns:
            Number of activities loaded. A missing or empty file loads nothing.
        """
        if not self.path.exists():
            return 0
        # Each line is prefixed with its file line number so warnings can name it.
        numbered = [
            f"{line_no} | {line}"
            for line_no, line in enumerate(
                self.path.read_text(encoding="utf-8").splitlines(), start=1
            )
            if line.strip()
        ]
        if not numbered:
            return 0
        df = pd.read_csv(
            io.StringIO("\n".join(numbered)),
            sep=r"\s*\|\s*",
            engine="python",
            header=None,
            names=[_LINE_NO, *_FILE_COLUMNS],
            dtype=str,
            keep_default_na=False,
            na_values=[],
            quoting=csv.QUOTE_NONE,
            on_bad_lines=self._skip_bad_line,
            skip_blank_lines=True,
        )
        loaded = 0
        for row in df.to_dict("records"):
            record = _row_to_record(row)
            if record is None:
                self._warn_malformed(row.get(_LINE_NO))
                continue
            store.add_activity(record.day, record)
            loaded += 1
        logger.info("Loaded %d activities from %s", loaded, self.path)
        return loaded

    def _skip_bad_line(self, fields: list[str]) -> None:
        """Callback de pandas para filas con campos de más: avisa y descarta."""
        self._warn_malformed(fields[0] if fields else None)
        return None

    def _warn_malformed(self, line_no: object) -> None:
        logger.warning("Skipping malformed line %s in %s", line_no, self.path)

    def save(self, store: ActivityStore) -> int:
        """Write all activities, dates ascending. Returns the line count."""
        lines = [
            f"{record.text} | {day.isoformat()}"
            for day in store.dates()
            for record in store.get_bucket(day) or ()
        ]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        body = "\n".join(lines) + "\n" if lines else ""
        self.path.write_text(body, encoding="utf-8")
        logger.info("Saved %d activities to %s", len(lines), self.path)
        return len(lines)


def _row_to_record(row: dict[str, object]) -> ActivityRecord | None:
    """Convierte una fila del archivo en ActivityRecord; None si es inválida."""
    values = {key: row.get(key) for key in _FILE_COLUMNS}
    if any(not isinstance(value, str) for value in values.values()):
        return None
    kind_text = str(values["kind"]).strip().strip("[]")
    try:
        return ActivityRecord(
            description=str(values["description"]),
            calories=int(str(values["calories"])),
            day=date.fromisoformat(str(values["date"]).strip()),
            kind=ActivityKind(kind_text),
        )
    except ValueError:
        return None


def _parse_int(raw: str | None, default: int) -> int:
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default
