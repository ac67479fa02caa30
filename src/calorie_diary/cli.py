"""CLI del diario de calorías: sesión interactiva o exportación a Excel."""

from __future__ import annotations

import argparse
import logging
import sqlite3
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime
from pathlib import Path

from dateutil import tz
from pandas.errors import ParserError

from calorie_diary.activity_store import ActivityStore
from calorie_diary.excel_writer import SummaryLayout, write_summary_xlsx
from calorie_diary.session import CommandSession
from calorie_diary.storage import ActivityFile, ConfigStore
from calorie_diary.summary import daily_summary

logger = logging.getLogger(__name__)

_PROMPT = "> "


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    parser = argparse.ArgumentParser(
        description="Diario de calorías: comidas, ejercicio y gráfico semanal."
    )
    parser.add_argument(
        "--base-dir",
        default=str(Path.home() / ".calorie_diary"),
        help="Directorio de datos (default: ~/.calorie_diary).",
    )
    parser.add_argument(
        "--target",
        type=int,
        default=None,
        help="Objetivo diario de calorías; se guarda en la configuración.",
    )
    parser.add_argument(
        "--export",
        action="store_true",
        help="Exporta el resumen diario a Excel y termina.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Muestra logs de depuración.",
    )
    return parser.parse_args()


def run_loop(
    session: CommandSession,
    read_line: Callable[[str], str] = input,
    write: Callable[[str], object] = print,
) -> None:
    """Feed lines to the session until ``bye``, end of input or Ctrl-C."""
    while True:
        try:
            line = read_line(_PROMPT)
        except (EOFError, KeyboardInterrupt):
            return
        if not line.strip():
            continue
        result = session.execute(line)
        write(result.message)
        if result.exit:
            return


def main() -> int:
    """Run the calorie diary CLI.

    Returns:
        Exit code (0 on success, 1 when data or settings cannot be read).
    """
    ns = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    base = Path(ns.base_dir).expanduser().resolve()

    try:
        config_store = ConfigStore(base / "calorie_diary.sqlite3")
        config = config_store.load_config()
        if ns.target is not None:
            config = replace(config, target_calories=ns.target)
            config_store.save_config(config)
    except sqlite3.Error as exc:
        print(f"No se pudo leer la configuración: {exc}")
        return 1

    data_path = (
        Path(config.data_file).expanduser()
        if config.data_file
        else base / "activities.txt"
    )
    activity_file = ActivityFile(data_path)
    store = ActivityStore()
    try:
        activity_file.load(store)
    except (OSError, ParserError) as exc:
        print(f"No se pudo leer {data_path}: {exc}")
        return 1

    if ns.export:
        out_dir = (
            Path(config.export_dir).expanduser()
            if config.export_dir
            else base / "salidas"
        )
        ts = datetime.now(tz=tz.tzlocal()).strftime("%Y-%m-%d_%H-%M-%S")
        out_path = out_dir / f"calorias_diarias_{ts}.xlsx"
        summary = daily_summary(store, config.target_calories)
        write_summary_xlsx(summary, out_path, SummaryLayout())
        print(f"OK: Days: {len(summary)}")
        print(f"OK: Output: {out_path}")
        return 0

    session = CommandSession(store, config, config_store=config_store)
    try:
        run_loop(session)
    finally:
        activity_file.save(store)
    logger.debug("Session ended with %d recorded dates", len(store))
    return 0
