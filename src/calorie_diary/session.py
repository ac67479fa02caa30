"""Sesión de comandos de texto sobre un ActivityStore."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import date, datetime

from dateutil import parser as date_parser
from dateutil import tz

from calorie_diary.activity_store import ActivityStore
from calorie_diary.errors import (
    DiaryError,
    EmptyResultSetError,
    IndexOutOfRangeError,
    NoMatchError,
)
from calorie_diary.graph import GraphRenderer, draw
from calorie_diary.model import ActivityRecord, exercise, food
from calorie_diary.storage import AppConfig, ConfigStore
from calorie_diary.summary import daily_summary, last_days

logger = logging.getLogger(__name__)

_OPTION_RX = re.compile(r"(?:^|\s+)/([cdn])\s+")
_FIND_USAGE = {"/c": "<kcal>", "/a": "/<tag>/<tag>", "/e": "/<tag>/<tag>"}

HELP_TEXT = """\
food <description> /c <kcal> [/d YYYY-MM-DD]
exercise <description> /c <kcal> [/d YYYY-MM-DD]
list [YYYY-MM-DD]
find <text> | find /c <kcal> | find /a /<tag>/<tag> | find /e /<tag>/<tag>
edit <n> [/n <description>] [/c <kcal>]
delete <n>
move <n> below <m>
graph | summary | target <kcal> | help | bye"""


def local_today() -> date:
    return datetime.now(tz=tz.tzlocal()).date()


@dataclass(frozen=True)
class CommandResult:
    """Text to show the user and whether the session should end."""

    message: str
    exit: bool = False


class CommandSession:
    """Parses user lines and applies them to one store.

    Indices typed by the user are 1-based; the store sees 0-based ones.
    """

    def __init__(
        self,
        store: ActivityStore,
        config: AppConfig,
        *,
        config_store: ConfigStore | None = None,
        today: Callable[[], date] = local_today,
    ) -> None:
        self.store = store
        self.config = config
        self._config_store = config_store
        self._today = today
        self._handlers: dict[str, Callable[[str], str]] = {
            "food": self._add_food,
            "exercise": self._add_exercise,
            "list": self._list,
            "find": self._find,
            "edit": self._edit,
            "delete": self._delete,
            "move": self._move,
            "graph": self._graph,
            "summary": self._summary,
            "target": self._target,
            "help": lambda _args: HELP_TEXT,
        }

    def execute(self, line: str) -> CommandResult:
        """Run one command line; recoverable errors become messages."""
        word, _, args = line.strip().partition(" ")
        word = word.lower()
        if word == "bye":
            return CommandResult("Bye!", exit=True)
        handler = self._handlers.get(word)
        if handler is None:
            return CommandResult(f"Unknown command: {word or '(empty)'}. Try 'help'.")
        try:
            return CommandResult(handler(args.strip()))
        except IndexOutOfRangeError:
            return CommandResult("Please make sure index is within range.")
        except EmptyResultSetError:
            return CommandResult("Nothing listed yet. Use 'list' or 'find' first.")
        except NoMatchError as exc:
            return CommandResult(f"Not found: {exc}")
        except (DiaryError, ValueError) as exc:
            logger.debug("Command %r failed", line, exc_info=True)
            return CommandResult(f"Error: {exc}")

    def _add_food(self, args: str) -> str:
        return self._add(args, food)

    def _add_exercise(self, args: str) -> str:
        return self._add(args, exercise)

    def _add(
        self, args: str, factory: Callable[[str, int, date], ActivityRecord]
    ) -> str:
        description, options = _split_options(args)
        if "c" not in options:
            raise ValueError("Missing calories, use /c <kcal>")
        day = _parse_day(options["d"]) if "d" in options else self._today()
        record = factory(description, _parse_calories(options["c"]), day)
        stored = self.store.add_activity(day, record)
        net = self.store.net_calorie(day)
        return f"Added {stored.text} on {day.isoformat()} (net {net} kcal)"

    def _list(self, args: str) -> str:
        day = _parse_day(args) if args else self._today()
        records = self.store.list_day(day)
        net = self.store.net_calorie(day)
        return _format_results(records) + f"\nNet calories: {net} kcal"

    def _find(self, args: str) -> str:
        flag, _, rest = args.partition(" ")
        rest = rest.strip()
        if flag in _FIND_USAGE and not rest:
            raise ValueError(f"Usage: find {flag} {_FIND_USAGE[flag]}")
        if flag == "/c":
            records = self.store.find_by_calorie(rest)
        elif flag == "/a":
            records = self.store.find_matching_all(rest)
        elif flag == "/e":
            records = self.store.find_matching_any(rest)
        elif args:
            records = self.store.find_by_description(args)
        else:
            raise ValueError("Nothing to search for")
        return _format_results(records)

    def _edit(self, args: str) -> str:
        position, options = _split_options(args)
        index = _parse_position(position)
        if not options:
            raise ValueError("Nothing to change, use /n <description> or /c <kcal>")
        updated = self.store.edit_record(
            index,
            description=options.get("n"),
            calories=_parse_calories(options["c"]) if "c" in options else None,
        )
        return f"Updated: {updated.text}"

    def _delete(self, args: str) -> str:
        removed = self.store.delete_from_result_set(_parse_position(args))
        return f"Activity removed: {removed.text} ({removed.day.isoformat()})"

    def _move(self, args: str) -> str:
        parts = args.split()
        if len(parts) != 3 or parts[1].lower() != "below":
            raise ValueError("Usage: move <n> below <m>")
        from_index = _parse_position(parts[0])
        below = int(parts[2])
        to_index = below if from_index >= below else below - 1
        self.store.move_within_result_set(from_index, to_index)
        return _format_results(self.store.result_set)

    def _graph(self, _args: str) -> str:
        if not len(self.store):
            return "No activities recorded yet."
        matrix = GraphRenderer(self.store, self.config.target_calories).render()
        return draw(matrix)

    def _summary(self, _args: str) -> str:
        df = last_days(daily_summary(self.store, self.config.target_calories), 7)
        if df.empty:
            return "No activities recorded yet."
        return df.to_string(index=False)

    def _target(self, args: str) -> str:
        target = _parse_calories(args)
        if target <= 0:
            raise ValueError("Target must be a positive number of calories")
        self.config = replace(self.config, target_calories=target)
        if self._config_store is not None:
            self._config_store.save_config(self.config)
        return f"Target set to {target} kcal"


def _split_options(text: str) -> tuple[str, dict[str, str]]:
    """``"apple /c 50 /d 2020-10-11"`` -> ``("apple", {"c": "50", "d": ...})``."""
    parts = _OPTION_RX.split(text)
    head = parts[0].strip()
    options = {
        flag: value.strip() for flag, value in zip(parts[1::2], parts[2::2])
    }
    return head, options


def _parse_day(text: str) -> date:
    try:
        return date_parser.isoparse(text.strip()).date()
    except ValueError as exc:
        raise ValueError(f"Invalid date {text!r}, use YYYY-MM-DD") from exc


def _parse_calories(text: str) -> int:
    try:
        return int(text.strip())
    except ValueError as exc:
        raise ValueError(f"Calories must be a whole number: {text!r}") from exc


def _parse_position(text: str) -> int:
    try:
        return int(text.strip()) - 1
    except ValueError as exc:
        raise ValueError(f"Invalid index: {text!r}") from exc


def _format_results(records: tuple[ActivityRecord, ...]) -> str:
    return "\n".join(
        f"{i}. {record.day.isoformat()} {record.text}"
        for i, record in enumerate(records, start=1)
    )
