"""Exportación del resumen diario a Excel."""

from __future__ import annotations

import logging
import numbers
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

logger = logging.getLogger(__name__)

_WEEKDAYS: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

_HEADERS: dict[str, str] = {
    "weekday": "Day",
    "date": "Date",
    "activities": "Activities",
    "food_kcal": "Food\n(kcal)",
    "exercise_kcal": "Exercise\n(kcal)",
    "net_kcal": "Net\n(kcal)",
    "target_kcal": "Target\n(kcal)",
    "diff_kcal": "Diff\n(kcal)",
}

_WIDTHS: dict[str, int] = {
    "Day": 6,
    "Date": 12,
    "Activities": 11,
}

_OVER_TARGET_FILL = PatternFill(fill_type="solid", start_color="FFF4CCCC")


@dataclass(frozen=True)
class SummaryLayout:
    """Sheet name and formats for the exported summary."""

    sheet_name: str = "Daily calories"
    date_format: str = "dd/mm/yyyy"
    kcal_format: str = "#,##0"
    kcal_width: int = 10
    highlight_over_target: bool = True


def write_summary_xlsx(
    summary: pd.DataFrame, out_path: Path, layout: SummaryLayout
) -> None:
    """Write the daily summary to a formatted workbook.

    Args:
        summary: Output of :func:`calorie_diary.summary.daily_summary`.
        out_path: Destination ``.xlsx`` path; parent folders are created.
        layout: Sheet layout parameters.
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)
    export_df = _with_weekday(summary).rename(columns=_HEADERS)

    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        export_df.to_excel(writer, index=False, sheet_name=layout.sheet_name)
        _format_sheet(writer.book[layout.sheet_name], layout)
    logger.info("Wrote %d summary rows to %s", len(export_df), out_path)


def _with_weekday(summary: pd.DataFrame) -> pd.DataFrame:
    """Prepend a weekday column derived from ``date``."""
    out = summary.copy()
    if "date" not in out.columns:
        return out
    days = pd.to_datetime(out["date"], errors="coerce")
    out["date"] = days.dt.date
    out.insert(0, "weekday", days.dt.weekday.map(_weekday_label))
    return out


def _weekday_label(value: object) -> str:
    if value is None or pd.isna(value):
        return ""
    return _WEEKDAYS[int(value)]


def _format_sheet(ws: Any, layout: SummaryLayout) -> None:
    """Style header, set widths and number formats, flag days over target."""
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    center = Alignment(horizontal="center", vertical="center", wrap_text=True)

    headers = [str(cell.value) for cell in ws[1]]
    for cell in ws[1]:
        cell.font = Font(bold=True)
        cell.alignment = center
        cell.border = border

    for idx, header in enumerate(headers, start=1):
        width = _WIDTHS.get(header, layout.kcal_width)
        ws.column_dimensions[get_column_letter(idx)].width = width

    diff_header = _HEADERS["diff_kcal"]
    diff_idx = headers.index(diff_header) if diff_header in headers else None
    for row in ws.iter_rows(min_row=2):
        for idx, cell in enumerate(row):
            cell.border = border
            cell.alignment = center
            if headers[idx] == _HEADERS["date"]:
                cell.number_format = layout.date_format
            elif headers[idx].endswith("(kcal)"):
                cell.number_format = layout.kcal_format
        if layout.highlight_over_target and diff_idx is not None:
            diff = row[diff_idx].value
            if isinstance(diff, numbers.Real) and diff > 0:
                row[diff_idx].fill = _OVER_TARGET_FILL
