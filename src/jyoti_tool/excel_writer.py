"""Printable Excel sheet of a child's vaccination schedule."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, Side

from jyoti_tool.model import VaccinationEvent
from jyoti_tool.schedule import schedule_to_frame

_WEEKDAY: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

_HEADER_MAP: dict[str, str] = {
    "age": "Age",
    "vaccines": "Vaccines",
    "vaccines_hi": "टीके",
    "due_date": "Due date",
    "weekday": "Day",
    "description": "Notes",
}


@dataclass(frozen=True)
class ExcelLayout:
    """Layout/formatting configuration for the schedule sheet."""

    sheet_name: str = "Immunization schedule"
    date_format: str = "dd-mmm-yyyy"


def _weekday_label(i: object) -> str:
    """0-6 (Monday-Sunday) to a three letter label."""
    if i is None or (isinstance(i, float) and pd.isna(i)):
        return ""
    if isinstance(i, int | float):
        idx = int(i)
        return _WEEKDAY[idx] if 0 <= idx < 7 else ""
    return ""


def _add_weekday_column(export_df: pd.DataFrame) -> pd.DataFrame:
    """Insert the weekday of the due date right after it."""
    if "due_date" not in export_df.columns or export_df.empty:
        return export_df
    export_df = export_df.copy()
    export_df["due_date"] = pd.to_datetime(export_df["due_date"], errors="coerce")
    export_df["weekday"] = export_df["due_date"].dt.weekday.map(_weekday_label)
    cols = list(export_df.columns)
    cols.remove("weekday")
    cols.insert(cols.index("due_date") + 1, "weekday")
    return export_df[cols]


def schedule_export_path(export_dir: str, birth_date: date, now: datetime) -> Path:
    """Timestamped file name inside the saved export dir (default: ./exports)."""
    out_dir = Path(export_dir).expanduser() if export_dir else Path.cwd() / "exports"
    timestamp = now.strftime("%Y-%m-%d_%H-%M-%S")
    return out_dir / f"immunization_{birth_date.isoformat()}_{timestamp}.xlsx"


def write_schedule_xlsx(
    events: Sequence[VaccinationEvent],
    out_path: Path,
    layout: ExcelLayout,
) -> None:
    """Write a formatted Excel file suitable for printing.

    Args:
        events: Generated vaccination events.
        out_path: Output path for the XLSX file.
        layout: Excel layout parameters.
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)

    export_df = _add_weekday_column(schedule_to_frame(events))
    export_df = export_df.rename(columns=_HEADER_MAP)

    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        export_df.to_excel(writer, index=False, sheet_name=layout.sheet_name)
        ws = writer.book[layout.sheet_name]
        _format_sheet(ws, layout)


def _style_header_row(ws: Any) -> None:
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    header_font = Font(bold=True)
    center = Alignment(horizontal="center", vertical="center", wrap_text=True)
    for cell in ws[1]:
        cell.font = header_font
        cell.alignment = center
        cell.border = border


def _style_body_rows(ws: Any) -> None:
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    left = Alignment(horizontal="left", vertical="center", wrap_text=True)
    for row in ws.iter_rows(min_row=2):
        for cell in row:
            cell.alignment = left
            cell.border = border
        ws.row_dimensions[row[0].row].height = 30


def _get_header_col_index(ws: Any) -> dict[str, int]:
    """Header name -> 1-based column index."""
    headers = [str(cell.value) for cell in ws[1]]
    return {name: idx + 1 for idx, name in enumerate(headers)}


def _apply_column_widths(ws: Any, col_index: dict[str, int]) -> None:
    widths = [
        ("Age", 14),
        ("Vaccines", 36),
        ("टीके", 30),
        ("Due date", 14),
        ("Day", 6),
        ("Notes", 32),
    ]
    for header, width in widths:
        idx = col_index.get(header)
        if idx is not None:
            letter = ws.cell(row=1, column=idx).column_letter
            ws.column_dimensions[letter].width = width


def _apply_date_format(ws: Any, col_index: dict[str, int], fmt: str) -> None:
    idx = col_index.get("Due date")
    if idx is None:
        return
    for row in ws.iter_rows(min_row=2):
        row[idx - 1].number_format = fmt


def _format_sheet(ws: Any, layout: ExcelLayout | None = None) -> None:
    """Apply borders, widths and the date format to a worksheet.

    Args:
        ws: openpyxl worksheet.
        layout: Layout carrying the date format; defaults to ``ExcelLayout()``.
    """
    layout = layout or ExcelLayout()
    _style_header_row(ws)
    _style_body_rows(ws)
    col_index = _get_header_col_index(ws)
    _apply_column_widths(ws, col_index)
    _apply_date_format(ws, col_index, layout.date_format)
