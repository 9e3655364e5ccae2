from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import cast

import pytest
from openpyxl import Workbook, load_workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from jyoti_tool.excel_writer import (
    ExcelLayout,
    _format_sheet,
    schedule_export_path,
    write_schedule_xlsx,
)
from jyoti_tool.schedule import generate_schedule


def test_write_schedule_xlsx_happy_path_and_formatting(tmp_path: Path) -> None:
    events = generate_schedule(date(2024, 1, 1))
    out = tmp_path / "nested" / "out.xlsx"
    write_schedule_xlsx(events, out, ExcelLayout())

    wb = load_workbook(out)
    ws = cast(Worksheet, wb[ExcelLayout().sheet_name])

    headers = [cell.value for cell in ws[1]]
    assert headers == ["Age", "Vaccines", "टीके", "Due date", "Day", "Notes"]
    assert ws.max_row == 7

    due_col = headers.index("Due date") + 1
    day_col = headers.index("Day") + 1
    assert ws.cell(row=2, column=1).value == "At Birth"
    assert ws.cell(row=3, column=due_col).value == datetime(2024, 2, 12)
    # 2024-01-01 was a Monday
    assert ws.cell(row=2, column=day_col).value == "Mon"
    assert ws.cell(row=3, column=due_col).number_format == "dd-mmm-yyyy"

    vaccines_letter = get_column_letter(headers.index("Vaccines") + 1)
    assert ws.column_dimensions[vaccines_letter].width == 36
    assert ws.cell(row=1, column=1).font.bold is True


def test_write_schedule_xlsx_empty_schedule(tmp_path: Path) -> None:
    out = tmp_path / "out.xlsx"
    write_schedule_xlsx([], out, ExcelLayout(sheet_name="Empty"))
    ws = load_workbook(out)["Empty"]
    assert [cell.value for cell in ws[1]][:2] == ["Age", "Vaccines"]
    assert ws.max_row == 1


def test_format_sheet_handles_missing_headers() -> None:
    wb = Workbook()
    ws = cast(Worksheet, wb.active)
    ws.append(["Solo"])
    ws.append([1])

    _format_sheet(ws)

    assert ws.cell(row=1, column=1).font.bold is True
    assert ws.cell(row=2, column=1).alignment.horizontal == "left"


def test_schedule_export_path_uses_export_dir(tmp_path: Path) -> None:
    out = schedule_export_path(
        str(tmp_path), date(2024, 1, 1), datetime(2024, 3, 1, 9, 5, 7)
    )
    assert out == tmp_path / "immunization_2024-01-01_2024-03-01_09-05-07.xlsx"


def test_schedule_export_path_default_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.chdir(tmp_path)
    out = schedule_export_path("", date(2024, 1, 1), datetime(2024, 3, 1))
    assert out.parent == tmp_path / "exports"
