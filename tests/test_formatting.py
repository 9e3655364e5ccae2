from __future__ import annotations

from datetime import date

from jyoti_tool.formatting import (
    format_display_date,
    format_duration,
    format_gestational_age,
)
from jyoti_tool.model import ApproximateDuration, CalendarDuration, GestationalAge


def test_format_display_date() -> None:
    assert format_display_date(date(2024, 10, 7)) == "07 Oct 2024"
    assert format_display_date(date(2025, 1, 31)) == "31 Jan 2025"
    assert format_display_date(None) == "---"


def test_format_duration_units() -> None:
    assert format_duration(CalendarDuration(1, 2, 3)) == "1 साल, 2 महीने, 3 दिन"
    assert format_duration(ApproximateDuration(0, 0, 30)) == "0 साल, 0 महीने, 30 दिन"


def test_format_gestational_age() -> None:
    assert format_gestational_age(GestationalAge(8, 4)) == "8 सप्ताह, 4 दिन"
