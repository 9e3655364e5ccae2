"""Display helpers shared by the GUI and the CLI."""

from __future__ import annotations

from datetime import date

from jyoti_tool.model import ApproximateDuration, CalendarDuration, GestationalAge

_MONTH_ABBR: tuple[str, ...] = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)

UNIT_LABELS: dict[str, str] = {
    "years": "साल",
    "months": "महीने",
    "days": "दिन",
    "weeks": "सप्ताह",
}


def format_display_date(value: date | None) -> str:
    """``07 Oct 2024`` style, independent of the process locale."""
    if value is None:
        return "---"
    return f"{value.day:02d} {_MONTH_ABBR[value.month - 1]} {value.year:04d}"


def format_duration(duration: CalendarDuration | ApproximateDuration) -> str:
    return (
        f"{duration.years} {UNIT_LABELS['years']}, "
        f"{duration.months} {UNIT_LABELS['months']}, "
        f"{duration.days} {UNIT_LABELS['days']}"
    )


def format_gestational_age(age: GestationalAge) -> str:
    return f"{age.weeks} {UNIT_LABELS['weeks']}, {age.days} {UNIT_LABELS['days']}"
