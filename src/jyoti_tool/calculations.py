"""Date arithmetic for the ANC calculator and the Insta Calc tools."""

from __future__ import annotations

import math
from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

from jyoti_tool.model import ApproximateDuration, CalendarDuration, GestationalAge

PREGNANCY_DAYS = 280
DAYS_PER_YEAR = 365
AVG_DAYS_PER_MONTH = 30.44


def derive_edd_from_lmp(lmp: date) -> date:
    """Expected delivery date: 40 weeks after the last menstrual period."""
    return lmp + timedelta(days=PREGNANCY_DAYS)


def derive_lmp_from_edd(edd: date) -> date:
    """Inverse of :func:`derive_edd_from_lmp`."""
    return edd - timedelta(days=PREGNANCY_DAYS)


def days_between(later: date, earlier: date) -> int:
    """Signed number of days from ``earlier`` to ``later``."""
    return (later - earlier).days


def gestational_age(lmp: date, today: date) -> GestationalAge:
    """Full weeks and remainder days elapsed since ``lmp``.

    An LMP after ``today`` yields 0 weeks 0 days; callers reject future LMP
    input before getting here.
    """
    total_days = max(days_between(today, lmp), 0)
    weeks, days = divmod(total_days, 7)
    return GestationalAge(weeks=weeks, days=days)


def lmp_from_gestational_age(weeks: int, days: int, today: date) -> date:
    """LMP that gives ``weeks``+``days`` of gestation on ``today``."""
    return today - timedelta(days=weeks * 7 + days)


def precise_duration(start: date, end: date) -> CalendarDuration:
    """Whole years, then whole months, then leftover days from start to end.

    Months that overflow clamp to the month end (relativedelta rules). When
    ``start`` is after ``end`` every non-zero component comes back negative.
    """
    delta = relativedelta(end, start)
    return CalendarDuration(years=delta.years, months=delta.months, days=delta.days)


def apply_offset(day: date, years: int, months: int, days: int) -> date:
    """Shift ``day`` by years, then months, then days (in that order)."""
    result = day + relativedelta(years=years)
    result = result + relativedelta(months=months)
    return result + timedelta(days=days)


def approximate_breakdown(total_days: int) -> ApproximateDuration:
    """Split a day count using 365-day years and 30.44-day months.

    Deliberately approximate; this is not a calendar walk and does not agree
    with :func:`precise_duration`. Remainders keep the sign of ``total_days``.
    """
    years = math.floor(total_days / DAYS_PER_YEAR)
    remainder = math.fmod(total_days, DAYS_PER_YEAR)
    months = math.floor(remainder / AVG_DAYS_PER_MONTH)
    days = math.floor(math.fmod(remainder, AVG_DAYS_PER_MONTH))
    return ApproximateDuration(years=years, months=months, days=days)
