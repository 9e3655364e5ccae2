"""Validation of form input before it reaches the date calculations."""

from __future__ import annotations

import re
from datetime import date, datetime

from jyoti_tool.calculations import (
    apply_offset,
    approximate_breakdown,
    derive_edd_from_lmp,
    derive_lmp_from_edd,
    gestational_age,
    lmp_from_gestational_age,
    precise_duration,
)
from jyoti_tool.model import (
    ApproximateDuration,
    CalendarDuration,
    PregnancyResult,
    VaccinationEvent,
)
from jyoti_tool.schedule import generate_schedule

INVALID_DATE_MSG = "तारीख गलत है।"
FUTURE_LMP_MSG = "LMP भविष्य की नहीं हो सकती।"
INVALID_BIRTH_DATE_MSG = "जन्म तिथि गलत है।"
INVALID_NUMBER_MSG = "संख्या गलत है।"
INVALID_GESTATION_MSG = "गर्भ की आयु गलत है।"

_ISO_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")
_INT_RE = re.compile(r"[+-]?\d+")
MAX_INT_DIGITS = 12


class InputError(ValueError):
    """User input rejected before calculation; ``message`` is shown as-is."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def parse_iso_date(text: str) -> date:
    """Parse a ``YYYY-MM-DD`` form value.

    Raises:
        InputError: If the text is not a valid calendar date.
    """
    value = (text or "").strip()
    if not _ISO_DATE_RE.fullmatch(value):
        raise InputError(INVALID_DATE_MSG)
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as exc:
        raise InputError(INVALID_DATE_MSG) from exc


def coerce_int(text: object, default: int = 0) -> int:
    """Leading integer of a numeric field, or ``default`` when there is none."""
    if isinstance(text, bool):
        return default
    if isinstance(text, int):
        return text
    match = _INT_RE.match(str(text or "").strip())
    if not match:
        return default
    digits = match.group(0)
    if len(digits.lstrip("+-")) > MAX_INT_DIGITS:
        raise InputError(INVALID_NUMBER_MSG)
    return int(digits)


def pregnancy_from_lmp(text: str, today: date) -> PregnancyResult:
    """EDD and gestational age from an LMP entry (LMP may not be in the future)."""
    lmp = parse_iso_date(text)
    if lmp > today:
        raise InputError(FUTURE_LMP_MSG)
    return PregnancyResult(
        lmp=lmp,
        edd=derive_edd_from_lmp(lmp),
        gestational_age=gestational_age(lmp, today),
    )


def pregnancy_from_edd(text: str, today: date) -> PregnancyResult:
    """LMP and gestational age from an EDD entry; a future EDD is expected."""
    edd = parse_iso_date(text)
    lmp = derive_lmp_from_edd(edd)
    return PregnancyResult(
        lmp=lmp,
        edd=edd,
        gestational_age=gestational_age(lmp, today),
    )


def schedule_from_birth_date(text: str, today: date) -> list[VaccinationEvent]:
    """Vaccination schedule for a birth date entry (not in the future)."""
    try:
        birth_date = parse_iso_date(text)
    except InputError as exc:
        raise InputError(INVALID_BIRTH_DATE_MSG) from exc
    if birth_date > today:
        raise InputError(INVALID_BIRTH_DATE_MSG)
    return generate_schedule(birth_date)


def pregnancy_from_weeks(
    weeks_text: object, days_text: object, today: date
) -> PregnancyResult:
    """LMP and EDD from a gestational age entered as weeks plus 0-6 days."""
    weeks = coerce_int(weeks_text)
    days = coerce_int(days_text)
    if weeks < 0 or not 0 <= days <= 6:
        raise InputError(INVALID_GESTATION_MSG)
    try:
        lmp = lmp_from_gestational_age(weeks, days, today)
        edd = derive_edd_from_lmp(lmp)
    except OverflowError as exc:
        raise InputError(INVALID_GESTATION_MSG) from exc
    return PregnancyResult(
        lmp=lmp,
        edd=edd,
        gestational_age=gestational_age(lmp, today),
    )


def duration_between(start_text: str, end_text: str) -> CalendarDuration:
    """Calendar-exact years/months/days between two date entries."""
    return precise_duration(parse_iso_date(start_text), parse_iso_date(end_text))


def offset_date(text: str, years: object, months: object, days: object) -> date:
    """Date entry shifted by the given year, month and day fields."""
    base = parse_iso_date(text)
    y, m, d = coerce_int(years), coerce_int(months), coerce_int(days)
    try:
        return apply_offset(base, y, m, d)
    except (ValueError, OverflowError) as exc:
        # result outside year 1..9999
        raise InputError(INVALID_DATE_MSG) from exc


def breakdown_days(text: object) -> ApproximateDuration:
    """Approximate years/months/days for a total-days field."""
    total_days = coerce_int(text)
    try:
        return approximate_breakdown(total_days)
    except OverflowError as exc:
        raise InputError(INVALID_NUMBER_MSG) from exc
