"""Typed value objects for pregnancy dates, durations and vaccination events."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class GestationalAge:
    """Elapsed time since LMP as full weeks plus 0-6 remainder days."""

    weeks: int
    days: int

    @property
    def total_days(self) -> int:
        return self.weeks * 7 + self.days


@dataclass(frozen=True)
class CalendarDuration:
    """Calendar-exact gap between two dates (years, months, days)."""

    years: int
    months: int
    days: int


@dataclass(frozen=True)
class ApproximateDuration:
    """Fixed-ratio breakdown of a raw day count."""

    years: int
    months: int
    days: int


@dataclass(frozen=True)
class VaccinationEvent:
    """One due vaccination visit derived from a birth date."""

    primary_label: str
    localized_label: str
    due_date: date
    age_label: str
    description: str


@dataclass(frozen=True)
class PregnancyResult:
    """What the ANC calculator shows for one LMP or EDD input."""

    lmp: date
    edd: date
    gestational_age: GestationalAge


@dataclass(frozen=True)
class ChatMessage:
    """One line of the assistant transcript (role is "user" or "bot")."""

    role: str
    text: str
