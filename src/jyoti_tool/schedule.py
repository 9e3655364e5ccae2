"""Fixed child immunization schedule (National Immunization Schedule)."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, timedelta

import pandas as pd

from jyoti_tool.model import VaccinationEvent

SCHEDULE_VERSION = "NIS-2024.1"

SCHEDULE_COLUMNS = [
    "age",
    "vaccines",
    "vaccines_hi",
    "due_date",
    "description",
]


@dataclass(frozen=True)
class ScheduleEntry:
    """Reference row: offset from birth plus static labels."""

    offset: timedelta
    primary_label: str
    localized_label: str
    age_label: str
    description: str


NIS_SCHEDULE: tuple[ScheduleEntry, ...] = (
    ScheduleEntry(
        offset=timedelta(days=0),
        primary_label="BCG, OPV-0, Hep B-0",
        localized_label="बीसीजी, ओपीवी-0, हेप बी-0",
        age_label="At Birth",
        description="Given at birth or as soon as possible",
    ),
    ScheduleEntry(
        offset=timedelta(weeks=6),
        primary_label="Pentavalent 1, OPV 1, Rota 1, IPV 1, fIPV 1",
        localized_label="पेंटावैलेंट 1, ओपीवी 1, रोटा 1",
        age_label="6 Weeks",
        description="First dose of major vaccines",
    ),
    ScheduleEntry(
        offset=timedelta(weeks=10),
        primary_label="Pentavalent 2, OPV 2, Rota 2",
        localized_label="पेंटावैलेंट 2, ओपीवी 2, रोटा 2",
        age_label="10 Weeks",
        description="Second dose booster",
    ),
    ScheduleEntry(
        offset=timedelta(weeks=14),
        primary_label="Pentavalent 3, OPV 3, Rota 3, IPV 2, fIPV 2",
        localized_label="पेंटावैलेंट 3, ओपीवी 3, रोटा 3",
        age_label="14 Weeks",
        description="Third dose booster",
    ),
    ScheduleEntry(
        # ~9 months
        offset=timedelta(days=274),
        primary_label="MR 1st Dose, Vit A",
        localized_label="एमआर 1, विटामिन ए",
        age_label="9 Months",
        description="Measles-Rubella and Vitamin A",
    ),
    ScheduleEntry(
        # ~16 months
        offset=timedelta(days=485),
        primary_label="MR 2nd Dose, DPT Booster 1, OPV Booster",
        localized_label="एमआर 2, डीपीटी बूस्टर 1",
        age_label="16-24 Months",
        description="Booster doses",
    ),
)


def generate_schedule(
    birth_date: date,
    table: Sequence[ScheduleEntry] = NIS_SCHEDULE,
) -> list[VaccinationEvent]:
    """Due vaccination events for a child born on ``birth_date``.

    Always one event per table row, in table order.
    """
    return [
        VaccinationEvent(
            primary_label=entry.primary_label,
            localized_label=entry.localized_label,
            due_date=birth_date + entry.offset,
            age_label=entry.age_label,
            description=entry.description,
        )
        for entry in table
    ]


def schedule_to_frame(events: Sequence[VaccinationEvent]) -> pd.DataFrame:
    """Convert events to a DataFrame with one row per visit."""
    rows = [
        {
            "age": e.age_label,
            "vaccines": e.primary_label,
            "vaccines_hi": e.localized_label,
            "due_date": e.due_date,
            "description": e.description,
        }
        for e in events
    ]
    if not rows:
        return pd.DataFrame(columns=SCHEDULE_COLUMNS)
    return pd.DataFrame(rows, columns=SCHEDULE_COLUMNS)
