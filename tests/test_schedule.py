from __future__ import annotations

from datetime import date, timedelta

from jyoti_tool.schedule import (
    NIS_SCHEDULE,
    SCHEDULE_COLUMNS,
    SCHEDULE_VERSION,
    generate_schedule,
    schedule_to_frame,
)


def test_schedule_has_six_events_in_fixed_order() -> None:
    events = generate_schedule(date(2024, 1, 1))
    assert len(events) == 6
    assert [e.age_label for e in events] == [
        "At Birth",
        "6 Weeks",
        "10 Weeks",
        "14 Weeks",
        "9 Months",
        "16-24 Months",
    ]


def test_schedule_due_dates_from_birth() -> None:
    birth = date(2024, 1, 1)
    events = generate_schedule(birth)
    assert events[0].due_date == birth
    assert events[1].due_date == birth + timedelta(weeks=6)
    assert events[1].due_date == date(2024, 2, 12)
    assert events[2].due_date == date(2024, 3, 11)
    assert events[3].due_date == date(2024, 4, 8)
    assert events[4].due_date == birth + timedelta(days=274)
    assert events[4].due_date == date(2024, 10, 1)
    assert events[5].due_date == date(2025, 4, 30)


def test_only_due_dates_depend_on_birth_date() -> None:
    a = generate_schedule(date(2024, 1, 1))
    b = generate_schedule(date(2019, 7, 15))
    for left, right in zip(a, b, strict=True):
        assert left.primary_label == right.primary_label
        assert left.localized_label == right.localized_label
        assert left.description == right.description
        assert left.due_date != right.due_date


def test_reference_table_is_versioned_and_static() -> None:
    assert SCHEDULE_VERSION
    assert isinstance(NIS_SCHEDULE, tuple)
    assert [entry.offset.days for entry in NIS_SCHEDULE] == [0, 42, 70, 98, 274, 485]


def test_schedule_to_frame_columns_and_rows() -> None:
    df = schedule_to_frame(generate_schedule(date(2024, 1, 1)))
    assert list(df.columns) == SCHEDULE_COLUMNS
    assert len(df) == 6
    assert df.loc[0, "vaccines"] == "BCG, OPV-0, Hep B-0"
    assert df.loc[4, "due_date"] == date(2024, 10, 1)


def test_schedule_to_frame_empty() -> None:
    df = schedule_to_frame([])
    assert df.empty
    assert list(df.columns) == SCHEDULE_COLUMNS
