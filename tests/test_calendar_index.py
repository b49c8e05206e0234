from __future__ import annotations

import pytest

from schedule_converter.domain.calendar_index import CalendarColumnIndex
from schedule_converter.domain.models import CalendarDate
from schedule_converter.validation.validator import MalformedHeaderError, UnknownColumnError


def _index(header, days) -> CalendarColumnIndex:
    cal = CalendarColumnIndex(first_column=2)
    cal.build_months(header)
    cal.build_days_of_month(days)
    return cal


def test_months_are_contiguous_segments() -> None:
    cal = _index(["", "", "May-08", "", "", "Jun-08", ""],
                 ["", "", "29", "30", "31", "1", "2"])

    assert [(s.label, s.start_column, s.end_column) for s in cal.segments] == [
        ("May-08", 2, 4),
        ("Jun-08", 5, 6),
    ]
    for col in range(2, 7):
        assert sum(1 for s in cal.segments if s.contains(col)) == 1


def test_last_segment_runs_to_given_last_column() -> None:
    cal = CalendarColumnIndex(first_column=2)
    cal.build_months(["", "", "May-08"], last_column=6)
    assert cal.segments[-1].end_column == 6


def test_empty_or_unlabelled_header_is_malformed() -> None:
    with pytest.raises(MalformedHeaderError):
        CalendarColumnIndex(first_column=2).build_months([])
    with pytest.raises(MalformedHeaderError):
        CalendarColumnIndex(first_column=2).build_months(["", "", "", ""])
    with pytest.raises(MalformedHeaderError):
        CalendarColumnIndex(first_column=2).build_months(["", "", "Week 1"])


def test_date_at_combines_day_and_month() -> None:
    cal = _index(["", "", "Dec-08", "", "Jan-09"], ["", "", "30", "31", "1"])
    assert cal.date_at(3) == CalendarDate(31, "Dec", 2008)
    assert cal.date_at(4) == CalendarDate(1, "Jan", 2009)
    assert cal.date_at(3) < cal.date_at(4)


def test_date_at_outside_segments_raises() -> None:
    cal = _index(["", "", "May-08", ""], ["", "", "1", "2"])
    with pytest.raises(UnknownColumnError):
        cal.date_at(1)


def test_column_at_round_trips_every_chart_date() -> None:
    cal = _index(["", "", "Apr-08", "", "May-08", "", ""],
                 ["", "", "29", "30", "1", "2", "3"])
    for col in range(2, 7):
        assert cal.column_at(cal.date_at(col)) == col


def test_column_at_unknown_dates() -> None:
    cal = _index(["", "", "May-08", "", ""], ["", "", "5", "6", "7"])
    assert cal.column_at(CalendarDate(4, "May", 2008)) is None
    assert cal.column_at(CalendarDate(5, "Jun", 2008)) is None
    assert cal.column_at(None) is None
    assert cal.column_at(CalendarDate.parse("06/May/08")) == 3
