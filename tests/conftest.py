"""
Pytest configuration and shared fixtures.
"""

import pytest

from schedule_converter.config import AppConfig
from schedule_converter.domain.models import CalendarDate
from schedule_converter.domain.owners import OwnerDirectory


@pytest.fixture
def cfg():
    return AppConfig(groupable_activities=frozenset({"satsang", "sathsang"}))


@pytest.fixture
def owners():
    return OwnerDirectory([
        ("Delhi", "Ravi"),
        ("Chennai", "Meena"),
        ("Mumbai", "Suresh"),
        ("muland", "Anita"),
    ])


@pytest.fixture
def may():
    def _d(day: int) -> CalendarDate:
        return CalendarDate(day, "May", 2008)
    return _d
