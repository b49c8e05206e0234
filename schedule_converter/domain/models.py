# schedule_converter/domain/models.py
from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from functools import total_ordering
from typing import List, Optional, Tuple

PLACE_ACTIVITY_SEPARATOR = "-"
CENTER_SECTOR_SEPARATOR = "/"

_MONTH_NUMBERS = {abbr.lower(): i for i, abbr in enumerate(calendar.month_abbr) if abbr}


def month_number(month: str) -> int:
    """'May' / 'may' / 'MAY' -> 5; 0 when unknown"""
    return _MONTH_NUMBERS.get(month.strip()[:3].lower(), 0)


def expand_year(year_text: str) -> int:
    """Two digit years follow strptime's %y pivot (69-99 -> 19xx, 00-68 -> 20xx)."""
    y = year_text.strip()
    if len(y) <= 2:
        return datetime.strptime(y.zfill(2), "%y").year
    return int(y)


@total_ordering
@dataclass(frozen=True)
class CalendarDate:
    """Calendar date as it appears on the chart: day-of-month + month label + year"""
    day: int
    month: str
    year: int

    def __post_init__(self):
        n = month_number(self.month)
        if n:
            object.__setattr__(self, "month", calendar.month_abbr[n])

    @property
    def month_number(self) -> int:
        return month_number(self.month)

    def sort_key(self) -> Tuple[int, int, int]:
        return (self.year, self.month_number, self.day)

    def __lt__(self, other: "CalendarDate") -> bool:
        if not isinstance(other, CalendarDate):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    @classmethod
    def parse(cls, text: str) -> "CalendarDate":
        """'15/May/08' or '15/May/2008'"""
        parts = [p.strip() for p in text.strip().split("/")]
        if len(parts) != 3 or not parts[0].isdigit() or month_number(parts[1]) == 0:
            raise ValueError(f"Date must be in dd/Mon/yy format: {text!r}")
        return cls(day=int(parts[0]), month=calendar.month_abbr[month_number(parts[1])], year=expand_year(parts[2]))

    @classmethod
    def from_date(cls, d: date) -> "CalendarDate":
        return cls(day=d.day, month=calendar.month_abbr[d.month], year=d.year)

    def month_key(self) -> Tuple[int, int]:
        return (self.year, self.month_number)

    def label(self) -> str:
        return f"{self.day:02d}/{self.month}/{self.year % 100:02d}"

    def display(self) -> str:
        """Format used in the written reports, e.g. 15-May-2008"""
        return f"{self.day:02d}-{self.month}-{self.year}"

    def __str__(self) -> str:
        return self.label()


@dataclass(frozen=True)
class MonthSegment:
    label: str          # e.g. "May-08"
    month: str          # "May"
    year: int           # 2008
    start_column: int
    end_column: int

    def contains(self, column: int) -> bool:
        return self.start_column <= column <= self.end_column

    def month_key(self) -> Tuple[int, int]:
        return (self.year, month_number(self.month))


@dataclass(frozen=True)
class CellRef:
    column: int
    row: int

    def __str__(self) -> str:
        return f"[{self.column}, {self.row}]"


@dataclass(frozen=True)
class MergedRegion:
    first_column: int
    first_row: int
    last_column: int
    last_row: int


@dataclass(frozen=True)
class ScheduleToken:
    place: str
    activity: str

    @classmethod
    def parse(cls, text: str) -> "ScheduleToken":
        """
        Token forms seen on charts:
          'Delhi - Training', 'Mumbai / Muland - Seva', 'BREAK', 'Travel'
        Only the first '-' splits; a leading '-' does not.
        """
        text = text.strip()
        idx = text.find(PLACE_ACTIVITY_SEPARATOR)
        if idx > 0:
            return cls(place=text[:idx].strip(), activity=text[idx + 1:].strip())
        return cls(place="", activity=text)


@dataclass(frozen=True)
class PlaceKey:
    raw: str
    center: str
    sector: str
    has_separator: bool

    @classmethod
    def parse(cls, place: str) -> "PlaceKey":
        if CENTER_SECTOR_SEPARATOR in place:
            center, _, sector = place.partition(CENTER_SECTOR_SEPARATOR)
            return cls(raw=place, center=center.strip(), sector=sector.strip(), has_separator=True)
        return cls(raw=place, center=place, sector=place, has_separator=False)

    @property
    def display(self) -> str:
        if self.has_separator:
            return f"{self.center} {CENTER_SECTOR_SEPARATOR} {self.sector}"
        return self.raw


def unmask_activity(label: str) -> str:
    """
    Legacy display rule: drop everything from the last '-'.
    Also truncates shared activities that contain a literal '-' (e.g. 'Self-Study').
    """
    idx = label.rfind(PLACE_ACTIVITY_SEPARATOR)
    if idx >= 0:
        return label[:idx]
    return label


@dataclass(frozen=True)
class GroupingKey:
    """person=None: shared by everyone on the same dates/place/activity"""
    activity: str
    person: Optional[str] = None

    @property
    def shared(self) -> bool:
        return self.person is None

    def label(self) -> str:
        if self.person is None:
            return self.activity
        return f"{self.activity}{PLACE_ACTIVITY_SEPARATOR}{self.person}"

    def display_activity(self, legacy_unmask: bool = True) -> str:
        if legacy_unmask:
            return unmask_activity(self.label())
        return self.activity


@dataclass(frozen=True)
class EventKey:
    start: CalendarDate
    end: CalendarDate
    place: str
    grouping: GroupingKey


@dataclass
class ScheduleEvent:
    start: CalendarDate
    end: CalendarDate
    place: str
    activity: str
    persons: List[str] = field(default_factory=list)  # insertion ordered, unique
    owner: str = ""

    @property
    def place_key(self) -> PlaceKey:
        return PlaceKey.parse(self.place)

    def add_person(self, person: str) -> bool:
        if person in self.persons:
            return False
        self.persons.append(person)
        return True


class ViewType(str, Enum):
    ALL = "All"
    TEACHER = "Teacher"
    SECTOR_COORDINATOR = "SectorCoordinator"
    CENTER = "Center"


@dataclass(frozen=True)
class OutputRow:
    sl_no: int
    start: CalendarDate
    end: CalendarDate
    place: str        # display form
    activity: str     # unmasked
    persons: Tuple[str, ...]
    owner: str

    def cells(self, width: int) -> List[str]:
        persons = list(self.persons) + [""] * max(0, width - len(self.persons))
        return [str(self.sl_no), self.start.display(), self.end.display(), self.place, self.activity] + persons + [self.owner]
