# schedule_converter/domain/calendar_index.py
from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Sequence

from schedule_converter.domain.models import CalendarDate, MonthSegment, month_number, expand_year
from schedule_converter.validation.validator import MalformedHeaderError, UnknownColumnError

logger = logging.getLogger(__name__)

_LABEL_SPLIT = re.compile(r"[-\s/]+")


def _parse_month_label(label: str) -> MonthSegment:
    """'May-08' -> month/year part of a segment (columns filled in by the caller)"""
    parts = [p for p in _LABEL_SPLIT.split(label.strip()) if p]
    if len(parts) != 2 or month_number(parts[0]) == 0 or not parts[1].isdigit():
        raise MalformedHeaderError(f"Illegal month-year label: {label!r}. Should be in Mon-yy form")
    return MonthSegment(label=label.strip(), month=parts[0], year=expand_year(parts[1]),
                        start_column=-1, end_column=-1)


class CalendarColumnIndex:
    """
    Chart column <-> calendar date.
    The month row carries a label only in the first column of each month; the
    day row carries the day-of-month for every date column.
    """

    def __init__(self, first_column: int = 0):
        self.first_column = first_column
        self.segments: List[MonthSegment] = []
        self.days: Dict[int, str] = {}

    def build_months(self, header_row: Sequence[str], last_column: Optional[int] = None) -> List[MonthSegment]:
        if not header_row:
            raise MalformedHeaderError("Month header row is empty")
        if last_column is None:
            last_column = len(header_row) - 1

        segments: List[MonthSegment] = []
        current: Optional[MonthSegment] = None
        for col in range(self.first_column, len(header_row)):
            text = (header_row[col] or "").strip()
            if not text:
                continue
            if current is not None:
                segments.append(_with_columns(current, current.start_column, col - 1))
            parsed = _parse_month_label(text)
            current = _with_columns(parsed, col, -1)

        if current is None:
            raise MalformedHeaderError("Month header row has no month labels")
        segments.append(_with_columns(current, current.start_column, max(last_column, current.start_column)))

        self.segments = segments
        logger.debug("month segments: %s", [(s.label, s.start_column, s.end_column) for s in segments])
        return segments

    def build_days_of_month(self, date_row: Sequence[str]) -> Dict[int, str]:
        self.days = {col: (date_row[col] or "").strip() for col in range(self.first_column, len(date_row))}
        logger.debug("day-of-month map: %s", self.days)
        return self.days

    def segment_at(self, column: int) -> Optional[MonthSegment]:
        for seg in self.segments:
            if seg.contains(column):
                return seg
        return None

    def _day_at(self, column: int) -> Optional[int]:
        text = self.days.get(column, "")
        return int(text) if text.isdigit() else None

    def date_at(self, column: int) -> CalendarDate:
        seg = self.segment_at(column)
        if seg is None:
            raise UnknownColumnError(f"Unable to find the date for the column: {column}")
        day = self._day_at(column)
        if day is None:
            raise UnknownColumnError(
                f"Column {column} of {seg.label} has no day-of-month (found {self.days.get(column, '')!r})"
            )
        return CalendarDate(day=day, month=seg.month, year=seg.year)

    def column_at(self, d: Optional[CalendarDate]) -> Optional[int]:
        """None when the date is not on the chart"""
        if d is None:
            return None
        for seg in self.segments:
            if seg.month_key() != d.month_key():
                continue
            for col in range(seg.start_column, seg.end_column + 1):
                if self._day_at(col) == d.day:
                    return col
            return None
        return None


def _with_columns(seg: MonthSegment, start: int, end: int) -> MonthSegment:
    return MonthSegment(label=seg.label, month=seg.month, year=seg.year, start_column=start, end_column=end)
