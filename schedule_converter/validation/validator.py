# schedule_converter/validation/validator.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from schedule_converter.domain.models import CalendarDate


@dataclass(eq=False)
class ScheduleError(Exception):
    """Fatal: aborts the whole run"""
    message: str

    def __str__(self) -> str:
        return self.message


class MalformedHeaderError(ScheduleError):
    pass


class UnknownColumnError(ScheduleError):
    pass


class GridSourceError(ScheduleError):
    pass


class ConfigError(ScheduleError):
    pass


@dataclass(frozen=True)
class ValidationWarning:
    message: str


@dataclass(frozen=True)
class MissingOwnerWarning(ValidationWarning):
    pass


@dataclass(frozen=True)
class EmptyFilterRangeWarning(ValidationWarning):
    pass


def validate_filter_range(
    schedule_start: Optional["CalendarDate"],
    schedule_end: Optional["CalendarDate"],
) -> List[ValidationWarning]:
    # An inverted range is not an error: the run goes on and simply yields no events.
    warnings: List[ValidationWarning] = []
    if schedule_start is not None and schedule_end is not None and schedule_start > schedule_end:
        warnings.append(EmptyFilterRangeWarning(
            f"Schedule start date {schedule_start.label()} is after end date {schedule_end.label()}; "
            "no events will be reported."
        ))
    return warnings
