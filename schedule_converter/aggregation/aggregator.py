# schedule_converter/aggregation/aggregator.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterator, List, Optional, Sequence, Set, Tuple

from schedule_converter.config import AppConfig
from schedule_converter.domain.calendar_index import CalendarColumnIndex
from schedule_converter.domain.merged_spans import MergedSpanTable
from schedule_converter.domain.models import (
    CalendarDate, CellRef, EventKey, GroupingKey, PlaceKey, ScheduleEvent, ScheduleToken,
)
from schedule_converter.domain.owners import OwnerDirectory
from schedule_converter.io_layer.grid import GridSource
from schedule_converter.validation.validator import (
    MissingOwnerWarning, ValidationWarning, validate_filter_range,
)

logger = logging.getLogger(__name__)


class EventIndex:
    """(start, end, place, grouping key) -> event, remembering first-seen order"""

    def __init__(self):
        self._events: Dict[EventKey, ScheduleEvent] = {}
        self._seq: Dict[EventKey, int] = {}

    def __len__(self) -> int:
        return len(self._events)

    def __contains__(self, key: EventKey) -> bool:
        return key in self._events

    def __iter__(self) -> Iterator[EventKey]:
        return iter(self._events)

    def get(self, key: EventKey) -> Optional[ScheduleEvent]:
        return self._events.get(key)

    def get_or_create(self, key: EventKey, activity: str, owner: str = "") -> Tuple[ScheduleEvent, bool]:
        ev = self._events.get(key)
        if ev is not None:
            return ev, False
        ev = ScheduleEvent(start=key.start, end=key.end, place=key.place, activity=activity, owner=owner)
        self._events[key] = ev
        self._seq[key] = len(self._seq)
        return ev, True

    def ordered(self) -> List[Tuple[EventKey, ScheduleEvent]]:
        """
        start date, end date (calendar order), then place and activity in the
        order they were first seen for that start/end pair
        """
        place_rank: Dict[Tuple[CalendarDate, CalendarDate, str], int] = {}
        for key, seq in self._seq.items():
            pk = (key.start, key.end, key.place)
            if pk not in place_rank or seq < place_rank[pk]:
                place_rank[pk] = seq

        keys = sorted(
            self._events,
            key=lambda k: (k.start.sort_key(), k.end.sort_key(), place_rank[(k.start, k.end, k.place)], self._seq[k]),
        )
        return [(k, self._events[k]) for k in keys]


@dataclass
class AggregationResult:
    events: EventIndex
    largest_groups: Dict[str, Tuple[str, ...]]
    max_group_size: int
    persons: List[str]
    marked_persons: List[str] = field(default_factory=list)
    skip_marked: bool = True
    warnings: List[ValidationWarning] = field(default_factory=list)

    def group_width(self, person: str) -> int:
        return len(self.largest_groups.get(person, ()))

    def selected_persons(self) -> List[str]:
        """persons who get their own report"""
        out: List[str] = []
        marked = set(self.marked_persons)
        for p in self.persons:
            if self.skip_marked and p in marked:
                logger.debug("Skipping %s: marked for skip", p)
                continue
            if not self.skip_marked and p not in marked:
                logger.debug("Skipping %s: not marked for generation", p)
                continue
            if self.group_width(p) == 0:
                logger.debug("Skipping %s: no schedule for this person", p)
                continue
            out.append(p)
        return out


@dataclass
class _OpenToken:
    token: ScheduleToken
    start: CalendarDate
    end: Optional[CalendarDate]  # fixed by a merged span


class ScheduleEventAggregator:
    def __init__(
        self,
        calendar: CalendarColumnIndex,
        spans: MergedSpanTable,
        groupable: FrozenSet[str] = frozenset(),
        owners: Optional[OwnerDirectory] = None,
        schedule_start: Optional[CalendarDate] = None,
        schedule_end: Optional[CalendarDate] = None,
        legacy_unmask: bool = True,
    ):
        self.calendar = calendar
        self.spans = spans
        self.groupable = frozenset(k.lower() for k in groupable)
        self.owners = owners or OwnerDirectory()
        self.schedule_start = schedule_start
        self.schedule_end = schedule_end
        self.legacy_unmask = legacy_unmask

        self.events = EventIndex()
        self.largest_groups: Dict[str, Tuple[str, ...]] = {}
        self.max_group_size = 0
        self.persons: List[str] = []
        self.marked_persons: List[str] = []
        self.skip_marked = True
        self.warnings: List[ValidationWarning] = validate_filter_range(schedule_start, schedule_end)
        self._unowned_places: Set[str] = set()

    # ---- grouping ----
    def is_groupable(self, activity: str) -> bool:
        return any(tok.strip().lower() in self.groupable for tok in activity.split())

    def grouping_key(self, activity: str, person: str) -> GroupingKey:
        if self.is_groupable(activity):
            return GroupingKey(activity)
        # never merged across persons, even on identical dates
        return GroupingKey(activity, person)

    # ---- event index ----
    def record(self, start: CalendarDate, end: CalendarDate, place: str, activity: str, person: str) -> ScheduleEvent:
        grouping = self.grouping_key(activity, person)
        key = EventKey(start=start, end=end, place=place, grouping=grouping)
        owner = self.owners.owner_for(PlaceKey.parse(place))
        ev, created = self.events.get_or_create(key, grouping.display_activity(self.legacy_unmask), owner)
        if created and place and not owner and place not in self._unowned_places:
            self._unowned_places.add(place)
            self.warnings.append(MissingOwnerWarning(f"No owner found for place: {place}"))

        if ev.add_person(person) and len(ev.persons) > self.max_group_size:
            self.max_group_size = len(ev.persons)

        size = len(ev.persons)
        for member in ev.persons:
            if len(self.largest_groups.get(member, ())) < size:
                self.largest_groups[member] = tuple(ev.persons)
        return ev

    def _close(self, open_tok: _OpenToken, person: str, column: int) -> None:
        end = open_tok.end if open_tok.end is not None else self.calendar.date_at(column)
        if self.schedule_end is not None and end > self.schedule_end:
            logger.debug("Skipping %s for %s: end date %s occurs after %s",
                         open_tok.token, person, end, self.schedule_end)
            return
        self.record(open_tok.start, end, open_tok.token.place, open_tok.token.activity, person)

    # ---- rows ----
    def add_row(self, person: str, cells: Sequence[str], row: int, last_column: Optional[int] = None) -> None:
        """
        Walk one person's token row. A token runs until its merged span ends or,
        when unmerged, until the column before the next token.
        """
        if last_column is None:
            last_column = max((i for i, v in enumerate(cells) if v and v.strip()), default=-1)

        open_tok: Optional[_OpenToken] = None
        for col in range(self.calendar.first_column, len(cells)):
            text = (cells[col] or "").strip()
            if not text:
                continue

            if open_tok is not None:
                self._close(open_tok, person, col - 1)
                open_tok = None

            cell = CellRef(col, row)
            token = ScheduleToken.parse(self.spans.text_at(cell) or text)

            start = self.calendar.date_at(col)
            if self.schedule_start is not None and start < self.schedule_start:
                logger.debug("Skipping %s for %s: start date %s occurs before %s",
                             token, person, start, self.schedule_start)
                continue

            end_col = self.spans.resolve_end(cell)
            end = self.calendar.date_at(end_col) if end_col is not None else None
            if self.schedule_end is not None and (end or start) > self.schedule_end:
                logger.debug("Skipping %s for %s: end date %s occurs after %s",
                             token, person, end or start, self.schedule_end)
                continue

            open_tok = _OpenToken(token=token, start=start, end=end)

        if open_tok is not None:
            self._close(open_tok, person, last_column)

    def aggregate(self, grid: GridSource, cfg: AppConfig) -> AggregationResult:
        mode = grid.cell_text(cfg.mark_column, cfg.day_row).strip()
        self.skip_marked = mode == "" or mode.lower() == "skip"
        logger.info("Processing mode: %s", "Skip marked" if self.skip_marked else "Generate marked")

        for row in range(cfg.first_person_row, grid.row_count):
            person = grid.cell_text(cfg.person_column, row).strip()
            if not person:
                continue
            if "x" in grid.cell_text(cfg.mark_column, row).lower() and person not in self.marked_persons:
                self.marked_persons.append(person)
            if person not in self.persons:
                self.persons.append(person)

            token_row = row + cfg.schedule_row_offset
            self.add_row(person, grid.row_cells(token_row), token_row, grid.row_extent(token_row))

        logger.info("Aggregated %d events for %d persons (largest group: %d)",
                    len(self.events), len(self.persons), self.max_group_size)
        return self.result()

    def result(self) -> AggregationResult:
        return AggregationResult(
            events=self.events,
            largest_groups=dict(self.largest_groups),
            max_group_size=self.max_group_size,
            persons=list(self.persons),
            marked_persons=list(self.marked_persons),
            skip_marked=self.skip_marked,
            warnings=list(self.warnings),
        )
