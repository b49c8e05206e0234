# schedule_converter/reporting/report.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Set

import pandas as pd

from schedule_converter.aggregation.aggregator import AggregationResult
from schedule_converter.domain.models import CENTER_SECTOR_SEPARATOR, OutputRow, PlaceKey, ScheduleEvent, ViewType

PERSON_TITLE = "Teacher"
OWNER_TITLE = "Sector-Coordinator"


@dataclass
class Projection:
    view: ViewType
    filter_value: str
    width: int
    rows: List[OutputRow] = field(default_factory=list)
    owners: Set[str] = field(default_factory=set)  # filled for the ALL view only

    @property
    def header(self) -> List[str]:
        return build_header(self.view, self.width)

    def to_frame(self) -> pd.DataFrame:
        return rows_to_frame(self.header, self.rows, self.width)


def build_header(view: ViewType, width: int) -> List[str]:
    persons = [f"{PERSON_TITLE} {i}" for i in range(1, width + 1)]
    owner_title = "" if view == ViewType.TEACHER else OWNER_TITLE
    return ["Sl.No", "From", "To", "Center", "Nature of Activity"] + persons + [owner_title]


def rows_to_frame(header: List[str], rows: List[OutputRow], width: int) -> pd.DataFrame:
    return pd.DataFrame([r.cells(width) for r in rows], columns=header)


def place_matches_center(filter_value: str, place: PlaceKey) -> bool:
    """
    filter is e.g. 'mumbai / muland', 'muland' or 'mumbai';
    place may be 'mumbai', 'mumbai / muland', 'muland' or free text
    """
    flt = filter_value.strip().lower()
    display = place.display.strip().lower()
    center = place.center.strip().lower()
    sector = place.sector.strip().lower()
    if sector and (flt == sector or sector in flt):
        return True
    if center and (flt == center or (CENTER_SECTOR_SEPARATOR in flt and center in flt)):
        return True
    if flt == display:
        return True
    return bool(display) and display in flt


class ReportProjector:
    """Read-only views over a finished aggregation"""

    def __init__(self, result: AggregationResult):
        self.result = result

    def width_for(self, view: ViewType, filter_value: str = "") -> int:
        if view == ViewType.TEACHER:
            return self.result.group_width(filter_value)
        return self.result.max_group_size

    def _accepts(self, view: ViewType, filter_value: str, ev: ScheduleEvent) -> bool:
        if view == ViewType.ALL:
            return True
        if view == ViewType.TEACHER:
            return filter_value in ev.persons
        if view == ViewType.SECTOR_COORDINATOR:
            return bool(ev.owner) and ev.owner == filter_value
        if view == ViewType.CENTER:
            return place_matches_center(filter_value, ev.place_key)
        raise ValueError(f"Unknown view: {view}")

    def project(self, view: ViewType, filter_value: str = "", width: Optional[int] = None) -> Projection:
        view = ViewType(view)
        out = Projection(view=view, filter_value=filter_value,
                         width=self.width_for(view, filter_value) if width is None else width)
        sl_no = 1
        for _, ev in self.result.events.ordered():
            if view == ViewType.ALL and ev.owner:
                out.owners.add(ev.owner)
            if not self._accepts(view, filter_value, ev):
                continue
            out.rows.append(OutputRow(
                sl_no=sl_no,
                start=ev.start,
                end=ev.end,
                place=ev.place_key.display,
                activity=ev.activity,
                persons=tuple(ev.persons),
                owner="" if view == ViewType.TEACHER else ev.owner,
            ))
            sl_no += 1
        return out
