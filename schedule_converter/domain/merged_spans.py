# schedule_converter/domain/merged_spans.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from schedule_converter.domain.calendar_index import CalendarColumnIndex
from schedule_converter.domain.models import CalendarDate, CellRef, MergedRegion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MergedSpan:
    bottom_right: CellRef
    text: str


class MergedSpanTable:
    """span root (top-left cell) -> bottom-right cell and the text of the region"""

    def __init__(self):
        self._spans: Dict[CellRef, MergedSpan] = {}

    def register(self, top_left: CellRef, bottom_right: CellRef, text: str) -> None:
        self._spans[top_left] = MergedSpan(bottom_right=bottom_right, text=text)

    def resolve_end(self, cell: CellRef) -> Optional[int]:
        span = self._spans.get(cell)
        return span.bottom_right.column if span else None

    def text_at(self, cell: CellRef) -> Optional[str]:
        span = self._spans.get(cell)
        return span.text if span else None

    def __len__(self) -> int:
        return len(self._spans)

    def __contains__(self, cell: CellRef) -> bool:
        return cell in self._spans

    @classmethod
    def from_regions(
        cls,
        regions: Iterable[MergedRegion],
        cell_text: Callable[[int, int], str],
        calendar: CalendarColumnIndex,
        schedule_start: Optional[CalendarDate] = None,
        schedule_end: Optional[CalendarDate] = None,
    ) -> "MergedSpanTable":
        """
        Register the regions lying on date columns and completely inside
        [schedule_start, schedule_end] (either bound optional).
        """
        start_col = calendar.column_at(schedule_start)
        end_col = calendar.column_at(schedule_end)
        logger.debug("span filter: start=%s col=%s, end=%s col=%s", schedule_start, start_col, schedule_end, end_col)

        table = cls()
        for r in regions:
            if calendar.segment_at(r.first_column) is None:
                # e.g. person names merged across rows
                continue
            if start_col is not None and r.first_column < start_col:
                logger.debug("Skipping merged region: first col %s falls before start col %s", r.first_column, start_col)
                continue
            if end_col is not None and r.last_column > end_col:
                logger.debug("Skipping merged region: last col %s falls after end col %s", r.last_column, end_col)
                continue
            text = (cell_text(r.first_column, r.first_row) or "").strip()
            table.register(CellRef(r.first_column, r.first_row), CellRef(r.last_column, r.last_row), text)
            logger.debug("Registered region [%s, %s] - [%s, %s]: %r",
                         r.first_column, r.first_row, r.last_column, r.last_row, text)
        return table
