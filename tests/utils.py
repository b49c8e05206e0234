"""Chart builders shared by the tests."""
from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from schedule_converter.domain.models import MergedRegion
from schedule_converter.io_layer.grid import SheetGrid

FIRST_DATE_COL = 2
FIRST_PERSON_ROW = 3


def date_col(i: int) -> int:
    """i-th date column of the chart"""
    return FIRST_DATE_COL + i


def build_chart(
    months: Dict[int, str],
    days: Sequence[int],
    people: Sequence[Tuple[str, str, Sequence[str]]],
    spans: Sequence[Tuple[int, int, int]] = (),
    mode: str = "",
) -> SheetGrid:
    """
    months: date index -> label ('May-08'), placed in the month row
    people: (mark, name, tokens per date column)
    spans:  (person index, first date index, last date index) merged on the person's row
    """
    header = ["", ""] + [months.get(i, "") for i in range(len(days))]
    day_row = [mode, ""] + [str(d) for d in days]
    rows: List[List[str]] = [["Schedule chart"], header, day_row]
    for mark, name, tokens in people:
        cells = list(tokens) + [""] * (len(days) - len(tokens))
        rows.append([mark, name] + cells)

    regions = [
        MergedRegion(first_column=date_col(a), first_row=FIRST_PERSON_ROW + p,
                     last_column=date_col(b), last_row=FIRST_PERSON_ROW + p)
        for p, a, b in spans
    ]
    return SheetGrid(rows=rows, regions=regions)


def may_chart(people, spans=(), mode="", ndays=10) -> SheetGrid:
    return build_chart({0: "May-08"}, list(range(1, ndays + 1)), people, spans, mode)
