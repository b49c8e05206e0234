# schedule_converter/io_layer/grid.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Protocol, Sequence

from schedule_converter.domain.models import MergedRegion


class GridSource(Protocol):
    """What the converter needs from a chart sheet (0-based indices)"""

    @property
    def row_count(self) -> int: ...

    @property
    def column_count(self) -> int: ...

    def cell_text(self, column: int, row: int) -> str: ...

    def row_cells(self, row: int) -> List[str]: ...

    def row_extent(self, row: int) -> int: ...

    def merged_regions(self) -> Sequence[MergedRegion]: ...


@dataclass
class SheetGrid:
    """Rows of cell text held in memory; ragged rows read as empty cells"""
    rows: List[List[str]]
    regions: List[MergedRegion] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return max((len(r) for r in self.rows), default=0)

    def cell_text(self, column: int, row: int) -> str:
        if row < 0 or row >= len(self.rows):
            return ""
        cells = self.rows[row]
        if column < 0 or column >= len(cells):
            return ""
        return cells[column] or ""

    def row_cells(self, row: int) -> List[str]:
        width = self.column_count
        return [self.cell_text(c, row) for c in range(width)]

    def row_extent(self, row: int) -> int:
        """index of the last non-empty cell (merged region ends count), -1 if none"""
        last = -1
        if 0 <= row < len(self.rows):
            for c, v in enumerate(self.rows[row]):
                if v and v.strip():
                    last = c
        for r in self.regions:
            if r.first_row <= row <= r.last_row and r.last_column > last and self.cell_text(r.first_column, r.first_row).strip():
                last = r.last_column
        return last

    def merged_regions(self) -> Sequence[MergedRegion]:
        return list(self.regions)
