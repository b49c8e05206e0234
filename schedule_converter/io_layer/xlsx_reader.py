# schedule_converter/io_layer/xlsx_reader.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Tuple
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from schedule_converter.config import AppConfig
from schedule_converter.domain.models import MergedRegion
from schedule_converter.io_layer.grid import SheetGrid
from schedule_converter.validation.validator import GridSourceError

logger = logging.getLogger(__name__)

MONTH_LABEL_FORMAT = "%b-%y"      # May-08
CELL_DATE_FORMAT = "%d-%b-%Y"     # 15-May-2008


def cell_to_text(value, date_format: str = CELL_DATE_FORMAT) -> str:
    if value is None:
        return ""
    if isinstance(value, (datetime, date)):
        return value.strftime(date_format)
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return str(value).strip()


@dataclass(frozen=True)
class XlsxReader:
    cfg: AppConfig

    def read_grid(self, path: str) -> SheetGrid:
        """
        Chart sheet -> SheetGrid (0-based). Month-row dates are rendered as Mon-yy
        so they line up with typed labels such as 'May-08'.
        """
        try:
            wb = load_workbook(path, data_only=True)
        except (OSError, ValueError, BadZipFile, InvalidFileException) as e:
            raise GridSourceError(f"Unable to open workbook {path}: {e}") from e

        if self.cfg.sheet_name not in wb.sheetnames:
            raise GridSourceError(f"{path} has no '{self.cfg.sheet_name}' sheet")
        ws = wb[self.cfg.sheet_name]

        rows: List[List[str]] = []
        for r_idx, values in enumerate(ws.iter_rows(values_only=True)):
            fmt = MONTH_LABEL_FORMAT if r_idx == self.cfg.month_row else CELL_DATE_FORMAT
            rows.append([cell_to_text(v, fmt) for v in values])

        regions = [
            MergedRegion(first_column=rng.min_col - 1, first_row=rng.min_row - 1,
                         last_column=rng.max_col - 1, last_row=rng.max_row - 1)
            for rng in ws.merged_cells.ranges
        ]
        logger.debug("read %d rows, %d merged regions from %s", len(rows), len(regions), path)
        return SheetGrid(rows=rows, regions=regions)

    def read_owner_table(self, path: str) -> List[Tuple[str, str]]:
        """
        'Place Owner Table' sheet: place in owner_place_column, owner in the next one,
        data from owner_first_row.
        """
        try:
            wb = load_workbook(path, data_only=True)
        except (OSError, ValueError, BadZipFile, InvalidFileException) as e:
            raise GridSourceError(f"Unable to open owner workbook {path}: {e}") from e

        if self.cfg.owner_sheet_name not in wb.sheetnames:
            logger.warning("Unable to find %s sheet in %s. Owners will not be filled.",
                           self.cfg.owner_sheet_name, path)
            return []

        ws = wb[self.cfg.owner_sheet_name]
        pc = self.cfg.owner_place_column
        pairs: List[Tuple[str, str]] = []
        for r in ws.iter_rows(min_row=self.cfg.owner_first_row + 1, values_only=True):
            if not r or len(r) <= pc:
                continue
            place = cell_to_text(r[pc])
            owner = cell_to_text(r[pc + 1]) if len(r) > pc + 1 else ""
            if not place:
                continue
            pairs.append((place, owner))
        logger.debug("place owner table: %s", pairs)
        return pairs
