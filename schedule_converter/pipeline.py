# schedule_converter/pipeline.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from schedule_converter.aggregation.aggregator import AggregationResult, ScheduleEventAggregator
from schedule_converter.config import AppConfig
from schedule_converter.domain.calendar_index import CalendarColumnIndex
from schedule_converter.domain.merged_spans import MergedSpanTable
from schedule_converter.domain.models import CalendarDate
from schedule_converter.domain.owners import OwnerDirectory
from schedule_converter.io_layer.grid import GridSource
from schedule_converter.io_layer.paths import OutputLayout
from schedule_converter.io_layer.xlsx_reader import XlsxReader
from schedule_converter.reporting.export_xlsx import write_reports

logger = logging.getLogger(__name__)


@dataclass
class RunOutcome:
    result: AggregationResult
    owners: OwnerDirectory
    written: List[str] = field(default_factory=list)


def build_calendar(grid: GridSource, cfg: AppConfig) -> CalendarColumnIndex:
    cal = CalendarColumnIndex(first_column=cfg.first_date_column)
    cal.build_months(grid.row_cells(cfg.month_row), last_column=grid.column_count - 1)
    cal.build_days_of_month(grid.row_cells(cfg.day_row))
    return cal


def aggregate_grid(
    grid: GridSource,
    cfg: AppConfig,
    owners: Optional[OwnerDirectory] = None,
    schedule_start: Optional[CalendarDate] = None,
    schedule_end: Optional[CalendarDate] = None,
) -> AggregationResult:
    """Whole chart -> finished aggregation (calendar, spans and owners built once)"""
    cal = build_calendar(grid, cfg)
    spans = MergedSpanTable.from_regions(grid.merged_regions(), grid.cell_text, cal, schedule_start, schedule_end)
    logger.debug("%d merged spans registered", len(spans))
    agg = ScheduleEventAggregator(
        calendar=cal,
        spans=spans,
        groupable=cfg.groupable_activities,
        owners=owners,
        schedule_start=schedule_start,
        schedule_end=schedule_end,
        legacy_unmask=cfg.legacy_unmask,
    )
    return agg.aggregate(grid, cfg)


def load_owners(cfg: AppConfig, reader: XlsxReader) -> OwnerDirectory:
    if not cfg.place_owner_workbook:
        logger.warning("No place owner workbook configured. Owners will not be filled.")
        return OwnerDirectory()
    return OwnerDirectory(reader.read_owner_table(cfg.place_owner_workbook))


def run_conversion(
    input_path: str,
    cfg: AppConfig,
    schedule_start: Optional[CalendarDate] = None,
    schedule_end: Optional[CalendarDate] = None,
    write: bool = True,
) -> RunOutcome:
    reader = XlsxReader(cfg=cfg)
    grid = reader.read_grid(input_path)
    owners = load_owners(cfg, reader)
    result = aggregate_grid(grid, cfg, owners, schedule_start, schedule_end)

    outcome = RunOutcome(result=result, owners=owners)
    if write:
        layout = OutputLayout.for_input(input_path, cfg.output_directory)
        outcome.written = write_reports(result, owners, layout)
    return outcome
