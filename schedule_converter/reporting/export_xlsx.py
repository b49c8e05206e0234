# schedule_converter/reporting/export_xlsx.py
from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, List, Union

import pandas as pd
from openpyxl.utils import get_column_letter

from schedule_converter.aggregation.aggregator import AggregationResult
from schedule_converter.domain.models import ViewType
from schedule_converter.domain.owners import OwnerDirectory
from schedule_converter.io_layer.paths import OutputLayout
from schedule_converter.reporting.report import ReportProjector

logger = logging.getLogger(__name__)

SHEET_NAME = "Output"


def _write_frame(target: Union[str, Path, BinaryIO], frame: pd.DataFrame) -> None:
    with pd.ExcelWriter(target, engine="openpyxl") as w:
        frame.to_excel(w, sheet_name=SHEET_NAME, index=False)
        ws = w.sheets[SHEET_NAME]
        # auto fit
        for i, col in enumerate(frame.columns, start=1):
            longest = max([len(str(col))] + [len(str(v)) for v in frame.iloc[:, i - 1]])
            ws.column_dimensions[get_column_letter(i)].width = longest + 2


def export_report_xlsx(out_path: Union[str, Path], frame: pd.DataFrame) -> str:
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    _write_frame(out_path, frame)
    return str(out_path)


def report_bytes(frame: pd.DataFrame) -> bytes:
    buf = BytesIO()
    _write_frame(buf, frame)
    return buf.getvalue()


def write_reports(result: AggregationResult, owners: OwnerDirectory, layout: OutputLayout) -> List[str]:
    """
    Consolidated report, then one file per selected person, per owner seen in
    the consolidated report and per owner-table place with at least one row.
    """
    projector = ReportProjector(result)
    layout.make_directories()
    written: List[str] = []

    consolidated = projector.project(ViewType.ALL)
    written.append(export_report_xlsx(layout.consolidated(), consolidated.to_frame()))
    logger.info("Wrote consolidated schedule (%d rows) to %s", len(consolidated.rows), written[-1])

    for person in result.selected_persons():
        proj = projector.project(ViewType.TEACHER, person)
        path = layout.per_teacher(person)
        logger.info("Writing schedule for teacher: %s to file: %s", person, path)
        written.append(export_report_xlsx(path, proj.to_frame()))

    for owner in sorted(consolidated.owners):
        proj = projector.project(ViewType.SECTOR_COORDINATOR, owner)
        path = layout.per_coordinator(owner)
        logger.info("Writing schedule for coordinator: %s to file: %s", owner, path)
        written.append(export_report_xlsx(path, proj.to_frame()))

    for center in owners.places():
        proj = projector.project(ViewType.CENTER, center)
        if not proj.rows:
            logger.debug("Skipped center: %s for lack of processable entries", center)
            continue
        path = layout.per_center(center)
        logger.info("Writing schedule for center: %s to file: %s", center, path)
        written.append(export_report_xlsx(path, proj.to_frame()))

    return written
