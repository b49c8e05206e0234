from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from pathlib import Path

import pandas as pd
import pytest
from openpyxl import Workbook

from schedule_converter.domain.models import CalendarDate
from schedule_converter.io_layer.xlsx_reader import XlsxReader, cell_to_text
from schedule_converter.main_cli import main, parse_schedule_date
from schedule_converter.pipeline import run_conversion
from schedule_converter.validation.validator import GridSourceError


def write_chart(path: Path) -> Path:
    """
    Row 2: month labels (a real date cell and a typed label), row 3: days,
    rows 4+: mark, teacher, tokens. Merged tokens span several days.
    """
    wb = Workbook()
    ws = wb.active
    ws.title = "Chart"
    ws["A1"] = "Teacher schedule"
    ws["C2"] = datetime(2008, 5, 1)
    ws["F2"] = "Jun-08"
    for col, day in zip("CDEFG", [29, 30, 31, 1, 2]):
        ws[f"{col}3"] = day

    ws["B4"] = "TeacherA"
    ws["C4"] = "Chennai - Satsang"
    ws.merge_cells("C4:D4")
    ws["E4"] = "Mumbai / Muland - Seva"

    ws["A5"] = "x"
    ws["B5"] = "TeacherB"
    ws["C5"] = "Chennai - Satsang"
    ws.merge_cells("C5:D5")
    ws["F5"] = "Delhi - Training"
    ws.merge_cells("F5:G5")

    ws["B6"] = "TeacherC"
    ws["G6"] = "BREAK"
    wb.save(path)
    return path


def write_owners(path: Path) -> Path:
    wb = Workbook()
    ws = wb.active
    ws.title = "Place Owner Table"
    ws["B1"] = "Place owners"
    ws["B2"] = "Place"
    ws["C2"] = "Owner"
    rows = [("Chennai", "Meena"), ("Muland", "Anita"), ("Delhi", "Ravi"), ("Pune", "Kiran")]
    for i, (place, owner) in enumerate(rows, start=3):
        ws[f"B{i}"] = place
        ws[f"C{i}"] = owner
    wb.save(path)
    return path


@pytest.fixture
def chart(tmp_path: Path) -> Path:
    return write_chart(tmp_path / "May2008.xlsx")


@pytest.fixture
def owner_book(tmp_path: Path) -> Path:
    return write_owners(tmp_path / "owners.xlsx")


def test_cell_to_text() -> None:
    assert cell_to_text(None) == ""
    assert cell_to_text(15.0) == "15"
    assert cell_to_text(15) == "15"
    assert cell_to_text(1.5) == "1.5"
    assert cell_to_text(" Delhi ") == "Delhi"
    assert cell_to_text(datetime(2008, 5, 1), "%b-%y") == "May-08"


def test_read_grid(cfg, chart) -> None:
    grid = XlsxReader(cfg).read_grid(str(chart))

    assert grid.cell_text(2, 1) == "May-08"
    assert grid.cell_text(5, 1) == "Jun-08"
    assert grid.cell_text(2, 2) == "29"
    assert grid.cell_text(3, 3) == ""
    assert grid.cell_text(2, 3) == "Chennai - Satsang"
    assert {(r.first_column, r.first_row, r.last_column, r.last_row) for r in grid.merged_regions()} == {
        (2, 3, 3, 3), (2, 4, 3, 4), (5, 4, 6, 4),
    }
    assert grid.row_extent(4) == 6


def test_read_grid_missing_sheet(cfg, chart) -> None:
    with pytest.raises(GridSourceError):
        XlsxReader(replace(cfg, sheet_name="Nope")).read_grid(str(chart))
    with pytest.raises(GridSourceError):
        XlsxReader(cfg).read_grid(str(chart.parent / "missing.xlsx"))


def test_read_owner_table(cfg, owner_book, chart) -> None:
    reader = XlsxReader(cfg)
    assert reader.read_owner_table(str(owner_book)) == [
        ("Chennai", "Meena"), ("Muland", "Anita"), ("Delhi", "Ravi"), ("Pune", "Kiran"),
    ]
    assert reader.read_owner_table(str(chart)) == []


def test_run_conversion_writes_all_reports(cfg, chart, owner_book, tmp_path: Path) -> None:
    out = tmp_path / "out"
    cfg = replace(cfg, output_directory=str(out), place_owner_workbook=str(owner_book))

    outcome = run_conversion(str(chart), cfg)

    written = {Path(p).relative_to(out).as_posix() for p in outcome.written}
    assert written == {
        "May2008ConsolidatedReport.xlsx",
        "teachers/May2008-TeacherA.xlsx",
        "teachers/May2008-TeacherC.xlsx",
        "coords/May2008-Anita.xlsx",
        "coords/May2008-Meena.xlsx",
        "coords/May2008-Ravi.xlsx",
        "centers/May2008-chennai.xlsx",
        "centers/May2008-muland.xlsx",
        "centers/May2008-delhi.xlsx",
    }

    consolidated = pd.read_excel(out / "May2008ConsolidatedReport.xlsx", sheet_name="Output", dtype=str)
    assert list(consolidated.columns[:5]) == ["Sl.No", "From", "To", "Center", "Nature of Activity"]
    assert consolidated["From"].tolist() == ["29-May-2008", "31-May-2008", "01-Jun-2008", "02-Jun-2008"]
    assert consolidated["To"].tolist() == ["30-May-2008", "31-May-2008", "02-Jun-2008", "02-Jun-2008"]
    assert consolidated["Center"].fillna("").tolist() == ["Chennai", "Mumbai / Muland", "Delhi", ""]
    assert consolidated.iloc[0][["Teacher 1", "Teacher 2"]].tolist() == ["TeacherA", "TeacherB"]


def test_run_conversion_date_range(cfg, chart, tmp_path: Path) -> None:
    cfg = replace(cfg, output_directory=str(tmp_path / "out"))
    outcome = run_conversion(str(chart), cfg,
                             CalendarDate.parse("31/May/08"), CalendarDate.parse("02/Jun/08"), write=False)

    assert [(ev.start.label(), ev.place) for _, ev in outcome.result.events.ordered()] == [
        ("31/May/08", "Mumbai / Muland"),
        ("01/Jun/08", "Delhi"),
        ("02/Jun/08", ""),
    ]
    assert outcome.written == []
    assert not (tmp_path / "out").exists()


def test_cli(chart, owner_book, tmp_path: Path) -> None:
    out = tmp_path / "cli-out"
    rc = main([str(chart), "29/May/08", "--out", str(out), "--owners", str(owner_book), "--groupable", "satsang"])

    assert rc == 0
    assert (out / "May2008ConsolidatedReport.xlsx").is_file()
    assert (out / "coords" / "May2008-Meena.xlsx").is_file()


def test_cli_reports_fatal_errors(tmp_path: Path) -> None:
    assert main([str(tmp_path / "missing.xlsx"), "--out", str(tmp_path)]) == 1


def test_cli_rejects_bad_dates(chart) -> None:
    with pytest.raises(SystemExit):
        main([str(chart), "not-a-date"])


def test_parse_schedule_date() -> None:
    assert parse_schedule_date("10/May/08") == CalendarDate(10, "May", 2008)
    assert parse_schedule_date("10 May 2008") == CalendarDate(10, "May", 2008)
    assert parse_schedule_date("2008-05-10") == CalendarDate(10, "May", 2008)
    assert parse_schedule_date("02-03-2008") == CalendarDate(2, "Mar", 2008)
    assert parse_schedule_date("") is None
