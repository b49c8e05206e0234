# schedule_converter/gui/app.py
from __future__ import annotations

from dataclasses import replace
from pathlib import Path
import sys

import streamlit as st

# Streamlit changes the working directory, so put the repository root on the path.
ROOT_DIR = Path(__file__).resolve().parents[2]
if str(ROOT_DIR) not in sys.path:
    sys.path.append(str(ROOT_DIR))

from schedule_converter.config import DEFAULT_CONFIG, load_config, parse_keywords
from schedule_converter.domain.models import CalendarDate, ViewType
from schedule_converter.pipeline import run_conversion
from schedule_converter.reporting.export_xlsx import report_bytes
from schedule_converter.reporting.report import ReportProjector
from schedule_converter.validation.validator import ScheduleError


def main():
    st.title("Teacher schedule converter")

    st.header("Input")
    input_file = st.text_input("Schedule chart xlsx").strip()
    props_file = st.text_input("schedule.properties (optional)").strip()
    owners_file = st.text_input("Place owner workbook xlsx (optional)").strip()
    out_dir = st.text_input("Output directory", value="output").strip()
    groupable = st.text_input("Activities grouped across teachers (comma separated)").strip()

    st.subheader("Schedule range (optional)")
    use_range = st.checkbox("Limit to a date range")
    start_date = end_date = None
    if use_range:
        start_date = CalendarDate.from_date(st.date_input("From"))
        end_date = CalendarDate.from_date(st.date_input("To"))

    run = st.button("Convert")
    if not run:
        st.stop()

    if not input_file:
        st.error("Schedule chart path is empty.")
        st.stop()

    try:
        cfg = load_config(props_file) if props_file else DEFAULT_CONFIG
    except ScheduleError as e:
        st.error(e.message)
        st.stop()
    cfg = replace(cfg, output_directory=out_dir)
    if owners_file:
        cfg = replace(cfg, place_owner_workbook=owners_file)
    if groupable:
        cfg = replace(cfg, groupable_activities=parse_keywords(groupable))

    try:
        outcome = run_conversion(input_file, cfg, start_date, end_date)
    except ScheduleError as e:
        st.error(e.message)
        st.stop()

    for w in outcome.result.warnings:
        st.warning(w.message)

    st.success(f"{len(outcome.result.events)} events, {len(outcome.written)} files written.")

    consolidated = ReportProjector(outcome.result).project(ViewType.ALL).to_frame()
    tab1, tab2 = st.tabs(["Consolidated", "Written files"])
    with tab1:
        st.dataframe(consolidated, use_container_width=True)
    with tab2:
        st.write("\n".join(f"- {p}" for p in outcome.written))

    st.download_button(
        label="Download consolidated xlsx",
        data=report_bytes(consolidated),
        file_name=f"{Path(input_file).stem}ConsolidatedReport.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )


if __name__ == "__main__":
    main()
