# schedule_converter/main_cli.py
from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from typing import Optional

from dateutil import parser as date_parser

from schedule_converter.config import DEFAULT_CONFIG, load_config, parse_keywords
from schedule_converter.domain.models import CalendarDate
from schedule_converter.pipeline import run_conversion
from schedule_converter.validation.validator import ScheduleError


def parse_schedule_date(text: Optional[str]) -> Optional[CalendarDate]:
    """'10/May/08', '10/May/2008', '2008-05-10' ... (day first)"""
    if not text or not text.strip():
        return None
    try:
        return CalendarDate.parse(text)
    except ValueError:
        pass
    try:
        # year-first ISO text would be read as year/day/month under dayfirst
        return CalendarDate.from_date(date_parser.isoparse(text.strip()).date())
    except ValueError:
        pass
    try:
        return CalendarDate.from_date(date_parser.parse(text, dayfirst=True).date())
    except (ValueError, OverflowError) as e:
        raise argparse.ArgumentTypeError(f"Invalid date (expected dd/Mon/yy): {text}") from e


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        prog="schedule-converter",
        description="Convert a teacher schedule chart into consolidated, per-teacher, per-coordinator and per-center reports",
    )
    p.add_argument("input", help="Schedule chart workbook (xlsx, sheet 'Chart')")
    p.add_argument("start_date", nargs="?", default=None, type=parse_schedule_date,
                   help="Schedule start date, dd/Mon/yy (optional)")
    p.add_argument("end_date", nargs="?", default=None, type=parse_schedule_date,
                   help="Schedule end date, dd/Mon/yy (optional)")
    p.add_argument("--config", default=None, help="schedule.properties file")
    p.add_argument("--out", default=None, help="Output directory (overrides output_directory)")
    p.add_argument("--owners", default=None, help="Place owner workbook (overrides place_owner_workbook_filename)")
    p.add_argument("--groupable", default=None,
                   help="Comma separated activity keywords grouped across teachers (overrides the properties file)")
    p.add_argument("--debug", action="store_true", help="Verbose logging")
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    cfg = DEFAULT_CONFIG
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(name)s: %(message)s")
    try:
        if args.config:
            cfg = load_config(args.config, cfg)
    except ScheduleError as e:
        print(f"[ERROR] {e.message}")
        return 1

    if args.out is not None:
        cfg = replace(cfg, output_directory=args.out)
    if args.owners is not None:
        cfg = replace(cfg, place_owner_workbook=args.owners)
    if args.groupable is not None:
        cfg = replace(cfg, groupable_activities=parse_keywords(args.groupable))
    if args.debug or cfg.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    print(f"[INFO] Activities marked for grouping: {sorted(cfg.groupable_activities)}")

    try:
        outcome = run_conversion(args.input, cfg, args.start_date, args.end_date)
    except ScheduleError as e:
        print(f"[ERROR] {e.message}")
        return 1

    for w in outcome.result.warnings:
        print(f"[WARN] {w.message}")

    print(f"[RESULT] OK: {len(outcome.result.events)} events, {len(outcome.written)} files written")
    for path in outcome.written:
        print(f"  {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
