# schedule_converter/config.py
from __future__ import annotations

import configparser
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import FrozenSet, Iterable

from schedule_converter.validation.validator import ConfigError

logger = logging.getLogger(__name__)


class PropertyKey:
    """Keys understood in schedule.properties"""
    DEBUG = "debug"
    OUTPUT_DIRECTORY = "output_directory"
    PLACE_OWNER_WORKBOOK_FILENAME = "place_owner_workbook_filename"
    ACTIVITIES_FOR_GROUPING = "activities_for_grouping_teachers"
    LEGACY_UNMASK = "legacy_unmask"


def parse_keywords(text: str | Iterable[str]) -> FrozenSet[str]:
    if isinstance(text, str):
        text = text.split(",")
    return frozenset(k.strip().lower() for k in text if k and k.strip())


@dataclass(frozen=True)
class AppConfig:
    # Chart sheet layout (0-based)
    sheet_name: str = "Chart"
    mark_column: int = 0
    person_column: int = 1
    first_date_column: int = 2
    month_row: int = 1
    day_row: int = 2
    first_person_row: int = 3
    schedule_row_offset: int = 0  # legacy workbooks keep tokens one row below the name

    # Place owner workbook layout
    owner_sheet_name: str = "Place Owner Table"
    owner_first_row: int = 2
    owner_place_column: int = 1

    output_directory: str = ""
    place_owner_workbook: str = ""
    groupable_activities: FrozenSet[str] = field(default_factory=frozenset)
    debug: bool = False
    legacy_unmask: bool = True


DEFAULT_CONFIG = AppConfig()


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "yes", "1", "on")


def load_config(path: str | Path, base: AppConfig = DEFAULT_CONFIG) -> AppConfig:
    """
    Read a Java style .properties file (key=value, no sections).
    Missing keys keep the value from `base`.
    """
    p = Path(path)
    if not p.is_file():
        raise ConfigError(f"Properties file not found: {p}")

    cp = configparser.ConfigParser(interpolation=None, delimiters=("=", ":"), comment_prefixes=("#", "!"))
    try:
        cp.read_string("[schedule]\n" + p.read_text(encoding="utf-8"))
    except configparser.Error as e:
        raise ConfigError(f"Unable to parse properties file {p}: {e}") from e
    props = cp["schedule"]

    changes = {}
    if PropertyKey.DEBUG in props:
        changes["debug"] = _as_bool(props[PropertyKey.DEBUG])
    else:
        logger.warning("'%s' key not found in %s", PropertyKey.DEBUG, p)

    if PropertyKey.OUTPUT_DIRECTORY in props:
        changes["output_directory"] = props[PropertyKey.OUTPUT_DIRECTORY].strip()
    else:
        logger.warning("'%s' key not configured in %s. Output goes to the current directory",
                       PropertyKey.OUTPUT_DIRECTORY, p)

    if PropertyKey.PLACE_OWNER_WORKBOOK_FILENAME in props:
        changes["place_owner_workbook"] = props[PropertyKey.PLACE_OWNER_WORKBOOK_FILENAME].strip()
    else:
        logger.warning("'%s' key not found in %s. Owners will not be filled",
                       PropertyKey.PLACE_OWNER_WORKBOOK_FILENAME, p)

    if PropertyKey.ACTIVITIES_FOR_GROUPING in props:
        changes["groupable_activities"] = parse_keywords(props[PropertyKey.ACTIVITIES_FOR_GROUPING])
    else:
        logger.warning("'%s' key not found in %s. No activity will be grouped",
                       PropertyKey.ACTIVITIES_FOR_GROUPING, p)

    if PropertyKey.LEGACY_UNMASK in props:
        changes["legacy_unmask"] = _as_bool(props[PropertyKey.LEGACY_UNMASK])

    return replace(base, **changes)
