# schedule_converter/io_layer/paths.py
from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

_UNSAFE = re.compile(r'[\\/:*?"<>|]+')


def safe_name(name: str) -> str:
    return _UNSAFE.sub("_", name.strip())


@dataclass(frozen=True)
class OutputLayout:
    """
    Where each report goes:
      <out>/<prefix>ConsolidatedReport.xlsx
      <out>/teachers/<prefix>-<person>.xlsx
      <out>/coords/<prefix>-<owner>.xlsx
      <out>/centers/<prefix>-<center>.xlsx
    """
    output_directory: Path
    prefix: str

    consolidated_suffix: str = "ConsolidatedReport.xlsx"
    extension: str = ".xlsx"
    teacher_dir: str = "teachers"
    coordinator_dir: str = "coords"
    center_dir: str = "centers"

    @classmethod
    def for_input(cls, input_path: str | Path, output_directory: str | Path = "") -> "OutputLayout":
        return cls(output_directory=Path(output_directory or "."), prefix=Path(input_path).stem)

    def make_directories(self) -> None:
        for d in (self.teacher_dir, self.coordinator_dir, self.center_dir):
            (self.output_directory / d).mkdir(parents=True, exist_ok=True)

    def consolidated(self) -> Path:
        return self.output_directory / f"{self.prefix}{self.consolidated_suffix}"

    def _named(self, folder: str, name: str) -> Path:
        return self.output_directory / folder / f"{self.prefix}-{safe_name(name)}{self.extension}"

    def per_teacher(self, person: str) -> Path:
        return self._named(self.teacher_dir, person)

    def per_coordinator(self, owner: str) -> Path:
        return self._named(self.coordinator_dir, owner)

    def per_center(self, center: str) -> Path:
        return self._named(self.center_dir, center)
