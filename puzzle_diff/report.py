"""Reporting utilities: ranked-list output to console/file and CSV export.

报告模块：将排序结果输出到控制台/文件，并导出 CSV 报表。
"""
import csv
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence, TextIO, Union

from puzzle_diff.records import RankedSlot, is_empty

logger = logging.getLogger(__name__)

CSV_FIELDS = [
    "bucket",
    "rank",
    "distance",
    "image",
]


def format_slot(slot: RankedSlot) -> str:
    return f"{slot.distance:.6f}\t{slot.id}"


class Reporter:
    """Single destination for ranked output: the console plus an optional file."""

    def __init__(self, output_path: Optional[Union[str, Path]] = None, console: Optional[TextIO] = None):
        self.console = console if console is not None else sys.stdout
        self.output_path = Path(output_path) if output_path else None
        self._file: Optional[TextIO] = None
        if self.output_path is not None:
            try:
                self._file = self.output_path.open("w", encoding="utf-8")
            except OSError as e:
                logger.warning(
                    "Cannot open output file %s (%s); writing to console only",
                    self.output_path,
                    e.strerror or e,
                )
                self.output_path = None

    @property
    def has_file(self) -> bool:
        return self._file is not None

    def write(self, line: str = "") -> None:
        print(line, file=self.console)
        if self._file is not None:
            self._file.write(line + "\n")

    def write_ranked(self, title: str, slots: Sequence[RankedSlot]) -> int:
        """Write ``title`` then one line per filled slot, in slot order. Returns lines written."""
        self.write(title)
        n = 0
        for slot in slots:
            if is_empty(slot):
                continue
            self.write(format_slot(slot))
            n += 1
        return n

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> "Reporter":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def _rows(bucket: str, slots: Sequence[RankedSlot]) -> List[dict]:
    rows = []
    for slot in slots:
        if is_empty(slot):
            continue
        rows.append(
            {
                "bucket": bucket,
                "rank": len(rows) + 1,
                "distance": f"{slot.distance:.6f}",
                "image": slot.id,
            }
        )
    return rows


def write_csv(identical: Sequence[RankedSlot], similar: Sequence[RankedSlot], out_path: Path):
    with Path(out_path).open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for r in _rows("identical", identical) + _rows("similar", similar):
            writer.writerow(r)
