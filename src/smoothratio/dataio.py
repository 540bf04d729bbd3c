# src/smoothratio/dataio.py
from __future__ import annotations

import csv
from collections.abc import Iterable
from pathlib import Path

from smoothratio.output_manager import resolve_output_path
from smoothratio.records import ResultRecord

CSV_COLUMNS = ("n", "pow2", "pow3", "remainder", "log_ratio", "ratio")


def write_results_csv(records: Iterable[ResultRecord], target: str) -> Path:
    """
    Write one row per record. Relative targets resolve against the workspace.
    Integers are written exactly; floats with repr precision.
    """
    path = resolve_output_path(target)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as fh:
        w = csv.writer(fh)
        w.writerow(CSV_COLUMNS)
        for r in records:
            w.writerow([r.n, r.pow2, r.pow3, r.remainder, repr(r.log_ratio), repr(r.ratio)])
    return path


def read_results_csv(path: str | Path) -> list[ResultRecord]:
    with Path(path).open("r", encoding="utf-8", newline="") as fh:
        return [
            ResultRecord(
                n=int(row["n"]),
                pow2=int(row["pow2"]),
                pow3=int(row["pow3"]),
                remainder=int(row["remainder"]),
                log_ratio=float(row["log_ratio"]),
                ratio=float(row["ratio"]),
            )
            for row in csv.DictReader(fh)
        ]
