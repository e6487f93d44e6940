
from __future__ import annotations

import csv
import io
import time
from typing import List, Sequence

from .config import AREA_DECIMALS, CSV_DELIMITERS, DEFAULT_UNIT
from .data_model import ImageRecord


def _check_delimiter(delimiter: str) -> None:
    if delimiter not in CSV_DELIMITERS:
        raise ValueError(f"delimiter must be one of {CSV_DELIMITERS!r}, got {delimiter!r}")


def format_area(area: float) -> str:
    # areas are written with a decimal comma
    return f"{area:.{AREA_DECIMALS}f}".replace(".", ",")


def header_row(unit: str = DEFAULT_UNIT) -> List[str]:
    return ["File name", "Leaf ID", f"Area ({unit}2)", f"Scale (px/{unit})"]


def result_rows(images: Sequence[ImageRecord]) -> List[List[str]]:
    rows: List[List[str]] = []
    for img in images:
        if not img.results or img.calibration is None:
            continue
        ratio = f"{img.calibration.ratio:.2f}"
        for res in img.results:
            rows.append([img.name, str(res.region_id), format_area(res.area), ratio])
    return rows


def _write(f, images: Sequence[ImageRecord], delimiter: str, unit: str) -> None:
    w = csv.writer(f, delimiter=delimiter, lineterminator="\n")
    w.writerow(header_row(unit))
    w.writerows(result_rows(images))


def csv_string(images: Sequence[ImageRecord], delimiter: str = ",", unit: str = DEFAULT_UNIT) -> str:
    _check_delimiter(delimiter)
    buf = io.StringIO()
    _write(buf, images, delimiter, unit)
    return buf.getvalue().rstrip()


def write_csv(path: str, images: Sequence[ImageRecord], delimiter: str = ",", unit: str = DEFAULT_UNIT) -> None:
    _check_delimiter(delimiter)
    with open(path, "w", newline="", encoding="utf-8") as f:
        _write(f, images, delimiter, unit)


def default_export_name() -> str:
    return f"leaf_areas_{int(time.time() * 1000)}.csv"
