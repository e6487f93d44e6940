
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .config import DEFAULT_UNIT
from .data_model import Point


@dataclass(frozen=True)
class Calibration:
    # pixel length of the reference segment
    pixel_distance: float
    # the same length in real units (user entered)
    real_distance: float
    unit: str = DEFAULT_UNIT

    @property
    def ratio(self) -> float:
        """Pixels per real unit."""
        return self.pixel_distance / self.real_distance

    def pixels_to_area(self, pixel_count: int) -> float:
        # area scales with the square of the linear ratio
        r = self.ratio
        return pixel_count / (r * r)


def add_calibration_point(points: Sequence[Point], p: Point) -> List[Point]:
    """
    Capture one calibration click. 0 -> 1 -> 2 points; a click on a full
    pair starts over with just the new point.
    """
    if len(points) >= 2:
        return [p]
    return list(points) + [p]


def commit_calibration(
    points: Sequence[Point],
    real_distance: float,
    unit: str = DEFAULT_UNIT,
) -> Optional[Calibration]:
    """Build a Calibration, or None when the pair is incomplete or the distance is not positive."""
    if len(points) != 2:
        return None
    try:
        real = float(real_distance)
    except (TypeError, ValueError):
        return None
    if not (math.isfinite(real) and real > 0):
        return None

    pixel_distance = points[0].distance_to(points[1])
    if pixel_distance <= 0:
        # coincident points would give a zero ratio
        return None
    cal = Calibration(pixel_distance=pixel_distance, real_distance=real, unit=unit)
    # pixels_to_area divides by ratio**2, which must not underflow to 0
    if not cal.ratio * cal.ratio > 0:
        return None
    return cal
