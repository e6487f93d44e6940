from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .config import MIN_POLYGON_POINTS, SNAP_DISTANCE_PX
from .data_model import Point, Polygon, make_polygon


class InteractionMode(str, Enum):
    VIEWING = "view"
    CALIBRATING = "calibrate"
    DRAWING_REGION = "polygon"
    ADJUSTING_COLOR = "threshold"


@dataclass
class RegionDraft:
    # region being drawn; not part of any computation until closed
    points: List[Point] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.points)

    def can_close(self) -> bool:
        return len(self.points) >= MIN_POLYGON_POINTS

    def near_start(self, p: Point, view_scale: float = 1.0) -> bool:
        """True if `p` is within the snap radius of the first point (radius is in screen px)."""
        if len(self.points) < MIN_POLYGON_POINTS:
            return False
        return self.points[0].distance_to(p) < SNAP_DISTANCE_PX / view_scale

    def add_point(self, p: Point) -> None:
        self.points.append(p)

    def close(self) -> Optional[Polygon]:
        """Finish the draft. Returns None (and keeps the points) if it is too short."""
        if not self.can_close():
            return None
        poly = make_polygon(self.points)
        self.points = []
        return poly

    def clear(self) -> None:
        self.points = []
