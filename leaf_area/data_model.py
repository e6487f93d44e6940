from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple, TYPE_CHECKING

from .config import (
    DEFAULT_H_RANGE,
    DEFAULT_L_RANGE,
    DEFAULT_S_RANGE,
    H_DOMAIN,
    L_DOMAIN,
    MIN_POLYGON_POINTS,
    S_DOMAIN,
)

if TYPE_CHECKING:
    import numpy as np
    from .calibration import Calibration


@dataclass(frozen=True)
class Point:
    # image pixel coordinates, origin top-left
    x: float
    y: float

    def distance_to(self, other: "Point") -> float:
        dx = other.x - self.x
        dy = other.y - self.y
        return (dx * dx + dy * dy) ** 0.5


# Closed implicitly: the last point connects back to the first.
Polygon = Tuple[Point, ...]


def make_polygon(points: Sequence[Point]) -> Polygon:
    if len(points) < MIN_POLYGON_POINTS:
        raise ValueError(f"A region needs at least {MIN_POLYGON_POINTS} points, got {len(points)}.")
    return tuple(points)


class ImageStatus(str, Enum):
    PENDING = "pending"
    READY = "ready"


_DOMAINS: Dict[str, Tuple[float, float]] = {"h": H_DOMAIN, "s": S_DOMAIN, "l": L_DOMAIN}


@dataclass(frozen=True)
class HSLRange:
    """
    Inclusive acceptance bounds. h in [0, 360], s and l in [0, 100].

    min <= max holds at all times: the constructor rejects inverted bounds
    and set_bound clamps a moved bound against its partner, the way a pair
    of min/max sliders behaves.
    """
    h_min: float = DEFAULT_H_RANGE[0]
    h_max: float = DEFAULT_H_RANGE[1]
    s_min: float = DEFAULT_S_RANGE[0]
    s_max: float = DEFAULT_S_RANGE[1]
    l_min: float = DEFAULT_L_RANGE[0]
    l_max: float = DEFAULT_L_RANGE[1]

    def __post_init__(self) -> None:
        for ch, (lo, hi) in _DOMAINS.items():
            vmin = getattr(self, f"{ch}_min")
            vmax = getattr(self, f"{ch}_max")
            if not (lo <= vmin <= hi and lo <= vmax <= hi):
                raise ValueError(f"{ch} bounds must lie in [{lo:g}, {hi:g}], got {vmin:g}-{vmax:g}")
            if vmin > vmax:
                raise ValueError(f"{ch}_min ({vmin:g}) is greater than {ch}_max ({vmax:g})")

    def set_bound(self, name: str, value: float) -> "HSLRange":
        """Return a copy with one bound moved, e.g. set_bound("h_min", 40)."""
        ch, _, side = name.partition("_")
        if ch not in _DOMAINS or side not in ("min", "max"):
            raise ValueError(f"Unknown HSL bound: {name!r}")
        lo, hi = _DOMAINS[ch]
        v = min(max(float(value), lo), hi)
        if side == "min":
            v = min(v, getattr(self, f"{ch}_max"))
        else:
            v = max(v, getattr(self, f"{ch}_min"))
        return replace(self, **{name: v})

    def contains(self, h: float, s: float, l: float) -> bool:
        return (
            self.h_min <= h <= self.h_max
            and self.s_min <= s <= self.s_max
            and self.l_min <= l <= self.l_max
        )


@dataclass(frozen=True)
class Result:
    region_id: int  # 1-based position in the region set at computation time
    area: float     # real units squared


@dataclass
class ImageRecord:
    id: str
    name: str
    width: int
    height: int
    pixels: "np.ndarray"

    calibration: Optional["Calibration"] = None
    # the two points the current calibration was measured from (for overlay)
    calibration_points: List[Point] = field(default_factory=list)

    regions: List[Polygon] = field(default_factory=list)

    # HSL range used for the last computation
    hsl_snapshot: Optional[HSLRange] = None
    results: List[Result] = field(default_factory=list)
    status: ImageStatus = ImageStatus.PENDING

    @property
    def total_area(self) -> float:
        return sum(r.area for r in self.results)

    def invalidate(self) -> None:
        self.status = ImageStatus.PENDING
