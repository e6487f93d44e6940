from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .config import BBOX_MARGIN_PX, MIN_POLYGON_POINTS
from .data_model import Polygon


@dataclass(frozen=True)
class Window:
    # pixel window in image coords: columns [x, x+w), rows [y, y+h)
    x: int
    y: int
    w: int
    h: int

    @property
    def is_empty(self) -> bool:
        return self.w <= 0 or self.h <= 0

    def slices(self) -> tuple:
        return slice(self.y, self.y + self.h), slice(self.x, self.x + self.w)


def bounding_box(polygons: Sequence[Polygon], width: int, height: int, margin: int = BBOX_MARGIN_PX) -> Window:
    """
    Smallest window holding every vertex of every polygon, grown by
    `margin` px on each side and clamped to the image. No polygons means
    the whole image. A collapsed result comes back with is_empty set.
    """
    if not polygons:
        return Window(0, 0, int(width), int(height))

    min_x, min_y = float(width), float(height)
    max_x, max_y = 0.0, 0.0
    for poly in polygons:
        for p in poly:
            min_x = min(min_x, p.x)
            max_x = max(max_x, p.x)
            min_y = min(min_y, p.y)
            max_y = max(max_y, p.y)

    x0 = max(0, int(math.floor(min_x - margin)))
    y0 = max(0, int(math.floor(min_y - margin)))
    x1 = min(int(width), int(math.ceil(max_x + margin)))
    y1 = min(int(height), int(math.ceil(max_y + margin)))
    return Window(x0, y0, x1 - x0, y1 - y0)


def _fill_polygon(mask: np.ndarray, poly: Polygon, win: Window) -> None:
    # Scanline fill at pixel centres, nonzero winding rule.
    xs = np.array([p.x for p in poly], dtype=np.float64)
    ys = np.array([p.y for p in poly], dtype=np.float64)
    ex0, ey0 = xs, ys
    ex1, ey1 = np.roll(xs, -1), np.roll(ys, -1)

    # only rows between the polygon's extremes can be hit
    j_lo = max(0, int(math.floor(ys.min() - win.y - 0.5)))
    j_hi = min(win.h, int(math.ceil(ys.max() - win.y + 0.5)))

    for j in range(j_lo, j_hi):
        yc = win.y + j + 0.5
        up = (ey0 <= yc) & (ey1 > yc)
        down = (ey1 <= yc) & (ey0 > yc)
        hit = up | down
        if not hit.any():
            continue

        t = (yc - ey0[hit]) / (ey1[hit] - ey0[hit])
        cross_x = ex0[hit] + t * (ex1[hit] - ex0[hit])
        direction = np.where(up[hit], 1, -1)

        order = np.argsort(cross_x, kind="stable")
        cross_x = cross_x[order]
        winding = np.cumsum(direction[order])

        row = mask[j]
        for k in range(len(cross_x) - 1):
            if winding[k] == 0:
                continue
            # pixel i is covered when its centre win.x + i + 0.5 is in [xa, xb)
            a = int(math.ceil(cross_x[k] - win.x - 0.5))
            b = int(math.ceil(cross_x[k + 1] - win.x - 0.5))
            a = max(a, 0)
            b = min(b, win.w)
            if a < b:
                row[a:b] = True


def rasterize(polygons: Sequence[Polygon], win: Window) -> np.ndarray:
    """
    Boolean (h, w) mask over `win`, True where a pixel centre lies inside
    any polygon. Polygons are filled one by one and OR-ed together.
    Drafts with fewer than 3 vertices contribute nothing.
    """
    if win.is_empty:
        return np.zeros((max(win.h, 0), max(win.w, 0)), dtype=bool)

    mask = np.zeros((win.h, win.w), dtype=bool)
    for poly in polygons:
        if len(poly) < MIN_POLYGON_POINTS:
            continue
        _fill_polygon(mask, poly, win)
    return mask


def rasterize_full(polygon: Polygon, width: int, height: int) -> np.ndarray:
    """Mask of a single polygon over the whole image."""
    return rasterize([polygon], Window(0, 0, int(width), int(height)))
