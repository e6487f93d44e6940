"""
Per-image measurement state and the area computation entry point.

A MeasurementSession owns every loaded image (regions, calibration,
results) plus the interaction state shared by the editor: the current
mode, the calibration click buffer, the region draft and the HSL range.
Only the active image is ever edited or measured.
"""
from __future__ import annotations

import logging
import uuid
from typing import Dict, List, Optional, Sequence

import numpy as np

from .calibration import Calibration, add_calibration_point, commit_calibration
from .config import DEFAULT_UNIT, MIN_POLYGON_POINTS
from .data_model import HSLRange, ImageRecord, ImageStatus, Point, Result, make_polygon
from .errors import NoRegionsError, UncalibratedError
from .region_mask import bounding_box, rasterize, rasterize_full
from .segmentation import count_matches, render_preview
from .ui_state import InteractionMode, RegionDraft

logger = logging.getLogger(__name__)


def compute_areas(record: ImageRecord, rng: HSLRange) -> List[Result]:
    """
    Measure every region of `record` against `rng`.

    Each region gets its own full-image mask; the matching pixel count is
    converted with the record's calibration (count / ratio**2). Raises
    UncalibratedError / NoRegionsError without touching the record.
    On success the record's results are replaced and it becomes ready.
    """
    if record.calibration is None:
        raise UncalibratedError(record.name)
    regions = [r for r in record.regions if len(r) >= MIN_POLYGON_POINTS]
    if not regions:
        raise NoRegionsError(record.name)

    cal = record.calibration
    results: List[Result] = []
    for idx, poly in enumerate(regions, start=1):
        mask = rasterize_full(poly, record.width, record.height)
        n = count_matches(record.pixels, mask, rng)
        area = cal.pixels_to_area(n)
        logger.debug("%s region #%d: %d px -> %.4f %s2", record.name, idx, n, area, cal.unit)
        results.append(Result(region_id=idx, area=area))

    record.results = results
    record.hsl_snapshot = rng
    record.status = ImageStatus.READY
    logger.info(
        "%s: %d region(s), total %.2f %s2 (ratio %.3f px/%s)",
        record.name, len(results), record.total_area, cal.unit, cal.ratio, cal.unit,
    )
    return list(results)


class MeasurementSession:
    def __init__(self, hsl_range: Optional[HSLRange] = None) -> None:
        self._images: Dict[str, ImageRecord] = {}
        self.selected_id: Optional[str] = None

        self.mode = InteractionMode.VIEWING
        self.calibration_points: List[Point] = []
        self.draft = RegionDraft()
        self.hsl_range = hsl_range if hsl_range is not None else HSLRange()

    # ----- image collection -----

    @property
    def images(self) -> List[ImageRecord]:
        return list(self._images.values())

    @property
    def active(self) -> Optional[ImageRecord]:
        if self.selected_id is None:
            return None
        return self._images.get(self.selected_id)

    def _require_active(self) -> ImageRecord:
        rec = self.active
        if rec is None:
            raise ValueError("No image selected.")
        return rec

    def add_image(self, name: str, pixels: np.ndarray) -> ImageRecord:
        if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
            raise ValueError(f"{name}: pixel buffer must be HxWx3 or HxWx4, got shape {pixels.shape}")
        h, w = pixels.shape[:2]
        rec = ImageRecord(id=uuid.uuid4().hex, name=name, width=int(w), height=int(h), pixels=pixels)
        self._images[rec.id] = rec
        logger.debug("added image %s (%dx%d) as %s", name, w, h, rec.id)
        if self.selected_id is None:
            self.select_image(rec.id)
        return rec

    def remove_image(self, image_id: str) -> None:
        self._images.pop(image_id)
        if self.selected_id == image_id:
            self.selected_id = None
            self._reset_editor()

    def select_image(self, image_id: str) -> ImageRecord:
        if image_id not in self._images:
            raise KeyError(image_id)
        self.selected_id = image_id
        self._reset_editor()
        return self._images[image_id]

    def _reset_editor(self) -> None:
        self.calibration_points = []
        self.draft.clear()

    # ----- interaction -----

    def set_mode(self, mode: InteractionMode) -> None:
        self.mode = InteractionMode(mode)

    def click(self, x: float, y: float, view_scale: float = 1.0) -> None:
        """
        Route a click (image coordinates) according to the current mode.
        `view_scale` is the current zoom, used to keep the snap radius
        constant on screen.
        """
        self._require_active()
        p = Point(float(x), float(y))
        if self.mode == InteractionMode.CALIBRATING:
            self.calibration_points = add_calibration_point(self.calibration_points, p)
        elif self.mode == InteractionMode.DRAWING_REGION:
            if self.draft.near_start(p, view_scale):
                self.close_region()
                return
            self.draft.add_point(p)

    def close_region(self) -> bool:
        """Append the draft as a region. A draft under 3 points is kept and False returned."""
        rec = self._require_active()
        poly = self.draft.close()
        if poly is None:
            logger.debug("close ignored: draft has %d point(s)", len(self.draft))
            return False
        rec.regions.append(poly)
        rec.invalidate()
        logger.debug("%s: region #%d closed with %d points", rec.name, len(rec.regions), len(poly))
        return True

    def add_region(self, points: Sequence[Point]) -> bool:
        """
        Append `points` as a closed region without going through the draft,
        which is left as it is. Returns False for fewer than 3 points.
        """
        rec = self._require_active()
        if len(points) < MIN_POLYGON_POINTS:
            logger.debug("region ignored: %d point(s)", len(points))
            return False
        poly = make_polygon(list(points))
        rec.regions.append(poly)
        rec.invalidate()
        logger.debug("%s: region #%d added with %d points", rec.name, len(rec.regions), len(poly))
        return True

    def save_calibration(self, real_distance: float, unit: str = DEFAULT_UNIT) -> Optional[Calibration]:
        rec = self._require_active()
        cal = commit_calibration(self.calibration_points, real_distance, unit=unit)
        if cal is None:
            logger.debug(
                "calibration not saved: %d point(s), distance %r",
                len(self.calibration_points), real_distance,
            )
            return None
        rec.calibration = cal
        rec.calibration_points = list(self.calibration_points)
        rec.invalidate()
        self.mode = InteractionMode.VIEWING
        logger.info("%s: calibrated at %.3f px/%s", rec.name, cal.ratio, cal.unit)
        return cal

    def set_hsl_bound(self, name: str, value: float) -> HSLRange:
        self.hsl_range = self.hsl_range.set_bound(name, value)
        return self.hsl_range

    # ----- processing -----

    def preview(self) -> np.ndarray:
        """
        Copy of the active image with matching pixels highlighted inside
        its regions. Only the regions' bounding window is scanned.
        """
        rec = self._require_active()
        out = rec.pixels.copy()
        if not rec.regions:
            return out
        win = bounding_box(rec.regions, rec.width, rec.height)
        if win.is_empty:
            return out
        mask = rasterize(rec.regions, win)
        return render_preview(out, win, mask, self.hsl_range)

    def compute_areas(self) -> List[Result]:
        rec = self._require_active()
        results = compute_areas(rec, self.hsl_range)
        self.mode = InteractionMode.VIEWING
        return results

    def total_area(self) -> float:
        return self._require_active().total_area
