
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple
import numpy as np
from PIL import Image

from .data_model import Point, Polygon, Result

REGION_BGR = (153, 211, 52)       # emerald outline
CALIB_POINT_BGR = (68, 68, 239)   # red markers
CALIB_LINE_BGR = (21, 204, 250)   # yellow segment


def require_cv2():
    try:
        import cv2  # noqa
    except Exception as e:
        raise RuntimeError(
            "OpenCV (cv2) is required for drawing overlays."
            "Install with:"
            "  pip install opencv-python"
        ) from e


def load_rgb(path: str) -> np.ndarray:
    """Decode an image file into an (H,W,3) RGB uint8 array."""
    with Image.open(path) as im:
        return np.array(im.convert("RGB"), dtype=np.uint8)


def save_rgb(path: str, rgb: np.ndarray) -> None:
    # RGB / RGBA is inferred from the channel count
    Image.fromarray(np.ascontiguousarray(rgb, dtype=np.uint8)).save(path)


def rgb_to_bgr(rgb: np.ndarray) -> np.ndarray:
    return rgb[:, :, 2::-1].copy()


def bgr_to_rgb(bgr: np.ndarray) -> np.ndarray:
    return bgr[:, :, ::-1].copy()


def polygon_center(poly: Polygon) -> Tuple[float, float]:
    n = len(poly)
    return sum(p.x for p in poly) / n, sum(p.y for p in poly) / n


def draw_overlay(
    rgb: np.ndarray,
    regions: Sequence[Polygon],
    results: Sequence[Result] = (),
    calibration_points: Sequence[Point] = (),
    *,
    unit: str = "cm",
    label: Optional[str] = None,
) -> np.ndarray:
    """
    Draw region outlines with their #n labels (plus the area when a result
    exists for that id) and the calibration segment. Returns a new RGB array.
    """
    require_cv2()
    import cv2

    out = rgb_to_bgr(rgb)
    h, w = out.shape[:2]
    thick = max(1, int(round(max(h, w) / 500)))
    font_scale = max(0.4, max(h, w) / 1500)
    by_id = {r.region_id: r for r in results}

    for idx, poly in enumerate(regions, start=1):
        pts = np.array([[p.x, p.y] for p in poly], dtype=np.float64)
        cv2.polylines(out, [np.round(pts).astype(np.int32)], True, REGION_BGR, thick, cv2.LINE_AA)
        cx, cy = polygon_center(poly)
        org = (int(round(cx)), int(round(cy)))
        _put_label(out, f"#{idx}", org, font_scale, thick)
        res = by_id.get(idx)
        if res is not None:
            dy = int(round(24 * font_scale / 0.6))
            _put_label(out, f"{res.area:.2f} {unit}2", (org[0], org[1] + dy), font_scale, thick)

    pts: List[Tuple[int, int]] = [(int(round(p.x)), int(round(p.y))) for p in calibration_points]
    if len(pts) == 2:
        cv2.line(out, pts[0], pts[1], CALIB_LINE_BGR, thick, cv2.LINE_AA)
        if label:
            mid = ((pts[0][0] + pts[1][0]) // 2 + 10, (pts[0][1] + pts[1][1]) // 2)
            _put_label(out, label, mid, font_scale, thick)
    for pt in pts:
        cv2.circle(out, pt, thick * 3, CALIB_POINT_BGR, -1, cv2.LINE_AA)
        cv2.circle(out, pt, thick * 3, (255, 255, 255), max(1, thick // 2), cv2.LINE_AA)

    return bgr_to_rgb(out)


def _put_label(img: np.ndarray, text: str, org: Tuple[int, int], scale: float, thick: int) -> None:
    import cv2
    # dark outline first so white text reads on any background
    cv2.putText(img, text, org, cv2.FONT_HERSHEY_SIMPLEX, scale, (0, 0, 0), thick + 2, cv2.LINE_AA)
    cv2.putText(img, text, org, cv2.FONT_HERSHEY_SIMPLEX, scale, (255, 255, 255), thick, cv2.LINE_AA)
