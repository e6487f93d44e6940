
from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from .color_model import rgb_to_hsl, rgb_to_hsl_array
from .config import HIGHLIGHT_RGB
from .data_model import HSLRange
from .region_mask import Window


def _check_buffer(buf: np.ndarray) -> None:
    if buf.ndim != 3 or buf.shape[2] not in (3, 4):
        raise ValueError("pixel buffer must be HxWx3 (RGB) or HxWx4 (RGBA)")


def matches(rgb: Sequence[int], rng: HSLRange) -> bool:
    """True when the pixel's h, s and l all fall inside the inclusive bands of `rng`."""
    h, s, l = rgb_to_hsl(int(rgb[0]), int(rgb[1]), int(rgb[2]))
    return rng.contains(h, s, l)


def match_mask(rgb: np.ndarray, rng: HSLRange) -> np.ndarray:
    """
    Vectorised `matches` over an (..., 3) array. Returns a boolean array
    with the leading shape of `rgb`.
    """
    h, s, l = rgb_to_hsl_array(rgb)
    return (
        (h >= rng.h_min) & (h <= rng.h_max)
        & (s >= rng.s_min) & (s <= rng.s_max)
        & (l >= rng.l_min) & (l <= rng.l_max)
    )


def render_preview(
    buf: np.ndarray,
    win: Window,
    mask: np.ndarray,
    rng: HSLRange,
    highlight: Tuple[int, int, int] = HIGHLIGHT_RGB,
) -> np.ndarray:
    """
    Paint matching pixels in place with `highlight`.

    Only pixels inside `win` whose window-relative `mask` entry is True
    are examined; nothing outside the window is read or written, and the
    alpha channel (if any) is left alone. Returns `buf`.
    """
    _check_buffer(buf)
    if win.is_empty:
        return buf
    if mask.shape != (win.h, win.w):
        raise ValueError(f"mask shape {mask.shape} does not match window {win.h}x{win.w}")

    rows, cols = win.slices()
    sub = buf[rows, cols, :3]          # view into buf
    hit = mask.copy()
    hit[mask] = match_mask(sub[mask], rng)
    sub[hit] = np.array(highlight, dtype=buf.dtype)
    return buf


def count_matches(buf: np.ndarray, mask: np.ndarray, rng: HSLRange) -> int:
    """
    Count pixels that are inside `mask` (full image, one region) and match
    `rng`. Uses the same predicate as render_preview.
    """
    _check_buffer(buf)
    if mask.shape != buf.shape[:2]:
        raise ValueError(f"mask shape {mask.shape} does not match image {buf.shape[0]}x{buf.shape[1]}")
    inside = buf[..., :3][mask]        # (N, 3)
    if inside.size == 0:
        return 0
    return int(np.count_nonzero(match_mask(inside, rng)))
