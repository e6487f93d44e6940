
from __future__ import annotations

from typing import Tuple
import numpy as np


def rgb_to_hsl(r: int, g: int, b: int) -> Tuple[float, float, float]:
    """
    Convert one 8-bit RGB triple to (h, s, l) with h in [0, 360) and
    s, l in [0, 100]. Achromatic pixels (r == g == b) give h = s = 0.
    """
    r = r / 255.0
    g = g / 255.0
    b = b / 255.0
    mx = max(r, g, b)
    mn = min(r, g, b)
    l = (mx + mn) / 2.0

    if mx == mn:
        return 0.0, 0.0, l * 100.0

    d = mx - mn
    s = d / (2.0 - mx - mn) if l > 0.5 else d / (mx + mn)
    # sector order matters when two channels tie for the max: r, then g, then b
    if mx == r:
        h = (g - b) / d + (6.0 if g < b else 0.0)
    elif mx == g:
        h = (b - r) / d + 2.0
    else:
        h = (r - g) / d + 4.0
    h /= 6.0
    return h * 360.0, s * 100.0, l * 100.0


def rgb_to_hsl_array(rgb: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Vectorised rgb_to_hsl over an (..., 3) uint8 array.

    Uses the same float64 operations in the same order as the scalar
    version, so both classify every pixel identically.
    """
    if rgb.shape[-1] != 3:
        raise ValueError("rgb must have 3 channels in the last axis")

    f = rgb.astype(np.float64) / 255.0
    r = f[..., 0]
    g = f[..., 1]
    b = f[..., 2]
    mx = np.maximum(np.maximum(r, g), b)
    mn = np.minimum(np.minimum(r, g), b)
    l = (mx + mn) / 2.0

    chroma = mx != mn
    d = mx - mn
    safe_d = np.where(chroma, d, 1.0)

    # denominators are substituted where they would be 0 for achromatic pixels
    s_hi = d / np.where(chroma, 2.0 - mx - mn, 1.0)
    s_lo = d / np.where(chroma, mx + mn, 1.0)
    s = np.where(chroma, np.where(l > 0.5, s_hi, s_lo), 0.0)

    h_r = (g - b) / safe_d + np.where(g < b, 6.0, 0.0)
    h_g = (b - r) / safe_d + 2.0
    h_b = (r - g) / safe_d + 4.0
    h = np.where(mx == r, h_r, np.where(mx == g, h_g, h_b))
    h = np.where(chroma, h / 6.0, 0.0)

    return h * 360.0, s * 100.0, l * 100.0
