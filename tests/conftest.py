from __future__ import annotations

import numpy as np
import pytest

from leaf_area.data_model import Point

GREEN = (40, 160, 40)
GRAY = (128, 128, 128)


def square(x0: float, y0: float, size: float):
    return (Point(x0, y0), Point(x0 + size, y0), Point(x0 + size, y0 + size), Point(x0, y0 + size))


@pytest.fixture
def gray_image() -> np.ndarray:
    img = np.empty((100, 100, 3), dtype=np.uint8)
    img[:] = GRAY
    return img


@pytest.fixture
def leaf_image(gray_image) -> np.ndarray:
    # green block covering rows/cols 20..69
    img = gray_image.copy()
    img[20:70, 20:70] = GREEN
    return img
