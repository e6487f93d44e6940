import numpy as np
import pytest

from conftest import square
from leaf_area.data_model import Point
from leaf_area.region_mask import Window, bounding_box, rasterize, rasterize_full


def tri(*xy):
    return tuple(Point(x, y) for x, y in xy)


def test_bounding_box_empty_is_full_image():
    assert bounding_box([], 100, 80) == Window(0, 0, 100, 80)


def test_bounding_box_triangle_has_two_pixel_margin():
    win = bounding_box([tri((10, 10), (50, 10), (10, 50))], 100, 100)
    assert win == Window(8, 8, 44, 44)
    assert win.x >= 8 and win.y >= 8
    assert win.x + win.w <= 52 and win.y + win.h <= 52


def test_bounding_box_clamps_to_image():
    win = bounding_box([tri((0, 0), (99, 0), (0, 99))], 100, 100)
    assert win == Window(0, 0, 100, 100)


def test_bounding_box_covers_every_polygon():
    win = bounding_box([square(10, 10, 5), square(60, 70, 10)], 100, 100)
    assert win == Window(8, 8, 64, 74)


def test_bounding_box_rounds_outward():
    win = bounding_box([tri((10.4, 10.6), (20.2, 10.6), (10.4, 20.7))], 100, 100)
    assert (win.x, win.y) == (8, 8)
    assert (win.x + win.w, win.y + win.h) == (23, 23)


def test_bounding_box_without_vertices_is_empty_not_error():
    win = bounding_box([()], 100, 100)
    assert win.is_empty


def test_rasterize_square_covers_pixel_centres():
    mask = rasterize_full(square(10, 10, 50), 100, 100)
    assert mask.shape == (100, 100)
    assert mask.sum() == 2500
    assert mask[10:60, 10:60].all()
    assert not mask[:10].any() and not mask[60:].any()


def test_rasterize_triangle_inside_and_outside():
    poly = tri((10, 10), (50, 10), (10, 50))
    mask = rasterize_full(poly, 100, 100)
    # strictly inside
    assert mask[15, 15] and mask[11, 40] and mask[40, 11]
    # beyond the hypotenuse
    assert not mask[45, 45]
    # outside the bounding box
    assert not mask[:10].any()
    assert not mask[:, :10].any()
    assert not mask[51:].any()
    assert not mask[:, 51:].any()


def test_rasterize_is_window_relative():
    poly = square(10, 10, 20)
    win = Window(5, 5, 30, 30)
    mask = rasterize([poly], win)
    full = rasterize_full(poly, 100, 100)
    assert mask.shape == (30, 30)
    np.testing.assert_array_equal(mask, full[5:35, 5:35])


def test_rasterize_overlapping_polygons_form_union():
    a = square(10, 10, 20)
    b = square(20, 20, 20)
    mask = rasterize([a, b], Window(0, 0, 50, 50))
    assert mask.sum() == 400 + 400 - 100


def test_rasterize_ignores_drafts():
    mask = rasterize([(Point(1, 1), Point(40, 40))], Window(0, 0, 50, 50))
    assert not mask.any()


def test_rasterize_nonzero_fills_self_overlap():
    # pentagram: the centre has winding number 2 and is filled under nonzero
    star = tri((50, 5), (79, 95), (2, 40), (98, 40), (21, 95))
    mask = rasterize_full(star, 100, 100)
    assert mask[50, 50]


def test_rasterize_concave_polygon():
    # U shape, the notch stays empty
    u = tri((0, 0), (30, 0), (30, 30), (20, 30), (20, 10), (10, 10), (10, 30), (0, 30))
    mask = rasterize_full(u, 40, 40)
    assert mask[20, 5] and mask[20, 25]
    assert not mask[20, 15]
    assert mask.sum() == 30 * 30 - 10 * 20


def test_rasterize_empty_window():
    mask = rasterize([square(0, 0, 5)], Window(3, 3, 0, 4))
    assert mask.size == 0


@pytest.mark.parametrize("offset", [0.25, 0.5, 0.75])
def test_rasterize_fractional_vertices(offset):
    poly = square(10 + offset, 10 + offset, 10)
    mask = rasterize_full(poly, 40, 40)
    # 10 pixel centres per axis regardless of the sub-pixel shift
    assert mask.sum() == 100
