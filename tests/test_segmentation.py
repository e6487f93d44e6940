import numpy as np
import pytest

from conftest import GRAY, GREEN, square
from leaf_area.data_model import HSLRange
from leaf_area.region_mask import Window, bounding_box, rasterize, rasterize_full
from leaf_area.segmentation import count_matches, match_mask, matches, render_preview


def test_matches_default_range():
    rng = HSLRange()
    assert matches(GREEN, rng)
    assert not matches(GRAY, rng)
    assert not matches((200, 30, 30), rng)


def test_matches_bounds_are_inclusive():
    # pure green: h=120 s=100 l=50
    rng = HSLRange(h_min=119.5, h_max=120.5, s_min=100, s_max=100, l_min=50, l_max=50)
    assert matches((0, 255, 0), rng)


def test_match_mask_agrees_with_matches():
    rng = HSLRange(h_min=60, h_max=200, s_min=10, s_max=90, l_min=20, l_max=80)
    px = np.random.default_rng(3).integers(0, 256, size=(400, 3), dtype=np.uint8)
    vec = match_mask(px, rng)
    assert vec.tolist() == [matches(p, rng) for p in px.tolist()]


def test_count_all_inside_range(leaf_image):
    mask = rasterize_full(square(20, 20, 50), 100, 100)
    assert count_matches(leaf_image, mask, HSLRange()) == mask.sum() == 2500


def test_count_all_outside_range(gray_image):
    mask = rasterize_full(square(20, 20, 50), 100, 100)
    assert count_matches(gray_image, mask, HSLRange()) == 0


def test_count_partial_overlap(leaf_image):
    # region 10..40 overlaps the green block 20..70 on 20x20 pixels
    mask = rasterize_full(square(10, 10, 30), 100, 100)
    assert count_matches(leaf_image, mask, HSLRange()) == 400


def test_count_ignores_alpha(leaf_image):
    rgba = np.dstack([leaf_image, np.zeros((100, 100), dtype=np.uint8)])
    mask = rasterize_full(square(20, 20, 50), 100, 100)
    assert count_matches(rgba, mask, HSLRange()) == 2500


def test_count_empty_mask(leaf_image):
    mask = np.zeros((100, 100), dtype=bool)
    assert count_matches(leaf_image, mask, HSLRange()) == 0


def test_count_rejects_mismatched_mask(leaf_image):
    with pytest.raises(ValueError):
        count_matches(leaf_image, np.zeros((10, 10), dtype=bool), HSLRange())


def test_preview_highlights_matches_only(leaf_image):
    regions = [square(10, 10, 30)]
    win = bounding_box(regions, 100, 100)
    mask = rasterize(regions, win)
    out = render_preview(leaf_image.copy(), win, mask, HSLRange(), highlight=(255, 0, 255))
    assert tuple(out[25, 25]) == (255, 0, 255)   # green, inside region
    assert tuple(out[15, 15]) == GRAY            # inside region, not matching
    assert tuple(out[50, 50]) == GREEN           # matching, outside region


def test_preview_never_touches_pixels_outside_window(leaf_image):
    regions = [square(30, 30, 20), square(45, 25, 10)]
    win = bounding_box(regions, 100, 100)
    mask = rasterize(regions, win)
    buf = leaf_image.copy()
    outside = np.ones((100, 100), dtype=bool)
    outside[win.slices()] = False
    before = buf[outside].copy()

    render_preview(buf, win, mask, HSLRange())

    np.testing.assert_array_equal(buf[outside], before)
    assert (buf[win.slices()] != leaf_image[win.slices()]).any()


def test_preview_keeps_alpha(leaf_image):
    rgba = np.dstack([leaf_image, np.full((100, 100), 7, dtype=np.uint8)])
    regions = [square(20, 20, 50)]
    win = bounding_box(regions, 100, 100)
    render_preview(rgba, win, rasterize(regions, win), HSLRange())
    assert (rgba[..., 3] == 7).all()
    assert tuple(rgba[30, 30, :3]) == (0, 255, 0)


def test_preview_with_degenerate_window_is_noop(leaf_image):
    buf = leaf_image.copy()
    win = Window(10, 10, 0, 0)
    render_preview(buf, win, np.zeros((0, 0), dtype=bool), HSLRange())
    np.testing.assert_array_equal(buf, leaf_image)


def test_preview_and_count_agree(leaf_image):
    rng = HSLRange()
    poly = square(5, 5, 60)
    win = bounding_box([poly], 100, 100)
    painted = render_preview(leaf_image.copy(), win, rasterize([poly], win), rng, highlight=(1, 2, 3))
    n_painted = int((painted == (1, 2, 3)).all(axis=2).sum())
    assert n_painted == count_matches(leaf_image, rasterize_full(poly, 100, 100), rng)
