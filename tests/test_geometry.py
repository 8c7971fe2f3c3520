import pytest

from boothplan import ViewportTransform, snap, clamp_min, category_color, truncate, label_font_size
from boothplan.utils import CATEGORY_COLORS, UNASSIGNED_FILL


@pytest.mark.parametrize("v,g", [(0, 10), (13, 10), (-7.4, 10), (104.9, 12.5), (3.3, 0.7)])
def test_snap_is_idempotent(v, g):
    once = snap(v, g)
    assert snap(once, g) == pytest.approx(once)


def test_snap_rounds_to_nearest_multiple():
    assert snap(14, 10) == 10
    assert snap(15.1, 10) == 20
    assert snap(-6, 10) == -10


def test_snap_rounds_half_grid_up():
    assert snap(25, 10) == 30
    assert snap(5, 10) == 10
    assert snap(-5, 10) == 0


def test_snap_without_grid_is_noop():
    assert snap(13.7, None) == 13.7
    assert snap(13.7, 0) == 13.7
    assert snap(13.7, 0.5) == 13.7


def test_clamp_min():
    assert clamp_min(-50) == 0
    assert clamp_min(12.5) == 12.5


def test_transform_roundtrip_with_zoom_and_scroll():
    t = ViewportTransform(scroll_x=40, scroll_y=-20, zoom=2.0)
    assert t.to_layout_space(60, 100) == (50.0, 40.0)
    assert t.to_screen_space(50, 40) == (60.0, 100.0)


def test_transform_identity():
    t = ViewportTransform()
    assert t.to_layout_space(12, 34) == (12.0, 34.0)


def test_category_color_fallbacks():
    assert category_color(None) == UNASSIGNED_FILL
    assert category_color("Roofing") == CATEGORY_COLORS["Roofing"]
    assert category_color("Custom") == CATEGORY_COLORS["General"]


def test_truncate_and_font_clamp():
    assert truncate("Short", 14) == "Short"
    assert truncate("A very long vendor name", 14) == "A very long v…"
    assert len(truncate("A very long vendor name", 14)) == 14
    assert label_font_size(10, 10) == 8
    assert label_font_size(200, 200) == 14
    assert label_font_size(50, 100) == pytest.approx(11.0)
