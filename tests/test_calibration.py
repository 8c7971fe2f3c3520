import math

import pytest

from boothplan import CalibrationEngine, CalibrationError, FloorPlanConfig, Point, parse_feet

from conftest import add_booth


def calibrate(config, p1, p2, feet):
    engine = CalibrationEngine(config)
    engine.begin()
    engine.register_click(Point(*p1))
    assert engine.register_click(Point(*p2))
    return engine.confirm(feet)


def test_two_points_and_distance_give_pixels_per_foot():
    config = FloorPlanConfig(show_id="s", image_width=500, image_height=500)
    cal = calibrate(config, (0, 0), (100, 0), 10)
    assert cal.pixels_per_foot == 10.00
    assert config.pixels_per_foot == 10.00


def test_recalibration_recomputes_booth_pixels_only(config):
    b = add_booth(config, "B-1", x=30, y=40, wf=10, hf=20)
    calibrate(config, (0, 0), (300, 400), 20)   # 500 px / 20 ft
    assert config.pixels_per_foot == 25.0
    assert (b.width_px, b.height_px) == (250.0, 500.0)
    assert (b.width_feet, b.height_feet) == (10, 20)
    assert (b.x, b.y) == (30, 40)


def test_pixels_per_foot_is_rounded_and_used_for_booths(config):
    b = add_booth(config, "B-1", wf=3, hf=3)
    calibrate(config, (0, 0), (100, 0), 3)
    assert config.pixels_per_foot == 33.33
    assert b.width_px == pytest.approx(3 * 33.33)


@pytest.mark.parametrize("bad", ["abc", "", "0", "-5", "nan", None, float("inf")])
def test_invalid_distance_restarts_pick_without_mutation(config, bad):
    before = config.calibration
    engine = CalibrationEngine(config)
    engine.begin()
    engine.register_click(Point(0, 0))
    engine.register_click(Point(50, 0))
    with pytest.raises(CalibrationError):
        engine.confirm(bad)
    assert config.calibration is before
    assert engine.active and engine.points == []


def test_coincident_points_rejected(config):
    engine = CalibrationEngine(config)
    engine.begin()
    engine.register_click(Point(5, 5))
    engine.register_click(Point(5, 5))
    with pytest.raises(CalibrationError):
        engine.confirm(10)


def test_cancel_keeps_prior_calibration(config):
    before = config.calibration
    engine = CalibrationEngine(config)
    engine.begin()
    engine.register_click(Point(0, 0))
    engine.cancel()
    assert config.calibration is before
    assert not engine.active


def test_confirm_before_two_points_fails(config):
    engine = CalibrationEngine(config)
    engine.begin()
    engine.register_click(Point(0, 0))
    with pytest.raises(CalibrationError):
        engine.confirm(10)


def test_parse_feet_accepts_numeric_strings():
    assert parse_feet(" 12.5 ") == 12.5
    assert math.isclose(parse_feet(7), 7.0)
