from boothplan import BOOTH_PRESETS, BoothFactory, BoothPreset, FloorPlanConfig, next_booth_id

from conftest import add_booth


def test_next_id_is_one_past_highest():
    assert next_booth_id([]) == "B-1"
    assert next_booth_id(["B-1", "B-7", "B-3"]) == "B-8"
    assert next_booth_id(["A-12", "Corner", "B-2"]) == "B-3"


def test_renamed_booths_do_not_cause_collisions(config):
    add_booth(config, "B-5")
    add_booth(config, "Main Stage")
    f = BoothFactory(config)
    ids = {f.create_from_preset(BOOTH_PRESETS[1], 500, 500).id for _ in range(20)}
    ids |= {"B-5", "Main Stage"}
    assert len(ids) == 22
    assert len({b.id for b in config.booths}) == len(config.booths)


def test_preset_is_centred_and_snapped(config):
    f = BoothFactory(config)
    b = f.create_from_preset(BoothPreset("10 × 20", 10, 20), 153, 212)
    # 100x200 px centred on (153, 212) -> (103, 112) -> snapped to 10 px
    assert (b.x, b.y) == (100, 110)
    assert (b.width_feet, b.height_feet) == (10, 20)
    assert (b.width_px, b.height_px) == (100.0, 200.0)


def test_drop_near_origin_is_clamped(config):
    b = BoothFactory(config).create_from_preset(BOOTH_PRESETS[3], 5, 5)
    assert (b.x, b.y) == (0, 0)


def test_custom_preset_drops_at_ten_by_ten(config):
    custom = [p for p in BOOTH_PRESETS if p.custom][0]
    b = BoothFactory(config).create_from_preset(custom, 300, 300)
    assert (b.width_feet, b.height_feet) == (10, 10)


def test_uncalibrated_drop_uses_display_scale_without_snapping():
    config = FloorPlanConfig(show_id="s", image_width=800, image_height=600)
    b = BoothFactory(config).create_from_preset(BOOTH_PRESETS[0], 101, 57)
    assert (b.width_px, b.height_px) == (80.0, 80.0)
    assert (b.x, b.y) == (61, 17)
