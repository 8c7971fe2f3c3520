import pytest

from boothplan import (BOOTH_PRESETS, CalibrationError, Change, DuplicateBoothId, FloorPlanError,
                       Mode, ViewportTransform)

from conftest import add_booth


def changes(events):
    return [c for c, _ in events]


# ---- modes ----
def test_starts_in_select(controller):
    assert controller.mode == Mode.SELECT


def test_calibration_toggle_and_escape(controller, events):
    controller.toggle_calibration()
    assert controller.mode == Mode.CALIBRATE
    assert controller.key_press("Escape")
    assert controller.mode == Mode.SELECT
    assert Change.MODE_CHANGED in changes(events)


def test_calibration_clicks_then_confirm(controller, events):
    add_booth(controller.config, "B-1", wf=10, hf=10)
    controller.toggle_calibration()
    controller.pointer_down(0, 0)
    controller.pointer_down(200, 0)
    ready = [p for c, p in events if c == Change.CALIBRATION_READY]
    assert ready and ready[0]["pixel_distance"] == 200
    controller.confirm_calibration("10")
    assert controller.config.pixels_per_foot == 20.0
    assert controller.config.booths[0].width_px == 200.0
    assert controller.mode == Mode.SELECT
    assert changes(events)[-1] == Change.LAYOUT_CHANGED


def test_bad_distance_stays_in_calibrate(controller):
    before = controller.config.calibration
    controller.toggle_calibration()
    controller.pointer_down(0, 0)
    controller.pointer_down(200, 0)
    with pytest.raises(CalibrationError):
        controller.confirm_calibration("ten")
    assert controller.mode == Mode.CALIBRATE
    assert controller.config.calibration is before
    assert controller.session.calibration.points == []


def test_calibration_clicks_use_viewport_transform(controller):
    controller.transform.update(100, 50, 2.0)
    controller.toggle_calibration()
    controller.pointer_down(0, 0)
    controller.pointer_down(100, 0)
    pts = controller.session.calibration.points
    assert (pts[0].x, pts[0].y) == (50, 25)
    assert (pts[1].x, pts[1].y) == (100, 25)


# ---- selection & dragging ----
def test_click_empty_canvas_deselects(controller):
    add_booth(controller.config, "B-1", x=0, y=0)
    controller.pointer_down(50, 50)
    controller.pointer_up(50, 50)
    assert controller.session.selected_id == "B-1"
    controller.pointer_down(600, 600)
    assert controller.session.selected_id is None
    assert controller.mode == Mode.SELECT


def test_hit_test_picks_topmost(controller):
    add_booth(controller.config, "B-1", x=0, y=0)
    add_booth(controller.config, "B-2", x=50, y=50)
    assert controller.hit_test(75, 75).id == "B-2"


def test_drag_is_snapped_and_clamped(controller, events):
    add_booth(controller.config, "B-1", x=20, y=20)
    controller.pointer_down(25, 25)
    assert controller.mode == Mode.DRAGGING
    controller.pointer_move(-45, 5)        # delta (-70, -20)
    assert Change.BOOTH_MOVED in changes(events)
    controller.pointer_up(-45, 5)
    b = controller.config.find_booth("B-1")
    assert (b.x, b.y) == (0, 0)
    assert controller.mode == Mode.SELECT
    assert changes(events)[-1] == Change.LAYOUT_CHANGED


def test_half_cell_drag_snaps_forward(controller):
    b = add_booth(controller.config, "B-1", x=100, y=100)
    controller.pointer_down(110, 110)
    controller.pointer_up(135, 110)        # +2.5 ft
    assert (b.x, b.y) == (130, 100)


def test_drag_target_below_origin_clamps_to_zero(controller):
    b = add_booth(controller.config, "B-1", x=0, y=0)
    controller.pointer_down(10, 10)
    controller.pointer_up(10 - 50, 10 - 20)
    assert (b.x, b.y) == (0, 0)


def test_drag_keeps_grab_offset(controller):
    b = add_booth(controller.config, "B-1", x=100, y=100)
    controller.pointer_down(150, 150)
    controller.pointer_move(231, 150)
    assert (b.x, b.y) == (180, 100)
    controller.pointer_up()


def test_moves_optimistically_then_commits(controller, events):
    add_booth(controller.config, "B-1", x=100, y=100)
    controller.pointer_down(110, 110)
    controller.pointer_move(140, 110)
    moved = [c for c in changes(events) if c in (Change.BOOTH_MOVED, Change.LAYOUT_CHANGED)]
    assert moved == [Change.BOOTH_MOVED]
    controller.capture_lost()
    assert controller.mode == Mode.SELECT
    assert controller.config.find_booth("B-1").x == 130
    assert controller.session.dirty


def test_keys_ignored_while_dragging(controller):
    add_booth(controller.config, "B-1", x=100, y=100)
    controller.pointer_down(110, 110)
    assert not controller.key_press("Delete")
    assert controller.config.find_booth("B-1") is not None


# ---- bank drops ----
def test_rapid_drops_get_unique_ids(controller):
    for i in range(25):
        controller.drop_preset(BOOTH_PRESETS[i % 4], 300 + i, 300)
    ids = [b.id for b in controller.config.booths]
    assert len(set(ids)) == 25


def test_drop_selects_new_booth(controller):
    b = controller.drop_preset(BOOTH_PRESETS[1], 400, 400)
    assert controller.session.selected_id == b.id
    assert (b.x, b.y) == (350, 350)


def test_drop_ignored_while_calibrating(controller):
    controller.toggle_calibration()
    assert controller.drop_preset(BOOTH_PRESETS[1], 400, 400) is None
    assert controller.config.booths == []


def test_preview_matches_drop(controller):
    controller.transform.update(0, 0, 0.5)
    preview = controller.preview_drop(BOOTH_PRESETS[2], 200, 200)
    b = controller.drop_preset(BOOTH_PRESETS[2], 200, 200)
    assert preview == (b.x, b.y, b.width_px, b.height_px)


# ---- keyboard ----
def test_arrow_nudges_by_grid_unit(controller):
    b = add_booth(controller.config, "B-1", x=100, y=100)
    controller.select("B-1")
    controller.key_press("ArrowRight")
    controller.key_press("ArrowDown")
    assert (b.x, b.y) == (110, 110)


def test_arrow_nudge_clamps_at_zero(controller):
    b = add_booth(controller.config, "B-1", x=5, y=0)
    controller.select("B-1")
    controller.key_press("ArrowLeft")
    controller.key_press("ArrowUp")
    assert (b.x, b.y) == (0, 0)


def test_keys_ignored_when_text_input_focused(controller):
    add_booth(controller.config, "B-1")
    controller.select("B-1")
    assert not controller.key_press("Delete", text_input_focused=True)
    assert len(controller.config.booths) == 1


def test_delete_asks_for_confirmation(session):
    from boothplan import InteractionController
    answers = [False, True]
    ctl = InteractionController(session, confirm_delete=lambda booth: answers.pop(0))
    add_booth(session.config, "B-1")
    ctl.select("B-1")
    ctl.key_press("Delete")
    assert len(session.config.booths) == 1
    ctl.key_press("Backspace")
    assert session.config.booths == []
    assert session.selected_id is None


def test_ctrl_s_requests_save(controller, events):
    assert controller.key_press("s", ctrl=True)
    assert changes(events) == [Change.SAVE_REQUESTED]


# ---- property edits ----
def test_assign_then_clear_vendor_is_atomic(controller):
    b = add_booth(controller.config, "B-1")
    controller.assign_vendor("B-1", "v1")
    assert (b.vendor_id, b.vendor_name) == ("v1", "Acme Roofing")
    controller.assign_vendor("B-1", None)
    assert b.vendor_id is None and b.vendor_name is None


def test_vendor_category_autofill_respects_operator_choice(controller):
    b = add_booth(controller.config, "B-1")
    controller.set_category("B-1", "Custom")
    controller.assign_vendor("B-1", "v1")
    assert b.category == "Custom"

    c = add_booth(controller.config, "B-2", x=200)
    controller.assign_vendor("B-2", "v2")
    assert c.category == "Solar & Energy"

    d = add_booth(controller.config, "B-3", x=400)
    controller.assign_vendor("B-3", "v3")
    assert d.category is None


def test_unknown_vendor_reads_as_unassigned(session):
    b = add_booth(session.config, "B-1", vendor_id="gone", vendor_name="Old Name")
    assert session.vendor_label(b) == "Unassigned"


def test_rename_collision_rejected(controller):
    add_booth(controller.config, "B-1")
    add_booth(controller.config, "B-2", x=200)
    with pytest.raises(DuplicateBoothId):
        controller.rename_booth("B-2", "B-1")
    controller.select("B-2")
    assert controller.rename_booth("B-2", "Corner 1") == "Corner 1"
    assert controller.session.selected_id == "Corner 1"


def test_resize_keeps_feet_and_px_in_sync(controller):
    b = add_booth(controller.config, "B-1")
    controller.resize_booth("B-1", 15, 0)
    assert (b.width_feet, b.height_feet) == (15, 1)
    assert (b.width_px, b.height_px) == (150.0, 10.0)


def test_edit_unknown_booth_raises(controller):
    with pytest.raises(FloorPlanError):
        controller.set_category("nope", "HVAC")


def test_canvas_size_and_grid_toggle(controller, events):
    controller.set_canvas_size(2400, 1600)
    assert (controller.config.image_width, controller.config.image_height) == (2400, 1600)
    assert controller.toggle_grid() is True
    assert controller.session.show_grid
    assert changes(events)[-1] == Change.LAYOUT_CHANGED


def test_save_guard(session):
    assert session.begin_save()
    assert not session.begin_save()
    session.end_save(False)
    assert session.begin_save()


def test_save_clears_dirty_only_without_later_edits(controller):
    s = controller.session
    controller.set_canvas_size(1200, 900)
    assert s.begin_save()
    controller.drop_preset(BOOTH_PRESETS[0], 300, 300)
    s.end_save(True)
    assert s.dirty

    assert s.begin_save()
    s.end_save(True)
    assert not s.dirty


def test_load_resets_session(controller, events):
    from boothplan import default_config
    add_booth(controller.config, "B-1")
    controller.select("B-1")
    controller.load(default_config("other"))
    assert controller.config.show_id == "other"
    assert controller.session.selected_id is None
    assert not controller.session.dirty
    assert changes(events)[-1] == Change.LAYOUT_CHANGED
