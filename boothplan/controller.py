"""
Editing session and interaction state machine of the configurator.

States: ``select`` (default), ``calibrate`` (modal, explicit toggle) and
``dragging`` (transient, entered from ``select`` by pressing on a booth).
The view forwards raw pointer/keyboard events in screen coordinates; the
controller maps them through the shared viewport transform, hit-tests the
model and notifies subscribers:

* ``Change.BOOTH_MOVED`` while dragging (move one item, no re-render)
* ``Change.LAYOUT_CHANGED`` after every committed mutation (full re-render)
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from .calibration import CalibrationEngine, effective_ppf
from .errors import DuplicateBoothId, FloorPlanError
from .factory import BoothFactory
from .models import Booth, BoothPreset, Calibration, Change, FloorPlanConfig, Mode, Point, Vendor
from .transform import ViewportTransform
from .utils import clamp_min, snap

logger = logging.getLogger(__name__)

Listener = Callable[[str, Dict], None]

ARROWS = {
    "ArrowUp": (0, -1), "ArrowDown": (0, 1),
    "ArrowLeft": (-1, 0), "ArrowRight": (1, 0),
}


@dataclass
class DragState:
    booth_id: str
    start: Point        # layout point where the drag started
    origin: Point       # booth top-left at drag start
    moved: bool = False


class EditorSession:
    """Everything the configurator holds between open and close. Nothing here
    is persisted except through an explicit save."""

    def __init__(self, config: FloorPlanConfig, vendors: Optional[List[Vendor]] = None):
        self.config = config
        self.vendors: List[Vendor] = list(vendors or [])
        self.selected_id: Optional[str] = None
        self.mode = Mode.SELECT
        self.calibration = CalibrationEngine(config)
        self.factory = BoothFactory(config)
        self.drag: Optional[DragState] = None
        self.show_grid = False
        self.dirty = False
        self.revision = 0           # bumped by every edit
        self.save_in_flight = False
        self._saving_revision = 0

    @property
    def selected(self) -> Optional[Booth]:
        return self.config.find_booth(self.selected_id)

    def replace_config(self, config: FloorPlanConfig):
        self.config = config
        self.calibration = CalibrationEngine(config)
        self.factory = BoothFactory(config)
        self.selected_id = None
        self.drag = None
        self.mode = Mode.SELECT
        self.dirty = False

    def vendor(self, vendor_id: Optional[str]) -> Optional[Vendor]:
        if not vendor_id:
            return None
        for v in self.vendors:
            if v.id == vendor_id:
                return v
        return None

    def vendor_label(self, booth: Booth) -> str:
        # deleted or unknown vendors read as unassigned
        v = self.vendor(booth.vendor_id)
        return v.name if v else "Unassigned"

    def touch(self):
        self.dirty = True
        self.revision += 1

    # ---- save guard ----
    def begin_save(self) -> bool:
        if self.save_in_flight:
            return False
        self.save_in_flight = True
        self._saving_revision = self.revision
        return True

    def end_save(self, ok: bool):
        """Edits made after ``begin_save`` are not in the saved snapshot and
        keep the session dirty."""
        self.save_in_flight = False
        if ok and self.revision == self._saving_revision:
            self.dirty = False


class InteractionController:
    def __init__(self, session: EditorSession, transform: Optional[ViewportTransform] = None,
                 confirm_delete: Optional[Callable[[Booth], bool]] = None):
        self.session = session
        self.transform = transform or ViewportTransform()
        self.confirm_delete = confirm_delete or (lambda booth: True)
        self._listeners: List[Listener] = []

    # ---- notifications ----
    def subscribe(self, listener: Listener):
        self._listeners.append(listener)

    def _emit(self, change: str, **payload):
        for cb in list(self._listeners):
            cb(change, payload)

    def _changed(self):
        self.session.touch()
        self._emit(Change.LAYOUT_CHANGED)

    @property
    def config(self) -> FloorPlanConfig:
        return self.session.config

    @property
    def mode(self) -> str:
        return self.session.mode

    def _set_mode(self, mode: str):
        if mode != self.session.mode:
            self.session.mode = mode
            self._emit(Change.MODE_CHANGED, mode=mode)

    def load(self, config: FloorPlanConfig):
        """Swap in a freshly loaded document and reset the session."""
        self.session.replace_config(config)
        self._emit(Change.MODE_CHANGED, mode=Mode.SELECT)
        self._emit(Change.SELECTION_CHANGED, booth_id=None)
        self._emit(Change.LAYOUT_CHANGED)

    def set_vendors(self, vendors: List[Vendor]):
        self.session.vendors = list(vendors)
        self._emit(Change.SELECTION_CHANGED, booth_id=self.session.selected_id)

    # ---- geometry ----
    def layout_point(self, screen_x: float, screen_y: float) -> Point:
        x, y = self.transform.to_layout_space(screen_x, screen_y)
        return Point(x, y)

    def grid_size(self) -> Optional[float]:
        return self.config.pixels_per_foot

    def snap_point(self, x: float, y: float) -> Tuple[float, float]:
        g = self.grid_size()
        return clamp_min(snap(x, g)), clamp_min(snap(y, g))

    def hit_test(self, x: float, y: float) -> Optional[Booth]:
        # last drawn is on top
        for b in reversed(self.config.booths):
            if b.x <= x <= b.x + b.width_px and b.y <= y <= b.y + b.height_px:
                return b
        return None

    # ---- selection ----
    def select(self, booth_id: Optional[str]):
        if booth_id is not None and self.config.find_booth(booth_id) is None:
            booth_id = None
        if booth_id != self.session.selected_id:
            self.session.selected_id = booth_id
            self._emit(Change.SELECTION_CHANGED, booth_id=booth_id)

    def clear_selection(self):
        self.select(None)

    # ---- calibration ----
    def toggle_calibration(self):
        if self.mode == Mode.CALIBRATE:
            self.cancel_calibration()
        elif self.mode == Mode.SELECT:
            self.session.calibration.begin()
            self._set_mode(Mode.CALIBRATE)
            self._emit(Change.CALIBRATION_POINT, points=[])

    def cancel_calibration(self):
        if self.mode != Mode.CALIBRATE:
            return
        self.session.calibration.cancel()
        self._set_mode(Mode.SELECT)
        self._emit(Change.CALIBRATION_POINT, points=[])

    def confirm_calibration(self, feet) -> Calibration:
        engine = self.session.calibration
        try:
            cal = engine.confirm(feet)
        except FloorPlanError:
            self._emit(Change.CALIBRATION_POINT, points=list(engine.points))
            raise
        self._set_mode(Mode.SELECT)
        self._emit(Change.CALIBRATION_POINT, points=[])
        self._changed()
        return cal

    # ---- pointer ----
    def pointer_down(self, screen_x: float, screen_y: float) -> Optional[str]:
        pt = self.layout_point(screen_x, screen_y)
        if self.mode == Mode.CALIBRATE:
            engine = self.session.calibration
            ready = engine.register_click(pt)
            self._emit(Change.CALIBRATION_POINT, points=list(engine.points))
            if ready:
                self._emit(Change.CALIBRATION_READY, pixel_distance=engine.pixel_distance())
            return None
        if self.mode != Mode.SELECT:
            return None

        booth = self.hit_test(pt.x, pt.y)
        if booth is None:
            self.clear_selection()
            return None
        self.select(booth.id)
        self.session.drag = DragState(booth.id, pt, Point(booth.x, booth.y))
        self._set_mode(Mode.DRAGGING)
        return booth.id

    def _drag_to(self, screen_x: float, screen_y: float) -> Optional[Booth]:
        drag = self.session.drag
        booth = self.config.find_booth(drag.booth_id) if drag else None
        if booth is None:
            return None
        pt = self.layout_point(screen_x, screen_y)
        x, y = self.snap_point(drag.origin.x + pt.x - drag.start.x,
                               drag.origin.y + pt.y - drag.start.y)
        if (x, y) != (booth.x, booth.y):
            booth.x, booth.y = x, y
            drag.moved = True
        return booth

    def pointer_move(self, screen_x: float, screen_y: float):
        if self.mode != Mode.DRAGGING:
            return
        booth = self._drag_to(screen_x, screen_y)
        if booth is not None:
            self._emit(Change.BOOTH_MOVED, booth_id=booth.id, x=booth.x, y=booth.y)

    def pointer_up(self, screen_x: Optional[float] = None, screen_y: Optional[float] = None):
        if self.mode != Mode.DRAGGING:
            return
        if screen_x is not None and screen_y is not None:
            self._drag_to(screen_x, screen_y)
        drag = self.session.drag
        self.session.drag = None
        self._set_mode(Mode.SELECT)
        if drag and drag.moved:
            self._changed()
        else:
            self._emit(Change.LAYOUT_CHANGED)

    def capture_lost(self):
        # commit wherever the booth is now
        self.pointer_up()

    # ---- booth bank ----
    def preview_drop(self, preset: BoothPreset, screen_x: float, screen_y: float) -> Tuple[float, float, float, float]:
        pt = self.layout_point(screen_x, screen_y)
        return self.session.factory.placement(preset, pt.x, pt.y)

    def drop_preset(self, preset: BoothPreset, screen_x: float, screen_y: float) -> Optional[Booth]:
        if self.mode != Mode.SELECT:
            return None
        pt = self.layout_point(screen_x, screen_y)
        booth = self.session.factory.create_from_preset(preset, pt.x, pt.y)
        logger.debug("Placed %s at (%s, %s)", booth.id, booth.x, booth.y)
        self._changed()
        self.select(booth.id)
        return booth

    # ---- keyboard ----
    def key_press(self, key: str, ctrl: bool = False, text_input_focused: bool = False) -> bool:
        if text_input_focused or self.mode == Mode.DRAGGING:
            return False
        if ctrl and key.lower() == "s":
            self._emit(Change.SAVE_REQUESTED)
            return True
        if key == "Escape":
            if self.mode == Mode.CALIBRATE:
                self.cancel_calibration()
            else:
                self.clear_selection()
            return True
        if self.mode != Mode.SELECT or self.session.selected is None:
            return False
        if key in ("Delete", "Backspace"):
            self.delete_selected()
            return True
        if key in ARROWS:
            dx, dy = ARROWS[key]
            self.nudge(dx, dy)
            return True
        return False

    # ---- edits ----
    def _booth(self, booth_id: Optional[str]) -> Booth:
        booth = self.config.find_booth(booth_id)
        if booth is None:
            raise FloorPlanError(f'No booth "{booth_id}"')
        return booth

    def delete_selected(self) -> bool:
        booth = self.session.selected
        if booth is None or not self.confirm_delete(booth):
            return False
        self.config.booths.remove(booth)
        self.clear_selection()
        self._changed()
        return True

    def move_booth(self, booth_id: str, x: float, y: float):
        booth = self._booth(booth_id)
        booth.x, booth.y = clamp_min(x), clamp_min(y)
        self._changed()

    def nudge(self, dx: int, dy: int):
        booth = self.session.selected
        if booth is None:
            return
        unit = effective_ppf(self.config)
        self.move_booth(booth.id, booth.x + dx * unit, booth.y + dy * unit)

    def rename_booth(self, booth_id: str, new_id: str) -> str:
        booth = self._booth(booth_id)
        new_id = (new_id or "").strip()
        if not new_id or new_id == booth.id:
            return booth.id
        if self.config.find_booth(new_id) is not None:
            raise DuplicateBoothId(new_id)
        was_selected = self.session.selected_id == booth.id
        booth.id = new_id
        if was_selected:
            self.session.selected_id = new_id
        self._changed()
        return new_id

    def resize_booth(self, booth_id: str, width_feet: int, height_feet: int):
        booth = self._booth(booth_id)
        ppf = effective_ppf(self.config)
        booth.width_feet = max(1, int(width_feet))
        booth.height_feet = max(1, int(height_feet))
        booth.width_px = booth.width_feet * ppf
        booth.height_px = booth.height_feet * ppf
        self._changed()

    def set_category(self, booth_id: str, category: Optional[str]):
        booth = self._booth(booth_id)
        booth.category = (category or "").strip() or None
        self._changed()

    def assign_vendor(self, booth_id: str, vendor_id: Optional[str]):
        booth = self._booth(booth_id)
        vendor_id = (vendor_id or "").strip() or None
        if vendor_id is None:
            booth.vendor_id = None
            booth.vendor_name = None
        else:
            v = self.session.vendor(vendor_id)
            booth.vendor_id = vendor_id
            booth.vendor_name = v.name if v else None
            # never overwrite a category the operator picked
            if not booth.category and v and v.category:
                booth.category = v.category
        self._changed()

    def set_visibility(self, public_visible_date: Optional[datetime], vendor_requires_paid: bool):
        vis = self.config.visibility
        vis.public_visible_date = public_visible_date
        vis.vendor_requires_paid = bool(vendor_requires_paid)
        self.session.touch()

    def set_canvas_size(self, width: int, height: int):
        w, h = int(width), int(height)
        if w > 0 and h > 0 and (w, h) != (self.config.image_width, self.config.image_height):
            self.config.image_width, self.config.image_height = w, h
            self._changed()

    def set_background(self, ref: str, width: int, height: int):
        self.config.background_image_ref = ref
        self.config.image_width, self.config.image_height = int(width), int(height)
        self._changed()

    def toggle_grid(self) -> bool:
        self.session.show_grid = not self.session.show_grid
        self._emit(Change.LAYOUT_CHANGED)
        return self.session.show_grid
