from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

CATEGORIES = (
    "Home Improvement", "Kitchen & Bath", "Landscaping", "Roofing",
    "Windows & Doors", "HVAC", "Flooring", "Solar & Energy", "Security",
    "Insurance", "Financial", "Real Estate", "General",
)

@dataclass
class Point:
    x: float = 0.0
    y: float = 0.0

@dataclass
class Calibration:
    point1: Point
    point2: Point
    real_distance_feet: float
    pixels_per_foot: float

@dataclass
class Visibility:
    public_visible_date: Optional[datetime] = None
    vendor_requires_paid: bool = True

@dataclass
class Booth:
    id: str
    x: float = 0.0
    y: float = 0.0
    width_feet: int = 10
    height_feet: int = 10
    width_px: float = 0.0
    height_px: float = 0.0
    category: Optional[str] = None
    vendor_id: Optional[str] = None
    vendor_name: Optional[str] = None  # cached from the vendor directory

@dataclass
class Vendor:
    id: str
    name: str
    category: str = ""

@dataclass
class BoothPreset:
    label: str
    width_feet: int
    height_feet: int
    custom: bool = False

BOOTH_PRESETS = (
    BoothPreset("8 × 8", 8, 8),
    BoothPreset("10 × 10", 10, 10),
    BoothPreset("10 × 20", 10, 20),
    BoothPreset("20 × 20", 20, 20),
    BoothPreset("Custom", 10, 10, custom=True),
)

@dataclass
class FloorPlanConfig:
    show_id: str = ""
    background_image_ref: str = ""
    image_width: int = 0   # 0 until an image (or canvas size) is set
    image_height: int = 0
    calibration: Optional[Calibration] = None
    booths: List[Booth] = field(default_factory=list)
    visibility: Visibility = field(default_factory=Visibility)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def pixels_per_foot(self) -> Optional[float]:
        return self.calibration.pixels_per_foot if self.calibration else None

    def find_booth(self, booth_id: Optional[str]) -> Optional[Booth]:
        if booth_id is None:
            return None
        for b in self.booths:
            if b.id == booth_id:
                return b
        return None

class Mode:
    SELECT = "select"
    CALIBRATE = "calibrate"
    DRAGGING = "dragging"

class ViewMode:
    EDIT = "edit"
    VIEW = "view"

class Change:
    """Notifications emitted by the interaction controller."""
    LAYOUT_CHANGED = "layout_changed"    # authoritative re-render
    BOOTH_MOVED = "booth_moved"          # optimistic, one booth only
    SELECTION_CHANGED = "selection_changed"
    MODE_CHANGED = "mode_changed"
    CALIBRATION_POINT = "calibration_point"
    CALIBRATION_READY = "calibration_ready"  # two points picked, distance needed
    SAVE_REQUESTED = "save_requested"
