from __future__ import annotations
import logging, math
from typing import List, Optional

from .errors import CalibrationError
from .models import Calibration, FloorPlanConfig, Point
from .utils import DEFAULT_PIXELS_PER_FOOT

logger = logging.getLogger(__name__)


def effective_ppf(config: FloorPlanConfig) -> float:
    """Scale used for sizing booths; falls back to the display default."""
    return config.pixels_per_foot or DEFAULT_PIXELS_PER_FOOT

def recompute_booth_pixels(config: FloorPlanConfig):
    ppf = effective_ppf(config)
    for b in config.booths:
        b.width_px = b.width_feet * ppf
        b.height_px = b.height_feet * ppf

def parse_feet(value) -> float:
    if isinstance(value, str):
        value = value.strip()
    try:
        feet = float(value)
    except (TypeError, ValueError):
        raise CalibrationError(f"Enter a valid distance in feet (got {value!r})")
    if not math.isfinite(feet) or feet <= 0:
        raise CalibrationError("Distance must be a positive number of feet")
    return feet


class CalibrationEngine:
    """Two-point, known-distance calibration of the background image."""

    def __init__(self, config: FloorPlanConfig):
        self.config = config
        self.points: List[Point] = []
        self.active = False

    def begin(self):
        self.active = True
        self.points = []

    def cancel(self):
        self.active = False
        self.points = []

    @property
    def awaiting_distance(self) -> bool:
        return self.active and len(self.points) == 2

    def register_click(self, point: Point) -> bool:
        """Record a pick; True once both points are in and a distance is needed."""
        if not self.active or self.awaiting_distance:
            return self.awaiting_distance
        self.points.append(Point(float(point.x), float(point.y)))
        return self.awaiting_distance

    def pixel_distance(self) -> float:
        if len(self.points) < 2:
            return 0.0
        p1, p2 = self.points
        return math.hypot(p2.x - p1.x, p2.y - p1.y)

    def confirm(self, feet) -> Calibration:
        if not self.awaiting_distance:
            raise CalibrationError("Pick two points on the floor plan first")
        try:
            real = parse_feet(feet)
            dist = self.pixel_distance()
            if dist <= 0:
                raise CalibrationError("The two points must be different")
            ppf = round(dist / real, 2)
            if ppf <= 0:
                raise CalibrationError("Distance is too large for the picked points")
        except CalibrationError:
            # start over, keep whatever calibration was stored
            self.points = []
            raise

        cal = Calibration(point1=self.points[0], point2=self.points[1],
                          real_distance_feet=real, pixels_per_foot=ppf)
        self.config.calibration = cal
        recompute_booth_pixels(self.config)
        self.active = False
        self.points = []
        logger.info("Calibrated %s: %.2f px/ft (%.1f px = %s ft)",
                    self.config.show_id or "floor plan", cal.pixels_per_foot, dist, real)
        return cal
