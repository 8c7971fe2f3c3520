from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple


@dataclass
class ViewportTransform:
    """Screen (viewport) pixels <-> layout pixels.

    ``scroll_x``/``scroll_y`` are the viewport offsets of the layout origin in
    screen pixels (scroll/pan), ``zoom`` is screen pixels per layout pixel.
    Calibration picks, drag tracking and bank drops all go through this one
    mapping.
    """
    scroll_x: float = 0.0
    scroll_y: float = 0.0
    zoom: float = 1.0

    def to_layout_space(self, screen_x: float, screen_y: float) -> Tuple[float, float]:
        z = self.zoom if self.zoom > 0 else 1.0
        return (screen_x + self.scroll_x) / z, (screen_y + self.scroll_y) / z

    def to_screen_space(self, x: float, y: float) -> Tuple[float, float]:
        z = self.zoom if self.zoom > 0 else 1.0
        return x * z - self.scroll_x, y * z - self.scroll_y

    def update(self, scroll_x: float, scroll_y: float, zoom: float):
        self.scroll_x = float(scroll_x)
        self.scroll_y = float(scroll_y)
        self.zoom = float(zoom)
