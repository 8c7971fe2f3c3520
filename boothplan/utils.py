from __future__ import annotations
import math, os
from pathlib import Path
from typing import Optional

# ===== Scale =====
DEFAULT_PIXELS_PER_FOOT = 10.0   # display fallback until calibrated
MIN_GRID_PX = 2.0                # finer grids are not drawn

# ===== Placeholder =====
PLACEHOLDER_W = 800
PLACEHOLDER_H = 500
PLACEHOLDER_TEXT = "No floor plan configured"
DENIED_TEXT = "Floor plan not available yet"

# ===== Colors =====
CANVAS_BG = "#1f2937"
PLACEHOLDER_TEXT_COLOR = "#9ca3af"
UNASSIGNED_FILL = "#374151"
BOOTH_STROKE = "rgba(255,255,255,0.3)"
BOOTH_STROKE_W = 1.5
BOOTH_RADIUS = 3.0
LABEL_COLOR = "#ffffff"
VENDOR_LABEL_COLOR = "rgba(255,255,255,0.7)"
GRID_COLOR = "#ffffff"
GRID_OPACITY = 0.12
SELECTED_STROKE = "#3b82f6"
CALIBRATION_COLOR = "#ef4444"

CATEGORY_COLORS = {
    "Home Improvement": "#f97316",
    "Kitchen & Bath":   "#06b6d4",
    "Landscaping":      "#22c55e",
    "Roofing":          "#64748b",
    "Windows & Doors":  "#0ea5e9",
    "HVAC":             "#ef4444",
    "Flooring":         "#d97706",
    "Solar & Energy":   "#eab308",
    "Security":         "#6366f1",
    "Insurance":        "#2563eb",
    "Financial":        "#059669",
    "Real Estate":      "#8b5cf6",
    "General":          "#6b7280",
}

# ===== Labels =====
LABEL_MIN_PX = 8.0
LABEL_MAX_PX = 14.0
VENDOR_LABEL_MIN_PX = 6.0
VENDOR_NAME_MAX = 14

DATA_DIR_ENV = "BOOTHPLAN_DATA_DIR"


def snap(v: float, step: Optional[float]) -> float:
    """Round ``v`` to the nearest multiple of ``step``, halves going up.
    Grids finer than one pixel do not snap."""
    if not step or step < 1:
        return v
    return math.floor(v / step + 0.5) * step

def clamp_min(v: float, lo: float = 0.0) -> float:
    return max(lo, v)

def category_color(category: Optional[str]) -> str:
    if not category:
        return UNASSIGNED_FILL
    return CATEGORY_COLORS.get(category, CATEGORY_COLORS["General"])

def truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit - 1] + "…"

def label_font_size(w: float, h: float) -> float:
    return max(LABEL_MIN_PX, min(LABEL_MAX_PX, min(w, h) * 0.22))

def is_positive_number(v) -> bool:
    try:
        f = float(v)
    except (TypeError, ValueError):
        return False
    return math.isfinite(f) and f > 0

def data_dir() -> Path:
    env = os.environ.get(DATA_DIR_ENV)
    return Path(env).expanduser() if env else Path.home() / ".boothplan"
