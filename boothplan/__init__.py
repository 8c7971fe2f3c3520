from .utils import *
from .models import (CATEGORIES, BOOTH_PRESETS, Point, Calibration, Visibility, Booth, Vendor,
                     BoothPreset, FloorPlanConfig, Mode, ViewMode, Change)
from .errors import FloorPlanError, CalibrationError, DuplicateBoothId, PersistenceError
from .transform import ViewportTransform
from .calibration import CalibrationEngine, effective_ppf, recompute_booth_pixels, parse_feet
from .factory import BoothFactory, next_booth_id
from .state import ConfigState, default_config
from .renderer import (RenderOptions, EDITOR_OPTIONS, PUBLIC_OPTIONS, Drawing, BoothShape,
                       LegendEntry, render, legend, placeholder, to_svg)
from .controller import EditorSession, InteractionController, DragState
from .gateway import FloorPlanStore
from .visibility import Role, Viewer, VisibilityGate, ScheduleGate, render_public

# Qt surfaces (scene, items, palette, properties, hud, settings, tasks, images)
# are imported from their modules directly.

__all__ = [
    "CATEGORIES", "BOOTH_PRESETS", "Point", "Calibration", "Visibility", "Booth", "Vendor",
    "BoothPreset", "FloorPlanConfig", "Mode", "ViewMode", "Change",
    "FloorPlanError", "CalibrationError", "DuplicateBoothId", "PersistenceError",
    "ViewportTransform", "CalibrationEngine", "effective_ppf", "recompute_booth_pixels", "parse_feet",
    "BoothFactory", "next_booth_id", "ConfigState", "default_config",
    "RenderOptions", "EDITOR_OPTIONS", "PUBLIC_OPTIONS", "Drawing", "BoothShape", "LegendEntry",
    "render", "legend", "placeholder", "to_svg",
    "EditorSession", "InteractionController", "DragState",
    "FloorPlanStore", "Role", "Viewer", "VisibilityGate", "ScheduleGate", "render_public",
    "snap", "clamp_min", "category_color", "truncate", "label_font_size", "data_dir",
    "DEFAULT_PIXELS_PER_FOOT",
]
