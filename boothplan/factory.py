from __future__ import annotations
import re
from typing import Iterable, Tuple

from .calibration import effective_ppf
from .models import Booth, BoothPreset, FloorPlanConfig
from .utils import snap, clamp_min

ID_PREFIX = "B-"
_ID_RE = re.compile(r"^B-(\d+)$")

def next_booth_id(existing: Iterable[str]) -> str:
    """One past the highest ``B-<n>`` in use, so it can never collide."""
    top = 0
    for bid in existing:
        m = _ID_RE.match(bid or "")
        if m:
            top = max(top, int(m.group(1)))
    return f"{ID_PREFIX}{top + 1}"


class BoothFactory:
    def __init__(self, config: FloorPlanConfig):
        self.config = config

    def preset_size(self, preset: BoothPreset) -> Tuple[int, int]:
        # custom presets are dropped at 10x10 and resized in the property panel
        if preset.custom:
            return 10, 10
        return int(preset.width_feet), int(preset.height_feet)

    def placement(self, preset: BoothPreset, x: float, y: float) -> Tuple[float, float, float, float]:
        """Snapped top-left and px size of a preset centred on (x, y)."""
        wf, hf = self.preset_size(preset)
        ppf = effective_ppf(self.config)
        grid = self.config.pixels_per_foot
        w, h = wf * ppf, hf * ppf
        left = clamp_min(snap(x - w / 2, grid))
        top = clamp_min(snap(y - h / 2, grid))
        return left, top, w, h

    def create_from_preset(self, preset: BoothPreset, x: float, y: float) -> Booth:
        wf, hf = self.preset_size(preset)
        left, top, w, h = self.placement(preset, x, y)
        booth = Booth(id=next_booth_id(b.id for b in self.config.booths),
                      x=left, y=top, width_feet=wf, height_feet=hf,
                      width_px=w, height_px=h)
        self.config.booths.append(booth)
        return booth
