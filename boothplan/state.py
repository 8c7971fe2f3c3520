from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, List, Optional

from .calibration import effective_ppf
from .models import Booth, Calibration, FloorPlanConfig, Point, Visibility


def default_config(show_id: str) -> FloorPlanConfig:
    return FloorPlanConfig(show_id=show_id)

def _iso(dt: Optional[datetime]) -> str:
    return dt.isoformat() if dt else ""

def _parse_dt(value) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None

def _num(value, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default

def _int(value, default: int = 0) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default

def _opt_str(value) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


class ConfigState:
    """Floor plan document <-> FloorPlanConfig (one document per show id)."""

    def serialize(self, config: FloorPlanConfig) -> Dict[str, Any]:
        cal = None
        if config.calibration:
            c = config.calibration
            cal = {
                "point1": {"x": c.point1.x, "y": c.point1.y},
                "point2": {"x": c.point2.x, "y": c.point2.y},
                "realDistanceFeet": c.real_distance_feet,
                "pixelsPerFoot": c.pixels_per_foot,
            }
        booths: List[Dict] = []
        for b in config.booths:
            booths.append({
                "id": b.id,
                "x": b.x, "y": b.y,
                "widthFeet": b.width_feet, "heightFeet": b.height_feet,
                "widthPx": b.width_px, "heightPx": b.height_px,
                "category": b.category or "",
                "vendorId": b.vendor_id,
                "vendorName": b.vendor_name,
            })
        return {
            "showId": config.show_id,
            "backgroundImageRef": config.background_image_ref,
            "imageWidth": config.image_width,
            "imageHeight": config.image_height,
            "calibration": cal,
            "booths": booths,
            "visibility": {
                "publicVisibleDate": _iso(config.visibility.public_visible_date),
                "vendorRequiresPaid": bool(config.visibility.vendor_requires_paid),
            },
            "createdAt": _iso(config.created_at),
            "updatedAt": _iso(config.updated_at),
        }

    def deserialize(self, data: Dict[str, Any], show_id: str = "") -> FloorPlanConfig:
        config = default_config(data.get("showId") or show_id)
        config.background_image_ref = data.get("backgroundImageRef") or data.get("backgroundImageUrl") or ""
        config.image_width = max(0, _int(data.get("imageWidth")))
        config.image_height = max(0, _int(data.get("imageHeight")))
        config.calibration = self._calibration(data.get("calibration"))

        vis = data.get("visibility") or {}
        config.visibility = Visibility(
            public_visible_date=_parse_dt(vis.get("publicVisibleDate")),
            vendor_requires_paid=bool(vis.get("vendorRequiresPaid", True)),
        )
        config.created_at = _parse_dt(data.get("createdAt"))
        config.updated_at = _parse_dt(data.get("updatedAt"))

        ppf = effective_ppf(config)
        seen = set()
        for raw in data.get("booths") or []:
            bid = str(raw.get("id") or "").strip()
            if not bid or bid in seen:
                continue
            seen.add(bid)
            wf = max(1, _int(raw.get("widthFeet"), 10))
            hf = max(1, _int(raw.get("heightFeet"), 10))
            vendor_id = _opt_str(raw.get("vendorId"))
            config.booths.append(Booth(
                id=bid,
                x=max(0.0, _num(raw.get("x"))), y=max(0.0, _num(raw.get("y"))),
                width_feet=wf, height_feet=hf,
                width_px=_num(raw.get("widthPx")) or wf * ppf,
                height_px=_num(raw.get("heightPx")) or hf * ppf,
                category=_opt_str(raw.get("category")),
                vendor_id=vendor_id,
                vendor_name=_opt_str(raw.get("vendorName")) if vendor_id else None,
            ))
        return config

    def _calibration(self, raw) -> Optional[Calibration]:
        if not raw:
            return None
        ppf = _num(raw.get("pixelsPerFoot"))
        if ppf <= 0:
            return None
        p1 = raw.get("point1") or {}
        p2 = raw.get("point2") or {}
        return Calibration(
            point1=Point(_num(p1.get("x")), _num(p1.get("y"))),
            point2=Point(_num(p2.get("x")), _num(p2.get("y"))),
            real_distance_feet=_num(raw.get("realDistanceFeet")),
            pixels_per_foot=ppf,
        )
