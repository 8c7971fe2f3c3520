from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Protocol

from .models import FloorPlanConfig, Visibility
from .renderer import PUBLIC_OPTIONS, Drawing, RenderOptions, placeholder, render
from .utils import DENIED_TEXT


class Role:
    GUEST = "guest"
    VENDOR = "vendor"
    OPERATOR = "operator"

@dataclass
class Viewer:
    role: str = Role.GUEST
    paid: bool = False


class VisibilityGate(Protocol):
    def allows(self, visibility: Visibility, viewer: Viewer, now: datetime) -> bool: ...


def _aware(dt: datetime) -> datetime:
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


class ScheduleGate:
    """Default rules: operators always; guests from the public date on;
    vendors once paid when payment is required."""

    def allows(self, visibility: Visibility, viewer: Viewer, now: datetime) -> bool:
        if viewer.role == Role.OPERATOR:
            return True
        if viewer.role == Role.VENDOR:
            return viewer.paid or not visibility.vendor_requires_paid
        when = visibility.public_visible_date
        return when is None or _aware(now) >= _aware(when)


def render_public(config: Optional[FloorPlanConfig], viewer: Viewer, gate: Optional[VisibilityGate] = None,
                  now: Optional[datetime] = None, options: RenderOptions = PUBLIC_OPTIONS) -> Drawing:
    if config is None:
        return placeholder()
    gate = gate or ScheduleGate()
    now = now or datetime.now(timezone.utc)
    if not gate.allows(config.visibility, viewer, now):
        return placeholder(DENIED_TEXT)
    return render(config, options)
