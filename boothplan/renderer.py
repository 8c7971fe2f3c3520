"""
Floor plan renderer shared by the configurator and the public viewer.

``render(config, options)`` is a pure function returning an immutable
``Drawing``; the Qt scene paints it and ``to_svg`` exports it. Both surfaces
go through the same call, the only difference being the options.
"""
from __future__ import annotations
from dataclasses import dataclass
from html import escape
from typing import List, Optional, Tuple

from .calibration import effective_ppf
from .models import FloorPlanConfig
from .utils import (BOOTH_RADIUS, BOOTH_STROKE, BOOTH_STROKE_W, CANVAS_BG, GRID_COLOR,
                    GRID_OPACITY, LABEL_COLOR, MIN_GRID_PX, PLACEHOLDER_H, PLACEHOLDER_TEXT,
                    PLACEHOLDER_TEXT_COLOR, PLACEHOLDER_W, UNASSIGNED_FILL, VENDOR_LABEL_COLOR,
                    VENDOR_LABEL_MIN_PX, VENDOR_NAME_MAX, category_color, label_font_size, truncate)


@dataclass(frozen=True)
class RenderOptions:
    interactive: bool = True
    show_names: bool = False
    show_category_colors: bool = True
    show_grid: bool = False
    show_labels: bool = True

EDITOR_OPTIONS = RenderOptions(interactive=True, show_names=True)
PUBLIC_OPTIONS = RenderOptions(interactive=True, show_names=False)


@dataclass(frozen=True)
class RectShape:
    x: float
    y: float
    width: float
    height: float
    fill: str
    stroke: Optional[str] = None
    stroke_width: float = 0.0
    radius: float = 0.0

@dataclass(frozen=True)
class LineShape:
    x1: float
    y1: float
    x2: float
    y2: float

@dataclass(frozen=True)
class TextShape:
    x: float
    y: float
    text: str
    size: float
    fill: str
    bold: bool = False

@dataclass(frozen=True)
class ImageShape:
    ref: str
    width: float
    height: float

@dataclass(frozen=True)
class BoothShape:
    """One booth; ``rect`` and ``labels`` are local to (x, y)."""
    x: float
    y: float
    rect: RectShape
    labels: Tuple[TextShape, ...] = ()
    booth_id: Optional[str] = None   # set only for interactive drawings
    index: Optional[int] = None

@dataclass(frozen=True)
class GridShape:
    lines: Tuple[LineShape, ...]
    color: str = GRID_COLOR
    opacity: float = GRID_OPACITY

@dataclass(frozen=True)
class Drawing:
    width: float
    height: float
    background: Tuple[object, ...] = ()
    grid: Optional[GridShape] = None
    booths: Tuple[BoothShape, ...] = ()
    placeholder: bool = False

@dataclass(frozen=True)
class LegendEntry:
    label: str
    color: str


def placeholder(message: str = PLACEHOLDER_TEXT) -> Drawing:
    return Drawing(
        width=PLACEHOLDER_W, height=PLACEHOLDER_H, placeholder=True,
        background=(
            RectShape(0, 0, PLACEHOLDER_W, PLACEHOLDER_H, CANVAS_BG, radius=12),
            TextShape(PLACEHOLDER_W / 2, PLACEHOLDER_H / 2, message, 16, PLACEHOLDER_TEXT_COLOR),
        ),
    )

def _dimensions(config) -> Optional[Tuple[int, int]]:
    try:
        w, h = int(config.image_width), int(config.image_height)
    except (AttributeError, TypeError, ValueError):
        return None
    if w <= 0 or h <= 0:
        return None
    return w, h

def _grid(width: int, height: int, ppf: float) -> GridShape:
    lines: List[LineShape] = []
    i = 0
    while i * ppf < width:
        x = i * ppf
        lines.append(LineShape(x, 0, x, height))
        i += 1
    j = 0
    while j * ppf < height:
        y = j * ppf
        lines.append(LineShape(0, y, width, y))
        j += 1
    return GridShape(tuple(lines))

def _booth_shape(booth, index: int, ppf: float, options: RenderOptions) -> BoothShape:
    w = booth.width_px or booth.width_feet * ppf
    h = booth.height_px or booth.height_feet * ppf
    fill = UNASSIGNED_FILL
    if options.show_category_colors and booth.category:
        fill = category_color(booth.category)
    rect = RectShape(0, 0, w, h, fill, BOOTH_STROKE, BOOTH_STROKE_W, BOOTH_RADIUS)

    fs = label_font_size(w, h)
    labels: List[TextShape] = []
    baseline = h / 2 + fs * 0.35
    if options.show_labels:
        labels.append(TextShape(w / 2, baseline, str(booth.id), fs, LABEL_COLOR, bold=True))
    if options.show_names and booth.vendor_name:
        vfs = max(VENDOR_LABEL_MIN_PX, fs - 3)
        labels.append(TextShape(w / 2, baseline + vfs + 2, truncate(booth.vendor_name, VENDOR_NAME_MAX),
                                vfs, VENDOR_LABEL_COLOR))
    return BoothShape(
        x=booth.x, y=booth.y, rect=rect, labels=tuple(labels),
        booth_id=booth.id if options.interactive else None,
        index=index if options.interactive else None,
    )

def render(config: Optional[FloorPlanConfig], options: RenderOptions = RenderOptions()) -> Drawing:
    dims = _dimensions(config) if config is not None else None
    if dims is None:
        return placeholder()
    width, height = dims

    if config.background_image_ref:
        background = (ImageShape(config.background_image_ref, width, height),)
    else:
        background = (RectShape(0, 0, width, height, CANVAS_BG),)

    ppf = effective_ppf(config)
    grid = None
    if options.show_grid and config.pixels_per_foot and config.pixels_per_foot > MIN_GRID_PX:
        grid = _grid(width, height, config.pixels_per_foot)

    booths = tuple(_booth_shape(b, i, ppf, options) for i, b in enumerate(config.booths))
    return Drawing(width=width, height=height, background=background, grid=grid, booths=booths)

def legend(config: Optional[FloorPlanConfig]) -> List[LegendEntry]:
    """'Available' first, then the categories in use, alphabetically. No vendor names."""
    entries = [LegendEntry("Available", UNASSIGNED_FILL)]
    if config is None:
        return entries
    cats = sorted({b.category for b in config.booths if b.category})
    entries.extend(LegendEntry(c, category_color(c)) for c in cats)
    return entries


# ---- SVG export ----
def _fmt(v: float) -> str:
    return f"{v:.2f}".rstrip("0").rstrip(".") or "0"

def _svg_rect(r: RectShape) -> str:
    stroke = f' stroke="{r.stroke}" stroke-width="{_fmt(r.stroke_width)}"' if r.stroke else ""
    rx = f' rx="{_fmt(r.radius)}"' if r.radius else ""
    return (f'<rect x="{_fmt(r.x)}" y="{_fmt(r.y)}" width="{_fmt(r.width)}" '
            f'height="{_fmt(r.height)}"{rx} fill="{r.fill}"{stroke}/>')

def _svg_text(t: TextShape) -> str:
    weight = ' font-weight="600"' if t.bold else ""
    return (f'<text x="{_fmt(t.x)}" y="{_fmt(t.y)}" text-anchor="middle" '
            f'font-size="{_fmt(t.size)}" fill="{t.fill}"{weight}>{escape(t.text)}</text>')

def to_svg(drawing: Drawing) -> str:
    parts: List[str] = []
    for shape in drawing.background:
        if isinstance(shape, ImageShape):
            parts.append(f'<image href="{escape(shape.ref)}" x="0" y="0" width="{_fmt(shape.width)}" '
                         f'height="{_fmt(shape.height)}" preserveAspectRatio="xMidYMid meet"/>')
        elif isinstance(shape, RectShape):
            parts.append(_svg_rect(shape))
        elif isinstance(shape, TextShape):
            parts.append(_svg_text(shape))
    if drawing.grid:
        g = drawing.grid
        lines = "".join(f'<line x1="{_fmt(l.x1)}" y1="{_fmt(l.y1)}" x2="{_fmt(l.x2)}" y2="{_fmt(l.y2)}"/>'
                        for l in g.lines)
        parts.append(f'<g id="fp-grid" stroke="{g.color}" opacity="{_fmt(g.opacity)}">{lines}</g>')
    if drawing.booths:
        items = []
        for b in drawing.booths:
            attrs = ""
            if b.booth_id is not None:
                attrs = f' data-booth-index="{b.index}" data-booth-id="{escape(b.booth_id)}"'
            inner = _svg_rect(b.rect) + "".join(_svg_text(t) for t in b.labels)
            items.append(f'<g class="fp-booth"{attrs} transform="translate({_fmt(b.x)}, {_fmt(b.y)})">{inner}</g>')
        parts.append(f'<g id="fp-booths">{"".join(items)}</g>')
    return (f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {_fmt(drawing.width)} {_fmt(drawing.height)}">'
            + "".join(parts) + "</svg>")
