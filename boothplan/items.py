from __future__ import annotations
import re
from typing import Optional

from PySide6.QtCore import Qt, QRectF, QPointF
from PySide6.QtGui import QBrush, QColor, QPainter, QPen, QFont
from PySide6.QtWidgets import QGraphicsRectItem, QGraphicsItem

from .renderer import BoothShape, RectShape, TextShape
from .utils import SELECTED_STROKE

GHOST_PEN   = QPen(QColor("#94A3B8"), 1, Qt.DashLine)
GHOST_BRUSH = QBrush(QColor(148, 163, 184, 80))

_RGBA = re.compile(r"rgba?\(\s*([\d.]+)\s*,\s*([\d.]+)\s*,\s*([\d.]+)\s*(?:,\s*([\d.]+)\s*)?\)")

def qcolor(css: Optional[str]) -> QColor:
    if not css:
        return QColor(Qt.transparent)
    m = _RGBA.match(css)
    if m:
        r, g, b, a = m.groups()
        c = QColor(int(float(r)), int(float(g)), int(float(b)))
        if a is not None:
            c.setAlphaF(float(a))
        return c
    return QColor(css)

def draw_text(painter: QPainter, t: TextShape):
    font = QFont("", 1, QFont.DemiBold if t.bold else QFont.Normal)
    font.setPixelSize(max(1, round(t.size)))
    painter.setFont(font)
    painter.setPen(qcolor(t.fill))
    fm = painter.fontMetrics()
    painter.drawText(QPointF(t.x - fm.horizontalAdvance(t.text) / 2, t.y), t.text)


class BoothItem(QGraphicsRectItem):
    """Scene item for one rendered booth. Movement is driven by the
    interaction controller, not by Qt's item dragging."""

    def __init__(self, shape: BoothShape):
        r: RectShape = shape.rect
        super().__init__(QRectF(r.x, r.y, r.width, r.height))
        self.booth_shape = shape
        self.booth_id = shape.booth_id
        self._rounded = r.radius
        self._is_preview = False
        self.setPos(QPointF(shape.x, shape.y))
        self.setFlag(QGraphicsItem.ItemIsSelectable, shape.booth_id is not None)
        self.setFlag(QGraphicsItem.ItemIsMovable, False)
        self.setData(0, shape.booth_id)

        self.brush_normal = QBrush(qcolor(r.fill))
        self.pen_normal = QPen(qcolor(r.stroke), r.stroke_width, Qt.SolidLine)
        self.brush_selected = self.brush_normal
        self.pen_selected = QPen(QColor(SELECTED_STROKE), 3, Qt.DashLine)
        self.pen_selected.setDashPattern([6, 3])
        self.setBrush(self.brush_normal)
        self.setPen(self.pen_normal)
        if shape.booth_id:
            self.setToolTip(shape.booth_id)

    def set_ghost(self):
        self._is_preview = True
        self.setOpacity(0.5)
        self.brush_normal = GHOST_BRUSH
        self.pen_normal = GHOST_PEN
        self.setZValue(10_000)
        self.setFlag(QGraphicsItem.ItemIsSelectable, False)
        self.update()

    def paint(self, painter: QPainter, option, widget=None):
        painter.setRenderHint(QPainter.Antialiasing, True)
        sel = self.isSelected() and not self._is_preview
        painter.setPen(self.pen_selected if sel else self.pen_normal)
        painter.setBrush(self.brush_selected if sel else self.brush_normal)
        painter.drawRoundedRect(self.rect(), self._rounded, self._rounded)
        for t in self.booth_shape.labels:
            draw_text(painter, t)
