from __future__ import annotations
import json
from typing import Optional, Sequence, Tuple

from PySide6.QtCore import Qt, QPoint, QRect, QSize, QMimeData, QByteArray
from PySide6.QtGui import QPainter, QPen, QColor, QDrag, QCursor, QFont
from PySide6.QtWidgets import QWidget, QVBoxLayout, QGridLayout, QLabel, QScrollArea, QApplication

from .models import BOOTH_PRESETS, BoothPreset
from .utils import UNASSIGNED_FILL

PRESET_MIME = "application/x-booth-preset"

TILE_MAX = 96.0


def encode_preset(preset: BoothPreset) -> bytes:
    return json.dumps({
        "label": preset.label, "widthFeet": preset.width_feet,
        "heightFeet": preset.height_feet, "custom": preset.custom,
    }, ensure_ascii=False).encode("utf-8")

def decode_preset(raw: bytes) -> Optional[BoothPreset]:
    try:
        d = json.loads(raw.decode("utf-8"))
        return BoothPreset(str(d["label"]), int(d["widthFeet"]), int(d["heightFeet"]), bool(d.get("custom", False)))
    except (ValueError, KeyError, TypeError):
        return None


class PreviewTile(QWidget):
    """One preset in the bank. Dragging starts only from the booth swatch."""

    def __init__(self, preset: BoothPreset, parent: QWidget | None = None):
        super().__init__(parent)
        self.preset = preset
        self.setMouseTracking(True)
        self._press_pos: Optional[QPoint] = None
        self._drag_from_icon = False
        self._icon_rect = QRect()
        self.setObjectName("PreviewTile")
        self.setToolTip("Drag onto the floor plan")

    def sizeHint(self) -> QSize:
        return QSize(int(TILE_MAX) + 24, int(TILE_MAX) + 36)

    def _scaled_size(self) -> Tuple[float, float]:
        w, h = float(self.preset.width_feet), float(self.preset.height_feet)
        k = TILE_MAX / max(w, h, 1.0)
        return w * k * 0.75 + 12, h * k * 0.75 + 12

    def _layout_icon_rect(self) -> QRect:
        iw, ih = self._scaled_size()
        w, h = int(iw), int(ih)
        self._icon_rect = QRect((self.width() - w) // 2, 8 + (int(TILE_MAX) - h) // 2, w, h)
        return self._icon_rect

    def paintEvent(self, ev):
        p = QPainter(self); p.setRenderHint(QPainter.Antialiasing)
        r = self._layout_icon_rect()
        p.setBrush(QColor(UNASSIGNED_FILL))
        p.setPen(QPen(QColor(70, 70, 70), 1, Qt.DashLine if self.preset.custom else Qt.SolidLine))
        p.drawRoundedRect(r, 4, 4)

        p.setPen(QColor("white"))
        p.setFont(QFont("", 8, QFont.Bold))
        if not self.preset.custom:
            p.drawText(r, Qt.AlignCenter, f"{self.preset.width_feet}'×{self.preset.height_feet}'")

        p.setPen(QPen(QColor("#222"), 1))
        p.setFont(QFont())
        fm = p.fontMetrics()
        text_w = fm.horizontalAdvance(self.preset.label)
        p.drawText(max(4, (self.width() - text_w) // 2), 8 + int(TILE_MAX) + 20, self.preset.label)
        p.end()

    def enterEvent(self, ev):
        pos = self.mapFromGlobal(QCursor.pos())
        self.setCursor(Qt.OpenHandCursor if self._icon_rect.contains(pos) else Qt.ArrowCursor)

    def mouseMoveEvent(self, ev):
        self.setCursor(Qt.OpenHandCursor if self._icon_rect.contains(ev.pos()) else Qt.ArrowCursor)
        if not self._drag_from_icon or self._press_pos is None:
            return
        if (ev.pos() - self._press_pos).manhattanLength() < QApplication.startDragDistance():
            return

        # the scene draws its own ghost, no drag pixmap
        drag = QDrag(self)
        mime = QMimeData()
        mime.setData(PRESET_MIME, QByteArray(encode_preset(self.preset)))
        drag.setMimeData(mime)
        drag.exec(Qt.CopyAction)

        self._drag_from_icon = False
        self._press_pos = None

    def mousePressEvent(self, ev):
        if ev.button() == Qt.LeftButton and self._icon_rect.contains(ev.pos()):
            self._press_pos = ev.pos()
            self._drag_from_icon = True
        else:
            self._press_pos = None
            self._drag_from_icon = False
        super().mousePressEvent(ev)

    def mouseReleaseEvent(self, ev):
        self._press_pos = None
        self._drag_from_icon = False
        super().mouseReleaseEvent(ev)

    def resizeEvent(self, ev):
        self._layout_icon_rect()
        super().resizeEvent(ev)


class BoothBank(QWidget):
    def __init__(self, presets: Sequence[BoothPreset] = BOOTH_PRESETS, parent=None):
        super().__init__(parent)
        self.presets = tuple(presets)
        self.tiles = []
        self._build_ui()

    def _build_ui(self):
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        hint = QLabel("Drag a booth onto the plan. Sizes are in feet.", self)
        hint.setWordWrap(True)
        hint.setStyleSheet("color:#6b7280; padding:8px;")
        root.addWidget(hint)

        self.scroll = QScrollArea(self)
        self.scroll.setWidgetResizable(True)
        self.scroll.setStyleSheet("QScrollArea{background:#ffffff;}")
        root.addWidget(self.scroll, 1)

        self.content = QWidget()
        self.content.setObjectName("BoothBankContent")
        self.scroll.setWidget(self.content)

        grid = QGridLayout(self.content)
        grid.setContentsMargins(8, 8, 8, 8)
        grid.setHorizontalSpacing(8); grid.setVerticalSpacing(8)
        for i, preset in enumerate(self.presets):
            tile = PreviewTile(preset)
            self.tiles.append(tile)
            grid.addWidget(tile, i // 2, i % 2)
        grid.setRowStretch(len(self.presets) // 2 + 1, 1)
