from __future__ import annotations
import logging
from typing import Dict, List, Optional, Callable

from PySide6.QtCore import Qt, QRectF, QPointF, QLineF, Signal
from PySide6.QtGui import QPainter, QPen, QColor, QWheelEvent, QPixmap, QPainterPath, QBrush, QFont
from PySide6.QtWidgets import (
    QGraphicsScene, QGraphicsView, QGraphicsPixmapItem, QGraphicsRectItem,
    QGraphicsPathItem, QGraphicsEllipseItem, QGraphicsLineItem, QGraphicsSimpleTextItem,
    QApplication
)

from .controller import InteractionController
from .items import BoothItem, qcolor
from .models import Change, Mode, Point, ViewMode
from .palette import PRESET_MIME, decode_preset
from .renderer import (EDITOR_OPTIONS, PUBLIC_OPTIONS, BoothShape, Drawing, ImageShape,
                       RectShape, RenderOptions, TextShape, render)
from .utils import CALIBRATION_COLOR, CANVAS_BG

logger = logging.getLogger(__name__)

OUTSIDE_BG = QColor("#F2F4F7")

KEY_NAMES = {
    Qt.Key_Escape: "Escape",
    Qt.Key_Delete: "Delete",
    Qt.Key_Backspace: "Backspace",
    Qt.Key_Up: "ArrowUp",
    Qt.Key_Down: "ArrowDown",
    Qt.Key_Left: "ArrowLeft",
    Qt.Key_Right: "ArrowRight",
}


class PlanScene(QGraphicsScene):
    """Paints ``Drawing`` descriptions. Full repaint on LAYOUT_CHANGED, a
    single item move on BOOTH_MOVED."""

    def __init__(self, controller: Optional[InteractionController] = None,
                 status_cb: Optional[Callable[[str], None]] = None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.controller = controller
        self.mode = ViewMode.EDIT if controller else ViewMode.VIEW
        self.setItemIndexMethod(QGraphicsScene.NoIndex)
        self._status_cb = status_cb
        self._booth_items: Dict[str, BoothItem] = {}
        self._calibration_items: List = []
        self._ghost: Optional[BoothItem] = None
        self.drawing: Optional[Drawing] = None
        if controller:
            controller.subscribe(self._on_change)
            self.redraw()

    # ---- authoritative path ----
    def render_options(self) -> RenderOptions:
        base = EDITOR_OPTIONS if self.mode == ViewMode.EDIT else PUBLIC_OPTIONS
        show_grid = bool(self.controller and self.controller.session.show_grid)
        return RenderOptions(interactive=base.interactive, show_names=base.show_names,
                             show_category_colors=base.show_category_colors,
                             show_grid=show_grid, show_labels=base.show_labels)

    def redraw(self):
        if not self.controller:
            return
        self.paint_drawing(render(self.controller.config, self.render_options()))

    def paint_drawing(self, drawing: Drawing):
        self._ghost = None
        self._calibration_items = []
        self.clear()
        self._booth_items.clear()
        self.drawing = drawing

        for shape in drawing.background:
            self._add_background(shape, drawing)

        if drawing.grid:
            path = QPainterPath()
            for ln in drawing.grid.lines:
                path.moveTo(ln.x1, ln.y1); path.lineTo(ln.x2, ln.y2)
            grid = QGraphicsPathItem(path)
            pen = QPen(qcolor(drawing.grid.color), 1); pen.setCosmetic(True)
            grid.setPen(pen)
            grid.setOpacity(drawing.grid.opacity)
            self.addItem(grid)

        for b in drawing.booths:
            item = BoothItem(b)
            self.addItem(item)
            if b.booth_id is not None:
                self._booth_items[b.booth_id] = item

        self.setSceneRect(0, 0, drawing.width, drawing.height)
        self._sync_selection()
        if self.controller and self.controller.mode == Mode.CALIBRATE:
            self.show_calibration(self.controller.session.calibration.points)

    def _add_background(self, shape, drawing: Drawing):
        if isinstance(shape, ImageShape):
            pm = QPixmap(shape.ref)
            if pm.isNull():
                logger.warning("Background %s could not be loaded", shape.ref)
                if self._status_cb:
                    self._status_cb("Background image could not be loaded")
                self._add_rect(RectShape(0, 0, shape.width, shape.height, CANVAS_BG))
                return
            item = QGraphicsPixmapItem(pm.scaled(int(shape.width), int(shape.height),
                                                 Qt.IgnoreAspectRatio, Qt.SmoothTransformation))
            item.setTransformationMode(Qt.SmoothTransformation)
            self.addItem(item)
        elif isinstance(shape, RectShape):
            self._add_rect(shape)
        elif isinstance(shape, TextShape):
            txt = QGraphicsSimpleTextItem(shape.text)
            font = QFont(); font.setPixelSize(int(shape.size))
            txt.setFont(font)
            txt.setBrush(qcolor(shape.fill))
            br = txt.boundingRect()
            txt.setPos(shape.x - br.width() / 2, shape.y - br.height() / 2)
            self.addItem(txt)

    def _add_rect(self, r: RectShape):
        if r.radius:
            path = QPainterPath(); path.addRoundedRect(QRectF(r.x, r.y, r.width, r.height), r.radius, r.radius)
            item = QGraphicsPathItem(path)
        else:
            item = QGraphicsRectItem(QRectF(r.x, r.y, r.width, r.height))
        item.setBrush(QBrush(qcolor(r.fill)))
        item.setPen(QPen(qcolor(r.stroke), r.stroke_width) if r.stroke else QPen(Qt.NoPen))
        self.addItem(item)

    # ---- optimistic path ----
    def move_booth_item(self, booth_id: str, x: float, y: float):
        item = self._booth_items.get(booth_id)
        if item is not None:
            item.setPos(QPointF(x, y))

    def booth_item(self, booth_id: str) -> Optional[BoothItem]:
        return self._booth_items.get(booth_id)

    def _sync_selection(self):
        sel = self.controller.session.selected_id if self.controller else None
        for bid, item in self._booth_items.items():
            item.setSelected(bid == sel)

    # ---- calibration markers ----
    def show_calibration(self, points: List[Point]):
        for it in self._calibration_items:
            self.removeItem(it)
        self._calibration_items = []
        pen = QPen(QColor("white"), 2); pen.setCosmetic(True)
        for p in points:
            dot = QGraphicsEllipseItem(QRectF(p.x - 6, p.y - 6, 12, 12))
            dot.setBrush(QColor(CALIBRATION_COLOR)); dot.setPen(pen); dot.setZValue(20_000)
            self.addItem(dot); self._calibration_items.append(dot)
        if len(points) == 2:
            line = QGraphicsLineItem(QLineF(points[0].x, points[0].y, points[1].x, points[1].y))
            lp = QPen(QColor(CALIBRATION_COLOR), 2, Qt.DashLine); lp.setCosmetic(True)
            line.setPen(lp); line.setZValue(19_999)
            self.addItem(line); self._calibration_items.append(line)

    # ---- bank drag preview ----
    def show_ghost(self, x: float, y: float, w: float, h: float):
        if self._ghost is None:
            self._ghost = BoothItem(BoothShape(x, y, RectShape(0, 0, w, h, "#000000", radius=3)))
            self._ghost.set_ghost()
            self.addItem(self._ghost)
        self._ghost.setRect(QRectF(0, 0, w, h))
        self._ghost.setPos(QPointF(x, y))

    def clear_ghost(self):
        if self._ghost is not None:
            self.removeItem(self._ghost)
            self._ghost = None

    def set_view_mode(self, mode: str):
        self.mode = mode
        self.redraw()

    def _on_change(self, change: str, payload: Dict):
        if change == Change.LAYOUT_CHANGED:
            self.redraw()
        elif change == Change.BOOTH_MOVED:
            self.move_booth_item(payload["booth_id"], payload["x"], payload["y"])
        elif change == Change.SELECTION_CHANGED:
            self._sync_selection()
        elif change == Change.CALIBRATION_POINT:
            self.show_calibration(payload.get("points", []))

    def drawBackground(self, painter: QPainter, rect: QRectF):
        painter.fillRect(rect, OUTSIDE_BG)


class PlanView(QGraphicsView):
    scaleChanged = Signal(float)  # current m11()

    def __init__(self, scene: PlanScene):
        super().__init__(scene)
        self.controller = scene.controller
        self.setRenderHint(QPainter.Antialiasing, True)
        self.setViewportUpdateMode(QGraphicsView.BoundingRectViewportUpdate)
        self.setDragMode(QGraphicsView.NoDrag)
        self.setTransformationAnchor(QGraphicsView.AnchorUnderMouse)
        self.setResizeAnchor(QGraphicsView.AnchorUnderMouse)
        self.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        self.setAcceptDrops(True)
        self.setFocusPolicy(Qt.StrongFocus)
        self._space_down = False
        if self.controller:
            self.controller.subscribe(self._on_change)
        self.scaleChanged.emit(self.transform().m11())

    @property
    def editable(self) -> bool:
        return bool(self.controller) and self.scene().mode == ViewMode.EDIT

    def sync_transform(self):
        """Copy the viewport matrix (scroll + zoom) into the shared transform."""
        if not self.controller:
            return
        t = self.viewportTransform()
        self.controller.transform.update(-t.dx(), -t.dy(), t.m11())

    def _on_change(self, change: str, payload: Dict):
        if change == Change.MODE_CHANGED:
            self.viewport().setCursor(Qt.CrossCursor if payload["mode"] == Mode.CALIBRATE else Qt.ArrowCursor)

    # ---- pointer routing ----
    def mousePressEvent(self, event):
        if not self.editable or self._space_down or event.button() != Qt.LeftButton:
            super().mousePressEvent(event); return
        self.setFocus()
        self.sync_transform()
        pos = event.position()
        self.controller.pointer_down(pos.x(), pos.y())
        event.accept()

    def mouseMoveEvent(self, event):
        if self.editable and self.controller.mode == Mode.DRAGGING:
            self.sync_transform()
            pos = event.position()
            self.controller.pointer_move(pos.x(), pos.y())
            event.accept(); return
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        if self.editable and self.controller.mode == Mode.DRAGGING:
            self.sync_transform()
            pos = event.position()
            self.controller.pointer_up(pos.x(), pos.y())
            event.accept(); return
        super().mouseReleaseEvent(event)

    def focusOutEvent(self, event):
        if self.editable and self.controller.mode == Mode.DRAGGING:
            self.controller.capture_lost()
        super().focusOutEvent(event)

    # ---- booth bank drops ----
    def _preset(self, event):
        if not self.editable or self.controller.mode != Mode.SELECT:
            return None
        if not event.mimeData().hasFormat(PRESET_MIME):
            return None
        return decode_preset(bytes(event.mimeData().data(PRESET_MIME).data()))

    def dragEnterEvent(self, event):
        preset = self._preset(event)
        if preset is None:
            event.ignore(); return
        self._update_ghost(preset, event)
        event.acceptProposedAction()

    def dragMoveEvent(self, event):
        preset = self._preset(event)
        if preset is None:
            event.ignore(); return
        self._update_ghost(preset, event)
        event.acceptProposedAction()

    def dragLeaveEvent(self, event):
        self.scene().clear_ghost(); event.accept()

    def dropEvent(self, event):
        preset = self._preset(event)
        self.scene().clear_ghost()
        if preset is None:
            event.ignore(); return
        self.sync_transform()
        pos = event.position()
        self.controller.drop_preset(preset, pos.x(), pos.y())
        self.setFocus()
        event.acceptProposedAction()

    def _update_ghost(self, preset, event):
        self.sync_transform()
        pos = event.position()
        x, y, w, h = self.controller.preview_drop(preset, pos.x(), pos.y())
        self.scene().show_ghost(x, y, w, h)

    # ---- zoom / pan / keys ----
    def wheelEvent(self, event: QWheelEvent):
        if QApplication.keyboardModifiers() & Qt.ControlModifier:
            angle = event.angleDelta().y()
            factor = 1.15 if angle > 0 else 1.0 / 1.15
            self.scale(factor, factor)
            self.scaleChanged.emit(self.transform().m11())
            event.accept()
            return
        super().wheelEvent(event)

    def keyPressEvent(self, event):
        if event.key() == Qt.Key_Space and not self._space_down:
            self._space_down = True
            self.setDragMode(QGraphicsView.ScrollHandDrag)
            event.accept()
            return
        name = KEY_NAMES.get(event.key())
        if name and self.editable and self.controller.key_press(name):
            event.accept()
            return
        super().keyPressEvent(event)

    def keyReleaseEvent(self, event):
        if event.key() == Qt.Key_Space and self._space_down:
            self._space_down = False
            self.setDragMode(QGraphicsView.NoDrag)
            event.accept()
            return
        super().keyReleaseEvent(event)
