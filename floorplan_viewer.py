#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Read-only public floor plan: what guests and vendors see."""
from __future__ import annotations
import sys, argparse, logging
from typing import List

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor, QIcon, QPainter, QPen, QPixmap
from PySide6.QtWidgets import (
    QApplication, QMainWindow, QDockWidget, QListWidget, QListWidgetItem, QMessageBox, QStatusBar
)

from boothplan import (FloorPlanConfig, FloorPlanStore, Role, ScheduleGate, Viewer,
                       legend, render_public)
from boothplan.scene import PlanScene, PlanView
from boothplan.tasks import run_task

logger = logging.getLogger(__name__)


def make_swatch(color: QColor, size: int = 14) -> QIcon:
    pm = QPixmap(size, size); pm.fill(Qt.transparent)
    p = QPainter(pm); p.setRenderHint(QPainter.Antialiasing, True)
    p.setBrush(color); p.setPen(QPen(QColor(70, 70, 70), 1))
    p.drawRoundedRect(1, 1, size - 2, size - 2, 3, 3)
    p.end()
    return QIcon(pm)


class ViewerWindow(QMainWindow):
    def __init__(self, show_id: str, viewer: Viewer | None = None, store: FloorPlanStore | None = None,
                 gate=None):
        super().__init__()
        self.show_id = show_id
        self.viewer = viewer or Viewer()
        self.store = store or FloorPlanStore()
        self.gate = gate or ScheduleGate()
        self.config: FloorPlanConfig | None = None
        self._tasks: List = []
        self.setWindowTitle(f"Floor plan - {show_id}")
        self.resize(1100, 760)

        self.scene = PlanScene()
        self.view = PlanView(self.scene)
        self.setCentralWidget(self.view)

        self.legend_list = QListWidget()
        self.legend_list.setSelectionMode(QListWidget.NoSelection)
        self.legend_dock = QDockWidget("Legend", self)
        self.legend_dock.setWidget(self.legend_list)
        self.legend_dock.setFeatures(QDockWidget.NoDockWidgetFeatures)
        self.addDockWidget(Qt.RightDockWidgetArea, self.legend_dock)

        self.setStatusBar(QStatusBar(self))
        self.show_config(None)
        self._load()

    def _load(self):
        task = run_task(self.store.load, self.show_id, on_done=self.show_config, on_error=self._failed)
        self._tasks.append(task)

    def _failed(self, message: str):
        logger.error("Viewer load failed: %s", message)
        QMessageBox.critical(self, "Floor plan", message)

    def show_config(self, config: FloorPlanConfig | None):
        self.config = config
        drawing = render_public(config, self.viewer, self.gate)
        self.scene.paint_drawing(drawing)

        self.legend_list.clear()
        if not drawing.placeholder:
            for entry in legend(config):
                self.legend_list.addItem(QListWidgetItem(make_swatch(QColor(entry.color)), entry.label))
        self.legend_dock.setVisible(not drawing.placeholder)
        n = len(drawing.booths)
        self.statusBar().showMessage(f"{n} booth" + ("" if n == 1 else "s") if n else "")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Public floor plan viewer")
    parser.add_argument("show_id", help="Show whose floor plan to display")
    parser.add_argument("--role", choices=(Role.GUEST, Role.VENDOR, Role.OPERATOR), default=Role.GUEST)
    parser.add_argument("--paid", action="store_true", help="Viewer is a paid vendor")
    return parser


def main(argv=None):
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    args = build_parser().parse_args(argv)
    app = QApplication(sys.argv[:1])
    win = ViewerWindow(args.show_id, Viewer(args.role, args.paid))
    win.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
