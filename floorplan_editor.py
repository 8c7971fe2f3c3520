#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations
import sys, copy, logging
from pathlib import Path
from typing import Dict, List

from PySide6.QtCore import Qt, QSizeF, QTimer
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import (
    QApplication, QMainWindow, QToolBar, QStatusBar, QFileDialog, QMessageBox,
    QDockWidget, QStyle, QInputDialog
)

from boothplan import (Booth, CalibrationError, Change, EditorSession, FloorPlanConfig,
                       FloorPlanStore, InteractionController, Mode, ViewMode,
                       default_config, render, to_svg, PUBLIC_OPTIONS)
from boothplan.hud import ScaleHUD
from boothplan.palette import BoothBank
from boothplan.properties import BoothPropertyPanel
from boothplan.scene import PlanScene, PlanView
from boothplan.settings import SettingsDialog
from boothplan.tasks import run_task

logger = logging.getLogger(__name__)

IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.webp *.bmp *.gif);;All files (*)"


class MainWindow(QMainWindow):
    def __init__(self, show_id: str, store: FloorPlanStore | None = None):
        super().__init__()
        self.show_id = show_id
        self.store = store or FloorPlanStore()
        self.resize(1280, 860)
        self._tasks: List = []

        # 1) Session / controller
        self.session = EditorSession(default_config(show_id))
        self.controller = InteractionController(self.session, confirm_delete=self._confirm_delete)

        # 2) Scene / view
        self.scene = PlanScene(self.controller, status_cb=self._status)
        self.view = PlanView(self.scene)
        self.setCentralWidget(self.view)
        self.hud = ScaleHUD(self.view)

        # 3) Property panel
        self.props_panel = BoothPropertyPanel(self.controller, self)
        self.props_dock = QDockWidget("Booth", self)
        self.props_dock.setWidget(self.props_panel)
        self.props_dock.setAllowedAreas(Qt.LeftDockWidgetArea | Qt.RightDockWidgetArea)
        self.props_dock.setMinimumWidth(280)
        self.props_dock.setMaximumWidth(560)
        self.addDockWidget(Qt.RightDockWidgetArea, self.props_dock)

        # 4) Booth bank
        self.bank = BoothBank()
        self.bank_dock = QDockWidget("Booth bank", self)
        self.bank_dock.setWidget(self.bank)
        self.bank_dock.setAllowedAreas(Qt.LeftDockWidgetArea | Qt.RightDockWidgetArea)
        self.bank_dock.setMinimumWidth(220)
        self.bank_dock.setMaximumWidth(520)
        self.addDockWidget(Qt.LeftDockWidgetArea, self.bank_dock)

        # 5) Toolbar / status
        self._build_toolbar()
        self.setStatusBar(QStatusBar(self))
        self.view.scaleChanged.connect(lambda s: self._update_status())

        self.controller.subscribe(self._on_change)
        self._update_title()
        self._update_status()
        self._set_ready(False)
        self._load()

    # ---- toolbar ----
    def _build_toolbar(self):
        tb = QToolBar("Floor plan", self)
        tb.setMovable(False)
        tb.setIconSize(QSizeF(18, 18).toSize())
        tb.setToolButtonStyle(Qt.ToolButtonTextBesideIcon)
        self.addToolBar(Qt.TopToolBarArea, tb)
        style = self.style()

        self.act_upload = QAction(style.standardIcon(QStyle.SP_DirOpenIcon), "Upload image…", self)
        self.act_upload.triggered.connect(self._upload_dialog)

        self.act_calibrate = QAction(style.standardIcon(QStyle.SP_DialogResetButton), "Calibrate", self, checkable=True)
        self.act_calibrate.toggled.connect(lambda _on: self.controller.toggle_calibration())

        self.act_grid = QAction(style.standardIcon(QStyle.SP_FileDialogListView), "Grid", self, checkable=True)
        self.act_grid.toggled.connect(lambda _on: self.controller.toggle_grid())

        self.act_settings = QAction(style.standardIcon(QStyle.SP_FileDialogDetailedView), "Settings", self)
        self.act_settings.triggered.connect(self._settings_dialog)

        self.act_preview = QAction(style.standardIcon(QStyle.SP_DesktopIcon), "Public preview", self, checkable=True)
        self.act_preview.toggled.connect(self._toggle_preview)

        self.act_export = QAction(style.standardIcon(QStyle.SP_ArrowRight), "Export SVG…", self)
        self.act_export.setShortcut(QKeySequence("Ctrl+E"))
        self.act_export.triggered.connect(self._export_svg_dialog)

        self.act_save = QAction(style.standardIcon(QStyle.SP_DialogSaveButton), "Save", self)
        self.act_save.setShortcut(QKeySequence("Ctrl+S"))
        self.act_save.triggered.connect(self._save)

        for act in (self.act_upload, self.act_calibrate, self.act_grid):
            tb.addAction(act)
        tb.addSeparator()
        for act in (self.act_preview, self.act_export, self.act_settings):
            tb.addAction(act)
        tb.addSeparator()
        tb.addAction(self.act_save)

    # ---- background work ----
    def _run(self, fn, *args, on_done=None):
        task = run_task(fn, *args, on_done=on_done, on_error=self._task_failed)
        # keep the runnable's signals alive until it reports back
        self._tasks.append(task)
        task.signals.finished.connect(lambda _r, t=task: self._forget(t))
        task.signals.failed.connect(lambda _m, t=task: self._forget(t))
        return task

    def _forget(self, task):
        if task in self._tasks:
            self._tasks.remove(task)

    def _task_failed(self, message: str):
        if self.session.save_in_flight:
            self.session.end_save(False)
            self.act_save.setEnabled(True)
        self._status(f"Error: {message}")
        QMessageBox.critical(self, "Floor plan", message)

    def _load(self):
        self._status(f"Loading {self.show_id}…")
        self._run(self.store.load, self.show_id, on_done=self._loaded)
        self._run(self.store.vendors, self.show_id, on_done=self.controller.set_vendors)

    def _set_ready(self, on: bool):
        # edits before the document arrives would be dropped by controller.load
        self._ready = on
        for w in (self.view, self.bank_dock, self.props_dock):
            w.setEnabled(on)
        for act in (self.act_upload, self.act_calibrate, self.act_grid,
                    self.act_settings, self.act_preview, self.act_save):
            act.setEnabled(on)

    def _loaded(self, config: FloorPlanConfig):
        self.controller.load(config)
        self._set_ready(True)
        self._status(f"Loaded {self.show_id}: {len(config.booths)} booths")

    def _save(self):
        if not self._ready or not self.session.begin_save():
            return
        self.act_save.setEnabled(False)
        self._status("Saving…")
        snapshot = copy.deepcopy(self.controller.config)
        self._run(self.store.save, snapshot, on_done=self._saved)

    def _saved(self, saved: FloorPlanConfig):
        cfg = self.controller.config
        cfg.created_at, cfg.updated_at = saved.created_at, saved.updated_at
        self.session.end_save(True)
        self.act_save.setEnabled(True)
        self._update_title()
        self._status("Floor plan saved")

    def _upload_dialog(self):
        path, _ = QFileDialog.getOpenFileName(self, "Upload floor plan image", "", IMAGE_FILTER)
        if not path: return
        self._status("Uploading…")
        self._run(self.store.upload_background, self.show_id, Path(path), on_done=self._uploaded)

    def _uploaded(self, result):
        ref, width, height = result
        self.controller.set_background(ref, width, height)
        self._status(f"Image uploaded ({width}×{height} px)")

    # ---- controller notifications ----
    def _on_change(self, change: str, payload: Dict):
        if change == Change.MODE_CHANGED:
            self.act_calibrate.blockSignals(True)
            self.act_calibrate.setChecked(payload["mode"] == Mode.CALIBRATE)
            self.act_calibrate.blockSignals(False)
            self._update_status()
        elif change == Change.CALIBRATION_READY:
            # let the press finish before the modal prompt
            QTimer.singleShot(0, lambda d=payload["pixel_distance"]: self._ask_distance(d))
        elif change == Change.SAVE_REQUESTED:
            self._save()
        elif change == Change.SELECTION_CHANGED:
            if payload.get("booth_id") and self.props_dock.isHidden():
                self.props_dock.show()
                self.props_dock.raise_()
        elif change == Change.LAYOUT_CHANGED:
            self._update_title()
            self._update_status()

    def _ask_distance(self, pixel_distance: float):
        if self.controller.mode != Mode.CALIBRATE:
            return
        text, ok = QInputDialog.getText(
            self, "Calibrate",
            f"The two points are {pixel_distance:.0f} px apart.\nReal distance between them (feet):")
        if not ok:
            self.controller.cancel_calibration()
            self._status("Calibration cancelled")
            return
        try:
            cal = self.controller.confirm_calibration(text)
        except CalibrationError as e:
            QMessageBox.warning(self, "Calibrate", f"{e}\nPick the two points again.")
            return
        self._status(f"Calibrated: {cal.pixels_per_foot:.2f} px/ft")

    def _confirm_delete(self, booth: Booth) -> bool:
        res = QMessageBox.question(self, "Delete booth", f"Delete booth {booth.id}?",
                                   QMessageBox.Yes | QMessageBox.No, QMessageBox.No)
        return res == QMessageBox.Yes

    # ---- actions ----
    def _settings_dialog(self):
        dlg = SettingsDialog(self.controller, self)
        if dlg.exec():
            dlg.apply()
            self._update_title()
            self._status("Settings applied")

    def _toggle_preview(self, on: bool):
        if on:
            self.controller.cancel_calibration()
            self.controller.clear_selection()
        self.scene.set_view_mode(ViewMode.VIEW if on else ViewMode.EDIT)
        for w in (self.bank_dock, self.props_dock):
            w.setEnabled(not on)
        self.act_calibrate.setEnabled(not on)
        self._update_status()

    def _export_svg_dialog(self):
        path, _ = QFileDialog.getSaveFileName(self, "Export public floor plan",
                                              f"{self.show_id}.svg", "SVG (*.svg)")
        if not path:
            return
        if not path.lower().endswith(".svg"):
            path += ".svg"
        try:
            with open(path, "w", encoding="utf-8") as f:
                f.write(to_svg(render(self.controller.config, PUBLIC_OPTIONS)))
            self._status(f"Exported {Path(path).name}")
        except OSError as e:
            logger.exception("SVG export failed")
            QMessageBox.critical(self, "Export failed", str(e))

    # ---- status ----
    def _status(self, text: str):
        self.statusBar().showMessage(text, 3000)

    def _update_title(self):
        mark = " *" if self.session.dirty else ""
        self.setWindowTitle(f"BoothPlan - {self.show_id}{mark}")

    def _update_status(self):
        ppf = self.controller.config.pixels_per_foot
        scale = f"{ppf:.2f} px/ft" if ppf else "not calibrated"
        view = "Preview" if self.scene.mode == ViewMode.VIEW else self.controller.mode.capitalize()
        zoom = int(self.view.transform().m11() * 100)
        self.statusBar().showMessage(f"Mode: {view} | Scale: {scale} | Zoom: {zoom}%")

    def resizeEvent(self, e):
        super().resizeEvent(e)
        self.hud.reposition()

    def closeEvent(self, e):
        if not self.session.dirty:
            e.accept(); return
        res = QMessageBox.question(self, "Unsaved changes",
                                   "The floor plan has unsaved changes. Close anyway?",
                                   QMessageBox.Yes | QMessageBox.No, QMessageBox.No)
        if res == QMessageBox.Yes:
            e.accept()
        else:
            e.ignore()


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = QApplication(sys.argv)
    if len(sys.argv) > 1:
        win = MainWindow(sys.argv[1])
    else:
        from start_window import StartWindow
        win = StartWindow()
    win.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
