from __future__ import annotations
from typing import Dict

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QWidget, QVBoxLayout, QLabel

from .models import Change, Mode


class ScaleHUD(QWidget):
    """Floating scale readout in the view's corner."""

    def __init__(self, view):
        super().__init__(view.viewport())
        self.view = view
        self.controller = view.controller
        self.setObjectName("ScaleHUD")
        self.setAttribute(Qt.WA_StyledBackground, True)
        self.setAttribute(Qt.WA_TransparentForMouseEvents, True)
        self.setStyleSheet("""
            QWidget#ScaleHUD { background: rgba(255,255,255,0.95); border:1px solid #e7e8ee; border-radius:12px; }
            QLabel { color:#374151; }
            QLabel#HudHint { color:#b91c1c; font-weight:600; }
        """)

        lay = QVBoxLayout(self)
        lay.setContentsMargins(10, 8, 10, 8)
        lay.setSpacing(2)
        self.lbl_scale = QLabel(self)
        self.lbl_booths = QLabel(self)
        self.lbl_hint = QLabel(self); self.lbl_hint.setObjectName("HudHint")
        for w in (self.lbl_scale, self.lbl_booths, self.lbl_hint):
            lay.addWidget(w)

        self.controller.subscribe(self._on_change)
        self.refresh()
        self.show()
        self.raise_()

    def refresh(self):
        cfg = self.controller.config
        ppf = cfg.pixels_per_foot
        self.lbl_scale.setText(f"Scale: {ppf:.2f} px/ft" if ppf else "Not calibrated")
        n = len(cfg.booths)
        self.lbl_booths.setText(f"{n} booth" + ("" if n == 1 else "s"))

        engine = self.controller.session.calibration
        if self.controller.mode == Mode.CALIBRATE:
            left = 2 - len(engine.points)
            self.lbl_hint.setText(f"Click {left} point{'s' if left != 1 else ''} a known distance apart"
                                  if left > 0 else "Enter the real distance")
            self.lbl_hint.setVisible(True)
        else:
            self.lbl_hint.setVisible(False)
        self.adjustSize()
        self.reposition()

    def _on_change(self, change: str, payload: Dict):
        if change != Change.BOOTH_MOVED:
            self.refresh()

    def reposition(self):
        margin = 12
        vw = self.view.viewport().width()
        vh = self.view.viewport().height()
        self.move(vw - self.width() - margin, vh - self.height() - margin)
