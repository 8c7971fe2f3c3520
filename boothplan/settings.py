from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional

from PySide6.QtCore import Qt, QDateTime
from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QFormLayout, QCheckBox, QDateTimeEdit, QSpinBox,
    QDialogButtonBox, QLabel
)

from .controller import InteractionController

CANVAS_DEFAULT_W = 2400
CANVAS_DEFAULT_H = 1600


class SettingsDialog(QDialog):
    """Floor plan settings: public visibility and canvas size."""

    def __init__(self, controller: InteractionController, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.setWindowTitle("Floor Plan Settings")
        self.setMinimumWidth(360)

        cfg = controller.config
        vis = cfg.visibility

        root = QVBoxLayout(self)
        frm = QFormLayout()
        frm.setLabelAlignment(Qt.AlignRight)

        self.chk_date = QCheckBox("Publish from")
        self.dt_public = QDateTimeEdit()
        self.dt_public.setCalendarPopup(True)
        self.dt_public.setDisplayFormat("yyyy-MM-dd HH:mm")
        if vis.public_visible_date:
            self.chk_date.setChecked(True)
            self.dt_public.setDateTime(vis.public_visible_date.astimezone().replace(tzinfo=None))
        else:
            self.dt_public.setDateTime(QDateTime.currentDateTime())
        self.dt_public.setEnabled(self.chk_date.isChecked())
        self.chk_date.toggled.connect(self.dt_public.setEnabled)

        hint = QLabel("Guests can see the floor plan after this date")
        hint.setStyleSheet("color:#6b7280; font-size:11px;")

        self.chk_paid = QCheckBox("Vendors must be paid to view")
        self.chk_paid.setChecked(vis.vendor_requires_paid)

        self.sp_w = QSpinBox(); self.sp_h = QSpinBox()
        for s in (self.sp_w, self.sp_h):
            s.setRange(1, 100_000); s.setSuffix(" px")
        self.sp_w.setValue(cfg.image_width or CANVAS_DEFAULT_W)
        self.sp_h.setValue(cfg.image_height or CANVAS_DEFAULT_H)

        frm.addRow(self.chk_date, self.dt_public)
        frm.addRow("", hint)
        frm.addRow("", self.chk_paid)
        frm.addRow("Canvas width:", self.sp_w)
        frm.addRow("Canvas height:", self.sp_h)
        root.addLayout(frm)

        buttons = QDialogButtonBox(QDialogButtonBox.Apply | QDialogButtonBox.Cancel, self)
        buttons.button(QDialogButtonBox.Apply).clicked.connect(self.accept)
        buttons.rejected.connect(self.reject)
        root.addWidget(buttons)

    def public_date(self) -> Optional[datetime]:
        if not self.chk_date.isChecked():
            return None
        return self.dt_public.dateTime().toPython().astimezone(timezone.utc)

    def apply(self):
        self.controller.set_visibility(self.public_date(), self.chk_paid.isChecked())
        self.controller.set_canvas_size(self.sp_w.value(), self.sp_h.value())
