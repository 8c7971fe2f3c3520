from __future__ import annotations
import logging
from typing import Dict, Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QFormLayout, QLineEdit, QSpinBox, QComboBox,
    QLabel, QPushButton, QMessageBox
)

from .controller import InteractionController
from .errors import FloorPlanError
from .models import CATEGORIES, Booth, Change
from .calibration import effective_ppf

logger = logging.getLogger(__name__)


class BoothPropertyPanel(QWidget):
    """Edits the selected booth. Every change goes through the controller."""

    def __init__(self, controller: InteractionController, parent=None):
        super().__init__(parent)
        self.controller = controller
        self._current: Optional[str] = None

        self.setMinimumWidth(280)
        root = QVBoxLayout(self)
        root.setContentsMargins(8, 8, 8, 8)
        root.setSpacing(10)

        self.lbl_title = QLabel("No booth selected")
        self.lbl_title.setStyleSheet("font-weight: 600;")
        root.addWidget(self.lbl_title)

        self.frm = QWidget()
        fr = QFormLayout(self.frm)
        fr.setLabelAlignment(Qt.AlignRight)

        self.ed_id = QLineEdit()
        self.sp_w = QSpinBox(); self.sp_h = QSpinBox()
        for s in (self.sp_w, self.sp_h):
            s.setRange(1, 999); s.setSuffix(" ft")
        self.cmb_category = QComboBox()
        self.cmb_vendor = QComboBox()
        self.lbl_pos = QLabel("-")
        self.btn_delete = QPushButton("Delete booth")
        self.btn_delete.setStyleSheet("color:#b91c1c;")

        fr.addRow("Booth #:", self.ed_id)
        fr.addRow("Width:", self.sp_w)
        fr.addRow("Depth:", self.sp_h)
        fr.addRow("Category:", self.cmb_category)
        fr.addRow("Vendor:", self.cmb_vendor)
        fr.addRow("Position:", self.lbl_pos)
        fr.addRow("", self.btn_delete)
        root.addWidget(self.frm)
        root.addStretch(1)

        self.ed_id.editingFinished.connect(self._apply_id)
        self.sp_w.valueChanged.connect(self._apply_size)
        self.sp_h.valueChanged.connect(self._apply_size)
        self.cmb_category.currentIndexChanged.connect(self._apply_category)
        self.cmb_vendor.currentIndexChanged.connect(self._apply_vendor)
        self.btn_delete.clicked.connect(self._delete)

        controller.subscribe(self._on_change)
        self.load_booth(controller.session.selected)

    # ---------- API ----------
    def clear(self):
        self._current = None
        self.lbl_title.setText("No booth selected")
        self.frm.setVisible(False)

    def load_booth(self, booth: Optional[Booth]):
        if booth is None:
            self.clear()
            return
        self._current = booth.id
        self.lbl_title.setText(f"Booth {booth.id}")
        self.frm.setVisible(True)

        widgets = (self.ed_id, self.sp_w, self.sp_h, self.cmb_category, self.cmb_vendor)
        for w in widgets:
            w.blockSignals(True)

        self.ed_id.setText(booth.id)
        self.sp_w.setValue(int(booth.width_feet))
        self.sp_h.setValue(int(booth.height_feet))
        self._fill_categories(booth.category)
        self._fill_vendors(booth.vendor_id)
        ppf = effective_ppf(self.controller.config)
        self.lbl_pos.setText(f"{booth.x / ppf:.1f} ft, {booth.y / ppf:.1f} ft")

        for w in widgets:
            w.blockSignals(False)

    def _fill_categories(self, current: Optional[str]):
        c = self.cmb_category
        if c.count() == 0:
            c.addItem("None", None)
            for name in CATEGORIES:
                c.addItem(name, name)
        if current and c.findData(current) < 0:
            c.addItem(current, current)
        c.setCurrentIndex(max(0, c.findData(current)) if current else 0)

    def _fill_vendors(self, vendor_id: Optional[str]):
        c = self.cmb_vendor
        vendors = self.controller.session.vendors
        listed = [c.itemData(i) for i in range(1, c.count())]
        if c.count() == 0 or listed != [v.id for v in vendors]:
            c.clear()
            c.addItem("Unassigned", None)
            for v in vendors:
                c.addItem(v.name, v.id)
        # unknown vendor ids show as unassigned
        c.setCurrentIndex(max(0, c.findData(vendor_id)) if vendor_id else 0)

    def _on_change(self, change: str, payload: Dict):
        if change in (Change.SELECTION_CHANGED, Change.LAYOUT_CHANGED):
            self.load_booth(self.controller.session.selected)

    # ---------- apply handlers ----------
    def _guarded(self, fn, *args):
        if self._current is None: return
        try:
            fn(self._current, *args)
        except FloorPlanError as e:
            logger.info("Edit rejected: %s", e)
            QMessageBox.warning(self, "Booth", str(e))
            self.load_booth(self.controller.session.selected)

    def _apply_id(self):
        text = self.ed_id.text().strip()
        if self._current is None or text == self._current: return
        self._guarded(self.controller.rename_booth, text)

    def _apply_size(self, *_):
        self._guarded(self.controller.resize_booth, self.sp_w.value(), self.sp_h.value())

    def _apply_category(self, *_):
        self._guarded(self.controller.set_category, self.cmb_category.currentData())

    def _apply_vendor(self, *_):
        self._guarded(self.controller.assign_vendor, self.cmb_vendor.currentData())

    def _delete(self):
        if self._current is None: return
        self.controller.select(self._current)
        self.controller.delete_selected()
