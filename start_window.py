# start_window.py
from __future__ import annotations
import sys, logging
from PySide6.QtCore import Qt, QSettings
from PySide6.QtWidgets import (
    QApplication, QWidget, QVBoxLayout, QHBoxLayout, QFrame, QPushButton, QListWidget,
    QListWidgetItem, QLineEdit, QMessageBox, QLabel, QFileDialog
)

from boothplan import FloorPlanStore
from floorplan_editor import MainWindow
from floorplan_viewer import ViewerWindow

# ========= THEME =========
ACCENT           = "#3B82F6"
ACCENT_HOVER     = "#2563EB"
ACCENT_ACTIVE    = "#1D4ED8"

PANEL_BG         = "rgba(17, 24, 39, 0.85)"
PANEL_STROKE     = "rgba(148, 163, 184, 0.35)"
PANEL_RADIUS     = 14
BTN_RADIUS       = 10

FONT_FAMILY      = "Segoe UI, Inter, Roboto, sans-serif"
TEXT_MAIN        = "#E6E7EA"
TEXT_DIM         = "#9AA4B2"

RECENT_MAX       = 12
# =========================


def settings() -> QSettings:
    return QSettings("BoothPlan", "Configurator")


class StartWindow(QWidget):
    def __init__(self):
        super().__init__()
        self.setObjectName("StartRoot")
        self.setWindowTitle("BoothPlan")
        self.resize(900, 620)

        root = QVBoxLayout(self); root.setContentsMargins(28, 28, 28, 28); root.setSpacing(16)

        top = QHBoxLayout()
        title = QLabel("BoothPlan Configurator"); title.setObjectName("Brand")
        top.addWidget(title); top.addStretch(1)
        self.lbl_dir = QLabel(); self.lbl_dir.setObjectName("DataDir")
        top.addWidget(self.lbl_dir)
        self.btn_dir = QPushButton("Data folder…"); self._style_action_btn(self.btn_dir)
        top.addWidget(self.btn_dir)
        root.addLayout(top)

        # Open a show
        actions = QFrame(self); actions.setObjectName("ActionsCard")
        vact = QVBoxLayout(actions); vact.setContentsMargins(28, 24, 28, 24); vact.setSpacing(12)
        cap = QLabel("Open a show"); cap.setObjectName("CardTitle"); vact.addWidget(cap)
        self.ed_show = QLineEdit(); self.ed_show.setPlaceholderText("Show id, e.g. spring-home-show-2026")
        vact.addWidget(self.ed_show)
        row = QHBoxLayout()
        self.btn_edit = QPushButton("Configure floor plan"); self._style_action_btn(self.btn_edit)
        self.btn_view = QPushButton("Public view");          self._style_action_btn(self.btn_view)
        row.addWidget(self.btn_edit); row.addWidget(self.btn_view)
        vact.addLayout(row)
        root.addWidget(actions)

        # Recent shows
        recent = QFrame(self); recent.setObjectName("RecentCard")
        vrec = QVBoxLayout(recent); vrec.setContentsMargins(24, 20, 24, 20); vrec.setSpacing(10)
        rcap = QLabel("Recent shows"); rcap.setObjectName("RecentTitle"); vrec.addWidget(rcap)
        self.list_recent = QListWidget(); self.list_recent.setObjectName("RecentList")
        vrec.addWidget(self.list_recent, 1)
        root.addWidget(recent, 1)

        self.btn_edit.clicked.connect(lambda: self._launch(self.ed_show.text(), public=False))
        self.btn_view.clicked.connect(lambda: self._launch(self.ed_show.text(), public=True))
        self.ed_show.returnPressed.connect(lambda: self._launch(self.ed_show.text(), public=False))
        self.list_recent.itemClicked.connect(lambda it: self.ed_show.setText(it.text()))
        self.list_recent.itemDoubleClicked.connect(lambda it: self._launch(it.text(), public=False))
        self.btn_dir.clicked.connect(self._choose_dir)

        self._load_recent()
        self._update_dir_label()
        self._apply_qss()

    # ---------- STYLE ----------
    def _apply_qss(self):
        self.setStyleSheet(f"""
        QWidget#StartRoot {{
            background: #0B1220;
            color: {TEXT_MAIN};
            font-family: {FONT_FAMILY};
        }}
        #Brand {{ font-size: 18px; font-weight: 700; color: #E2E8F0; }}
        #DataDir {{ color: {TEXT_DIM}; padding-right: 8px; }}
        #ActionsCard, #RecentCard {{
            background: {PANEL_BG};
            border: 1px solid {PANEL_STROKE};
            border-radius: {PANEL_RADIUS}px;
        }}
        #CardTitle, #RecentTitle {{ color: {TEXT_MAIN}; font-weight: 700; }}
        QLineEdit {{
            background: rgba(255,255,255,0.06); color: {TEXT_MAIN};
            border: 1px solid {PANEL_STROKE}; border-radius: 8px; padding: 8px;
        }}
        QPushButton#ActionButton {{
            background: {ACCENT}; color: white;
            border: none; border-radius: {BTN_RADIUS}px;
            padding: 10px 14px; font-weight: 700;
        }}
        QPushButton#ActionButton:hover   {{ background: {ACCENT_HOVER}; }}
        QPushButton#ActionButton:pressed {{ background: {ACCENT_ACTIVE}; }}
        #RecentList {{
            background: rgba(255,255,255,0.06);
            color: {TEXT_MAIN};
            border: 1px solid {PANEL_STROKE};
            border-radius: 10px; padding: 6px;
        }}
        #RecentList::item {{ padding: 7px 10px; }}
        #RecentList::item:selected {{ background: rgba(59,130,246,0.25); border-radius: 6px; }}
        """)

    def _style_action_btn(self, b: QPushButton):
        b.setObjectName("ActionButton")
        b.setCursor(Qt.PointingHandCursor)
        b.setMinimumHeight(36)

    # ---------- DATA ----------
    def _store(self) -> FloorPlanStore:
        path = settings().value("dataDir", "", str)
        return FloorPlanStore(path or None)

    def _update_dir_label(self):
        self.lbl_dir.setText(str(self._store().root))

    def _choose_dir(self):
        path = QFileDialog.getExistingDirectory(self, "Data folder", str(self._store().root))
        if not path: return
        settings().setValue("dataDir", path)
        self._update_dir_label()

    def _load_recent(self):
        self.list_recent.clear()
        for show_id in settings().value("recent", [], list):
            self.list_recent.addItem(QListWidgetItem(show_id))

    def _push_recent(self, show_id: str):
        st = settings()
        shows = st.value("recent", [], list)
        if show_id in shows: shows.remove(show_id)
        shows.insert(0, show_id)
        st.setValue("recent", shows[:RECENT_MAX])

    # ---------- ACTIONS ----------
    def _launch(self, show_id: str, public: bool):
        show_id = (show_id or "").strip()
        if not show_id:
            QMessageBox.information(self, "BoothPlan", "Enter a show id first.")
            return
        self._push_recent(show_id)
        if public:
            self.window_ = ViewerWindow(show_id, store=self._store())
        else:
            self.window_ = MainWindow(show_id, self._store())
        self.window_.show()
        self.close()


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = QApplication(sys.argv)
    win = StartWindow()
    win.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
