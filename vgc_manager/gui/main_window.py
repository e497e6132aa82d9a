"""
MainWindow — top-level application window.

Layout:
  ┌─ Tabs (West) ─┐ ┌─ Current tab ─────────────────────────────────────────┐
  │ Home          │ │ Home: collection dashboard (counts / owned)           │
  │ Games         │ │ Entity tabs: toolbar + search + table (EntityTab)     │
  │ Consoles      │ │                                                       │
  │ Accessories   │ │                                                       │
  └───────────────┘ └───────────────────────────────────────────────────────┘
  └─ Status bar ──────────────────────────────────────────────────────────────┘

Any add / edit / delete in an entity tab refreshes the Home dashboard.
"""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QFont, QKeySequence
from PyQt6.QtWidgets import (
    QLabel,
    QMainWindow,
    QMessageBox,
    QStatusBar,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from vgc_manager.config.settings import Settings
from vgc_manager.core.collection_controller import CollectionController
from vgc_manager.core.entities import ENTITIES
from vgc_manager.gui.entity_tab import EntityTab
from vgc_manager.gui.view_models import HomeViewModel


# ---------------------------------------------------------------------------
# Home page
# ---------------------------------------------------------------------------

class _HomePage(QWidget):
    def __init__(self, view_model: HomeViewModel, app_name: str, parent=None) -> None:
        super().__init__(parent)
        self._vm = view_model

        layout = QVBoxLayout(self)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.setSpacing(16)

        icon_lbl = QLabel("🎮")
        icon_font = QFont()
        icon_font.setPointSize(48)
        icon_lbl.setFont(icon_font)
        icon_lbl.setAlignment(Qt.AlignmentFlag.AlignCenter)

        title = QLabel(app_name)
        title_font = QFont()
        title_font.setBold(True)
        title_font.setPointSize(18)
        title.setFont(title_font)
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._counts_lbl = QLabel()
        self._counts_lbl.setStyleSheet(
            "color: #333; font-size: 14px; "
            "background: #F0F4FF; border-radius: 6px; padding: 12px 20px;"
        )
        self._counts_lbl.setAlignment(Qt.AlignmentFlag.AlignCenter)

        hint = QLabel("Use the tabs on the left to browse and edit your collection.")
        hint.setStyleSheet("color: #999; font-size: 12px;")
        hint.setAlignment(Qt.AlignmentFlag.AlignCenter)

        layout.addWidget(icon_lbl)
        layout.addWidget(title)
        layout.addWidget(self._counts_lbl)
        layout.addWidget(hint)

        view_model.subscribe(self._render)
        self._render()

    def _render(self) -> None:
        if self._vm.load_error:
            self._counts_lbl.setText(f"Could not load collection summary:\n{self._vm.load_error}")
        else:
            self._counts_lbl.setText("\n".join(self._vm.lines()))


# ---------------------------------------------------------------------------
# MainWindow
# ---------------------------------------------------------------------------

class MainWindow(QMainWindow):

    def __init__(self, controller: CollectionController, settings: Settings, parent=None) -> None:
        super().__init__(parent)
        self._controller = controller
        self._settings = settings
        self.home_view_model = HomeViewModel(controller)
        self.tabs_by_kind: dict[str, EntityTab] = {}

        self.setWindowTitle(settings.app_name)
        self.setMinimumSize(1100, 720)
        self._build_ui()
        self._build_menu()
        self.home_view_model.refresh()

    # ------------------------------------------------------------------
    # UI construction
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        self._tabs = QTabWidget()
        self._tabs.setTabPosition(QTabWidget.TabPosition.West)
        self.setCentralWidget(self._tabs)

        self._home_page = _HomePage(self.home_view_model, self._settings.app_name)
        self._tabs.addTab(self._home_page, "Home")

        for kind, descriptor in ENTITIES.items():
            tab = EntityTab(self._controller, kind)
            tab.collection_changed.connect(self.home_view_model.refresh)
            tab.status_message.connect(self._show_status)
            self._tabs.addTab(tab, descriptor.plural)
            self.tabs_by_kind[kind] = tab

        self._status_bar = QStatusBar(self)
        self.setStatusBar(self._status_bar)
        self._status_bar.showMessage("Ready.")

    def _build_menu(self) -> None:
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&File")
        act_refresh = QAction("&Refresh", self)
        act_refresh.setShortcut(QKeySequence("F5"))
        act_refresh.setStatusTip("Reload every tab from the database.")
        act_refresh.triggered.connect(self.refresh_all)
        file_menu.addAction(act_refresh)

        file_menu.addSeparator()

        act_quit = QAction("&Quit", self)
        act_quit.setShortcut(QKeySequence("Ctrl+Q"))
        act_quit.triggered.connect(self.close)
        file_menu.addAction(act_quit)

        help_menu = menu_bar.addMenu("&Help")
        act_about = QAction("&About…", self)
        act_about.triggered.connect(self._on_about)
        help_menu.addAction(act_about)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def refresh_all(self) -> None:
        for tab in self.tabs_by_kind.values():
            tab.refresh()
        self.home_view_model.refresh()
        self._show_status("Collection reloaded.")

    def _show_status(self, message: str) -> None:
        self._status_bar.showMessage(message, 5000)

    def _on_about(self) -> None:
        QMessageBox.about(
            self,
            f"About {self._settings.app_name}",
            f"<b>{self._settings.app_name}</b><br>"
            f"Version {self._settings.app_version}<br><br>"
            "Catalogue of video games, consoles and accessories.",
        )
