"""Main application window."""

from __future__ import annotations

from pathlib import Path

from PySide6.QtCore import QSize
from PySide6.QtGui import QAction, QCloseEvent
from PySide6.QtWidgets import (
    QMainWindow,
    QSizePolicy,
    QStatusBar,
    QTabWidget,
    QToolBar,
    QWidget,
)

from open_pdf_tools.core.file_selection import PDF_MIME_TYPE, mime_type_for
from open_pdf_tools.core.settings import Settings
from open_pdf_tools.gui.compress_page import CompressPage
from open_pdf_tools.gui.image_to_pdf_page import ImageToPdfPage
from open_pdf_tools.gui.merge_page import MergePage
from open_pdf_tools.gui.settings_dialog import SettingsDialog
from open_pdf_tools.gui.split_page import SplitPage
from open_pdf_tools.gui.tool_page import ToolPage


class MainWindow(QMainWindow):
    """Main application window with one tab per PDF tool."""

    def __init__(self, settings: Settings) -> None:
        super().__init__()
        self.settings = settings
        self._setup_ui()
        self._setup_toolbar()
        self._restore_geometry()

    def _setup_ui(self) -> None:
        """Set up the user interface."""
        self.setWindowTitle("Open PDF Tools")
        self.setMinimumSize(700, 500)

        self.image_page = ImageToPdfPage(self.settings)
        self.merge_page = MergePage(self.settings)
        self.split_page = SplitPage(self.settings)
        self.compress_page = CompressPage(self.settings)

        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)

        self.tabs = QTabWidget()
        for page in self.pages:
            self.tabs.addTab(page, page.title)
            page.status_changed.connect(self._update_status)
        self.tabs.currentChanged.connect(self._update_status)
        self.setCentralWidget(self.tabs)
        self._update_status()

    def _setup_toolbar(self) -> None:
        """Set up the toolbar."""
        toolbar = QToolBar("Main Toolbar")
        toolbar.setMovable(False)
        toolbar.setIconSize(QSize(24, 24))
        self.addToolBar(toolbar)

        self.add_action = QAction("Add Files", self)
        self.add_action.setShortcut("Ctrl+O")
        self.add_action.setStatusTip("Add files to the current tool")
        self.add_action.triggered.connect(self._on_add_files)
        toolbar.addAction(self.add_action)

        spacer = QWidget()
        spacer.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Preferred)
        toolbar.addWidget(spacer)

        self.settings_action = QAction("Settings", self)
        self.settings_action.setShortcut("Ctrl+,")
        self.settings_action.setStatusTip("Open settings")
        self.settings_action.triggered.connect(self._on_settings)
        toolbar.addAction(self.settings_action)

    @property
    def pages(self) -> list[ToolPage]:
        return [self.image_page, self.merge_page, self.split_page, self.compress_page]

    @property
    def current_page(self) -> ToolPage:
        return self.tabs.currentWidget()

    def open_files(self, paths: list[Path]) -> None:
        """Route files to a tool: PDFs to merge, images to image conversion."""
        pdfs = [p for p in paths if mime_type_for(p) == PDF_MIME_TYPE]
        others = [p for p in paths if p not in pdfs]
        if others:
            self.image_page.add_files(others)
            self.tabs.setCurrentWidget(self.image_page)
        if pdfs:
            self.merge_page.add_files(pdfs)
            self.tabs.setCurrentWidget(self.merge_page)

    def _restore_geometry(self) -> None:
        """Restore window geometry from settings."""
        geom = self.settings.window_geometry
        self.setGeometry(
            geom.get("x", 100),
            geom.get("y", 100),
            geom.get("width", 900),
            geom.get("height", 700),
        )
        if 0 <= self.settings.last_tab < self.tabs.count():
            self.tabs.setCurrentIndex(self.settings.last_tab)

    def _save_geometry(self) -> None:
        """Save window geometry to settings."""
        geom = self.geometry()
        self.settings.window_geometry = {
            "x": geom.x(),
            "y": geom.y(),
            "width": geom.width(),
            "height": geom.height(),
        }
        self.settings.last_tab = self.tabs.currentIndex()
        self.settings.save()

    def _update_status(self) -> None:
        """Update status bar."""
        self.status_bar.showMessage(self.current_page.status_text())

    # Event handlers

    def _on_add_files(self) -> None:
        """Handle add files action."""
        page = self.current_page
        files = page.choose_files("Select Files")
        if files:
            page.add_files(files)

    def _on_settings(self) -> None:
        """Handle settings action."""
        dialog = SettingsDialog(self.settings, parent=self)
        if dialog.exec():
            self.settings = dialog.get_settings()
            self.settings.save()
            for page in self.pages:
                page.settings = self.settings

    # Window events

    def closeEvent(self, event: QCloseEvent) -> None:
        """Handle window close event."""
        self._save_geometry()
        event.accept()
