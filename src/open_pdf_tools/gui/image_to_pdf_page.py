"""Image to PDF page."""

from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtCore import QSize, Qt
from PySide6.QtGui import QIcon, QPixmap
from PySide6.QtWidgets import (
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QListView,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from open_pdf_tools.core.file_selection import FileEntry, FileSelection
from open_pdf_tools.core.image_converter import ImageConverter
from open_pdf_tools.core.settings import (
    ImagePdfOptions,
    MarginSize,
    Orientation,
    PageFit,
    PageSize,
    Settings,
)
from open_pdf_tools.gui.tool_page import ToolPage, enum_combo, run_operation

logger = logging.getLogger(__name__)

CONVERTED_FILENAME = "converted-images.pdf"
THUMBNAIL_SIZE = (96, 128)


class ImageToPdfPage(ToolPage):
    """Convert images to a PDF, one image per page."""

    title = "Image to PDF"
    file_filter = (
        "Images (*.jpg *.jpeg *.png *.gif *.bmp *.tif *.tiff *.webp);;All Files (*)"
    )

    def __init__(self, settings: Settings, parent: QWidget | None = None) -> None:
        super().__init__(settings, parent)
        self.selection = FileSelection.images()
        self._setup_ui()
        self._refresh()

    def _setup_ui(self) -> None:
        """Set up the widget UI."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)

        header = QLabel("Image to PDF - one image per page, in list order")
        header.setStyleSheet(
            "font-size: 14px; font-weight: bold; color: #2563eb; padding: 4px;"
        )
        layout.addWidget(header)

        self.list_widget = QListWidget()
        self.list_widget.setViewMode(QListView.IconMode)
        self.list_widget.setIconSize(QSize(*THUMBNAIL_SIZE))
        self.list_widget.setResizeMode(QListView.Adjust)
        self.list_widget.setMovement(QListView.Static)
        self.list_widget.setSpacing(8)
        layout.addWidget(self.list_widget, stretch=1)

        options_group = QGroupBox("Page Layout")
        options_layout = QFormLayout(options_group)

        self.page_size_combo = enum_combo(PageSize, self.settings.page_size)
        options_layout.addRow("Page size:", self.page_size_combo)

        self.orientation_combo = enum_combo(Orientation, self.settings.orientation)
        options_layout.addRow("Orientation:", self.orientation_combo)

        self.fit_combo = enum_combo(PageFit, self.settings.page_fit)
        options_layout.addRow("Image fit:", self.fit_combo)

        self.margin_combo = enum_combo(MarginSize, self.settings.margin)
        options_layout.addRow("Margin:", self.margin_combo)

        layout.addWidget(options_group)

        button_bar = QHBoxLayout()

        self.btn_add = QPushButton("+ Add Images")
        self.btn_add.clicked.connect(self._on_add_clicked)
        button_bar.addWidget(self.btn_add)

        self.btn_remove = QPushButton("Remove Selected")
        self.btn_remove.clicked.connect(self._remove_selected)
        button_bar.addWidget(self.btn_remove)

        self.btn_clear = QPushButton("Clear")
        self.btn_clear.clicked.connect(self._clear)
        button_bar.addWidget(self.btn_clear)

        button_bar.addStretch()

        self.btn_convert = QPushButton("Convert to PDF")
        self.btn_convert.clicked.connect(self._on_convert_clicked)
        button_bar.addWidget(self.btn_convert)

        layout.addLayout(button_bar)

    def options(self) -> ImagePdfOptions:
        """Get the layout options currently selected."""
        return ImagePdfOptions(
            page_size=self.page_size_combo.currentData(),
            orientation=self.orientation_combo.currentData(),
            page_fit=self.fit_combo.currentData(),
            margin=self.margin_combo.currentData(),
        )

    def add_files(self, paths: list[Path]) -> None:
        """Add images to the end of the list."""
        rejected = self.selection.add(paths)
        self.reject_files(rejected, self.selection.rejection_message)
        self._refresh()

    def status_text(self) -> str:
        count = len(self.selection)
        if count == 0:
            return "Drop images here or click 'Add Images'"
        return f"{count} images, {count} pages"

    def _make_item(self, entry: FileEntry) -> QListWidgetItem:
        item = QListWidgetItem(entry.name)
        item.setData(Qt.UserRole, entry.id)
        try:
            preview = entry.load_preview(THUMBNAIL_SIZE)
        except OSError as e:
            logger.warning("No preview for %s: %s", entry.name, e)
            preview = None
        if preview:
            pixmap = QPixmap()
            pixmap.loadFromData(preview)
            item.setIcon(QIcon(pixmap))
        return item

    def _refresh(self) -> None:
        """Rebuild the list from the selection."""
        self.list_widget.clear()
        for entry in self.selection:
            self.list_widget.addItem(self._make_item(entry))

        has_files = len(self.selection) > 0
        self.btn_remove.setEnabled(has_files)
        self.btn_clear.setEnabled(has_files)
        self.btn_convert.setEnabled(has_files)
        self.status_changed.emit()

    def _remove_selected(self) -> None:
        """Remove selected images."""
        for item in self.list_widget.selectedItems():
            self.selection.remove(item.data(Qt.UserRole))
        self._refresh()

    def _clear(self) -> None:
        self.selection.clear()
        self._refresh()

    def _on_add_clicked(self) -> None:
        """Handle Add Images button click."""
        files = self.choose_files("Select Images")
        if files:
            self.add_files(files)

    def _on_convert_clicked(self) -> None:
        """Handle Convert button click."""
        save_path = self.choose_save_path("Save PDF As", CONVERTED_FILENAME)
        if save_path is None:
            return

        options = self.options()
        output_path = run_operation(
            self,
            lambda: ImageConverter.images_to_pdf(
                self.selection.paths, save_path, options
            ),
            "Conversion failed",
            "There was an error converting your images to PDF. Please try again.",
        )
        if output_path is not None:
            self.remember_output(output_path)
            self.notify(
                "Success!",
                f"PDF created with {len(self.selection)} page(s).\n\n"
                f"Saved to:\n{output_path}",
            )
