"""Merge PDF page."""

from __future__ import annotations

from pathlib import Path

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QAbstractItemView,
    QFrame,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from open_pdf_tools.core.file_selection import FileEntry, FileSelection
from open_pdf_tools.core.pdf_processor import PDFProcessor
from open_pdf_tools.core.settings import Settings
from open_pdf_tools.gui.tool_page import ToolPage, run_operation

MERGED_FILENAME = "merged-document.pdf"


class MergePage(ToolPage):
    """Combine several PDFs into one, in list order."""

    title = "Merge PDF"
    file_filter = "PDF Files (*.pdf);;All Files (*)"

    def __init__(self, settings: Settings, parent: QWidget | None = None) -> None:
        super().__init__(settings, parent)
        self.selection = FileSelection.pdfs()
        self._setup_ui()
        self._refresh()

    def _setup_ui(self) -> None:
        """Set up the widget UI."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)

        header = QLabel("Merge PDF - files are combined from top to bottom")
        header.setStyleSheet(
            "font-size: 14px; font-weight: bold; color: #2563eb; padding: 4px;"
        )
        layout.addWidget(header)

        self.list_widget = QListWidget()
        self.list_widget.setSelectionMode(QAbstractItemView.SingleSelection)
        self.list_widget.setAlternatingRowColors(True)
        self.list_widget.setSpacing(2)
        layout.addWidget(self.list_widget)

        self.empty_label = QLabel(
            "Drop PDF files here or use 'Add PDF Files'\n\n"
            "At least 2 files are needed to merge."
        )
        self.empty_label.setAlignment(Qt.AlignCenter)
        self.empty_label.setStyleSheet("color: #666; font-size: 14px; padding: 40px;")
        layout.addWidget(self.empty_label)

        separator = QFrame()
        separator.setFrameShape(QFrame.HLine)
        layout.addWidget(separator)

        button_bar = QHBoxLayout()

        self.btn_add = QPushButton("+ Add PDF Files")
        self.btn_add.clicked.connect(self._on_add_clicked)
        button_bar.addWidget(self.btn_add)

        button_bar.addStretch()

        self.btn_up = QPushButton("Move Up")
        self.btn_up.clicked.connect(lambda: self._move_selected(-1))
        button_bar.addWidget(self.btn_up)

        self.btn_down = QPushButton("Move Down")
        self.btn_down.clicked.connect(lambda: self._move_selected(1))
        button_bar.addWidget(self.btn_down)

        self.btn_remove = QPushButton("Remove")
        self.btn_remove.clicked.connect(self._remove_selected)
        button_bar.addWidget(self.btn_remove)

        button_bar.addStretch()

        self.btn_merge = QPushButton("Merge PDFs")
        self.btn_merge.setStyleSheet(
            "QPushButton { background-color: #16a34a; color: white;"
            " padding: 8px 20px; font-weight: bold; }"
            "QPushButton:disabled { background-color: #ccc; }"
        )
        self.btn_merge.clicked.connect(self._on_merge_clicked)
        button_bar.addWidget(self.btn_merge)

        layout.addLayout(button_bar)

    def add_files(self, paths: list[Path]) -> None:
        """Add PDF files to the end of the list."""
        rejected = self.selection.add(paths)
        self.reject_files(rejected, self.selection.rejection_message)
        self._refresh()

    def status_text(self) -> str:
        count = len(self.selection)
        if count == 0:
            return "Drop PDF files here or click 'Add PDF Files'"
        return f"{count} files selected for merging"

    def _refresh(self, current_row: int = -1) -> None:
        """Rebuild the list from the selection."""
        self.list_widget.clear()
        for position, entry in enumerate(self.selection, 1):
            item = QListWidgetItem(self._item_text(position, entry))
            item.setData(Qt.UserRole, entry.id)
            self.list_widget.addItem(item)
        if current_row >= 0:
            self.list_widget.setCurrentRow(current_row)

        has_files = len(self.selection) > 0
        self.list_widget.setVisible(has_files)
        self.empty_label.setVisible(not has_files)
        self.btn_up.setEnabled(has_files)
        self.btn_down.setEnabled(has_files)
        self.btn_remove.setEnabled(has_files)
        self.btn_merge.setEnabled(len(self.selection) >= 2)
        self.status_changed.emit()

    @staticmethod
    def _item_text(position: int, entry: FileEntry) -> str:
        try:
            size = entry.size_label
        except OSError:
            size = "missing"
        return f"{position}. {entry.name}  ({size})"

    def _selected_row(self) -> int:
        return self.list_widget.currentRow()

    def _move_selected(self, direction: int) -> None:
        """Move the selected file up or down."""
        row = self._selected_row()
        if row < 0:
            return
        if direction < 0:
            moved = self.selection.move_up(row)
        else:
            moved = self.selection.move_down(row)
        self._refresh(row + direction if moved else row)

    def _remove_selected(self) -> None:
        """Remove the selected file."""
        item = self.list_widget.currentItem()
        if item is not None:
            self.selection.remove(item.data(Qt.UserRole))
            self._refresh()

    def _on_add_clicked(self) -> None:
        """Handle Add Files button click."""
        files = self.choose_files("Select PDF Files to Merge")
        if files:
            self.add_files(files)

    def _on_merge_clicked(self) -> None:
        """Handle Merge button click."""
        if len(self.selection) < 2:
            QMessageBox.warning(
                self,
                "Not enough files",
                "Please add at least 2 PDF files to merge.",
            )
            return

        save_path = self.choose_save_path("Save Merged PDF As", MERGED_FILENAME)
        if save_path is None:
            return

        output_path = run_operation(
            self,
            lambda: PDFProcessor.merge_files(self.selection.paths, save_path),
            "Merge failed",
            "There was an error merging your PDF files. Please try again.",
        )
        if output_path is not None:
            self.remember_output(output_path)
            self.notify(
                "Success!",
                f"{len(self.selection)} PDF files merged successfully.\n\n"
                f"Saved to:\n{output_path}",
            )
