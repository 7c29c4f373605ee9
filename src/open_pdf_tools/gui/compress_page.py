"""Compress PDF page."""

from __future__ import annotations

from pathlib import Path

from PySide6.QtWidgets import (
    QComboBox,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from open_pdf_tools.core.file_selection import FileSelection, format_file_size
from open_pdf_tools.core.pdf_processor import CompressionResult, PDFProcessor
from open_pdf_tools.core.settings import CompressionLevel, Settings
from open_pdf_tools.gui.tool_page import ToolPage, run_operation

LEVEL_LABELS = {
    CompressionLevel.LOW: "Low - rewrite streams only",
    CompressionLevel.MEDIUM: "Medium - also pack objects into object streams",
    CompressionLevel.HIGH: "High - also recompress images and drop metadata",
}


class CompressPage(ToolPage):
    """Reduce the size of a PDF."""

    title = "Compress PDF"
    file_filter = "PDF Files (*.pdf);;All Files (*)"
    multiple_files = False

    def __init__(self, settings: Settings, parent: QWidget | None = None) -> None:
        super().__init__(settings, parent)
        self.selection = FileSelection.pdfs()
        self.last_result: CompressionResult | None = None
        self._setup_ui()
        self._refresh()

    def _setup_ui(self) -> None:
        """Set up the widget UI."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)

        file_row = QHBoxLayout()
        self.file_label = QLabel()
        self.file_label.setStyleSheet("font-weight: bold;")
        file_row.addWidget(self.file_label, stretch=1)

        self.btn_choose = QPushButton("Choose PDF File")
        self.btn_choose.clicked.connect(self._on_choose_clicked)
        file_row.addWidget(self.btn_choose)
        layout.addLayout(file_row)

        level_group = QGroupBox("Compression Level")
        level_layout = QFormLayout(level_group)

        self.level_combo = QComboBox()
        for level, label in LEVEL_LABELS.items():
            self.level_combo.addItem(label, level)
        self.level_combo.setCurrentIndex(
            list(CompressionLevel).index(self.settings.compression_level)
        )
        level_layout.addRow("Level:", self.level_combo)
        layout.addWidget(level_group)

        self.result_label = QLabel()
        self.result_label.setStyleSheet("color: #16a34a;")
        self.result_label.setWordWrap(True)
        layout.addWidget(self.result_label)

        layout.addStretch()

        button_bar = QHBoxLayout()
        button_bar.addStretch()
        self.btn_compress = QPushButton("Compress PDF")
        self.btn_compress.clicked.connect(self._on_compress_clicked)
        button_bar.addWidget(self.btn_compress)
        layout.addLayout(button_bar)

    @property
    def current_file(self) -> Path | None:
        if len(self.selection) == 0:
            return None
        return self.selection[0].path

    def add_files(self, paths: list[Path]) -> None:
        """Use the first PDF among ``paths`` as the file to compress."""
        if not paths:
            return
        candidates = FileSelection.pdfs()
        added = run_operation(
            self,
            lambda: candidates.add(paths[:1], strict=True),
            "Invalid file type",
            "Please select a PDF file.",
            validation_title="Invalid file type",
        )
        if added is None:
            return

        self.selection.clear()
        self.selection.add(candidates.paths)
        self.last_result = None
        self._refresh()

    def status_text(self) -> str:
        if self.current_file is None:
            return "Drop a PDF file here or click 'Choose PDF File'"
        return f"{self.current_file.name}: {self.selection[0].size_label}"

    def _refresh(self) -> None:
        if self.current_file is None:
            self.file_label.setText("No file selected")
        else:
            entry = self.selection[0]
            self.file_label.setText(f"{entry.name}  (original size: {entry.size_label})")

        if self.last_result is None:
            self.result_label.setText("")
        else:
            self.result_label.setText(self._result_text(self.last_result))

        self.btn_compress.setEnabled(self.current_file is not None)
        self.status_changed.emit()

    @staticmethod
    def _result_text(result: CompressionResult) -> str:
        original = format_file_size(result.original_size)
        compressed = format_file_size(result.compressed_size)
        if result.reduced:
            return (
                f"PDF compressed by {result.ratio}%. "
                f"Original: {original}, Compressed: {compressed}"
            )
        return f"This PDF is already optimized. File size: {compressed}"

    def _on_choose_clicked(self) -> None:
        files = self.choose_files("Select PDF File to Compress")
        if files:
            self.add_files(files)

    def _on_compress_clicked(self) -> None:
        """Handle Compress button click."""
        pdf_path = self.current_file
        if pdf_path is None:
            return

        output_dir = self.choose_directory("Select Output Folder")
        if output_dir is None:
            return

        level = self.level_combo.currentData()
        result = run_operation(
            self,
            lambda: PDFProcessor.compress_into(pdf_path, output_dir, level),
            "Compression failed",
            "There was an error compressing your PDF file. Please try again.",
        )
        if result is None:
            return

        self.last_result = result
        self.remember_output(result.output_path)
        self._refresh()
        title = "Success!" if result.reduced else "Compression complete"
        self.notify(
            title,
            f"{self._result_text(result)}\n\nSaved to:\n{result.output_path}",
        )
