"""Split PDF page."""

from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtWidgets import (
    QButtonGroup,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QRadioButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from open_pdf_tools.core.file_selection import FileSelection
from open_pdf_tools.core.pdf_processor import PDFInfo, PDFProcessor, SplitMode
from open_pdf_tools.core.settings import Settings
from open_pdf_tools.gui.tool_page import ToolPage, run_operation

logger = logging.getLogger(__name__)

MODE_LABELS = {
    SplitMode.ALL: "Every page as a separate file",
    SplitMode.RANGE: "Selected pages as separate files",
    SplitMode.GROUPS: "Selected page ranges as separate files",
    SplitMode.EXTRACT: "Extract a range into one file",
}


class SplitPage(ToolPage):
    """Split a PDF into separate files."""

    title = "Split PDF"
    file_filter = "PDF Files (*.pdf);;All Files (*)"
    multiple_files = False

    def __init__(self, settings: Settings, parent: QWidget | None = None) -> None:
        super().__init__(settings, parent)
        self.selection = FileSelection.pdfs()
        self.info: PDFInfo | None = None
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

        self.pages_label = QLabel()
        self.pages_label.setStyleSheet("color: #666;")
        layout.addWidget(self.pages_label)

        mode_group = QGroupBox("Split Mode")
        mode_layout = QVBoxLayout(mode_group)
        self.mode_buttons = QButtonGroup(self)
        self.mode_radios: dict[SplitMode, QRadioButton] = {}
        for mode, label in MODE_LABELS.items():
            radio = QRadioButton(label)
            radio.toggled.connect(self._update_mode_fields)
            self.mode_buttons.addButton(radio)
            self.mode_radios[mode] = radio
            mode_layout.addWidget(radio)
        layout.addWidget(mode_group)

        fields_group = QGroupBox("Pages")
        fields_layout = QFormLayout(fields_group)

        self.range_edit = QLineEdit()
        self.range_edit.setPlaceholderText("e.g. 1-3, 5, 7-9")
        fields_layout.addRow("Page range:", self.range_edit)

        self.start_spin = QSpinBox()
        self.start_spin.setMinimum(1)
        fields_layout.addRow("From page:", self.start_spin)

        self.end_spin = QSpinBox()
        self.end_spin.setMinimum(1)
        fields_layout.addRow("To page:", self.end_spin)

        layout.addWidget(fields_group)
        layout.addStretch()

        button_bar = QHBoxLayout()
        button_bar.addStretch()
        self.btn_split = QPushButton("Split PDF")
        self.btn_split.clicked.connect(self._on_split_clicked)
        button_bar.addWidget(self.btn_split)
        layout.addLayout(button_bar)

        self.mode_radios[SplitMode.ALL].setChecked(True)
        self._update_mode_fields()

    @property
    def page_count(self) -> int:
        """Pages in the current file, 0 when it could not be read."""
        return self.info.num_pages if self.info else 0

    @property
    def current_file(self) -> Path | None:
        if len(self.selection) == 0:
            return None
        return self.selection[0].path

    def mode(self) -> SplitMode:
        """Get the selected split mode."""
        for mode, radio in self.mode_radios.items():
            if radio.isChecked():
                return mode
        return SplitMode.ALL

    def add_files(self, paths: list[Path]) -> None:
        """Use the first PDF among ``paths`` as the file to split."""
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
        try:
            self.info = PDFProcessor.get_info(self.current_file)
        except Exception:
            logger.exception("Error loading PDF %s", self.current_file)
            self.info = None
        self._refresh()

    def status_text(self) -> str:
        if self.current_file is None:
            return "Drop a PDF file here or click 'Choose PDF File'"
        return f"{self.current_file.name}: {self.page_count} pages"

    def _refresh(self) -> None:
        if self.current_file is None:
            self.file_label.setText("No file selected")
            self.pages_label.setText("")
        else:
            self.file_label.setText(self.current_file.name)
            if self.info is not None:
                self.pages_label.setText(self.info.summary)
            else:
                self.pages_label.setText("Page count unavailable")

        maximum = max(self.page_count, 1)
        self.start_spin.setMaximum(maximum)
        self.end_spin.setMaximum(maximum)
        self.end_spin.setValue(maximum)

        self.btn_split.setEnabled(self.current_file is not None)
        self.status_changed.emit()

    def _update_mode_fields(self) -> None:
        mode = self.mode()
        uses_range = mode in (SplitMode.RANGE, SplitMode.GROUPS)
        self.range_edit.setEnabled(uses_range)
        self.start_spin.setEnabled(mode is SplitMode.EXTRACT)
        self.end_spin.setEnabled(mode is SplitMode.EXTRACT)

    def _on_choose_clicked(self) -> None:
        files = self.choose_files("Select PDF File to Split")
        if files:
            self.add_files(files)

    def _on_split_clicked(self) -> None:
        """Handle Split button click."""
        pdf_path = self.current_file
        if pdf_path is None:
            return

        output_dir = self.choose_directory("Select Output Folder")
        if output_dir is None:
            return

        mode = self.mode()
        page_range = self.range_edit.text()
        start = self.start_spin.value()
        end = self.end_spin.value()

        output_paths = run_operation(
            self,
            lambda: PDFProcessor.split_pdf(
                pdf_path,
                output_dir,
                mode=mode,
                page_range=page_range,
                start=start,
                end=end,
            ),
            "Split failed",
            "There was an error splitting your PDF file. Please try again.",
            validation_title="Invalid page range",
        )
        if output_paths is None:
            return

        self.remember_output(output_dir)
        if mode is SplitMode.EXTRACT:
            message = f"Pages {start} to {end} extracted."
        else:
            message = f"PDF split into {len(output_paths)} separate file(s)."
        self.notify("Success!", f"{message}\n\nSaved to:\n{output_dir}")
