"""Settings dialog for Open PDF Tools."""

from __future__ import annotations

from copy import deepcopy
from enum import Enum

from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QFileDialog,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLineEdit,
    QPushButton,
    QSpinBox,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from open_pdf_tools.core.settings import (
    CompressionLevel,
    MarginSize,
    Orientation,
    PageFit,
    PageSize,
    Settings,
)
from open_pdf_tools.gui.tool_page import enum_combo


def _select(combo: QComboBox, value: Enum) -> None:
    combo.setCurrentIndex(list(type(value)).index(value))


class SettingsDialog(QDialog):
    """Dialog for application settings."""

    def __init__(self, settings: Settings, parent=None) -> None:
        super().__init__(parent)
        self._settings = deepcopy(settings)

        self.setWindowTitle("Settings")
        self.setMinimumWidth(500)
        self._setup_ui()

    def _setup_ui(self) -> None:
        """Set up the dialog UI."""
        layout = QVBoxLayout(self)

        tabs = QTabWidget()
        tabs.addTab(self._create_general_tab(), "General")
        tabs.addTab(self._create_defaults_tab(), "Defaults")
        layout.addWidget(tabs)

        button_box = QDialogButtonBox(
            QDialogButtonBox.Ok | QDialogButtonBox.Cancel | QDialogButtonBox.RestoreDefaults
        )
        button_box.accepted.connect(self.accept)
        button_box.rejected.connect(self.reject)
        button_box.button(QDialogButtonBox.RestoreDefaults).clicked.connect(
            self._restore_defaults
        )
        layout.addWidget(button_box)

    def _create_general_tab(self) -> QWidget:
        """Create the general settings tab."""
        tab = QWidget()
        layout = QVBoxLayout(tab)

        # Default directory
        dir_group = QGroupBox("Default Save Location")
        dir_layout = QVBoxLayout(dir_group)

        dir_row = QHBoxLayout()
        self.default_dir_edit = QLineEdit()
        self.default_dir_edit.setText(self._settings.default_output_dir)
        dir_row.addWidget(self.default_dir_edit)

        browse_btn = QPushButton("Browse...")
        browse_btn.clicked.connect(self._browse_default_dir)
        dir_row.addWidget(browse_btn)

        dir_layout.addLayout(dir_row)

        self.remember_dir_check = QCheckBox("Remember last used directory")
        self.remember_dir_check.setChecked(self._settings.remember_last_dir)
        dir_layout.addWidget(self.remember_dir_check)

        layout.addWidget(dir_group)

        # Recent directories
        recent_group = QGroupBox("Recent Directories")
        recent_layout = QFormLayout(recent_group)

        self.max_recent_spin = QSpinBox()
        self.max_recent_spin.setRange(1, 20)
        self.max_recent_spin.setValue(self._settings.max_recent_dirs)
        recent_layout.addRow("Maximum entries:", self.max_recent_spin)

        clear_recent_btn = QPushButton("Clear Recent Directories")
        clear_recent_btn.clicked.connect(self._clear_recent)
        recent_layout.addRow("", clear_recent_btn)

        layout.addWidget(recent_group)

        layout.addStretch()
        return tab

    def _create_defaults_tab(self) -> QWidget:
        """Create the tool defaults tab."""
        tab = QWidget()
        layout = QVBoxLayout(tab)

        image_group = QGroupBox("Image to PDF")
        image_layout = QFormLayout(image_group)

        self.page_size_combo = enum_combo(PageSize, self._settings.page_size)
        image_layout.addRow("Page size:", self.page_size_combo)

        self.orientation_combo = enum_combo(Orientation, self._settings.orientation)
        image_layout.addRow("Orientation:", self.orientation_combo)

        self.fit_combo = enum_combo(PageFit, self._settings.page_fit)
        image_layout.addRow("Image fit:", self.fit_combo)

        self.margin_combo = enum_combo(MarginSize, self._settings.margin)
        image_layout.addRow("Margin:", self.margin_combo)

        layout.addWidget(image_group)

        compress_group = QGroupBox("Compress PDF")
        compress_layout = QFormLayout(compress_group)

        self.compression_combo = enum_combo(
            CompressionLevel, self._settings.compression_level
        )
        compress_layout.addRow("Default level:", self.compression_combo)

        layout.addWidget(compress_group)

        layout.addStretch()
        return tab

    def _browse_default_dir(self) -> None:
        """Browse for default directory."""
        directory = QFileDialog.getExistingDirectory(
            self,
            "Select Default Save Directory",
            self.default_dir_edit.text(),
        )
        if directory:
            self.default_dir_edit.setText(directory)

    def _clear_recent(self) -> None:
        """Clear recent directories."""
        self._settings.recent_directories = []

    def _restore_defaults(self) -> None:
        """Restore default settings."""
        defaults = Settings(_config_path=self._settings._config_path)

        self.default_dir_edit.setText(defaults.default_output_dir)
        self.remember_dir_check.setChecked(defaults.remember_last_dir)
        self.max_recent_spin.setValue(defaults.max_recent_dirs)

        _select(self.page_size_combo, defaults.page_size)
        _select(self.orientation_combo, defaults.orientation)
        _select(self.fit_combo, defaults.page_fit)
        _select(self.margin_combo, defaults.margin)
        _select(self.compression_combo, defaults.compression_level)

    def get_settings(self) -> Settings:
        """Get the modified settings."""
        self._settings.default_output_dir = self.default_dir_edit.text()
        self._settings.remember_last_dir = self.remember_dir_check.isChecked()
        self._settings.max_recent_dirs = self.max_recent_spin.value()

        self._settings.page_size = self.page_size_combo.currentData()
        self._settings.orientation = self.orientation_combo.currentData()
        self._settings.page_fit = self.fit_combo.currentData()
        self._settings.margin = self.margin_combo.currentData()
        self._settings.compression_level = self.compression_combo.currentData()

        return self._settings
