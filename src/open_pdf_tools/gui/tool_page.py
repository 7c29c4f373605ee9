"""Base widget shared by the tool pages."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import TypeVar

from PySide6.QtCore import Signal
from PySide6.QtGui import QDragEnterEvent, QDropEvent
from PySide6.QtWidgets import QComboBox, QFileDialog, QMessageBox, QWidget

from open_pdf_tools.core.errors import ValidationError
from open_pdf_tools.core.settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


def enum_combo(enum_type: type[Enum], current: Enum) -> QComboBox:
    """Create a combo box listing the members of an enum."""
    combo = QComboBox()
    for member in enum_type:
        combo.addItem(member.value.title(), member)
    combo.setCurrentIndex(list(enum_type).index(current))
    return combo


def run_operation(
    parent: QWidget | None,
    operation: Callable[[], T],
    failure_title: str,
    failure_message: str,
    validation_title: str = "Invalid input",
) -> T | None:
    """Run a tool operation and report failures.

    Validation problems are shown with their own message; anything else is
    logged and reported with the generic ``failure_message``.

    Returns:
        The operation's result, or None if it failed
    """
    try:
        return operation()
    except ValidationError as e:
        QMessageBox.warning(parent, validation_title, str(e))
    except Exception:
        logger.exception("%s", failure_title)
        QMessageBox.critical(parent, failure_title, failure_message)
    return None


class ToolPage(QWidget):
    """A page hosting one PDF tool.

    Subclasses set ``title`` and ``file_filter``, and implement ``add_files``.
    Pages that work on a single file set ``multiple_files`` to False.
    """

    title = ""
    file_filter = "All Files (*)"
    multiple_files = True
    status_changed = Signal()

    def __init__(self, settings: Settings, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.settings = settings

        # Enable drag & drop from file manager
        self.setAcceptDrops(True)

    def add_files(self, paths: list[Path]) -> None:
        """Add files to the page's selection."""
        raise NotImplementedError

    def status_text(self) -> str:
        """Text for the main window's status bar."""
        return ""

    def dragEnterEvent(self, event: QDragEnterEvent) -> None:
        """Handle drag enter event for external files."""
        if event.mimeData().hasUrls():
            for url in event.mimeData().urls():
                if url.isLocalFile():
                    event.acceptProposedAction()
                    return
        event.ignore()

    def dropEvent(self, event: QDropEvent) -> None:
        """Handle drop event for external files."""
        paths = [
            Path(url.toLocalFile())
            for url in event.mimeData().urls()
            if url.isLocalFile()
        ]
        if paths:
            self.add_files(paths)
        event.acceptProposedAction()

    def choose_files(self, caption: str) -> list[Path]:
        """Show an open-file dialog."""
        start_dir = str(self.settings.get_output_directory())
        if self.multiple_files:
            files, _ = QFileDialog.getOpenFileNames(
                self, caption, start_dir, self.file_filter
            )
            return [Path(f) for f in files]

        file_path, _ = QFileDialog.getOpenFileName(
            self, caption, start_dir, self.file_filter
        )
        return [Path(file_path)] if file_path else []

    def choose_save_path(self, caption: str, filename: str) -> Path | None:
        """Ask where to save a PDF, suggesting the output directory."""
        suggested = self.settings.get_output_directory() / filename
        save_path, _ = QFileDialog.getSaveFileName(
            self, caption, str(suggested), "PDF Files (*.pdf)"
        )
        return Path(save_path) if save_path else None

    def choose_directory(self, caption: str) -> Path | None:
        """Ask for an output directory."""
        directory = QFileDialog.getExistingDirectory(
            self, caption, str(self.settings.get_output_directory())
        )
        return Path(directory) if directory else None

    def remember_output(self, path: Path) -> None:
        """Record the directory an output was written to."""
        directory = path if path.is_dir() else path.parent
        self.settings.add_recent_directory(str(directory))
        self.settings.save()

    def reject_files(self, rejected: list[Path], message: str) -> None:
        """Tell the user some files were not added."""
        if rejected:
            names = "\n".join(p.name for p in rejected)
            QMessageBox.warning(
                self,
                "Invalid files detected",
                f"{message}\n\n{names}",
            )

    def notify(self, title: str, message: str) -> None:
        """Show a success message."""
        QMessageBox.information(self, title, message)
