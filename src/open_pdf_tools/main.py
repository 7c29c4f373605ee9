"""Main entry point for Open PDF Tools."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QApplication

from open_pdf_tools.core.settings import Settings
from open_pdf_tools.gui.main_window import MainWindow


def setup_logging(verbose: bool = False) -> None:
    """Configure console logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def main() -> int:
    """Main application entry point."""
    setup_logging("--verbose" in sys.argv)

    # Enable high DPI scaling
    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication(sys.argv)
    app.setApplicationName("Open PDF Tools")
    app.setOrganizationName("OpenAEC")
    app.setOrganizationDomain("openaec.org")
    app.setStyle("Fusion")

    settings = Settings.load()
    window = MainWindow(settings)

    # Handle command line arguments (files to open)
    paths = [
        Path(arg) for arg in sys.argv[1:]
        if not arg.startswith("-") and Path(arg).is_file()
    ]
    if paths:
        window.open_files(paths)

    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
