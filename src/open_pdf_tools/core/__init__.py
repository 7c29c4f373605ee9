"""Core functionality for PDF processing and settings."""

from open_pdf_tools.core.errors import (
    InvalidFileTypeError,
    PageRangeError,
    PDFToolError,
    ValidationError,
)
from open_pdf_tools.core.file_selection import FileEntry, FileSelection
from open_pdf_tools.core.image_converter import ImageConverter
from open_pdf_tools.core.pdf_processor import PDFProcessor, SplitMode
from open_pdf_tools.core.settings import Settings

__all__ = [
    "Settings",
    "PDFProcessor",
    "SplitMode",
    "ImageConverter",
    "FileEntry",
    "FileSelection",
    "PDFToolError",
    "ValidationError",
    "InvalidFileTypeError",
    "PageRangeError",
]
