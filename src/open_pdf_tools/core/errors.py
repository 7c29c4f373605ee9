"""Exceptions raised by the PDF tools.

A ``ValidationError`` carries a message meant for the user (wrong file type,
bad page range, too few files). Anything else escaping a tool operation is
treated as a generic failure.
"""

from __future__ import annotations


class PDFToolError(Exception):
    """Base class for errors raised by Open PDF Tools."""


class ValidationError(PDFToolError, ValueError):
    """User input that cannot be processed as given."""


class InvalidFileTypeError(ValidationError):
    """A file whose mime type the tool does not accept."""


class PageRangeError(ValidationError):
    """A malformed or out-of-bounds page range."""
