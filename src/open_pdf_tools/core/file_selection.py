"""Ordered file selections used by the tool pages."""

from __future__ import annotations

import mimetypes
import uuid
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from open_pdf_tools.core.errors import InvalidFileTypeError
from open_pdf_tools.core.image_converter import ImageConverter

PDF_MIME_TYPE = "application/pdf"


def mime_type_for(path: Path) -> str:
    """Guess the mime type of a file from its name."""
    mime_type, _ = mimetypes.guess_type(path.name)
    return mime_type or "application/octet-stream"


def format_file_size(size: int) -> str:
    """Format a byte count for display (e.g. '1.5 KB')."""
    if size == 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    value = float(size)
    i = 0
    while value >= 1024 and i < len(units) - 1:
        value /= 1024
        i += 1
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {units[i]}"


def _new_id() -> str:
    return uuid.uuid4().hex[:9]


@dataclass
class FileEntry:
    """A file picked by the user."""
    path: Path
    mime_type: str
    id: str = field(default_factory=_new_id)
    preview: bytes | None = field(default=None, repr=False)

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def size(self) -> int:
        return self.path.stat().st_size

    @property
    def size_label(self) -> str:
        return format_file_size(self.size)

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")

    def load_preview(self, max_size: tuple[int, int] = (120, 160)) -> bytes | None:
        """Create (once) and return a PNG thumbnail for image entries."""
        if self.preview is None and self.is_image:
            self.preview = ImageConverter.get_image_thumbnail(self.path, max_size)
        return self.preview

    def release_preview(self) -> None:
        """Drop the cached thumbnail."""
        self.preview = None


class FileSelection:
    """An ordered list of files filtered by mime type.

    The order of the entries is the order used for output.
    """

    def __init__(
        self,
        accepts: Callable[[str], bool],
        rejection_message: str = "Unsupported file type.",
    ) -> None:
        self._accepts = accepts
        self.rejection_message = rejection_message
        self._entries: list[FileEntry] = []

    @classmethod
    def images(cls) -> FileSelection:
        """Create a selection that only takes image files."""
        return cls(
            lambda mime_type: mime_type.startswith("image/"),
            "Only image files (JPG, PNG, GIF, etc.) are allowed.",
        )

    @classmethod
    def pdfs(cls) -> FileSelection:
        """Create a selection that only takes PDF files."""
        return cls(
            lambda mime_type: mime_type == PDF_MIME_TYPE,
            "Only PDF files are allowed.",
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[FileEntry]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> FileEntry:
        return self._entries[index]

    @property
    def entries(self) -> list[FileEntry]:
        return list(self._entries)

    @property
    def paths(self) -> list[Path]:
        return [entry.path for entry in self._entries]

    def accepts(self, path: Path) -> bool:
        """Check whether a file would be accepted."""
        return self._accepts(mime_type_for(path))

    def add(self, paths: Iterable[Path], strict: bool = False) -> list[Path]:
        """Append accepted files.

        Args:
            paths: Files to add, in order
            strict: Raise instead of skipping files of the wrong type

        Returns:
            The files that were rejected because of their type

        Raises:
            InvalidFileTypeError: In strict mode, if any file is rejected
        """
        paths = [Path(p) for p in paths]
        if strict:
            rejected = [p for p in paths if not self.accepts(p)]
            if rejected:
                names = ", ".join(p.name for p in rejected)
                raise InvalidFileTypeError(f"{self.rejection_message} ({names})")

        rejected = []
        taken = {entry.id for entry in self._entries}
        for path in paths:
            mime_type = mime_type_for(path)
            if not self._accepts(mime_type):
                rejected.append(path)
                continue

            entry = FileEntry(path=path, mime_type=mime_type)
            while entry.id in taken:
                entry.id = _new_id()
            taken.add(entry.id)
            self._entries.append(entry)
        return rejected

    def get(self, entry_id: str) -> FileEntry | None:
        """Find an entry by id."""
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def index_of(self, entry_id: str) -> int:
        """Return the position of an entry, or -1."""
        for i, entry in enumerate(self._entries):
            if entry.id == entry_id:
                return i
        return -1

    def remove(self, entry_id: str) -> bool:
        """Remove an entry and release its preview."""
        index = self.index_of(entry_id)
        if index < 0:
            return False
        entry = self._entries.pop(index)
        entry.release_preview()
        return True

    def move_up(self, index: int) -> bool:
        """Swap an entry with the one before it."""
        if index <= 0 or index >= len(self._entries):
            return False
        entries = self._entries
        entries[index - 1], entries[index] = entries[index], entries[index - 1]
        return True

    def move_down(self, index: int) -> bool:
        """Swap an entry with the one after it."""
        if index < 0 or index >= len(self._entries) - 1:
            return False
        entries = self._entries
        entries[index], entries[index + 1] = entries[index + 1], entries[index]
        return True

    def clear(self) -> None:
        """Remove all entries, releasing their previews."""
        for entry in self._entries:
            entry.release_preview()
        self._entries.clear()
