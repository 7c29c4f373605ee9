"""Page range parsing (e.g. '1-3, 5, 7-9')."""

from __future__ import annotations

from open_pdf_tools.core.errors import PageRangeError


def _to_int(value: str) -> int | None:
    value = value.strip()
    if not value.isdecimal():
        return None
    return int(value)


def parse_page_range(page_range: str, total_pages: int) -> list[int]:
    """Parse a page range string into sorted, unique 1-based page numbers.

    Args:
        page_range: Comma-separated page numbers and inclusive ranges
        total_pages: Number of pages in the document

    Returns:
        Sorted list of page numbers (empty for blank input)

    Raises:
        PageRangeError: If a part is malformed or out of bounds
    """
    if not page_range.strip():
        return []

    pages: set[int] = set()
    for part in page_range.split(","):
        part = part.strip()

        if "-" in part:
            start_text, end_text = part.split("-", 1)
            start = _to_int(start_text)
            end = _to_int(end_text)
            if (
                start is None
                or end is None
                or start < 1
                or end > total_pages
                or start > end
            ):
                raise PageRangeError(f"Invalid range: {part}")
            pages.update(range(start, end + 1))
        else:
            page = _to_int(part)
            if page is None or page < 1 or page > total_pages:
                raise PageRangeError(f"Invalid page number: {part}")
            pages.add(page)

    return sorted(pages)


def group_contiguous(pages: list[int]) -> list[tuple[int, int]]:
    """Collapse sorted page numbers into inclusive (start, end) runs."""
    runs: list[tuple[int, int]] = []
    for page in pages:
        if runs and page == runs[-1][1] + 1:
            runs[-1] = (runs[-1][0], page)
        else:
            runs.append((page, page))
    return runs


def validate_page_span(start: int | None, end: int | None, total_pages: int) -> None:
    """Check a start/end page pair (1-based, inclusive) against a document."""
    if start is None or end is None or start < 1 or end > total_pages or start > end:
        raise PageRangeError(f"Invalid range: {start}-{end}")
