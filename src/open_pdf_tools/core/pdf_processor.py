"""PDF processing functionality using pypdf and pikepdf."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import pikepdf
from pikepdf import Name, PdfImage
from pikepdf.models.image import UnsupportedImageTypeError
from PIL import Image
from pypdf import PdfReader, PdfWriter

from open_pdf_tools.core.errors import PageRangeError, ValidationError
from open_pdf_tools.core.page_range import (
    group_contiguous,
    parse_page_range,
    validate_page_span,
)
from open_pdf_tools.core.settings import CompressionLevel

logger = logging.getLogger(__name__)

# Images smaller than this (either side) are not worth recompressing
MIN_RECOMPRESS_SIZE = 64


@dataclass
class PDFInfo:
    """Information about a PDF file."""
    path: Path
    num_pages: int
    title: str | None
    author: str | None
    creator: str | None
    page_sizes: list[tuple[float, float]]  # (width, height) in points

    @property
    def summary(self) -> str:
        """Page count, after the document title when it has one."""
        pages = f"{self.num_pages} page" + ("" if self.num_pages == 1 else "s")
        return f"{self.title} ({pages})" if self.title else pages


@dataclass
class PageSelection:
    """Represents a selection of pages from a PDF."""
    pdf_path: Path
    pages: list[int]  # 0-indexed page numbers

    @classmethod
    def all_pages(cls, pdf_path: Path, num_pages: int) -> PageSelection:
        """Create selection for all pages."""
        return cls(pdf_path=pdf_path, pages=list(range(num_pages)))


class SplitMode(str, Enum):
    """Ways of splitting a PDF."""
    ALL = "all"  # one file per page
    RANGE = "range"  # one file per page in a page range
    GROUPS = "groups"  # one file per contiguous run in a page range
    EXTRACT = "extract"  # one file with pages start..end


@dataclass
class CompressionResult:
    """Outcome of a compression run."""
    output_path: Path
    original_size: int
    compressed_size: int

    @property
    def saved_bytes(self) -> int:
        return self.original_size - self.compressed_size

    @property
    def reduced(self) -> bool:
        return self.saved_bytes > 0

    @property
    def ratio(self) -> float:
        """Size reduction in percent, one decimal."""
        if not self.original_size:
            return 0.0
        return round(self.saved_bytes / self.original_size * 100, 1)


def compressed_filename(name: str, reduced: bool) -> str:
    """Name for a compressed copy of ``name``."""
    prefix = "compressed" if reduced else "optimized"
    return f"{prefix}-{name}"


def _page_filename(first: int, last: int) -> str:
    if first == last:
        return f"page-{first}.pdf"
    return f"pages-{first}-to-{last}.pdf"


class PDFProcessor:
    """PDF processing operations."""

    @staticmethod
    def get_info(pdf_path: Path) -> PDFInfo:
        """Read page count, page sizes and document info of a PDF."""
        with pikepdf.open(pdf_path) as pdf:
            docinfo = pdf.trailer.get(Name.Info, {})

            def text(key: Name) -> str | None:
                return str(docinfo.get(key, "")).strip() or None

            page_sizes = [
                (float(page.mediabox[2] - page.mediabox[0]),
                 float(page.mediabox[3] - page.mediabox[1]))
                for page in pdf.pages
            ]
            return PDFInfo(
                path=pdf_path,
                num_pages=len(pdf.pages),
                title=text(Name.Title),
                author=text(Name.Author),
                creator=text(Name.Creator),
                page_sizes=page_sizes,
            )

    @staticmethod
    def get_page_count(pdf_path: Path) -> int:
        """Get number of pages in a PDF."""
        with pikepdf.open(pdf_path) as pdf:
            return len(pdf.pages)

    @staticmethod
    def merge_pdfs(
        selections: list[PageSelection],
        output_path: Path,
        metadata: dict[str, str] | None = None,
    ) -> Path:
        """Merge multiple PDFs or page selections into one PDF.

        Args:
            selections: List of page selections to merge
            output_path: Path for the output PDF
            metadata: Optional metadata to set on output PDF

        Returns:
            Path to the created PDF
        """
        writer = PdfWriter()

        for selection in selections:
            reader = PdfReader(str(selection.pdf_path))

            for page_num in selection.pages:
                if 0 <= page_num < len(reader.pages):
                    writer.add_page(reader.pages[page_num])

        if metadata:
            writer.add_metadata(metadata)

        # Ensure output directory exists
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "wb") as f:
            writer.write(f)

        return output_path

    @staticmethod
    def merge_files(pdf_paths: list[Path], output_path: Path) -> Path:
        """Merge whole PDF files in the given order."""
        if len(pdf_paths) < 2:
            raise ValidationError("Please add at least 2 PDF files to merge.")

        selections = []
        for pdf_path in pdf_paths:
            num_pages = PDFProcessor.get_page_count(pdf_path)
            selections.append(PageSelection.all_pages(pdf_path, num_pages))

        PDFProcessor.merge_pdfs(selections, output_path)
        logger.info("Merged %d files into %s", len(pdf_paths), output_path)
        return output_path

    @staticmethod
    def extract_pages(
        pdf_path: Path,
        page_numbers: list[int],
        output_path: Path,
    ) -> Path:
        """Copy the given 0-based pages, in order, into one new PDF."""
        return PDFProcessor.merge_pdfs([PageSelection(pdf_path, page_numbers)], output_path)

    @staticmethod
    def split_pdf(
        pdf_path: Path,
        output_dir: Path,
        mode: SplitMode = SplitMode.ALL,
        page_range: str = "",
        start: int | None = None,
        end: int | None = None,
    ) -> list[Path]:
        """Split a PDF into several files.

        Args:
            pdf_path: Source PDF path
            output_dir: Directory for output files
            mode: How to split (see ``SplitMode``)
            page_range: Page range for RANGE and GROUPS modes (1-based)
            start: First page for EXTRACT mode (1-based)
            end: Last page for EXTRACT mode (1-based, inclusive)

        Returns:
            List of paths to created PDFs
        """
        mode = SplitMode(mode)
        reader = PdfReader(str(pdf_path))
        total_pages = len(reader.pages)

        if mode is SplitMode.EXTRACT:
            validate_page_span(start, end, total_pages)
            output_path = PDFProcessor.extract_pages(
                pdf_path,
                list(range(start - 1, end)),
                output_dir / f"pages-{start}-to-{end}.pdf",
            )
            logger.info("Extracted pages %d-%d of %s", start, end, pdf_path.name)
            return [output_path]

        if mode is SplitMode.ALL:
            runs = [(page, page) for page in range(1, total_pages + 1)]
        else:
            pages = parse_page_range(page_range, total_pages)
            if not pages:
                raise PageRangeError("No valid pages specified")
            if mode is SplitMode.GROUPS:
                runs = group_contiguous(pages)
            else:
                runs = [(page, page) for page in pages]

        output_dir.mkdir(parents=True, exist_ok=True)
        output_paths = []

        for first, last in runs:
            writer = PdfWriter()
            for page_num in range(first - 1, last):
                writer.add_page(reader.pages[page_num])

            output_path = output_dir / _page_filename(first, last)
            with open(output_path, "wb") as f:
                writer.write(f)
            output_paths.append(output_path)

        logger.info("Split %s into %d file(s)", pdf_path.name, len(output_paths))
        return output_paths

    @staticmethod
    def compress_bytes(
        original: bytes,
        level: CompressionLevel = CompressionLevel.MEDIUM,
    ) -> bytes:
        """Compress PDF data in memory.

        Returns the re-saved data, or ``original`` itself when re-saving does
        not make it smaller.
        """
        buffer = io.BytesIO()
        with pikepdf.open(io.BytesIO(original)) as pdf:
            if level.jpeg_quality is not None:
                count = PDFProcessor._recompress_images(
                    pdf, level.jpeg_quality, level.max_image_dimension
                )
                logger.info("Recompressed %d image(s)", count)

            if level.strip_metadata:
                if Name.Metadata in pdf.Root:
                    del pdf.Root[Name.Metadata]
                if Name.Info in pdf.trailer:
                    del pdf.trailer[Name.Info]

            if level.use_object_streams:
                object_stream_mode = pikepdf.ObjectStreamMode.generate
            else:
                object_stream_mode = pikepdf.ObjectStreamMode.preserve

            pdf.save(
                buffer,
                compress_streams=True,
                object_stream_mode=object_stream_mode,
                recompress_flate=level.recompress_flate,
            )

        compressed = buffer.getvalue()
        logger.info(
            "PDF size: %d bytes, after compression: %d bytes",
            len(original), len(compressed),
        )
        if len(compressed) >= len(original):
            return original
        return compressed

    @staticmethod
    def compress_pdf(
        pdf_path: Path,
        output_path: Path,
        level: CompressionLevel = CompressionLevel.MEDIUM,
    ) -> CompressionResult:
        """Compress a PDF file.

        The output is never larger than the input: when re-saving does not
        help, the original bytes are written instead.

        Args:
            pdf_path: Source PDF path
            output_path: Output path
            level: Compression preset

        Returns:
            Sizes before and after
        """
        original = pdf_path.read_bytes()
        compressed = PDFProcessor.compress_bytes(original, level)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(compressed)

        return CompressionResult(
            output_path=output_path,
            original_size=len(original),
            compressed_size=len(compressed),
        )

    @staticmethod
    def compress_into(
        pdf_path: Path,
        output_dir: Path,
        level: CompressionLevel = CompressionLevel.MEDIUM,
    ) -> CompressionResult:
        """Compress a PDF into a directory, naming the output by outcome.

        The output is called ``compressed-<name>`` when the size went down
        and ``optimized-<name>`` otherwise. Only that one file is written.
        """
        original = pdf_path.read_bytes()
        compressed = PDFProcessor.compress_bytes(original, level)

        reduced = len(compressed) < len(original)
        output_path = output_dir / compressed_filename(pdf_path.name, reduced)
        output_dir.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(compressed)

        return CompressionResult(
            output_path=output_path,
            original_size=len(original),
            compressed_size=len(compressed),
        )

    @staticmethod
    def _recompress_images(
        pdf: pikepdf.Pdf,
        quality: int,
        max_dimension: int | None,
    ) -> int:
        """Re-encode eligible images as JPEG in place.

        Returns:
            Number of images replaced
        """
        seen = set()
        replaced = 0

        for page in pdf.pages:
            for name, raw_image in page.get_images().items():
                if raw_image.objgen in seen:
                    continue
                seen.add(raw_image.objgen)

                if Name.SMask in raw_image or Name.Mask in raw_image:
                    continue
                if raw_image.get(Name.ImageMask, False):
                    continue

                try:
                    pdf_image = PdfImage(raw_image)
                    if pdf_image.bits_per_component != 8:
                        continue
                    if min(pdf_image.width, pdf_image.height) < MIN_RECOMPRESS_SIZE:
                        continue
                    image = pdf_image.as_pil_image()
                except (UnsupportedImageTypeError, NotImplementedError, pikepdf.PdfError) as e:
                    logger.debug("Skipping image %s: %s", name, e)
                    continue

                if image.mode not in ("RGB", "L"):
                    continue

                if max_dimension:
                    image.thumbnail((max_dimension, max_dimension), Image.Resampling.LANCZOS)

                jpeg = io.BytesIO()
                image.save(jpeg, format="JPEG", quality=quality, optimize=True)
                data = jpeg.getvalue()

                if len(data) >= len(raw_image.read_raw_bytes()):
                    continue

                raw_image.write(data, filter=Name.DCTDecode)
                raw_image.Width = image.width
                raw_image.Height = image.height
                raw_image.BitsPerComponent = 8
                raw_image.ColorSpace = (
                    Name.DeviceGray if image.mode == "L" else Name.DeviceRGB
                )
                for key in (Name.DecodeParms, Name.Decode):
                    if key in raw_image:
                        del raw_image[key]
                replaced += 1

        return replaced
