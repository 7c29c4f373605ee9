"""Image to PDF conversion."""

from __future__ import annotations

import io
import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import img2pdf
from PIL import Image, ImageOps

from open_pdf_tools.core.errors import ValidationError
from open_pdf_tools.core.settings import ImagePdfOptions, Orientation, PageFit

logger = logging.getLogger(__name__)

# Millimeters per CSS pixel (96 DPI)
PX_TO_MM = 25.4 / 96

# Smallest page size PDF writers accept, in points
MIN_PAGE_PT = 3.0

# Formats and modes img2pdf embeds without re-encoding
_PASSTHROUGH_MODES = {
    "JPEG": {"RGB", "L", "CMYK"},
    "PNG": {"RGB", "L", "1", "P"},
}


@dataclass
class PageLayout:
    """Placement of one image on one page, in millimeters."""
    page_width: float
    page_height: float
    image_width: float
    image_height: float

    @property
    def x(self) -> float:
        """Left offset of the centered image."""
        return (self.page_width - self.image_width) / 2

    @property
    def y(self) -> float:
        """Bottom offset of the centered image."""
        return (self.page_height - self.image_height) / 2


def compute_layout(
    width_px: int,
    height_px: int,
    options: ImagePdfOptions,
) -> PageLayout:
    """Compute page size and image size for an image of the given pixel size."""
    if width_px <= 0 or height_px <= 0:
        raise ValueError(f"Invalid image size: {width_px}x{height_px}")

    image_width = width_px * PX_TO_MM
    image_height = height_px * PX_TO_MM
    margin = options.margin.mm

    if options.page_fit is PageFit.MATCH:
        return PageLayout(
            page_width=image_width + 2 * margin,
            page_height=image_height + 2 * margin,
            image_width=image_width,
            image_height=image_height,
        )

    page_width, page_height = options.page_size.dimensions_mm
    landscape = options.orientation is Orientation.LANDSCAPE or (
        options.orientation is Orientation.AUTO and width_px > height_px
    )
    if landscape:
        page_width, page_height = page_height, page_width

    max_width = page_width - 2 * margin
    max_height = page_height - 2 * margin
    ratio = min(max_width / image_width, max_height / image_height)
    if options.page_fit is PageFit.SHRINK:
        ratio = min(ratio, 1.0)

    return PageLayout(
        page_width=page_width,
        page_height=page_height,
        image_width=image_width * ratio,
        image_height=image_height * ratio,
    )


def _has_alpha(image: Image.Image) -> bool:
    return image.mode in ("RGBA", "LA", "PA") or "transparency" in image.info


def _flatten(image: Image.Image) -> Image.Image:
    """Convert an image to RGB on a white background."""
    image = ImageOps.exif_transpose(image)
    if _has_alpha(image):
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.split()[3])
        return background
    return image.convert("RGB")


class ImageConverter:
    """Convert images to PDF."""

    @staticmethod
    def prepare_image(image_path: Path) -> bytes:
        """Return image data img2pdf can embed.

        JPEG and PNG files in supported modes are returned as-is; anything
        else is flattened to RGB and re-encoded as PNG.
        """
        data = image_path.read_bytes()
        with Image.open(io.BytesIO(data)) as image:
            modes = _PASSTHROUGH_MODES.get(image.format, set())
            single_frame = getattr(image, "n_frames", 1) == 1
            if image.mode in modes and single_frame and not _has_alpha(image):
                return data

            logger.debug(
                "Re-encoding %s (%s, %s) for embedding",
                image_path.name, image.format, image.mode,
            )
            image.seek(0)
            flattened = _flatten(image)

        buffer = io.BytesIO()
        flattened.save(buffer, format="PNG")
        return buffer.getvalue()

    @staticmethod
    def layout_function(
        options: ImagePdfOptions,
    ) -> Callable[[int, int, tuple[float, float]], tuple[float, float, float, float]]:
        """Build an img2pdf layout function (sizes in points)."""
        def layout_fun(imgwidthpx, imgheightpx, ndpi):
            layout = compute_layout(imgwidthpx, imgheightpx, options)
            return (
                max(img2pdf.mm_to_pt(layout.page_width), MIN_PAGE_PT),
                max(img2pdf.mm_to_pt(layout.page_height), MIN_PAGE_PT),
                img2pdf.mm_to_pt(layout.image_width),
                img2pdf.mm_to_pt(layout.image_height),
            )

        return layout_fun

    @staticmethod
    def images_to_pdf(
        image_paths: list[Path],
        output_path: Path,
        options: ImagePdfOptions | None = None,
    ) -> Path:
        """Convert images to a PDF with one image per page.

        Args:
            image_paths: Images in page order
            output_path: Path for the output PDF
            options: Page size, orientation, fit and margin

        Returns:
            Path to the created PDF
        """
        if not image_paths:
            raise ValidationError("Please add at least one image to convert.")

        options = options or ImagePdfOptions()
        images = [ImageConverter.prepare_image(Path(p)) for p in image_paths]

        pdf_bytes = img2pdf.convert(
            images,
            layout_fun=ImageConverter.layout_function(options),
        )

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(pdf_bytes)

        logger.info("Converted %d image(s) to %s", len(images), output_path)
        return output_path

    @staticmethod
    def get_image_thumbnail(
        image_path: Path,
        max_size: tuple[int, int] = (120, 160),
    ) -> bytes:
        """Get a thumbnail of an image.

        Args:
            image_path: Path to image
            max_size: Maximum thumbnail size

        Returns:
            PNG image bytes
        """
        with Image.open(image_path) as image:
            image = ImageOps.exif_transpose(image)
            if image.mode not in ("RGB", "RGBA", "L", "LA"):
                image = image.convert("RGBA")
            image.thumbnail(max_size, Image.Resampling.LANCZOS)

            buffer = io.BytesIO()
            image.save(buffer, format="PNG")
            return buffer.getvalue()
