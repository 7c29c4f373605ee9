"""Shared fixtures for the core tests."""

from pathlib import Path

import pytest
from PIL import Image
from pypdf import PdfWriter


@pytest.fixture
def make_pdf(tmp_path):
    """Create a PDF with one blank page per width given.

    Page widths make the pages recognizable after merging or splitting.
    """
    def _make_pdf(name: str, widths: list[int], height: int = 800) -> Path:
        writer = PdfWriter()
        for width in widths:
            writer.add_blank_page(width=width, height=height)
        path = tmp_path / name
        with open(path, "wb") as f:
            writer.write(f)
        return path

    return _make_pdf


@pytest.fixture
def make_image(tmp_path):
    """Create an image file of a given size, mode and format."""
    def _make_image(
        name: str,
        size: tuple[int, int] = (200, 100),
        mode: str = "RGB",
        color=(200, 30, 30),
    ) -> Path:
        path = tmp_path / name
        Image.new(mode, size, color).save(path)
        return path

    return _make_image


@pytest.fixture
def noise_image_pdf(tmp_path):
    """A PDF holding one large, noisy, high quality JPEG."""
    from open_pdf_tools.core.image_converter import ImageConverter
    from open_pdf_tools.core.settings import ImagePdfOptions, MarginSize, PageFit

    size = (800, 600)
    bands = [Image.effect_noise(size, 80) for _ in range(3)]
    image_path = tmp_path / "noise.jpg"
    Image.merge("RGB", bands).save(image_path, quality=95)

    return ImageConverter.images_to_pdf(
        [image_path],
        tmp_path / "noise.pdf",
        ImagePdfOptions(page_fit=PageFit.MATCH, margin=MarginSize.NONE),
    )
