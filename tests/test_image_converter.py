"""Tests for image to PDF conversion."""

import io

import pikepdf
import pytest
from PIL import Image

from open_pdf_tools.core.errors import ValidationError
from open_pdf_tools.core.image_converter import ImageConverter, compute_layout
from open_pdf_tools.core.pdf_processor import PDFProcessor
from open_pdf_tools.core.settings import (
    ImagePdfOptions,
    MarginSize,
    Orientation,
    PageFit,
    PageSize,
)

A4_PT = (595.276, 841.89)


def _options(**kwargs) -> ImagePdfOptions:
    kwargs.setdefault("margin", MarginSize.NONE)
    return ImagePdfOptions(**kwargs)


class TestComputeLayout:
    """Tests for compute_layout."""

    def test_large_image_scaled_to_fit(self):
        """Test a 254 mm wide image is scaled down to the A4 width."""
        layout = compute_layout(960, 480, _options(page_fit=PageFit.FIT))

        assert (layout.page_width, layout.page_height) == (210.0, 297.0)
        assert layout.image_width == pytest.approx(210.0)
        assert layout.image_height == pytest.approx(105.0)

    def test_shrink_keeps_small_image_size(self):
        layout = compute_layout(96, 96, _options(page_fit=PageFit.SHRINK))

        assert layout.image_width == pytest.approx(25.4)
        assert layout.image_height == pytest.approx(25.4)

    def test_fit_enlarges_small_image(self):
        layout = compute_layout(96, 96, _options(page_fit=PageFit.FIT))

        assert layout.image_width == pytest.approx(210.0)
        assert layout.image_height == pytest.approx(210.0)

    def test_margin_reduces_available_space(self):
        """Test a square image fills the width inside 20 mm margins, centered."""
        layout = compute_layout(
            96, 96, _options(page_fit=PageFit.FIT, margin=MarginSize.LARGE)
        )

        assert layout.image_width == pytest.approx(170.0)
        assert layout.x == pytest.approx(20.0)
        assert layout.y == pytest.approx((297.0 - 170.0) / 2)

    def test_landscape(self):
        layout = compute_layout(100, 100, _options(orientation=Orientation.LANDSCAPE))

        assert (layout.page_width, layout.page_height) == (297.0, 210.0)

    @pytest.mark.parametrize("size, expected", [
        ((400, 200), (297.0, 210.0)),
        ((200, 400), (210.0, 297.0)),
        ((300, 300), (210.0, 297.0)),
    ])
    def test_auto_orientation_follows_image(self, size, expected):
        layout = compute_layout(*size, _options(orientation=Orientation.AUTO))

        assert (layout.page_width, layout.page_height) == expected

    def test_letter(self):
        layout = compute_layout(100, 100, _options(page_size=PageSize.LETTER))

        assert (layout.page_width, layout.page_height) == (215.9, 279.4)

    def test_match_uses_image_size_plus_margin(self):
        layout = compute_layout(
            96, 192, _options(page_fit=PageFit.MATCH, margin=MarginSize.SMALL)
        )

        assert layout.page_width == pytest.approx(25.4 + 20.0)
        assert layout.page_height == pytest.approx(50.8 + 20.0)
        assert layout.image_width == pytest.approx(25.4)
        assert layout.x == pytest.approx(10.0)

    @pytest.mark.parametrize("size", [(0, 10), (10, 0), (-1, 5)])
    def test_invalid_size(self, size):
        with pytest.raises(ValueError):
            compute_layout(*size, _options())


class TestPrepareImage:
    """Tests for ImageConverter.prepare_image."""

    def test_jpeg_passes_through(self, make_image):
        path = make_image("photo.jpg")

        assert ImageConverter.prepare_image(path) == path.read_bytes()

    def test_transparent_png_flattened_on_white(self, make_image):
        path = make_image("logo.png", mode="RGBA", color=(0, 0, 0, 0))

        data = ImageConverter.prepare_image(path)

        with Image.open(io.BytesIO(data)) as image:
            assert image.mode == "RGB"
            assert image.getpixel((0, 0)) == (255, 255, 255)

    def test_gif_reencoded(self, make_image):
        path = make_image("anim.gif", mode="P", color=3)

        data = ImageConverter.prepare_image(path)

        with Image.open(io.BytesIO(data)) as image:
            assert image.format == "PNG"
            assert image.mode == "RGB"


class TestImagesToPdf:
    """Tests for ImageConverter.images_to_pdf."""

    def test_one_page_per_image(self, tmp_path, make_image):
        """Test default options give one A4 page per image, in order."""
        images = [
            make_image("1.jpg", size=(300, 200)),
            make_image("2.png", size=(100, 400)),
            make_image("3.png", mode="RGBA", color=(10, 20, 30, 100)),
        ]

        output = ImageConverter.images_to_pdf(images, tmp_path / "out.pdf")

        info = PDFProcessor.get_info(output)
        assert info.num_pages == 3
        for width, height in info.page_sizes:
            assert width == pytest.approx(A4_PT[0], abs=0.01)
            assert height == pytest.approx(A4_PT[1], abs=0.01)

        with pikepdf.open(output) as pdf:
            sizes = [
                (int(img.Width), int(img.Height))
                for page in pdf.pages
                for img in page.get_images().values()
            ]
        assert sizes == [(300, 200), (100, 400), (200, 100)]

    def test_match_page_to_image(self, tmp_path, make_image):
        """Test matched pages are the image size at 96 DPI."""
        image = make_image("wide.png", size=(200, 100))

        output = ImageConverter.images_to_pdf(
            [image],
            tmp_path / "out.pdf",
            _options(page_fit=PageFit.MATCH),
        )

        width, height = PDFProcessor.get_info(output).page_sizes[0]
        assert width == pytest.approx(150.0, abs=0.01)
        assert height == pytest.approx(75.0, abs=0.01)

    def test_tiny_image_gets_minimum_page(self, tmp_path, make_image):
        """Test a 1x1 pixel image still produces a 3 pt page."""
        image = make_image("dot.png", size=(1, 1))

        output = ImageConverter.images_to_pdf(
            [image],
            tmp_path / "out.pdf",
            _options(page_fit=PageFit.MATCH),
        )

        assert PDFProcessor.get_info(output).page_sizes == [(3.0, 3.0)]

    def test_layout_function_keeps_image_size_on_minimum_page(self):
        layout_fun = ImageConverter.layout_function(_options(page_fit=PageFit.MATCH))

        page_w, page_h, image_w, image_h = layout_fun(2, 1, (96, 96))

        assert (page_w, page_h) == (3.0, 3.0)
        assert image_w == pytest.approx(1.5)
        assert image_h == pytest.approx(0.75)

    def test_auto_orientation(self, tmp_path, make_image):
        image = make_image("wide.png", size=(400, 200))

        output = ImageConverter.images_to_pdf(
            [image],
            tmp_path / "out.pdf",
            _options(orientation=Orientation.AUTO),
        )

        width, height = PDFProcessor.get_info(output).page_sizes[0]
        assert width == pytest.approx(A4_PT[1], abs=0.01)
        assert height == pytest.approx(A4_PT[0], abs=0.01)

    def test_creates_output_directory(self, tmp_path, make_image):
        image = make_image("a.png")

        output = ImageConverter.images_to_pdf([image], tmp_path / "new" / "out.pdf")

        assert output.exists()

    def test_no_images(self, tmp_path):
        with pytest.raises(ValidationError, match="at least one image"):
            ImageConverter.images_to_pdf([], tmp_path / "out.pdf")

        assert not (tmp_path / "out.pdf").exists()


class TestThumbnail:
    """Tests for ImageConverter.get_image_thumbnail."""

    def test_thumbnail_fits_box(self, make_image):
        path = make_image("big.jpg", size=(1200, 600))

        data = ImageConverter.get_image_thumbnail(path, (120, 160))

        with Image.open(io.BytesIO(data)) as image:
            assert image.format == "PNG"
            assert image.size == (120, 60)
