"""Tests for PDF processing."""

import io

import pikepdf
import pytest
from pikepdf import Name
from PIL import Image
from pypdf import PdfReader

from open_pdf_tools.core.errors import PageRangeError, ValidationError
from open_pdf_tools.core.pdf_processor import (
    CompressionResult,
    PageSelection,
    PDFProcessor,
    SplitMode,
    compressed_filename,
)
from open_pdf_tools.core.settings import CompressionLevel


def _page_widths(path):
    reader = PdfReader(str(path))
    return [int(page.mediabox.width) for page in reader.pages]


def _image_stream(pdf, size=(400, 300), mode="RGB", jpeg_quality=None):
    """A noisy image XObject, stored raw or as JPEG at ``jpeg_quality``."""
    if mode == "RGB":
        image = Image.merge("RGB", [Image.effect_noise(size, 80) for _ in range(3)])
    else:
        image = Image.effect_noise(size, 80).convert(mode)

    if jpeg_quality is None:
        stream = pikepdf.Stream(pdf, image.tobytes())
    else:
        buffer = io.BytesIO()
        image.save(buffer, format="JPEG", quality=jpeg_quality)
        stream = pikepdf.Stream(pdf, buffer.getvalue())
        stream[Name.Filter] = Name.DCTDecode
    stream[Name.Type] = Name.XObject
    stream[Name.Subtype] = Name.Image
    stream[Name.Width] = size[0]
    stream[Name.Height] = size[1]
    stream[Name.ColorSpace] = Name.DeviceRGB if mode == "RGB" else Name.DeviceGray
    stream[Name.BitsPerComponent] = 1 if mode == "1" else 8
    return stream


def _add_image_page(pdf, images):
    """Add a page drawing each image in ``images`` (name -> stream)."""
    pdf.add_blank_page(page_size=(400, 400))
    page = pdf.pages[-1]
    page.obj[Name.Resources] = pikepdf.Dictionary(
        XObject=pikepdf.Dictionary({f"/{name}": image for name, image in images.items()})
    )
    content = b" ".join(
        b"q 100 0 0 100 0 0 cm /%s Do Q" % name.encode() for name in images
    )
    page.obj[Name.Contents] = pdf.make_stream(content)
    return page


def _recompress(pdf):
    return PDFProcessor._recompress_images(
        pdf,
        CompressionLevel.HIGH.jpeg_quality,
        CompressionLevel.HIGH.max_image_dimension,
    )


class TestInfo:
    """Tests for PDF inspection."""

    def test_get_info(self, make_pdf):
        path = make_pdf("doc.pdf", [300, 400])

        info = PDFProcessor.get_info(path)

        assert info.num_pages == 2
        assert info.page_sizes == [(300.0, 800.0), (400.0, 800.0)]

    def test_get_page_count(self, make_pdf):
        assert PDFProcessor.get_page_count(make_pdf("doc.pdf", [300] * 5)) == 5

    def test_get_info_title(self, tmp_path):
        """Test document info is read and summarized."""
        path = tmp_path / "titled.pdf"
        with pikepdf.new() as pdf:
            pdf.add_blank_page()
            pdf.trailer.Info = pdf.make_indirect(
                pikepdf.Dictionary(Title=pikepdf.String("Annual Report"))
            )
            pdf.save(path)

        info = PDFProcessor.get_info(path)

        assert info.title == "Annual Report"
        assert info.author is None
        assert info.summary == "Annual Report (1 page)"

    def test_summary_without_title(self, make_pdf):
        info = PDFProcessor.get_info(make_pdf("doc.pdf", [300, 400]))

        assert info.summary == "2 pages"


class TestMerge:
    """Tests for merging."""

    def test_merge_keeps_order(self, tmp_path, make_pdf):
        """Test pages appear file by file, in list order."""
        first = make_pdf("first.pdf", [301, 302])
        second = make_pdf("second.pdf", [401])
        third = make_pdf("third.pdf", [501, 502])

        output = PDFProcessor.merge_files(
            [third, first, second], tmp_path / "merged-document.pdf"
        )

        assert _page_widths(output) == [501, 502, 301, 302, 401]

    def test_merge_needs_two_files(self, tmp_path, make_pdf):
        only = make_pdf("only.pdf", [300])

        with pytest.raises(ValidationError, match="at least 2 PDF files"):
            PDFProcessor.merge_files([only], tmp_path / "out.pdf")

    def test_merge_selections(self, tmp_path, make_pdf):
        path = make_pdf("doc.pdf", [301, 302, 303])

        output = PDFProcessor.merge_pdfs(
            [PageSelection(path, [2, 0]), PageSelection(path, [1, 7])],
            tmp_path / "out.pdf",
            metadata={"/Title": "Merged"},
        )

        assert _page_widths(output) == [303, 301, 302]
        assert PDFProcessor.get_info(output).title == "Merged"

    def test_extract_pages(self, tmp_path, make_pdf):
        path = make_pdf("doc.pdf", [301, 302, 303])

        output = PDFProcessor.extract_pages(path, [1, 2], tmp_path / "out.pdf")

        assert _page_widths(output) == [302, 303]


class TestSplit:
    """Tests for splitting."""

    @pytest.fixture
    def six_pages(self, make_pdf):
        return make_pdf("doc.pdf", [301, 302, 303, 304, 305, 306])

    def test_split_all(self, tmp_path, six_pages):
        outputs = PDFProcessor.split_pdf(six_pages, tmp_path / "out")

        assert [p.name for p in outputs] == [f"page-{i}.pdf" for i in range(1, 7)]
        assert _page_widths(outputs[3]) == [304]

    def test_split_range(self, tmp_path, six_pages):
        """Test range mode writes one file per selected page."""
        outputs = PDFProcessor.split_pdf(
            six_pages, tmp_path / "out", SplitMode.RANGE, page_range="1-3,5"
        )

        assert [p.name for p in outputs] == [
            "page-1.pdf", "page-2.pdf", "page-3.pdf", "page-5.pdf",
        ]
        assert _page_widths(outputs[-1]) == [305]

    def test_split_groups(self, tmp_path, six_pages):
        """Test group mode writes one file per contiguous run."""
        outputs = PDFProcessor.split_pdf(
            six_pages, tmp_path / "out", SplitMode.GROUPS, page_range="5, 1-3"
        )

        assert [p.name for p in outputs] == ["pages-1-to-3.pdf", "page-5.pdf"]
        assert _page_widths(outputs[0]) == [301, 302, 303]

    def test_split_extract(self, tmp_path, six_pages):
        outputs = PDFProcessor.split_pdf(
            six_pages, tmp_path / "out", SplitMode.EXTRACT, start=2, end=4
        )

        assert [p.name for p in outputs] == ["pages-2-to-4.pdf"]
        assert _page_widths(outputs[0]) == [302, 303, 304]

    def test_extract_single_page_keeps_range_name(self, tmp_path, six_pages):
        """Test extracting one page still uses the start-to-end name."""
        outputs = PDFProcessor.split_pdf(
            six_pages, tmp_path / "out", SplitMode.EXTRACT, start=2, end=2
        )

        assert [p.name for p in outputs] == ["pages-2-to-2.pdf"]
        assert _page_widths(outputs[0]) == [302]

    def test_mode_given_as_string(self, tmp_path, six_pages):
        outputs = PDFProcessor.split_pdf(
            six_pages, tmp_path / "out", "extract", start=6, end=6
        )

        assert [p.name for p in outputs] == ["pages-6-to-6.pdf"]

    @pytest.mark.parametrize("page_range", ["7", "3-1", "", "  "])
    def test_invalid_range(self, tmp_path, six_pages, page_range):
        with pytest.raises(PageRangeError):
            PDFProcessor.split_pdf(
                six_pages, tmp_path / "out", SplitMode.RANGE, page_range=page_range
            )

        assert not (tmp_path / "out").exists()

    @pytest.mark.parametrize("start, end", [(0, 2), (3, 7), (4, 2), (None, None)])
    def test_invalid_extract(self, tmp_path, six_pages, start, end):
        with pytest.raises(PageRangeError, match="Invalid range"):
            PDFProcessor.split_pdf(
                six_pages, tmp_path / "out", SplitMode.EXTRACT, start=start, end=end
            )


class TestCompress:
    """Tests for compression."""

    @pytest.mark.parametrize("level", list(CompressionLevel))
    def test_never_larger(self, tmp_path, make_pdf, level):
        path = make_pdf("doc.pdf", [300, 400, 500])

        result = PDFProcessor.compress_pdf(path, tmp_path / "out.pdf", level)

        assert result.compressed_size <= result.original_size
        assert result.output_path.stat().st_size == result.compressed_size
        assert PDFProcessor.get_page_count(result.output_path) == 3

    def test_high_recompresses_images(self, tmp_path, noise_image_pdf):
        """Test the high preset re-encodes a large JPEG at lower quality."""
        result = PDFProcessor.compress_pdf(
            noise_image_pdf, tmp_path / "out.pdf", CompressionLevel.HIGH
        )

        assert result.reduced
        assert result.ratio > 0
        with pikepdf.open(result.output_path) as pdf:
            (image,) = pdf.pages[0].get_images().values()
            assert image.Filter == Name.DCTDecode
            assert (int(image.Width), int(image.Height)) == (800, 600)

    def test_medium_keeps_images(self, tmp_path, noise_image_pdf):
        with pikepdf.open(noise_image_pdf) as pdf:
            (image,) = pdf.pages[0].get_images().values()
            original_data = image.read_raw_bytes()

        result = PDFProcessor.compress_pdf(
            noise_image_pdf, tmp_path / "out.pdf", CompressionLevel.MEDIUM
        )

        with pikepdf.open(result.output_path) as pdf:
            (image,) = pdf.pages[0].get_images().values()
            assert image.read_raw_bytes() == original_data

    def test_compressed_filename(self):
        assert compressed_filename("report.pdf", True) == "compressed-report.pdf"
        assert compressed_filename("report.pdf", False) == "optimized-report.pdf"

    def test_compress_into_reduced(self, tmp_path, noise_image_pdf):
        out_dir = tmp_path / "out"

        result = PDFProcessor.compress_into(
            noise_image_pdf, out_dir, CompressionLevel.HIGH
        )

        assert result.output_path == out_dir / "compressed-noise.pdf"
        assert result.output_path.exists()

    def test_compress_into_not_reduced(self, tmp_path, make_pdf, monkeypatch):
        """Test an output that did not shrink is called optimized."""
        path = make_pdf("doc.pdf", [300])
        out_dir = tmp_path / "out"
        out_dir.mkdir()
        earlier = out_dir / "compressed-doc.pdf"
        earlier.write_bytes(b"earlier output")

        monkeypatch.setattr(
            PDFProcessor, "compress_bytes", staticmethod(lambda data, level: data)
        )

        result = PDFProcessor.compress_into(path, out_dir)

        assert result.output_path == out_dir / "optimized-doc.pdf"
        assert result.output_path.read_bytes() == path.read_bytes()
        assert not result.reduced
        assert earlier.read_bytes() == b"earlier output"
        assert sorted(p.name for p in out_dir.iterdir()) == [
            "compressed-doc.pdf", "optimized-doc.pdf",
        ]

    def test_high_drops_metadata(self, tmp_path):
        """Test the high preset removes XMP and document info."""
        path = tmp_path / "meta.pdf"
        with pikepdf.new() as pdf:
            _add_image_page(pdf, {"Im0": _image_stream(pdf)})
            pdf.trailer.Info = pdf.make_indirect(
                pikepdf.Dictionary(Title=pikepdf.String("Secret"))
            )
            with pdf.open_metadata(set_pikepdf_as_editor=False) as meta:
                meta["dc:title"] = "Secret"
            pdf.save(path)

        result = PDFProcessor.compress_pdf(path, tmp_path / "out.pdf", CompressionLevel.HIGH)

        assert result.reduced
        with pikepdf.open(result.output_path) as pdf:
            assert Name.Info not in pdf.trailer
            assert Name.Metadata not in pdf.Root

    def test_medium_keeps_metadata(self, tmp_path):
        path = tmp_path / "meta.pdf"
        with pikepdf.new() as pdf:
            pdf.add_blank_page()
            pdf.trailer.Info = pdf.make_indirect(
                pikepdf.Dictionary(Title=pikepdf.String("Kept"))
            )
            pdf.save(path)

        result = PDFProcessor.compress_pdf(path, tmp_path / "out.pdf", CompressionLevel.MEDIUM)

        assert PDFProcessor.get_info(result.output_path).title == "Kept"


class TestImageRecompression:
    """Tests for which images the high preset re-encodes."""

    def test_eligible_image_becomes_jpeg(self):
        with pikepdf.new() as pdf:
            image = _image_stream(pdf)
            _add_image_page(pdf, {"Im0": image})

            assert _recompress(pdf) == 1
            assert image.Filter == Name.DCTDecode
            assert (int(image.Width), int(image.Height)) == (400, 300)

    def test_gray_image_stays_gray(self):
        with pikepdf.new() as pdf:
            image = _image_stream(pdf, mode="L")
            _add_image_page(pdf, {"Im0": image})

            assert _recompress(pdf) == 1
            assert image.ColorSpace == Name.DeviceGray

    def test_large_image_downscaled(self):
        with pikepdf.new() as pdf:
            image = _image_stream(pdf, size=(2000, 1000), mode="L")
            _add_image_page(pdf, {"Im0": image})

            assert _recompress(pdf) == 1
            assert (int(image.Width), int(image.Height)) == (1600, 800)

    def test_soft_masked_image_skipped(self):
        with pikepdf.new() as pdf:
            image = _image_stream(pdf)
            image[Name.SMask] = _image_stream(pdf, mode="L")
            _add_image_page(pdf, {"Im0": image})

            assert _recompress(pdf) == 0
            assert Name.Filter not in image

    def test_color_key_masked_image_skipped(self):
        with pikepdf.new() as pdf:
            image = _image_stream(pdf)
            image[Name.Mask] = pikepdf.Array([0, 0, 0, 0, 0, 0])
            _add_image_page(pdf, {"Im0": image})

            assert _recompress(pdf) == 0
            assert Name.Filter not in image

    def test_small_image_skipped(self):
        with pikepdf.new() as pdf:
            image = _image_stream(pdf, size=(40, 200))
            _add_image_page(pdf, {"Im0": image})

            assert _recompress(pdf) == 0
            assert Name.Filter not in image

    def test_one_bit_image_skipped(self):
        with pikepdf.new() as pdf:
            image = _image_stream(pdf, size=(400, 300), mode="1")
            _add_image_page(pdf, {"Im0": image})

            assert _recompress(pdf) == 0
            assert int(image.BitsPerComponent) == 1

    def test_shared_image_processed_once(self):
        """Test an image used on two pages is re-encoded a single time."""
        with pikepdf.new() as pdf:
            image = _image_stream(pdf)
            _add_image_page(pdf, {"Im0": image})
            _add_image_page(pdf, {"Im0": image})

            assert _recompress(pdf) == 1
            first, second = (
                next(iter(page.get_images().values())) for page in pdf.pages
            )
            assert first.objgen == second.objgen
            assert first.Filter == Name.DCTDecode

    def test_original_kept_when_jpeg_is_larger(self):
        """Test an image already stored at low JPEG quality is left alone."""
        with pikepdf.new() as pdf:
            image = _image_stream(pdf, jpeg_quality=20)
            original = image.read_raw_bytes()
            _add_image_page(pdf, {"Im0": image})

            assert _recompress(pdf) == 0
            assert image.read_raw_bytes() == original

    def test_image_inside_form_xobject(self):
        """Test images drawn through a form XObject are found."""
        with pikepdf.new() as pdf:
            image = _image_stream(pdf)
            form = pdf.make_stream(b"q 400 0 0 400 0 0 cm /Im0 Do Q")
            form[Name.Type] = Name.XObject
            form[Name.Subtype] = Name.Form
            form[Name.BBox] = pikepdf.Array([0, 0, 400, 400])
            form[Name.Resources] = pikepdf.Dictionary(
                XObject=pikepdf.Dictionary(Im0=image)
            )
            _add_image_page(pdf, {"Fm0": form})

            assert _recompress(pdf) == 1
            assert image.Filter == Name.DCTDecode



class TestCompressionResult:
    """Tests for CompressionResult."""

    def test_ratio(self, tmp_path):
        result = CompressionResult(tmp_path / "a.pdf", 3000, 2000)

        assert result.saved_bytes == 1000
        assert result.reduced is True
        assert result.ratio == 33.3

    def test_not_reduced(self, tmp_path):
        result = CompressionResult(tmp_path / "a.pdf", 1000, 1000)

        assert result.reduced is False
        assert result.ratio == 0.0

    def test_empty_original(self, tmp_path):
        assert CompressionResult(tmp_path / "a.pdf", 0, 0).ratio == 0.0
