"""
Tests for RasterConverter and the figure naming helpers.
"""

import io

import pytest
from PIL import Image

from lawquill.exceptions import DecodeError
from lawquill.media.converters import RasterConverter, guess_content_type, png_filename

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


class TestHelpers:
    """Test cases for content type and file name helpers."""

    @pytest.mark.parametrize(
        "src,expected",
        [
            ("./pict/a.png", "image/png"),
            ("a.JPG", "image/jpeg"),
            ("a.jpeg", "image/jpeg"),
            ("a.gif", "image/gif"),
            ("./pict/H11HO127-001.pdf", "application/pdf"),
            ("noext", "application/octet-stream"),
        ],
    )
    def test_guess_content_type(self, src, expected):
        """Test content types are guessed from the extension."""
        assert guess_content_type(src) == expected

    def test_png_filename(self):
        """Test the base name keeps its stem and gets a png extension."""
        assert png_filename("diagram.pdf") == "diagram.png"
        assert png_filename("./pict/sub/photo.jpg") == "photo.png"
        assert png_filename("noext") == "noext.png"


class TestRasterConverter:
    """Test cases for RasterConverter."""

    def test_is_normalized(self):
        """Test only PNG counts as normalized."""
        assert RasterConverter.is_normalized("image/png")
        assert not RasterConverter.is_normalized("image/jpeg")

    def test_jpeg_to_png(self, jpeg_bytes):
        """Test JPEG input is re-encoded as PNG."""
        converter = RasterConverter()
        data = converter.to_png(jpeg_bytes, "image/jpeg")

        assert data.startswith(PNG_SIGNATURE)
        with Image.open(io.BytesIO(data)) as image:
            assert image.size == (8, 6)
        assert converter.conversion_stats["conversions"] == 1

    def test_cmyk_converted(self):
        """Test modes PNG cannot store are converted."""
        output = io.BytesIO()
        Image.new("CMYK", (4, 4)).save(output, format="JPEG")
        data = RasterConverter().to_png(output.getvalue(), "image/jpeg")

        with Image.open(io.BytesIO(data)) as image:
            assert image.mode == "RGB"

    def test_pdf_first_page(self, pdf_bytes):
        """Test the first PDF page is rasterized at the configured zoom."""
        converter = RasterConverter(pdf_zoom=2.0)
        data = converter.to_png(pdf_bytes, "application/pdf")

        assert data.startswith(PNG_SIGNATURE)
        with Image.open(io.BytesIO(data)) as image:
            assert image.size == (400, 200)
        assert converter.conversion_stats["pdf_pages"] == 1

    def test_pdf_sniffed_from_octet_stream(self, pdf_bytes):
        """Test PDF data without an extension is detected by its header."""
        data = RasterConverter().to_png(pdf_bytes, "application/octet-stream")
        assert data.startswith(PNG_SIGNATURE)

    def test_invalid_image(self):
        """Test undecodable data raises DecodeError."""
        converter = RasterConverter()
        with pytest.raises(DecodeError):
            converter.to_png(b"not an image", "image/jpeg")
        assert converter.conversion_stats["errors"] == 1

    def test_invalid_pdf(self):
        """Test a corrupt PDF raises DecodeError."""
        with pytest.raises(DecodeError):
            RasterConverter().to_png(b"%PDF-1.4 broken", "application/pdf")

    def test_oversized_image(self, oversized_png_bytes):
        """Test an image past the decompression-bomb limit raises DecodeError."""
        converter = RasterConverter()
        with pytest.raises(DecodeError):
            converter.to_png(oversized_png_bytes, "image/gif")
        assert converter.conversion_stats["errors"] == 1
