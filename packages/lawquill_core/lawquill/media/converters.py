"""
Raster normalization for figure attachments.

Every embedded figure is stored as PNG. Raster inputs are re-encoded with
Pillow; PDF attachments are rasterized from their first page with PyMuPDF.
"""

from __future__ import annotations

import io
import logging
import posixpath
from typing import Dict

import fitz
from PIL import Image

from ..exceptions import DecodeError

logger = logging.getLogger(__name__)

PNG = "image/png"
JPEG = "image/jpeg"
GIF = "image/gif"
PDF = "application/pdf"
OCTET_STREAM = "application/octet-stream"

_EXTENSION_TYPES = {
    ".png": PNG,
    ".jpg": JPEG,
    ".jpeg": JPEG,
    ".gif": GIF,
    ".pdf": PDF,
}

_PNG_MODES = ("1", "L", "LA", "P", "RGB", "RGBA", "I")


def guess_content_type(src: str) -> str:
    """Content type implied by the extension of a figure reference."""
    _, ext = posixpath.splitext(src.lower())
    return _EXTENSION_TYPES.get(ext, OCTET_STREAM)


def png_filename(src: str) -> str:
    """Base name of ``src`` with its extension replaced by ``.png``."""
    base = posixpath.basename(src)
    stem, _ = posixpath.splitext(base)
    return (stem or base) + ".png"


class RasterConverter:
    """
    Converts attachment bytes to PNG.

    Handles raster re-encoding through Pillow and first-page PDF
    rasterization through PyMuPDF.
    """

    def __init__(self, pdf_zoom: float = 2.0):
        """
        Initialize raster converter.

        Args:
            pdf_zoom: Scale factor applied when rendering PDF pages
        """
        self.pdf_zoom = pdf_zoom
        self.conversion_stats: Dict[str, int] = {
            "conversions": 0,
            "pdf_pages": 0,
            "errors": 0,
        }

    @staticmethod
    def is_normalized(content_type: str) -> bool:
        return "png" in content_type.lower()

    def to_png(self, data: bytes, content_type: str) -> bytes:
        """
        Convert ``data`` to PNG bytes.

        Args:
            data: Attachment bytes
            content_type: Content type guessed from the reference

        Returns:
            PNG bytes

        Raises:
            DecodeError: If the data cannot be decoded or re-encoded
        """
        if content_type == PDF or (content_type == OCTET_STREAM and data.startswith(b"%PDF")):
            return self._pdf_first_page_to_png(data)
        return self._convert_with_pillow(data)

    def _convert_with_pillow(self, data: bytes) -> bytes:
        try:
            with Image.open(io.BytesIO(data)) as image:
                image.load()
                if image.mode not in _PNG_MODES:
                    target = "RGBA" if "A" in image.mode else "RGB"
                    image = image.convert(target)
                output = io.BytesIO()
                image.save(output, format="PNG")
        except (OSError, ValueError, SyntaxError, EOFError, Image.DecompressionBombError) as exc:
            self.conversion_stats["errors"] += 1
            raise DecodeError("decoding image", details=str(exc)) from exc

        self.conversion_stats["conversions"] += 1
        return output.getvalue()

    def _pdf_first_page_to_png(self, data: bytes) -> bytes:
        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except Exception as exc:
            self.conversion_stats["errors"] += 1
            raise DecodeError("opening PDF", details=str(exc)) from exc

        try:
            if doc.page_count == 0:
                self.conversion_stats["errors"] += 1
                raise DecodeError("PDF has no pages")
            page = doc.load_page(0)
            pixmap = page.get_pixmap(matrix=fitz.Matrix(self.pdf_zoom, self.pdf_zoom), alpha=False)
            png = pixmap.tobytes("png")
        except (RuntimeError, ValueError) as exc:
            self.conversion_stats["errors"] += 1
            raise DecodeError("rendering PDF page", details=str(exc)) from exc
        finally:
            doc.close()

        self.conversion_stats["pdf_pages"] += 1
        logger.debug(f"Rasterized PDF page 0 at zoom {self.pdf_zoom} ({len(png)} bytes)")
        return png
