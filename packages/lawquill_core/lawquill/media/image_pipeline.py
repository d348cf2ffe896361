"""
Figure attachment pipeline.

Fetches each referenced figure once per conversion, normalizes it to PNG,
embeds it in the output archive and returns the wrapping figure markup.
"""

from __future__ import annotations

import logging
from html import escape
from typing import Dict, Optional, Protocol

from ..config import DEFAULT_MAX_IMAGE_HEIGHT
from ..exceptions import ConfigurationError, FetchError, error_context
from ..models import FigStruct
from ..renderers.enumeration_renderer import EnumerationRenderer
from ..renderers.text_renderer import render_annotated
from .attachment_client import AttachmentClient
from .converters import RasterConverter, guess_content_type, png_filename

logger = logging.getLogger(__name__)


class RasterSink(Protocol):
    """Archive side of the pipeline: stores bytes and returns their internal path."""

    def add_raster_asset(self, data: bytes, filename: str) -> str:
        ...


class ImageCache:
    """Maps figure references to archive-internal paths for one conversion."""

    def __init__(self) -> None:
        self._paths: Dict[str, str] = {}

    def get(self, src: str) -> Optional[str]:
        return self._paths.get(src)

    def put(self, src: str, path: str) -> None:
        self._paths[src] = path

    def clear(self) -> None:
        self._paths.clear()

    def __contains__(self, src: object) -> bool:
        return src in self._paths

    def __len__(self) -> int:
        return len(self._paths)


class ImagePipeline:
    """
    Resolve FigStruct elements to embedded PNG figures.

    One instance belongs to exactly one conversion; its cache guarantees at
    most one fetch per distinct reference.
    """

    def __init__(
        self,
        client: Optional[AttachmentClient],
        revision_id: str,
        writer: RasterSink,
        max_image_height: str = DEFAULT_MAX_IMAGE_HEIGHT,
        converter: Optional[RasterConverter] = None,
    ):
        self.client = client
        self.revision_id = revision_id
        self.writer = writer
        self.max_image_height = max_image_height
        self.converter = converter or RasterConverter()
        self.cache = ImageCache()
        self.fetch_count = 0
        self._remarks = EnumerationRenderer()

    def resolve(self, figure: FigStruct) -> str:
        """
        Embed the figure's attachment and return its markup.

        Args:
            figure: FigStruct to resolve

        Returns:
            Figure HTML, or an empty string for a figure without a source

        Raises:
            ConfigurationError: If no fetch client is configured
            FetchError: If the attachment cannot be downloaded
            DecodeError: If the attachment cannot be converted to PNG
        """
        if not figure.fig.src:
            return ""
        path = self.embed(figure.fig.src)
        return self._build_figure_html(path, figure)

    def embed(self, src: str) -> str:
        """Return the archive path for ``src``, fetching and converting it on first use."""
        cached = self.cache.get(src)
        if cached is not None:
            logger.debug(f"Image cache hit for {src}")
            return cached

        if self.client is None:
            raise ConfigurationError("API client is not configured")

        data = self._download(src)
        content_type = guess_content_type(src)
        if not self.converter.is_normalized(content_type):
            with error_context("converting image to PNG"):
                data = self.converter.to_png(data, content_type)

        path = self.writer.add_raster_asset(data, png_filename(src))
        self.cache.put(src, path)
        logger.debug(f"Embedded {src} as {path}")
        return path

    def _download(self, src: str) -> bytes:
        self.fetch_count += 1
        with error_context(f"downloading image {src}"):
            data = self.client.fetch_attachment(self.revision_id, src)
            if not data:
                raise FetchError("attachment is empty")
        return data

    def _build_figure_html(self, path: str, figure: FigStruct) -> str:
        html = '<div class="figure" style="page-break-inside: avoid; margin: 1em 0; text-align: center;">'
        if figure.title is not None and figure.title.text:
            html += f'<p class="figure-title">{render_annotated(figure.title)}</p>'

        img_style = (
            f"max-width: 100%; max-height: {self.max_image_height}; "
            "height: auto; display: block; margin: 0 auto; page-break-inside: avoid;"
        )
        html += f'<img src="{escape(path)}" alt="Figure" style="{escape(img_style)}" />'

        for remarks in figure.remarks:
            html += self._remarks.render_remarks(remarks, css_class="figure-remark", sentence_class=None)

        html += "</div>"
        return html
