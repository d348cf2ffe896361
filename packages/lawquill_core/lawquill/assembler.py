"""
Document assembler.

Top-level driver of one conversion: parses the source, prepares the EPUB
writer (metadata, stylesheet, title page), wires the image pipeline and
runs the structural compiler.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from .compiler.front_matter import add_title_page, apply_metadata
from .compiler.structural_compiler import StructuralCompiler
from .config import ConversionOptions
from .export.epub_writer import EPUBWriter
from .export.stylesheet import DEFAULT_CSS
from .media.attachment_client import AttachmentClient, LawAPIClient
from .media.converters import RasterConverter
from .media.image_pipeline import ImagePipeline
from .models import Law
from .parser.law_xml_parser import LawXMLParser
from .renderers.block_renderer import BlockRenderer

logger = logging.getLogger(__name__)


class DocumentAssembler:
    """
    Convert law XML into an in-memory EPUB package.

    Args:
        options: Conversion options; defaults are used when omitted
        client: Attachment client; a ``LawAPIClient`` is built from the
            options when images are enabled and none is given
        parser: XML parser, mainly for tests
    """

    def __init__(
        self,
        options: Optional[ConversionOptions] = None,
        client: Optional[AttachmentClient] = None,
        parser: Optional[LawXMLParser] = None,
    ):
        self.options = options or ConversionOptions()
        self.client = client
        self.parser = parser or LawXMLParser()

    def convert(self, raw: Union[bytes, str]) -> EPUBWriter:
        law = self.parser.parse(raw)
        return self.assemble(law)

    def assemble(self, law: Law) -> EPUBWriter:
        """Build the package for an already parsed law."""
        writer = EPUBWriter(law.title.text.plain)
        apply_metadata(writer, law)
        if self.options.include_stylesheet:
            writer.add_stylesheet(DEFAULT_CSS)
        if self.options.title_page:
            add_title_page(writer, law)

        owned_client: Optional[LawAPIClient] = None
        pipeline = None
        if self.options.images_enabled():
            client = self.client
            if client is None:
                owned_client = LawAPIClient(self.options.api_base_url, timeout=self.options.request_timeout)
                client = owned_client
            pipeline = ImagePipeline(
                client,
                self.options.revision_id,
                writer,
                max_image_height=self.options.max_image_height,
                converter=RasterConverter(pdf_zoom=self.options.pdf_zoom),
            )
        elif self.options.download_images:
            logger.warning("No revision id available, figures will be skipped")

        try:
            StructuralCompiler(writer, BlockRenderer(images=pipeline)).compile(law)
        finally:
            if owned_client is not None:
                owned_client.close()

        if pipeline is not None:
            logger.info(f"Embedded {len(pipeline.cache)} images ({pipeline.fetch_count} downloads)")
        return writer
