"""
Simple high-level API for LawQuill.

Usage example:
>>> from lawquill import create_epub_from_path, write_epub
>>>
>>> book = create_epub_from_path("129AC0000000089_20230401_504AC0000000018.xml")
>>> write_epub(book, "minpo.epub")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Optional, Union

from .assembler import DocumentAssembler
from .config import ConversionOptions, revision_id_from_path
from .exceptions import SourceIOError
from .export.epub_writer import EPUBWriter
from .media.attachment_client import AttachmentClient

logger = logging.getLogger(__name__)

__all__ = [
    "create_epub_from_xml",
    "create_epub_from_path",
    "write_epub",
]


def create_epub_from_xml(
    source: Union[bytes, BinaryIO],
    options: Optional[ConversionOptions] = None,
    client: Optional[AttachmentClient] = None,
) -> EPUBWriter:
    """
    Convert law XML to an EPUB package.

    Args:
        source: XML bytes or a binary stream
        options: Conversion options
        client: Attachment client used for figures

    Returns:
        EPUBWriter holding the compiled book
    """
    if isinstance(source, (bytes, bytearray)):
        raw = bytes(source)
    else:
        try:
            raw = source.read()
        except OSError as exc:
            raise SourceIOError("reading XML data", details=str(exc)) from exc
    return DocumentAssembler(options, client=client).convert(raw)


def create_epub_from_path(
    path: Union[str, Path],
    options: Optional[ConversionOptions] = None,
    client: Optional[AttachmentClient] = None,
) -> EPUBWriter:
    """
    Convert an XML file; the revision id is taken from the file name when not set.

    Args:
        path: Path to the law XML file
        options: Conversion options
        client: Attachment client used for figures

    Returns:
        EPUBWriter holding the compiled book
    """
    options = options or ConversionOptions()
    if options.revision_id is None:
        revision_id = revision_id_from_path(path)
        if revision_id is not None:
            logger.debug(f"Using revision id {revision_id} from file name")
            options = options.with_revision_id(revision_id)

    try:
        raw = Path(path).read_bytes()
    except OSError as exc:
        raise SourceIOError(f"opening XML file {path}", details=str(exc)) from exc
    return DocumentAssembler(options, client=client).convert(raw)


def write_epub(book: EPUBWriter, dest_path: Union[str, Path]) -> Path:
    return book.write(dest_path)
