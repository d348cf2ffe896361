"""
LawQuill - Japanese Standard Law XML to EPUB converter.

Parses e-Gov law XML, renders chapters, articles, appendices and
supplementary provisions to XHTML pages and packages them as an EPUB 3
book with a nested table of contents. Figures referenced by the XML are
downloaded from the e-Gov law API, normalized to PNG and embedded.

Quick Start:
    from lawquill import create_epub_from_path, write_epub

    book = create_epub_from_path("129AC0000000089_20230401_504AC0000000018.xml")
    write_epub(book, "minpo.epub")
"""

from .version import __version__, __version_info__

from .exceptions import (
    ArchiveWriteError,
    ConfigurationError,
    DecodeError,
    FetchError,
    LawQuillError,
    MalformedInputError,
    MissingRequiredFieldError,
    OutputIOError,
    SourceIOError,
)
from .config import ConversionOptions, revision_id_from_path
from .parser import LawXMLParser
from .export import EPUBWriter
from .media import ImagePipeline, LawAPIClient, RasterConverter
from .assembler import DocumentAssembler
from .api import create_epub_from_path, create_epub_from_xml, write_epub

__all__ = [
    "__version__",
    "__version_info__",
    "ArchiveWriteError",
    "ConfigurationError",
    "ConversionOptions",
    "DecodeError",
    "DocumentAssembler",
    "EPUBWriter",
    "FetchError",
    "ImagePipeline",
    "LawAPIClient",
    "LawQuillError",
    "LawXMLParser",
    "MalformedInputError",
    "MissingRequiredFieldError",
    "OutputIOError",
    "RasterConverter",
    "SourceIOError",
    "create_epub_from_path",
    "create_epub_from_xml",
    "revision_id_from_path",
    "write_epub",
]
