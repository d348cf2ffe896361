"""EPUB packaging."""

from .epub_writer import EPUBWriter, SectionEntry
from .stylesheet import DEFAULT_CSS

__all__ = ["EPUBWriter", "SectionEntry", "DEFAULT_CSS"]
