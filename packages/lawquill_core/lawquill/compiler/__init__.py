"""Law tree to EPUB page compilation."""

from .front_matter import add_title_page, apply_metadata, build_description, build_title_page
from .structural_compiler import StructuralCompiler, article_filename, paragraph_page_title

__all__ = [
    "StructuralCompiler",
    "add_title_page",
    "apply_metadata",
    "article_filename",
    "build_description",
    "build_title_page",
    "paragraph_page_title",
]
