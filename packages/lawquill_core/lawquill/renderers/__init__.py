"""HTML renderers for law document fragments."""

from .block_renderer import BlockRenderer, ParagraphSequence
from .enumeration_renderer import EnumerationRenderer, render_label
from .list_style import ListStyle, classify, is_ordinal_marker, open_list
from .table_renderer import TableRenderer
from .text_renderer import (
    render_annotated,
    render_ruby,
    render_sentence,
    render_sentence_block,
    render_text,
)

__all__ = [
    "BlockRenderer",
    "EnumerationRenderer",
    "ListStyle",
    "ParagraphSequence",
    "TableRenderer",
    "classify",
    "is_ordinal_marker",
    "open_list",
    "render_annotated",
    "render_label",
    "render_ruby",
    "render_sentence",
    "render_sentence_block",
    "render_text",
]
