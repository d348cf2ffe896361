"""
Paragraph-level rendering.

Combines the text formatter, the enumeration and table renderers and the
image pipeline into HTML for paragraphs, freeform lists, remarks and the
style, format and note blocks used by appendices.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional, Sequence

from ..exceptions import FIGURE_ERRORS
from ..models import (
    Attachments,
    Fig,
    FigStruct,
    FormatStruct,
    ListEntry,
    NoteStruct,
    Paragraph,
    Remarks,
    StyleStruct,
    TableStruct,
)
from .enumeration_renderer import EnumerationRenderer, render_label
from .list_style import open_list
from .table_renderer import TableRenderer
from .text_renderer import render_annotated, render_sentence_block

if TYPE_CHECKING:
    from ..media.image_pipeline import ImagePipeline

logger = logging.getLogger(__name__)

_LIST_CLASSES = ("law-list", "law-sublist1", "law-sublist2", "law-sublist3")


class ParagraphSequence:
    """
    Two-state machine (not in list / in list) over one run of paragraphs.

    Consecutive numbered paragraphs share one ``<ol>``; an unnumbered
    paragraph closes it. Create a new instance for every sequence.
    """

    def __init__(self, blocks: "BlockRenderer") -> None:
        self.blocks = blocks
        self.in_list = False
        self._parts: List[str] = []

    def render(self, paragraphs: Sequence[Paragraph]) -> str:
        for index, paragraph in enumerate(paragraphs):
            if paragraph.num > 0:
                self._numbered(paragraph, index, paragraphs)
            else:
                self._regular(paragraph)
        if self.in_list:
            self._parts.append("</ol>")
            self.in_list = False
        return "".join(self._parts)

    def _numbered(self, paragraph: Paragraph, index: int, paragraphs: Sequence[Paragraph]) -> None:
        if not self.in_list:
            labels = []
            for following in paragraphs[index:]:
                if following.num <= 0:
                    break
                labels.append(following.label.text)
            self._parts.append(open_list(labels))
            self.in_list = True

        self._parts.append("<li>")
        self._parts.append(render_label(paragraph.label.text))
        self._parts.append(render_sentence_block(paragraph.body))
        self._parts.append(self.blocks.render_paragraph_content(paragraph))
        self._parts.append("</li>")

    def _regular(self, paragraph: Paragraph) -> None:
        if self.in_list:
            self._parts.append("</ol>")
            self.in_list = False

        if paragraph.label.text:
            self._parts.append(f"<h4>{render_annotated(paragraph.label)}</h4>")
        if paragraph.body.sentences or paragraph.body.columns:
            self._parts.append(f"<p>{render_sentence_block(paragraph.body)}</p>")
        self._parts.append(self.blocks.render_paragraph_content(paragraph))


class BlockRenderer:
    """Render paragraph sequences and the blocks nested inside them."""

    def __init__(self, images: Optional["ImagePipeline"] = None) -> None:
        self.images = images
        self.tables = TableRenderer()
        self.enumerations = EnumerationRenderer(attachments=self)

    # ------------------------------------------------------------------
    # Paragraphs
    # ------------------------------------------------------------------
    def render_paragraphs(self, paragraphs: Sequence[Paragraph]) -> str:
        return ParagraphSequence(self).render(paragraphs)

    def render_paragraph_content(self, paragraph: Paragraph) -> str:
        """Items, figures, tables, style blocks and lists of a paragraph."""
        return self.enumerations.render(paragraph.items) + self.render_attachments(paragraph.attachments)

    def render_attachments(self, attachments: Attachments) -> str:
        return (
            self.render_figures(attachments.figures)
            + self.render_table_structs(attachments.tables)
            + self.render_style_structs(attachments.styles)
            + self.render_lists(attachments.lists)
        )

    # ------------------------------------------------------------------
    # Figures
    # ------------------------------------------------------------------
    def render_figure(self, figure: FigStruct) -> str:
        """Resolve a figure; fetch and decode failures drop the figure only."""
        if self.images is None:
            return ""
        try:
            return self.images.resolve(figure)
        except FIGURE_ERRORS as exc:
            logger.warning(f"Skipping figure {figure.fig.src!r}: {exc}")
            return ""

    def render_figures(self, figures: Sequence[FigStruct]) -> str:
        return "".join(self.render_figure(figure) for figure in figures)

    def _render_fig_refs(self, figures: Sequence[Fig]) -> str:
        return "".join(self.render_figure(FigStruct(fig=fig)) for fig in figures)

    # ------------------------------------------------------------------
    # Tables and remarks
    # ------------------------------------------------------------------
    def render_table_struct(self, table_struct: TableStruct) -> str:
        html = ""
        if table_struct.title is not None:
            html += f'<div class="table-title">{render_annotated(table_struct.title)}</div>'
        html += self.tables.render(table_struct.table)
        html += "".join(self.render_remarks(remarks) for remarks in table_struct.remarks)
        return html

    def render_table_structs(self, table_structs: Sequence[TableStruct]) -> str:
        return "".join(self.render_table_struct(ts) for ts in table_structs)

    def render_remarks(self, remarks: Remarks) -> str:
        return self.enumerations.render_remarks(remarks)

    def render_appdx_style_remarks(self, remarks: Remarks) -> str:
        return self.enumerations.render_remarks(
            remarks, css_class="appdx-remarks", sentence_class=None, inner_class="remark"
        )

    # ------------------------------------------------------------------
    # Freeform lists
    # ------------------------------------------------------------------
    def render_lists(self, entries: Sequence[ListEntry]) -> str:
        if not entries:
            return ""
        css_class = _LIST_CLASSES[entries[0].level]
        html = f'<ul class="{css_class}">'
        for entry in entries:
            html += "<li>"
            html += render_sentence_block(entry.body)
            html += self.render_lists(entry.children)
            html += "</li>"
        html += "</ul>"
        return html

    # ------------------------------------------------------------------
    # Style, format and note blocks
    # ------------------------------------------------------------------
    def render_style_struct(self, style: StyleStruct) -> str:
        html = '<div class="style-struct">'
        if style.title is not None and not style.title.is_empty:
            html += f'<p class="style-title">{render_annotated(style.title)}</p>'
        html += self._render_fig_refs(style.figures)
        if style.content:
            html += f'<div class="style-content">{style.content}</div>'
        for remarks in style.remarks:
            html += self.enumerations.render_remarks(remarks, css_class="style-remark", sentence_class=None)
        html += "</div>"
        return html

    def render_style_structs(self, styles: Sequence[StyleStruct]) -> str:
        return "".join(self.render_style_struct(style) for style in styles)

    def render_format_struct(self, format_struct: FormatStruct) -> str:
        html = '<div class="format-struct">'
        if format_struct.title is not None and not format_struct.title.is_empty:
            html += f"<h3>{render_annotated(format_struct.title)}</h3>"
        html += '<div class="format-content">'
        html += self._render_fig_refs(format_struct.figures)
        if format_struct.content:
            html += f'<pre class="format-raw">{format_struct.content}</pre>'
        html += "</div>"
        html += "".join(self.render_remarks(remarks) for remarks in format_struct.remarks)
        html += "</div>"
        return html

    def render_note_struct(self, note: NoteStruct) -> str:
        html = '<div class="note-struct">'
        if note.title is not None and not note.title.is_empty:
            html += f"<h3>{render_annotated(note.title)}</h3>"
        if note.paragraphs:
            html += self.render_paragraphs(note.paragraphs)
        elif note.content:
            html += f'<div class="note-content">{note.content}</div>'
        html += "".join(self.render_remarks(remarks) for remarks in note.remarks)
        html += "</div>"
        return html
