"""
Rendering of Item / Subitem1 / Subitem2 enumerations and remarks.

Each enumeration level becomes one ``<ol>`` styled from the labels of that
level; labels that merely repeat the generated number are suppressed.
"""

from __future__ import annotations

from html import escape
from typing import Optional, Protocol, Sequence

from ..models import MAX_ITEM_LEVEL, Attachments, Item, Remarks
from .list_style import is_ordinal_marker, open_list
from .text_renderer import render_annotated, render_sentence, render_sentence_block


class AttachmentRenderer(Protocol):
    """Renders the figures, tables, style blocks and lists attached to an entry."""

    def render_attachments(self, attachments: Attachments) -> str:
        ...


def render_label(label: str) -> str:
    """Bold label followed by a space, or nothing for ordinal markers."""
    if not label or is_ordinal_marker(label):
        return ""
    return f"<strong>{escape(label)}</strong> "


class EnumerationRenderer:
    """Render nested enumerations up to the Subitem2 level."""

    def __init__(self, attachments: Optional[AttachmentRenderer] = None) -> None:
        self.attachments = attachments

    def render(self, items: Sequence[Item]) -> str:
        if not items:
            return ""
        labels = [item.title.text for item in items if item.title is not None]
        body = open_list(labels)
        body += "".join(self.render_item(item) for item in items)
        body += "</ol>"
        return body

    def render_item(self, item: Item) -> str:
        body = "<li>"
        body += render_label(item.label)
        body += render_sentence_block(item.body)
        if self.attachments is not None and item.attachments:
            body += self.attachments.render_attachments(item.attachments)
        if item.level < MAX_ITEM_LEVEL and item.children:
            body += self.render(item.children)
        body += "</li>"
        return body

    def render_remarks(
        self,
        remarks: Remarks,
        css_class: str = "appdx-remarks",
        sentence_class: Optional[str] = "remark",
        inner_class: Optional[str] = None,
    ) -> str:
        """
        Render a Remarks block.

        Args:
            remarks: Remarks element
            css_class: Class of the wrapping div
            sentence_class: Class of each sentence paragraph, or None for bare ``<p>``
            inner_class: Optional class of a second wrapping div

        Returns:
            HTML fragment
        """
        body = f'<div class="{css_class}">'
        if inner_class:
            body += f'<div class="{inner_class}">'
        if not remarks.label.is_empty:
            body += f'<p class="remarks-label">{render_annotated(remarks.label)}</p>'
        open_p = f'<p class="{sentence_class}">' if sentence_class else "<p>"
        for sentence in remarks.sentences:
            body += f"{open_p}{render_sentence(sentence)}</p>"
        body += self.render(remarks.items)
        if inner_class:
            body += "</div>"
        body += "</div>"
        return body
