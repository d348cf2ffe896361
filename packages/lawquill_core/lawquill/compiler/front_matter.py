"""Book metadata and the title page."""

from __future__ import annotations

import logging
from html import escape

from ..export.epub_writer import EPUBWriter
from ..models import Law
from ..renderers.text_renderer import render_annotated

logger = logging.getLogger(__name__)

TITLE_PAGE_FILENAME = "title.xhtml"
TITLE_PAGE_TITLE = "タイトルページ"


def build_description(law: Law) -> str:
    """Description shown by reading systems: date, law number and current title."""
    lines = [
        f"公布日: {law.promulgation_date_label(' ')}",
        f"法令番号: {law.law_num}",
        f"現行法令名: {render_annotated(law.title.text)} {law.title.kana}",
    ]
    return "\n".join(lines)


def build_title_page(law: Law) -> str:
    body = '<div style="text-align: center; margin-top: 20%;">'
    body += f'<h1 style="font-size: 1.5em; margin-bottom: 1em;">{render_annotated(law.title.text)}</h1>'
    body += f'<p style="font-size: 1.2em; margin-bottom: 2em;">{escape(law.law_num)}</p>'
    body += f'<p style="margin-bottom: 0.5em;">公布日: {law.promulgation_date_label()}</p>'

    if law.enact_statements and law.enact_statements[0].text:
        body += '<div style="margin-top: 3em; text-align: left; padding: 0 10%;">'
        body += f'<p style="text-indent: 1em;">{render_annotated(law.enact_statements[0])}</p>'
        body += "</div>"

    body += "</div>"
    return body


def apply_metadata(writer: EPUBWriter, law: Law) -> None:
    writer.set_author(law.law_num)
    writer.set_language(law.lang)
    writer.set_description(build_description(law))
    logger.debug(f"Metadata set for {law.law_num or law.title.text.plain}")


def add_title_page(writer: EPUBWriter, law: Law) -> str:
    return writer.add_section(build_title_page(law), TITLE_PAGE_TITLE, TITLE_PAGE_FILENAME)
