"""
Structural compiler.

Walks a parsed ``Law`` depth-first and registers one page per chapter,
article, paragraph, appendix and supplementary provision with the EPUB
writer. Filenames derive from positions only, so converting the same
input twice yields the same package layout.
"""

from __future__ import annotations

import logging
from html import escape
from typing import Optional, Sequence

from ..exceptions import error_context
from ..export.epub_writer import EPUBWriter
from ..models import (
    AnnotatedText,
    AppdxFig,
    AppdxFormat,
    AppdxNote,
    AppdxStyle,
    AppdxTable,
    Article,
    Chapter,
    Law,
    MainProvision,
    Paragraph,
    Section,
    SupplProvision,
    SupplProvisionAppdx,
    SupplProvisionAppdxStyle,
    SupplProvisionAppdxTable,
)
from ..renderers.block_renderer import BlockRenderer
from ..renderers.text_renderer import render_annotated

logger = logging.getLogger(__name__)

MAIN_CONTENT_FILENAME = "main-content.xhtml"
MAIN_CONTENT_TITLE = "本文"
APPDX_STYLES_FILENAME = "appdx-styles.xhtml"
APPDX_FIGURES_FILENAME = "appdx-figures.xhtml"

DEFAULT_APPDX_NOTE_TITLE = "附則"
DEFAULT_APPDX_TABLE_TITLE = "附表"
DEFAULT_APPDX_STYLE_TITLE = "様式"
DEFAULT_APPDX_FORMAT_TITLE = "書式"
DEFAULT_APPDX_FIG_TITLE = "附図"
DEFAULT_SUPPL_PROVISION_LABEL = "附則"


def article_filename(chapter_index: int, article_index: int, section_index: Optional[int] = None) -> str:
    if section_index is not None:
        return f"article-{chapter_index}-{section_index}-{article_index}.xhtml"
    return f"article-{chapter_index}-{article_index}.xhtml"


def article_heading(article: Article) -> str:
    """Article title and caption as heading HTML."""
    heading = render_annotated(article.title)
    if article.caption is not None:
        heading += f" {render_annotated(article.caption)}"
    return heading


def paragraph_page_title(paragraph: Paragraph, index: int) -> str:
    """``第{label}項``, falling back to the paragraph number and then the position."""
    if paragraph.label.text:
        return f"第{paragraph.label.plain}項"
    if paragraph.num:
        return f"第{paragraph.num}項"
    return f"第{index + 1}項"


def _title_or_default(title: Optional[AnnotatedText], default: str) -> str:
    if title is None or title.is_empty:
        return default
    return title.plain


def _has_text(value: Optional[AnnotatedText]) -> bool:
    return value is not None and not value.is_empty


class StructuralCompiler:
    """
    Map the law hierarchy onto ordered, linked EPUB pages.

    Pages are registered in document order: main provision, appendix
    notes, appendix tables, appendix styles, appendix formats, appendix
    figures and finally supplementary provisions.

    Args:
        writer: Package receiving the pages
        blocks: Paragraph-level renderer, already wired to the image pipeline
    """

    def __init__(self, writer: EPUBWriter, blocks: BlockRenderer):
        self.writer = writer
        self.blocks = blocks

    def compile(self, law: Law) -> None:
        self.compile_main_provision(law.main_provision)
        self.compile_appdx_notes(law.appdx_notes)
        self.compile_appdx_tables(law.appdx_tables)
        self.compile_appdx_styles(law.appdx_styles)
        self.compile_appdx_formats(law.appdx_formats)
        self.compile_appdx_figs(law.appdx_figs)
        self.compile_suppl_provisions(law.suppl_provisions)
        logger.info(f"Compiled {len(self.writer.sections)} pages")

    # ------------------------------------------------------------------
    # Main provision
    # ------------------------------------------------------------------
    def compile_main_provision(self, main: MainProvision) -> None:
        """
        Emit the main body in one of four shapes.

        Chapters win over direct articles, which win over direct paragraphs.
        Several direct paragraphs get one page each; a single paragraph run
        becomes one ``本文`` page.
        """
        if main.chapters:
            for index, chapter in enumerate(main.chapters):
                with error_context(f"processing Chapter {index}"):
                    self.compile_chapter(chapter, index)
            return

        if main.articles:
            for index, article in enumerate(main.articles):
                with error_context(f"processing Article {index}"):
                    self.writer.add_section(
                        self.render_article(article), article.plain_title, f"article-{index}.xhtml"
                    )
            return

        if not main.paragraphs:
            return

        if len(main.paragraphs) > 1:
            for index, paragraph in enumerate(main.paragraphs):
                with error_context(f"processing Paragraph {index}"):
                    title = paragraph_page_title(paragraph, index)
                    body = f"<h3>{escape(title)}</h3>" + self.blocks.render_paragraphs([paragraph])
                    self.writer.add_section(body, title, f"paragraph-{index}.xhtml")
            return

        body = self.blocks.render_paragraphs(main.paragraphs)
        if body:
            self.writer.add_section(body, MAIN_CONTENT_TITLE, MAIN_CONTENT_FILENAME)

    def compile_chapter(self, chapter: Chapter, chapter_index: int) -> str:
        body = f'<div class="chapter-title">{render_annotated(chapter.title)}</div>'
        if chapter.sections:
            body += self.render_sections_summary(chapter.sections)

        parent = self.writer.add_section(body, chapter.title.plain, f"chapter-{chapter_index}.xhtml")

        for article_index, article in enumerate(chapter.articles):
            with error_context(f"processing Article {article_index}"):
                self._add_article_page(article, parent, article_filename(chapter_index, article_index))

        for section_index, section in enumerate(chapter.sections):
            for article_index, article in enumerate(section.articles):
                with error_context(f"processing Section {section_index} Article {article_index}"):
                    filename = article_filename(chapter_index, article_index, section_index)
                    self._add_article_page(article, parent, filename)
        return parent

    @staticmethod
    def render_sections_summary(sections: Sequence[Section]) -> str:
        """Inline note listing each section with its first and last article."""
        body = "<div class='sections'>"
        for section in sections:
            body += f"<h3>{render_annotated(section.title)}</h3>"
            if section.articles:
                first = escape(section.articles[0].title.plain)
                last = escape(section.articles[-1].title.plain)
                body += f"<p>（{first} から {last} まで）</p>"
        body += "</div>"
        return body

    def render_article(self, article: Article) -> str:
        return f"<h3>{article_heading(article)}</h3>" + self.blocks.render_paragraphs(article.paragraphs)

    def _add_article_page(self, article: Article, parent: str, filename: str) -> str:
        return self.writer.add_section(self.render_article(article), article.plain_title, filename, parent=parent)

    # ------------------------------------------------------------------
    # Appendices
    # ------------------------------------------------------------------
    def _related_articles(self, related: Optional[AnnotatedText]) -> str:
        if not _has_text(related):
            return ""
        return f'<div class="related-articles">{render_annotated(related)}</div>'

    def _chapter_title(self, title: Optional[AnnotatedText]) -> str:
        if not _has_text(title):
            return ""
        return f'<div class="chapter-title">{render_annotated(title)}</div>'

    def compile_appdx_notes(self, notes: Sequence[AppdxNote]) -> None:
        for index, note in enumerate(notes):
            with error_context(f"processing AppdxNote {index}"):
                body = self._chapter_title(note.title)
                body += self._related_articles(note.related_article_num)
                body += "".join(self.blocks.render_note_struct(ns) for ns in note.note_structs)
                body += self.blocks.render_figures(note.figures)
                body += self.blocks.render_table_structs(note.tables)
                if note.remarks is not None:
                    body += self.blocks.render_remarks(note.remarks)
                title = _title_or_default(note.title, DEFAULT_APPDX_NOTE_TITLE)
                self.writer.add_section(body, title, f"appdx-note-{index}.xhtml")

    def compile_appdx_tables(self, tables: Sequence[AppdxTable]) -> None:
        for index, table in enumerate(tables):
            with error_context(f"processing AppdxTable {index}"):
                body = self._chapter_title(table.title)
                body += self._related_articles(table.related_article_num)
                body += self.blocks.render_table_structs(table.tables)
                if table.remarks is not None:
                    body += self.blocks.render_remarks(table.remarks)
                title = _title_or_default(table.title, DEFAULT_APPDX_TABLE_TITLE)
                self.writer.add_section(body, title, f"appdx-table-{index}.xhtml")

    def compile_appdx_styles(self, styles: Sequence[AppdxStyle]) -> None:
        if not styles:
            return
        parent = self.writer.add_section(
            f"<h2>{DEFAULT_APPDX_STYLE_TITLE}</h2>", DEFAULT_APPDX_STYLE_TITLE, APPDX_STYLES_FILENAME
        )
        for index, style in enumerate(styles):
            with error_context(f"processing AppdxStyle {index}"):
                body = ""
                if _has_text(style.title):
                    body += f"<h3>{render_annotated(style.title)}</h3>"
                if _has_text(style.related_article_num):
                    related = escape(style.related_article_num.plain)
                    body += f"<div class='related-articles'><p>関連条文: {related}</p></div>"
                body += self.blocks.render_style_structs(style.styles)
                if style.remarks is not None:
                    body += self.blocks.render_appdx_style_remarks(style.remarks)
                title = _title_or_default(style.title, DEFAULT_APPDX_STYLE_TITLE)
                self.writer.add_section(body, title, f"appdx-style-{index}.xhtml", parent=parent)

    def compile_appdx_formats(self, formats: Sequence[AppdxFormat]) -> None:
        for index, appdx_format in enumerate(formats):
            with error_context(f"processing AppdxFormat {index}"):
                body = self._chapter_title(appdx_format.title)
                body += self._related_articles(appdx_format.related_article_num)
                body += "".join(self.blocks.render_format_struct(fs) for fs in appdx_format.formats)
                title = _title_or_default(appdx_format.title, DEFAULT_APPDX_FORMAT_TITLE)
                self.writer.add_section(body, title, f"appdx-format-{index}.xhtml")

    def compile_appdx_figs(self, figs: Sequence[AppdxFig]) -> None:
        if not figs:
            return
        parent = self.writer.add_section(
            f"<h2>{DEFAULT_APPDX_FIG_TITLE}</h2>", DEFAULT_APPDX_FIG_TITLE, APPDX_FIGURES_FILENAME
        )
        for index, fig in enumerate(figs):
            with error_context(f"processing AppdxFig {index}"):
                body = ""
                if _has_text(fig.title):
                    body += f"<h3>{render_annotated(fig.title)}</h3>"
                body += self._related_articles(fig.related_article_num)
                body += self.blocks.render_figures(fig.figures)
                body += self.blocks.render_table_structs(fig.tables)
                title = _title_or_default(fig.title, DEFAULT_APPDX_FIG_TITLE)
                self.writer.add_section(body, title, f"appdx-fig-{index}.xhtml", parent=parent)

    # ------------------------------------------------------------------
    # Supplementary provisions
    # ------------------------------------------------------------------
    def compile_suppl_provisions(self, provisions: Sequence[SupplProvision]) -> None:
        for index, provision in enumerate(provisions):
            with error_context(f"processing SupplProvision {index}"):
                self.compile_suppl_provision(provision, index)

    def compile_suppl_provision(self, provision: SupplProvision, index: int) -> str:
        """Render a supplementary provision, including its chapters and appendices, as one page."""
        if provision.label.text:
            label_html = render_annotated(provision.label)
            label = provision.label.plain
        else:
            label_html = escape(DEFAULT_SUPPL_PROVISION_LABEL)
            label = DEFAULT_SUPPL_PROVISION_LABEL

        body = f'<div class="chapter-title">{label_html}</div>'
        if provision.amend_law_num:
            body += f'<div class="amend-law-num">（{escape(provision.amend_law_num)}）</div>'

        for chapter in provision.chapters:
            body += f"<h3>{render_annotated(chapter.title)}</h3>"
            body += "".join(self.render_article(article) for article in chapter.articles)
            for section in chapter.sections:
                body += "".join(self.render_article(article) for article in section.articles)

        body += "".join(self.render_article(article) for article in provision.articles)
        if provision.paragraphs:
            body += self.blocks.render_paragraphs(provision.paragraphs)

        body += "".join(self.render_suppl_appdx_table(table) for table in provision.appdx_tables)
        body += "".join(self.render_suppl_appdx_style(style) for style in provision.appdx_styles)
        body += "".join(self.render_suppl_appdx(appdx) for appdx in provision.appdx)

        title = label
        if provision.amend_law_num:
            title = f"{label}（{provision.amend_law_num}）"
        return self.writer.add_section(body, title, f"suppl-provision-{index}.xhtml")

    def render_suppl_appdx_table(self, table: SupplProvisionAppdxTable) -> str:
        body = '<div class="suppl-appdx-table">'
        if not table.title.is_empty:
            body += f"<h4>{render_annotated(table.title)}</h4>"
        body += self._related_articles(table.related_article_num)
        body += self.blocks.render_table_structs(table.tables)
        body += "</div>"
        return body

    def render_suppl_appdx_style(self, style: SupplProvisionAppdxStyle) -> str:
        body = '<div class="suppl-appdx-style">'
        if not style.title.is_empty:
            body += f"<h4>{render_annotated(style.title)}</h4>"
        body += self._related_articles(style.related_article_num)
        body += self.blocks.render_style_structs(style.styles)
        body += "</div>"
        return body

    def render_suppl_appdx(self, appdx: SupplProvisionAppdx) -> str:
        body = '<div class="suppl-appdx">'
        if _has_text(appdx.arith_formula_num):
            body += f'<div class="arith-formula-num">{render_annotated(appdx.arith_formula_num)}</div>'
        body += self._related_articles(appdx.related_article_num)
        for formula in appdx.formulas:
            body += '<div class="arith-formula">'
            if formula.num != 0:
                body += f'<span class="formula-num">({formula.num})</span>'
            # formula markup is not rendered, only a placeholder
            body += '<span class="formula-content">[算式]</span>'
            body += "</div>"
        body += "</div>"
        return body
