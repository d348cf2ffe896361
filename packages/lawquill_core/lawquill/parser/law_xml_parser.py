"""
Parser for Japanese Standard Law XML (法令標準XMLスキーマ).

Builds the immutable document model from raw XML bytes using lxml.
Structural problems are reported as MalformedInputError, absent titles
that later become page titles as MissingRequiredFieldError.
"""

from __future__ import annotations

import copy
import logging
from html import escape
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar, Union

from lxml import etree

from ..exceptions import (
    MalformedInputError,
    MissingRequiredFieldError,
    SourceIOError,
    error_context,
)
from ..models import (
    MAX_ITEM_LEVEL,
    MAX_LIST_LEVEL,
    AnnotatedText,
    AppdxFig,
    AppdxFormat,
    AppdxNote,
    AppdxStyle,
    AppdxTable,
    ArithFormula,
    Article,
    Attachments,
    Chapter,
    Column,
    Era,
    Fig,
    FigStruct,
    FormatStruct,
    InlineRun,
    Item,
    Law,
    LawTitle,
    LineRun,
    ListEntry,
    MainProvision,
    NoteStruct,
    Paragraph,
    PartRef,
    Remarks,
    Ruby,
    RubyRun,
    Section,
    Sentence,
    SentenceBlock,
    StyleStruct,
    SubRun,
    SupplProvision,
    SupplProvisionAppdx,
    SupplProvisionAppdxStyle,
    SupplProvisionAppdxTable,
    SupRun,
    Table,
    TableColumn,
    TableHeaderColumn,
    TableHeaderRow,
    TableRow,
    TableStruct,
    TextRun,
    WritingMode,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_PART_TITLE = "編"

_ITEM_TITLE_TAGS = ("ItemTitle", "Subitem1Title", "Subitem2Title")
_ITEM_SENTENCE_TAGS = ("ItemSentence", "Subitem1Sentence", "Subitem2Sentence")
_ITEM_CHILD_TAGS = ("Subitem1", "Subitem2", "Subitem3")
_LIST_SENTENCE_TAGS = ("ListSentence", "Sublist1Sentence", "Sublist2Sentence", "Sublist3Sentence")
_LIST_CHILD_TAGS = ("Sublist1", "Sublist2", "Sublist3", "Sublist4")


class LawXMLParser:
    """
    Parser for law XML documents.

    The parser is stateless; one instance can parse any number of documents.
    """

    def __init__(self) -> None:
        self._xml_parser = etree.XMLParser(
            resolve_entities=False,
            no_network=True,
            remove_comments=True,
            remove_pis=True,
            huge_tree=True,
        )

    def parse(self, raw: Union[bytes, str]) -> Law:
        """
        Parse raw XML into a Law.

        Args:
            raw: XML document as bytes (or text)

        Returns:
            Parsed Law

        Raises:
            MalformedInputError: If the XML is unparseable or not a Law document
            MissingRequiredFieldError: If a required title is absent
        """
        if isinstance(raw, str):
            raw = raw.encode("utf-8")
        try:
            root = etree.fromstring(raw, self._xml_parser)
        except etree.XMLSyntaxError as exc:
            raise MalformedInputError("unmarshalling XML", details=str(exc)) from exc

        if root.tag != "Law":
            raise MalformedInputError("unexpected root element", details=str(root.tag))

        law = self._parse_law(root)
        logger.debug(f"Parsed law {law.law_num!r} ({law.title.text.plain})")
        return law

    def parse_file(self, path: Union[str, Path]) -> Law:
        """Read ``path`` and parse it."""
        try:
            raw = Path(path).read_bytes()
        except OSError as exc:
            raise SourceIOError(f"opening XML file {path}", details=str(exc)) from exc
        return self.parse(raw)

    # ------------------------------------------------------------------
    # Document level
    # ------------------------------------------------------------------

    def _parse_law(self, root: etree._Element) -> Law:
        body = root.find("LawBody")
        if body is None:
            raise MalformedInputError("missing LawBody element")

        title_el = body.find("LawTitle")
        title = self._annotated(title_el)
        if title is None or title.is_empty:
            raise MissingRequiredFieldError("missing law title", field="LawTitle")

        main_el = body.find("MainProvision")
        return Law(
            title=LawTitle(
                text=title,
                kana=title_el.get("Kana", ""),
                abbrev=title_el.get("Abbrev", ""),
            ),
            law_num=self._text(root.find("LawNum")),
            era=self._era(root.get("Era")),
            year=self._int_attr(root, "Year"),
            num=self._int_attr(root, "Num"),
            law_type=root.get("LawType", ""),
            lang=root.get("Lang") or "ja",
            promulgate_month=self._int_attr(root, "PromulgateMonth"),
            promulgate_day=self._int_attr(root, "PromulgateDay"),
            enact_statements=tuple(self._annotated(el) for el in body.findall("EnactStatement")),
            main_provision=self._main_provision(main_el) if main_el is not None else MainProvision(),
            suppl_provisions=self._each(body, "SupplProvision", self._suppl_provision),
            appdx_notes=self._each(body, "AppdxNote", self._appdx_note),
            appdx_tables=self._each(body, "AppdxTable", self._appdx_table),
            appdx_styles=self._each(body, "AppdxStyle", self._appdx_style),
            appdx_formats=self._each(body, "AppdxFormat", self._appdx_format),
            appdx_figs=self._each(body, "AppdxFig", self._appdx_fig),
        )

    def _main_provision(self, el: etree._Element) -> MainProvision:
        chapters: List[etree._Element] = []
        for child in el:
            if child.tag == "Chapter":
                chapters.append(child)
            elif child.tag == "Part":
                # 編 holds either chapters, which are flattened in document
                # order, or articles, which get a chapter page of their own
                part_chapters = child.findall("Chapter")
                if part_chapters:
                    chapters.extend(part_chapters)
                elif child.find("Article") is not None:
                    chapters.append(child)
        return MainProvision(
            chapters=self._indexed(chapters, "Chapter", self._chapter),
            articles=self._each(el, "Article", self._article),
            paragraphs=self._each(el, "Paragraph", self._paragraph),
        )

    def _chapter(self, el: etree._Element) -> Chapter:
        if el.tag == "Part":
            title = self._annotated(el.find("PartTitle"))
            if title is None or title.is_empty:
                title = AnnotatedText(text=DEFAULT_PART_TITLE)
            return Chapter(title=title, articles=self._each(el, "Article", self._article))
        return Chapter(
            title=self._required_title(el, "ChapterTitle"),
            sections=self._each(el, "Section", self._section),
            articles=self._each(el, "Article", self._article),
        )

    def _section(self, el: etree._Element) -> Section:
        return Section(
            title=self._annotated(el.find("SectionTitle")) or AnnotatedText(),
            articles=self._indexed(self._nested_articles(el), "Article", self._article),
        )

    @staticmethod
    def _nested_articles(el: etree._Element) -> List[etree._Element]:
        """Articles of a section, through any Subsection and Division levels, in document order."""
        articles = []
        for child in el:
            if child.tag == "Article":
                articles.append(child)
            elif child.tag in ("Subsection", "Division"):
                articles.extend(LawXMLParser._nested_articles(child))
        return articles

    def _article(self, el: etree._Element) -> Article:
        return Article(
            title=self._required_title(el, "ArticleTitle"),
            caption=self._annotated(el.find("ArticleCaption")),
            paragraphs=self._each(el, "Paragraph", self._paragraph),
            num=el.get("Num", ""),
        )

    # ------------------------------------------------------------------
    # Paragraph level
    # ------------------------------------------------------------------

    def _paragraph(self, el: etree._Element) -> Paragraph:
        return Paragraph(
            num=self._int_attr(el, "Num"),
            label=self._annotated(el.find("ParagraphNum")) or AnnotatedText(),
            body=self._sentence_block(el.find("ParagraphSentence")),
            items=tuple(self._item(child, 0) for child in el.findall("Item")),
            attachments=self._attachments(el),
        )

    def _item(self, el: etree._Element, level: int) -> Item:
        child_tag = _ITEM_CHILD_TAGS[level]
        if level < MAX_ITEM_LEVEL:
            children = tuple(self._item(child, level + 1) for child in el.findall(child_tag))
        else:
            children = ()
            if el.find(child_tag) is not None:
                logger.debug(f"Ignoring {child_tag} below Subitem2")
        return Item(
            title=self._annotated(el.find(_ITEM_TITLE_TAGS[level])),
            body=self._sentence_block(el.find(_ITEM_SENTENCE_TAGS[level])),
            children=children,
            level=level,
            attachments=self._attachments(el),
        )

    def _list_entry(self, el: etree._Element, level: int) -> ListEntry:
        child_tag = _LIST_CHILD_TAGS[level]
        if level < MAX_LIST_LEVEL:
            children = tuple(self._list_entry(child, level + 1) for child in el.findall(child_tag))
        else:
            children = ()
        return ListEntry(
            body=self._sentence_block(el.find(_LIST_SENTENCE_TAGS[level])),
            children=children,
            level=level,
        )

    def _attachments(self, el: etree._Element) -> Attachments:
        return Attachments(
            figures=tuple(self._fig_struct(child) for child in el.findall("FigStruct")),
            tables=tuple(self._table_struct(child) for child in el.findall("TableStruct")),
            styles=tuple(self._style_struct(child) for child in el.findall("StyleStruct")),
            lists=tuple(self._list_entry(child, 0) for child in el.findall("List")),
        )

    def _remarks(self, el: etree._Element) -> Remarks:
        return Remarks(
            label=self._annotated(el.find("RemarksLabel")) or AnnotatedText(),
            sentences=tuple(self._sentence(child) for child in el.findall("Sentence")),
            items=tuple(self._item(child, 0) for child in el.findall("Item")),
        )

    # ------------------------------------------------------------------
    # Figures, styles, formats, notes
    # ------------------------------------------------------------------

    def _fig_struct(self, el: etree._Element) -> FigStruct:
        fig_el = el.find("Fig")
        return FigStruct(
            fig=Fig(src=fig_el.get("src", "") if fig_el is not None else ""),
            title=self._annotated(el.find("FigStructTitle")),
            remarks=tuple(self._remarks(child) for child in el.findall("Remarks")),
        )

    def _style_struct(self, el: etree._Element) -> StyleStruct:
        figures, content = self._lift_figures(el.find("Style"))
        return StyleStruct(
            title=self._annotated(el.find("StyleStructTitle")),
            figures=figures,
            content=content,
            remarks=tuple(self._remarks(child) for child in el.findall("Remarks")),
        )

    def _format_struct(self, el: etree._Element) -> FormatStruct:
        figures, content = self._lift_figures(el.find("Format"))
        return FormatStruct(
            title=self._annotated(el.find("FormatStructTitle")),
            figures=figures,
            content=content,
            remarks=tuple(self._remarks(child) for child in el.findall("Remarks")),
        )

    def _note_struct(self, el: etree._Element) -> NoteStruct:
        note = el.find("Note")
        paragraphs: Tuple[Paragraph, ...] = ()
        content = ""
        if note is not None:
            paragraphs = tuple(self._paragraph(child) for child in note.findall("Paragraph"))
            content = self._inner_markup(note)
        return NoteStruct(
            title=self._annotated(el.find("NoteStructTitle")),
            paragraphs=paragraphs,
            content=content,
            remarks=tuple(self._remarks(child) for child in el.findall("Remarks")),
        )

    def _lift_figures(self, el: Optional[etree._Element]) -> Tuple[Tuple[Fig, ...], str]:
        """Split a Style/Format element into its Fig references and remaining markup."""
        if el is None:
            return (), ""
        working = copy.deepcopy(el)
        figures = []
        for fig in list(working.iter("Fig")):
            figures.append(Fig(src=fig.get("src", "")))
            _remove_keeping_tail(fig)
        return tuple(figures), self._inner_markup(working)

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def _table_struct(self, el: etree._Element) -> TableStruct:
        table_el = el.find("Table")
        return TableStruct(
            table=self._table(table_el) if table_el is not None else Table(),
            title=self._annotated(el.find("TableStructTitle")),
            remarks=tuple(self._remarks(child) for child in el.findall("Remarks")),
        )

    def _table(self, el: etree._Element) -> Table:
        mode = WritingMode.VERTICAL if el.get("WritingMode") == "vertical" else WritingMode.HORIZONTAL
        header_rows = tuple(
            TableHeaderRow(
                columns=tuple(
                    TableHeaderColumn(text=self._annotated(col) or AnnotatedText())
                    for col in row.findall("TableHeaderColumn")
                )
            )
            for row in el.findall("TableHeaderRow")
        )
        rows = tuple(
            TableRow(columns=tuple(self._table_column(col) for col in row.findall("TableColumn")))
            for row in el.findall("TableRow")
        )
        return Table(writing_mode=mode, header_rows=header_rows, rows=rows)

    def _table_column(self, el: etree._Element) -> TableColumn:
        parts = tuple(
            PartRef(
                title=self._annotated(part.find("PartTitle")) or AnnotatedText(),
                article_titles=tuple(
                    self._text(article.find("ArticleTitle"))
                    for article in part.iter("Article")
                    if article.find("ArticleTitle") is not None
                ),
            )
            for part in el.findall("Part")
        )
        return TableColumn(
            sentences=tuple(self._sentence(child) for child in el.findall("Sentence")),
            columns=tuple(self._column(child) for child in el.findall("Column")),
            parts=parts,
            rowspan=_span(el.get("rowspan")),
            colspan=_span(el.get("colspan")),
            align=el.get("Align", ""),
            valign=el.get("Valign", ""),
            border_top=el.get("BorderTop", ""),
            border_bottom=el.get("BorderBottom", ""),
            border_left=el.get("BorderLeft", ""),
            border_right=el.get("BorderRight", ""),
        )

    # ------------------------------------------------------------------
    # Appendices and supplementary provisions
    # ------------------------------------------------------------------

    def _appdx_note(self, el: etree._Element) -> AppdxNote:
        remarks = el.find("Remarks")
        return AppdxNote(
            title=self._annotated(el.find("AppdxNoteTitle")),
            related_article_num=self._annotated(el.find("RelatedArticleNum")),
            note_structs=tuple(self._note_struct(child) for child in el.findall("NoteStruct")),
            figures=tuple(self._fig_struct(child) for child in el.findall("FigStruct")),
            tables=tuple(self._table_struct(child) for child in el.findall("TableStruct")),
            remarks=self._remarks(remarks) if remarks is not None else None,
        )

    def _appdx_table(self, el: etree._Element) -> AppdxTable:
        remarks = el.find("Remarks")
        return AppdxTable(
            title=self._annotated(el.find("AppdxTableTitle")),
            related_article_num=self._annotated(el.find("RelatedArticleNum")),
            tables=tuple(self._table_struct(child) for child in el.findall("TableStruct")),
            remarks=self._remarks(remarks) if remarks is not None else None,
        )

    def _appdx_style(self, el: etree._Element) -> AppdxStyle:
        remarks = el.find("Remarks")
        return AppdxStyle(
            title=self._annotated(el.find("AppdxStyleTitle")),
            related_article_num=self._annotated(el.find("RelatedArticleNum")),
            styles=tuple(self._style_struct(child) for child in el.findall("StyleStruct")),
            remarks=self._remarks(remarks) if remarks is not None else None,
        )

    def _appdx_format(self, el: etree._Element) -> AppdxFormat:
        return AppdxFormat(
            title=self._annotated(el.find("AppdxFormatTitle")),
            related_article_num=self._annotated(el.find("RelatedArticleNum")),
            formats=tuple(self._format_struct(child) for child in el.findall("FormatStruct")),
        )

    def _appdx_fig(self, el: etree._Element) -> AppdxFig:
        return AppdxFig(
            title=self._annotated(el.find("AppdxFigTitle")),
            related_article_num=self._annotated(el.find("RelatedArticleNum")),
            figures=tuple(self._fig_struct(child) for child in el.findall("FigStruct")),
            tables=tuple(self._table_struct(child) for child in el.findall("TableStruct")),
        )

    def _suppl_provision(self, el: etree._Element) -> SupplProvision:
        return SupplProvision(
            label=self._annotated(el.find("SupplProvisionLabel")) or AnnotatedText(),
            amend_law_num=el.get("AmendLawNum", ""),
            extract=el.get("Extract") == "true",
            kind=el.get("Type", ""),
            chapters=self._each(el, "Chapter", self._chapter),
            articles=self._each(el, "Article", self._article),
            paragraphs=self._each(el, "Paragraph", self._paragraph),
            appdx_tables=tuple(
                SupplProvisionAppdxTable(
                    title=self._annotated(child.find("SupplProvisionAppdxTableTitle")) or AnnotatedText(),
                    related_article_num=self._annotated(child.find("RelatedArticleNum")),
                    tables=tuple(self._table_struct(t) for t in child.findall("TableStruct")),
                )
                for child in el.findall("SupplProvisionAppdxTable")
            ),
            appdx_styles=tuple(
                SupplProvisionAppdxStyle(
                    title=self._annotated(child.find("SupplProvisionAppdxStyleTitle")) or AnnotatedText(),
                    related_article_num=self._annotated(child.find("RelatedArticleNum")),
                    styles=tuple(self._style_struct(s) for s in child.findall("StyleStruct")),
                )
                for child in el.findall("SupplProvisionAppdxStyle")
            ),
            appdx=tuple(
                SupplProvisionAppdx(
                    arith_formula_num=self._annotated(child.find("ArithFormulaNum")),
                    related_article_num=self._annotated(child.find("RelatedArticleNum")),
                    formulas=tuple(
                        ArithFormula(num=self._int_attr(f, "Num"), content=self._inner_markup(f))
                        for f in child.findall("ArithFormula")
                    ),
                )
                for child in el.findall("SupplProvisionAppdx")
            ),
        )

    # ------------------------------------------------------------------
    # Inline content
    # ------------------------------------------------------------------

    def _sentence_block(self, el: Optional[etree._Element]) -> SentenceBlock:
        if el is None:
            return SentenceBlock()
        return SentenceBlock(
            sentences=tuple(self._sentence(child) for child in el.findall("Sentence")),
            columns=tuple(self._column(child) for child in el.findall("Column")),
        )

    def _column(self, el: etree._Element) -> Column:
        return Column(
            sentences=tuple(self._sentence(child) for child in el.findall("Sentence")),
            line_break=el.get("LineBreak") == "true",
            num=self._int_attr(el, "Num"),
        )

    def _sentence(self, el: etree._Element) -> Sentence:
        return Sentence(
            runs=self._runs(el),
            num=self._int_attr(el, "Num"),
            function=el.get("Function", ""),
        )

    def _runs(self, el: etree._Element) -> Tuple[InlineRun, ...]:
        runs: List[InlineRun] = []
        if el.text:
            runs.append(TextRun(el.text))
        for child in el:
            if child.tag == "Ruby":
                runs.append(RubyRun(self._ruby(child)))
            elif child.tag == "Sup":
                runs.append(SupRun("".join(child.itertext())))
            elif child.tag == "Sub":
                runs.append(SubRun("".join(child.itertext())))
            elif child.tag == "Line":
                runs.append(LineRun(runs=self._runs(child), style=child.get("Style", "solid")))
            else:
                text = "".join(child.itertext())
                if text:
                    runs.append(TextRun(text))
            if child.tail:
                runs.append(TextRun(child.tail))
        return tuple(runs)

    def _ruby(self, el: etree._Element) -> Ruby:
        base = [el.text or ""]
        readings = []
        for child in el:
            if child.tag == "Rt":
                readings.append("".join(child.itertext()))
            else:
                base.append("".join(child.itertext()))
            base.append(child.tail or "")
        return Ruby(base="".join(base), readings=tuple(readings))

    def _annotated(self, el: Optional[etree._Element]) -> Optional[AnnotatedText]:
        """Title-like text: character data outside Ruby plus the Ruby runs in order."""
        if el is None:
            return None
        texts = [el.text or ""]
        rubies = []
        for child in el:
            if child.tag == "Ruby":
                rubies.append(self._ruby(child))
            else:
                texts.append("".join(child.itertext()))
            texts.append(child.tail or "")
        return AnnotatedText(text="".join(texts).strip(), ruby=tuple(rubies))

    def _required_title(self, el: etree._Element, tag: str) -> AnnotatedText:
        title = self._annotated(el.find(tag))
        if title is None or title.is_empty:
            raise MissingRequiredFieldError(f"missing {tag}", field=tag)
        return title

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _each(self, el: etree._Element, tag: str, build: Callable[[etree._Element], T]) -> Tuple[T, ...]:
        return self._indexed(el.findall(tag), tag, build)

    def _indexed(
        self, elements: Sequence[etree._Element], tag: str, build: Callable[[etree._Element], T]
    ) -> Tuple[T, ...]:
        results = []
        for index, child in enumerate(elements):
            with error_context(f"parsing {tag} {index}"):
                results.append(build(child))
        return tuple(results)

    @staticmethod
    def _text(el: Optional[etree._Element]) -> str:
        if el is None:
            return ""
        return "".join(el.itertext()).strip()

    @staticmethod
    def _int_attr(el: etree._Element, name: str) -> int:
        value = el.get(name)
        if value is None or value.strip() == "":
            return 0
        try:
            return int(value)
        except ValueError as exc:
            raise MalformedInputError(f"invalid {name} attribute on {el.tag}", details=value) from exc

    @staticmethod
    def _era(value: Optional[str]) -> Optional[Era]:
        if not value:
            return None
        try:
            return Era(value)
        except ValueError:
            logger.warning(f"Unknown era {value!r}; promulgation date will omit it")
            return None

    @staticmethod
    def _inner_markup(el: etree._Element) -> str:
        parts = [escape(el.text or "", quote=False)]
        for child in el:
            parts.append(etree.tostring(child, encoding="unicode", with_tail=True))
        return "".join(parts).strip()


def _span(value: Optional[str]) -> int:
    if not value:
        return 1
    try:
        span = int(value)
    except ValueError:
        return 1
    return span if span > 0 else 1


def _remove_keeping_tail(node: etree._Element) -> None:
    """Remove ``node`` from its parent without dropping the text that follows it."""
    parent = node.getparent()
    if parent is None:
        return
    if node.tail:
        previous = node.getprevious()
        if previous is not None:
            previous.tail = (previous.tail or "") + node.tail
        else:
            parent.text = (parent.text or "") + node.tail
    parent.remove(node)
