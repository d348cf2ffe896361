"""
Document model for Japanese Standard Law XML.

All nodes are immutable; the compiler only derives output fragments from
them. Paragraphs and items share the ``Attachments`` capability (figures,
tables, style blocks and freeform lists) instead of repeating those fields
per node type.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .table import TableStruct
from .text import AnnotatedText, Sentence, SentenceBlock

# Item (0) -> Subitem1 (1) -> Subitem2 (2)
MAX_ITEM_LEVEL = 2
# List (0) -> Sublist1 (1) -> Sublist2 (2) -> Sublist3 (3)
MAX_LIST_LEVEL = 3


class Era(str, Enum):
    """Japanese eras used in the Law@Era attribute."""

    MEIJI = "Meiji"
    TAISHO = "Taisho"
    SHOWA = "Showa"
    HEISEI = "Heisei"
    REIWA = "Reiwa"

    @property
    def label(self) -> str:
        return _ERA_LABELS[self]


_ERA_LABELS = {
    Era.MEIJI: "明治",
    Era.TAISHO: "大正",
    Era.SHOWA: "昭和",
    Era.HEISEI: "平成",
    Era.REIWA: "令和",
}


@dataclass(frozen=True, slots=True)
class Fig:
    src: str = ""


@dataclass(frozen=True, slots=True)
class FigStruct:
    fig: Fig = Fig()
    title: Optional[AnnotatedText] = None
    remarks: Tuple["Remarks", ...] = ()


@dataclass(frozen=True, slots=True)
class StyleStruct:
    """Style block; ``content`` is the inner markup left after lifting Fig elements."""

    title: Optional[AnnotatedText] = None
    figures: Tuple[Fig, ...] = ()
    content: str = ""
    remarks: Tuple["Remarks", ...] = ()


@dataclass(frozen=True, slots=True)
class FormatStruct:
    title: Optional[AnnotatedText] = None
    figures: Tuple[Fig, ...] = ()
    content: str = ""
    remarks: Tuple["Remarks", ...] = ()


@dataclass(frozen=True, slots=True)
class ListEntry:
    """Freeform list entry (List, Sublist1, Sublist2 or Sublist3 by ``level``)."""

    body: SentenceBlock = SentenceBlock()
    children: Tuple["ListEntry", ...] = ()
    level: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.level <= MAX_LIST_LEVEL:
            raise ValueError(f"list level {self.level} outside 0..{MAX_LIST_LEVEL}")
        for child in self.children:
            if child.level != self.level + 1:
                raise ValueError(f"sublist level {child.level} under list level {self.level}")


@dataclass(frozen=True, slots=True)
class Attachments:
    """Figures, tables, style blocks and lists hanging off a paragraph or item."""

    figures: Tuple[FigStruct, ...] = ()
    tables: Tuple[TableStruct, ...] = ()
    styles: Tuple[StyleStruct, ...] = ()
    lists: Tuple[ListEntry, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.figures or self.tables or self.styles or self.lists)


@dataclass(frozen=True, slots=True)
class Item:
    """
    Enumeration entry.

    Level 0 is an Item, 1 a Subitem1 and 2 a Subitem2. Children must sit
    exactly one level deeper and nothing may nest below level 2.
    """

    title: Optional[AnnotatedText] = None
    body: SentenceBlock = SentenceBlock()
    children: Tuple["Item", ...] = ()
    level: int = 0
    attachments: Attachments = Attachments()

    def __post_init__(self) -> None:
        if not 0 <= self.level <= MAX_ITEM_LEVEL:
            raise ValueError(f"item level {self.level} outside 0..{MAX_ITEM_LEVEL}")
        for child in self.children:
            if child.level != self.level + 1:
                raise ValueError(f"subitem level {child.level} under item level {self.level}")

    @property
    def label(self) -> str:
        return self.title.text if self.title is not None else ""


@dataclass(frozen=True, slots=True)
class Remarks:
    label: AnnotatedText = AnnotatedText()
    sentences: Tuple[Sentence, ...] = ()
    items: Tuple[Item, ...] = ()


@dataclass(frozen=True, slots=True)
class Paragraph:
    """Paragraph; ``num`` > 0 places it inside an ordered list."""

    num: int = 0
    label: AnnotatedText = AnnotatedText()
    body: SentenceBlock = SentenceBlock()
    items: Tuple[Item, ...] = ()
    attachments: Attachments = Attachments()


@dataclass(frozen=True, slots=True)
class NoteStruct:
    title: Optional[AnnotatedText] = None
    paragraphs: Tuple[Paragraph, ...] = ()
    content: str = ""
    remarks: Tuple[Remarks, ...] = ()


@dataclass(frozen=True, slots=True)
class Article:
    title: AnnotatedText
    caption: Optional[AnnotatedText] = None
    paragraphs: Tuple[Paragraph, ...] = ()
    num: str = ""

    @property
    def plain_title(self) -> str:
        """Title used in the table of contents."""
        if self.caption is not None:
            return f"{self.title.plain} {self.caption.plain}"
        return self.title.plain


@dataclass(frozen=True, slots=True)
class Section:
    title: AnnotatedText
    articles: Tuple[Article, ...] = ()


@dataclass(frozen=True, slots=True)
class Chapter:
    title: AnnotatedText
    sections: Tuple[Section, ...] = ()
    articles: Tuple[Article, ...] = ()


@dataclass(frozen=True, slots=True)
class MainProvision:
    chapters: Tuple[Chapter, ...] = ()
    articles: Tuple[Article, ...] = ()
    paragraphs: Tuple[Paragraph, ...] = ()


@dataclass(frozen=True, slots=True)
class AppdxNote:
    title: Optional[AnnotatedText] = None
    related_article_num: Optional[AnnotatedText] = None
    note_structs: Tuple[NoteStruct, ...] = ()
    figures: Tuple[FigStruct, ...] = ()
    tables: Tuple[TableStruct, ...] = ()
    remarks: Optional[Remarks] = None


@dataclass(frozen=True, slots=True)
class AppdxTable:
    title: Optional[AnnotatedText] = None
    related_article_num: Optional[AnnotatedText] = None
    tables: Tuple[TableStruct, ...] = ()
    remarks: Optional[Remarks] = None


@dataclass(frozen=True, slots=True)
class AppdxStyle:
    title: Optional[AnnotatedText] = None
    related_article_num: Optional[AnnotatedText] = None
    styles: Tuple[StyleStruct, ...] = ()
    remarks: Optional[Remarks] = None


@dataclass(frozen=True, slots=True)
class AppdxFormat:
    title: Optional[AnnotatedText] = None
    related_article_num: Optional[AnnotatedText] = None
    formats: Tuple[FormatStruct, ...] = ()


@dataclass(frozen=True, slots=True)
class AppdxFig:
    title: Optional[AnnotatedText] = None
    related_article_num: Optional[AnnotatedText] = None
    figures: Tuple[FigStruct, ...] = ()
    tables: Tuple[TableStruct, ...] = ()


@dataclass(frozen=True, slots=True)
class SupplProvisionAppdxTable:
    title: AnnotatedText = AnnotatedText()
    related_article_num: Optional[AnnotatedText] = None
    tables: Tuple[TableStruct, ...] = ()


@dataclass(frozen=True, slots=True)
class SupplProvisionAppdxStyle:
    title: AnnotatedText = AnnotatedText()
    related_article_num: Optional[AnnotatedText] = None
    styles: Tuple[StyleStruct, ...] = ()


@dataclass(frozen=True, slots=True)
class ArithFormula:
    num: int = 0
    content: str = ""


@dataclass(frozen=True, slots=True)
class SupplProvisionAppdx:
    arith_formula_num: Optional[AnnotatedText] = None
    related_article_num: Optional[AnnotatedText] = None
    formulas: Tuple[ArithFormula, ...] = ()


@dataclass(frozen=True, slots=True)
class SupplProvision:
    label: AnnotatedText = AnnotatedText()
    amend_law_num: str = ""
    extract: bool = False
    kind: str = ""
    chapters: Tuple[Chapter, ...] = ()
    articles: Tuple[Article, ...] = ()
    paragraphs: Tuple[Paragraph, ...] = ()
    appdx_tables: Tuple[SupplProvisionAppdxTable, ...] = ()
    appdx_styles: Tuple[SupplProvisionAppdxStyle, ...] = ()
    appdx: Tuple[SupplProvisionAppdx, ...] = ()


@dataclass(frozen=True, slots=True)
class LawTitle:
    text: AnnotatedText
    kana: str = ""
    abbrev: str = ""


@dataclass(frozen=True, slots=True)
class Law:
    """Root of a parsed law document."""

    title: LawTitle
    law_num: str = ""
    era: Optional[Era] = None
    year: int = 0
    num: int = 0
    law_type: str = ""
    lang: str = "ja"
    promulgate_month: int = 0
    promulgate_day: int = 0
    enact_statements: Tuple[AnnotatedText, ...] = ()
    main_provision: MainProvision = MainProvision()
    suppl_provisions: Tuple[SupplProvision, ...] = ()
    appdx_notes: Tuple[AppdxNote, ...] = ()
    appdx_tables: Tuple[AppdxTable, ...] = ()
    appdx_styles: Tuple[AppdxStyle, ...] = ()
    appdx_formats: Tuple[AppdxFormat, ...] = ()
    appdx_figs: Tuple[AppdxFig, ...] = ()

    def promulgation_date_label(self, separator: str = "") -> str:
        """Render the promulgation date, e.g. ``令和5年4月1日``."""
        era = self.era.label if self.era is not None else ""
        return f"{era}{separator}{self.year}年{self.promulgate_month}月{self.promulgate_day}日"
