"""Immutable document model for Japanese Standard Law XML."""

from .law import (
    MAX_ITEM_LEVEL,
    MAX_LIST_LEVEL,
    AppdxFig,
    AppdxFormat,
    AppdxNote,
    AppdxStyle,
    AppdxTable,
    ArithFormula,
    Article,
    Attachments,
    Chapter,
    Era,
    Fig,
    FigStruct,
    FormatStruct,
    Item,
    Law,
    LawTitle,
    ListEntry,
    MainProvision,
    NoteStruct,
    Paragraph,
    Remarks,
    Section,
    StyleStruct,
    SupplProvision,
    SupplProvisionAppdx,
    SupplProvisionAppdxStyle,
    SupplProvisionAppdxTable,
)
from .table import (
    PartRef,
    Table,
    TableColumn,
    TableHeaderColumn,
    TableHeaderRow,
    TableRow,
    TableStruct,
    WritingMode,
)
from .text import (
    AnnotatedText,
    Column,
    InlineRun,
    LineRun,
    Ruby,
    RubyRun,
    Sentence,
    SentenceBlock,
    SubRun,
    SupRun,
    TextRun,
)

__all__ = [
    "MAX_ITEM_LEVEL",
    "MAX_LIST_LEVEL",
    "AnnotatedText",
    "AppdxFig",
    "AppdxFormat",
    "AppdxNote",
    "AppdxStyle",
    "AppdxTable",
    "ArithFormula",
    "Article",
    "Attachments",
    "Chapter",
    "Column",
    "Era",
    "Fig",
    "FigStruct",
    "FormatStruct",
    "InlineRun",
    "Item",
    "Law",
    "LawTitle",
    "LineRun",
    "ListEntry",
    "MainProvision",
    "NoteStruct",
    "Paragraph",
    "PartRef",
    "Remarks",
    "Ruby",
    "RubyRun",
    "Section",
    "Sentence",
    "SentenceBlock",
    "StyleStruct",
    "SubRun",
    "SupRun",
    "SupplProvision",
    "SupplProvisionAppdx",
    "SupplProvisionAppdxStyle",
    "SupplProvisionAppdxTable",
    "Table",
    "TableColumn",
    "TableHeaderColumn",
    "TableHeaderRow",
    "TableRow",
    "TableStruct",
    "TextRun",
    "WritingMode",
]
