"""Table structures of the law document model."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional, Tuple

from .text import AnnotatedText, Column, Sentence

if TYPE_CHECKING:
    from .law import Remarks


class WritingMode(str, Enum):
    """Text flow direction declared on a Table element."""

    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


@dataclass(frozen=True, slots=True)
class TableHeaderColumn:
    text: AnnotatedText = AnnotatedText()


@dataclass(frozen=True, slots=True)
class TableHeaderRow:
    columns: Tuple[TableHeaderColumn, ...] = ()


@dataclass(frozen=True, slots=True)
class PartRef:
    """Part nested in a table cell, reduced to its title and article titles."""

    title: AnnotatedText = AnnotatedText()
    article_titles: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class TableColumn:
    sentences: Tuple[Sentence, ...] = ()
    columns: Tuple[Column, ...] = ()
    parts: Tuple[PartRef, ...] = ()
    rowspan: int = 1
    colspan: int = 1
    align: str = ""
    valign: str = ""
    border_top: str = ""
    border_bottom: str = ""
    border_left: str = ""
    border_right: str = ""


@dataclass(frozen=True, slots=True)
class TableRow:
    columns: Tuple[TableColumn, ...] = ()


@dataclass(frozen=True, slots=True)
class Table:
    writing_mode: WritingMode = WritingMode.HORIZONTAL
    header_rows: Tuple[TableHeaderRow, ...] = ()
    rows: Tuple[TableRow, ...] = ()


@dataclass(frozen=True, slots=True)
class TableStruct:
    table: Table = Table()
    title: Optional[AnnotatedText] = None
    remarks: Tuple["Remarks", ...] = ()
