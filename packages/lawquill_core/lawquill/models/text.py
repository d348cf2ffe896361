"""
Inline text structures of the law document model.

Titles are kept as ``AnnotatedText`` (character data plus the ruby runs
collected from it), sentences keep their inline runs in document order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True, slots=True)
class Ruby:
    """Phonetic guide binding a base run to one or more reading segments."""

    base: str
    readings: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class AnnotatedText:
    """Title-like text with its ruby decorations."""

    text: str = ""
    ruby: Tuple[Ruby, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.text and not self.ruby

    @property
    def plain(self) -> str:
        """Text with ruby bases appended, the form used for TOC labels."""
        return self.text + "".join(r.base for r in self.ruby)


@dataclass(frozen=True, slots=True)
class TextRun:
    text: str


@dataclass(frozen=True, slots=True)
class RubyRun:
    ruby: Ruby


@dataclass(frozen=True, slots=True)
class SupRun:
    text: str


@dataclass(frozen=True, slots=True)
class SubRun:
    text: str


@dataclass(frozen=True, slots=True)
class LineRun:
    """Underlined span; ``style`` is the XML ``Style`` attribute (solid, dotted...)."""

    runs: Tuple["InlineRun", ...] = ()
    style: str = "solid"


InlineRun = Union[TextRun, RubyRun, SupRun, SubRun, LineRun]


@dataclass(frozen=True, slots=True)
class Sentence:
    runs: Tuple[InlineRun, ...] = ()
    num: int = 0
    function: str = ""

    @property
    def text(self) -> str:
        return "".join(_run_text(run) for run in self.runs)


@dataclass(frozen=True, slots=True)
class Column:
    """Inline column of a sentence block; ``line_break`` forces a break after it."""

    sentences: Tuple[Sentence, ...] = ()
    line_break: bool = False
    num: int = 0


@dataclass(frozen=True, slots=True)
class SentenceBlock:
    """Content of ParagraphSentence, ItemSentence, ListSentence and friends."""

    sentences: Tuple[Sentence, ...] = ()
    columns: Tuple[Column, ...] = ()

    @property
    def text(self) -> str:
        parts = [s.text for s in self.sentences]
        for column in self.columns:
            parts.extend(s.text for s in column.sentences)
        return "".join(parts)


def _run_text(run: InlineRun) -> str:
    if isinstance(run, RubyRun):
        return run.ruby.base
    if isinstance(run, LineRun):
        return "".join(_run_text(inner) for inner in run.runs)
    return run.text
