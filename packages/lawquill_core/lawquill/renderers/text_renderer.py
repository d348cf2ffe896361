"""
Text and phonetic-annotation formatting.

Titles arrive as plain text plus a list of ruby runs whose original
position inside the text is not tracked, so ``render_text`` appends the
ruby markup after the escaped text. Sentences keep their inline runs and
render them in document order.
"""

from __future__ import annotations

from html import escape
from typing import Iterable, Optional, Sequence

from ..models import (
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
)


def render_ruby(ruby: Ruby) -> str:
    """Render one ruby run; a run without readings is just its escaped base."""
    if not ruby.readings:
        return escape(ruby.base)
    readings = "".join(f"<rt>{escape(reading)}</rt>" for reading in ruby.readings)
    return f"<ruby>{escape(ruby.base)}{readings}</ruby>"


def render_text(text: str, annotations: Sequence[Ruby] = ()) -> str:
    """
    Escape ``text`` and append one ruby fragment per annotation.

    Args:
        text: Plain text
        annotations: Ruby runs, rendered in list order after the text

    Returns:
        HTML fragment whose prefix is always ``escape(text)``
    """
    if not annotations:
        return escape(text)
    return escape(text) + "".join(render_ruby(ruby) for ruby in annotations)


def render_annotated(value: Optional[AnnotatedText]) -> str:
    if value is None:
        return ""
    return render_text(value.text, value.ruby)


def render_runs(runs: Iterable[InlineRun]) -> str:
    parts = []
    for run in runs:
        if isinstance(run, RubyRun):
            parts.append(render_ruby(run.ruby))
        elif isinstance(run, SupRun):
            parts.append(f"<sup>{escape(run.text)}</sup>")
        elif isinstance(run, SubRun):
            parts.append(f"<sub>{escape(run.text)}</sub>")
        elif isinstance(run, LineRun):
            parts.append(_render_line(run))
        else:
            parts.append(escape(run.text))
    return "".join(parts)


def _render_line(run: LineRun) -> str:
    inner = render_runs(run.runs)
    if run.style == "none":
        return inner
    style = "text-decoration: underline;"
    if run.style in ("dotted", "double"):
        style += f" text-decoration-style: {run.style};"
    return f'<span class="line" style="{style}">{inner}</span>'


def render_sentence(sentence: Sentence) -> str:
    return render_runs(sentence.runs)


def render_sentences(sentences: Iterable[Sentence]) -> str:
    return "".join(render_sentence(sentence) for sentence in sentences)


def render_column(column: Column) -> str:
    """Column sentences, followed by a forced break when LineBreak is set."""
    html = render_sentences(column.sentences)
    if column.line_break:
        html += "<br/>"
    return html


def render_sentence_block(block: SentenceBlock) -> str:
    return render_sentences(block.sentences) + "".join(render_column(c) for c in block.columns)
