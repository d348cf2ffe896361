"""Inference of CSS list styles from enumerator labels."""

from __future__ import annotations

from enum import Enum
from typing import Sequence

CJK_NUMERALS = ("一", "二", "三", "四", "五", "六", "七", "八", "九", "十")
KATAKANA_IROHA = ("イ", "ロ", "ハ", "ニ", "ホ", "ヘ", "ト", "チ", "リ", "ヌ")
HIRAGANA_IROHA = ("い", "ろ", "は", "に", "ほ", "へ", "と", "ち", "り", "ぬ")
FULL_WIDTH_DIGITS = ("１", "２", "３", "４", "５", "６", "７", "８", "９")

# Labels made redundant by the list's own generated numbering.
ORDINAL_MARKERS = frozenset(
    CJK_NUMERALS
    + ("十一", "十二", "十三", "十四", "十五", "十六", "十七", "十八", "十九", "二十")
    + KATAKANA_IROHA
    + ("ル", "ヲ", "ワ", "カ", "ヨ", "タ", "レ", "ソ", "ツ", "ネ")
    + FULL_WIDTH_DIGITS
    + ("１０", "１１", "１２", "１３", "１４", "１５", "１６", "１７", "１８", "１９", "２０")
)


class ListStyle(str, Enum):
    """List style types produced by ``classify``."""

    NONE = "none"
    DISC = "disc"
    DECIMAL = "decimal"
    CJK_IDEOGRAPHIC = "cjk-ideographic"
    KATAKANA_IROHA = "katakana-iroha"
    HIRAGANA_IROHA = "hiragana-iroha"


def classify(labels: Sequence[str]) -> ListStyle:
    """
    Pick a list style from the first label of an enumeration.

    Args:
        labels: Enumerator labels in document order

    Returns:
        ListStyle for the whole list
    """
    if not labels:
        return ListStyle.NONE

    first = labels[0]
    if first in CJK_NUMERALS:
        return ListStyle.CJK_IDEOGRAPHIC
    if first in KATAKANA_IROHA:
        return ListStyle.KATAKANA_IROHA
    if first in HIRAGANA_IROHA:
        return ListStyle.HIRAGANA_IROHA
    if first in FULL_WIDTH_DIGITS:
        return ListStyle.DECIMAL
    if first.startswith("1"):
        return ListStyle.DECIMAL
    if first.startswith("（") and first.endswith("）"):
        return ListStyle.DECIMAL
    return ListStyle.DISC


def is_ordinal_marker(label: str) -> bool:
    return label in ORDINAL_MARKERS


def open_list(labels: Sequence[str]) -> str:
    """Opening ``<ol>`` tag styled for ``labels``."""
    style = classify(labels)
    if style in (ListStyle.NONE, ListStyle.DISC):
        return "<ol>"
    return f'<ol style="list-style-type: {style.value};">'
