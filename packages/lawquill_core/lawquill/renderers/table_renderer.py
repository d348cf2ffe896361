"""Rendering routines for law tables."""

from __future__ import annotations

from html import escape
from typing import List

from ..models import (
    PartRef,
    Table,
    TableColumn,
    TableHeaderColumn,
    TableHeaderRow,
    TableRow,
    WritingMode,
)
from .text_renderer import render_annotated, render_column, render_sentences

_BORDER_STYLES = ("solid", "dashed", "dotted", "double")


class TableRenderer:
    """Render Table elements as HTML tables with inline border styling."""

    border_width = "1px"
    border_color = "#ccc"

    def render(self, table: Table) -> str:
        css_class = "law-table"
        if table.writing_mode == WritingMode.VERTICAL:
            css_class += " vertical-writing"

        parts = [f'<div class="table-container"><table class="{css_class}">']
        if table.header_rows:
            parts.append("<thead>")
            parts.extend(self._render_header_row(row) for row in table.header_rows)
            parts.append("</thead>")
        parts.append("<tbody>")
        parts.extend(self._render_row(row) for row in table.rows)
        parts.append("</tbody>")
        parts.append("</table></div>")
        return "".join(parts)

    # ------------------------------------------------------------------
    # Rows and cells
    # ------------------------------------------------------------------
    def _render_header_row(self, row: TableHeaderRow) -> str:
        return "<tr>" + "".join(self._render_header_cell(col) for col in row.columns) + "</tr>"

    def _render_header_cell(self, column: TableHeaderColumn) -> str:
        return f"<th>{render_annotated(column.text)}</th>"

    def _render_row(self, row: TableRow) -> str:
        return "<tr>" + "".join(self._render_cell(col) for col in row.columns) + "</tr>"

    def _render_cell(self, column: TableColumn) -> str:
        content = render_sentences(column.sentences)
        content += "".join(render_column(inner) for inner in column.columns)
        content += "".join(self._render_part(part) for part in column.parts)
        return f"<td{self.cell_attributes(column)}>{content}</td>"

    def _render_part(self, part: PartRef) -> str:
        """Parts inside cells are listed by title and article reference only."""
        html = ""
        if not part.title.is_empty:
            html += f'<div class="part-title">{render_annotated(part.title)}</div>'
        for title in part.article_titles:
            html += f'<div class="article-ref">{escape(title)}</div>'
        return html

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------
    def cell_attributes(self, column: TableColumn) -> str:
        attributes: List[str] = []
        if column.rowspan > 1:
            attributes.append(f'rowspan="{column.rowspan}"')
        if column.colspan > 1:
            attributes.append(f'colspan="{column.colspan}"')
        if column.align:
            attributes.append(f'align="{escape(column.align)}"')
        if column.valign:
            attributes.append(f'valign="{escape(column.valign)}"')
        style = self.cell_style(column)
        if style:
            attributes.append(f'style="{escape(style)}"')
        if not attributes:
            return ""
        return " " + " ".join(attributes)

    def cell_style(self, column: TableColumn) -> str:
        """Inline CSS for the four cell edges, omitting empty and ``none`` edges."""
        declarations = []
        for side, value in (
            ("top", column.border_top),
            ("bottom", column.border_bottom),
            ("left", column.border_left),
            ("right", column.border_right),
        ):
            if not value or value == "none":
                continue
            declarations.append(
                f"border-{side}: {self.border_width} {self._normalize_border_style(value)} {self.border_color}"
            )
        return "; ".join(declarations)

    @staticmethod
    def _normalize_border_style(value: str) -> str:
        if value in _BORDER_STYLES:
            return value
        return "solid"
