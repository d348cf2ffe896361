"""Stylesheet shipped with every generated book."""

DEFAULT_CSS = """
body {
    font-family: "Hiragino Kaku Gothic ProN", "ヒラギノ角ゴ ProN W3", "Meiryo", "メイリオ", sans-serif;
    line-height: 1.6;
    margin: 1em;
}

h1, h2, h3, h4, h5, h6 {
    color: #333;
    margin-top: 1.5em;
    margin-bottom: 0.5em;
}

.chapter-title {
    font-size: 1.3em;
    font-weight: bold;
    margin: 1em 0;
}

.sections {
    margin: 0.5em 0 1em;
}

.amend-law-num {
    color: #555;
    margin-bottom: 1em;
}

/* Figures */
.figure {
    margin: 1em 0;
    text-align: center;
    page-break-inside: avoid;
}

.figure img {
    max-width: 100%;
    max-height: 70vh;
    height: auto;
    display: block;
    margin: 0 auto;
}

.figure-title {
    font-weight: bold;
    margin-bottom: 0.5em;
    color: #555;
}

.figure-remark {
    font-size: 0.9em;
    color: #666;
    margin-top: 0.5em;
    font-style: italic;
}

/* Style, format and note blocks */
.style-struct {
    margin: 1em 0;
    border-left: 3px solid #ddd;
    padding-left: 1em;
}

.style-title {
    font-weight: bold;
    margin-bottom: 0.5em;
    color: #444;
}

.style-content {
    margin: 0.5em 0;
}

.format-struct,
.note-struct {
    margin: 1em 0;
}

.format-raw {
    white-space: pre-wrap;
    font-family: inherit;
}

/* Remarks */
.appdx-remarks {
    margin: 1em 0;
    padding: 0.5em;
    background-color: #f9f9f9;
    border-radius: 4px;
}

.remarks-label {
    font-weight: bold;
    color: #666;
}

.remark {
    margin: 0.5em 0;
}

.related-articles {
    margin: 0.5em 0;
    padding: 0.5em;
    background-color: #f0f8ff;
    border-radius: 4px;
    font-size: 0.9em;
}

/* Tables */
.table-struct {
    margin: 1em 0;
}

.table-title {
    font-weight: bold;
    margin-bottom: 0.5em;
    color: #444;
}

.table-container {
    overflow-x: auto;
    margin: 1em 0;
}

.law-table {
    border-collapse: collapse;
    width: 100%;
}

.law-table th,
.law-table td {
    border: 1px solid #ccc;
    padding: 0.3em 0.5em;
    vertical-align: top;
}

.vertical-writing {
    writing-mode: vertical-rl;
}

.part-title {
    font-weight: bold;
}

.article-ref {
    padding-left: 1em;
}

/* Lists */
ol, ul {
    margin: 0.5em 0;
    padding-left: 2em;
}

li {
    margin: 0.25em 0;
}

.law-list {
    list-style-type: none;
}

.law-sublist1,
.law-sublist2,
.law-sublist3 {
    list-style-type: none;
    padding-left: 1em;
}

strong {
    font-weight: bold;
    color: #333;
}

/* Supplementary provision appendices */
.suppl-appdx,
.suppl-appdx-table,
.suppl-appdx-style {
    margin: 1em 0;
}

.arith-formula-num {
    font-weight: bold;
}

.arith-formula {
    margin: 0.5em 0;
}

.formula-num {
    margin-right: 0.5em;
}

/* Page break hints */
.chapter-break {
    page-break-before: always;
}

.section-break {
    page-break-before: auto;
}

@media print, screen and (max-device-width: 1024px) {
    .figure img {
        max-height: 60vh;
    }

    body {
        margin: 0.5em;
    }
}
"""
