"""
Tests for StructuralCompiler and the front matter helpers.
"""

from unittest.mock import Mock

import pytest

from lawquill.compiler.front_matter import apply_metadata, build_description, build_title_page
from lawquill.compiler.structural_compiler import StructuralCompiler, paragraph_page_title
from lawquill.exceptions import ArchiveWriteError
from lawquill.export.epub_writer import EPUBWriter
from lawquill.models import AnnotatedText, Paragraph
from lawquill.parser import LawXMLParser
from lawquill.renderers.block_renderer import BlockRenderer

from tests.conftest import build_law_xml, paragraph_xml


def _compile(xml, images=None):
    law = LawXMLParser().parse(xml)
    writer = EPUBWriter(law.title.text.plain)
    StructuralCompiler(writer, BlockRenderer(images=images)).compile(law)
    return writer


def _filenames(writer):
    return [section.filename for section in writer.sections]


def _article(title, sentence="本文", caption=""):
    caption_xml = f"<ArticleCaption>{caption}</ArticleCaption>" if caption else ""
    return f"<Article>{caption_xml}<ArticleTitle>{title}</ArticleTitle>{paragraph_xml(sentence)}</Article>"


class TestMainProvision:
    """Test cases for the four main provision shapes."""

    def test_chapter_with_article(self):
        """Test one chapter page with one nested article page holding the sentence in a list."""
        main = f"<Chapter><ChapterTitle>第一章　総則</ChapterTitle>{_article('第一条', 'これはテストです。')}</Chapter>"
        writer = _compile(build_law_xml(main))

        chapter, article = writer.sections
        assert chapter.title == "第一章　総則"
        assert chapter.parent is None
        assert chapter.body == '<div class="chapter-title">第一章　総則</div>'
        assert article.parent == "chapter-0.xhtml"
        assert article.filename == "article-0-0.xhtml"
        assert "<ol><li>これはテストです。</li></ol>" in article.body
        assert chapter.children == ["article-0-0.xhtml"]

    def test_sections_summary_and_filenames(self):
        """Test sections are summarized inline and articles get triple-index names."""
        main = (
            "<Chapter><ChapterTitle>第一章</ChapterTitle>"
            f"<Section><SectionTitle>第一節</SectionTitle>{_article('第一条')}{_article('第二条')}</Section>"
            f"<Section><SectionTitle>第二節</SectionTitle>{_article('第三条')}</Section>"
            "</Chapter>"
        )
        writer = _compile(build_law_xml(main))

        assert _filenames(writer) == [
            "chapter-0.xhtml",
            "article-0-0-0.xhtml",
            "article-0-0-1.xhtml",
            "article-0-1-0.xhtml",
        ]
        chapter = writer.sections[0]
        assert "<div class='sections'><h3>第一節</h3><p>（第一条 から 第二条 まで）</p>" in chapter.body
        assert "<h3>第二節</h3><p>（第三条 から 第三条 まで）</p></div>" in chapter.body
        assert all(s.parent == "chapter-0.xhtml" for s in writer.sections[1:])

    def test_direct_articles(self):
        """Test articles without chapters become top-level pages."""
        writer = _compile(build_law_xml(_article("第一条", caption="（目的）") + _article("第二条")))

        assert _filenames(writer) == ["article-0.xhtml", "article-1.xhtml"]
        assert writer.sections[0].title == "第一条 （目的）"
        assert writer.sections[0].body.startswith("<h3>第一条 （目的）</h3>")
        assert writer.sections[0].parent is None

    def test_two_direct_paragraphs(self):
        """Test two direct paragraphs become two top-level pages titled by number."""
        main = paragraph_xml("甲", 1) + paragraph_xml("乙", 2, "２")
        writer = _compile(build_law_xml(main))

        assert _filenames(writer) == ["paragraph-0.xhtml", "paragraph-1.xhtml"]
        assert [s.title for s in writer.sections] == ["第1項", "第２項"]
        assert all(s.parent is None for s in writer.sections)
        assert writer.sections[1].body.startswith('<h3>第２項</h3><ol style="list-style-type: decimal;">')

    def test_single_paragraph(self):
        """Test a single direct paragraph becomes the main content page."""
        writer = _compile(build_law_xml(paragraph_xml("本文のみ", 1)))

        assert _filenames(writer) == ["main-content.xhtml"]
        assert writer.sections[0].title == "本文"
        assert "本文のみ" in writer.sections[0].body

    def test_empty_main_provision(self):
        """Test an empty main provision adds no pages."""
        assert _compile(build_law_xml()).sections == []

    def test_deterministic_filenames(self):
        """Test compiling the same input twice gives the same layout."""
        main = f"<Chapter><ChapterTitle>第一章</ChapterTitle>{_article('第一条')}</Chapter>"
        xml = build_law_xml(main, extra="<SupplProvision>" + paragraph_xml("附") + "</SupplProvision>")
        assert _filenames(_compile(xml)) == _filenames(_compile(xml))


class TestParagraphTitle:
    """Test cases for paragraph page titles."""

    def test_label(self):
        """Test the label is preferred."""
        assert paragraph_page_title(Paragraph(num=2, label=AnnotatedText("２")), 5) == "第２項"

    def test_num(self):
        """Test the number is used without label."""
        assert paragraph_page_title(Paragraph(num=3), 5) == "第3項"

    def test_position(self):
        """Test the position is the last fallback."""
        assert paragraph_page_title(Paragraph(), 4) == "第5項"


class TestAppendices:
    """Test cases for appendix and supplementary provision pages."""

    def test_fixed_order(self):
        """Test appendices follow the main body in fixed order."""
        extra = (
            "<SupplProvision>" + paragraph_xml("附則本文") + "</SupplProvision>"
            "<AppdxFig><AppdxFigTitle>附図第一</AppdxFigTitle></AppdxFig>"
            "<AppdxFormat><AppdxFormatTitle>書式第一</AppdxFormatTitle></AppdxFormat>"
            "<AppdxStyle><AppdxStyleTitle>様式第一</AppdxStyleTitle></AppdxStyle>"
            "<AppdxTable><AppdxTableTitle>別表第一</AppdxTableTitle></AppdxTable>"
            "<AppdxNote><AppdxNoteTitle>別記</AppdxNoteTitle></AppdxNote>"
        )
        writer = _compile(build_law_xml(_article("第一条"), extra=extra))

        assert _filenames(writer) == [
            "article-0.xhtml",
            "appdx-note-0.xhtml",
            "appdx-table-0.xhtml",
            "appdx-styles.xhtml",
            "appdx-style-0.xhtml",
            "appdx-format-0.xhtml",
            "appdx-figures.xhtml",
            "appdx-fig-0.xhtml",
            "suppl-provision-0.xhtml",
        ]
        styles = writer.get_section("appdx-style-0.xhtml")
        assert styles.parent == "appdx-styles.xhtml"
        assert writer.get_section("appdx-fig-0.xhtml").parent == "appdx-figures.xhtml"

    def test_default_titles(self):
        """Test untitled appendices use their default titles."""
        extra = "<AppdxNote/><AppdxTable/><AppdxFormat/><AppdxStyle/><AppdxFig/>"
        writer = _compile(build_law_xml(extra=extra))

        titles = {s.filename: s.title for s in writer.sections}
        assert titles["appdx-note-0.xhtml"] == "附則"
        assert titles["appdx-table-0.xhtml"] == "附表"
        assert titles["appdx-format-0.xhtml"] == "書式"
        assert titles["appdx-style-0.xhtml"] == "様式"
        assert titles["appdx-styles.xhtml"] == "様式"
        assert titles["appdx-fig-0.xhtml"] == "附図"
        assert writer.get_section("appdx-note-0.xhtml").body == ""

    def test_appdx_table_body(self):
        """Test appendix table pages carry title, related articles and tables."""
        extra = """<AppdxTable><AppdxTableTitle>別表第一</AppdxTableTitle>
          <RelatedArticleNum>（第二条関係）</RelatedArticleNum>
          <TableStruct><Table><TableRow><TableColumn><Sentence>値</Sentence></TableColumn></TableRow></Table>
          </TableStruct></AppdxTable>"""
        body = _compile(build_law_xml(extra=extra)).sections[0].body

        assert body.startswith(
            '<div class="chapter-title">別表第一</div><div class="related-articles">（第二条関係）</div>'
        )
        assert "<td>値</td>" in body

    def test_appdx_style_body(self):
        """Test appendix style pages render related articles as plain text."""
        extra = """<AppdxStyle><AppdxStyleTitle>様式第一</AppdxStyleTitle>
          <RelatedArticleNum>（第三条関係）</RelatedArticleNum>
          <StyleStruct><Style>記入例</Style></StyleStruct>
          <Remarks><RemarksLabel>備考</RemarksLabel><Sentence>注</Sentence></Remarks></AppdxStyle>"""
        body = _compile(build_law_xml(extra=extra)).get_section("appdx-style-0.xhtml")

        assert body.body.startswith(
            "<h3>様式第一</h3><div class='related-articles'><p>関連条文: （第三条関係）</p></div>"
        )
        assert '<div class="style-content">記入例</div>' in body.body
        assert '<div class="appdx-remarks"><div class="remark"><p class="remarks-label">備考</p><p>注</p>' in body.body

    def test_suppl_provision(self):
        """Test supplementary provisions with amendment number and appendices."""
        extra = """<SupplProvision AmendLawNum="令和六年法律第二号">
            <SupplProvisionLabel>附　則</SupplProvisionLabel>
            <Article><ArticleTitle>第一条</ArticleTitle>""" + paragraph_xml("施行期日") + """</Article>
            <SupplProvisionAppdxTable><SupplProvisionAppdxTableTitle>別表</SupplProvisionAppdxTableTitle>
            </SupplProvisionAppdxTable>
            <SupplProvisionAppdx><ArithFormulaNum>算式第一</ArithFormulaNum>
              <ArithFormula Num="1"><Sentence>A</Sentence></ArithFormula>
              <ArithFormula><Sentence>B</Sentence></ArithFormula></SupplProvisionAppdx>
          </SupplProvision>
          <SupplProvision>""" + paragraph_xml("経過措置") + "</SupplProvision>"
        writer = _compile(build_law_xml(extra=extra))

        first, second = writer.sections
        assert first.title == "附　則（令和六年法律第二号）"
        assert first.body.startswith(
            '<div class="chapter-title">附　則</div><div class="amend-law-num">（令和六年法律第二号）</div>'
        )
        assert "<h3>第一条</h3>" in first.body
        assert '<div class="suppl-appdx-table"><h4>別表</h4></div>' in first.body
        assert '<div class="arith-formula-num">算式第一</div>' in first.body
        assert '<span class="formula-num">(1)</span><span class="formula-content">[算式]</span>' in first.body
        assert first.body.count('<span class="formula-content">') == 2
        assert first.body.count('<span class="formula-num">') == 1

        assert second.title == "附則"
        assert second.body.startswith('<div class="chapter-title">附則</div>')

    def test_suppl_chapters(self):
        """Test chapters inside supplementary provisions are rendered inline."""
        extra = (
            "<SupplProvision><Chapter><ChapterTitle>第一章</ChapterTitle>"
            f"{_article('第一条', '経過')}</Chapter></SupplProvision>"
        )
        writer = _compile(build_law_xml(extra=extra))

        assert len(writer.sections) == 1
        assert "<h3>第一章</h3><h3>第一条</h3><ol><li>経過</li></ol>" in writer.sections[0].body

    def test_figures_resolved_in_appdx_fig(self):
        """Test appendix figures go through the image pipeline."""
        images = Mock()
        images.resolve = Mock(return_value='<div class="figure">img</div>')
        extra = '<AppdxFig><FigStruct><Fig src="./pict/a.pdf"/></FigStruct></AppdxFig>'

        writer = _compile(build_law_xml(extra=extra), images=images)

        assert writer.get_section("appdx-fig-0.xhtml").body == '<div class="figure">img</div>'
        images.resolve.assert_called_once()

    def test_archive_error_has_context(self):
        """Test writer errors are wrapped with the failing appendix index."""
        writer = EPUBWriter("t")
        writer.add_section("<p/>", "x", "appdx-table-1.xhtml")
        law = LawXMLParser().parse(build_law_xml(extra="<AppdxTable/><AppdxTable/>"))

        with pytest.raises(ArchiveWriteError) as exc_info:
            StructuralCompiler(writer, BlockRenderer()).compile(law)
        assert "processing AppdxTable 1" in str(exc_info.value)


class TestFrontMatter:
    """Test cases for metadata and the title page."""

    @pytest.fixture
    def law(self):
        """Parsed law with ruby title and enact statement."""
        xml = build_law_xml(title="民<Ruby>法<Rt>ほう</Rt></Ruby>", enact="朕は、ここに公布する。")
        return LawXMLParser().parse(xml)

    def test_description(self, law):
        """Test the description lines."""
        assert build_description(law) == (
            "公布日: 令和 5年4月1日\n"
            "法令番号: 令和五年法律第一号\n"
            "現行法令名: 民<ruby>法<rt>ほう</rt></ruby> てすとほう"
        )

    def test_title_page(self, law):
        """Test the title page content."""
        html = build_title_page(law)

        assert html.startswith('<div style="text-align: center; margin-top: 20%;">')
        assert '<h1 style="font-size: 1.5em; margin-bottom: 1em;">民<ruby>法<rt>ほう</rt></ruby></h1>' in html
        assert '<p style="font-size: 1.2em; margin-bottom: 2em;">令和五年法律第一号</p>' in html
        assert "公布日: 令和5年4月1日" in html
        assert '<p style="text-indent: 1em;">朕は、ここに公布する。</p></div>' in html

    def test_title_page_without_enact(self):
        """Test the enact block is omitted without an enact statement."""
        html = build_title_page(LawXMLParser().parse(build_law_xml()))
        assert "text-indent" not in html

    def test_apply_metadata(self, law):
        """Test author, language and description are set."""
        writer = EPUBWriter("民法")
        apply_metadata(writer, law)

        assert writer.author == "令和五年法律第一号"
        assert writer.language == "ja"
        assert writer.description.startswith("公布日: ")
