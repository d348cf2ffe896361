"""
Tests for LawXMLParser.
"""

import pytest

from lawquill.exceptions import MalformedInputError, MissingRequiredFieldError, SourceIOError
from lawquill.models import Era, LineRun, RubyRun, TextRun, WritingMode
from lawquill.parser import LawXMLParser

from tests.conftest import build_law_xml, paragraph_xml


@pytest.fixture
def parser():
    """Create a LawXMLParser."""
    return LawXMLParser()


CHAPTERED = """
<Chapter Num="1">
  <ChapterTitle>第一章　総則</ChapterTitle>
  <Article Num="1">
    <ArticleCaption>（目的）</ArticleCaption>
    <ArticleTitle>第一条</ArticleTitle>
    <Paragraph Num="1">
      <ParagraphNum/>
      <ParagraphSentence><Sentence>この法律は、<Ruby>較<Rt>こう</Rt></Ruby>正を目的とする。</Sentence></ParagraphSentence>
      <Item Num="1">
        <ItemTitle>一</ItemTitle>
        <ItemSentence><Sentence>甲</Sentence></ItemSentence>
        <Subitem1 Num="1">
          <Subitem1Title>イ</Subitem1Title>
          <Subitem1Sentence><Sentence>乙</Sentence></Subitem1Sentence>
          <Subitem2 Num="1">
            <Subitem2Title>（１）</Subitem2Title>
            <Subitem2Sentence><Sentence>丙</Sentence></Subitem2Sentence>
          </Subitem2>
        </Subitem1>
      </Item>
    </Paragraph>
  </Article>
</Chapter>
<Chapter Num="2">
  <ChapterTitle>第二章　雑則</ChapterTitle>
  <Section Num="1">
    <SectionTitle>第一節　通則</SectionTitle>
    <Article Num="2"><ArticleTitle>第二条</ArticleTitle>""" + paragraph_xml("本文") + """</Article>
    <Subsection Num="1">
      <SubsectionTitle>第一款</SubsectionTitle>
      <Article Num="3"><ArticleTitle>第三条</ArticleTitle>""" + paragraph_xml("款") + """</Article>
    </Subsection>
  </Section>
</Chapter>
"""


class TestLawXMLParser:
    """Test cases for LawXMLParser."""

    def test_law_attributes(self, parser):
        """Test root attributes and title are parsed."""
        law = parser.parse(build_law_xml(enact="ここに公布する。"))

        assert law.title.text.text == "テスト法"
        assert law.title.kana == "てすとほう"
        assert law.law_num == "令和五年法律第一号"
        assert law.era == Era.REIWA
        assert (law.year, law.promulgate_month, law.promulgate_day) == (5, 4, 1)
        assert law.lang == "ja"
        assert law.enact_statements[0].text == "ここに公布する。"
        assert law.promulgation_date_label() == "令和5年4月1日"

    def test_accepts_text(self, parser):
        """Test str input is accepted."""
        law = parser.parse(build_law_xml().decode("utf-8"))
        assert law.title.text.text == "テスト法"

    def test_chapters_sections_articles(self, parser):
        """Test the chapter hierarchy including flattened subsections."""
        law = parser.parse(build_law_xml(CHAPTERED))
        chapters = law.main_provision.chapters

        assert len(chapters) == 2
        assert chapters[0].title.text == "第一章　総則"
        article = chapters[0].articles[0]
        assert article.title.text == "第一条"
        assert article.caption.text == "（目的）"
        assert article.plain_title == "第一条 （目的）"

        section = chapters[1].sections[0]
        assert section.title.text == "第一節　通則"
        assert [a.title.text for a in section.articles] == ["第二条", "第三条"]

    def test_sentence_runs_keep_order(self, parser):
        """Test inline ruby stays in its document position."""
        law = parser.parse(build_law_xml(CHAPTERED))
        paragraph = law.main_provision.chapters[0].articles[0].paragraphs[0]
        runs = paragraph.body.sentences[0].runs

        assert runs[0] == TextRun("この法律は、")
        assert isinstance(runs[1], RubyRun)
        assert runs[1].ruby.base == "較"
        assert runs[1].ruby.readings == ("こう",)
        assert runs[2] == TextRun("正を目的とする。")

    def test_item_levels(self, parser):
        """Test items nest up to Subitem2 with increasing levels."""
        law = parser.parse(build_law_xml(CHAPTERED))
        item = law.main_provision.chapters[0].articles[0].paragraphs[0].items[0]

        assert item.level == 0 and item.label == "一"
        assert item.children[0].level == 1 and item.children[0].label == "イ"
        assert item.children[0].children[0].level == 2
        assert item.children[0].children[0].label == "（１）"

    def test_title_ruby(self, parser):
        """Test ruby in titles is collected apart from the text."""
        xml = build_law_xml(title="民<Ruby>法<Rt>ほう</Rt></Ruby>")
        law = parser.parse(xml)

        assert law.title.text.text == "民"
        assert law.title.text.ruby[0].base == "法"

    def test_part_chapters_flattened(self, parser):
        """Test chapters inside parts are compiled as main provision chapters."""
        main = """<Part Num="1"><PartTitle>第一編</PartTitle>
          <Chapter Num="1"><ChapterTitle>第一章</ChapterTitle></Chapter>
          <Chapter Num="2"><ChapterTitle>第二章</ChapterTitle></Chapter></Part>"""
        law = parser.parse(build_law_xml(main))
        assert [c.title.text for c in law.main_provision.chapters] == ["第一章", "第二章"]

    def test_part_articles_become_chapter(self, parser):
        """Test articles directly inside a part are kept under a part-level chapter."""
        main = """<Part Num="1"><PartTitle>第一編　総則</PartTitle>
          <Article Num="1"><ArticleTitle>第一条</ArticleTitle>""" + paragraph_xml("甲", 1) + """</Article>
          <Article Num="2"><ArticleTitle>第二条</ArticleTitle>""" + paragraph_xml("乙", 1) + """</Article></Part>
          <Part Num="2"><PartTitle/>
          <Article Num="3"><ArticleTitle>第三条</ArticleTitle>""" + paragraph_xml("丙", 1) + """</Article></Part>"""
        law = parser.parse(build_law_xml(main))
        chapters = law.main_provision.chapters

        assert [c.title.text for c in chapters] == ["第一編　総則", "編"]
        assert [a.title.text for a in chapters[0].articles] == ["第一条", "第二条"]
        assert [a.title.text for a in chapters[1].articles] == ["第三条"]

    def test_division_articles_under_section(self, parser):
        """Test articles under divisions are collected in document order."""
        main = """<Chapter Num="1"><ChapterTitle>第一章</ChapterTitle>
          <Section Num="1"><SectionTitle>第一節</SectionTitle>
            <Division Num="1"><DivisionTitle>第一款</DivisionTitle>
              <Article Num="1"><ArticleTitle>第一条</ArticleTitle>""" + paragraph_xml("甲", 1) + """</Article>
            </Division>
            <Subsection Num="1"><SubsectionTitle>第一目</SubsectionTitle>
              <Division Num="1"><DivisionTitle>第一款</DivisionTitle>
                <Article Num="2"><ArticleTitle>第二条</ArticleTitle>""" + paragraph_xml("乙", 1) + """</Article>
              </Division>
              <Article Num="3"><ArticleTitle>第三条</ArticleTitle>""" + paragraph_xml("丙", 1) + """</Article>
            </Subsection>
          </Section></Chapter>"""
        law = parser.parse(build_law_xml(main))
        section = law.main_provision.chapters[0].sections[0]

        assert [a.title.text for a in section.articles] == ["第一条", "第二条", "第三条"]

    def test_direct_paragraphs(self, parser):
        """Test direct main provision paragraphs."""
        law = parser.parse(build_law_xml(paragraph_xml("甲", 1) + paragraph_xml("乙", 2, "２")))
        paragraphs = law.main_provision.paragraphs

        assert [p.num for p in paragraphs] == [1, 2]
        assert paragraphs[1].label.text == "２"
        assert paragraphs[0].body.text == "甲"

    def test_table(self, parser):
        """Test table structure, spans, borders and writing mode."""
        main = """<Paragraph Num="1"><ParagraphNum/><ParagraphSentence><Sentence>表</Sentence></ParagraphSentence>
          <TableStruct><TableStructTitle>別表</TableStructTitle>
            <Table WritingMode="vertical">
              <TableHeaderRow><TableHeaderColumn>項目</TableHeaderColumn></TableHeaderRow>
              <TableRow><TableColumn rowspan="2" colspan="x" BorderTop="dotted" Align="center">
                <Sentence>値</Sentence></TableColumn></TableRow>
            </Table>
          </TableStruct></Paragraph>"""
        law = parser.parse(build_law_xml(main))
        ts = law.main_provision.paragraphs[0].attachments.tables[0]

        assert ts.title.text == "別表"
        assert ts.table.writing_mode == WritingMode.VERTICAL
        assert ts.table.header_rows[0].columns[0].text.text == "項目"
        column = ts.table.rows[0].columns[0]
        assert column.rowspan == 2
        assert column.colspan == 1
        assert column.border_top == "dotted"
        assert column.align == "center"

    def test_table_default_writing_mode(self, parser):
        """Test tables without WritingMode are horizontal."""
        main = """<Paragraph Num="1"><ParagraphSentence><Sentence>表</Sentence></ParagraphSentence>
          <TableStruct><Table><TableRow><TableColumn><Sentence>a</Sentence></TableColumn></TableRow></Table>
          </TableStruct></Paragraph>"""
        law = parser.parse(build_law_xml(main))
        assert law.main_provision.paragraphs[0].attachments.tables[0].table.writing_mode == WritingMode.HORIZONTAL

    def test_line_runs(self, parser):
        """Test Line elements become LineRun with nested runs."""
        main = """<Paragraph Num="1"><ParagraphSentence>
          <Sentence>前<Line Style="double">線<Sup>2</Sup></Line>後</Sentence></ParagraphSentence></Paragraph>"""
        law = parser.parse(build_law_xml(main))
        runs = law.main_provision.paragraphs[0].body.sentences[0].runs

        assert isinstance(runs[1], LineRun)
        assert runs[1].style == "double"
        assert runs[2] == TextRun("後")

    def test_style_figures_lifted(self, parser):
        """Test Fig elements are lifted out of Style content."""
        extra = """<AppdxStyle><AppdxStyleTitle>様式第一</AppdxStyleTitle>
          <StyleStruct><StyleStructTitle>様式</StyleStructTitle>
            <Style><Fig src="./pict/s1.pdf"/>記入例</Style></StyleStruct></AppdxStyle>"""
        law = parser.parse(build_law_xml(extra=extra))
        style = law.appdx_styles[0].styles[0]

        assert [f.src for f in style.figures] == ["./pict/s1.pdf"]
        assert style.content == "記入例"
        assert "Fig" not in style.content

    def test_appendices_and_suppl(self, parser):
        """Test appendix collections and supplementary provisions."""
        extra = """
          <SupplProvision AmendLawNum="令和六年法律第二号" Extract="true">
            <SupplProvisionLabel>附　則</SupplProvisionLabel>""" + paragraph_xml("施行") + """
            <SupplProvisionAppdx><ArithFormulaNum>算式</ArithFormulaNum>
              <ArithFormula Num="1"><Sentence>A+B</Sentence></ArithFormula></SupplProvisionAppdx>
          </SupplProvision>
          <AppdxTable><AppdxTableTitle>別表第一</AppdxTableTitle>
            <RelatedArticleNum>（第二条関係）</RelatedArticleNum></AppdxTable>
          <AppdxNote><NoteStruct><Note><Paragraph Num="1"><ParagraphSentence><Sentence>注</Sentence>
            </ParagraphSentence></Paragraph></Note></NoteStruct></AppdxNote>
          <AppdxFig><AppdxFigTitle>附図第一</AppdxFigTitle><FigStruct><Fig src="./pict/f.png"/></FigStruct></AppdxFig>
          <AppdxFormat><FormatStruct><Format><Sentence>書式本文</Sentence></Format></FormatStruct></AppdxFormat>
        """
        law = parser.parse(build_law_xml(extra=extra))

        suppl = law.suppl_provisions[0]
        assert suppl.label.text == "附　則"
        assert suppl.amend_law_num == "令和六年法律第二号"
        assert suppl.extract is True
        assert suppl.paragraphs[0].body.text == "施行"
        assert suppl.appdx[0].formulas[0].num == 1

        assert law.appdx_tables[0].related_article_num.text == "（第二条関係）"
        assert law.appdx_notes[0].note_structs[0].paragraphs[0].body.text == "注"
        assert law.appdx_figs[0].figures[0].fig.src == "./pict/f.png"
        assert law.appdx_formats[0].formats[0].content == "<Sentence>書式本文</Sentence>"


class TestLawXMLParserErrors:
    """Test cases for parser failures."""

    def test_unparseable(self, parser):
        """Test broken XML raises MalformedInputError."""
        with pytest.raises(MalformedInputError) as exc_info:
            parser.parse(b"<Law><LawBody>")
        assert "unmarshalling XML" in str(exc_info.value)

    def test_wrong_root(self, parser):
        """Test a non-Law root is rejected."""
        with pytest.raises(MalformedInputError):
            parser.parse(b"<Other/>")

    def test_missing_body(self, parser):
        """Test a Law without LawBody is rejected."""
        with pytest.raises(MalformedInputError):
            parser.parse(b"<Law><LawNum>x</LawNum></Law>")

    def test_missing_title(self, parser):
        """Test an empty law title raises MissingRequiredFieldError."""
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            parser.parse(build_law_xml(title=""))
        assert exc_info.value.field == "LawTitle"

    def test_missing_article_title_has_context(self, parser):
        """Test a missing article title is reported with its position."""
        main = '<Chapter><ChapterTitle>第一章</ChapterTitle><Article Num="1"/></Chapter>'
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            parser.parse(build_law_xml(main))

        message = str(exc_info.value)
        assert "parsing Chapter 0" in message
        assert "parsing Article 0" in message
        assert "ArticleTitle" in message

    def test_invalid_number(self, parser):
        """Test non-numeric attributes raise MalformedInputError."""
        with pytest.raises(MalformedInputError):
            parser.parse(build_law_xml(paragraph_xml("甲", num="x")))

    def test_missing_file(self, parser, temp_dir):
        """Test unreadable files raise SourceIOError."""
        with pytest.raises(SourceIOError):
            parser.parse_file(temp_dir / "missing.xml")
