"""
Unit tests for core/formatting/exporters/word_exporter.py
"""
import pytest

from config.constants import WORD_CONTENT_TYPE
from core.formatting.content_model import (
    BlockKind,
    CaseStudy,
    ChapterTitle,
    CheckboxGroup,
    FormField,
    ImageSuggestion,
    KeyPoint,
    LegacyToc,
    PageBreak,
    Paragraph,
    StepsList,
    SubsectionTitle,
    Table,
    WarningBox,
)
from core.formatting.exporters.word_exporter import (
    CHECKBOX_GLYPH,
    FORM_FIELD_BLANK,
    PAGE_BREAK_MARKUP,
    TOC_TITLE,
    WordMarkupBuilder,
    export_word_document,
    generate_word_markup,
    word_filename,
)


class TestWordMarkup:

    def test_office_document_frame(self, styles):
        markup = generate_word_markup((Paragraph(content="x"),), styles, title="Course")
        assert "xmlns:w='urn:schemas-microsoft-com:office:word'" in markup
        assert "<w:View>Print</w:View>" in markup
        assert "<title>Course</title>" in markup

    def test_title_is_escaped(self, styles):
        markup = generate_word_markup((Paragraph(content="x"),), styles, title="Q&A <Basics>")
        assert "<title>Q&amp;A &lt;Basics&gt;</title>" in markup

    def test_toc_field_when_headings_exist(self, styles):
        markup = generate_word_markup((ChapterTitle(content="Intro"),), styles)
        assert TOC_TITLE in markup
        assert 'TOC \\o "1-3" \\h \\z \\u' in markup
        assert "mso-element:field-begin" in markup

    def test_no_toc_without_headings(self, styles):
        markup = generate_word_markup((Paragraph(content="x"),), styles)
        assert TOC_TITLE not in markup

    def test_every_kind_has_a_renderer(self, styles):
        assert set(WordMarkupBuilder(styles)._renderers) == set(BlockKind)

    def test_callout_headings(self, styles):
        markup = generate_word_markup(
            (KeyPoint(content="k"), WarningBox(content="w"), CaseStudy(content="c")), styles
        )
        assert "★ Key Point" in markup
        assert "⚠️ Warning" in markup
        assert "<strong>Case Study:</strong> c" in markup

    def test_table_header_uses_theme(self, styles):
        markup = generate_word_markup((Table(headers=("A", "B"), rows=(("1", "2"),)),), styles)
        assert f"background-color: {styles.theme_color}; color: white;" in markup
        assert '<td style="padding: 8px;">2</td>' in markup

    def test_steps_form_and_checkboxes(self, styles):
        markup = generate_word_markup((
            StepsList(steps=("one", "two")),
            FormField(label="Name"),
            CheckboxGroup(label="Pick", options=("A", "B")),
        ), styles)
        assert "<ol" in markup and "two</li>" in markup
        assert f"Name: {FORM_FIELD_BLANK}" in markup
        assert f"<p>{CHECKBOX_GLYPH} A</p>" in markup

    def test_images_fixed_width_and_missing_skipped(self, styles, sample_images):
        seq = (ImageSuggestion(id="img_1"), ImageSuggestion(id="missing"))
        markup = WordMarkupBuilder(styles, sample_images, image_width_px=400).build(seq)
        assert markup.count("<img ") == 1
        assert 'width="400"' in markup

    def test_page_break(self, styles):
        assert PAGE_BREAK_MARKUP in generate_word_markup((PageBreak(),), styles)

    def test_font_sizes_in_points(self, styles):
        markup = generate_word_markup((SubsectionTitle(content="S"), Paragraph(content="p", custom_font_size=13)), styles)
        assert f"font-size: {styles.sub_title_font_size * 0.85:g}pt" in markup
        assert "font-size: 13pt" in markup

    def test_legacy_toc_block_skipped(self, styles):
        markup = generate_word_markup((LegacyToc(items=({"text": "Old entry"},)),), styles)
        assert "Old entry" not in markup


class TestWordExport:

    def test_export_project(self, sample_project):
        export = export_word_document(sample_project)
        assert export.filename == "Service Basics.doc"
        assert export.content_type == WORD_CONTENT_TYPE
        assert "Chapter 1: Service Basics" in export.content

    @pytest.mark.parametrize("name,expected", [
        ("", "Courseware.doc"),
        (None, "Courseware.doc"),
        ("a/b\\c", "a_b_c.doc"),
    ])
    def test_filename(self, name, expected):
        assert word_filename(name) == expected

    def test_write_to(self, sample_project, temp_dir):
        path = export_word_document(sample_project).write_to(temp_dir)
        assert path.name == "Service Basics.doc"
        assert path.read_text(encoding="utf-8").startswith("<html")
