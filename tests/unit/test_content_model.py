"""
Unit tests for core/formatting/content_model.py
"""
import pytest

from core.formatting.content_model import (
    BlockKind,
    ChapterTitle,
    Definition,
    ImageSuggestion,
    LegacyToc,
    PageBreak,
    Paragraph,
    SectionTitle,
    StepsList,
    Table,
    UnknownBlock,
    block_from_dict,
    block_to_dict,
    blocks_from_list,
    blocks_to_list,
    extract_plain_text,
    is_heading,
)


class TestBlockFromDict:
    """Loading persisted blocks."""

    def test_heading_with_page_number(self):
        block = block_from_dict({"type": "chapter_title", "content": "Intro", "pageNumber": 3})
        assert block == ChapterTitle(content="Intro", page_number=3)

    def test_custom_font_size_is_mapped(self):
        block = block_from_dict({"type": "paragraph", "content": "x", "customFontSize": 20})
        assert block.custom_font_size == 20

    def test_steps_and_table_become_tuples(self):
        steps = block_from_dict({"type": "steps_list", "steps": ["a", "b"]})
        table = block_from_dict({"type": "table", "headers": ["h"], "rows": [["1"], ["2"]]})
        assert steps.steps == ("a", "b")
        assert table.rows == (("1",), ("2",))

    def test_image_suggestion(self):
        block = block_from_dict({"type": "image_suggestion", "id": "img_1", "precedingText": "Photo", "width": "50%"})
        assert block == ImageSuggestion(id="img_1", preceding_text="Photo", width="50%")

    @pytest.mark.parametrize("width", ["half", "30%", 50, ["50%"]])
    def test_unknown_image_width_is_dropped(self, width):
        block = block_from_dict({"type": "image_suggestion", "id": "img_1", "width": width})
        assert block.width is None

    def test_legacy_toc_is_kept(self):
        block = block_from_dict({"type": "toc", "items": [{"text": "A", "level": 1}]})
        assert isinstance(block, LegacyToc)
        assert block.kind is BlockKind.TOC

    def test_unknown_type_is_preserved(self):
        data = {"type": "quiz", "question": "Why?"}
        block = block_from_dict(data)
        assert isinstance(block, UnknownBlock)
        assert block.type_name == "quiz"
        assert block_to_dict(block) == data

    def test_missing_type_raises(self):
        with pytest.raises(ValueError):
            block_from_dict({"content": "no type"})

    def test_unknown_payload_keys_are_ignored(self):
        block = block_from_dict({"type": "paragraph", "content": "x", "extra": 1})
        assert block == Paragraph(content="x")


class TestBlockToDict:
    """Writing blocks in the persisted format."""

    def test_unset_optionals_are_omitted(self):
        assert block_to_dict(SectionTitle(content="S")) == {"type": "section_title", "content": "S"}

    def test_camel_case_keys(self):
        data = block_to_dict(ChapterTitle(content="C", page_number=2, custom_font_size=30))
        assert data == {"type": "chapter_title", "content": "C", "pageNumber": 2, "customFontSize": 30}

    def test_page_break_has_only_type(self):
        assert block_to_dict(PageBreak()) == {"type": "page_break"}

    def test_document_round_trip(self, sample_blocks):
        assert blocks_from_list(blocks_to_list(sample_blocks)) == sample_blocks

    def test_table_rows_are_lists(self):
        data = block_to_dict(Table(headers=("a",), rows=(("1",),)))
        assert data["rows"] == [["1"]]
        assert data["headers"] == ["a"]


class TestPlainText:

    def test_text_kinds(self):
        assert extract_plain_text(Paragraph(content="Hello")) == "Hello"

    def test_definition(self):
        assert extract_plain_text(Definition(term="T", definition="D")) == "T: D"

    def test_steps(self):
        assert extract_plain_text(StepsList(steps=("a", "b"))) == "a\nb"

    def test_structured_kinds_are_empty(self):
        assert extract_plain_text(Table(headers=("a",))) == ""
        assert extract_plain_text(PageBreak()) == ""

    def test_is_heading(self):
        assert is_heading(ChapterTitle())
        assert not is_heading(Paragraph())

    def test_blocks_are_immutable(self):
        block = Paragraph(content="x")
        with pytest.raises(Exception):
            block.content = "y"
