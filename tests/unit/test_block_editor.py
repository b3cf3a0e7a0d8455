"""
Unit tests for core/formatting/block_editor.py
"""
import itertools
import re

import pytest

from config.constants import DEFAULT_DEFINITION_TERM, FONT_SIZE_STEP, MIN_FONT_SIZE
from core.errors import InvalidBlockOperationError
from core.formatting.block_editor import (
    FontStepDirection,
    TextField,
    change_type,
    delete_image,
    encode_image_data_uri,
    generate_image_id,
    insert_image_slot,
    insert_page_break,
    set_image_width,
    step_font_size,
    update_text,
    upload_image,
)
from core.formatting.content_model import (
    HEADING_KINDS,
    TEXT_BOX_KINDS,
    BlockKind,
    CaseStudy,
    ChapterTitle,
    Definition,
    ImageSuggestion,
    KeyPoint,
    PageBreak,
    Paragraph,
    SectionTitle,
    StepsList,
    SubsectionTitle,
    Table,
    WarningBox,
    extract_plain_text,
)


class TestChangeType:
    """Block kind conversion."""

    def test_round_trip_scenario(self):
        seq = (ChapterTitle(content="Intro"), Paragraph(content="Hello"), ImageSuggestion(id="x"))
        result = change_type(seq, 1, "key_point")
        assert result == (ChapterTitle(content="Intro"), KeyPoint(content="Hello"), ImageSuggestion(id="x"))
        assert result[2] is seq[2]
        assert result[2].id == "x"

    @pytest.mark.parametrize("source", [
        ChapterTitle(content="Title"),
        SectionTitle(content="Section"),
        SubsectionTitle(content="Sub"),
        Paragraph(content="Body text"),
        KeyPoint(content="Key"),
        WarningBox(content="Careful"),
        CaseStudy(content="A story"),
        Definition(term="T", definition="D"),
        StepsList(steps=("one", "two")),
    ])
    def test_text_preserved_for_content_targets(self, source):
        for target in itertools.chain(HEADING_KINDS, TEXT_BOX_KINDS):
            result = change_type((source,), 0, target)
            assert result[0].kind is target
            assert extract_plain_text(result[0]) == extract_plain_text(source)

    def test_definition_target_gets_placeholder_term(self):
        result = change_type((Paragraph(content="Meaning"),), 0, BlockKind.DEFINITION)
        assert result[0] == Definition(term=DEFAULT_DEFINITION_TERM, definition="Meaning")

    def test_custom_font_size_carries_over(self):
        result = change_type((Paragraph(content="x", custom_font_size=22),), 0, "warning_box")
        assert result[0] == WarningBox(content="x", custom_font_size=22)

    def test_structured_target_is_ignored(self):
        seq = (Paragraph(content="x"),)
        assert change_type(seq, 0, "table") == seq
        assert change_type(seq, 0, "not_a_kind") == seq

    def test_out_of_range_is_noop(self):
        seq = (Paragraph(content="x"),)
        assert change_type(seq, 5, "key_point") == seq
        assert change_type(seq, -1, "key_point") == seq

    def test_input_is_not_modified(self):
        seq = (Paragraph(content="x"),)
        change_type(seq, 0, "key_point")
        assert seq == (Paragraph(content="x"),)


class TestUpdateText:

    def test_content(self):
        result = update_text((Paragraph(content="old"),), 0, "new")
        assert result[0].content == "new"

    def test_definition_fields(self):
        seq = (Definition(term="T", definition="D"),)
        assert update_text(seq, 0, "Term2", TextField.TERM)[0].term == "Term2"
        assert update_text(seq, 0, "Def2", "definition")[0].definition == "Def2"

    def test_field_mismatch_is_noop(self):
        seq = (Table(headers=("a",)),)
        assert update_text(seq, 0, "x") == seq

    def test_unknown_field_raises(self):
        with pytest.raises(InvalidBlockOperationError):
            update_text((Paragraph(),), 0, "x", "caption")

    def test_out_of_range_is_noop(self):
        seq = (Paragraph(content="x"),)
        assert update_text(seq, 3, "y") == seq


class TestStepFontSize:

    def test_increase_is_strictly_monotonic(self, styles):
        seq = (Paragraph(content="x"),)
        previous = styles.body_font_size
        for _ in range(20):
            seq = step_font_size(seq, 0, FontStepDirection.INCREASE, styles)
            assert seq[0].custom_font_size == previous + FONT_SIZE_STEP
            previous = seq[0].custom_font_size

    def test_decrease_never_below_floor(self, styles):
        seq = (Paragraph(content="x"),)
        for _ in range(20):
            seq = step_font_size(seq, 0, "decrease", styles)
            assert seq[0].custom_font_size >= MIN_FONT_SIZE
        assert seq[0].custom_font_size == MIN_FONT_SIZE

    def test_starts_from_style_default(self, styles):
        result = step_font_size((ChapterTitle(content="C"),), 0, "increase", styles)
        assert result[0].custom_font_size == styles.main_title_font_size + FONT_SIZE_STEP

    def test_subsection_default_ratio(self, styles):
        result = step_font_size((SubsectionTitle(content="S"),), 0, "increase", styles)
        assert result[0].custom_font_size == pytest.approx(styles.sub_title_font_size * 0.85 + FONT_SIZE_STEP)

    def test_font_locked_kinds_unchanged(self, styles):
        seq = (PageBreak(), ImageSuggestion(id="a"))
        assert step_font_size(seq, 0, "increase", styles) == seq
        assert step_font_size(seq, 1, "increase", styles) == seq

    def test_invalid_direction_raises(self, styles):
        with pytest.raises(ValueError):
            step_font_size((Paragraph(),), 0, "sideways", styles)


class TestInsertPageBreak:

    @pytest.mark.parametrize("index", [0, 1, 2])
    def test_shifts_following_blocks(self, index):
        seq = (Paragraph(content="a"), Paragraph(content="b"), Paragraph(content="c"))
        result = insert_page_break(seq, index)
        assert len(result) == len(seq) + 1
        assert result[index] == PageBreak()
        for i, block in enumerate(seq):
            assert result[i + 1 if i >= index else i] == block

    def test_out_of_range_is_noop(self):
        seq = (Paragraph(content="a"),)
        assert insert_page_break(seq, 1) == seq


class TestImageSlots:

    def test_generated_id_format(self):
        assert re.fullmatch(r"img_\d+_[0-9a-z]{7}", generate_image_id())

    def test_insert_after_index(self):
        seq = (Paragraph(content="a"), Paragraph(content="b"))
        result = insert_image_slot(seq, 0)
        assert len(result) == 3
        assert result[1].kind is BlockKind.IMAGE_SUGGESTION
        assert result[1].id.startswith("img_")

    def test_insert_at_start(self):
        result = insert_image_slot((Paragraph(content="a"),), -1, image_id="first")
        assert result[0] == ImageSuggestion(id="first", preceding_text=result[0].preceding_text)

    def test_duplicate_id_rejected(self):
        with pytest.raises(InvalidBlockOperationError):
            insert_image_slot((ImageSuggestion(id="a"),), 0, image_id="a")

    def test_set_width(self):
        seq = (ImageSuggestion(id="a"), ImageSuggestion(id="b"))
        result = set_image_width(seq, "b", "50%")
        assert result[0].width is None
        assert result[1].width == "50%"

    def test_set_width_rejects_other_values(self):
        with pytest.raises(InvalidBlockOperationError):
            set_image_width((ImageSuggestion(id="a"),), "a", "33%")

    def test_upload_and_delete(self):
        store = upload_image({}, "a", b"\x89PNG", "image/png")
        assert store["a"] == encode_image_data_uri(b"\x89PNG", "image/png")
        assert store["a"].startswith("data:image/png;base64,")
        assert delete_image(store, "a") == {}
        assert "a" in store

    def test_upload_data_uri_as_is(self):
        store = upload_image({}, "a", "data:image/jpeg;base64,AAAA")
        assert store == {"a": "data:image/jpeg;base64,AAAA"}

    def test_delete_missing_is_noop(self):
        assert delete_image({"a": "x"}, "b") == {"a": "x"}
