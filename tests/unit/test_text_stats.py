"""
Unit tests for core/formatting/text_stats.py
"""
from core.formatting.content_model import (
    Definition,
    ImageSuggestion,
    Paragraph,
    SectionTitle,
    StepsList,
    Table,
)
from core.formatting.text_stats import count_words, structured_word_count, verify_word_count

LATIN_10 = "Good service starts with attitude and grows with daily habits"
CJK_20 = "服务" * 10


class TestCountWords:

    def test_latin_words_and_cjk_characters(self):
        assert count_words(f"{LATIN_10} {CJK_20}") == 30

    def test_empty(self):
        assert count_words("") == 0

    def test_markup_is_ignored(self):
        assert count_words("# **Bold** heading with `code`") == 4

    def test_html_tags_are_ignored(self):
        assert count_words("<strong>Hello</strong> <em>world</em>") == 2

    def test_numbers_count_as_words(self):
        assert count_words("Step 1 of 3") == 4

    def test_tags_like_suggestions_count_their_words(self):
        assert count_words("[Suggest:Key Point]") == 3

    def test_markup_inside_a_word_joins_it(self):
        assert count_words("snake_case and (grouped)") == 3
        assert count_words("a*b*c") == 1


class TestStructuredWordCount:

    def test_equivalent_blocks_match_raw(self):
        seq = (
            SectionTitle(content="Good service starts with attitude"),
            Paragraph(content="and grows with daily habits"),
            Paragraph(content=CJK_20),
        )
        assert structured_word_count(seq) == count_words(f"{LATIN_10} {CJK_20}")

    def test_all_text_fields_are_counted(self):
        seq = (
            Definition(term="Service", definition="meeting a need"),
            StepsList(steps=("Greet them", "Listen")),
            Table(headers=("Step", "Phrase"), rows=(("1", "Hello there"),)),
            ImageSuggestion(id="img", preceding_text="not counted"),
        )
        assert structured_word_count(seq) == 4 + 3 + 5


class TestVerifyWordCount:

    def test_no_loss(self):
        raw = f"{LATIN_10} {CJK_20}"
        report = verify_word_count(raw, (Paragraph(content=raw),))
        assert report.raw_count == 30
        assert report.generated_count == 30
        assert report.ratio == 1.0
        assert not report.possible_loss

    def test_loss_below_threshold(self):
        report = verify_word_count(LATIN_10, (Paragraph(content="Good service"),))
        assert report.ratio == 0.2
        assert report.possible_loss

    def test_ratio_at_threshold_is_not_loss(self):
        seq = (Paragraph(content="one two three four five six seven"),)
        report = verify_word_count("a b c d e f g h i j", seq)
        assert report.ratio == 0.7
        assert not report.possible_loss

    def test_empty_raw_text(self):
        report = verify_word_count("", (Paragraph(content="x"),))
        assert report.ratio == 1.0
        assert not report.possible_loss

    def test_to_dict(self):
        data = verify_word_count("a b", ()).to_dict()
        assert data == {"raw_count": 2, "generated_count": 0, "ratio": 0.0, "possible_loss": True}
