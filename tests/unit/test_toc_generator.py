"""
Unit tests for core/formatting/toc_generator.py
"""
from config.constants import TOC_PLACEHOLDER_GLYPH
from core.formatting.content_model import (
    ChapterTitle,
    LegacyToc,
    Paragraph,
    SectionTitle,
    SubsectionTitle,
)
from core.formatting.toc_generator import TocEntry, TocGenerator, build_toc, section_anchor


class TestBuildToc:

    def test_order_matches_heading_subsequence(self, sample_blocks):
        entries = build_toc(sample_blocks)
        headings = [(i, b.content) for i, b in enumerate(sample_blocks) if b.kind.value.endswith("_title")]
        assert [(e.global_index, e.text) for e in entries] == headings

    def test_global_index_strictly_increasing(self, sample_blocks):
        indices = [e.global_index for e in build_toc(sample_blocks)]
        assert all(a < b for a, b in zip(indices, indices[1:]))

    def test_levels(self):
        seq = (ChapterTitle(content="A"), SectionTitle(content="B"), SubsectionTitle(content="C"))
        assert [e.level for e in build_toc(seq)] == [1, 2, 3]

    def test_page_numbers_are_carried(self):
        entries = build_toc((ChapterTitle(content="A", page_number=4),))
        assert entries[0].page_number == 4

    def test_legacy_toc_block_ignored(self):
        seq = (LegacyToc(items=({"text": "Old", "level": 1},)), Paragraph(content="x"))
        assert build_toc(seq) == []

    def test_anchor(self):
        entry = TocEntry(text="A", level=1, global_index=7)
        assert entry.anchor == "section-7" == section_anchor(7)


class TestTocGenerator:

    def test_plain_text(self):
        entries = [
            TocEntry(text="Intro", level=1, global_index=0, page_number=2),
            TocEntry(text="Details", level=2, global_index=3),
        ]
        text = TocGenerator(width=30).to_plain_text(entries)
        lines = text.splitlines()
        assert lines[0] == "Table of Contents"
        assert lines[3].startswith("Intro...")
        assert lines[3].endswith("2")
        assert lines[4].startswith("  Details")
        assert lines[4].endswith(TOC_PLACEHOLDER_GLYPH)

    def test_without_title(self):
        entries = [TocEntry(text="Intro", level=1, global_index=0, page_number=1)]
        assert TocGenerator().to_plain_text(entries, include_title=False).startswith("Intro")
