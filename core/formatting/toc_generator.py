#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Table of Contents Generator - Derive the TOC from document headings.

Provides:
- Ordered heading index (chapter=1, section=2, subsection=3)
- Same-document anchors matching the preview's element ids
- Plain text rendering with dot leaders
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from config.constants import TOC_PLACEHOLDER_GLYPH
from .content_model import HEADING_LEVELS, ContentBlock


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class TocEntry:
    """Single entry in the Table of Contents."""
    text: str                           # Heading markup
    level: int                          # 1, 2 or 3
    global_index: int                   # Position of the heading in the document
    page_number: Optional[int] = None   # Set by pagination

    @property
    def anchor(self) -> str:
        return section_anchor(self.global_index)

    def __repr__(self):
        indent = "  " * (self.level - 1)
        return f"{indent}[L{self.level}] {self.text}"


def section_anchor(index: int) -> str:
    """Element id of the block at ``index`` in the presentation tree."""
    return f"section-{index}"


# =============================================================================
# TOC BUILDER
# =============================================================================

def build_toc(seq: Sequence[ContentBlock]) -> List[TocEntry]:
    """
    Build the TOC from the heading blocks of a document.

    Entries keep document order. Legacy stored TOC blocks are never turned
    into entries.

    Args:
        seq: Document

    Returns:
        List of TocEntry, one per heading
    """
    entries = []
    for index, block in enumerate(seq):
        level = HEADING_LEVELS.get(block.kind)
        if level is None:
            continue
        entries.append(TocEntry(
            text=block.content,
            level=level,
            global_index=index,
            page_number=block.page_number,
        ))
    return entries


class TocGenerator:
    """
    Render a derived TOC as plain text.

    Usage:
        generator = TocGenerator()
        print(generator.to_plain_text(build_toc(blocks)))
    """

    def __init__(self, title: str = "Table of Contents", width: int = 60):
        self.title = title
        self.width = width

    def to_plain_text(self, entries: Sequence[TocEntry], include_title: bool = True) -> str:
        """
        Convert TOC entries to plain text with dot leaders.

        Entries without a page number show the placeholder glyph.
        """
        lines = []

        if include_title:
            lines.append(self.title)
            lines.append("=" * len(self.title))
            lines.append("")

        for entry in entries:
            indent = "  " * (entry.level - 1)
            title_part = f"{indent}{entry.text}"
            page_part = str(entry.page_number) if entry.page_number else TOC_PLACEHOLDER_GLYPH
            available = self.width - len(title_part) - len(page_part)
            dots = "." * max(3, available)
            lines.append(f"{title_part}{dots}{page_part}")

        return "\n".join(lines)
