#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Pagination Engine

Assigns page numbers to heading blocks from their vertical offsets in a
rendered, continuous layout of the document:

    page_number = floor(offset / page_height) + 1

Offsets come from a LayoutMeasurer. In the browser that is the live
preview; headless callers can use FlowEstimateMeasurer, which flows
estimated block heights on a fixed content width.

Version: 1.0.0
"""

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Dict, List, Mapping, Optional, Protocol, Sequence

from config.constants import A4_PAGE_WIDTH_PX, PAGE_PADDING_PX
from config.settings import settings
from .content_model import BlockKind, ContentBlock, Document, HEADING_KINDS
from .style_config import StyleConfig
from .toc_generator import build_toc

logger = logging.getLogger(__name__)


# =============================================================================
# MEASUREMENT INTERFACE
# =============================================================================

class LayoutMeasurer(Protocol):
    """Rendering surface that reports vertical offsets in pixels."""

    def measure_block(self, index: int) -> Optional[float]:
        """Top offset of the block at ``index``, or None when not rendered."""
        ...

    def measure_container(self) -> float:
        """Top offset of the page container the blocks are laid out in."""
        ...


class RecordedMeasurer:
    """Offsets measured elsewhere (e.g. by a browser client) and sent in."""

    def __init__(self, offsets: Mapping[int, Optional[float]], container_top: float = 0.0):
        self.offsets = dict(offsets)
        self.container_top = container_top

    def measure_block(self, index: int) -> Optional[float]:
        return self.offsets.get(index)

    def measure_container(self) -> float:
        return self.container_top


@dataclass
class PaginationResult:
    """Page numbers resolved from measured offsets"""
    page_numbers: Dict[int, int] = field(default_factory=dict)

    @property
    def updated_count(self) -> int:
        return len(self.page_numbers)


@dataclass
class PaginationOutcome:
    """Document with page numbers written into its headings"""
    blocks: Document
    page_numbers: Dict[int, int] = field(default_factory=dict)

    @property
    def updated_count(self) -> int:
        return len(self.page_numbers)


def _page_height(page_height_px: Optional[float]) -> float:
    """Configured page height when none is given; non-positive heights are rejected."""
    if page_height_px is None:
        return settings.page_height_px
    if page_height_px <= 0:
        raise ValueError(f"page_height_px must be positive, got {page_height_px}")
    return page_height_px


def resolve_page_numbers(
    offsets: Mapping[int, Optional[float]],
    page_height_px: float,
) -> PaginationResult:
    """
    Turn vertical offsets into 1-based page numbers.

    Args:
        offsets: Block index -> offset from the top of the container in px;
            None marks a block with no rendered position
        page_height_px: Height of one page in the measuring surface

    Returns:
        PaginationResult with one entry per resolved index

    Raises:
        ValueError: If page_height_px is not positive
    """
    if page_height_px <= 0:
        raise ValueError(f"page_height_px must be positive, got {page_height_px}")

    result = PaginationResult()
    for index, offset in offsets.items():
        if offset is None:
            continue
        result.page_numbers[index] = max(1, math.floor(offset / page_height_px) + 1)
    return result


# =============================================================================
# PAGINATION ENGINE
# =============================================================================

class PaginationEngine:
    """
    Measure headings and write their page numbers back into the document.

    Usage:
        engine = PaginationEngine(page_height_px=1123)
        outcome = engine.paginate(blocks, measurer)
        if outcome.updated_count == 0:
            warn("no headings could be measured")
    """

    def __init__(self, page_height_px: Optional[float] = None):
        self.page_height_px = _page_height(page_height_px)

    def measure_headings(
        self,
        seq: Sequence[ContentBlock],
        measurer: LayoutMeasurer,
    ) -> Dict[int, Optional[float]]:
        """Offsets of every heading relative to the page container."""
        container_top = measurer.measure_container()
        offsets: Dict[int, Optional[float]] = {}
        for index, block in enumerate(seq):
            if block.kind not in HEADING_KINDS:
                continue
            top = measurer.measure_block(index)
            offsets[index] = None if top is None else top - container_top
        return offsets

    def paginate(self, seq: Sequence[ContentBlock], measurer: LayoutMeasurer) -> PaginationOutcome:
        """
        Resolve page numbers for all measurable headings.

        Headings the measurer cannot place keep whatever page number they had.

        Args:
            seq: Document as currently rendered
            measurer: Surface the document is rendered on

        Returns:
            PaginationOutcome with the updated document and the count of
            headings that received a page number
        """
        offsets = self.measure_headings(seq, measurer)
        result = resolve_page_numbers(offsets, self.page_height_px)

        blocks = list(seq)
        for index, page_number in result.page_numbers.items():
            blocks[index] = replace(blocks[index], page_number=page_number)

        heading_count = len(offsets)
        if result.updated_count:
            logger.info(f"Pagination updated {result.updated_count}/{heading_count} headings")
        else:
            logger.warning(f"Pagination found no measurable headings ({heading_count} headings in document)")

        return PaginationOutcome(blocks=tuple(blocks), page_numbers=dict(result.page_numbers))


# =============================================================================
# HEADLESS FLOW ESTIMATE
# =============================================================================

# Spacing around each kind in the preview (margins + padding), px
_BLOCK_CHROME_PX = {
    BlockKind.CHAPTER_TITLE: 48 + 32 + 12 + 4,
    BlockKind.SECTION_TITLE: 40 + 24,
    BlockKind.SUBSECTION_TITLE: 32 + 16,
    BlockKind.PARAGRAPH: 16,
    BlockKind.KEY_POINT: 48 + 48,
    BlockKind.WARNING_BOX: 48 + 48,
    BlockKind.CASE_STUDY: 48 + 48,
    BlockKind.DEFINITION: 40 + 48,
    BlockKind.STEPS_LIST: 48,
    BlockKind.TABLE: 64,
    BlockKind.FORM_FIELD: 48,
    BlockKind.CHECKBOX_GROUP: 48 + 32,
    BlockKind.IMAGE_SUGGESTION: 0,
    BlockKind.PAGE_BREAK: 32 + 48,
    BlockKind.TOC: 0,
    BlockKind.UNKNOWN: 0,
}

_LINE_HEIGHT = 1.6
_WRAPPER_PADDING_PX = 8        # py-1 around every block
_WRAPPER_INDENT_PX = 32        # pl-8 gutter for the block toolbar
_EMPTY_IMAGE_HEIGHT_PX = 200
_IMAGE_ASPECT = 0.75
_TABLE_CELL_PADDING_PX = 32


def _is_wide(char: str) -> bool:
    return ord(char) >= 0x2E80


class FlowEstimateMeasurer:
    """
    Estimated layout of the preview without a browser.

    Text height is estimated from glyph widths (CJK glyphs one em, others
    0.55 em) wrapped on the content width. Manual page breaks and the end of
    the TOC page jump to the next page boundary, as they do when printed.
    Results are estimates; a live rendering is the reference.
    """

    def __init__(
        self,
        blocks: Sequence[ContentBlock],
        styles: StyleConfig,
        images: Optional[Mapping[str, str]] = None,
        page_height_px: Optional[float] = None,
        page_width_px: float = A4_PAGE_WIDTH_PX,
        page_padding_px: float = PAGE_PADDING_PX,
    ):
        self.blocks = tuple(blocks)
        self.styles = styles
        self.images = images or {}
        self.page_height_px = _page_height(page_height_px)
        self.page_padding_px = page_padding_px
        self.content_width_px = page_width_px - 2 * page_padding_px - _WRAPPER_INDENT_PX
        self._offsets = self._flow()

    def measure_container(self) -> float:
        return 0.0

    def measure_block(self, index: int) -> Optional[float]:
        return self._offsets.get(index)

    @property
    def page_count(self) -> int:
        """Pages spanned by the estimated flow (0 for an empty document)."""
        if not self._offsets:
            return 0
        return math.floor(max(self._offsets.values()) / self.page_height_px) + 1

    # ------------------------------------------------------------------

    def _next_page(self, y: float) -> float:
        page_top = math.ceil(y / self.page_height_px) * self.page_height_px
        return page_top + self.page_padding_px

    def _text_lines(self, text: str, font_px: float, width_px: Optional[float] = None) -> int:
        width_px = width_px or self.content_width_px
        lines = 0
        for line in (text or "").split("\n"):
            line_width = sum(font_px if _is_wide(c) else font_px * 0.55 for c in line)
            lines += max(1, math.ceil(line_width / width_px))
        return lines

    def _text_height(self, text: str, font_px: float, width_px: Optional[float] = None) -> float:
        return self._text_lines(text, font_px, width_px) * font_px * _LINE_HEIGHT

    def _toc_height(self) -> float:
        entries = build_toc(self.blocks)
        if not entries:
            return 0.0
        title = self.styles.main_title_font_size * _LINE_HEIGHT + 24 + 16 + 48
        line = self.styles.body_font_size * _LINE_HEIGHT + 8
        return title + line * len(entries) + 40

    def _block_height(self, block: ContentBlock) -> float:
        kind = block.kind
        chrome = _BLOCK_CHROME_PX[kind]
        if kind in (BlockKind.TOC, BlockKind.UNKNOWN):
            return 0.0
        if kind is BlockKind.PAGE_BREAK:
            return chrome
        if kind is BlockKind.IMAGE_SUGGESTION:
            ratio = float((block.width or "100%").rstrip("%")) / 100
            if block.id in self.images:
                return self.content_width_px * ratio * _IMAGE_ASPECT
            return _EMPTY_IMAGE_HEIGHT_PX

        font_px = self.styles.effective_font_size(block)
        if kind is BlockKind.DEFINITION:
            body = self._text_height(f"{block.term}: {block.definition}", font_px)
        elif kind is BlockKind.STEPS_LIST:
            body = sum(self._text_height(step, font_px) + 12 for step in block.steps)
        elif kind is BlockKind.TABLE:
            cell_font = font_px * 0.9
            columns = max(1, len(block.headers), *(len(row) for row in block.rows)) if block.rows else max(1, len(block.headers))
            cell_width = self.content_width_px / columns
            body = 0.0
            for row in (block.headers,) + tuple(block.rows):
                cells = [self._text_height(cell, cell_font, cell_width) for cell in row] or [cell_font * _LINE_HEIGHT]
                body += max(cells) + _TABLE_CELL_PADDING_PX
        elif kind is BlockKind.FORM_FIELD:
            body = self._text_height(block.label, font_px)
        elif kind is BlockKind.CHECKBOX_GROUP:
            option_rows = math.ceil(len(block.options) / 3) if block.options else 0
            body = self._text_height(block.label, font_px) + 16 + option_rows * (font_px * _LINE_HEIGHT + 12)
        else:
            if kind in (BlockKind.KEY_POINT, BlockKind.WARNING_BOX, BlockKind.CASE_STUDY) and not block.content:
                return 0.0
            body = self._text_height(block.content, font_px)
        return chrome + body

    def _flow(self) -> Dict[int, float]:
        offsets: Dict[int, float] = {}
        y = float(self.page_padding_px)

        toc_height = self._toc_height()
        if toc_height:
            y = self._next_page(y + toc_height)

        for index, block in enumerate(self.blocks):
            if block.kind in (BlockKind.TOC, BlockKind.UNKNOWN):
                continue
            if block.kind is BlockKind.PAGE_BREAK:
                offsets[index] = y
                y = self._next_page(y)
                continue
            offsets[index] = y
            y += self._block_height(block) + _WRAPPER_PADDING_PX

        logger.debug(f"Flow estimate: {len(offsets)} blocks over {y / self.page_height_px:.1f} pages")
        return offsets


def headings_without_page(seq: Sequence[ContentBlock]) -> List[int]:
    """Indices of headings that have no page number yet."""
    return [i for i, block in enumerate(seq) if block.kind in HEADING_KINDS and block.page_number is None]
