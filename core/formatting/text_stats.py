#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Word counting for content-loss checks.

Latin/number runs count as one word each, CJK ideographs count one per
character. Markup characters and HTML tags are ignored so the raw text and
the structured blocks are counted on the same footing.
"""

import logging
import re
from dataclasses import dataclass
from typing import Sequence

from config.constants import WORD_COUNT_RATIO_THRESHOLD
from .content_model import BlockKind, ContentBlock, has_text_payload

logger = logging.getLogger(__name__)

_TAG_PATTERN = re.compile(r"<[^>]+>")
_MARKUP_PATTERN = re.compile(r"[#*`_~\[\]()<>]")
_LATIN_WORD_PATTERN = re.compile(r"[a-zA-Z0-9]+")
_CJK_PATTERN = re.compile(r"[一-龥]")


def count_words(text: str) -> int:
    """
    Count words in a piece of text.

    Args:
        text: Raw or marked-up text

    Returns:
        Latin words plus CJK characters
    """
    if not text:
        return 0
    cleaned = _MARKUP_PATTERN.sub("", _TAG_PATTERN.sub(" ", text))
    return len(_LATIN_WORD_PATTERN.findall(cleaned)) + len(_CJK_PATTERN.findall(cleaned))


def _block_texts(block: ContentBlock):
    if has_text_payload(block):
        yield block.content
    elif block.kind is BlockKind.DEFINITION:
        yield block.term
        yield block.definition
    elif block.kind is BlockKind.STEPS_LIST:
        yield from block.steps
    elif block.kind is BlockKind.TABLE:
        yield from block.headers
        for row in block.rows:
            yield from row


def structured_word_count(seq: Sequence[ContentBlock]) -> int:
    """Words across all textual fields of a document."""
    return sum(count_words(text) for block in seq for text in _block_texts(block))


@dataclass
class WordCountReport:
    """Raw vs. structured word counts"""
    raw_count: int
    generated_count: int
    ratio: float
    possible_loss: bool

    def to_dict(self) -> dict:
        return {
            'raw_count': self.raw_count,
            'generated_count': self.generated_count,
            'ratio': round(self.ratio, 4),
            'possible_loss': self.possible_loss,
        }


def verify_word_count(
    raw_text: str,
    seq: Sequence[ContentBlock],
    threshold: float = WORD_COUNT_RATIO_THRESHOLD,
) -> WordCountReport:
    """
    Compare the raw text with the structured document.

    A ratio below ``threshold`` flags that the structuring step may have
    dropped content.
    """
    raw_count = count_words(raw_text)
    generated_count = structured_word_count(seq)
    ratio = generated_count / raw_count if raw_count else 1.0
    possible_loss = raw_count > 0 and ratio < threshold

    if possible_loss:
        logger.warning(
            f"Possible content loss: {generated_count}/{raw_count} words "
            f"({ratio:.0%}) after structuring"
        )
    return WordCountReport(raw_count, generated_count, ratio, possible_loss)
