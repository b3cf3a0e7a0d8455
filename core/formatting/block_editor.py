#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Block Editor - Pure edit operations over a courseware document.

Every operation takes a document (or image store) and returns a new one;
the input is never modified. An index that does not address a block makes
the operation a no-op that returns an equal document.

Operations:
- update_text: edit the text of a block
- change_type: convert a block to another text kind
- step_font_size: grow or shrink a block's font size
- insert_page_break: manual page break before a block
- insert_image_slot / set_image_width: image slots in the document
- upload_image / delete_image: image payloads in the image store
"""

import base64
import logging
import random
import time
from dataclasses import replace
from enum import Enum
from typing import Collection, Dict, Mapping, Optional, Sequence, Union

from config.constants import (
    DEFAULT_DEFINITION_TERM,
    DEFAULT_IMAGE_CAPTION,
    FONT_SIZE_STEP,
    ID_ALPHABET,
    ID_RANDOM_LENGTH,
    IMAGE_ID_PREFIX,
    MIN_FONT_SIZE,
)
from core.errors import InvalidBlockOperationError
from .content_model import (
    BLOCK_CLASSES,
    FONT_LOCKED_KINDS,
    HEADING_KINDS,
    TEXT_BOX_KINDS,
    BlockKind,
    ContentBlock,
    Definition,
    Document,
    ImageSuggestion,
    ImageWidth,
    PageBreak,
    extract_plain_text,
    has_text_payload,
)
from .style_config import StyleConfig

logger = logging.getLogger(__name__)

ImageStore = Dict[str, str]


class TextField(str, Enum):
    """Editable text fields"""
    CONTENT = "content"
    TERM = "term"
    DEFINITION = "definition"


class FontStepDirection(str, Enum):
    INCREASE = "increase"
    DECREASE = "decrease"


# =============================================================================
# HELPERS
# =============================================================================

def _in_range(seq: Sequence[ContentBlock], index: int) -> bool:
    return 0 <= index < len(seq)


def _with_block(seq: Sequence[ContentBlock], index: int, block: ContentBlock) -> Document:
    blocks = list(seq)
    blocks[index] = block
    return tuple(blocks)


def _random_suffix(length: int = ID_RANDOM_LENGTH) -> str:
    return "".join(random.choice(ID_ALPHABET) for _ in range(length))


def generate_image_id(existing: Collection[str] = ()) -> str:
    """
    Create an image slot id from the current time plus a random suffix.

    Args:
        existing: Ids already used in the document

    Returns:
        New id of the form ``img_<epoch ms>_<7 base36 chars>``
    """
    while True:
        image_id = f"{IMAGE_ID_PREFIX}{int(time.time() * 1000)}_{_random_suffix()}"
        if image_id not in existing:
            return image_id


def image_ids(seq: Sequence[ContentBlock]) -> set:
    """Ids of all image slots in the document."""
    return {block.id for block in seq if block.kind is BlockKind.IMAGE_SUGGESTION}


# =============================================================================
# TEXT EDITING
# =============================================================================

def update_text(
    seq: Sequence[ContentBlock],
    index: int,
    new_text: str,
    field: Union[TextField, str] = TextField.CONTENT,
) -> Document:
    """
    Write new text into one field of a block.

    Args:
        seq: Document
        index: Block position
        new_text: Replacement text
        field: ``content`` for text kinds, ``term`` or ``definition`` for
            definition blocks

    Returns:
        New document; unchanged when the block has no such field

    Raises:
        InvalidBlockOperationError: If ``field`` is not a known field name
    """
    try:
        field = TextField(field)
    except ValueError:
        raise InvalidBlockOperationError(f"Unknown text field: {field}")

    if not _in_range(seq, index):
        return tuple(seq)

    block = seq[index]
    if field is TextField.CONTENT and has_text_payload(block):
        updated = replace(block, content=new_text)
    elif field is TextField.TERM and block.kind is BlockKind.DEFINITION:
        updated = replace(block, term=new_text)
    elif field is TextField.DEFINITION and block.kind is BlockKind.DEFINITION:
        updated = replace(block, definition=new_text)
    else:
        return tuple(seq)

    return _with_block(seq, index, updated)


def change_type(
    seq: Sequence[ContentBlock],
    index: int,
    new_kind: Union[BlockKind, str],
) -> Document:
    """
    Convert a block to another kind, keeping its text.

    The old block's plain text seeds the new block. Definitions receive a
    placeholder term and the text as the definition. Kinds that need
    structured data (tables, checkbox groups, image slots, ...) cannot be
    targets; asking for one leaves the document unchanged. A custom font
    size carries over.

    Args:
        seq: Document
        index: Block position
        new_kind: Target kind

    Returns:
        New document
    """
    try:
        new_kind = BlockKind(new_kind)
    except ValueError:
        return tuple(seq)

    if not _in_range(seq, index):
        return tuple(seq)

    old = seq[index]
    text = extract_plain_text(old)
    custom_size = getattr(old, "custom_font_size", None)

    if new_kind in HEADING_KINDS or new_kind in TEXT_BOX_KINDS:
        new_block = BLOCK_CLASSES[new_kind](content=text, custom_font_size=custom_size)
    elif new_kind is BlockKind.DEFINITION:
        new_block = Definition(term=DEFAULT_DEFINITION_TERM, definition=text, custom_font_size=custom_size)
    else:
        logger.debug(f"change_type: {new_kind.value} is not a text-seedable kind, ignored")
        return tuple(seq)

    return _with_block(seq, index, new_block)


# =============================================================================
# FONT SIZE
# =============================================================================

def step_font_size(
    seq: Sequence[ContentBlock],
    index: int,
    direction: Union[FontStepDirection, str],
    styles: StyleConfig,
) -> Document:
    """
    Increase or decrease a block's font size by the fixed step.

    Blocks without a custom size start from the style default for their
    kind. The result is stored as the block's custom size and never drops
    below the floor.

    Args:
        seq: Document
        index: Block position
        direction: ``increase`` or ``decrease``
        styles: Project styles for the starting size

    Returns:
        New document; unchanged for image slots, page breaks and legacy blocks
    """
    direction = FontStepDirection(direction)
    if not _in_range(seq, index):
        return tuple(seq)

    block = seq[index]
    if block.kind in FONT_LOCKED_KINDS:
        return tuple(seq)

    current = block.custom_font_size or styles.default_font_size(block)
    if direction is FontStepDirection.INCREASE:
        new_size = current + FONT_SIZE_STEP
    else:
        new_size = max(MIN_FONT_SIZE, current - FONT_SIZE_STEP)

    return _with_block(seq, index, replace(block, custom_font_size=new_size))


# =============================================================================
# STRUCTURE
# =============================================================================

def insert_page_break(seq: Sequence[ContentBlock], index: int) -> Document:
    """Insert a page break immediately before the block at ``index``."""
    if not _in_range(seq, index):
        return tuple(seq)
    blocks = list(seq)
    blocks.insert(index, PageBreak())
    return tuple(blocks)


def insert_image_slot(
    seq: Sequence[ContentBlock],
    after_index: int,
    image_id: Optional[str] = None,
    preceding_text: str = DEFAULT_IMAGE_CAPTION,
) -> Document:
    """
    Insert a new empty image slot after the block at ``after_index``.

    Args:
        seq: Document
        after_index: Position to insert after; -1 inserts at the start
        image_id: Id for the slot; generated when omitted
        preceding_text: Caption hint stored with the slot

    Returns:
        New document with the slot at ``after_index + 1``
    """
    if not -1 <= after_index < len(seq):
        return tuple(seq)

    existing = image_ids(seq)
    if image_id is None:
        image_id = generate_image_id(existing)
    elif image_id in existing:
        raise InvalidBlockOperationError(f"Image id already used in this document: {image_id}")

    blocks = list(seq)
    blocks.insert(after_index + 1, ImageSuggestion(id=image_id, preceding_text=preceding_text))
    return tuple(blocks)


def set_image_width(
    seq: Sequence[ContentBlock],
    image_id: str,
    width: Union[ImageWidth, str],
) -> Document:
    """
    Set the display width of the image slot with the given id.

    Raises:
        InvalidBlockOperationError: If ``width`` is not 25%, 50%, 75% or 100%
    """
    try:
        width = ImageWidth(width)
    except ValueError:
        raise InvalidBlockOperationError(f"Unsupported image width: {width}")

    return tuple(
        replace(block, width=width.value)
        if block.kind is BlockKind.IMAGE_SUGGESTION and block.id == image_id
        else block
        for block in seq
    )


# =============================================================================
# IMAGE STORE
# =============================================================================

def encode_image_data_uri(data: bytes, mime_type: str = "image/png") -> str:
    """Encode raw image bytes as a self-contained data URI."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def upload_image(
    store: Mapping[str, str],
    image_id: str,
    payload: Union[str, bytes],
    mime_type: str = "image/png",
) -> ImageStore:
    """
    Store an image payload under an image slot id.

    Args:
        store: Image store
        image_id: Slot id
        payload: Data URI string, or raw bytes to encode as one
        mime_type: Mime type used when encoding raw bytes

    Returns:
        New image store
    """
    if isinstance(payload, bytes):
        payload = encode_image_data_uri(payload, mime_type)
    new_store = dict(store)
    new_store[image_id] = payload
    return new_store


def delete_image(store: Mapping[str, str], image_id: str) -> ImageStore:
    """Remove an image payload; the slot itself stays in the document."""
    new_store = dict(store)
    new_store.pop(image_id, None)
    return new_store
