#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Content Model - Typed content blocks for courseware documents.

A document is an ordered tuple of blocks. Each block kind is its own frozen
dataclass tagged with a BlockKind; readers dispatch on ``block.kind`` and
must cover every kind, including the legacy ``toc`` kind and unrecognized
kinds loaded from older projects (both render as no-ops).

Blocks are converted to and from the persisted project format (camelCase
keys, ``type`` discriminator) with block_from_dict / block_to_dict.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, ClassVar, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union


# =============================================================================
# BLOCK KINDS
# =============================================================================

class BlockKind(str, Enum):
    """Every kind of content block"""
    CHAPTER_TITLE = "chapter_title"
    SECTION_TITLE = "section_title"
    SUBSECTION_TITLE = "subsection_title"
    PARAGRAPH = "paragraph"
    KEY_POINT = "key_point"
    WARNING_BOX = "warning_box"
    CASE_STUDY = "case_study"
    DEFINITION = "definition"
    STEPS_LIST = "steps_list"
    TABLE = "table"
    FORM_FIELD = "form_field"
    CHECKBOX_GROUP = "checkbox_group"
    IMAGE_SUGGESTION = "image_suggestion"
    PAGE_BREAK = "page_break"
    TOC = "toc"          # legacy, never produced by the editor
    UNKNOWN = "unknown"  # kinds this version does not recognize


class ImageWidth(str, Enum):
    """Display widths offered for image slots"""
    SMALL = "25%"
    MEDIUM = "50%"
    LARGE = "75%"
    FULL = "100%"


IMAGE_WIDTH_VALUES = frozenset(w.value for w in ImageWidth)


# =============================================================================
# BLOCK DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class _HeadingBlock:
    content: str = ""
    page_number: Optional[int] = None       # written only by pagination
    custom_font_size: Optional[float] = None


@dataclass(frozen=True)
class ChapterTitle(_HeadingBlock):
    """Top level heading (H1)"""
    kind: ClassVar[BlockKind] = BlockKind.CHAPTER_TITLE


@dataclass(frozen=True)
class SectionTitle(_HeadingBlock):
    """Second level heading (H2)"""
    kind: ClassVar[BlockKind] = BlockKind.SECTION_TITLE


@dataclass(frozen=True)
class SubsectionTitle(_HeadingBlock):
    """Third level heading (H3)"""
    kind: ClassVar[BlockKind] = BlockKind.SUBSECTION_TITLE


@dataclass(frozen=True)
class _TextBlock:
    content: str = ""
    custom_font_size: Optional[float] = None


@dataclass(frozen=True)
class Paragraph(_TextBlock):
    kind: ClassVar[BlockKind] = BlockKind.PARAGRAPH


@dataclass(frozen=True)
class KeyPoint(_TextBlock):
    kind: ClassVar[BlockKind] = BlockKind.KEY_POINT


@dataclass(frozen=True)
class WarningBox(_TextBlock):
    kind: ClassVar[BlockKind] = BlockKind.WARNING_BOX


@dataclass(frozen=True)
class CaseStudy(_TextBlock):
    kind: ClassVar[BlockKind] = BlockKind.CASE_STUDY


@dataclass(frozen=True)
class Definition:
    term: str = ""
    definition: str = ""
    custom_font_size: Optional[float] = None
    kind: ClassVar[BlockKind] = BlockKind.DEFINITION


@dataclass(frozen=True)
class StepsList:
    steps: Tuple[str, ...] = ()
    custom_font_size: Optional[float] = None
    kind: ClassVar[BlockKind] = BlockKind.STEPS_LIST


@dataclass(frozen=True)
class Table:
    """Rows are expected to match headers in length; ragged rows still render."""
    headers: Tuple[str, ...] = ()
    rows: Tuple[Tuple[str, ...], ...] = ()
    custom_font_size: Optional[float] = None
    kind: ClassVar[BlockKind] = BlockKind.TABLE


@dataclass(frozen=True)
class FormField:
    label: str = ""
    custom_font_size: Optional[float] = None
    kind: ClassVar[BlockKind] = BlockKind.FORM_FIELD


@dataclass(frozen=True)
class CheckboxGroup:
    label: str = ""
    options: Tuple[str, ...] = ()
    custom_font_size: Optional[float] = None
    kind: ClassVar[BlockKind] = BlockKind.CHECKBOX_GROUP


@dataclass(frozen=True)
class ImageSuggestion:
    """Image slot. ``id`` is a key into the project's image store."""
    id: str
    preceding_text: str = ""
    width: Optional[str] = None
    kind: ClassVar[BlockKind] = BlockKind.IMAGE_SUGGESTION


@dataclass(frozen=True)
class PageBreak:
    """Manual page break"""
    kind: ClassVar[BlockKind] = BlockKind.PAGE_BREAK


@dataclass(frozen=True)
class LegacyToc:
    """Stored TOC block from older projects; the TOC is now always derived."""
    items: Tuple[Mapping[str, Any], ...] = ()
    kind: ClassVar[BlockKind] = BlockKind.TOC


@dataclass(frozen=True)
class UnknownBlock:
    """Block whose ``type`` this version does not know; kept verbatim."""
    type_name: str
    payload: Mapping[str, Any] = field(default_factory=dict)
    kind: ClassVar[BlockKind] = BlockKind.UNKNOWN


ContentBlock = Union[
    ChapterTitle, SectionTitle, SubsectionTitle,
    Paragraph, KeyPoint, WarningBox, CaseStudy,
    Definition, StepsList, Table, FormField, CheckboxGroup,
    ImageSuggestion, PageBreak, LegacyToc, UnknownBlock,
]

Document = Tuple[ContentBlock, ...]


BLOCK_CLASSES: Dict[BlockKind, type] = {
    BlockKind.CHAPTER_TITLE: ChapterTitle,
    BlockKind.SECTION_TITLE: SectionTitle,
    BlockKind.SUBSECTION_TITLE: SubsectionTitle,
    BlockKind.PARAGRAPH: Paragraph,
    BlockKind.KEY_POINT: KeyPoint,
    BlockKind.WARNING_BOX: WarningBox,
    BlockKind.CASE_STUDY: CaseStudy,
    BlockKind.DEFINITION: Definition,
    BlockKind.STEPS_LIST: StepsList,
    BlockKind.TABLE: Table,
    BlockKind.FORM_FIELD: FormField,
    BlockKind.CHECKBOX_GROUP: CheckboxGroup,
    BlockKind.IMAGE_SUGGESTION: ImageSuggestion,
    BlockKind.PAGE_BREAK: PageBreak,
    BlockKind.TOC: LegacyToc,
    BlockKind.UNKNOWN: UnknownBlock,
}

HEADING_KINDS = frozenset({
    BlockKind.CHAPTER_TITLE,
    BlockKind.SECTION_TITLE,
    BlockKind.SUBSECTION_TITLE,
})

TEXT_BOX_KINDS = frozenset({
    BlockKind.PARAGRAPH,
    BlockKind.KEY_POINT,
    BlockKind.WARNING_BOX,
    BlockKind.CASE_STUDY,
})

# Kinds that can be built from a single plain-text string
TEXT_SEEDABLE_KINDS = HEADING_KINDS | TEXT_BOX_KINDS | {BlockKind.DEFINITION}

# Kinds without a font size
FONT_LOCKED_KINDS = frozenset({
    BlockKind.IMAGE_SUGGESTION,
    BlockKind.PAGE_BREAK,
    BlockKind.TOC,
    BlockKind.UNKNOWN,
})

HEADING_LEVELS = {
    BlockKind.CHAPTER_TITLE: 1,
    BlockKind.SECTION_TITLE: 2,
    BlockKind.SUBSECTION_TITLE: 3,
}


# =============================================================================
# PREDICATES
# =============================================================================

def is_heading(block: ContentBlock) -> bool:
    return block.kind in HEADING_KINDS


def has_text_payload(block: ContentBlock) -> bool:
    """True when the block exposes a single ``content`` string."""
    return block.kind in HEADING_KINDS or block.kind in TEXT_BOX_KINDS


def extract_plain_text(block: ContentBlock) -> str:
    """
    Best-effort plain text of a block, used when converting between kinds.

    Args:
        block: Any content block

    Returns:
        ``content`` for text kinds, ``"term: definition"`` for definitions,
        newline-joined steps for step lists, empty string otherwise
    """
    if has_text_payload(block):
        return block.content
    if block.kind is BlockKind.DEFINITION:
        return f"{block.term}: {block.definition}"
    if block.kind is BlockKind.STEPS_LIST:
        return "\n".join(block.steps)
    return ""


# =============================================================================
# SERIALIZATION
# =============================================================================

_CAMEL_KEYS = {
    "page_number": "pageNumber",
    "custom_font_size": "customFontSize",
    "preceding_text": "precedingText",
}
_SNAKE_KEYS = {camel: snake for snake, camel in _CAMEL_KEYS.items()}


def _str_tuple(values: Any) -> Tuple[str, ...]:
    if not values:
        return ()
    return tuple("" if v is None else str(v) for v in values)


def _image_width(value: Any) -> Optional[str]:
    """Known display width, or None (full width) for anything else."""
    if isinstance(value, ImageWidth):
        return value.value
    if isinstance(value, str) and value in IMAGE_WIDTH_VALUES:
        return value
    return None


def block_from_dict(data: Mapping[str, Any]) -> ContentBlock:
    """
    Build a block from its persisted dictionary form.

    Unrecognized ``type`` values become UnknownBlock so that documents saved
    by newer versions still load.

    Args:
        data: Mapping with a ``type`` key and camelCase payload keys

    Returns:
        ContentBlock

    Raises:
        ValueError: If ``data`` has no ``type``
    """
    type_name = data.get("type")
    if not type_name:
        raise ValueError(f"Content block has no type: {dict(data)!r}")

    try:
        kind = BlockKind(type_name)
    except ValueError:
        return UnknownBlock(type_name=str(type_name), payload=dict(data))

    if kind is BlockKind.UNKNOWN:
        return UnknownBlock(type_name=str(type_name), payload=dict(data))

    values = {_SNAKE_KEYS.get(key, key): value for key, value in data.items() if key != "type"}

    if kind is BlockKind.STEPS_LIST:
        return StepsList(
            steps=_str_tuple(values.get("steps")),
            custom_font_size=values.get("custom_font_size"),
        )
    if kind is BlockKind.TABLE:
        return Table(
            headers=_str_tuple(values.get("headers")),
            rows=tuple(_str_tuple(row) for row in values.get("rows") or ()),
            custom_font_size=values.get("custom_font_size"),
        )
    if kind is BlockKind.CHECKBOX_GROUP:
        return CheckboxGroup(
            label=values.get("label") or "",
            options=_str_tuple(values.get("options")),
            custom_font_size=values.get("custom_font_size"),
        )
    if kind is BlockKind.TOC:
        return LegacyToc(items=tuple(dict(item) for item in values.get("items") or ()))
    if kind is BlockKind.IMAGE_SUGGESTION:
        return ImageSuggestion(
            id=str(values.get("id") or ""),
            preceding_text=values.get("preceding_text") or "",
            width=_image_width(values.get("width")),
        )

    cls = BLOCK_CLASSES[kind]
    accepted = {f.name for f in fields(cls)}
    kwargs = {key: value for key, value in values.items() if key in accepted and value is not None}
    return cls(**kwargs)


def block_to_dict(block: ContentBlock) -> Dict[str, Any]:
    """
    Convert a block to its persisted dictionary form.

    Optional fields that are unset are omitted, matching how the project
    format has always been written.
    """
    if block.kind is BlockKind.UNKNOWN:
        return dict(block.payload)

    data: Dict[str, Any] = {"type": block.kind.value}
    for f in fields(block):
        value = getattr(block, f.name)
        if value is None:
            continue
        if f.name == "rows":
            value = [list(row) for row in value]
        elif f.name == "items":
            value = [dict(item) for item in value]
        elif isinstance(value, tuple):
            value = list(value)
        data[_CAMEL_KEYS.get(f.name, f.name)] = value
    return data


def blocks_from_list(items: Iterable[Mapping[str, Any]]) -> Document:
    """Convert a list of persisted block dicts into a document."""
    return tuple(block_from_dict(item) for item in items)


def blocks_to_list(blocks: Sequence[ContentBlock]) -> List[Dict[str, Any]]:
    """Convert a document into a list of persisted block dicts."""
    return [block_to_dict(block) for block in blocks]
