#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Style Configuration - Global look of a courseware project.

StyleConfig is an immutable input to rendering and export. The editor never
changes it; a style update replaces the whole object.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Mapping

from config.constants import SUBSECTION_SIZE_RATIO
from .content_model import BlockKind, ContentBlock


class FontFamily(str, Enum):
    """The two selectable font stacks"""
    SERIF = "serif"
    SANS_SERIF = "sans-serif"


# Stacks used by the interactive preview and the print view
PREVIEW_FONT_STACKS = {
    FontFamily.SERIF: "'Noto Serif TC', 'Source Han Serif TC', 'Songti TC', Georgia, serif",
    FontFamily.SANS_SERIF: (
        "'Noto Sans TC', 'PingFang TC', 'Helvetica Neue', "
        "'Microsoft JhengHei', 'Heiti TC', sans-serif"
    ),
}

# Stacks used by the word-processor export (fonts installed with Office)
WORD_FONT_STACKS = {
    FontFamily.SERIF: '"Times New Roman", "PMingLiU", serif',
    FontFamily.SANS_SERIF: '"Arial", "Microsoft JhengHei", sans-serif',
}

# Header/footer stacks for print margin boxes
PRINT_MARGIN_FONT_STACKS = {
    FontFamily.SERIF: "'Noto Serif TC', serif",
    FontFamily.SANS_SERIF: "'Noto Sans TC', sans-serif",
}


FONT_SIZE_FIELDS = ("main_title_font_size", "sub_title_font_size", "body_font_size")


def _font_size(name: str, value: Any) -> float:
    """Coerce a style font size to a positive number, raising ValueError otherwise."""
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number, got {value!r}")
    try:
        size = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {value!r}") from None
    if not size > 0 or size == float("inf"):
        raise ValueError(f"{name} must be greater than 0, got {value!r}")
    return size


def _stored_size(data: Mapping[str, Any], key: str, default: float) -> Any:
    value = data.get(key)
    return default if value is None else value


@dataclass(frozen=True)
class StyleConfig:
    """Theme color, font stacks, base font sizes and print header/footer."""
    theme_color: str = "#004A99"
    title_font_family: FontFamily = FontFamily.SERIF
    body_font_family: FontFamily = FontFamily.SANS_SERIF
    main_title_font_size: float = 32
    sub_title_font_size: float = 24
    body_font_size: float = 16
    header_text: str = "Internal Training Material"
    footer_text: str = "All Rights Reserved"

    def __post_init__(self):
        for name in FONT_SIZE_FIELDS:
            object.__setattr__(self, name, _font_size(name, getattr(self, name)))

    def default_font_size(self, block: ContentBlock) -> float:
        """
        Style-derived font size for a block without a custom size.

        Args:
            block: Content block

        Returns:
            main title size for chapters, sub title size for sections,
            sub title size x 0.85 for subsections, body size otherwise
        """
        if block.kind is BlockKind.CHAPTER_TITLE:
            return self.main_title_font_size
        if block.kind is BlockKind.SECTION_TITLE:
            return self.sub_title_font_size
        if block.kind is BlockKind.SUBSECTION_TITLE:
            return self.sub_title_font_size * SUBSECTION_SIZE_RATIO
        return self.body_font_size

    def effective_font_size(self, block: ContentBlock) -> float:
        """Custom size when the block has one, style default otherwise."""
        custom = getattr(block, "custom_font_size", None)
        return custom if custom else self.default_font_size(block)

    def with_updates(self, **changes: Any) -> "StyleConfig":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "themeColor": self.theme_color,
            "titleFontFamily": self.title_font_family.value,
            "bodyFontFamily": self.body_font_family.value,
            "mainTitleFontSize": self.main_title_font_size,
            "subTitleFontSize": self.sub_title_font_size,
            "bodyFontSize": self.body_font_size,
            "headerText": self.header_text,
            "footerText": self.footer_text,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StyleConfig":
        defaults = cls()
        return cls(
            theme_color=data.get("themeColor", defaults.theme_color),
            title_font_family=FontFamily(data.get("titleFontFamily", defaults.title_font_family.value)),
            body_font_family=FontFamily(data.get("bodyFontFamily", defaults.body_font_family.value)),
            main_title_font_size=_stored_size(data, "mainTitleFontSize", defaults.main_title_font_size),
            sub_title_font_size=_stored_size(data, "subTitleFontSize", defaults.sub_title_font_size),
            body_font_size=_stored_size(data, "bodyFontSize", defaults.body_font_size),
            header_text=data.get("headerText", defaults.header_text),
            footer_text=data.get("footerText", defaults.footer_text),
        )


def default_styles() -> StyleConfig:
    """Styles given to every new project."""
    return StyleConfig()
