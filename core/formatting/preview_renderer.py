#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Preview Renderer - Presentation markup for a courseware document.

Renders the document the way the interactive preview shows it: the derived
table of contents first, then every block in order on an A4-width page
container. Heading elements carry ``section-{index}`` ids so TOC links and
pagination measurement can find them.

Block text (content, steps, table cells, definitions) is stored as trusted
markup and inserted as-is. Labels, options and attribute values are escaped.
"""

import html
import logging
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from config.constants import TOC_PLACEHOLDER_GLYPH
from .content_model import BlockKind, ContentBlock
from .style_config import PREVIEW_FONT_STACKS, StyleConfig
from .toc_generator import build_toc, section_anchor

logger = logging.getLogger(__name__)

TOC_TITLE = "Table of Contents"
TOC_HINT = "The table of contents is generated automatically. Calculate page numbers to fill in the pages."
PAGE_BREAK_LABEL = "--- Page break (forced new page when printed) ---"
EMPTY_IMAGE_LABEL = "Suggested image"

# Host page rules shipped with the preview
PREVIEW_STYLESHEET = """
.page-container { min-height: 29.7cm; width: 21cm; padding: 2cm; margin: 0 auto; background: #fff; box-sizing: border-box; }
.block { position: relative; padding: 4px 0 4px 32px; }
.block p, .block h1, .block h2, .block h3 { white-space: pre-wrap; }
.toc { margin-bottom: 48px; }
.toc ul { list-style: none; padding: 0; }
.toc-entry a { display: flex; align-items: flex-end; color: #1f2937; text-decoration: none; line-height: 1; margin-bottom: 8px; }
.toc-leader { flex-grow: 1; border-bottom: 2px dotted #9ca3af; margin: 0 4px 4px; opacity: .5; }
.toc-page { min-width: 1.5rem; text-align: right; font-size: 14px; color: #4b5563; }
.toc-hint { text-align: center; margin-top: 16px; color: #9ca3af; font-size: 12px; font-style: italic; }
.callout { padding: 24px; margin: 24px 0; border-radius: 8px; display: flex; align-items: flex-start; page-break-inside: avoid; }
.callout-icon { margin-right: 16px; }
.key-point { background: #eff6ff; border-left: 4px solid #3b82f6; color: #1e3a8a; }
.warning-box { background: #fef2f2; border-left: 4px solid #ef4444; color: #7f1d1d; }
.case-study { background: #f3f4f6; border: 1px solid #e5e7eb; color: #374151; font-style: italic; }
.definition { padding: 20px; margin: 24px 0; background: #f0fdf4; border-left: 4px solid #22c55e; border-radius: 8px; color: #14532d; page-break-inside: avoid; }
.definition-term { font-weight: bold; margin-right: 8px; }
.steps-list { margin: 24px 0; page-break-inside: avoid; }
.courseware-table { width: 100%; border-collapse: collapse; margin: 32px 0; page-break-inside: avoid; }
.courseware-table th { padding: 16px; border: 1px solid #d1d5db; color: #fff; text-align: left; }
.courseware-table td { padding: 16px; border: 1px solid #d1d5db; color: #374151; vertical-align: top; }
.courseware-table tbody tr:nth-child(even) { background: #f9fafb; }
.form-field { display: flex; align-items: flex-end; margin: 24px 0; }
.form-field-line { flex-grow: 1; border-bottom: 1px dashed #9ca3af; height: 24px; margin-left: 12px; }
.checkbox-group { margin: 24px 0; padding: 16px; border: 1px solid #e5e7eb; border-radius: 6px; background: #f9fafb; page-break-inside: avoid; }
.checkbox-options { display: flex; flex-wrap: wrap; gap: 12px 32px; }
.checkbox-box { width: 20px; height: 20px; border: 2px solid #9ca3af; display: inline-block; margin-right: 12px; background: #fff; }
.image-slot { margin: 24px auto; page-break-inside: avoid; }
.image-slot img { width: 100%; border-radius: 6px; }
.image-placeholder-empty { height: 192px; border: 2px dashed #9ca3af; border-radius: 6px; display: flex; align-items: center; justify-content: center; color: #6b7280; }
.visual-page-break { height: 32px; margin: 24px 0; background: #f3f4f6; border-top: 1px dashed #9ca3af; border-bottom: 1px dashed #9ca3af; color: #6b7280; font-size: 12px; display: flex; align-items: center; justify-content: center; }
@media print {
    button { display: none !important; }
    .image-placeholder-empty { border: 1px solid #ddd !important; border-style: solid !important; color: transparent !important; }
    textarea { display: none !important; }
    *[contenteditable="true"] { border: none !important; }
    * { -webkit-print-color-adjust: exact !important; print-color-adjust: exact !important; }
}
""".strip()


def _attr(value) -> str:
    return html.escape(str(value), quote=True)


def _px(size: float) -> str:
    return f"{size:g}px"


class PreviewRenderer:
    """
    Render documents to preview markup.

    Usage:
        renderer = PreviewRenderer(styles, images)
        markup = renderer.render(blocks)
    """

    def __init__(self, styles: StyleConfig, images: Optional[Mapping[str, str]] = None):
        self.styles = styles
        self.images = images or {}
        self.title_font = PREVIEW_FONT_STACKS[styles.title_font_family]
        self.body_font = PREVIEW_FONT_STACKS[styles.body_font_family]

        self._renderers: Dict[BlockKind, Callable[[ContentBlock, int], str]] = {
            BlockKind.CHAPTER_TITLE: self._render_heading,
            BlockKind.SECTION_TITLE: self._render_heading,
            BlockKind.SUBSECTION_TITLE: self._render_heading,
            BlockKind.PARAGRAPH: self._render_paragraph,
            BlockKind.KEY_POINT: self._render_callout,
            BlockKind.WARNING_BOX: self._render_callout,
            BlockKind.CASE_STUDY: self._render_callout,
            BlockKind.DEFINITION: self._render_definition,
            BlockKind.STEPS_LIST: self._render_steps,
            BlockKind.TABLE: self._render_table,
            BlockKind.FORM_FIELD: self._render_form_field,
            BlockKind.CHECKBOX_GROUP: self._render_checkbox_group,
            BlockKind.IMAGE_SUGGESTION: self._render_image,
            BlockKind.PAGE_BREAK: self._render_page_break,
            BlockKind.TOC: self._render_nothing,
            BlockKind.UNKNOWN: self._render_nothing,
        }

    # -------------------------------------------------------------------------
    # Document
    # -------------------------------------------------------------------------

    def render(self, seq: Sequence[ContentBlock]) -> str:
        """Render the presentation tree for a whole document."""
        parts = ['<div id="pdf-preview-area">', '<div class="page-container">']

        toc = self.render_toc(seq)
        if toc:
            parts.append(toc)

        for index, block in enumerate(seq):
            markup = self.render_block(block, index)
            if markup:
                parts.append(f'<div class="block">{markup}</div>')

        parts.extend(['</div>', '</div>'])
        return "\n".join(parts)

    def render_block(self, block: ContentBlock, index: int) -> str:
        return self._renderers[block.kind](block, index)

    def render_toc(self, seq: Sequence[ContentBlock]) -> str:
        """Generated TOC section, or an empty string when there are no headings."""
        entries = build_toc(seq)
        if not entries:
            return ""

        styles = self.styles
        lines = [
            '<div class="toc" style="page-break-after: always;">',
            f'<h2 style="font-size: {_px(styles.main_title_font_size)}; font-family: {self.title_font}; '
            f'color: {_attr(styles.theme_color)}; text-align: center;">{TOC_TITLE}</h2>',
            '<ul>',
        ]
        for entry in entries:
            weight = "bold" if entry.level == 1 else "normal"
            page = entry.page_number if entry.page_number else TOC_PLACEHOLDER_GLYPH
            lines.append(
                f'<li class="toc-entry" style="padding-left: {(entry.level - 1) * 20}px; font-family: {self.body_font};">'
                f'<a href="#{entry.anchor}">'
                f'<span style="font-size: {_px(styles.body_font_size)}; font-weight: {weight};">{entry.text}</span>'
                f'<span class="toc-leader"></span>'
                f'<span class="toc-page">{page}</span>'
                f'</a></li>'
            )
        lines.extend(['</ul>', f'<div class="toc-hint">{TOC_HINT}</div>', '</div>'])
        return "\n".join(lines)

    # -------------------------------------------------------------------------
    # Blocks
    # -------------------------------------------------------------------------

    def _font(self, block: ContentBlock) -> str:
        return _px(self.styles.effective_font_size(block))

    def _render_heading(self, block, index: int) -> str:
        theme = _attr(self.styles.theme_color)
        font = f"font-size: {self._font(block)}; font-family: {self.title_font}; page-break-after: avoid;"
        anchor = section_anchor(index)
        if block.kind is BlockKind.CHAPTER_TITLE:
            return (f'<h1 id="{anchor}" style="{font} color: {theme}; border-bottom: 4px solid {theme}; '
                    f'margin: 48px 0 32px; padding-bottom: 12px;">{block.content}</h1>')
        if block.kind is BlockKind.SECTION_TITLE:
            return (f'<h2 id="{anchor}" style="{font} color: {theme}; border-left: 4px solid {theme}; '
                    f'padding-left: 16px; margin: 40px 0 24px;">{block.content}</h2>')
        return f'<h3 id="{anchor}" style="{font} color: #1f2937; margin: 32px 0 16px;">{block.content}</h3>'

    def _render_paragraph(self, block, index: int) -> str:
        return (f'<p style="font-size: {self._font(block)}; font-family: {self.body_font}; '
                f'margin-bottom: 16px; text-align: justify;">{block.content}</p>')

    _CALLOUTS = {
        BlockKind.KEY_POINT: ("key-point", "★"),
        BlockKind.WARNING_BOX: ("warning-box", "⚠"),
        BlockKind.CASE_STUDY: ("case-study", "📖"),
    }

    def _render_callout(self, block, index: int) -> str:
        if not block.content:
            return ""
        css_class, icon = self._CALLOUTS[block.kind]
        return (f'<div class="callout {css_class}"><span class="callout-icon">{icon}</span>'
                f'<div style="font-size: {self._font(block)}; font-family: {self.body_font}; flex: 1;">'
                f'{block.content}</div></div>')

    def _render_definition(self, block, index: int) -> str:
        if not (block.term and block.definition):
            return ""
        return (f'<div class="definition"><p style="font-size: {self._font(block)}; font-family: {self.body_font};">'
                f'<span class="definition-term">{block.term}:</span>{block.definition}</p></div>')

    def _render_steps(self, block, index: int) -> str:
        items = "".join(f"<li>{step}</li>" for step in block.steps)
        return (f'<div class="steps-list"><ol style="font-size: {self._font(block)}; '
                f'font-family: {self.body_font};">{items}</ol></div>')

    def _render_table(self, block, index: int) -> str:
        size = _px(self.styles.effective_font_size(block) * 0.9)
        head = "".join(f"<th>{header}</th>" for header in block.headers)
        body: List[str] = []
        for row in block.rows:
            body.append("<tr>" + "".join(f"<td>{cell}</td>" for cell in row) + "</tr>")
        return (f'<table class="courseware-table" style="font-size: {size};">'
                f'<thead style="font-family: {self.title_font};">'
                f'<tr style="background-color: {_attr(self.styles.theme_color)};">{head}</tr></thead>'
                f'<tbody style="font-family: {self.body_font};">{"".join(body)}</tbody></table>')

    def _render_form_field(self, block, index: int) -> str:
        return (f'<div class="form-field" style="font-family: {self.body_font};">'
                f'<label style="font-size: {self._font(block)};">{html.escape(block.label)}</label>'
                f'<div class="form-field-line"></div></div>')

    def _render_checkbox_group(self, block, index: int) -> str:
        font = self._font(block)
        options = "".join(
            f'<div><span class="checkbox-box"></span><span style="font-size: {font};">{html.escape(option)}</span></div>'
            for option in block.options
        )
        return (f'<div class="checkbox-group" style="font-family: {self.body_font};">'
                f'<p style="font-size: {font};">{html.escape(block.label)}</p>'
                f'<div class="checkbox-options">{options}</div></div>')

    def _render_image(self, block, index: int) -> str:
        width = _attr(block.width or "100%")
        data = self.images.get(block.id)
        if data:
            inner = f'<img src="{_attr(data)}" alt="Uploaded content for {_attr(block.id)}">'
        else:
            inner = (f'<div class="image-placeholder-empty" data-image-id="{_attr(block.id)}">'
                     f'<p>{EMPTY_IMAGE_LABEL}</p></div>')
        return f'<div class="image-slot" style="width: {width};">{inner}</div>'

    def _render_page_break(self, block, index: int) -> str:
        return f'<div class="visual-page-break"><span>{PAGE_BREAK_LABEL}</span></div>'

    def _render_nothing(self, block, index: int) -> str:
        return ""


def render_preview(
    seq: Sequence[ContentBlock],
    styles: StyleConfig,
    images: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Render the preview presentation tree.

    Args:
        seq: Document
        styles: Project styles
        images: Image store

    Returns:
        Markup rooted at ``div#pdf-preview-area``
    """
    markup = PreviewRenderer(styles, images).render(seq)
    logger.debug(f"Rendered preview: {len(seq)} blocks, {len(markup)} chars")
    return markup
