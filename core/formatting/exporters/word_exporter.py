#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Word Exporter - Word-processor compatible markup (.doc).

Emits an HTML document carrying Office namespaces and conditional
directives. Word opens it in print layout, and the table of contents is a
native TOC field that Word fills in itself, since page numbers from the
browser preview do not apply to Word's own layout.

Supports:
- Native TOC field when the document has headings
- Headings, paragraphs and colored callout boxes
- Tables with theme-colored header row, ordered step lists
- Form fields with underscore blanks, checkbox option glyphs
- Inline images at a fixed width
- Manual page breaks
"""

import html
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional, Sequence, Union

from config.constants import DEFAULT_EXPORT_NAME, WORD_CONTENT_TYPE, WORD_FILE_EXTENSION
from config.settings import settings
from ..content_model import BlockKind, ContentBlock, HEADING_KINDS
from ..style_config import WORD_FONT_STACKS, StyleConfig

logger = logging.getLogger(__name__)

TOC_TITLE = "Table of Contents"
TOC_UPDATE_HINT = "(Right-click here and choose \"Update Field\" to generate current page numbers)"
PAGE_BREAK_MARKUP = "<br clear=all style='page-break-before:always'>"
FORM_FIELD_BLANK = "________________________"
CHECKBOX_GLYPH = "□"


@dataclass
class WordExport:
    """Downloadable word-processor artifact"""
    filename: str
    content_type: str
    content: str

    def write_to(self, directory: Union[str, Path]) -> Path:
        """Write the document into ``directory`` and return its path."""
        output_path = Path(directory) / self.filename
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.content, encoding="utf-8")
        return output_path


def _pt(size: float) -> str:
    return f"{size:g}pt"


class WordMarkupBuilder:
    """
    Build Word markup for one document.

    Usage:
        builder = WordMarkupBuilder(styles, images)
        markup = builder.build(blocks, title="Safety Course")
    """

    def __init__(
        self,
        styles: StyleConfig,
        images: Optional[Mapping[str, str]] = None,
        image_width_px: Optional[int] = None,
    ):
        self.styles = styles
        self.images = images or {}
        self.image_width_px = image_width_px or settings.word_image_width_px
        self.title_font = WORD_FONT_STACKS[styles.title_font_family]
        self.body_font = WORD_FONT_STACKS[styles.body_font_family]

        self._renderers: Dict[BlockKind, Callable[[ContentBlock], str]] = {
            BlockKind.CHAPTER_TITLE: self._chapter_title,
            BlockKind.SECTION_TITLE: self._section_title,
            BlockKind.SUBSECTION_TITLE: self._subsection_title,
            BlockKind.PARAGRAPH: self._paragraph,
            BlockKind.KEY_POINT: self._key_point,
            BlockKind.WARNING_BOX: self._warning_box,
            BlockKind.CASE_STUDY: self._case_study,
            BlockKind.DEFINITION: self._definition,
            BlockKind.STEPS_LIST: self._steps_list,
            BlockKind.TABLE: self._table,
            BlockKind.FORM_FIELD: self._form_field,
            BlockKind.CHECKBOX_GROUP: self._checkbox_group,
            BlockKind.IMAGE_SUGGESTION: self._image,
            BlockKind.PAGE_BREAK: lambda block: PAGE_BREAK_MARKUP,
            BlockKind.TOC: lambda block: "",
            BlockKind.UNKNOWN: lambda block: "",
        }

    def build(self, seq: Sequence[ContentBlock], title: str = "") -> str:
        body = []
        if any(block.kind in HEADING_KINDS for block in seq):
            body.append(self._toc_field())
        for block in seq:
            markup = self._renderers[block.kind](block)
            if markup:
                body.append(markup)
        return self._wrap("\n".join(body), title)

    # -------------------------------------------------------------------------
    # Document frame
    # -------------------------------------------------------------------------

    def _wrap(self, body: str, title: str) -> str:
        return f"""<html xmlns:o='urn:schemas-microsoft-com:office:office' xmlns:w='urn:schemas-microsoft-com:office:word' xmlns='http://www.w3.org/TR/REC-html40'>
<head>
<meta charset="utf-8">
<title>{html.escape(title)}</title>
<!--[if gte mso 9]>
<xml>
<w:WordDocument>
<w:View>Print</w:View>
<w:Zoom>100</w:Zoom>
</w:WordDocument>
</xml>
<![endif]-->
<style>
p.MsoTOC1, li.MsoTOC1 {{
    margin-bottom: 5pt;
    font-family: {self.body_font};
    font-size: 12pt;
}}
a {{ text-decoration: none; color: black; }}
</style>
</head>
<body style="tab-interval: 36pt">
{body}
</body>
</html>
"""

    def _toc_field(self) -> str:
        styles = self.styles
        return f"""<div style="margin-bottom: 40px; page-break-after: always;">
<h1 style="font-size: {_pt(styles.main_title_font_size)}; color: {styles.theme_color}; font-family: {self.title_font}; text-align: center; border-bottom: 2px solid #eee; padding-bottom: 20px; margin-bottom: 20px;">{TOC_TITLE}</h1>
<p class=MsoTOC1 style="margin-bottom: 20px;">
<!--[if supportFields]>
<span style='mso-element:field-begin'></span>
TOC \\o "1-3" \\h \\z \\u
<span style='mso-element:field-end'></span>
<![endif]-->
</p>
<p style="text-align:center; color:#888; font-size:10pt; font-family: {self.body_font}; margin-top: 50px;">
<i>{TOC_UPDATE_HINT}</i>
</p>
</div>
{PAGE_BREAK_MARKUP}"""

    # -------------------------------------------------------------------------
    # Blocks
    # -------------------------------------------------------------------------

    def _size(self, block: ContentBlock) -> str:
        return f"font-size: {_pt(self.styles.effective_font_size(block))};"

    def _chapter_title(self, block) -> str:
        theme = self.styles.theme_color
        return (f'<h1 style="{self._size(block)} color: {theme}; font-family: {self.title_font}; '
                f'page-break-before: always; margin-top: 40px; border-bottom: 3px solid {theme}; '
                f'padding-bottom: 10px;">{block.content}</h1>')

    def _section_title(self, block) -> str:
        theme = self.styles.theme_color
        return (f'<h2 style="{self._size(block)} color: {theme}; font-family: {self.title_font}; '
                f'margin-top: 30px; border-left: 5px solid {theme}; padding-left: 10px;">{block.content}</h2>')

    def _subsection_title(self, block) -> str:
        return (f'<h3 style="{self._size(block)} color: #333; font-family: {self.title_font}; '
                f'margin-top: 20px;">{block.content}</h3>')

    def _paragraph(self, block) -> str:
        return (f'<p style="{self._size(block)} font-family: {self.body_font}; line-height: 1.6; '
                f'text-align: justify;">{block.content}</p>')

    def _box(self, box_style: str, heading: Optional[str], heading_color: str, body: str, block) -> str:
        lines = [f'<div style="{box_style}">']
        if heading:
            lines.append(f'<p style="color: {heading_color}; font-weight: bold; margin: 0 0 5px 0; '
                         f'font-family: {self.body_font};">{heading}</p>')
        lines.append(f'<p style="margin: 0; font-family: {self.body_font}; {self._size(block)}">{body}</p>')
        lines.append('</div>')
        return "\n".join(lines)

    def _key_point(self, block) -> str:
        return self._box(
            "background-color: #e6f7ff; border: 2px solid #1890ff; padding: 15px; margin: 20px 0; border-radius: 5px;",
            "★ Key Point", "#0050b3", block.content, block,
        )

    def _warning_box(self, block) -> str:
        return self._box(
            "background-color: #fff1f0; border: 2px solid #ff4d4f; padding: 15px; margin: 20px 0; border-radius: 5px;",
            "⚠️ Warning", "#cf1322", block.content, block,
        )

    def _definition(self, block) -> str:
        return self._box(
            "background-color: #f6ffed; border-left: 5px solid #52c41a; padding: 15px; margin: 20px 0;",
            None, "", f'<strong style="color: #389e0d;">{block.term}:</strong> {block.definition}', block,
        )

    def _case_study(self, block) -> str:
        return self._box(
            "background-color: #f5f5f5; border: 1px solid #d9d9d9; padding: 15px; margin: 20px 0; font-style: italic;",
            None, "", f"<strong>Case Study:</strong> {block.content}", block,
        )

    def _image(self, block) -> str:
        data = self.images.get(block.id)
        if not data:
            return ""
        return (f'<div style="text-align: center; margin: 20px 0;">'
                f'<img src="{data}" width="{self.image_width_px}" alt="Image" /></div>')

    def _table(self, block) -> str:
        size = _pt(self.styles.effective_font_size(block) * 0.9)
        head = "".join(f'<th style="padding: 8px;">{header}</th>' for header in block.headers)
        rows = "\n".join(
            "<tr>" + "".join(f'<td style="padding: 8px;">{cell}</td>' for cell in row) + "</tr>"
            for row in block.rows
        )
        return (f'<table border="1" style="border-collapse: collapse; width: 100%; margin: 20px 0; '
                f'font-family: {self.body_font}; font-size: {size};">\n'
                f'<thead>\n<tr style="background-color: {self.styles.theme_color}; color: white;">{head}</tr>\n</thead>\n'
                f'<tbody>\n{rows}\n</tbody>\n</table>')

    def _steps_list(self, block) -> str:
        items = "".join(f'<li style="margin-bottom: 5px;">{step}</li>' for step in block.steps)
        return f'<ol style="font-family: {self.body_font}; {self._size(block)} margin: 15px 0;">{items}</ol>'

    def _form_field(self, block) -> str:
        return (f'<p style="font-family: {self.body_font}; {self._size(block)} margin: 15px 0;">'
                f'{block.label}: {FORM_FIELD_BLANK}</p>')

    def _checkbox_group(self, block) -> str:
        options = "".join(f"<p>{CHECKBOX_GLYPH} {option}</p>" for option in block.options)
        return (f'<div style="font-family: {self.body_font}; {self._size(block)} margin: 15px 0;">'
                f'<p><strong>{block.label}</strong></p>{options}</div>')


def generate_word_markup(
    seq: Sequence[ContentBlock],
    styles: StyleConfig,
    images: Optional[Mapping[str, str]] = None,
    title: str = "",
) -> str:
    """
    Serialize a document to Word-compatible markup.

    Args:
        seq: Document
        styles: Project styles (theme color, font stacks, sizes)
        images: Image store; slots without an image are left out
        title: Document title

    Returns:
        Markup string
    """
    return WordMarkupBuilder(styles, images).build(seq, title)


def word_filename(name: Optional[str]) -> str:
    base = (name or "").strip() or DEFAULT_EXPORT_NAME
    for separator in ("/", "\\"):
        base = base.replace(separator, "_")
    return f"{base}{WORD_FILE_EXTENSION}"


def export_word_document(project) -> WordExport:
    """
    Export a project as a downloadable ``.doc`` artifact.

    Args:
        project: Project record with name, blocks, styles and images

    Returns:
        WordExport
    """
    content = generate_word_markup(project.blocks, project.styles, project.images, title=project.name)
    export = WordExport(
        filename=word_filename(project.name),
        content_type=WORD_CONTENT_TYPE,
        content=content,
    )
    logger.info(f"Word export: {export.filename} ({len(content)} chars, {len(project.blocks)} blocks)")
    return export
