#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Courseware Formatting Engine v1.0

Document model and formatting pipeline for courseware projects.

Stages:
1. Content Model - Typed blocks and project styles
2. Block Editor - Pure edit operations over a document
3. TOC + Pagination - Derived table of contents and page numbers
4. Export - Preview, print view and Word-compatible output
"""

__version__ = "1.0.0"

# Stage 1: Model
from .content_model import (
    BlockKind,
    ImageWidth,
    ChapterTitle,
    SectionTitle,
    SubsectionTitle,
    Paragraph,
    KeyPoint,
    WarningBox,
    CaseStudy,
    Definition,
    StepsList,
    Table,
    FormField,
    CheckboxGroup,
    ImageSuggestion,
    PageBreak,
    LegacyToc,
    UnknownBlock,
    ContentBlock,
    Document,
    block_from_dict,
    block_to_dict,
    blocks_from_list,
    blocks_to_list,
    extract_plain_text,
)
from .style_config import FontFamily, StyleConfig, default_styles

# Stage 2: Editing
from .block_editor import (
    FontStepDirection,
    TextField,
    change_type,
    delete_image,
    insert_image_slot,
    insert_page_break,
    set_image_width,
    step_font_size,
    update_text,
    upload_image,
)

# Stage 3: TOC + Pagination
from .toc_generator import TocEntry, TocGenerator, build_toc, section_anchor
from .pagination import (
    FlowEstimateMeasurer,
    LayoutMeasurer,
    PaginationEngine,
    PaginationOutcome,
    PaginationResult,
    RecordedMeasurer,
    resolve_page_numbers,
)
from .text_stats import WordCountReport, count_words, structured_word_count, verify_word_count

# Stage 4: Export
from .preview_renderer import PREVIEW_STYLESHEET, PreviewRenderer, render_preview
from .exporters import (
    PrintExporter,
    WordExport,
    build_print_overrides,
    assemble_print_document,
    export_word_document,
    generate_word_markup,
    render_print_view,
)

__all__ = [
    # Model
    "BlockKind",
    "ImageWidth",
    "ChapterTitle",
    "SectionTitle",
    "SubsectionTitle",
    "Paragraph",
    "KeyPoint",
    "WarningBox",
    "CaseStudy",
    "Definition",
    "StepsList",
    "Table",
    "FormField",
    "CheckboxGroup",
    "ImageSuggestion",
    "PageBreak",
    "LegacyToc",
    "UnknownBlock",
    "ContentBlock",
    "Document",
    "block_from_dict",
    "block_to_dict",
    "blocks_from_list",
    "blocks_to_list",
    "extract_plain_text",
    # Styles
    "FontFamily",
    "StyleConfig",
    "default_styles",
    # Editing
    "FontStepDirection",
    "TextField",
    "change_type",
    "delete_image",
    "insert_image_slot",
    "insert_page_break",
    "set_image_width",
    "step_font_size",
    "update_text",
    "upload_image",
    # TOC + Pagination
    "TocEntry",
    "TocGenerator",
    "build_toc",
    "section_anchor",
    "FlowEstimateMeasurer",
    "LayoutMeasurer",
    "PaginationEngine",
    "PaginationOutcome",
    "RecordedMeasurer",
    "PaginationResult",
    "resolve_page_numbers",
    # Word count
    "WordCountReport",
    "count_words",
    "structured_word_count",
    "verify_word_count",
    # Export
    "PREVIEW_STYLESHEET",
    "PreviewRenderer",
    "render_preview",
    "PrintExporter",
    "WordExport",
    "build_print_overrides",
    "assemble_print_document",
    "export_word_document",
    "generate_word_markup",
    "render_print_view",
]
