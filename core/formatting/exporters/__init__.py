#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Document Exporters - Print view and Word-compatible output.
"""

from .print_exporter import (
    PrintExporter,
    PrintSurface,
    assemble_print_document,
    build_print_overrides,
    render_print_view,
)
from .word_exporter import (
    WordExport,
    WordMarkupBuilder,
    export_word_document,
    generate_word_markup,
    word_filename,
)

__all__ = [
    "PrintExporter",
    "PrintSurface",
    "assemble_print_document",
    "build_print_overrides",
    "render_print_view",
    "WordExport",
    "WordMarkupBuilder",
    "export_word_document",
    "generate_word_markup",
    "word_filename",
]
