#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Print View Exporter - Standalone printable document for the browser.

Combines a snapshot of the presentation markup, the host stylesheet rules
and print overrides (A4 page box, header/footer margin content, manual page
breaks) into one HTML document, opens it on a print surface and triggers
native print.

Known limitation: print is triggered after a fixed settle delay so embedded
images and web fonts have time to load. The delay avoids the common race
but does not guarantee that loading has finished.
"""

import asyncio
import html
import logging
from typing import Mapping, Optional, Protocol, Sequence

from config.constants import PRINT_WINDOW_TITLE
from config.settings import settings
from ..content_model import ContentBlock
from ..preview_renderer import PREVIEW_STYLESHEET, render_preview
from ..style_config import PRINT_MARGIN_FONT_STACKS, StyleConfig

logger = logging.getLogger(__name__)


class PrintSurface(Protocol):
    """Secondary rendering surface (browser window, headless page, ...)."""

    def open(self, document: str) -> None:
        ...

    def focus(self) -> None:
        ...

    def print(self) -> None:
        ...


def _css_string(text: str) -> str:
    """Quote text for use as a CSS string value."""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\A ")
    return f'"{escaped}"'


def build_print_overrides(styles: StyleConfig) -> str:
    """
    Print-only style rules for a project.

    Args:
        styles: Project styles (header/footer text, body font family)

    Returns:
        CSS rules
    """
    margin_font = PRINT_MARGIN_FONT_STACKS[styles.body_font_family]
    footer = _css_string(f"{styles.footer_text} - Page ")

    return f"""
@media print {{
    .image-placeholder-empty {{
        display: none;
    }}
    .page-container {{
        box-shadow: none !important;
        border: none !important;
        width: 100% !important;
        margin: 0 !important;
    }}
    table {{ page-break-inside: auto; }}
    tr {{ page-break-inside: avoid; page-break-after: auto; }}
    thead {{ display: table-header-group; }}
    tfoot {{ display: table-footer-group; }}
    body {{ zoom: 1.25; }}
    .visual-page-break {{
        border: none !important;
        height: 0 !important;
        margin: 0 !important;
        page-break-before: always !important;
    }}
    .visual-page-break span {{
        display: none !important;
    }}
}}
@page {{
    size: A4;
    margin: 2cm;
}}
@page {{
    @top-center {{
        content: {_css_string(styles.header_text)};
        font-size: 0.9rem;
        color: #888;
        font-family: {margin_font};
    }}
    @bottom-center {{
        content: {footer} counter(page);
        font-size: 0.9rem;
        color: #888;
        font-family: {margin_font};
    }}
}}
body {{
    counter-reset: page;
    background-color: #FFF !important;
}}
""".strip()


def assemble_print_document(
    presentation_markup: str,
    stylesheet_rules: str,
    override_rules: str,
    title: str = PRINT_WINDOW_TITLE,
    script: Optional[str] = None,
) -> str:
    """
    Combine markup and style rules into one standalone HTML document.

    Override rules come after the stylesheet rules so they win.
    """
    parts = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        "<meta charset='utf-8'>",
        f"<title>{html.escape(title)}</title>",
        "<style>",
        stylesheet_rules,
        override_rules,
        "</style>",
        "</head>",
        "<body>",
        presentation_markup,
    ]
    if script:
        parts.append(f"<script>{script}</script>")
    parts.extend(["</body>", "</html>"])
    return "\n".join(parts)


class PrintExporter:
    """
    Open a printable document on a surface and trigger print.

    Usage:
        exporter = PrintExporter()
        await exporter.export(markup, PREVIEW_STYLESHEET, styles, surface)
    """

    def __init__(self, settle_delay_ms: Optional[int] = None):
        self.settle_delay_ms = settings.print_settle_delay_ms if settle_delay_ms is None else settle_delay_ms

    async def export(
        self,
        presentation_markup: str,
        stylesheet_rules: str,
        styles: StyleConfig,
        surface: PrintSurface,
    ) -> str:
        """
        Write the print document to the surface, wait, then print.

        Args:
            presentation_markup: Snapshot of the rendered preview
            stylesheet_rules: Style rules collected from the host page
            styles: Project styles for header/footer
            surface: Where the document is opened and printed

        Returns:
            The assembled document
        """
        document = assemble_print_document(
            presentation_markup, stylesheet_rules, build_print_overrides(styles)
        )
        surface.open(document)
        logger.info(f"Print view opened ({len(document)} chars), printing in {self.settle_delay_ms} ms")

        await asyncio.sleep(self.settle_delay_ms / 1000)
        surface.focus()
        surface.print()
        return document


def render_print_view(
    seq: Sequence[ContentBlock],
    styles: StyleConfig,
    images: Optional[Mapping[str, str]] = None,
    auto_print: bool = True,
    settle_delay_ms: Optional[int] = None,
) -> str:
    """
    Standalone print document for a browser.

    With ``auto_print`` the page calls ``window.print()`` after the settle
    delay once it is opened.
    """
    delay = settings.print_settle_delay_ms if settle_delay_ms is None else settle_delay_ms
    script = f"setTimeout(function () {{ window.focus(); window.print(); }}, {int(delay)});" if auto_print else None
    return assemble_print_document(
        render_preview(seq, styles, images),
        PREVIEW_STYLESHEET,
        build_print_overrides(styles),
        script=script,
    )
