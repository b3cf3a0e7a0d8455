#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
File Importer - Load source text for a project.

Supported:
- .txt  : read as UTF-8 text (a leading BOM is dropped)
- .docx : converted to markdown-style text with python-docx; embedded
          images go into the image store and are replaced in the text by
          an ``[Image imported: <id>]`` token

Legacy .doc and Google Docs shortcuts are rejected with a hint to save as
.docx first. Any other extension is rejected. A rejected import returns
nothing and changes nothing.
"""

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from docx import Document
from docx.oxml.ns import qn
from docx.table import Table
from docx.text.paragraph import Paragraph

from config.constants import IMPORTED_IMAGE_TOKEN, LEGACY_WORD_EXTENSIONS, SUPPORTED_IMPORT_EXTENSIONS
from config.settings import settings
from core.errors import EmptyContentError, UnsupportedFileFormatError
from core.formatting.block_editor import encode_image_data_uri, generate_image_id

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    """Text and images read from one file"""
    raw_content: str
    images: Dict[str, str] = field(default_factory=dict)
    source_format: str = ""
    filename: str = ""


class TextImporter:
    """Plain text files"""

    extensions = ['.txt']

    def read(self, data: bytes, filename: str = "") -> ImportResult:
        text = data.decode('utf-8-sig', errors='replace')
        if not text:
            raise EmptyContentError("Could not read any text from the file.")
        return ImportResult(raw_content=text, source_format='txt', filename=filename)


class DocxImporter:
    """
    Word .docx files.

    Headings become ``#`` lines, list paragraphs become ``-`` / ``1.``
    items, bold runs become ``**bold**`` and tables become pipe tables.
    """

    extensions = ['.docx']

    def read(self, data: bytes, filename: str = "") -> ImportResult:
        try:
            doc = Document(io.BytesIO(data))
        except Exception as e:
            logger.error(f"Could not open {filename} as .docx: {e}")
            raise UnsupportedFileFormatError(
                "Could not read the Word file. Make sure it is a valid, undamaged .docx file.",
                detail=str(e),
            )

        images: Dict[str, str] = {}
        lines: List[str] = []

        for child in doc.element.body.iterchildren():
            if child.tag == qn('w:p'):
                text = self._paragraph_text(Paragraph(child, doc), doc, images)
                lines.append(text)
                lines.append("")
            elif child.tag == qn('w:tbl'):
                lines.extend(self._table_lines(Table(child, doc)))
                lines.append("")

        markdown = "\n".join(lines).strip() + "\n"
        logger.info(f"Imported {filename}: {len(markdown)} chars, {len(images)} images")
        return ImportResult(raw_content=markdown, images=images, source_format='docx', filename=filename)

    def _paragraph_text(self, para: Paragraph, doc, images: Dict[str, str]) -> str:
        parts = []
        for run in para.runs:
            for embed_id in run._element.xpath('.//a:blip/@r:embed'):
                token = self._extract_image(doc, embed_id, images)
                if token:
                    parts.append(token)
            text = run.text
            if not text:
                continue
            if run.bold and text.strip():
                text = f"**{text.strip()}** " if text.endswith(" ") else f"**{text.strip()}**"
            parts.append(text)

        text = "".join(parts).strip()
        if not text:
            return ""

        style_name = para.style.name.lower() if para.style is not None else ""
        if "heading 1" in style_name or style_name == "title":
            return f"# {text}"
        if "heading 2" in style_name:
            return f"## {text}"
        if "heading 3" in style_name:
            return f"### {text}"
        if "list number" in style_name:
            return f"1. {text}"
        if "list" in style_name:
            return f"- {text}"
        return text

    def _extract_image(self, doc, embed_id: str, images: Dict[str, str]) -> Optional[str]:
        part = doc.part.related_parts.get(embed_id)
        if part is None or not part.content_type.startswith('image/'):
            return None
        image_id = generate_image_id(images.keys())
        images[image_id] = encode_image_data_uri(part.blob, part.content_type)
        return IMPORTED_IMAGE_TOKEN.format(image_id=image_id)

    def _table_lines(self, table: Table) -> List[str]:
        rows = [[cell.text.strip().replace("\n", " ").replace("|", "\\|") for cell in row.cells] for row in table.rows]
        if not rows:
            return []
        width = max(len(row) for row in rows)
        rows = [row + [""] * (width - len(row)) for row in rows]
        lines = ["| " + " | ".join(rows[0]) + " |", "| " + " | ".join(["---"] * width) + " |"]
        lines.extend("| " + " | ".join(row) + " |" for row in rows[1:])
        return lines


_IMPORTERS = {
    ext: importer
    for importer in (TextImporter(), DocxImporter())
    for ext in importer.extensions
}


def import_file(filename: str, data: bytes) -> ImportResult:
    """
    Read an uploaded file.

    Args:
        filename: Original file name; the extension selects the importer
        data: File contents

    Returns:
        ImportResult

    Raises:
        UnsupportedFileFormatError: For legacy Word files and unknown extensions,
            or files larger than the upload limit
        EmptyContentError: For empty text files
    """
    ext = Path(filename).suffix.lower()

    if ext in LEGACY_WORD_EXTENSIONS:
        raise UnsupportedFileFormatError(
            "Unsupported format. Save Google Docs or .doc files as .docx before uploading."
        )
    importer = _IMPORTERS.get(ext)
    if importer is None:
        raise UnsupportedFileFormatError(
            f"Unsupported file format. Upload one of: {', '.join(SUPPORTED_IMPORT_EXTENSIONS)}."
        )

    size_mb = len(data) / (1024 * 1024)
    if size_mb > settings.max_upload_size_mb:
        raise UnsupportedFileFormatError(
            f"File too large: {size_mb:.1f}MB (limit {settings.max_upload_size_mb}MB)."
        )

    return importer.read(data, filename)
