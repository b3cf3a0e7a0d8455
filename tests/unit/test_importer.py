"""
Unit tests for core/project/importer.py
"""
import base64
import io
import re

import pytest
from docx import Document

from core.errors import EmptyContentError, UnsupportedFileFormatError
from core.project.importer import DocxImporter, TextImporter, import_file

PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)


def _docx_bytes(build) -> bytes:
    doc = Document()
    build(doc)
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


class TestTextImporter:

    def test_utf8_with_bom(self):
        result = import_file("notes.txt", "\ufeffHello 服务".encode("utf-8"))
        assert result.raw_content == "Hello 服务"
        assert result.source_format == "txt"
        assert result.images == {}

    def test_empty_file(self):
        with pytest.raises(EmptyContentError):
            TextImporter().read(b"")


class TestDocxImporter:

    def test_headings_lists_and_bold(self):
        def build(doc):
            doc.add_heading("Service Basics", level=1)
            doc.add_heading("Greeting", level=2)
            para = doc.add_paragraph("Always ")
            para.add_run("smile").bold = True
            doc.add_paragraph("Listen first", style="List Bullet")
            doc.add_paragraph("Confirm the request", style="List Number")

        result = import_file("course.docx", _docx_bytes(build))
        text = result.raw_content
        assert "# Service Basics" in text
        assert "## Greeting" in text
        assert "Always **smile**" in text
        assert "- Listen first" in text
        assert "1. Confirm the request" in text
        assert result.source_format == "docx"

    def test_table_becomes_pipe_table(self):
        def build(doc):
            table = doc.add_table(rows=2, cols=2)
            table.cell(0, 0).text = "Step"
            table.cell(0, 1).text = "Phrase"
            table.cell(1, 0).text = "1"
            table.cell(1, 1).text = "Hello"

        text = import_file("table.docx", _docx_bytes(build)).raw_content
        assert "| Step | Phrase |" in text
        assert "| --- | --- |" in text
        assert "| 1 | Hello |" in text

    def test_images_are_extracted(self):
        def build(doc):
            doc.add_paragraph("Before image")
            doc.add_picture(io.BytesIO(PNG_BYTES))

        result = DocxImporter().read(_docx_bytes(build), "pictures.docx")
        assert len(result.images) == 1
        image_id, data_uri = next(iter(result.images.items()))
        assert data_uri.startswith("data:image/png;base64,")
        assert f"[Image imported: {image_id}]" in result.raw_content
        assert re.fullmatch(r"img_\d+_[0-9a-z]{7}", image_id)

    def test_corrupt_docx(self):
        with pytest.raises(UnsupportedFileFormatError):
            import_file("broken.docx", b"not a zip file")


class TestImportFile:

    @pytest.mark.parametrize("filename", ["old.doc", "shortcut.gdoc"])
    def test_legacy_word_formats_rejected(self, filename):
        with pytest.raises(UnsupportedFileFormatError) as exc_info:
            import_file(filename, b"data")
        assert ".docx" in exc_info.value.user_message

    def test_unknown_extension_rejected(self):
        with pytest.raises(UnsupportedFileFormatError):
            import_file("slides.pptx", b"data")

    def test_extension_is_case_insensitive(self):
        assert import_file("NOTES.TXT", b"hi").raw_content == "hi"

    def test_oversize_rejected(self, monkeypatch):
        from config.settings import settings
        monkeypatch.setattr(settings, "max_upload_size_mb", 0)
        with pytest.raises(UnsupportedFileFormatError):
            import_file("notes.txt", b"too big")
