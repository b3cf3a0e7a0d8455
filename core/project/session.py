#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Editor Session - One user's editing session over one project.

Holds the current ProjectRecord, applies editor operations to it, runs
the AI collaborator and file import with a three-state progress contract,
and hands every new record to the debounced saver.

A failed operation leaves the record untouched. Long-running operations
refuse to start while another one is in flight, and pagination refuses to
run during one, since block positions would change under it.
"""

import asyncio
import logging
from enum import Enum
from typing import Callable, List, Optional, Union

from core.errors import (
    CoursewareError,
    EmptyContentError,
    InvalidApiKeyError,
    OperationInProgressError,
)
from core.formatting import block_editor
from core.formatting.block_editor import FontStepDirection, TextField
from core.formatting.content_model import BlockKind, ImageWidth
from core.formatting.exporters import WordExport, export_word_document, render_print_view
from core.formatting.pagination import LayoutMeasurer, PaginationEngine, PaginationOutcome
from core.formatting.preview_renderer import render_preview
from core.formatting.style_config import StyleConfig
from core.formatting.text_stats import WordCountReport, verify_word_count
from core.formatting.toc_generator import TocEntry, build_toc

from .autosave import DebouncedSaver
from .importer import ImportResult, import_file
from .project_record import ProjectRecord

logger = logging.getLogger(__name__)


class ProcessStatus(Enum):
    IDLE = "idle"
    PROCESSING = "processing"
    SUCCESS = "success"
    ERROR = "error"


class EditorSession:
    """
    Usage:
        session = EditorSession(project, provider=GeminiProvider.from_settings(),
                                saver=DebouncedSaver(repository.save))
        await session.analyze()
        await session.generate()
        session.change_type(3, "key_point")
        outcome = session.calculate_page_numbers(measurer)
    """

    def __init__(
        self,
        project: ProjectRecord,
        provider=None,
        saver: Optional[DebouncedSaver] = None,
        importer: Callable[[str, bytes], ImportResult] = import_file,
        pagination: Optional[PaginationEngine] = None,
    ):
        self._project = project
        self.provider = provider
        self.saver = saver
        self.importer = importer
        self.pagination = pagination or PaginationEngine()

        self.analyze_status = ProcessStatus.IDLE
        self.generate_status = ProcessStatus.IDLE
        self.file_status = ProcessStatus.IDLE
        self.error_message = ""
        self.status_message = ""

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def project(self) -> ProjectRecord:
        return self._project

    @property
    def busy(self) -> bool:
        return ProcessStatus.PROCESSING in (self.analyze_status, self.generate_status, self.file_status)

    def _ensure_idle(self, operation: str):
        if self.busy:
            raise OperationInProgressError(
                f"Cannot {operation} while another operation is still running. Wait for it to finish."
            )

    def _commit(self, project: ProjectRecord) -> ProjectRecord:
        if project == self._project:
            return project
        self._project = project
        if self.saver is not None:
            self.saver.schedule(project)
        return project

    def _commit_blocks(self, blocks) -> ProjectRecord:
        return self._commit(self._project.with_updates(blocks=blocks))

    def _commit_images(self, images) -> ProjectRecord:
        return self._commit(self._project.with_updates(images=images))

    # -------------------------------------------------------------------------
    # Project fields
    # -------------------------------------------------------------------------

    def rename(self, name: str) -> ProjectRecord:
        return self._commit(self._project.with_updates(name=name))

    def set_raw_content(self, text: str) -> ProjectRecord:
        return self._commit(self._project.with_updates(raw_content=text))

    def set_suggested_content(self, text: str) -> ProjectRecord:
        return self._commit(self._project.with_updates(suggested_content=text))

    def update_styles(self, **changes) -> ProjectRecord:
        return self._commit(self._project.with_updates(styles=self._project.styles.with_updates(**changes)))

    def replace_styles(self, styles: StyleConfig) -> ProjectRecord:
        return self._commit(self._project.with_updates(styles=styles))

    # -------------------------------------------------------------------------
    # Block operations
    # -------------------------------------------------------------------------

    def update_text(self, index: int, new_text: str, field: Union[TextField, str] = TextField.CONTENT):
        return self._commit_blocks(block_editor.update_text(self._project.blocks, index, new_text, field))

    def change_type(self, index: int, new_kind: Union[BlockKind, str]):
        return self._commit_blocks(block_editor.change_type(self._project.blocks, index, new_kind))

    def step_font_size(self, index: int, direction: Union[FontStepDirection, str]):
        blocks = block_editor.step_font_size(self._project.blocks, index, direction, self._project.styles)
        return self._commit_blocks(blocks)

    def insert_page_break(self, index: int):
        return self._commit_blocks(block_editor.insert_page_break(self._project.blocks, index))

    def insert_image_slot(self, after_index: int, image_id: Optional[str] = None):
        return self._commit_blocks(block_editor.insert_image_slot(self._project.blocks, after_index, image_id))

    def set_image_width(self, image_id: str, width: Union[ImageWidth, str]):
        return self._commit_blocks(block_editor.set_image_width(self._project.blocks, image_id, width))

    def upload_image(self, image_id: str, payload: Union[str, bytes], mime_type: str = "image/png"):
        return self._commit_images(block_editor.upload_image(self._project.images, image_id, payload, mime_type))

    def delete_image(self, image_id: str):
        return self._commit_images(block_editor.delete_image(self._project.images, image_id))

    # -------------------------------------------------------------------------
    # AI collaborator
    # -------------------------------------------------------------------------

    def _require_provider(self):
        if self.provider is None:
            raise InvalidApiKeyError("No AI collaborator configured. Set GEMINI_API_KEY first.")
        return self.provider

    async def analyze(self) -> ProjectRecord:
        """Step 1: ask the collaborator for suggestion tags on the raw text."""
        self._ensure_idle("analyze")
        if not self._project.raw_content:
            raise EmptyContentError("There is no source text to analyze yet.")
        provider = self._require_provider()

        self.analyze_status = ProcessStatus.PROCESSING
        self.error_message = ""
        try:
            suggested = await provider.suggest(self._project.raw_content)
        except CoursewareError as e:
            self.analyze_status = ProcessStatus.ERROR
            self.error_message = e.user_message
            raise
        except Exception as e:
            logger.error(f"Analyze failed for {self._project.id}: {e}", exc_info=True)
            self.analyze_status = ProcessStatus.ERROR
            self.error_message = f"Analysis failed: {e}"
            raise

        self.analyze_status = ProcessStatus.SUCCESS
        return self._commit(self._project.with_updates(suggested_content=suggested))

    async def generate(self) -> ProjectRecord:
        """Step 2: structure the suggested (or raw) text into blocks."""
        self._ensure_idle("generate")
        text = self._project.suggested_content or self._project.raw_content
        if not text:
            raise EmptyContentError("There is no content to format yet.")
        provider = self._require_provider()

        self.generate_status = ProcessStatus.PROCESSING
        self.error_message = ""
        try:
            blocks = await provider.structure(text)
        except CoursewareError as e:
            self.generate_status = ProcessStatus.ERROR
            self.error_message = e.user_message
            raise
        except Exception as e:
            logger.error(f"Generate failed for {self._project.id}: {e}", exc_info=True)
            self.generate_status = ProcessStatus.ERROR
            self.error_message = f"Formatting failed: {e}"
            raise

        self.generate_status = ProcessStatus.SUCCESS
        report = verify_word_count(self._project.raw_content, blocks)
        if report.possible_loss:
            self.status_message = (
                f"Generated content has {report.generated_count} of {report.raw_count} source words; "
                f"some content may be missing."
            )
        return self._commit_blocks(blocks)

    # -------------------------------------------------------------------------
    # Import
    # -------------------------------------------------------------------------

    async def import_file(self, filename: str, data: bytes) -> ProjectRecord:
        """
        Replace the source text with an imported file.

        Suggested text and blocks are cleared; imported images are added to
        the image store.
        """
        self._ensure_idle("import a file")
        self.file_status = ProcessStatus.PROCESSING
        self.status_message = f"Reading {filename}..."
        self.error_message = ""
        try:
            result = await asyncio.to_thread(self.importer, filename, data)
        except CoursewareError as e:
            self.file_status = ProcessStatus.ERROR
            self.error_message = e.user_message
            self.status_message = ""
            raise
        except Exception as e:
            logger.error(f"Import of {filename} failed: {e}", exc_info=True)
            self.file_status = ProcessStatus.ERROR
            self.error_message = f"Could not read {filename}: {e}"
            self.status_message = ""
            raise

        images = dict(self._project.images)
        images.update(result.images)
        self.file_status = ProcessStatus.SUCCESS
        self.status_message = "File imported successfully!"
        logger.info(f"Imported {filename} into {self._project.id} ({len(result.images)} images)")
        return self._commit(self._project.with_updates(
            raw_content=result.raw_content,
            suggested_content="",
            blocks=(),
            images=images,
        ))

    # -------------------------------------------------------------------------
    # Pagination / reports / export
    # -------------------------------------------------------------------------

    def calculate_page_numbers(self, measurer: LayoutMeasurer) -> PaginationOutcome:
        """Measure headings and store their page numbers."""
        self._ensure_idle("calculate page numbers")
        outcome = self.pagination.paginate(self._project.blocks, measurer)
        if outcome.updated_count:
            self._commit_blocks(outcome.blocks)
            self.status_message = f"Updated page numbers for {outcome.updated_count} headings."
        else:
            self.status_message = "No headings could be found; make sure the preview has content."
        return outcome

    def toc(self) -> List[TocEntry]:
        return build_toc(self._project.blocks)

    def word_count_report(self) -> WordCountReport:
        return verify_word_count(self._project.raw_content, self._project.blocks)

    def render_preview(self) -> str:
        return render_preview(self._project.blocks, self._project.styles, self._project.images)

    def render_print_view(self, auto_print: bool = True) -> str:
        return render_print_view(self._project.blocks, self._project.styles, self._project.images, auto_print)

    def export_word(self) -> WordExport:
        return export_word_document(self._project)
