"""
Google Gemini Provider
Courseware Studio - Structuring Collaborator
"""

import json
import logging
import re
from dataclasses import replace
from typing import Any, List, Optional

import google.generativeai as genai

from config.constants import RAW_OUTPUT_LOG_LIMIT
from config.settings import settings
from core.errors import InvalidApiKeyError, StructuringParseError, classify_collaborator_error
from core.formatting.block_editor import generate_image_id
from core.formatting.content_model import BlockKind, Document, block_from_dict

from .base import AIConfig, BaseStructuringProvider, mask_api_key, validate_api_key
from .prompts import build_structuring_prompt, build_suggestion_prompt

logger = logging.getLogger(__name__)

_FENCE_OPEN = re.compile(r"^\s*```(?:json)?\s*\n")
_FENCE_CLOSE = re.compile(r"\n?```\s*$")


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence, if present."""
    return _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", text))


def parse_structured_output(raw_text: str) -> Document:
    """
    Parse collaborator output into a document.

    Legacy ``toc`` items are dropped; the TOC is always derived from headings.

    Raises:
        StructuringParseError: If the output is not a JSON array of blocks
    """
    try:
        items = json.loads(strip_code_fences(raw_text or ""))
        if not isinstance(items, list):
            raise ValueError(f"expected a JSON array, got {type(items).__name__}")
        blocks = [
            block_from_dict(item)
            for item in items
            if not (isinstance(item, dict) and item.get("type") == BlockKind.TOC.value)
        ]
    except (ValueError, TypeError, AttributeError, KeyError) as e:
        logger.error(f"Unparseable structuring output: {e}")
        logger.error(f"Raw response: {(raw_text or '')[:RAW_OUTPUT_LOG_LIMIT]}")
        raise StructuringParseError(detail=str(e))

    # Image slots need unique ids to key into the image store
    seen = set()
    for index, block in enumerate(blocks):
        if block.kind is not BlockKind.IMAGE_SUGGESTION:
            continue
        if not block.id or block.id in seen:
            blocks[index] = replace(block, id=generate_image_id(seen))
        seen.add(blocks[index].id)

    return tuple(blocks)


class GeminiProvider(BaseStructuringProvider):
    """
    Google Gemini structuring collaborator

    Usage:
        provider = GeminiProvider.from_settings()
        annotated = await provider.suggest(raw_text)
        blocks = await provider.structure(annotated)
    """

    MODELS = {
        "gemini-2.5-flash": "Gemini 2.5 Flash",
        "gemini-2.5-pro": "Gemini 2.5 Pro",
        "gemini-2.0-flash": "Gemini 2.0 Flash",
    }

    DEFAULT_MODEL = "gemini-2.5-flash"

    @classmethod
    def from_settings(cls, api_key: Optional[str] = None) -> "GeminiProvider":
        return cls(AIConfig(
            api_key=api_key or settings.get_api_key(),
            model=settings.gemini_model or cls.DEFAULT_MODEL,
            max_tokens=settings.ai_max_output_tokens,
            temperature=settings.ai_temperature,
        ))

    @property
    def provider_name(self) -> str:
        return "gemini"

    @property
    def supported_models(self) -> List[str]:
        return list(self.MODELS.keys())

    async def initialize(self) -> None:
        """Initialize Gemini client"""
        valid, message = validate_api_key(self.config.api_key)
        if not valid:
            raise InvalidApiKeyError(message)

        genai.configure(api_key=self.config.api_key)
        self._client = genai.GenerativeModel(
            model_name=self.config.model,
            generation_config={
                "temperature": self.config.temperature,
                "max_output_tokens": self.config.max_tokens,
            }
        )
        logger.info(f"Gemini client ready: model={self.config.model} key={mask_api_key(self.config.api_key)}")

    async def _generate(self, prompt: str, **generation_config: Any) -> str:
        if not self._client:
            await self.initialize()

        try:
            response = await self._client.generate_content_async(
                prompt,
                generation_config={
                    "temperature": self.config.temperature,
                    "max_output_tokens": self.config.max_tokens,
                    **generation_config,
                }
            )
            return response.text
        except Exception as e:
            error = classify_collaborator_error(e)
            logger.error(f"Gemini request failed [{error.category.value}]: {e}")
            raise error from e

    async def suggest(self, raw_text: str) -> str:
        """Annotate raw text with suggestion tags"""
        text = await self._generate(build_suggestion_prompt(raw_text))
        logger.info(f"Suggestions received: {len(text)} chars")
        return text.strip()

    async def structure(self, text: str) -> Document:
        """Convert text into content blocks using JSON output mode"""
        raw = await self._generate(
            build_structuring_prompt(text),
            response_mime_type="application/json",
        )
        blocks = parse_structured_output(raw)
        logger.info(f"Structured content received: {len(blocks)} blocks")
        return blocks
