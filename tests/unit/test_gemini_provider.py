"""
Unit tests for ai_providers (Gemini adapter, key validation, prompts)
"""
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from ai_providers.base import AIConfig, mask_api_key, validate_api_key
from ai_providers.gemini_provider import GeminiProvider, parse_structured_output, strip_code_fences
from ai_providers.prompts import TAG_KEY_POINT, build_structuring_prompt, build_suggestion_prompt
from core.errors import (
    CollaboratorError,
    FailureCategory,
    InvalidApiKeyError,
    StructuringParseError,
)
from core.formatting.content_model import BlockKind, ChapterTitle, ImageSuggestion, Paragraph

VALID_KEY = "AIza" + "x" * 35


class TestApiKey:

    @pytest.mark.parametrize("key,valid", [
        ("", False),
        (None, False),
        ("AIzaShort", False),
        ("sk-" + "x" * 40, False),
        (VALID_KEY, True),
    ])
    def test_validate(self, key, valid):
        assert validate_api_key(key)[0] is valid

    def test_mask(self):
        assert mask_api_key(VALID_KEY) == "AIza****...****xxx"
        assert mask_api_key("short") == "****"


class TestPrompts:

    def test_suggestion_prompt_embeds_content(self):
        prompt = build_suggestion_prompt("Raw course text")
        assert "Raw course text" in prompt
        assert TAG_KEY_POINT in prompt

    def test_structuring_prompt_embeds_content(self):
        assert "Tagged text" in build_structuring_prompt("Tagged text")

    def test_braces_in_content_are_safe(self):
        assert "{not a field}" in build_suggestion_prompt("{not a field}")


class TestParseStructuredOutput:

    def test_plain_json_array(self):
        raw = json.dumps([{"type": "chapter_title", "content": "Intro"}, {"type": "paragraph", "content": "Hi"}])
        assert parse_structured_output(raw) == (ChapterTitle(content="Intro"), Paragraph(content="Hi"))

    def test_code_fence_is_stripped(self):
        raw = '```json\n[{"type": "paragraph", "content": "Hi"}]\n```'
        assert strip_code_fences(raw) == '[{"type": "paragraph", "content": "Hi"}]'
        assert parse_structured_output(raw) == (Paragraph(content="Hi"),)

    def test_toc_items_are_dropped(self):
        raw = json.dumps([{"type": "toc", "items": []}, {"type": "paragraph", "content": "Hi"}])
        assert parse_structured_output(raw) == (Paragraph(content="Hi"),)

    def test_image_ids_made_unique(self):
        raw = json.dumps([
            {"type": "image_suggestion", "id": "dup"},
            {"type": "image_suggestion", "id": "dup"},
            {"type": "image_suggestion"},
        ])
        blocks = parse_structured_output(raw)
        ids = [b.id for b in blocks]
        assert ids[0] == "dup"
        assert len(set(ids)) == 3
        assert all(isinstance(b, ImageSuggestion) for b in blocks)

    def test_unrecognized_image_width_is_dropped(self):
        raw = json.dumps([{"type": "image_suggestion", "id": "a", "width": "half"}])
        assert parse_structured_output(raw) == (ImageSuggestion(id="a"),)

    @pytest.mark.parametrize("raw", ["not json", '{"type": "paragraph"}', "[1, 2]", '[{"content": "no type"}]'])
    def test_malformed_output_raises(self, raw):
        with pytest.raises(StructuringParseError) as exc_info:
            parse_structured_output(raw)
        assert raw not in exc_info.value.user_message


class TestGeminiProvider:

    @pytest.fixture
    def provider(self):
        return GeminiProvider(AIConfig(api_key=VALID_KEY, model="gemini-2.5-flash"))

    @pytest.mark.asyncio
    async def test_invalid_key_rejected_before_request(self):
        provider = GeminiProvider(AIConfig(api_key="bad", model="gemini-2.5-flash"))
        with pytest.raises(InvalidApiKeyError):
            await provider.initialize()

    @pytest.mark.asyncio
    async def test_initialize_configures_client(self, provider):
        with patch("ai_providers.gemini_provider.genai") as genai:
            await provider.initialize()
        genai.configure.assert_called_once_with(api_key=VALID_KEY)
        assert genai.GenerativeModel.call_args.kwargs["model_name"] == "gemini-2.5-flash"

    @pytest.mark.asyncio
    async def test_initialize_logs_masked_key(self, provider, caplog):
        with patch("ai_providers.gemini_provider.genai"), caplog.at_level("INFO", logger="ai_providers.gemini_provider"):
            await provider.initialize()
        assert mask_api_key(VALID_KEY) in caplog.text
        assert VALID_KEY not in caplog.text

    @pytest.mark.asyncio
    async def test_suggest(self, provider):
        provider._client = MagicMock()
        provider._client.generate_content_async = AsyncMock(
            return_value=SimpleNamespace(text="  [Suggest:Key Point] Smile.  ")
        )
        assert await provider.suggest("Smile.") == "[Suggest:Key Point] Smile."

    @pytest.mark.asyncio
    async def test_structure_requests_json(self, provider):
        provider._client = MagicMock()
        provider._client.generate_content_async = AsyncMock(
            return_value=SimpleNamespace(text='[{"type": "key_point", "content": "Smile"}]')
        )
        blocks = await provider.structure("text")
        assert blocks[0].kind is BlockKind.KEY_POINT
        config = provider._client.generate_content_async.call_args.kwargs["generation_config"]
        assert config["response_mime_type"] == "application/json"

    @pytest.mark.asyncio
    async def test_client_errors_are_classified(self, provider):
        provider._client = MagicMock()
        provider._client.generate_content_async = AsyncMock(side_effect=RuntimeError("429 Resource has been exhausted (quota)"))
        with pytest.raises(CollaboratorError) as exc_info:
            await provider.suggest("x")
        assert exc_info.value.category is FailureCategory.QUOTA
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_from_settings_requires_key(self, monkeypatch):
        from config.settings import settings
        monkeypatch.setattr(settings, "gemini_api_key", "")
        with pytest.raises(InvalidApiKeyError):
            GeminiProvider.from_settings()
