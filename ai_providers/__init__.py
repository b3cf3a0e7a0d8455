"""
AI Providers Package
Courseware Studio - Structuring Collaborator

Usage:
    from ai_providers import GeminiProvider

    provider = GeminiProvider.from_settings()
    annotated = await provider.suggest(raw_text)
    blocks = await provider.structure(annotated)
"""

from .base import (
    AIConfig,
    BaseStructuringProvider,
    mask_api_key,
    validate_api_key,
)

from .gemini_provider import (
    GeminiProvider,
    parse_structured_output,
    strip_code_fences,
)

__all__ = [
    # Base classes
    "AIConfig",
    "BaseStructuringProvider",
    "mask_api_key",
    "validate_api_key",

    # Providers
    "GeminiProvider",
    "parse_structured_output",
    "strip_code_fences",
]

__version__ = "1.0.0"
