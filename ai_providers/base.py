"""
Base AI Provider - Abstract Interface
Courseware Studio - Structuring Collaborator
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple

from core.formatting.content_model import Document


API_KEY_PREFIX = "AIza"
API_KEY_MIN_LENGTH = 20


@dataclass
class AIConfig:
    """Provider configuration"""
    api_key: str
    model: str
    max_tokens: int = 8192
    temperature: float = 0.4


class BaseStructuringProvider(ABC):
    """
    Abstract base class for structuring collaborators.

    Two steps:
    1. suggest   - annotate raw text with suggestion tags
    2. structure - turn (annotated) text into content blocks
    """

    def __init__(self, config: AIConfig):
        self.config = config
        self._client = None

    @property
    @abstractmethod
    def provider_name(self) -> str:
        pass

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the client connection"""
        pass

    @abstractmethod
    async def suggest(self, raw_text: str) -> str:
        """
        Insert suggestion tags into raw text without changing the text.

        Args:
            raw_text: Markdown-style source text

        Returns:
            Annotated text
        """
        pass

    @abstractmethod
    async def structure(self, text: str) -> Document:
        """
        Convert text into content blocks.

        Args:
            text: Annotated or raw source text

        Returns:
            Document (never contains legacy TOC blocks)

        Raises:
            CollaboratorError: If the request fails
            StructuringParseError: If the response is not a block list
        """
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} model={self.config.model}>"


def validate_api_key(api_key: Optional[str]) -> Tuple[bool, str]:
    """
    Check the format of a Gemini API key.

    Returns:
        (valid, message)
    """
    key = (api_key or "").strip()
    if not key:
        return False, "API key must not be empty"
    if len(key) < API_KEY_MIN_LENGTH:
        return False, "API key is too short"
    if not key.startswith(API_KEY_PREFIX):
        return False, f"API key format looks wrong (should start with {API_KEY_PREFIX})"
    return True, "API key format is valid"


def mask_api_key(api_key: Optional[str]) -> str:
    """Masked key for display, e.g. ``AIza****...****xyz``."""
    if not api_key or len(api_key) < 10:
        return "****"
    return f"{api_key[:4]}****...****{api_key[-3:]}"
