#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Settings - Centralized configuration management
"""

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings

from core.errors import InvalidApiKeyError

from .constants import (
    A4_PAGE_HEIGHT_PX,
    AUTOSAVE_DELAY_MS,
    MAX_FILE_SIZE_MB,
    PRINT_SETTLE_DELAY_MS,
    STORAGE_QUOTA_MB,
    STORAGE_WARNING_MB,
    WORD_IMAGE_WIDTH_PX,
)


# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings"""

    # ========== AI Collaborator ==========
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    ai_temperature: float = 0.4
    ai_max_output_tokens: int = 8192

    # ========== Pagination ==========
    # Pixel height of one printed page in the rendering surface that measures
    # the preview. 1123 matches A4 at 96 dpi; other zoom levels or pixel
    # densities need their own value.
    page_height_px: float = A4_PAGE_HEIGHT_PX

    # ========== Export ==========
    print_settle_delay_ms: int = PRINT_SETTLE_DELAY_MS
    word_image_width_px: int = WORD_IMAGE_WIDTH_PX

    # ========== Persistence ==========
    autosave_delay_ms: int = AUTOSAVE_DELAY_MS
    storage_quota_mb: float = STORAGE_QUOTA_MB
    storage_warning_mb: float = STORAGE_WARNING_MB

    # ========== File Upload ==========
    max_upload_size_mb: int = MAX_FILE_SIZE_MB

    # ========== Directories ==========
    data_dir: Path = BASE_DIR / "data"
    output_dir: Path = BASE_DIR / "data" / "output"
    database_path: Optional[Path] = None

    class Config:
        env_file = str(BASE_DIR / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # Allow extra fields from .env that aren't defined in model

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if self.database_path is None:
            self.database_path = self.data_dir / "projects.db"
        for dir_path in [self.data_dir, self.output_dir]:
            dir_path.mkdir(exist_ok=True, parents=True)

    def get_api_key(self) -> str:
        """Get the AI collaborator API key"""
        if not self.gemini_api_key:
            raise InvalidApiKeyError("GEMINI_API_KEY not set in .env")
        return self.gemini_api_key

    def print_config(self):
        """Print configuration summary"""
        print("\n" + "=" * 70)
        print("CONFIGURATION")
        print("=" * 70)
        print(f"Model:             {self.gemini_model}")
        print(f"Page height (px):  {self.page_height_px}")
        print(f"Print delay (ms):  {self.print_settle_delay_ms}")
        print(f"Autosave (ms):     {self.autosave_delay_ms}")
        print(f"Storage quota MB:  {self.storage_quota_mb}")
        print(f"Database:          {self.database_path}")
        print("=" * 70 + "\n")


# Global settings instance
settings = Settings()
