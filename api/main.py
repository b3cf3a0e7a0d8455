#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
FastAPI Web Server - REST API for Courseware Studio.

This module provides the REST API for the courseware editor:
- Project management (create, read, update, delete)
- Source import (.txt, .docx)
- AI suggestion and structuring
- Block editing, images and styles
- Page numbers, table of contents and word count
- Preview, print view and Word export

Usage:
    # Start server
    uvicorn api.main:app --host 0.0.0.0 --port 8000

    # Or run directly
    python -m api.main

API Documentation:
    - OpenAPI docs: http://localhost:8000/docs
    - ReDoc: http://localhost:8000/redoc

Configuration:
    Environment variables:
    - GEMINI_API_KEY: Gemini API key
    - DATABASE_PATH: Project store location
    - STORAGE_QUOTA_MB: Project store quota (default: 5)
"""

import sys
import time
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.logging_config import get_logger
from core.errors import (
    CollaboratorError,
    CoursewareError,
    InputFormatError,
    OperationInProgressError,
    ProjectNotFoundError,
    StorageQuotaExceededError,
    StructuringParseError,
)
from api.project_routes import router as project_router

logger = get_logger(__name__)

API_VERSION = "1.0.0"


# =============================================================================
# Application
# =============================================================================

app = FastAPI(
    title="Courseware Studio API",
    description="REST API for structuring, editing and exporting courseware documents",
    version=API_VERSION,
)

# CORS middleware - Restricted to allowed origins
ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",  # Vite dev server
    "http://127.0.0.1:5173",
    "http://localhost:8000",
    "http://127.0.0.1:8000",
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

app.include_router(project_router)


# =============================================================================
# Error Handling
# =============================================================================

# Checked in order; first match wins
ERROR_STATUS_CODES = [
    (InputFormatError, 400),
    (ProjectNotFoundError, 404),
    (OperationInProgressError, 409),
    (StorageQuotaExceededError, 413),
    (StructuringParseError, 422),
    (CollaboratorError, 502),
]


def status_code_for(exc: CoursewareError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return 500


@app.exception_handler(CoursewareError)
async def courseware_error_handler(request: Request, exc: CoursewareError):
    """Report courseware errors with their user-facing message"""
    status_code = status_code_for(exc)
    content = {"detail": exc.user_message, "error": type(exc).__name__}
    if isinstance(exc, CollaboratorError):
        content["category"] = exc.category.value
        content["hint"] = exc.hint
    if isinstance(exc, StorageQuotaExceededError):
        content["storage"] = exc.storage_info.to_dict()

    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.user_message} ({exc.detail})")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {type(exc).__name__}")
    return JSONResponse(status_code=status_code, content=content)


# =============================================================================
# Health Check
# =============================================================================

@app.get("/health")
async def health_check():
    """Basic health check endpoint"""
    return {
        "status": "healthy",
        "version": API_VERSION,
        "timestamp": time.time()
    }


if __name__ == "__main__":
    import uvicorn

    logger.info("Starting Courseware Studio API Server...")
    logger.info("API Documentation: http://localhost:8000/docs")

    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
