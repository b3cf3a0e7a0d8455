#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Courseware Errors

Error taxonomy shared by the editor, collaborator adapters, persistence
and the HTTP layer. Every error carries a user-facing message; none of them
is fatal to a running session.

Version: 1.0.0
"""

from enum import Enum
from typing import Any, Optional


class CoursewareError(Exception):
    """Base error for all courseware operations"""

    def __init__(self, user_message: str, detail: Optional[str] = None):
        self.user_message = user_message
        self.detail = detail
        super().__init__(user_message)


# =============================================================================
# INPUT / FORMAT ERRORS
# =============================================================================

class InputFormatError(CoursewareError):
    """Bad user input. Reported immediately, nothing mutated, never retried."""
    pass


class UnsupportedFileFormatError(InputFormatError):
    """Import of a file type the importer cannot read"""
    pass


class InvalidApiKeyError(InputFormatError):
    """Missing or malformed AI collaborator key"""
    pass


class InvalidBlockOperationError(InputFormatError):
    """Editor operation called with an invalid argument value"""
    pass


class EmptyContentError(InputFormatError):
    """Operation needs content that the project does not have yet"""
    pass


# =============================================================================
# COLLABORATOR ERRORS
# =============================================================================

class FailureCategory(Enum):
    """Classification of AI collaborator failures"""
    API_KEY = "api_key"
    QUOTA = "quota"
    TIMEOUT = "timeout"
    SERVER = "server"
    CONTENT_TOO_LONG = "content_too_long"
    NETWORK = "network"
    UNKNOWN = "unknown"


FAILURE_MESSAGES = {
    FailureCategory.API_KEY: (
        "API key error: the key is invalid, missing or expired.",
        "Check GEMINI_API_KEY (keys start with 'AIza') or generate a new key at https://ai.google.dev.",
    ),
    FailureCategory.QUOTA: (
        "API quota exhausted: free quota reached or too many requests.",
        "Wait a minute and try again, or check your quota in Google AI Studio.",
    ),
    FailureCategory.TIMEOUT: (
        "Request timed out: unstable connection or the content took too long to process.",
        "Check your connection and try again; split very long content into parts.",
    ),
    FailureCategory.SERVER: (
        "The AI service is temporarily unavailable.",
        "Try again in a few minutes.",
    ),
    FailureCategory.CONTENT_TOO_LONG: (
        "The content exceeds the model's input limit.",
        "Split the content into smaller parts and process them one at a time.",
    ),
    FailureCategory.NETWORK: (
        "Network connection problem.",
        "Check your network connection and try again.",
    ),
    FailureCategory.UNKNOWN: (
        "The AI request failed.",
        "Confirm the API key is set correctly and try again later.",
    ),
}


class CollaboratorError(CoursewareError):
    """AI collaborator request failed. Not retried automatically."""

    def __init__(self, category: FailureCategory, detail: Optional[str] = None):
        self.category = category
        message, hint = FAILURE_MESSAGES[category]
        self.hint = hint
        super().__init__(f"{message}\n\n{hint}", detail=detail)


def _error_status(error: BaseException) -> Optional[int]:
    """Pull an HTTP-ish status code out of a client library exception."""
    for attr in ("status", "status_code", "code"):
        value = getattr(error, attr, None)
        if isinstance(value, int):
            return value
    response = getattr(error, "response", None)
    if response is not None:
        for attr in ("status", "status_code"):
            value = getattr(response, attr, None)
            if isinstance(value, int):
                return value
    return None


def classify_collaborator_error(error: BaseException) -> CollaboratorError:
    """
    Map an arbitrary client exception onto a CollaboratorError.

    Checks run in a fixed order: key, quota, timeout, server, content length,
    network, then unknown.

    Args:
        error: Exception raised by the AI client library

    Returns:
        CollaboratorError with the matching FailureCategory
    """
    if isinstance(error, CollaboratorError):
        return error

    message = str(error)
    lowered = message.lower()
    status = _error_status(error)
    code = getattr(error, "errno", None) or getattr(error, "code", None)

    if "api key" in lowered or "api_key" in lowered or status in (401, 403):
        category = FailureCategory.API_KEY
    elif "quota" in lowered or ("limit" in lowered and "token limit" not in lowered) or status == 429:
        category = FailureCategory.QUOTA
    elif isinstance(error, TimeoutError) or "timeout" in lowered or "timed out" in lowered or code == "ETIMEDOUT":
        category = FailureCategory.TIMEOUT
    elif status in (500, 503):
        category = FailureCategory.SERVER
    elif "too long" in lowered or "token limit" in lowered:
        category = FailureCategory.CONTENT_TOO_LONG
    elif isinstance(error, ConnectionError) or "network" in lowered or "fetch" in lowered or code == "ENOTFOUND":
        category = FailureCategory.NETWORK
    else:
        category = FailureCategory.UNKNOWN

    return CollaboratorError(category, detail=message)


# =============================================================================
# SERIALIZATION / PERSISTENCE / SESSION ERRORS
# =============================================================================

class StructuringParseError(CoursewareError):
    """Collaborator output could not be parsed into content blocks"""

    def __init__(self, detail: Optional[str] = None):
        super().__init__(
            "Content formatting failed: the AI produced output in an unexpected format.\n\n"
            "Try again (results vary between runs), check the content for unusual "
            "characters such as quotes inside tables, or simplify and split the content.",
            detail=detail,
        )


class StorageQuotaExceededError(CoursewareError):
    """Project store is full"""

    def __init__(self, storage_info: Any):
        self.storage_info = storage_info
        super().__init__(
            "Storage is full.\n\n"
            f"Currently used: {storage_info.used_mb:.2f}MB / {storage_info.total_mb}MB "
            f"({storage_info.percentage:.1f}%)\n\n"
            "Suggestions:\n"
            "1. Delete old projects you no longer need\n"
            "2. Reduce the number of images in the document\n"
            "3. Export the project as a backup, then delete it"
        )


class ProjectNotFoundError(CoursewareError):
    """No project stored under the requested id"""

    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__(f"Project not found: {project_id}")


class OperationInProgressError(CoursewareError):
    """A long-running operation is already in flight for this session"""
    pass
