"""
Unit tests for core/errors.py
"""
from types import SimpleNamespace

import pytest

from core.errors import (
    CollaboratorError,
    CoursewareError,
    EmptyContentError,
    FailureCategory,
    InputFormatError,
    InvalidApiKeyError,
    InvalidBlockOperationError,
    StorageQuotaExceededError,
    UnsupportedFileFormatError,
    classify_collaborator_error,
)


class StatusError(Exception):
    def __init__(self, message, status_code):
        super().__init__(message)
        self.status_code = status_code


class TestTaxonomy:

    @pytest.mark.parametrize("error_type", [
        UnsupportedFileFormatError, InvalidApiKeyError, InvalidBlockOperationError, EmptyContentError,
    ])
    def test_input_errors(self, error_type):
        error = error_type("bad input")
        assert isinstance(error, InputFormatError)
        assert isinstance(error, CoursewareError)
        assert error.user_message == "bad input"

    def test_collaborator_error_has_hint(self):
        error = CollaboratorError(FailureCategory.TIMEOUT, detail="read timeout")
        assert error.hint in error.user_message
        assert error.detail == "read timeout"

    def test_quota_message_includes_usage(self):
        info = SimpleNamespace(used_mb=4.987, total_mb=5, percentage=99.74)
        message = StorageQuotaExceededError(info).user_message
        assert "4.99MB / 5MB" in message
        assert "99.7%" in message


class TestClassifyCollaboratorError:

    @pytest.mark.parametrize("error,category", [
        (Exception("API key not valid. Please pass a valid API key."), FailureCategory.API_KEY),
        (StatusError("forbidden", 403), FailureCategory.API_KEY),
        (Exception("Quota exceeded for requests"), FailureCategory.QUOTA),
        (StatusError("too many requests", 429), FailureCategory.QUOTA),
        (TimeoutError(), FailureCategory.TIMEOUT),
        (Exception("Deadline: request timed out"), FailureCategory.TIMEOUT),
        (StatusError("internal", 500), FailureCategory.SERVER),
        (StatusError("unavailable", 503), FailureCategory.SERVER),
        (Exception("Input is too long for the model"), FailureCategory.CONTENT_TOO_LONG),
        (Exception("exceeds token limit"), FailureCategory.CONTENT_TOO_LONG),
        (ConnectionError("connection reset"), FailureCategory.NETWORK),
        (Exception("Failed to fetch"), FailureCategory.NETWORK),
        (Exception("something odd"), FailureCategory.UNKNOWN),
    ])
    def test_categories(self, error, category):
        result = classify_collaborator_error(error)
        assert result.category is category
        assert result.detail == str(error)

    def test_key_checked_before_quota(self):
        error = Exception("API key quota exceeded")
        assert classify_collaborator_error(error).category is FailureCategory.API_KEY

    def test_already_classified_passes_through(self):
        error = CollaboratorError(FailureCategory.NETWORK)
        assert classify_collaborator_error(error) is error
