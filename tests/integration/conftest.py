#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Pytest fixtures for integration tests.

Provides:
- client: TestClient with the repository and AI collaborator replaced
- api_repository: Project repository on a temporary database
"""

import pytest
from fastapi.testclient import TestClient
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from api.main import app
from api.project_routes import get_provider, get_repository, reset_provider, reset_repository


@pytest.fixture
def api_repository(repository):
    return repository


@pytest.fixture
def client(api_repository, mock_provider):
    """Test client with dependencies that don't touch real storage or APIs."""
    app.dependency_overrides[get_repository] = lambda: api_repository
    app.dependency_overrides[get_provider] = lambda: mock_provider
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    reset_repository()
    reset_provider()
