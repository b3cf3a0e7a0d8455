"""
Pytest configuration and shared fixtures for Courseware Studio tests.
"""
import sys
import pytest
import tempfile
import shutil
from pathlib import Path
from typing import Generator
from unittest.mock import AsyncMock

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.formatting.content_model import (
    ChapterTitle,
    CheckboxGroup,
    Definition,
    FormField,
    ImageSuggestion,
    KeyPoint,
    PageBreak,
    Paragraph,
    SectionTitle,
    StepsList,
    SubsectionTitle,
    Table,
    WarningBox,
)
from core.formatting.style_config import StyleConfig
from core.project.project_record import ProjectRecord
from core.project.project_repository import ProjectRepository

# 1x1 transparent PNG
PNG_DATA_URI = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)


# ============================================================================
# Fixtures: Directories & Storage
# ============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def repository(temp_dir: Path) -> ProjectRepository:
    """Project repository on a temporary database."""
    return ProjectRepository(temp_dir / "projects.db", quota_mb=5, warning_mb=3)


# ============================================================================
# Fixtures: Documents
# ============================================================================

@pytest.fixture
def styles() -> StyleConfig:
    return StyleConfig()


@pytest.fixture
def sample_blocks():
    """A small course chapter touching most block kinds."""
    return (
        ChapterTitle(content="Chapter 1: Service Basics"),
        Paragraph(content="Good service starts with attitude."),
        SectionTitle(content="1.1 Greeting customers"),
        KeyPoint(content="Smile before you speak."),
        WarningBox(content="Never argue with a customer."),
        Definition(term="Service", definition="Work done to meet a customer's need."),
        StepsList(steps=("Greet", "Listen", "Confirm")),
        SubsectionTitle(content="1.1.1 Phone greetings"),
        Table(headers=("Step", "Phrase"), rows=(("1", "Hello"), ("2", "How can I help?"))),
        FormField(label="Trainee name"),
        CheckboxGroup(label="Channels used", options=("Phone", "Email", "Chat")),
        ImageSuggestion(id="img_1", preceding_text="Front desk photo"),
        PageBreak(),
        SectionTitle(content="1.2 Closing"),
    )


@pytest.fixture
def sample_images():
    return {"img_1": PNG_DATA_URI}


@pytest.fixture
def sample_project(sample_blocks, sample_images) -> ProjectRecord:
    return ProjectRecord(
        id="proj_1700000000000_abc1234",
        name="Service Basics",
        raw_content="Good service starts with attitude. Smile before you speak.",
        blocks=sample_blocks,
        images=sample_images,
    )


# ============================================================================
# Fixtures: Mocks
# ============================================================================

@pytest.fixture
def mock_provider():
    """AI collaborator that doesn't call the real API."""
    provider = AsyncMock()
    provider.suggest.return_value = "[Suggest:Key Point] Smile before you speak."
    provider.structure.return_value = (
        ChapterTitle(content="Service Basics"),
        Paragraph(content="Good service starts with attitude."),
        KeyPoint(content="Smile before you speak."),
    )
    return provider
