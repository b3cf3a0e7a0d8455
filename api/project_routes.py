"""
Project API Routes
Courseware Studio - Editing, pagination and export over HTTP

Every request loads the project, applies one operation through an
EditorSession and stores the result. Errors are mapped to HTTP responses
by the exception handler in api.main.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import HTMLResponse, Response
from pydantic import BaseModel, Field

from ai_providers import GeminiProvider
from core.errors import InputFormatError, InvalidBlockOperationError
from core.formatting.block_editor import FontStepDirection, TextField
from core.formatting.content_model import ImageWidth
from core.formatting.pagination import FlowEstimateMeasurer, PaginationEngine, RecordedMeasurer
from core.formatting.style_config import StyleConfig
from core.project import EditorSession, ProjectRecord, ProjectRepository

logger = logging.getLogger(__name__)


# =========================================
# Pydantic Models
# =========================================

class CreateProjectRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Project name")


class UpdateProjectRequest(BaseModel):
    """Partial update of the project's text fields"""
    name: Optional[str] = None
    raw_content: Optional[str] = None
    suggested_content: Optional[str] = None


class ProjectSummary(BaseModel):
    id: str
    name: str
    blocks: int
    images: int


class UpdateTextRequest(BaseModel):
    text: str
    field: TextField = TextField.CONTENT


class ChangeTypeRequest(BaseModel):
    type: str = Field(..., description="Target block kind, e.g. key_point")


class FontSizeRequest(BaseModel):
    direction: FontStepDirection


class InsertImageSlotRequest(BaseModel):
    after_index: int = Field(..., ge=-1)
    image_id: Optional[str] = None


class ImageWidthRequest(BaseModel):
    width: ImageWidth


class ImageDataRequest(BaseModel):
    data_uri: str = Field(..., description="data:image/...;base64,... payload")


class PaginationRequest(BaseModel):
    """Heading offsets measured by the client; null means not rendered"""
    offsets: Dict[int, Optional[float]]
    container_offset: float = 0.0
    page_height_px: Optional[float] = Field(None, gt=0)


class PaginationResponse(BaseModel):
    updated_count: int
    page_numbers: Dict[int, int]
    project: Dict[str, Any]


class TocEntryResponse(BaseModel):
    text: str
    level: int
    global_index: int
    page_number: Optional[int] = None
    anchor: str


# =========================================
# Dependencies
# =========================================

_repository: Optional[ProjectRepository] = None
_provider: Optional[GeminiProvider] = None


def get_repository() -> ProjectRepository:
    """Get or create the global project repository"""
    global _repository
    if _repository is None:
        _repository = ProjectRepository()
    return _repository


def reset_repository():
    """Reset the global repository (useful for testing)"""
    global _repository
    _repository = None


def get_provider() -> GeminiProvider:
    """Get or create the global AI collaborator"""
    global _provider
    if _provider is None:
        _provider = GeminiProvider.from_settings()
    return _provider


def reset_provider():
    global _provider
    _provider = None


def _open_session(repo: ProjectRepository, project_id: str, provider=None) -> EditorSession:
    return EditorSession(repo.load(project_id), provider=provider)


def _store(repo: ProjectRepository, session: EditorSession) -> Dict[str, Any]:
    repo.save(session.project)
    return session.project.to_dict()


# =========================================
# Router
# =========================================

router = APIRouter(prefix="/api/projects", tags=["Projects"])


@router.get("", response_model=List[ProjectSummary])
async def list_projects(repo: ProjectRepository = Depends(get_repository)):
    """List projects in creation order."""
    return [
        ProjectSummary(id=p.id, name=p.name, blocks=len(p.blocks), images=len(p.images))
        for p in repo.list_projects()
    ]


@router.post("", status_code=201)
async def create_project(request: CreateProjectRequest, repo: ProjectRepository = Depends(get_repository)):
    return repo.create_project(request.name).to_dict()


@router.get("/storage")
async def storage_info(repo: ProjectRepository = Depends(get_repository)):
    """Store usage, largest projects first."""
    return repo.storage_info().to_dict()


@router.get("/{project_id}")
async def get_project(project_id: str, repo: ProjectRepository = Depends(get_repository)):
    return repo.load(project_id).to_dict()


@router.put("/{project_id}")
async def replace_project(project_id: str, body: Dict[str, Any], repo: ProjectRepository = Depends(get_repository)):
    """Store a full project document (as produced by GET)."""
    repo.load(project_id)
    try:
        project = ProjectRecord.from_dict({**body, "id": project_id})
    except ValueError as e:
        raise InputFormatError(f"Invalid project document: {e}")
    repo.save(project)
    return project.to_dict()


@router.patch("/{project_id}")
async def update_project(
    project_id: str,
    request: UpdateProjectRequest,
    repo: ProjectRepository = Depends(get_repository),
):
    session = _open_session(repo, project_id)
    if request.name is not None:
        session.rename(request.name)
    if request.raw_content is not None:
        session.set_raw_content(request.raw_content)
    if request.suggested_content is not None:
        session.set_suggested_content(request.suggested_content)
    return _store(repo, session)


@router.delete("/{project_id}")
async def delete_project(project_id: str, repo: ProjectRepository = Depends(get_repository)):
    repo.load(project_id)
    repo.delete(project_id)
    return {"deleted": project_id}


@router.put("/{project_id}/styles")
async def update_styles(
    project_id: str,
    body: Dict[str, Any],
    repo: ProjectRepository = Depends(get_repository),
):
    """Merge camelCase style fields into the project's styles."""
    session = _open_session(repo, project_id)
    try:
        styles = StyleConfig.from_dict({**session.project.styles.to_dict(), **body})
    except ValueError as e:
        raise InvalidBlockOperationError(f"Invalid style value: {e}")
    session.replace_styles(styles)
    return _store(repo, session)


# -----------------------------------------
# Blocks
# -----------------------------------------

@router.post("/{project_id}/blocks/{index}/text")
async def update_block_text(
    project_id: str, index: int, request: UpdateTextRequest,
    repo: ProjectRepository = Depends(get_repository),
):
    session = _open_session(repo, project_id)
    session.update_text(index, request.text, request.field)
    return _store(repo, session)


@router.post("/{project_id}/blocks/{index}/type")
async def change_block_type(
    project_id: str, index: int, request: ChangeTypeRequest,
    repo: ProjectRepository = Depends(get_repository),
):
    session = _open_session(repo, project_id)
    session.change_type(index, request.type)
    return _store(repo, session)


@router.post("/{project_id}/blocks/{index}/font-size")
async def step_block_font_size(
    project_id: str, index: int, request: FontSizeRequest,
    repo: ProjectRepository = Depends(get_repository),
):
    session = _open_session(repo, project_id)
    session.step_font_size(index, request.direction)
    return _store(repo, session)


@router.post("/{project_id}/blocks/{index}/page-break")
async def insert_page_break(project_id: str, index: int, repo: ProjectRepository = Depends(get_repository)):
    session = _open_session(repo, project_id)
    session.insert_page_break(index)
    return _store(repo, session)


# -----------------------------------------
# Images
# -----------------------------------------

@router.post("/{project_id}/images/slots")
async def insert_image_slot(
    project_id: str, request: InsertImageSlotRequest,
    repo: ProjectRepository = Depends(get_repository),
):
    session = _open_session(repo, project_id)
    session.insert_image_slot(request.after_index, request.image_id)
    return _store(repo, session)


@router.put("/{project_id}/images/{image_id}")
async def upload_image(
    project_id: str, image_id: str, file: UploadFile = File(...),
    repo: ProjectRepository = Depends(get_repository),
):
    session = _open_session(repo, project_id)
    data = await file.read()
    session.upload_image(image_id, data, file.content_type or "image/png")
    return _store(repo, session)


@router.put("/{project_id}/images/{image_id}/data")
async def set_image_data(
    project_id: str, image_id: str, request: ImageDataRequest,
    repo: ProjectRepository = Depends(get_repository),
):
    if not request.data_uri.startswith("data:image"):
        raise InvalidBlockOperationError("Image data must be a data:image URI.")
    session = _open_session(repo, project_id)
    session.upload_image(image_id, request.data_uri)
    return _store(repo, session)


@router.put("/{project_id}/images/{image_id}/width")
async def set_image_width(
    project_id: str, image_id: str, request: ImageWidthRequest,
    repo: ProjectRepository = Depends(get_repository),
):
    session = _open_session(repo, project_id)
    session.set_image_width(image_id, request.width)
    return _store(repo, session)


@router.delete("/{project_id}/images/{image_id}")
async def delete_image(project_id: str, image_id: str, repo: ProjectRepository = Depends(get_repository)):
    session = _open_session(repo, project_id)
    session.delete_image(image_id)
    return _store(repo, session)


# -----------------------------------------
# TOC / pagination / reports
# -----------------------------------------

@router.get("/{project_id}/toc", response_model=List[TocEntryResponse])
async def get_toc(project_id: str, repo: ProjectRepository = Depends(get_repository)):
    session = _open_session(repo, project_id)
    return [
        TocEntryResponse(
            text=entry.text,
            level=entry.level,
            global_index=entry.global_index,
            page_number=entry.page_number,
            anchor=entry.anchor,
        )
        for entry in session.toc()
    ]


@router.post("/{project_id}/pagination", response_model=PaginationResponse)
async def paginate(
    project_id: str, request: PaginationRequest,
    repo: ProjectRepository = Depends(get_repository),
):
    """Store page numbers computed from client-measured heading offsets."""
    session = _open_session(repo, project_id)
    if request.page_height_px:
        session.pagination = PaginationEngine(page_height_px=request.page_height_px)
    outcome = session.calculate_page_numbers(RecordedMeasurer(request.offsets, request.container_offset))
    project = _store(repo, session)
    return PaginationResponse(updated_count=outcome.updated_count, page_numbers=outcome.page_numbers, project=project)


@router.post("/{project_id}/pagination/estimate", response_model=PaginationResponse)
async def paginate_estimate(project_id: str, repo: ProjectRepository = Depends(get_repository)):
    """Store page numbers from a headless layout estimate."""
    session = _open_session(repo, project_id)
    project = session.project
    outcome = session.calculate_page_numbers(FlowEstimateMeasurer(project.blocks, project.styles, project.images))
    stored = _store(repo, session)
    return PaginationResponse(updated_count=outcome.updated_count, page_numbers=outcome.page_numbers, project=stored)


@router.get("/{project_id}/word-count")
async def word_count(project_id: str, repo: ProjectRepository = Depends(get_repository)):
    return _open_session(repo, project_id).word_count_report().to_dict()


# -----------------------------------------
# Rendering / export
# -----------------------------------------

@router.get("/{project_id}/preview", response_class=HTMLResponse)
async def preview(project_id: str, repo: ProjectRepository = Depends(get_repository)):
    return HTMLResponse(_open_session(repo, project_id).render_preview())


@router.get("/{project_id}/print", response_class=HTMLResponse)
async def print_view(project_id: str, auto_print: bool = True, repo: ProjectRepository = Depends(get_repository)):
    return HTMLResponse(_open_session(repo, project_id).render_print_view(auto_print=auto_print))


@router.get("/{project_id}/export/word")
async def export_word(project_id: str, repo: ProjectRepository = Depends(get_repository)):
    export = _open_session(repo, project_id).export_word()
    return Response(
        content=export.content.encode("utf-8"),
        media_type=export.content_type,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(export.filename)}"},
    )


# -----------------------------------------
# Import / AI collaborator
# -----------------------------------------

@router.post("/{project_id}/import")
async def import_file(
    project_id: str, file: UploadFile = File(...),
    repo: ProjectRepository = Depends(get_repository),
):
    session = _open_session(repo, project_id)
    data = await file.read()
    await session.import_file(file.filename or "", data)
    return _store(repo, session)


@router.post("/{project_id}/analyze")
async def analyze(
    project_id: str,
    repo: ProjectRepository = Depends(get_repository),
    provider: GeminiProvider = Depends(get_provider),
):
    """Step 1: insert suggestion tags into the raw text."""
    session = _open_session(repo, project_id, provider)
    await session.analyze()
    return _store(repo, session)


@router.post("/{project_id}/generate")
async def generate(
    project_id: str,
    repo: ProjectRepository = Depends(get_repository),
    provider: GeminiProvider = Depends(get_provider),
):
    """Step 2: structure the text into content blocks."""
    session = _open_session(repo, project_id, provider)
    await session.generate()
    result = _store(repo, session)
    return {"project": result, "word_count": session.word_count_report().to_dict()}
