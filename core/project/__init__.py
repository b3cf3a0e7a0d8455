"""
Courseware projects: record, persistence, autosave, import and editing session.
"""

from .project_record import ProjectRecord, generate_project_id, new_project
from .project_repository import ProjectRepository, ProjectUsage, StorageInfo
from .autosave import DebouncedSaver, SaveStatus
from .importer import DocxImporter, ImportResult, TextImporter, import_file
from .session import EditorSession, ProcessStatus

__all__ = [
    "ProjectRecord",
    "generate_project_id",
    "new_project",
    "ProjectRepository",
    "ProjectUsage",
    "StorageInfo",
    "DebouncedSaver",
    "SaveStatus",
    "DocxImporter",
    "ImportResult",
    "TextImporter",
    "import_file",
    "EditorSession",
    "ProcessStatus",
]
