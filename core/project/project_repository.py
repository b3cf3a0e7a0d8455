"""
Project Repository - SQLite persistence for courseware projects.

Each project is stored as one JSON document keyed by id. A separate ordered
list of known ids is kept for enumeration. The store enforces a size quota
so projects with many embedded images fail loudly instead of silently.
"""

import json
import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from config.settings import settings
from core.errors import ProjectNotFoundError, StorageQuotaExceededError
from .project_record import ProjectRecord, new_project

logger = logging.getLogger(__name__)

BYTES_PER_MB = 1024 * 1024


@dataclass
class ProjectUsage:
    id: str
    name: str
    size_mb: float


@dataclass
class StorageInfo:
    """Current usage of the project store"""
    used_bytes: int
    used_mb: float
    total_mb: float
    percentage: float
    projects: List[ProjectUsage] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'used_bytes': self.used_bytes,
            'used_mb': round(self.used_mb, 4),
            'total_mb': self.total_mb,
            'percentage': round(self.percentage, 2),
            'projects': [
                {'id': p.id, 'name': p.name, 'size_mb': round(p.size_mb, 4)}
                for p in self.projects
            ],
        }


class ProjectRepository:
    """
    SQLite repository for courseware projects.

    Usage:
        repo = ProjectRepository("data/projects.db")
        project = repo.create_project("Onboarding")
        repo.save(project.with_updates(name="Onboarding v2"))
    """

    def __init__(
        self,
        db_path: Optional[Union[str, Path]] = None,
        quota_mb: Optional[float] = None,
        warning_mb: Optional[float] = None,
    ):
        self.db_path = Path(db_path or settings.database_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.quota_mb = settings.storage_quota_mb if quota_mb is None else quota_mb
        self.warning_mb = settings.storage_warning_mb if warning_mb is None else warning_mb
        self._init_db()
        logger.info(f"ProjectRepository initialized: {self.db_path}")

    @contextmanager
    def _get_connection(self):
        """Get database connection with context manager."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_db(self):
        """Initialize database schema."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS projects (
                    project_id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    data_json TEXT NOT NULL,
                    size_bytes INTEGER NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            # Ordered list of known ids, in creation order
            conn.execute("""
                CREATE TABLE IF NOT EXISTS project_list (
                    position INTEGER PRIMARY KEY AUTOINCREMENT,
                    project_id TEXT NOT NULL UNIQUE
                )
            """)

    # -------------------------------------------------------------------------
    # CRUD
    # -------------------------------------------------------------------------

    def create_project(self, name: str) -> ProjectRecord:
        """Create, store and list a new project."""
        project = new_project(name)
        self.save(project)
        logger.info(f"Project created: {project.id} ({name})")
        return project

    def save(self, project: ProjectRecord) -> int:
        """
        Save or update a project and make sure it is listed.

        Args:
            project: Project to store

        Returns:
            Stored size in bytes

        Raises:
            StorageQuotaExceededError: If the store would exceed its quota
        """
        data_json = json.dumps(project.to_dict(), ensure_ascii=False)
        size_bytes = len(data_json.encode('utf-8'))
        size_mb = size_bytes / BYTES_PER_MB

        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT size_bytes FROM projects WHERE project_id = ?",
                (project.id,)
            ).fetchone()
            previous = row["size_bytes"] if row else 0
            used = conn.execute("SELECT COALESCE(SUM(size_bytes), 0) FROM projects").fetchone()[0]

            if used - previous + size_bytes > self.quota_mb * BYTES_PER_MB:
                info = self._storage_info(conn)
                logger.error(
                    f"Storage quota exceeded saving {project.id}: "
                    f"{info.used_mb:.2f}MB used, project {size_mb:.2f}MB, quota {self.quota_mb}MB"
                )
                raise StorageQuotaExceededError(info)

            if size_mb > self.warning_mb:
                logger.warning(
                    f"Project '{project.name}' is {size_mb:.2f}MB, close to the storage limit; "
                    f"delete old projects or reduce images"
                )

            now = datetime.now().isoformat()
            conn.execute("""
                INSERT INTO projects (project_id, name, data_json, size_bytes, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(project_id) DO UPDATE SET
                    name = excluded.name,
                    data_json = excluded.data_json,
                    size_bytes = excluded.size_bytes,
                    updated_at = excluded.updated_at
            """, (project.id, project.name, data_json, size_bytes, now, now))
            conn.execute(
                "INSERT OR IGNORE INTO project_list (project_id) VALUES (?)",
                (project.id,)
            )

        if size_mb > 1:
            logger.info(f"Project saved: {project.id} ({size_mb:.2f}MB)")
        else:
            logger.debug(f"Project saved: {project.id} ({size_bytes} bytes)")
        return size_bytes

    def get(self, project_id: str) -> Optional[ProjectRecord]:
        """Get a project by id, or None."""
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT data_json FROM projects WHERE project_id = ?",
                (project_id,)
            ).fetchone()

        if not row:
            return None
        return ProjectRecord.from_dict(json.loads(row["data_json"]))

    def load(self, project_id: str) -> ProjectRecord:
        """Get a project by id; raises ProjectNotFoundError when missing."""
        project = self.get(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        return project

    def list_ids(self) -> List[str]:
        with self._get_connection() as conn:
            rows = conn.execute(
                "SELECT project_id FROM project_list ORDER BY position ASC"
            ).fetchall()
        return [row["project_id"] for row in rows]

    def list_projects(self) -> List[ProjectRecord]:
        """All listed projects in creation order; dangling ids are skipped."""
        projects = []
        for project_id in self.list_ids():
            project = self.get(project_id)
            if project is not None:
                projects.append(project)
        return projects

    def delete(self, project_id: str) -> bool:
        """Delete a project and remove it from the list."""
        with self._get_connection() as conn:
            cursor = conn.execute(
                "DELETE FROM projects WHERE project_id = ?",
                (project_id,)
            )
            conn.execute(
                "DELETE FROM project_list WHERE project_id = ?",
                (project_id,)
            )
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info(f"Project deleted: {project_id}")
        return deleted

    # -------------------------------------------------------------------------
    # Usage
    # -------------------------------------------------------------------------

    def storage_info(self) -> StorageInfo:
        with self._get_connection() as conn:
            return self._storage_info(conn)

    def _storage_info(self, conn) -> StorageInfo:
        rows = conn.execute("SELECT project_id, name, size_bytes FROM projects").fetchall()
        used_bytes = sum(row["size_bytes"] for row in rows)
        used_mb = used_bytes / BYTES_PER_MB
        projects = sorted(
            (ProjectUsage(row["project_id"], row["name"], row["size_bytes"] / BYTES_PER_MB) for row in rows),
            key=lambda usage: usage.size_mb,
            reverse=True,
        )
        return StorageInfo(
            used_bytes=used_bytes,
            used_mb=used_mb,
            total_mb=self.quota_mb,
            percentage=(used_mb / self.quota_mb) * 100 if self.quota_mb else 0.0,
            projects=projects,
        )
