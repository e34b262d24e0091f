# buildpilot/services/projects.py
from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Dict, List, Optional

from buildpilot.core.errors import ForbiddenError, NotFoundError
from buildpilot.core.ids import parse_iso, utcnow
from buildpilot.core.templates import generate_initial_code
from buildpilot.models.project import Project, ProjectCreate, ProjectStats, ProjectUpdate
from buildpilot.services.cache import ReadThroughCache
from buildpilot.services.coerce import coerce_project
from buildpilot.services.store import PROJECTS, RecordStore
from buildpilot.services.validation import (
    require_text,
    validate_project_files,
    validate_project_type,
    validate_template,
)

logger = logging.getLogger(__name__)

class ProjectService:
    def __init__(self, store: RecordStore, cache: ReadThroughCache | None = None):
        self.store = store
        self.cache = cache or ReadThroughCache()

    def _load(self, project_id: str) -> Dict[str, Any]:
        row = self.cache.get(project_id, lambda key: self.store.get(PROJECTS, key))
        if row is None:
            raise NotFoundError(f"Project {project_id} not found")
        return row

    def _owned(self, user_id: str, project_id: str) -> Dict[str, Any]:
        row = self._load(project_id)
        if row["user_id"] != user_id:
            raise ForbiddenError("You do not have access to this project")
        return row

    def _write(self, project_id: str, changes: Dict[str, Any]) -> Project:
        row = self.store.update(PROJECTS, project_id, changes)
        if row is None:
            self.cache.invalidate(project_id)
            raise NotFoundError(f"Project {project_id} not found")
        self.cache.put(project_id, row)
        return coerce_project(row)

    def create(self, user_id: str, req: ProjectCreate) -> Project:
        name = require_text(req.name, "name")
        project_type = validate_project_type(req.type)
        template = validate_template(req.template)
        row = self.store.insert(
            PROJECTS,
            {
                "user_id": user_id,
                "name": name,
                "type": project_type,
                "code": generate_initial_code(project_type, template, name),
                "description": (req.description or "").strip() or None,
                "visibility": "private",
            },
        )
        self.cache.put(row["id"], row)
        logger.info("project %s created for %s (%s/%s)", row["id"], user_id, project_type, template)
        return coerce_project(row)

    def get(self, user_id: str, project_id: str) -> Project:
        row = self._load(project_id)
        if row["user_id"] != user_id and row.get("visibility") != "public":
            raise ForbiddenError("You do not have access to this project")
        return coerce_project(row)

    def get_owned(self, user_id: str, project_id: str) -> Project:
        return coerce_project(self._owned(user_id, project_id))

    def list(self, user_id: str, search: Optional[str] = None, project_type: Optional[str] = None) -> List[Project]:
        rows = self.store.select(PROJECTS, order_by="updated_at", descending=True, user_id=user_id)
        needle = (search or "").strip().lower()
        projects = []
        for row in rows:
            if needle and needle not in row["name"].lower():
                continue
            if project_type and project_type != "all" and row["type"] != project_type:
                continue
            projects.append(coerce_project(row))
        return projects

    def update(self, user_id: str, project_id: str, req: ProjectUpdate) -> Project:
        self._owned(user_id, project_id)
        changes: Dict[str, Any] = {}
        if req.name is not None:
            changes["name"] = require_text(req.name, "name")
        if req.visibility is not None:
            changes["visibility"] = req.visibility
        if req.code is not None:
            changes["code"] = req.code
        if req.files is not None:
            validate_project_files(req.files)
            changes["files"] = [f.model_dump() for f in req.files]
        if not changes:
            return coerce_project(self._load(project_id))
        return self._write(project_id, changes)

    def toggle_visibility(self, user_id: str, project_id: str) -> Project:
        row = self._owned(user_id, project_id)
        visibility = "private" if row.get("visibility") == "public" else "public"
        return self._write(project_id, {"visibility": visibility})

    def duplicate(self, user_id: str, project_id: str) -> Project:
        source = self._owned(user_id, project_id)
        row = self.store.insert(
            PROJECTS,
            {
                "user_id": user_id,
                "name": f"{source['name']} (Copy)",
                "type": source["type"],
                "description": source.get("description"),
                "code": source.get("code") or "",
                "files": source.get("files"),
                "visibility": source.get("visibility") or "private",
            },
        )
        self.cache.put(row["id"], row)
        return coerce_project(row)

    def delete(self, user_id: str, project_id: str) -> None:
        self._owned(user_id, project_id)
        deleted = self.store.delete(PROJECTS, project_id)
        self.cache.invalidate(project_id)
        if not deleted:
            raise NotFoundError(f"Project {project_id} not found")

    def save_code(self, project_id: str, code: str) -> bool:
        row = self.store.update(PROJECTS, project_id, {"code": code})
        if row is None:
            self.cache.invalidate(project_id)
            return False
        self.cache.put(project_id, row)
        return True

    def stats(self, user_id: str) -> ProjectStats:
        rows = self.store.select(PROJECTS, user_id=user_id)
        week_ago = utcnow() - timedelta(days=7)
        return ProjectStats(
            total_projects=len(rows),
            this_week=sum(1 for r in rows if parse_iso(r["created_at"]) > week_ago),
            shared_projects=sum(1 for r in rows if r.get("visibility") == "public"),
        )
