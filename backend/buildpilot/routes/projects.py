# buildpilot/routes/projects.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Response

from buildpilot.context import AppContext
from buildpilot.core.errors import ConflictError
from buildpilot.core.templates import PROJECT_TYPES, TEMPLATES
from buildpilot.models.project import Project, ProjectCreate, ProjectStats, ProjectUpdate
from buildpilot.routes.deps import current_user_id, get_context

router = APIRouter(prefix="/v1/projects", tags=["projects"])

@router.get("/catalog")
def catalog():
    return {"types": PROJECT_TYPES, "templates": TEMPLATES}

@router.get("", response_model=List[Project])
def list_projects(
    search: Optional[str] = None,
    type: Optional[str] = None,
    user_id: str = Depends(current_user_id),
    ctx: AppContext = Depends(get_context),
):
    return ctx.projects.list(user_id, search=search, project_type=type)

@router.post("", response_model=Project, status_code=201)
def create_project(
    req: ProjectCreate,
    user_id: str = Depends(current_user_id),
    ctx: AppContext = Depends(get_context),
):
    return ctx.projects.create(user_id, req)

@router.get("/stats", response_model=ProjectStats)
def project_stats(user_id: str = Depends(current_user_id), ctx: AppContext = Depends(get_context)):
    return ctx.projects.stats(user_id)

@router.get("/{project_id}", response_model=Project)
def get_project(project_id: str, user_id: str = Depends(current_user_id), ctx: AppContext = Depends(get_context)):
    return ctx.projects.get(user_id, project_id)

@router.patch("/{project_id}", response_model=Project)
def update_project(
    project_id: str,
    req: ProjectUpdate,
    user_id: str = Depends(current_user_id),
    ctx: AppContext = Depends(get_context),
):
    # an open editor session owns the code buffer
    if req.code is not None:
        ctx.projects.get_owned(user_id, project_id)
        if ctx.sessions.has_open(project_id):
            raise ConflictError("Close the editor session before replacing the project code")
    return ctx.projects.update(user_id, project_id, req)

@router.post("/{project_id}/visibility", response_model=Project)
def toggle_visibility(project_id: str, user_id: str = Depends(current_user_id), ctx: AppContext = Depends(get_context)):
    return ctx.projects.toggle_visibility(user_id, project_id)

@router.post("/{project_id}/duplicate", response_model=Project, status_code=201)
def duplicate_project(project_id: str, user_id: str = Depends(current_user_id), ctx: AppContext = Depends(get_context)):
    return ctx.projects.duplicate(user_id, project_id)

@router.delete("/{project_id}", status_code=204)
def delete_project(project_id: str, user_id: str = Depends(current_user_id), ctx: AppContext = Depends(get_context)):
    ctx.projects.delete(user_id, project_id)
    return Response(status_code=204)
