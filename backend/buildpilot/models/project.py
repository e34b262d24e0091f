# buildpilot/models/project.py
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel

ProjectType = Literal["react-vite", "nextjs", "tailwind"]
Visibility = Literal["public", "private"]

class ProjectFile(BaseModel):
    path: str
    content: str = ""
    type: Literal["file", "directory"] = "file"

class Project(BaseModel):
    id: str
    user_id: str
    name: str
    type: ProjectType
    description: Optional[str] = None
    code: str
    files: Optional[List[ProjectFile]] = None
    visibility: Visibility = "private"
    created_at: str
    updated_at: str

class ProjectCreate(BaseModel):
    name: str
    type: str
    template: str = "blank"
    description: Optional[str] = None

class ProjectUpdate(BaseModel):
    name: Optional[str] = None
    visibility: Optional[Visibility] = None
    code: Optional[str] = None
    files: Optional[List[ProjectFile]] = None

class ProjectStats(BaseModel):
    total_projects: int
    this_week: int
    shared_projects: int
