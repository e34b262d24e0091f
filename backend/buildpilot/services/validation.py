# buildpilot/services/validation.py
from __future__ import annotations

from typing import Iterable, Optional

from buildpilot.core.errors import ValidationError
from buildpilot.core.templates import PROJECT_TYPES, TEMPLATES
from buildpilot.models.project import ProjectFile

def require_text(value: Optional[str], field: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{field} must not be empty")
    return text

def validate_project_type(project_type: str) -> str:
    meta = PROJECT_TYPES.get(project_type)
    if meta is None:
        raise ValidationError(f"unknown project type: {project_type}")
    if meta["coming_soon"]:
        raise ValidationError(f"project type {project_type} is coming soon")
    return project_type

def validate_template(template: str) -> str:
    if template not in TEMPLATES:
        raise ValidationError(f"unknown template: {template}")
    return template

def validate_file_path(path: str, index: int = 0) -> str:
    if not isinstance(path, str) or not path:
        raise ValidationError(f"files[{index}].path invalid")

    if path.startswith("/") or path.startswith("\\") or "://" in path:
        raise ValidationError(f"files[{index}].path must be relative: {path}")

    if "\\" in path:
        raise ValidationError(f"files[{index}].path must use '/': {path}")

    if ".." in path.split("/"):
        raise ValidationError(f"files[{index}].path must not contain '..': {path}")
    return path

def validate_project_files(files: Iterable[ProjectFile]) -> None:
    seen = set()
    for i, f in enumerate(files):
        validate_file_path(f.path, i)
        if f.type == "directory" and f.content:
            raise ValidationError(f"files[{i}] is a directory and must not have content")
        if f.path in seen:
            raise ValidationError(f"files[{i}].path duplicated: {f.path}")
        seen.add(f.path)

def validate_email(email: str) -> str:
    text = require_text(email, "email").lower()
    local, _, domain = text.partition("@")
    if not local or "." not in domain:
        raise ValidationError(f"invalid email address: {email}")
    return text
