# buildpilot/services/coerce.py
from __future__ import annotations

from typing import Any, Dict, List

from buildpilot.models.account import ApiKeyInfo, CreditUsage, Referral, User
from buildpilot.models.project import Project, ProjectFile
from buildpilot.models.support import SupportTicket

def coerce_to_files(raw: List[Dict[str, Any]]) -> List[ProjectFile]:
    return [
        ProjectFile(
            path=f.get("path"),
            content=f.get("content") or "",
            type=f.get("type") or "file",
        )
        for f in raw
    ]

def coerce_project(row: Dict[str, Any]) -> Project:
    files = row.get("files")
    return Project(
        id=row["id"],
        user_id=row["user_id"],
        name=row["name"],
        type=row["type"],
        description=row.get("description"),
        code=row.get("code") or "",
        files=coerce_to_files(files) if files else None,
        visibility=row.get("visibility") or "private",
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )

def coerce_user(row: Dict[str, Any]) -> User:
    return User.model_validate(row)

def coerce_referral(row: Dict[str, Any]) -> Referral:
    return Referral.model_validate(row)

def coerce_ticket(row: Dict[str, Any]) -> SupportTicket:
    return SupportTicket.model_validate(row)

def coerce_credit_usage(row: Dict[str, Any]) -> CreditUsage:
    return CreditUsage.model_validate(row)

def coerce_api_key(row: Dict[str, Any]) -> ApiKeyInfo:
    return ApiKeyInfo(
        id=row["id"],
        provider=row["provider"],
        is_active=bool(row.get("is_active")),
        created_at=row["created_at"],
    )
