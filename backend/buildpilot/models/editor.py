# buildpilot/models/editor.py
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict

class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    role: Literal["user", "assistant"]
    content: str
    timestamp: str

class SubmitRequest(BaseModel):
    content: str

class CodeUpdate(BaseModel):
    code: str

class SubmitResponse(BaseModel):
    accepted: bool
    reply: Optional[str] = None
    code: str
    rule: Optional[str] = None
    messages: List[Message] = []

class SessionState(BaseModel):
    session_id: str
    project_id: str
    project_type: str
    active_file: str
    code: str
    busy: bool
    messages: List[Message] = []

class FileTreeResponse(BaseModel):
    active_file: str
    code_tree: str
    nodes: List[Dict[str, Any]] = []
