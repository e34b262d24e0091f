# buildpilot/models/support.py
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

TicketStatus = Literal["open", "in_progress", "resolved"]
TicketPriority = Literal["low", "medium", "high"]

class SupportTicket(BaseModel):
    id: str
    user_id: str
    subject: str
    message: str
    status: TicketStatus
    priority: TicketPriority
    created_at: str
    updated_at: str

class TicketCreate(BaseModel):
    subject: str
    message: str
    priority: TicketPriority = "medium"

class TicketStatusUpdate(BaseModel):
    status: TicketStatus
