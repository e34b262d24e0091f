# buildpilot/routes/support.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from buildpilot.context import AppContext
from buildpilot.models.support import SupportTicket, TicketCreate, TicketStatusUpdate
from buildpilot.routes.deps import current_user_id, get_context

router = APIRouter(prefix="/v1/support/tickets", tags=["support"])

@router.post("", response_model=SupportTicket, status_code=201)
def create_ticket(req: TicketCreate, user_id: str = Depends(current_user_id), ctx: AppContext = Depends(get_context)):
    return ctx.support.create(user_id, req)

@router.get("", response_model=List[SupportTicket])
def list_tickets(user_id: str = Depends(current_user_id), ctx: AppContext = Depends(get_context)):
    return ctx.support.list(user_id)

@router.get("/{ticket_id}", response_model=SupportTicket)
def get_ticket(ticket_id: str, user_id: str = Depends(current_user_id), ctx: AppContext = Depends(get_context)):
    return ctx.support.get(user_id, ticket_id)

@router.patch("/{ticket_id}", response_model=SupportTicket)
def update_ticket(
    ticket_id: str,
    req: TicketStatusUpdate,
    user_id: str = Depends(current_user_id),
    ctx: AppContext = Depends(get_context),
):
    return ctx.support.update_status(user_id, ticket_id, req.status)
