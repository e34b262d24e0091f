# buildpilot/services/support.py
from __future__ import annotations

import logging
from typing import List

from buildpilot.core.errors import ForbiddenError, NotFoundError
from buildpilot.models.support import SupportTicket, TicketCreate
from buildpilot.services.coerce import coerce_ticket
from buildpilot.services.store import SUPPORT_TICKETS, RecordStore
from buildpilot.services.validation import require_text

logger = logging.getLogger(__name__)

class SupportService:
    def __init__(self, store: RecordStore):
        self.store = store

    def create(self, user_id: str, req: TicketCreate) -> SupportTicket:
        row = self.store.insert(
            SUPPORT_TICKETS,
            {
                "user_id": user_id,
                "subject": require_text(req.subject, "subject"),
                "message": require_text(req.message, "message"),
                "status": "open",
                "priority": req.priority,
            },
        )
        logger.info("support ticket %s opened by %s (%s)", row["id"], user_id, req.priority)
        return coerce_ticket(row)

    def list(self, user_id: str) -> List[SupportTicket]:
        rows = self.store.select(SUPPORT_TICKETS, order_by="created_at", descending=True, user_id=user_id)
        return [coerce_ticket(r) for r in rows]

    def get(self, user_id: str, ticket_id: str) -> SupportTicket:
        row = self.store.get(SUPPORT_TICKETS, ticket_id)
        if row is None:
            raise NotFoundError(f"Ticket {ticket_id} not found")
        if row["user_id"] != user_id:
            raise ForbiddenError("You do not have access to this ticket")
        return coerce_ticket(row)

    def update_status(self, user_id: str, ticket_id: str, status: str) -> SupportTicket:
        self.get(user_id, ticket_id)
        row = self.store.update(SUPPORT_TICKETS, ticket_id, {"status": status})
        if row is None:
            raise NotFoundError(f"Ticket {ticket_id} not found")
        return coerce_ticket(row)
