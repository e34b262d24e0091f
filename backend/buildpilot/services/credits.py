# buildpilot/services/credits.py
from __future__ import annotations

import logging
from typing import List, Optional

from buildpilot.core.errors import NotFoundError
from buildpilot.models.account import CreditUsage
from buildpilot.services.coerce import coerce_credit_usage
from buildpilot.services.store import CREDIT_USAGE, USERS, RecordStore

logger = logging.getLogger(__name__)

class CreditLedger:
    def __init__(self, store: RecordStore):
        self.store = store

    def _user(self, user_id: str) -> dict:
        user = self.store.get(USERS, user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def is_unlimited(self, user_id: str) -> bool:
        return self._user(user_id).get("plan") == "premium"

    def debit(
        self,
        user_id: str,
        amount: int = 1,
        project_id: Optional[str] = None,
        description: str = "AI generation",
    ) -> Optional[int]:
        if self.is_unlimited(user_id):
            return None
        remaining = self.store.increment_credits(user_id, -amount)
        self.store.insert(
            CREDIT_USAGE,
            {
                "user_id": user_id,
                "project_id": project_id,
                "amount": amount,
                "type": "ai_generation",
                "description": description,
            },
        )
        logger.info("debited %d credit(s) from %s, %d left", amount, user_id, remaining)
        return remaining

    def refund(self, user_id: str, amount: int = 1, project_id: Optional[str] = None) -> Optional[int]:
        if self.is_unlimited(user_id):
            return None
        remaining = self.store.increment_credits(user_id, amount)
        self.store.insert(
            CREDIT_USAGE,
            {
                "user_id": user_id,
                "project_id": project_id,
                "amount": -amount,
                "type": "ai_generation",
                "description": "Refund: no change applied",
            },
        )
        return remaining

    def award(self, user_id: str, amount: int) -> int:
        return self.store.increment_credits(user_id, amount)

    def usage(self, user_id: str) -> List[CreditUsage]:
        rows = self.store.select(CREDIT_USAGE, order_by="created_at", descending=True, user_id=user_id)
        return [coerce_credit_usage(r) for r in rows]
