# buildpilot/services/accounts.py
from __future__ import annotations

import hashlib
import logging
from typing import List, Optional

from buildpilot.core.errors import ConflictError, NotFoundError, ValidationError
from buildpilot.core.ids import new_referral_code
from buildpilot.models.account import ApiKeyInfo, ProfileUpdate, Referral, ReferralStats, User
from buildpilot.services.coerce import coerce_api_key, coerce_referral, coerce_user
from buildpilot.services.credits import CreditLedger
from buildpilot.services.store import API_KEYS, REFERRALS, USERS, RecordStore
from buildpilot.services.validation import require_text, validate_email

logger = logging.getLogger(__name__)

SIGNUP_CREDITS = 100
REFERRER_BONUS = 100
REFEREE_BONUS = 200
REWARD_PER_REFERRAL = 100

class AccountService:
    def __init__(self, store: RecordStore, ledger: CreditLedger):
        self.store = store
        self.ledger = ledger

    def sign_up(self, email: str, name: str, referral_code: Optional[str] = None) -> User:
        email = validate_email(email)
        name = require_text(name, "name")
        if self.store.select(USERS, email=email):
            raise ConflictError("User already exists")

        referral_code = (referral_code or "").strip().upper() or None
        row = self.store.insert(
            USERS,
            {
                "email": email,
                "name": name,
                "credits": SIGNUP_CREDITS,
                "plan": "free",
                "api_key_enabled": False,
                "referral_code": self._unique_referral_code(),
                "referred_by": referral_code,
            },
        )

        if referral_code:
            referrers = self.store.select(USERS, referral_code=referral_code)
            if referrers:
                referrer_id = referrers[0]["id"]
                self.store.insert(
                    REFERRALS,
                    {"referrer_id": referrer_id, "referee_id": row["id"], "status": "pending"},
                )
                self.ledger.award(referrer_id, REFERRER_BONUS)
                self.ledger.award(row["id"], REFEREE_BONUS)
                logger.info("referral %s -> %s recorded", referrer_id, row["id"])
            else:
                logger.info("ignoring unknown referral code %s", referral_code)

        return self.get_user(row["id"])

    def _unique_referral_code(self) -> str:
        while True:
            code = new_referral_code()
            if not self.store.select(USERS, referral_code=code):
                return code

    def get_user(self, user_id: str) -> User:
        row = self.store.get(USERS, user_id)
        if row is None:
            raise NotFoundError(f"User {user_id} not found")
        return coerce_user(row)

    def update_profile(self, user_id: str, update: ProfileUpdate) -> User:
        changes = {}
        if update.name is not None:
            changes["name"] = require_text(update.name, "name")
        if update.avatar is not None:
            changes["avatar"] = update.avatar.strip() or None
        if not changes:
            return self.get_user(user_id)
        row = self.store.update(USERS, user_id, changes)
        if row is None:
            raise NotFoundError(f"User {user_id} not found")
        return coerce_user(row)

    def save_api_key(self, user_id: str, provider: str, key: str) -> ApiKeyInfo:
        key = (key or "").strip()
        if len(key) < 8:
            raise ValidationError("API key looks too short")
        self.get_user(user_id)

        for existing in self.store.select(API_KEYS, user_id=user_id, provider=provider, is_active=True):
            self.store.update(API_KEYS, existing["id"], {"is_active": False})

        row = self.store.insert(
            API_KEYS,
            {
                "user_id": user_id,
                "provider": provider,
                "key_hash": hashlib.sha256(key.encode("utf-8")).hexdigest(),
                "is_active": True,
            },
        )
        self.store.update(USERS, user_id, {"api_key_enabled": True})
        return coerce_api_key(row)

    def list_api_keys(self, user_id: str) -> List[ApiKeyInfo]:
        rows = self.store.select(API_KEYS, order_by="created_at", descending=True, user_id=user_id)
        return [coerce_api_key(r) for r in rows]

class ReferralService:
    def __init__(self, store: RecordStore):
        self.store = store

    def list(self, referrer_id: str) -> List[Referral]:
        rows = self.store.select(REFERRALS, order_by="created_at", descending=True, referrer_id=referrer_id)
        return [coerce_referral(r) for r in rows]

    def stats(self, referrer_id: str) -> ReferralStats:
        rows = self.store.select(REFERRALS, referrer_id=referrer_id)
        completed = sum(1 for r in rows if r.get("status") == "completed")
        return ReferralStats(
            total_referrals=len(rows),
            successful_referrals=completed,
            total_rewards=completed * REWARD_PER_REFERRAL,
        )
