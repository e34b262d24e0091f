# buildpilot/models/account.py
from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel

class User(BaseModel):
    id: str
    email: str
    name: str
    avatar: Optional[str] = None
    credits: int
    plan: Literal["free", "premium"] = "free"
    api_key_enabled: bool = False
    referral_code: str
    referred_by: Optional[str] = None
    created_at: str
    updated_at: str

class SignUpRequest(BaseModel):
    email: str
    name: str
    referral_code: Optional[str] = None

class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    avatar: Optional[str] = None

class ApiKeyRequest(BaseModel):
    provider: Literal["openai", "anthropic"]
    key: str

class ApiKeyInfo(BaseModel):
    id: str
    provider: str
    is_active: bool
    created_at: str

class Referral(BaseModel):
    id: str
    referrer_id: str
    referee_id: str
    status: Literal["pending", "completed"]
    created_at: str

class ReferralStats(BaseModel):
    total_referrals: int
    successful_referrals: int
    total_rewards: int

class CreditUsage(BaseModel):
    id: str
    user_id: str
    project_id: Optional[str] = None
    amount: int
    type: Literal["ai_generation", "project_export", "other"]
    description: str
    created_at: str
