# buildpilot/routes/accounts.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from buildpilot.context import AppContext
from buildpilot.models.account import (
    ApiKeyInfo,
    ApiKeyRequest,
    CreditUsage,
    ProfileUpdate,
    Referral,
    ReferralStats,
    SignUpRequest,
    User,
)
from buildpilot.routes.deps import current_user_id, get_context

router = APIRouter(prefix="/v1", tags=["accounts"])

@router.post("/users", response_model=User, status_code=201)
def sign_up(req: SignUpRequest, ctx: AppContext = Depends(get_context)):
    return ctx.accounts.sign_up(req.email, req.name, req.referral_code)

@router.get("/me", response_model=User)
def me(user_id: str = Depends(current_user_id), ctx: AppContext = Depends(get_context)):
    return ctx.accounts.get_user(user_id)

@router.patch("/me", response_model=User)
def update_me(req: ProfileUpdate, user_id: str = Depends(current_user_id), ctx: AppContext = Depends(get_context)):
    return ctx.accounts.update_profile(user_id, req)

@router.get("/me/credits", response_model=List[CreditUsage])
def credit_usage(user_id: str = Depends(current_user_id), ctx: AppContext = Depends(get_context)):
    return ctx.ledger.usage(user_id)

@router.post("/me/api-keys", response_model=ApiKeyInfo, status_code=201)
def save_api_key(req: ApiKeyRequest, user_id: str = Depends(current_user_id), ctx: AppContext = Depends(get_context)):
    return ctx.accounts.save_api_key(user_id, req.provider, req.key)

@router.get("/me/api-keys", response_model=List[ApiKeyInfo])
def list_api_keys(user_id: str = Depends(current_user_id), ctx: AppContext = Depends(get_context)):
    return ctx.accounts.list_api_keys(user_id)

@router.get("/referrals", response_model=List[Referral])
def list_referrals(user_id: str = Depends(current_user_id), ctx: AppContext = Depends(get_context)):
    return ctx.referrals.list(user_id)

@router.get("/referrals/stats", response_model=ReferralStats)
def referral_stats(user_id: str = Depends(current_user_id), ctx: AppContext = Depends(get_context)):
    return ctx.referrals.stats(user_id)
