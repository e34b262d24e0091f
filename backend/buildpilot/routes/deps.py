# buildpilot/routes/deps.py
from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, Request

from buildpilot.context import AppContext
from buildpilot.core.errors import NotAuthenticatedError
from buildpilot.services.store import USERS

def get_context(request: Request) -> AppContext:
    return request.app.state.context

def current_user_id(
    x_user_id: Optional[str] = Header(default=None),
    ctx: AppContext = Depends(get_context),
) -> str:
    user_id = (x_user_id or "").strip()
    if not user_id or ctx.store.get(USERS, user_id) is None:
        raise NotAuthenticatedError("Sign in to continue")
    return user_id
