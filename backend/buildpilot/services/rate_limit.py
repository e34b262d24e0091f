# buildpilot/services/rate_limit.py
from __future__ import annotations

import logging
from typing import Iterable, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware

from buildpilot.core.errors import StoreError
from buildpilot.core.ids import parse_iso, utcnow
from buildpilot.services.store import IP_BLOCKS, RecordStore

logger = logging.getLogger(__name__)

class RateLimiter:
    def __init__(self, store: RecordStore, max_requests: int = 10, window_seconds: int = 60):
        self.store = store
        self.max_requests = max_requests
        self.window_seconds = window_seconds

    def is_blocked(self, ip: str) -> bool:
        now = utcnow()
        for block in self.store.select(IP_BLOCKS, ip=ip):
            expires_at = block.get("expires_at")
            if not expires_at or parse_iso(expires_at) > now:
                return True
        return False

    def allow(self, ip: str) -> bool:
        return self.store.hit_rate_limit(ip, self.window_seconds, self.max_requests)

def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client and request.client.host:
        return request.client.host
    return "unknown"

class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, limiter: RateLimiter, exempt_paths: Optional[Iterable[str]] = None):
        super().__init__(app)
        self.limiter = limiter
        self.exempt_paths = frozenset(exempt_paths or ("/health",))

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.exempt_paths:
            return await call_next(request)

        ip = client_ip(request)
        try:
            if await run_in_threadpool(self.limiter.is_blocked, ip):
                return JSONResponse({"error": "IP blocked"}, status_code=403)
            if not await run_in_threadpool(self.limiter.allow, ip):
                logger.info("rate limit exceeded for %s", ip)
                return JSONResponse({"error": "Rate limit exceeded"}, status_code=429)
        except StoreError:
            # fail open while the store is unreachable
            logger.exception("rate limit check failed for %s", ip)
        return await call_next(request)
