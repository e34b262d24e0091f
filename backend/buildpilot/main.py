# buildpilot/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from buildpilot.context import AppContext
from buildpilot.core.config import Settings
from buildpilot.core.errors import BuildpilotError
from buildpilot.core.log import configure_logging
from buildpilot.routes.accounts import router as accounts_router
from buildpilot.routes.editor import router as editor_router
from buildpilot.routes.projects import router as projects_router
from buildpilot.routes.support import router as support_router
from buildpilot.services.rate_limit import RateLimitMiddleware
from buildpilot.services.store import RecordStore

logger = logging.getLogger(__name__)

def create_app(settings: Settings | None = None, store: RecordStore | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)
    ctx = AppContext.build(settings, store)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("buildpilot started (store=%s)", settings.store_backend)
        yield
        # pending autosaves are dropped, not flushed
        ctx.sessions.close_all()

    app = FastAPI(title="buildpilot", lifespan=lifespan)
    app.state.context = ctx

    @app.exception_handler(BuildpilotError)
    async def domain_error(request: Request, exc: BuildpilotError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
        return JSONResponse({"detail": exc.detail}, status_code=exc.status_code)

    @app.get("/health")
    def health():
        return {"status": "healthy"}

    app.add_middleware(RateLimitMiddleware, limiter=ctx.limiter)
    app.include_router(accounts_router)
    app.include_router(projects_router)
    app.include_router(editor_router)
    app.include_router(support_router)
    return app

app = create_app()
