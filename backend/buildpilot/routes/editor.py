# buildpilot/routes/editor.py
from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, Response

from buildpilot.context import AppContext
from buildpilot.core.templates import file_tree, main_file_path, render_code_tree
from buildpilot.models.editor import CodeUpdate, FileTreeResponse, SessionState, SubmitRequest, SubmitResponse
from buildpilot.routes.deps import current_user_id, get_context

router = APIRouter(prefix="/v1/editor", tags=["editor"])

@router.post("/projects/{project_id}/sessions", response_model=SessionState, status_code=201)
async def open_session(
    project_id: str,
    user_id: str = Depends(current_user_id),
    ctx: AppContext = Depends(get_context),
):
    project = await asyncio.to_thread(ctx.projects.get_owned, user_id, project_id)
    return ctx.sessions.open(user_id, project).state()

@router.get("/sessions/{session_id}", response_model=SessionState)
async def session_state(
    session_id: str,
    user_id: str = Depends(current_user_id),
    ctx: AppContext = Depends(get_context),
):
    return ctx.sessions.get(session_id, user_id).state()

@router.post("/sessions/{session_id}/messages", response_model=SubmitResponse)
async def submit_message(
    session_id: str,
    req: SubmitRequest,
    user_id: str = Depends(current_user_id),
    ctx: AppContext = Depends(get_context),
):
    session = ctx.sessions.get(session_id, user_id)
    return await session.submit(req.content)

@router.put("/sessions/{session_id}/code", response_model=SessionState)
async def update_code(
    session_id: str,
    req: CodeUpdate,
    user_id: str = Depends(current_user_id),
    ctx: AppContext = Depends(get_context),
):
    session = ctx.sessions.get(session_id, user_id)
    session.edit(req.code)
    return session.state()

@router.get("/sessions/{session_id}/files", response_model=FileTreeResponse)
async def session_files(
    session_id: str,
    user_id: str = Depends(current_user_id),
    ctx: AppContext = Depends(get_context),
):
    session = ctx.sessions.get(session_id, user_id)
    nodes = file_tree(session.project_type)
    return FileTreeResponse(
        active_file=main_file_path(session.project_type),
        code_tree=render_code_tree(nodes),
        nodes=nodes,
    )

@router.delete("/sessions/{session_id}", status_code=204)
async def close_session(
    session_id: str,
    user_id: str = Depends(current_user_id),
    ctx: AppContext = Depends(get_context),
):
    ctx.sessions.close(session_id, user_id)
    return Response(status_code=204)
