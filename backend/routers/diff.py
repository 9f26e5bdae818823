"""Diff session API endpoints"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from sse_starlette.sse import EventSourceResponse

from models.diff import (
    ComputeDiffRequest,
    ContentRequest,
    CreateSessionRequest,
    DiffResult,
    SessionResponse,
)
from models.gutter import GutterDecorations, GutterRequest
from services.change_gutter import ChangeGutter
from services.diff_engine import DiffEngine
from services.logging_config import get_logger
from services.session_manager import EditingSession, SessionManager, SessionNotFoundError

logger = get_logger("routers.diff")

router = APIRouter()
change_gutter = ChangeGutter()


def get_session_manager(request: Request) -> SessionManager:
    """Session manager owned by the running application"""
    return request.app.state.sessions


def not_found(error: SessionNotFoundError) -> HTTPException:
    return HTTPException(status_code=404, detail=str(error))


def session_response(session: EditingSession) -> SessionResponse:
    return SessionResponse(
        sessionId=session.session_id,
        hasBaseline=session.engine.has_baseline(),
    )


@router.post("/compute", response_model=DiffResult)
async def compute_diff(request: ComputeDiffRequest) -> DiffResult:
    """Diff content against a baseline without keeping any state"""
    engine = DiffEngine()
    if request.baseline is not None:
        engine.set_baseline(request.baseline)
    return engine.compute_diff(request.content)


@router.post("/sessions", response_model=SessionResponse)
async def create_session(
    request: CreateSessionRequest,
    sessions: SessionManager = Depends(get_session_manager),
) -> SessionResponse:
    """Open an editing session, optionally with the loaded file as baseline"""
    session = sessions.create_session(request.content)
    return session_response(session)


@router.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: str,
    sessions: SessionManager = Depends(get_session_manager),
) -> SessionResponse:
    try:
        return session_response(sessions.get(session_id))
    except SessionNotFoundError as e:
        raise not_found(e)


@router.delete("/sessions/{session_id}")
async def close_session(
    session_id: str,
    sessions: SessionManager = Depends(get_session_manager),
) -> dict[str, Any]:
    """Close a session and end its event streams"""
    try:
        sessions.close_session(session_id)
    except SessionNotFoundError as e:
        raise not_found(e)
    return {"status": "success", "message": f"Session {session_id} closed"}


@router.put("/sessions/{session_id}/baseline", response_model=SessionResponse)
async def load_baseline(
    session_id: str,
    request: ContentRequest,
    sessions: SessionManager = Depends(get_session_manager),
) -> SessionResponse:
    """File loaded: store its content as the baseline"""
    try:
        return session_response(sessions.load(session_id, request.content))
    except SessionNotFoundError as e:
        raise not_found(e)


@router.delete("/sessions/{session_id}/baseline", response_model=SessionResponse)
async def clear_baseline(
    session_id: str,
    sessions: SessionManager = Depends(get_session_manager),
) -> SessionResponse:
    """File closed or deleted: drop the baseline"""
    try:
        return session_response(sessions.clear(session_id))
    except SessionNotFoundError as e:
        raise not_found(e)


@router.post("/sessions/{session_id}/baseline/reset", response_model=SessionResponse)
async def reset_baseline(
    session_id: str,
    sessions: SessionManager = Depends(get_session_manager),
) -> SessionResponse:
    """Accept the current content as the new baseline"""
    try:
        return session_response(sessions.reset_baseline(session_id))
    except SessionNotFoundError as e:
        raise not_found(e)


@router.post("/sessions/{session_id}/content", response_model=DiffResult)
async def update_content(
    session_id: str,
    request: ContentRequest,
    sessions: SessionManager = Depends(get_session_manager),
) -> DiffResult:
    """File changed: diff the new content against the baseline"""
    try:
        return sessions.update(session_id, request.content)
    except SessionNotFoundError as e:
        raise not_found(e)


@router.post("/sessions/{session_id}/gutter", response_model=GutterDecorations)
async def gutter_decorations(
    session_id: str,
    request: GutterRequest,
    sessions: SessionManager = Depends(get_session_manager),
) -> GutterDecorations:
    """Decorations for the rendered blocks, from the last computed diff"""
    try:
        session = sessions.get(session_id)
    except SessionNotFoundError as e:
        raise not_found(e)

    if request.sourceLines:
        return change_gutter.apply_source_lines(session.last_diff, request.sourceLines)
    return change_gutter.apply_changes(session.last_diff, request.blocks)


async def diff_events(sessions: SessionManager, session_id: str):
    """SSE events for one subscriber: the last diff, then every new one until close"""
    queue = None
    try:
        session = sessions.get(session_id)
        queue = sessions.subscribe(session_id)
        yield {"event": "diff", "data": session.last_diff.model_dump_json()}
        while True:
            diff = await queue.get()
            if diff is None:
                yield {"event": "closed", "data": session_id}
                break
            yield {"event": "diff", "data": diff.model_dump_json()}
    except SessionNotFoundError:
        # Closed between the request and the first read
        yield {"event": "closed", "data": session_id}
    finally:
        if queue is not None:
            sessions.unsubscribe(session_id, queue)
        logger.debug(f"Event stream for {session_id} ended")


@router.get("/sessions/{session_id}/events")
async def session_events(
    session_id: str,
    sessions: SessionManager = Depends(get_session_manager),
):
    """Stream every diff computed for the session (SSE)"""
    if session_id not in sessions:
        raise not_found(SessionNotFoundError(session_id))

    return EventSourceResponse(diff_events(sessions, session_id))
