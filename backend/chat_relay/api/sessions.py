"""Session API endpoints: create, read history, reset."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from chat_relay.llm.chat.errors import InvalidRequest
from chat_relay.llm.chat.models import (
    CreateSessionResponse,
    HistoryResponse,
    ResetRequest,
    ResetResponse,
    SessionStats,
)
from chat_relay.llm.chat.store import InMemorySessionStore, get_session_store

logger = logging.getLogger(__name__)

router = APIRouter()

Store = Annotated[InMemorySessionStore, Depends(get_session_store)]


@router.post("/session")
async def create_session(store: Store) -> CreateSessionResponse:
    """Create a new session with an empty history."""
    return CreateSessionResponse(session_id=store.create_session())


@router.get("/history")
async def get_history(
    store: Store,
    session_id: Annotated[str | None, Query(alias="sessionId")] = None,
) -> HistoryResponse:
    """Get a session's history.

    Unknown or missing session ids return an empty history.
    """
    if not session_id:
        return HistoryResponse(history=[])
    return HistoryResponse(history=store.get_history(session_id))


@router.post("/reset")
async def reset_history(request: ResetRequest, store: Store) -> ResetResponse:
    """Clear a session's history, creating the session if it is unknown."""
    if not request.session_id:
        raise InvalidRequest("Missing sessionId")
    store.reset_history(request.session_id)
    return ResetResponse(ok=True)


# Admin endpoint for monitoring
@router.get("/stats")
async def get_stats(store: Store) -> SessionStats:
    """Get session store statistics."""
    return SessionStats(**store.get_stats())
