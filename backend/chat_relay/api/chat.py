"""Chat API endpoint for multi-turn conversations."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from chat_relay.llm.chat.models import ChatRequest, ChatResponse
from chat_relay.llm.chat.relay import ChatRelay
from chat_relay.llm.chat.store import InMemorySessionStore, get_session_store
from chat_relay.llm.gemini_client import GeminiClient, get_gemini_client

logger = logging.getLogger(__name__)

router = APIRouter()


def get_chat_relay(
    store: Annotated[InMemorySessionStore, Depends(get_session_store)],
    client: Annotated[GeminiClient | None, Depends(get_gemini_client)],
) -> ChatRelay:
    """Build the chat relay over the shared store and Gemini client."""
    return ChatRelay(store, client)


@router.post("/chat")
async def chat(
    request: ChatRequest,
    relay: Annotated[ChatRelay, Depends(get_chat_relay)],
) -> ChatResponse:
    """Send one user turn and return the model's reply.

    The turn may carry text, file references from /upload, or both.
    Validation errors return 400 and upstream failures 500.
    """
    reply = await relay.converse(
        session_id=request.session_id,
        text=request.text,
        files=request.files,
    )
    return ChatResponse(text=reply)
