"""ChatRelay forwards chat turns to Gemini and keeps session history."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from chat_relay.config import env_int
from chat_relay.llm.chat.errors import InvalidRequest, RelayFailure
from chat_relay.llm.chat.history import DEFAULT_MAX_TURNS, trim_history
from chat_relay.llm.chat.models import (
    ContentItem,
    FileReference,
    Role,
    TextPart,
    Turn,
)
from chat_relay.llm.chat.store import SessionStore

if TYPE_CHECKING:
    from chat_relay.llm.gemini_client import GeminiClient

logger = logging.getLogger(__name__)

CHAT_MAX_TURNS = env_int("CHAT_MAX_TURNS", DEFAULT_MAX_TURNS, minimum=1)

# Client-facing messages; details go to the server log only
MISSING_SESSION_MESSAGE = "Missing sessionId"
MISSING_CONTENT_MESSAGE = "Missing content"
FAILURE_MESSAGE = "Request failed"


def build_user_turn(text: str | None, files: list[FileReference]) -> Turn:
    """Build the user turn: text first, then one part per file in order."""
    parts: list[ContentItem] = []
    if text:
        parts.append(TextPart(text=text))
    for ref in files:
        parts.append(ref.to_part())
    return Turn(role=Role.USER, parts=parts)


class ChatRelay:
    """Relays one chat turn at a time for a session.

    Each call rebuilds the conversation from the stored history, so the
    provider holds no state between requests. Turns for the same session
    are serialized by the store's per-session lock; history is written back
    only after a successful reply, so a failed call leaves it untouched.
    """

    def __init__(
        self,
        store: SessionStore,
        client: GeminiClient | None,
        max_turns: int = CHAT_MAX_TURNS,
    ):
        self.store = store
        self.client = client
        self.max_turns = max_turns

    async def converse(
        self,
        session_id: str | None,
        text: str | None = None,
        files: list[FileReference] | None = None,
    ) -> str:
        """Send a user turn and return the model's reply.

        Args:
            session_id: Session the turn belongs to. Unknown ids start from
                an empty history.
            text: Optional message text.
            files: File references from earlier uploads.

        Returns:
            The reply text.

        Raises:
            InvalidRequest: If the session id is missing or the turn is empty.
            RelayFailure: If Gemini is unavailable or the call fails.
        """
        files = files or []
        if not session_id:
            raise InvalidRequest(MISSING_SESSION_MESSAGE)
        if not text and not files:
            raise InvalidRequest(MISSING_CONTENT_MESSAGE)

        if self.client is None:
            logger.error("Chat relay called without a Gemini API key configured")
            raise RelayFailure(FAILURE_MESSAGE)

        user_turn = build_user_turn(text, files)

        async with self.store.lock(session_id):
            history = self.store.get_history(session_id)

            try:
                reply = await self.client.generate_reply([*history, user_turn])
            except Exception as e:
                logger.exception(f"Chat relay failed for session {session_id}: {e}")
                raise RelayFailure(FAILURE_MESSAGE) from e

            model_turn = Turn(role=Role.MODEL, parts=[TextPart(text=reply)])
            updated = trim_history([*history, user_turn, model_turn], self.max_turns)
            self.store.replace_history(session_id, updated)

        logger.info(
            f"Relayed turn for session {session_id} "
            f"({len(user_turn.parts)} part(s), history={len(updated)})"
        )
        return reply
