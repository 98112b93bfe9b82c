"""Session-based chat relay.

This module provides the core abstractions for session-based chat:
- SessionStore: Maps session ids to conversation histories
- trim_history: Keeps a history within a fixed number of turns
- ChatRelay: Sends history plus a new turn to Gemini and records the reply
"""

from chat_relay.llm.chat.errors import InvalidRequest, RelayError, RelayFailure
from chat_relay.llm.chat.history import trim_history
from chat_relay.llm.chat.models import (
    FileReference,
    History,
    Role,
    TextPart,
    Turn,
)
from chat_relay.llm.chat.relay import ChatRelay, build_user_turn
from chat_relay.llm.chat.store import (
    InMemorySessionStore,
    SessionStore,
    get_session_store,
)

__all__ = [
    "ChatRelay",
    "FileReference",
    "History",
    "InMemorySessionStore",
    "InvalidRequest",
    "RelayError",
    "RelayFailure",
    "Role",
    "SessionStore",
    "TextPart",
    "Turn",
    "build_user_turn",
    "get_session_store",
    "trim_history",
]
