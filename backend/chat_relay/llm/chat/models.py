"""Pydantic models for chat sessions, turns and file references."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class WireModel(BaseModel):
    """Base for models that travel over the API in camelCase."""

    model_config = ConfigDict(populate_by_name=True)


class Role(str, Enum):
    """Role of a turn's author."""

    USER = "user"
    MODEL = "model"


class TextPart(WireModel):
    """Plain text content item."""

    text: str


class FileData(WireModel):
    """Pointer to a file previously stored with the provider."""

    file_uri: str = Field(alias="fileUri")
    mime_type: str = Field(alias="mimeType")


class FilePart(WireModel):
    """File-reference content item."""

    file_data: FileData = Field(alias="fileData")


ContentItem = TextPart | FilePart


class Turn(WireModel):
    """One conversational entry in a session history."""

    role: Role
    parts: list[ContentItem]

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)


History = list[Turn]


class FileReference(WireModel):
    """Provider handle for an uploaded file, passed back by the client."""

    uri: str
    mime_type: str = Field(alias="mimeType")
    display_name: str | None = Field(default=None, alias="displayName")

    def to_part(self) -> FilePart:
        """Build the content item that points the model at this file."""
        return FilePart(file_data=FileData(file_uri=self.uri, mime_type=self.mime_type))


# API request/response models


class CreateSessionResponse(WireModel):
    """Response after creating a session."""

    session_id: str = Field(alias="sessionId")


class HistoryResponse(WireModel):
    """Stored history for a session."""

    history: list[Turn]


class ResetRequest(WireModel):
    """Request to clear a session's history."""

    session_id: str | None = Field(default=None, alias="sessionId")


class ResetResponse(WireModel):
    ok: bool = True


class ChatRequest(WireModel):
    """One user turn addressed to a session.

    Presence of ``session_id`` and content is checked by the chat relay so
    that both failures surface as ``InvalidRequest``.
    """

    session_id: str | None = Field(default=None, alias="sessionId")
    text: str | None = None
    files: list[FileReference] = Field(default_factory=list)


class ChatResponse(WireModel):
    """The model's reply to a chat turn."""

    text: str


class UploadResponse(WireModel):
    """File references for every uploaded file, in upload order."""

    files: list[FileReference]


class SessionStats(WireModel):
    """Session store statistics."""

    active_sessions: int = Field(alias="activeSessions")
    session_ttl_minutes: int = Field(alias="sessionTtlMinutes")
    cleanup_task_running: bool = Field(alias="cleanupTaskRunning")
