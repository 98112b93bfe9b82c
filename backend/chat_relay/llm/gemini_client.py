"""Gemini client wrapper for chat generation and file storage."""

import logging
import os
from pathlib import Path

from google import genai
from google.genai import types

from chat_relay.llm.chat.models import FileReference, TextPart, Turn

logger = logging.getLogger(__name__)

# Model to use
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")


def _api_key_from_env() -> str | None:
    return os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")


def to_content(turn: Turn) -> types.Content:
    """Convert a stored turn into the SDK's content type."""
    parts: list[types.Part] = []
    for part in turn.parts:
        if isinstance(part, TextPart):
            parts.append(types.Part(text=part.text))
        else:
            parts.append(
                types.Part(
                    file_data=types.FileData(
                        file_uri=part.file_data.file_uri,
                        mime_type=part.file_data.mime_type,
                    )
                )
            )
    return types.Content(role=turn.role, parts=parts)


class GeminiClient:
    """Wrapper around Google GenAI client for chat turns and uploads.

    Calls are made once; there is no retry or backoff. Errors from the SDK
    propagate to the caller unchanged.
    """

    def __init__(self, api_key: str | None = None, model: str = GEMINI_MODEL):
        """Initialize the client.

        Args:
            api_key: Gemini API key. If not provided, uses GEMINI_API_KEY
                (or GOOGLE_API_KEY) env var.
            model: Model used for generation.
        """
        self.api_key = api_key or _api_key_from_env()
        if not self.api_key:
            raise ValueError(
                "Gemini API key required. Set GEMINI_API_KEY environment variable "
                "or pass api_key parameter."
            )
        self.model = model
        self._client = genai.Client(api_key=self.api_key)

    async def generate_reply(self, contents: list[Turn]) -> str:
        """Generate the model's next turn for a conversation.

        The whole conversation is sent on every call; no chat object is
        kept on the provider side between calls.

        Args:
            contents: Prior history followed by the new user turn.

        Returns:
            The reply text.

        Raises:
            ValueError: If the response carries no text (e.g. it was blocked).
        """
        response = await self._client.aio.models.generate_content(
            model=self.model,
            contents=[to_content(turn) for turn in contents],
        )

        text = response.text
        if text is None:
            raise ValueError("Gemini response contained no text")
        return text

    async def upload_file(
        self,
        path: Path,
        mime_type: str,
        display_name: str | None = None,
    ) -> FileReference:
        """Upload a local file to Gemini file storage.

        Args:
            path: Local file to upload.
            mime_type: MIME type declared for the file.
            display_name: Name shown for the file, usually the original filename.

        Returns:
            Reference to the stored file.
        """
        uploaded = await self._client.aio.files.upload(
            file=str(path),
            config=types.UploadFileConfig(
                mime_type=mime_type,
                display_name=display_name,
            ),
        )

        if not uploaded.uri:
            raise ValueError(f"Gemini returned no URI for uploaded file {display_name}")

        return FileReference(
            uri=uploaded.uri,
            mime_type=uploaded.mime_type or mime_type,
            display_name=uploaded.display_name or display_name,
        )


# Global client instance (lazy initialization)
_gemini_client: GeminiClient | None = None


def get_gemini_client() -> GeminiClient | None:
    """Get or create the global Gemini client instance.

    Returns None if no API key is set; relay calls then fail instead of
    the server refusing to start.
    """
    global _gemini_client
    if _gemini_client is None:
        try:
            _gemini_client = GeminiClient()
        except ValueError:
            return None
    return _gemini_client


def gemini_available() -> bool:
    """Check if Gemini is available (API key is set)."""
    return bool(_api_key_from_env())
