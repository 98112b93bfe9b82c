"""Pytest configuration and fixtures."""

import asyncio
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from chat_relay.api.files import get_upload_relay
from chat_relay.llm.chat.models import FileReference, Turn
from chat_relay.llm.chat.store import InMemorySessionStore, get_session_store
from chat_relay.llm.gemini_client import get_gemini_client
from chat_relay.main import app
from chat_relay.storage.upload_relay import UploadRelay


class FakeGeminiClient:
    """Stands in for GeminiClient; records every call it receives."""

    def __init__(self) -> None:
        self.calls: list[list[Turn]] = []
        self.uploads: list[dict] = []
        self.error: Exception | None = None
        self.failing_uploads: set[str] = set()
        self.delay = 0.0

    async def generate_reply(self, contents: list[Turn]) -> str:
        self.calls.append(list(contents))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return f"reply {len(self.calls)}"

    async def upload_file(
        self,
        path: Path,
        mime_type: str,
        display_name: str | None = None,
    ) -> FileReference:
        self.uploads.append(
            {
                "path": Path(path),
                "content": Path(path).read_bytes(),
                "mime_type": mime_type,
                "display_name": display_name,
            }
        )
        if display_name in self.failing_uploads:
            raise RuntimeError(f"storage rejected {display_name}")
        return FileReference(
            uri=f"https://generativelanguage.example/files/{len(self.uploads)}",
            mime_type=mime_type,
            display_name=display_name,
        )


@pytest.fixture
def fake_gemini() -> FakeGeminiClient:
    """A fake Gemini client."""
    return FakeGeminiClient()


@pytest.fixture
def store() -> InMemorySessionStore:
    """A fresh session store with expiry disabled."""
    return InMemorySessionStore(session_ttl_minutes=0)


@pytest.fixture
async def client(
    store: InMemorySessionStore,
    fake_gemini: FakeGeminiClient,
    tmp_path: Path,
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client wired to the fake Gemini client."""
    app.dependency_overrides[get_session_store] = lambda: store
    app.dependency_overrides[get_gemini_client] = lambda: fake_gemini
    app.dependency_overrides[get_upload_relay] = lambda: UploadRelay(
        fake_gemini, tmp_dir=str(tmp_path)
    )

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides = {}
