"""Tests for the upload API endpoint."""

import tempfile
from pathlib import Path

import pytest
from httpx import AsyncClient


class TestUploadEndpoint:
    """Tests for POST /api/upload."""

    @pytest.mark.asyncio
    async def test_upload_returns_references(self, client: AsyncClient, fake_gemini):
        response = await client.post(
            "/api/upload",
            files=[
                ("files", ("notes.txt", b"some notes", "text/plain")),
                ("files", ("photo.png", b"\x89PNG", "image/png")),
            ],
        )

        assert response.status_code == 200
        assert response.json() == {
            "files": [
                {
                    "uri": "https://generativelanguage.example/files/1",
                    "mimeType": "text/plain",
                    "displayName": "notes.txt",
                },
                {
                    "uri": "https://generativelanguage.example/files/2",
                    "mimeType": "image/png",
                    "displayName": "photo.png",
                },
            ]
        }
        assert fake_gemini.uploads[1]["content"] == b"\x89PNG"

    @pytest.mark.asyncio
    async def test_upload_then_chat(self, client: AsyncClient, fake_gemini):
        session_id = (await client.post("/api/session")).json()["sessionId"]
        upload = await client.post(
            "/api/upload",
            files=[("files", ("report.pdf", b"%PDF-1.4", "application/pdf"))],
        )

        response = await client.post(
            "/api/chat",
            json={"sessionId": session_id, "text": "summarize", "files": upload.json()["files"]},
        )

        assert response.status_code == 200
        sent_turn = fake_gemini.calls[0][-1]
        assert sent_turn.parts[0].text == "summarize"
        assert sent_turn.parts[1].file_data.mime_type == "application/pdf"

    @pytest.mark.asyncio
    async def test_too_many_files(self, client: AsyncClient, fake_gemini):
        files = [("files", (f"{i}.txt", b"x", "text/plain")) for i in range(11)]

        response = await client.post("/api/upload", files=files)

        assert response.status_code == 400
        assert fake_gemini.uploads == []

    @pytest.mark.asyncio
    async def test_upload_failure(self, client: AsyncClient, fake_gemini, tmp_path: Path):
        fake_gemini.failing_uploads.add("bad.txt")

        response = await client.post(
            "/api/upload",
            files=[
                ("files", ("good.txt", b"ok", "text/plain")),
                ("files", ("bad.txt", b"nope", "text/plain")),
            ],
        )

        assert response.status_code == 500
        assert response.json() == {"error": "Upload failed"}
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_staging_failure_returns_error_envelope(
        self, client: AsyncClient, tmp_path: Path, monkeypatch
    ):
        real_tempfile = tempfile.NamedTemporaryFile

        def disk_full_tempfile(*args, **kwargs):
            staged = real_tempfile(*args, **kwargs)

            def write(data):
                raise OSError(28, "No space left on device")

            staged.write = write
            return staged

        monkeypatch.setattr(tempfile, "NamedTemporaryFile", disk_full_tempfile)

        response = await client.post(
            "/api/upload",
            files=[("files", ("a.txt", b"data", "text/plain"))],
        )

        assert response.status_code == 500
        assert response.json() == {"error": "Upload failed"}
        assert list(tmp_path.iterdir()) == []
