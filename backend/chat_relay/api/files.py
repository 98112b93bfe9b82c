"""API route for relaying file uploads to Gemini."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile

from chat_relay.llm.chat.models import UploadResponse
from chat_relay.llm.gemini_client import GeminiClient, get_gemini_client
from chat_relay.storage.upload_relay import UploadRelay

logger = logging.getLogger(__name__)

router = APIRouter()


def get_upload_relay(
    client: Annotated[GeminiClient | None, Depends(get_gemini_client)],
) -> UploadRelay:
    """Build the upload relay over the shared Gemini client."""
    return UploadRelay(client)


@router.post("/upload")
async def upload_files(
    relay: Annotated[UploadRelay, Depends(get_upload_relay)],
    files: Annotated[
        list[UploadFile] | None, File(description="Files to upload")
    ] = None,
) -> UploadResponse:
    """Upload files to Gemini file storage.

    Returns one file reference per file, to be passed back in /chat.

    Limits:
    - Maximum 10 files per upload
    - If any file fails, the whole request fails
    """
    uploaded = await relay.upload_files(files or [])
    logger.info(f"Relayed {len(uploaded)} file(s) to Gemini")
    return UploadResponse(files=uploaded)
