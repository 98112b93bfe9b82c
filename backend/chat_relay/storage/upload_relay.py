"""Upload relay that forwards client files to Gemini file storage.

Each file is staged in a temporary file for the SDK upload and the staged
copy is removed afterwards, whether or not the upload succeeded.
"""

import logging
import mimetypes
import os
import re
import tempfile
from pathlib import Path

from fastapi import UploadFile

from chat_relay.llm.chat.errors import InvalidRequest, RelayFailure
from chat_relay.llm.chat.models import FileReference
from chat_relay.llm.gemini_client import GeminiClient

logger = logging.getLogger(__name__)

# Configuration
UPLOAD_TMP_DIR = os.getenv("UPLOAD_TMP_DIR") or None  # None -> system temp dir
MAX_FILES_PER_UPLOAD = 10
DEFAULT_MIME_TYPE = "application/octet-stream"

FAILURE_MESSAGE = "Upload failed"


def resolve_mime_type(filename: str | None, content_type: str | None) -> str:
    """Pick the MIME type to declare for a file.

    Uses the client-declared content type, then a guess from the filename.
    """
    if content_type:
        return content_type
    if filename:
        guessed, _ = mimetypes.guess_type(filename)
        if guessed:
            return guessed
    return DEFAULT_MIME_TYPE


def _staging_suffix(filename: str | None) -> str:
    """Keep a short, safe extension so the staged file keeps its type hint."""
    if not filename:
        return ""
    suffix = Path(filename).suffix
    if re.fullmatch(r"\.[A-Za-z0-9]{1,10}", suffix):
        return suffix
    return ""


class UploadRelay:
    """Forwards uploaded files to Gemini and returns their references.

    Partial failures are all-or-nothing: the first file that fails aborts
    the batch. Files already stored upstream by then are not deleted.
    """

    def __init__(self, client: GeminiClient | None, tmp_dir: str | None = UPLOAD_TMP_DIR):
        """Initialize the relay.

        Args:
            client: Gemini client, or None when no API key is configured.
            tmp_dir: Directory for staged files. Defaults to the system temp dir.
        """
        self.client = client
        self.tmp_dir = tmp_dir

    async def relay_file(
        self,
        filename: str | None,
        content: bytes,
        content_type: str | None = None,
    ) -> FileReference:
        """Stage one file locally and upload it.

        Args:
            filename: Original filename, used as the display name.
            content: The file content as bytes.
            content_type: Optional declared MIME type.

        Returns:
            Reference to the file in Gemini storage.

        Raises:
            RelayFailure: If Gemini is unavailable or the upload fails.
        """
        if self.client is None:
            logger.error("Upload relay called without a Gemini API key configured")
            raise RelayFailure(FAILURE_MESSAGE)

        mime_type = resolve_mime_type(filename, content_type)

        staged_path: Path | None = None
        try:
            with tempfile.NamedTemporaryFile(
                dir=self.tmp_dir,
                prefix="upload_",
                suffix=_staging_suffix(filename),
                delete=False,
            ) as staged:
                staged_path = Path(staged.name)
                staged.write(content)

            reference = await self.client.upload_file(
                staged_path,
                mime_type=mime_type,
                display_name=filename,
            )
        except Exception as e:
            logger.exception(f"Upload of {filename} failed: {e}")
            raise RelayFailure(FAILURE_MESSAGE) from e
        finally:
            if staged_path is not None:
                staged_path.unlink(missing_ok=True)

        logger.info(f"Uploaded {filename} ({len(content)} bytes) as {reference.uri}")
        return reference

    async def upload_files(self, files: list[UploadFile]) -> list[FileReference]:
        """Upload a batch of files in order.

        Args:
            files: Files received from the client.

        Returns:
            One reference per file, in the order given.

        Raises:
            InvalidRequest: If more than MAX_FILES_PER_UPLOAD files are sent.
            RelayFailure: If any single upload fails.
        """
        if len(files) > MAX_FILES_PER_UPLOAD:
            raise InvalidRequest(
                f"Too many files. Maximum is {MAX_FILES_PER_UPLOAD} files per upload."
            )

        uploaded: list[FileReference] = []
        for file in files:
            try:
                try:
                    content = await file.read()
                except Exception as e:
                    logger.exception(f"Reading upload {file.filename} failed: {e}")
                    raise RelayFailure(FAILURE_MESSAGE) from e

                uploaded.append(
                    await self.relay_file(file.filename, content, file.content_type)
                )
            except RelayFailure:
                if uploaded:
                    logger.warning(
                        f"Aborting upload batch after {len(uploaded)} stored file(s); "
                        "stored files are left in Gemini storage"
                    )
                raise
            finally:
                await file.close()

        return uploaded
