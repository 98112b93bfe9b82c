"""Storage module for relaying file uploads to Gemini."""

from chat_relay.storage.upload_relay import MAX_FILES_PER_UPLOAD, UploadRelay

__all__ = ["MAX_FILES_PER_UPLOAD", "UploadRelay"]
