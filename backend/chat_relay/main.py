"""FastAPI application entry point."""

import logging
import os
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from chat_relay.llm.chat.errors import RelayError
from chat_relay.llm.chat.store import init_session_store, shutdown_session_store
from chat_relay.llm.gemini_client import gemini_available

# Configure logging
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stdout,
)

logger = logging.getLogger(__name__)

STATIC_DIR = Path(os.getenv("STATIC_DIR", "public"))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown."""
    # Startup
    if not gemini_available():
        logger.warning("GEMINI_API_KEY is not set; chat and upload requests will fail")

    await init_session_store()

    yield

    # Shutdown
    await shutdown_session_store()


app = FastAPI(
    title="Gemini Chat Relay",
    description="Session-based chat and file upload relay for Google Gemini",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RelayError)
async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    """Return relay errors as {"error": message} with the error's status."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies share the relay error envelope."""
    logger.info(f"Rejected malformed request to {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request"})


@app.get("/health")
async def health_check() -> dict[str, str | bool]:
    """Health check endpoint."""
    return {"status": "healthy", "gemini_configured": gemini_available()}


# Import and include routers after app is created to avoid circular imports
from chat_relay.api import chat, files, sessions  # noqa: E402

app.include_router(sessions.router, prefix="/api", tags=["sessions"])
app.include_router(chat.router, prefix="/api", tags=["chat"])
app.include_router(files.router, prefix="/api", tags=["files"])

# Static frontend, mounted last so API routes take precedence
if STATIC_DIR.is_dir():
    app.mount("/", StaticFiles(directory=STATIC_DIR, html=True), name="static")
else:
    logger.info(f"Static directory {STATIC_DIR} not found, not serving static files")
