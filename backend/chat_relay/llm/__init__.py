"""LLM integration module for the Gemini chat relay."""

from chat_relay.llm.gemini_client import GeminiClient, gemini_available, get_gemini_client

__all__ = [
    "GeminiClient",
    "get_gemini_client",
    "gemini_available",
]
