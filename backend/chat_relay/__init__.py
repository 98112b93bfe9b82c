"""Gemini chat relay backend."""
