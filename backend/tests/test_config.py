"""Tests for environment variable parsing."""

import logging

from chat_relay.config import env_int


class TestEnvInt:
    """Tests for env_int."""

    def test_unset_uses_default(self, monkeypatch):
        monkeypatch.delenv("CHAT_MAX_TURNS", raising=False)
        assert env_int("CHAT_MAX_TURNS", 40, minimum=1) == 40

    def test_blank_uses_default(self, monkeypatch):
        monkeypatch.setenv("CHAT_MAX_TURNS", "  ")
        assert env_int("CHAT_MAX_TURNS", 40, minimum=1) == 40

    def test_valid_value(self, monkeypatch):
        monkeypatch.setenv("CHAT_MAX_TURNS", "12")
        assert env_int("CHAT_MAX_TURNS", 40, minimum=1) == 12

    def test_non_numeric_falls_back_with_warning(self, monkeypatch, caplog):
        monkeypatch.setenv("SESSION_TTL_MINUTES", "thirty")

        with caplog.at_level(logging.WARNING, logger="chat_relay.config"):
            assert env_int("SESSION_TTL_MINUTES", 0) == 0

        assert "SESSION_TTL_MINUTES" in caplog.text

    def test_negative_max_turns_falls_back(self, monkeypatch, caplog):
        monkeypatch.setenv("CHAT_MAX_TURNS", "-3")

        with caplog.at_level(logging.WARNING, logger="chat_relay.config"):
            assert env_int("CHAT_MAX_TURNS", 40, minimum=1) == 40

        assert "below 1" in caplog.text

    def test_zero_below_minimum(self, monkeypatch):
        monkeypatch.setenv("PORT", "0")
        assert env_int("PORT", 3000, minimum=1) == 3000

    def test_zero_allowed_when_minimum_zero(self, monkeypatch):
        monkeypatch.setenv("SESSION_TTL_MINUTES", "0")
        assert env_int("SESSION_TTL_MINUTES", 15) == 0
