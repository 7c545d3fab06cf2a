"""Tests for neuravision.core.config — configuration management.

Tests cover:
- Default values for all configuration fields.
- Environment variable overrides via the NEURAVISION_ prefix.
- GOOGLE_API_KEY / GEMINI_API_KEY lookup for the AI credential.
- Pydantic validation constraints (port range, log level literals).
"""

from __future__ import annotations

import pytest

from neuravision.core.config import NeuravisionConfig


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every variable that could leak into the config under test."""
    for name in (
        "GOOGLE_API_KEY",
        "GEMINI_API_KEY",
        "NEURAVISION_GOOGLE_API_KEY",
        "NEURAVISION_SERVER_PORT",
        "NEURAVISION_ENHANCEMENT_MODEL",
        "NEURAVISION_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestConfigDefaults:
    """Verify that NeuravisionConfig provides sensible defaults."""

    def test_defaults(self, clean_env):
        cfg = NeuravisionConfig(_env_file=None)
        assert cfg.google_api_key is None
        assert cfg.ai_enabled is False
        assert cfg.enhancement_model == "gemini-2.5-flash"
        assert cfg.api_prefix == "/api"
        assert cfg.server_port == 5000
        assert cfg.cors_origins == ["*"]
        assert cfg.default_page_size == 20
        assert cfg.log_level == "INFO"


class TestConfigEnvironment:
    """Verify environment variable loading."""

    def test_google_api_key(self, clean_env):
        clean_env.setenv("GOOGLE_API_KEY", "google-key")
        cfg = NeuravisionConfig(_env_file=None)
        assert cfg.google_api_key == "google-key"
        assert cfg.ai_enabled is True

    def test_gemini_api_key_fallback(self, clean_env):
        clean_env.setenv("GEMINI_API_KEY", "gemini-key")
        assert NeuravisionConfig(_env_file=None).google_api_key == "gemini-key"

    def test_google_key_preferred_over_gemini_key(self, clean_env):
        clean_env.setenv("GOOGLE_API_KEY", "google-key")
        clean_env.setenv("GEMINI_API_KEY", "gemini-key")
        assert NeuravisionConfig(_env_file=None).google_api_key == "google-key"

    def test_prefixed_override(self, clean_env):
        clean_env.setenv("NEURAVISION_SERVER_PORT", "8080")
        clean_env.setenv("NEURAVISION_ENHANCEMENT_MODEL", "gemini-pro")
        cfg = NeuravisionConfig(_env_file=None)
        assert cfg.server_port == 8080
        assert cfg.enhancement_model == "gemini-pro"

    def test_blank_key_disables_ai(self, clean_env):
        assert NeuravisionConfig(_env_file=None, google_api_key="   ").ai_enabled is False


class TestConfigValidation:
    """Verify Pydantic validation constraints on config fields."""

    def test_invalid_port_too_low(self, clean_env):
        with pytest.raises(Exception):
            NeuravisionConfig(_env_file=None, server_port=80)

    def test_invalid_port_too_high(self, clean_env):
        with pytest.raises(Exception):
            NeuravisionConfig(_env_file=None, server_port=70000)

    def test_invalid_log_level(self, clean_env):
        with pytest.raises(Exception):
            NeuravisionConfig(_env_file=None, log_level="TRACE")

    def test_page_size_must_be_positive(self, clean_env):
        with pytest.raises(Exception):
            NeuravisionConfig(_env_file=None, default_page_size=0)
