"""Configuration management for the NeuraVision backend.

This module provides centralized configuration management using Pydantic Settings.
Configuration is loaded from environment variables with the NEURAVISION_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (NEURAVISION_* prefix)
2. .env file in the working directory
3. Default values defined in NeuravisionConfig

The Google API key is the one exception to the prefix rule: it is read from
``GOOGLE_API_KEY`` first and ``GEMINI_API_KEY`` second, matching the names
used by the google-genai SDK itself.

Example .env file:
    GOOGLE_API_KEY=your-key-here
    NEURAVISION_ENHANCEMENT_MODEL=gemini-2.5-flash
    NEURAVISION_SERVER_PORT=5000
    NEURAVISION_LOG_LEVEL=DEBUG

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
:func:`neuravision.api.main.create_app` uses it unless an explicit instance
is passed, which is how the test-suite isolates configuration.

Usage Example
-------------
    from neuravision.core.config import config

    print(config.ai_enabled)
    print(config.server_port)
"""

from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class NeuravisionConfig(BaseSettings):
    """Main configuration for the NeuraVision backend.

    Attributes
    ----------
    AI Settings:
        google_api_key : str | None
            Credential for the generative text service.  When absent the
            prompt-enhancement endpoint answers 503.
        enhancement_model : str
            Model used to enhance prompts.

    HTTP Settings:
        api_prefix : str
            Common prefix for every route.
        server_host : str
            Bind address for uvicorn.
        server_port : int
            Bind port for uvicorn (1024-65535).
        cors_origins : list[str]
            Origins allowed by the CORS middleware.

    Gallery Settings:
        default_page_size : int
            Page size used when ``limit`` is missing or unusable.

    Logging:
        log_level : Literal["DEBUG", "INFO", "WARNING", "ERROR"]
            Root log level applied by the CLI entry point.

    Examples
    --------
        >>> cfg = NeuravisionConfig(google_api_key=None, _env_file=None)
        >>> cfg.ai_enabled
        False
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="NEURAVISION_",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # AI settings
    google_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "GOOGLE_API_KEY",
            "GEMINI_API_KEY",
            "NEURAVISION_GOOGLE_API_KEY",
            "google_api_key",
        ),
        description="API key for the Gemini text service",
    )
    enhancement_model: str = Field(
        default="gemini-2.5-flash",
        description="Gemini model used by the enhance-prompt endpoint",
    )

    # HTTP settings
    api_prefix: str = Field(
        default="/api",
        description="Prefix shared by all API routes",
    )
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address",
    )
    server_port: int = Field(
        default=5000,
        description="Server port",
        ge=1024,
        le=65535,
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Allowed CORS origins",
    )

    # Gallery settings
    default_page_size: int = Field(
        default=20,
        description="Page size when the limit query parameter is missing",
        ge=1,
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root log level",
    )

    @property
    def ai_enabled(self) -> bool:
        """Whether a usable Google API key is configured."""
        return bool(self.google_api_key and self.google_api_key.strip())


# Global configuration instance, loaded from the environment and .env file.
config = NeuravisionConfig()
