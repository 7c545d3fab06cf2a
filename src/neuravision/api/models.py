"""Pydantic request and response models for the NeuraVision API.

Entity payloads and records live in :mod:`neuravision.core.records`; this
module only holds the shapes of the non-CRUD endpoints.

Models
------
EnhancePromptRequest
    Payload for ``POST /api/enhance-prompt``.
EnhancePromptResponse
    Result of ``POST /api/enhance-prompt``.
HealthResponse
    Result of ``GET /api/health``.
DeleteResponse
    Result of ``DELETE /api/saved-images/{id}``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class EnhancePromptRequest(BaseModel):
    """Request body for ``POST /api/enhance-prompt``.

    Attributes:
        prompt: The prompt to enhance.  Must be a string containing at least
            one non-whitespace character.
    """

    model_config = ConfigDict(strict=True, extra="ignore")

    prompt: str = Field(..., description="Prompt text to enhance.")

    @field_validator("prompt")
    @classmethod
    def _prompt_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Prompt must not be empty")
        return value


class EnhancePromptResponse(BaseModel):
    """Response body for ``POST /api/enhance-prompt``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    enhanced_prompt: str


class HealthResponse(BaseModel):
    """Response body for ``GET /api/health``."""

    status: str = "ok"
    message: str = "Server is running"


class DeleteResponse(BaseModel):
    """Response body for ``DELETE /api/saved-images/{id}``."""

    success: bool
    message: str
