"""Pydantic models for the three record collections and their insert payloads.

Two families of models live here:

- **Insert payloads** (``InsertUser``, ``InsertImage``, ``InsertSavedImage``)
  describe what a client may send.  They are strict: strings must be
  strings and integers must be integral numbers, so ``"512"`` and ``512.5``
  are rejected for ``width`` while ``512.0`` is accepted as ``512``.
- **Stored records** (``User``, ``Image``, ``SavedImage``) describe what the
  store hands back, with the server-assigned ``id`` and ``created_at`` and
  every optional field present (``None`` when absent).

Attributes are snake_case in Python and camelCase on the wire
(``negative_prompt`` <-> ``negativePrompt``).  Both spellings are accepted on
input.

The insert payloads share their generation fields through
:class:`GenerationFields`, extended per entity with the fields only that
entity has.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ModerationStatus(str, Enum):
    """Moderation state of a community gallery image."""

    APPROVED = "approved"
    PENDING = "pending"
    REJECTED = "rejected"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class _InsertModel(_CamelModel):
    model_config = ConfigDict(strict=True, extra="ignore")


def _integral_float_to_int(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


# JSON numbers such as 512.0 count as integers; strings, bools and 512.5 do not.
PixelSize = Annotated[int, BeforeValidator(_integral_float_to_int)]


# ---------------------------------------------------------------------------
# Insert payloads.
# ---------------------------------------------------------------------------


class InsertUser(_InsertModel):
    """Payload for creating a user."""

    username: str = Field(..., min_length=1)
    password: str


class GenerationFields(_InsertModel):
    """Fields describing one generated image, shared by both image payloads.

    Attributes:
        prompt: The text prompt the image was generated from.  Must contain
            at least one non-whitespace character.
        negative_prompt: Optional text describing what was avoided.
        model: Identifier of the generating model.
        width: Image width in pixels.
        height: Image height in pixels.
        image_data: Opaque encoded image payload (typically base64).
        art_style: Art style label chosen by the user.
    """

    prompt: str
    negative_prompt: str | None = None
    model: str
    width: PixelSize
    height: PixelSize
    image_data: str
    art_style: str

    @field_validator("prompt")
    @classmethod
    def _prompt_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Prompt must not be empty")
        return value


class InsertImage(GenerationFields):
    """Payload for ``POST /api/images``."""

    user_display_name: str | None = None


class InsertSavedImage(GenerationFields):
    """Payload for ``POST /api/saved-images``.

    ``user_id`` is an opaque owner key and ``original_image_id`` an advisory
    reference to a community image; neither is checked for existence.
    """

    user_id: str
    original_image_id: str | None = None


# ---------------------------------------------------------------------------
# Stored records.
# ---------------------------------------------------------------------------


class User(_CamelModel):
    """A registered user."""

    id: str
    username: str
    password: str


class Image(_CamelModel):
    """A community gallery entry."""

    id: str
    prompt: str
    negative_prompt: str | None
    model: str
    width: int
    height: int
    image_data: str
    art_style: str
    user_display_name: str | None
    created_at: datetime
    moderation_status: ModerationStatus = ModerationStatus.APPROVED
    like_count: int = Field(default=0, ge=0)


class SavedImage(_CamelModel):
    """A per-user favourite."""

    id: str
    user_id: str
    prompt: str
    negative_prompt: str | None
    model: str
    width: int
    height: int
    image_data: str
    art_style: str
    original_image_id: str | None
    created_at: datetime
