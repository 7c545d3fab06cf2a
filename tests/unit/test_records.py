"""Tests for neuravision.core.records — Pydantic record and payload models.

Tests cover:
- camelCase wire names on both input and output.
- Shared generation fields between the two image payloads.
- Serialisation of stored records with explicit nulls.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from neuravision.core.records import (
    GenerationFields,
    Image,
    InsertImage,
    InsertSavedImage,
    ModerationStatus,
    SavedImage,
)


class TestInsertPayloads:
    """Test the insert payload models."""

    def test_image_payloads_share_generation_fields(self):
        assert issubclass(InsertImage, GenerationFields)
        assert issubclass(InsertSavedImage, GenerationFields)

    def test_camel_case_input(self):
        payload = InsertImage.model_validate(
            {
                "prompt": "p",
                "negativePrompt": "n",
                "model": "m",
                "width": 64,
                "height": 64,
                "imageData": "d",
                "artStyle": "s",
                "userDisplayName": "u",
            }
        )
        assert payload.negative_prompt == "n"
        assert payload.user_display_name == "u"

    def test_saved_image_requires_user_id(self):
        with pytest.raises(ValidationError):
            InsertSavedImage(
                prompt="p", model="m", width=1, height=1, image_data="d", art_style="s"
            )


class TestStoredRecords:
    """Test serialisation of stored records."""

    def test_image_dumps_camel_case_with_nulls(self):
        image = Image(
            id="img-1",
            prompt="p",
            negative_prompt=None,
            model="m",
            width=512,
            height=512,
            image_data="d",
            art_style="s",
            user_display_name=None,
            created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
        )
        dumped = image.model_dump(by_alias=True, mode="json")
        assert dumped["negativePrompt"] is None
        assert dumped["userDisplayName"] is None
        assert dumped["moderationStatus"] == "approved"
        assert dumped["likeCount"] == 0
        assert dumped["createdAt"].startswith("2025-01-01T00:00:00")

    def test_saved_image_dumps_original_image_id(self):
        saved = SavedImage(
            id="s-1",
            user_id="u",
            prompt="p",
            negative_prompt=None,
            model="m",
            width=1,
            height=1,
            image_data="d",
            art_style="s",
            original_image_id=None,
            created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
        )
        dumped = saved.model_dump(by_alias=True)
        assert "originalImageId" in dumped
        assert dumped["originalImageId"] is None
        assert dumped["userId"] == "u"

    def test_like_count_cannot_be_negative(self):
        with pytest.raises(ValidationError):
            Image(
                id="x",
                prompt="p",
                negative_prompt=None,
                model="m",
                width=1,
                height=1,
                image_data="d",
                art_style="s",
                user_display_name=None,
                created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
                like_count=-1,
            )

    def test_moderation_status_values(self):
        assert {s.value for s in ModerationStatus} == {"approved", "pending", "rejected"}
