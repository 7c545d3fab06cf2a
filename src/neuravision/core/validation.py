"""Validation utilities for NeuraVision request payloads.

Mutating endpoints follow the same pipeline: validate the raw JSON body
against an insert model, normalise the free-text fields, then call the store.
The validation step is a pure function returning :class:`Valid` or
:class:`Invalid`, so handlers branch on the result instead of catching
exceptions.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from neuravision.core.records import InsertImage, InsertSavedImage, InsertUser

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)", re.ASCII)

_JSON_TYPE_NAMES = {
    type(None): "null",
    bool: "boolean",
    int: "number",
    float: "number",
    str: "string",
    list: "array",
}


class ValidationError(Exception):
    """User-friendly validation error.

    The ``details`` summary is intended to be returned to the client as-is.
    ``fields`` lists the offending field paths in wire (camelCase) spelling.
    """

    def __init__(self, details: str, fields: list[str] | None = None):
        super().__init__(details)
        self.details = details
        self.fields = fields or []


@dataclass(frozen=True)
class Valid(Generic[M]):
    """A payload that passed validation."""

    data: M


@dataclass(frozen=True)
class Invalid:
    """A payload that failed validation."""

    error: ValidationError


ValidationResult = Union[Valid[M], Invalid]


def _format_location(loc: tuple) -> str:
    return ".".join(str(part) for part in loc)


def summarize_errors(errors: Sequence[dict]) -> ValidationError:
    """Collapse a list of Pydantic error dicts into a single readable summary.

    Each problem renders as ``<message> at "<field>"`` and problems are joined
    with ``"; "``, e.g.::

        Validation error: Field required at "imageData"; Input should be a valid integer at "width"
    """
    problems = []
    fields = []
    for err in errors:
        location = _format_location(err.get("loc", ()))
        fields.append(location)
        if location:
            problems.append(f'{err["msg"]} at "{location}"')
        else:
            problems.append(err["msg"])
    return ValidationError("Validation error: " + "; ".join(problems), fields)


def validate(model_cls: type[M], payload: Any) -> ValidationResult:
    """Validate *payload* against *model_cls* without raising.

    Args:
        model_cls: Insert model to validate against.
        payload: Decoded JSON request body.

    Returns:
        :class:`Valid` wrapping the model instance, or :class:`Invalid`
        wrapping a :class:`ValidationError`.
    """
    if not isinstance(payload, dict):
        received = _JSON_TYPE_NAMES.get(type(payload), type(payload).__name__)
        return Invalid(ValidationError(f"Validation error: Expected object, received {received}"))

    try:
        return Valid(model_cls.model_validate(payload))
    except PydanticValidationError as exc:
        error = summarize_errors(exc.errors())
        logger.debug(f"{model_cls.__name__} rejected: {error.details}")
        return Invalid(error)


def validate_insert_user(payload: Any) -> ValidationResult:
    return validate(InsertUser, payload)


def validate_insert_image(payload: Any) -> ValidationResult:
    return validate(InsertImage, payload)


def validate_insert_saved_image(payload: Any) -> ValidationResult:
    return validate(InsertSavedImage, payload)


# ---------------------------------------------------------------------------
# Normalisation applied after validation and before the store call.
# ---------------------------------------------------------------------------


def _trimmed_or_none(text: str | None) -> str | None:
    if text is None:
        return None
    return text.strip() or None


def normalize_insert_image(data: InsertImage) -> InsertImage:
    """Trim prompt text and turn empty optional strings into ``None``."""
    return data.model_copy(
        update={
            "prompt": data.prompt.strip(),
            "negative_prompt": _trimmed_or_none(data.negative_prompt),
            "user_display_name": data.user_display_name or None,
        }
    )


def normalize_insert_saved_image(data: InsertSavedImage) -> InsertSavedImage:
    """Trim prompt text and turn empty optional strings into ``None``."""
    return data.model_copy(
        update={
            "prompt": data.prompt.strip(),
            "negative_prompt": _trimmed_or_none(data.negative_prompt),
            "original_image_id": data.original_image_id or None,
        }
    )


# ---------------------------------------------------------------------------
# Query parameters.
# ---------------------------------------------------------------------------


def parse_int_param(raw: str | None, default: int, minimum: int = 0) -> int:
    """Parse an integer query parameter, falling back to *default*.

    Like JavaScript's ``parseInt``, only the leading integer is read, so
    ``"2abc"`` gives 2 and ``"3.9"`` gives 3.  Missing values, text without a
    leading integer, and values below *minimum* yield *default*.  There is
    no upper bound.

    Args:
        raw: Raw query-string value, or ``None`` if absent.
        default: Value used when *raw* is unusable.
        minimum: Smallest accepted value.

    Returns:
        The parsed integer or *default*.
    """
    if raw is None:
        return default
    match = _LEADING_INT.match(raw)
    if match is None:
        return default
    value = int(match.group(1))
    return value if value >= minimum else default
