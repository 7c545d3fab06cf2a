"""Error types and FastAPI exception handlers for the NeuraVision API.

Every error response shares one body shape::

    {"error": "<short message>", "details": "<optional detail>"}

Route handlers raise an :class:`ApiError` subclass and the handlers registered
by :func:`register_error_handlers` turn it into a JSON response.  Anything else
that escapes a route body is converted by :func:`guard` into an
:class:`UnexpectedError`, so no request can take the process down.
Errors raised by the framework itself (unknown routes, unsupported methods,
bodies that cannot be decoded) are rendered in the same shape.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from neuravision.core.validation import ValidationError, summarize_errors

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base class for errors that map onto an HTTP status code.

    Attributes:
        status_code: HTTP status returned to the client.
        error: Short human-readable message.
        details: Optional extra context (validation summary, upstream message).
    """

    status_code = 500

    def __init__(self, error: str, details: str | None = None):
        super().__init__(error if details is None else f"{error}: {details}")
        self.error = error
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.error}
        if self.details is not None:
            body["details"] = self.details
        return body


class BadRequestError(ApiError):
    """Malformed or missing request fields (400)."""

    status_code = 400

    @classmethod
    def from_validation(cls, exc: ValidationError) -> BadRequestError:
        return cls("Invalid request data", details=exc.details)


class NotFoundError(ApiError):
    """Lookup or delete miss (404)."""

    status_code = 404


class ServiceUnavailableError(ApiError):
    """An external service is not configured (503)."""

    status_code = 503


class UpstreamServiceError(ApiError):
    """An external service call failed (500)."""

    status_code = 500


class UnexpectedError(ApiError):
    """Any other failure inside a route (500)."""

    status_code = 500


@contextmanager
def guard(message: str) -> Iterator[None]:
    """Convert unexpected exceptions raised in the block into :class:`UnexpectedError`.

    :class:`ApiError` instances pass through unchanged.

    Args:
        message: Generic message returned to the client, e.g.
            ``"Failed to save image"``.
    """
    try:
        yield
    except ApiError:
        raise
    except Exception as e:
        logger.exception(f"{message}: {e}")
        raise UnexpectedError(message, details=str(e)) from e


async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} -> {exc.status_code}: {exc}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    error = BadRequestError.from_validation(summarize_errors(exc.errors()))
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=exc.headers,
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the JSON error handlers on *app*."""
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
