"""NeuraVision Gallery Backend — FastAPI Application.

This module is the single entry point for the web application.  It defines
the :func:`create_app` factory, all REST API routes, the module-level ``app``
instance served by uvicorn, and the ``main()`` CLI function.

Architecture
------------
- **Configuration** comes from :class:`~neuravision.core.config.NeuravisionConfig`
  (environment variables and ``.env``).
- **Records** live in a :class:`~neuravision.core.storage.Storage` built by
  :func:`create_app` and kept on ``app.state``.  Handlers receive it through
  the :func:`get_storage` dependency, so tests can hand in their own store.
- **Prompt enhancement** is delegated to
  :class:`~neuravision.api.prompt_enhancer.PromptEnhancer`.  Without a Google
  API key the enhancer is ``None`` and the endpoint answers 503.
- **Errors** are raised as :class:`~neuravision.api.errors.ApiError`
  subclasses and rendered as ``{"error", "details"}`` JSON bodies.

Endpoints
---------
========  ===============================  ====================================
Method    Path                             Purpose
========  ===============================  ====================================
GET       ``/api/health``                  Liveness probe
POST      ``/api/enhance-prompt``          Rewrite a prompt with Gemini
POST      ``/api/images``                  Publish an image to the gallery
GET       ``/api/images``                  Paginated community gallery
GET       ``/api/images/{id}``             Single gallery image
POST      ``/api/saved-images``            Save an image to a user's favourites
GET       ``/api/saved-images``            Paginated favourites for ``userId``
GET       ``/api/saved-images/{id}``       Single favourite
DELETE    ``/api/saved-images/{id}``       Remove a favourite
========  ===============================  ====================================

Usage
-----
CLI (installed entry point)::

    neuravision

Direct invocation::

    python -m neuravision.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import APIRouter, Body, Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware

from neuravision import __version__
from neuravision.api.errors import (
    BadRequestError,
    NotFoundError,
    ServiceUnavailableError,
    guard,
    register_error_handlers,
)
from neuravision.api.models import (
    DeleteResponse,
    EnhancePromptRequest,
    EnhancePromptResponse,
    HealthResponse,
)
from neuravision.api.prompt_enhancer import PromptEnhancer
from neuravision.core.config import NeuravisionConfig, config
from neuravision.core.records import Image, SavedImage
from neuravision.core.storage import MemStorage, NotFound, Storage
from neuravision.core.validation import (
    Invalid,
    normalize_insert_image,
    normalize_insert_saved_image,
    parse_int_param,
    validate,
    validate_insert_image,
    validate_insert_saved_image,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Dependencies: resolve the per-app collaborators stored on ``app.state``.
# ---------------------------------------------------------------------------


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_enhancer(request: Request) -> PromptEnhancer | None:
    return request.app.state.enhancer


def get_settings(request: Request) -> NeuravisionConfig:
    return request.app.state.settings


def _page_params(
    limit: str | None, offset: str | None, settings: NeuravisionConfig
) -> tuple[int, int]:
    """Resolve ``limit``/``offset`` query strings to integers with defaults."""
    return (
        parse_int_param(limit, settings.default_page_size, minimum=1),
        parse_int_param(offset, 0),
    )


router = APIRouter()


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Report that the server is up."""
    return HealthResponse()


@router.post("/enhance-prompt", response_model=EnhancePromptResponse)
async def enhance_prompt(
    payload: Any = Body(default=None),
    enhancer: PromptEnhancer | None = Depends(get_enhancer),
) -> EnhancePromptResponse:
    """Rewrite a prompt into a more detailed image-generation prompt.

    The request is validated before the configuration check, so a bad
    payload is reported as 400 even when the AI service is disabled.  The
    store is never touched.

    Args:
        payload: JSON body ``{"prompt": str}``.
        enhancer: Configured enhancer, or ``None`` without an API key.

    Returns:
        ``{"enhancedPrompt": str}``.

    Raises:
        BadRequestError: 400 if ``prompt`` is missing, not a string, or blank.
        ServiceUnavailableError: 503 if no Google API key is configured.
        UpstreamServiceError: 500 if the Gemini call fails.
    """
    result = validate(EnhancePromptRequest, payload)
    if isinstance(result, Invalid):
        raise BadRequestError(
            "Prompt is required and must be a string",
            details=result.error.details,
        )

    if enhancer is None:
        raise ServiceUnavailableError(
            "AI service unavailable",
            details="Google API key not configured",
        )

    with guard("Failed to enhance prompt"):
        enhanced = await enhancer.enhance(result.data.prompt)

    return EnhancePromptResponse(enhanced_prompt=enhanced)


@router.post("/images", response_model=Image)
async def create_image(
    payload: Any = Body(default=None),
    storage: Storage = Depends(get_storage),
) -> Image:
    """Publish a generated image to the community gallery.

    Returns:
        The stored image, including its server-assigned ``id``,
        ``createdAt``, ``moderationStatus`` and ``likeCount``.

    Raises:
        BadRequestError: 400 if the payload fails validation.
    """
    result = validate_insert_image(payload)
    if isinstance(result, Invalid):
        raise BadRequestError.from_validation(result.error)

    with guard("Failed to save image"):
        image = storage.create_image(normalize_insert_image(result.data))
        logger.info(f"Published image {image.id} ({storage.count_images()} in gallery)")
    return image


@router.get("/images", response_model=list[Image])
async def list_images(
    limit: str | None = None,
    offset: str | None = None,
    storage: Storage = Depends(get_storage),
    settings: NeuravisionConfig = Depends(get_settings),
) -> list[Image]:
    """Return approved gallery images, newest first.

    Args:
        limit: Page size.  Missing or unusable values fall back to the
            configured default (20).
        offset: Number of images to skip.  Missing or unusable values
            fall back to 0.
    """
    page_size, start = _page_params(limit, offset, settings)
    with guard("Failed to fetch images"):
        return storage.get_images(page_size, start)


@router.get("/images/{image_id}", response_model=Image)
async def get_image(image_id: str, storage: Storage = Depends(get_storage)) -> Image:
    """Return a single gallery image.

    Raises:
        NotFoundError: 404 if no image has this id.
    """
    with guard("Failed to fetch image"):
        found = storage.get_image_by_id(image_id)
    if isinstance(found, NotFound):
        raise NotFoundError("Image not found")
    return found.record


@router.post("/saved-images", response_model=SavedImage)
async def create_saved_image(
    payload: Any = Body(default=None),
    storage: Storage = Depends(get_storage),
) -> SavedImage:
    """Add an image to a user's favourites.

    ``userId`` is stored verbatim and ``originalImageId`` is not checked
    against the gallery.

    Raises:
        BadRequestError: 400 if the payload fails validation.
    """
    result = validate_insert_saved_image(payload)
    if isinstance(result, Invalid):
        raise BadRequestError.from_validation(result.error)

    with guard("Failed to save image to favorites"):
        saved = storage.create_saved_image(normalize_insert_saved_image(result.data))
        logger.info(
            f"Saved image {saved.id} to favourites of {saved.user_id} "
            f"({storage.count_saved_images(saved.user_id)} saved)"
        )
    return saved


@router.get("/saved-images", response_model=list[SavedImage])
async def list_saved_images(
    user_id: str | None = Query(default=None, alias="userId"),
    limit: str | None = None,
    offset: str | None = None,
    storage: Storage = Depends(get_storage),
    settings: NeuravisionConfig = Depends(get_settings),
) -> list[SavedImage]:
    """Return one user's favourites, newest first.

    Raises:
        BadRequestError: 400 if ``userId`` is missing or empty.
    """
    if not user_id:
        raise BadRequestError("userId is required")

    page_size, start = _page_params(limit, offset, settings)
    with guard("Failed to fetch saved images"):
        return storage.get_saved_images_by_user_id(user_id, page_size, start)


@router.get("/saved-images/{saved_image_id}", response_model=SavedImage)
async def get_saved_image(
    saved_image_id: str, storage: Storage = Depends(get_storage)
) -> SavedImage:
    """Return a single favourite.

    Raises:
        NotFoundError: 404 if no favourite has this id.
    """
    with guard("Failed to fetch saved image"):
        found = storage.get_saved_image_by_id(saved_image_id)
    if isinstance(found, NotFound):
        raise NotFoundError("Saved image not found")
    return found.record


@router.delete("/saved-images/{saved_image_id}", response_model=DeleteResponse)
async def delete_saved_image(
    saved_image_id: str, storage: Storage = Depends(get_storage)
) -> DeleteResponse:
    """Remove a favourite.

    Raises:
        NotFoundError: 404 if nothing was removed.
    """
    with guard("Failed to remove image from favorites"):
        found = storage.get_saved_image_by_id(saved_image_id)
        deleted = storage.delete_saved_image(saved_image_id)
    if not deleted:
        raise NotFoundError("Saved image not found")

    if not isinstance(found, NotFound):
        owner = found.record.user_id
        logger.info(
            f"Removed saved image {saved_image_id} from favourites of {owner} "
            f"({storage.count_saved_images(owner)} saved)"
        )
    return DeleteResponse(success=True, message="Image removed from favorites")


# ---------------------------------------------------------------------------
# Application factory.
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Log startup and shutdown.

    The store and enhancer are built by :func:`create_app`, not here, so an
    app used without running its lifespan (e.g. a bare ``TestClient``) is
    still fully wired.
    """
    state = "enabled" if app.state.enhancer is not None else "disabled"
    logger.info(f"NeuraVision API {__version__} starting (AI features {state}).")

    yield

    logger.info("NeuraVision API shutting down; in-memory records are discarded.")


def create_app(
    settings: NeuravisionConfig | None = None,
    storage: Storage | None = None,
    enhancer: PromptEnhancer | None = None,
) -> FastAPI:
    """Build a FastAPI application wired to its collaborators.

    Args:
        settings: Configuration.  Defaults to the global ``config``.
        storage: Record store.  Defaults to a fresh :class:`MemStorage`.
        enhancer: Prompt enhancer.  Defaults to one built from *settings*,
            which is ``None`` when no API key is configured.

    Returns:
        The configured application.
    """
    settings = settings or config
    if enhancer is None:
        enhancer = PromptEnhancer.from_config(settings)

    app = FastAPI(
        title="NeuraVision Gallery API",
        description="AI image gallery: prompt enhancement, community images, favourites.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.storage = storage if storage is not None else MemStorage()
    app.state.enhancer = enhancer

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app()


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Host, port and log level come from :data:`~neuravision.core.config.config`
    (``NEURAVISION_SERVER_HOST``, ``NEURAVISION_SERVER_PORT``,
    ``NEURAVISION_LOG_LEVEL``).  Defaults to ``0.0.0.0:5000``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    uvicorn.run(
        "neuravision.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
