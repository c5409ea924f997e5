"""Lume Stylist — FastAPI Application.

This module defines the FastAPI application factory, all REST API routes,
and the ``main()`` CLI function that launches the uvicorn server.

Architecture
------------
The application follows a stateless REST pattern:

- **Wardrobe storage** is handled by :class:`~lume.core.wardrobe_store.WardrobeStore`
  over a single MongoDB collection.  Uploaded images are kept inside the
  item document as base64 text.
- **Image generation** is proxied to Pollinations.ai by
  :class:`~lume.core.image_generator.ImageGenerator`.
- **Images are returned as data URLs** embedded in JSON, never as binary
  response bodies.
- **Service handles** (database client, store, generator) are built by the
  lifespan context and kept on ``app.state``; nothing is a module-level
  singleton apart from the default ``app`` itself.
- **The HTML page** is served as a raw ``HTMLResponse``; the browser client
  fetches everything else through the JSON API.

Endpoints
---------
========  ==================================  ==================================
Method    Path                                Purpose
========  ==================================  ==================================
GET       ``/``                               Serve the single-page client
GET       ``/api/wardrobe/stats/{ownerId}``   Item count per category
GET       ``/api/wardrobe/item/{id}``         Single item with data URL
GET       ``/api/wardrobe/{ownerId}``         Owner's items, newest first
POST      ``/api/wardrobe/upload``            Upload one image (multipart)
DELETE    ``/api/wardrobe/{id}``              Delete one item
POST      ``/api/stylist/generate-outfit``    Outfit illustration from quiz
POST      ``/api/stylist/generate-moodboard`` Moodboard collage
GET       ``/api/health``                     Static status payload
GET       ``/api/test-generation``            Generation self-test
========  ==================================  ==================================

Usage
-----
CLI (installed entry point)::

    lume

Direct invocation::

    python -m lume.api.main
"""

from __future__ import annotations

import base64
import logging
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager

from fastapi import Depends, FastAPI, File, Form, Header, HTTPException, Request, UploadFile
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from lume import __version__
from lume.api.models import MoodboardRequest, OutfitRequest
from lume.api.prompt_builder import (
    TEST_PROMPT,
    build_moodboard_prompt,
    build_outfit_prompt,
    moodboard_description,
    outfit_description,
)
from lume.core.config import LumeConfig
from lume.core.config import config as default_config
from lume.core.errors import (
    GenerationFailedError,
    LumeError,
    StorageError,
    UploadValidationError,
)
from lume.core.identity import (
    check_item_owner,
    parse_authorization,
    resolve_owner,
    verify_token,
)
from lume.core.image_generator import (
    GENERATED_MIME_TYPE,
    MODEL_LABEL,
    PROVIDER,
    ImageGenerator,
)
from lume.core.wardrobe_store import WardrobeStore, create_data_url

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Application lifecycle — service handle setup and teardown.
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application startup and shutdown lifecycle.

    On startup:
        Connects to MongoDB and builds a :class:`WardrobeStore` unless one was
        injected into :func:`create_app`, and likewise for the
        :class:`ImageGenerator`.  Both are stored on ``app.state``.

    On shutdown:
        Closes the database client and HTTP client that were created here.
        Injected handles belong to the caller and are left open.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to the application for the duration of its lifetime.
    """
    cfg: LumeConfig = app.state.config
    mongo_client = None
    owned_generator = None

    # --- Startup -----------------------------------------------------------
    if app.state.store is None:
        mongo_client, app.state.store = WardrobeStore.from_config(cfg)
        try:
            app.state.store.ensure_indexes()
            logger.info("Connected to MongoDB")
        except PyMongoError as e:
            # Requests will report their own errors until the database is up.
            logger.error(f"MongoDB connection error: {e}")

    if app.state.generator is None:
        owned_generator = app.state.generator = ImageGenerator(cfg)

    if not cfg.auth_enabled:
        logger.warning(
            "LUME_AUTH_SECRET is not set: owner identifiers are trusted from "
            "requests and any caller can read or delete any wardrobe."
        )

    yield  # Application runs here.

    # --- Shutdown ----------------------------------------------------------
    if owned_generator is not None:
        owned_generator.close()
    if mongo_client is not None:
        mongo_client.close()
        logger.info("MongoDB connection closed")


# ---------------------------------------------------------------------------
# Dependencies.
# ---------------------------------------------------------------------------


def get_config(request: Request) -> LumeConfig:
    return request.app.state.config


def get_store(request: Request) -> WardrobeStore:
    return request.app.state.store


def get_generator(request: Request) -> ImageGenerator:
    return request.app.state.generator


def get_verified_owner(
    cfg: LumeConfig = Depends(get_config),
    authorization: str | None = Header(default=None),
) -> str | None:
    """Return the owner named by a verified bearer token.

    Returns ``None`` when token verification is disabled.

    Raises:
        AuthenticationError: If verification is on and the token is missing
            or invalid.
    """
    if not cfg.auth_enabled:
        return None
    return verify_token(parse_authorization(authorization), cfg)


@contextmanager
def _store_errors(message: str) -> Iterator[None]:
    """Translate database failures into a :class:`StorageError`."""
    try:
        yield
    except PyMongoError as e:
        logger.error(f"{message}: {e}", exc_info=True)
        raise StorageError(message) from e


def _generation_failure(message: str, error: Exception) -> JSONResponse:
    logger.error(f"{message}: {error}")
    return JSONResponse(status_code=500, content={"error": message, "details": str(error)})


def _image_data_url(image_bytes: bytes) -> str:
    return create_data_url(base64.b64encode(image_bytes).decode("ascii"), GENERATED_MIME_TYPE)


def _describe_validation_error(exc: RequestValidationError) -> str:
    """Summarise the first request validation error as one readable line."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ())]
    if loc and loc[0] in ("body", "query", "path", "header"):
        loc = loc[1:]
    message = first.get("msg", "invalid value")
    if not loc:
        return f"Invalid request: {message}"
    return f"Invalid request: {'.'.join(loc)}: {message}"


# ---------------------------------------------------------------------------
# Application factory.
# ---------------------------------------------------------------------------


def create_app(
    config: LumeConfig | None = None,
    *,
    store: WardrobeStore | None = None,
    generator: ImageGenerator | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Settings to use; defaults to the global configuration.
        store: Pre-built wardrobe store.  When omitted, the lifespan connects
            to MongoDB using ``config.mongodb_uri``.
        generator: Pre-built image generator.  When omitted, the lifespan
            creates one.

    Returns:
        The configured application.
    """
    cfg = config or default_config

    app = FastAPI(
        title="Lume Stylist",
        description="Wardrobe storage and AI outfit generation API.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = cfg
    app.state.store = store
    app.state.generator = generator

    # The browser client may be served from a different origin.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.mount("/static", StaticFiles(directory=str(cfg.static_dir)), name="static")

    # --- Error rendering ---------------------------------------------------

    @app.exception_handler(LumeError)
    async def handle_lume_error(request: Request, exc: LumeError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={
                "error": _describe_validation_error(exc),
                "details": jsonable_encoder(exc.errors(), custom_encoder={Exception: str}),
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Server error: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Something went wrong!", "message": str(exc)},
        )

    # --- Routes ------------------------------------------------------------

    @app.get("/", response_class=HTMLResponse)
    async def index() -> HTMLResponse:
        """Serve the single-page client.

        Raises:
            HTTPException: 404 if ``index.html`` is not found.
        """
        index_path = cfg.templates_dir / "index.html"
        if index_path.exists():
            return HTMLResponse(content=index_path.read_text(encoding="utf-8"))
        raise HTTPException(status_code=404, detail="index.html not found")

    @app.get("/api/wardrobe/stats/{owner_id}")
    def wardrobe_stats(
        owner_id: str,
        store: WardrobeStore = Depends(get_store),
        verified: str | None = Depends(get_verified_owner),
    ) -> dict:
        """Return ``totalItems`` and per-category counts for an owner."""
        owner_id = resolve_owner(owner_id, verified)
        with _store_errors("Failed to fetch statistics"):
            stats = store.stats_by_owner(owner_id)
        logger.info(f"Stats for {owner_id}: {stats}")
        return stats

    @app.get("/api/wardrobe/item/{item_id}")
    def wardrobe_item(
        item_id: str,
        store: WardrobeStore = Depends(get_store),
        verified: str | None = Depends(get_verified_owner),
    ) -> dict:
        """Return a single item with its image inlined as a data URL.

        Raises:
            ItemNotFoundError: 404 for an unknown identifier.
        """
        with _store_errors("Failed to fetch item"):
            item = store.get_by_id(item_id)
        check_item_owner(item.owner_id, verified)
        return item.to_public()

    @app.get("/api/wardrobe/{owner_id}")
    def wardrobe_list(
        owner_id: str,
        store: WardrobeStore = Depends(get_store),
        verified: str | None = Depends(get_verified_owner),
    ) -> list[dict]:
        """Return the owner's items, newest first, with data-URL images."""
        owner_id = resolve_owner(owner_id, verified)
        with _store_errors("Failed to fetch wardrobe"):
            items = store.list_by_owner(owner_id)
        logger.info(f"Retrieved {len(items)} items for user {owner_id}")
        return [item.to_public() for item in items]

    @app.post("/api/wardrobe/upload")
    def wardrobe_upload(
        image: UploadFile | None = File(default=None),
        userId: str | None = Form(default=None),
        category: str | None = Form(default=None),
        store: WardrobeStore = Depends(get_store),
        verified: str | None = Depends(get_verified_owner),
    ) -> dict:
        """Store one uploaded image.

        Raises:
            UploadValidationError: 400 for a missing file or fields, an
                oversized file, or a disallowed MIME type.
        """
        if image is None:
            raise UploadValidationError("No file uploaded")
        owner_id = resolve_owner(userId, verified)

        # The framework has already spooled the upload; reading limit + 1
        # bytes only caps how much of it is copied into memory here.
        image_bytes = image.file.read(store.max_upload_bytes + 1)

        with _store_errors("Failed to upload item"):
            item = store.create(
                owner_id,
                category,
                image_bytes,
                image.content_type,
                image.filename,
            )
        logger.info(f"Image uploaded for user {owner_id}, category: {category}")
        return {"message": "Item uploaded successfully", "item": item.to_summary()}

    @app.delete("/api/wardrobe/{item_id}")
    def wardrobe_delete(
        item_id: str,
        store: WardrobeStore = Depends(get_store),
        verified: str | None = Depends(get_verified_owner),
    ) -> dict:
        """Delete one item.

        Raises:
            ItemNotFoundError: 404 for an unknown identifier.
        """
        with _store_errors("Failed to delete item"):
            if verified is not None:
                check_item_owner(store.get_by_id(item_id).owner_id, verified)
            store.delete_by_id(item_id)
        logger.info(f"Deleted item {item_id}")
        return {"message": "Item deleted successfully"}

    @app.post("/api/stylist/generate-outfit")
    def generate_outfit(
        req: OutfitRequest,
        store: WardrobeStore = Depends(get_store),
        generator: ImageGenerator = Depends(get_generator),
        verified: str | None = Depends(get_verified_owner),
    ):
        """Generate an outfit illustration from quiz answers.

        The owner's wardrobe categories are woven into the prompt.  Any
        database or generation failure yields a 500 with ``details``.
        """
        owner_id = resolve_owner(req.userId, verified)
        preferences = req.preferences.model_dump()
        try:
            categories = store.categories_for_owner(owner_id) if owner_id else []
            prompt = build_outfit_prompt(preferences, categories)
            logger.info(f"Generating outfit with prompt: {prompt}")
            image_bytes = generator.generate_image(prompt)
        except (GenerationFailedError, PyMongoError) as e:
            return _generation_failure("Failed to generate outfit", e)

        return {
            "description": outfit_description(preferences),
            "imageUrl": _image_data_url(image_bytes),
            "preferences": preferences,
            "provider": PROVIDER,
            "model": MODEL_LABEL,
        }

    @app.post("/api/stylist/generate-moodboard")
    def generate_moodboard(
        req: MoodboardRequest,
        generator: ImageGenerator = Depends(get_generator),
        verified: str | None = Depends(get_verified_owner),
    ):
        """Generate a moodboard collage for a theme, palette, and style."""
        resolve_owner(req.userId, verified)
        prompt = build_moodboard_prompt(req.theme, req.colors, req.style)
        logger.info(f"Generating moodboard with prompt: {prompt}")
        try:
            image_bytes = generator.generate_image(prompt)
        except GenerationFailedError as e:
            return _generation_failure("Failed to generate moodboard", e)

        return {
            "description": moodboard_description(req.theme),
            "imageUrl": _image_data_url(image_bytes),
            "theme": req.theme,
            "style": req.style,
            "provider": PROVIDER,
            "model": MODEL_LABEL,
        }

    @app.get("/api/health")
    async def health() -> dict:
        """Return a static status payload."""
        return {
            "status": "ok",
            "message": "Server is running",
            "provider": PROVIDER,
            "model": "Flux",
            "cost": "FREE - No API key or card required!",
        }

    @app.get("/api/test-generation")
    def test_generation(generator: ImageGenerator = Depends(get_generator)):
        """Generate one image from a fixed prompt to check the upstream."""
        try:
            image_bytes = generator.generate_image(TEST_PROMPT)
        except GenerationFailedError as e:
            logger.error(f"Test generation failed: {e}")
            return JSONResponse(
                status_code=500,
                content={"success": False, "error": str(e), "provider": PROVIDER},
            )
        return {
            "success": True,
            "message": "Image generation working!",
            "imageUrl": _image_data_url(image_bytes),
            "provider": PROVIDER,
            "model": "Flux",
        }

    return app


app = create_app()


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host and port from :data:`~lume.core.config.config` (``PORT`` or
    ``LUME_SERVER_PORT``; defaults to ``0.0.0.0:5000``).

    This function is registered as the ``lume`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=default_config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "lume.api.main:app",
        host=default_config.server_host,
        port=default_config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
