"""Shared pytest fixtures for Lume tests."""

from __future__ import annotations

import io
import shutil
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import httpx
import mongomock
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from lume.api.main import create_app
from lume.core.config import LumeConfig
from lume.core.image_generator import ImageGenerator
from lume.core.wardrobe_store import WardrobeStore

# Bytes the fake generation service answers with.
GENERATED_IMAGE = b"\x89PNG\r\n\x1a\nfake-generated-image"


def make_image_bytes(fmt: str = "PNG", color: str = "red", size: tuple[int, int] = (8, 8)) -> bytes:
    """Render a tiny solid-colour image and return its encoded bytes."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color=color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config() -> LumeConfig:
    """Create a configuration isolated from the environment and ``.env``.

    Returns:
        LumeConfig instance for testing
    """
    return LumeConfig(
        _env_file=None,
        mongodb_uri="mongodb://localhost:27017/lume-test",
        generation_endpoint="https://images.test",
        generation_timeout=5.0,
        auth_secret=None,
    )


@pytest.fixture
def auth_config(test_config: LumeConfig) -> LumeConfig:
    """Configuration with bearer-token verification switched on."""
    return test_config.model_copy(update={"auth_secret": "test-secret"})


@pytest.fixture
def mongo_collection():
    """In-memory stand-in for the wardrobe collection."""
    return mongomock.MongoClient().db.wardrobes


@pytest.fixture
def store(mongo_collection) -> WardrobeStore:
    """WardrobeStore over the in-memory collection."""
    wardrobe = WardrobeStore(mongo_collection)
    wardrobe.ensure_indexes()
    return wardrobe


@pytest.fixture
def generation_requests() -> list[httpx.Request]:
    """Requests received by the fake generation service."""
    return []


@pytest.fixture
def generation_handler(generation_requests) -> Callable[[httpx.Request], httpx.Response]:
    """Default fake-service behaviour: record the request, return an image.

    Tests that need a failing upstream override this fixture.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        generation_requests.append(request)
        return httpx.Response(200, content=GENERATED_IMAGE, headers={"content-type": "image/png"})

    return handler


@pytest.fixture
def generator(test_config, generation_handler) -> Generator[ImageGenerator, None, None]:
    """ImageGenerator wired to ``httpx.MockTransport``."""
    client = httpx.Client(transport=httpx.MockTransport(generation_handler))
    gen = ImageGenerator(test_config, client=client)
    try:
        yield gen
    finally:
        client.close()


@pytest.fixture
def test_client(test_config, store, generator) -> Generator[TestClient, None, None]:
    """TestClient over an app with injected store and generator."""
    app = create_app(test_config, store=store, generator=generator)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def auth_client(auth_config, store, generator) -> Generator[TestClient, None, None]:
    """TestClient over an app that requires bearer tokens."""
    app = create_app(auth_config, store=store, generator=generator)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes("PNG", "red")


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image_bytes("JPEG", "blue")


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    """Factory fixture wrapping :func:`make_image_bytes`."""
    return make_image_bytes
