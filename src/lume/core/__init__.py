"""Core services for the Lume backend.

- **LumeConfig**: configuration management using Pydantic Settings
- **WardrobeStore**: MongoDB data access for wardrobe items
- **ImageGenerator**: client for the external text-to-image service
- **errors**: the error taxonomy rendered by the API layer
- **identity**: optional bearer-token verification of owner identifiers
"""

from lume.core.config import LumeConfig, config
from lume.core.errors import (
    AuthenticationError,
    GenerationFailedError,
    ItemNotFoundError,
    LumeError,
    OwnerMismatchError,
    StorageError,
    UploadValidationError,
)
from lume.core.image_generator import ImageGenerator
from lume.core.wardrobe_store import WardrobeItem, WardrobeStore

__all__ = [
    "AuthenticationError",
    "GenerationFailedError",
    "ImageGenerator",
    "ItemNotFoundError",
    "LumeConfig",
    "LumeError",
    "OwnerMismatchError",
    "StorageError",
    "UploadValidationError",
    "WardrobeItem",
    "WardrobeStore",
    "config",
]
