"""Configuration management for the Lume stylist backend.

This module provides centralized configuration using Pydantic Settings.
Values are loaded from environment variables with the ``LUME_`` prefix,
allowing deployment-specific overrides without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:

1. Environment variables (``LUME_*`` prefix)
2. ``.env`` file in the working directory
3. Default values defined in :class:`LumeConfig`

Two settings also accept the un-prefixed names used by common hosting
platforms: ``MONGODB_URI`` for the database connection string and ``PORT``
for the listening port.

Example .env file::

    MONGODB_URI=mongodb://localhost:27017/ai-stylist
    PORT=5000
    LUME_GENERATION_TIMEOUT=60
    LUME_AUTH_SECRET=change-me

Global Configuration Instance
------------------------------
A global ``config`` instance is created at module import time.  The FastAPI
application factory accepts an explicit :class:`LumeConfig` so tests can
run against isolated settings.

Usage Example
-------------
::

    from lume.core.config import config

    print(config.mongodb_uri)
    print(config.server_port)
"""

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Package root: ``src/lume``.  Templates and static assets ship inside it.
_PACKAGE_DIR = Path(__file__).resolve().parents[1]

MIB = 1024 * 1024


class LumeConfig(BaseSettings):
    """Main configuration for the Lume stylist backend.

    Attributes
    ----------
    Database Settings:
        mongodb_uri : str
            MongoDB connection string (``MONGODB_URI`` or ``LUME_MONGODB_URI``)
        mongodb_database : str | None
            Database name; ``None`` uses the database named in the URI
        mongodb_collection : str
            Collection holding wardrobe items

    Server Settings:
        server_host : str
            Bind address for uvicorn
        server_port : int
            Listening port (``PORT`` or ``LUME_SERVER_PORT``)

    Generation Settings:
        generation_endpoint : str
            Base URL of the text-to-image service
        generation_width / generation_height : int
            Requested image size in pixels
        generation_model : str
            Model name passed to the service
        generation_timeout : float
            Seconds before an outbound generation request is abandoned

    Upload Settings:
        max_upload_bytes : int
            Largest accepted image upload

    Identity Settings:
        auth_secret : str | None
            Shared secret for bearer-token verification.  When unset, owner
            identifiers are taken from the request as-is.
        auth_algorithm : str
            JWT signing algorithm

    Paths:
        static_dir : Path
            Directory served at ``/static``
        templates_dir : Path
            Directory containing ``index.html``
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LUME_",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Database settings
    mongodb_uri: str = Field(
        default="mongodb://localhost:27017/ai-stylist",
        validation_alias=AliasChoices("LUME_MONGODB_URI", "MONGODB_URI"),
        description="MongoDB connection string",
    )
    mongodb_database: str | None = Field(
        default=None,
        description="Database name (defaults to the one named in the URI)",
    )
    mongodb_collection: str = Field(
        default="wardrobes",
        description="Collection holding wardrobe items",
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address",
    )
    server_port: int = Field(
        default=5000,
        validation_alias=AliasChoices("LUME_SERVER_PORT", "PORT"),
        description="Server port",
        ge=1,
        le=65535,
    )

    # Image generation settings
    generation_endpoint: str = Field(
        default="https://image.pollinations.ai",
        description="Base URL of the text-to-image service",
    )
    generation_width: int = Field(default=512, ge=64, le=2048)
    generation_height: int = Field(default=768, ge=64, le=2048)
    generation_model: str = Field(
        default="flux",
        description="Model name passed to the generation service",
    )
    generation_timeout: float = Field(
        default=60.0,
        description="Timeout in seconds for a single generation request",
        gt=0,
    )

    # Upload settings
    max_upload_bytes: int = Field(
        default=10 * MIB,
        description="Largest accepted image upload in bytes",
        gt=0,
    )

    # Identity settings
    auth_secret: str | None = Field(
        default=None,
        description="Bearer-token secret; unset disables owner verification",
    )
    auth_algorithm: Literal["HS256", "HS384", "HS512"] = Field(
        default="HS256",
        description="JWT signing algorithm",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root log level used by the CLI entry point",
    )

    # Paths
    static_dir: Path = Field(
        default=_PACKAGE_DIR / "static",
        description="Directory served at /static",
    )
    templates_dir: Path = Field(
        default=_PACKAGE_DIR / "templates",
        description="Directory containing index.html",
    )

    @property
    def auth_enabled(self) -> bool:
        """Whether bearer-token owner verification is switched on."""
        return bool(self.auth_secret)


# Global configuration instance, loaded from LUME_* variables and .env.
config = LumeConfig()
