"""Client for the external text-to-image generation service.

This module provides :class:`ImageGenerator`, a thin wrapper around the
Pollinations.ai URL-based API.  The service needs no API key: the prompt is
percent-encoded into the request path and the response body is the raw image.

Failure Policy
--------------
Every call has exactly one outcome.  Transport errors, timeouts, non-success
status codes, and empty bodies are all reported as a single
:class:`~lume.core.errors.GenerationFailedError`.  There is no retry and no
partial result.

Usage
-----
::

    from lume.core.config import config
    from lume.core.image_generator import ImageGenerator

    generator = ImageGenerator(config)
    png_bytes = generator.generate_image("a linen summer outfit")
    generator.close()
"""

from __future__ import annotations

import logging
from urllib.parse import quote

import httpx

from lume.core.config import LumeConfig
from lume.core.errors import GenerationFailedError

logger = logging.getLogger(__name__)

PROVIDER = "Pollinations.ai"
MODEL_LABEL = "Flux (Free)"

# The service always answers with PNG data for these parameters.
GENERATED_MIME_TYPE = "image/png"

FAILURE_MESSAGE = f"Failed to generate image with {PROVIDER}"


class ImageGenerator:
    """Proxy prompts to the text-to-image service.

    Attributes:
        _config (LumeConfig):
            Supplies the endpoint, image size, model name, and timeout.
        _client (httpx.Client):
            HTTP client used for the outbound request.
        _owns_client (bool):
            Whether :meth:`close` should close ``_client``.
    """

    def __init__(self, config: LumeConfig, client: httpx.Client | None = None) -> None:
        """Initialise the generator.

        Args:
            config: Application configuration instance.
            client: Optional pre-built HTTP client (tests pass one backed by
                ``httpx.MockTransport``).  When omitted, the generator creates
                and owns its own client.
        """
        self._config = config
        self._owns_client = client is None
        self._client = client or httpx.Client(follow_redirects=True)

    def build_url(self, prompt: str) -> str:
        """Build the request URL for *prompt*.

        The whole prompt is percent-encoded into a single path segment and the
        fixed size and model parameters are appended as the query string.
        """
        encoded = quote(prompt, safe="")
        base = self._config.generation_endpoint.rstrip("/")
        return (
            f"{base}/prompt/{encoded}"
            f"?width={self._config.generation_width}"
            f"&height={self._config.generation_height}"
            f"&model={self._config.generation_model}"
            f"&nologo=true"
        )

    def generate_image(self, prompt: str) -> bytes:
        """Generate one image for *prompt* and return its raw bytes.

        Raises:
            GenerationFailedError: On any transport error, timeout,
                non-success response, or empty body.
        """
        url = self.build_url(prompt)
        logger.info(f"Requesting image from {PROVIDER}")
        try:
            response = self._client.get(url, timeout=self._config.generation_timeout)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"{PROVIDER} error: {e}")
            raise GenerationFailedError(FAILURE_MESSAGE) from e

        content = response.content
        if not content:
            logger.error(f"{PROVIDER} returned an empty body")
            raise GenerationFailedError(FAILURE_MESSAGE)

        logger.info(f"Image generated ({len(content)} bytes)")
        return content

    def close(self) -> None:
        """Release the HTTP client if this generator created it."""
        if self._owns_client:
            self._client.close()
