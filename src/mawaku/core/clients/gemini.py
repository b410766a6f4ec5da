"""Gemini (Imagen) image client.

This module provides the client for Google's Imagen models served through
the Gemini API, using the official ``google-genai`` SDK.

Request Defaults
----------------
- **model**: ``imagen-4.0-generate-001`` (``MAWAKU_GEMINI_MODEL``)
- **number_of_images**: 2 (``MAWAKU_SAMPLE_COUNT``)
- **timeout**: 120 seconds (``MAWAKU_REQUEST_TIMEOUT``)

A single request is made per render.  Nothing is retried; failures surface
as :class:`~mawaku.core.errors.ProviderError` with the SDK error chained.

Usage Example
-------------
    >>> from mawaku.core.clients.gemini import GeminiImageClient
    >>> from mawaku.core.settings import MawakuSettings
    >>>
    >>> client = GeminiImageClient(MawakuSettings())
    >>> images = client.generate("A cosy office in Hakone at dawn.", api_key)
"""

import logging

from google import genai
from google.genai import errors, types

from mawaku.core.errors import ProviderError
from mawaku.core.image_client import GeneratedImage, ImageClientBase
from mawaku.core.settings import MawakuSettings

logger = logging.getLogger(__name__)


class GeminiImageClient(ImageClientBase):
    """Image client backed by the Gemini API's Imagen models.

    Attributes
    ----------
    model : str
        Imagen model identifier
    sample_count : int
        Number of images requested per call
    timeout_ms : int
        HTTP timeout in milliseconds, as expected by ``google-genai``
    """

    name = "Gemini"
    description = "Imagen text-to-image generation through the Gemini API"

    def __init__(self, settings: MawakuSettings) -> None:
        """Initialise the client from runtime settings.

        Args:
            settings: Runtime settings providing model, sample count and
                timeout.
        """
        self.model = settings.gemini_model
        self.sample_count = settings.sample_count
        self.timeout_ms = int(settings.request_timeout * 1000)

    def generate(self, prompt: str, api_key: str) -> list[GeneratedImage]:
        """Request images for ``prompt`` from the Gemini API.

        Args:
            prompt: Composed prompt.
            api_key: Gemini API key; must not be blank.

        Returns:
            Images in the order returned by the API.  Images withheld by the
            provider's safety filters are skipped with a warning.

        Raises:
            ProviderError: If the key is blank or the request fails.
        """
        if not api_key or not api_key.strip():
            raise ProviderError("Gemini API key is missing")

        logger.info(f"Requesting {self.sample_count} image(s) from {self.model}")
        logger.debug(f"Prompt: {prompt}")

        try:
            client = genai.Client(
                api_key=api_key.strip(),
                http_options=types.HttpOptions(timeout=self.timeout_ms),
            )
            response = client.models.generate_images(
                model=self.model,
                prompt=prompt,
                config=types.GenerateImagesConfig(number_of_images=self.sample_count),
            )
        except errors.APIError as e:
            logger.error(f"Gemini API request failed: {e}")
            raise ProviderError(f"Gemini API request failed ({e.code}): {e.message}") from e
        except Exception as e:
            logger.error(f"Gemini request failed: {e}")
            raise ProviderError(f"Gemini request failed: {e}") from e

        images: list[GeneratedImage] = []
        for generated in response.generated_images or []:
            image = generated.image
            if image is None or not image.image_bytes:
                reason = generated.rai_filtered_reason or "no image data"
                logger.warning(f"Skipping image withheld by Gemini: {reason}")
                continue
            images.append(GeneratedImage(data=image.image_bytes, mime_type=image.mime_type))

        logger.info(f"Gemini returned {len(images)} image(s)")
        return images
