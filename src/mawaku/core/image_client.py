"""Base class for image generation clients.

Mawaku depends on a single capability: turn a composed prompt and an API key
into zero or more encoded images.  Concrete clients wrap a specific provider
(see :mod:`mawaku.core.clients.gemini`); tests substitute a stub so that no
network call is made.

Client Contract
---------------
- ``generate(prompt, api_key)`` returns images in the order the provider
  returned them.
- Any provider-side problem (missing credential, authentication failure,
  rate limiting, network failure) is raised as
  :class:`~mawaku.core.errors.ProviderError`.
- Clients never write files; persisting images is the job of
  :mod:`mawaku.core.image_store`.

Usage Example
-------------
    >>> class StubClient(ImageClientBase):
    ...     name = "Stub"
    ...     def generate(self, prompt: str, api_key: str) -> list[GeneratedImage]:
    ...         return [GeneratedImage(data=b"...", mime_type="image/png")]
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedImage:
    """One image returned by a provider.

    Attributes:
        data: Encoded image bytes (PNG, JPEG, ...).
        mime_type: MIME type reported by the provider, if any.
    """

    data: bytes
    mime_type: str | None = None


class ImageClientBase(ABC):
    """Abstract base class for image generation clients.

    Attributes
    ----------
    name : str
        Human-readable provider name (e.g. "Gemini")
    description : str
        Brief description of the client
    model : str
        Provider model identifier used for requests
    """

    name: str = "Base Image Client"
    description: str = "Base class for image generation clients"
    model: str = ""

    @abstractmethod
    def generate(self, prompt: str, api_key: str) -> list[GeneratedImage]:
        """Render ``prompt`` into images.

        Parameters
        ----------
        prompt : str
            Composed natural-language prompt.
        api_key : str
            Provider credential.

        Returns
        -------
        list[GeneratedImage]
            Images in provider order; may be empty.

        Raises
        ------
        ProviderError
            If the credential is missing or the provider request fails.
        """
        pass

    def get_client_info(self) -> dict[str, Any]:
        """Get information about this client.

        Returns
        -------
        dict[str, Any]
            Dictionary containing client metadata
        """
        return {
            "name": self.name,
            "description": self.description,
            "model": self.model,
        }
