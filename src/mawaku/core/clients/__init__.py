"""Image client implementations."""

from mawaku.core.clients.gemini import GeminiImageClient

__all__ = ["GeminiImageClient"]
