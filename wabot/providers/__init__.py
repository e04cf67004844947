"""AI backend providers."""

from wabot.providers.base import AIBackend, ProviderError
from wabot.providers.gemini import GeminiProvider

__all__ = ["AIBackend", "GeminiProvider", "ProviderError"]
