"""Base AI backend interface."""

import abc


class ProviderError(Exception):
    """Raised when the AI backend fails or returns no usable text."""


class AIBackend(abc.ABC):
    """
    Single-shot text generation backend.

    Implementations raise :class:`ProviderError` on any failure, including
    an empty response, so callers only need to handle one exception type.
    """

    @abc.abstractmethod
    async def generate(self, prompt: str) -> str:
        """Generate a reply for *prompt*."""
        ...

    @abc.abstractmethod
    def get_default_model(self) -> str:
        ...
