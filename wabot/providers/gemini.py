"""Google Gemini backend using the public REST API."""

from typing import Any

import httpx
from loguru import logger

from wabot.providers.base import AIBackend, ProviderError

DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.5-flash"


class GeminiProvider(AIBackend):
    """
    Gemini ``generateContent`` client.

    Sends the prompt as a single user turn and returns the text of the first
    part of the first candidate.
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ):
        if not api_key:
            raise ValueError("Gemini API key is required")
        self.api_key = api_key
        self.model = model
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self._client = client

    def get_default_model(self) -> str:
        return self.model

    def _endpoint(self) -> str:
        return f"{self.api_base}/models/{self.model}:generateContent"

    async def generate(self, prompt: str) -> str:
        payload = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        try:
            if self._client is not None:
                resp = await self._client.post(
                    self._endpoint(), params={"key": self.api_key}, json=payload
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as http:
                    resp = await http.post(
                        self._endpoint(), params={"key": self.api_key}, json=payload
                    )
        except httpx.HTTPError as e:
            raise ProviderError(f"Gemini request failed: {e}") from e

        if resp.status_code != 200:
            raise ProviderError(
                f"Gemini returned status={resp.status_code}, body={resp.text[:200]}"
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise ProviderError(f"Gemini returned invalid JSON: {e}") from e

        text = self._extract_text(data)
        if not text:
            logger.debug(f"Gemini empty response: {str(data)[:200]}")
            raise ProviderError("Empty response from Gemini")
        return text

    @staticmethod
    def _extract_text(data: dict[str, Any]) -> str:
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        if not parts:
            return ""
        return parts[0].get("text") or ""
