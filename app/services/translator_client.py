"""
Translator client

Calls an OpenAI-compatible chat-completions endpoint to translate one piece
of text into one target locale. The fan-out orchestrator only depends on the
``TextTranslator`` protocol, so tests and alternative backends can plug in
anything with an async ``translate(text, target_locale)`` method.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

import httpx

from app.config import settings
from app.exceptions import TranslationServiceError

logger = logging.getLogger(__name__)

TRANSLATION_PROMPT = (
    "Translate the following text to {target_locale} "
    "(preserve any markdown formatting, HTML tags, or special characters):\n\n{text}"
)


class TextTranslator(Protocol):
    async def translate(self, text: str, target_locale: str) -> str: ...


class ChatCompletionTranslator:
    """Translate text through a chat-completions API."""

    def __init__(
        self,
        api_url: str | None = None,
        api_key: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
        timeout_seconds: float | None = None,
        max_concurrency: int | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.api_url = (api_url or settings.translation_api_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.translation_api_key
        self.model = model or settings.translation_model
        self.max_tokens = max_tokens or settings.translation_max_tokens
        self.timeout_seconds = timeout_seconds or settings.translation_timeout_seconds
        self._client = client
        self._semaphore = asyncio.Semaphore(max_concurrency or settings.translation_max_concurrency)

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _payload(self, text: str, target_locale: str) -> dict:
        return {
            "model": self.model,
            "messages": [
                {"role": "user", "content": TRANSLATION_PROMPT.format(target_locale=target_locale, text=text)}
            ],
            "max_tokens": self.max_tokens,
        }

    async def _post(self, client: httpx.AsyncClient, payload: dict) -> httpx.Response:
        return await client.post(
            f"{self.api_url}/chat/completions",
            json=payload,
            headers=self._headers(),
            timeout=self.timeout_seconds,
        )

    async def translate(self, text: str, target_locale: str) -> str:
        """
        Translate ``text`` into ``target_locale``.

        Returns the stripped content of the first choice, or an empty string
        when the response carries none.

        Raises:
            TranslationServiceError: on timeouts, transport errors or non-2xx responses.
        """
        payload = self._payload(text, target_locale)

        async with self._semaphore:
            try:
                if self._client is not None:
                    response = await self._post(self._client, payload)
                else:
                    async with httpx.AsyncClient() as client:
                        response = await self._post(client, payload)
                response.raise_for_status()
            except httpx.TimeoutException as e:
                raise TranslationServiceError("Translation request timed out", target_locale) from e
            except httpx.HTTPStatusError as e:
                raise TranslationServiceError(
                    f"Translation API returned HTTP {e.response.status_code}", target_locale
                ) from e
            except httpx.RequestError as e:
                raise TranslationServiceError(f"Translation request error: {e}", target_locale) from e

        try:
            body = response.json()
        except ValueError as e:
            raise TranslationServiceError("Translation API returned invalid JSON", target_locale) from e

        return extract_completion_text(body)


def extract_completion_text(body: object) -> str:
    """Pull ``choices[0].message.content`` out of a chat-completions response."""
    if not isinstance(body, dict):
        return ""
    choices = body.get("choices") or []
    if not choices or not isinstance(choices[0], dict):
        return ""
    message = choices[0].get("message") or {}
    content = message.get("content") if isinstance(message, dict) else None
    return content.strip() if isinstance(content, str) else ""
