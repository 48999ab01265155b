from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from common.config import GeminiSettings

logger = logging.getLogger(__name__)


class GeminiError(Exception):
    """Raised when the Gemini API cannot produce a usable text reply."""


def text_part(text: str) -> dict[str, Any]:
    return {"text": text}


def inline_data_part(mime_type: str, data: str) -> dict[str, Any]:
    """Content part carrying base64-encoded file bytes."""
    return {"inlineData": {"mimeType": mime_type, "data": data}}


def generation_config(
    max_output_tokens: int,
    temperature: float,
    top_k: int = 40,
    top_p: float = 0.95,
) -> dict[str, Any]:
    return {
        "maxOutputTokens": max_output_tokens,
        "temperature": temperature,
        "topK": top_k,
        "topP": top_p,
    }


class GeminiClient:
    """Thin async wrapper over the Gemini ``generateContent`` REST call."""

    def __init__(
        self,
        settings: GeminiSettings | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings or GeminiSettings()
        self._transport = transport

    @property
    def configured(self) -> bool:
        return self.settings.configured

    async def generate_content(
        self,
        parts: list[dict[str, Any]],
        config: dict[str, Any],
    ) -> str:
        """Send one user turn and return the reply text, stripped."""
        if not self.settings.api_key:
            raise GeminiError("GEMINI_API_KEY is not configured")

        url = (
            f"{self.settings.base_url.rstrip('/')}/v1beta/models/"
            f"{self.settings.model_name}:generateContent"
        )
        payload = {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": config,
        }
        headers = {"x-goog-api-key": self.settings.api_key}

        async with httpx.AsyncClient(
            timeout=self.settings.timeout_s,
            transport=self._transport,
        ) as client:
            resp = await client.post(url, json=payload, headers=headers)
            resp.raise_for_status()
            data = resp.json()

        return _extract_text(data)


def _extract_text(data: dict[str, Any]) -> str:
    candidates = data.get("candidates") or []
    if not candidates:
        reason = (data.get("promptFeedback") or {}).get("blockReason")
        raise GeminiError(f"Gemini returned no candidates (block reason: {reason or 'none'})")

    parts = (candidates[0].get("content") or {}).get("parts") or []
    text = "".join(p.get("text", "") for p in parts)
    if not text.strip():
        finish = candidates[0].get("finishReason", "unknown")
        raise GeminiError(f"Gemini returned an empty reply (finish reason: {finish})")

    logger.debug("Gemini reply: %d chars", len(text))
    return text.strip()
