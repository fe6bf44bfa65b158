from __future__ import annotations

import logging
from typing import Any, Dict

import aiohttp

from tavno.domain.errors import UpstreamError

log = logging.getLogger(__name__)


def _extract_text(body: Dict[str, Any]) -> str:
    try:
        parts = body["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError) as exc:
        raise UpstreamError("AI response did not contain any candidates") from exc
    return "".join(str(part.get("text", "")) for part in parts if isinstance(part, dict))


class GeminiTextGenerator:
    """Calls the Gemini ``generateContent`` REST endpoint."""

    def __init__(
        self,
        api_key: str,
        *,
        model: str = "gemini-1.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout_seconds: int = 30,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    async def generate(self, prompt: str) -> str:
        url = f"{self.base_url}/models/{self.model}:generateContent"
        payload = {"contents": [{"parts": [{"text": prompt}]}]}

        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(
                    url, json=payload, params={"key": self.api_key}
                ) as resp:
                    if resp.status != 200:
                        text = await resp.text()
                        raise UpstreamError(
                            f"AI request failed with {resp.status}: {text[:200]}"
                        )
                    body = await resp.json()
        except aiohttp.ClientError as exc:
            log.warning("AI request to %s failed: %s", self.model, exc)
            raise UpstreamError(f"AI request failed: {exc}") from exc

        return _extract_text(body)
