"""
Gemini generateContent client over plain HTTP.

Errors are raised as ProviderError whose message includes the HTTP status and
the provider's response body, so callers can classify overload by text.
"""
import logging
from typing import Any, Dict, List, Optional, Protocol, Union

import httpx

from .errors import ProviderError

logger = logging.getLogger(__name__)


class ModelClient(Protocol):
    async def generate(
        self,
        model: str,
        contents: Union[str, List[Any]],
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        ...


def _to_part(item: Any) -> Dict[str, Any]:
    if isinstance(item, dict) and "data" in item:
        return {"inline_data": {"mime_type": item.get("mediaType", "image/jpeg"), "data": item["data"]}}
    return {"text": str(item)}


class GeminiClient:
    def __init__(self, api_key: Optional[str], base_url: str, timeout: float = 60.0):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _build_payload(self, contents: Union[str, List[Any]], temperature: float, max_output_tokens: int) -> dict:
        items = [contents] if isinstance(contents, str) else list(contents)
        return {
            "contents": [{"role": "user", "parts": [_to_part(i) for i in items]}],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_output_tokens,
            },
        }

    async def generate(
        self,
        model: str,
        contents: Union[str, List[Any]],
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        if not self.api_key:
            raise ProviderError("GEMINI_API_KEY not configured")

        payload = self._build_payload(contents, temperature, max_output_tokens)
        headers = {"x-goog-api-key": self.api_key, "Content-Type": "application/json"}
        url = f"{self.base_url}/models/{model}:generateContent"

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise ProviderError(f"Gemini request failed: {e}")

        if response.status_code != 200:
            raise ProviderError(
                f"Gemini API call failed: {response.status_code} {response.text}",
                status_code=response.status_code,
            )

        data = response.json()
        return self._extract_text(data)

    @staticmethod
    def _extract_text(data: dict) -> str:
        candidates = data.get("candidates") or []
        if not candidates:
            feedback = data.get("promptFeedback") or {}
            reason = feedback.get("blockReason", "no candidates returned")
            raise ProviderError(f"Gemini returned no content: {reason}")
        parts = (candidates[0].get("content") or {}).get("parts") or []
        text = "".join(p.get("text", "") for p in parts)
        if not text:
            # e.g. finishReason SAFETY or RECITATION: a candidate with no text parts
            reason = candidates[0].get("finishReason", "empty response")
            raise ProviderError(f"Gemini returned no content: {reason}")
        return text
