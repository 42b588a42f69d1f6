# recipesmith/services/image_gemini.py
# Dish image generation (Gemini generateContent, REST via httpx)
# - single text part in, base64 inline image out
# - the image part is found by content (inlineData), not by its position

from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

import httpx

from recipesmith.services.errors import (
    DecodingError,
    InvalidResponse,
    MissingData,
    RecipeAPIError,
    UnknownError,
)

log = logging.getLogger(__name__)

# image generation routinely runs past the 5s httpx default
DEFAULT_TIMEOUT = 60.0


class ImageNotReady(RecipeAPIError):
    # GOOGLE_API_KEY not configured
    pass


def _parts(body: Dict[str, Any]) -> List[Any]:
    candidates = body.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return []
    first = candidates[0]
    content = first.get("content") if isinstance(first, dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    return parts if isinstance(parts, list) else []


def find_inline_image(body: Dict[str, Any]) -> Optional[str]:
    """First part of the first candidate carrying inline binary data (base64)."""
    for part in _parts(body):
        if not isinstance(part, dict):
            continue
        inline = part.get("inlineData") or part.get("inline_data")
        if isinstance(inline, dict):
            data = inline.get("data")
            if isinstance(data, str) and data:
                return data
    return None


def _provider_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:200]
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        return str(body["error"].get("message", ""))
    return ""


class ImageClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gemini-2.5-flash-image",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def generate_image(self, description: str) -> str:
        if not self._api_key:
            raise ImageNotReady("GOOGLE_API_KEY not set")

        payload = {"contents": [{"parts": [{"text": description}]}]}
        headers = {"x-goog-api-key": self._api_key, "Content-Type": "application/json"}
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=DEFAULT_TIMEOUT) as cli:
                resp = await cli.post(self.endpoint, json=payload, headers=headers)
        except httpx.HTTPError as e:
            log.warning("image request failed: %s", e)
            raise InvalidResponse(str(e)) from e

        if resp.status_code != 200:
            log.warning("image generation error status=%s message=%s",
                        resp.status_code, _provider_message(resp))
            raise UnknownError(f"image generation failed with status {resp.status_code}")

        try:
            body = resp.json()
        except ValueError as e:
            raise DecodingError("image response is not JSON") from e
        if not isinstance(body, dict):
            raise DecodingError("image response is not a JSON object")

        data = find_inline_image(body)
        if data is None:
            log.warning("image response carried no inline data (parts=%d)", len(_parts(body)))
            raise MissingData("no inline image data")
        return data
