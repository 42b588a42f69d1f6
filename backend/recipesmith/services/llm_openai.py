# recipesmith/services/llm_openai.py
# Recipe text generation (OpenAI Chat Completions)
# - system prompt pins the JSON schema, user message carries the built prompt
# - code fences stripped, JSON decoded, then validated; no retries

from __future__ import annotations
import json
import logging
from typing import Any, Optional

import openai
from openai import AsyncOpenAI
from pydantic import ValidationError

from recipesmith.models.recipe import Recipe
from recipesmith.services.errors import (
    BadStatusCode,
    DecodingError,
    EmptyContent,
    EncodingError,
    InvalidResponse,
    RecipeAPIError,
)
from recipesmith.services.prompt_builder import SYSTEM_PROMPT
from recipesmith.services.utils import strip_code_fences
from recipesmith.services.validation import validate_recipe

log = logging.getLogger(__name__)


class LLMNotReady(RecipeAPIError):
    # generation unavailable (no API key configured)
    pass


def decode_recipe(text: str) -> Recipe:
    """Model text -> validated Recipe. Raises EncodingError / DecodingError."""
    cleaned = strip_code_fences(text)
    try:
        raw = cleaned.encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncodingError(str(e)) from e

    try:
        obj = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        log.warning("model returned non-JSON content (%d chars)", len(cleaned))
        raise DecodingError("content is not JSON") from e
    if not isinstance(obj, dict):
        raise DecodingError("content is not a JSON object")
    # the identifier is always ours, never the model's
    obj.pop("id", None)

    try:
        recipe = Recipe.model_validate(obj)
    except ValidationError as e:
        log.warning("model JSON has unexpected shape: %s", e.errors(include_url=False)[:5])
        raise DecodingError("unexpected recipe shape") from e
    return validate_recipe(recipe)


class GenerationClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gpt-4.1-mini",
        temperature: float = 0.7,
        max_tokens: int = 2000,
        client: Any = None,
    ):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._api_key = api_key
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            if not self._api_key:
                raise LLMNotReady("OPENAI_API_KEY not set")
            self._client = AsyncOpenAI(api_key=self._api_key)
        return self._client

    async def generate_recipe_data(self, prompt: str) -> Recipe:
        client = self._get_client()
        try:
            chat = await client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except openai.APIStatusError as e:
            log.warning("chat completion failed status=%s", e.status_code)
            raise BadStatusCode(e.status_code) from e
        except (openai.APIConnectionError, openai.APIResponseValidationError) as e:
            log.warning("chat completion transport failure: %s", e)
            raise InvalidResponse(str(e)) from e

        choices = getattr(chat, "choices", None) if chat is not None else None
        if not choices:
            raise EmptyContent("no choices returned")
        message = getattr(choices[0], "message", None)
        text = getattr(message, "content", None) if message is not None else None
        if not text or not text.strip():
            log.warning("chat completion returned empty text")
            raise EmptyContent("empty message content")

        recipe = decode_recipe(text)
        log.info("generated recipe title=%r", recipe.title)
        return recipe
