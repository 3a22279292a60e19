# cardb/nlp/llm.py
from __future__ import annotations
import logging
from typing import List, Optional, Protocol

import openai
from openai import AsyncOpenAI

from cardb.errors import ConfigurationError, ModelNotFound, RateLimited

logger = logging.getLogger(__name__)


class LLMBackend(Protocol):
    async def generate(self, model_id: str, prompt: str, *, temperature: float = 0.2) -> str: ...


# ------------------------------------------------------------------------------------
# OpenAI (or any OpenAI-compatible gateway)
# ------------------------------------------------------------------------------------
def translate_openai_error(exc: Exception) -> Exception:
    """Maps client errors onto the pipeline's classes; unknown errors pass through."""
    status = getattr(exc, "status_code", None)
    text = str(exc).lower()
    if isinstance(exc, openai.RateLimitError) or status == 429 or "quota exceeded" in text:
        return RateLimited(str(exc))
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)) or status in (401, 403):
        return ConfigurationError(str(exc))
    if isinstance(exc, openai.NotFoundError) or status == 404 or "not found" in text:
        return ModelNotFound(str(exc))
    return exc


class OpenAIBackend:
    """
    One AsyncOpenAI client per process. Client-side retries are off: a 429
    reaches the router as is.
    """

    def __init__(self, api_key: str, base_url: Optional[str] = None, timeout: float = 30.0):
        self.api_key = (api_key or "").strip()
        self._client: Optional[AsyncOpenAI] = None
        if self.api_key:
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=base_url,
                timeout=timeout,
                max_retries=0,
            )

    async def generate(self, model_id: str, prompt: str, *, temperature: float = 0.2) -> str:
        if self._client is None:
            raise ConfigurationError("OPENAI_API_KEY is not set")
        try:
            completion = await self._client.chat.completions.create(
                model=model_id,
                messages=[{"role": "user", "content": prompt}],
                temperature=temperature,
                max_tokens=600,
            )
        except openai.APIStatusError as e:
            raise translate_openai_error(e) from e
        return (completion.choices[0].message.content or "").strip()


# ------------------------------------------------------------------------------------
# Ordered fallback over candidate models
# ------------------------------------------------------------------------------------
class ModelRouter:
    """
    Tries `candidates` in order:
      - ModelNotFound -> next candidate
      - RateLimited   -> abort (the quota is shared by all candidates)
      - other errors  -> next candidate, re-raised once the list is exhausted
    """

    def __init__(self, backend: LLMBackend, candidates: List[str]):
        if not candidates:
            raise ValueError("at least one candidate model is required")
        self.backend = backend
        self.candidates = list(candidates)

    async def complete(self, prompt: str, *, temperature: float = 0.2) -> str:
        last_error: Optional[Exception] = None
        for model_id in self.candidates:
            try:
                return await self.backend.generate(model_id, prompt, temperature=temperature)
            except RateLimited:
                logger.warning("model %s rate limited, aborting", model_id)
                raise
            except ConfigurationError:
                raise
            except ModelNotFound as e:
                logger.warning("model %s not found, trying next", model_id)
                last_error = e
            except Exception as e:
                logger.warning("model %s failed: %s", model_id, type(e).__name__)
                last_error = e
        raise last_error
