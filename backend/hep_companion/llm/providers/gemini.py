# hep_companion/llm/providers/gemini.py
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from hep_companion.core.config import settings
from hep_companion.llm.errors import (
    DEFAULT_STATUS_CODE,
    LLMError,
    LLMNonRetryableError,
    LLMRetryableError,
    is_retryable_failure,
)
from hep_companion.llm.types import LLMRequest, LLMResponse


def _status_of(exc: BaseException) -> int:
    # httpx.HTTPStatusError keeps the status on its response
    candidates = [getattr(exc, attr, None) for attr in ("code", "status_code", "status")]
    candidates.append(getattr(getattr(exc, "response", None), "status_code", None))
    for value in candidates:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return DEFAULT_STATUS_CODE


def to_llm_error(exc: BaseException) -> LLMError:
    """Translate a raw SDK/network failure into a classified LLMError."""
    if isinstance(exc, LLMError):
        return exc
    if isinstance(exc, (httpx.TimeoutException, TimeoutError)):
        return LLMRetryableError(f"Gemini call timed out: {exc}", status_code=504)

    status = _status_of(exc)
    message = getattr(exc, "message", None) or str(exc) or "Error calling Gemini API"
    return LLMError(
        f"Gemini API error: {message}",
        status_code=status,
        retryable=is_retryable_failure(status, message),
    )


@dataclass
class GeminiProvider:
    """
    Gemini provider using Google Gen AI SDK (google-genai), async surface.
    Single-attempt. Retries/backoff handled by hep_companion/llm/retry.py.
    """
    _client: Optional[genai.Client] = None

    def _get_client(self) -> genai.Client:
        if not settings.GEMINI_API_KEY:
            raise LLMNonRetryableError("GEMINI_API_KEY is missing")
        if self._client is None:
            self._client = genai.Client(api_key=settings.GEMINI_API_KEY)
        return self._client

    async def generate(self, req: LLMRequest, system_prompt: str, user_prompt: str) -> LLMResponse:
        client = self._get_client()
        start_ms = int(time.time() * 1000)

        try:
            # HttpOptions timeout is in milliseconds
            http_opts = types.HttpOptions(timeout=int(req.timeout_seconds * 1000))

            cfg = types.GenerateContentConfig(
                system_instruction=system_prompt,
                temperature=req.temperature,
                max_output_tokens=req.max_output_tokens,
                response_mime_type=req.response_mime_type,
                http_options=http_opts,
            )

            resp = await client.aio.models.generate_content(
                model=req.model,
                contents=user_prompt,
                config=cfg,
            )
        except genai_errors.APIError as e:
            raise to_llm_error(e) from e
        except (httpx.TimeoutException, TimeoutError) as e:
            raise to_llm_error(e) from e
        except httpx.HTTPError as e:
            raise to_llm_error(e) from e

        text = (getattr(resp, "text", None) or "").strip()

        # Token usage: best-effort, won't break if missing
        input_tokens = None
        output_tokens = None
        usage = getattr(resp, "usage_metadata", None)
        if usage is not None:
            input_tokens = getattr(usage, "prompt_token_count", None)
            output_tokens = getattr(usage, "candidates_token_count", None)

        latency_ms = int(time.time() * 1000) - start_ms

        return LLMResponse(
            trace_id=req.trace_id,
            provider=req.provider,
            model=req.model,
            output_text=text,
            latency_ms=latency_ms,
            retries=0,
            raw={"sdk_response_type": str(type(resp))},
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
