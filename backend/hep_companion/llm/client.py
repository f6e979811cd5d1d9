# hep_companion/llm/client.py

import uuid

from hep_companion.core.config import settings
from hep_companion.llm.errors import LLMError, LLMNonRetryableError
from hep_companion.llm.prompts.registry import get_prompt, render_template
from hep_companion.llm.providers.gemini import GeminiProvider
from hep_companion.llm.retry import call_with_retry
from hep_companion.llm.telemetry import LLMCallLog, log_llm_call, log_prompt_preview, now_ms
from hep_companion.llm.types import LLMRequest, LLMResponse


async def llm_generate(
    *,
    purpose: str,
    prompt_name: str,
    prompt_version: str,
    variables: dict,
    user_prompt: str,
    response_mime_type: str | None = "application/json",
) -> LLMResponse:
    """
    One generation call, retried with exponential backoff on classified
    retryable failures. The last failure propagates unchanged.
    """
    trace_id = str(uuid.uuid4())

    if settings.LLM_PROVIDER != "gemini":
        raise LLMNonRetryableError(f"Unsupported provider: {settings.LLM_PROVIDER}")

    # Ensure repair placeholder exists and is empty by default
    safe_vars = dict(variables)
    safe_vars.setdefault("__REPAIR_INSTRUCTIONS__", "")

    req = LLMRequest(
        trace_id=trace_id,
        purpose=purpose,
        prompt_name=prompt_name,
        prompt_version=prompt_version,
        variables=safe_vars,
        provider="gemini",
        model=settings.GEMINI_MODEL,
        temperature=settings.LLM_TEMPERATURE,
        max_output_tokens=settings.LLM_MAX_OUTPUT_TOKENS,
        timeout_seconds=settings.LLM_TIMEOUT_SECONDS,
        response_mime_type=response_mime_type,
    )

    tmpl = get_prompt(prompt_name, prompt_version)
    system_prompt = render_template(tmpl.template, safe_vars)
    log_prompt_preview(trace_id, user_prompt)

    client = GeminiProvider()
    attempts = 0

    async def attempt() -> LLMResponse:
        nonlocal attempts
        attempts += 1
        return await client.generate(req, system_prompt, user_prompt)

    start_ms = now_ms()
    try:
        resp = await call_with_retry(
            attempt,
            settings.LLM_MAX_RETRIES,
            settings.LLM_BASE_DELAY_MS,
        )
    except Exception as e:
        log_llm_call(
            LLMCallLog(
                trace_id=trace_id,
                provider=req.provider,
                model=req.model,
                purpose=purpose,
                prompt_name=prompt_name,
                prompt_version=prompt_version,
                latency_ms=(now_ms() - start_ms),
                retries=max(attempts - 1, 0),
                ok=False,
                error_type=type(e).__name__,
                status_code=e.status_code if isinstance(e, LLMError) else None,
            )
        )
        raise

    log_llm_call(
        LLMCallLog(
            trace_id=trace_id,
            provider=req.provider,
            model=req.model,
            purpose=purpose,
            prompt_name=prompt_name,
            prompt_version=prompt_version,
            latency_ms=(now_ms() - start_ms),
            retries=attempts - 1,
            ok=True,
        )
    )

    return resp.with_retries(attempts - 1)
