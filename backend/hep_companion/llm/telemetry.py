# hep_companion/llm/telemetry.py

import logging
import time
from dataclasses import dataclass

from hep_companion.core.config import settings

logger = logging.getLogger("hep_companion.llm")

@dataclass
class LLMCallLog:
    trace_id: str
    provider: str
    model: str
    purpose: str
    prompt_name: str
    prompt_version: str
    latency_ms: int
    retries: int
    ok: bool
    error_type: str | None = None
    status_code: int | None = None

def now_ms() -> int:
    return int(time.time() * 1000)

def log_llm_call(item: LLMCallLog) -> None:
    logger.info(
        "llm_call trace_id=%s provider=%s model=%s purpose=%s prompt=%s@%s latency_ms=%s retries=%s ok=%s error=%s status=%s",
        item.trace_id,
        item.provider,
        item.model,
        item.purpose,
        item.prompt_name,
        item.prompt_version,
        item.latency_ms,
        item.retries,
        item.ok,
        item.error_type,
        item.status_code,
    )

def log_prompt_preview(trace_id: str, user_prompt: str) -> None:
    # Clinical prompts may contain PHI; only log when explicitly enabled.
    if not settings.LLM_LOG_PROMPTS:
        return
    logger.info("llm_prompt trace_id=%s preview=%s", trace_id, user_prompt[:50])
