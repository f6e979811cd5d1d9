# hep_companion/llm/types.py
"""
Provider-neutral request/response records for one generation call.

Only the text and a little metadata travel back to the services; clinical
prompt text is never copied into these records beyond the call itself.
"""

from dataclasses import dataclass, replace
from typing import Any

JsonDict = dict[str, Any]


@dataclass(frozen=True)
class LLMRequest:
    trace_id: str
    purpose: str          # "generate_hep" or "generate_hep_repair"
    prompt_name: str      # key into llm/prompts/registry.py
    prompt_version: str
    variables: JsonDict   # substituted into the system prompt

    provider: str
    model: str

    temperature: float
    max_output_tokens: int
    timeout_seconds: int

    # "application/json" asks the model for a bare JSON body
    response_mime_type: str | None = None


@dataclass(frozen=True)
class LLMResponse:
    trace_id: str
    provider: str
    model: str
    output_text: str

    latency_ms: int
    retries: int
    raw: JsonDict | None = None
    input_tokens: int | None = None
    output_tokens: int | None = None

    def with_retries(self, retries: int) -> "LLMResponse":
        return replace(self, retries=retries)
