import pytest

from hep_companion.core.config import settings
from hep_companion.llm import client as llm_client
from hep_companion.llm.errors import LLMNonRetryableError, LLMRetryableError
from hep_companion.llm.types import LLMResponse

pytestmark = pytest.mark.asyncio


class ScriptedProvider:
    """Stands in for GeminiProvider; replays outcomes in order."""

    outcomes: list = []
    calls: list = []

    async def generate(self, req, system_prompt, user_prompt):
        outcome = self.outcomes[len(self.calls)]
        self.calls.append((req, system_prompt, user_prompt))
        if isinstance(outcome, BaseException):
            raise outcome
        return LLMResponse(
            trace_id=req.trace_id,
            provider=req.provider,
            model=req.model,
            output_text=outcome,
            latency_ms=1,
            retries=0,
        )


@pytest.fixture
def provider(monkeypatch):
    ScriptedProvider.outcomes = []
    ScriptedProvider.calls = []
    monkeypatch.setattr(llm_client, "GeminiProvider", ScriptedProvider)
    monkeypatch.setattr(settings, "LLM_BASE_DELAY_MS", 0)
    monkeypatch.setattr(settings, "LLM_MAX_RETRIES", 3)
    return ScriptedProvider


async def _generate(variables=None):
    return await llm_client.llm_generate(
        purpose="generate_hep",
        prompt_name="hep_system",
        prompt_version="v1",
        variables=variables or {"exercise_library": "[]"},
        user_prompt="Patient with knee pain after ACL surgery needs strengthening",
    )


async def test_llm_generate_retries_transient_failures(provider):
    provider.outcomes = [
        LLMRetryableError("rate limited", status_code=429),
        LLMRetryableError("overloaded", status_code=503),
        '{"ok": true}',
    ]

    resp = await _generate()

    assert resp.output_text == '{"ok": true}'
    assert resp.retries == 2
    assert len(provider.calls) == 3


async def test_llm_generate_does_not_retry_non_retryable(provider):
    err = LLMNonRetryableError("invalid key", status_code=401)
    provider.outcomes = [err, "unused"]

    with pytest.raises(LLMNonRetryableError) as exc_info:
        await _generate()

    assert exc_info.value is err
    assert len(provider.calls) == 1


async def test_llm_generate_renders_system_prompt(provider):
    provider.outcomes = ["{}"]

    await _generate({"exercise_library": '[{"name": "Bridge"}]'})

    _, system_prompt, _ = provider.calls[0]
    assert '[{"name": "Bridge"}]' in system_prompt
    assert "{{" not in system_prompt


async def test_llm_generate_rejects_unknown_provider(provider, monkeypatch):
    monkeypatch.setattr(settings, "LLM_PROVIDER", "other")

    with pytest.raises(LLMNonRetryableError):
        await _generate()
    assert provider.calls == []


async def test_missing_api_key_is_not_retried(monkeypatch):
    monkeypatch.setattr(settings, "GEMINI_API_KEY", None)
    monkeypatch.setattr(settings, "LLM_BASE_DELAY_MS", 0)

    with pytest.raises(LLMNonRetryableError, match="GEMINI_API_KEY"):
        await _generate()
