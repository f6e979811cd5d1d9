import json

import pytest

from conftest import USER_ID
from hep_companion.core.config import settings
from hep_companion.llm.errors import LLMNonRetryableError, LLMRetryableError
from hep_companion.llm.types import LLMResponse
from hep_companion.utils.patient_key import generate_patient_key

PROMPT = "32 year old soccer player, 6 weeks post-op ACL reconstruction, knee pain with stairs"

PROGRAM = {
    "exercises": [
        {"name": "Quad sets", "sets": 3, "reps": "10", "notes": "Hold 5s", "evidence_source": "JOSPT, 2019"},
        {"name": "Heel slides", "sets": 2, "reps": "15", "evidence_source": "AJSM, 2020"},
    ],
    "clinical_notes": "Focus on quadriceps activation and ROM.",
    "citations": ["JOSPT 2019", "AJSM 2020"],
    "confidence_level": "medium",
}

EXERCISES = [
    {
        "id": "ex-1",
        "condition": "ACL",
        "name": "Quad sets",
        "description": "Isometric quadriceps contraction",
        "journal": "JOSPT",
        "year": 2019,
        "doi": "10.2519/jospt.2019.0001",
        "created_at": "2024-01-01T00:00:00+00:00",
    }
]


class FakeLLM:
    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    async def __call__(self, **kwargs):
        outcome = self.outcomes[len(self.calls)]
        self.calls.append(kwargs)
        if isinstance(outcome, BaseException):
            raise outcome
        return LLMResponse(
            trace_id="t",
            provider="gemini",
            model="test",
            output_text=outcome,
            latency_ms=1,
            retries=0,
        )


@pytest.fixture
def fake_llm(monkeypatch):
    def install(*outcomes):
        llm = FakeLLM(*outcomes)
        monkeypatch.setattr("hep_companion.services.generation_service.llm_generate", llm)
        return llm

    return install


@pytest.fixture(autouse=True)
def seed_exercises(fake_db):
    fake_db.tables["exercises"] = [dict(e) for e in EXERCISES]


def test_generate_requires_auth(client, fake_llm):
    llm = fake_llm(json.dumps(PROGRAM))
    resp = client.post("/api/generate", json={"prompt": PROMPT})
    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "UNAUTHORIZED"
    assert llm.calls == []


def test_generate_rejects_invalid_token(client, fake_llm):
    fake_llm(json.dumps(PROGRAM))
    resp = client.post("/api/generate", json={"prompt": PROMPT}, headers={"Authorization": "Bearer nope"})
    assert resp.status_code == 401


def test_generate_rejects_short_prompt(client, auth_headers, fake_llm):
    llm = fake_llm(json.dumps(PROGRAM))
    resp = client.post("/api/generate", json={"prompt": "knee pain"}, headers=auth_headers)

    assert resp.status_code == 400
    body = resp.json()["error"]
    assert body["code"] == "VALIDATION_ERROR"
    assert body["details"]["field"] == "prompt"
    assert llm.calls == []


def test_generate_rejects_prompt_without_clinical_detail(client, auth_headers, fake_llm):
    llm = fake_llm(json.dumps(PROGRAM))
    prompt = "Please write me something nice for a person I saw this afternoon today"
    resp = client.post("/api/generate", json={"prompt": prompt}, headers=auth_headers)

    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "Please include specific clinical terms and patient details"
    assert llm.calls == []


def test_generate_success_stores_prompt_and_audits(client, auth_headers, fake_db, fake_llm):
    llm = fake_llm("```json\n" + json.dumps(PROGRAM) + "\n```")

    resp = client.post(
        "/api/generate",
        json={"prompt": PROMPT, "mrn": "MRN-1", "clinic_id": "CLINIC-ABC123"},
        headers=auth_headers,
    )

    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert [e["name"] for e in body["exercises"]] == ["Quad sets", "Heel slides"]
    assert all(e["id"] for e in body["exercises"])
    assert body["confidence_level"] == "medium"

    prompts = fake_db.rows("prompts")
    assert len(prompts) == 1
    stored = prompts[0]
    assert stored["id"] == body["id"]
    assert stored["user_id"] == USER_ID
    assert stored["prompt_text"] == PROMPT
    assert stored["patient_key"] == generate_patient_key("MRN-1", "CLINIC-ABC123")
    assert "MRN-1" not in json.dumps(stored)

    audits = fake_db.rows("audit_logs")
    assert audits[0]["action"] == "generate"
    assert audits[0]["resource_id"] == body["id"]

    call = llm.calls[0]
    assert call["prompt_name"] == "hep_system"
    assert "Quad sets" in call["variables"]["exercise_library"]
    assert "JOSPT, 2019 (DOI: 10.2519/jospt.2019.0001)" in call["variables"]["exercise_library"]
    assert call["user_prompt"] == PROMPT


def test_generate_without_mrn_has_no_patient_key(client, auth_headers, fake_db, fake_llm):
    fake_llm(json.dumps(PROGRAM))
    resp = client.post("/api/generate", json={"prompt": PROMPT}, headers=auth_headers)

    assert resp.status_code == 200
    assert fake_db.rows("prompts")[0]["patient_key"] is None


def test_generate_accepts_session_cookie(client, fake_llm):
    from conftest import make_token

    fake_llm(json.dumps(PROGRAM))
    client.cookies.set(settings.SESSION_COOKIE_NAME, make_token())
    resp = client.post("/api/generate", json={"prompt": PROMPT})

    assert resp.status_code == 200


def test_generate_repairs_unparseable_output(client, auth_headers, fake_llm):
    llm = fake_llm("Sure! Here are some exercises: quad sets, heel slides.", json.dumps(PROGRAM))

    resp = client.post("/api/generate", json={"prompt": PROMPT}, headers=auth_headers)

    assert resp.status_code == 200
    assert len(llm.calls) == 2
    assert "__REPAIR_INSTRUCTIONS__" not in llm.calls[0]["variables"]
    assert llm.calls[1]["variables"]["__REPAIR_INSTRUCTIONS__"]
    assert llm.calls[1]["purpose"] == "generate_hep_repair"


def test_generate_gives_up_after_processing_attempts(client, auth_headers, fake_db, fake_llm):
    llm = fake_llm("", "still not json")

    resp = client.post("/api/generate", json={"prompt": PROMPT}, headers=auth_headers)

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "PARSE_ERROR"
    assert len(llm.calls) == settings.LLM_MAX_PROCESSING_ATTEMPTS
    assert fake_db.rows("prompts") == []


def test_generate_schema_violation_is_not_repaired(client, auth_headers, fake_llm):
    bad = dict(PROGRAM, citations=[])
    llm = fake_llm(json.dumps(bad), json.dumps(PROGRAM))

    resp = client.post("/api/generate", json={"prompt": PROMPT}, headers=auth_headers)

    assert resp.status_code == 400
    body = resp.json()["error"]
    assert body["code"] == "VALIDATION_ERROR"
    assert "citations" in body["message"]
    assert len(llm.calls) == 1


def test_generate_maps_upstream_failure(client, auth_headers, fake_db, fake_llm):
    fake_llm(
        LLMRetryableError("rate limited", status_code=429),
        LLMRetryableError("rate limited again", status_code=429),
    )

    resp = client.post("/api/generate", json={"prompt": PROMPT}, headers=auth_headers)

    assert resp.status_code == 429
    body = resp.json()["error"]
    assert body["code"] == "LLM_API_ERROR"
    assert body["message"] == "There was a problem connecting to our AI service"
    assert body["details"]["upstream"] == "rate limited again"
    assert fake_db.rows("prompts") == []


def test_generate_upstream_failure_then_success(client, auth_headers, fake_llm):
    llm = fake_llm(LLMNonRetryableError("bad request", status_code=400), json.dumps(PROGRAM))

    resp = client.post("/api/generate", json={"prompt": PROMPT}, headers=auth_headers)

    assert resp.status_code == 200
    assert len(llm.calls) == 2


def test_generate_falls_back_when_library_unavailable(client, auth_headers, fake_db, fake_llm):
    fake_db.fail_tables.add("exercises")
    llm = fake_llm(json.dumps(PROGRAM))

    resp = client.post("/api/generate", json={"prompt": PROMPT}, headers=auth_headers)

    assert resp.status_code == 200
    assert llm.calls[0]["prompt_name"] == "hep_system_fallback"


def test_generate_succeeds_when_audit_write_fails(client, auth_headers, fake_db, fake_llm):
    fake_db.fail_tables.add("audit_logs")
    fake_llm(json.dumps(PROGRAM))

    resp = client.post("/api/generate", json={"prompt": PROMPT}, headers=auth_headers)

    assert resp.status_code == 200
    assert len(fake_db.rows("prompts")) == 1


def test_generate_storage_failure_is_db_error(client, auth_headers, fake_db, fake_llm):
    fake_db.fail_tables.add("prompts")
    fake_llm(json.dumps(PROGRAM))

    resp = client.post("/api/generate", json={"prompt": PROMPT}, headers=auth_headers)

    assert resp.status_code == 500
    assert resp.json()["error"]["code"] == "DB_ERROR"


def _events(resp) -> list[dict]:
    return [json.loads(line[len("data: "):]) for line in resp.text.splitlines() if line.startswith("data: ")]


def test_generate_stream_reports_stages(client, auth_headers, fake_llm):
    fake_llm(json.dumps(PROGRAM))

    resp = client.post("/api/generate-stream", json={"prompt": PROMPT}, headers=auth_headers)

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/event-stream")
    events = _events(resp)
    assert [e["stage"] for e in events] == [
        "started",
        "fetching-exercises",
        "generating",
        "validating",
        "storing",
        "complete",
    ]
    assert [e["progress"] for e in events] == [0, 10, 30, 70, 85, 100]
    assert len(events[-1]["result"]["exercises"]) == 2


def test_generate_stream_reports_errors_in_band(client, auth_headers, fake_llm):
    fake_llm(LLMRetryableError("overloaded", status_code=503), LLMRetryableError("overloaded", status_code=503))

    resp = client.post("/api/generate-stream", json={"prompt": PROMPT}, headers=auth_headers)

    assert resp.status_code == 200
    last = _events(resp)[-1]
    assert last["stage"] == "error"
    assert last["code"] == "LLM_API_ERROR"


def test_generate_stream_requires_auth(client, fake_llm):
    fake_llm(json.dumps(PROGRAM))
    resp = client.post("/api/generate-stream", json={"prompt": PROMPT})
    assert resp.status_code == 401


def test_generate_unexpected_attempt_failure_moves_to_next_attempt(client, auth_headers, fake_llm):
    llm = fake_llm(RuntimeError("connection pool closed"), json.dumps(PROGRAM))

    resp = client.post("/api/generate", json={"prompt": PROMPT}, headers=auth_headers)

    assert resp.status_code == 200
    assert len(llm.calls) == 2
    assert llm.calls[1]["purpose"] == "generate_hep_repair"


def test_generate_unexpected_failures_on_every_attempt(client, auth_headers, fake_db, fake_llm):
    fake_llm(RuntimeError("boom"), RuntimeError("boom again"))

    resp = client.post("/api/generate", json={"prompt": PROMPT}, headers=auth_headers)

    assert resp.status_code == 500
    body = resp.json()["error"]
    assert body["code"] == "INTERNAL_ERROR"
    assert body["message"] == "Failed to generate suggestions"
    assert fake_db.rows("prompts") == []
