import uuid

import pytest

from conftest import OTHER_USER_ID, USER_ID

PROMPT_ID = str(uuid.uuid4())


@pytest.fixture(autouse=True)
def seed_prompt(fake_db):
    fake_db.tables["prompts"] = [{"id": PROMPT_ID, "user_id": USER_ID, "prompt_text": "..."}]


def _payload(**overrides):
    body = {"prompt_id": PROMPT_ID, "suggestion_id": "sugg-1", "relevance_score": 4, "comment": "Useful"}
    body.update(overrides)
    return body


def test_feedback_requires_auth(client):
    assert client.post("/api/feedback", json=_payload()).status_code == 401


def test_feedback_success(client, auth_headers, fake_db):
    resp = client.post("/api/feedback", json=_payload(), headers=auth_headers)

    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["prompt_id"] == PROMPT_ID
    assert body["data"]["relevance_score"] == 4

    rows = fake_db.rows("feedback")
    assert len(rows) == 1
    assert rows[0]["user_id"] == USER_ID
    assert rows[0]["comment"] == "Useful"
    assert body["data"]["id"] == rows[0]["id"]

    audit = fake_db.rows("audit_logs")[0]
    assert audit["action"] == "feedback"
    assert audit["resource_type"] == "feedback"
    assert audit["details"]["score"] == 4


def test_feedback_unknown_prompt(client, auth_headers, fake_db):
    resp = client.post("/api/feedback", json=_payload(prompt_id=str(uuid.uuid4())), headers=auth_headers)

    assert resp.status_code == 404
    assert resp.json()["error"]["message"] == "Prompt not found"
    assert fake_db.rows("feedback") == []


def test_feedback_on_someone_elses_prompt(client, auth_headers, fake_db):
    fake_db.tables["prompts"][0]["user_id"] = OTHER_USER_ID

    resp = client.post("/api/feedback", json=_payload(), headers=auth_headers)

    assert resp.status_code == 403
    assert resp.json()["error"]["message"] == "Unauthorized access to this prompt"
    assert fake_db.rows("feedback") == []


@pytest.mark.parametrize("score", [0, 6])
def test_feedback_score_out_of_range(client, auth_headers, score):
    resp = client.post("/api/feedback", json=_payload(relevance_score=score), headers=auth_headers)

    assert resp.status_code == 400
    assert resp.json()["error"]["details"]["field"] == "relevance_score"


def test_feedback_invalid_prompt_id(client, auth_headers):
    resp = client.post("/api/feedback", json=_payload(prompt_id="not-a-uuid"), headers=auth_headers)
    assert resp.status_code == 400


def test_feedback_survives_audit_failure(client, auth_headers, fake_db):
    fake_db.fail_tables.add("audit_logs")

    resp = client.post("/api/feedback", json=_payload(), headers=auth_headers)

    assert resp.status_code == 200
    assert len(fake_db.rows("feedback")) == 1
