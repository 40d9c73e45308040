from __future__ import annotations

import json

import httpx
import pytest
from fastapi import status

from app.api.deps import evaluator as evaluator_deps
from app.main import app
from app.repositories import evaluation_session_store
from app.repositories.evaluation_session_store import EvaluationSessionStore

PHONE = {"X-Evaluator-Phone": "081 234 5678"}


@pytest.fixture(autouse=True)
def _override(sheet_env, sheet_client):
    store = EvaluationSessionStore()
    app.dependency_overrides[evaluator_deps.get_sheet_client] = lambda: sheet_client
    app.dependency_overrides[evaluation_session_store.get_session_store] = lambda: store
    yield
    app.dependency_overrides.pop(evaluator_deps.get_sheet_client, None)
    app.dependency_overrides.pop(evaluation_session_store.get_session_store, None)


@pytest.mark.asyncio
async def test_login_list_score_and_submit(sheet_requests):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        login = await client.post("/api/login", json={"phone": "0812345678"})
        assert login.status_code == status.HTTP_200_OK
        assert login.json()["role"] == "Recruiter"

        candidates = await client.get("/api/candidates", params={"search": "boon"}, headers=PHONE)
        assert [item["id"] for item in candidates.json()["items"]] == ["Boon"]

        opened = await client.post("/api/evaluations", json={"candidateId": "Boon"}, headers=PHONE)
        assert opened.status_code == status.HTTP_201_CREATED
        session_id = opened.json()["id"]
        assert opened.json()["threshold"] == 50

        early = await client.post(f"/api/evaluations/{session_id}/submit", headers=PHONE)
        assert early.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert "0/3" in early.json()["detail"]["message"]

        for question_id, level in [("Q1", "High"), ("Q2", "High"), ("Q3", "Mid")]:
            response = await client.put(
                f"/api/evaluations/{session_id}/answers/{question_id}",
                json={"level": level},
                headers=PHONE,
            )
            assert response.status_code == status.HTTP_200_OK

        state = response.json()
        assert state["totalScore"] == 10 + 20 + 20
        assert state["maxScore"] == 60
        assert state["passed"] is True
        assert state["complete"] is True

        submitted = await client.post(f"/api/evaluations/{session_id}/submit", headers=PHONE)
        assert submitted.status_code == status.HTTP_200_OK
        assert submitted.json()["totalScore"] == 50

        gone = await client.get(f"/api/evaluations/{session_id}", headers=PHONE)
        assert gone.status_code == status.HTTP_404_NOT_FOUND

    posts = [request for request in sheet_requests if request.method == "POST"]
    assert len(posts) == 1
    body = json.loads(posts[0].content)
    assert body["action"] == "submitEvaluation"
    assert body["candidateName"] == "Boon"
    assert body["area"] == "Chiang Mai"
    assert body["role"] == "Recruiter"
    assert body["totalScore"] == 50
    assert body["answers"] == [
        {"qid": "Q1", "level": "High", "score": 10},
        {"qid": "Q2", "level": "High", "score": 20},
        {"qid": "Q3", "level": "Mid", "score": 20},
    ]


@pytest.mark.asyncio
async def test_weighted_strategy_is_selected_by_configuration(monkeypatch, sheet_client):
    monkeypatch.setenv("SCORE_STRATEGY", "weighted")

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/questions")

    payload = response.json()
    assert payload["strategy"] == "weighted"
    assert payload["maxScore"] == 0
