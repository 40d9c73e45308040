import json

import httpx
import pytest

from app.clients.sheet_api import SheetApiClient

SHEET_URL = "https://script.google.com/macros/s/test-deployment/exec"


def initial_data_payload():
    return {
        "status": "success",
        "users": [
            {"id": "u1", "name": "Rita Recruiter", "phone": "081-234-5678", "role": "Recruiter", "area": "Bangkok"},
            {"id": "u2", "name": "Sam Supervisor", "phone": "0899999999", "role": "Supervisor", "area": "Chiang Mai"},
        ],
        "candidates": [
            {"candidate_name": "Anan", "area": "Bangkok", "phone": "0811111111", "position": "Driver", "sup_status": "", "sup_score": "", "rec_status": "done", "rec_score": "55"},
            {"candidate_name": "Boon", "area": "Chiang Mai", "phone": "0822222222", "position": "Warehouse Staff", "sup_status": "", "sup_score": "", "rec_status": "", "rec_score": ""},
            {"candidate_name": "Chai", "area": "Chiang Mai", "phone": "0833333333", "position": "Driver", "sup_status": "done", "sup_score": 70, "rec_status": "", "rec_score": ""},
        ],
        "questions": [
            {"qid": "Q1", "category": "Attitude", "question": "Punctuality", "detail": "Arrives on time", "low": 3, "mid": 6, "high": 10},
            {"qid": "Q2", "category": "Skills", "question": "Driving record", "detail": "", "low": "5", "mid": "10", "high": "20"},
            {"qid": "Q3", "category": "Attitude", "question": "Teamwork", "detail": "Works with others", "scoreLow": 10, "scoreMid": 20, "scoreHigh": 30},
        ],
    }


@pytest.fixture
def sheet_env(monkeypatch):
    monkeypatch.setenv("SHEET_API_URL", SHEET_URL)
    monkeypatch.setenv("PASS_THRESHOLD", "50")
    monkeypatch.delenv("SCORE_STRATEGY", raising=False)
    monkeypatch.delenv("SHEET_API_TIMEOUT_SECONDS", raising=False)
    monkeypatch.delenv("SHEET_API_RETRIES", raising=False)


@pytest.fixture
def sheet_requests():
    return []


@pytest.fixture
async def sheet_client(sheet_requests):
    async def handler(request):
        sheet_requests.append(request)
        if request.method == "GET":
            return httpx.Response(200, json=initial_data_payload())
        return httpx.Response(200, json={"status": "success", "body": json.loads(request.content)})

    client = SheetApiClient(url=SHEET_URL, transport=httpx.MockTransport(handler))
    yield client
    await client.close()


@pytest.fixture
def initial_data():
    return initial_data_payload()
