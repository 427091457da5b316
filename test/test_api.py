import importlib

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_backend
from conftest import FakeRecognizer

SCENARIO_REPLY = (
    '```json\n{"tasks":[{"title":"买菜","category":"生活","estimatedTime":30,"subtasks":'
    '[{"title":"列购物清单","completed":false},{"title":"前往超市采购","completed":false}]},'
    '{"title":"打扫房间","category":"生活","estimatedTime":45,"subtasks":[{"title":"整理客厅","completed":false}]}]}\n```'
)


@pytest.fixture
def app_client(backend):
    mod = importlib.import_module("api.main")
    mod.app.dependency_overrides[get_backend] = lambda: backend
    try:
        yield TestClient(mod.app)
    finally:
        mod.app.dependency_overrides.clear()


def test_providers_catalog(app_client):
    r = app_client.get("/providers")
    assert r.status_code == 200
    assert len(r.json()["providers"]) == 8

    r = app_client.get("/providers", params={"capability": "speech"})
    assert [p["id"] for p in r.json()["providers"]] == ["openai", "browser-speech"]

    assert app_client.get("/providers/nope").status_code == 404
    assert app_client.get("/providers", params={"capability": "video"}).status_code == 400


def test_structure_then_save_flow(app_client, backend, fake_llm_factory):
    backend.extractor.llm_client = fake_llm_factory(SCENARIO_REPLY)

    r = app_client.post("/structure", json={"text": "买菜，然后打扫房间"}, headers={"X-User-Id": "u1"})
    assert r.status_code == 200
    payload = r.json()
    assert [t["title"] for t in payload["tasks"]] == ["买菜", "打扫房间"]

    r = app_client.post("/tasks", json=payload, headers={"X-User-Id": "u1"})
    assert r.status_code == 200
    saved = r.json()["tasks"]
    assert len(saved) == 2
    assert len(saved[0]["subtasks"]) == 2
    assert saved[0]["estimatedTime"] == 30
    assert all(t["completed"] is False for t in saved)

    r = app_client.get("/tasks", headers={"X-User-Id": "u1"})
    assert r.json()["total"] == 2
    assert app_client.get("/tasks", headers={"X-User-Id": "u2"}).json()["total"] == 0


def test_toggle_and_patch(app_client, backend, fake_llm_factory):
    backend.extractor.llm_client = fake_llm_factory(SCENARIO_REPLY)
    payload = app_client.post("/structure", json={"text": "x"}).json()
    task = app_client.post("/tasks", json=payload).json()["tasks"][1]

    sid = task["subtasks"][0]["id"]
    r = app_client.post(f"/tasks/{task['id']}/subtasks/{sid}/toggle")
    assert r.status_code == 200
    assert r.json()["completed"] is True

    r = app_client.patch(f"/tasks/{task['id']}", json={"title": "大扫除", "estimatedTime": 90})
    assert r.json()["title"] == "大扫除"
    assert r.json()["estimatedTime"] == 90
    assert r.json()["completed"] is True

    assert app_client.delete(f"/tasks/{task['id']}").status_code == 200
    assert app_client.delete(f"/tasks/{task['id']}").status_code == 404


def test_missing_credential_maps_to_400(app_client):
    r = app_client.post("/structure", json={"text": "买菜"})
    assert r.status_code == 400
    assert r.json()["error"] == "missing_credential"
    assert "API 密钥" in r.json()["message"]


def test_malformed_reply_maps_to_502(app_client, backend, fake_llm_factory):
    backend.extractor.llm_client = fake_llm_factory("I could not do that")
    r = app_client.post("/structure", json={"text": "买菜"})
    assert r.status_code == 502
    assert r.json()["error"] == "malformed_response"


def test_save_rejects_payload_without_tasks(app_client):
    assert app_client.post("/tasks", json={}).status_code == 422
    assert app_client.post("/tasks", json={"tasks": [{"subtasks": "bad"}]}).status_code == 422


def test_settings_endpoints_mask_keys(app_client):
    r = app_client.put("/settings", json={"text_provider": "deepseek", "text_model": "deepseek-chat"})
    assert r.status_code == 200
    assert r.json()["text_provider"] == "deepseek"

    r = app_client.put("/settings/api-keys/deepseek", json={"api_key": "sk-abcdef123456"})
    assert r.status_code == 200
    assert r.json()["api_key"] == "********3456"

    body = app_client.get("/settings").json()
    assert body["api_keys"] == {"deepseek": "********3456"}
    assert "sk-abcdef123456" not in str(body)

    assert app_client.delete("/settings/api-keys/deepseek").status_code == 200
    assert app_client.get("/settings").json()["api_keys"] == {}


def test_settings_reject_wrong_capability(app_client):
    assert app_client.put("/settings", json={"speech_provider": "deepseek"}).status_code == 400
    assert app_client.put("/settings/api-keys/ghost", json={"api_key": "x"}).status_code == 404


def test_transcribe_with_local_recognizer(app_client, backend):
    backend.transcriber.local_recognizer = FakeRecognizer(text="买菜")
    r = app_client.post("/transcribe", files={"file": ("a.webm", b"\x00\x01", "audio/webm")})
    assert r.status_code == 200
    assert r.json() == {"text": "买菜"}


def test_transcribe_without_recognizer(app_client):
    r = app_client.post("/transcribe", files={"file": ("a.webm", b"\x00\x01", "audio/webm")})
    assert r.status_code == 400
    assert r.json()["error"] == "unsupported_capability"


def test_health_and_metrics(app_client, backend, fake_llm_factory):
    assert app_client.get("/health").json()["status"] == "healthy"
    backend.extractor.llm_client = fake_llm_factory(SCENARIO_REPLY)
    app_client.post("/structure", json={"text": "x"})

    m = app_client.get("/metrics")
    assert m.status_code == 200
    assert "text/plain" in m.headers.get("content-type", "")
    body = m.text
    assert "mindstream_tasks_structured_total" in body
    assert any(
        line.startswith('mindstream_requests_total{endpoint="/structure",status="200"}')
        for line in body.splitlines()
    )
