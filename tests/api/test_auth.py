"""API key checks on every /v1 route."""

from fastapi.testclient import TestClient

from argos.api.auth import api_key_matches
from argos.api.main import app
from argos.config.settings import settings


def test_api_key_matches():
    assert api_key_matches("abc", "abc") is True
    assert api_key_matches("abc", "abd") is False
    assert api_key_matches(None, "abc") is False
    assert api_key_matches("abc", None) is False
    assert api_key_matches("", "") is False


def test_missing_key_is_401(client):
    bare = TestClient(app)
    for method, path in [
        ("get", "/v1/inference"),
        ("post", "/v1/inference/start"),
        ("get", "/v1/counts"),
        ("get", "/v1/data-records"),
    ]:
        res = getattr(bare, method)(path)
        assert res.status_code == 401, path
        assert res.headers["content-type"].startswith("application/problem+json")
        assert res.json()["detail"] == "API key is missing or invalid"


def test_wrong_key_is_401_before_validation(client):
    res = client.post("/v1/inference/start", json={}, headers={"x-api-key": "nope"})
    assert res.status_code == 401


def test_unset_server_key_rejects_everything(client, monkeypatch):
    monkeypatch.setattr(settings, "api_key", None)
    assert client.get("/v1/inference").status_code == 401


def test_health_needs_no_key(client):
    assert TestClient(app).get("/ready").status_code == 200
