import json
import logging

from fastapi.testclient import TestClient

from argos.api.main import app
from argos.api.rate_limit import RateLimiter
from argos.observability import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("argos.test", logging.INFO, __file__, 1, "inference %s", ("started",), None)
    record.__dict__.update(extra)
    return record


def test_json_formatter_includes_known_extras():
    line = JSONFormatter().format(_record(inference_id="abc", machine_id="m1", api_key="secret"))
    payload = json.loads(line)
    assert payload["message"] == "inference started"
    assert payload["level"] == "INFO"
    assert payload["inference_id"] == "abc"
    assert payload["machine_id"] == "m1"
    assert "api_key" not in payload


def test_setup_logging_replaces_its_own_handler():
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    try:
        setup_logging("debug", "json")
        setup_logging("warning", "text")
        ours = [h for h in root.handlers if getattr(h, "_argos", False)]
        assert len(ours) == 1
        assert not isinstance(ours[0].formatter, JSONFormatter)
        assert root.level == logging.WARNING
    finally:
        for h in list(root.handlers):
            if h not in before:
                root.removeHandler(h)
        root.setLevel(level)


def test_lifespan_runs_and_marks_shutdown(client):
    with TestClient(app) as c:
        assert c.get("/ready").status_code == 200
    assert app.state.shutting_down is True
    app.state.shutting_down = False


def test_access_log_line_per_request(client, caplog):
    with caplog.at_level(logging.INFO, logger="argos.access"):
        client.get("/v1/inference", params={"limit": 5})
        client.get("/v1/nowhere")

    records = [r for r in caplog.records if r.name == "argos.access"]
    assert [(r.method, r.path, r.status) for r in records] == [
        ("GET", "/v1/inference", 200),
        ("GET", "/v1/nowhere", 404),
    ]
    assert all(r.duration_ms >= 0 for r in records)
    assert records[0].getMessage() == "GET /v1/inference 200"

    payload = json.loads(JSONFormatter().format(records[0]))
    assert payload["status"] == 200
    assert payload["path"] == "/v1/inference"
    assert "test-api-key" not in caplog.text


def test_access_log_covers_rate_limited_requests(client, caplog):
    app.state.rate_limiter = RateLimiter(limit=0, window_s=60, time_fn=lambda: 0)
    with caplog.at_level(logging.INFO, logger="argos.access"):
        assert client.get("/v1/inference").status_code == 429
    assert [r.status for r in caplog.records if r.name == "argos.access"] == [429]
