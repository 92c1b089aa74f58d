"""API tests for count endpoints."""

from argos.repos.count_repo import CountRepo


def _start(client, started_at="2026-02-07T10:00:00Z"):
    return client.post("/v1/inference/start", json={"started_at": started_at}).json()


def _count(client, inference_id, counted_at, **extra):
    body = {"inference_id": inference_id, "counted_at": counted_at, "fish_count": 1, "biomass_kg": 0.5, **extra}
    return client.post("/v1/counts", json=body)


def test_create_count_returns_stored_record(client):
    inf = _start(client)
    res = _count(client, inf["id"], "2026-02-07T10:05:00Z", avg_weight_g=500, confidence=0.93, frame_count=12, notes="ok")
    assert res.status_code == 201
    body = res.json()
    assert body["inference_id"] == inf["id"]
    assert body["machine_id"] == "machine-test"
    assert body["confidence"] == 0.93
    assert body["frame_count"] == 12
    assert body["created_at"].endswith("Z")


def test_create_count_unknown_inference(client):
    res = _count(client, "0b7d3f8e-3c61-4c43-9b1f-2f4d55a4c0de", "2026-02-07T10:05:00Z")
    assert res.status_code == 404


def test_completed_inference_rejects_without_insert(client, engine):
    inf = _start(client)
    _count(client, inf["id"], "2026-02-07T10:05:00Z")
    client.post("/v1/inference/end", json={"inference_id": inf["id"], "ended_at": "2026-02-07T10:10:00Z"})

    before = CountRepo(engine).count_by_inference(inf["id"])
    for _ in range(3):
        assert _count(client, inf["id"], "2026-02-07T10:11:00Z").status_code == 409
    assert CountRepo(engine).count_by_inference(inf["id"]) == before == 1


def test_create_count_validation(client):
    inf = _start(client)
    res = _count(client, inf["id"], "2026-02-07T10:05:00Z", fish_count=-1, confidence=1.5, frame_count=0)
    assert res.status_code == 400
    detail = res.json()["detail"]
    for field in ("fish_count", "confidence", "frame_count"):
        assert f"{field}:" in detail

    res = client.post("/v1/counts", json={"inference_id": inf["id"], "counted_at": "2026-02-07T10:05:00Z"})
    assert res.status_code == 400
    assert "fish_count: Field required" in res.json()["detail"]


def test_list_counts_filters(client):
    a = _start(client)
    b = _start(client, started_at="2026-02-07T11:00:00Z")
    for minute in (0, 10, 20):
        _count(client, a["id"], f"2026-02-07T10:{minute:02d}:00Z")
    _count(client, b["id"], "2026-02-07T11:10:00Z")

    res = client.get("/v1/counts")
    assert res.status_code == 200
    counted = [c["counted_at"] for c in res.json()["data"]]
    assert counted == sorted(counted, reverse=True)
    assert len(counted) == 4

    res = client.get("/v1/counts", params={"inference_id": a["id"]})
    assert len(res.json()["data"]) == 3

    res = client.get("/v1/counts", params={"from": "2026-02-07T10:10:00Z", "to": "2026-02-07T10:20:00Z"})
    assert [c["counted_at"] for c in res.json()["data"]] == ["2026-02-07T10:20:00Z", "2026-02-07T10:10:00Z"]

    res = client.get("/v1/counts", params={"machine_id": "machine-test", "limit": 2})
    assert len(res.json()["data"]) == 2

    res = client.get("/v1/counts", params={"machine_id": "nobody"})
    assert res.json() == {"data": []}


def test_list_counts_rejects_bad_filters(client):
    assert client.get("/v1/counts", params={"from": "last week"}).status_code == 400
    assert client.get("/v1/counts", params={"inference_id": "not-a-uuid"}).status_code == 400
    assert client.get("/v1/counts", params={"limit": 0}).status_code == 400


def test_non_finite_numbers_rejected_without_insert(client, engine):
    inf = _start(client)
    for literal in ("Infinity", "NaN", "-Infinity"):
        raw = (
            f'{{"inference_id": "{inf["id"]}", "counted_at": "2026-02-07T10:05:00Z", '
            f'"fish_count": 1, "biomass_kg": {literal}}}'
        )
        res = client.post("/v1/counts", content=raw, headers={"content-type": "application/json"})
        assert res.status_code == 400, literal
        assert res.json()["detail"].startswith("biomass_kg:")

    raw = (
        f'{{"inference_id": "{inf["id"]}", "counted_at": "2026-02-07T10:05:00Z", '
        '"fish_count": 1, "biomass_kg": 1, "confidence": NaN, "avg_weight_g": Infinity}'
    )
    res = client.post("/v1/counts", content=raw, headers={"content-type": "application/json"})
    assert res.status_code == 400
    assert "confidence:" in res.json()["detail"]
    assert "avg_weight_g:" in res.json()["detail"]

    assert CountRepo(engine).count_by_inference(inf["id"]) == 0
    summary = client.get(f"/v1/inference/{inf['id']}/results").json()["summary"]
    assert summary["total_biomass_kg"] == 0
