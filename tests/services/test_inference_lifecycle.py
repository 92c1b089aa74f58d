"""Tests for the Inference Lifecycle Manager."""

import pytest

from argos.services.count_aggregator import CountAggregator
from argos.services.errors import ConflictError, NotFoundError
from argos.services.inference_lifecycle import InferenceLifecycle


def test_start_sets_running_state(engine):
    row = InferenceLifecycle(engine).start(
        "m1",
        started_at="2026-02-07T10:00:00+02:00",
        species="tilapia",
        batch_id="B-7",
        operator_id="op-1",
    )
    assert row.status == "running"
    assert row.ended_at is None
    assert row.machine_id == "m1"
    assert row.started_at == "2026-02-07T10:00:00+02:00"
    assert row.species == "tilapia"
    assert row.end_reason is None


def test_end_completes_and_refreshes_updated_at(engine):
    lifecycle = InferenceLifecycle(engine)
    started = lifecycle.start("m1", started_at="2026-02-07T10:00:00Z")

    ended = lifecycle.end(
        started.id,
        ended_at="2026-02-07T10:10:00Z",
        reason="tank empty",
        final_count=40,
        final_biomass_kg=12.5,
    )
    assert ended.status == "completed"
    assert ended.ended_at == "2026-02-07T10:10:00Z"
    assert ended.end_reason == "tank empty"
    assert ended.final_count == 40
    assert ended.final_biomass_kg == 12.5
    assert ended.created_at == started.created_at
    assert ended.updated_at >= started.updated_at


def test_end_twice_conflicts_and_keeps_first_values(engine):
    lifecycle = InferenceLifecycle(engine)
    started = lifecycle.start("m1", started_at="2026-02-07T10:00:00Z")
    lifecycle.end(started.id, ended_at="2026-02-07T10:10:00Z", reason="first")

    with pytest.raises(ConflictError):
        lifecycle.end(started.id, ended_at="2026-02-07T11:00:00Z", reason="second")
    assert lifecycle.get(started.id).end_reason == "first"


def test_end_missing(engine):
    with pytest.raises(NotFoundError):
        InferenceLifecycle(engine).end("0b7d3f8e-3c61-4c43-9b1f-2f4d55a4c0de", ended_at="2026-02-07T10:10:00Z")


def test_get_missing(engine):
    with pytest.raises(NotFoundError):
        InferenceLifecycle(engine).get("missing")


def test_latest_summary_with_counts(engine):
    lifecycle = InferenceLifecycle(engine)
    aggregator = CountAggregator(engine)
    older = lifecycle.start("m1", started_at="2026-02-07T08:00:00Z")
    latest = lifecycle.start("m1", started_at="2026-02-07T09:00:00Z")
    aggregator.create("m1", inference_id=older.id, counted_at="2026-02-07T08:01:00Z", fish_count=99, biomass_kg=99)
    aggregator.create("m1", inference_id=latest.id, counted_at="2026-02-07T09:01:00Z", fish_count=10, biomass_kg=2)
    aggregator.create("m1", inference_id=latest.id, counted_at="2026-02-07T09:02:00Z", fish_count=10, biomass_kg=3)

    summary = lifecycle.latest_summary()
    assert summary.inference_id == latest.id
    assert summary.total_fish_count == 20
    assert summary.total_biomass_kg == 5.0
    assert summary.avg_weight_g == 250.0
    assert summary.ended_at is None


def test_latest_summary_without_counts_has_null_average(engine):
    lifecycle = InferenceLifecycle(engine)
    lifecycle.start("m1", started_at="2026-02-07T08:00:00Z")

    summary = lifecycle.latest_summary("m1")
    assert summary.total_fish_count == 0
    assert summary.total_biomass_kg == 0
    assert summary.avg_weight_g is None


def test_latest_summary_none(engine):
    lifecycle = InferenceLifecycle(engine)
    lifecycle.start("m1", started_at="2026-02-07T08:00:00Z")
    with pytest.raises(NotFoundError):
        lifecycle.latest_summary("other-machine")
