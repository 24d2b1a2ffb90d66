"""Orchestrator and run journal tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.audit_logger import AuditLogger
from core.event_bus import ANY_EVENT, EventBus
from core.orchestrator import Orchestrator, run_schedulers
from core.settings import SchedulerSettings
from planner.dependency_graph import CyclicDependencyError, Dependency, DependencyGraph

SAMPLE = [
    Dependency("A", "C"),
    Dependency("F", "C"),
    Dependency("B", "A"),
    Dependency("D", "A"),
    Dependency("E", "B"),
    Dependency("E", "D"),
    Dependency("E", "F"),
]


def build_orchestrator(tmp_path: Path, **scheduler: object) -> Orchestrator:
    return Orchestrator(
        root=tmp_path,
        overrides={
            "scheduler": scheduler,
            "paths": {"journal_path": str(tmp_path / "runs.jsonl")},
        },
    )


@pytest.mark.parametrize("parallel", [False, True])
def test_run_schedulers_on_independent_copies(parallel: bool) -> None:
    graph = DependencyGraph.from_edges(SAMPLE)
    settings = SchedulerSettings(workers=2, base_offset=0, parallel_runs=parallel)

    plan = run_schedulers(graph, settings)

    assert plan.order_string() == "CABDFE"
    assert plan.total_time == 15
    assert len(plan.timeline) == 6
    assert len(graph) == 6


def test_bundle_uses_configured_settings(tmp_path: Path) -> None:
    bundle = build_orchestrator(tmp_path, workers=5, base_offset=60).build()

    plan = bundle.schedule(SAMPLE)

    assert bundle.settings.workers == 5
    assert plan.total_time == 253
    assert plan.to_dict()["order"] == ["C", "A", "B", "D", "F", "E"]


def test_schedule_is_journaled(tmp_path: Path) -> None:
    bundle = build_orchestrator(tmp_path, workers=2, base_offset=0).build()

    bundle.schedule(SAMPLE)
    bundle.schedule(SAMPLE, record=False)
    bundle.schedule(list(reversed(SAMPLE)))

    records = AuditLogger(tmp_path / "runs.jsonl").read()
    assert len(records) == 2
    assert records[0]["order"] == ["C", "A", "B", "D", "F", "E"]
    assert records[0]["total_time"] == 15
    assert records[0]["task_count"] == 6
    assert records[0]["edges_hash"] == records[1]["edges_hash"]


def test_journal_disabled(tmp_path: Path) -> None:
    bundle = Orchestrator(root=tmp_path, overrides={"paths": {"journal_path": ""}}).build()
    assert bundle.journal is None
    bundle.schedule(SAMPLE)
    assert not (tmp_path / "logs").exists()


def test_cycle_is_not_journaled(tmp_path: Path) -> None:
    bundle = build_orchestrator(tmp_path).build()

    with pytest.raises(CyclicDependencyError):
        bundle.schedule([Dependency("A", "B"), Dependency("B", "A")])

    assert AuditLogger(tmp_path / "runs.jsonl").read() == []


@pytest.mark.parametrize("parallel", [False, True])
def test_events_reach_catch_all_subscribers(tmp_path: Path, parallel: bool) -> None:
    bundle = build_orchestrator(
        tmp_path, workers=2, base_offset=0, parallel_runs=parallel
    ).build()
    names: list[str] = []
    bundle.event_bus.subscribe(ANY_EVENT, lambda payload: names.append(payload["event"]))

    bundle.schedule(SAMPLE, record=False)

    # Six completions from the sequential run, six starts and completions from the pool.
    assert names.count("task_completed") == 12
    assert names.count("task_started") == 6


def test_event_bus_dispatches_by_name() -> None:
    bus = EventBus()
    received: list[dict[str, object]] = []
    bus.subscribe("a", received.append)

    bus.emit("a", {"x": 1})
    bus.emit("b", {"x": 2})

    assert received == [{"x": 1}]
