"""Top-level application orchestrator."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from core.audit_logger import AuditLogger
from core.event_bus import EventBus
from core.policy_runtime import load_effective_config, resolve_journal_path, scheduler_settings
from core.settings import SchedulerSettings
from planner.dependency_graph import Dependency, DependencyGraph
from planner.durations import DurationFn, alphabet_duration
from planner.execution_plan import ExecutionPlan
from planner.sequential import completion_order
from planner.worker_pool import WorkerPoolResult, WorkerPoolScheduler

logger = logging.getLogger("dagsim.orchestrator")


@dataclass
class RuntimeBundle:
    """Holds initialized runtime components."""

    config: dict[str, Any]
    settings: SchedulerSettings
    event_bus: EventBus
    journal: AuditLogger | None

    def schedule(
        self,
        edges: list[Dependency],
        duration: DurationFn = alphabet_duration,
        record: bool = True,
    ) -> ExecutionPlan:
        """Run both schedulers over `edges` and optionally journal the result."""
        plan = run_schedulers(
            DependencyGraph.from_edges(edges),
            self.settings,
            duration=duration,
            event_bus=self.event_bus,
        )
        if record and self.journal is not None:
            self.journal.log(edges, plan)
        return plan


class Orchestrator:
    """Creates and wires runtime components for CLI use."""

    def __init__(
        self,
        root: Path | None = None,
        config_file: Path | None = None,
        overrides: dict[str, Any] | None = None,
    ) -> None:
        default_root = Path(__file__).resolve().parents[1]
        self.root = (root or default_root).resolve()
        self.config_file = config_file
        self.overrides = overrides or {}

    def build(self) -> RuntimeBundle:
        config = load_effective_config(self.root, self.config_file, self.overrides)
        settings = scheduler_settings(config)
        journal_path = resolve_journal_path(self.root, config)
        return RuntimeBundle(
            config=config,
            settings=settings,
            event_bus=EventBus(),
            journal=AuditLogger(journal_path) if journal_path is not None else None,
        )


def run_schedulers(
    graph: DependencyGraph,
    settings: SchedulerSettings,
    duration: DurationFn = alphabet_duration,
    event_bus: EventBus | None = None,
) -> ExecutionPlan:
    """Compute the completion order and the worker-pool total time.

    Each run drains its own copy of `graph`, which is left unchanged. With
    `parallel_runs` the two runs execute on separate threads.
    """
    pool = WorkerPoolScheduler(
        workers=settings.workers,
        base_offset=settings.base_offset,
        duration=duration,
        event_bus=event_bus,
    )
    logger.info(
        "Scheduling %d tasks (workers=%d, base_offset=%d, parallel=%s)",
        len(graph),
        settings.workers,
        settings.base_offset,
        settings.parallel_runs,
    )

    if settings.parallel_runs:
        with ThreadPoolExecutor(max_workers=2) as executor:
            order_future = executor.submit(completion_order, graph.copy(), event_bus=event_bus)
            pool_future = executor.submit(pool.run, graph)
            order = order_future.result()
            result: WorkerPoolResult = pool_future.result()
    else:
        order = completion_order(graph.copy(), event_bus=event_bus)
        result = pool.run(graph)

    return ExecutionPlan(
        order=order,
        total_time=result.total_time,
        workers=settings.workers,
        base_offset=settings.base_offset,
        timeline=list(result.timeline),
    )
