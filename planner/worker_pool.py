"""Discrete-event simulation of a fixed pool of workers draining a task graph.

Time is an integer that jumps straight to the next worker completion. The
simulation is expressed as a pure transition, `advance`, over an immutable
`WorkerPoolState`, so every intermediate step can be inspected on its own.
`WorkerPoolScheduler` drives that transition to completion.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from core.event_bus import EventBus
from planner.dependency_graph import CyclicDependencyError, DependencyGraph
from planner.durations import DurationFn, alphabet_duration

logger = logging.getLogger("dagsim.planner.worker_pool")


class SchedulePhase(str, Enum):
    """Coarse state of the worker pool."""

    IDLE = "idle"
    RUNNING = "running"
    DRAINING = "draining"
    DONE = "done"


@dataclass(frozen=True, order=True)
class InFlight:
    """A task claimed by a worker; ordered by finish time, then task."""

    finish_time: int
    task: Any
    start_time: int = field(compare=False)
    worker: int = field(compare=False)


@dataclass(frozen=True)
class ScheduledTask:
    """One completed task in the simulated timeline."""

    task: Any
    start: int
    finish: int
    worker: int


@dataclass(frozen=True)
class WorkerPoolState:
    """Snapshot of the simulation at time `time`.

    The graph belongs to this snapshot alone; transitions work on a copy.
    """

    time: int
    in_flight: tuple[InFlight, ...]
    graph: DependencyGraph
    timeline: tuple[ScheduledTask, ...] = ()

    @property
    def claimed(self) -> frozenset[Any]:
        return frozenset(entry.task for entry in self.in_flight)

    def is_done(self) -> bool:
        return not self.in_flight and self.graph.is_empty()


@dataclass(frozen=True)
class WorkerPoolResult:
    """Outcome of a full worker-pool run."""

    total_time: int
    timeline: tuple[ScheduledTask, ...]
    steps: int


def _validate(workers: int, base_offset: int) -> None:
    if workers < 1:
        raise ValueError(f"Worker count must be at least 1, got {workers}")
    if base_offset < 0:
        raise ValueError(f"Base offset must be non-negative, got {base_offset}")


def _task_time(task: Any, base_offset: int, duration: DurationFn) -> int:
    intrinsic = duration(task)
    if isinstance(intrinsic, bool) or not isinstance(intrinsic, int) or intrinsic <= 0:
        raise ValueError(f"Duration for task {task!r} must be a positive integer, got {intrinsic!r}")
    return base_offset + intrinsic


def phase_of(state: WorkerPoolState, workers: int) -> SchedulePhase:
    """Classify a state; `workers` is needed to tell RUNNING from DRAINING."""
    if state.is_done():
        return SchedulePhase.DONE
    if not state.in_flight:
        return SchedulePhase.IDLE
    unclaimed = state.graph.ready_tasks() - state.claimed
    if unclaimed or len(state.in_flight) >= workers:
        return SchedulePhase.RUNNING
    return SchedulePhase.DRAINING


def claim_ready(
    state: WorkerPoolState,
    *,
    workers: int,
    base_offset: int,
    duration: DurationFn,
) -> WorkerPoolState:
    """Hand the smallest unclaimed ready tasks to free workers at `state.time`."""
    ready = state.graph.ready_tasks() - state.claimed
    in_flight = list(state.in_flight)
    busy = {entry.worker for entry in in_flight}

    while len(in_flight) < workers and ready:
        task = min(ready)
        ready.discard(task)
        worker = next(slot for slot in range(workers) if slot not in busy)
        busy.add(worker)
        finish = state.time + _task_time(task, base_offset, duration)
        in_flight.append(InFlight(finish, task, start_time=state.time, worker=worker))

    return WorkerPoolState(
        time=state.time,
        in_flight=tuple(sorted(in_flight)),
        graph=state.graph,
        timeline=state.timeline,
    )


def complete_next(state: WorkerPoolState) -> WorkerPoolState:
    """Jump to the earliest finish time and retire every task ending then."""
    if not state.in_flight:
        return state

    now = min(entry.finish_time for entry in state.in_flight)
    finished = sorted(
        (entry for entry in state.in_flight if entry.finish_time == now),
        key=lambda entry: entry.task,
    )
    graph = state.graph.copy()
    for entry in finished:
        graph.complete(entry.task)

    return WorkerPoolState(
        time=now,
        in_flight=tuple(entry for entry in state.in_flight if entry.finish_time != now),
        graph=graph,
        timeline=state.timeline
        + tuple(ScheduledTask(e.task, e.start_time, e.finish_time, e.worker) for e in finished),
    )


def advance(
    state: WorkerPoolState,
    *,
    workers: int,
    base_offset: int = 0,
    duration: DurationFn = alphabet_duration,
) -> WorkerPoolState:
    """Run one event of the simulation and return the resulting state.

    Claims ready work for idle workers, then moves time to the next
    completion. The input state is left untouched. A finished state is
    returned as is.
    """
    _validate(workers, base_offset)
    if state.is_done():
        return state

    claimed = claim_ready(state, workers=workers, base_offset=base_offset, duration=duration)
    if not claimed.in_flight:
        raise CyclicDependencyError(state.graph.tasks())
    return complete_next(claimed)


class WorkerPoolScheduler:
    """Computes how long a pool of workers needs to finish every task."""

    def __init__(
        self,
        workers: int,
        base_offset: int = 0,
        duration: DurationFn = alphabet_duration,
        event_bus: EventBus | None = None,
    ) -> None:
        _validate(workers, base_offset)
        self.workers = workers
        self.base_offset = base_offset
        self.duration = duration
        self.event_bus = event_bus

    def initial_state(self, graph: DependencyGraph) -> WorkerPoolState:
        return WorkerPoolState(time=0, in_flight=(), graph=graph.copy())

    def step(self, state: WorkerPoolState) -> WorkerPoolState:
        return advance(
            state,
            workers=self.workers,
            base_offset=self.base_offset,
            duration=self.duration,
        )

    def run(self, graph: DependencyGraph) -> WorkerPoolResult:
        """Simulate until every task is done. `graph` itself is not modified."""
        state = self.initial_state(graph)
        steps = 0
        while not state.is_done():
            before = state
            state = self.step(state)
            steps += 1
            self._publish(before, state)

        logger.info(
            "Worker pool finished %d tasks at t=%d (workers=%d, base_offset=%d, steps=%d)",
            len(state.timeline),
            state.time,
            self.workers,
            self.base_offset,
            steps,
        )
        return WorkerPoolResult(total_time=state.time, timeline=state.timeline, steps=steps)

    def total_time(self, graph: DependencyGraph) -> int:
        return self.run(graph).total_time

    def _publish(self, before: WorkerPoolState, after: WorkerPoolState) -> None:
        known = before.claimed | {item.task for item in before.timeline}
        started = [entry for entry in after.in_flight if entry.task not in known]
        started += [
            item for item in after.timeline[len(before.timeline):] if item.task not in known
        ]
        for item in sorted(started, key=lambda item: item.task):
            start = item.start_time if isinstance(item, InFlight) else item.start
            logger.debug("t=%d worker %d started %s", start, item.worker, item.task)
            if self.event_bus is not None:
                self.event_bus.emit(
                    "task_started", {"task": item.task, "time": start, "worker": item.worker}
                )
        for item in after.timeline[len(before.timeline):]:
            logger.debug("t=%d worker %d finished %s", item.finish, item.worker, item.task)
            if self.event_bus is not None:
                self.event_bus.emit(
                    "task_completed",
                    {"task": item.task, "time": item.finish, "worker": item.worker},
                )


def total_completion_time(
    graph: DependencyGraph,
    *,
    workers: int,
    base_offset: int = 0,
    duration: DurationFn = alphabet_duration,
) -> int:
    """Total simulated time for `workers` workers to complete `graph`."""
    return WorkerPoolScheduler(workers, base_offset, duration).total_time(graph)
