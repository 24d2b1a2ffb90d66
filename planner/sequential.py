"""Single-worker scheduling: always complete the smallest ready task."""

from __future__ import annotations

import logging
from typing import Any

from core.event_bus import EventBus
from planner.dependency_graph import CyclicDependencyError, DependencyGraph

logger = logging.getLogger("dagsim.planner.sequential")


def completion_order(graph: DependencyGraph, *, event_bus: EventBus | None = None) -> list[Any]:
    """Drain `graph` and return the order in which tasks were completed.

    The graph is consumed; pass a copy to keep the caller's graph intact.
    Raises CyclicDependencyError when tasks remain but none is ready.
    """
    order: list[Any] = []
    while True:
        ready = graph.ready_tasks()
        if not ready:
            if graph.is_empty():
                break
            raise CyclicDependencyError(graph.tasks())

        task = min(ready)
        graph.complete(task)
        order.append(task)
        logger.debug("Completed %s (step %d)", task, len(order))
        if event_bus is not None:
            event_bus.emit("task_completed", {"task": task, "position": len(order)})

    logger.info("Sequential order computed for %d tasks", len(order))
    return order
