"""Task dependency graph with a mutable readiness frontier."""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable
from dataclasses import dataclass

logger = logging.getLogger("dagsim.planner.graph")

# Any hashable, totally ordered identifier. The reference inputs use letters.
TaskId = Hashable


@dataclass(frozen=True)
class Dependency:
    """`depends_on` must complete before `task` may start."""

    task: TaskId
    depends_on: TaskId

    def __str__(self) -> str:
        return f"{self.task} <- {self.depends_on}"


class CyclicDependencyError(RuntimeError):
    """Raised when no task is ready but the graph still holds tasks."""

    def __init__(self, remaining: Iterable[TaskId]) -> None:
        self.remaining = frozenset(remaining)
        names = ", ".join(str(task) for task in sorted(self.remaining))
        super().__init__(
            f"Cyclic or unsatisfiable dependencies; no progress possible for: {names}"
        )


class DependencyGraph:
    """Maps each task to the set of prerequisites it is still waiting on."""

    def __init__(self) -> None:
        self._prereqs: dict[TaskId, set[TaskId]] = {}

    @classmethod
    def from_edges(cls, edges: Iterable[Dependency | tuple[TaskId, TaskId]]) -> DependencyGraph:
        """Build a graph from `Dependency` records or `(task, prerequisite)` pairs."""
        graph = cls()
        for edge in edges:
            if isinstance(edge, Dependency):
                graph.add(edge)
            else:
                task, prerequisite = edge
                graph.add_edge(task, prerequisite)
        return graph

    def add_edge(self, task: TaskId, prerequisite: TaskId) -> None:
        """Record that `prerequisite` must finish before `task` can begin."""
        self._prereqs.setdefault(task, set()).add(prerequisite)
        self._prereqs.setdefault(prerequisite, set())

    def add(self, dependency: Dependency) -> None:
        self.add_edge(dependency.task, dependency.depends_on)

    def add_task(self, task: TaskId) -> None:
        """Ensure a task is present even if nothing constrains it."""
        self._prereqs.setdefault(task, set())

    def ready_tasks(self) -> set[TaskId]:
        """Return every remaining task with no outstanding prerequisites."""
        return {task for task, prereqs in self._prereqs.items() if not prereqs}

    def complete(self, task: TaskId) -> bool:
        """Remove a finished task from the graph and from all its dependents.

        Returns False, leaving the graph untouched, when the task is unknown
        or has already been completed.
        """
        if task not in self._prereqs:
            logger.debug("Ignoring completion of unknown task %r", task)
            return False

        dependents = [other for other, prereqs in self._prereqs.items() if task in prereqs]
        del self._prereqs[task]
        for other in dependents:
            self._prereqs[other].discard(task)
        return True

    def is_empty(self) -> bool:
        return not self._prereqs

    def prerequisites(self, task: TaskId) -> frozenset[TaskId]:
        """Outstanding prerequisites of `task`."""
        return frozenset(self._prereqs[task])

    def tasks(self) -> set[TaskId]:
        return set(self._prereqs)

    def copy(self) -> DependencyGraph:
        """Independent clone; draining the copy never touches this graph."""
        clone = DependencyGraph()
        clone._prereqs = {task: set(prereqs) for task, prereqs in self._prereqs.items()}
        return clone

    def __len__(self) -> int:
        return len(self._prereqs)

    def __contains__(self, task: object) -> bool:
        return task in self._prereqs

    def __repr__(self) -> str:
        return f"DependencyGraph(tasks={len(self._prereqs)})"
