"""Execution plan models."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from planner.worker_pool import ScheduledTask


@dataclass
class ExecutionPlan:
    """Combined result of the sequential and worker-pool runs."""

    order: list[Any] = field(default_factory=list)
    total_time: int = 0
    workers: int = 1
    base_offset: int = 0
    timeline: list[ScheduledTask] = field(default_factory=list)

    def order_string(self) -> str:
        """Completion order as one string, e.g. "CABDFE"."""
        return "".join(str(task) for task in self.order)

    def to_dict(self) -> dict[str, Any]:
        return {
            "order": [str(task) for task in self.order],
            "total_time": self.total_time,
            "workers": self.workers,
            "base_offset": self.base_offset,
            "timeline": [
                {**asdict(item), "task": str(item.task)} for item in self.timeline
            ],
        }
