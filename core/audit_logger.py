"""Structured JSONL journal of scheduling runs."""

from __future__ import annotations

import hashlib
import json
import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from planner.dependency_graph import Dependency
from planner.execution_plan import ExecutionPlan


class AuditLogger:
    """Appends one JSON line per scheduling run."""

    def __init__(self, log_path: Path) -> None:
        self.log_path = log_path
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self.logger = logging.getLogger("dagsim.journal")

    @staticmethod
    def _hash_edges(edges: Iterable[Dependency]) -> str:
        pairs = sorted((str(e.task), str(e.depends_on)) for e in edges)
        payload = json.dumps(pairs).encode("utf-8")
        return hashlib.sha256(payload).hexdigest()

    def log(self, edges: list[Dependency], plan: ExecutionPlan) -> dict[str, Any]:
        """Append one run record and return it."""
        event = {
            "timestamp": datetime.now(UTC).isoformat(),
            "edges_hash": self._hash_edges(edges),
            "task_count": len(plan.order),
            "workers": plan.workers,
            "base_offset": plan.base_offset,
            "order": [str(task) for task in plan.order],
            "total_time": plan.total_time,
        }
        with self.log_path.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(event, ensure_ascii=True) + "\n")
        self.logger.info(json.dumps(event, ensure_ascii=True))
        return event

    def read(self) -> list[dict[str, Any]]:
        """All journaled records, oldest first."""
        if not self.log_path.exists():
            return []
        with self.log_path.open("r", encoding="utf-8") as fh:
            return [json.loads(line) for line in fh if line.strip()]
