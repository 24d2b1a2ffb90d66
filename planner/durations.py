"""Intrinsic task duration functions."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

DurationFn = Callable[[Any], int]


def alphabet_duration(task: Any) -> int:
    """1 for 'A', 2 for 'B', ... 26 for 'Z'."""
    if not isinstance(task, str) or len(task) != 1 or not "A" <= task.upper() <= "Z":
        raise ValueError(f"Alphabet duration needs a single letter task id, got {task!r}")
    return 1 + ord(task.upper()) - ord("A")


def table_duration(durations: Mapping[Any, int]) -> DurationFn:
    """Build a duration function backed by an explicit task -> duration table."""
    table = dict(durations)

    def lookup(task: Any) -> int:
        try:
            return table[task]
        except KeyError:
            raise KeyError(f"No duration configured for task {task!r}") from None

    return lookup
