"""Parse dependency lines of the form

    Step C must be finished before step A can begin.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from planner.dependency_graph import Dependency

logger = logging.getLogger("dagsim.planner.parser")

_STEP_RE = re.compile(
    r"^Step (?P<parent>[A-Z]) must be finished before step (?P<task>[A-Z]) can begin\.$"
)


class MalformedEdgeError(ValueError):
    """A line that does not describe a dependency."""


def parse_line(line: str) -> Dependency:
    match = _STEP_RE.match(line.strip())
    if match is None:
        raise MalformedEdgeError(f"Not a dependency line: {line.strip()!r}")
    return Dependency(task=match["task"], depends_on=match["parent"])


def parse_lines(lines: Iterable[str], *, strict: bool = False) -> list[Dependency]:
    """Parse every non-blank line.

    Malformed lines raise in strict mode and are logged and skipped otherwise.
    """
    deps: list[Dependency] = []
    for lineno, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            deps.append(parse_line(line))
        except MalformedEdgeError:
            if strict:
                raise
            logger.warning("Skipping line %d, failed to parse: %s", lineno, line.strip())
    return deps


def load_edges(path: Path, *, strict: bool = False) -> list[Dependency]:
    """Read dependencies from a UTF-8 text file."""
    try:
        with path.open("r", encoding="utf-8") as fh:
            return parse_lines(fh, strict=strict)
    except UnicodeDecodeError as exc:
        raise MalformedEdgeError(f"{path} is not valid UTF-8 text: {exc}") from exc
