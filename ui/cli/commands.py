"""Typer command handlers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError

from core.orchestrator import Orchestrator, RuntimeBundle
from core.policy_runtime import configure_logging
from planner.dependency_graph import CyclicDependencyError, Dependency, DependencyGraph
from planner.edge_parser import MalformedEdgeError, load_edges
from planner.sequential import completion_order
from planner.worker_pool import WorkerPoolScheduler


def _runtime(
    config_file: Path | None = None,
    workers: int | None = None,
    base_offset: int | None = None,
    root: Path | None = None,
) -> RuntimeBundle:
    scheduler: dict[str, Any] = {}
    if workers is not None:
        scheduler["workers"] = workers
    if base_offset is not None:
        scheduler["base_offset"] = base_offset
    overrides = {"scheduler": scheduler} if scheduler else {}
    try:
        bundle = Orchestrator(root=root, config_file=config_file, overrides=overrides).build()
    except (ValidationError, ValueError) as exc:
        typer.echo(f"Invalid configuration: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    configure_logging((bundle.config.get("logging") or {}).get("level", "INFO"))
    return bundle


def _edges(input_file: Path, strict: bool) -> list[Dependency]:
    try:
        return load_edges(input_file, strict=strict)
    except (OSError, MalformedEdgeError) as exc:
        typer.echo(f"Cannot read dependencies: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _fail(exc: Exception) -> typer.Exit:
    typer.echo(f"Scheduling failed: {exc}", err=True)
    return typer.Exit(code=1)


def order(input_file: Path, strict: bool = False, config_file: Path | None = None) -> None:
    """Print the sequential completion order."""
    _runtime(config_file)
    graph = DependencyGraph.from_edges(_edges(input_file, strict))
    try:
        tasks = completion_order(graph)
    except CyclicDependencyError as exc:
        raise _fail(exc) from exc
    typer.echo(f"Completion order: {''.join(str(task) for task in tasks)}")


def total_time(
    input_file: Path,
    workers: int | None = None,
    base_offset: int | None = None,
    strict: bool = False,
    config_file: Path | None = None,
) -> None:
    """Print the worker-pool completion time."""
    bundle = _runtime(config_file, workers, base_offset)
    graph = DependencyGraph.from_edges(_edges(input_file, strict))
    scheduler = WorkerPoolScheduler(
        workers=bundle.settings.workers,
        base_offset=bundle.settings.base_offset,
    )
    try:
        elapsed = scheduler.total_time(graph)
    except (CyclicDependencyError, ValueError) as exc:
        raise _fail(exc) from exc
    typer.echo(f"Total time: {elapsed}")


def run(
    input_file: Path,
    workers: int | None = None,
    base_offset: int | None = None,
    timeline: bool = False,
    as_json: bool = False,
    strict: bool = False,
    config_file: Path | None = None,
) -> None:
    """Run both schedulers, print the results and journal the run."""
    bundle = _runtime(config_file, workers, base_offset)
    edges = _edges(input_file, strict)
    try:
        plan = bundle.schedule(edges)
    except (CyclicDependencyError, ValueError) as exc:
        raise _fail(exc) from exc

    if as_json:
        typer.echo(json.dumps(plan.to_dict(), indent=2))
        return

    typer.echo(f"Completion order: {plan.order_string()}")
    typer.echo(
        f"Total time: {plan.total_time} (workers={plan.workers}, base_offset={plan.base_offset})"
    )
    if timeline:
        for item in sorted(plan.timeline, key=lambda item: (item.start, item.worker)):
            typer.echo(f"  worker {item.worker}: {item.task} {item.start}-{item.finish}")


def config_show(config_file: Path | None = None) -> None:
    """Show effective runtime config."""
    bundle = _runtime(config_file)
    typer.echo(json.dumps(bundle.config, indent=2))
