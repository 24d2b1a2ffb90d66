"""Configuration loading and runtime bootstrapping."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from core.settings import SchedulerSettings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML from file, returning empty mapping when missing."""
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge dictionaries."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_effective_config(
    root: Path,
    config_file: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Merge config/default.yaml, an optional user file and explicit overrides."""
    merged = load_yaml(root / "config" / "default.yaml")
    if config_file is not None:
        merged = merge_dicts(merged, load_yaml(config_file))
    if overrides:
        merged = merge_dicts(merged, overrides)
    return merged


def scheduler_settings(config: dict[str, Any]) -> SchedulerSettings:
    """Validate the `scheduler` section."""
    return SchedulerSettings(**(config.get("scheduler") or {}))


def resolve_journal_path(root: Path, config: dict[str, Any]) -> Path | None:
    """Absolute run journal path, or None when journaling is disabled."""
    raw = (config.get("paths") or {}).get("journal_path", "logs/runs.jsonl")
    if not raw:
        return None
    path = Path(raw)
    return path if path.is_absolute() else (root / path).resolve()


def configure_logging(level: str | int = "INFO") -> None:
    """Install a stderr handler on the `dagsim` logger hierarchy."""
    logger = logging.getLogger("dagsim")
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
