"""Validated scheduler settings."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SchedulerSettings(BaseModel):
    """Scalars handed to the schedulers."""

    workers: int = Field(default=5, ge=1)
    base_offset: int = Field(default=60, ge=0)
    parallel_runs: bool = False
