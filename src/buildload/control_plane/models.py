# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Typed status snapshots returned by a control plane client.

Clients convert whatever the platform returns into these models, so the
engine never deals with raw API objects.
"""

from datetime import datetime, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _Snapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    namespace: str
    created: datetime | None = None


class JobStatus(_Snapshot):
    """Observed state of a build."""

    registered: bool | None = Field(
        default=None,
        description="True once registered, False if rejected, None while undecided",
    )
    registered_at: datetime | None = Field(
        default=None,
        description="When the build controller set the registered signal",
    )
    reason: str | None = None
    message: str | None = None
    timeout: timedelta | None = None


class RunStatus(_Snapshot):
    """Observed state of a buildrun."""

    started: datetime | None = None
    completed: datetime | None = None
    succeeded: bool | None = Field(
        default=None,
        description="Status of the Succeeded condition, None while unknown",
    )
    reason: str | None = None
    message: str | None = None
    job_name: str | None = None
    sub_run_ref: str | None = None
    timeout: timedelta | None = None
    raw_status: dict[str, Any] = Field(default_factory=dict)


class SubRunStatus(_Snapshot):
    """Observed state of the pipeline run (taskrun) behind a buildrun."""

    started: datetime | None = None
    completed: datetime | None = None
    unit_name: str | None = None


class UnitStatus(_Snapshot):
    """Observed state of the execution unit (pod) of a sub-run."""

    started: datetime | None = None
    container_names: list[str] = Field(
        default_factory=list, description="Init containers first, then containers"
    )
    last_container_finished: datetime | None = None


class NodeCapacity(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    cpu_millis: int
    memory_bytes: int


class StepResources(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    cpu_millis: int = 0
    memory_bytes: int = 0


class StrategyDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    steps: list[StepResources] = Field(default_factory=list)
