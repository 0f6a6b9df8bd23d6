# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from buildload.control_plane.models import (
        JobStatus,
        NodeCapacity,
        RunStatus,
        StrategyDescriptor,
        SubRunStatus,
        UnitStatus,
    )
    from buildload.orchestrator.models import JobSpec, RunRequest


@runtime_checkable
class ControlPlaneClient(Protocol):
    """Access to the build platform.

    Getters return None when the resource does not exist. Deleting an absent
    resource is not an error. Every other failure raises ControlPlaneError.
    """

    async def create_job(self, spec: JobSpec) -> JobStatus: ...

    async def get_job(self, namespace: str, name: str) -> JobStatus | None: ...

    async def delete_job(self, namespace: str, name: str) -> None: ...

    async def create_run(self, request: RunRequest) -> RunStatus: ...

    async def get_run(self, namespace: str, name: str) -> RunStatus | None: ...

    async def delete_run(self, namespace: str, name: str) -> None: ...

    async def list_runs(self, namespace: str | None = None) -> list[RunStatus]: ...

    async def get_sub_run(self, namespace: str, name: str) -> SubRunStatus | None: ...

    async def list_sub_runs(self, namespace: str, run_name: str) -> list[SubRunStatus]: ...

    async def get_execution_unit(self, namespace: str, name: str) -> UnitStatus | None: ...

    async def list_execution_units(
        self, namespace: str, run_name: str
    ) -> list[UnitStatus]: ...

    def stream_container_logs(
        self, namespace: str, unit_name: str, container_name: str
    ) -> AsyncIterator[str]: ...

    async def list_nodes(self) -> list[NodeCapacity]: ...

    async def list_strategies(self) -> list[StrategyDescriptor]: ...


@runtime_checkable
class OutputArtifactCleaner(Protocol):
    """Deletes the image a buildrun pushed. Deleting an absent image is not an error."""

    async def delete_image(
        self, namespace: str, image_url: str, credentials_ref: str | None
    ) -> None: ...
