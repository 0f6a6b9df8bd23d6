# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Conversion between engine models and Shipwright, Tekton, and core resources.

Resources are plain dicts in the shape the Kubernetes API serves them
(camelCase keys, RFC 3339 timestamps).
"""

from datetime import datetime
from typing import Any

from kubernetes.utils import parse_quantity

from buildload.common.constants import (
    BUILD_CONTROLLER_MANAGER,
    SHIPWRIGHT_GROUP,
    SHIPWRIGHT_VERSION,
)
from buildload.common.durations import format_duration, parse_duration
from buildload.control_plane.models import (
    JobStatus,
    NodeCapacity,
    RunStatus,
    StepResources,
    StrategyDescriptor,
    SubRunStatus,
    UnitStatus,
)
from buildload.orchestrator.models import JobSpec, KanikoBuild, RunRequest


def parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def _secret(name: str | None) -> dict[str, str] | None:
    return {"name": name} if name else None


def _without_none(values: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


def build_manifest(spec: JobSpec) -> dict[str, Any]:
    """Build resource for a job spec."""
    body = {
        "source": _without_none(
            {
                "url": spec.source.url,
                "revision": spec.source.revision,
                "contextDir": spec.source.context_dir,
                "credentials": _secret(spec.source.credentials_ref),
            }
        ),
        "strategy": {"name": spec.strategy, "kind": spec.strategy_kind.value},
        "output": _without_none(
            {
                "image": spec.output.image_url,
                "credentials": _secret(spec.output.credentials_ref),
            }
        ),
    }
    if isinstance(spec.build_kind, KanikoBuild):
        body["dockerfile"] = spec.build_kind.dockerfile
    if spec.timeout is not None:
        body["timeout"] = format_duration(spec.timeout)

    metadata: dict[str, Any] = {"name": spec.name, "namespace": spec.namespace}
    if spec.annotations:
        metadata["annotations"] = dict(spec.annotations)

    return {
        "apiVersion": f"{SHIPWRIGHT_GROUP}/{SHIPWRIGHT_VERSION}",
        "kind": "Build",
        "metadata": metadata,
        "spec": body,
    }


def buildrun_manifest(request: RunRequest) -> dict[str, Any]:
    """BuildRun resource for a run request."""
    if request.generate_identity or not request.service_account:
        service_account: dict[str, Any] = {"generate": request.generate_identity}
    else:
        service_account = {"name": request.service_account}

    body: dict[str, Any] = {
        "buildRef": {"name": request.job_name},
        "serviceAccount": service_account,
    }
    if request.timeout is not None:
        body["timeout"] = format_duration(request.timeout)

    return {
        "apiVersion": f"{SHIPWRIGHT_GROUP}/{SHIPWRIGHT_VERSION}",
        "kind": "BuildRun",
        "metadata": {"name": request.name, "namespace": request.namespace},
        "spec": body,
    }


def _condition_status(value: str | None) -> bool | None:
    if value == "True":
        return True
    if value == "False":
        return False
    return None


def registered_at(metadata: dict[str, Any]) -> datetime | None:
    """When the build controller last updated the build.

    That update is the one that sets the registered status.
    """
    times = [
        parse_timestamp(entry.get("time"))
        for entry in metadata.get("managedFields") or []
        if entry.get("manager") == BUILD_CONTROLLER_MANAGER
        and entry.get("operation") == "Update"
    ]
    times = [t for t in times if t is not None]
    return max(times) if times else None


def job_status(obj: dict[str, Any]) -> JobStatus:
    metadata = obj.get("metadata") or {}
    status = obj.get("status") or {}
    spec = obj.get("spec") or {}
    registered = _condition_status(status.get("registered"))

    return JobStatus(
        name=metadata.get("name", ""),
        namespace=metadata.get("namespace", ""),
        created=parse_timestamp(metadata.get("creationTimestamp")),
        registered=registered,
        registered_at=registered_at(metadata) if registered else None,
        reason=status.get("reason"),
        message=status.get("message"),
        timeout=parse_duration(spec.get("timeout")),
    )


def run_status(obj: dict[str, Any]) -> RunStatus:
    metadata = obj.get("metadata") or {}
    status = obj.get("status") or {}
    spec = obj.get("spec") or {}
    succeeded = next(
        (
            condition
            for condition in status.get("conditions") or []
            if condition.get("type") == "Succeeded"
        ),
        {},
    )

    return RunStatus(
        name=metadata.get("name", ""),
        namespace=metadata.get("namespace", ""),
        created=parse_timestamp(metadata.get("creationTimestamp")),
        started=parse_timestamp(status.get("startTime")),
        completed=parse_timestamp(status.get("completionTime")),
        succeeded=_condition_status(succeeded.get("status")),
        reason=succeeded.get("reason"),
        message=succeeded.get("message"),
        job_name=(spec.get("buildRef") or {}).get("name"),
        sub_run_ref=status.get("latestTaskRunRef"),
        timeout=parse_duration(spec.get("timeout")),
        raw_status=status,
    )


def sub_run_status(obj: dict[str, Any]) -> SubRunStatus:
    metadata = obj.get("metadata") or {}
    status = obj.get("status") or {}

    return SubRunStatus(
        name=metadata.get("name", ""),
        namespace=metadata.get("namespace", ""),
        created=parse_timestamp(metadata.get("creationTimestamp")),
        started=parse_timestamp(status.get("startTime")),
        completed=parse_timestamp(status.get("completionTime")),
        unit_name=status.get("podName") or None,
    )


def unit_status(obj: dict[str, Any]) -> UnitStatus:
    metadata = obj.get("metadata") or {}
    status = obj.get("status") or {}
    spec = obj.get("spec") or {}

    finished = [
        parse_timestamp(((container.get("state") or {}).get("terminated") or {}).get("finishedAt"))
        for container in status.get("containerStatuses") or []
    ]
    finished = [f for f in finished if f is not None]
    containers = (spec.get("initContainers") or []) + (spec.get("containers") or [])

    return UnitStatus(
        name=metadata.get("name", ""),
        namespace=metadata.get("namespace", ""),
        created=parse_timestamp(metadata.get("creationTimestamp")),
        started=parse_timestamp(status.get("startTime")),
        container_names=[container["name"] for container in containers],
        last_container_finished=max(finished) if finished else None,
    )


def node_capacity(obj: dict[str, Any]) -> NodeCapacity:
    capacity = (obj.get("status") or {}).get("capacity") or {}
    return NodeCapacity(
        name=(obj.get("metadata") or {}).get("name", ""),
        cpu_millis=int(parse_quantity(capacity.get("cpu", "0")) * 1000),
        memory_bytes=int(parse_quantity(capacity.get("memory", "0"))),
    )


def strategy_descriptor(obj: dict[str, Any]) -> StrategyDescriptor:
    steps = []
    for step in (obj.get("spec") or {}).get("buildSteps") or []:
        requests = (step.get("resources") or {}).get("requests") or {}
        steps.append(
            StepResources(
                name=step.get("name", ""),
                cpu_millis=int(parse_quantity(requests.get("cpu", "0")) * 1000),
                memory_bytes=int(parse_quantity(requests.get("memory", "0"))),
            )
        )
    return StrategyDescriptor(name=(obj.get("metadata") or {}).get("name", ""), steps=steps)
