# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Control plane client for Shipwright builds on Kubernetes."""

import asyncio
import functools
import logging
from collections.abc import AsyncIterator, Callable
from concurrent.futures import ThreadPoolExecutor
from http import HTTPStatus
from typing import Any, TypeVar

from kubernetes import client, config
from kubernetes.client.exceptions import ApiException

from buildload.common.constants import (
    BUILDRUN_NAME_LABEL,
    SHIPWRIGHT_GROUP,
    SHIPWRIGHT_VERSION,
    TEKTON_GROUP,
    TEKTON_VERSION,
)
from buildload.common.environment import Environment
from buildload.common.exceptions import ControlPlaneError
from buildload.control_plane import manifests
from buildload.control_plane.models import (
    JobStatus,
    NodeCapacity,
    RunStatus,
    StrategyDescriptor,
    SubRunStatus,
    UnitStatus,
)
from buildload.orchestrator.models import JobSpec, RunRequest

logger = logging.getLogger(__name__)

T = TypeVar("T")

_BUILDS = "builds"
_BUILDRUNS = "buildruns"
_CLUSTER_BUILD_STRATEGIES = "clusterbuildstrategies"
_TASKRUNS = "taskruns"


class KubernetesControlPlaneClient:
    """ControlPlaneClient backed by the official Kubernetes Python client.

    The Kubernetes client is synchronous, so every call runs in a dedicated
    thread pool. Size the pool and the HTTP connection pool for the highest
    number of parallel buildruns you plan to run.
    """

    def __init__(
        self,
        api_client: client.ApiClient,
        executor: ThreadPoolExecutor | None = None,
    ) -> None:
        self.api_client = api_client
        self.custom = client.CustomObjectsApi(api_client)
        self.core = client.CoreV1Api(api_client)
        self._executor = executor or ThreadPoolExecutor(
            max_workers=Environment.KUBERNETES.THREAD_POOL_SIZE,
            thread_name_prefix="buildload-kube",
        )

    @classmethod
    def from_kubeconfig(
        cls, kubeconfig: str | None = None, context: str | None = None
    ) -> "KubernetesControlPlaneClient":
        """Connect using a kubeconfig file, or the in-cluster config as fallback."""
        configuration = client.Configuration()
        try:
            config.load_kube_config(
                config_file=kubeconfig,
                context=context,
                client_configuration=configuration,
            )
            logger.debug("Loaded kubeconfig")
        except config.ConfigException as e:
            if kubeconfig is not None:
                raise ControlPlaneError(f"failed to load kubeconfig {kubeconfig}: {e}") from e
            try:
                config.load_incluster_config(client_configuration=configuration)
            except config.ConfigException as incluster_error:
                raise ControlPlaneError(
                    f"failed to load Kubernetes configuration: {e}; {incluster_error}"
                ) from incluster_error
            logger.debug("Loaded in-cluster Kubernetes config")

        configuration.connection_pool_maxsize = Environment.KUBERNETES.CONNECTION_POOL_SIZE
        return cls(client.ApiClient(configuration))

    def close(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)
        self.api_client.close()

    async def create_job(self, spec: JobSpec) -> JobStatus:
        obj = await self._call(
            f"create build {spec.name}",
            self.custom.create_namespaced_custom_object,
            SHIPWRIGHT_GROUP,
            SHIPWRIGHT_VERSION,
            spec.namespace,
            _BUILDS,
            manifests.build_manifest(spec),
        )
        return manifests.job_status(obj)

    async def get_job(self, namespace: str, name: str) -> JobStatus | None:
        obj = await self._get_custom(namespace, _BUILDS, name)
        return manifests.job_status(obj) if obj is not None else None

    async def delete_job(self, namespace: str, name: str) -> None:
        await self._delete_custom(namespace, _BUILDS, name)

    async def create_run(self, request: RunRequest) -> RunStatus:
        obj = await self._call(
            f"create buildrun {request.name}",
            self.custom.create_namespaced_custom_object,
            SHIPWRIGHT_GROUP,
            SHIPWRIGHT_VERSION,
            request.namespace,
            _BUILDRUNS,
            manifests.buildrun_manifest(request),
        )
        return manifests.run_status(obj)

    async def get_run(self, namespace: str, name: str) -> RunStatus | None:
        obj = await self._get_custom(namespace, _BUILDRUNS, name)
        return manifests.run_status(obj) if obj is not None else None

    async def delete_run(self, namespace: str, name: str) -> None:
        await self._delete_custom(namespace, _BUILDRUNS, name)

    async def list_runs(self, namespace: str | None = None) -> list[RunStatus]:
        if namespace is None:
            result = await self._call(
                "list buildruns",
                self.custom.list_cluster_custom_object,
                SHIPWRIGHT_GROUP,
                SHIPWRIGHT_VERSION,
                _BUILDRUNS,
            )
        else:
            result = await self._call(
                f"list buildruns in {namespace}",
                self.custom.list_namespaced_custom_object,
                SHIPWRIGHT_GROUP,
                SHIPWRIGHT_VERSION,
                namespace,
                _BUILDRUNS,
            )
        return [manifests.run_status(item) for item in result.get("items", [])]

    async def get_sub_run(self, namespace: str, name: str) -> SubRunStatus | None:
        obj = await self._get_custom(
            namespace, _TASKRUNS, name, group=TEKTON_GROUP, version=TEKTON_VERSION
        )
        return manifests.sub_run_status(obj) if obj is not None else None

    async def list_sub_runs(self, namespace: str, run_name: str) -> list[SubRunStatus]:
        result = await self._call(
            f"list taskruns of buildrun {run_name}",
            self.custom.list_namespaced_custom_object,
            TEKTON_GROUP,
            TEKTON_VERSION,
            namespace,
            _TASKRUNS,
            label_selector=f"{BUILDRUN_NAME_LABEL}={run_name}",
        )
        return [manifests.sub_run_status(item) for item in result.get("items", [])]

    async def get_execution_unit(self, namespace: str, name: str) -> UnitStatus | None:
        try:
            pod = await self._call(
                f"get pod {name}", self.core.read_namespaced_pod, name, namespace
            )
        except ControlPlaneError as e:
            if e.status == HTTPStatus.NOT_FOUND:
                return None
            raise
        return manifests.unit_status(self._to_dict(pod))

    async def list_execution_units(self, namespace: str, run_name: str) -> list[UnitStatus]:
        pods = await self._call(
            f"list pods of buildrun {run_name}",
            self.core.list_namespaced_pod,
            namespace,
            label_selector=f"{BUILDRUN_NAME_LABEL}={run_name}",
        )
        return [manifests.unit_status(self._to_dict(pod)) for pod in pods.items]

    async def stream_container_logs(
        self, namespace: str, unit_name: str, container_name: str
    ) -> AsyncIterator[str]:
        text = await self._call(
            f"read logs of container {container_name} in pod {unit_name}",
            self.core.read_namespaced_pod_log,
            unit_name,
            namespace,
            container=container_name,
        )
        for line in (text or "").splitlines():
            yield line

    async def list_nodes(self) -> list[NodeCapacity]:
        nodes = await self._call("list nodes", self.core.list_node)
        return [manifests.node_capacity(self._to_dict(node)) for node in nodes.items]

    async def list_strategies(self) -> list[StrategyDescriptor]:
        result = await self._call(
            "list cluster build strategies",
            self.custom.list_cluster_custom_object,
            SHIPWRIGHT_GROUP,
            SHIPWRIGHT_VERSION,
            _CLUSTER_BUILD_STRATEGIES,
        )
        return [manifests.strategy_descriptor(item) for item in result.get("items", [])]

    async def _get_custom(
        self,
        namespace: str,
        plural: str,
        name: str,
        group: str = SHIPWRIGHT_GROUP,
        version: str = SHIPWRIGHT_VERSION,
    ) -> dict[str, Any] | None:
        try:
            return await self._call(
                f"get {plural} {namespace}/{name}",
                self.custom.get_namespaced_custom_object,
                group,
                version,
                namespace,
                plural,
                name,
            )
        except ControlPlaneError as e:
            if e.status == HTTPStatus.NOT_FOUND:
                return None
            raise

    async def _delete_custom(self, namespace: str, plural: str, name: str) -> None:
        try:
            await self._call(
                f"delete {plural} {namespace}/{name}",
                self.custom.delete_namespaced_custom_object,
                SHIPWRIGHT_GROUP,
                SHIPWRIGHT_VERSION,
                namespace,
                plural,
                name,
                grace_period_seconds=0,
            )
        except ControlPlaneError as e:
            if e.status != HTTPStatus.NOT_FOUND:
                raise

    def _to_dict(self, obj: Any) -> dict[str, Any]:
        return self.api_client.sanitize_for_serialization(obj)

    async def _call(self, action: str, fn: Callable[..., T], *args, **kwargs) -> T:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(
                self._executor, functools.partial(fn, *args, **kwargs)
            )
        except ApiException as e:
            raise ControlPlaneError(
                f"failed to {action}: {e.status} {e.reason}", status=e.status
            ) from e
