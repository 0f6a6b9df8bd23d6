# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Advisory checks of the cluster before a load test starts."""

import logging
from http import HTTPStatus

from pydantic import BaseModel, Field

from buildload.common.config import BuildConfig
from buildload.common.enums import StrategyKind
from buildload.common.exceptions import ControlPlaneError, StrategyNotFound
from buildload.control_plane.models import StrategyDescriptor
from buildload.control_plane.protocols import ControlPlaneClient

_logger = logging.getLogger(__name__)

_MEMORY_UNITS = ["Byte", "KiB", "MiB", "GiB", "TiB"]


class PreflightReport(BaseModel):
    """What the pre-flight check found out. Unknown values are None."""

    strategy: StrategyDescriptor | None = None
    total_runs: int | None = None
    active_runs: int | None = None
    node_cpu_millis: int | None = None
    node_memory_bytes: int | None = None
    estimated_cpu_millis: int | None = None
    estimated_memory_bytes: int | None = None
    warnings: list[str] = Field(default_factory=list)


def format_bytes(value: int) -> str:
    """Human readable binary size, for example 1.5 GiB."""
    scaled = float(value)
    unit = 0
    while scaled > 1023.9 and unit < len(_MEMORY_UNITS) - 1:
        scaled /= 1024.0
        unit += 1
    return f"{scaled:.1f} {_MEMORY_UNITS[unit]}"


def format_cpu(millis: int) -> str:
    return f"{millis / 1000:g}"


def estimate_resource_requests(
    strategy: StrategyDescriptor, parallel: int
) -> tuple[int, int]:
    """Estimate CPU millicores and memory bytes requested by parallel buildruns.

    Steps of a strategy run one after another, so the biggest step request
    is what each buildrun needs at most.
    """
    max_cpu = max((step.cpu_millis for step in strategy.steps), default=0)
    max_memory = max((step.memory_bytes for step in strategy.steps), default=0)
    return max_cpu * parallel, max_memory * parallel


async def check_system_and_config(
    client: ControlPlaneClient,
    build_config: BuildConfig,
    parallel: int,
    logger: logging.Logger | None = None,
) -> PreflightReport:
    """Check strategy availability, existing buildruns, and cluster capacity.

    Everything except a missing strategy only results in warnings.

    Raises:
        StrategyNotFound: If the configured cluster build strategy does not exist
    """
    logger = logger or _logger
    report = PreflightReport()

    def warn(message: str) -> None:
        report.warnings.append(message)
        logger.warning(message)

    name = build_config.cluster_build_strategy
    if build_config.strategy_kind == StrategyKind.CLUSTER_BUILD_STRATEGY:
        try:
            strategies = await client.list_strategies()
        except ControlPlaneError as e:
            if e.status == HTTPStatus.FORBIDDEN:
                warn(
                    "The current permissions do not allow to check whether "
                    f"build strategy {name} is available."
                )
            else:
                warn(f"Cannot check whether build strategy {name} is available: {e}")
        else:
            by_name = {strategy.name: strategy for strategy in strategies}
            if name not in by_name:
                raise StrategyNotFound(name, sorted(by_name))
            report.strategy = by_name[name]

    try:
        runs = await client.list_runs()
    except ControlPlaneError as e:
        logger.debug(f"Cannot list existing buildruns: {e}")
    else:
        report.total_runs = len(runs)
        report.active_runs = sum(1 for run in runs if run.completed is None)
        if report.total_runs > 0:
            logger.info(
                f"There are currently {report.total_runs} buildrun(s) in the system. "
                "It might be an idea to remove old and obsolete buildruns."
            )
        if report.active_runs > 0:
            warn(
                f"With currently {report.active_runs} active buildrun(s), there might be "
                "some interference with the test buildruns. Please take the current "
                "system utilization into consideration when analysing any performance "
                "measurements."
            )

    try:
        nodes = await client.list_nodes()
    except ControlPlaneError as e:
        logger.debug(f"Cannot list cluster nodes: {e}")
    else:
        report.node_cpu_millis = sum(node.cpu_millis for node in nodes)
        report.node_memory_bytes = sum(node.memory_bytes for node in nodes)

        if report.strategy is not None:
            cpu, memory = estimate_resource_requests(report.strategy, parallel)
            report.estimated_cpu_millis = cpu
            report.estimated_memory_bytes = memory
            logger.info(
                f"With {parallel} concurrent buildrun(s), the estimated resource request "
                f"will be roughly {format_cpu(cpu)} CPU cores and {format_bytes(memory)} "
                f"system memory. Available in the cluster are "
                f"{format_cpu(report.node_cpu_millis)} CPU cores and "
                f"{format_bytes(report.node_memory_bytes)} system memory."
            )
            if cpu > report.node_cpu_millis or memory > report.node_memory_bytes:
                warn(
                    f"The estimated resource request of {parallel} concurrent buildrun(s) "
                    "exceeds the capacity of the cluster nodes."
                )

    return report
