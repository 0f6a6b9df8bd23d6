# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Tests for the pre-flight check."""

import logging

import pytest

from buildload.common.enums import StrategyKind
from buildload.common.exceptions import ControlPlaneError, StrategyNotFound
from buildload.control_plane.models import (
    NodeCapacity,
    RunStatus,
    StepResources,
    StrategyDescriptor,
)
from buildload.orchestrator.preflight import (
    check_system_and_config,
    estimate_resource_requests,
    format_bytes,
    format_cpu,
)
from tests.unit.fakes import T0

GIB = 1024**3

KANIKO = StrategyDescriptor(
    name="kaniko",
    steps=[
        StepResources(name="step-build-and-push", cpu_millis=500, memory_bytes=GIB),
        StepResources(name="step-results", cpu_millis=100, memory_bytes=GIB // 4),
    ],
)


@pytest.fixture
def cluster(client):
    client.strategies = [KANIKO, StrategyDescriptor(name="buildah")]
    client.nodes = [
        NodeCapacity(name="node-1", cpu_millis=4000, memory_bytes=16 * GIB),
        NodeCapacity(name="node-2", cpu_millis=4000, memory_bytes=16 * GIB),
    ]
    return client


class TestFormatting:
    """Tests for the capacity formatting helpers."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (512, "512.0 Byte"),
            (1536, "1.5 KiB"),
            (GIB, "1.0 GiB"),
            (3 * 1024**4, "3.0 TiB"),
        ],
    )
    def test_format_bytes(self, value, expected):
        assert format_bytes(value) == expected

    def test_format_cpu(self):
        assert format_cpu(2500) == "2.5"
        assert format_cpu(8000) == "8"


class TestEstimateResourceRequests:
    """Tests for estimate_resource_requests."""

    def test_biggest_step_times_parallel(self):
        assert estimate_resource_requests(KANIKO, 10) == (5000, 10 * GIB)

    def test_strategy_without_steps(self):
        assert estimate_resource_requests(StrategyDescriptor(name="empty"), 10) == (0, 0)


class TestCheckSystemAndConfig:
    """Tests for check_system_and_config."""

    @pytest.mark.asyncio
    async def test_healthy_cluster(self, cluster, build_config):
        report = await check_system_and_config(cluster, build_config, 4)

        assert report.strategy == KANIKO
        assert report.total_runs == 0
        assert report.active_runs == 0
        assert report.node_cpu_millis == 8000
        assert report.node_memory_bytes == 32 * GIB
        assert report.estimated_cpu_millis == 2000
        assert report.estimated_memory_bytes == 4 * GIB
        assert report.warnings == []

    @pytest.mark.asyncio
    async def test_missing_strategy(self, cluster, build_config):
        build_config.cluster_build_strategy = "buildkit"

        with pytest.raises(StrategyNotFound) as exc_info:
            await check_system_and_config(cluster, build_config, 1)

        assert exc_info.value.available == ["buildah", "kaniko"]
        assert "available strategies are: buildah, kaniko" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_namespaced_strategy_is_not_checked(self, cluster, build_config):
        build_config.cluster_build_strategy = "buildkit"
        build_config.strategy_kind = StrategyKind.BUILD_STRATEGY

        report = await check_system_and_config(cluster, build_config, 1)

        assert report.strategy is None
        assert report.estimated_cpu_millis is None

    @pytest.mark.asyncio
    async def test_forbidden_strategy_listing_warns(self, cluster, build_config, caplog):
        cluster.strategy_error = ControlPlaneError("forbidden", status=403)

        with caplog.at_level(logging.WARNING):
            report = await check_system_and_config(cluster, build_config, 1)

        assert len(report.warnings) == 1
        assert "permissions do not allow" in report.warnings[0]
        assert "permissions do not allow" in caplog.text

    @pytest.mark.asyncio
    async def test_other_strategy_listing_error_warns(self, cluster, build_config):
        cluster.strategy_error = ControlPlaneError("connection refused", status=None)

        report = await check_system_and_config(cluster, build_config, 1)

        assert report.warnings == [
            "Cannot check whether build strategy kaniko is available: connection refused"
        ]

    @pytest.mark.asyncio
    async def test_active_buildruns_warn(self, cluster, build_config):
        cluster.runs = {
            ("a", "done"): RunStatus(name="done", namespace="a", created=T0, completed=T0),
            ("a", "busy"): RunStatus(name="busy", namespace="a", created=T0),
        }

        report = await check_system_and_config(cluster, build_config, 1)

        assert report.total_runs == 2
        assert report.active_runs == 1
        assert len(report.warnings) == 1
        assert "1 active buildrun(s)" in report.warnings[0]

    @pytest.mark.asyncio
    async def test_capacity_exceeded_warns(self, cluster, build_config):
        report = await check_system_and_config(cluster, build_config, 40)

        assert report.estimated_memory_bytes == 40 * GIB
        assert report.warnings == [
            "The estimated resource request of 40 concurrent buildrun(s) "
            "exceeds the capacity of the cluster nodes."
        ]
