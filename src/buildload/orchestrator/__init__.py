# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Execution and measurement engine for buildrun load tests."""

from buildload.orchestrator.aggregation import SeriesTrend, aggregate, analyze_trends
from buildload.orchestrator.lifecycle import BuildRunLifecycle
from buildload.orchestrator.models import (
    BuildKind,
    BuildpacksBuild,
    JobSpec,
    KanikoBuild,
    LifecycleSettings,
    OutputSpec,
    ParallelRunResult,
    ResultSet,
    RunDiagnostics,
    RunOptions,
    RunRecord,
    RunRequest,
    SourceSpec,
    StageTiming,
    WorkerResult,
)
from buildload.orchestrator.orchestrator import BuildRunOrchestrator
from buildload.orchestrator.preflight import PreflightReport, check_system_and_config
from buildload.orchestrator.stages import decompose
from buildload.orchestrator.strategies import (
    ExecutionStrategy,
    ParallelismSeriesStrategy,
)

__all__ = [
    "BuildKind",
    "BuildRunLifecycle",
    "BuildRunOrchestrator",
    "BuildpacksBuild",
    "ExecutionStrategy",
    "JobSpec",
    "KanikoBuild",
    "LifecycleSettings",
    "OutputSpec",
    "ParallelRunResult",
    "ParallelismSeriesStrategy",
    "PreflightReport",
    "ResultSet",
    "RunDiagnostics",
    "RunOptions",
    "RunRecord",
    "RunRequest",
    "SeriesTrend",
    "SourceSpec",
    "StageTiming",
    "WorkerResult",
    "aggregate",
    "analyze_trends",
    "check_system_and_config",
    "decompose",
]
