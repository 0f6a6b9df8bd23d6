# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable, Mapping, Sequence
from pathlib import Path

import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from buildload.common.config import (
    BuildConfig,
    NamingConfig,
    ReportConfig,
    SeriesConfig,
    TestPlan,
)
from buildload.common.exceptions import BuildLoadError, SeriesAborted
from buildload.common.logging import setup_rich_logging
from buildload.control_plane.kubernetes_client import KubernetesControlPlaneClient
from buildload.control_plane.protocols import ControlPlaneClient
from buildload.exporters import (
    ConsoleExporter,
    ResultSetCsvExporter,
    ResultSetJsonExporter,
    StageTimingCsvExporter,
    StageTimingJsonExporter,
)
from buildload.orchestrator import (
    BuildRunLifecycle,
    BuildRunOrchestrator,
    ResultSet,
    StageTiming,
    aggregate,
    check_system_and_config,
)
from buildload.orchestrator.orchestrator import BUILD_ENTITY, BUILDRUN_ENTITY

logger = logging.getLogger(__name__)

Execution = Callable[[ControlPlaneClient], Awaitable[None]]


def run_buildruns(
    build: BuildConfig,
    naming: NamingConfig,
    reports: ReportConfig,
    parallel: int,
    verbose: bool = False,
) -> None:
    """Run parallel buildruns once and report their stage timings."""
    console = _setup(verbose)
    _run(
        console,
        lambda client: execute_buildruns(client, build, naming, reports, parallel, console),
    )


def run_buildruns_series(
    build: BuildConfig,
    naming: NamingConfig,
    series: SeriesConfig,
    reports: ReportConfig,
    verbose: bool = False,
) -> None:
    """Run a series of parallel buildruns with increasing parallelism."""
    console = _setup(verbose)
    _run(
        console,
        lambda client: execute_series(client, build, naming, series, reports, console),
    )


def run_builds(
    build: BuildConfig,
    naming: NamingConfig,
    count: int,
    verbose: bool = False,
) -> None:
    """Create builds in parallel and report their registration time."""
    console = _setup(verbose)
    _run(console, lambda client: execute_builds(client, build, naming, count, console))


def run_test_plan(
    testplan: Path,
    reports: ReportConfig,
    verbose: bool = False,
) -> None:
    """Execute the steps of a test plan file one after another."""
    console = _setup(verbose)
    _run(console, lambda client: execute_test_plan(client, testplan, reports, console))


async def execute_buildruns(
    client: ControlPlaneClient,
    build: BuildConfig,
    naming: NamingConfig,
    reports: ReportConfig,
    parallel: int,
    console: Console,
) -> None:
    await check_system_and_config(client, build, parallel)
    orchestrator = BuildRunOrchestrator(BuildRunLifecycle(client), naming)

    outcome = await orchestrator.run_parallel(build, parallel)
    timings = {r.name: r.timing for r in outcome.results if r.timing is not None}
    if timings:
        _export_timings(reports, timings)
        exporter = ConsoleExporter(console)
        exporter.print_stage_timings(timings)
        exporter.print_result_set(aggregate(list(timings.values()), BUILDRUN_ENTITY))

    outcome.raise_for_errors()


async def execute_series(
    client: ControlPlaneClient,
    build: BuildConfig,
    naming: NamingConfig,
    series: SeriesConfig,
    reports: ReportConfig,
    console: Console,
) -> None:
    await check_system_and_config(client, build, series.end)
    orchestrator = BuildRunOrchestrator(BuildRunLifecycle(client), naming)
    exporter = ConsoleExporter(console)

    try:
        result_sets = await orchestrator.run_series(
            build,
            series.start,
            series.end,
            series.increment,
            cooldown_seconds=series.cooldown_seconds,
            on_level_complete=lambda label, result_set: exporter.print_result_set(
                result_set, title=f"{label} ({result_set.count} buildruns)"
            ),
        )
    except SeriesAborted as e:
        _export_result_sets(reports, e.partial_results)
        exporter.print_series(e.partial_results)
        raise

    _export_result_sets(reports, result_sets)
    exporter.print_series(result_sets)


async def execute_builds(
    client: ControlPlaneClient,
    build: BuildConfig,
    naming: NamingConfig,
    count: int,
    console: Console,
) -> None:
    orchestrator = BuildRunOrchestrator(BuildRunLifecycle(client), naming)

    outcome = await orchestrator.run_builds(build, count)
    if outcome.timings:
        ConsoleExporter(console).print_result_set(aggregate(outcome.timings, BUILD_ENTITY))

    outcome.raise_for_errors()


async def execute_test_plan(
    client: ControlPlaneClient,
    testplan: Path,
    reports: ReportConfig,
    console: Console,
) -> None:
    plan = TestPlan.from_file(testplan)
    logger.info(f"Loaded test plan {testplan} with {len(plan.steps)} step(s)")

    orchestrator = BuildRunOrchestrator(
        BuildRunLifecycle(client), NamingConfig(namespace=plan.namespace)
    )
    timings = await orchestrator.run_test_plan(plan)

    _export_timings(reports, timings)
    ConsoleExporter(console).print_stage_timings(timings)


def _setup(verbose: bool) -> Console:
    setup_rich_logging(verbose)
    return Console()


def _run(console: Console, execution: Execution) -> None:
    """Run an execution against the cluster, exit non-zero on failure."""
    try:
        asyncio.run(_with_client(execution))
    except BuildLoadError as e:
        _print_error(console, type(e).__name__, str(e))
        sys.exit(1)
    except (OSError, yaml.YAMLError, ValidationError) as e:
        _print_error(console, "Invalid input", str(e))
        sys.exit(1)


async def _with_client(execution: Execution) -> None:
    client = KubernetesControlPlaneClient.from_kubeconfig()
    try:
        await execution(client)
    finally:
        client.close()


def _print_error(console: Console, headline: str, message: str) -> None:
    console.print(
        Panel(Text(message), title=f"Error: {headline}", border_style="red", expand=False)
    )


def _export_timings(reports: ReportConfig, timings: Mapping[str, StageTiming]) -> None:
    if reports.csv_output is not None:
        StageTimingCsvExporter(
            reports.csv_output.parent, timings, file_name=reports.csv_output.name
        ).export()
    if reports.json_output is not None:
        StageTimingJsonExporter(
            reports.json_output.parent, timings, file_name=reports.json_output.name
        ).export()


def _export_result_sets(reports: ReportConfig, result_sets: Sequence[ResultSet]) -> None:
    if reports.csv_output is not None:
        ResultSetCsvExporter(
            reports.csv_output.parent, result_sets, file_name=reports.csv_output.name
        ).export()
    if reports.json_output is not None:
        ResultSetJsonExporter(
            reports.json_output.parent, result_sets, file_name=reports.json_output.name
        ).export()
