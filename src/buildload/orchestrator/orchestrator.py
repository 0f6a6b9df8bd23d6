# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Runs many buildrun lifecycles concurrently and sweeps their parallelism."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from buildload.common.config import BuildConfig, NamingConfig, TestPlan
from buildload.common.exceptions import SeriesAborted
from buildload.orchestrator.aggregation import aggregate
from buildload.orchestrator.builder import (
    create_job_spec,
    create_name,
    create_run_request,
    create_test_plan_job_spec,
)
from buildload.orchestrator.lifecycle import BuildRunLifecycle
from buildload.orchestrator.models import (
    ParallelRunResult,
    ResultSet,
    RunOptions,
    StageTiming,
    WorkerResult,
)
from buildload.orchestrator.strategies import (
    ExecutionStrategy,
    ParallelismSeriesStrategy,
)

_logger = logging.getLogger(__name__)

__all__ = [
    "BuildRunOrchestrator",
]

BUILDRUN_ENTITY = "BuildRun"
BUILD_ENTITY = "Build"

LevelCallback = Callable[[str, ResultSet], None]


class BuildRunOrchestrator:
    """Fans buildrun lifecycles out to concurrent workers.

    Worker i uses the name <prefix>-<strategy>-<i> in the configured
    namespace. Results are kept per worker index, so the order of results
    never depends on the order in which workers finish.
    """

    def __init__(
        self,
        lifecycle: BuildRunLifecycle,
        naming: NamingConfig,
        logger: logging.Logger | None = None,
    ) -> None:
        self.lifecycle = lifecycle
        self.naming = naming
        self.logger = logger or _logger

    async def run_parallel(
        self, build_config: BuildConfig, parallel: int
    ) -> ParallelRunResult:
        """Execute the same buildrun parallel times at once.

        Returns after every worker, including its cleanup, has finished. Use
        ParallelRunResult.error to get one error combining all worker errors.
        """

        async def execute(slot: WorkerResult) -> StageTiming:
            job_spec = create_job_spec(slot.name, self.naming.namespace, build_config)
            run_request = create_run_request(
                job_spec,
                generate_identity=build_config.generate_service_account,
                service_account=build_config.service_account_name,
            )
            return await self.lifecycle.run_once(
                job_spec,
                run_request,
                RunOptions(
                    generate_identity=build_config.generate_service_account,
                    skip_cleanup=build_config.skip_delete,
                ),
            )

        return await self._fan_out(build_config, parallel, execute, "buildruns")

    async def run_builds(self, build_config: BuildConfig, count: int) -> ParallelRunResult:
        """Register count builds at once and measure their registration time."""

        async def execute(slot: WorkerResult) -> StageTiming:
            job_spec = create_job_spec(slot.name, self.naming.namespace, build_config)
            return await self.lifecycle.register_once(
                job_spec, RunOptions(skip_cleanup=build_config.skip_delete)
            )

        return await self._fan_out(build_config, count, execute, "builds")

    async def run_series(
        self,
        build_config: BuildConfig,
        start: int,
        end: int,
        increment: int,
        cooldown_seconds: float = 0.0,
        on_level_complete: LevelCallback | None = None,
    ) -> list[ResultSet]:
        """Execute parallel buildruns for every level from start to end.

        Raises:
            ValueError: If the range is invalid
            SeriesAborted: If a level failed, with the result sets of the
                levels that completed before it
        """
        strategy = ParallelismSeriesStrategy(start, end, increment, cooldown_seconds)
        return await self.execute(build_config, strategy, on_level_complete)

    async def execute(
        self,
        build_config: BuildConfig,
        strategy: ExecutionStrategy,
        on_level_complete: LevelCallback | None = None,
    ) -> list[ResultSet]:
        """Execute levels one after another as decided by the strategy."""
        results: list[ResultSet] = []
        run_index = 0

        self.logger.info(
            f"Starting buildrun series with strategy: {strategy.__class__.__name__}"
        )

        should_continue = strategy.should_continue(results)
        while should_continue:
            level = strategy.get_next_level(results)
            label = strategy.get_run_label(run_index)
            self.logger.info(f"[{run_index + 1}] Executing {label}...")

            outcome = await self.run_parallel(build_config, level)
            error = outcome.error
            if error is not None:
                self.logger.error(
                    f"[{run_index + 1}] {label} failed with {len(outcome.errors)} "
                    f"of {level} buildruns failing, aborting series"
                )
                raise SeriesAborted(level, list(results), error)

            result_set = aggregate(outcome.timings, BUILDRUN_ENTITY)
            results.append(result_set)
            self.logger.info(f"[{run_index + 1}] {label} completed successfully")
            if on_level_complete is not None:
                on_level_complete(label, result_set)

            run_index += 1

            should_continue = strategy.should_continue(results)
            if should_continue:
                cooldown = strategy.get_cooldown_seconds()
                if cooldown > 0:
                    self.logger.info(f"Applying cooldown: {cooldown}s")
                    await asyncio.sleep(cooldown)

        self.logger.info(f"All {len(results)} levels complete")
        return results

    async def run_test_plan(self, test_plan: TestPlan) -> dict[str, StageTiming]:
        """Execute the steps of a test plan one after another.

        The first failing step aborts the plan.

        Returns:
            Stage timings per step name, in step order
        """
        timings: dict[str, StageTiming] = {}
        options = RunOptions(generate_identity=test_plan.generate_service_account)

        for i, step in enumerate(test_plan.steps):
            spec = step.build_spec
            self.logger.info(
                f"Running test plan step {i + 1}/{len(test_plan.steps)}: {step.name}, "
                f"using build strategy {spec.strategy.name} to build {spec.source.url}"
            )
            job_spec = create_test_plan_job_spec(test_plan, step)
            run_request = create_run_request(
                job_spec,
                generate_identity=test_plan.generate_service_account,
                service_account=test_plan.service_account_name,
            )
            timings[step.name] = await self.lifecycle.run_once(job_spec, run_request, options)

        return timings

    async def _fan_out(
        self,
        build_config: BuildConfig,
        parallel: int,
        execute: Callable[[WorkerResult], Awaitable[StageTiming]],
        what: str,
    ) -> ParallelRunResult:
        if parallel <= 0:
            raise ValueError(f"Number of parallel {what} must be greater than 0, got {parallel}.")

        slots = [
            WorkerResult(
                index=i,
                name=create_name(self.naming, build_config.cluster_build_strategy, i),
            )
            for i in range(parallel)
        ]

        async def worker(slot: WorkerResult) -> None:
            try:
                slot.timing = await execute(slot)
            except Exception as e:
                slot.error = e
                self.logger.debug(f"Worker {slot.index} ({slot.name}) failed: {e!r}")

        self.logger.info(
            f"Executing {parallel} {what} in namespace {self.naming.namespace}"
        )
        await asyncio.gather(*(worker(slot) for slot in slots))

        result = ParallelRunResult(results=slots)
        self.logger.info(
            f"{len(result.timings)}/{parallel} {what} completed successfully"
        )
        return result
