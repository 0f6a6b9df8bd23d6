# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Drives a single build and buildrun through their lifecycle."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from contextlib import AsyncExitStack
from datetime import timedelta

import yaml

from buildload.common.enums import RunCondition
from buildload.common.exceptions import (
    CleanupFailed,
    ControlPlaneError,
    DeletionTimeout,
    LookupFailed,
    RegistrationRejected,
    RegistrationTimeout,
    RunFailed,
    RunTimeout,
    SubmissionFailed,
)
from buildload.control_plane.models import JobStatus, RunStatus, SubRunStatus, UnitStatus
from buildload.control_plane.protocols import ControlPlaneClient, OutputArtifactCleaner
from buildload.orchestrator.models import (
    JobSpec,
    LifecycleSettings,
    RunDiagnostics,
    RunOptions,
    RunRecord,
    RunRequest,
    StageTiming,
)
from buildload.orchestrator.stages import decompose

_logger = logging.getLogger(__name__)

__all__ = [
    "BuildRunLifecycle",
]


class BuildRunLifecycle:
    """Creates a build and a buildrun, waits for the outcome, and cleans up.

    Every lifecycle run owns the build and buildrun it creates. On every exit
    path the buildrun, the build, and the output image are released in this
    order unless cleanup is skipped. Release failures are logged and never
    replace the outcome of the run.
    """

    def __init__(
        self,
        client: ControlPlaneClient,
        settings: LifecycleSettings | None = None,
        artifact_cleaner: OutputArtifactCleaner | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.client = client
        self.settings = settings or LifecycleSettings()
        self.artifact_cleaner = artifact_cleaner
        self.logger = logger or _logger

    async def run_once(
        self,
        job_spec: JobSpec,
        run_request: RunRequest,
        options: RunOptions | None = None,
    ) -> StageTiming:
        """Execute one buildrun of a freshly created build.

        Args:
            job_spec: The build to create
            run_request: The buildrun to create for the build
            options: Service account generation and cleanup switches

        Returns:
            Stage durations of the buildrun

        Raises:
            SubmissionFailed: If build or buildrun could not be created
            RegistrationRejected: If the platform refused the build
            RegistrationTimeout: If the build was not registered in time
            RunFailed: If the buildrun failed, with its diagnostics
            RunTimeout: If the buildrun did not complete in time
        """
        options = options or RunOptions()
        run_request = self._apply_options(run_request, options)
        record = RunRecord()
        run_submitted = False

        async with AsyncExitStack() as cleanup:
            if not options.skip_cleanup:

                async def release_artifact() -> None:
                    if run_submitted:
                        await self.delete_output_artifact(job_spec)

                cleanup.push_async_callback(
                    self._release, f"output image of {job_spec.name}", release_artifact
                )

            job = await self._submit_job(job_spec)
            record.job_created = job.created
            if not options.skip_cleanup:
                cleanup.push_async_callback(
                    self._release,
                    f"build {job_spec.name}",
                    lambda: self.delete_job_and_wait(job_spec.namespace, job_spec.name),
                )

            job = await self._await_registration(job_spec)
            record.job_registered = job.registered_at

            run = await self._submit_run(run_request)
            run_submitted = True
            record.run_created = run.created
            if not options.skip_cleanup:
                cleanup.push_async_callback(
                    self._release,
                    f"buildrun {run_request.name}",
                    lambda: self.delete_run_and_wait(
                        run_request.namespace, run_request.name
                    ),
                )

            run = await self._await_completion(run_request, job_spec, record)
            record.run_started = run.started
            record.run_completed = run.completed
            record.condition = RunCondition.SUCCEEDED

            await self._inspect(run, record)
            timing = decompose(record, self.logger)
            self.logger.debug(
                f"buildrun {run_request.namespace}/{run_request.name} results: {timing}"
            )

        return timing

    async def register_once(
        self, job_spec: JobSpec, options: RunOptions | None = None
    ) -> StageTiming:
        """Create a build and measure how long its registration takes.

        No buildrun is created, so the result only contains RegistrationTime.
        """
        options = options or RunOptions()
        record = RunRecord()

        async with AsyncExitStack() as cleanup:
            job = await self._submit_job(job_spec)
            record.job_created = job.created
            if not options.skip_cleanup:
                cleanup.push_async_callback(
                    self._release,
                    f"build {job_spec.name}",
                    lambda: self.delete_job_and_wait(job_spec.namespace, job_spec.name),
                )

            job = await self._await_registration(job_spec)
            record.job_registered = job.registered_at
            record.condition = RunCondition.SUCCEEDED
            timing = decompose(record, self.logger)

        return timing

    async def delete_job_and_wait(self, namespace: str, name: str) -> None:
        """Delete a build and wait until it is gone. An absent build is fine."""
        if await self.client.get_job(namespace, name) is None:
            return

        self.logger.debug(f"Delete build {namespace}/{name}")
        await self.client.delete_job(namespace, name)
        await self._wait_until_absent(
            lambda: self.client.get_job(namespace, name), f"build {namespace}/{name}"
        )

    async def delete_run_and_wait(self, namespace: str, name: str) -> None:
        """Delete a buildrun and wait until it and, best effort, its pod are gone."""
        run = await self.client.get_run(namespace, name)
        if run is None:
            return

        unit = None
        try:
            unit = await self._find_unit(run, await self._find_sub_run_or_none(run))
        except LookupFailed as e:
            self.logger.debug(f"No pod to wait for after deleting buildrun {name}: {e}")

        self.logger.debug(f"Delete buildrun {namespace}/{name}")
        await self.client.delete_run(namespace, name)
        await self._wait_until_absent(
            lambda: self.client.get_run(namespace, name), f"buildrun {namespace}/{name}"
        )

        if unit is not None:
            try:
                await self._wait_until_absent(
                    lambda: self.client.get_execution_unit(namespace, unit.name),
                    f"pod {namespace}/{unit.name}",
                )
            except DeletionTimeout as e:
                self.logger.warning(f"{e}, continuing")

    async def delete_output_artifact(self, job_spec: JobSpec) -> None:
        image_url = job_spec.output.image_url
        if self.artifact_cleaner is None:
            self.logger.debug(
                f"No output image cleaner configured, skipping deletion of {image_url}"
            )
            return

        self.logger.debug(f"Delete container image {image_url}")
        await self.artifact_cleaner.delete_image(
            job_spec.namespace, image_url, job_spec.output.credentials_ref
        )

    async def collect_diagnostics(self, run: RunStatus) -> RunDiagnostics:
        """Assemble status snapshot and container logs of a failed buildrun.

        Lookup and log errors only make the diagnostics less complete.
        """
        snapshot = ""
        if run.raw_status:
            snapshot = yaml.safe_dump(run.raw_status, default_flow_style=False, sort_keys=False)

        logs: list[str] = []
        try:
            unit = await self._find_unit(run, await self._find_sub_run_or_none(run))
        except LookupFailed as e:
            self.logger.warning(f"Cannot collect pod logs of buildrun {run.name}: {e}")
            unit = None

        if unit is not None:
            for container in unit.container_names:
                try:
                    async for line in self.client.stream_container_logs(
                        run.namespace, unit.name, container
                    ):
                        logs.append(f"[{container}] {line.rstrip()}")
                except ControlPlaneError as e:
                    self.logger.warning(
                        f"Cannot read logs of container {container} in pod {unit.name}: {e}"
                    )

        return RunDiagnostics(status_snapshot=snapshot, logs=logs)

    def _apply_options(self, run_request: RunRequest, options: RunOptions) -> RunRequest:
        if run_request.generate_identity == options.generate_identity:
            return run_request
        update: dict = {"generate_identity": options.generate_identity}
        if options.generate_identity:
            update["service_account"] = None
        return run_request.model_copy(update=update)

    async def _release(
        self, description: str, release: Callable[[], Awaitable[None]]
    ) -> None:
        try:
            await release()
        except Exception as e:
            failure = CleanupFailed(f"failed to delete {description}: {e}")
            self.logger.warning(str(failure))

    async def _submit_job(self, job_spec: JobSpec) -> JobStatus:
        try:
            await self.delete_job_and_wait(job_spec.namespace, job_spec.name)
        except (ControlPlaneError, DeletionTimeout) as e:
            raise SubmissionFailed(
                f"failed to remove existing build {job_spec.name}: {e}"
            ) from e

        self.logger.debug(f"Create build {job_spec.namespace}/{job_spec.name}")
        try:
            return await self.client.create_job(job_spec)
        except ControlPlaneError as e:
            raise SubmissionFailed(f"failed to create build {job_spec.name}: {e}") from e

    async def _await_registration(self, job_spec: JobSpec) -> JobStatus:
        timeout = self.settings.registration_timeout
        deadline = self._deadline(timeout)
        self.logger.debug(
            f"Polling every {self.settings.poll_interval} to wait for registration "
            f"of build {job_spec.name} within {timeout}"
        )

        while True:
            job = await self.client.get_job(job_spec.namespace, job_spec.name)
            if job is None:
                raise SubmissionFailed(
                    f"build {job_spec.name} disappeared while waiting for its registration"
                )
            if job.registered is True:
                return job
            if job.registered is False:
                raise RegistrationRejected(job_spec.name, job.reason, job.message)

            if not await self._wait_for_next_poll(deadline, self.settings.poll_interval):
                raise RegistrationTimeout(
                    f"build {job_spec.name} was not registered within {timeout}"
                )

    async def _submit_run(self, run_request: RunRequest) -> RunStatus:
        try:
            await self.delete_run_and_wait(run_request.namespace, run_request.name)
        except (ControlPlaneError, DeletionTimeout) as e:
            raise SubmissionFailed(
                f"failed to remove existing buildrun {run_request.name}: {e}"
            ) from e

        self.logger.debug(f"Create buildrun {run_request.namespace}/{run_request.name}")
        try:
            return await self.client.create_run(run_request)
        except ControlPlaneError as e:
            raise SubmissionFailed(
                f"failed to create buildrun {run_request.name}: {e}"
            ) from e

    def _run_timeout(self, run_request: RunRequest, job_spec: JobSpec) -> timedelta:
        if run_request.timeout is not None:
            self.logger.debug(f"Using BuildRun specified timeout of {run_request.timeout}")
            return run_request.timeout
        if job_spec.timeout is not None:
            self.logger.debug(f"Using Build specified timeout of {job_spec.timeout}")
            return job_spec.timeout
        self.logger.debug(
            f"Using default fallback timeout of {self.settings.default_run_timeout}"
        )
        return self.settings.default_run_timeout

    async def _await_completion(
        self, run_request: RunRequest, job_spec: JobSpec, record: RunRecord
    ) -> RunStatus:
        timeout = self._run_timeout(run_request, job_spec)
        deadline = self._deadline(timeout)
        self.logger.debug(
            f"Polling every {self.settings.poll_interval} to wait for completion "
            f"of buildrun {run_request.name} within {timeout}"
        )

        while True:
            run = await self.client.get_run(run_request.namespace, run_request.name)
            if run is None:
                record.condition = RunCondition.FAILED
                raise RunFailed(
                    run_request.name, "buildrun disappeared while waiting for completion"
                )
            if run.succeeded is True and run.completed is not None:
                return run
            if run.succeeded is False:
                record.condition = RunCondition.FAILED
                record.diagnostics = await self.collect_diagnostics(run)
                raise RunFailed(
                    run_request.name, run.message or run.reason, record.diagnostics
                )

            if not await self._wait_for_next_poll(deadline, self.settings.poll_interval):
                record.condition = RunCondition.TIMED_OUT
                raise RunTimeout(
                    f"buildrun {run_request.name} did not complete within {timeout}"
                )

    async def _inspect(self, run: RunStatus, record: RunRecord) -> None:
        try:
            sub_run = await self._find_sub_run(run)
        except LookupFailed as e:
            self.logger.warning(str(e))
            sub_run = None

        if sub_run is not None:
            record.subrun_created = sub_run.created
            record.subrun_started = sub_run.started
            record.subrun_completed = sub_run.completed

        try:
            unit = await self._find_unit(run, sub_run)
        except LookupFailed as e:
            self.logger.warning(str(e))
            return

        record.unit_created = unit.created
        record.unit_started = unit.started
        record.unit_finished = unit.last_container_finished

    async def _find_sub_run(self, run: RunStatus) -> SubRunStatus:
        """Look up the taskrun of a buildrun.

        The reference recorded on the buildrun is preferred, otherwise the
        taskrun is listed by the buildrun label and must be unique.

        Raises:
            LookupFailed: If no unique taskrun can be found
        """
        try:
            if run.sub_run_ref:
                sub_run = await self.client.get_sub_run(run.namespace, run.sub_run_ref)
                if sub_run is not None:
                    return sub_run

            candidates = await self.client.list_sub_runs(run.namespace, run.name)
        except ControlPlaneError as e:
            raise LookupFailed(f"failed to look up taskrun of buildrun {run.name}: {e}") from e

        if len(candidates) != 1:
            raise LookupFailed(
                f"expected exactly one taskrun for buildrun {run.name}, found {len(candidates)}"
            )
        return candidates[0]

    async def _find_sub_run_or_none(self, run: RunStatus) -> SubRunStatus | None:
        try:
            return await self._find_sub_run(run)
        except LookupFailed as e:
            self.logger.debug(str(e))
            return None

    async def _find_unit(self, run: RunStatus, sub_run: SubRunStatus | None) -> UnitStatus:
        """Look up the pod of a buildrun.

        The pod named by the taskrun is preferred, otherwise the pod is listed
        by the buildrun label and must be unique.

        Raises:
            LookupFailed: If no unique pod can be found
        """
        try:
            if sub_run is not None and sub_run.unit_name:
                unit = await self.client.get_execution_unit(run.namespace, sub_run.unit_name)
                if unit is None:
                    raise LookupFailed(
                        f"pod {sub_run.unit_name} of buildrun {run.name} does not exist"
                    )
                return unit

            candidates = await self.client.list_execution_units(run.namespace, run.name)
        except ControlPlaneError as e:
            raise LookupFailed(f"failed to look up pod of buildrun {run.name}: {e}") from e

        if len(candidates) != 1:
            raise LookupFailed(
                f"expected exactly one pod for buildrun {run.name}, found {len(candidates)}"
            )
        return candidates[0]

    async def _wait_until_absent(
        self, getter: Callable[[], Awaitable[object | None]], description: str
    ) -> None:
        timeout = self.settings.delete_timeout
        deadline = self._deadline(timeout)
        while await getter() is not None:
            if not await self._wait_for_next_poll(
                deadline, self.settings.delete_poll_interval
            ):
                raise DeletionTimeout(f"{description} still exists after {timeout}")

    @staticmethod
    def _deadline(timeout: timedelta) -> float:
        return asyncio.get_running_loop().time() + timeout.total_seconds()

    @staticmethod
    async def _wait_for_next_poll(deadline: float, interval: timedelta) -> bool:
        """Sleep until the next poll. Returns False once the deadline has passed."""
        remaining = deadline - asyncio.get_running_loop().time()
        if remaining <= 0:
            return False
        await asyncio.sleep(min(interval.total_seconds(), remaining))
        return True
