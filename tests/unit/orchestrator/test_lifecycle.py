# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Tests for the buildrun lifecycle against the in-memory control plane."""

import logging
from datetime import timedelta

import pytest

from buildload.common.exceptions import (
    ControlPlaneError,
    RegistrationRejected,
    RegistrationTimeout,
    RunFailed,
    RunTimeout,
    SubmissionFailed,
)
from buildload.orchestrator.builder import create_job_spec, create_run_request
from buildload.orchestrator.lifecycle import BuildRunLifecycle
from buildload.orchestrator.models import RunOptions
from tests.unit.fakes import EXPECTED_SECONDS, fast_settings

NAME = "test-kaniko-0"
NAMESPACE = "build-tests"


@pytest.fixture
def job_spec(build_config):
    return create_job_spec(NAME, NAMESPACE, build_config)


@pytest.fixture
def run_request(job_spec):
    return create_run_request(job_spec)


def expected_timing() -> dict[str, timedelta]:
    return {stage: timedelta(seconds=value) for stage, value in EXPECTED_SECONDS.items()}


class TestRunOnce:
    """Tests for BuildRunLifecycle.run_once."""

    @pytest.mark.asyncio
    async def test_successful_run_returns_all_stages(self, lifecycle, job_spec, run_request):
        timing = await lifecycle.run_once(job_spec, run_request)
        assert timing.durations == expected_timing()
        assert timing.clamped == []

    @pytest.mark.asyncio
    async def test_cleanup_releases_run_then_job_then_image(
        self, lifecycle, client, job_spec, run_request
    ):
        await lifecycle.run_once(job_spec, run_request)

        releases = [call for call in client.calls if call[0].startswith("delete")]
        assert releases == [
            ("delete_run", NAME),
            ("delete_job", NAME),
            ("delete_image", job_spec.output.image_url),
        ]
        assert client.jobs == {}
        assert client.runs == {}
        assert client.units == {}

    @pytest.mark.asyncio
    async def test_skip_cleanup_keeps_resources(
        self, lifecycle, client, cleaner, job_spec, run_request
    ):
        await lifecycle.run_once(job_spec, run_request, RunOptions(skip_cleanup=True))

        assert (NAMESPACE, NAME) in client.jobs
        assert (NAMESPACE, NAME) in client.runs
        assert cleaner.deleted == []

    @pytest.mark.asyncio
    async def test_same_name_runs_twice(self, lifecycle, job_spec, run_request):
        first = await lifecycle.run_once(job_spec, run_request)
        second = await lifecycle.run_once(job_spec, run_request)
        assert first == second

    @pytest.mark.asyncio
    async def test_leftover_resources_are_removed_before_submission(
        self, lifecycle, client, job_spec, run_request
    ):
        await lifecycle.run_once(job_spec, run_request, RunOptions(skip_cleanup=True))
        client.calls.clear()

        await lifecycle.run_once(job_spec, run_request)

        assert client.calls[:2] == [("delete_job", NAME), ("create_job", NAME)]
        assert client.calls[2:4] == [("delete_run", NAME), ("create_run", NAME)]

    @pytest.mark.asyncio
    async def test_rejected_registration(self, lifecycle, client, cleaner, job_spec, run_request):
        client.rejected.add(NAME)

        with pytest.raises(RegistrationRejected) as exc_info:
            await lifecycle.run_once(job_spec, run_request)

        assert exc_info.value.reason == "BuildStrategyNotFound"
        assert "strategy does not exist" in str(exc_info.value)
        assert client.jobs == {}
        assert not any(call[0] == "create_run" for call in client.calls)
        assert cleaner.deleted == []

    @pytest.mark.asyncio
    async def test_registration_timeout(self, lifecycle, client, job_spec, run_request):
        client.unregistered.add(NAME)

        with pytest.raises(RegistrationTimeout):
            await lifecycle.run_once(job_spec, run_request)

        assert client.jobs == {}

    @pytest.mark.asyncio
    async def test_create_job_failure_is_submission_failure(
        self, lifecycle, client, job_spec, run_request
    ):
        client.create_job_errors.add(NAME)

        with pytest.raises(SubmissionFailed) as exc_info:
            await lifecycle.run_once(job_spec, run_request)

        assert isinstance(exc_info.value.__cause__, ControlPlaneError)

    @pytest.mark.asyncio
    async def test_leftover_that_cannot_be_deleted_is_submission_failure(
        self, lifecycle, client, job_spec, run_request
    ):
        await lifecycle.run_once(job_spec, run_request, RunOptions(skip_cleanup=True))
        client.sticky.add(NAME)

        with pytest.raises(SubmissionFailed, match="failed to remove existing build"):
            await lifecycle.run_once(job_spec, run_request)

    @pytest.mark.asyncio
    async def test_failed_run_carries_diagnostics(
        self, lifecycle, client, cleaner, job_spec, run_request
    ):
        client.failing_runs.add(NAME)

        with pytest.raises(RunFailed) as exc_info:
            await lifecycle.run_once(job_spec, run_request)

        error = exc_info.value
        assert error.reason == "buildrun step failed"
        assert "Succeeded" in error.diagnostics.status_snapshot
        assert error.diagnostics.logs == [
            "[prepare] preparing source",
            "[step-build] building",
            "[step-build] error: build failed",
        ]
        assert "[step-build] error: build failed" in str(error)
        # Cleanup still happens on failure
        assert client.runs == {}
        assert client.jobs == {}
        assert cleaner.deleted == [job_spec.output.image_url]

    @pytest.mark.asyncio
    async def test_run_timeout_uses_build_timeout(self, client, cleaner, build_config):
        build_config.timeout = 0.02
        job_spec = create_job_spec(NAME, NAMESPACE, build_config)
        lifecycle = BuildRunLifecycle(
            client,
            settings=fast_settings(default_run_timeout=timedelta(hours=1)),
            artifact_cleaner=cleaner,
        )
        client.pending_runs.add(NAME)

        with pytest.raises(RunTimeout, match="did not complete within"):
            await lifecycle.run_once(job_spec, create_run_request(job_spec))

        assert client.runs == {}

    @pytest.mark.asyncio
    async def test_run_timeout_falls_back_to_default(self, lifecycle, client, job_spec, run_request):
        client.pending_runs.add(NAME)
        with pytest.raises(RunTimeout):
            await lifecycle.run_once(job_spec, run_request)

    @pytest.mark.asyncio
    async def test_missing_sub_run_degrades_timing(
        self, lifecycle, client, job_spec, run_request, caplog
    ):
        client.without_sub_run.add(NAME)

        with caplog.at_level(logging.WARNING):
            timing = await lifecycle.run_once(job_spec, run_request)

        assert "SubRunCompletionTime" not in timing
        assert "RunControlTime" not in timing
        # The pod is still found by its label
        assert "UnitCompletionTime" in timing
        assert "expected exactly one taskrun" in caplog.text

    @pytest.mark.asyncio
    async def test_missing_pod_degrades_timing(self, lifecycle, client, job_spec, run_request):
        client.without_unit.add(NAME)

        timing = await lifecycle.run_once(job_spec, run_request)

        assert "SubRunCompletionTime" in timing
        assert "UnitCompletionTime" not in timing
        assert "UnitControlTime" not in timing

    @pytest.mark.asyncio
    async def test_cleanup_failure_does_not_fail_the_run(
        self, lifecycle, client, cleaner, job_spec, run_request, caplog
    ):
        cleaner.error = ControlPlaneError("registry unavailable")

        with caplog.at_level(logging.WARNING):
            timing = await lifecycle.run_once(job_spec, run_request)

        assert timing.durations == expected_timing()
        assert "failed to delete output image" in caplog.text

    @pytest.mark.asyncio
    async def test_cleanup_failure_does_not_replace_primary_error(
        self, lifecycle, client, job_spec, run_request
    ):
        client.failing_runs.add(NAME)
        client.delete_errors.add(NAME)

        with pytest.raises(RunFailed):
            await lifecycle.run_once(job_spec, run_request)

    @pytest.mark.asyncio
    async def test_without_artifact_cleaner(self, client, job_spec, run_request):
        lifecycle = BuildRunLifecycle(client, settings=fast_settings())
        timing = await lifecycle.run_once(job_spec, run_request)
        assert len(timing) == len(EXPECTED_SECONDS)

    @pytest.mark.asyncio
    async def test_options_override_service_account_generation(
        self, client, job_spec, build_config
    ):
        lifecycle = BuildRunLifecycle(client, settings=fast_settings())
        request = create_run_request(job_spec, generate_identity=True)

        await lifecycle.run_once(
            job_spec, request, RunOptions(generate_identity=False, skip_cleanup=True)
        )

        assert client.created_requests[0].generate_identity is False


class TestRegisterOnce:
    """Tests for BuildRunLifecycle.register_once."""

    @pytest.mark.asyncio
    async def test_only_registration_time(self, lifecycle, client, job_spec):
        timing = await lifecycle.register_once(job_spec)

        assert timing.durations == {"RegistrationTime": timedelta(seconds=1)}
        assert not any(call[0] == "create_run" for call in client.calls)
        assert client.jobs == {}

    @pytest.mark.asyncio
    async def test_rejected(self, lifecycle, client, job_spec):
        client.rejected.add(NAME)
        with pytest.raises(RegistrationRejected):
            await lifecycle.register_once(job_spec)
