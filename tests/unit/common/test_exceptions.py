# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Tests for error messages of the exception hierarchy."""

import pytest

from buildload.common.exceptions import (
    AggregationPrecondition,
    BuildLoadError,
    InvalidOutputImageURL,
    ParallelRunError,
    RegistrationRejected,
    RunFailed,
    SeriesAborted,
    StrategyNotFound,
)
from buildload.orchestrator.models import RunDiagnostics


class TestMessages:
    """Tests for the rendered messages."""

    def test_registration_rejected(self):
        error = RegistrationRejected("b", "BuildStrategyNotFound", "strategy does not exist")
        assert str(error) == (
            "build b failed to register. Reason=BuildStrategyNotFound. "
            "Message=strategy does not exist"
        )

    def test_run_failed_includes_diagnostics(self):
        error = RunFailed(
            "r",
            "step failed",
            RunDiagnostics(status_snapshot="reason: Failed", logs=["[step-build] boom"]),
        )
        assert str(error) == (
            "buildrun r failed: step failed\n\n"
            "BuildRun Status\nreason: Failed\n\n"
            "Pod container logs\n[step-build] boom"
        )

    def test_run_failed_without_reason(self):
        assert str(RunFailed("r", None, RunDiagnostics())) == "buildrun r failed: unknown reason"

    def test_strategy_not_found(self):
        assert str(StrategyNotFound("kaniko", [])) == "failed to find ClusterBuildStrategy kaniko"
        assert str(StrategyNotFound("kaniko", ["buildah", "buildpacks-v3"])).endswith(
            "available strategies are: buildah, buildpacks-v3"
        )

    def test_parallel_run_error_lists_every_error(self):
        error = ParallelRunError("failed", [ValueError("a"), ValueError("b")])
        assert str(error) == "failed (2 errors):\n- a\n- b"

    def test_series_aborted(self):
        cause = ParallelRunError("failed to execute buildruns", [ValueError("a")])
        error = SeriesAborted(15, [], cause)
        assert error.level == 15
        assert str(error) == (
            "series aborted at 15 parallel buildruns after 0 completed level(s): "
            "failed to execute buildruns: a"
        )


class TestHierarchy:
    """Tests for the base classes."""

    @pytest.mark.parametrize(
        "error",
        [
            AggregationPrecondition("empty"),
            InvalidOutputImageURL("x"),
        ],
    )
    def test_value_errors(self, error):
        assert isinstance(error, BuildLoadError)
        assert isinstance(error, ValueError)
