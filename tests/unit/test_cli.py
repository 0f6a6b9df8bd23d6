# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Tests for the command line interface."""

from pathlib import Path
from unittest.mock import patch

import pytest
from cyclopts import CycloptsError

from buildload.cli import app
from buildload.common.config import BuildConfig, NamingConfig, ReportConfig, SeriesConfig

BUILD_ARGS = [
    "--cluster-build-strategy",
    "kaniko",
    "--source-url",
    "https://github.com/shipwright-io/sample-go",
    "--output-image-url",
    "docker.io/org",
]


def invoke(tokens: list[str]) -> None:
    command, bound, _ = app.parse_args(tokens, print_error=False, exit_on_error=False)
    command(*bound.args, **bound.kwargs)


class TestBuildrunsCommand:
    """Tests for the buildruns command."""

    def test_defaults(self):
        with patch("buildload.cli_runner.run_buildruns") as run:
            invoke(["buildruns", *BUILD_ARGS])

        build, naming, reports, parallel, verbose = run.call_args.args
        assert isinstance(build, BuildConfig)
        assert build.cluster_build_strategy == "kaniko"
        assert build.output_image_url == "docker.io/org"
        assert naming == NamingConfig()
        assert reports == ReportConfig()
        assert parallel == 1
        assert verbose is False

    def test_all_options(self):
        with patch("buildload.cli_runner.run_buildruns") as run:
            invoke(
                [
                    "buildruns",
                    *BUILD_ARGS,
                    "--namespace",
                    "build-tests",
                    "--prefix",
                    "load",
                    "--parallel",
                    "10",
                    "--source-context",
                    "docker-build",
                    "--timeout",
                    "120",
                    "--skip-delete",
                    "--csv",
                    "out/timings.csv",
                    "--verbose",
                ]
            )

        build, naming, reports, parallel, verbose = run.call_args.args
        assert build.source_context_dir == "docker-build"
        assert build.timeout == 120
        assert build.skip_delete is True
        assert naming == NamingConfig(namespace="build-tests", prefix="load")
        assert reports.csv_output == Path("out/timings.csv")
        assert parallel == 10
        assert verbose is True

    @pytest.mark.parametrize("parallel", ["0", "-1"])
    def test_parallel_must_be_positive(self, parallel):
        with patch("buildload.cli_runner.run_buildruns") as run:
            with pytest.raises(CycloptsError):
                invoke(["buildruns", *BUILD_ARGS, "--parallel", parallel])
        run.assert_not_called()


class TestOtherCommands:
    """Tests for buildruns-series, builds, and buildruns-testplan."""

    def test_series(self):
        with patch("buildload.cli_runner.run_buildruns_series") as run:
            invoke(
                [
                    "buildruns-series",
                    *BUILD_ARGS,
                    "--build-tests-min",
                    "2",
                    "--build-tests-max",
                    "8",
                    "--build-tests-increment",
                    "2",
                    "--json",
                    "series.json",
                ]
            )

        build, naming, series, reports, verbose = run.call_args.args
        assert series == SeriesConfig(start=2, end=8, increment=2)
        assert reports.json_output == Path("series.json")

    def test_builds(self):
        with patch("buildload.cli_runner.run_builds") as run:
            invoke(["builds", *BUILD_ARGS, "--count", "3", "-v"])

        build, naming, count, verbose = run.call_args.args
        assert count == 3
        assert verbose is True

    def test_testplan(self):
        with patch("buildload.cli_runner.run_test_plan") as run:
            invoke(["buildruns-testplan", "--testplan", "plan.yaml"])

        testplan, reports, verbose = run.call_args.args
        assert testplan == Path("plan.yaml")
        assert reports == ReportConfig()

    def test_testplan_requires_file(self):
        with pytest.raises(CycloptsError):
            invoke(["buildruns-testplan"])
