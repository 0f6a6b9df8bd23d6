# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Command line interface of build-load."""

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter, validators

from buildload import __version__
from buildload.common.config import (
    BuildConfig,
    NamingConfig,
    ReportConfig,
    SeriesConfig,
)

app = App(
    name="build-load",
    help="Create synthetic load for Shipwright builds on Kubernetes.",
    version=__version__,
)

Verbose = Annotated[
    bool,
    Parameter(name=("--verbose", "-v"), help="Enable additional output messages."),
]


@app.command(name="buildruns")
def buildruns(
    build: Annotated[BuildConfig, Parameter(name="*")],
    *,
    naming: Annotated[NamingConfig, Parameter(name="*")] = NamingConfig(),  # noqa: B008
    reports: Annotated[ReportConfig, Parameter(name="*")] = ReportConfig(),  # noqa: B008
    parallel: Annotated[
        int,
        Parameter(
            name=("--parallel",),
            help="Number of parallel buildruns.",
            validator=validators.Number(gt=0),
        ),
    ] = 1,
    verbose: Verbose = False,
) -> None:
    """Create parallel buildruns once and report their stage timings."""
    from buildload.cli_runner import run_buildruns

    run_buildruns(build, naming, reports, parallel, verbose)


@app.command(name="buildruns-series")
def buildruns_series(
    build: Annotated[BuildConfig, Parameter(name="*")],
    *,
    naming: Annotated[NamingConfig, Parameter(name="*")] = NamingConfig(),  # noqa: B008
    series: Annotated[SeriesConfig, Parameter(name="*")] = SeriesConfig(),  # noqa: B008
    reports: Annotated[ReportConfig, Parameter(name="*")] = ReportConfig(),  # noqa: B008
    verbose: Verbose = False,
) -> None:
    """Create a series of parallel buildruns with increasing parallelism."""
    from buildload.cli_runner import run_buildruns_series

    run_buildruns_series(build, naming, series, reports, verbose)


@app.command(name="builds")
def builds(
    build: Annotated[BuildConfig, Parameter(name="*")],
    *,
    naming: Annotated[NamingConfig, Parameter(name="*")] = NamingConfig(),  # noqa: B008
    count: Annotated[
        int,
        Parameter(
            name=("--count",), help="Number of builds.", validator=validators.Number(gt=0)
        ),
    ] = 5,
    verbose: Verbose = False,
) -> None:
    """Create builds in parallel and wait for them to be registered."""
    from buildload.cli_runner import run_builds

    run_builds(build, naming, count, verbose)


@app.command(name="buildruns-testplan")
def buildruns_testplan(
    testplan: Annotated[
        Path, Parameter(name=("--testplan",), help="Test plan configuration file.")
    ],
    *,
    reports: Annotated[ReportConfig, Parameter(name="*")] = ReportConfig(),  # noqa: B008
    verbose: Verbose = False,
) -> None:
    """Create and execute the buildruns specified in a test plan."""
    from buildload.cli_runner import run_test_plan

    run_test_plan(testplan, reports, verbose)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
