# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Rich console output of stage timings and result sets."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import timedelta
from typing import TYPE_CHECKING

from rich.table import Table

from buildload.exporters.base_exporter import to_millis
from buildload.orchestrator.aggregation import ordered_stages
from buildload.orchestrator.models import ResultSet, StageTiming

if TYPE_CHECKING:
    from rich.console import Console

INDEPENDENCE_NOTE = (
    "Minimum, mean, median, and maximum are computed independently per stage, "
    "so no single buildrun needs to have produced a row."
)


def format_duration(value: timedelta | None) -> str:
    """Seconds with whole milliseconds, rounded down like the file exports."""
    if value is None:
        return "-"
    return f"{to_millis(value) / 1000:.3f}s"


def result_set_table(result_set: ResultSet, title: str | None = None) -> Table:
    """One row per stage with minimum, mean, median, and maximum."""
    table = Table(
        title=title or f"{result_set.entity_type} results ({result_set.count})",
        caption=INDEPENDENCE_NOTE,
    )
    table.add_column("Stage", style="cyan")
    for column in ("Minimum", "Mean", "Median", "Maximum"):
        table.add_column(column, justify="right")

    for stage in result_set.stages:
        table.add_row(
            stage,
            format_duration(result_set.minimum.get(stage)),
            format_duration(result_set.mean.get(stage)),
            format_duration(result_set.median.get(stage)),
            format_duration(result_set.maximum.get(stage)),
        )
    return table


def series_table(result_sets: Sequence[ResultSet]) -> Table:
    """Median per stage, one row per level."""
    stages = ordered_stages(
        stage for result_set in result_sets for stage in result_set.stages
    )
    table = Table(title="Series medians", caption=INDEPENDENCE_NOTE)
    table.add_column("Parallel", justify="right", style="cyan")
    for stage in stages:
        table.add_column(stage, justify="right")

    for result_set in result_sets:
        table.add_row(
            str(result_set.count),
            *(format_duration(result_set.median.get(stage)) for stage in stages),
        )
    return table


def stage_timings_table(timings: Mapping[str, StageTiming]) -> Table:
    """Stage durations of single buildruns, one row per name."""
    stages = ordered_stages(
        stage for timing in timings.values() for stage in timing.stages()
    )
    table = Table(title="Buildrun stage timings")
    table.add_column("Name", style="cyan")
    for stage in stages:
        table.add_column(stage, justify="right")

    for name, timing in timings.items():
        table.add_row(name, *(format_duration(timing.get(stage)) for stage in stages))
    return table


class ConsoleExporter:
    """Prints stage timings and result sets as rich tables."""

    def __init__(self, console: Console) -> None:
        self.console = console

    def print_result_set(self, result_set: ResultSet, title: str | None = None) -> None:
        self.console.print(result_set_table(result_set, title))

    def print_series(self, result_sets: Sequence[ResultSet]) -> None:
        if result_sets:
            self.console.print(series_table(result_sets))

    def print_stage_timings(self, timings: Mapping[str, StageTiming]) -> None:
        if timings:
            self.console.print(stage_timings_table(timings))
