# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Trend analysis across the levels of a parallelism series."""

from collections.abc import Sequence
from typing import Literal, NamedTuple

from buildload.common.enums import Stage
from buildload.orchestrator.models import ResultSet, stage_key

Statistic = Literal["minimum", "maximum", "mean", "median"]


class SeriesTrend(NamedTuple):
    """How one stage statistic changes with the parallelism level.

    Args:
        stage: The analyzed stage
        levels: Parallelism levels that have a value for the stage
        values_ms: Statistic of the stage per level, in milliseconds
        rate_of_change: Change between consecutive levels, in milliseconds
        inflection_points: Levels where the rate of change flips sign or changes by more than 50%
    """

    stage: str
    levels: list[int]
    values_ms: list[float]
    rate_of_change: list[float]
    inflection_points: list[int]


def analyze_trends(
    result_sets: Sequence[ResultSet],
    stage: Stage | str,
    statistic: Statistic = "median",
) -> SeriesTrend:
    """Analyze how a stage statistic changes across the levels of a series.

    The level of a result set is its count. Levels without a value for the
    stage are skipped.

    Example:
        Medians of 100ms, 180ms, 270ms, 285ms at levels 5, 10, 15, 20 give a
        rate of change of [80.0, 90.0, 15.0] and an inflection point at 20.
    """
    name = stage_key(stage)
    levels: list[int] = []
    values: list[float] = []
    for result_set in result_sets:
        value = getattr(result_set, statistic).get(name)
        if value is None:
            continue
        levels.append(result_set.count)
        values.append(value.total_seconds() * 1000)

    rate_of_change = [values[i] - values[i - 1] for i in range(1, len(values))]

    inflection_points = []
    for i in range(1, len(rate_of_change)):
        prev_rate = rate_of_change[i - 1]
        curr_rate = rate_of_change[i]

        has_sign_flip = prev_rate * curr_rate < 0
        has_magnitude_change = False
        if prev_rate != 0:
            has_magnitude_change = abs(curr_rate - prev_rate) > 0.5 * abs(prev_rate)

        if has_sign_flip or has_magnitude_change:
            # The new rate starts at the next level
            inflection_points.append(levels[i + 1])

    return SeriesTrend(
        stage=name,
        levels=levels,
        values_ms=values,
        rate_of_change=rate_of_change,
        inflection_points=inflection_points,
    )
