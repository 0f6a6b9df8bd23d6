# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Statistics over the stage timings of a batch of buildruns."""

from collections.abc import Sequence
from datetime import timedelta

from buildload.common.enums import Stage
from buildload.common.exceptions import AggregationPrecondition
from buildload.orchestrator.models import ResultSet, StageTiming

_CANONICAL_ORDER = {stage.value: position for position, stage in enumerate(Stage)}


def ordered_stages(names) -> list[str]:
    """Sort stage names canonically; unknown names follow alphabetically."""
    return sorted(
        set(names),
        key=lambda name: (_CANONICAL_ORDER.get(name, len(_CANONICAL_ORDER)), name),
    )


def median_of(values: Sequence[timedelta]) -> timedelta:
    """Middle value, or the average of the two middle values for even counts."""
    ordered = sorted(values)
    middle = len(ordered) // 2
    if len(ordered) % 2 == 1:
        return ordered[middle]
    return (ordered[middle - 1] + ordered[middle]) // 2


def mean_of(values: Sequence[timedelta]) -> timedelta:
    return sum(values, timedelta(0)) // len(values)


def aggregate(timings: Sequence[StageTiming], entity_type: str = "BuildRun") -> ResultSet:
    """Reduce stage timings to minimum, maximum, mean, and median per stage.

    Every stage is reduced independently over the timings that contain it, so
    a timing with a missing stage only reduces the sample size of that stage.
    The result does not depend on the order of the timings. Durations are
    kept at microsecond resolution, means and medians round down.

    Raises:
        AggregationPrecondition: If timings is empty
    """
    if not timings:
        raise AggregationPrecondition(
            f"cannot aggregate an empty list of {entity_type} stage timings"
        )

    samples: dict[str, list[timedelta]] = {}
    for timing in timings:
        for stage, value in timing.items():
            samples.setdefault(stage, []).append(value)

    minimum: dict[str, timedelta] = {}
    maximum: dict[str, timedelta] = {}
    mean: dict[str, timedelta] = {}
    median: dict[str, timedelta] = {}
    for stage in ordered_stages(samples):
        values = samples[stage]
        minimum[stage] = min(values)
        maximum[stage] = max(values)
        mean[stage] = mean_of(values)
        median[stage] = median_of(values)

    return ResultSet(
        entity_type=entity_type,
        count=len(timings),
        minimum=StageTiming(durations=minimum),
        maximum=StageTiming(durations=maximum),
        mean=StageTiming(durations=mean),
        median=StageTiming(durations=median),
    )
