# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Decomposes the timestamps of a buildrun into named stage durations."""

import logging
from datetime import timedelta

from buildload.common.enums import Stage
from buildload.orchestrator.models import RunRecord, StageTiming

_logger = logging.getLogger(__name__)

# Stage -> (start field, end field) of RunRecord, in report order
STAGE_BOUNDARIES: dict[Stage, tuple[str, str]] = {
    Stage.REGISTRATION_TIME: ("job_created", "job_registered"),
    Stage.RUN_COMPLETION_TIME: ("run_created", "run_completed"),
    Stage.RUN_CONTROL_TIME: ("run_created", "subrun_created"),
    Stage.SUB_RUN_COMPLETION_TIME: ("subrun_started", "subrun_completed"),
    Stage.SUB_RUN_CONTROL_TIME: ("subrun_started", "unit_started"),
    Stage.UNIT_COMPLETION_TIME: ("unit_started", "unit_finished"),
    Stage.UNIT_CONTROL_TIME: ("run_started", "unit_started"),
}


def decompose(record: RunRecord, logger: logging.Logger | None = None) -> StageTiming:
    """Compute the stage durations of a run record.

    A stage is left out when one of its timestamps is unknown. A negative
    duration, caused by clock skew between the components that set the
    timestamps, is reported as zero and logged as a warning.
    """
    logger = logger or _logger
    durations: dict[str, timedelta] = {}
    clamped: list[str] = []

    for stage, (start_field, end_field) in STAGE_BOUNDARIES.items():
        start = getattr(record, start_field)
        end = getattr(record, end_field)
        if start is None or end is None:
            continue

        value = end - start
        if value < timedelta(0):
            logger.warning(
                f"Negative duration for {stage} ({start_field}={start.isoformat()}, "
                f"{end_field}={end.isoformat()}), using zero"
            )
            clamped.append(stage.value)
            value = timedelta(0)
        durations[stage.value] = value

    return StageTiming(durations=durations, clamped=clamped)
