# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from datetime import timedelta

import pytest

from buildload.orchestrator.models import ResultSet, StageTiming
from tests.unit.fakes import make_result_set


@pytest.fixture
def result_sets() -> list[ResultSet]:
    return [
        make_result_set(5, 1000, 10000),
        make_result_set(10, 1500, 12000),
        make_result_set(15, 1400, 20000),
    ]


@pytest.fixture
def timings() -> dict[str, StageTiming]:
    return {
        "kaniko-go": StageTiming(
            durations={
                "RunCompletionTime": timedelta(seconds=10, microseconds=999),
                "RegistrationTime": timedelta(milliseconds=250),
            }
        ),
        "buildpacks-node": StageTiming(
            durations={"RegistrationTime": timedelta(0)},
            clamped=["RegistrationTime"],
        ),
    }
