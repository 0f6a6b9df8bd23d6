# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Aggregation of buildrun stage timings."""

from buildload.orchestrator.aggregation.result_set import (
    aggregate,
    mean_of,
    median_of,
    ordered_stages,
)
from buildload.orchestrator.aggregation.series import SeriesTrend, analyze_trends

__all__ = [
    "SeriesTrend",
    "aggregate",
    "analyze_trends",
    "mean_of",
    "median_of",
    "ordered_stages",
]
