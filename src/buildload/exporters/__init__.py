# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Exporters for stage timings and result sets."""

from buildload.exporters.base_exporter import BaseExporter, to_millis
from buildload.exporters.console_exporter import (
    ConsoleExporter,
    result_set_table,
    series_table,
    stage_timings_table,
)
from buildload.exporters.csv_exporter import ResultSetCsvExporter, StageTimingCsvExporter
from buildload.exporters.json_exporter import (
    ResultSetJsonExporter,
    StageTimingJsonExporter,
)

__all__ = [
    "BaseExporter",
    "ConsoleExporter",
    "ResultSetCsvExporter",
    "ResultSetJsonExporter",
    "StageTimingCsvExporter",
    "StageTimingJsonExporter",
    "result_set_table",
    "series_table",
    "stage_timings_table",
    "to_millis",
]
