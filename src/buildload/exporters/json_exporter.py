# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""JSON exporters for stage timings and series results."""

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import orjson

from buildload.exporters.base_exporter import BaseExporter, to_millis
from buildload.orchestrator.aggregation import analyze_trends, ordered_stages
from buildload.orchestrator.models import ResultSet, StageTiming


def timing_to_millis(timing: StageTiming) -> dict[str, int]:
    return {stage: to_millis(value) for stage, value in timing.items()}


class ResultSetJsonExporter(BaseExporter):
    """Exports the result sets of a series to JSON.

    Output structure:
    {
        "entity_type": "BuildRun",
        "unit": "ms",
        "levels": [
            {"count": 5, "minimum": {...}, "maximum": {...}, "mean": {...}, "median": {...}},
            ...
        ],
        "trends": {"RegistrationTime": {"inflection_points": [...], "rate_of_change": [...]}}
    }
    """

    def __init__(
        self,
        output_dir: Path,
        result_sets: Sequence[ResultSet],
        file_name: str = "buildload_series.json",
    ) -> None:
        super().__init__(output_dir)
        self.result_sets = list(result_sets)
        self.file_name = file_name

    def get_file_name(self) -> str:
        return self.file_name

    def _generate_content(self) -> str:
        output: dict[str, Any] = {
            "entity_type": self.result_sets[0].entity_type if self.result_sets else None,
            "unit": "ms",
            "levels": [
                {
                    "count": result_set.count,
                    "minimum": timing_to_millis(result_set.minimum),
                    "maximum": timing_to_millis(result_set.maximum),
                    "mean": timing_to_millis(result_set.mean),
                    "median": timing_to_millis(result_set.median),
                }
                for result_set in self.result_sets
            ],
        }

        trends = {}
        stages = ordered_stages(
            stage for result_set in self.result_sets for stage in result_set.stages
        )
        for stage in stages:
            trend = analyze_trends(self.result_sets, stage)
            trends[stage] = {
                "inflection_points": trend.inflection_points,
                "rate_of_change": trend.rate_of_change,
            }
        output["trends"] = trends

        return orjson.dumps(output, option=orjson.OPT_INDENT_2).decode("utf-8")


class StageTimingJsonExporter(BaseExporter):
    """Exports the stage timings of single buildruns to JSON, keyed by name."""

    def __init__(
        self,
        output_dir: Path,
        timings: Mapping[str, StageTiming],
        file_name: str = "buildload_timings.json",
    ) -> None:
        super().__init__(output_dir)
        self.timings = dict(timings)
        self.file_name = file_name

    def get_file_name(self) -> str:
        return self.file_name

    def _generate_content(self) -> str:
        output = {
            "unit": "ms",
            "timings": {
                name: {
                    "durations": timing_to_millis(timing),
                    "clamped": list(timing.clamped),
                }
                for name, timing in self.timings.items()
            },
        }
        return orjson.dumps(output, option=orjson.OPT_INDENT_2).decode("utf-8")
