# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""CSV exporters for stage timings and series results."""

import csv
import io
from collections.abc import Mapping, Sequence
from pathlib import Path

from buildload.exporters.base_exporter import BaseExporter, to_millis
from buildload.orchestrator.aggregation import analyze_trends, ordered_stages
from buildload.orchestrator.models import ResultSet, StageTiming


class ResultSetCsvExporter(BaseExporter):
    """Exports the result sets of a series to CSV.

    Creates a CSV with two sections:
    - Median per stage in milliseconds, one row per level
    - Trends of the stage medians across levels
    """

    def __init__(
        self,
        output_dir: Path,
        result_sets: Sequence[ResultSet],
        file_name: str = "buildload_series.csv",
    ) -> None:
        super().__init__(output_dir)
        self.result_sets = list(result_sets)
        self.file_name = file_name

    def get_file_name(self) -> str:
        return self.file_name

    def _generate_content(self) -> str:
        buf = io.StringIO()
        writer = csv.writer(buf)

        stages = ordered_stages(
            stage for result_set in self.result_sets for stage in result_set.stages
        )

        writer.writerow(["number of results", *stages])
        for result_set in self.result_sets:
            writer.writerow(
                [result_set.count]
                + [_format_millis(result_set.median.get(stage)) for stage in stages]
            )

        if len(self.result_sets) > 1:
            writer.writerow([])  # Blank line
            writer.writerow(["Trends"])
            for stage in stages:
                trend = analyze_trends(self.result_sets, stage)
                writer.writerow([f"Stage: {stage}"])
                writer.writerow(["Inflection Points"])
                if trend.inflection_points:
                    writer.writerow(["number of results"])
                    for point in trend.inflection_points:
                        writer.writerow([point])
                else:
                    writer.writerow(["None"])

                writer.writerow(["Rate of Change (ms)"])
                if trend.rate_of_change:
                    writer.writerow(["From", "To", "Rate"])
                    for i, rate in enumerate(trend.rate_of_change):
                        writer.writerow(
                            [trend.levels[i], trend.levels[i + 1], f"{rate:.2f}"]
                        )
                else:
                    writer.writerow(["None"])

        return buf.getvalue()


class StageTimingCsvExporter(BaseExporter):
    """Exports the stage timings of single buildruns to CSV, one row per buildrun."""

    def __init__(
        self,
        output_dir: Path,
        timings: Mapping[str, StageTiming],
        file_name: str = "buildload_timings.csv",
    ) -> None:
        super().__init__(output_dir)
        self.timings = dict(timings)
        self.file_name = file_name

    def get_file_name(self) -> str:
        return self.file_name

    def _generate_content(self) -> str:
        buf = io.StringIO()
        writer = csv.writer(buf)

        stages = ordered_stages(
            stage for timing in self.timings.values() for stage in timing.stages()
        )
        writer.writerow(["name", *stages])
        for name, timing in self.timings.items():
            writer.writerow([name] + [_format_millis(timing.get(stage)) for stage in stages])

        return buf.getvalue()


def _format_millis(value) -> str:
    millis = to_millis(value)
    return "" if millis is None else str(millis)
