# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Strategies that decide which parallelism level a series runs next."""

from abc import ABC, abstractmethod

from buildload.common.config import SeriesConfig
from buildload.orchestrator.models import ResultSet

__all__ = [
    "ExecutionStrategy",
    "ParallelismSeriesStrategy",
]


class ExecutionStrategy(ABC):
    """Base class for series execution strategies.

    Strategies decide:
    1. Which parallelism level to run next (based on results so far)
    2. Whether to continue or stop
    3. How to label levels in logs and reports
    4. Cooldown duration between levels
    """

    @abstractmethod
    def should_continue(self, results: list[ResultSet]) -> bool:
        """Decide whether to run another level.

        Args:
            results: Result sets of the levels executed so far

        Returns:
            True if another level should run, False to stop
        """

    @abstractmethod
    def get_next_level(self, results: list[ResultSet]) -> int:
        """Return the number of parallel buildruns of the next level."""

    @abstractmethod
    def get_run_label(self, run_index: int) -> str:
        """Generate label for the level at the given zero-based index."""

    @abstractmethod
    def get_cooldown_seconds(self) -> float:
        """Return cooldown duration between levels."""


class ParallelismSeriesStrategy(ExecutionStrategy):
    """Sweep the number of parallel buildruns from start to end.

    Levels are start, start + increment, ... up to and including end when the
    range is a multiple of increment.

    Attributes:
        start: Lowest number of parallel buildruns
        end: Highest number of parallel buildruns
        increment: Step between two levels
        cooldown_seconds: Pause between two levels
    """

    def __init__(
        self,
        start: int,
        end: int,
        increment: int,
        cooldown_seconds: float = 0.0,
    ) -> None:
        """Initialize the series strategy.

        Raises:
            ValueError: If a bound or the increment is not positive, start is
                greater than end, or cooldown_seconds is negative
        """
        if start <= 0 or end <= 0 or increment <= 0:
            raise ValueError(
                f"Invalid series range: start ({start}), end ({end}), and "
                f"increment ({increment}) must all be greater than 0."
            )
        if start > end:
            raise ValueError(
                f"Invalid series range: start ({start}) must not be greater than end ({end})."
            )
        if cooldown_seconds < 0:
            raise ValueError(
                f"Invalid cooldown duration: {cooldown_seconds} seconds. "
                f"Cooldown must be non-negative (0 or greater)."
            )

        self.start = start
        self.end = end
        self.increment = increment
        self.cooldown_seconds = cooldown_seconds
        self.levels = list(range(start, end + 1, increment))

    @classmethod
    def from_config(cls, config: SeriesConfig) -> "ParallelismSeriesStrategy":
        return cls(
            start=config.start,
            end=config.end,
            increment=config.increment,
            cooldown_seconds=config.cooldown_seconds,
        )

    def should_continue(self, results: list[ResultSet]) -> bool:
        """Continue until every level has a result set."""
        return len(results) < len(self.levels)

    def get_next_level(self, results: list[ResultSet]) -> int:
        return self.levels[len(results)]

    def get_run_label(self, run_index: int) -> str:
        """Generate label: parallel_5, parallel_10, etc."""
        return f"parallel_{self.levels[run_index]}"

    def get_cooldown_seconds(self) -> float:
        return self.cooldown_seconds
