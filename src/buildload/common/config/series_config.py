# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from typing import Annotated

from pydantic import Field, model_validator

from buildload.common.config.base_config import BaseConfig
from buildload.common.config.cli_parameter import CLIParameter
from buildload.common.config.groups import Groups


class SeriesConfig(BaseConfig):
    """Range of parallelism levels to sweep."""

    _CLI_GROUP = Groups.SERIES

    start: Annotated[
        int,
        Field(gt=0, description="Lowest number of parallel builds to test."),
        CLIParameter(
            name=("--build-tests-min",),
            group=_CLI_GROUP,
        ),
    ] = 5

    end: Annotated[
        int,
        Field(gt=0, description="Highest number of parallel builds to test."),
        CLIParameter(
            name=("--build-tests-max",),
            group=_CLI_GROUP,
        ),
    ] = 100

    increment: Annotated[
        int,
        Field(gt=0, description="Increment for the number of parallel builds per level."),
        CLIParameter(
            name=("--build-tests-increment",),
            group=_CLI_GROUP,
        ),
    ] = 5

    cooldown_seconds: Annotated[
        float,
        Field(ge=0, description="Pause between two levels in seconds."),
        CLIParameter(
            name=("--cooldown",),
            group=_CLI_GROUP,
        ),
    ] = 0.0

    @model_validator(mode="after")
    def _validate_range(self) -> "SeriesConfig":
        if self.start > self.end:
            raise ValueError(
                f"Invalid series range: --build-tests-min ({self.start}) must not be "
                f"greater than --build-tests-max ({self.end})."
            )
        return self

    @property
    def levels(self) -> list[int]:
        return list(range(self.start, self.end + 1, self.increment))
