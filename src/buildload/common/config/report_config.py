# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from pathlib import Path
from typing import Annotated

from pydantic import Field

from buildload.common.config.base_config import BaseConfig
from buildload.common.config.cli_parameter import CLIParameter
from buildload.common.config.groups import Groups


class ReportConfig(BaseConfig):
    """Files the results are written to, in addition to the console tables."""

    _CLI_GROUP = Groups.REPORTS

    csv_output: Annotated[
        Path | None,
        Field(description="Filename of the CSV report."),
        CLIParameter(
            name=("--csv",),
            group=_CLI_GROUP,
        ),
    ] = None

    json_output: Annotated[
        Path | None,
        Field(description="Filename of the JSON report."),
        CLIParameter(
            name=("--json",),
            group=_CLI_GROUP,
        ),
    ] = None
