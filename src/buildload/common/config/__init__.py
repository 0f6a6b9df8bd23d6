# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from buildload.common.config.base_config import BaseConfig
from buildload.common.config.build_config import BuildConfig
from buildload.common.config.cli_parameter import CLIParameter
from buildload.common.config.groups import Groups
from buildload.common.config.naming_config import NamingConfig
from buildload.common.config.report_config import ReportConfig
from buildload.common.config.series_config import SeriesConfig
from buildload.common.config.test_plan import (
    SecretReference,
    TestPlan,
    TestPlanBuildSpec,
    TestPlanOutput,
    TestPlanSource,
    TestPlanStep,
    TestPlanStrategy,
)

__all__ = [
    "BaseConfig",
    "BuildConfig",
    "CLIParameter",
    "Groups",
    "NamingConfig",
    "ReportConfig",
    "SecretReference",
    "SeriesConfig",
    "TestPlan",
    "TestPlanBuildSpec",
    "TestPlanOutput",
    "TestPlanSource",
    "TestPlanStep",
    "TestPlanStrategy",
]
