# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from typing import Annotated

from pydantic import Field, field_validator

from buildload.common.config.base_config import BaseConfig
from buildload.common.config.cli_parameter import CLIParameter
from buildload.common.config.groups import Groups
from buildload.common.constants import DEFAULT_NAMESPACE, DEFAULT_PREFIX


class NamingConfig(BaseConfig):
    """Where test resources are created and how they are named."""

    _CLI_GROUP = Groups.NAMING

    namespace: Annotated[
        str,
        Field(description="Namespace to test in."),
        CLIParameter(
            name=("--namespace",),
            group=_CLI_GROUP,
        ),
    ] = DEFAULT_NAMESPACE

    prefix: Annotated[
        str,
        Field(
            description="Prefix for the names of the created builds and buildruns. "
            "Resource names are derived as <prefix>-<strategy>-<index>.",
        ),
        CLIParameter(
            name=("--prefix",),
            group=_CLI_GROUP,
        ),
    ] = DEFAULT_PREFIX

    @field_validator("namespace", "prefix")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Value must not be empty.")
        return v.strip()
