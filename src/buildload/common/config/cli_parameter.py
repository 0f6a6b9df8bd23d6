# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from typing import Any

from cyclopts import Group, Parameter


def CLIParameter(  # noqa: N802
    name: tuple[str, ...],
    group: Group | str | None = None,
    **kwargs: Any,
) -> Parameter:
    """Build the cyclopts Parameter that exposes a config field on the command line.

    Args:
        name: Flag names, e.g. ("--source-url",)
        group: Help panel the flag is listed under
        **kwargs: Passed through to cyclopts.Parameter
    """
    if group is not None:
        kwargs["group"] = group
    return Parameter(name=name, **kwargs)
