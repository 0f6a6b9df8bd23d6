# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Kubernetes duration strings such as 300s, 10m, or 1h30m."""

import re
from datetime import timedelta

_GO_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ns|us|µs|ms|s|m|h)")
_GO_DURATION_UNITS = {
    "ns": timedelta(microseconds=0.001),
    "us": timedelta(microseconds=1),
    "µs": timedelta(microseconds=1),
    "ms": timedelta(milliseconds=1),
    "s": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "h": timedelta(hours=1),
}


def format_duration(value: timedelta) -> str:
    """Duration in the format Kubernetes expects, for example 300s."""
    return f"{value.total_seconds():g}s"


def parse_duration(value: str | None) -> timedelta | None:
    """Parse a duration like 5m0s or 1h30m."""
    if not value:
        return None
    parts = _GO_DURATION_PART.findall(value)
    if not parts or "".join(n + u for n, u in parts) != value:
        raise ValueError(f"invalid duration {value!r}")
    return sum(
        (_GO_DURATION_UNITS[unit] * float(number) for number, unit in parts),
        timedelta(0),
    )
