# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""build-load - Build Platform Load Testing Tool."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("build-load")
except PackageNotFoundError:
    __version__ = "unknown"
