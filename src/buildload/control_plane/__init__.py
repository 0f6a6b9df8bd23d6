# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Control plane access: protocols, status models, and the Kubernetes client."""

from buildload.control_plane.models import (
    JobStatus,
    NodeCapacity,
    RunStatus,
    StepResources,
    StrategyDescriptor,
    SubRunStatus,
    UnitStatus,
)
from buildload.control_plane.protocols import ControlPlaneClient, OutputArtifactCleaner

__all__ = [
    "ControlPlaneClient",
    "JobStatus",
    "NodeCapacity",
    "OutputArtifactCleaner",
    "RunStatus",
    "StepResources",
    "StrategyDescriptor",
    "SubRunStatus",
    "UnitStatus",
]
