# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from enum import Enum


class CaseInsensitiveStrEnum(str, Enum):
    """String enum that also matches its values case-insensitively."""

    def __str__(self) -> str:
        return self.value

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return None


class BuildKindType(CaseInsensitiveStrEnum):
    """How the build strategy turns source into an image."""

    KANIKO = "kaniko"
    """Dockerfile driven strategies (kaniko, buildkit, buildah)."""

    BUILDPACKS = "buildpacks"
    """Cloud Native Buildpacks strategies, no Dockerfile."""


class StrategyKind(CaseInsensitiveStrEnum):
    CLUSTER_BUILD_STRATEGY = "ClusterBuildStrategy"
    BUILD_STRATEGY = "BuildStrategy"


class RunCondition(CaseInsensitiveStrEnum):
    """Terminal condition of a lifecycle run."""

    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


class Stage(CaseInsensitiveStrEnum):
    """Named stages of a buildrun, in canonical report order."""

    REGISTRATION_TIME = "RegistrationTime"
    RUN_COMPLETION_TIME = "RunCompletionTime"
    RUN_CONTROL_TIME = "RunControlTime"
    SUB_RUN_COMPLETION_TIME = "SubRunCompletionTime"
    SUB_RUN_CONTROL_TIME = "SubRunControlTime"
    UNIT_COMPLETION_TIME = "UnitCompletionTime"
    UNIT_CONTROL_TIME = "UnitControlTime"
