# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Environment-driven defaults.

Every value can be overridden with an environment variable, e.g.
``BUILDLOAD_LIFECYCLE_POLL_INTERVAL=2`` or ``BUILDLOAD_KUBERNETES_THREAD_POOL_SIZE=256``.
All durations are in seconds.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class _LifecycleSettings(BaseSettings):
    """Polling and timeout defaults of a lifecycle run."""

    model_config = SettingsConfigDict(env_prefix="BUILDLOAD_LIFECYCLE_", extra="ignore")

    POLL_INTERVAL: float = Field(
        default=5.0, gt=0, description="Interval between two status polls"
    )
    REGISTRATION_TIMEOUT: float = Field(
        default=300.0, gt=0, description="Maximum wait for a build to register"
    )
    RUN_TIMEOUT: float = Field(
        default=300.0,
        gt=0,
        description="Fallback wait for buildrun completion if neither the buildrun "
        "nor the build define a timeout",
    )
    DELETE_TIMEOUT: float = Field(
        default=10.0, gt=0, description="Maximum wait for a deleted resource to vanish"
    )
    DELETE_POLL_INTERVAL: float = Field(
        default=1.0, gt=0, description="Interval between two checks for a deleted resource"
    )


class _KubernetesSettings(BaseSettings):
    """Client side settings of the Kubernetes control plane client."""

    model_config = SettingsConfigDict(env_prefix="BUILDLOAD_KUBERNETES_", extra="ignore")

    THREAD_POOL_SIZE: int = Field(
        default=128,
        ge=1,
        description="Threads available for blocking Kubernetes API calls",
    )
    CONNECTION_POOL_SIZE: int = Field(
        default=500, ge=1, description="Maximum number of pooled HTTP connections"
    )


class Environment:
    """Namespace for all environment-driven settings groups."""

    LIFECYCLE = _LifecycleSettings()
    KUBERNETES = _KubernetesSettings()
