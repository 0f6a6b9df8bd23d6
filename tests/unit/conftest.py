# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import pytest

from buildload.common.config import BuildConfig, NamingConfig
from buildload.orchestrator.lifecycle import BuildRunLifecycle
from buildload.orchestrator.orchestrator import BuildRunOrchestrator
from tests.unit.fakes import FakeArtifactCleaner, FakeControlPlaneClient, fast_settings


@pytest.fixture
def client() -> FakeControlPlaneClient:
    return FakeControlPlaneClient()


@pytest.fixture
def cleaner(client: FakeControlPlaneClient) -> FakeArtifactCleaner:
    return FakeArtifactCleaner(calls=client.calls)


@pytest.fixture
def lifecycle(client, cleaner) -> BuildRunLifecycle:
    return BuildRunLifecycle(client, settings=fast_settings(), artifact_cleaner=cleaner)


@pytest.fixture
def naming() -> NamingConfig:
    return NamingConfig(namespace="build-tests", prefix="test")


@pytest.fixture
def build_config() -> BuildConfig:
    return BuildConfig(
        cluster_build_strategy="kaniko",
        source_url="https://github.com/shipwright-io/sample-go",
        source_context_dir="docker-build",
        output_image_url="registry.example.com/org",
    )


@pytest.fixture
def orchestrator(lifecycle, naming) -> BuildRunOrchestrator:
    return BuildRunOrchestrator(lifecycle, naming)
