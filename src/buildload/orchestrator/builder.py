# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Builds JobSpecs and RunRequests from configuration."""

from datetime import timedelta

from buildload.common.config import BuildConfig, NamingConfig, TestPlan, TestPlanStep
from buildload.common.constants import VERIFY_REPOSITORY_ANNOTATION
from buildload.common.enums import BuildKindType
from buildload.common.exceptions import InvalidOutputImageURL
from buildload.orchestrator.models import (
    BuildKind,
    BuildpacksBuild,
    JobSpec,
    KanikoBuild,
    OutputSpec,
    RunRequest,
    SourceSpec,
)

TEST_PLAN_STEP_PREFIX = "test-plan-step"


def create_name(naming: NamingConfig, strategy: str, index: int) -> str:
    """Name of the build and buildrun of worker index."""
    return f"{naming.prefix}-{strategy}-{index}"


def resolve_output_image_url(output_image_url: str, name: str) -> str:
    """Derive the image URL a buildrun pushes to.

    server.com/org becomes server.com/org/<name>:latest, server.com/org/image
    becomes server.com/org/image:latest, and a tagged image is used as is.

    Raises:
        InvalidOutputImageURL: If the URL has none of these shapes
    """
    base = output_image_url.strip("/")
    parts = base.split("/")
    if any(not part for part in parts):
        raise InvalidOutputImageURL(output_image_url)

    if len(parts) == 2:
        return f"{base}/{name}:latest"

    if len(parts) == 3:
        if ":" in parts[2]:
            return base
        return f"{base}:latest"

    raise InvalidOutputImageURL(output_image_url)


def build_kind_from_config(build_config: BuildConfig) -> BuildKind:
    if build_config.resolve_build_kind() == BuildKindType.KANIKO:
        return KanikoBuild(dockerfile=build_config.dockerfile)
    return BuildpacksBuild()


def _timeout(seconds: float | None) -> timedelta | None:
    return timedelta(seconds=seconds) if seconds is not None else None


def create_job_spec(name: str, namespace: str, build_config: BuildConfig) -> JobSpec:
    """Create the JobSpec a single worker submits."""
    annotations = {}
    if build_config.skip_verify_repository:
        annotations[VERIFY_REPOSITORY_ANNOTATION] = "false"

    return JobSpec(
        name=name,
        namespace=namespace,
        strategy=build_config.cluster_build_strategy,
        strategy_kind=build_config.strategy_kind,
        build_kind=build_kind_from_config(build_config),
        source=SourceSpec(
            url=build_config.source_url,
            revision=build_config.source_revision,
            context_dir=build_config.source_context_dir,
            credentials_ref=build_config.source_secret_ref,
        ),
        output=OutputSpec(
            image_url=resolve_output_image_url(build_config.output_image_url, name),
            credentials_ref=build_config.output_secret_ref,
        ),
        timeout=_timeout(build_config.timeout),
        annotations=annotations,
    )


def create_run_request(
    job_spec: JobSpec,
    generate_identity: bool = True,
    service_account: str | None = None,
    timeout: timedelta | None = None,
) -> RunRequest:
    """Create a buildrun request with the same name and namespace as its build."""
    return RunRequest(
        name=job_spec.name,
        namespace=job_spec.namespace,
        job_name=job_spec.name,
        generate_identity=generate_identity,
        service_account=None if generate_identity else service_account,
        timeout=timeout,
    )


def create_test_plan_job_spec(test_plan: TestPlan, step: TestPlanStep) -> JobSpec:
    """Create the JobSpec of a test plan step.

    Steps with a Dockerfile are Dockerfile driven builds, all other steps use
    buildpacks.
    """
    spec = step.build_spec
    name = f"{TEST_PLAN_STEP_PREFIX}-{step.name}"

    build_kind: BuildKind
    if spec.dockerfile:
        build_kind = KanikoBuild(dockerfile=spec.dockerfile)
    else:
        build_kind = BuildpacksBuild()

    return JobSpec(
        name=name,
        namespace=test_plan.namespace,
        strategy=spec.strategy.name,
        strategy_kind=spec.strategy.kind,
        build_kind=build_kind,
        source=SourceSpec(
            url=spec.source.url,
            revision=spec.source.revision,
            context_dir=spec.source.context_dir,
            credentials_ref=spec.source.credentials.name if spec.source.credentials else None,
        ),
        output=OutputSpec(
            image_url=resolve_output_image_url(spec.output.image, name),
            credentials_ref=spec.output.credentials.name if spec.output.credentials else None,
        ),
        timeout=spec.timeout,
        annotations=dict(step.build_annotations),
    )
