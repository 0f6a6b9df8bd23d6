# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from typing import Annotated

from pydantic import Field, field_validator

from buildload.common.config.base_config import BaseConfig
from buildload.common.config.cli_parameter import CLIParameter
from buildload.common.config.groups import Groups
from buildload.common.enums import BuildKindType, StrategyKind

# Substrings of strategy names that identify Dockerfile driven strategies
_DOCKERFILE_STRATEGY_HINTS = ("kaniko", "buildkit", "buildah")


class BuildConfig(BaseConfig):
    """Settings of the build that every worker submits.

    This is the template from which each worker derives its own uniquely
    named job and run.
    """

    cluster_build_strategy: Annotated[
        str,
        Field(description="Which cluster build strategy to test."),
        CLIParameter(
            name=("--cluster-build-strategy",),
            group=Groups.BUILD,
        ),
    ]

    strategy_kind: Annotated[
        StrategyKind,
        Field(description="Kind of the referenced build strategy."),
        CLIParameter(
            name=("--strategy-kind",),
            group=Groups.BUILD,
        ),
    ] = StrategyKind.CLUSTER_BUILD_STRATEGY

    build_kind: Annotated[
        BuildKindType | None,
        Field(
            description="Whether the strategy builds from a Dockerfile (kaniko) or uses "
            "buildpacks. Set this explicitly. If unset, a fallback heuristic matches the "
            "strategy name: names containing kaniko, buildkit, or buildah are treated as "
            "Dockerfile builds and everything else as buildpacks.",
        ),
        CLIParameter(
            name=("--build-kind",),
            group=Groups.BUILD,
        ),
    ] = None

    generate_service_account: Annotated[
        bool,
        Field(description="Let the platform generate a service account for each buildrun."),
        CLIParameter(
            name=("--generate-service-account",),
            group=Groups.BUILD,
        ),
    ] = True

    service_account_name: Annotated[
        str | None,
        Field(
            description="Existing service account to run the builds with. "
            "Only used when service account generation is disabled.",
        ),
        CLIParameter(
            name=("--service-account",),
            group=Groups.BUILD,
        ),
    ] = None

    timeout: Annotated[
        float | None,
        Field(gt=0, description="Maximum runtime of a buildrun in seconds."),
        CLIParameter(
            name=("--timeout",),
            group=Groups.BUILD,
        ),
    ] = None

    skip_delete: Annotated[
        bool,
        Field(
            description="Skip the clean-up of resources, which means no deletion of "
            "build, buildrun, and output image.",
        ),
        CLIParameter(
            name=("--skip-delete",),
            group=Groups.BUILD,
        ),
    ] = False

    source_url: Annotated[
        str,
        Field(description="Source URL to build from."),
        CLIParameter(
            name=("--source-url",),
            group=Groups.SOURCE,
        ),
    ]

    source_revision: Annotated[
        str | None,
        Field(description="Branch, tag, or commit to use. Defaults to the repository default."),
        CLIParameter(
            name=("--source-revision",),
            group=Groups.SOURCE,
        ),
    ] = None

    source_context_dir: Annotated[
        str | None,
        Field(description="Directory to use in the source repository."),
        CLIParameter(
            name=("--source-context",),
            group=Groups.SOURCE,
        ),
    ] = None

    source_secret_ref: Annotated[
        str | None,
        Field(description="Secret to access the source repository."),
        CLIParameter(
            name=("--source-secret",),
            group=Groups.SOURCE,
        ),
    ] = None

    dockerfile: Annotated[
        str,
        Field(description="Name of the Dockerfile for Dockerfile driven builds."),
        CLIParameter(
            name=("--dockerfile",),
            group=Groups.SOURCE,
        ),
    ] = "Dockerfile"

    skip_verify_repository: Annotated[
        bool,
        Field(description="Skip the verification of the source repository."),
        CLIParameter(
            name=("--skip-verify-repository",),
            group=Groups.SOURCE,
        ),
    ] = False

    output_image_url: Annotated[
        str,
        Field(
            description="Output image URL, for example docker.io/org, which results in "
            "docker.io/org/<buildrun-name>:latest for each buildrun.",
        ),
        CLIParameter(
            name=("--output-image-url",),
            group=Groups.OUTPUT,
        ),
    ]

    output_secret_ref: Annotated[
        str | None,
        Field(description="Secret with the access credentials for the output registry."),
        CLIParameter(
            name=("--output-secret-ref",),
            group=Groups.OUTPUT,
        ),
    ] = None

    @field_validator("cluster_build_strategy", "source_url", "output_image_url")
    @classmethod
    def _required_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Value must not be empty.")
        return v.strip()

    def resolve_build_kind(self) -> BuildKindType:
        """Return the configured build kind.

        The strategy name match only applies when --build-kind is unset.
        """
        if self.build_kind is not None:
            return self.build_kind

        strategy = self.cluster_build_strategy.lower()
        if any(hint in strategy for hint in _DOCKERFILE_STRATEGY_HINTS):
            return BuildKindType.KANIKO
        return BuildKindType.BUILDPACKS
