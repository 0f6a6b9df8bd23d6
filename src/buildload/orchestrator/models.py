# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Data models for buildrun load tests."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from buildload.common.enums import RunCondition, Stage, StrategyKind
from buildload.common.environment import Environment
from buildload.common.exceptions import ParallelRunError


class KanikoBuild(BaseModel):
    """Dockerfile driven build (kaniko, buildkit, buildah strategies)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["kaniko"] = "kaniko"
    dockerfile: str = "Dockerfile"


class BuildpacksBuild(BaseModel):
    """Buildpacks build, the strategy detects how to build the source."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["buildpacks"] = "buildpacks"


BuildKind = Annotated[KanikoBuild | BuildpacksBuild, Field(discriminator="kind")]


class SourceSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    revision: str | None = None
    context_dir: str | None = None
    credentials_ref: str | None = None


class OutputSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    image_url: str
    credentials_ref: str | None = None


class JobSpec(BaseModel):
    """Immutable description of one build.

    Attributes:
        name: Build name, unique per lifecycle run
        namespace: Namespace the build is created in
        strategy: Name of the referenced build strategy
        strategy_kind: Kind of the referenced build strategy
        build_kind: Dockerfile or buildpacks specific settings
        source: Where the source comes from
        output: Where the image goes to
        timeout: Maximum runtime of buildruns of this build
        annotations: Annotations to put on the build
    """

    model_config = ConfigDict(frozen=True)

    name: str
    namespace: str
    strategy: str
    strategy_kind: StrategyKind = StrategyKind.CLUSTER_BUILD_STRATEGY
    build_kind: BuildKind = Field(default_factory=BuildpacksBuild)
    source: SourceSpec
    output: OutputSpec
    timeout: timedelta | None = None
    annotations: dict[str, str] = Field(default_factory=dict)


class RunRequest(BaseModel):
    """Request to execute a job once.

    Attributes:
        name: Buildrun name
        namespace: Namespace of the buildrun, same as the job
        job_name: Name of the job to run
        generate_identity: Let the platform generate a service account
        service_account: Caller supplied service account, if not generated
        timeout: Maximum runtime of this buildrun, overrides the job timeout
    """

    model_config = ConfigDict(frozen=True)

    name: str
    namespace: str
    job_name: str
    generate_identity: bool = True
    service_account: str | None = None
    timeout: timedelta | None = None


@dataclass(frozen=True, slots=True)
class RunOptions:
    """Per-run switches of a lifecycle run.

    Attributes:
        generate_identity: Let the platform generate a service account
        skip_cleanup: Keep build, buildrun, and output image for inspection
    """

    generate_identity: bool = True
    skip_cleanup: bool = False


def _seconds(value: float) -> timedelta:
    return timedelta(seconds=value)


@dataclass(frozen=True, slots=True)
class LifecycleSettings:
    """Polling intervals and deadlines of a lifecycle run."""

    poll_interval: timedelta = field(
        default_factory=lambda: _seconds(Environment.LIFECYCLE.POLL_INTERVAL)
    )
    registration_timeout: timedelta = field(
        default_factory=lambda: _seconds(Environment.LIFECYCLE.REGISTRATION_TIMEOUT)
    )
    default_run_timeout: timedelta = field(
        default_factory=lambda: _seconds(Environment.LIFECYCLE.RUN_TIMEOUT)
    )
    delete_timeout: timedelta = field(
        default_factory=lambda: _seconds(Environment.LIFECYCLE.DELETE_TIMEOUT)
    )
    delete_poll_interval: timedelta = field(
        default_factory=lambda: _seconds(Environment.LIFECYCLE.DELETE_POLL_INTERVAL)
    )


class RunDiagnostics(BaseModel):
    """What an operator needs to understand a failed buildrun."""

    model_config = ConfigDict(frozen=True)

    status_snapshot: str = ""
    logs: list[str] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.status_snapshot and not self.logs

    def render(self) -> str:
        parts = []
        if self.status_snapshot:
            parts.append(f"BuildRun Status\n{self.status_snapshot.rstrip()}")
        if self.logs:
            parts.append("Pod container logs\n" + "\n".join(self.logs))
        return "\n\n".join(parts)


@dataclass(slots=True)
class RunRecord:
    """Timestamps observed during one lifecycle run.

    Owned and mutated only by the lifecycle run that created it.
    """

    job_created: datetime | None = None
    job_registered: datetime | None = None
    run_created: datetime | None = None
    run_started: datetime | None = None
    run_completed: datetime | None = None
    subrun_created: datetime | None = None
    subrun_started: datetime | None = None
    subrun_completed: datetime | None = None
    unit_created: datetime | None = None
    unit_started: datetime | None = None
    unit_finished: datetime | None = None
    condition: RunCondition = RunCondition.PENDING
    diagnostics: RunDiagnostics | None = None


def stage_key(stage: Stage | str) -> str:
    """Plain string key for a stage name."""
    return stage.value if isinstance(stage, Stage) else str(stage)


class StageTiming(BaseModel):
    """Named stage durations of one buildrun.

    Attributes:
        durations: Stage name to duration, in report order. Never negative.
        clamped: Stages whose raw duration was negative and got clamped to zero
    """

    model_config = ConfigDict(frozen=True)

    durations: dict[str, timedelta] = Field(default_factory=dict)
    clamped: list[str] = Field(default_factory=list)

    def __getitem__(self, stage: Stage | str) -> timedelta:
        return self.durations[stage_key(stage)]

    def __contains__(self, stage: object) -> bool:
        if not isinstance(stage, (Stage, str)):
            return False
        return stage_key(stage) in self.durations

    def __len__(self) -> int:
        return len(self.durations)

    def get(self, stage: Stage | str, default: timedelta | None = None) -> timedelta | None:
        return self.durations.get(stage_key(stage), default)

    def stages(self) -> list[str]:
        return list(self.durations)

    def items(self) -> list[tuple[str, timedelta]]:
        return list(self.durations.items())

    def __str__(self) -> str:
        return ", ".join(f"{stage}={value}" for stage, value in self.durations.items())


class ResultSet(BaseModel):
    """Statistics over the stage timings of one batch of buildruns.

    Minimum, maximum, mean, and median are computed independently per stage:
    the minimum timing may combine the fastest registration of one buildrun
    with the fastest pod completion of another. No single buildrun needs to
    have achieved any of these rows.
    """

    model_config = ConfigDict(frozen=True)

    entity_type: str
    count: int
    minimum: StageTiming
    maximum: StageTiming
    mean: StageTiming
    median: StageTiming

    @property
    def stages(self) -> list[str]:
        return self.minimum.stages()


@dataclass(slots=True)
class WorkerResult:
    """Outcome of one worker of a parallel run.

    Exactly one of timing and error is set.
    """

    index: int
    name: str
    timing: StageTiming | None = None
    error: BaseException | None = None

    @property
    def success(self) -> bool:
        return self.error is None and self.timing is not None


@dataclass(slots=True)
class ParallelRunResult:
    """Results of a parallel run, one slot per worker, in worker order."""

    results: list[WorkerResult]

    @property
    def parallel(self) -> int:
        return len(self.results)

    @property
    def timings(self) -> list[StageTiming]:
        return [r.timing for r in self.results if r.success]

    @property
    def errors(self) -> list[BaseException]:
        return [r.error for r in self.results if r.error is not None]

    @property
    def error(self) -> ParallelRunError | None:
        """ParallelRunError wrapping every worker error, or None if all succeeded."""
        errors = self.errors
        if not errors:
            return None
        return ParallelRunError("failed to execute buildruns", errors)

    def raise_for_errors(self) -> None:
        error = self.error
        if error is not None:
            raise error
