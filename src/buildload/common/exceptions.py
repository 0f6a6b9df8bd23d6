# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Exception hierarchy for build-load.

Failures that end a single lifecycle run (submission, registration, run
completion) propagate to the worker that owns the run. Lookup and cleanup
failures are never raised out of a lifecycle run; they are logged as warnings
using the exception types below so that the log output names the failure kind.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from buildload.orchestrator.models import ResultSet, RunDiagnostics


class BuildLoadError(Exception):
    """Base class for all build-load errors."""


class ControlPlaneError(BuildLoadError):
    """A call to the control plane failed for a reason other than NotFound."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class SubmissionFailed(BuildLoadError):
    """Creating the job or run (or clearing a same-named leftover) failed."""


class RegistrationRejected(BuildLoadError):
    """The platform refused to register the job."""

    def __init__(self, name: str, reason: str | None, message: str | None) -> None:
        super().__init__(
            f"build {name} failed to register. Reason={reason}. Message={message}"
        )
        self.name = name
        self.reason = reason
        self.message = message


class RegistrationTimeout(BuildLoadError):
    """The job did not report registration within the configured timeout."""


class RunFailed(BuildLoadError):
    """The run reached a failed terminal state.

    The diagnostics (status snapshot and captured container logs) are rendered
    as part of the message so that they reach the operator unchanged.
    """

    def __init__(
        self, name: str, reason: str | None, diagnostics: RunDiagnostics | None = None
    ) -> None:
        message = f"buildrun {name} failed: {reason or 'unknown reason'}"
        if diagnostics is not None and not diagnostics.is_empty():
            message = f"{message}\n\n{diagnostics.render()}"
        super().__init__(message)
        self.name = name
        self.reason = reason
        self.diagnostics = diagnostics


class RunTimeout(BuildLoadError):
    """The run did not complete within its timeout."""


class LookupFailed(BuildLoadError):
    """A sub-run or execution unit could not be looked up."""


class DeletionTimeout(BuildLoadError):
    """A deleted resource was still observable after the delete timeout."""


class CleanupFailed(BuildLoadError):
    """Deleting a resource created by a lifecycle run failed."""


class AggregationPrecondition(BuildLoadError, ValueError):
    """Aggregation was requested for an empty list of stage timings."""


class StrategyNotFound(BuildLoadError):
    """The configured build strategy does not exist on the platform."""

    def __init__(self, name: str, available: list[str]) -> None:
        if available:
            message = (
                f"failed to find ClusterBuildStrategy {name}, "
                f"available strategies are: {', '.join(available)}"
            )
        else:
            message = f"failed to find ClusterBuildStrategy {name}"
        super().__init__(message)
        self.name = name
        self.available = available


class InvalidOutputImageURL(BuildLoadError, ValueError):
    """The output image URL does not have a usable shape."""

    def __init__(self, url: str) -> None:
        super().__init__(
            f"failed to use output image URL {url}, it should look like "
            "server.com/org, or server.com/org/image, or server.com/org/image:tag"
        )
        self.url = url


class ParallelRunError(BuildLoadError):
    """One or more workers of a parallel run failed.

    Every individual worker error is kept in errors (in worker order).
    """

    def __init__(self, message: str, errors: list[BaseException]) -> None:
        if len(errors) == 1:
            super().__init__(f"{message}: {errors[0]}")
        else:
            details = "\n".join(f"- {error}" for error in errors)
            super().__init__(f"{message} ({len(errors)} errors):\n{details}")
        self.errors = errors


class SeriesAborted(BuildLoadError):
    """A level of a series failed; carries the result sets of the earlier levels."""

    def __init__(
        self,
        level: int,
        partial_results: list[ResultSet],
        cause: BaseException,
    ) -> None:
        super().__init__(
            f"series aborted at {level} parallel buildruns "
            f"after {len(partial_results)} completed level(s): {cause}"
        )
        self.level = level
        self.partial_results = partial_results
        self.cause = cause
